"""
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""

import pytest

from bitscript import EncodingError, InvalidOpcodeError, opcode
from bitscript.opcode import Opcode


class TestOpcode:
    def test_byte_table(self):
        for b in range(256):
            if opcode.FirstUnassigned <= b <= opcode.LastUnassigned:
                with pytest.raises(InvalidOpcodeError):
                    opcode.fromByte(b)
                continue
            op = opcode.fromByte(b)
            assert opcode.toByte(op) == b

        with pytest.raises(InvalidOpcodeError):
            opcode.fromByte(256)
        with pytest.raises(InvalidOpcodeError):
            opcode.fromByte(-1)

    def test_kinds(self):
        assert opcode.fromByte(0x00) == Opcode.atom(opcode.OP_0)
        assert opcode.fromByte(0x01) == Opcode.pushBytes(1)
        assert opcode.fromByte(0x4B) == Opcode.pushBytes(75)
        assert opcode.fromByte(0x4C).kind == opcode.PUSHDATA1
        assert opcode.fromByte(0x4D).payload == bytes(2)
        assert opcode.fromByte(0x4E).payload == bytes(4)
        assert opcode.fromByte(0xBA) == Opcode.atom(opcode.OP_CHECKSIGADD)
        assert opcode.fromByte(0xFF) == Opcode.atom(opcode.OP_INVALIDOPCODE)

        assert not Opcode.atom(opcode.OP_DUP).isPush()
        assert Opcode.pushBytes(20).isPush()
        assert Opcode.pushData2(1, 0).isPush()

    def test_push_bytes_range(self):
        with pytest.raises(EncodingError, match="must be positive"):
            opcode.toByte(Opcode.pushBytes(0))
        with pytest.raises(EncodingError):
            opcode.toByte(Opcode.pushBytes(76))
        assert opcode.toByte(Opcode.pushBytes(75)) == 75

    def test_push_data_descriptors(self):
        assert opcode.toByte(Opcode.pushData1(0x4C)) == opcode.OP_PUSHDATA1
        assert opcode.toByte(Opcode.pushData2(0, 1)) == opcode.OP_PUSHDATA2
        assert opcode.toByte(Opcode.pushData4(0, 0, 0, 1)) == opcode.OP_PUSHDATA4
        assert Opcode.pushData4(1, 2, 3, 4).payload == bytes([1, 2, 3, 4])
        with pytest.raises(EncodingError):
            Opcode.pushData1(256)

    def test_unencodable_atom(self):
        with pytest.raises(EncodingError):
            opcode.toByte(Opcode.atom(0xBB))
        with pytest.raises(EncodingError):
            opcode.toByte(Opcode.atom(opcode.OP_PUSHDATA1))

    def test_names(self):
        assert opcode.opcodeNames[0x00] == "OP_0"
        assert opcode.opcodeNames[0x51] == "OP_1"
        assert opcode.opcodeNames[0xB1] == "OP_CHECKLOCKTIMEVERIFY"
        assert opcode.opcodeNames[0xB2] == "OP_CHECKSEQUENCEVERIFY"

        # Every canonical name maps back to its own byte.
        for b, name in opcode.opcodeNames.items():
            assert opcode.opcodeValues[name] == b

        aliases = (
            ("OP_FALSE", "OP_0"),
            ("OP_TRUE", "OP_1"),
            ("OP_NOP2", "OP_CHECKLOCKTIMEVERIFY"),
            ("OP_NOP3", "OP_CHECKSEQUENCEVERIFY"),
        )
        for alias, canonical in aliases:
            assert opcode.fromName(alias) == opcode.fromName(canonical)
            assert opcode.displayName(opcode.fromName(alias)) == canonical

        assert opcode.fromName("DUP") == Opcode.atom(opcode.OP_DUP)
        with pytest.raises(EncodingError):
            opcode.fromName("OP_BOGUS")

    def test_display_name(self):
        assert opcode.displayName(Opcode.atom(opcode.OP_DUP)) == "OP_DUP"
        assert opcode.displayName(Opcode.pushBytes(20)) == "OP_PUSHBYTES20"
        assert opcode.displayName(Opcode.pushData1(0x4C)) == "OP_PUSHDATA1 4c"
        assert opcode.displayName(Opcode.pushData2(1, 0)) == "OP_PUSHDATA2 0100"
        assert opcode.displayName(Opcode.atom(0xFF)) == "OP_INVALIDOPCODE"
        assert repr(Opcode.atom(opcode.OP_HASH160)) == "Opcode(OP_HASH160)"

    def test_is_activated(self):
        for op in (opcode.OP_CAT, opcode.OP_MUL, opcode.OP_CHECKMULTISIG):
            assert not opcode.isActivated(Opcode.atom(op))
        for op in (opcode.OP_DUP, opcode.OP_CHECKSIG, opcode.OP_HASH160):
            assert opcode.isActivated(Opcode.atom(op))
        assert opcode.isActivated(Opcode.pushBytes(1))

    def test_equality(self):
        assert Opcode.pushBytes(3) != Opcode.atom(3)
        assert Opcode.pushData2(0, 1) != Opcode.pushData2(1, 0)
        assert len({Opcode.atom(opcode.OP_DUP), opcode.fromName("OP_DUP")}) == 1

    def test_immutable(self):
        op = Opcode.pushData2(0, 1)
        key = {op: "push"}
        for attr, v in (("kind", opcode.ATOM), ("value", 5), ("payload", b"\x01\x00")):
            with pytest.raises(AttributeError):
                setattr(op, attr, v)
        with pytest.raises(AttributeError):
            del op.payload
        assert op == Opcode.pushData2(0, 1)
        assert key[Opcode.pushData2(0, 1)] == "push"
