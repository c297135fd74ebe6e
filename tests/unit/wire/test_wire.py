"""
Copyright (c) 2019-2020, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""

import pytest

from bitscript import DecodeError, EncodingError
from bitscript.util.encode import ByteArray
from bitscript.wire import wire


class TestWire:
    # fmt: off
    data = (
        (0,                  [0x00]),
        (0xFC,               [0xFC]),
        (0xFD,               [0xFD, 0xFD, 0x0]),
        (wire.MaxUint16,     [0xFD, 0xFF, 0xFF]),
        (wire.MaxUint16 + 1, [0xFE, 0x0,  0x0,  0x1,  0x0]),
        (wire.MaxUint32,     [0xFE, 0xFF, 0xFF, 0xFF, 0xFF]),
        (wire.MaxUint32 + 1, [0xFF, 0x0,  0x0,  0x0,  0x0,  0x1,  0x0,  0x0,  0x0]),
        (wire.MaxUint64,     [0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF]),
    )
    # fmt: on

    def test_write_var_int(self, prepareLogger):
        for val, bytes_ in self.data:
            from_val = wire.writeVarInt(val)
            from_bytes = ByteArray(bytes_)
            assert from_val == from_bytes
            assert wire.varIntSerializeSize(val) == len(bytes_)
            assert wire.decodeCompactSize(from_bytes) == val
            assert wire.readVarInt(from_bytes.copy()) == val
        with pytest.raises(EncodingError):
            wire.writeVarInt(wire.MaxUint64 + 1)
        with pytest.raises(EncodingError):
            wire.writeVarInt(-1)

    def test_decode_compact_size(self, prepareLogger):
        # A single byte is its own value, even the marker values.
        assert wire.decodeCompactSize(ByteArray([0xFD])) == 0xFD
        assert wire.decodeCompactSize(bytes([0xFF])) == 0xFF

        # Non-minimal encodings are accepted.
        assert wire.decodeCompactSize(ByteArray([0xFD, 0x01, 0x00])) == 1
        assert wire.decodeCompactSize(ByteArray([0xFE, 0xFC, 0, 0, 0])) == 0xFC

        for b in ([], [0xFD, 0x01], [0xFE, 0, 0, 0], [0xFF] * 10, [0] * 7):
            with pytest.raises(DecodeError, match="unsupported number of bytes"):
                wire.decodeCompactSize(ByteArray(b))

        for b in ([0xFE, 0x01, 0x00], [0xFD, 0, 0, 0, 0], [0x00] * 9):
            with pytest.raises(DecodeError, match="encoding mismatch"):
                wire.decodeCompactSize(ByteArray(b))

    def test_read_var_int(self, prepareLogger):
        b = ByteArray([0xFD, 0x34, 0x12, 0xAB])
        assert wire.readVarInt(b) == 0x1234
        assert b == [0xAB]

        with pytest.raises(DecodeError):
            wire.readVarInt(ByteArray([0xFE, 0xFF, 0xFF]))
        with pytest.raises(DecodeError):
            wire.readVarInt(ByteArray(b""))

    def test_var_bytes(self, prepareLogger, randBytes):
        data = ByteArray(randBytes(low=300, high=400))
        b = wire.writeVarBytes(data)
        assert b[:3] == wire.writeVarInt(len(data))
        assert wire.readVarBytes(b, 1000, "test") == data
        assert len(b) == 0

        b = wire.writeVarBytes(data)
        with pytest.raises(DecodeError, match="test field"):
            wire.readVarBytes(b, 10, "test field")

        with pytest.raises(DecodeError):
            wire.readVarBytes(ByteArray([0x05, 0x01]), 10, "short")
