"""
Copyright (c) 2019-2020, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""

import pytest

from bitscript import DecodeError
from bitscript.util.encode import ByteArray
from bitscript.wire import msgblock, msgtx


GENESIS_TX = (
    "01000000010000000000000000000000000000000000000000000000000000000000000000"
    "ffffffff4d04ffff001d0104455468652054696d65732030332f4a616e2f32303039204368"
    "616e63656c6c6f72206f6e206272696e6b206f66207365636f6e64206261696c6f75742066"
    "6f722062616e6b73ffffffff0100f2052a01000000434104678afdb0fe5548271967f1a671"
    "30b7105cd6a828e03909a67962e0ea1f61deb649f6bc3f4cef38c4f35504e51ec112de5c38"
    "4df7ba0b8d578a4c702b6bf11d5fac00000000"
)

GENESIS_TXID = "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"

GENESIS_HEADER = (
    "0100000000000000000000000000000000000000000000000000000000000000000000003b"
    "a3edfd7a7b12b27ac72c3e67768f617fc81bc3888a51323a9fb8aa4b1e5e4a29ab5f49ffff"
    "001d1dac2b7c"
)

GENESIS_HASH = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"


class TestBlockHeader:
    def test_genesis(self, prepareLogger):
        header = msgblock.BlockHeader.deserialize(GENESIS_HEADER)
        assert header.version == 1
        assert header.prevBlock == ByteArray(b"", length=32)
        assert header.merkleRoot.rhex() == GENESIS_TXID
        assert header.timestamp == 1231006505
        assert header.bits == 0x1D00FFFF
        assert header.nonce == 2083236893
        assert header.serialize().hex() == GENESIS_HEADER
        assert header.id() == GENESIS_HASH
        assert header == msgblock.BlockHeader.deserialize(header.serialize())

    def test_length(self):
        with pytest.raises(DecodeError):
            msgblock.BlockHeader.deserialize(GENESIS_HEADER[:-2])
        with pytest.raises(DecodeError):
            msgblock.BlockHeader.deserialize(GENESIS_HEADER + "00")


class TestMsgBlock:
    def test_genesis(self, prepareLogger):
        raw = GENESIS_HEADER + "01" + GENESIS_TX
        block = msgblock.MsgBlock.deserialize(raw)
        assert len(block.transactions) == 1
        assert block.transactions[0].txid() == GENESIS_TXID
        assert block.header.id() == GENESIS_HASH
        assert block.serialize().hex() == raw

        built = msgblock.MsgBlock(block.header)
        built.addTransaction(msgtx.MsgTx.deserialize(GENESIS_TX))
        assert built == block

    def test_decode_errors(self):
        with pytest.raises(DecodeError, match="unexpected bytes"):
            msgblock.MsgBlock.deserialize(GENESIS_HEADER + "01" + GENESIS_TX + "00")
        with pytest.raises(DecodeError, match="too many transactions"):
            msgblock.MsgBlock.deserialize(GENESIS_HEADER + "fe00000001")
        with pytest.raises(DecodeError):
            msgblock.MsgBlock.deserialize(GENESIS_HEADER[:20])

    def test_empty_block(self):
        block = msgblock.MsgBlock()
        b = block.serialize()
        assert len(b) == 81
        assert msgblock.MsgBlock.deserialize(b) == block
