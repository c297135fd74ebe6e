"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Blocks: an 80-byte header followed by a CompactSize count of transactions.
"""

from bitscript import DecodeError
from bitscript.crypto import crypto
from bitscript.util.encode import ByteArray
from bitscript.wire import wire
from bitscript.wire.msgtx import MsgTx


# chainhash.HashSize
HASH_SIZE = 32

# Version 4 bytes + PrevBlock and MerkleRoot hashes + Timestamp 4 bytes +
# Bits 4 bytes + Nonce 4 bytes.
MaxBlockHeaderPayload = 16 + (HASH_SIZE * 2)


class BlockHeader:
    """
    BlockHeader holds the proof-of-work fields of a block.
    """

    def __init__(
        self,
        version=1,
        prevBlock=None,
        merkleRoot=None,
        timestamp=0,
        bits=0,
        nonce=0,
    ):
        # version of the block.  This is not the same as the protocol version.
        self.version = version  # int32

        # hash of the previous block in the block chain.
        self.prevBlock = (
            ByteArray(prevBlock) if prevBlock else ByteArray(b"", length=HASH_SIZE)
        )

        # merkle tree reference to hash of all transactions for the block.
        self.merkleRoot = (
            ByteArray(merkleRoot) if merkleRoot else ByteArray(b"", length=HASH_SIZE)
        )

        # time the block was created, as a Unix timestamp.
        self.timestamp = timestamp  # uint32

        # difficulty target for the block.
        self.bits = bits  # uint32

        self.nonce = nonce  # uint32

    @staticmethod
    def decode(b):
        """
        Pop a block header off the front of b.

        Args:
            b (ByteArray): the bytes to decode.

        Returns:
            BlockHeader: The header.
        """
        uint32 = 4
        return BlockHeader(
            version=b.pop(uint32).unLittle().int(),
            prevBlock=b.pop(HASH_SIZE),
            merkleRoot=b.pop(HASH_SIZE),
            timestamp=b.pop(uint32).unLittle().int(),
            bits=b.pop(uint32).unLittle().int(),
            nonce=b.pop(uint32).unLittle().int(),
        )

    @staticmethod
    def deserialize(b):
        """
        Deserialize an 80-byte header.

        Args:
            b (bytes-like): The serialized header.

        Returns:
            BlockHeader: The header.
        """
        b = ByteArray(b)
        if len(b) != MaxBlockHeaderPayload:
            raise DecodeError(
                f"block header must be {MaxBlockHeaderPayload} bytes, got {len(b)}"
            )
        return BlockHeader.decode(b)

    def serialize(self):
        """
        Serialize the BlockHeader.

        Returns:
            ByteArray: The serialized BlockHeader.
        """
        b = ByteArray(self.version, length=4).littleEndian()
        b += self.prevBlock
        b += self.merkleRoot
        b += ByteArray(self.timestamp, length=4).littleEndian()
        b += ByteArray(self.bits, length=4).littleEndian()
        return b + ByteArray(self.nonce, length=4).littleEndian()

    def hash(self):
        """
        The double-SHA256 of the serialized header.

        Returns:
            ByteArray: The block hash, internal byte order.
        """
        return crypto.doubleHashH(self.serialize())

    def id(self):
        """
        The block hash as it is usually displayed, reversed hex.
        """
        return self.hash().rhex()

    def __eq__(self, other):
        return isinstance(other, BlockHeader) and self.serialize() == other.serialize()


class MsgBlock:
    """
    MsgBlock is a block header and its transactions.
    """

    def __init__(self, header=None, transactions=None):
        self.header = header if header else BlockHeader()
        self.transactions = transactions or []

    def addTransaction(self, tx):
        self.transactions.append(tx)

    @staticmethod
    def deserialize(b):
        """
        Deserialize a block. Trailing bytes are an error.

        Args:
            b (bytes-like): The serialized block.

        Returns:
            MsgBlock: The block.
        """
        b = ByteArray(b)
        block = MsgBlock(BlockHeader.decode(b))
        count = wire.readVarInt(b)
        if count > len(b):
            raise DecodeError(f"too many transactions for the remaining bytes [count {count}]")
        for _ in range(count):
            block.addTransaction(MsgTx.decode(b, withWitness=True))
        if len(b) != 0:
            raise DecodeError(f"{len(b)} unexpected bytes after the block")
        return block

    def serialize(self):
        """
        Serialize the block.

        Returns:
            ByteArray: The serialized block.
        """
        b = self.header.serialize()
        b += wire.writeVarInt(len(self.transactions))
        for tx in self.transactions:
            b += tx.serialize()
        return b

    def __eq__(self, other):
        return (
            isinstance(other, MsgBlock)
            and self.header == other.header
            and self.transactions == other.transactions
        )
