"""
Copyright (c) 2019-2020, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Transactions. These are plain containers of fixed-width fields, scripts and
CompactSize counts. Scripts are kept as the raw bytes found on the wire and
decoded on demand, so a transaction with a script this package can't parse
still round-trips.
"""

from typing import List, Optional

from bitscript import DecodeError
from bitscript import config
from bitscript.crypto import crypto
from bitscript.txscript import Script
from bitscript.util import helpers
from bitscript.util.encode import ByteArray
from bitscript.wire import wire


# chainhash.HashSize
HASH_SIZE = 32

# TxVersion is the current latest supported transaction version.
TxVersion = 1

# MaxTxInSequenceNum is the maximum sequence number the sequence field
# of a transaction input can be.
MaxTxInSequenceNum = 0xFFFFFFFF

# minTxInPayload is the minimum payload size for a transaction input.
# PreviousOutPoint.Hash + PreviousOutPoint.Index 4 bytes + CompactSize for
# SignatureScript length 1 byte + Sequence 4 bytes.
minTxInPayload = 9 + HASH_SIZE

# MinTxOutPayload is the minimum payload size for a transaction output.
# Value 8 bytes + CompactSize for PkScript length 1 byte.
MinTxOutPayload = 9

# TxFlagMarker is the first byte of the FLAG field in a segregated witness
# transaction. It sits where the input count would be, and a legacy
# transaction can't have zero inputs, so decoders can tell the two apart.
#
#   ┌─────────┬────────────────────┬─────────────┬─────┐
#   │ VERSION │ FLAG               │ TX-IN-COUNT │ ... │
#   │ 4 bytes │ 2 bytes (optional) │ CompactSize │     │
#   └─────────┴────────────────────┴─────────────┴─────┘
TxFlagMarker = 0x00

# WitnessFlag is the second byte of the FLAG field.
WitnessFlag = 0x01

# maxWitnessItemSize is the maximum allowed size for an item within an input's
# witness data. A witness item can fill a whole block, 4,000,000 weight units.
maxWitnessItemSize = 4_000_000

log = helpers.getLogger("MSGTX")


class OutPoint:
    """
    OutPoint is a reference to a previous transaction output.
    """

    def __init__(self, txHash: Optional[ByteArray], idx: int):
        self.hash = ByteArray(txHash) if txHash else ByteArray(b"", length=HASH_SIZE)
        self.index = idx

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, OutPoint)
            and self.hash == other.hash
            and self.index == other.index
        )

    def txid(self) -> str:
        """The referenced transaction's ID, the reversed hash in hex."""
        return self.hash.rhex()


class TxIn:
    """
    TxIn is a transaction input.
    """

    def __init__(
        self,
        previousOutPoint: OutPoint,
        sequence: int = MaxTxInSequenceNum,
        signatureScript: Optional[ByteArray] = None,
        witness: Optional[List[ByteArray]] = None,
    ):
        self.previousOutPoint = previousOutPoint
        self.sequence = sequence  # uint32
        self.signatureScript = (
            ByteArray(signatureScript) if signatureScript else ByteArray(b"")
        )
        self.witness = [ByteArray(w) for w in witness] if witness else []

    def __eq__(self, ti) -> bool:
        return (
            isinstance(ti, TxIn)
            and self.previousOutPoint == ti.previousOutPoint
            and self.sequence == ti.sequence
            and self.signatureScript == ti.signatureScript
            and self.witness == ti.witness
        )

    def sigScript(self) -> Script:
        """The decoded signature script."""
        return Script.deserialize(self.signatureScript)

    def serializeSize(self) -> int:
        """
        The number of bytes it would take to serialize the transaction input,
        without its witness.
        """
        # Outpoint Hash 32 bytes + Outpoint Index 4 bytes + Sequence 4 bytes +
        # CompactSize for the length of SignatureScript + SignatureScript bytes.
        n = len(self.signatureScript)
        return 40 + wire.varIntSerializeSize(n) + n

    def witnessSerializeSize(self) -> int:
        """
        The number of bytes it would take to serialize the input's witness.
        """
        n = wire.varIntSerializeSize(len(self.witness))
        for witItem in self.witness:
            n += wire.varIntSerializeSize(len(witItem)) + len(witItem)
        return n


class TxOut:
    """
    TxOut is a transaction output.
    """

    def __init__(self, value: int = 0, pkScript: Optional[ByteArray] = None):
        self.value = value
        self.pkScript = ByteArray(pkScript) if pkScript else ByteArray(b"")

    def __eq__(self, to) -> bool:
        return (
            isinstance(to, TxOut)
            and self.value == to.value
            and self.pkScript == to.pkScript
        )

    def script(self) -> Script:
        """The decoded locking script."""
        return Script.deserialize(self.pkScript)

    def serializeSize(self) -> int:
        """
        The number of bytes it would take to serialize the transaction output.
        """
        n = len(self.pkScript)
        return 8 + wire.varIntSerializeSize(n) + n


class MsgTx:
    """
    MsgTx is a transaction. Use addTxIn and addTxOut to build up the lists of
    inputs and outputs.
    """

    def __init__(
        self,
        version: int = TxVersion,
        txIn: Optional[List[TxIn]] = None,
        txOut: Optional[List[TxOut]] = None,
        lockTime: int = 0,
    ):
        self.version = version
        self.txIn = txIn or []
        self.txOut = txOut or []
        self.lockTime = lockTime

    def __eq__(self, tx) -> bool:
        return (
            isinstance(tx, MsgTx)
            and self.version == tx.version
            and self.txIn == tx.txIn
            and self.txOut == tx.txOut
            and self.lockTime == tx.lockTime
        )

    def addTxIn(self, ti: TxIn):
        """addTxIn adds a transaction input."""
        self.txIn.append(ti)

    def addTxOut(self, to: TxOut):
        """addTxOut adds a transaction output."""
        self.txOut.append(to)

    def hasWitness(self) -> bool:
        """
        hasWitness returns False if none of the inputs within the transaction
        contain witness data, True otherwise.
        """
        return any(len(txIn.witness) != 0 for txIn in self.txIn)

    def hash(self) -> ByteArray:
        """The double-SHA256 of the serialization without witness data."""
        return crypto.doubleHashH(self.serializeNoWitness())

    def txid(self) -> str:
        """The transaction ID, the reversed hash in hex."""
        return self.hash().rhex()

    def witnessHash(self) -> ByteArray:
        """
        The double-SHA256 of the full serialization. Equal to hash for
        transactions without witness data.
        """
        return crypto.doubleHashH(self.serialize())

    @staticmethod
    def decode(b: ByteArray, withWitness: bool, maxScriptSize: Optional[int] = None) -> "MsgTx":
        """
        decode pops a transaction off the front of b.

        Args:
            b (ByteArray): The serialized transaction, possibly followed by
                more data, e.g. the next transaction of a block.
            withWitness (bool): Whether to recognize the witness flag.
            maxScriptSize (int): An additional limit on scripts and witness
                items. Defaults to the configured maxScriptSize. Without one,
                scripts are bounded by wire.MaxMessagePayload and witness
                items by maxWitnessItemSize.

        Returns:
            MsgTx: The transaction.
        """
        if maxScriptSize is None:
            maxScriptSize = config.load().maxScriptSize
        scriptLimit = wire.MaxMessagePayload
        witnessLimit = maxWitnessItemSize
        if maxScriptSize is not None:
            scriptLimit = min(scriptLimit, maxScriptSize)
            witnessLimit = min(witnessLimit, maxScriptSize)

        tx = MsgTx(version=b.pop(4).unLittle().int())

        count = wire.readVarInt(b)

        # A count of zero means the value is a TxFlagMarker, and hence
        # indicates the presence of a flag.
        flag = 0
        if count == TxFlagMarker and withWitness:
            flag = b.pop(1)[0]
            if flag != WitnessFlag:
                raise DecodeError(f"witness tx but flag byte is {flag}")
            count = wire.readVarInt(b)

        # Every input takes at least minTxInPayload bytes, so a larger count
        # can't be honest.
        if count * minTxInPayload > len(b):
            raise DecodeError(f"too many inputs for the remaining bytes [count {count}]")

        for _ in range(count):
            tx.addTxIn(readTxIn(b, scriptLimit))

        count = wire.readVarInt(b)
        if count * MinTxOutPayload > len(b):
            raise DecodeError(f"too many outputs for the remaining bytes [count {count}]")

        for _ in range(count):
            tx.addTxOut(readTxOut(b, scriptLimit))

        if flag != 0:
            for txIn in tx.txIn:
                # The witness is a stack of items, a CompactSize count
                # followed by CompactSize-prefixed items.
                witCount = wire.readVarInt(b)
                if witCount > len(b):
                    raise DecodeError(f"too many witness items [count {witCount}]")
                for _ in range(witCount):
                    txIn.witness.append(
                        wire.readVarBytes(b, witnessLimit, "script witness item")
                    )

        tx.lockTime = b.pop(4).unLittle().int()
        return tx

    @staticmethod
    def deserialize(b) -> "MsgTx":
        """
        Deserialize a transaction, recognizing witness data. Trailing bytes are
        an error.
        """
        b = ByteArray(b)
        tx = MsgTx.decode(b, withWitness=True)
        if len(b) != 0:
            raise DecodeError(f"{len(b)} unexpected bytes after the transaction")
        return tx

    def encode(self, withWitness: bool) -> ByteArray:
        """
        Serialize the transaction. The witness layout is only used when asked
        for and when there is witness data.
        """
        b = ByteArray(self.version, length=4).littleEndian()

        doWitness = withWitness and self.hasWitness()
        if doWitness:
            b += bytearray([TxFlagMarker, WitnessFlag])

        b += wire.writeVarInt(len(self.txIn))
        for ti in self.txIn:
            b += writeTxIn(ti)

        b += wire.writeVarInt(len(self.txOut))
        for to in self.txOut:
            b += writeTxOut(to)

        if doWitness:
            for ti in self.txIn:
                b += writeTxWitness(ti.witness)

        return b + ByteArray(self.lockTime, length=4).littleEndian()

    def serialize(self) -> ByteArray:
        """serialize encodes the transaction, witness data included."""
        return self.encode(withWitness=True)

    def serializeNoWitness(self) -> ByteArray:
        """serializeNoWitness encodes the transaction in the legacy format."""
        return self.encode(withWitness=False)

    def baseSize(self) -> int:
        """
        baseSize returns the serialized size of the transaction without
        accounting for any witness data.
        """
        # Version 4 bytes + LockTime 4 bytes + CompactSize counts of inputs
        # and outputs.
        n = 8 + wire.varIntSerializeSize(len(self.txIn))
        n += wire.varIntSerializeSize(len(self.txOut))
        n += sum(txIn.serializeSize() for txIn in self.txIn)
        n += sum(txOut.serializeSize() for txOut in self.txOut)
        return n

    def serializeSize(self) -> int:
        """
        serializeSize returns the number of bytes it would take to serialize
        the transaction.
        """
        n = self.baseSize()
        if self.hasWitness():
            # The marker and flag fields take up two additional bytes.
            n += 2
            n += sum(txIn.witnessSerializeSize() for txIn in self.txIn)
        return n


def readOutPoint(b: ByteArray) -> OutPoint:
    return OutPoint(
        txHash=b.pop(HASH_SIZE),
        idx=b.pop(4).unLittle().int(),
    )


def writeOutPoint(op: OutPoint) -> ByteArray:
    return op.hash + ByteArray(op.index, length=4).littleEndian()


def readTxIn(b: ByteArray, maxScriptSize: int) -> TxIn:
    """
    readTxIn pops a transaction input off the front of b.
    """
    return TxIn(
        previousOutPoint=readOutPoint(b),
        signatureScript=wire.readVarBytes(
            b, maxScriptSize, "transaction input signature script"
        ),
        sequence=b.pop(4).unLittle().int(),
    )


def writeTxIn(ti: TxIn) -> ByteArray:
    b = writeOutPoint(ti.previousOutPoint)
    b += wire.writeVarBytes(ti.signatureScript)
    return b + ByteArray(ti.sequence, length=4).littleEndian()


def readTxOut(b: ByteArray, maxScriptSize: int) -> TxOut:
    """
    readTxOut pops a transaction output off the front of b.
    """
    return TxOut(
        value=b.pop(8).unLittle().int(),
        pkScript=wire.readVarBytes(
            b, maxScriptSize, "transaction output public key script"
        ),
    )


def writeTxOut(to: TxOut) -> ByteArray:
    b = ByteArray(to.value, length=8).littleEndian()
    return b + wire.writeVarBytes(to.pkScript)


def writeTxWitness(wit: List[ByteArray]) -> ByteArray:
    b = wire.writeVarInt(len(wit))
    for item in wit:
        b += wire.writeVarBytes(item)
    return b
