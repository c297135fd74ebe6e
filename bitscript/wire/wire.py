"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Integer limits and the CompactSize variable-width integer codec.

A CompactSize is 1 byte for values up to 0xFC, otherwise a marker byte
followed by the value in little-endian order:

    0xFD + 2 bytes   value <= MaxUint16
    0xFE + 4 bytes   value <= MaxUint32
    0xFF + 8 bytes   value <= MaxUint64
"""

from bitscript import DecodeError, EncodingError
from bitscript.util import helpers
from bitscript.util.encode import ByteArray


# fmt: off
MaxUint8  = (1 << 8) - 1
MaxUint16 = (1 << 16) - 1
MaxUint32 = (1 << 32) - 1
MaxUint64 = (1 << 64) - 1
# fmt: on

# MaxMessagePayload is the maximum bytes a message can be regardless of other
# individual limits imposed by messages themselves.
MaxMessagePayload = 1024 * 1024 * 32  # 32MB

# Marker bytes that announce a 2, 4 or 8 byte payload.
VarIntMarker16 = 0xFD
VarIntMarker32 = 0xFE
VarIntMarker64 = 0xFF

# Total encoded length -> (marker, payload width).
varIntWidths = {
    3: (VarIntMarker16, 2),
    5: (VarIntMarker32, 4),
    9: (VarIntMarker64, 8),
}

# Marker -> payload width, for streaming reads.
varIntPayloads = {marker: width for marker, width in varIntWidths.values()}

log = helpers.getLogger("WIRE")


def varIntSerializeSize(i):
    """
    The number of bytes writeVarInt uses for i.

    Args:
        i (int): the value.

    Returns:
        int: 1, 3, 5 or 9.
    """
    if i < VarIntMarker16:
        return 1

    # Discriminant 1 byte plus 2 bytes for the uint16.
    if i <= MaxUint16:
        return 3

    # Discriminant 1 byte plus 4 bytes for the uint32.
    if i <= MaxUint32:
        return 5

    # Discriminant 1 byte plus 8 bytes for the uint64.
    return 9


def writeVarInt(val):
    """
    writeVarInt serializes val using the smallest CompactSize width that can
    hold it.

    Args:
        val (int): the value to be serialized.

    Returns:
        ByteArray: the encoded value.
    """
    if val < 0 or val > MaxUint64:
        raise EncodingError(f"writeVarInt: {val} is not a uint64")

    size = varIntSerializeSize(val)
    if size == 1:
        return ByteArray(val, length=1)

    marker, width = varIntWidths[size]
    return ByteArray(marker) + ByteArray(val, length=width).littleEndian()


def decodeCompactSize(b):
    """
    Decode a complete CompactSize encoding. The total length selects the
    width, and the leading byte must be the marker for that width. Encodings
    that could have used fewer bytes are accepted.

    Args:
        b (bytes-like): the whole encoding, 1, 3, 5 or 9 bytes long.

    Returns:
        int: the decoded value.
    """
    b = ByteArray(b)
    if len(b) == 1:
        return b[0]
    if len(b) not in varIntWidths:
        raise DecodeError(f"unsupported number of bytes: {len(b)}")
    marker, _ = varIntWidths[len(b)]
    if b[0] != marker:
        raise DecodeError(
            "encoding mismatch: %d-byte CompactSize must start with 0x%02x, got 0x%02x"
            % (len(b), marker, b[0])
        )
    return b[1:].unLittle().int()


def readVarInt(b):
    """
    readVarInt pops a CompactSize off the front of b and returns it as an int.

    Args:
        b (ByteArray): the encoded integer, followed by anything.

    Returns:
        int: the decoded value.
    """
    discriminant = b.pop(1)[0]
    if discriminant not in varIntPayloads:
        return discriminant
    return b.pop(varIntPayloads[discriminant]).unLittle().int()


def writeVarBytes(inBytes):
    """
    writeVarBytes serializes a variable length byte array as a CompactSize
    containing the number of bytes, followed by the bytes themselves.
    """
    return writeVarInt(len(inBytes)) + inBytes


def readVarBytes(b, maxAllowed, fieldName):
    """
    readVarBytes pops a CompactSize-prefixed byte array off the front of b. The
    declared length is checked against maxAllowed before anything is read, so a
    malformed length cannot force a large allocation.

    Args:
        b (ByteArray): the encoded bytes.
        maxAllowed (int): the largest acceptable length.
        fieldName (str): used in the error message.

    Returns:
        ByteArray: the bytes.
    """
    count = readVarInt(b)
    if count > maxAllowed:
        log.debug(f"rejecting {fieldName} of {count} bytes")
        raise DecodeError(
            f"{fieldName} is larger than the max allowed size "
            f"[count {count}, max {maxAllowed}]"
        )
    return b.pop(count)
