"""
Copyright (c) 2020, Brian Stafford
Copyright (c) 2020, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

A byte buffer that accepts hex strings, bytes and integers interchangeably
and supports consuming bytes from the front, which is how the wire decoders
walk a serialized structure.
"""

from bitscript import BitscriptError, DecodeError


def intToBytes(i):
    """
    Encodes a non-negative integer to the shortest big-endian byte string.

    Args:
        i (int): The integer.

    Returns:
        bytearray: The encoded integer. Zero encodes to an empty bytearray.
    """
    return bytearray(i.to_bytes((i.bit_length() + 7) // 8, byteorder="big"))


def intFromBytes(b):
    """
    Decodes a big-endian unsigned integer.

    Args:
        b (bytes-like): The encoded integer.

    Returns:
        int: The decoded integer.
    """
    return int.from_bytes(b, "big")


def decodeBA(b, copy=False):
    """
    Decode into a bytearray.

    Args:
        b (str, bytes-like, ByteArray, int, list(int)): The value to decode to
            a bytearray. Strings are interpreted as hexadecimal. Integers are
            minimally encoded to an unsigned big-endian integer.
        copy (bool): For bytearray and ByteArray input, whether to copy the
            underlying memory.

    Returns:
        bytearray: The decoded bytes.
    """
    if isinstance(b, ByteArray):
        return bytearray(b.b) if copy else b.b
    if isinstance(b, bytearray):
        return bytearray(b) if copy else b
    if isinstance(b, (bytes, memoryview)):
        return bytearray(b)
    if isinstance(b, int):
        if b < 0:
            raise BitscriptError(f"decodeBA: negative integer {b}")
        return intToBytes(b) if b else bytearray([0])
    if isinstance(b, str):
        return bytearray.fromhex(b)
    if hasattr(b, "__iter__"):
        return bytearray(b)
    raise TypeError("decodeBA: unknown type %s" % type(b))


class ByteArray:
    """
    ByteArray is a bytearray manager. An integer argument to the constructor
    results in the shortest possible big-endian representation of the
    integer, where for bytearray an int argument results in a zero-valued
    bytearray of said length. Use the `length` keyword to left-pad the value
    with zeros to a fixed width.
    """

    def __init__(self, b=b"", copy=True, length=None):
        """
        Set copy to False if you want to share the memory with another
        bytearray/ByteArray. If the type of b is not bytearray or ByteArray,
        copy has no effect.
        """
        if length is None:
            self.b = decodeBA(b, copy=copy)
            return
        v = decodeBA(b, copy=True)
        if isinstance(b, int) and b == 0:
            v = bytearray()
        if len(v) > length:
            raise BitscriptError(
                "value of %d bytes does not fit in %d bytes" % (len(v), length)
            )
        self.b = bytearray(length - len(v)) + v

    def __eq__(self, a):
        try:
            return self.b == decodeBA(a)
        except Exception:
            return False

    def __ne__(self, a):
        return not self.__eq__(a)

    def __lt__(self, a):
        return self.b < decodeBA(a)

    def __repr__(self):
        return "ByteArray(" + self.hex() + ")"

    def __len__(self):
        return len(self.b)

    def __add__(self, a):
        return ByteArray(self.b + decodeBA(a), copy=False)

    def __iadd__(self, a):
        """append the bytes and return a new ByteArray"""
        return self.__add__(a)

    def __getitem__(self, k):
        if isinstance(k, slice):
            return ByteArray(self.b[k.start : k.stop : k.step], copy=False)
        return self.b[k]

    def __iter__(self):
        return iter(self.b)

    def __reversed__(self):
        return ByteArray(bytearray(reversed(self.b)), copy=False)

    def __hash__(self):
        """Enables ByteArray to be a dict key."""
        return hash(bytes(self.b))

    def __bytes__(self):
        return bytes(self.b)

    def hex(self):
        """
        A hexadecimal string representation of the bytes.

        Returns:
            str: The hex bytes.
        """
        return self.b.hex()

    def rhex(self):
        """
        A reversed hexadecimal string representation of the bytes. Hashes are
        displayed this way.

        Returns:
            str: The hex bytes.
        """
        return self.__reversed__().hex()

    def int(self):
        """The bytes as a big-endian integer."""
        return intFromBytes(self.b)

    def bytes(self):
        """The bytes as Python `bytes`."""
        return bytes(self.b)

    def unLittle(self):
        """A copy of the ByteArray, reversed."""
        return self.littleEndian()

    def littleEndian(self):
        """A copy of the ByteArray, reversed."""
        return self.__reversed__()

    def copy(self):
        """A copy of the ByteArray."""
        return ByteArray(self.b)

    def pop(self, n):
        """
        Remove n bytes from the beginning of the ByteArray, returning the bytes.

        Raises:
            DecodeError: fewer than n bytes remain.
        """
        if n > len(self.b):
            raise DecodeError(
                "cannot pop %d bytes, only %d remaining" % (n, len(self.b))
            )
        b = self[:n]
        self.b = self.b[n:]
        return b
