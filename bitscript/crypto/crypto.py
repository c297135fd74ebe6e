"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Hash functions used by the script engine and the wire containers.
"""

import hashlib

from bitscript.util.encode import ByteArray


SHA256_SIZE = 32
RIPEMD160_SIZE = 20


def sha256(b):
    """
    A SHA256 hash of the input.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 32-byte hash.
    """
    return ByteArray(hashlib.sha256(bytes(b)).digest())


def ripemd160(b):
    """
    A RIPEMD160 hash of the input.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 20-byte hash.
    """
    h = hashlib.new("ripemd160")
    h.update(bytes(b))
    return ByteArray(h.digest())


def hash160(b):
    """
    A RIPEMD160 hash of the SHA256 hash of the input.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 20-byte hash.
    """
    return ripemd160(sha256(b))


def doubleHashH(b):
    """
    Double-SHA256 hash.

    Args:
        b (byte-like): The bytes to hash.

    Returns:
        ByteArray: A 32-byte hash.
    """
    return sha256(sha256(b))


def checksum(b):
    """
    The Base58Check checksum.

    Args:
        b (byte-like): Bytes to obtain a checksum for.

    Returns:
        bytes: The first 4 bytes of the double-SHA256 hash of the input.
    """
    return doubleHashH(b).bytes()[:4]
