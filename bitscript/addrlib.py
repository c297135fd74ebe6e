"""
Copyright (c) 2019-2020, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Base58Check pay-to-pubkey-hash addresses and their locking scripts.
"""

from typing import Tuple

from base58 import b58decode, b58encode

from bitscript import DecodeError, EncodingError
from bitscript import opcode
from bitscript.crypto.crypto import RIPEMD160_SIZE, checksum
from bitscript.opcode import Opcode
from bitscript.txscript import Script
from bitscript.util.encode import ByteArray


# Version bytes of P2PKH addresses.
MainNetPubKeyHashAddrID = 0x00
TestNetPubKeyHashAddrID = 0x6F

pubKeyHashAddrIDs = (MainNetPubKeyHashAddrID, TestNetPubKeyHashAddrID)


def b58CheckEncode(payload, version: int) -> str:
    """
    Prepend the version byte, append a 4-byte checksum and encode to base-58.

    Args:
        payload (bytes-like): The payload, e.g. a pubkey hash.
        version (int): The version byte.

    Returns:
        str: The base-58 encoded string.
    """
    b = ByteArray(bytearray([version])) + payload
    b += checksum(b)
    return b58encode(b.bytes()).decode()


def b58CheckDecode(s: str) -> Tuple[ByteArray, int]:
    """
    Decode the base-58 encoded address, parsing the version byte and the
    payload. An exception is raised if the checksum is invalid or missing.

    Args:
        s (str): The base-58 encoded address.

    Returns:
        ByteArray: Decoded bytes minus the leading version and trailing
            checksum.
        int: The version byte.
    """
    try:
        decoded = b58decode(s)
    except ValueError as e:
        raise DecodeError(f"invalid base-58 string: {e}")
    if len(decoded) < 5:
        raise DecodeError("decoded lacking version/checksum")
    version = decoded[0]
    if decoded[-4:] != checksum(decoded[:-4]):
        raise DecodeError("checksum error")
    return ByteArray(decoded[1:-4]), version


def decodeP2PKH(addr: str) -> ByteArray:
    """
    The pubkey hash of a mainnet or testnet P2PKH address.

    Args:
        addr (str): The address.

    Returns:
        ByteArray: The 20-byte pubkey hash.
    """
    pkHash, version = b58CheckDecode(addr)
    if version not in pubKeyHashAddrIDs:
        raise DecodeError(f"not a pubkey-hash address, version byte {version}")
    if len(pkHash) != RIPEMD160_SIZE:
        raise DecodeError(f"pubkey hash must be {RIPEMD160_SIZE} bytes, got {len(pkHash)}")
    return pkHash


def encodeP2PKH(pkHash, netID: int = MainNetPubKeyHashAddrID) -> str:
    """
    The P2PKH address for a pubkey hash.

    Args:
        pkHash (bytes-like): The 20-byte pubkey hash.
        netID (int): The address version byte.

    Returns:
        str: The address.
    """
    if len(pkHash) != RIPEMD160_SIZE:
        raise EncodingError(f"pubkey hash must be {RIPEMD160_SIZE} bytes, got {len(pkHash)}")
    return b58CheckEncode(pkHash, netID)


def payToPubKeyHashScript(pkHash) -> Script:
    """
    The standard locking script for a pubkey hash:
    OP_DUP OP_HASH160 <hash> OP_EQUALVERIFY OP_CHECKSIG.

    Args:
        pkHash (bytes-like): The 20-byte pubkey hash.

    Returns:
        Script: The locking script.
    """
    if len(pkHash) != RIPEMD160_SIZE:
        raise EncodingError(f"pubkey hash must be {RIPEMD160_SIZE} bytes, got {len(pkHash)}")
    return (
        Script()
        .addOp(Opcode.atom(opcode.OP_DUP))
        .addOp(Opcode.atom(opcode.OP_HASH160))
        .addData(pkHash)
        .addOp(Opcode.atom(opcode.OP_EQUALVERIFY))
        .addOp(Opcode.atom(opcode.OP_CHECKSIG))
    )


def payToAddrScript(addr: str) -> Script:
    """
    The locking script paying to a P2PKH address.
    """
    return payToPubKeyHashScript(decodeP2PKH(addr))
