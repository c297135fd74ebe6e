"""
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Signatures as they appear in scripts: the raw signature bytes followed by
a single sighash type byte.
"""

from bitscript import DecodeError, EncodingError
from bitscript.util.encode import ByteArray


class SignatureType:
    """
    Sighash types. The Taproot-only types are declared for completeness but
    can't be serialized.
    """

    ALL = "SIGHASH_ALL"
    NONE = "SIGHASH_NONE"
    SINGLE = "SIGHASH_SINGLE"
    ANYONECANPAY = "SIGHASH_ANYONECANPAY"

    # Taproot only; implied when the sighash byte is missing, and equivalent
    # to SIGHASH_ALL.
    DEFAULT = "SIGHASH_DEFAULT"
    OUTPUT_MASK = "SIGHASH_OUTPUT_MASK"
    INPUT_MASK = "SIGHASH_INPUT_MASK"


# fmt: off
SigHashAll          = 0x01
SigHashNone         = 0x02
SigHashSingle       = 0x03
SigHashAnyOneCanPay = 0x80
# fmt: on

sigHashBytes = {
    SignatureType.ALL: SigHashAll,
    SignatureType.NONE: SigHashNone,
    SignatureType.SINGLE: SigHashSingle,
    SignatureType.ANYONECANPAY: SigHashAnyOneCanPay,
}

sigHashTypes = {b: t for t, b in sigHashBytes.items()}


class Signature:
    """
    A signature blob and its sighash type.
    """

    def __init__(self, sig, sigType):
        """
        Args:
            sig (bytes-like): The raw signature, without the type byte.
            sigType (str): One of the SignatureType values.
        """
        self.sig = ByteArray(sig)
        self.sigType = sigType

    def serialize(self):
        """
        The signature followed by its sighash byte.

        Returns:
            ByteArray: The serialized signature.

        Raises:
            EncodingError: The type has no single byte encoding.
        """
        if self.sigType not in sigHashBytes:
            raise EncodingError(f"unsupported signature type {self.sigType}")
        return self.sig + bytearray([sigHashBytes[self.sigType]])

    @staticmethod
    def deserialize(b):
        """
        Split the trailing sighash byte off a serialized signature.

        Args:
            b (bytes-like): The serialized signature.

        Returns:
            Signature: The decoded signature.

        Raises:
            DecodeError: The buffer is empty or the last byte is not a known
                sighash type.
        """
        b = ByteArray(b)
        if len(b) == 0:
            raise DecodeError("empty signature")
        tag = b[len(b) - 1]
        if tag not in sigHashTypes:
            raise DecodeError(f"invalid signature type 0x{tag:02x}")
        return Signature(b[: len(b) - 1], sigHashTypes[tag])

    def __eq__(self, other):
        return (
            isinstance(other, Signature)
            and self.sig == other.sig
            and self.sigType == other.sigType
        )

    def __repr__(self):
        return f"Signature({self.sig.hex()}, {self.sigType})"
