"""
Copyright (c) 2019-2020, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""


class BitscriptError(Exception):
    pass


class EncodingError(BitscriptError):
    """
    A value cannot be encoded. The caller handed over something that breaks
    the encoding contract, e.g. an OP_PUSHBYTES outside of 1..75.
    """

    pass


class DecodeError(BitscriptError):
    """
    The input bytes are malformed. Decoding never returns a partial result.
    """

    pass


class InvalidOpcodeError(DecodeError):
    pass


class UnsupportedOpcodeError(BitscriptError):
    """
    The interpreter met an instruction it does not implement. This is not a
    failed script, it's an incomplete interpreter.
    """

    def __init__(self, op):
        super().__init__(f"opcode not implemented: {op}")
        self.op = op
