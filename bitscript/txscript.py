"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Scripts as sequences of terms, and the byte codec for them.
"""

from bitscript import DecodeError, EncodingError
from bitscript import opcode
from bitscript.opcode import Opcode
from bitscript.util import helpers
from bitscript.util.encode import ByteArray


log = helpers.getLogger("TXSCRIPT")

# The smallest length OP_PUSHDATA1 may announce. Shorter pushes have to use
# OP_PUSHBYTES.
MinPushData1Len = opcode.MaxPushBytes + 1


def pushData2Len(b1, b2):
    """
    The data length announced by an OP_PUSHDATA2 descriptor. The two bytes are
    read big-endian and then shifted left by another 8 bits, so [0x01, 0x00]
    announces 65536 bytes, not 1 or 256.
    """
    return (b1 << 16) | (b2 << 8)


def pushData4Len(b1, b2, b3, b4):
    """
    The data length announced by an OP_PUSHDATA4 descriptor. Same rule as
    pushData2Len: big-endian accumulation followed by an 8 bit left shift.
    """
    return ((((b1 << 8 | b2) << 8 | b3) << 8) | b4) << 8


class Instruction:
    """
    A script term that executes an opcode.
    """

    __slots__ = ("op",)

    def __init__(self, op):
        object.__setattr__(self, "op", op)

    def __setattr__(self, k, v):
        raise AttributeError("Instruction is immutable")

    def __delattr__(self, k):
        raise AttributeError("Instruction is immutable")

    def __eq__(self, other):
        return isinstance(other, Instruction) and self.op == other.op

    def __hash__(self):
        return hash(("instruction", self.op))

    def __repr__(self):
        return f"Instruction({opcode.displayName(self.op)})"


class Data:
    """
    A script term of raw inline data. It carries no length of its own, the
    preceding push instruction announces it.
    """

    __slots__ = ("data",)

    def __init__(self, data):
        object.__setattr__(self, "data", ByteArray(data))

    def __setattr__(self, k, v):
        raise AttributeError("Data is immutable")

    def __delattr__(self, k):
        raise AttributeError("Data is immutable")

    def __eq__(self, other):
        return isinstance(other, Data) and self.data == other.data

    def __hash__(self):
        return hash(("data", self.data))

    def __len__(self):
        return len(self.data)

    def __repr__(self):
        return f"Data({self.data.hex()})"


def pushDataTerms(data):
    """
    Build a push instruction together with its Data term, choosing the
    descriptor so that decoding the result gives back the same two terms.

    Empty data becomes a lone OP_0. Lengths 1 to 75 use OP_PUSHBYTES and 76 to
    255 use OP_PUSHDATA1. Because of the trailing shift in the OP_PUSHDATA2/4
    length rule, longer pushes are only describable when the length is a
    multiple of 256: below 2**24 with OP_PUSHDATA2, below 2**40 with
    OP_PUSHDATA4.

    Args:
        data (bytes-like): The data to push.

    Returns:
        list(Instruction | Data): The terms.

    Raises:
        EncodingError: The length cannot be described by any push opcode.
    """
    data = ByteArray(data)
    dataLen = len(data)
    if dataLen == 0:
        return [Instruction(Opcode.atom(opcode.OP_0))]
    if dataLen <= opcode.MaxPushBytes:
        op = Opcode.pushBytes(dataLen)
    elif dataLen <= 0xFF:
        op = Opcode.pushData1(dataLen)
    elif dataLen % 256 != 0:
        raise EncodingError(
            f"a push of {dataLen} bytes cannot be described, lengths above 255 "
            "must be a multiple of 256"
        )
    elif dataLen < 1 << 24:
        op = Opcode.pushData2(*(dataLen >> 8).to_bytes(2, "big"))
    elif dataLen < 1 << 40:
        op = Opcode.pushData4(*(dataLen >> 8).to_bytes(4, "big"))
    else:
        raise EncodingError(f"a push of {dataLen} bytes is too large")
    return [Instruction(op), Data(data)]


class ScriptTokenizer:
    """
    ScriptTokenizer walks a serialized script one opcode at a time. Each
    successive opcode is parsed with next, which returns False when iteration
    is complete, either due to successfully tokenizing the entire script or
    encountering a parse error. In the case of failure, err holds the specific
    parse error.

    Upon successfully parsing an opcode, the opcode and the inline data that
    came with it may be obtained via opcode and data. Data is None for opcodes
    that don't push anything.
    """

    def __init__(self, script):
        self.script = ByteArray(script)
        self.offset = 0
        self.op = None
        self.d = None
        self.err = None

    def _fail(self, msg):
        self.err = DecodeError(f"at offset {self.offset}: {msg}")
        return False

    def _take(self, start, n, what):
        """
        The n bytes at start, or None with err set if the script is too short.
        """
        remaining = len(self.script) - start
        if n > remaining:
            self._fail(f"{what} needs {n} bytes, but script only has {remaining} remaining")
            return None
        return self.script[start : start + n]

    def next(self):
        """
        next attempts to parse the next opcode and returns whether or not it
        was successful. It will not be successful if invoked when already at
        the end of the script, a parse failure is encountered, or an error
        already exists due to a previous parse failure.

        In the case of a True return, the offset points to the next opcode or
        the end of the script. In the case of a False return, the opcode and
        data are the last successfully parsed values and the offset points to
        the failing opcode.
        """
        if self.done():
            return False

        tag = self.script[self.offset]
        start = self.offset + 1

        if 1 <= tag <= opcode.MaxPushBytes:
            # OP_PUSHBYTES: the tag byte is the length.
            data = self._take(start, tag, f"OP_PUSHBYTES{tag}")
            if data is None:
                return False
            return self._advance(Opcode.pushBytes(tag), data, 1 + tag)

        if tag == opcode.OP_PUSHDATA1:
            desc = self._take(start, 1, "OP_PUSHDATA1 length")
            if desc is None:
                return False
            dataLen = desc[0]
            if dataLen < MinPushData1Len:
                return self._fail(
                    f"OP_PUSHDATA1 length {dataLen} is less than {MinPushData1Len}"
                )
            op = Opcode.pushData1(dataLen)

        elif tag == opcode.OP_PUSHDATA2:
            desc = self._take(start, 2, "OP_PUSHDATA2 length")
            if desc is None:
                return False
            dataLen = pushData2Len(*desc)
            op = Opcode.pushData2(*desc)

        elif tag == opcode.OP_PUSHDATA4:
            desc = self._take(start, 4, "OP_PUSHDATA4 length")
            if desc is None:
                return False
            dataLen = pushData4Len(*desc)
            op = Opcode.pushData4(*desc)

        else:
            try:
                op = opcode.fromByte(tag)
            except DecodeError as e:
                self.err = e
                return False
            return self._advance(op, None, 1)

        data = self._take(start + len(desc), dataLen, opcode.displayName(op))
        if data is None:
            return False
        return self._advance(op, data, 1 + len(desc) + dataLen)

    def _advance(self, op, data, n):
        self.offset += n
        self.op = op
        self.d = data
        return True

    def done(self):
        """
        Script parsing has completed

        Returns:
            bool: True if script parsing complete.
        """
        return self.err is not None or self.offset >= len(self.script)

    def opcode(self):
        """
        The current step's opcode

        Returns:
            Opcode: the opcode.
        """
        return self.op

    def data(self):
        """
        The inline data of the most recently parsed opcode, or None if it
        doesn't push any.

        Returns:
            ByteArray: The data
        """
        return self.d

    def byteIndex(self):
        """
        The current offset into the full script that will be parsed next and
        therefore also implies everything before it has already been parsed.

        Returns:
            int: the current offset
        """
        return self.offset


class Script:
    """
    Script is an ordered sequence of terms, Instruction and Data. Scripts
    decoded from bytes serialize back to exactly the same bytes.

    Serialization writes the length descriptor stored in each push opcode and
    never looks at the length of the Data term that follows it. Building a
    script by hand with mismatched pairs serializes fine but decodes to
    something else. addData and pushDataTerms build consistent pairs.
    """

    def __init__(self, terms=None):
        self.terms = list(terms) if terms else []

    @staticmethod
    def deserialize(b):
        """
        Decode a serialized script.

        Args:
            b (bytes-like or str): The script. Strings are read as hex.

        Returns:
            Script: The decoded script.

        Raises:
            DecodeError: The script is truncated, uses an unassigned opcode,
                or has an OP_PUSHDATA1 shorter than 76 bytes.
        """
        tokenizer = ScriptTokenizer(b)
        terms = []
        while tokenizer.next():
            terms.append(Instruction(tokenizer.opcode()))
            if tokenizer.data() is not None:
                terms.append(Data(tokenizer.data()))
        if tokenizer.err is not None:
            log.debug(f"script decode failed: {tokenizer.err}")
            raise tokenizer.err
        return Script(terms)

    def serialize(self):
        """
        Encode the script.

        Returns:
            ByteArray: The serialized script.

        Raises:
            EncodingError: An instruction cannot be encoded, e.g.
                OP_PUSHBYTES(0).
        """
        b = ByteArray(b"")
        for term in self.terms:
            if isinstance(term, Data):
                b += term.data
                continue
            op = term.op
            b += bytearray([opcode.toByte(op)])
            b += op.payload
        return b

    def addOp(self, op):
        """
        Append an instruction. Integer tag bytes are looked up with
        opcode.fromByte. Returns self for chaining.
        """
        if isinstance(op, int):
            op = opcode.fromByte(op)
        self.terms.append(Instruction(op))
        return self

    def addData(self, data):
        """
        Append a push of data with a matching length descriptor. Returns self
        for chaining.
        """
        self.terms.extend(pushDataTerms(data))
        return self

    def asm(self):
        """
        A human readable disassembly, opcode mnemonics and hex data separated
        by spaces.
        """
        parts = []
        for term in self.terms:
            if isinstance(term, Data):
                parts.append(term.data.hex())
            else:
                parts.append(opcode.displayName(term.op))
        return " ".join(parts)

    def __str__(self):
        return self.asm()

    def __repr__(self):
        return f"Script({self.asm()})"

    def __iter__(self):
        return iter(self.terms)

    def __len__(self):
        return len(self.terms)

    def __getitem__(self, i):
        return self.terms[i]

    def __eq__(self, other):
        return isinstance(other, Script) and self.terms == other.terms


def checkScriptParses(script):
    """
    Raise the DecodeError for a script that doesn't parse, else do nothing.

    Args:
        script (bytes-like): The serialized script.
    """
    tokenizer = ScriptTokenizer(script)
    while tokenizer.next():
        pass
    if tokenizer.err is not None:
        raise tokenizer.err
