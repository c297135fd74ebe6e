"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

The script instruction set. Every tag byte in 0x00..0xff either names an
opcode or is unassigned (0xbb..0xfe). The numeric constants below are the tag
bytes; `Opcode` is the instruction value carried by a script.
"""

from bitscript import EncodingError, InvalidOpcodeError


# fmt: off
# push value
OP_0                   = 0x00 # 0
OP_FALSE               = 0x00 # 0 - AKA OP_0
OP_PUSHDATA1           = 0x4c # 76
OP_PUSHDATA2           = 0x4d # 77
OP_PUSHDATA4           = 0x4e # 78
OP_1NEGATE             = 0x4f # 79
OP_RESERVED            = 0x50 # 80
OP_1                   = 0x51 # 81 - AKA OP_TRUE
OP_TRUE                = 0x51 # 81
OP_2                   = 0x52 # 82
OP_3                   = 0x53 # 83
OP_4                   = 0x54 # 84
OP_5                   = 0x55 # 85
OP_6                   = 0x56 # 86
OP_7                   = 0x57 # 87
OP_8                   = 0x58 # 88
OP_9                   = 0x59 # 89
OP_10                  = 0x5a # 90
OP_11                  = 0x5b # 91
OP_12                  = 0x5c # 92
OP_13                  = 0x5d # 93
OP_14                  = 0x5e # 94
OP_15                  = 0x5f # 95
OP_16                  = 0x60 # 96

# control
OP_NOP                 = 0x61 # 97
OP_VER                 = 0x62 # 98
OP_IF                  = 0x63 # 99
OP_NOTIF               = 0x64 # 100
OP_VERIF               = 0x65 # 101
OP_VERNOTIF            = 0x66 # 102
OP_ELSE                = 0x67 # 103
OP_ENDIF               = 0x68 # 104
OP_VERIFY              = 0x69 # 105
OP_RETURN              = 0x6a # 106

# stack ops
OP_TOALTSTACK          = 0x6b # 107
OP_FROMALTSTACK        = 0x6c # 108
OP_2DROP               = 0x6d # 109
OP_2DUP                = 0x6e # 110
OP_3DUP                = 0x6f # 111
OP_2OVER               = 0x70 # 112
OP_2ROT                = 0x71 # 113
OP_2SWAP               = 0x72 # 114
OP_IFDUP               = 0x73 # 115
OP_DEPTH               = 0x74 # 116
OP_DROP                = 0x75 # 117
OP_DUP                 = 0x76 # 118
OP_NIP                 = 0x77 # 119
OP_OVER                = 0x78 # 120
OP_PICK                = 0x79 # 121
OP_ROLL                = 0x7a # 122
OP_ROT                 = 0x7b # 123
OP_SWAP                = 0x7c # 124
OP_TUCK                = 0x7d # 125

# splice ops
OP_CAT                 = 0x7e # 126
OP_SUBSTR              = 0x7f # 127
OP_LEFT                = 0x80 # 128
OP_RIGHT               = 0x81 # 129
OP_SIZE                = 0x82 # 130

# bit logic
OP_INVERT              = 0x83 # 131
OP_AND                 = 0x84 # 132
OP_OR                  = 0x85 # 133
OP_XOR                 = 0x86 # 134
OP_EQUAL               = 0x87 # 135
OP_EQUALVERIFY         = 0x88 # 136
OP_RESERVED1           = 0x89 # 137
OP_RESERVED2           = 0x8a # 138

# numeric
OP_1ADD                = 0x8b # 139
OP_1SUB                = 0x8c # 140
OP_2MUL                = 0x8d # 141
OP_2DIV                = 0x8e # 142
OP_NEGATE              = 0x8f # 143
OP_ABS                 = 0x90 # 144
OP_NOT                 = 0x91 # 145
OP_0NOTEQUAL           = 0x92 # 146
OP_ADD                 = 0x93 # 147
OP_SUB                 = 0x94 # 148
OP_MUL                 = 0x95 # 149
OP_DIV                 = 0x96 # 150
OP_MOD                 = 0x97 # 151
OP_LSHIFT              = 0x98 # 152
OP_RSHIFT              = 0x99 # 153
OP_BOOLAND             = 0x9a # 154
OP_BOOLOR              = 0x9b # 155
OP_NUMEQUAL            = 0x9c # 156
OP_NUMEQUALVERIFY      = 0x9d # 157
OP_NUMNOTEQUAL         = 0x9e # 158
OP_LESSTHAN            = 0x9f # 159
OP_GREATERTHAN         = 0xa0 # 160
OP_LESSTHANOREQUAL     = 0xa1 # 161
OP_GREATERTHANOREQUAL  = 0xa2 # 162
OP_MIN                 = 0xa3 # 163
OP_MAX                 = 0xa4 # 164
OP_WITHIN              = 0xa5 # 165

# crypto
OP_RIPEMD160           = 0xa6 # 166
OP_SHA1                = 0xa7 # 167
OP_SHA256              = 0xa8 # 168
OP_HASH160             = 0xa9 # 169
OP_HASH256             = 0xaa # 170
OP_CODESEPARATOR       = 0xab # 171
OP_CHECKSIG            = 0xac # 172
OP_CHECKSIGVERIFY      = 0xad # 173
OP_CHECKMULTISIG       = 0xae # 174
OP_CHECKMULTISIGVERIFY = 0xaf # 175

# expansion
OP_NOP1                = 0xb0 # 176
OP_CHECKLOCKTIMEVERIFY = 0xb1 # 177
OP_NOP2                = 0xb1 # 177 - deprecated, AKA OP_CHECKLOCKTIMEVERIFY
OP_CHECKSEQUENCEVERIFY = 0xb2 # 178
OP_NOP3                = 0xb2 # 178 - deprecated, AKA OP_CHECKSEQUENCEVERIFY
OP_NOP4                = 0xb3 # 179
OP_NOP5                = 0xb4 # 180
OP_NOP6                = 0xb5 # 181
OP_NOP7                = 0xb6 # 182
OP_NOP8                = 0xb7 # 183
OP_NOP9                = 0xb8 # 184
OP_NOP10               = 0xb9 # 185

# BIP 342 (Tapscript)
OP_CHECKSIGADD         = 0xba # 186

OP_INVALIDOPCODE       = 0xff # 255
# fmt: on

# The largest push whose length is the tag byte itself.
MaxPushBytes = 75

# Unassigned tag bytes.
FirstUnassigned = 0xBB
LastUnassigned = 0xFE

# Opcode kinds.
ATOM = "atom"
PUSHBYTES = "pushbytes"
PUSHDATA1 = "pushdata1"
PUSHDATA2 = "pushdata2"
PUSHDATA4 = "pushdata4"

# Tag byte and length-descriptor width for each push-data kind.
pushDataTags = {
    PUSHDATA1: (OP_PUSHDATA1, 1),
    PUSHDATA2: (OP_PUSHDATA2, 2),
    PUSHDATA4: (OP_PUSHDATA4, 4),
}

pushDataKinds = {tag: kind for kind, (tag, _) in pushDataTags.items()}


def _buildNames():
    """
    Collect the canonical mnemonic of every atom from the module constants.
    Where two names share a byte, the first one defined wins, so aliases
    declared after their canonical name never shadow it.
    """
    names = {}
    aliases = {}
    for name, value in globals().items():
        if not name.startswith("OP_") or not isinstance(value, int):
            continue
        if value in (OP_PUSHDATA1, OP_PUSHDATA2, OP_PUSHDATA4):
            continue
        aliases[name] = value
        names.setdefault(value, name)
    return names, aliases


# opcodeNames maps each atom's tag byte to its canonical mnemonic, and
# opcodeValues maps every mnemonic, aliases included, back to its tag byte.
# Together they are the single bidirectional table for the instruction set.
opcodeNames, opcodeValues = _buildNames()

# Historically disabled opcodes.
disabledOpcodes = frozenset(
    (
        OP_CAT,
        OP_SUBSTR,
        OP_LEFT,
        OP_RIGHT,
        OP_INVERT,
        OP_AND,
        OP_OR,
        OP_XOR,
        OP_2MUL,
        OP_2DIV,
        OP_MUL,
        OP_DIV,
        OP_MOD,
        OP_LSHIFT,
        OP_RSHIFT,
        OP_CHECKMULTISIG,
        OP_CHECKMULTISIGVERIFY,
    )
)


class Opcode:
    """
    Opcode is a single script instruction, a tagged value of (kind, value,
    payload).

    ATOM opcodes carry their tag byte as value and no payload. PUSHBYTES
    carries the push length as value. The PUSHDATA kinds carry their raw
    length-descriptor bytes as payload, exactly as they appear on the wire.
    Nothing ties the payload to the length of the data that follows it in a
    script. See txscript.pushDataTerms for building the two together.

    Use the constructors below rather than __init__.
    """

    __slots__ = ("kind", "value", "payload")

    def __init__(self, kind, value=0, payload=b""):
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "payload", bytes(payload))

    def __setattr__(self, k, v):
        raise AttributeError("Opcode is immutable")

    def __delattr__(self, k):
        raise AttributeError("Opcode is immutable")

    @staticmethod
    def atom(value):
        """An opcode without payload, e.g. Opcode.atom(OP_DUP)."""
        return Opcode(ATOM, value)

    @staticmethod
    def pushBytes(n):
        """OP_PUSHBYTES(n). Only 1 <= n <= 75 can be encoded."""
        return Opcode(PUSHBYTES, n)

    @staticmethod
    def pushData1(length):
        """OP_PUSHDATA1 with a one byte length descriptor."""
        return Opcode(PUSHDATA1, OP_PUSHDATA1, _descriptor(length, 1))

    @staticmethod
    def pushData2(b1, b2):
        """OP_PUSHDATA2 with the two raw length-descriptor bytes."""
        return Opcode(PUSHDATA2, OP_PUSHDATA2, _descriptor((b1, b2), 2))

    @staticmethod
    def pushData4(b1, b2, b3, b4):
        """OP_PUSHDATA4 with the four raw length-descriptor bytes."""
        return Opcode(PUSHDATA4, OP_PUSHDATA4, _descriptor((b1, b2, b3, b4), 4))

    def isPush(self):
        """True for the opcodes that announce inline data."""
        return self.kind != ATOM

    def __eq__(self, other):
        if not isinstance(other, Opcode):
            return NotImplemented
        return (self.kind, self.value, self.payload) == (
            other.kind,
            other.value,
            other.payload,
        )

    def __hash__(self):
        return hash((self.kind, self.value, self.payload))

    def __repr__(self):
        return f"Opcode({displayName(self)})"


def _descriptor(b, width):
    if isinstance(b, int):
        b = (b,)
    b = bytes(b)
    if len(b) != width:
        raise EncodingError(
            f"length descriptor must be {width} bytes, got {len(b)}"
        )
    return b


def toByte(op):
    """
    The tag byte of an opcode.

    Args:
        op (Opcode): The opcode.

    Returns:
        int: The tag byte.

    Raises:
        EncodingError: for OP_PUSHBYTES outside 1..75 and for atoms that are
            not in the table.
    """
    if op.kind == PUSHBYTES:
        if op.value == 0:
            raise EncodingError(
                "the number of bytes to be pushed on the stack must be positive"
            )
        if op.value > MaxPushBytes or op.value < 0:
            raise EncodingError(
                f"only {MaxPushBytes} bytes can be pushed by OP_PUSHBYTES, got {op.value}"
            )
        return op.value
    if op.kind in pushDataTags:
        return pushDataTags[op.kind][0]
    if op.kind == ATOM and op.value in opcodeNames:
        return op.value
    raise EncodingError(f"not an encodable opcode: kind {op.kind}, value {op.value}")


def fromByte(b):
    """
    The opcode for a tag byte. OP_PUSHDATA1/2/4 come back with a zeroed length
    descriptor, since the real one lives in the bytes that follow. Only the
    script decoder can rebuild those.

    Args:
        b (int): The tag byte.

    Returns:
        Opcode: The opcode.

    Raises:
        InvalidOpcodeError: for unassigned bytes and values outside 0..255.
    """
    if not 0 <= b <= 0xFF:
        raise InvalidOpcodeError(f"tag byte out of range: {b}")
    if 1 <= b <= MaxPushBytes:
        return Opcode.pushBytes(b)
    if b in pushDataKinds:
        kind = pushDataKinds[b]
        return Opcode(kind, b, bytes(pushDataTags[kind][1]))
    if FirstUnassigned <= b <= LastUnassigned:
        raise InvalidOpcodeError(f"invalid opcode 0x{b:02x}")
    return Opcode.atom(b)


def fromName(name):
    """
    The atom for a mnemonic. Aliases such as OP_TRUE and OP_NOP2 are accepted.

    Args:
        name (str): The mnemonic, with or without the OP_ prefix.

    Returns:
        Opcode: The opcode.
    """
    if not name.startswith("OP_"):
        name = "OP_" + name
    if name not in opcodeValues:
        raise EncodingError(f"unknown opcode name {name}")
    return Opcode.atom(opcodeValues[name])


def displayName(op):
    """
    The canonical mnemonic, e.g. OP_0, OP_PUSHBYTES4 or OP_PUSHDATA1 4c. Only
    meant for diagnostics.
    """
    if op.kind == PUSHBYTES:
        return f"OP_PUSHBYTES{op.value}"
    if op.kind in pushDataTags:
        return f"OP_{op.kind.upper()} {op.payload.hex()}"
    return opcodeNames.get(op.value, f"OP_UNKNOWN{op.value}")


def isActivated(op):
    """
    Whether the opcode is currently permitted by policy. The historically
    disabled opcodes are not.
    """
    return not (op.kind == ATOM and op.value in disabledOpcodes)
