"""
Copyright (c) 2024, the bitscript developers
See LICENSE for details

A small stack machine for scripts. Only a handful of opcodes are implemented:
OP_0, OP_PUSHBYTES, OP_DUP, OP_HASH160 and OP_EQUALVERIFY. Anything else
raises UnsupportedOpcodeError rather than producing a verdict.

A script is valid when every term executes and the stack ends up empty.
"""

from bitscript import BitscriptError, UnsupportedOpcodeError
from bitscript import config, opcode
from bitscript.crypto import crypto
from bitscript.txscript import Data, Instruction
from bitscript.util import helpers
from bitscript.util.encode import ByteArray


log = helpers.getLogger("ENGINE")

FALSE_ITEM = ByteArray([0])
TRUE_ITEM = ByteArray([1])


class StackUnderflow(BitscriptError):
    """
    Raised inside the engine when an opcode needs more items than the stack
    holds. Engine.execute turns it into a False verdict.
    """

    pass


class Stack:
    """
    Stack is an indexable sequence of byte strings. Index 0 is the bottom of
    the stack, the last item is the top.
    """

    def __init__(self, items=None):
        self.items = [ByteArray(item) for item in items] if items else []

    def push(self, item):
        """Push item on top of the stack."""
        self.items.append(ByteArray(item))

    def pop(self):
        """Remove and return the top item."""
        if not self.items:
            raise StackUnderflow("pop from an empty stack")
        return self.items.pop()

    def peek(self, idx=0):
        """The item idx positions below the top, without removing it."""
        if idx >= len(self.items):
            raise StackUnderflow(f"peek({idx}) on a stack of depth {len(self.items)}")
        return self.items[-1 - idx]

    def at(self, idx):
        """The item idx positions above the bottom, without removing it."""
        if idx >= len(self.items):
            raise StackUnderflow(f"at({idx}) on a stack of depth {len(self.items)}")
        return self.items[idx]

    def depth(self):
        return len(self.items)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __eq__(self, other):
        if isinstance(other, Stack):
            return self.items == other.items
        return self.items == [ByteArray(item) for item in other]

    def __repr__(self):
        return "Stack([" + ", ".join(item.hex() for item in self.items) + "])"


class Engine:
    """
    Engine executes one script against one stack. It is single use: build a
    new Engine for every evaluation.
    """

    def __init__(self, script, stack=None, dupFromTop=None):
        """
        Args:
            script (Script or iterable of terms): The script to run.
            stack (Stack or list(bytes-like)): The initial stack. It is copied,
                the caller's stack is not modified.
            dupFromTop (bool): OP_DUP copies the top item when True and the
                bottom item when False. None uses the configured default.
        """
        self.terms = list(script)
        if isinstance(stack, Stack):
            stack = stack.items
        self.stack = Stack(stack)
        if dupFromTop is None:
            dupFromTop = config.load().dupFromTop
        self.dupFromTop = dupFromTop
        # The length announced by the last OP_PUSHBYTES, waiting for its Data.
        self.expectedPush = None
        self.pc = 0
        self.opHandlers = {
            (opcode.ATOM, opcode.OP_0): self.opFalse,
            (opcode.ATOM, opcode.OP_DUP): self.opDup,
            (opcode.ATOM, opcode.OP_HASH160): self.opHash160,
            (opcode.ATOM, opcode.OP_EQUALVERIFY): self.opEqualVerify,
        }

    def step(self):
        """
        Execute the next term.

        Returns:
            bool: False if the script failed on this term, True otherwise.

        Raises:
            UnsupportedOpcodeError: The term is an instruction the engine does
                not implement.
        """
        term = self.terms[self.pc]
        self.pc += 1

        if isinstance(term, Data):
            return self.pushData(term)

        if not isinstance(term, Instruction):
            raise TypeError(f"not a script term: {term!r}")

        op = term.op
        if self.expectedPush is not None:
            return self.fail(
                f"{opcode.displayName(op)} while a {self.expectedPush} byte push is pending"
            )

        if op.kind == opcode.PUSHBYTES:
            self.expectedPush = op.value
            return True

        handler = self.opHandlers.get((op.kind, op.value))
        if handler is None:
            raise UnsupportedOpcodeError(opcode.displayName(op))
        try:
            return handler()
        except StackUnderflow as e:
            return self.fail(f"{opcode.displayName(op)}: {e}")

    def execute(self):
        """
        Run the script to completion.

        Returns:
            bool: True if the script ran through and left the stack empty.

        Raises:
            UnsupportedOpcodeError: The script uses an instruction the engine
                does not implement.
        """
        while self.pc < len(self.terms):
            if not self.step():
                return False
        if self.expectedPush is not None:
            return self.fail(f"script ended with a {self.expectedPush} byte push pending")
        if len(self.stack) != 0:
            log.debug(f"script finished with {len(self.stack)} items on the stack")
            return False
        return True

    def fail(self, reason):
        log.debug(f"script failed at term {self.pc - 1}: {reason}")
        return False

    def pushData(self, term):
        if self.expectedPush is None:
            return self.fail("data without a preceding push instruction")
        if len(term.data) != self.expectedPush:
            return self.fail(
                f"push expected {self.expectedPush} bytes, got {len(term.data)}"
            )
        self.stack.push(term.data)
        self.expectedPush = None
        return True

    def opFalse(self):
        self.stack.push(FALSE_ITEM)
        return True

    def opDup(self):
        item = self.stack.peek(0) if self.dupFromTop else self.stack.at(0)
        self.stack.push(item.copy())
        return True

    def opHash160(self):
        self.stack.push(crypto.hash160(self.stack.pop()))
        return True

    def opEqualVerify(self):
        lhs = self.stack.pop()
        rhs = self.stack.pop()
        self.stack.push(TRUE_ITEM if lhs == rhs else FALSE_ITEM)
        if self.stack.pop() != TRUE_ITEM:
            return self.fail("OP_EQUALVERIFY: items are not equal")
        return True


def interpret(script, stack=None, dupFromTop=None):
    """
    Execute script against stack.

    Args:
        script (Script): The script.
        stack (Stack or list(bytes-like)): The initial stack.
        dupFromTop (bool): See Engine.

    Returns:
        bool: The verdict.

    Raises:
        UnsupportedOpcodeError: The script uses an instruction the engine does
            not implement.
    """
    return Engine(script, stack, dupFromTop).execute()
