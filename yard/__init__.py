import dataclasses
import enum
import io
import logging
from collections.abc import Callable, Iterator
from typing import TextIO

import numpy as np

logger = logging.getLogger(__name__)

MAX_DEPTH = 64
SENTINEL = ""
ERROR_MESSAGE = "Error in the expression"


class Token(enum.Enum):
    END = enum.auto()
    LETTER = enum.auto()
    ADD_SUB = enum.auto()
    MUL_DIV = enum.auto()
    OPEN = enum.auto()
    CLOSE = enum.auto()
    ERROR = enum.auto()


CLASSES = {
    "": Token.END,
    "\0": Token.END,
    "+": Token.ADD_SUB,
    "-": Token.ADD_SUB,
    "*": Token.MUL_DIV,
    "/": Token.MUL_DIV,
    "(": Token.OPEN,
    ")": Token.CLOSE,
}
MUL_DIV = ("*", "/")


class ExpressionError(ValueError):
    def __init__(self, message: str, pos: int | None = None, char: str | None = None):
        super().__init__(message)
        self.pos = pos
        self.char = char


class StackOverflow(ExpressionError):
    pass


def classify(c: str) -> Token:
    if len(c) == 1 and "a" <= c <= "z":
        return Token.LETTER
    return CLASSES.get(c, Token.ERROR)


class OperatorStack:
    """
    Bounded LIFO of operator characters.

    Cell 0 holds the sentinel for the whole lifetime of the stack, so
    popping at a scope boundary (an opening bracket, or the bottom) keeps
    returning the sentinel instead of failing.
    """

    def __init__(self, depth: int = MAX_DEPTH) -> None:
        self.cells: np.ndarray | None = np.full(depth, SENTINEL, dtype="<U1")
        self.top = 0

    def __enter__(self) -> "OperatorStack":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __len__(self) -> int:
        return self.top + 1

    def __iter__(self) -> Iterator[str]:
        return (str(c) for c in self._buffer()[: self.top + 1])

    def __repr__(self) -> str:
        if self.cells is None:
            return "OperatorStack(<closed>)"
        return f"OperatorStack({list(self)!r})"

    @property
    def depth(self) -> int:
        return len(self)

    @property
    def closed(self) -> bool:
        return self.cells is None

    def _buffer(self) -> np.ndarray:
        if self.cells is None:
            raise ValueError("operation on closed stack")
        return self.cells

    def peek(self) -> str:
        return str(self._buffer()[self.top])

    def push(self, c: str) -> None:
        cells = self._buffer()
        if self.top + 1 >= len(cells):
            logger.warning("operator stack overflow (max depth %d)", len(cells))
            raise StackOverflow(f"Stack overflow (max depth {len(cells)})", char=c)
        self.top += 1
        cells[self.top] = c
        logger.debug("push %r -> depth %d", c, self.depth)

    def pop_any(self) -> str:
        c = self.peek()
        if c != SENTINEL:
            self.top -= 1
        return c

    def pop_mul_div(self) -> str:
        c = self.peek()
        if c not in MUL_DIV:
            return SENTINEL
        self.top -= 1
        return c

    def drop_sentinel(self) -> None:
        # the bottom cell is never dropped
        if self.top > 0 and self.peek() == SENTINEL:
            self.top -= 1

    def close(self) -> None:
        self.cells = None
        self.top = 0


@dataclasses.dataclass
class Translator:
    sink: TextIO
    stack: OperatorStack = dataclasses.field(default_factory=OperatorStack)

    def __post_init__(self) -> None:
        self.handlers: dict[Token, Callable[[str], None]] = {
            Token.END: self.end,
            Token.LETTER: self.letter,
            Token.ADD_SUB: self.add_sub,
            Token.MUL_DIV: self.mul_div,
            Token.OPEN: self.open_bracket,
            Token.CLOSE: self.close_bracket,
            Token.ERROR: self.error,
        }

    def emit(self, c: str) -> None:
        # writing the sentinel is a no-op
        self.sink.write(c)

    def drain(self) -> None:
        # a scope never holds more than two operators
        self.emit(self.stack.pop_any())
        self.emit(self.stack.pop_any())

    def end(self, c: str) -> None:
        self.drain()
        self.sink.write("\n")

    def letter(self, c: str) -> None:
        self.emit(c)

    def add_sub(self, c: str) -> None:
        self.drain()
        self.stack.push(c)

    def mul_div(self, c: str) -> None:
        self.emit(self.stack.pop_mul_div())
        self.stack.push(c)

    def open_bracket(self, c: str) -> None:
        self.stack.push(SENTINEL)

    def close_bracket(self, c: str) -> None:
        self.drain()
        self.stack.drop_sentinel()

    def error(self, c: str) -> None:
        raise ExpressionError(f"Unknown character ({c!r})", char=c)

    def feed(self, src: str) -> None:
        p = 0
        try:
            while True:
                c = src[p] if p < len(src) else ""
                token = classify(c)
                logger.debug("%d: %r -> %s", p, c, token.name)
                try:
                    self.handlers[token](c)
                except ExpressionError as e:
                    e.pos = p
                    raise
                if token is Token.END:
                    return
                p += 1
        except ExpressionError:
            self.sink.write(f"\n{ERROR_MESSAGE}\n")
            raise


def translate(src: str, sink: TextIO, depth: int = MAX_DEPTH) -> None:
    with OperatorStack(depth) as stack:
        Translator(sink, stack).feed(src)


def to_postfix(src: str, depth: int = MAX_DEPTH) -> str:
    out = io.StringIO()
    translate(src, out, depth)
    return out.getvalue().rstrip("\n")
