import dataclasses
from collections import deque
from typing import Union

from yard import ExpressionError, Token, classify

Tree = Union["Node", str]


@dataclasses.dataclass(frozen=True)
class Node:
    op: str
    left: Tree
    right: Tree


class _Parser:
    def __init__(self, src: str) -> None:
        self.src = src
        self.p = 0

    def peek(self) -> Token:
        return classify(self.src[self.p] if self.p < len(self.src) else "")

    def take(self) -> str:
        c = self.src[self.p]
        self.p += 1
        return c

    def fail(self) -> ExpressionError:
        c = self.src[self.p] if self.p < len(self.src) else ""
        return ExpressionError(f"Unexpected token @ {self.p} ({c!r})", self.p, c)

    def expr(self) -> Tree:
        tree = self.term()
        while self.peek() is Token.ADD_SUB:
            tree = Node(self.take(), tree, self.term())
        return tree

    def term(self) -> Tree:
        tree = self.factor()
        while self.peek() is Token.MUL_DIV:
            tree = Node(self.take(), tree, self.factor())
        return tree

    def factor(self) -> Tree:
        token = self.peek()
        if token is Token.LETTER:
            return self.take()
        if token is Token.OPEN:
            self.take()
            tree = self.expr()
            if self.peek() is not Token.CLOSE:
                raise self.fail()
            self.take()
            return tree
        raise self.fail()


def parse_infix(src: str) -> Tree:
    parser = _Parser(src)
    tree = parser.expr()
    if parser.peek() is not Token.END:
        raise parser.fail()
    return tree


def parse_postfix(src: str) -> Tree:
    stack: deque[Tree] = deque()
    for p, c in enumerate(src):
        token = classify(c)
        if token is Token.LETTER:
            stack.append(c)
        elif token in (Token.ADD_SUB, Token.MUL_DIV):
            if len(stack) < 2:
                raise ExpressionError(f"Missing operand @ {p} ({c!r})", p, c)
            right = stack.pop()
            left = stack.pop()
            stack.append(Node(c, left, right))
        else:
            raise ExpressionError(f"Unknown token @ {p} ({c!r})", p, c)
    if len(stack) != 1:
        raise ExpressionError(f"Expected one expression, got {len(stack)}")
    return stack.pop()


def unparse(tree: Tree) -> str:
    if isinstance(tree, Node):
        return f"({unparse(tree.left)}{tree.op}{unparse(tree.right)})"
    return tree
