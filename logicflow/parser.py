"""
Recursive descent parser for propositional formulas.

Precedence, lowest to highest: IFF, IMPLIES, XOR, OR, AND, NOT. Every binary
level is left-associative, so ``A -> B -> C`` reads as ``(A -> B) -> C``.
NOT recurses into itself and is never collapsed: ``~~A`` is two nodes.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Sequence

from logicflow.errors import ParseFailure
from logicflow.nodes import Binary, Const, Node, Not, Var
from logicflow.tokens import OpKind, Token, TokenKind, tokenize
from logicflow.validate import check_syntax

logger = logging.getLogger(__name__)


class Parser:
    """Recursive descent parser over a validated token stream.

    ``nodes`` is the arena of every node built during the parse; a node's
    ``node_id`` is its index in that list.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].kind is not TokenKind.END:
            end_pos = self.tokens[-1].pos + 1 if self.tokens else 0
            self.tokens.append(Token(TokenKind.END, "", end_pos))
        self.pos = 0
        self.nodes: List[Node] = []

    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.current()
        if tok.kind is not TokenKind.END:
            self.pos += 1
        return tok

    def _at_op(self, op: OpKind) -> bool:
        tok = self.current()
        return tok.kind is TokenKind.OPERATOR and tok.op is op

    def _make(self, factory: Callable[[int], Node]) -> Node:
        node = factory(len(self.nodes))
        self.nodes.append(node)
        return node

    def parse(self) -> Node:
        expr = self.parse_iff()
        tok = self.current()
        if tok.kind is not TokenKind.END:
            raise ParseFailure(f"Unexpected '{tok.text}'", tok.pos)
        logger.debug("parsed %s into %d nodes", expr.expression, len(self.nodes))
        return expr

    def _parse_left_assoc(self, op: OpKind, operand: Callable[[], Node]) -> Node:
        left = operand()
        while self._at_op(op):
            self.advance()
            right = operand()
            lhs = left
            left = self._make(lambda i: Binary(op, lhs, right, node_id=i))
        return left

    def parse_iff(self) -> Node:
        """Parse biconditional (lowest precedence)."""
        return self._parse_left_assoc(OpKind.IFF, self.parse_implies)

    def parse_implies(self) -> Node:
        """Parse implication (left-associative)."""
        return self._parse_left_assoc(OpKind.IMPLIES, self.parse_xor)

    def parse_xor(self) -> Node:
        return self._parse_left_assoc(OpKind.XOR, self.parse_or)

    def parse_or(self) -> Node:
        return self._parse_left_assoc(OpKind.OR, self.parse_and)

    def parse_and(self) -> Node:
        return self._parse_left_assoc(OpKind.AND, self.parse_not)

    def parse_not(self) -> Node:
        """Parse negation; each ~ becomes its own node."""
        if self._at_op(OpKind.NOT):
            self.advance()
            operand = self.parse_not()
            return self._make(lambda i: Not(operand, node_id=i))
        return self.parse_factor()

    def parse_factor(self) -> Node:
        """Parse variables, constants and bracketed subexpressions."""
        tok = self.current()
        if tok.kind is TokenKind.VARIABLE:
            self.advance()
            return self._make(lambda i: Var(tok.text, node_id=i))
        if tok.kind is TokenKind.CONSTANT:
            self.advance()
            return self._make(lambda i: Const(bool(tok.value), node_id=i))
        if tok.kind is TokenKind.LEFT_GROUP:
            self.advance()
            inner = self.parse_iff()
            closer = self.current()
            if closer.kind is not TokenKind.RIGHT_GROUP or closer.group is not tok.group:
                raise ParseFailure(f"Expected '{tok.group.closer}'", closer.pos)
            self.advance()
            grouped = replace(inner, group_depth=inner.group_depth + 1)
            self.nodes[grouped.node_id] = grouped
            return grouped
        if tok.kind is TokenKind.END:
            raise ParseFailure("Unexpected end of expression", tok.pos)
        raise ParseFailure(f"Unexpected '{tok.text}'", tok.pos)


def parse(tokens: Sequence[Token]) -> Node:
    """Parse a token stream into an expression tree."""
    return Parser(tokens).parse()


def parse_formula(text: str) -> Node:
    """Tokenize, validate and parse formula text."""
    tokens = tokenize(text)
    check_syntax(tokens)
    return parse(tokens)


__all__ = ["Parser", "parse", "parse_formula"]
