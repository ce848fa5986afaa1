"""
Syntax validation over a token stream.

A single forward scan with a bracket stack. The first problem found is
reported with a specific diagnostic; the parser is never relied upon for
user-facing error messages.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from logicflow.errors import (
    AdjacentOperators,
    BracketMismatch,
    EmptyExpression,
    EmptyGroup,
    IncompleteExpression,
    LogicError,
    MissingOperator,
    UnclosedBracket,
)
from logicflow.tokens import Token, TokenKind


def _describe(tok: Token) -> str:
    if tok.kind is TokenKind.OPERATOR and tok.op is not None:
        return tok.op.symbol
    return tok.text


def validate(tokens: Sequence[Token]) -> Optional[LogicError]:
    """
    Lint a token stream.

    Args:
        tokens: Output of ``tokenize`` (terminated by an END token).

    Returns:
        The first diagnostic found, or None when the stream is well formed.
    """
    body = [t for t in tokens if t.kind is not TokenKind.END]
    if not body:
        return EmptyExpression()

    stack: List[Token] = []
    prev: Optional[Token] = None

    for tok in body:
        if tok.is_binary_operator:
            if prev is not None and prev.kind is TokenKind.OPERATOR:
                return AdjacentOperators(
                    f"Operators '{_describe(prev)}' and '{_describe(tok)}' are adjacent; "
                    f"an operand is missing between them",
                    tok.pos,
                )
            if prev is None or prev.kind is TokenKind.LEFT_GROUP:
                return IncompleteExpression(
                    f"Operator '{_describe(tok)}' has no left operand", tok.pos
                )

        elif tok.is_operand or tok.is_negation or tok.kind is TokenKind.LEFT_GROUP:
            if prev is not None and (prev.is_operand or prev.kind is TokenKind.RIGHT_GROUP):
                return MissingOperator(
                    f"Missing operator between '{_describe(prev)}' and '{_describe(tok)}'; "
                    f"did you mean '{prev.text} ∧ {tok.text}'?",
                    tok.pos,
                )
            if tok.kind is TokenKind.LEFT_GROUP:
                stack.append(tok)

        elif tok.kind is TokenKind.RIGHT_GROUP:
            if not stack:
                return BracketMismatch(f"Closing '{tok.text}' has no matching opener", tok.pos)
            opener = stack[-1]
            if opener.group is not tok.group:
                return BracketMismatch(
                    f"'{opener.text}' at position {opener.pos + 1} is closed by '{tok.text}'",
                    tok.pos,
                )
            if prev is opener:
                return EmptyGroup(f"Empty group '{opener.text}{tok.text}'", opener.pos)
            if prev is not None and prev.kind is TokenKind.OPERATOR:
                return IncompleteExpression(
                    f"Operator '{_describe(prev)}' has no right operand before '{tok.text}'",
                    prev.pos,
                )
            stack.pop()

        prev = tok

    if prev is not None and prev.kind is TokenKind.OPERATOR:
        return IncompleteExpression(
            f"Expression ends with operator '{_describe(prev)}'", prev.pos
        )
    if stack:
        opener = stack[-1]
        return UnclosedBracket(f"'{opener.text}' is never closed", opener.pos)
    return None


def check_syntax(tokens: Sequence[Token]) -> None:
    """Raise the first diagnostic reported by ``validate``."""
    error = validate(tokens)
    if error is not None:
        raise error
