"""
Tokenizer for propositional formulas.

Accepts ASCII and Unicode spellings of every connective and maps them to a
canonical ``OpKind``. Tokenization is total: characters that belong to no
token are skipped and recorded on the ``Tokenizer`` so that callers can report
them, but ``tokenize`` itself never raises.

Usage:
    from logicflow.tokens import tokenize

    tokens = tokenize("(p -> q) & ~r")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


# ---------------------------------------------------------------------------
# Operator and bracket kinds
# ---------------------------------------------------------------------------

class OpKind(Enum):
    """Connectives, named by their canonical spelling."""
    NOT = "NOT"
    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    IMPLIES = "IMPLIES"
    IFF = "IFF"

    @property
    def symbol(self) -> str:
        return _DISPLAY_SYMBOLS[self]

    @property
    def is_binary(self) -> bool:
        return self is not OpKind.NOT


_DISPLAY_SYMBOLS = {
    OpKind.NOT: "¬",
    OpKind.AND: "∧",
    OpKind.OR: "∨",
    OpKind.XOR: "⊕",
    OpKind.IMPLIES: "→",
    OpKind.IFF: "↔",
}


class GroupKind(Enum):
    """Bracket families. Each family only closes itself."""
    PAREN = "()"
    BRACKET = "[]"
    BRACE = "{}"

    @property
    def opener(self) -> str:
        return self.value[0]

    @property
    def closer(self) -> str:
        return self.value[1]


class TokenKind(Enum):
    VARIABLE = "VARIABLE"
    CONSTANT = "CONSTANT"
    OPERATOR = "OPERATOR"
    LEFT_GROUP = "LEFT_GROUP"
    RIGHT_GROUP = "RIGHT_GROUP"
    END = "END"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    pos: int
    op: Optional[OpKind] = None
    group: Optional[GroupKind] = None
    value: Optional[bool] = None

    @property
    def is_operand(self) -> bool:
        return self.kind in (TokenKind.VARIABLE, TokenKind.CONSTANT)

    @property
    def is_binary_operator(self) -> bool:
        return self.kind is TokenKind.OPERATOR and self.op is not None and self.op.is_binary

    @property
    def is_negation(self) -> bool:
        return self.kind is TokenKind.OPERATOR and self.op is OpKind.NOT


# ---------------------------------------------------------------------------
# Spellings
# ---------------------------------------------------------------------------

_OPERATOR_SPELLINGS = [
    # negation
    ("NOT", OpKind.NOT), ("¬", OpKind.NOT), ("!", OpKind.NOT), ("~", OpKind.NOT), ("-", OpKind.NOT),
    # conjunction / disjunction
    ("AND", OpKind.AND), ("&&", OpKind.AND), ("∧", OpKind.AND), ("&", OpKind.AND),
    ("OR", OpKind.OR), ("||", OpKind.OR), ("∨", OpKind.OR), ("|", OpKind.OR), ("+", OpKind.OR),
    # exclusive or
    ("XOR", OpKind.XOR), ("⊕", OpKind.XOR), ("^", OpKind.XOR),
    # implications / equivalences
    ("IMPLIES", OpKind.IMPLIES), ("->", OpKind.IMPLIES), ("=>", OpKind.IMPLIES), ("→", OpKind.IMPLIES),
    ("IFF", OpKind.IFF), ("<->", OpKind.IFF), ("<=>", OpKind.IFF), ("↔", OpKind.IFF),
]

# Longest spelling first so "<->" is never read as "<" followed by "->".
_OPERATOR_SPELLINGS.sort(key=lambda item: len(item[0]), reverse=True)

_GROUP_CHARS = {}
for _kind in GroupKind:
    _GROUP_CHARS[_kind.opener] = (TokenKind.LEFT_GROUP, _kind)
    _GROUP_CHARS[_kind.closer] = (TokenKind.RIGHT_GROUP, _kind)

_VARIABLE_RE = re.compile(r"[A-Z][0-9]*")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Uppercase the formula and trim surrounding whitespace."""
    if text is None:
        return ""
    return text.upper().strip()


class Tokenizer:
    """Single-pass scanner over normalized formula text."""

    def __init__(self, text: str):
        self.text = normalize_text(text)
        self.pos = 0
        self.skipped: List[Tuple[int, str]] = []

    def run(self) -> List[Token]:
        tokens: List[Token] = []
        s = self.text
        while self.pos < len(s):
            token = self._next_token()
            if token is not None:
                tokens.append(token)
        tokens.append(Token(TokenKind.END, "", self.pos))
        return tokens

    def _next_token(self) -> Optional[Token]:
        s, pos = self.text, self.pos

        # Whitespace separates tokens but never forms one: "X OR Y" is not "XOR".
        m = _WHITESPACE_RE.match(s, pos)
        if m:
            self.pos = m.end()
            return None

        for spelling, op in _OPERATOR_SPELLINGS:
            if s.startswith(spelling, pos):
                self.pos += len(spelling)
                return Token(TokenKind.OPERATOR, spelling, pos, op=op)

        ch = s[pos]
        if ch in _GROUP_CHARS:
            kind, group = _GROUP_CHARS[ch]
            self.pos += 1
            return Token(kind, ch, pos, group=group)

        if ch in "01":
            self.pos += 1
            return Token(TokenKind.CONSTANT, ch, pos, value=(ch == "1"))

        m = _VARIABLE_RE.match(s, pos)
        if m:
            self.pos = m.end()
            return Token(TokenKind.VARIABLE, m.group(), pos)

        self.skipped.append((pos, ch))
        self.pos += 1
        return None


def tokenize(text: str) -> List[Token]:
    """Tokenize a formula; unrecognized characters are dropped."""
    return Tokenizer(text).run()


def extract_variables(text: str) -> List[str]:
    """Return the sorted distinct variable names referenced by ``text``."""
    names = {t.text for t in tokenize(text) if t.kind is TokenKind.VARIABLE}
    return sorted(names)


__all__ = [
    "OpKind",
    "GroupKind",
    "TokenKind",
    "Token",
    "Tokenizer",
    "tokenize",
    "normalize_text",
    "extract_variables",
]
