"""
Display transforms driven by settings.

Everything here works on rendered text only. Tree shape and evaluation never
depend on the negation display mode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from logicflow.config import NegationMode, TruthValueStyle
from logicflow.nodes import Binary, Node, operand_text
from logicflow.tokens import OpKind

_NEGATION_RUN_RE = re.compile(r"¬+")
_BRACKETED_LITERAL_RE = re.compile(r"\((¬?(?:[A-Z][0-9]*|[01]))\)")


def _collapse_negations(text: str) -> str:
    # A run of k negations keeps k mod 2 of them.
    return _NEGATION_RUN_RE.sub(lambda m: "¬" if len(m.group()) % 2 else "", text)


def apply_negation_mode(text: str, mode: NegationMode = NegationMode.PRESERVE) -> str:
    """
    Rewrite a rendered label according to ``mode``.

    preserve  -- unchanged
    normalize -- collapse double negations (``¬¬A`` becomes ``A``)
    simplify  -- normalize, and drop brackets around a lone literal
    """
    if mode is NegationMode.PRESERVE:
        return text
    out = _collapse_negations(text)
    if mode is NegationMode.SIMPLIFY:
        while True:
            stripped = _collapse_negations(_BRACKETED_LITERAL_RE.sub(r"\1", out))
            if stripped == out:
                break
            out = stripped
    return out


def format_value(value: Optional[bool], style: TruthValueStyle = TruthValueStyle.BINARY) -> str:
    if value is None:
        return ""
    if style is TruthValueStyle.LETTERS:
        return "T" if value else "F"
    return "1" if value else "0"


@dataclass(frozen=True)
class ImplicationForms:
    original: str
    converse: str
    inverse: str
    contrapositive: str


def _negated(node: Node) -> str:
    return OpKind.NOT.symbol + operand_text(node, canonical=False)


def implication_forms(ast: Node, mode: NegationMode = NegationMode.PRESERVE) -> Optional[ImplicationForms]:
    """Converse, inverse and contrapositive of an implication; None for any other root.

    The forms are labels, so ``mode`` rewrites them like any table header.
    """
    if not (isinstance(ast, Binary) and ast.op is OpKind.IMPLIES):
        return None
    arrow = OpKind.IMPLIES.symbol
    p = operand_text(ast.left, canonical=False)
    q = operand_text(ast.right, canonical=False)
    return ImplicationForms(
        original=apply_negation_mode(f"{p} {arrow} {q}", mode),
        converse=apply_negation_mode(f"{q} {arrow} {p}", mode),
        inverse=apply_negation_mode(f"{_negated(ast.left)} {arrow} {_negated(ast.right)}", mode),
        contrapositive=apply_negation_mode(f"{_negated(ast.right)} {arrow} {_negated(ast.left)}", mode),
    )


__all__ = [
    "apply_negation_mode",
    "format_value",
    "ImplicationForms",
    "implication_forms",
]
