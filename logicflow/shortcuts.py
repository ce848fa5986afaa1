"""
"Right away" rules: results that can be read off the root without a table.

These only inspect the root connective and its immediate children. Matching
uses structural equality, so ``(A) -> A`` is recognised as self-implication.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from logicflow.nodes import Binary, Const, Node, Not
from logicflow.tokens import OpKind


@dataclass(frozen=True)
class ShortcutResult:
    active: bool
    value: Optional[Union[bool, str]] = None
    rule: Optional[str] = None
    explanation: Optional[str] = None


_INACTIVE = ShortcutResult(active=False)


def _is_const(node: Node, value: bool) -> bool:
    return isinstance(node, Const) and node.value is value


def _complementary(a: Node, b: Node) -> bool:
    return (isinstance(b, Not) and b.operand == a) or (isinstance(a, Not) and a.operand == b)


def check_right_away(ast: Node) -> ShortcutResult:
    """Return the first shortcut rule that decides ``ast``, if any."""
    if isinstance(ast, Const):
        return ShortcutResult(
            True, ast.value, "Constant",
            f"Expression is a constant {'True' if ast.value else 'False'}",
        )
    if not isinstance(ast, Binary):
        return _INACTIVE

    L, R = ast.left, ast.right

    if ast.op is OpKind.IMPLIES:
        if _is_const(L, False):
            return ShortcutResult(
                True, True, "Vacuously True",
                "An implication with a False antecedent is always True (0 → X ≡ 1).",
            )
        if _is_const(R, True):
            return ShortcutResult(
                True, True, "Tautological Consequent",
                "An implication with a True consequent is always True (X → 1 ≡ 1).",
            )
        if _is_const(L, True):
            return ShortcutResult(True, R.expression, "Reduction", "1 → X reduces to X.")
        if L == R:
            return ShortcutResult(True, True, "Self-Implication", "X → X is always True.")

    if ast.op is OpKind.AND:
        if _is_const(L, False) or _is_const(R, False):
            return ShortcutResult(True, False, "Domination", "AND with False is always False.")
        if _complementary(L, R):
            return ShortcutResult(True, False, "Contradiction", "X ∧ ¬X is always False.")

    if ast.op is OpKind.OR:
        if _is_const(L, True) or _is_const(R, True):
            return ShortcutResult(True, True, "Domination", "OR with True is always True.")
        if _complementary(L, R):
            return ShortcutResult(True, True, "Excluded Middle", "X ∨ ¬X is always True.")

    return _INACTIVE


__all__ = ["ShortcutResult", "check_right_away"]
