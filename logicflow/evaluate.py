"""Evaluation of expression trees under a variable assignment."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from logicflow.errors import UndeclaredVariable
from logicflow.nodes import Binary, Const, Node, Not, Var
from logicflow.tokens import OpKind

_BINARY_SEMANTICS = {
    OpKind.AND: lambda a, b: a and b,
    OpKind.OR: lambda a, b: a or b,
    OpKind.IMPLIES: lambda a, b: (not a) or b,
    OpKind.IFF: lambda a, b: a == b,
    OpKind.XOR: lambda a, b: a != b,
}


def apply_operator(op: OpKind, left: bool, right: bool) -> bool:
    return _BINARY_SEMANTICS[op](left, right)


def evaluate(node: Node, assignment: Mapping[str, bool]) -> bool:
    """
    Evaluate ``node`` with variables bound by ``assignment``.

    Raises:
        UndeclaredVariable: if the tree references a variable with no binding.
    """
    if isinstance(node, Const):
        return node.value
    if isinstance(node, Var):
        try:
            return bool(assignment[node.name])
        except KeyError:
            raise UndeclaredVariable([node.name]) from None
    if isinstance(node, Not):
        return not evaluate(node.operand, assignment)
    if isinstance(node, Binary):
        left = evaluate(node.left, assignment)
        right = evaluate(node.right, assignment)
        return apply_operator(node.op, left, right)
    raise TypeError(f"Unknown node type: {type(node)}")


def evaluate_all(
    node: Node,
    assignment: Mapping[str, bool],
    memo: Optional[Dict[Node, bool]] = None,
) -> Dict[Node, bool]:
    """
    Evaluate every distinct subexpression of ``node`` exactly once.

    Returns a mapping keyed by structural node identity, so repeated
    subformulas share one entry.
    """
    if memo is None:
        memo = {}
    if node in memo:
        return memo

    if isinstance(node, Const):
        memo[node] = node.value
    elif isinstance(node, Var):
        memo[node] = evaluate(node, assignment)
    elif isinstance(node, Not):
        evaluate_all(node.operand, assignment, memo)
        memo[node] = not memo[node.operand]
    elif isinstance(node, Binary):
        evaluate_all(node.left, assignment, memo)
        evaluate_all(node.right, assignment, memo)
        memo[node] = apply_operator(node.op, memo[node.left], memo[node.right])
    else:
        raise TypeError(f"Unknown node type: {type(node)}")
    return memo


__all__ = ["evaluate", "evaluate_all", "apply_operator"]
