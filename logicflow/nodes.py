"""
Immutable expression tree for propositional formulas.

Nodes are frozen dataclasses. Structural identity is plain dataclass
equality: ``node_id`` and ``group_depth`` are excluded from comparison and
hashing, so two occurrences of the same subformula compare equal however they
were bracketed in the source. Display text is derived from the tree and is
never used as an identity key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import total_ordering
from typing import FrozenSet, Iterator, Tuple

from logicflow.tokens import OpKind


@total_ordering
@dataclass(frozen=True, slots=True)
class Node(ABC):
    """Base class for AST nodes."""

    @abstractmethod
    def children(self) -> Tuple["Node", ...]:
        ...

    @abstractmethod
    def _render(self, canonical: bool) -> str:
        ...

    @property
    def expression(self) -> str:
        """Display string, keeping the brackets the source put around this node."""
        body = self._render(canonical=False)
        return "(" * self.group_depth + body + ")" * self.group_depth

    @property
    def grouped(self) -> bool:
        return self.group_depth > 0

    def canonical(self) -> str:
        """Bracket-independent rendering; equal trees render equally."""
        return self._render(canonical=True)

    def depth(self) -> int:
        kids = self.children()
        if not kids:
            return 0
        return 1 + max(k.depth() for k in kids)

    def __lt__(self, other: "Node") -> bool:
        return self.canonical() < other.canonical()


def operand_text(node: Node, canonical: bool) -> str:
    """Render a child, parenthesizing binary children that carry no brackets of their own."""
    if canonical:
        text = node.canonical()
        return f"({text})" if isinstance(node, Binary) else text
    if isinstance(node, Binary) and not node.grouped:
        return f"({node.expression})"
    return node.expression


@dataclass(frozen=True, slots=True)
class Var(Node):
    """Propositional variable."""
    name: str
    node_id: int = field(default=-1, compare=False)
    group_depth: int = field(default=0, compare=False)

    def children(self) -> Tuple[Node, ...]:
        return ()

    def _render(self, canonical: bool) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Const(Node):
    """Truth constant written as 0 or 1."""
    value: bool
    node_id: int = field(default=-1, compare=False)
    group_depth: int = field(default=0, compare=False)

    def children(self) -> Tuple[Node, ...]:
        return ()

    def _render(self, canonical: bool) -> str:
        return "1" if self.value else "0"


@dataclass(frozen=True, slots=True)
class Not(Node):
    """Negation."""
    operand: Node
    node_id: int = field(default=-1, compare=False)
    group_depth: int = field(default=0, compare=False)

    def children(self) -> Tuple[Node, ...]:
        return (self.operand,)

    def _render(self, canonical: bool) -> str:
        return OpKind.NOT.symbol + operand_text(self.operand, canonical)


@dataclass(frozen=True, slots=True)
class Binary(Node):
    """Binary connective: AND, OR, XOR, IMPLIES or IFF."""
    op: OpKind
    left: Node
    right: Node
    node_id: int = field(default=-1, compare=False)
    group_depth: int = field(default=0, compare=False)

    def __post_init__(self):
        if not self.op.is_binary:
            raise ValueError(f"Binary node cannot carry {self.op}")

    def children(self) -> Tuple[Node, ...]:
        return (self.left, self.right)

    def _render(self, canonical: bool) -> str:
        left = operand_text(self.left, canonical)
        right = operand_text(self.right, canonical)
        return f"{left} {self.op.symbol} {right}"


# ---------------------------------------------------------------------------
# Traversal helpers
# ---------------------------------------------------------------------------

def iter_postorder(node: Node) -> Iterator[Node]:
    """Yield every node, children before parents, left before right."""
    for child in node.children():
        yield from iter_postorder(child)
    yield node


def variables_of(node: Node) -> FrozenSet[str]:
    return frozenset(n.name for n in iter_postorder(node) if isinstance(n, Var))


def count_operators(node: Node) -> int:
    return sum(1 for n in iter_postorder(node) if isinstance(n, (Not, Binary)))


def main_connective(node: Node) -> str:
    """Name of the root connective: an operator name, VAR or CONST."""
    if isinstance(node, Var):
        return "VAR"
    if isinstance(node, Const):
        return "CONST"
    if isinstance(node, Not):
        return OpKind.NOT.value
    return node.op.value


__all__ = [
    "Node",
    "Var",
    "Const",
    "Not",
    "Binary",
    "iter_postorder",
    "variables_of",
    "count_operators",
    "main_connective",
    "operand_text",
]
