"""
Truth-table construction and classification.

Rows enumerate every assignment of the declared variables. The bit-to-variable
mapping is fixed (the first declared variable is the most significant bit), so
a row's ``index`` is the same whichever display order is requested.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from logicflow.config import NegationMode, RowOrder
from logicflow.display import apply_negation_mode
from logicflow.errors import UndeclaredVariable
from logicflow.evaluate import evaluate_all
from logicflow.nodes import Const, Node, Var, iter_postorder, variables_of

logger = logging.getLogger(__name__)


class Classification(Enum):
    TAUTOLOGY = "Tautology"
    CONTRADICTION = "Contradiction"
    CONTINGENCY = "Contingency"


@dataclass(frozen=True)
class TableColumn:
    """One displayed quantity: an input variable or a distinct subexpression."""

    id: str
    label: str
    expression: str
    is_input: bool
    is_output: bool
    node_id: Optional[int] = None
    dependencies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TruthTableRow:
    """Values of every column for one assignment, keyed by column expression."""

    id: str
    index: int
    values: Dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class TruthTable:
    columns: List[TableColumn]
    rows: List[TruthTableRow]
    classification: Classification
    output_key: str

    def column(self, key: str) -> TableColumn:
        for col in self.columns:
            if col.expression == key:
                return col
        raise KeyError(key)

    def output_values(self) -> List[bool]:
        return [row.values.get(self.output_key, False) for row in self.rows]


def check_declared(ast: Node, variables: Sequence[str]) -> None:
    """Raise UndeclaredVariable when ``ast`` uses a name outside ``variables``."""
    missing = sorted(variables_of(ast) - set(variables))
    if missing:
        raise UndeclaredVariable(missing)


def assignment_for_index(index: int, variables: Sequence[str]) -> Dict[str, bool]:
    """Decode a row index; the first variable is the most significant bit."""
    n = len(variables)
    return {v: bool((index >> (n - 1 - k)) & 1) for k, v in enumerate(variables)}


def classify_values(values: Iterable[bool]) -> Classification:
    values = list(values)
    if not values:
        raise ValueError("Cannot classify an empty result column")
    if all(values):
        return Classification.TAUTOLOGY
    if not any(values):
        return Classification.CONTRADICTION
    return Classification.CONTINGENCY


def classify_rows(rows: Sequence[TruthTableRow], output_key: str) -> Classification:
    return classify_values(row.values.get(output_key, False) for row in rows)


def _derived_nodes(ast: Node, include_subexpressions: bool) -> List[Node]:
    """Distinct compound subexpressions in post-order, always ending with the root."""
    if not include_subexpressions:
        return [] if isinstance(ast, Var) else [ast]
    seen = set()
    out: List[Node] = []
    for node in iter_postorder(ast):
        if isinstance(node, Var):
            continue
        if isinstance(node, Const) and node is not ast:
            continue
        if node in seen:
            continue
        seen.add(node)
        out.append(node)
    return out


def build_columns(
    ast: Node,
    variables: Sequence[str],
    include_subexpressions: bool = True,
    negation_mode: NegationMode = NegationMode.PRESERVE,
) -> List[TableColumn]:
    output_key = ast.canonical()
    columns = [
        TableColumn(
            id=f"var:{v}",
            label=v,
            expression=v,
            is_input=True,
            is_output=(v == output_key),
        )
        for v in variables
    ]
    for node in _derived_nodes(ast, include_subexpressions):
        key = node.canonical()
        columns.append(
            TableColumn(
                id=f"node:{node.node_id}",
                label=apply_negation_mode(node.expression, negation_mode),
                expression=key,
                is_input=False,
                is_output=(key == output_key),
                node_id=node.node_id,
                dependencies=tuple(child.canonical() for child in node.children()),
            )
        )
    return columns


def _nodes_by_key(ast: Node) -> Dict[str, Node]:
    return {n.canonical(): n for n in iter_postorder(ast)}


def build_truth_table(
    ast: Node,
    variables: Sequence[str],
    row_order: RowOrder = RowOrder.ASCENDING,
    include_subexpressions: bool = True,
    negation_mode: NegationMode = NegationMode.PRESERVE,
) -> TruthTable:
    """
    Evaluate ``ast`` over all 2^n assignments of ``variables``.

    Args:
        ast: Parsed formula.
        variables: Declared variable order; defines columns and bit order.
        row_order: Display order; never changes which assignment a row index means.
        include_subexpressions: Emit a column per distinct intermediate subexpression.
        negation_mode: Label rendering only.

    Returns:
        TruthTable with columns, rows and the classification of the output.

    Raises:
        UndeclaredVariable: if ``ast`` references a variable not in ``variables``.
    """
    variables = list(variables)
    check_declared(ast, variables)

    columns = build_columns(ast, variables, include_subexpressions, negation_mode)
    by_key = _nodes_by_key(ast)
    derived = [(col.expression, by_key[col.expression]) for col in columns if not col.is_input]
    output_key = ast.canonical()

    total = 1 << len(variables)
    rows: List[TruthTableRow] = []
    for i in range(total):
        index = i if row_order is RowOrder.ASCENDING else total - 1 - i
        assignment = assignment_for_index(index, variables)
        memo = evaluate_all(ast, assignment)
        values = dict(assignment)
        for key, node in derived:
            values[key] = memo[node]
        values.setdefault(output_key, memo[ast])
        rows.append(TruthTableRow(id=f"row-{index}", index=index, values=values))

    classification = classify_rows(rows, output_key)
    logger.debug(
        "truth table for %s: %d columns, %d rows, %s",
        output_key, len(columns), len(rows), classification.value,
    )
    return TruthTable(columns=columns, rows=rows, classification=classification, output_key=output_key)


def recalculate_row(row: TruthTableRow, columns: Sequence[TableColumn], ast: Node) -> TruthTableRow:
    """Recompute every derived column of ``row`` from its current input values."""
    assignment = {col.expression: row.values.get(col.expression, False) for col in columns if col.is_input}
    memo = evaluate_all(ast, assignment)
    by_key = _nodes_by_key(ast)
    values = dict(row.values)
    for col in columns:
        if not col.is_input:
            values[col.expression] = memo[by_key[col.expression]]
    values[ast.canonical()] = memo[ast]
    return replace(row, values=values)


def set_cell(
    row: TruthTableRow,
    column: TableColumn,
    value: bool,
    columns: Sequence[TableColumn],
    ast: Node,
) -> TruthTableRow:
    """
    Edit one cell.

    Editing an input recomputes the row's derived columns. Editing a derived
    column is an explicit override and is left exactly as written.
    """
    values = dict(row.values)
    values[column.expression] = bool(value)
    edited = replace(row, values=values)
    if column.is_input:
        return recalculate_row(edited, columns, ast)
    return edited


__all__ = [
    "Classification",
    "TableColumn",
    "TruthTableRow",
    "TruthTable",
    "check_declared",
    "assignment_for_index",
    "classify_values",
    "classify_rows",
    "build_columns",
    "build_truth_table",
    "recalculate_row",
    "set_cell",
]
