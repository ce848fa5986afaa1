"""
Karnaugh map generation with greedy rectangle grouping.

Supports 2 to 4 variables. Row and column labels follow Gray-code order so
that neighbouring cells (including across the edges) differ in one bit.

Grouping is greedy: rectangle sizes are tried by decreasing area and a
placement is accepted when all of its cells are true and it covers at least
one true cell not yet covered. This is not guaranteed to produce a minimal
cover; essential prime implicant selection is not performed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from logicflow.truthtable import TruthTableRow

logger = logging.getLogger(__name__)

MIN_KMAP_VARIABLES = 2
MAX_KMAP_VARIABLES = 4

_GRAY_CODES = {
    1: ["0", "1"],
    2: ["00", "01", "11", "10"],
}

# Equal areas keep this order: tall before square before wide.
_RECT_SIZES: List[Tuple[int, int]] = sorted(
    [(h, w) for h in (4, 2, 1) for w in (1, 2, 4)],
    key=lambda hw: -(hw[0] * hw[1]),
)


@dataclass(frozen=True)
class KMapCell:
    value: bool
    minterm_index: int


@dataclass(frozen=True)
class KMapGroup:
    cells: Tuple[Tuple[int, int], ...]
    minterms: Tuple[int, ...]
    term: str


@dataclass(frozen=True)
class KMapData:
    grid: List[List[KMapCell]]
    row_labels: List[str]
    col_labels: List[str]
    row_variables: List[str]
    col_variables: List[str]
    variables: List[str]
    groups: List[KMapGroup]
    minimized_expression: str

    def true_minterms(self) -> Set[int]:
        return {cell.minterm_index for row in self.grid for cell in row if cell.value}

    def covered_minterms(self) -> Set[int]:
        return {m for group in self.groups for m in group.minterms}


def gray_code(bits: int) -> List[str]:
    try:
        return list(_GRAY_CODES[bits])
    except KeyError:
        raise ValueError(f"Gray code labels are defined for 1 or 2 bits, got {bits}") from None


def split_variables(variables: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Row/column split: 2 vars 1/1, 3 vars 1/2, 4 vars 2/2."""
    variables = list(variables)
    if len(variables) == 2:
        return variables[:1], variables[1:]
    if len(variables) == 3:
        return variables[:1], variables[1:]
    return variables[:2], variables[2:]


def term_for_minterms(minterms: Sequence[int], variables: Sequence[str]) -> str:
    """
    Product term for a group: bits constant across the group are kept.

    A constant 1 contributes the variable, a constant 0 its negation. A group
    with no constant bit covers every cell and projects to ``1``.
    """
    n = len(variables)
    literals = []
    for k, name in enumerate(variables):
        shift = n - 1 - k
        bits = {(m >> shift) & 1 for m in minterms}
        if len(bits) == 1:
            literals.append(name if bits.pop() else f"¬{name}")
    if not literals:
        return "1"
    return "∧".join(literals)


def _placements(n_rows: int, n_cols: int, h: int, w: int):
    """Distinct toroidal placements of an h x w rectangle."""
    seen = set()
    for r0 in range(n_rows):
        for c0 in range(n_cols):
            rows = np.arange(r0, r0 + h) % n_rows
            cols = np.arange(c0, c0 + w) % n_cols
            key = (frozenset(rows.tolist()), frozenset(cols.tolist()))
            if key in seen:
                continue
            seen.add(key)
            yield rows, cols


def find_groups(values: np.ndarray, minterms: np.ndarray, variables: Sequence[str]) -> List[KMapGroup]:
    n_rows, n_cols = values.shape
    covered = np.zeros_like(values, dtype=bool)
    groups: List[KMapGroup] = []

    for h, w in _RECT_SIZES:
        if h > n_rows or w > n_cols:
            continue
        for rows, cols in _placements(n_rows, n_cols, h, w):
            block = np.ix_(rows, cols)
            if not values[block].all():
                continue
            if covered[block].all():
                continue
            covered[block] = True
            cells = tuple((int(r), int(c)) for r in rows for c in cols)
            group_minterms = tuple(int(minterms[r, c]) for r, c in cells)
            groups.append(
                KMapGroup(
                    cells=cells,
                    minterms=group_minterms,
                    term=term_for_minterms(group_minterms, variables),
                )
            )
    return groups


def generate_kmap(
    variables: Sequence[str],
    rows: Sequence[TruthTableRow],
    output_key: str,
) -> Optional[KMapData]:
    """
    Lay truth-table rows onto a Karnaugh map and group the true cells.

    Args:
        variables: Declared variables, most significant first.
        rows: Truth-table rows; a row's ``index`` is its minterm.
        output_key: Column key of the formula's result.

    Returns:
        KMapData, or None outside the 2-4 variable range.
    """
    variables = list(variables)
    if not MIN_KMAP_VARIABLES <= len(variables) <= MAX_KMAP_VARIABLES:
        return None

    row_vars, col_vars = split_variables(variables)
    row_labels = gray_code(len(row_vars))
    col_labels = gray_code(len(col_vars))

    by_minterm: Dict[int, bool] = {row.index: bool(row.values.get(output_key, False)) for row in rows}

    minterms = np.array(
        [[int(r + c, 2) for c in col_labels] for r in row_labels],
        dtype=int,
    )
    values = np.vectorize(lambda m: by_minterm.get(int(m), False), otypes=[bool])(minterms)

    grid = [
        [KMapCell(value=bool(values[r, c]), minterm_index=int(minterms[r, c])) for c in range(len(col_labels))]
        for r in range(len(row_labels))
    ]

    groups = find_groups(values, minterms, variables)
    if groups:
        minimized = " ∨ ".join(g.term for g in groups)
    else:
        minimized = "0"

    logger.debug("k-map over %s: %d groups, minimized %s", variables, len(groups), minimized)
    return KMapData(
        grid=grid,
        row_labels=row_labels,
        col_labels=col_labels,
        row_variables=row_vars,
        col_variables=col_vars,
        variables=variables,
        groups=groups,
        minimized_expression=minimized,
    )


__all__ = [
    "KMapCell",
    "KMapGroup",
    "KMapData",
    "gray_code",
    "split_variables",
    "term_for_minterms",
    "find_groups",
    "generate_kmap",
    "MIN_KMAP_VARIABLES",
    "MAX_KMAP_VARIABLES",
]
