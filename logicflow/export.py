"""Plain-text renderings of a truth table: CSV, Markdown and LaTeX."""

from __future__ import annotations

import csv
import io
from typing import List, Sequence, Tuple

from logicflow.config import TruthValueStyle
from logicflow.display import format_value
from logicflow.truthtable import TableColumn, TruthTableRow

FORMATS = ("csv", "markdown", "latex")


def table_data(
    rows: Sequence[TruthTableRow],
    columns: Sequence[TableColumn],
    style: TruthValueStyle = TruthValueStyle.BINARY,
) -> Tuple[List[str], List[List[str]]]:
    header = [c.label for c in columns]
    data = [[format_value(r.values.get(c.expression), style) for c in columns] for r in rows]
    return header, data


def to_csv(rows, columns, style: TruthValueStyle = TruthValueStyle.BINARY) -> str:
    header, data = table_data(rows, columns, style)
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(data)
    return buf.getvalue().rstrip("\n")


def to_markdown(rows, columns, style: TruthValueStyle = TruthValueStyle.BINARY) -> str:
    header, data = table_data(rows, columns, style)
    lines = [
        f"| {' | '.join(header)} |",
        f"| {' | '.join('---' for _ in header)} |",
    ]
    lines.extend(f"| {' | '.join(row)} |" for row in data)
    return "\n".join(lines)


def to_latex(rows, columns, style: TruthValueStyle = TruthValueStyle.BINARY) -> str:
    header, data = table_data(rows, columns, style)
    colspec = "|" + "|".join("c" for _ in header) + "|"
    lines = [f"\\begin{{tabular}}{{{colspec}}}", "\\hline", " & ".join(header) + " \\\\", "\\hline"]
    lines.extend(" & ".join(row) + " \\\\" for row in data)
    lines.extend(["\\hline", "\\end{tabular}"])
    return "\n".join(lines)


def render_table(
    rows: Sequence[TruthTableRow],
    columns: Sequence[TableColumn],
    fmt: str = "markdown",
    style: TruthValueStyle = TruthValueStyle.BINARY,
) -> str:
    renderers = {"csv": to_csv, "markdown": to_markdown, "latex": to_latex}
    try:
        renderer = renderers[fmt]
    except KeyError:
        raise ValueError(f"Unknown table format {fmt!r}; expected one of {', '.join(FORMATS)}") from None
    return renderer(rows, columns, style)


__all__ = ["FORMATS", "table_data", "to_csv", "to_markdown", "to_latex", "render_table"]
