#!/usr/bin/env python3
"""
LogicFlow command line interface.

Commands:
    analyze   Truth table, classification and derived forms for a formula
    prove     Tableau (shortened truth table) proof attempt
    kmap      Karnaugh map and minimized expression (2-4 variables)

Variables default to the ones detected in the formula, sorted by name.
User errors print ``[ERROR] <code>: <message>`` and exit with status 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

from logicflow.analysis import AnalysisResult, analyze_logic, prove_logic
from logicflow.config import EngineSettings, resolve_settings
from logicflow.display import format_value
from logicflow.errors import ConfigError, LogicError, ProofSearchError
from logicflow.export import FORMATS, render_table
from logicflow.history import HistoryLog
from logicflow.kmap import KMapData
from logicflow.tableau import Branch, ProofType, TableauReport
from logicflow.tokens import extract_variables

logger = logging.getLogger("logicflow")


def _parse_vars(raw: Optional[str], expression: str) -> List[str]:
    if raw:
        return [v for v in raw.replace(" ", "").split(",") if v]
    return extract_variables(expression)


def _kmap_lines(kmap: KMapData, settings: EngineSettings) -> List[str]:
    corner = "".join(kmap.row_variables) + "\\" + "".join(kmap.col_variables)
    lines = [" ".join([corner.rjust(6)] + [label.rjust(3) for label in kmap.col_labels])]
    for label, cells in zip(kmap.row_labels, kmap.grid):
        lines.append(" ".join([label.rjust(6)] + [format_value(c.value, settings.truth_values).rjust(3) for c in cells]))
    for group in kmap.groups:
        lines.append(f"  group m{list(group.minterms)}: {group.term}")
    lines.append(f"Minimized: {kmap.minimized_expression}")
    return lines


def _branch_lines(branch: Branch, indent: int = 0) -> List[str]:
    pad = "  " * indent
    lines = [f"{pad}[{branch.status.value}] {branch.label or branch.id}"]
    for step in branch.steps:
        lines.append(f"{pad}  - {step.description}")
    for child in branch.children:
        lines.extend(_branch_lines(child, indent + 1))
    return lines


def _report_lines(report: TableauReport) -> List[str]:
    lines = [f"{report.title}: {report.result.value}", report.summary]
    lines.extend(_branch_lines(report.root))
    if report.counter_example:
        pairs = ", ".join(f"{k}={int(v)}" for k, v in report.counter_example.items())
        lines.append(f"Counter-example: {pairs}")
    return lines


def _report_dict(report: TableauReport) -> Dict[str, Any]:
    return {
        "target": report.target.value,
        "title": report.title,
        "result": report.result.value,
        "summary": report.summary,
        "counter_example": report.counter_example,
        "forced_variables": list(report.forced_variables),
        "witnesses": report.witnesses,
    }


def _analysis_dict(result: AnalysisResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "expression": result.ast.expression,
        "variables": result.variables,
        "classification": result.classification.value,
        "main_connective": result.main_connective,
        "columns": [c.label for c in result.columns],
        "rows": [
            {"index": r.index, "values": {c.label: r.values.get(c.expression) for c in result.columns}}
            for r in result.rows
        ],
    }
    if result.implication_forms is not None:
        forms = result.implication_forms
        data["implication_forms"] = {
            "original": forms.original,
            "converse": forms.converse,
            "inverse": forms.inverse,
            "contrapositive": forms.contrapositive,
        }
    if result.kmap is not None:
        data["kmap"] = {
            "minimized_expression": result.kmap.minimized_expression,
            "groups": [{"minterms": list(g.minterms), "term": g.term} for g in result.kmap.groups],
        }
    if result.shortcut is not None and result.shortcut.active:
        data["shortcut"] = {"rule": result.shortcut.rule, "explanation": result.shortcut.explanation}
    if result.complexity is not None:
        data["complexity_score"] = result.complexity.complexity_score
    if result.tableau is not None:
        data["tableau"] = _report_dict(result.tableau)
    return data


def cmd_analyze(args: argparse.Namespace, settings: EngineSettings) -> int:
    variables = _parse_vars(args.vars, args.formula)
    target = ProofType.parse(args.prove) if args.prove else None
    result = analyze_logic(args.formula, variables, settings, proof_target=target)

    if args.history:
        with HistoryLog(args.history) as history:
            history.record(args.formula, result.variables, result.classification.value)

    if args.json:
        print(json.dumps(_analysis_dict(result), indent=2, ensure_ascii=False))
        return 0

    print(f"Expression: {result.ast.expression}")
    print(render_table(result.rows, result.columns, args.format, settings.truth_values))
    print(f"Classification: {result.classification.value}")
    if result.shortcut is not None and result.shortcut.active:
        print(f"Shortcut: {result.shortcut.rule} - {result.shortcut.explanation}")
    if result.implication_forms is not None:
        forms = result.implication_forms
        print(f"Converse: {forms.converse}")
        print(f"Inverse: {forms.inverse}")
        print(f"Contrapositive: {forms.contrapositive}")
    if result.kmap is not None:
        print(f"K-Map minimized: {result.kmap.minimized_expression}")
    if result.tableau is not None:
        print("\n".join(_report_lines(result.tableau)))
    return 0


def cmd_prove(args: argparse.Namespace, settings: EngineSettings) -> int:
    variables = _parse_vars(args.vars, args.formula)
    target = ProofType.parse(args.target)
    report = prove_logic(args.formula, variables, target)
    if args.json:
        print(json.dumps(_report_dict(report), indent=2, ensure_ascii=False))
    else:
        print("\n".join(_report_lines(report)))
    return 0


def cmd_kmap(args: argparse.Namespace, settings: EngineSettings) -> int:
    variables = _parse_vars(args.vars, args.formula)
    result = analyze_logic(args.formula, variables, settings)
    if result.kmap is None:
        print(f"[WARN] K-Maps need 2 to 4 variables, got {len(result.variables)}")
        return 2
    print("\n".join(_kmap_lines(result.kmap, settings)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logicflow", description="Propositional logic evaluation engine.")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("formula", help="Formula, e.g. 'P -> Q' or '(A & B) | ~C'.")
        p.add_argument("--vars", default=None, help="Comma-separated declared variables, in bit order.")
        p.add_argument("--json", action="store_true", help="Emit JSON instead of text.")
        p.add_argument("--settings", type=Path, default=None, help="YAML settings file (default: $LOGICFLOW_SETTINGS).")
        p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    p_analyze = sub.add_parser("analyze", help="Build the truth table and classify the formula.")
    add_common(p_analyze)
    p_analyze.add_argument("--format", choices=FORMATS, default="markdown", help="Table format.")
    p_analyze.add_argument("--prove", default=None, help="Also run a tableau proof of this type.")
    p_analyze.add_argument("--history", type=Path, default=None, help="Append the analysis to this JSONL history.")
    p_analyze.set_defaults(func=cmd_analyze)

    p_prove = sub.add_parser("prove", help="Run a tableau proof attempt.")
    add_common(p_prove)
    p_prove.add_argument(
        "--target",
        default="tautology",
        help="tautology | contradiction | implication | equivalence | contingency",
    )
    p_prove.set_defaults(func=cmd_prove)

    p_kmap = sub.add_parser("kmap", help="Show the Karnaugh map.")
    add_common(p_kmap)
    p_kmap.set_defaults(func=cmd_kmap)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        settings = resolve_settings(args.settings)
        logger.debug("settings: %s", settings.to_dict())
        return args.func(args, settings)
    except LogicError as exc:
        print(f"[ERROR] {exc.code}: {exc}")
        return 1
    except ProofSearchError as exc:
        print(f"[ERROR] ProofSearchError: {exc}")
        return 1
    except (ConfigError, ValueError) as exc:
        print(f"[ERROR] {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
