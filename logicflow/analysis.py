"""
Engine facade: formula text and declared variables in, full analysis out.

Analysis is all-or-nothing. Every diagnostic (unknown symbols, syntax,
undeclared variables) is raised before any table, K-Map or proof work starts.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from logicflow.config import EngineSettings
from logicflow.display import ImplicationForms, implication_forms
from logicflow.errors import EmptyExpression, NestingTooDeep, UnknownSymbol
from logicflow.kmap import KMapData, generate_kmap
from logicflow.nodes import Node, count_operators, main_connective
from logicflow.parser import parse
from logicflow.shortcuts import ShortcutResult, check_right_away
from logicflow.tableau import ProofType, TableauReport, generate_report
from logicflow.tokens import Tokenizer
from logicflow.truthtable import (
    Classification,
    TableColumn,
    TruthTableRow,
    build_truth_table,
    check_declared,
    classify_rows,
)
from logicflow.validate import check_syntax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComplexityMetrics:
    variable_count: int
    operator_count: int
    depth: int
    row_count: int
    complexity_score: float


@dataclass(frozen=True)
class AnalysisResult:
    ast: Node
    columns: List[TableColumn]
    rows: List[TruthTableRow]
    variables: List[str]
    classification: Classification
    main_connective: str
    output_key: str
    implication_forms: Optional[ImplicationForms] = None
    kmap: Optional[KMapData] = None
    shortcut: Optional[ShortcutResult] = None
    complexity: Optional[ComplexityMetrics] = None
    tableau: Optional[TableauReport] = None
    processing_time_ms: float = 0.0


def calculate_complexity(ast: Node, row_count: int, variables: Sequence[str]) -> ComplexityMetrics:
    operators = count_operators(ast)
    depth = ast.depth()
    score = depth * 2 + operators + len(variables) * 1.5
    return ComplexityMetrics(
        variable_count=len(variables),
        operator_count=operators,
        depth=depth,
        row_count=row_count,
        complexity_score=round(score, 1),
    )


def normalize_variables(variables: Sequence[str]) -> List[str]:
    """Uppercase declared names and drop repeats, keeping the declared order."""
    out: List[str] = []
    for name in variables:
        name = name.strip().upper()
        if name and name not in out:
            out.append(name)
    return out


def parse_checked(expression: str) -> Node:
    """Tokenize, reject unknown symbols, validate and parse."""
    if expression is None or not expression.strip():
        raise EmptyExpression()
    tokenizer = Tokenizer(expression)
    tokens = tokenizer.run()
    if tokenizer.skipped:
        pos, ch = tokenizer.skipped[0]
        raise UnknownSymbol(f'Unknown symbol: "{ch}"', pos)
    check_syntax(tokens)
    try:
        return parse(tokens)
    except RecursionError as exc:
        raise NestingTooDeep() from exc


def analyze_logic(
    expression: str,
    variables: Sequence[str],
    settings: Optional[EngineSettings] = None,
    proof_target: Optional[ProofType] = None,
) -> AnalysisResult:
    """
    Analyze a formula over the declared variables.

    Args:
        expression: Formula text in any accepted spelling.
        variables: Declared variable order (first is the most significant bit).
        settings: Engine settings; defaults apply when omitted.
        proof_target: When given, also run a tableau proof of this kind.

    Returns:
        AnalysisResult with the table, classification and derived forms.

    Raises:
        LogicError: for any problem with the formula or the declared variables.
    """
    started = time.perf_counter()
    settings = settings or EngineSettings()

    ast = parse_checked(expression)
    declared = normalize_variables(variables)
    try:
        return _analyze(ast, declared, settings, proof_target, started)
    except RecursionError as exc:
        raise NestingTooDeep() from exc


def _analyze(
    ast: Node,
    declared: List[str],
    settings: EngineSettings,
    proof_target: Optional[ProofType],
    started: float,
) -> AnalysisResult:
    check_declared(ast, declared)

    table = build_truth_table(
        ast,
        declared,
        row_order=settings.row_order,
        include_subexpressions=settings.show_sub_expressions,
        negation_mode=settings.negation_handling,
    )
    kmap = generate_kmap(declared, table.rows, table.output_key)
    tableau = generate_report(ast, declared, proof_target) if proof_target is not None else None

    elapsed = (time.perf_counter() - started) * 1000.0
    logger.debug("analyzed %s in %.2f ms: %s", ast.expression, elapsed, table.classification.value)
    return AnalysisResult(
        ast=ast,
        columns=table.columns,
        rows=table.rows,
        variables=declared,
        classification=table.classification,
        main_connective=main_connective(ast),
        output_key=table.output_key,
        implication_forms=implication_forms(ast, settings.negation_handling),
        kmap=kmap,
        shortcut=check_right_away(ast),
        complexity=calculate_complexity(ast, len(table.rows), declared),
        tableau=tableau,
        processing_time_ms=round(elapsed, 3),
    )


def prove_logic(expression: str, variables: Sequence[str], target: ProofType) -> TableauReport:
    """
    Run one tableau proof attempt without building the truth table.

    Cost grows with the size of the formula, not with 2^n rows. Diagnostics
    are the same as for ``analyze_logic``.
    """
    ast = parse_checked(expression)
    declared = normalize_variables(variables)
    try:
        check_declared(ast, declared)
    except RecursionError as exc:
        raise NestingTooDeep() from exc
    return generate_report(ast, declared, target)


def reanalyze(prev: AnalysisResult, rows: Sequence[TruthTableRow]) -> AnalysisResult:
    """Recompute classification and K-Map for a replacement row set, without reparsing."""
    rows = list(rows)
    classification = classify_rows(rows, prev.output_key)
    kmap = generate_kmap(prev.variables, rows, prev.output_key)
    return replace(prev, rows=rows, classification=classification, kmap=kmap)


__all__ = [
    "ComplexityMetrics",
    "AnalysisResult",
    "calculate_complexity",
    "normalize_variables",
    "parse_checked",
    "analyze_logic",
    "prove_logic",
    "reanalyze",
]
