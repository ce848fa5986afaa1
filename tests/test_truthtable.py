"""
Tests for logicflow/truthtable.py.
"""

import pytest

from logicflow.config import NegationMode, RowOrder
from logicflow.errors import UndeclaredVariable
from logicflow.parser import parse_formula
from logicflow.truthtable import (
    Classification,
    assignment_for_index,
    build_truth_table,
    classify_values,
    recalculate_row,
    set_cell,
)


class TestAssignment:
    """Row index decoding."""

    def test_first_variable_is_most_significant(self):
        assert assignment_for_index(0, ["A", "B"]) == {"A": False, "B": False}
        assert assignment_for_index(1, ["A", "B"]) == {"A": False, "B": True}
        assert assignment_for_index(2, ["A", "B"]) == {"A": True, "B": False}
        assert assignment_for_index(3, ["A", "B"]) == {"A": True, "B": True}


class TestClassify:
    """Classification of a result column."""

    def test_classifications(self):
        assert classify_values([True, True]) is Classification.TAUTOLOGY
        assert classify_values([False, False]) is Classification.CONTRADICTION
        assert classify_values([True, False]) is Classification.CONTINGENCY

    def test_empty_column_rejected(self):
        with pytest.raises(ValueError):
            classify_values([])


class TestBuildTruthTable:
    """Columns, rows and ordering."""

    def test_implication_table(self):
        ast = parse_formula("P -> Q")
        table = build_truth_table(ast, ["P", "Q"])
        assert len(table.rows) == 4
        assert table.output_values() == [True, True, False, True]
        assert table.classification is Classification.CONTINGENCY
        assert [c.label for c in table.columns] == ["P", "Q", "P → Q"]
        assert table.columns[-1].is_output

    def test_excluded_middle_is_tautology(self):
        table = build_truth_table(parse_formula("P | ~P"), ["P"])
        assert table.classification is Classification.TAUTOLOGY

    def test_contradiction(self):
        table = build_truth_table(parse_formula("P & ~P"), ["P"])
        assert table.classification is Classification.CONTRADICTION

    def test_descending_keeps_row_meaning(self):
        ast = parse_formula("P -> Q")
        asc = build_truth_table(ast, ["P", "Q"], row_order=RowOrder.ASCENDING)
        desc = build_truth_table(ast, ["P", "Q"], row_order=RowOrder.DESCENDING)
        assert [r.index for r in desc.rows] == [3, 2, 1, 0]
        by_index = {r.index: r.values for r in asc.rows}
        for row in desc.rows:
            assert row.values == by_index[row.index]

    def test_repeated_subexpression_gets_one_column(self):
        ast = parse_formula("(A & B) | ~(A & B)")
        table = build_truth_table(ast, ["A", "B"])
        keys = [c.expression for c in table.columns]
        assert keys.count("A ∧ B") == 1
        assert keys[-1] == ast.canonical()

    def test_bracketing_does_not_split_columns(self):
        ast = parse_formula("(A & B) -> A & B")
        table = build_truth_table(ast, ["A", "B"])
        assert [c.expression for c in table.columns].count("A ∧ B") == 1

    def test_subexpressions_can_be_hidden(self):
        ast = parse_formula("(A & B) | C")
        table = build_truth_table(ast, ["A", "B", "C"], include_subexpressions=False)
        assert [c.is_input for c in table.columns] == [True, True, True, False]

    def test_unused_declared_variable_doubles_rows(self):
        table = build_truth_table(parse_formula("A"), ["A", "B"])
        assert len(table.rows) == 4
        assert table.output_values() == [False, False, True, True]

    def test_variable_root_is_its_own_output(self):
        table = build_truth_table(parse_formula("A"), ["A"])
        assert table.columns[0].is_output
        assert table.output_key == "A"

    def test_constant_root(self):
        table = build_truth_table(parse_formula("1"), [])
        assert len(table.rows) == 1
        assert table.classification is Classification.TAUTOLOGY

    def test_undeclared_variable(self):
        with pytest.raises(UndeclaredVariable) as excinfo:
            build_truth_table(parse_formula("A & B"), ["A"])
        assert excinfo.value.names == ("B",)

    def test_negation_mode_changes_labels_only(self):
        ast = parse_formula("~~A")
        plain = build_truth_table(ast, ["A"])
        normalized = build_truth_table(ast, ["A"], negation_mode=NegationMode.NORMALIZE)
        assert plain.columns[-1].label == "¬¬A"
        assert normalized.columns[-1].label == "A"
        assert plain.output_values() == normalized.output_values()

    def test_dependencies(self):
        ast = parse_formula("A -> B")
        assert build_truth_table(ast, ["A", "B"]).columns[-1].dependencies == ("A", "B")


class TestEditing:
    """Row recalculation and cell edits."""

    def test_input_edit_recomputes(self):
        ast = parse_formula("P -> Q")
        table = build_truth_table(ast, ["P", "Q"])
        row = table.rows[3]
        p_col = table.column("P")
        edited = set_cell(row, p_col, False, table.columns, ast)
        assert edited.values["P → Q"] is True
        assert edited.index == row.index

    def test_derived_edit_is_an_override(self):
        ast = parse_formula("P -> Q")
        table = build_truth_table(ast, ["P", "Q"])
        out = table.column(table.output_key)
        edited = set_cell(table.rows[2], out, True, table.columns, ast)
        assert edited.values[table.output_key] is True
        assert edited.values["P"] is True and edited.values["Q"] is False

    def test_recalculate_restores(self):
        ast = parse_formula("P & Q")
        table = build_truth_table(ast, ["P", "Q"])
        out = table.column(table.output_key)
        overridden = set_cell(table.rows[0], out, True, table.columns, ast)
        assert recalculate_row(overridden, table.columns, ast).values[table.output_key] is False
