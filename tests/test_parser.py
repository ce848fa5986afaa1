"""
Tests for logicflow/parser.py and the expression tree in logicflow/nodes.py.
"""

import pytest

from logicflow.errors import ParseFailure
from logicflow.nodes import (
    Binary,
    Const,
    Not,
    Var,
    count_operators,
    iter_postorder,
    main_connective,
    variables_of,
)
from logicflow.parser import Parser, parse, parse_formula
from logicflow.tokens import OpKind, tokenize


class TestPrecedence:
    """Precedence, lowest to highest: IFF, IMPLIES, XOR, OR, AND, NOT."""

    def test_and_binds_tighter_than_or(self):
        ast = parse_formula("A | B & C")
        assert ast == Binary(OpKind.OR, Var("A"), Binary(OpKind.AND, Var("B"), Var("C")))

    def test_or_binds_tighter_than_xor(self):
        ast = parse_formula("A ^ B | C")
        assert ast == Binary(OpKind.XOR, Var("A"), Binary(OpKind.OR, Var("B"), Var("C")))

    def test_xor_binds_tighter_than_implies(self):
        ast = parse_formula("A -> B ^ C")
        assert ast == Binary(OpKind.IMPLIES, Var("A"), Binary(OpKind.XOR, Var("B"), Var("C")))

    def test_implies_binds_tighter_than_iff(self):
        ast = parse_formula("A <-> B -> C")
        assert ast == Binary(OpKind.IFF, Var("A"), Binary(OpKind.IMPLIES, Var("B"), Var("C")))

    def test_not_binds_tightest(self):
        ast = parse_formula("~A & B")
        assert ast == Binary(OpKind.AND, Not(Var("A")), Var("B"))

    def test_implication_is_left_associative(self):
        ast = parse_formula("A -> B -> C")
        assert ast == Binary(OpKind.IMPLIES, Binary(OpKind.IMPLIES, Var("A"), Var("B")), Var("C"))

    def test_double_negation_is_kept(self):
        ast = parse_formula("~~A")
        assert ast == Not(Not(Var("A")))

    def test_brackets_override_precedence(self):
        ast = parse_formula("(A | B) & C")
        assert ast == Binary(OpKind.AND, Binary(OpKind.OR, Var("A"), Var("B")), Var("C"))
        assert ast.left.grouped


class TestStructuralIdentity:
    """Equality ignores node ids and source brackets."""

    def test_grouping_does_not_change_identity(self):
        assert parse_formula("(A)") == parse_formula("A")
        assert parse_formula("[(A & B)]") == parse_formula("A & B")

    def test_equal_subtrees_hash_equal(self):
        ast = parse_formula("(A & B) | (A & B)")
        assert ast.left == ast.right
        assert hash(ast.left) == hash(ast.right)
        assert ast.left.node_id != ast.right.node_id

    def test_canonical_ignores_brackets(self):
        assert parse_formula("((A))").canonical() == "A"
        assert parse_formula("(A & B) -> C").canonical() == parse_formula("[A & B] -> C").canonical()

    def test_expression_keeps_brackets(self):
        assert parse_formula("(A & B) -> C").expression == "(A ∧ B) → C"
        assert parse_formula("A & B -> C").expression == "(A ∧ B) → C"
        assert parse_formula("~(A | B)").expression == "¬(A ∨ B)"

    def test_redundant_brackets_are_kept_in_display(self):
        ast = parse_formula("((A & B)) -> C")
        assert ast.expression == "((A ∧ B)) → C"
        assert ast.left.group_depth == 2
        assert ast == parse_formula("A & B -> C")
        assert parse_formula("[{(A)}]").expression == "(((A)))"

    def test_binary_rejects_negation(self):
        with pytest.raises(ValueError):
            Binary(OpKind.NOT, Var("A"), Var("B"))


class TestArena:
    """Node ids index the parser's arena."""

    def test_node_ids_match_arena(self):
        parser = Parser(tokenize("(A -> B) & ~C"))
        ast = parser.parse()
        for node in iter_postorder(ast):
            assert parser.nodes[node.node_id] is node

    def test_end_token_is_added(self):
        tokens = [t for t in tokenize("A & B") if t.text]
        assert parse(tokens) == Binary(OpKind.AND, Var("A"), Var("B"))


class TestParseFailure:
    """Unvalidated garbage raises instead of producing a placeholder."""

    def test_trailing_garbage(self):
        with pytest.raises(ParseFailure):
            parse(tokenize("A B"))

    def test_unexpected_end(self):
        with pytest.raises(ParseFailure):
            parse(tokenize("A &"))

    def test_mismatched_closer(self):
        with pytest.raises(ParseFailure):
            parse(tokenize("(A]"))


class TestHelpers:
    """Traversal helpers."""

    def test_variables_and_operators(self):
        ast = parse_formula("(P -> Q) & ~P")
        assert variables_of(ast) == {"P", "Q"}
        assert count_operators(ast) == 3
        assert ast.depth() == 2

    def test_main_connective(self):
        assert main_connective(parse_formula("A")) == "VAR"
        assert main_connective(parse_formula("1")) == "CONST"
        assert main_connective(parse_formula("~A")) == "NOT"
        assert main_connective(parse_formula("A <-> B")) == "IFF"

    def test_constants(self):
        assert parse_formula("1") == Const(True)
        assert parse_formula("0") == Const(False)
