"""
Tests for logicflow/tableau.py shortened truth-table proofs.
"""

import logging

import pytest

from logicflow.errors import ProofSearchError
from logicflow.evaluate import evaluate
from logicflow.parser import parse_formula
from logicflow.tableau import (
    Branch,
    BranchStatus,
    Obligation,
    ProofResult,
    ProofType,
    generate_report,
    implications,
    is_closed,
    solve_branch,
)


def _report(text, variables, target=ProofType.TAUTOLOGY):
    return generate_report(parse_formula(text), variables, target)


class TestImplications:
    """Decomposition rules."""

    def test_false_implication_is_deterministic(self):
        ast = parse_formula("P -> Q")
        moves = implications(ast, False)
        assert not moves.branching
        assert moves.deterministic == (Obligation(ast.left, True), Obligation(ast.right, False))

    def test_true_implication_branches(self):
        ast = parse_formula("P -> Q")
        moves = implications(ast, True)
        assert moves.branching
        assert moves.alternatives == ((Obligation(ast.left, False),), (Obligation(ast.right, True),))

    def test_and_or(self):
        ast = parse_formula("P & Q")
        assert not implications(ast, True).branching
        assert implications(ast, False).branching
        ast = parse_formula("P | Q")
        assert not implications(ast, False).branching
        assert implications(ast, True).branching

    def test_iff_and_xor_always_branch(self):
        for text in ("P <-> Q", "P ^ Q"):
            ast = parse_formula(text)
            assert implications(ast, True).branching
            assert implications(ast, False).branching

    def test_not_flips(self):
        ast = parse_formula("~P")
        assert implications(ast, True).deterministic == (Obligation(ast.operand, False),)

    def test_leaves_have_no_obligations(self):
        assert implications(parse_formula("P"), True) == implications(parse_formula("1"), False)


class TestSolveBranch:
    """Propagation and closure."""

    def test_conflict_closes(self):
        ast = parse_formula("P & ~P")
        branch = solve_branch(Branch(id="root"), [Obligation(ast, True)])
        assert branch.status is BranchStatus.CLOSED
        assert branch.contradiction.expression == "P"

    def test_constant_is_preassigned(self):
        ast = parse_formula("1")
        branch = solve_branch(Branch(id="root"), [Obligation(ast, False)])
        assert branch.status is BranchStatus.CLOSED

    def test_children_get_independent_assignments(self):
        ast = parse_formula("P | Q")
        branch = solve_branch(Branch(id="root"), [Obligation(ast, True)])
        a, b = branch.children
        assert a.assignments is not b.assignments
        assert a.variable_assignments() == {"P": True}
        assert b.variable_assignments() == {"Q": True}
        assert not is_closed(branch)


class TestTautology:
    """Tautology attempts."""

    def test_excluded_middle(self):
        report = _report("P | ~P", ["P"])
        assert report.result is ProofResult.PROVEN
        assert report.counter_example is None

    def test_implication_is_not_tautology(self):
        report = _report("P -> Q", ["P", "Q"])
        assert report.result is ProofResult.DISPROVEN
        assert report.counter_example == {"P": True, "Q": False}

    def test_contraposition(self):
        report = _report("(P -> Q) <-> (~Q -> ~P)", ["P", "Q"])
        assert report.proven

    def test_peirce(self):
        assert _report("((P -> Q) -> P) -> P", ["P", "Q"]).proven

    def test_counter_example_falsifies(self):
        ast = parse_formula("(P & Q) | (R -> P)")
        report = generate_report(ast, ["P", "Q", "R"], ProofType.TAUTOLOGY)
        assert not report.proven
        assert evaluate(ast, report.counter_example) is False

    def test_unforced_variables_default_false(self):
        report = _report("P -> Q", ["P", "Q", "R"])
        assert report.counter_example["R"] is False
        assert "R" not in report.forced_variables


class TestContradiction:
    """Absurdity attempts."""

    def test_contradiction(self):
        report = _report("P & ~P", ["P"], ProofType.CONTRADICTION)
        assert report.proven
        assert report.initial_assumptions == [("P ∧ ¬P", True)]

    def test_not_a_contradiction(self):
        report = _report("P & Q", ["P", "Q"], ProofType.CONTRADICTION)
        assert not report.proven
        assert report.counter_example == {"P": True, "Q": True}


class TestImplicationTarget:
    """Argument validity."""

    def test_modus_ponens(self):
        report = _report("(P & (P -> Q)) -> Q", ["P", "Q"], ProofType.IMPLICATION)
        assert report.proven
        assert report.initial_assumptions[1] == ("Q", False)

    def test_affirming_the_consequent(self):
        report = _report("(Q & (P -> Q)) -> P", ["P", "Q"], ProofType.IMPLICATION)
        assert not report.proven
        assert report.counter_example == {"P": False, "Q": True}

    def test_wrong_root_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="logicflow.tableau"):
            report = _report("P | ~P", ["P"], ProofType.IMPLICATION)
        assert report.target is ProofType.TAUTOLOGY
        assert "Fallback" in report.title
        assert "falling back" in caplog.text


class TestEquivalence:
    """Equivalence attempts split on both ways the sides can differ."""

    def test_de_morgan(self):
        report = _report("~(P & Q) <-> (~P | ~Q)", ["P", "Q"], ProofType.EQUIVALENCE)
        assert report.proven
        assert len(report.root.children) == 2

    def test_not_equivalent(self):
        ast = parse_formula("(P -> Q) <-> (Q -> P)")
        report = generate_report(ast, ["P", "Q"], ProofType.EQUIVALENCE)
        assert not report.proven
        assert evaluate(ast, report.counter_example) is False


class TestContingency:
    """Contingency needs both a failed Tautology and a failed Contradiction attempt."""

    def test_contingent(self):
        ast = parse_formula("P -> Q")
        report = generate_report(ast, ["P", "Q"], ProofType.CONTINGENCY)
        assert report.proven
        assert evaluate(ast, report.witnesses["false"]) is False
        assert evaluate(ast, report.witnesses["true"]) is True

    def test_tautology_is_not_contingent(self):
        report = _report("P | ~P", ["P"], ProofType.CONTINGENCY)
        assert not report.proven
        assert "Tautology" in report.summary

    def test_contradiction_is_not_contingent(self):
        report = _report("P & ~P", ["P"], ProofType.CONTINGENCY)
        assert not report.proven
        assert "Contradiction" in report.summary


class TestRecursionLimit:
    """Runaway proof search surfaces as ProofSearchError."""

    def test_recursion_error_is_wrapped(self, monkeypatch):
        def deep(*args, **kwargs):
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr("logicflow.tableau.solve_branch", deep)
        with pytest.raises(ProofSearchError, match="recursion limit"):
            _report("P | ~P", ["P"])

    def test_contingency_is_wrapped(self, monkeypatch):
        def deep(*args, **kwargs):
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr("logicflow.tableau.solve_branch", deep)
        with pytest.raises(ProofSearchError):
            _report("P", ["P"], ProofType.CONTINGENCY)


class TestProofType:
    """Target name parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("tautology", ProofType.TAUTOLOGY),
            ("Contradiction", ProofType.CONTRADICTION),
            ("absurdity", ProofType.CONTRADICTION),
            ("validity", ProofType.IMPLICATION),
            ("EQUIVALENCE", ProofType.EQUIVALENCE),
        ],
    )
    def test_parse(self, raw, expected):
        assert ProofType.parse(raw) is expected

    def test_unknown(self):
        with pytest.raises(ValueError):
            ProofType.parse("proof")
