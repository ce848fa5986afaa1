"""
Shortened truth-table technique (semantic tableau) proof engine.

A proof attempt assumes the opposite of what is to be shown and propagates
forced truth values through the tree. Connectives that admit a single
decomposition extend the current branch; connectives that admit two split the
branch into two children, each solved on its own copy of the assignments. A
branch closes when some subformula is forced to both values; a proof succeeds
when every branch closes.

Proof targets:
    - Tautology: assume the formula is false.
    - Contradiction: assume the formula is true.
    - Implication: assume antecedent true and consequent false (IMPLIES roots).
    - Equivalence: split on the two ways the sides can differ (IFF roots).
    - Contingency: a Tautology attempt and a Contradiction attempt must both fail.

Assignments are keyed by structural node identity: every occurrence of the
same subformula shares one forced value.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from logicflow.errors import ProofSearchError
from logicflow.nodes import Binary, Const, Node, Not, Var
from logicflow.tokens import OpKind

logger = logging.getLogger(__name__)


class ProofType(Enum):
    TAUTOLOGY = "Tautology"
    CONTRADICTION = "Contradiction"
    IMPLICATION = "Implication"
    EQUIVALENCE = "Equivalence"
    CONTINGENCY = "Contingency"

    @classmethod
    def parse(cls, raw: str) -> "ProofType":
        text = str(raw).strip().lower()
        aliases = {"absurdity": cls.CONTRADICTION, "validity": cls.IMPLICATION}
        if text in aliases:
            return aliases[text]
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"Unknown proof type: {raw!r}")


class BranchStatus(Enum):
    OPEN = "Open"
    CLOSED = "Closed"
    COMPLETE = "Complete"


class ProofResult(Enum):
    PROVEN = "Proven"
    DISPROVEN = "Disproven"


class StepReason(Enum):
    ASSUMPTION = "Assumption"
    FORCED = "Forced"
    BRANCH = "Branch"
    CONFLICT = "Conflict"


@dataclass(frozen=True)
class ProofStep:
    description: str
    target: str
    value: Optional[bool]
    reason: StepReason
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class Contradiction:
    expression: str
    previous: bool
    forced: bool


class Obligation(NamedTuple):
    node: Node
    value: bool


@dataclass
class Branch:
    """One node of the proof tree. Children never share assignment dicts."""

    id: str
    label: str = ""
    parent_id: Optional[str] = None
    assignments: Dict[Node, bool] = field(default_factory=dict)
    steps: List[ProofStep] = field(default_factory=list)
    status: BranchStatus = BranchStatus.OPEN
    children: List["Branch"] = field(default_factory=list)
    contradiction: Optional[Contradiction] = None

    def variable_assignments(self) -> Dict[str, bool]:
        return {node.name: value for node, value in self.assignments.items() if isinstance(node, Var)}

    def leaves(self) -> List["Branch"]:
        if not self.children:
            return [self]
        out: List[Branch] = []
        for child in self.children:
            out.extend(child.leaves())
        return out


@dataclass
class TableauReport:
    target: ProofType
    title: str
    initial_assumptions: List[Tuple[str, bool]]
    root: Branch
    result: ProofResult
    summary: str
    counter_example: Optional[Dict[str, bool]] = None
    forced_variables: Tuple[str, ...] = ()
    witnesses: Dict[str, Dict[str, bool]] = field(default_factory=dict)

    @property
    def proven(self) -> bool:
        return self.result is ProofResult.PROVEN


# ---------------------------------------------------------------------------
# Implications of a forced value
# ---------------------------------------------------------------------------

class Implications(NamedTuple):
    """Either one obligation list (deterministic) or two alternatives (branching)."""
    deterministic: Tuple[Obligation, ...] = ()
    alternatives: Optional[Tuple[Tuple[Obligation, ...], Tuple[Obligation, ...]]] = None

    @property
    def branching(self) -> bool:
        return self.alternatives is not None


def _both(left: Node, lv: bool, right: Node, rv: bool) -> Tuple[Obligation, ...]:
    return (Obligation(left, lv), Obligation(right, rv))


def implications(node: Node, value: bool) -> Implications:
    """What forcing ``node`` to ``value`` requires of its children."""
    if isinstance(node, (Var, Const)):
        return Implications()
    if isinstance(node, Not):
        return Implications(deterministic=(Obligation(node.operand, not value),))
    if not isinstance(node, Binary):
        raise TypeError(f"Unknown node type: {type(node)}")

    L, R = node.left, node.right
    op = node.op
    if op is OpKind.AND:
        if value:
            return Implications(deterministic=_both(L, True, R, True))
        return Implications(alternatives=((Obligation(L, False),), (Obligation(R, False),)))
    if op is OpKind.OR:
        if not value:
            return Implications(deterministic=_both(L, False, R, False))
        return Implications(alternatives=((Obligation(L, True),), (Obligation(R, True),)))
    if op is OpKind.IMPLIES:
        if not value:
            # The only way for an implication to be false.
            return Implications(deterministic=_both(L, True, R, False))
        return Implications(alternatives=((Obligation(L, False),), (Obligation(R, True),)))
    if op is OpKind.IFF:
        if value:
            return Implications(alternatives=(_both(L, True, R, True), _both(L, False, R, False)))
        return Implications(alternatives=(_both(L, True, R, False), _both(L, False, R, True)))
    if op is OpKind.XOR:
        if value:
            return Implications(alternatives=(_both(L, True, R, False), _both(L, False, R, True)))
        return Implications(alternatives=(_both(L, True, R, True), _both(L, False, R, False)))
    raise ValueError(f"Unsupported operator: {op}")


# ---------------------------------------------------------------------------
# Branch solving
# ---------------------------------------------------------------------------

def _tf(value: bool) -> str:
    return "True" if value else "False"


def create_child_branch(parent: Branch, label: str) -> Branch:
    return Branch(
        id=uuid.uuid4().hex,
        label=label,
        parent_id=parent.id,
        assignments=dict(parent.assignments),
        steps=[ProofStep(f"Subcase: {label}", "Branch", None, StepReason.BRANCH)],
    )


def _describe_case(case: Sequence[Obligation]) -> str:
    return ", ".join(f"{ob.node.expression}={'T' if ob.value else 'F'}" for ob in case)


def solve_branch(branch: Branch, queue: Sequence[Obligation]) -> Branch:
    """
    Propagate obligations through ``branch`` until it closes, completes or splits.

    Returns the same branch object with its status, steps and children filled in.
    """
    pending = list(queue)
    while pending:
        node, value = pending.pop(0)

        previous = branch.assignments.get(node)
        if previous is None and isinstance(node, Const):
            previous = node.value
        if previous is not None:
            if previous != value:
                branch.status = BranchStatus.CLOSED
                branch.contradiction = Contradiction(node.expression, previous, value)
                branch.steps.append(ProofStep(
                    f"Contradiction! {node.expression} was {_tf(previous)}, "
                    f"but now forced to {_tf(value)}.",
                    node.expression, value, StepReason.CONFLICT,
                ))
                return branch
            continue

        branch.assignments[node] = value
        branch.steps.append(ProofStep(
            f"Force {node.expression} = {_tf(value)}", node.expression, value, StepReason.FORCED,
        ))

        moves = implications(node, value)
        if not moves.branching:
            pending.extend(moves.deterministic)
            continue

        branch.steps.append(ProofStep(
            f"Branching required for {node.expression} = {_tf(value)}",
            node.expression, value, StepReason.BRANCH,
        ))
        first, second = moves.alternatives
        child_a = solve_branch(create_child_branch(branch, _describe_case(first)), pending + list(first))
        child_b = solve_branch(create_child_branch(branch, _describe_case(second)), pending + list(second))
        branch.children = [child_a, child_b]
        if child_a.status is BranchStatus.CLOSED and child_b.status is BranchStatus.CLOSED:
            branch.status = BranchStatus.CLOSED
        else:
            branch.status = BranchStatus.COMPLETE
        return branch

    branch.status = BranchStatus.COMPLETE
    return branch


def is_closed(branch: Branch) -> bool:
    if branch.status is BranchStatus.CLOSED:
        return True
    if branch.status is BranchStatus.COMPLETE and not branch.children:
        return False
    if branch.children:
        return all(is_closed(child) for child in branch.children)
    return False


def find_counter_example(branch: Branch) -> Optional[Branch]:
    """First open leaf, depth first; its assignments witness non-provability."""
    if branch.status is BranchStatus.COMPLETE and not branch.children:
        return branch
    for child in branch.children:
        found = find_counter_example(child)
        if found is not None:
            return found
    return None


def _complete_assignment(partial: Dict[str, bool], variables: Sequence[str]) -> Dict[str, bool]:
    # Unforced variables are unconstrained by the branch; any value works.
    full = {v: partial.get(v, False) for v in variables}
    for name, value in partial.items():
        full.setdefault(name, value)
    return full


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def _finish(
    target: ProofType,
    title: str,
    assumptions: List[Tuple[str, bool]],
    root: Branch,
    variables: Sequence[str],
    proven_text: str,
    disproven_text: str,
) -> TableauReport:
    proven = is_closed(root)
    counter_example = None
    forced: Tuple[str, ...] = ()
    if not proven:
        leaf = find_counter_example(root)
        if leaf is not None:
            partial = leaf.variable_assignments()
            forced = tuple(sorted(partial))
            counter_example = _complete_assignment(partial, variables)
    logger.debug("%s attempt: %s", target.value, "closed" if proven else "open branch found")
    return TableauReport(
        target=target,
        title=title,
        initial_assumptions=assumptions,
        root=root,
        result=ProofResult.PROVEN if proven else ProofResult.DISPROVEN,
        summary=proven_text if proven else disproven_text,
        counter_example=counter_example,
        forced_variables=forced,
    )


def _single_assumption_report(ast: Node, variables: Sequence[str], target: ProofType, title: str) -> TableauReport:
    assumed = target is ProofType.CONTRADICTION
    root = solve_branch(Branch(id="root"), [Obligation(ast, assumed)])
    return _finish(
        target, title, [(ast.expression, assumed)], root, variables,
        f"All branches led to contradictions. The statement IS a {target.value}.",
        f"Found a consistent assignment (Counter-example). The statement is NOT a {target.value}.",
    )


def _implication_report(ast: Binary, variables: Sequence[str]) -> TableauReport:
    queue = [Obligation(ast.left, True), Obligation(ast.right, False)]
    root = solve_branch(Branch(id="root"), queue)
    return _finish(
        ProofType.IMPLICATION,
        "Prove Argument Validity (T.I.)",
        [(ast.left.expression, True), (ast.right.expression, False)],
        root, variables,
        "Assuming true premises and a false conclusion is contradictory. The argument IS valid.",
        "Found premises true with the conclusion false. The argument is NOT valid.",
    )


def _equivalence_report(ast: Binary, variables: Sequence[str]) -> TableauReport:
    root = Branch(id="root")
    root.steps.append(ProofStep(
        "To disprove Equivalence, we test both cases where sides differ.",
        ast.expression, False, StepReason.ASSUMPTION,
    ))
    L, R = ast.left, ast.right
    cases = [_both(L, True, R, False), _both(L, False, R, True)]
    children = [solve_branch(create_child_branch(root, _describe_case(case)), list(case)) for case in cases]
    root.children = children
    if all(child.status is BranchStatus.CLOSED for child in children):
        root.status = BranchStatus.CLOSED
    else:
        root.status = BranchStatus.COMPLETE
    return _finish(
        ProofType.EQUIVALENCE,
        "Prove Tautological Equivalence",
        [(ast.expression, False)],
        root, variables,
        "Both scenarios of differing values led to contradictions. Therefore, LHS ⇔ RHS.",
        "Found a case where LHS ≠ RHS. Therefore, they are NOT equivalent.",
    )


def _contingency_report(ast: Node, variables: Sequence[str]) -> TableauReport:
    taut = generate_report(ast, variables, ProofType.TAUTOLOGY)
    title = "Check Contingency"
    if taut.proven:
        return TableauReport(
            target=ProofType.CONTINGENCY, title=title,
            initial_assumptions=[(ast.expression, False)], root=taut.root,
            result=ProofResult.DISPROVEN,
            summary="The statement is a Tautology (Always True), therefore it is NOT a Contingency.",
        )
    contra = generate_report(ast, variables, ProofType.CONTRADICTION)
    if contra.proven:
        return TableauReport(
            target=ProofType.CONTINGENCY, title=title,
            initial_assumptions=[(ast.expression, True)], root=contra.root,
            result=ProofResult.DISPROVEN,
            summary="The statement is a Contradiction (Always False), therefore it is NOT a Contingency.",
        )
    return TableauReport(
        target=ProofType.CONTINGENCY, title=title,
        initial_assumptions=[(ast.expression, False)], root=taut.root,
        result=ProofResult.PROVEN,
        summary="Found cases for both True and False values. The statement IS a Contingency.",
        witnesses={"false": taut.counter_example or {}, "true": contra.counter_example or {}},
    )


def generate_report(
    ast: Node,
    variables: Sequence[str],
    target: ProofType = ProofType.TAUTOLOGY,
) -> TableauReport:
    """
    Run one proof attempt on ``ast``.

    Implication and Equivalence targets need an IMPLIES or IFF root; any other
    root falls back to a Tautology attempt.
    """
    try:
        return _dispatch(ast, variables, target)
    except RecursionError as exc:
        raise ProofSearchError("Proof search exceeded the recursion limit") from exc


def _dispatch(ast: Node, variables: Sequence[str], target: ProofType) -> TableauReport:
    if target is ProofType.CONTINGENCY:
        return _contingency_report(ast, variables)
    if target is ProofType.IMPLICATION:
        if isinstance(ast, Binary) and ast.op is OpKind.IMPLIES:
            return _implication_report(ast, variables)
        logger.warning("Implication proof needs an implication root; falling back to Tautology")
        return _single_assumption_report(ast, variables, ProofType.TAUTOLOGY, "Prove Tautology (Fallback)")
    if target is ProofType.EQUIVALENCE:
        if isinstance(ast, Binary) and ast.op is OpKind.IFF:
            return _equivalence_report(ast, variables)
        logger.warning("Equivalence proof needs a biconditional root; falling back to Tautology")
        return _single_assumption_report(ast, variables, ProofType.TAUTOLOGY, "Prove Tautology (Fallback)")
    if target is ProofType.CONTRADICTION:
        return _single_assumption_report(ast, variables, target, "Prove Absurdity (Contradiction)")
    return _single_assumption_report(ast, variables, ProofType.TAUTOLOGY, "Prove Tautology")


__all__ = [
    "ProofType",
    "BranchStatus",
    "ProofResult",
    "StepReason",
    "ProofStep",
    "Contradiction",
    "Obligation",
    "Branch",
    "TableauReport",
    "Implications",
    "implications",
    "create_child_branch",
    "solve_branch",
    "is_closed",
    "find_counter_example",
    "generate_report",
]
