"""Comparison rules: double comparisons, boolean literal comparisons, integer +1/-1 bounds."""

from dataclasses import dataclass
from typing import Literal

from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor, Severity
from cairo_lint.domain.relations import (
    Classification,
    Combinator,
    Relation,
    Verdict,
    classify,
    classify_bounds,
    fold_unit_offset,
)
from cairo_lint.domain.rules.shapes import (
    UNARY_PRECEDENCE,
    bool_value,
    int_value,
    is_integer_type,
    is_side_effect_free,
    same_structure,
    strip_parens,
    wrapped,
)
from cairo_lint.domain.syntax import SyntaxKind, SyntaxNode

DOUBLE_COMPARISON = "double_comparison"

SIMPLIFIABLE_COMPARISON = RuleDescriptor(
    id="simplifiable_comparison",
    summary="This double comparison can be simplified.",
    fixable=True,
    group=DOUBLE_COMPARISON,
)
REDUNDANT_COMPARISON = RuleDescriptor(
    id="redundant_comparison",
    summary="Redundant double comparison found. Consider simplifying to a single comparison.",
    fixable=True,
    group=DOUBLE_COMPARISON,
)
CONTRADICTORY_COMPARISON = RuleDescriptor(
    id="contradictory_comparison",
    summary="This double comparison is contradictory and always false.",
    severity=Severity.ERROR,
    group=DOUBLE_COMPARISON,
)
TAUTOLOGICAL_COMPARISON = RuleDescriptor(
    id="tautological_comparison",
    summary="This double comparison is always true.",
    group=DOUBLE_COMPARISON,
)
IMPOSSIBLE_COMPARISON = RuleDescriptor(
    id="impossible_comparison",
    summary="Impossible condition, always false",
    severity=Severity.ERROR,
    group=DOUBLE_COMPARISON,
)

BOOL_COMPARISON = RuleDescriptor(
    id="bool_comparison",
    summary="Unnecessary comparison with a boolean value. Use the variable directly.",
    fixable=True,
)

INT_OP_ONE = "int_op_one"

INT_GE_PLUS_ONE = RuleDescriptor(
    id="int_ge_plus_one",
    summary="Unnecessary add operation in integer >= comparison. Use simplified comparison.",
    fixable=True,
    group=INT_OP_ONE,
)
INT_GE_MIN_ONE = RuleDescriptor(
    id="int_ge_min_one",
    summary="Unnecessary sub operation in integer >= comparison. Use simplified comparison.",
    fixable=True,
    group=INT_OP_ONE,
)
INT_LE_PLUS_ONE = RuleDescriptor(
    id="int_le_plus_one",
    summary="Unnecessary add operation in integer <= comparison. Use simplified comparison.",
    fixable=True,
    group=INT_OP_ONE,
)
INT_LE_MIN_ONE = RuleDescriptor(
    id="int_le_min_one",
    summary="Unnecessary sub operation in integer <= comparison. Use simplified comparison.",
    fixable=True,
    group=INT_OP_ONE,
)


@dataclass(frozen=True)
class Comparison:
    """A relation tagged with the two operands it compares."""

    relation: Relation
    left: SyntaxNode
    right: SyntaxNode

    @classmethod
    def from_node(cls, node: SyntaxNode) -> "Comparison | None":
        node = strip_parens(node)
        if node.kind is not SyntaxKind.BINARY:
            return None
        relation = Relation.from_token(node.token)
        left, right = node.field("lhs"), node.field("rhs")
        if relation is None or left is None or right is None:
            return None
        return cls(relation, left, right)

    def flipped(self) -> "Comparison":
        return Comparison(self.relation.flipped(), self.right, self.left)

    def is_pure(self) -> bool:
        return is_side_effect_free(self.left) and is_side_effect_free(self.right)

    def bound(self) -> tuple[SyntaxNode, Relation, int] | None:
        """``(subject, relation, constant)`` with the constant moved to the right."""
        constant = int_value(strip_parens(self.right))
        if constant is not None:
            return self.left, self.relation, constant
        constant = int_value(strip_parens(self.left))
        if constant is not None:
            return self.right, self.relation.flipped(), constant
        return None


_VERDICT_RULES = {
    Verdict.SIMPLIFIABLE: SIMPLIFIABLE_COMPARISON,
    Verdict.REDUNDANT: REDUNDANT_COMPARISON,
    Verdict.CONTRADICTORY: CONTRADICTORY_COMPARISON,
    Verdict.TAUTOLOGICAL: TAUTOLOGICAL_COMPARISON,
}


class DoubleComparisonRule:
    """
    ``a <op1> b && a <op2> b`` (or ``||``) over the same operands.

    Operands are compared structurally and in either order (swapping operands
    flips the relation). Any operand with side effects rejects the match:
    collapsing two evaluations into one would change behavior. When the
    operands differ only by integer constants (``x >= 200 && x < 100``) the
    bounds are checked for an empty or full solution set instead.
    """

    descriptors = (
        SIMPLIFIABLE_COMPARISON,
        REDUNDANT_COMPARISON,
        CONTRADICTORY_COMPARISON,
        TAUTOLOGICAL_COMPARISON,
        IMPOSSIBLE_COMPARISON,
    )
    kinds = (SyntaxKind.BINARY,)
    fix_type: Literal["code"] = "code"

    def analyze(self, node: SyntaxNode) -> tuple[Classification, Comparison, bool] | None:
        """Classification of a ``&&``/``||`` node, the comparison it collapses to, and whether constant bounds decided it."""
        combinator = Combinator.from_token(node.token)
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if combinator is None or lhs is None or rhs is None:
            return None
        first, second = Comparison.from_node(lhs), Comparison.from_node(rhs)
        if first is None or second is None:
            return None
        if not (first.is_pure() and second.is_pure()):
            return None

        if same_structure(first.left, second.left) and same_structure(first.right, second.right):
            return classify(first.relation, second.relation, combinator), first, False
        if same_structure(first.left, second.right) and same_structure(first.right, second.left):
            return classify(first.relation, second.flipped().relation, combinator), first, False

        first_bound, second_bound = first.bound(), second.bound()
        if first_bound is None or second_bound is None:
            return None
        if not same_structure(first_bound[0], second_bound[0]):
            return None
        verdict = classify_bounds(
            first_bound[1], first_bound[2], second_bound[1], second_bound[2], combinator
        )
        if verdict.verdict is Verdict.NOT_SIMPLIFIABLE:
            return None
        return verdict, first, True

    def check(self, node: SyntaxNode) -> list[Finding]:
        analysis = self.analyze(node)
        if analysis is None:
            return []
        classification, _, from_bounds = analysis
        rule = _VERDICT_RULES[classification.verdict]
        if from_bounds and classification.verdict is Verdict.CONTRADICTORY:
            rule = IMPOSSIBLE_COMPARISON
        return [Finding.from_node(rule=rule, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None or finding.rule_id not in (
            SIMPLIFIABLE_COMPARISON.id,
            REDUNDANT_COMPARISON.id,
        ):
            return None
        analysis = self.analyze(finding.node)
        if analysis is None or analysis[0].relation is None:
            return None
        classification, first, _ = analysis
        text = f"{first.left.text} {classification.relation.token} {first.right.text}"
        return Fix.single(finding.node, text)


class BoolComparisonRule:
    """``x == true`` is ``x``; ``x == false`` is ``!x``; ``!=`` inverts."""

    descriptors = (BOOL_COMPARISON,)
    kinds = (SyntaxKind.BINARY,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _split(node: SyntaxNode) -> tuple[SyntaxNode, bool] | None:
        if node.token not in ("==", "!="):
            return None
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if lhs is None or rhs is None:
            return None
        for operand, literal in ((lhs, rhs), (rhs, lhs)):
            value = bool_value(literal)
            if value is not None:
                return operand, value
        return None

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._split(node) is None:
            return []
        return [Finding.from_node(rule=BOOL_COMPARISON, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None:
            return None
        split = self._split(finding.node)
        if split is None:
            return None
        operand, value = split
        keep = value == (finding.node.token == "==")
        text = operand.text if keep else f"!{wrapped(operand, UNARY_PRECEDENCE)}"
        return Fix.single(finding.node, text)


_UNIT_OFFSET_RULES = {
    (Relation.GE, True, 1): INT_GE_PLUS_ONE,
    (Relation.GE, False, -1): INT_GE_MIN_ONE,
    (Relation.LE, False, 1): INT_LE_PLUS_ONE,
    (Relation.LE, True, -1): INT_LE_MIN_ONE,
}


@dataclass(frozen=True)
class _UnitOffset:
    rule: RuleDescriptor
    relation: Relation
    left: SyntaxNode
    right: SyntaxNode


def _unit_offset(side: SyntaxNode) -> tuple[SyntaxNode, int] | None:
    """``(base, delta)`` for ``base + 1`` / ``base - 1``."""
    side = strip_parens(side)
    if side.kind is not SyntaxKind.BINARY or side.token not in ("+", "-"):
        return None
    base, step = side.field("lhs"), side.field("rhs")
    if base is None or step is None or int_value(step) != 1:
        return None
    return base, 1 if side.token == "+" else -1


class IntOpOneRule:
    """``x >= y + 1`` is ``x > y`` and ``x <= y - 1`` is ``x < y`` for integer types."""

    descriptors = (INT_GE_PLUS_ONE, INT_GE_MIN_ONE, INT_LE_PLUS_ONE, INT_LE_MIN_ONE)
    kinds = (SyntaxKind.BINARY,)
    fix_type: Literal["code"] = "code"

    def _match(self, node: SyntaxNode) -> _UnitOffset | None:
        relation = Relation.from_token(node.token)
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if relation not in (Relation.GE, Relation.LE) or lhs is None or rhs is None:
            return None
        for offset_on_rhs, side in ((True, rhs), (False, lhs)):
            offset = _unit_offset(side)
            if offset is None:
                continue
            base, delta = offset
            folded = fold_unit_offset(relation, offset_on_rhs, delta)  # type: ignore[arg-type]
            if folded is None:
                continue
            if not is_integer_type(base.require_type()):
                return None
            rule = _UNIT_OFFSET_RULES[(relation, offset_on_rhs, delta)]  # type: ignore[index]
            if offset_on_rhs:
                return _UnitOffset(rule, folded, lhs, base)
            return _UnitOffset(rule, folded, base, rhs)
        return None

    def check(self, node: SyntaxNode) -> list[Finding]:
        match = self._match(node)
        if match is None:
            return []
        return [Finding.from_node(rule=match.rule, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None:
            return None
        match = self._match(finding.node)
        if match is None:
            return None
        return Fix.single(
            finding.node, f"{match.left.text} {match.relation.token} {match.right.text}"
        )
