"""Arithmetic and logical identities: identical operands, absorbing zeros, neutral operands, parity masks."""

from typing import Literal

from cairo_lint.domain.constants import BOOL_TYPE
from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor
from cairo_lint.domain.rules.shapes import (
    int_value,
    is_primitive_type,
    is_side_effect_free,
    precedence,
    same_structure,
    wrapped,
)
from cairo_lint.domain.syntax import SyntaxKind, SyntaxNode

EQ_OP = "eq_op"

EQ_COMP_OP = RuleDescriptor(
    id="eq_comp_op",
    summary="Comparison with identical operands, this operation always results in true and may indicate a logic error",
    fixable=True,
    group=EQ_OP,
)
NEQ_COMP_OP = RuleDescriptor(
    id="neq_comp_op",
    summary="Comparison with identical operands, this operation always results in false and may indicate a logic error",
    fixable=True,
    group=EQ_OP,
)
EQ_DIFF_OP = RuleDescriptor(
    id="eq_diff_op",
    summary="Subtraction of identical operands, this operation always results in zero and may indicate a logic error",
    fixable=True,
    group=EQ_OP,
)
EQ_BITWISE_OP = RuleDescriptor(
    id="eq_bitwise_op",
    summary="Bitwise operation with identical operands, this operation always results in the same value and may indicate a logic error",
    fixable=True,
    group=EQ_OP,
)
EQ_LOGICAL_OP = RuleDescriptor(
    id="eq_logical_op",
    summary="Logical operation with identical operands, this operation always results in the same value and may indicate a logic error",
    fixable=True,
    group=EQ_OP,
)
DIV_EQ_OP = RuleDescriptor(
    id="div_eq_op",
    summary="Division with identical operands, this operation always results in one (except for zero) and may indicate a logic error",
    group=EQ_OP,
)

ERASING_OP = RuleDescriptor(
    id="erasing_op",
    summary="This operation results in the value being erased (e.g., multiplication by 0). Consider replacing the entire expression with 0.",
    fixable=True,
)

REDUNDANT_OP = RuleDescriptor(
    id="redundant_op",
    summary="This operation doesn't change the value and can be simplified.",
    fixable=True,
)

BITWISE_FOR_PARITY_CHECK = RuleDescriptor(
    id="bitwise_for_parity_check",
    summary="You seem to be trying to use `&` for parity check. Consider using `DivRem::div_rem()` instead.",
)

_OPERAND = object()

# operator -> (rule, replacement); _OPERAND keeps one of the operands, None has no fix.
_IDENTITIES: dict[str, tuple[RuleDescriptor, object]] = {
    "==": (EQ_COMP_OP, "true"),
    "<=": (EQ_COMP_OP, "true"),
    ">=": (EQ_COMP_OP, "true"),
    "!=": (NEQ_COMP_OP, "false"),
    "<": (NEQ_COMP_OP, "false"),
    ">": (NEQ_COMP_OP, "false"),
    "-": (EQ_DIFF_OP, "0"),
    "&": (EQ_BITWISE_OP, _OPERAND),
    "|": (EQ_BITWISE_OP, _OPERAND),
    "^": (EQ_BITWISE_OP, "0"),
    "&&": (EQ_LOGICAL_OP, _OPERAND),
    "||": (EQ_LOGICAL_OP, _OPERAND),
    # `0 / 0` panics, so `1` is not a behavior-preserving replacement.
    "/": (DIV_EQ_OP, None),
}


class EqOpRule:
    """Binary operator applied to two structurally identical, side-effect free operands."""

    descriptors = (EQ_COMP_OP, NEQ_COMP_OP, EQ_DIFF_OP, EQ_BITWISE_OP, EQ_LOGICAL_OP, DIV_EQ_OP)
    kinds = (SyntaxKind.BINARY,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _operands(node: SyntaxNode) -> tuple[SyntaxNode, SyntaxNode] | None:
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if lhs is None or rhs is None or node.token not in _IDENTITIES:
            return None
        if not same_structure(lhs, rhs):
            return None
        if not is_side_effect_free(lhs):
            return None
        return lhs, rhs

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._operands(node) is None:
            return []
        rule, _ = _IDENTITIES[node.token]  # type: ignore[index]
        return [Finding.from_node(rule=rule, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        operands = self._operands(node)
        if operands is None:
            return None
        lhs, _ = operands
        # User types may overload these operators.
        if lhs.ty is not None and not is_primitive_type(lhs.ty):
            return None
        _, replacement = _IDENTITIES[node.token]  # type: ignore[index]
        if replacement is None:
            return None
        if replacement is _OPERAND:
            return Fix.single(node, lhs.text)
        if replacement == "0" and lhs.ty == BOOL_TYPE:
            return Fix.single(node, "false")
        return Fix.single(node, str(replacement))


class ErasingOpRule:
    """``0 * x``, ``x * 0``, ``x & 0``, ``0 & x`` and ``0 / x`` always evaluate to zero."""

    descriptors = (ERASING_OP,)
    kinds = (SyntaxKind.BINARY,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _erased(node: SyntaxNode) -> SyntaxNode | None:
        """The operand whose value is discarded, or None when the node does not erase."""
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if lhs is None or rhs is None:
            return None
        if node.token in ("*", "&"):
            if int_value(rhs) == 0:
                return lhs
            if int_value(lhs) == 0:
                return rhs
        if node.token == "/" and int_value(lhs) == 0:
            return rhs
        return None

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._erased(node) is None:
            return []
        return [Finding.from_node(rule=ERASING_OP, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None or node.token == "/":
            return None
        erased = self._erased(node)
        if erased is None or not is_side_effect_free(erased):
            return None
        return Fix.single(node, "0")


# operator -> (neutral operand on the left, neutral operand on the right)
_NEUTRAL: dict[str, tuple[int | None, int | None]] = {
    "+": (0, 0),
    "-": (None, 0),
    "*": (1, 1),
    "/": (None, 1),
}


class RedundantOpRule:
    """``x + 0``, ``0 + x``, ``x - 0``, ``x * 1``, ``1 * x`` and ``x / 1`` are all ``x``."""

    descriptors = (REDUNDANT_OP,)
    kinds = (SyntaxKind.BINARY,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _kept(node: SyntaxNode) -> SyntaxNode | None:
        """The operand the expression evaluates to."""
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if lhs is None or rhs is None or node.token not in _NEUTRAL:
            return None
        left, right = _NEUTRAL[node.token]  # type: ignore[index]
        if right is not None and int_value(rhs) == right:
            return lhs
        if left is not None and int_value(lhs) == left:
            return rhs
        return None

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._kept(node) is None:
            return []
        return [Finding.from_node(rule=REDUNDANT_OP, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        kept = self._kept(node)
        if kept is None:
            return None
        # User types may overload these operators.
        if kept.ty is not None and not is_primitive_type(kept.ty):
            return None
        return Fix.single(node, wrapped(kept, precedence(node)))


class BitwiseForParityCheckRule:
    """``x & 1`` used as an odd/even test."""

    descriptors = (BITWISE_FOR_PARITY_CHECK,)
    kinds = (SyntaxKind.BINARY,)

    def check(self, node: SyntaxNode) -> list[Finding]:
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if node.token != "&" or lhs is None or rhs is None:
            return []
        if int_value(rhs) == 1 or int_value(lhs) == 1:
            return [Finding.from_node(rule=BITWISE_FOR_PARITY_CHECK, node=node)]
        return []
