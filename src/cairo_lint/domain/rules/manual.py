"""
Manual re-implementations of Option / Result combinators.

A two-arm ``match`` or an ``if let .. else`` over ``Option``/``Result`` is
normalized into one arm per variant and compared against a catalogue of arm
templates. A template matches only when both arms have exactly the expected
shape; there is no approximate matching.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from cairo_lint.domain.constants import (
    COMPLEMENT,
    ERR,
    FALSE,
    NONE,
    OK,
    PANIC_WITH_FELT252,
    SOME,
    TRUE,
)
from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor
from cairo_lint.domain.rules.shapes import (
    ATOM_PRECEDENCE,
    arm_expression,
    binding_unused,
    call_target,
    is_default_value,
    is_path_named,
    is_side_effect_free,
    pattern_binding,
    returns_never,
    variant_of,
    wrapped,
)
from cairo_lint.domain.syntax import SyntaxKind, SyntaxNode

MANUAL = "manual"


def _manual(rule_id: str, summary: str) -> RuleDescriptor:
    return RuleDescriptor(id=rule_id, summary=summary, fixable=True, group=MANUAL)


MANUAL_OK_OR = _manual("manual_ok_or", "Manual match for Option<T> detected. Consider using ok_or instead")
MANUAL_IS_SOME = _manual("manual_is_some", "Manual match for `is_some` detected. Consider using `is_some()` instead")
MANUAL_IS_NONE = _manual("manual_is_none", "Manual match for `is_none` detected. Consider using `is_none()` instead")
MANUAL_IS_OK = _manual("manual_is_ok", "Manual match for `is_ok` detected. Consider using `is_ok()` instead")
MANUAL_IS_ERR = _manual("manual_is_err", "Manual match for `is_err` detected. Consider using `is_err()` instead")
MANUAL_OK = _manual("manual_ok", "Manual match for Result<T, E> detected. Consider using `ok()` instead")
MANUAL_ERR = _manual("manual_err", "Manual match for Result<T, E> detected. Consider using `err()` instead")
MANUAL_EXPECT = _manual("manual_expect", "Manual match for expect detected. Consider using `expect()` instead")
MANUAL_EXPECT_ERR = _manual(
    "manual_expect_err", "Manual match for `expect_err` detected. Consider using `expect_err()` instead"
)
MANUAL_UNWRAP_OR_DEFAULT = _manual(
    "manual_unwrap_or_default", "This can be done in one call with `.unwrap_or_default()`"
)
MANUAL_UNWRAP_OR = _manual(
    "manual_unwrap_or", "Manual `unwrap_or` detected. Consider using `unwrap_or()` instead."
)
MANUAL_UNWRAP_OR_ELSE = _manual(
    "manual_unwrap_or_else", "Manual `unwrap_or_else` detected. Consider using `unwrap_or_else()` instead."
)


class ArmCheck(Enum):
    TRUE = "true"
    FALSE = "false"
    NONE = "none"
    REWRAP_OK = "rewrap_ok"
    REWRAP_SOME = "rewrap_some"
    ERR_VALUE = "err_value"
    BINDING = "binding"
    PANIC = "panic"
    DEFAULT = "default"
    VALUE = "value"
    LAZY_VALUE = "lazy_value"


@dataclass(frozen=True)
class Arm:
    """One variant's branch: its pattern (None for an ``else``) and its single expression."""

    pattern: SyntaxNode | None
    value: SyntaxNode


@dataclass(frozen=True)
class Template:
    rule: RuleDescriptor
    present: str
    present_check: ArmCheck
    absent_check: ArmCheck
    method: str
    takes_argument: bool = False
    """The absent arm supplies the call argument."""

    @property
    def absent(self) -> str:
        return COMPLEMENT[self.present]


CATALOGUE: tuple[Template, ...] = (
    Template(MANUAL_IS_SOME, SOME, ArmCheck.TRUE, ArmCheck.FALSE, "is_some"),
    Template(MANUAL_IS_NONE, SOME, ArmCheck.FALSE, ArmCheck.TRUE, "is_none"),
    Template(MANUAL_IS_OK, OK, ArmCheck.TRUE, ArmCheck.FALSE, "is_ok"),
    Template(MANUAL_IS_ERR, OK, ArmCheck.FALSE, ArmCheck.TRUE, "is_err"),
    Template(MANUAL_OK_OR, SOME, ArmCheck.REWRAP_OK, ArmCheck.ERR_VALUE, "ok_or", True),
    Template(MANUAL_OK, OK, ArmCheck.REWRAP_SOME, ArmCheck.NONE, "ok"),
    Template(MANUAL_ERR, ERR, ArmCheck.REWRAP_SOME, ArmCheck.NONE, "err"),
    Template(MANUAL_EXPECT, SOME, ArmCheck.BINDING, ArmCheck.PANIC, "expect", True),
    Template(MANUAL_EXPECT, OK, ArmCheck.BINDING, ArmCheck.PANIC, "expect", True),
    Template(MANUAL_EXPECT_ERR, ERR, ArmCheck.BINDING, ArmCheck.PANIC, "expect_err", True),
    Template(MANUAL_UNWRAP_OR_DEFAULT, SOME, ArmCheck.BINDING, ArmCheck.DEFAULT, "unwrap_or_default"),
    Template(MANUAL_UNWRAP_OR_DEFAULT, OK, ArmCheck.BINDING, ArmCheck.DEFAULT, "unwrap_or_default"),
    Template(MANUAL_UNWRAP_OR, SOME, ArmCheck.BINDING, ArmCheck.VALUE, "unwrap_or", True),
    Template(MANUAL_UNWRAP_OR, OK, ArmCheck.BINDING, ArmCheck.VALUE, "unwrap_or", True),
    Template(MANUAL_UNWRAP_OR_ELSE, SOME, ArmCheck.BINDING, ArmCheck.LAZY_VALUE, "unwrap_or_else", True),
    Template(MANUAL_UNWRAP_OR_ELSE, OK, ArmCheck.BINDING, ArmCheck.LAZY_VALUE, "unwrap_or_else", True),
)


def _covers_variant(pattern: SyntaxNode) -> bool:
    """``E::V``, ``E::V(x)`` or ``E::V(_)``: the pattern accepts every value of the variant."""
    if pattern.kind is not SyntaxKind.PATTERN_ENUM or pattern.resolved not in COMPLEMENT:
        return False
    inner = pattern.field("inner")
    return inner is None or inner.kind in (SyntaxKind.PATTERN_IDENT, SyntaxKind.PATTERN_WILDCARD)


def split_arms(node: SyntaxNode) -> tuple[SyntaxNode, dict[str, Arm]] | None:
    """``(scrutinee, {variant: arm})`` for a two-arm match or an ``if let .. else``."""
    if node.kind is SyntaxKind.MATCH:
        scrutinee = node.field("scrutinee")
        arms = node.items("arms")
        if scrutinee is None or len(arms) != 2:
            return None
        result: dict[str, Arm] = {}
        for arm in arms:
            pattern, value = arm.field("pattern"), arm_expression(arm.field("body"))
            if pattern is None or value is None or arm.field("guard") is not None:
                return None
            if not _covers_variant(pattern):
                return None
            result[pattern.resolved] = Arm(pattern, value)  # type: ignore[index]
        first, second = (arm.field("pattern").resolved for arm in arms)  # type: ignore[union-attr]
        if COMPLEMENT[first] != second:  # type: ignore[index]
            return None
        return scrutinee, result

    if node.kind is SyntaxKind.IF:
        condition = node.field("condition")
        if condition is None or condition.kind is not SyntaxKind.LET_CONDITION:
            return None
        pattern, scrutinee = condition.field("pattern"), condition.field("value")
        else_branch = node.field("else")
        if pattern is None or scrutinee is None or else_branch is None:
            return None
        if else_branch.kind is not SyntaxKind.BLOCK or not _covers_variant(pattern):
            return None
        then_value, else_value = arm_expression(node.field("then")), arm_expression(else_branch)
        if then_value is None or else_value is None:
            return None
        return scrutinee, {
            pattern.resolved: Arm(pattern, then_value),  # type: ignore[dict-item]
            COMPLEMENT[pattern.resolved]: Arm(None, else_value),  # type: ignore[index]
        }
    return None


def _single_argument(call: SyntaxNode) -> SyntaxNode | None:
    args = call.items("args")
    return args[0] if len(args) == 1 else None


def _rewraps(arm: Arm, variant: str) -> bool:
    if variant_of(arm.value) != variant or arm.value.kind is not SyntaxKind.CALL:
        return False
    return is_path_named(_single_argument(arm.value), pattern_binding(arm.pattern))


def _closure_head(template: Template, absent: Arm) -> str:
    """``||`` for ``Option``; ``Result`` hands the error to the closure."""
    if template.absent != ERR:
        return "||"
    return f"|{pattern_binding(absent.pattern) or '_err'}|"


def arm_matches(arm: Arm, check: ArmCheck) -> bool:
    value = arm.value
    if check is ArmCheck.TRUE:
        return variant_of(value) == TRUE
    if check is ArmCheck.FALSE:
        return variant_of(value) == FALSE
    if check is ArmCheck.NONE:
        return variant_of(value) == NONE
    if check is ArmCheck.REWRAP_OK:
        return _rewraps(arm, OK)
    if check is ArmCheck.REWRAP_SOME:
        return _rewraps(arm, SOME)
    if check is ArmCheck.ERR_VALUE:
        return (
            variant_of(value) == ERR
            and value.kind is SyntaxKind.CALL
            and _single_argument(value) is not None
            and binding_unused(arm.pattern)
        )
    if check is ArmCheck.BINDING:
        return is_path_named(value, pattern_binding(arm.pattern))
    if check is ArmCheck.PANIC:
        return (
            call_target(value) == PANIC_WITH_FELT252
            and _single_argument(value) is not None
            and binding_unused(arm.pattern)
        )
    if check is ArmCheck.DEFAULT:
        return is_default_value(value) and binding_unused(arm.pattern)
    if check in (ArmCheck.VALUE, ArmCheck.LAZY_VALUE):
        if is_default_value(value) or returns_never(value) or not binding_unused(arm.pattern):
            return False
        # `unwrap_or` evaluates its argument even when the value is present.
        effect_free = is_side_effect_free(value)
        return effect_free if check is ArmCheck.VALUE else not effect_free
    return False


def match_template(node: SyntaxNode) -> tuple[Template, SyntaxNode, dict[str, Arm]] | None:
    split = split_arms(node)
    if split is None:
        return None
    scrutinee, arms = split
    for template in CATALOGUE:
        present, absent = arms.get(template.present), arms.get(template.absent)
        if present is None or absent is None:
            continue
        if arm_matches(present, template.present_check) and arm_matches(absent, template.absent_check):
            return template, scrutinee, arms
    return None


class ManualCombinatorRule:
    """Arms that spell out ``is_some``, ``ok_or``, ``expect``, ``unwrap_or_else`` and friends by hand."""

    descriptors = (
        MANUAL_OK_OR,
        MANUAL_IS_SOME,
        MANUAL_IS_NONE,
        MANUAL_IS_OK,
        MANUAL_IS_ERR,
        MANUAL_OK,
        MANUAL_ERR,
        MANUAL_EXPECT,
        MANUAL_EXPECT_ERR,
        MANUAL_UNWRAP_OR_DEFAULT,
        MANUAL_UNWRAP_OR,
        MANUAL_UNWRAP_OR_ELSE,
    )
    kinds = (SyntaxKind.MATCH, SyntaxKind.IF)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        matched = match_template(node)
        if matched is None:
            return []
        return [Finding.from_node(rule=matched[0].rule, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None:
            return None
        matched = match_template(finding.node)
        if matched is None:
            return None
        template, scrutinee, arms = matched
        argument = ""
        if template.takes_argument:
            absent = arms[template.absent]
            value = absent.value
            if template.absent_check is ArmCheck.VALUE:
                argument = value.text
            elif template.absent_check is ArmCheck.LAZY_VALUE:
                argument = f"{_closure_head(template, absent)} {value.text}"
            else:
                inner = _single_argument(value)
                if inner is None:
                    return None
                if template.absent_check is ArmCheck.ERR_VALUE and not is_side_effect_free(inner):
                    return None
                argument = inner.text
        receiver = wrapped(scrutinee, ATOM_PRECEDENCE)
        return Fix.single(finding.node, f"{receiver}.{template.method}({argument})")
