"""Control-flow simplifications: loops, nested and chained ifs, single-arm and nested matches, manual asserts."""

from typing import Literal

from cairo_lint.domain.constants import ARRAY_TYPE, ASSERT_MACRO, NONE, SOME, SPAN_TYPE
from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor, TextEdit
from cairo_lint.domain.relations import Relation
from cairo_lint.domain.rules.shapes import (
    binds_nothing,
    is_panic,
    is_path_named,
    is_side_effect_free,
    negated_text,
    operator_precedence,
    pattern_binding,
    same_structure,
    whitespace_before,
    wrapped,
)
from cairo_lint.domain.syntax import Span, SyntaxKind, SyntaxNode

LOOP_FOR_WHILE = RuleDescriptor(
    id="loop_for_while",
    summary="you seem to be trying to use `loop`. Consider replacing this `loop` with a `while` loop for clarity and conciseness",
    fixable=True,
)
LOOP_MATCH_POP_FRONT = RuleDescriptor(
    id="loop_match_pop_front",
    summary="you seem to be trying to use `loop` for iterating over a span. Consider using `for in`",
    fixable=True,
)
COLLAPSIBLE_IF = RuleDescriptor(
    id="collapsible_if",
    summary="Each `if`-statement adds one level of nesting, which makes code look more complex than it really is.",
    fixable=True,
)
COLLAPSIBLE_IF_ELSE = RuleDescriptor(
    id="collapsible_if_else",
    summary="Consider using else if instead of else { if ... }",
    fixable=True,
)
EQUATABLE_IF_LET = RuleDescriptor(
    id="equatable_if_let",
    summary="`if let` pattern used for equatable value. Consider using a simple comparison `==` instead",
    fixable=True,
)
IFS_SAME_COND = RuleDescriptor(
    id="ifs_same_cond",
    summary="Consecutive `if` with the same condition found.",
)
SINGLE_MATCH = "single_match"

DESTRUCT_MATCH = RuleDescriptor(
    id="destruct_match",
    summary="you seem to be trying to use `match` for destructuring a single pattern. Consider using `if let`",
    fixable=True,
    group=SINGLE_MATCH,
)
MATCH_FOR_EQUALITY = RuleDescriptor(
    id="match_for_equality",
    summary="you seem to be trying to use `match` for an equality check. Consider using `if`",
    group=SINGLE_MATCH,
)
COLLAPSIBLE_MATCH = RuleDescriptor(
    id="collapsible_match",
    summary="Nested `match` statements can be collapsed into a single `match` statement.",
    fixable=True,
)
MANUAL_ASSERT = RuleDescriptor(
    id="manual_assert",
    summary="Manual assert detected. Consider using assert!() macro instead.",
)
INEFFICIENT_WHILE_COMP = RuleDescriptor(
    id="inefficient_while_comp",
    summary="using [`<`, `<=`, `>=`, `>`] exit conditions is inefficient. Consider switching to `!=` or using ArrayTrait::multi_pop_front.",
    default_enabled=False,
)


def block_elements(block: SyntaxNode | None) -> list[SyntaxNode]:
    """Statements followed by the tail expression, in source order."""
    if block is None or block.kind is not SyntaxKind.BLOCK:
        return []
    elements = list(block.items("statements"))
    tail = block.field("tail")
    if tail is not None:
        elements.append(tail)
    return elements


def element_expr(element: SyntaxNode) -> SyntaxNode | None:
    """Expression carried by a block element (the element itself for tails)."""
    if element.kind is SyntaxKind.EXPR_STMT:
        return element.field("expr")
    return element


def sole_expr(block: SyntaxNode | None) -> SyntaxNode | None:
    elements = block_elements(block)
    if len(elements) != 1:
        return None
    return element_expr(elements[0])


def branch_expr(body: SyntaxNode | None) -> SyntaxNode | None:
    """Single expression of a match arm body, braced or not."""
    if body is not None and body.kind is SyntaxKind.BLOCK:
        return sole_expr(body)
    return body


def is_plain_break(node: SyntaxNode | None) -> bool:
    return node is not None and node.kind is SyntaxKind.BREAK and node.field("value") is None


def breaks_with_value(body: SyntaxNode) -> bool:
    return any(sub.kind is SyntaxKind.BREAK and sub.field("value") is not None for sub in body.walk())


def is_unit_expr(node: SyntaxNode | None) -> bool:
    """``()`` or an empty block."""
    if node is None:
        return False
    if node.kind is SyntaxKind.TUPLE:
        return not node.items("items")
    return node.kind is SyntaxKind.BLOCK and not block_elements(node)


def unguarded_arms(match: SyntaxNode, count: int) -> tuple[SyntaxNode, ...] | None:
    """Arms of ``match`` when there are exactly ``count`` of them, all with a pattern and no guard."""
    arms = match.items("arms")
    if len(arms) != count:
        return None
    if any(arm.field("guard") is not None or arm.field("pattern") is None for arm in arms):
        return None
    return arms


def is_plain_if(node: SyntaxNode | None) -> bool:
    """An ``if`` with a boolean condition (not ``if let``)."""
    if node is None or node.kind is not SyntaxKind.IF:
        return False
    condition = node.field("condition")
    return condition is not None and condition.kind is not SyntaxKind.LET_CONDITION


class LoopForWhileRule:
    """``loop { if cond { break; } .. }`` is ``while !cond { .. }``."""

    descriptors = (LOOP_FOR_WHILE,)
    kinds = (SyntaxKind.LOOP,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _exit_check(loop: SyntaxNode) -> tuple[SyntaxNode, SyntaxNode, SyntaxNode] | None:
        """``(body, leading if element, if node)`` when the loop opens with a bare conditional break."""
        body = loop.field("body")
        elements = block_elements(body)
        if body is None or not elements:
            return None
        head = elements[0]
        if_node = element_expr(head)
        if not is_plain_if(if_node) or if_node.field("else") is not None:  # type: ignore[union-attr]
            return None
        if not is_plain_break(sole_expr(if_node.field("then"))):  # type: ignore[union-attr]
            return None
        if breaks_with_value(body):
            return None
        return body, head, if_node  # type: ignore[return-value]

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._exit_check(node) is None:
            return []
        return [Finding.from_node(rule=LOOP_FOR_WHILE, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        loop = finding.node
        if loop is None or loop.tree is None or not loop.text.startswith("loop"):
            return None
        exit_check = self._exit_check(loop)
        if exit_check is None:
            return None
        body, head, if_node = exit_check
        condition = if_node.field("condition")
        if condition is None:
            return None
        elements = block_elements(body)
        if len(elements) > 1:
            delete_end = elements[1].span.start
        else:
            delete_end = whitespace_before(loop.tree.source, body.span.end - 1)
        keyword = Span(loop.span.start, loop.span.start + len("loop"))
        header = TextEdit(span=keyword, text=f"while {negated_text(condition)[0]}")
        return Fix(edits=(header, TextEdit.delete(head.span.start, delete_end)))


class LoopMatchPopFrontRule:
    """``loop { match span.pop_front() { Some(v) => .., None => { break; } } }`` is a ``for`` loop."""

    descriptors = (LOOP_MATCH_POP_FRONT,)
    kinds = (SyntaxKind.LOOP,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _iteration(loop: SyntaxNode) -> tuple[SyntaxNode, str, SyntaxNode] | None:
        """``(iterated span, item name, per-item body)``."""
        match = sole_expr(loop.field("body"))
        if match is None or match.kind is not SyntaxKind.MATCH:
            return None
        scrutinee = match.field("scrutinee")
        if scrutinee is None or scrutinee.kind is not SyntaxKind.METHOD_CALL:
            return None
        receiver = scrutinee.field("receiver")
        if scrutinee.token != "pop_front" or scrutinee.items("args") or receiver is None:
            return None
        if receiver.kind is not SyntaxKind.PATH:
            return None
        arms = {}
        for arm in match.items("arms"):
            pattern = arm.field("pattern")
            if pattern is None or pattern.kind is not SyntaxKind.PATTERN_ENUM:
                return None
            arms[pattern.resolved] = arm
        some, none = arms.get(SOME), arms.get(NONE)
        if some is None or none is None or len(match.items("arms")) != 2:
            return None
        if some.field("guard") is not None or none.field("guard") is not None:
            return None
        if not is_plain_break(branch_expr(none.field("body"))):
            return None
        inner = some.field("pattern").field("inner")  # type: ignore[union-attr]
        if inner is None or inner.kind not in (SyntaxKind.PATTERN_IDENT, SyntaxKind.PATTERN_WILDCARD):
            return None
        body = some.field("body")
        if body is None or breaks_with_value(body):
            return None
        ty = receiver.require_type().lstrip("@")
        if not (ty.startswith(SPAN_TYPE) or ty.startswith(ARRAY_TYPE)):
            return None
        return receiver, inner.token or "_", body

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._iteration(node) is None:
            return []
        return [Finding.from_node(rule=LOOP_MATCH_POP_FRONT, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None:
            return None
        iteration = self._iteration(finding.node)
        if iteration is None:
            return None
        receiver, item, body = iteration
        body_text = body.text if body.kind is SyntaxKind.BLOCK else f"{{ {body.text}; }}"
        return Fix.single(finding.node, f"for {item} in {receiver.text} {body_text}")


class CollapsibleIfRule:
    """``if a { if b { .. } }`` without else branches is ``if a && b { .. }``."""

    descriptors = (COLLAPSIBLE_IF,)
    kinds = (SyntaxKind.IF,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _inner(node: SyntaxNode) -> SyntaxNode | None:
        if not is_plain_if(node) or node.field("else") is not None:
            return None
        inner = sole_expr(node.field("then"))
        if not is_plain_if(inner) or inner.field("else") is not None:  # type: ignore[union-attr]
            return None
        # `assert!` expands to an `if`; it is not user nesting.
        if inner.macro == ASSERT_MACRO or node.macro == ASSERT_MACRO:  # type: ignore[union-attr]
            return None
        return inner

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._inner(node) is None:
            return []
        return [Finding.from_node(rule=COLLAPSIBLE_IF, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        inner = self._inner(node)
        if inner is None:
            return None
        outer_condition, inner_condition = node.field("condition"), inner.field("condition")
        inner_then = inner.field("then")
        if outer_condition is None or inner_condition is None or inner_then is None:
            return None
        level = operator_precedence("&&")
        text = (
            f"if {wrapped(outer_condition, level)} && {wrapped(inner_condition, level)} {inner_then.text}"
        )
        return Fix.single(node, text)


class CollapsibleIfElseRule:
    """``else { if .. }`` is ``else if ..``."""

    descriptors = (COLLAPSIBLE_IF_ELSE,)
    kinds = (SyntaxKind.IF,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _nested(node: SyntaxNode) -> tuple[SyntaxNode, SyntaxNode] | None:
        else_branch = node.field("else")
        if else_branch is None or else_branch.kind is not SyntaxKind.BLOCK:
            return None
        inner = sole_expr(else_branch)
        if inner is None or inner.kind is not SyntaxKind.IF or inner.macro == ASSERT_MACRO:
            return None
        return else_branch, inner

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._nested(node) is None:
            return []
        return [Finding.from_node(rule=COLLAPSIBLE_IF_ELSE, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None:
            return None
        nested = self._nested(finding.node)
        if nested is None:
            return None
        else_branch, inner = nested
        return Fix(edits=(TextEdit.replace_node(else_branch, inner.text),))


class EquatableIfLetRule:
    """``if let E::V = x`` with a binding-free pattern is ``if x == E::V``."""

    descriptors = (EQUATABLE_IF_LET,)
    kinds = (SyntaxKind.IF,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _condition(node: SyntaxNode) -> tuple[SyntaxNode, SyntaxNode, SyntaxNode] | None:
        condition = node.field("condition")
        if condition is None or condition.kind is not SyntaxKind.LET_CONDITION:
            return None
        pattern, value = condition.field("pattern"), condition.field("value")
        if pattern is None or value is None or not binds_nothing(pattern):
            return None
        return condition, pattern, value

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._condition(node) is None:
            return []
        return [Finding.from_node(rule=EQUATABLE_IF_LET, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None:
            return None
        parts = self._condition(finding.node)
        if parts is None:
            return None
        condition, pattern, value = parts
        operand = wrapped(value, operator_precedence("==") + 1)
        return Fix(edits=(TextEdit.replace_node(condition, f"{operand} == {pattern.text}"),))


class IfsSameCondRule:
    """``if c { .. } else if c { .. }``: the second branch can never run."""

    descriptors = (IFS_SAME_COND,)
    kinds = (SyntaxKind.IF,)

    def check(self, node: SyntaxNode) -> list[Finding]:
        following = node.field("else")
        if not is_plain_if(node) or not is_plain_if(following):
            return []
        condition = node.field("condition")
        other = following.field("condition")  # type: ignore[union-attr]
        if condition is None or other is None or not is_side_effect_free(condition):
            return []
        if not same_structure(condition, other):
            return []
        return [Finding.from_node(rule=IFS_SAME_COND, node=node)]


class InefficientWhileCompRule:
    """``while`` loops exiting on an ordering comparison."""

    descriptors = (INEFFICIENT_WHILE_COMP,)
    kinds = (SyntaxKind.WHILE,)

    def check(self, node: SyntaxNode) -> list[Finding]:
        condition = node.field("condition")
        if condition is None or condition.kind is not SyntaxKind.BINARY:
            return []
        if Relation.from_token(condition.token) not in (Relation.LT, Relation.LE, Relation.GT, Relation.GE):
            return []
        return [Finding.from_node(rule=INEFFICIENT_WHILE_COMP, node=node)]


class DestructMatchRule:
    """
    A two-arm ``match`` whose other arm does nothing.

    ``match x { E::V(v) => body, _ => () }`` is ``if let E::V(v) = x { body }``.
    When the remaining pattern binds nothing the match is an equality test;
    that case is reported without a fix because ``==`` needs ``PartialEq``.
    """

    descriptors = (DESTRUCT_MATCH, MATCH_FOR_EQUALITY)
    kinds = (SyntaxKind.MATCH,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _working_arm(node: SyntaxNode) -> SyntaxNode | None:
        arms = unguarded_arms(node, 2)
        if arms is None:
            return None
        for kept, other in ((arms[0], arms[1]), (arms[1], arms[0])):
            pattern, other_pattern = kept.field("pattern"), other.field("pattern")
            if pattern.kind is not SyntaxKind.PATTERN_ENUM:  # type: ignore[union-attr]
                continue
            if other_pattern.kind not in (SyntaxKind.PATTERN_WILDCARD, SyntaxKind.PATTERN_ENUM):  # type: ignore[union-attr]
                continue
            if is_unit_expr(other.field("body")) and kept.field("body") is not None:
                return kept
        return None

    def check(self, node: SyntaxNode) -> list[Finding]:
        kept = self._working_arm(node)
        if kept is None:
            return []
        rule = MATCH_FOR_EQUALITY if binds_nothing(kept.field("pattern")) else DESTRUCT_MATCH  # type: ignore[arg-type]
        return [Finding.from_node(rule=rule, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None or finding.rule_id != DESTRUCT_MATCH.id:
            return None
        kept, scrutinee = self._working_arm(node), node.field("scrutinee")
        if kept is None or scrutinee is None:
            return None
        pattern, body = kept.field("pattern"), kept.field("body")
        body_text = body.text if body.kind is SyntaxKind.BLOCK else f"{{ {body.text} }}"  # type: ignore[union-attr]
        return Fix.single(node, f"if let {pattern.text} = {scrutinee.text} {body_text}")  # type: ignore[union-attr]


class CollapsibleMatchRule:
    """
    An arm that only re-matches its own binding.

    ``match o { Some(x) => match x { Ok(v) => v, _ => d }, _ => d }`` is
    ``match o { Some(Ok(v)) => v, _ => d }``: one inner arm repeats the
    other outer arm, so the two merge into ``_``.
    """

    descriptors = (COLLAPSIBLE_MATCH,)
    kinds = (SyntaxKind.MATCH,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _collapse(node: SyntaxNode) -> tuple[SyntaxNode, SyntaxNode, SyntaxNode] | None:
        """``(outer pattern, inner arm that survives, outer arm that becomes _)``."""
        arms = unguarded_arms(node, 2)
        if arms is None:
            return None
        nested = [(arm, branch_expr(arm.field("body"))) for arm in arms]
        nested = [(arm, inner) for arm, inner in nested if inner is not None and inner.kind is SyntaxKind.MATCH]
        if len(nested) != 1:
            return None
        main, inner = nested[0]
        secondary = arms[1] if main is arms[0] else arms[0]
        outer_pattern = main.field("pattern")
        binding = pattern_binding(outer_pattern)
        if binding is None or not is_path_named(inner.field("scrutinee"), binding):  # type: ignore[union-attr]
            return None
        inner_arms = unguarded_arms(inner, 2)  # type: ignore[arg-type]
        repeated = secondary.field("body")
        if inner_arms is None or repeated is None:
            return None
        for duplicate, kept in ((inner_arms[0], inner_arms[1]), (inner_arms[1], inner_arms[0])):
            duplicate_body = duplicate.field("body")
            if duplicate_body is not None and same_structure(duplicate_body, repeated):
                break
        else:
            return None
        kept_body = kept.field("body")
        if kept.field("pattern").kind is not SyntaxKind.PATTERN_ENUM or kept_body is None:  # type: ignore[union-attr]
            return None
        # The outer binding no longer exists after collapsing.
        if any(is_path_named(sub, binding) for sub in kept_body.walk()):
            return None
        return outer_pattern, kept, secondary  # type: ignore[return-value]

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._collapse(node) is None:
            return []
        return [Finding.from_node(rule=COLLAPSIBLE_MATCH, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None or node.tree is None:
            return None
        collapse, scrutinee = self._collapse(node), node.field("scrutinee")
        if collapse is None or scrutinee is None:
            return None
        outer_pattern, kept, secondary = collapse
        binding = outer_pattern.field("inner")
        if binding is None:
            return None
        source = node.tree.source
        opening = source[outer_pattern.span.start : binding.span.start]
        closing = source[binding.span.end : outer_pattern.span.end]
        pattern = f"{opening}{kept.field('pattern').text}{closing}"  # type: ignore[union-attr]
        text = (
            f"match {scrutinee.text} {{ {pattern} => {kept.field('body').text}, "  # type: ignore[union-attr]
            f"_ => {secondary.field('body').text} }}"  # type: ignore[union-attr]
        )
        return Fix.single(node, text)


class ManualAssertRule:
    """``if cond { panic!(..) }`` without an else branch spells out ``assert!``."""

    descriptors = (MANUAL_ASSERT,)
    kinds = (SyntaxKind.IF,)

    def check(self, node: SyntaxNode) -> list[Finding]:
        if not is_plain_if(node) or node.field("else") is not None:
            return []
        # `assert!` itself expands to this shape.
        if node.macro == ASSERT_MACRO:
            return []
        if not is_panic(sole_expr(node.field("then"))):
            return []
        return [Finding.from_node(rule=MANUAL_ASSERT, node=node)]
