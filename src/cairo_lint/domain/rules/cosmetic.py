"""Redundant syntax: extra parentheses, unit types and unit arguments, look-alike parameters, repetitive variant names."""

from itertools import takewhile
from typing import Literal

from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor, TextEdit
from cairo_lint.domain.rules.shapes import ATOM_PRECEDENCE, precedence, strip_parens, whitespace_before
from cairo_lint.domain.syntax import STATEMENT_KINDS, SyntaxKind, SyntaxNode

DOUBLE_PARENS = RuleDescriptor(
    id="double_parens",
    summary="unnecessary double parentheses found. Consider removing them.",
    fixable=True,
)
BREAK_UNIT = RuleDescriptor(
    id="break_unit",
    summary="unnecessary double parentheses found after break. Consider removing them.",
    fixable=True,
)
UNIT_RETURN_TYPE = RuleDescriptor(
    id="unit_return_type",
    summary="unnecessary declared unit return type `()`",
    fixable=True,
)
REDUNDANT_BRACKETS_IN_ENUM_CALL = RuleDescriptor(
    id="redundant_brackets_in_enum_call",
    summary="redundant parentheses in enum call",
    fixable=True,
)
EMPTY_ENUM_BRACKETS_VARIANT = RuleDescriptor(
    id="empty_enum_brackets_variant",
    summary="redundant parentheses in enum variant definition",
    fixable=True,
)
DUPLICATE_UNDERSCORE_ARGS = RuleDescriptor(
    id="duplicate_underscore_args",
    summary="duplicate arguments, having another argument having almost the same name makes code comprehension and documentation more difficult",
)
ENUM_VARIANT_NAMES = RuleDescriptor(
    id="enum_variant_names",
    summary="All enum variants are prefixed or suffixed by the same characters.",
    default_enabled=False,
)

UNIT = "()"


def is_unit_tuple(node: SyntaxNode | None) -> bool:
    return node is not None and node.kind is SyntaxKind.TUPLE and not node.items("items")


def is_unit_type(node: SyntaxNode | None) -> bool:
    return node is not None and node.kind is SyntaxKind.TYPE and (node.token or "").replace(" ", "") == UNIT


def _parens_optional(node: SyntaxNode) -> bool:
    """The position of ``node`` accepts any expression without parentheses."""
    parent = node.parent
    if parent is None:
        return False
    if parent.kind in STATEMENT_KINDS or parent.kind is SyntaxKind.ARM:
        return True
    if parent.kind is SyntaxKind.BLOCK:
        return parent.field("tail") is node
    if parent.kind in (SyntaxKind.CALL, SyntaxKind.METHOD_CALL, SyntaxKind.TUPLE):
        return any(item is node for item in parent.items("args") + parent.items("items"))
    return False


class DoubleParensRule:
    """``((e))``; reported once, on the outermost pair."""

    descriptors = (DOUBLE_PARENS,)
    kinds = (SyntaxKind.PAREN,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        inner = node.field("inner")
        if inner is None or inner.kind is not SyntaxKind.PAREN:
            return []
        parent = node.parent
        if parent is not None and parent.kind is SyntaxKind.PAREN:
            return []
        return [Finding.from_node(rule=DOUBLE_PARENS, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        innermost = strip_parens(node)
        if precedence(innermost) >= ATOM_PRECEDENCE or _parens_optional(node):
            return Fix.single(node, innermost.text)
        return Fix.single(node, f"({innermost.text})")


class BreakUnitRule:
    """``break ();`` is ``break;``."""

    descriptors = (BREAK_UNIT,)
    kinds = (SyntaxKind.BREAK,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        if not is_unit_tuple(node.field("value")):
            return []
        return [Finding.from_node(rule=BREAK_UNIT, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None or node.tree is None:
            return None
        value = node.field("value")
        if not is_unit_tuple(value):
            return None
        start = whitespace_before(node.tree.source, value.span.start)  # type: ignore[union-attr]
        return Fix(edits=(TextEdit.delete(start, value.span.end),))  # type: ignore[union-attr]


class UnitReturnTypeRule:
    """``fn f() -> ()`` declares the default return type."""

    descriptors = (UNIT_RETURN_TYPE,)
    kinds = (SyntaxKind.FUNCTION,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        if not is_unit_type(node.field("return_type")):
            return []
        return [Finding.from_node(rule=UNIT_RETURN_TYPE, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None or node.tree is None:
            return None
        return_type = node.field("return_type")
        if not is_unit_type(return_type):
            return None
        source = node.tree.source
        arrow = source.rfind("->", node.span.start, return_type.span.start)  # type: ignore[union-attr]
        if arrow < 0:
            return None
        start = whitespace_before(source, arrow)
        return Fix(edits=(TextEdit.delete(start, return_type.span.end),))  # type: ignore[union-attr]


class RedundantBracketsInEnumCallRule:
    """``E::V(())`` constructs a unit variant; ``E::V`` says the same."""

    descriptors = (REDUNDANT_BRACKETS_IN_ENUM_CALL,)
    kinds = (SyntaxKind.CALL,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _variant(node: SyntaxNode) -> SyntaxNode | None:
        callee, args = node.field("callee"), node.items("args")
        if callee is None or callee.binding != "enum_variant":
            return None
        if len(args) != 1 or not is_unit_tuple(args[0]):
            return None
        return callee

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._variant(node) is None:
            return []
        return [Finding.from_node(rule=REDUNDANT_BRACKETS_IN_ENUM_CALL, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        if finding.node is None:
            return None
        callee = self._variant(finding.node)
        if callee is None:
            return None
        return Fix.single(finding.node, callee.text)


class EmptyEnumBracketsVariantRule:
    """``Variant: ()`` in an enum definition."""

    descriptors = (EMPTY_ENUM_BRACKETS_VARIANT,)
    kinds = (SyntaxKind.VARIANT,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        if not is_unit_type(node.field("type")):
            return []
        return [Finding.from_node(rule=EMPTY_ENUM_BRACKETS_VARIANT, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None or node.tree is None:
            return None
        variant_type = node.field("type")
        if not is_unit_type(variant_type):
            return None
        source = node.tree.source
        colon = source.rfind(":", node.span.start, variant_type.span.start)  # type: ignore[union-attr]
        if colon < 0:
            return None
        start = whitespace_before(source, colon)
        return Fix(edits=(TextEdit.delete(start, variant_type.span.end),))  # type: ignore[union-attr]


class DuplicateUnderscoreArgsRule:
    """Parameters ``x`` and ``_x`` in the same signature."""

    descriptors = (DUPLICATE_UNDERSCORE_ARGS,)
    kinds = (SyntaxKind.FUNCTION,)

    def check(self, node: SyntaxNode) -> list[Finding]:
        params = node.items("params")
        names = {param.token for param in params}
        return [
            Finding.from_node(rule=DUPLICATE_UNDERSCORE_ARGS, node=param)
            for param in params
            if param.token and param.token.startswith("_") and param.token[1:] in names
        ]


def word_split(name: str) -> list[str]:
    """``BlackForest_cake`` -> ``["Black", "Forest", "cake"]``."""
    words: list[str] = []
    start = 0
    for index in range(1, len(name)):
        previous, current = name[index - 1], name[index]
        if current.isupper() and previous.islower():
            words.append(name[start:index])
            start = index
        elif current == "_":
            words.append(name[start:index])
            start = index + 1
    if start < len(name):
        words.append(name[start:])
    return words


def shared_affixes(names: list[str]) -> tuple[list[str], list[str]]:
    """Words every name starts with, and words every name ends with (reversed)."""
    if len(names) < 2:
        return [], []
    prefix = word_split(names[0])
    suffix = prefix[::-1]
    for name in names[1:]:
        words = word_split(name)
        if len(words) == 1:
            return [], []
        prefix = [a for a, _ in takewhile(lambda pair: pair[0] == pair[1], zip(prefix, words))]
        suffix = [a for a, _ in takewhile(lambda pair: pair[0] == pair[1], zip(suffix, reversed(words)))]
    return prefix, suffix


class EnumVariantNamesRule:
    """
    ``enum Cake { BlackForestCake, HummingbirdCake }``: every variant repeats ``Cake``.

    Reported without a fix: renaming the variants here would leave every use
    site pointing at names that no longer exist.
    """

    descriptors = (ENUM_VARIANT_NAMES,)
    kinds = (SyntaxKind.ENUM,)

    def check(self, node: SyntaxNode) -> list[Finding]:
        names = [variant.token or "" for variant in node.items("variants")]
        prefix, suffix = shared_affixes(names)
        if not prefix and not suffix:
            return []
        return [Finding.from_node(rule=ENUM_VARIANT_NAMES, node=node)]
