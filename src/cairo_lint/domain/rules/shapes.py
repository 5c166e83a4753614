"""Shape predicates and text helpers shared by the matchers."""

import re

from cairo_lint.domain.constants import (
    ARRAY_NEW,
    DEFAULT,
    FALSE,
    INTEGER_TYPES,
    NEVER_TYPE,
    PANIC,
    PANIC_MACRO,
    PANIC_WITH_FELT252,
    PRIMITIVE_TYPES,
    TRUE,
)
from cairo_lint.domain.relations import Relation
from cairo_lint.domain.syntax import SyntaxKind, SyntaxNode

ASSIGNMENT_OPERATORS = frozenset({"=", "+=", "-=", "*=", "/=", "%="})

_EFFECTFUL_KINDS = frozenset(
    {
        SyntaxKind.METHOD_CALL,
        SyntaxKind.MACRO,
        SyntaxKind.BLOCK,
        SyntaxKind.MATCH,
        SyntaxKind.IF,
        SyntaxKind.LOOP,
        SyntaxKind.WHILE,
        SyntaxKind.FOR,
        SyntaxKind.CLOSURE,
        SyntaxKind.INDEX,
        SyntaxKind.OTHER,
    }
)

# Binding strength of binary operators, loosest first.
_BINARY_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
    "|": 4,
    "^": 5,
    "&": 6,
    "+": 7,
    "-": 7,
    "*": 8,
    "/": 8,
    "%": 8,
}
UNARY_PRECEDENCE = 9
ATOM_PRECEDENCE = 10

_INT_LITERAL = re.compile(
    r"^(?P<num>0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*?)"
    r"(?:_?(?:u8|u16|u32|u64|u128|u256|i8|i16|i32|i64|i128|usize|felt252))?$"
)


def same_structure(first: SyntaxNode, second: SyntaxNode) -> bool:
    """Structural equality, ignoring whitespace and comments."""
    return first.structure() == second.structure()


def is_side_effect_free(node: SyntaxNode) -> bool:
    """True when evaluating ``node`` twice is indistinguishable from evaluating it once."""
    for sub in node.walk():
        if sub.kind in _EFFECTFUL_KINDS:
            return False
        if sub.kind is SyntaxKind.CALL and not is_variant_constructor(sub):
            return False
        if sub.kind is SyntaxKind.BINARY and sub.token in ASSIGNMENT_OPERATORS:
            return False
    return True


def is_variant_constructor(call: SyntaxNode) -> bool:
    callee = call.field("callee")
    return callee is not None and callee.binding == "enum_variant"


def is_integer_type(ty: str | None) -> bool:
    return ty in INTEGER_TYPES


def is_primitive_type(ty: str | None) -> bool:
    return ty in PRIMITIVE_TYPES


def strip_parens(node: SyntaxNode) -> SyntaxNode:
    while node.kind is SyntaxKind.PAREN and node.field("inner") is not None:
        node = node.field("inner")  # type: ignore[assignment]
    return node


def int_value(node: SyntaxNode) -> int | None:
    """Integer constant held by a literal, from the front end's hint or the token."""
    if node.kind is not SyntaxKind.LITERAL:
        return None
    if isinstance(node.value, int) and not isinstance(node.value, bool):
        return node.value
    match = _INT_LITERAL.match(node.token or "")
    if match is None:
        return None
    digits = match.group("num").replace("_", "")
    base = {"0x": 16, "0o": 8, "0b": 2}.get(digits[:2], 10)
    return int(digits[2:] if base != 10 else digits, base)


def bool_value(node: SyntaxNode) -> bool | None:
    """True/False for the boolean literals (or paths resolving to the bool variants)."""
    if node.kind is SyntaxKind.LITERAL and node.token in ("true", "false"):
        return node.token == "true"
    if node.kind is SyntaxKind.PATH and node.resolved in (TRUE, FALSE):
        return node.resolved == TRUE
    return None


def variant_of(expr: SyntaxNode) -> str | None:
    """Enum variant an expression constructs, if any."""
    value = bool_value(expr)
    if value is not None:
        return TRUE if value else FALSE
    if expr.kind is SyntaxKind.PATH and expr.binding == "enum_variant":
        return expr.resolved
    if expr.kind is SyntaxKind.CALL and is_variant_constructor(expr):
        return expr.field("callee").resolved  # type: ignore[union-attr]
    return None


def call_target(expr: SyntaxNode) -> str | None:
    if expr.kind is SyntaxKind.CALL:
        callee = expr.field("callee")
        return callee.resolved if callee is not None else None
    return None


def arm_value(body: SyntaxNode | None) -> SyntaxNode | None:
    """
    The single expression an arm or branch evaluates to.

    A block qualifies only when it holds nothing but a tail expression:
    ``{ true; }`` evaluates to ``()``, not to ``true``.
    """
    if body is None:
        return None
    if body.kind is not SyntaxKind.BLOCK:
        return body
    if body.items("statements"):
        return None
    return body.field("tail")


def diverging_statement(body: SyntaxNode | None) -> SyntaxNode | None:
    """Lone statement of a block that never completes, such as ``{ panic_with_felt252('x'); }``."""
    if body is None or body.kind is not SyntaxKind.BLOCK or body.field("tail") is not None:
        return None
    statements = body.items("statements")
    if len(statements) != 1:
        return None
    statement = statements[0]
    expr = statement.field("expr") if statement.kind is SyntaxKind.EXPR_STMT else statement
    return expr if returns_never(expr) else None


def arm_expression(body: SyntaxNode | None) -> SyntaxNode | None:
    """Value of an arm, or its diverging statement when the arm cannot produce one."""
    value = arm_value(body)
    return value if value is not None else diverging_statement(body)


def pattern_binding(pattern: SyntaxNode | None) -> str | None:
    """Identifier bound by an ``E::V(x)`` pattern."""
    if pattern is None or pattern.kind is not SyntaxKind.PATTERN_ENUM:
        return None
    inner = pattern.field("inner")
    if inner is not None and inner.kind is SyntaxKind.PATTERN_IDENT:
        return inner.token
    return None


def binding_unused(pattern: SyntaxNode | None) -> bool:
    """The pattern binds nothing the arm could use (no inner, ``_`` or ``_name``)."""
    if pattern is None or pattern.kind is not SyntaxKind.PATTERN_ENUM:
        return pattern is None
    inner = pattern.field("inner")
    if inner is None or inner.kind is SyntaxKind.PATTERN_WILDCARD:
        return True
    return inner.kind is SyntaxKind.PATTERN_IDENT and (inner.token or "").startswith("_")


def binds_nothing(pattern: SyntaxNode) -> bool:
    """Pattern made only of enum variants and literals, usable as an expression."""
    for sub in pattern.walk():
        if sub.kind not in (SyntaxKind.PATTERN_ENUM, SyntaxKind.PATTERN_LITERAL, SyntaxKind.PATTERN_TUPLE):
            return False
    return True


def is_path_named(expr: SyntaxNode | None, name: str | None) -> bool:
    return (
        expr is not None
        and name is not None
        and expr.kind is SyntaxKind.PATH
        and expr.token == name
    )


def is_default_value(expr: SyntaxNode | None) -> bool:
    """Expression equal to the type's ``Default::default()``."""
    if expr is None:
        return False
    expr = strip_parens(expr)
    if expr.kind is SyntaxKind.CALL:
        return call_target(expr) in (DEFAULT, ARRAY_NEW) and not expr.items("args")
    if expr.kind is SyntaxKind.LITERAL:
        return int_value(expr) == 0 or expr.token in ("false", '""')
    if expr.kind is SyntaxKind.TUPLE:
        return all(is_default_value(item) for item in expr.items("items"))
    if expr.kind is SyntaxKind.BLOCK:
        return is_default_value(arm_value(expr))
    return False


def is_panic(expr: SyntaxNode | None) -> bool:
    """``panic!(..)``, ``panic(..)`` or ``panic_with_felt252(..)``."""
    if expr is None:
        return False
    if expr.kind is SyntaxKind.MACRO:
        return expr.token == PANIC_MACRO
    return call_target(expr) in (PANIC, PANIC_WITH_FELT252)


def returns_never(expr: SyntaxNode | None) -> bool:
    """Expression that diverges (panics, returns)."""
    if expr is None:
        return False
    if expr.ty == NEVER_TYPE or is_panic(expr):
        return True
    if expr.kind is SyntaxKind.RETURN:
        return True
    if expr.kind is SyntaxKind.BLOCK:
        return returns_never(arm_value(expr)) or diverging_statement(expr) is not None
    return False


def precedence(node: SyntaxNode) -> int:
    if node.kind is SyntaxKind.BINARY:
        return _BINARY_PRECEDENCE.get(node.token or "", 0)
    if node.kind is SyntaxKind.UNARY:
        return UNARY_PRECEDENCE
    if node.kind in (SyntaxKind.IF, SyntaxKind.MATCH, SyntaxKind.LOOP, SyntaxKind.CLOSURE):
        return 0
    return ATOM_PRECEDENCE


def operator_precedence(token: str) -> int:
    return _BINARY_PRECEDENCE[token]


def wrapped(node: SyntaxNode, min_precedence: int) -> str:
    """Source text of ``node``, parenthesised when it binds looser than ``min_precedence``."""
    if precedence(node) < min_precedence:
        return f"({node.text})"
    return node.text


def negated_text(node: SyntaxNode) -> tuple[str, int]:
    """
    Text of the logical negation of a boolean expression, and its precedence.

    Relations are flipped, ``&&``/``||`` follow De Morgan, ``!x`` drops the
    ``!`` and literals swap. Anything else becomes ``!x`` or ``!(..)``.
    """
    if node.kind is SyntaxKind.PAREN and node.field("inner") is not None:
        return negated_text(node.field("inner"))  # type: ignore[arg-type]
    if node.kind is SyntaxKind.LITERAL and node.token in ("true", "false"):
        return ("false" if node.token == "true" else "true"), ATOM_PRECEDENCE
    if node.kind is SyntaxKind.UNARY and node.token == "!":
        operand = node.field("operand")
        if operand is not None:
            return operand.text, precedence(operand)
    if node.kind is SyntaxKind.BINARY:
        lhs, rhs = node.field("lhs"), node.field("rhs")
        relation = Relation.from_token(node.token)
        if lhs is not None and rhs is not None:
            if relation is not None:
                return f"{lhs.text} {relation.negated().token} {rhs.text}", operator_precedence(relation.token)
            if node.token in ("&&", "||"):
                joined = "||" if node.token == "&&" else "&&"
                level = operator_precedence(joined)
                parts = []
                for operand in (lhs, rhs):
                    text, prec = negated_text(operand)
                    parts.append(f"({text})" if prec < level else text)
                return f" {joined} ".join(parts), level
    return f"!{wrapped(node, UNARY_PRECEDENCE)}", UNARY_PRECEDENCE


def whitespace_before(source: str, position: int) -> int:
    """Offset where the run of whitespace ending at ``position`` starts."""
    while position > 0 and source[position - 1] in " \t\r\n":
        position -= 1
    return position


def whitespace_after(source: str, position: int) -> int:
    """Offset just past the run of whitespace starting at ``position``."""
    while position < len(source) and source[position] in " \t\r\n":
        position += 1
    return position
