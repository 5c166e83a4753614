"""Corelib API misuse: needless clones and conversions, plain unwraps on syscall results, manual emptiness checks, asserts on constants, panics."""

from typing import Literal

from cairo_lint.domain.constants import (
    ARRAY_NEW,
    ARRAY_TYPE,
    ASSERT_MACRO,
    OPTION_TYPE_PREFIX,
    SPAN_TYPE,
    SYSCALL_ERROR_TYPE,
    SYSCALL_RESULT,
    SYSCALL_RESULT_EXPANDED,
    SYSCALL_RESULT_TRAIT,
)
from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor
from cairo_lint.domain.errors import MatcherSkipped
from cairo_lint.domain.rules.shapes import (
    ATOM_PRECEDENCE,
    UNARY_PRECEDENCE,
    bool_value,
    call_target,
    int_value,
    is_panic,
    is_variant_constructor,
    strip_parens,
    wrapped,
)
from cairo_lint.domain.syntax import SyntaxKind, SyntaxNode

CLONE_ON_COPY = RuleDescriptor(
    id="clone_on_copy",
    summary="using `clone` on type which implements `Copy` trait",
    fixable=True,
)
UNWRAP_SYSCALL = RuleDescriptor(
    id="unwrap_syscall",
    summary="consider using `unwrap_syscall` instead of `unwrap`",
    fixable=True,
)
INEFFICIENT_UNWRAP_OR = RuleDescriptor(
    id="inefficient_unwrap_or",
    summary="Inefficient `unwrap_or` detected. Consider using `unwrap_or_else` instead.",
    fixable=True,
)
MANUAL_IS_EMPTY = RuleDescriptor(
    id="manual_is_empty",
    summary="Manual check for `is_empty` detected. Consider using `is_empty()` instead",
    fixable=True,
)
REDUNDANT_INTO = RuleDescriptor(
    id="redundant_into",
    summary="Redundant conversion: input and output types are the same.",
    fixable=True,
)
ASSERT_ON_CONST = RuleDescriptor(
    id="assert_on_const",
    summary="Unnecessary assert on a const value detected.",
)
PANIC_RULE = RuleDescriptor(
    id="panic",
    summary="Leaving `panic` in the code is discouraged.",
    default_enabled=False,
)


def _no_arg_method(node: SyntaxNode, name: str) -> SyntaxNode | None:
    """Receiver of ``receiver.name()``."""
    if node.token != name or node.items("args"):
        return None
    return node.field("receiver")


def is_syscall_result(ty: str) -> bool:
    ty = ty.lstrip("@")
    if ty.startswith(SYSCALL_RESULT):
        return True
    return ty.startswith(SYSCALL_RESULT_EXPANDED) and ty.endswith(f", {SYSCALL_ERROR_TYPE}>")


class CloneOnCopyRule:
    """``a.clone()`` where ``a`` is ``Copy``."""

    descriptors = (CLONE_ON_COPY,)
    kinds = (SyntaxKind.METHOD_CALL,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        receiver = _no_arg_method(node, "clone")
        if receiver is None:
            return []
        if receiver.copyable is None:
            raise MatcherSkipped("clone receiver has no resolved Copy fact")
        if not receiver.copyable:
            return []
        return [Finding.from_node(rule=CLONE_ON_COPY, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        receiver = _no_arg_method(node, "clone")
        if receiver is None:
            return None
        ty = receiver.ty or ""
        # `clone` on a snapshot yields the value behind it.
        snapshots = len(ty) - len(ty.lstrip("@"))
        if not snapshots:
            return Fix.single(node, receiver.text)
        text = "*" * snapshots + wrapped(receiver, UNARY_PRECEDENCE)
        parent = node.parent
        if parent is not None and parent.field("receiver") is node:
            text = f"({text})"
        return Fix.single(node, text)


class UnwrapSyscallRule:
    """``.unwrap()`` on a ``SyscallResult`` hides the syscall's revert reason."""

    descriptors = (UNWRAP_SYSCALL,)
    kinds = (SyntaxKind.METHOD_CALL,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        receiver = _no_arg_method(node, "unwrap")
        if receiver is None or not is_syscall_result(receiver.require_type()):
            return []
        return [Finding.from_node(rule=UNWRAP_SYSCALL, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        receiver = _no_arg_method(node, "unwrap")
        if receiver is None:
            return None
        return Fix.single(
            node,
            f"{wrapped(receiver, ATOM_PRECEDENCE)}.unwrap_syscall()",
            imports=(SYSCALL_RESULT_TRAIT,),
        )


class InefficientUnwrapOrRule:
    """``.unwrap_or(f())`` evaluates ``f()`` even when the value is present."""

    descriptors = (INEFFICIENT_UNWRAP_OR,)
    kinds = (SyntaxKind.METHOD_CALL,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _eager_argument(node: SyntaxNode) -> SyntaxNode | None:
        args = node.items("args")
        if node.token != "unwrap_or" or len(args) != 1:
            return None
        argument = args[0]
        if argument.kind is SyntaxKind.METHOD_CALL or (
            argument.kind is SyntaxKind.CALL and not is_variant_constructor(argument)
        ):
            return argument
        return None

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._eager_argument(node) is None:
            return []
        return [Finding.from_node(rule=INEFFICIENT_UNWRAP_OR, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        argument, receiver = self._eager_argument(node), node.field("receiver")
        if argument is None or receiver is None:
            return None
        return Fix.single(node, f"{wrapped(receiver, ATOM_PRECEDENCE)}.unwrap_or_else(|| {argument.text})")


class PanicRule:
    """Any ``panic!``, ``panic(..)`` or ``panic_with_felt252(..)``."""

    descriptors = (PANIC_RULE,)
    kinds = (SyntaxKind.CALL, SyntaxKind.MACRO)

    def check(self, node: SyntaxNode) -> list[Finding]:
        if not is_panic(node):
            return []
        return [Finding.from_node(rule=PANIC_RULE, node=node)]


def is_empty_array(expr: SyntaxNode) -> bool:
    """``ArrayTrait::new()`` or ``array![]``."""
    if expr.kind is SyntaxKind.MACRO:
        return expr.token == "array" and not expr.items("args")
    return call_target(expr) == ARRAY_NEW and not expr.items("args")


def is_sequence_type(ty: str) -> bool:
    ty = ty.lstrip("@")
    return ty.startswith(ARRAY_TYPE) or ty.startswith(SPAN_TYPE)


class ManualIsEmptyRule:
    """``a.len() == 0`` and ``a == ArrayTrait::new()`` spell out ``a.is_empty()``."""

    descriptors = (MANUAL_IS_EMPTY,)
    kinds = (SyntaxKind.BINARY,)
    fix_type: Literal["code"] = "code"

    @staticmethod
    def _subject(node: SyntaxNode) -> SyntaxNode | None:
        """Expression whose emptiness ``node`` tests."""
        lhs, rhs = node.field("lhs"), node.field("rhs")
        if node.token != "==" or lhs is None or rhs is None:
            return None
        lhs, rhs = strip_parens(lhs), strip_parens(rhs)
        for length, other in ((lhs, rhs), (rhs, lhs)):
            if length.kind is SyntaxKind.METHOD_CALL and int_value(other) == 0:
                receiver = _no_arg_method(length, "len")
                if receiver is not None and is_sequence_type(receiver.require_type()):
                    return receiver
        for empty, other in ((rhs, lhs), (lhs, rhs)):
            if is_empty_array(empty):
                return other
        return None

    def check(self, node: SyntaxNode) -> list[Finding]:
        if self._subject(node) is None:
            return []
        return [Finding.from_node(rule=MANUAL_IS_EMPTY, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None:
            return None
        subject = self._subject(node)
        if subject is None:
            return None
        return Fix.single(node, f"{wrapped(subject, ATOM_PRECEDENCE)}.is_empty()")


def option_payload(ty: str) -> str | None:
    """``T`` of ``core::option::Option::<T>``."""
    if ty.startswith(OPTION_TYPE_PREFIX) and ty.endswith(">"):
        return ty[len(OPTION_TYPE_PREFIX) : -1]
    return None


class RedundantIntoRule:
    """``x.into()`` or ``x.try_into()`` to the type ``x`` already has."""

    descriptors = (REDUNDANT_INTO,)
    kinds = (SyntaxKind.METHOD_CALL,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        if node.token not in ("into", "try_into"):
            return []
        receiver = _no_arg_method(node, node.token)
        if receiver is None:
            return []
        source, target = receiver.require_type(), node.require_type()
        if node.token == "try_into":
            target = option_payload(target)
        if source != target:
            return []
        return [Finding.from_node(rule=REDUNDANT_INTO, node=node)]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        # `try_into` wraps the value in an Option; dropping it changes the type.
        if node is None or node.token != "into":
            return None
        receiver = _no_arg_method(node, "into")
        if receiver is None:
            return None
        return Fix.single(node, receiver.text)


class AssertOnConstRule:
    """``assert!(true)`` never fires; ``assert!(false)`` always does."""

    descriptors = (ASSERT_ON_CONST,)
    kinds = (SyntaxKind.MACRO,)

    @staticmethod
    def _is_const_bool(expr: SyntaxNode) -> bool:
        expr = strip_parens(expr)
        if expr.kind is SyntaxKind.UNARY and expr.token == "!":
            operand = expr.field("operand")
            return operand is not None and AssertOnConstRule._is_const_bool(operand)
        return bool_value(expr) is not None

    def check(self, node: SyntaxNode) -> list[Finding]:
        args = node.items("args")
        if node.token != ASSERT_MACRO or not args or not self._is_const_bool(args[0]):
            return []
        return [Finding.from_node(rule=ASSERT_ON_CONST, node=node)]
