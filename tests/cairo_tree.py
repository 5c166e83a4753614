"""
Tiny builder for resolved Cairo trees.

Node constructors return prototypes made of literal text and named child
slots; ``build`` renders the source and assigns exact spans, so tests can
write ``binary(var("x"), ">=", lit("200"))`` and get both the text and the
tree. After ``build`` every prototype's ``node`` points at its SyntaxNode.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cairo_lint.domain.constants import ERR, NONE, OK, SOME
from cairo_lint.domain.syntax import (
    Annotation,
    AnnotationLevel,
    Span,
    SyntaxKind,
    SyntaxNode,
    SyntaxTree,
)

U32 = "core::integer::u32"
FELT = "core::felt252"
BOOL = "core::bool"


@dataclass
class One:
    name: str
    child: "Proto"


@dataclass
class Many:
    name: str
    children: list["Proto"]
    sep: str = ", "


@dataclass
class Proto:
    kind: SyntaxKind
    pieces: list[Any]
    token: str | None = None
    facts: dict[str, Any] = field(default_factory=dict)
    node: SyntaxNode | None = None


def n(kind: SyntaxKind, *pieces: Any, token: str | None = None, **facts: Any) -> Proto:
    flat: list[Any] = []
    for piece in pieces:
        if isinstance(piece, (list, tuple)):
            flat.extend(p for p in piece if p is not None)
        elif piece is not None:
            flat.append(piece)
    return Proto(kind, flat, token, facts)


class _Writer:
    def __init__(self) -> None:
        self.parts: list[str] = []
        self.offset = 0

    def write(self, text: str) -> None:
        self.parts.append(text)
        self.offset += len(text)

    def render(self, proto: Proto) -> SyntaxNode:
        start = self.offset
        fields: dict[str, SyntaxNode | tuple[SyntaxNode, ...] | None] = {}
        for piece in proto.pieces:
            if isinstance(piece, str):
                self.write(piece)
            elif isinstance(piece, One):
                fields[piece.name] = self.render(piece.child)
            elif isinstance(piece, Many):
                children = []
                for index, child in enumerate(piece.children):
                    if index:
                        self.write(piece.sep)
                    children.append(self.render(child))
                fields[piece.name] = tuple(children)
        node = SyntaxNode(proto.kind, Span(start, self.offset), proto.token, fields, **proto.facts)
        proto.node = node
        return node


def build(root: Proto, path: str = "src/lib.cairo") -> SyntaxTree:
    writer = _Writer()
    node = writer.render(root)
    return SyntaxTree(path, "".join(writer.parts), node)


def render(root: Proto) -> str:
    return build(root).source


def to_dict(tree: SyntaxTree) -> dict[str, Any]:
    """JSON document in the tree-dump format."""

    def encode(node: SyntaxNode) -> dict[str, Any]:
        raw: dict[str, Any] = {"kind": node.kind.value, "span": [node.span.start, node.span.end]}
        if node.token is not None:
            raw["token"] = node.token
        fields: dict[str, Any] = {}
        for name in node.field_names():
            single = node.field(name)
            fields[name] = encode(single) if single is not None else [encode(c) for c in node.items(name)]
        if fields:
            raw["fields"] = fields
        for fact in ("ty", "value", "resolved", "binding", "copyable", "macro", "used"):
            value = getattr(node, fact)
            if value is not None:
                raw[fact] = value
        if node.annotations:
            raw["annotations"] = [{"level": a.level.value, "name": a.name} for a in node.annotations]
        return raw

    return {"path": tree.path, "source": tree.source, "root": encode(tree.root)}


def allow(*names: str) -> tuple[Annotation, ...]:
    return tuple(Annotation(AnnotationLevel.ALLOW, name) for name in names)


def deny(*names: str) -> tuple[Annotation, ...]:
    return tuple(Annotation(AnnotationLevel.DENY, name) for name in names)


# -- expressions ---------------------------------------------------------------


def var(name: str, ty: str | None = U32, **facts: Any) -> Proto:
    return n(SyntaxKind.PATH, name, token=name, ty=ty, binding="variable", **facts)


def lit(text: str, ty: str | None = None, **facts: Any) -> Proto:
    return n(SyntaxKind.LITERAL, text, token=text, ty=ty, **facts)


def binary(lhs: Proto, op: str, rhs: Proto, **facts: Any) -> Proto:
    return n(SyntaxKind.BINARY, One("lhs", lhs), f" {op} ", One("rhs", rhs), token=op, **facts)


def unary(op: str, operand: Proto) -> Proto:
    return n(SyntaxKind.UNARY, op, One("operand", operand), token=op)


def paren(inner: Proto) -> Proto:
    return n(SyntaxKind.PAREN, "(", One("inner", inner), ")", ty=inner.facts.get("ty"))


def tuple_(*items: Proto) -> Proto:
    return n(SyntaxKind.TUPLE, "(", Many("items", list(items)), ")")


def variant(name: str, resolved: str) -> Proto:
    return n(SyntaxKind.PATH, name, token=name, resolved=resolved, binding="enum_variant")


def function_path(name: str, resolved: str) -> Proto:
    return n(SyntaxKind.PATH, name, token=name, resolved=resolved, binding="function")


def call(callee: Proto, *args: Proto, **facts: Any) -> Proto:
    return n(SyntaxKind.CALL, One("callee", callee), "(", Many("args", list(args)), ")", **facts)


def some(arg: Proto) -> Proto:
    return call(variant("Option::Some", SOME), arg)


def none() -> Proto:
    return variant("Option::None", NONE)


def ok(arg: Proto) -> Proto:
    return call(variant("Result::Ok", OK), arg)


def err(arg: Proto) -> Proto:
    return call(variant("Result::Err", ERR), arg)


def method(receiver: Proto, name: str, *args: Proto, **facts: Any) -> Proto:
    return n(
        SyntaxKind.METHOD_CALL,
        One("receiver", receiver),
        f".{name}(",
        Many("args", list(args)),
        ")",
        token=name,
        **facts,
    )


def macro(name: str, *args: Proto) -> Proto:
    return n(SyntaxKind.MACRO, f"{name}!(", Many("args", list(args)), ")", token=name)


def block(*statements: Proto, tail: Proto | None = None) -> Proto:
    if not statements and tail is None:
        return n(SyntaxKind.BLOCK, "{ }")
    pieces: list[Any] = ["{ "]
    if statements:
        pieces.append(Many("statements", list(statements), sep=" "))
    if statements and tail is not None:
        pieces.append(" ")
    if tail is not None:
        pieces.append(One("tail", tail))
    pieces.append(" }")
    return n(SyntaxKind.BLOCK, *pieces)


def if_(condition: Proto, then: Proto, else_: Proto | None = None, **facts: Any) -> Proto:
    return n(
        SyntaxKind.IF,
        "if ",
        One("condition", condition),
        " ",
        One("then", then),
        [" else ", One("else", else_)] if else_ is not None else None,
        **facts,
    )


def let_condition(pattern: Proto, value: Proto) -> Proto:
    return n(SyntaxKind.LET_CONDITION, "let ", One("pattern", pattern), " = ", One("value", value))


def if_let(pattern: Proto, value: Proto, then: Proto, else_: Proto | None = None) -> Proto:
    return if_(let_condition(pattern, value), then, else_)


def loop(body: Proto) -> Proto:
    return n(SyntaxKind.LOOP, "loop ", One("body", body))


def while_(condition: Proto, body: Proto) -> Proto:
    return n(SyntaxKind.WHILE, "while ", One("condition", condition), " ", One("body", body))


def for_(item: str, iterable: Proto, body: Proto) -> Proto:
    return n(
        SyntaxKind.FOR,
        "for ",
        One("pattern", pat_ident(item)),
        " in ",
        One("iterable", iterable),
        " ",
        One("body", body),
    )


def match(scrutinee: Proto, *arms: Proto) -> Proto:
    return n(SyntaxKind.MATCH, "match ", One("scrutinee", scrutinee), " { ", Many("arms", list(arms)), " }")


def arm(pattern: Proto, body: Proto) -> Proto:
    return n(SyntaxKind.ARM, One("pattern", pattern), " => ", One("body", body))


# -- statements ----------------------------------------------------------------


def stmt(expr: Proto, semicolon: bool = True) -> Proto:
    return n(SyntaxKind.EXPR_STMT, One("expr", expr), ";" if semicolon else None)


def let(name: str, value: Proto) -> Proto:
    return n(SyntaxKind.LET, "let ", One("pattern", pat_ident(name)), " = ", One("value", value), ";")


def break_(value: Proto | None = None) -> Proto:
    return n(SyntaxKind.BREAK, "break", [" ", One("value", value)] if value is not None else None, ";")


def return_(value: Proto) -> Proto:
    return n(SyntaxKind.RETURN, "return ", One("value", value), ";")


# -- patterns ------------------------------------------------------------------


def pat_ident(name: str) -> Proto:
    return n(SyntaxKind.PATTERN_IDENT, name, token=name)


def pat_wild() -> Proto:
    return n(SyntaxKind.PATTERN_WILDCARD, "_", token="_")


def pat_variant(name: str, resolved: str, inner: Proto | None = None) -> Proto:
    return n(
        SyntaxKind.PATTERN_ENUM,
        name,
        ["(", One("inner", inner), ")"] if inner is not None else None,
        token=name,
        resolved=resolved,
    )


def pat_some(inner: Proto) -> Proto:
    return pat_variant("Option::Some", SOME, inner)


def pat_none() -> Proto:
    return pat_variant("Option::None", NONE)


def pat_ok(inner: Proto) -> Proto:
    return pat_variant("Result::Ok", OK, inner)


def pat_err(inner: Proto) -> Proto:
    return pat_variant("Result::Err", ERR, inner)


# -- items ---------------------------------------------------------------------


def type_(text: str) -> Proto:
    return n(SyntaxKind.TYPE, text, token=text)


def param(name: str, ty: str = "u32") -> Proto:
    return n(SyntaxKind.PARAM, f"{name}: {ty}", token=name)


def function(
    name: str,
    body: Proto,
    params: tuple[Proto, ...] = (),
    return_type: Proto | None = None,
    annotations: tuple[Annotation, ...] = (),
) -> Proto:
    return n(
        SyntaxKind.FUNCTION,
        f"fn {name}(",
        Many("params", list(params)),
        ")",
        [" -> ", One("return_type", return_type)] if return_type is not None else None,
        " ",
        One("body", body),
        token=name,
        annotations=annotations,
    )


def use_path(path: str, used: bool | None = True, top: bool = True) -> Proto:
    """``use a::b;`` (or the bare ``a::b`` inside a braced list when not ``top``)."""
    return n(SyntaxKind.USE, f"use {path};" if top else path, token=path, used=used)


def use_tree(prefix: str, *items: Proto, top: bool = True) -> Proto:
    """``use prefix::{..};``; items come from use_path/use_tree with ``top=False``."""
    opening = f"use {prefix}::{{" if top else f"{prefix}::{{"
    return n(SyntaxKind.USE, opening, Many("items", list(items)), "};" if top else "}", token=prefix)


def variant_def(name: str, ty: Proto | None = None) -> Proto:
    return n(SyntaxKind.VARIANT, name, [": ", One("type", ty)] if ty is not None else None, token=name)


def enum(name: str, *variants: Proto) -> Proto:
    return n(SyntaxKind.ENUM, f"enum {name} {{ ", Many("variants", list(variants)), " }", token=name)


def module(*items: Proto, annotations: tuple[Annotation, ...] = ()) -> Proto:
    return n(SyntaxKind.MODULE, Many("items", list(items), sep="\n"), "\n", annotations=annotations)


def body_fn(*statements: Proto, tail: Proto | None = None, name: str = "main") -> Proto:
    """Module holding one function with the given body."""
    return module(function(name, block(*statements, tail=tail)))
