"""Read-only view of a resolved Cairo syntax tree handed over by the front end."""

from __future__ import annotations

import weakref
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

from cairo_lint.domain.errors import MatcherSkipped


@dataclass(frozen=True)
class Span:
    """Half-open [start, end) range of character offsets into a file's source."""

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, other: "Span") -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "Span") -> bool:
        """True when the two ranges share at least one character."""
        return self.start < other.end and other.start < self.end


class SyntaxKind(Enum):
    """Node kinds the engine understands. Anything else is OTHER and never matched."""

    # Items
    MODULE = "module"
    FUNCTION = "function"
    PARAM = "param"
    IMPL = "impl"
    TRAIT = "trait"
    ENUM = "enum"
    VARIANT = "variant"
    STRUCT = "struct"
    TYPE = "type"
    USE = "use"
    # Statements
    LET = "let"
    EXPR_STMT = "expr_stmt"
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"
    # Expressions
    BLOCK = "block"
    PATH = "path"
    LITERAL = "literal"
    BINARY = "binary"
    UNARY = "unary"
    PAREN = "paren"
    TUPLE = "tuple"
    CALL = "call"
    METHOD_CALL = "method_call"
    MEMBER = "member"
    INDEX = "index"
    MACRO = "macro"
    MATCH = "match"
    ARM = "arm"
    IF = "if"
    LET_CONDITION = "let_condition"
    LOOP = "loop"
    WHILE = "while"
    FOR = "for"
    CLOSURE = "closure"
    # Patterns
    PATTERN_ENUM = "pattern_enum"
    PATTERN_IDENT = "pattern_ident"
    PATTERN_WILDCARD = "pattern_wildcard"
    PATTERN_LITERAL = "pattern_literal"
    PATTERN_TUPLE = "pattern_tuple"

    OTHER = "other"

    @classmethod
    def parse(cls, raw: str) -> "SyntaxKind":
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER


STATEMENT_KINDS = frozenset(
    {
        SyntaxKind.LET,
        SyntaxKind.EXPR_STMT,
        SyntaxKind.RETURN,
        SyntaxKind.BREAK,
        SyntaxKind.CONTINUE,
    }
)


class AnnotationLevel(Enum):
    """Lint level carried by an attribute such as ``#[allow(panic)]``."""

    ALLOW = "allow"
    DENY = "deny"
    WARN = "warn"


@dataclass(frozen=True)
class Annotation:
    """One decoded suppression annotation attached directly to a node."""

    level: AnnotationLevel
    name: str

    @property
    def suppresses(self) -> bool:
        return self.level is AnnotationLevel.ALLOW


class SyntaxNode:
    """
    Handle into the front end's tree.

    Children are reached through named fields; semantic facts are optional and
    absent when the front end could not resolve them. The parent link and the
    owning tree are weak references: a node never keeps its tree alive.
    """

    __slots__ = (
        "kind",
        "span",
        "token",
        "_fields",
        "ty",
        "value",
        "resolved",
        "binding",
        "copyable",
        "macro",
        "used",
        "annotations",
        "_parent",
        "_tree",
        "__weakref__",
    )

    def __init__(
        self,
        kind: SyntaxKind,
        span: Span,
        token: str | None = None,
        fields: Mapping[str, "SyntaxNode | tuple[SyntaxNode, ...] | None"] | None = None,
        *,
        ty: str | None = None,
        value: object = None,
        resolved: str | None = None,
        binding: str | None = None,
        copyable: bool | None = None,
        macro: str | None = None,
        used: bool | None = None,
        annotations: tuple[Annotation, ...] = (),
    ) -> None:
        self.kind = kind
        self.span = span
        self.token = token
        self._fields = dict(fields or {})
        self.ty = ty
        self.value = value
        self.resolved = resolved
        self.binding = binding
        self.copyable = copyable
        self.macro = macro
        self.used = used
        self.annotations = annotations
        self._parent: weakref.ReferenceType[SyntaxNode] | None = None
        self._tree: weakref.ReferenceType[SyntaxTree] | None = None

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind.name}, {self.span.start}..{self.span.end}, token={self.token!r})"

    # -- structure -----------------------------------------------------------

    def field(self, name: str) -> "SyntaxNode | None":
        """Single child stored under ``name`` (None when absent or a sequence)."""
        child = self._fields.get(name)
        return child if isinstance(child, SyntaxNode) else None

    def items(self, name: str) -> tuple["SyntaxNode", ...]:
        """Sequence child stored under ``name`` (empty when absent)."""
        child = self._fields.get(name)
        if isinstance(child, tuple):
            return child
        if isinstance(child, SyntaxNode):
            return (child,)
        return ()

    def field_names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def children(self) -> Iterator["SyntaxNode"]:
        """Direct children in field declaration order."""
        for child in self._fields.values():
            if isinstance(child, SyntaxNode):
                yield child
            elif isinstance(child, tuple):
                yield from child

    def walk(self) -> Iterator["SyntaxNode"]:
        """Pre-order traversal: parent before children, each node once."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children())))

    @property
    def parent(self) -> "SyntaxNode | None":
        return self._parent() if self._parent is not None else None

    def ancestors(self) -> Iterator["SyntaxNode"]:
        """Enclosing nodes from the nearest parent up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def tree(self) -> "SyntaxTree | None":
        return self._tree() if self._tree is not None else None

    @property
    def text(self) -> str:
        tree = self.tree
        if tree is None:
            return ""
        return tree.source[self.span.start : self.span.end]

    def is_kind(self, *kinds: SyntaxKind) -> bool:
        return self.kind in kinds

    # -- semantic facts ------------------------------------------------------

    def require_type(self) -> str:
        """Resolved type or MatcherSkipped when the front end left it open."""
        if self.ty is None:
            raise MatcherSkipped(f"{self.kind.name} at {self.span.start} has no resolved type")
        return self.ty

    def structure(self) -> tuple[object, ...]:
        """Trivia-free structural key: kind, token and children, recursively."""
        parts: list[object] = [self.kind, self.token]
        for name, child in self._fields.items():
            if isinstance(child, SyntaxNode):
                parts.append((name, child.structure()))
            elif isinstance(child, tuple):
                parts.append((name, tuple(c.structure() for c in child)))
            else:
                parts.append((name, None))
        return tuple(parts)


class SyntaxTree:
    """
    One file's resolved tree and its source text.

    Constructing the tree links every node to its parent and to the tree.
    Spans must lie inside the source text.
    """

    def __init__(self, path: str, source: str, root: SyntaxNode) -> None:
        self.path = path
        self.source = source
        self.root = root
        self._link(root)

    def _link(self, root: SyntaxNode) -> None:
        tree_ref = weakref.ref(self)
        root._tree = tree_ref
        for node in root.walk():
            node_ref = weakref.ref(node)
            for child in node.children():
                child._parent = node_ref
                child._tree = tree_ref

    def nodes(self) -> Iterator[SyntaxNode]:
        return self.root.walk()
