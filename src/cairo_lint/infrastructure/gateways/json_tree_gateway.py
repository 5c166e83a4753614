"""Decode the front end's JSON tree dump into SyntaxTree objects."""

import json
from pathlib import Path

from cairo_lint.domain.errors import TreeFormatError
from cairo_lint.domain.syntax import (
    Annotation,
    AnnotationLevel,
    Span,
    SyntaxKind,
    SyntaxNode,
    SyntaxTree,
)


class JsonTreeGateway:
    """
    Tree provider reading ``{"path", "source", "root"}`` documents.

    Each node is ``{"kind", "span": [start, end], "token"?, "fields"?, "ty"?,
    "value"?, "resolved"?, "binding"?, "copyable"?, "macro"?, "annotations"?}``;
    a field holds a node, a list of nodes or null.
    """

    def load(self, path: str) -> SyntaxTree:
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as exc:
            raise TreeFormatError(f"Cannot read tree dump {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise TreeFormatError(f"{path} is not valid JSON: {exc}") from exc
        return self.decode(payload, default_path=path)

    def decode(self, payload: object, default_path: str = "<memory>") -> SyntaxTree:
        if not isinstance(payload, dict):
            raise TreeFormatError("Tree dump must be a JSON object")
        source = payload.get("source")
        root = payload.get("root")
        if not isinstance(source, str) or not isinstance(root, dict):
            raise TreeFormatError("Tree dump needs a string 'source' and an object 'root'")
        path = payload.get("path") or default_path
        return SyntaxTree(str(path), source, self._node(root, len(source)))

    def _node(self, raw: dict, limit: int) -> SyntaxNode:
        kind = raw.get("kind")
        span = raw.get("span")
        if not isinstance(kind, str):
            raise TreeFormatError(f"Node without a kind: {raw!r:.80}")
        if (
            not isinstance(span, list)
            or len(span) != 2
            or not all(isinstance(v, int) for v in span)
            or not 0 <= span[0] <= span[1] <= limit
        ):
            raise TreeFormatError(f"Invalid span {span!r} on {kind} node")

        fields: dict[str, SyntaxNode | tuple[SyntaxNode, ...] | None] = {}
        for name, value in (raw.get("fields") or {}).items():
            if value is None:
                fields[name] = None
            elif isinstance(value, list):
                fields[name] = tuple(self._node(item, limit) for item in value)
            elif isinstance(value, dict):
                fields[name] = self._node(value, limit)
            else:
                raise TreeFormatError(f"Field {name!r} of {kind} node is neither a node nor a list")

        return SyntaxNode(
            SyntaxKind.parse(kind),
            Span(span[0], span[1]),
            raw.get("token"),
            fields,
            ty=raw.get("ty"),
            value=raw.get("value"),
            resolved=raw.get("resolved"),
            binding=raw.get("binding"),
            copyable=raw.get("copyable"),
            macro=raw.get("macro"),
            used=raw.get("used"),
            annotations=tuple(self._annotation(item) for item in raw.get("annotations") or ()),
        )

    @staticmethod
    def _annotation(raw: object) -> Annotation:
        if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
            raise TreeFormatError(f"Invalid annotation {raw!r}")
        try:
            level = AnnotationLevel(raw.get("level", "allow"))
        except ValueError as exc:
            raise TreeFormatError(f"Unknown annotation level {raw.get('level')!r}") from exc
        return Annotation(level, raw["name"])
