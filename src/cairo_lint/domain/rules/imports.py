"""Imports the front end found no use for."""

from typing import Literal

from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor
from cairo_lint.domain.syntax import SyntaxKind, SyntaxNode

UNUSED_IMPORT = RuleDescriptor(
    id="unused_import",
    summary="Unused import.",
    fixable=True,
)


def import_leaves(node: SyntaxNode) -> list[SyntaxNode]:
    """Imported names under a use item; braced lists are flattened."""
    items = node.items("items")
    if not items:
        return [node]
    return [leaf for item in items for leaf in import_leaves(item)]


def is_unused(leaf: SyntaxNode) -> bool:
    return leaf.used is False


def kept_text(node: SyntaxNode, source: str) -> str | None:
    """Source of ``node`` with its unused names dropped; None when nothing is left."""
    items = node.items("items")
    if not items:
        return None if is_unused(node) else source[node.span.start : node.span.end]
    kept = [text for text in (kept_text(item, source) for item in items) if text is not None]
    if not kept:
        return None
    opening = source[node.span.start : items[0].span.start]
    closing = source[items[-1].span.end : node.span.end]
    return f"{opening}{', '.join(kept)}{closing}"


class UnusedImportRule:
    """
    A ``use`` item importing something never referenced.

    Reported once per top-level ``use``. The fix drops the unused names from a
    braced list, or the whole item when none of its names is used.
    """

    descriptors = (UNUSED_IMPORT,)
    kinds = (SyntaxKind.USE,)
    fix_type: Literal["code"] = "code"

    def check(self, node: SyntaxNode) -> list[Finding]:
        parent = node.parent
        if parent is not None and parent.kind is SyntaxKind.USE:
            return []
        unused = [leaf.token or leaf.text for leaf in import_leaves(node) if is_unused(leaf)]
        if not unused:
            return []
        return [Finding.from_node(rule=UNUSED_IMPORT, node=node, message=f"Unused import: {', '.join(unused)}")]

    def fix(self, finding: Finding) -> Fix | None:
        node = finding.node
        if node is None or node.tree is None:
            return None
        text = kept_text(node, node.tree.source)
        return Fix.single(node, text if text is not None else "")
