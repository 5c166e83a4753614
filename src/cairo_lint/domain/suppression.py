"""
Allow-scope resolution.

Annotations on a node apply to that node and everything below it. They are
folded outermost scope first; within one node ``all`` is applied before group
names and group names before rule ids, so the nearest and most specific
annotation decides. ``allow`` suppresses, ``deny``/``warn`` re-enable.
"""

from __future__ import annotations

from collections.abc import Iterable

from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.domain.syntax import Annotation, SyntaxNode


def apply_annotations(
    registry: RuleRegistry,
    suppressed: frozenset[str],
    annotations: Iterable[Annotation],
) -> frozenset[str]:
    """Suppressed set after entering a scope carrying ``annotations``."""
    state = set(suppressed)
    for annotation in sorted(annotations, key=lambda a: registry.specificity(a.name)):
        rule_ids = registry.expand(annotation.name)
        if rule_ids is None:
            continue
        if annotation.suppresses:
            state |= rule_ids
        else:
            state -= rule_ids
    return frozenset(state)


class SuppressionContext:
    """Suppressed rule ids at one point of a pre-order walk."""

    __slots__ = ("_registry", "_suppressed")

    def __init__(self, registry: RuleRegistry, suppressed: frozenset[str] = frozenset()) -> None:
        self._registry = registry
        self._suppressed = suppressed

    @property
    def suppressed(self) -> frozenset[str]:
        return self._suppressed

    def enter(self, node: SyntaxNode) -> "SuppressionContext":
        """Context for ``node`` and its descendants."""
        if not node.annotations:
            return self
        return SuppressionContext(
            self._registry, apply_annotations(self._registry, self._suppressed, node.annotations)
        )

    def is_suppressed(self, rule_id: str) -> bool:
        return rule_id in self._suppressed


class SuppressionResolver:
    """
    Per-node lookup for callers outside a tree walk.

    ``resolve`` gives the same answer as the SuppressionContext that
    LintFileUseCase threads down its walk; ``unknown_identifiers`` is used by
    that walk directly. Stateless, so any node may be asked any number of times.
    """

    def __init__(self, registry: RuleRegistry) -> None:
        self._registry = registry

    def resolve(self, node: SyntaxNode) -> frozenset[str]:
        """Rule ids suppressed at ``node``, walking enclosing scopes up to the module."""
        scopes = [node, *node.ancestors()]
        context = SuppressionContext(self._registry)
        for scope in reversed(scopes):
            context = context.enter(scope)
        return context.suppressed

    def unknown_identifiers(self, node: SyntaxNode) -> list[Annotation]:
        """Annotations on ``node`` naming neither a rule, a group nor ``all``."""
        return [a for a in node.annotations if self._registry.expand(a.name) is None]
