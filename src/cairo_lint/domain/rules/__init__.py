"""Rule protocols: what the registry and orchestrator expect from a matcher."""

__all__ = [
    "Checkable",
    "Fixable",
    "LintRule",
]

from typing import Literal, Protocol, runtime_checkable

from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor
from cairo_lint.domain.syntax import SyntaxKind, SyntaxNode

# -----------------------------------------------------------------------------
# Checkable finds, Fixable rewrites. Diagnostic-only rules implement Checkable
# alone; LintRule is the combination used by rules that ship a fix.
# -----------------------------------------------------------------------------


class Checkable(Protocol):
    """Stateless detector for one code shape, possibly backing several rule ids."""

    descriptors: tuple[RuleDescriptor, ...]
    kinds: tuple[SyntaxKind, ...]
    """Node kinds the orchestrator dispatches to this matcher."""

    def check(self, node: SyntaxNode) -> list[Finding]:
        """Return findings for ``node``; an empty list when the shape does not match."""
        ...


@runtime_checkable
class Fixable(Protocol):
    """Optional capability: turn one of the rule's findings into a text fix."""

    fix_type: Literal["code"]

    def fix(self, finding: Finding) -> Fix | None:
        """
        Return the edits that remove ``finding``, or None when no safe rewrite exists.

        None is a valid terminal state: the finding stays diagnostic-only.
        """
        ...


class LintRule(Checkable, Fixable, Protocol):
    """Checkable + Fixable."""
