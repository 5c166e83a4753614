"""Interface for lint reporting."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cairo_lint.domain.entities import LintReport, RuleDescriptor


class LintReporter(Protocol):
    """Protocol for presenting lint results."""

    def report(self, report: "LintReport", source: str) -> None:
        """Report every finding of one file; spans are offsets into ``source``."""
        ...

    def render_rules(self, descriptors: Sequence["RuleDescriptor"], enabled: frozenset[str]) -> None:
        """Table of the rule catalogue."""
        ...
