from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from cairo_lint.domain.syntax import Span

if TYPE_CHECKING:
    from cairo_lint.domain.syntax import SyntaxNode


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class RuleDescriptor:
    """Static metadata for one rule. Built once from the registry table."""

    id: str
    summary: str
    default_enabled: bool = True
    severity: Severity = Severity.WARNING
    fixable: bool = False
    group: str | None = None


@dataclass(frozen=True)
class TextEdit:
    """Replace the text covered by ``span`` with ``text``."""

    span: Span
    text: str

    @classmethod
    def replace_node(cls, node: "SyntaxNode", text: str) -> "TextEdit":
        return cls(span=node.span, text=text)

    @classmethod
    def delete(cls, start: int, end: int) -> "TextEdit":
        return cls(span=Span(start, end), text="")


@dataclass(frozen=True)
class Fix:
    """
    One or more disjoint edits that remove a finding.

    ``imports`` names paths that must be in scope for the replacement text to
    resolve; the fix applier adds a ``use`` line for each missing one.
    """

    edits: tuple[TextEdit, ...]
    imports: tuple[str, ...] = ()

    @classmethod
    def single(cls, node: "SyntaxNode", text: str, imports: tuple[str, ...] = ()) -> "Fix":
        return cls(edits=(TextEdit.replace_node(node, text),), imports=imports)

    @property
    def start(self) -> int:
        return min(edit.span.start for edit in self.edits)

    def overlaps(self, other: "Fix") -> bool:
        """True when any edit of ``other`` collides with an edit of this fix."""
        return any(_collide(mine, theirs) for mine in self.edits for theirs in other.edits)

    def is_disjoint(self) -> bool:
        """True when no two edits of this fix collide."""
        edits = self.edits
        return not any(
            edits[i] == edits[j] or _collide(edits[i], edits[j])
            for i in range(len(edits))
            for j in range(i + 1, len(edits))
        )


def _collide(first: TextEdit, second: TextEdit) -> bool:
    if first == second:
        return False
    if first.span.overlaps(second.span):
        return True
    # Two insertions at one point, or an insertion at the edge of a replacement.
    if first.span.is_empty or second.span.is_empty:
        return first.span.start == second.span.start
    return False


@dataclass(frozen=True)
class Finding:
    """One detected issue: rule, span to underline, message, severity, optional fix."""

    rule_id: str
    span: Span
    message: str
    severity: Severity
    fix: Fix | None = None
    node: "SyntaxNode | None" = field(default=None, compare=False, repr=False)

    @classmethod
    def from_node(
        cls,
        *,
        rule: RuleDescriptor,
        node: "SyntaxNode",
        message: str | None = None,
    ) -> "Finding":
        """Build a Finding spanning ``node`` with the rule's summary and severity."""
        return cls(
            rule_id=rule.id,
            span=node.span,
            message=message or rule.summary,
            severity=rule.severity,
            node=node,
        )

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def with_fix(self, fix: Fix | None) -> "Finding":
        return replace(self, fix=fix)

    def without_fix(self) -> "Finding":
        return replace(self, fix=None)


@dataclass(frozen=True)
class ConfigIssue:
    """Non-fatal configuration problem (e.g. an unknown rule identifier)."""

    identifier: str
    message: str


@dataclass(frozen=True)
class LintReport:
    """Findings for one file, sorted by span start then rule id."""

    path: str
    findings: tuple[Finding, ...] = ()
    config_issues: tuple[ConfigIssue, ...] = ()

    def has_errors(self) -> bool:
        return any(f.severity is Severity.ERROR for f in self.findings)

    def by_rule(self, rule_id: str) -> list[Finding]:
        return [f for f in self.findings if f.rule_id == rule_id]

    def fixable(self) -> list[Finding]:
        return [f for f in self.findings if f.fix is not None]


@dataclass(frozen=True)
class FixOutcome:
    """Result of applying a batch of fixes to one file."""

    source: str
    applied: tuple[Finding, ...] = ()
    demoted: tuple[Finding, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.applied)
