"""Terminal reporter: renders findings and the rule catalogue with rich."""

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cairo_lint.domain.entities import (
    LintReport,
    RuleDescriptor,
    Severity,
)
from cairo_lint.domain.syntax import Span

_SEVERITY_STYLE = {
    Severity.WARNING: "bold #F9A602",
    Severity.ERROR: "bold #C41E3A",
}


def line_col(source: str, offset: int) -> tuple[int, int]:
    """1-based line and column of ``offset``."""
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, column


class TerminalLintReporter:
    """
    Prints ``path:line:col: severity[rule]: message`` lines, one per finding.

    Also a DiagnosticsSink: ``emit`` formats against the file most recently
    passed to ``report`` (or ``begin``).
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._path = "<unknown>"
        self._source = ""

    def begin(self, path: str, source: str) -> None:
        self._path = path
        self._source = source

    def emit(self, span: Span, severity: Severity, message: str, rule_id: str) -> None:
        line, column = line_col(self._source, span.start)
        style = _SEVERITY_STYLE[severity]
        self.console.print(
            f"{escape(self._path)}:{line}:{column}: "
            f"[{style}]{severity.value}[/][dim]\\[{rule_id}][/]: {escape(message)}",
            highlight=False,
        )

    def report(self, report: LintReport, source: str) -> None:
        self.begin(report.path, source)
        for finding in report.findings:
            self.emit(finding.span, finding.severity, finding.message, finding.rule_id)
        if not report.findings:
            self.console.print(f"[green]✅ {escape(report.path)}: no findings[/]", highlight=False)
            return
        errors = sum(1 for f in report.findings if f.severity is Severity.ERROR)
        self.console.print(
            f"{escape(report.path)}: {len(report.findings)} finding(s), {errors} error(s), "
            f"{len(report.fixable())} fixable",
            highlight=False,
        )

    def render_rules(self, descriptors: Sequence[RuleDescriptor], enabled: frozenset[str]) -> None:
        table = Table(title="[CAIRO-LINT] Rules", header_style="bold #007BFF")
        table.add_column("Rule ID", style="#00EEFF")
        table.add_column("Group")
        table.add_column("Severity")
        table.add_column("Enabled")
        table.add_column("Fix?")
        table.add_column("Description")
        for descriptor in descriptors:
            table.add_row(
                descriptor.id,
                descriptor.group or "-",
                descriptor.severity.value,
                "yes" if descriptor.id in enabled else "no",
                "✅ Auto" if descriptor.fixable else "⚠️ Manual",
                descriptor.summary,
            )
        self.console.print(table)
