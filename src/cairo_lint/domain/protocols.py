from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cairo_lint.domain.entities import Severity, TextEdit
    from cairo_lint.domain.syntax import Span, SyntaxTree


class TreeProviderProtocol(Protocol):
    """Front end handing over one file's resolved tree. Spans stay valid for the pass."""

    def load(self, path: str) -> "SyntaxTree":
        ...


class DiagnosticsSinkProtocol(Protocol):
    """Receives findings for presentation; the core never formats terminal output."""

    def emit(self, span: "Span", severity: "Severity", message: str, rule_id: str) -> None:
        ...


class EditApplierProtocol(Protocol):
    """Replaces source text with sorted, non-overlapping edits and persists the result."""

    def apply(self, path: str, source: str, edits: Sequence["TextEdit"]) -> str:
        """Return the rewritten source."""
        ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def debug(self, message: str) -> None: ...
    def handshake(self) -> None: ...
