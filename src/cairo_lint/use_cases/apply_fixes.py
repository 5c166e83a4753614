"""ApplyFixes: accept non-conflicting fixes left to right and hand the edits to the applier."""

import logging
from collections.abc import Iterable

from cairo_lint.domain.entities import Finding, FixOutcome, TextEdit
from cairo_lint.domain.protocols import EditApplierProtocol
from cairo_lint.domain.syntax import Span

logger = logging.getLogger(__name__)


class ApplyFixesUseCase:
    """
    Runs after collection for the whole file has completed.

    Fixes are ordered by their first edit (then rule id). A fix whose edits
    collide with an already accepted fix is demoted: its finding is reported
    without a fix for this pass. Identical edits from two fixes are shared.
    """

    def __init__(self, edit_applier: EditApplierProtocol) -> None:
        self._edit_applier = edit_applier

    def execute(self, path: str, source: str, findings: Iterable[Finding]) -> FixOutcome:
        accepted, demoted = self.plan(findings)
        if not accepted:
            return FixOutcome(source=source, demoted=tuple(demoted))
        edits = self.edits_for(source, accepted)
        new_source = self._edit_applier.apply(path, source, edits)
        return FixOutcome(source=new_source, applied=tuple(accepted), demoted=tuple(demoted))

    @staticmethod
    def plan(findings: Iterable[Finding]) -> tuple[list[Finding], list[Finding]]:
        """Split fixable findings into (accepted, demoted)."""
        candidates = sorted(
            (f for f in findings if f.fix is not None),
            key=lambda f: (f.fix.start, f.rule_id),  # type: ignore[union-attr]
        )
        accepted: list[Finding] = []
        demoted: list[Finding] = []
        for finding in candidates:
            if any(finding.fix.overlaps(other.fix) for other in accepted):  # type: ignore[union-attr, arg-type]
                logger.info(
                    "Fix for %s at %d conflicts with an earlier fix; left as a diagnostic",
                    finding.rule_id,
                    finding.span.start,
                )
                demoted.append(finding.without_fix())
                continue
            accepted.append(finding)
        return accepted, demoted

    @staticmethod
    def edits_for(source: str, accepted: Iterable[Finding]) -> list[TextEdit]:
        """Sorted, de-duplicated edits, with ``use`` lines for imports the file lacks."""
        edits: dict[TextEdit, None] = {}
        imports: dict[str, None] = {}
        for finding in accepted:
            if finding.fix is None:
                continue
            edits.update(dict.fromkeys(finding.fix.edits))
            imports.update(dict.fromkeys(finding.fix.imports))
        missing = [path for path in imports if f"use {path};" not in source]
        if missing:
            header = "".join(f"use {path};\n" for path in missing)
            edits[TextEdit(span=Span(0, 0), text=header)] = None
        return sorted(edits, key=lambda e: (e.span.start, e.span.end))
