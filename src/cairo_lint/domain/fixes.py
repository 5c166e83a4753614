"""Fix synthesis: ask the owning rule for edits, then enforce the structural invariants."""

import logging

from cairo_lint.domain.entities import Finding, Fix
from cairo_lint.domain.errors import FixSynthesisError, MatcherSkipped
from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.domain.rules import Fixable

logger = logging.getLogger(__name__)


class FixSynthesizer:
    """Turns findings into fixes. A finding without a safe fix stays diagnostic-only."""

    def __init__(self, registry: RuleRegistry) -> None:
        self._registry = registry

    def synthesize(self, finding: Finding) -> Fix | None:
        rule = self._registry.rule_for(finding.rule_id)
        if rule is None or finding.node is None or not isinstance(rule, Fixable):
            return None
        try:
            fix = rule.fix(finding)
            if fix is None:
                return None
            self.validate(finding, fix)
        except (FixSynthesisError, MatcherSkipped) as exc:
            logger.debug("No fix for %s at %d: %s", finding.rule_id, finding.span.start, exc)
            return None
        return fix

    def attach(self, finding: Finding) -> Finding:
        """Finding carrying its fix (or none)."""
        return finding.with_fix(self.synthesize(finding))

    @staticmethod
    def validate(finding: Finding, fix: Fix) -> None:
        """Raise FixSynthesisError when ``fix`` escapes the finding's node or overlaps itself."""
        if not fix.edits:
            raise FixSynthesisError("fix has no edits")
        bounds = finding.node.span if finding.node is not None else finding.span
        for edit in fix.edits:
            if not bounds.contains(edit.span):
                raise FixSynthesisError(
                    f"edit {edit.span.start}..{edit.span.end} escapes {bounds.start}..{bounds.end}"
                )
        if not fix.is_disjoint():
            raise FixSynthesisError("edits of one fix overlap")
