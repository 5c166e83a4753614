"""Lint one file: Start -> Traverse -> Collect."""

import logging

from cairo_lint.domain.config import RuleConfiguration
from cairo_lint.domain.constants import UNKNOWN_LINT
from cairo_lint.domain.entities import Finding, LintReport
from cairo_lint.domain.errors import MatcherSkipped
from cairo_lint.domain.fixes import FixSynthesizer
from cairo_lint.domain.registry import UNKNOWN_LINT_RULE, RuleRegistry
from cairo_lint.domain.suppression import SuppressionContext, SuppressionResolver
from cairo_lint.domain.syntax import SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)


class LintFileUseCase:
    """
    Walks a tree once, pre-order, carrying the suppression context down.

    For each node the registry's dispatch table gives the candidate matchers;
    a matcher runs only if at least one rule it backs is enabled and not
    suppressed there. A matcher that cannot analyze a node (MatcherSkipped) is
    skipped for that node only.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        configuration: RuleConfiguration,
        fix_synthesizer: FixSynthesizer | None = None,
    ) -> None:
        self._registry = registry
        self._configuration = configuration
        self._fixes = fix_synthesizer or FixSynthesizer(registry)
        self._resolver = SuppressionResolver(registry)

    def execute(self, tree: SyntaxTree, with_fixes: bool = False) -> LintReport:
        findings: list[Finding] = []
        stack: list[tuple[SyntaxNode, SuppressionContext]] = [
            (tree.root, SuppressionContext(self._registry))
        ]
        while stack:
            node, outer = stack.pop()
            context = outer.enter(node)
            findings.extend(self._unknown_annotations(node, context))
            findings.extend(self._visit(node, context))
            stack.extend((child, context) for child in reversed(list(node.children())))

        if with_fixes:
            findings = [self._fixes.attach(finding) for finding in findings]
        findings.sort(key=lambda f: (f.span.start, f.rule_id))
        return LintReport(
            path=tree.path,
            findings=tuple(findings),
            config_issues=self._configuration.issues,
        )

    def _visit(self, node: SyntaxNode, context: SuppressionContext) -> list[Finding]:
        results: list[Finding] = []
        for rule in self._registry.rules_for(node.kind):
            active = {
                d.id
                for d in rule.descriptors
                if self._configuration.is_enabled(d.id) and not context.is_suppressed(d.id)
            }
            if not active:
                continue
            try:
                found = rule.check(node)
            except MatcherSkipped as exc:
                logger.debug("Skipping %s on %r: %s", type(rule).__name__, node, exc)
                continue
            for finding in found:
                if finding.rule_id not in active:
                    continue
                if not node.span.contains(finding.span):
                    logger.debug("Dropping %s finding outside its node %r", finding.rule_id, node)
                    continue
                results.append(finding)
        return results

    def _unknown_annotations(self, node: SyntaxNode, context: SuppressionContext) -> list[Finding]:
        if not self._configuration.is_enabled(UNKNOWN_LINT) or context.is_suppressed(UNKNOWN_LINT):
            return []
        return [
            Finding.from_node(
                rule=UNKNOWN_LINT_RULE,
                node=node,
                message=f"Unknown lint `{annotation.name}` in `#[{annotation.level.value}]` attribute",
            )
            for annotation in self._resolver.unknown_identifiers(node)
        ]
