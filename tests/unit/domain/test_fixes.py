"""Unit tests for FixSynthesizer."""

from unittest.mock import MagicMock

import pytest

from cairo_lint.domain.entities import Finding, Fix, RuleDescriptor, TextEdit
from cairo_lint.domain.errors import FixSynthesisError, MatcherSkipped
from cairo_lint.domain.fixes import FixSynthesizer
from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.domain.syntax import Span, SyntaxKind
from tests.cairo_tree import binary, body_fn, build, lit, stmt, var

SAMPLE = RuleDescriptor(id="sample", summary="sample", fixable=True)


class _CannedRule:
    """Reports every binary node; the fix is whatever the test sets."""

    descriptors = (SAMPLE,)
    kinds = (SyntaxKind.BINARY,)
    fix_type = "code"

    def __init__(self, fix=None, error: Exception | None = None) -> None:
        self._fix = fix
        self._error = error

    def check(self, node):
        return [Finding.from_node(rule=SAMPLE, node=node)]

    def fix(self, finding):
        if self._error is not None:
            raise self._error
        return self._fix(finding) if callable(self._fix) else self._fix


@pytest.fixture
def sample_finding():
    expr = binary(var("flag"), "==", lit("true"))
    tree = build(body_fn(stmt(expr)))
    finding = Finding.from_node(rule=SAMPLE, node=expr.node)
    return tree, finding


def _synthesizer(rule) -> FixSynthesizer:
    return FixSynthesizer(RuleRegistry([rule]))


class TestFixSynthesizer:
    def test_fix_inside_the_node_is_kept(self, sample_finding) -> None:
        _, finding = sample_finding
        fix = Fix.single(finding.node, "flag")

        assert _synthesizer(_CannedRule(fix)).synthesize(finding) is fix

    def test_rule_without_fix_capability(self, registry: RuleRegistry) -> None:
        """Diagnostic-only rules never get a fix."""
        expr = binary(var("a"), "==", var("b"))
        build(body_fn(stmt(expr)))
        finding = Finding(
            rule_id="ifs_same_cond", span=expr.node.span, message="m", severity=SAMPLE.severity, node=expr.node
        )

        assert FixSynthesizer(registry).synthesize(finding) is None

    def test_escaping_edit_is_rejected(self, sample_finding) -> None:
        _, finding = sample_finding
        escaping = Fix(edits=(TextEdit(Span(0, finding.span.end), "x"),))

        assert _synthesizer(_CannedRule(escaping)).synthesize(finding) is None

    def test_overlapping_edits_are_rejected(self, sample_finding) -> None:
        _, finding = sample_finding
        start = finding.span.start
        overlapping = Fix(
            edits=(TextEdit(Span(start, start + 3), "a"), TextEdit(Span(start + 2, start + 5), "b"))
        )

        assert _synthesizer(_CannedRule(overlapping)).synthesize(finding) is None

    def test_empty_fix_is_rejected(self, sample_finding) -> None:
        _, finding = sample_finding

        with pytest.raises(FixSynthesisError, match="no edits"):
            FixSynthesizer.validate(finding, Fix(edits=()))

    def test_matcher_skipped_while_fixing(self, sample_finding) -> None:
        _, finding = sample_finding
        rule = _CannedRule(error=MatcherSkipped("operand type unresolved"))

        assert _synthesizer(rule).synthesize(finding) is None

    def test_none_is_a_terminal_answer(self, sample_finding) -> None:
        _, finding = sample_finding
        assert _synthesizer(_CannedRule(None)).synthesize(finding) is None

    def test_finding_without_node(self) -> None:
        rule = MagicMock()
        finding = Finding(rule_id="sample", span=Span(0, 1), message="m", severity=SAMPLE.severity)

        assert _synthesizer(_CannedRule(rule)).synthesize(finding) is None
        rule.assert_not_called()

    def test_attach_keeps_the_finding_otherwise_equal(self, sample_finding) -> None:
        _, finding = sample_finding
        fix = Fix.single(finding.node, "flag")

        attached = _synthesizer(_CannedRule(fix)).attach(finding)

        assert attached.fix is fix
        assert attached.without_fix() == finding
