"""Unit tests for LintFileUseCase."""

import unittest
from unittest.mock import MagicMock

from cairo_lint.domain.config import RuleConfiguration
from cairo_lint.domain.entities import Finding, RuleDescriptor
from cairo_lint.domain.errors import MatcherSkipped
from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.domain.syntax import Span, SyntaxKind
from cairo_lint.use_cases.lint_file import LintFileUseCase
from tests.cairo_tree import (
    allow,
    binary,
    block,
    body_fn,
    build,
    deny,
    function,
    lit,
    module,
    paren,
    stmt,
    var,
)
from tests.conftest import lint, rule_ids

ALPHA = RuleDescriptor(id="alpha", summary="alpha")
BETA = RuleDescriptor(id="beta", summary="beta")


class _Matcher:
    """Reports every node of the given kind under its descriptor."""

    def __init__(self, descriptor: RuleDescriptor, kind: SyntaxKind, skip_on: str | None = None) -> None:
        self.descriptors = (descriptor,)
        self.kinds = (kind,)
        self._skip_on = skip_on
        self.calls = 0

    def check(self, node):
        self.calls += 1
        if self._skip_on is not None and node.token == self._skip_on:
            raise MatcherSkipped("no type for operand")
        return [Finding.from_node(rule=self.descriptors[0], node=node)]


def _impossible(name: str):
    """``x >= 200 && x < 100``: always reported as impossible_comparison."""
    return binary(binary(var(name), ">=", lit("200")), "&&", binary(var(name), "<", lit("100")))


class TestLintFileUseCase(unittest.TestCase):
    def test_disabled_matcher_never_runs(self) -> None:
        matcher = _Matcher(ALPHA, SyntaxKind.PATH)
        registry = RuleRegistry([matcher])
        tree = build(body_fn(stmt(var("a"))))

        report = LintFileUseCase(registry, RuleConfiguration(registry, {"alpha": False})).execute(tree)

        self.assertEqual(report.findings, ())
        self.assertEqual(matcher.calls, 0)

    def test_skip_is_isolated_to_one_matcher_and_node(self) -> None:
        skipping = _Matcher(ALPHA, SyntaxKind.PATH, skip_on="a")
        steady = _Matcher(BETA, SyntaxKind.PATH)
        registry = RuleRegistry([skipping, steady])
        tree = build(body_fn(stmt(binary(var("a"), "+", var("b")))))

        report = LintFileUseCase(registry, RuleConfiguration(registry)).execute(tree)

        self.assertEqual(
            [(f.rule_id, tree.source[f.span.start:f.span.end]) for f in report.findings],
            [("beta", "a"), ("alpha", "b"), ("beta", "b")],
        )

    def test_findings_sorted_by_start_then_rule(self) -> None:
        tree = build(body_fn(stmt(paren(paren(binary(var("a"), "==", var("a")))))))

        report = lint(tree)

        starts = [(f.span.start, f.rule_id) for f in report.findings]
        self.assertEqual(starts, sorted(starts))
        self.assertEqual(rule_ids(report), ["double_parens", "eq_comp_op"])

    def test_finding_outside_its_node_is_dropped(self) -> None:
        class Stray:
            descriptors = (ALPHA,)
            kinds = (SyntaxKind.PATH,)

            def check(self, node):
                return [Finding(rule_id="alpha", span=Span(0, 1), message="m", severity=ALPHA.severity)]

        registry = RuleRegistry([Stray()])
        tree = build(body_fn(stmt(var("a"))))

        report = LintFileUseCase(registry, RuleConfiguration(registry)).execute(tree)

        self.assertEqual(report.findings, ())

    def test_unknown_annotation_is_reported(self) -> None:
        node = function("f", block(), annotations=allow("not_a_lint"))
        tree = build(module(node))

        report = lint(tree)

        self.assertEqual(rule_ids(report), ["unknown_lint"])
        self.assertIn("not_a_lint", report.findings[0].message)
        self.assertEqual(report.findings[0].span, node.node.span)

    def test_unknown_lint_can_be_allowed(self) -> None:
        node = function("f", block(), annotations=allow("not_a_lint", "unknown_lint"))
        tree = build(module(node))

        self.assertEqual(rule_ids(lint(tree)), [])

    def test_unknown_lint_allowed_on_an_enclosing_scope(self) -> None:
        node = function("f", block(), annotations=allow("not_a_lint"))
        tree = build(module(node, annotations=allow("unknown_lint")))

        self.assertEqual(rule_ids(lint(tree)), [])

    def test_unknown_lint_can_be_disabled_in_config(self) -> None:
        tree = build(module(function("f", block(), annotations=allow("not_a_lint"))))

        report = lint(tree, {"unknown_lint": False})

        self.assertEqual(rule_ids(report), [])
        self.assertEqual(report.config_issues, ())

    def test_allow_scopes_cover_their_subtree_only(self) -> None:
        """The allowed function is silent; its sibling still reports."""
        tree = build(
            module(
                function("quiet", block(stmt(_impossible("x"))), annotations=allow("double_comparison")),
                function("loud", block(stmt(_impossible("y")))),
            )
        )

        report = lint(tree)

        self.assertEqual(rule_ids(report), ["impossible_comparison"])
        self.assertIn("y >= 200", tree.source[report.findings[0].span.start:])

    def test_deny_re_enables_inside_allow(self) -> None:
        tree = build(
            module(
                function("f", block(stmt(_impossible("x"))), annotations=deny("impossible_comparison")),
                annotations=allow("all"),
            )
        )

        self.assertEqual(rule_ids(lint(tree)), ["impossible_comparison"])

    def test_config_issues_are_carried(self) -> None:
        tree = build(body_fn(stmt(var("a"))))

        report = lint(tree, {"nonsense": True})

        self.assertEqual([issue.identifier for issue in report.config_issues], ["nonsense"])

    def test_fixes_attached_on_request(self) -> None:
        tree = build(body_fn(stmt(binary(var("flag", ty="core::bool"), "==", lit("true")))))

        self.assertFalse(lint(tree).fixable())
        self.assertEqual([f.rule_id for f in lint(tree, with_fixes=True).fixable()], ["bool_comparison"])

    def test_custom_fix_synthesizer_is_used(self) -> None:
        registry = RuleRegistry([_Matcher(ALPHA, SyntaxKind.PATH)])
        synthesizer = MagicMock()
        synthesizer.attach.side_effect = lambda finding: finding
        tree = build(body_fn(stmt(var("a"))))

        LintFileUseCase(registry, RuleConfiguration(registry), synthesizer).execute(tree, with_fixes=True)

        synthesizer.attach.assert_called_once()
