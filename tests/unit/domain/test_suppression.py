"""Unit tests for allow/deny scope resolution."""

import unittest

from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.domain.suppression import (
    SuppressionContext,
    SuppressionResolver,
    apply_annotations,
)
from tests.cairo_tree import (
    allow,
    binary,
    block,
    build,
    deny,
    function,
    lit,
    module,
    stmt,
    var,
)

DOUBLE_COMPARISON_IDS = {
    "simplifiable_comparison",
    "redundant_comparison",
    "contradictory_comparison",
    "tautological_comparison",
    "impossible_comparison",
}


class TestApplyAnnotations(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = RuleRegistry()

    def test_group_name_suppresses_every_member(self) -> None:
        state = apply_annotations(self.registry, frozenset(), allow("double_comparison"))
        self.assertEqual(state, DOUBLE_COMPARISON_IDS)

    def test_specific_name_wins_within_one_scope(self) -> None:
        """``deny(panic)`` listed before ``allow(all)`` still re-enables panic."""
        state = apply_annotations(self.registry, frozenset(), deny("panic") + allow("all"))

        self.assertNotIn("panic", state)
        self.assertIn("eq_comp_op", state)

    def test_rule_id_beats_its_group(self) -> None:
        state = apply_annotations(self.registry, frozenset(), deny("eq_diff_op") + allow("eq_op"))

        self.assertIn("eq_comp_op", state)
        self.assertNotIn("eq_diff_op", state)

    def test_unknown_names_are_ignored(self) -> None:
        state = apply_annotations(self.registry, frozenset({"panic"}), allow("no_such_lint"))
        self.assertEqual(state, {"panic"})


class TestSuppressionContext(unittest.TestCase):
    def test_inner_scope_re_enables(self) -> None:
        registry = RuleRegistry()
        inner = function("f", block(), annotations=deny("eq_op"))
        tree = build(module(inner, annotations=allow("all")))

        outer_context = SuppressionContext(registry).enter(tree.root)
        inner_context = outer_context.enter(inner.node)

        self.assertTrue(outer_context.is_suppressed("eq_comp_op"))
        self.assertFalse(inner_context.is_suppressed("eq_comp_op"))
        self.assertTrue(inner_context.is_suppressed("panic"))

    def test_node_without_annotations_keeps_context(self) -> None:
        registry = RuleRegistry()
        tree = build(module(function("f", block())))
        context = SuppressionContext(registry, frozenset({"panic"}))

        self.assertIs(context.enter(tree.root), context)


class TestSuppressionResolver(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = SuppressionResolver(RuleRegistry())

    def test_resolve_walks_enclosing_scopes(self) -> None:
        expr = binary(var("a"), "==", var("a"))
        tree = build(
            module(
                function("f", block(stmt(expr)), annotations=allow("eq_comp_op")),
                annotations=allow("double_comparison"),
            )
        )

        suppressed = self.resolver.resolve(expr.node)

        self.assertEqual(suppressed, DOUBLE_COMPARISON_IDS | {"eq_comp_op"})
        self.assertEqual(self.resolver.resolve(tree.root), DOUBLE_COMPARISON_IDS)

    def test_resolve_matches_the_walk(self) -> None:
        """Resolving any node gives the same set the pre-order walk carries to it."""
        expr = binary(var("x"), ">", lit("1"))
        inner = function("g", block(stmt(expr)), annotations=deny("impossible_comparison"))
        tree = build(module(inner, annotations=allow("double_comparison")))
        self.assertIs(inner.node.parent, tree.root)
        registry = RuleRegistry()

        walked = SuppressionContext(registry)
        for node in [*reversed(list(expr.node.ancestors())), expr.node]:
            walked = walked.enter(node)

        self.assertEqual(self.resolver.resolve(expr.node), walked.suppressed)
        self.assertNotIn("impossible_comparison", walked.suppressed)

    def test_unknown_identifiers(self) -> None:
        node = function("f", block(), annotations=allow("panic", "not_a_lint"))
        build(module(node))

        unknown = self.resolver.unknown_identifiers(node.node)

        self.assertEqual([a.name for a in unknown], ["not_a_lint"])
