"""Unit tests for unused_import."""

from cairo_lint.domain.rules.imports import UnusedImportRule, import_leaves
from tests.cairo_tree import allow, block, build, function, module, use_path, use_tree
from tests.conftest import fix_all, fixed_source, lint, rule_ids


def _main():
    return function("main", block())


class TestUnusedImportRule:
    def test_unused_single_import_is_removed(self) -> None:
        node = use_path("core::num::traits::Zero", used=False)
        tree = build(module(node, _main()))

        report = lint(tree, with_fixes=True)

        assert rule_ids(report) == ["unused_import"]
        assert fix_all(tree, report.findings) == "\nfn main() { }\n"

    def test_used_import_is_fine(self) -> None:
        tree = build(module(use_path("core::num::traits::Zero"), _main()))

        assert rule_ids(lint(tree)) == []

    def test_unused_name_is_dropped_from_a_list(self) -> None:
        rule = UnusedImportRule()
        node = use_tree(
            "core::num::traits",
            use_path("Zero", top=False),
            use_path("One", used=False, top=False),
            use_path("Bounded", top=False),
        )
        tree = build(module(node, _main()))

        [finding] = rule.check(node.node)

        assert "One" in finding.message
        assert fixed_source(tree, rule.fix(finding)).startswith("use core::num::traits::{Zero, Bounded};\n")

    def test_fully_unused_list_is_removed(self) -> None:
        rule = UnusedImportRule()
        node = use_tree(
            "core::num::traits",
            use_path("Zero", used=False, top=False),
            use_path("One", used=False, top=False),
        )
        tree = build(module(node, _main()))

        [finding] = rule.check(node.node)

        assert fixed_source(tree, rule.fix(finding)) == "\nfn main() { }\n"

    def test_nested_list_keeps_its_used_names(self) -> None:
        rule = UnusedImportRule()
        nested = use_tree("traits", use_path("Zero", top=False), use_path("One", used=False, top=False), top=False)
        node = use_tree("core::num", nested, use_path("Sqrt", used=False, top=False))
        tree = build(module(node, _main()))

        [finding] = rule.check(node.node)

        assert rule.check(nested.node) == []
        assert fixed_source(tree, rule.fix(finding)).startswith("use core::num::{traits::{Zero}};\n")

    def test_unknown_usage_counts_as_used(self) -> None:
        tree = build(module(use_path("core::num::traits::Zero", used=None), _main()))

        assert rule_ids(lint(tree)) == []

    def test_leaves_are_flattened(self) -> None:
        nested = use_tree("traits", use_path("Zero", top=False), use_path("One", top=False), top=False)
        node = use_tree("core::num", nested, use_path("Sqrt", top=False))
        build(module(node, _main()))

        assert [leaf.token for leaf in import_leaves(node.node)] == ["Zero", "One", "Sqrt"]

    def test_allow_on_module_silences_it(self) -> None:
        node = use_path("core::num::traits::Zero", used=False)
        tree = build(module(node, _main(), annotations=allow("unused_import")))

        assert rule_ids(lint(tree)) == []
