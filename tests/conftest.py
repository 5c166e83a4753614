"""Pytest configuration and shared lint helpers.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/
and the project root on sys.path so tests import ``tests.cairo_tree``.
"""

from collections.abc import Mapping

import pytest

from cairo_lint.domain.config import RuleConfiguration
from cairo_lint.domain.entities import Finding, Fix, LintReport
from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.domain.syntax import SyntaxTree
from cairo_lint.infrastructure.gateways.text_edit_applier import TextEditApplier
from cairo_lint.use_cases.apply_fixes import ApplyFixesUseCase
from cairo_lint.use_cases.lint_file import LintFileUseCase

REGISTRY = RuleRegistry()


def lint(
    tree: SyntaxTree,
    overrides: Mapping[str, object] | None = None,
    with_fixes: bool = False,
) -> LintReport:
    """Lint ``tree`` with the built-in rules and optional overrides."""
    configuration = RuleConfiguration(REGISTRY, overrides)
    return LintFileUseCase(REGISTRY, configuration).execute(tree, with_fixes=with_fixes)


def rule_ids(report: LintReport) -> list[str]:
    return [finding.rule_id for finding in report.findings]


def fixed_source(tree: SyntaxTree, fix: Fix) -> str:
    """Source of ``tree`` with one fix spliced in (imports ignored)."""
    edits = sorted(fix.edits, key=lambda e: (e.span.start, e.span.end))
    return TextEditApplier.splice(tree.source, edits)


def fix_all(tree: SyntaxTree, findings: tuple[Finding, ...] | list[Finding]) -> str:
    """Source after applying every non-conflicting fix, without touching the disk."""
    outcome = ApplyFixesUseCase(TextEditApplier(dry_run=True)).execute(tree.path, tree.source, findings)
    return outcome.source


@pytest.fixture
def registry() -> RuleRegistry:
    return REGISTRY
