"""CLI entry points for cairo-lint - Thin Controller using Typer."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import typer

from cairo_lint.domain.config import RuleConfiguration
from cairo_lint.domain.entities import LintReport
from cairo_lint.domain.errors import ConfigurationError, TreeFormatError
from cairo_lint.domain.fixes import FixSynthesizer
from cairo_lint.domain.protocols import (
    EditApplierProtocol,
    TelemetryPort,
    TreeProviderProtocol,
)
from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.domain.syntax import SyntaxTree
from cairo_lint.interface.reporters import LintReporter
from cairo_lint.use_cases.apply_fixes import ApplyFixesUseCase
from cairo_lint.use_cases.lint_file import LintFileUseCase

EXIT_FINDINGS = 1
EXIT_CONFIG = 2


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    registry: RuleRegistry
    fix_synthesizer: FixSynthesizer
    telemetry: TelemetryPort
    tree_provider: TreeProviderProtocol
    edit_applier: EditApplierProtocol
    reporter: LintReporter
    configure: Callable[[Path | None], RuleConfiguration]


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def apply_fixes(
        use_case: ApplyFixesUseCase,
        telemetry: TelemetryPort,
        tree: SyntaxTree,
        report: LintReport,
    ) -> LintReport:
        """Apply the report's fixes; return the findings that remain, without fixes."""
        outcome = use_case.execute(tree.path, tree.source, report.findings)
        if outcome.changed:
            telemetry.step(f"Fixed {len(outcome.applied)} finding(s) in {tree.path}")
        applied = set(outcome.applied)
        remaining = tuple(f.without_fix() for f in report.findings if f not in applied)
        return LintReport(path=report.path, findings=remaining, config_issues=report.config_issues)

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="cairo-lint",
            help="cairo-lint: static analysis for Cairo. Run 'cairo-lint check' on front-end tree dumps.",
            add_completion=False,
        )

        def _session_start(verbose: bool) -> None:
            logging.basicConfig(
                level=logging.DEBUG if verbose else logging.WARNING,
                format="%(levelname)s %(name)s: %(message)s",
            )
            deps.telemetry.handshake()

        def _configure(config: Path | None) -> RuleConfiguration:
            try:
                configuration = deps.configure(config)
            except ConfigurationError as exc:
                deps.telemetry.error(str(exc))
                raise typer.Exit(code=EXIT_CONFIG) from exc
            for issue in configuration.issues:
                deps.telemetry.warning(issue.message)
            return configuration

        @app.command()
        def check(
            trees: list[Path] = typer.Argument(..., help="Tree dumps (JSON) produced by the Cairo front end"),  # noqa: B008
            fix: bool = typer.Option(False, "--fix", help="Apply fixes and write the sources back"),
            config: Path | None = typer.Option(None, "--config", help="Scarb.toml holding [tool.cairo-lint]"),  # noqa: B008
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
        ) -> None:
            """Lint tree dumps; exits 1 when an error-severity finding remains."""
            _session_start(verbose)
            configuration = _configure(config)
            deps.telemetry.debug(f"{len(configuration.enabled_ids)} rule(s) enabled")
            lint = LintFileUseCase(deps.registry, configuration, deps.fix_synthesizer)
            fixer = ApplyFixesUseCase(deps.edit_applier)

            failed = False
            for tree_path in trees:
                try:
                    tree = deps.tree_provider.load(str(tree_path))
                except TreeFormatError as exc:
                    deps.telemetry.error(str(exc))
                    failed = True
                    continue
                deps.telemetry.step(f"Linting {tree.path}")
                report = lint.execute(tree, with_fixes=fix)
                if fix:
                    report = CLIAppFactory.apply_fixes(fixer, deps.telemetry, tree, report)
                deps.reporter.report(report, tree.source)
                failed = failed or report.has_errors()

            if failed:
                raise typer.Exit(code=EXIT_FINDINGS)

        @app.command()
        def rules(
            config: Path | None = typer.Option(None, "--config", help="Scarb.toml holding [tool.cairo-lint]"),  # noqa: B008
        ) -> None:
            """List every rule with its group, severity and enablement."""
            _session_start(False)
            configuration = _configure(config)
            deps.reporter.render_rules(deps.registry.descriptors(), configuration.enabled_ids)

        return app
