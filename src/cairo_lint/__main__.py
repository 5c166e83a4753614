"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from cairo_lint.infrastructure.di.container import CairoLintContainer
from cairo_lint.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = CairoLintContainer()

    deps = CLIDependencies(
        registry=container.get_registry(),
        fix_synthesizer=container.get_fix_synthesizer(),
        telemetry=container.get_telemetry_port(),
        tree_provider=container.get_tree_provider(),
        edit_applier=container.get_edit_applier(),
        reporter=container.get_reporter(),
        configure=container.build_rule_configuration,
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
