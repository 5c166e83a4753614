from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from cairo_lint.domain.config import RuleConfiguration
from cairo_lint.domain.fixes import FixSynthesizer
from cairo_lint.domain.registry import RuleRegistry
from cairo_lint.infrastructure.config_file_loader import ConfigFileLoader
from cairo_lint.infrastructure.gateways.json_tree_gateway import JsonTreeGateway
from cairo_lint.infrastructure.gateways.text_edit_applier import TextEditApplier
from cairo_lint.infrastructure.reporters import TerminalLintReporter
from cairo_lint.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from cairo_lint.domain.protocols import (
        EditApplierProtocol,
        TelemetryPort,
        TreeProviderProtocol,
    )
    from cairo_lint.interface.reporters import LintReporter


class CairoLintContainer:
    """Dependency Injection Container for cairo-lint."""

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        registry = RuleRegistry()
        self.register_singleton("RuleRegistry", registry)
        self.register_singleton("FixSynthesizer", FixSynthesizer(registry))
        self.register_singleton(
            "TelemetryPort", ProjectTelemetry("CAIRO-LINT", "#FF4F00", "Linter online"))
        self.register_singleton("JsonTreeGateway", JsonTreeGateway())
        self.register_singleton("TextEditApplier", TextEditApplier())
        self.register_singleton("LintReporter", TerminalLintReporter())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def build_rule_configuration(self, config_path: Path | None = None) -> RuleConfiguration:
        """
        Enablement table from ``config_path`` or, when omitted, the nearest Scarb.toml.

        Raises ConfigurationError when the file exists but cannot be read.
        """
        if config_path is not None:
            overrides, _ = ConfigFileLoader.load_file(config_path)
        else:
            overrides, _ = ConfigFileLoader.load_config_from_fs()
        configuration = RuleConfiguration(self.get_registry(), overrides)
        self.register_singleton("RuleConfiguration", configuration)
        return configuration

    def get_registry(self) -> RuleRegistry:
        """Return the rule registry."""
        return cast(RuleRegistry, self.get("RuleRegistry"))

    def get_fix_synthesizer(self) -> FixSynthesizer:
        """Return the fix synthesizer."""
        return cast(FixSynthesizer, self.get("FixSynthesizer"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_tree_provider(self) -> "TreeProviderProtocol":
        """Return the tree dump reader."""
        return cast("TreeProviderProtocol", self.get("JsonTreeGateway"))

    def get_edit_applier(self) -> "EditApplierProtocol":
        """Return the edit applier."""
        return cast("EditApplierProtocol", self.get("TextEditApplier"))

    def get_reporter(self) -> "LintReporter":
        """Return the reporter."""
        return cast("LintReporter", self.get("LintReporter"))
