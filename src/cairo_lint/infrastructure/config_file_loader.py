"""Load [tool.cairo-lint] from Scarb.toml. Infrastructure I/O only."""

import tomllib
from pathlib import Path

from cairo_lint.domain.errors import ConfigurationError

MANIFEST = "Scarb.toml"
TOOL_SECTION = "cairo-lint"


class ConfigFileLoader:
    """
    Loads lint overrides from the nearest Scarb manifest.
    """

    @staticmethod
    def load_file(config_file: Path) -> tuple[dict[str, object], dict[str, object]]:
        """Read one manifest. Returns (config_dict, tool_section)."""
        try:
            with config_file.open("rb") as f:
                data = tomllib.load(f)
        except OSError as exc:
            raise ConfigurationError(f"Cannot read {config_file}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"{config_file} is not valid TOML: {exc}") from exc
        tool_section = data.get("tool", {}) or {}
        config_dict = tool_section.get(TOOL_SECTION, {}) or {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"[tool.{TOOL_SECTION}] in {config_file} must be a table")
        return (config_dict, tool_section)

    @staticmethod
    def load_config_from_fs(start: Path | None = None) -> tuple[dict[str, object], dict[str, object]]:
        """Walk up from ``start`` (default: cwd) to the first Scarb.toml. Empty dicts when none."""
        current_path = (start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            config_file = directory / MANIFEST
            if config_file.exists():
                return ConfigFileLoader.load_file(config_file)
        return ({}, {})
