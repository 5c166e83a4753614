"""Rule enablement: descriptor defaults merged with project overrides."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from cairo_lint.domain.entities import ConfigIssue
from cairo_lint.domain.registry import RuleRegistry

logger = logging.getLogger(__name__)


class RuleConfiguration:
    """
    Immutable enablement table, fixed before a pass begins.

    Created at the composition root from the ``[tool.cairo-lint]`` table.
    Overrides may name a rule id, a group or ``all``; more specific names win
    regardless of order (``all = false`` with ``panic = true`` enables only
    ``panic``). Unknown names and non-boolean values are recorded as issues and
    otherwise ignored.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        overrides: Mapping[str, object] | None = None,
    ) -> None:
        self._registry = registry
        enabled = {d.id: d.default_enabled for d in registry.descriptors()}
        issues: list[ConfigIssue] = []
        ordered = sorted((overrides or {}).items(), key=lambda item: registry.specificity(item[0]))
        for name, value in ordered:
            if not isinstance(value, bool):
                issues.append(ConfigIssue(name, f"Value for `{name}` must be true or false, got {value!r}"))
                continue
            rule_ids = registry.expand(name)
            if rule_ids is None:
                issues.append(ConfigIssue(name, f"Unknown lint `{name}` in configuration"))
                continue
            for rule_id in rule_ids:
                enabled[rule_id] = value
        for issue in issues:
            logger.warning("%s", issue.message)
        self._enabled = frozenset(rule_id for rule_id, on in enabled.items() if on)
        self._issues = tuple(issues)

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    @property
    def enabled_ids(self) -> frozenset[str]:
        return self._enabled

    @property
    def issues(self) -> tuple[ConfigIssue, ...]:
        return self._issues

    def is_enabled(self, rule_id: str) -> bool:
        return rule_id in self._enabled
