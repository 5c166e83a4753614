"""Rule registry: static rule table, groups, and the node-kind dispatch table."""

from collections import defaultdict
from collections.abc import Sequence

from cairo_lint.domain.constants import ALL_RULES, UNKNOWN_LINT
from cairo_lint.domain.entities import RuleDescriptor
from cairo_lint.domain.rules import Checkable
from cairo_lint.domain.rules.api_misuse import (
    AssertOnConstRule,
    CloneOnCopyRule,
    InefficientUnwrapOrRule,
    ManualIsEmptyRule,
    PanicRule,
    RedundantIntoRule,
    UnwrapSyscallRule,
)
from cairo_lint.domain.rules.comparisons import (
    BoolComparisonRule,
    DoubleComparisonRule,
    IntOpOneRule,
)
from cairo_lint.domain.rules.control_flow import (
    CollapsibleIfElseRule,
    CollapsibleIfRule,
    CollapsibleMatchRule,
    DestructMatchRule,
    EquatableIfLetRule,
    IfsSameCondRule,
    InefficientWhileCompRule,
    LoopForWhileRule,
    LoopMatchPopFrontRule,
    ManualAssertRule,
)
from cairo_lint.domain.rules.cosmetic import (
    BreakUnitRule,
    DoubleParensRule,
    DuplicateUnderscoreArgsRule,
    EmptyEnumBracketsVariantRule,
    EnumVariantNamesRule,
    RedundantBracketsInEnumCallRule,
    UnitReturnTypeRule,
)
from cairo_lint.domain.rules.identity_ops import (
    BitwiseForParityCheckRule,
    EqOpRule,
    ErasingOpRule,
    RedundantOpRule,
)
from cairo_lint.domain.rules.imports import UnusedImportRule
from cairo_lint.domain.rules.manual import ManualCombinatorRule
from cairo_lint.domain.syntax import SyntaxKind

UNKNOWN_LINT_RULE = RuleDescriptor(
    id=UNKNOWN_LINT,
    summary="Unknown lint identifier in an allow, deny or warn attribute",
)


def default_rules() -> tuple[Checkable, ...]:
    """One instance of every built-in matcher, in reporting order."""
    return (
        DoubleComparisonRule(),
        BoolComparisonRule(),
        IntOpOneRule(),
        EqOpRule(),
        ErasingOpRule(),
        RedundantOpRule(),
        BitwiseForParityCheckRule(),
        ManualCombinatorRule(),
        DestructMatchRule(),
        CollapsibleMatchRule(),
        LoopForWhileRule(),
        LoopMatchPopFrontRule(),
        CollapsibleIfRule(),
        CollapsibleIfElseRule(),
        EquatableIfLetRule(),
        IfsSameCondRule(),
        ManualAssertRule(),
        InefficientWhileCompRule(),
        DoubleParensRule(),
        BreakUnitRule(),
        UnitReturnTypeRule(),
        RedundantBracketsInEnumCallRule(),
        EmptyEnumBracketsVariantRule(),
        EnumVariantNamesRule(),
        DuplicateUnderscoreArgsRule(),
        CloneOnCopyRule(),
        UnwrapSyscallRule(),
        InefficientUnwrapOrRule(),
        ManualIsEmptyRule(),
        RedundantIntoRule(),
        AssertOnConstRule(),
        PanicRule(),
        UnusedImportRule(),
    )


class RuleRegistry:
    """
    Immutable after construction.

    Resolves identifiers used in configuration and annotations: a rule id, a
    group name (every rule sharing it), or ``all``. ``unknown_lint`` is always
    registered so that it can be configured and suppressed like any rule.
    """

    def __init__(self, rules: Sequence[Checkable] | None = None) -> None:
        self._rules = tuple(default_rules() if rules is None else rules)
        self._descriptors: dict[str, RuleDescriptor] = {UNKNOWN_LINT: UNKNOWN_LINT_RULE}
        self._owners: dict[str, Checkable] = {}
        groups: dict[str, set[str]] = defaultdict(set)
        dispatch: dict[SyntaxKind, list[Checkable]] = defaultdict(list)
        for rule in self._rules:
            for descriptor in rule.descriptors:
                if descriptor.id in self._descriptors:
                    raise ValueError(f"Duplicate rule id: {descriptor.id}")
                self._descriptors[descriptor.id] = descriptor
                self._owners[descriptor.id] = rule
                if descriptor.group is not None:
                    groups[descriptor.group].add(descriptor.id)
            for kind in rule.kinds:
                dispatch[kind].append(rule)
        overlap = set(groups) & set(self._descriptors)
        if overlap:
            raise ValueError(f"Group names shadow rule ids: {sorted(overlap)}")
        self._groups = {name: frozenset(ids) for name, ids in groups.items()}
        self._dispatch = {kind: tuple(rules) for kind, rules in dispatch.items()}

    @property
    def rules(self) -> tuple[Checkable, ...]:
        return self._rules

    @property
    def groups(self) -> dict[str, frozenset[str]]:
        return dict(self._groups)

    def descriptors(self) -> list[RuleDescriptor]:
        return sorted(self._descriptors.values(), key=lambda d: d.id)

    def ids(self) -> frozenset[str]:
        return frozenset(self._descriptors)

    def describe(self, rule_id: str) -> RuleDescriptor:
        return self._descriptors[rule_id]

    def rule_for(self, rule_id: str) -> Checkable | None:
        return self._owners.get(rule_id)

    def rules_for(self, kind: SyntaxKind) -> tuple[Checkable, ...]:
        """Matchers registered for a node kind; the orchestrator never branches on kinds itself."""
        return self._dispatch.get(kind, ())

    def expand(self, identifier: str) -> frozenset[str] | None:
        """Rule ids named by ``identifier``; None when it names nothing."""
        if identifier == ALL_RULES:
            return self.ids()
        if identifier in self._descriptors:
            return frozenset({identifier})
        return self._groups.get(identifier)

    def specificity(self, identifier: str) -> int:
        """0 for ``all``, 1 for a group, 2 for a single rule id."""
        if identifier == ALL_RULES:
            return 0
        if identifier in self._groups:
            return 1
        return 2
