"""
Comparison relation algebra.

Each of the six relations is the set of atomic outcomes {<, =, >} for which it
holds. Combining two relations over the same operands is set intersection
(``&&``) or union (``||``); the resulting subset names the compound condition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import product


class Ordering(Enum):
    LESS = "<"
    EQUAL = "="
    GREATER = ">"


class Relation(Enum):
    """One of the six two-operand ordering comparisons."""

    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @property
    def token(self) -> str:
        return self.value

    @property
    def outcomes(self) -> frozenset[Ordering]:
        return _OUTCOMES[self]

    @classmethod
    def from_token(cls, token: str | None) -> "Relation | None":
        for relation in cls:
            if relation.value == token:
                return relation
        return None

    @classmethod
    def from_outcomes(cls, outcomes: frozenset[Ordering]) -> "Relation | None":
        return _BY_OUTCOMES.get(outcomes)

    def flipped(self) -> "Relation":
        """Same condition with the operands swapped (``a < b`` is ``b > a``)."""
        mirror = {Ordering.LESS: Ordering.GREATER, Ordering.GREATER: Ordering.LESS, Ordering.EQUAL: Ordering.EQUAL}
        return _BY_OUTCOMES[frozenset(mirror[o] for o in self.outcomes)]

    def negated(self) -> "Relation":
        """Logical complement (``a < b`` negates to ``a >= b``)."""
        return _BY_OUTCOMES[_ALL - self.outcomes]


_ALL = frozenset(Ordering)

_OUTCOMES: dict[Relation, frozenset[Ordering]] = {
    Relation.LT: frozenset({Ordering.LESS}),
    Relation.LE: frozenset({Ordering.LESS, Ordering.EQUAL}),
    Relation.EQ: frozenset({Ordering.EQUAL}),
    Relation.GE: frozenset({Ordering.EQUAL, Ordering.GREATER}),
    Relation.GT: frozenset({Ordering.GREATER}),
    Relation.NE: frozenset({Ordering.LESS, Ordering.GREATER}),
}

_BY_OUTCOMES: dict[frozenset[Ordering], Relation] = {v: k for k, v in _OUTCOMES.items()}


class Combinator(Enum):
    AND = "&&"
    OR = "||"

    @classmethod
    def from_token(cls, token: str | None) -> "Combinator | None":
        for combinator in cls:
            if combinator.value == token:
                return combinator
        return None


class Verdict(Enum):
    CONTRADICTORY = "contradictory"
    TAUTOLOGICAL = "tautological"
    SIMPLIFIABLE = "simplifiable"
    REDUNDANT = "redundant"
    NOT_SIMPLIFIABLE = "not_simplifiable"


@dataclass(frozen=True)
class Classification:
    """Verdict for a compound comparison; ``relation`` is set for the collapsing verdicts."""

    verdict: Verdict
    relation: Relation | None = None

    @classmethod
    def contradictory(cls) -> "Classification":
        return cls(Verdict.CONTRADICTORY)

    @classmethod
    def tautological(cls) -> "Classification":
        return cls(Verdict.TAUTOLOGICAL)

    @classmethod
    def simplifiable(cls, relation: Relation) -> "Classification":
        return cls(Verdict.SIMPLIFIABLE, relation)

    @classmethod
    def redundant(cls, relation: Relation) -> "Classification":
        return cls(Verdict.REDUNDANT, relation)

    @classmethod
    def not_simplifiable(cls) -> "Classification":
        return cls(Verdict.NOT_SIMPLIFIABLE)


_EQUALITY = frozenset({Relation.EQ, Relation.NE})


def _derive(first: Relation, second: Relation, combinator: Combinator) -> Classification:
    if combinator is Combinator.AND:
        outcomes = first.outcomes & second.outcomes
    else:
        outcomes = first.outcomes | second.outcomes
    if not outcomes:
        return Classification.contradictory()
    if outcomes == _ALL:
        return Classification.tautological()
    single = _BY_OUTCOMES[outcomes]
    # `x < y || x > y` reads as two conditions but is plain inequality.
    if single in _EQUALITY and single not in (first, second):
        return Classification.redundant(single)
    return Classification.simplifiable(single)


CLASSIFICATION_TABLE: dict[tuple[Relation, Relation, Combinator], Classification] = {
    (first, second, combinator): _derive(first, second, combinator)
    for first, second, combinator in product(Relation, Relation, Combinator)
}


def classify(first: Relation, second: Relation, combinator: Combinator) -> Classification:
    """Classify ``a <first> b <combinator> a <second> b``."""
    return CLASSIFICATION_TABLE[(first, second, combinator)]


# -----------------------------------------------------------------------------
# Integer bounds: `x <op1> c1` combined with `x <op2> c2` for constants c1, c2.
# -----------------------------------------------------------------------------

_Interval = tuple[int | None, int | None]


def _solutions(relation: Relation, bound: int) -> list[_Interval]:
    """Integers x with ``x <relation> bound`` as closed intervals (None = unbounded)."""
    return {
        Relation.LT: [(None, bound - 1)],
        Relation.LE: [(None, bound)],
        Relation.EQ: [(bound, bound)],
        Relation.GE: [(bound, None)],
        Relation.GT: [(bound + 1, None)],
        Relation.NE: [(None, bound - 1), (bound + 1, None)],
    }[relation]


def _intersects(first: list[_Interval], second: list[_Interval]) -> bool:
    for (lo1, hi1), (lo2, hi2) in product(first, second):
        lo = lo2 if lo1 is None else lo1 if lo2 is None else max(lo1, lo2)
        hi = hi2 if hi1 is None else hi1 if hi2 is None else min(hi1, hi2)
        if lo is None or hi is None or lo <= hi:
            return True
    return False


def classify_bounds(
    first: Relation,
    first_bound: int,
    second: Relation,
    second_bound: int,
    combinator: Combinator,
) -> Classification:
    """
    Classify ``x <first> c1 <combinator> x <second> c2`` over the integers.

    A verdict that holds over all integers holds for every bounded integer type
    too, so only Contradictory, Tautological and NotSimplifiable are produced.
    """
    if combinator is Combinator.AND:
        if not _intersects(_solutions(first, first_bound), _solutions(second, second_bound)):
            return Classification.contradictory()
        return Classification.not_simplifiable()
    # The union covers everything iff both negations can never hold together.
    if not _intersects(
        _solutions(first.negated(), first_bound),
        _solutions(second.negated(), second_bound),
    ):
        return Classification.tautological()
    return Classification.not_simplifiable()


# -----------------------------------------------------------------------------
# Unit offsets: `a >= b + 1` is `a > b` for integers.
# -----------------------------------------------------------------------------

_UNIT_FOLDS: dict[tuple[Relation, bool, int], Relation] = {
    (Relation.GE, True, 1): Relation.GT,  # a >= b + 1
    (Relation.GE, False, -1): Relation.GT,  # a - 1 >= b
    (Relation.LE, False, 1): Relation.LT,  # a + 1 <= b
    (Relation.LE, True, -1): Relation.LT,  # a <= b - 1
}


def fold_unit_offset(relation: Relation, offset_on_rhs: bool, delta: int) -> Relation | None:
    """Relation equivalent to ``relation`` once a ``+ delta`` on one side is dropped."""
    return _UNIT_FOLDS.get((relation, offset_on_rhs, delta))
