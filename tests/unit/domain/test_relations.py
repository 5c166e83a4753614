"""Unit tests for the comparison relation algebra."""

import operator
from itertools import product

import pytest

from cairo_lint.domain.relations import (
    CLASSIFICATION_TABLE,
    Classification,
    Combinator,
    Relation,
    Verdict,
    classify,
    classify_bounds,
    fold_unit_offset,
)

_PY_OPERATORS = {
    Relation.EQ: operator.eq,
    Relation.NE: operator.ne,
    Relation.LT: operator.lt,
    Relation.LE: operator.le,
    Relation.GT: operator.gt,
    Relation.GE: operator.ge,
}

# One operand pair per atomic outcome: less, equal, greater.
_SAMPLES = ((0, 1), (1, 1), (1, 0))


def _truth_row(predicate) -> tuple[bool, ...]:
    return tuple(predicate(a, b) for a, b in _SAMPLES)


def _expected(first: Relation, second: Relation, combinator: Combinator) -> Classification:
    """Oracle built from evaluating the operators on concrete integers."""
    join = operator.and_ if combinator is Combinator.AND else operator.or_
    row = _truth_row(lambda a, b: join(_PY_OPERATORS[first](a, b), _PY_OPERATORS[second](a, b)))
    if not any(row):
        return Classification.contradictory()
    if all(row):
        return Classification.tautological()
    single = next(r for r in Relation if _truth_row(_PY_OPERATORS[r]) == row)
    if single in (Relation.EQ, Relation.NE) and single not in (first, second):
        return Classification.redundant(single)
    return Classification.simplifiable(single)


class TestClassificationTable:
    """Exhaustive checks over every (relation, relation, combinator) triple."""

    def test_table_covers_all_72_inputs(self) -> None:
        """Every combination has an entry."""
        assert len(CLASSIFICATION_TABLE) == 72

    @pytest.mark.parametrize(
        ("first", "second", "combinator"),
        list(product(Relation, Relation, Combinator)),
    )
    def test_matches_truth_table(self, first: Relation, second: Relation, combinator: Combinator) -> None:
        """classify() agrees with evaluation on concrete operands."""
        assert classify(first, second, combinator) == _expected(first, second, combinator)

    def test_table_never_yields_not_simplifiable(self) -> None:
        """Same-operand comparisons always collapse to a verdict."""
        verdicts = {c.verdict for c in CLASSIFICATION_TABLE.values()}
        assert Verdict.NOT_SIMPLIFIABLE not in verdicts

    def test_lt_and_gt_is_contradictory(self) -> None:
        assert classify(Relation.LT, Relation.GT, Combinator.AND) == Classification.contradictory()

    def test_eq_or_gt_simplifies_to_ge(self) -> None:
        assert classify(Relation.EQ, Relation.GT, Combinator.OR) == Classification.simplifiable(Relation.GE)

    def test_lt_or_gt_is_redundant_ne(self) -> None:
        assert classify(Relation.LT, Relation.GT, Combinator.OR) == Classification.redundant(Relation.NE)

    def test_ge_and_le_is_redundant_eq(self) -> None:
        assert classify(Relation.GE, Relation.LE, Combinator.AND) == Classification.redundant(Relation.EQ)

    def test_lt_or_ge_is_tautological(self) -> None:
        assert classify(Relation.LT, Relation.GE, Combinator.OR) == Classification.tautological()

    def test_same_relation_twice_simplifies_to_itself(self) -> None:
        """``a < b && a < b`` is ``a < b``."""
        for relation, combinator in product(Relation, Combinator):
            assert classify(relation, relation, combinator) == Classification.simplifiable(relation)


class TestRelation:
    """Flip and negation are involutions consistent with Python's operators."""

    @pytest.mark.parametrize("relation", list(Relation))
    def test_flipped_swaps_operands(self, relation: Relation) -> None:
        for a, b in _SAMPLES:
            assert _PY_OPERATORS[relation](a, b) == _PY_OPERATORS[relation.flipped()](b, a)

    @pytest.mark.parametrize("relation", list(Relation))
    def test_negated_is_complement(self, relation: Relation) -> None:
        for a, b in _SAMPLES:
            assert _PY_OPERATORS[relation](a, b) != _PY_OPERATORS[relation.negated()](a, b)
        assert relation.negated().negated() is relation

    def test_from_token(self) -> None:
        assert Relation.from_token(">=") is Relation.GE
        assert Relation.from_token("+") is None
        assert Relation.from_token(None) is None

    def test_combinator_from_token(self) -> None:
        assert Combinator.from_token("&&") is Combinator.AND
        assert Combinator.from_token("||") is Combinator.OR
        assert Combinator.from_token("&") is None


class TestClassifyBounds:
    """Integer bounds on a single subject."""

    def test_disjoint_ranges_are_contradictory(self) -> None:
        """``x >= 200 && x < 100`` has no solution."""
        result = classify_bounds(Relation.GE, 200, Relation.LT, 100, Combinator.AND)
        assert result.verdict is Verdict.CONTRADICTORY

    def test_touching_ranges_are_satisfiable(self) -> None:
        """``x >= 100 && x <= 100`` has exactly one solution."""
        result = classify_bounds(Relation.GE, 100, Relation.LE, 100, Combinator.AND)
        assert result.verdict is Verdict.NOT_SIMPLIFIABLE

    def test_adjacent_strict_bounds_are_contradictory(self) -> None:
        """``x > 4 && x < 5`` has no integer solution."""
        result = classify_bounds(Relation.GT, 4, Relation.LT, 5, Combinator.AND)
        assert result.verdict is Verdict.CONTRADICTORY

    def test_covering_union_is_tautological(self) -> None:
        """``x < 10 || x >= 5`` holds for every integer."""
        result = classify_bounds(Relation.LT, 10, Relation.GE, 5, Combinator.OR)
        assert result.verdict is Verdict.TAUTOLOGICAL

    def test_gapped_union_is_not_simplifiable(self) -> None:
        """``x < 5 || x > 10`` misses 5..=10."""
        result = classify_bounds(Relation.LT, 5, Relation.GT, 10, Combinator.OR)
        assert result.verdict is Verdict.NOT_SIMPLIFIABLE

    def test_ne_or_eq_on_different_constants(self) -> None:
        """``x != 3 || x == 4`` is just ``x != 3``, not a tautology."""
        result = classify_bounds(Relation.NE, 3, Relation.EQ, 4, Combinator.OR)
        assert result.verdict is Verdict.NOT_SIMPLIFIABLE

    def test_ne_or_ne_on_different_constants_is_tautological(self) -> None:
        result = classify_bounds(Relation.NE, 3, Relation.NE, 4, Combinator.OR)
        assert result.verdict is Verdict.TAUTOLOGICAL

    def test_eq_and_eq_on_different_constants_is_contradictory(self) -> None:
        result = classify_bounds(Relation.EQ, 3, Relation.EQ, 4, Combinator.AND)
        assert result.verdict is Verdict.CONTRADICTORY


class TestFoldUnitOffset:
    """``a >= b + 1`` folds to ``a > b``; other offsets stay."""

    def test_known_folds(self) -> None:
        assert fold_unit_offset(Relation.GE, True, 1) is Relation.GT
        assert fold_unit_offset(Relation.GE, False, -1) is Relation.GT
        assert fold_unit_offset(Relation.LE, False, 1) is Relation.LT
        assert fold_unit_offset(Relation.LE, True, -1) is Relation.LT

    def test_non_folding_offsets(self) -> None:
        """``a >= b - 1`` is not ``a > b``."""
        assert fold_unit_offset(Relation.GE, True, -1) is None
        assert fold_unit_offset(Relation.LT, True, 1) is None
