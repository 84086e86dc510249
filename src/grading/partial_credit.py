"""
Partial-credit strategies.

Each strategy is a pure function of match counts returning a Fraction in
[0, 1]. Fractions keep the arithmetic exact until the result builder turns
them into points.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Sequence

from config import get_settings

from .types import PartialCreditStrategy, to_snake

ZERO = Fraction(0)
ONE = Fraction(1)


def clamp(value: Fraction) -> Fraction:
    """Clamp a fraction into [0, 1]."""
    return max(ZERO, min(ONE, value))


def all_or_nothing(correct: bool) -> Fraction:
    return ONE if correct else ZERO


def proportional(earned, total) -> Fraction:
    """earned / total; 0 when there is nothing to earn."""
    earned, total = Fraction(earned), Fraction(total)
    if total <= 0:
        return ZERO
    return clamp(earned / total)


def per_pair(correct_pairs: int, total_pairs: int, submitted_pairs: int) -> Fraction:
    """
    Share of correct pairs.

    Surplus submitted pairs widen the denominator, so only an exact match
    reaches full credit.
    """
    return proportional(correct_pairs, max(total_pairs, submitted_pairs))


def count_adjacent_pairs(submitted: Sequence[str], correct_order: Sequence[str]) -> int:
    """
    Count distinct adjacent pairs (a, b) of the submission where b directly
    follows a in the correct order. Direction matters: (b, a) does not count.
    """
    successor = {a: b for a, b in zip(correct_order, correct_order[1:])}
    found = {
        (a, b)
        for a, b in zip(submitted, submitted[1:])
        if a in successor and successor[a] == b
    }
    return len(found)


def adjacent_pairs(submitted: Sequence[str], correct_order: Sequence[str]) -> Fraction:
    """
    Adjacent-pair credit: correct adjacent pairs / (n - 1).

    n is the larger of the two lengths, which is the item count whenever the
    learner submitted every item exactly once.
    """
    n = max(len(correct_order), len(submitted))
    if n < 2:
        return all_or_nothing(list(submitted) == list(correct_order))
    return proportional(count_adjacent_pairs(submitted, correct_order), n - 1)


def count_correct_positions(submitted: Sequence[str], correct_order: Sequence[str]) -> int:
    return sum(1 for a, b in zip(submitted, correct_order) if a == b)


def position_accuracy(submitted: Sequence[str], correct_order: Sequence[str]) -> Fraction:
    """Share of items sitting at their correct index."""
    n = max(len(correct_order), len(submitted))
    return proportional(count_correct_positions(submitted, correct_order), n)


def quantum(places: int | None = None) -> Decimal:
    """Smallest representable step of a score, e.g. Decimal("0.01")."""
    if places is None:
        places = get_settings().score_decimal_places
    return Decimal(1).scaleb(-places)


def to_points(fraction: Fraction, points_possible: Decimal, places: int | None = None) -> Decimal:
    """
    Scale a credit fraction to points, rounded half-up and kept within
    [0, points_possible]. Anything short of full credit stays below
    points_possible even when rounding half-up would reach it.
    """
    fraction = clamp(fraction)
    if fraction == ONE:
        return points_possible
    raw = Decimal(fraction.numerator) * points_possible / Decimal(fraction.denominator)
    points = raw.quantize(quantum(places), rounding=ROUND_HALF_UP)
    if points >= points_possible:
        # Only full credit may reach full points
        points = raw.quantize(quantum(places), rounding=ROUND_DOWN)
    return max(Decimal("0"), min(points_possible, points))


def parse_strategy(name: str | None) -> PartialCreditStrategy | None:
    """Resolve a strategy name as stored in content; None if unknown."""
    if not name:
        return None
    try:
        return PartialCreditStrategy(to_snake(name))
    except ValueError:
        return None
