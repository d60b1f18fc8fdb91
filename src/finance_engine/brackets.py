"""
Generic progressive-bracket evaluation.

Used for federal and provincial income tax and for the land transfer tax.
A bracket set is validated once, when its rate table is loaded; the
evaluators below trust their input.

Bracket convention: [lower_bound, upper_bound), top bracket unbounded.
"""

import math
from collections.abc import Sequence

from finance_engine.errors import ConfigurationError
from finance_engine.models import Bracket, BracketSlice


def validate_bracket_set(brackets: Sequence[Bracket], name: str = "brackets") -> None:
    """
    Raise ConfigurationError unless `brackets` is a well-formed bracket set:
    non-empty, first lower bound 0, contiguous, ascending, top bracket
    unbounded, every rate within [0, 1].
    """
    if not brackets:
        raise ConfigurationError(f"{name}: bracket set is empty")
    if brackets[0].lower_bound != 0:
        raise ConfigurationError(
            f"{name}: first bracket must start at 0, got {brackets[0].lower_bound}"
        )
    if not math.isinf(brackets[-1].upper_bound):
        raise ConfigurationError(
            f"{name}: last bracket must be unbounded, got {brackets[-1].upper_bound}"
        )

    for i, bracket in enumerate(brackets):
        if not 0 <= bracket.rate <= 1:
            raise ConfigurationError(
                f"{name}[{i}]: rate {bracket.rate} outside [0, 1]"
            )
        if bracket.upper_bound <= bracket.lower_bound:
            raise ConfigurationError(
                f"{name}[{i}]: upper bound {bracket.upper_bound} "
                f"not above lower bound {bracket.lower_bound}"
            )
        if i > 0 and brackets[i - 1].upper_bound != bracket.lower_bound:
            raise ConfigurationError(
                f"{name}[{i}]: gap or overlap at {bracket.lower_bound} "
                f"(previous bracket ends at {brackets[i - 1].upper_bound})"
            )


def bracket_breakdown(amount: float, brackets: Sequence[Bracket]) -> list[BracketSlice]:
    """
    Return the slice of `amount` taxed in each bracket it reaches.

    Brackets above the amount are omitted. amount <= 0 gives an empty list.
    """
    slices: list[BracketSlice] = []
    for bracket in brackets:
        if amount <= bracket.lower_bound:
            break
        lower = max(bracket.lower_bound, 0.0)
        upper = min(bracket.upper_bound, amount)
        portion = upper - lower
        slices.append(
            BracketSlice(
                lower_bound=bracket.lower_bound,
                upper_bound=bracket.upper_bound,
                taxed_amount=portion,
                rate=bracket.rate,
                tax=portion * bracket.rate,
            )
        )
    return slices


def evaluate_brackets(amount: float, brackets: Sequence[Bracket]) -> float:
    """
    Total tax on `amount` under a progressive bracket set.

    Never negative and non-decreasing in `amount`.
    """
    if amount <= 0:
        return 0.0

    tax = 0.0
    for bracket in brackets:
        if amount <= bracket.lower_bound:
            break
        portion = min(bracket.upper_bound, amount) - max(bracket.lower_bound, 0.0)
        tax += portion * bracket.rate
    return tax


def marginal_rate(amount: float, brackets: Sequence[Bracket]) -> float:
    """Rate of the bracket containing `amount` (first bracket for amount <= 0)."""
    for bracket in brackets:
        if amount < bracket.upper_bound:
            return bracket.rate
    return brackets[-1].rate
