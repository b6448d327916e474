"""
Closed-form annuity and capitalisation formulas.

Rates are expressed as decimal fractions (0.03 for 3 %).
"""

from __future__ import annotations

import logging

from patrimoine.core.errors import OutOfBoundsError

logger = logging.getLogger(__name__)


def future_value(
    payment: float, interest_rate: float, nb_period: int, initial_value: float = 0.0
) -> float:
    """
    Value after ``nb_period`` periods of an initial capital plus constant
    end-of-period payments.

    Args:
        payment: Payment made at the end of each period
        interest_rate: Rate per period
        nb_period: Number of periods (>= 0)
        initial_value: Capital at the start

    Returns:
        Capitalised value

    Raises:
        OutOfBoundsError: If ``nb_period`` is negative
    """
    if nb_period < 0:
        logger.error("future_value: nb_period < 0 = %s", nb_period)
        raise OutOfBoundsError(f"future_value: negative number of periods {nb_period}")
    growth = (1.0 + interest_rate) ** nb_period
    capital = initial_value * growth
    if interest_rate == 0.0:
        return capital + payment * nb_period
    return capital + payment * (growth - 1.0) / interest_rate


def loan_payment(loaned_value: float, interest_rate: float, nb_period: int) -> float:
    """
    Yearly payment of a loan repaid monthly over ``nb_period`` years.

    A zero rate falls back to a linear repayment ``loaned_value / nb_period``.

    Raises:
        OutOfBoundsError: If ``nb_period`` is not positive
    """
    if nb_period <= 0:
        raise OutOfBoundsError(f"loan_payment: number of periods must be > 0, got {nb_period}")
    if interest_rate == 0.0:
        return loaned_value / nb_period
    return loaned_value * interest_rate / (1.0 - (1.0 + interest_rate / 12.0) ** (-nb_period * 12))


def residual_value(
    loaned_value: float,
    interest_rate: float,
    first_year: int,
    last_year: int,
    current_year: int,
) -> float:
    """
    Capital remaining due at the end of ``current_year``.

    Raises:
        OutOfBoundsError: If ``last_year < first_year``
    """
    if last_year < first_year:
        logger.error("residual_value: last year %s < first year %s", last_year, first_year)
        raise OutOfBoundsError(f"last_year {last_year} < first_year {first_year}")
    nb_period = last_year - first_year + 1
    payment = loan_payment(loaned_value, interest_rate, nb_period)
    if interest_rate == 0.0:
        return payment * (last_year - current_year)
    return payment * (1.0 - (1.0 + interest_rate) ** (current_year - last_year)) / interest_rate
