"""
Tests for the annuity and capitalisation formulas.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from patrimoine.assets.financial_math import future_value, loan_payment, residual_value
from patrimoine.core.errors import OutOfBoundsError


class TestFutureValue:
    """Capital plus constant end-of-period payments."""

    def test_zero_rate_is_linear(self):
        assert future_value(100, 0.0, 5, 1_000) == pytest.approx(1_500)

    def test_capital_only(self):
        assert future_value(0, 0.1, 2, 1_000) == pytest.approx(1_210)

    def test_payments_only(self):
        assert future_value(100, 0.1, 2) == pytest.approx(210)

    def test_no_period(self):
        assert future_value(100, 0.05, 0, 1_000) == pytest.approx(1_000)

    def test_negative_period_rejected(self):
        with pytest.raises(OutOfBoundsError):
            future_value(100, 0.1, -1)

    @given(
        payment=st.floats(min_value=0, max_value=10_000, allow_nan=False),
        rate=st.floats(min_value=0.001, max_value=0.2, allow_nan=False),
        nb_period=st.integers(min_value=0, max_value=40),
    )
    def test_one_more_period_recurrence(self, payment, rate, nb_period):
        current = future_value(payment, rate, nb_period, 1_000)
        following = future_value(payment, rate, nb_period + 1, 1_000)
        assert following == pytest.approx(current * (1 + rate) + payment, rel=1e-9)


class TestLoanPayment:
    """Yearly payment of a loan repaid monthly."""

    def test_zero_rate_is_linear(self):
        assert loan_payment(1_200, 0.0, 12) == pytest.approx(100)

    def test_interest_makes_payments_larger(self):
        assert loan_payment(100_000, 0.02, 10) > 10_000

    @pytest.mark.parametrize("nb_period", [0, -3])
    def test_non_positive_period_rejected(self, nb_period):
        with pytest.raises(OutOfBoundsError):
            loan_payment(1_200, 0.01, nb_period)


class TestResidualValue:
    """Capital remaining due at the end of a year."""

    def test_zero_rate(self):
        assert residual_value(-200_000, 0.0, 2020, 2039, 2030) == pytest.approx(-90_000)

    def test_nothing_left_at_last_year(self):
        assert residual_value(-200_000, 0.015, 2020, 2039, 2039) == pytest.approx(0.0)

    def test_reversed_years_rejected(self):
        with pytest.raises(OutOfBoundsError):
            residual_value(-200_000, 0.015, 2039, 2020, 2030)
