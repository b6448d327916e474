"""
Investment with free deposits and withdrawals (life insurance, PEA, other).

A free investment carries a mutable *current state* (year, interests,
invested capital) updated by the simulation loop: deposits of the yearly
surplus, withdrawals to cover deficits and a yearly capitalisation. The
current state is the only per-run mutable state of the patrimoine and
must be reset before every run with ``reset_current_state``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from patrimoine.assets.envelope import FinancialEnvelope
from patrimoine.assets.financial_math import future_value
from patrimoine.assets.investment_type import LifeInsurance, Pea
from patrimoine.core.errors import IllegalOperationError

logger = logging.getLogger(__name__)


@dataclass
class State:
    """
    Composition of the capital at the end of ``year``.

    Attributes:
        year: Year of the state
        interest: Part of the value made of interests
        investment: Part of the value made of deposits
    """

    year: int
    interest: float
    investment: float

    @property
    def value(self) -> float:
        return self.interest + self.investment

    def copy(self) -> State:
        return State(self.year, self.interest, self.investment)


class Removal(NamedTuple):
    """Outcome of a withdrawal."""

    revenue: float
    interests: float
    net_interests: float
    taxable_interests: float
    social_taxes: float


NO_REMOVAL = Removal(0.0, 0.0, 0.0, 0.0, 0.0)


@dataclass
class FreeInvestment(FinancialEnvelope):
    """
    Attributes:
        year: Year of the last known value
        initial_value: Last known value
        initial_interest: Part of ``initial_value`` made of interests
        initial_state: Last known composition of the capital
        current_state: Composition of the capital during the simulation
    """

    year: int = 0
    initial_value: float = 0.0
    initial_interest: float = 0.0
    initial_state: State = field(init=False)
    current_state: State = field(init=False)

    def __post_init__(self) -> None:
        self.initial_state = State(
            year=self.year,
            interest=self.initial_interest,
            investment=self.initial_value - self.initial_interest,
        )
        self.current_state = self.initial_state.copy()

    @property
    def cumulated_interests(self) -> float:
        return self.current_state.interest

    def value(self, year: int) -> float:
        if year == self.current_state.year:
            return self.current_state.value
        return future_value(
            payment=0.0,
            interest_rate=self.average_interest_rate_net / 100.0,
            nb_period=year - self.initial_state.year,
            initial_value=self.initial_state.value,
        )

    def split(self, amount: float) -> tuple[float, float]:
        """Split a withdrawal into (investment, interest) pro rata of the capital."""
        value = self.current_state.value
        delta_interest = amount * self.current_state.interest / value if value else 0.0
        return amount - delta_interest, delta_interest

    def add(self, amount: float) -> None:
        self.current_state.investment += amount

    def remove(self, net_amount: float) -> Removal:
        """
        Withdraw ``net_amount`` net of social taxes, or everything if the
        capital is not sufficient.

        The gross amount withdrawn is computed back from the net amount, except
        for a life insurance whose social taxes are levied yearly. Interests
        withdrawn from a PEA are not taxable to IRPP.
        """
        if self.current_state.value == 0.0:
            return NO_REMOVAL
        taxes = self.ctx.fiscal.financial_revenue_taxes
        investment_type = self.investment_type
        already_taxed = isinstance(investment_type, LifeInsurance) and investment_type.periodic_social_taxes

        revenue = net_amount
        brut_amount = net_amount if already_taxed else taxes.brut(net_amount)
        if brut_amount > self.current_state.value:
            brut_amount = self.current_state.value
            revenue = brut_amount if already_taxed else taxes.net(brut_amount)

        delta_investment, delta_interest = self.split(brut_amount)
        if already_taxed:
            net_interests = delta_interest
            social_taxes = 0.0
        else:
            net_interests = taxes.net(delta_interest)
            social_taxes = taxes.social_taxes(delta_interest)
        taxable_interests = 0.0 if isinstance(investment_type, Pea) else net_interests

        if brut_amount == self.current_state.value:
            self.current_state.interest = 0.0
            self.current_state.investment = 0.0
        else:
            self.current_state.interest -= delta_interest
            self.current_state.investment -= delta_investment

        return Removal(
            revenue=revenue,
            interests=delta_interest,
            net_interests=net_interests,
            taxable_interests=taxable_interests,
            social_taxes=social_taxes,
        )

    def capitalize(self, year: int) -> None:
        """
        Add the interests of ``year`` to the capital.

        Raises:
            IllegalOperationError: If ``year`` does not follow the current state
        """
        if year != self.current_state.year + 1:
            logger.error(
                "%s: capitalisation in %s while the current state is in %s",
                self.name,
                year,
                self.current_state.year,
            )
            raise IllegalOperationError(
                f"{self.name}: capitalisation must cover exactly one year "
                f"(current {self.current_state.year}, requested {year})"
            )
        self.current_state.interest += self.current_state.value * self.interest_rate_net(year) / 100.0
        self.current_state.year = year

    def reset_current_state(self, estimation_year: int) -> None:
        """
        Project the last known state to the end of ``estimation_year`` at the
        average rate.

        Raises:
            OutOfBoundsError: If ``estimation_year`` precedes the initial state
        """
        if estimation_year == self.initial_state.year:
            self.current_state = self.initial_state.copy()
            return
        projected = future_value(
            payment=0.0,
            interest_rate=self.average_interest_rate_net / 100.0,
            nb_period=estimation_year - self.initial_state.year,
            initial_value=self.initial_state.value,
        )
        self.current_state = State(
            year=estimation_year,
            interest=self.initial_state.interest + projected - self.initial_state.value,
            investment=self.initial_state.investment,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "investment_type": self.investment_type.to_dict(),
                "interest_rate_type": self.interest_rate_type.to_dict(),
                "year": self.initial_state.year,
                "initial_value": self.initial_state.value,
                "initial_interest": self.initial_state.interest,
            }
        )
        return data
