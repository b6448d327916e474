"""
Allocation of the yearly net cash flow to the free investments.

A surplus is deposited into one free investment (the *receptacle*), a
deficit is withdrawn from the free investments, and every free investment
is capitalised once a year.

**Receptacle priority:**
    1. Life insurance with yearly social taxes
    2. Life insurance with social taxes at withdrawal
    3. PEA
    4. Any other envelope

**Withdrawal order** (per adult, the wealthiest first): PEA, then life
insurance (interests taxable beyond the yearly allowance), then the other
envelopes, each group from the lowest return to the highest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from patrimoine.assets.investment_type import LifeInsurance, OtherInvestment, Pea
from patrimoine.core.errors import CashFlowError
from patrimoine.core.utils import NamedValueTable, zero_or_positive

if TYPE_CHECKING:
    from patrimoine.assets.free_investment import FreeInvestment
    from patrimoine.patrimoine import Patrimoine

logger = logging.getLogger(__name__)

EPSILON = 0.001

# any owner
ANYONE = ""


def _priority(investment: FreeInvestment) -> int:
    investment_type = investment.investment_type
    if isinstance(investment_type, LifeInsurance):
        return 0 if investment_type.periodic_social_taxes else 1
    if isinstance(investment_type, Pea):
        return 2
    return 3


def receptacle(investments: Iterable[FreeInvestment], owners: list[str]) -> FreeInvestment | None:
    """First free investment held in full ownership by ``owners``, by priority."""
    candidates = [investment for investment in investments if investment.is_fully_owned_by(owners)]
    if not candidates:
        return None
    # stable sort keeps the caller's order inside a priority group
    return sorted(candidates, key=_priority)[0]


@dataclass
class CashWithdrawal:
    """
    Attributes:
        withdrawals: Net amounts withdrawn per free investment
        taxable_interests: Interests taxable to IRPP, delayed to next year
        social_taxes: Social taxes levied per free investment
        remaining_rebate: Life insurance allowance left after the withdrawals
    """

    withdrawals: NamedValueTable
    taxable_interests: float
    social_taxes: NamedValueTable
    remaining_rebate: float = 0.0


class NetCashFlowManager:
    """Moves cash between the yearly cash-flow line and the free investments."""

    @staticmethod
    def capitalize_free_investments(patrimoine: Patrimoine, year: int) -> None:
        free_invests = patrimoine.assets.free_invests
        for idx in range(len(free_invests)):
            free_invests[idx].capitalize(year)

    @staticmethod
    def invest_capital(patrimoine: Patrimoine, owned_capitals: dict[str, float], adults: list[str]) -> None:
        """
        Deposit each adult's share of a capital (sale, liquidation) into a
        free investment the adult holds in full ownership.

        Shares of non adults, or of adults without receptacle, stay out of
        the patrimoine.
        """
        free_invests = patrimoine.assets.free_invests
        for name, capital in owned_capitals.items():
            if name not in adults or capital == 0.0:
                continue
            investment = receptacle(free_invests, [name])
            if investment is None:
                logger.info("No receptacle for the capital of %s: %.0f € not invested", name, capital)
                continue
            investment.add(capital)

    @staticmethod
    def invest_net_cash_flow(patrimoine: Patrimoine, amount: float, adults: list[str]) -> FreeInvestment | None:
        """Deposit a yearly surplus into the best-yielding receptacle of the adults."""
        by_rate = sorted(
            patrimoine.assets.free_invests,
            key=lambda investment: investment.average_interest_rate,
            reverse=True,
        )
        investment = receptacle(by_rate, adults)
        if investment is None:
            logger.info("No receptacle for the net cash flow: %.0f € not invested", amount)
            return None
        investment.add(amount)
        return investment

    @staticmethod
    def get_cash_from_investment(
        patrimoine: Patrimoine,
        amount: float,
        year: int,
        adults: list[str],
        rebate: float,
    ) -> CashWithdrawal:
        """
        Withdraw ``amount`` (net of social taxes) to cover a deficit.

        Must be called before the capitalisation of ``year``: the available
        capital is the value at the end of ``year - 1``.

        Args:
            patrimoine: Patrimoine holding the free investments
            amount: Cash needed (positive)
            year: Current year
            adults: Adults whose investments can be withdrawn from; any
                owner when empty
            rebate: Yearly allowance on life insurance interests

        Raises:
            CashFlowError: If the free investments cannot cover ``amount``
        """
        withdrawals = NamedValueTable("Retraits")
        social_taxes = NamedValueTable("Prélèvements sociaux")
        taxable_interests = 0.0
        remaining_rebate = rebate
        remaining = amount

        free_invests = sorted(
            patrimoine.assets.free_invests,
            key=lambda investment: investment.average_interest_rate,
        )

        def wealth_of(name: str) -> float:
            return sum(
                investment.value(year - 1)
                for investment in free_invests
                if investment.is_fully_owned_by([name])
            )

        names = sorted(adults, key=wealth_of, reverse=True) if adults else [ANYONE]
        for name in names:
            for investment_type in (Pea, LifeInsurance, OtherInvestment):
                for investment in free_invests:
                    if not isinstance(investment.investment_type, investment_type):
                        continue
                    if name != ANYONE and not investment.is_fully_owned_by([name]):
                        continue
                    if investment.value(year - 1) <= 0.0:
                        continue
                    removal = investment.remove(remaining)
                    remaining -= removal.revenue
                    withdrawals.append(investment.name, removal.revenue)
                    if removal.social_taxes:
                        social_taxes.append(investment.name, removal.social_taxes)
                    if investment_type is LifeInsurance:
                        used = min(remaining_rebate, removal.taxable_interests)
                        remaining_rebate -= used
                        taxable_interests += zero_or_positive(removal.taxable_interests - used)
                    else:
                        taxable_interests += removal.taxable_interests
                    if remaining <= EPSILON:
                        return CashWithdrawal(withdrawals, taxable_interests, social_taxes, remaining_rebate)

        logger.warning("Not enough cash in %d: %.0f € missing", year, remaining)
        raise CashFlowError.not_enough_cash(remaining)
