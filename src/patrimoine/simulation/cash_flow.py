"""
Cash-flow line: revenues, taxes, expenses and payments of one year.

Computing a line also moves the patrimoine forward by one year: sale and
liquidation proceeds are reinvested, successions transfer the ownership
of the decedents' items, the net cash flow is deposited into or withdrawn
from the free investments and the free investments are capitalised.

**Computation order:**
    1. SCI accounts
    2. Incomes of the adults (work, pensions, layoff, unemployment)
    3. Real estate and SCPI revenues, sales of the previous year
    4. Periodic investments: payments, liquidations of the previous year
    5. IRPP, then IFI
    6. Life expenses and loan payments
    7. Successions of the adults who died during the year
    8. Net cash flow
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from patrimoine.core.kinds import EvaluationMethod, RevenueCategory, SimulationMode, TaxCategory
from patrimoine.core.utils import NamedValueTable, zero_or_positive
from patrimoine.simulation.net_cash_flow import NetCashFlowManager
from patrimoine.succession.legal import LegalSuccessionManager
from patrimoine.succession.life_insurance import LifeInsuranceSuccessionManager
from patrimoine.succession.ownership_manager import OwnershipManager
from patrimoine.succession.succession import Succession

if TYPE_CHECKING:
    from patrimoine.assets.sci import SciCashFlow
    from patrimoine.core.context import ModelContext
    from patrimoine.core.interfaces import (
        ExpensesUnderEvaluationRateProvider,
        PensionDevaluationRateProvider,
    )
    from patrimoine.family.family import Family
    from patrimoine.fiscal.fiscal_model import FiscalModel
    from patrimoine.fiscal.income_taxes import Irpp
    from patrimoine.fiscal.wealth import Isf
    from patrimoine.patrimoine import Patrimoine

logger = logging.getLogger(__name__)


def _revenue_tables() -> dict[RevenueCategory, NamedValueTable]:
    return {category: NamedValueTable(category.value) for category in RevenueCategory}


def _tax_tables() -> dict[TaxCategory, NamedValueTable]:
    return {category: NamedValueTable(category.value) for category in TaxCategory}


@dataclass
class CashFlowLine:
    """
    Attributes:
        run: Run number
        year: Year of the line
        ages: Age of each member at the end of the year
        revenues: Revenues per category
        taxes: Taxes per category
        life_expenses: Life expenses of the household
        debt_payments: Loan payments (positive)
        investment_payments: Payments into periodic investments
        sci: Accounts of the SCI
        taxable_irpp_income: Income subject to IRPP this year
        taxable_irpp_delayed_from_last_year: Withdrawn interests taxed this year
        taxable_irpp_delayed_to_next_year: Withdrawn interests taxed next year
        irpp: Income tax detail
        isf: Wealth tax detail
        legal_successions: Legal successions of the year
        life_insurance_successions: Life insurance successions of the year
        withdrawals: Amounts withdrawn from the free investments
        net_cash_flow: Surplus (positive) or deficit (negative) of the year
        life_insurance_rebate: Yearly life insurance allowance not used yet,
            shared by liquidations and withdrawals
    """

    run: int
    year: int
    ages: dict[str, int] = field(default_factory=dict)
    revenues: dict[RevenueCategory, NamedValueTable] = field(default_factory=_revenue_tables)
    taxes: dict[TaxCategory, NamedValueTable] = field(default_factory=_tax_tables)
    life_expenses: NamedValueTable = field(default_factory=NamedValueTable)
    debt_payments: NamedValueTable = field(default_factory=lambda: NamedValueTable("Emprunts"))
    investment_payments: NamedValueTable = field(
        default_factory=lambda: NamedValueTable("Versements")
    )
    sci: SciCashFlow | None = None
    taxable_irpp_income: float = 0.0
    taxable_irpp_delayed_from_last_year: float = 0.0
    taxable_irpp_delayed_to_next_year: float = 0.0
    irpp: Irpp | None = None
    isf: Isf | None = None
    legal_successions: list[Succession] = field(default_factory=list)
    life_insurance_successions: list[Succession] = field(default_factory=list)
    withdrawals: NamedValueTable = field(default_factory=lambda: NamedValueTable("Retraits"))
    net_cash_flow: float = 0.0
    life_insurance_rebate: float = 0.0

    @classmethod
    def compute(
        cls,
        run: int,
        year: int,
        family: Family,
        patrimoine: Patrimoine,
        models: ModelContext,
        mode: SimulationMode,
        taxable_irpp_delayed_from_last_year: float = 0.0,
    ) -> CashFlowLine:
        """
        Compute the line of ``year`` and update the patrimoine.

        The free investments must hold their state at the end of
        ``year - 1``.

        Raises:
            CashFlowError: If a deficit cannot be covered by the free investments
        """
        line = cls(run, year, taxable_irpp_delayed_from_last_year=taxable_irpp_delayed_from_last_year)
        line.ages = {member.name: member.age(year) for member in family.members}
        line.life_insurance_rebate = (
            models.fiscal.life_insurance_taxes.rebate_per_person * family.nb_of_adults_alive(year)
        )
        line._compute_sci(family, patrimoine)
        line._compute_incomes(family, models.fiscal, models.socio_economy, mode)
        line._compute_real_estates(family, patrimoine)
        line._compute_scpis(family, patrimoine)
        line._compute_periodic_investments(family, patrimoine)
        line._compute_irpp(family, models)
        line._compute_isf(family, patrimoine, models)
        line._compute_life_expenses(family, models.socio_economy, mode)
        line._compute_debt_payments(family, patrimoine)
        line._compute_successions(family, patrimoine, models)
        line._manage_net_cash_flow(family, patrimoine, models)
        return line

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    @property
    def sum_of_revenues(self) -> float:
        return sum(table.total for table in self.revenues.values())

    @property
    def sum_of_spendable_revenues(self) -> float:
        """Revenues without the reinvested sale and liquidation proceeds."""
        return sum(
            table.total for category, table in self.revenues.items() if not category.is_reinvested
        )

    @property
    def sum_of_taxes(self) -> float:
        return sum(table.total for table in self.taxes.values())

    @property
    def sum_of_expenses(self) -> float:
        return self.life_expenses.total

    @property
    def sum_of_debt_payments(self) -> float:
        return self.debt_payments.total

    @property
    def sum_of_investment_payments(self) -> float:
        return self.investment_payments.total

    @property
    def sci_spendable_cash_flow(self) -> float:
        """SCI cash flow without the SCPI sale proceeds."""
        if self.sci is None:
            return 0.0
        return self.sci.net_cash_flow - self.sci.scpi_sales.total

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _compute_sci(self, family: Family, patrimoine: Patrimoine) -> None:
        self.sci = patrimoine.assets.sci.cash_flow(self.year, family.adults_name)

    def _compute_incomes(
        self,
        family: Family,
        fiscal: FiscalModel,
        devaluation: PensionDevaluationRateProvider,
        mode: SimulationMode,
    ) -> None:
        pension_taxes = fiscal.pension_taxes
        devaluation_rate = devaluation.pension_devaluation(mode)
        # the pension rebate is capped for the whole household
        pension_discount = 0.0
        for adult in family.adults:
            work = adult.work_income_during(self.year, fiscal)
            if work.net:
                self.revenues[RevenueCategory.WORK_INCOMES].append(adult.name, work.net)
                self.taxable_irpp_income += work.taxable_irpp

            pension = adult.pension(self.year, fiscal, devaluation_rate)
            if pension.brut:
                base = pension.net + pension_taxes.csg_non_deductible(pension.brut)
                relicat = zero_or_positive(pension_taxes.max_rebate - pension_discount)
                discount = min(base - pension.taxable, relicat)
                pension_discount += discount
                self.revenues[RevenueCategory.PENSIONS].append(adult.name, pension.net)
                self.taxable_irpp_income += base - discount

            layoff = adult.layoff_compensation(self.year, fiscal)
            if layoff.brut:
                self.revenues[RevenueCategory.LAYOFF_COMPENSATION].append(adult.name, layoff.net)
                self.taxable_irpp_income += layoff.taxable

            allocation = adult.unemployment_allocation_during(self.year, fiscal)
            if allocation.brut:
                self.revenues[RevenueCategory.UNEMPLOYMENT_ALLOCATION].append(adult.name, allocation.net)
                self.taxable_irpp_income += allocation.taxable

    def _compute_real_estates(self, family: Family, patrimoine: Patrimoine) -> None:
        adults = family.adults_name
        for real_estate in sorted(patrimoine.assets.real_estates, key=lambda item: item.name):
            if not real_estate.is_part_of_patrimoine_of(adults):
                continue
            if real_estate.provides_revenue_to(adults):
                rent = real_estate.yearly_rent(self.year)
                if rent.revenue:
                    self.revenues[RevenueCategory.REAL_ESTATE_RENTS].append(real_estate.name, rent.revenue)
                    self.taxable_irpp_income += rent.taxable_irpp
                    self.taxes[TaxCategory.SOCIAL_TAXES].append(real_estate.name, rent.social_taxes)
                local_taxes = real_estate.yearly_local_taxes(self.year)
                if local_taxes:
                    self.taxes[TaxCategory.LOCAL_TAXES].append(real_estate.name, local_taxes)
            sale = real_estate.liquidated_value(self.year - 1)
            if sale.revenue:
                self.revenues[RevenueCategory.REAL_ESTATE_SALE].append(real_estate.name, sale.net_revenue)
                self._reinvest(
                    patrimoine,
                    family,
                    real_estate.ownership.owned_values(
                        sale.net_revenue, self.year - 1, EvaluationMethod.PATRIMOINE
                    ),
                )

    def _compute_scpis(self, family: Family, patrimoine: Patrimoine) -> None:
        adults = family.adults_name
        for scpi in sorted(patrimoine.assets.scpis, key=lambda item: item.name):
            if not scpi.is_part_of_patrimoine_of(adults):
                continue
            if scpi.provides_revenue_to(adults):
                revenue = scpi.yearly_revenue(self.year)
                if revenue.revenue:
                    self.revenues[RevenueCategory.SCPI_REVENUES].append(scpi.name, revenue.revenue)
                    self.taxable_irpp_income += revenue.taxable_irpp
                    self.taxes[TaxCategory.SOCIAL_TAXES].append(scpi.name, revenue.social_taxes)
            sale = scpi.liquidated_value(self.year - 1)
            if sale.revenue:
                self.revenues[RevenueCategory.SCPI_SALE].append(scpi.name, sale.net_revenue)
                self._reinvest(
                    patrimoine,
                    family,
                    scpi.ownership.owned_values(
                        sale.net_revenue, self.year - 1, EvaluationMethod.PATRIMOINE
                    ),
                )

    def _compute_periodic_investments(self, family: Family, patrimoine: Patrimoine) -> None:
        adults = family.adults_name
        for investment in sorted(patrimoine.assets.periodic_invests, key=lambda item: item.name):
            if not investment.is_part_of_patrimoine_of(adults):
                continue
            payment = investment.yearly_total_payment(self.year)
            if payment:
                self.investment_payments.append(investment.name, payment)
            liquidation = investment.liquidated_value(self.year - 1)
            if not liquidation.revenue:
                continue
            self.revenues[RevenueCategory.PERIODIC_LIQUIDATION].append(investment.name, liquidation.revenue)
            if liquidation.social_taxes:
                self.taxes[TaxCategory.SOCIAL_TAXES].append(investment.name, liquidation.social_taxes)
            taxable = liquidation.taxable_irpp_interests
            if investment.is_life_insurance:
                used = min(self.life_insurance_rebate, taxable)
                self.life_insurance_rebate -= used
                taxable -= used
            self.taxable_irpp_income += taxable
            self._reinvest(
                patrimoine,
                family,
                investment.ownership.owned_values(
                    liquidation.revenue, self.year - 1, EvaluationMethod.PATRIMOINE
                ),
            )

    def _compute_irpp(self, family: Family, models: ModelContext) -> None:
        self.irpp = models.fiscal.income_taxes.irpp(
            self.taxable_irpp_income + self.taxable_irpp_delayed_from_last_year,
            family.nb_of_adults_alive(self.year),
            family.nb_of_fiscal_children(self.year),
        )
        self.taxes[TaxCategory.IRPP].append("IRPP", self.irpp.amount)

    def _compute_isf(self, family: Family, patrimoine: Patrimoine, models: ModelContext) -> None:
        taxable = patrimoine.real_estate_value(self.year, EvaluationMethod.IFI, family)
        self.isf = models.fiscal.isf.isf(taxable)
        self.taxes[TaxCategory.ISF].append("IFI", self.isf.amount)

    def _compute_life_expenses(
        self, family: Family, under_evaluation: ExpensesUnderEvaluationRateProvider, mode: SimulationMode
    ) -> None:
        self.life_expenses = family.expenses.named_value_table(
            self.year, family, under_evaluation.expenses_under_evaluation(mode)
        )

    def _compute_debt_payments(self, family: Family, patrimoine: Patrimoine) -> None:
        adults = family.adults_name
        for loan in sorted(patrimoine.liabilities.loans, key=lambda item: item.name):
            if not loan.is_part_of_patrimoine_of(adults):
                continue
            payment = -loan.yearly_payment(self.year)
            if payment:
                self.debt_payments.append(loan.name, payment)

    def _compute_successions(self, family: Family, patrimoine: Patrimoine, models: ModelContext) -> None:
        legal = LegalSuccessionManager(family, models.fiscal)
        life_insurance = LifeInsuranceSuccessionManager(family, models.fiscal)
        ownership = OwnershipManager(family)
        for decedent in family.deceased_adults(self.year):
            logger.info("Run %d: death of %s in %d", self.run, decedent.name, self.year)
            succession = legal.legal_succession(patrimoine, decedent, self.year)
            li_succession = life_insurance.life_insurance_succession(patrimoine, decedent, self.year)
            ownership.transfer_ownership_of(patrimoine, decedent, self.year)
            self.legal_successions.append(succession)
            self.life_insurance_successions.append(li_succession)
            self.taxes[TaxCategory.SUCCESSION].append(decedent.name, succession.tax)
            self.taxes[TaxCategory.LIFE_INSURANCE_SUCCESSION].append(decedent.name, li_succession.tax)

    def _manage_net_cash_flow(self, family: Family, patrimoine: Patrimoine, models: ModelContext) -> None:
        manager = NetCashFlowManager()
        self.net_cash_flow = (
            self.sum_of_spendable_revenues
            + self.sci_spendable_cash_flow
            - self.sum_of_taxes
            - self.sum_of_expenses
            - self.sum_of_debt_payments
            - self.sum_of_investment_payments
        )
        adults = family.adults_alive_name(self.year)
        if self.net_cash_flow >= 0.0:
            manager.capitalize_free_investments(patrimoine, self.year)
            manager.invest_net_cash_flow(patrimoine, self.net_cash_flow, adults)
            return

        withdrawal = manager.get_cash_from_investment(
            patrimoine, -self.net_cash_flow, self.year, adults, self.life_insurance_rebate
        )
        self.life_insurance_rebate = withdrawal.remaining_rebate
        self.withdrawals = withdrawal.withdrawals
        self.taxable_irpp_delayed_to_next_year = withdrawal.taxable_interests
        # withdrawal social taxes are levied on the amount withdrawn, reported only
        for name, value in withdrawal.social_taxes.named_values:
            self.taxes[TaxCategory.SOCIAL_TAXES].append(name, value)
        manager.capitalize_free_investments(patrimoine, self.year)

    def _reinvest(self, patrimoine: Patrimoine, family: Family, owned_capitals: dict[str, float]) -> None:
        NetCashFlowManager.invest_capital(patrimoine, owned_capitals, family.adults_alive_name(self.year - 1))

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        row: dict[str, Any] = {"run": self.run, "year": self.year}
        for name, age in self.ages.items():
            row[f"age.{name}"] = age
        for category, table in self.revenues.items():
            row[category.value] = table.total
        for category, table in self.taxes.items():
            row[category.value] = table.total
        row["life_expenses"] = self.sum_of_expenses
        row["debt_payments"] = self.sum_of_debt_payments
        row["investment_payments"] = self.sum_of_investment_payments
        row["sci_net_cash_flow"] = self.sci.net_cash_flow if self.sci is not None else 0.0
        row["taxable_irpp_income"] = self.taxable_irpp_income
        row["taxable_irpp_delayed_to_next_year"] = self.taxable_irpp_delayed_to_next_year
        row["withdrawals"] = self.withdrawals.total
        row["net_cash_flow"] = self.net_cash_flow
        return row
