"""
Family members: adults (incomes, pensions, unemployment) and children.

Years are civil years; an event dated ``year`` happens during that year and
a state "at the end of ``year``" is the state on December 31st.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple

from patrimoine.core.kinds import Sex
from patrimoine.core.utils import zero_or_positive
from patrimoine.family.work_income import SalaryIncome, TurnoverIncome, WorkIncome
from patrimoine.fiscal.inheritance import FiscalOption
from patrimoine.fiscal.unemployment import LayoffCompensation, Reduction, UnemploymentCause

if TYPE_CHECKING:
    from patrimoine.economy.human_life import HumanLifeModel
    from patrimoine.fiscal.fiscal_model import FiscalModel

FOREVER = 200
DAYS_PER_MONTH = 365.25 / 12.0


class BrutNetTaxable(NamedTuple):
    brut: float
    net: float
    taxable: float


ZERO_BNT = BrutNetTaxable(0.0, 0.0, 0.0)


class IncomeSlice(NamedTuple):
    net: float
    taxable_irpp: float


class AdultRandomProperties(NamedTuple):
    """Random properties drawn for an adult at the start of a run."""

    age_of_death: int
    nb_of_years_of_dependency: int


@dataclass
class Person:
    """
    Attributes:
        name: Display name, unique in the family
        birth_year: Year of birth
        sex: Sex (drives the life expectancy law)
        age_of_death: Age at the end of the year of death
    """

    name: str
    birth_year: int
    sex: Sex = Sex.MALE
    age_of_death: int = FOREVER

    @property
    def year_of_death(self) -> int:
        return self.birth_year + self.age_of_death

    def age(self, year: int) -> int:
        """Age at the end of ``year``."""
        return year - self.birth_year

    def is_alive(self, year: int) -> bool:
        """Alive at the end of ``year``; nobody is alive at the end of the year of death."""
        return year < self.year_of_death

    def is_deceased(self, year: int) -> bool:
        """Dies during ``year``."""
        return not self.is_alive(year) and self.is_alive(year - 1)

    def next_random_properties(self, human_life: HumanLifeModel, current_year: int) -> None:
        """Draw a new age of death, never younger than the current age."""
        drawn = int(human_life.life_expectation(self.sex).next())
        self.age_of_death = max(drawn, self.age(current_year))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "birth_year": self.birth_year,
            "sex": self.sex.value,
            "age_of_death": self.age_of_death,
        }


@dataclass
class Child(Person):
    """
    Attributes:
        age_of_university: Age at which the child starts higher education
        age_of_independence: Age at which the child becomes independent
    """

    age_of_university: int = 18
    age_of_independence: int = 24

    def is_at_university(self, year: int) -> bool:
        return self.birth_year + self.age_of_university < year and not self.is_independent(year)

    def is_independent(self, year: int) -> bool:
        return self.birth_year + self.age_of_independence < year

    def is_fiscally_dependent(self, year: int) -> bool:
        """
        Counted in the fiscal household of ``year``: alive and, at the start
        of the year, 21 or younger, or 25 or younger if still a student.
        """
        if not self.is_alive(year):
            return False
        age = self.age(year - 1)
        return age <= 21 or (not self.is_independent(year) and age <= 25)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "age_of_university": self.age_of_university,
                "age_of_independence": self.age_of_independence,
            }
        )
        return data


@dataclass
class Pension:
    """
    Pension of one regime, in euros of the liquidation year.

    Attributes:
        brut: Yearly gross pension at liquidation
        liquidation_year: Year of liquidation
        liquidation_month: Month of liquidation (paid from the next month)
    """

    brut: float = 0.0
    liquidation_year: int = FOREVER * 100
    liquidation_month: int = 12

    def is_paid(self, year: int) -> bool:
        return self.liquidation_year <= year

    def brut_during(self, year: int, devaluation_rate: float) -> float:
        """Gross pension of ``year``, devaluated yearly after liquidation and prorated the first year."""
        if not self.is_paid(year):
            return 0.0
        brut = self.brut * (1.0 - devaluation_rate / 100.0) ** (year - self.liquidation_year)
        if year == self.liquidation_year:
            brut *= (12 - self.liquidation_month) / 12.0
        return brut

    def to_dict(self) -> dict[str, Any]:
        return {
            "brut": self.brut,
            "liquidation_year": self.liquidation_year,
            "liquidation_month": self.liquidation_month,
        }


@dataclass
class Adult(Person):
    """
    Adult member: work income until retirement, then possibly layoff
    compensation and unemployment allowance, then pensions.

    **Unemployment timeline (months):**
        - allowance starts after the retirement month plus the specific
          delay due to a supra-legal compensation
        - lasts ``duration_in_month(age at retirement)`` months
        - degressivity applies after ``after_month`` months when the daily
          allowance is above the threshold

    Attributes:
        work_income: Salary or turnover, None without work income
        retirement_year: Year the adult stops working
        retirement_month: Last month worked in ``retirement_year``
        cause_of_retirement: Resignation, layoff or conventional termination
        layoff_compensation_bonified: Compensation actually negotiated (supra-legal)
        seniority_start_year: Year of hiring in the current company
        pension_general: General regime pension
        pension_agirc: AGIRC-ARRCO complementary pension
        nb_of_years_of_dependency: Years of dependency before death
        fiscal_option: Option of the surviving spouse at this adult's death
        nb_of_child_birth: Number of children born
    """

    work_income: WorkIncome | None = None
    retirement_year: int = FOREVER * 100
    retirement_month: int = 12
    cause_of_retirement: UnemploymentCause = UnemploymentCause.DEMISSION
    layoff_compensation_bonified: float | None = None
    seniority_start_year: int | None = None
    pension_general: Pension = field(default_factory=Pension)
    pension_agirc: Pension = field(default_factory=Pension)
    nb_of_years_of_dependency: int = 0
    fiscal_option: FiscalOption = FiscalOption.FULL_USUFRUCT
    nb_of_child_birth: int = 0

    # ------------------------------------------------------------------
    # Life events
    # ------------------------------------------------------------------

    @property
    def year_of_dependency(self) -> int:
        return self.year_of_death - self.nb_of_years_of_dependency

    def is_active(self, year: int) -> bool:
        return self.is_alive(year) and year <= self.retirement_year

    def is_retired(self, year: int) -> bool:
        return self.is_alive(year) and self.retirement_year <= year

    def is_dependent(self, year: int) -> bool:
        return self.is_alive(year) and self.year_of_dependency <= year

    def is_pensioned(self, year: int) -> bool:
        return self.is_alive(year) and (
            self.pension_general.is_paid(year) or self.pension_agirc.is_paid(year)
        )

    def next_random_properties(self, human_life: HumanLifeModel, current_year: int) -> None:
        super().next_random_properties(human_life, current_year)
        dependency = int(human_life.nb_of_years_of_dependency.next())
        self.nb_of_years_of_dependency = min(dependency, int(zero_or_positive(self.age_of_death - 65)))

    @property
    def random_properties(self) -> AdultRandomProperties:
        return AdultRandomProperties(self.age_of_death, self.nb_of_years_of_dependency)

    def set_random_properties(self, properties: AdultRandomProperties) -> None:
        self.age_of_death = properties.age_of_death
        self.nb_of_years_of_dependency = properties.nb_of_years_of_dependency

    # ------------------------------------------------------------------
    # Work income
    # ------------------------------------------------------------------

    @property
    def work_brut_income(self) -> float:
        if isinstance(self.work_income, SalaryIncome):
            return self.work_income.brut_salary
        if isinstance(self.work_income, TurnoverIncome):
            return self.work_income.bnc
        return 0.0

    def work_living_income(self, fiscal: FiscalModel) -> float:
        """Net income after social taxes and optional insurances."""
        if isinstance(self.work_income, SalaryIncome):
            return self.work_income.net_salary - self.work_income.health_insurance
        if isinstance(self.work_income, TurnoverIncome):
            return (
                fiscal.turnover_taxes.net(self.work_income.bnc)
                - self.work_income.other_health_insurance
            )
        return 0.0

    def work_taxable_income(self, fiscal: FiscalModel) -> float:
        if self.work_income is None:
            return 0.0
        return fiscal.income_taxes.taxable_income(self.work_income)

    def work_income_during(self, year: int, fiscal: FiscalModel) -> IncomeSlice:
        """Work income of ``year``, prorated by the months worked in the retirement year."""
        if not self.is_active(year):
            return IncomeSlice(0.0, 0.0)
        ratio = self.retirement_month / 12.0 if year == self.retirement_year else 1.0
        return IncomeSlice(
            self.work_living_income(fiscal) * ratio,
            self.work_taxable_income(fiscal) * ratio,
        )

    # ------------------------------------------------------------------
    # Layoff and unemployment
    # ------------------------------------------------------------------

    @property
    def sjr(self) -> float:
        """Daily reference salary."""
        if isinstance(self.work_income, SalaryIncome):
            return self.work_income.brut_salary / 365.0
        return 0.0

    @property
    def has_unemployment_allocation_period(self) -> bool:
        return (
            isinstance(self.work_income, SalaryIncome)
            and self.cause_of_retirement.can_receive_allocation
        )

    @property
    def age_at_retirement(self) -> int:
        return self.age(self.retirement_year)

    @property
    def nb_years_of_seniority(self) -> int:
        start = self.seniority_start_year if self.seniority_start_year is not None else self.retirement_year
        return max(self.retirement_year - start, 0)

    def layoff_compensation_brut_legal(self, fiscal: FiscalModel) -> float | None:
        if not self.has_unemployment_allocation_period:
            return None
        return fiscal.layoff_compensation.legal_compensation(
            self.work_brut_income, self.nb_years_of_seniority
        )

    def layoff_compensation_details(self, fiscal: FiscalModel) -> LayoffCompensation | None:
        if not self.has_unemployment_allocation_period:
            return None
        return fiscal.layoff_compensation.compensation(
            layoff_taxes=fiscal.layoff_taxes,
            cause=self.cause_of_retirement,
            yearly_work_income_brut=self.work_brut_income,
            age=self.age_at_retirement,
            nb_years_seniority=self.nb_years_of_seniority,
            actual_compensation_brut=self.layoff_compensation_bonified,
        )

    def layoff_compensation(self, year: int, fiscal: FiscalModel) -> BrutNetTaxable:
        """Layoff compensation, paid in the retirement year."""
        if year != self.retirement_year or not self.is_alive(year - 1):
            return ZERO_BNT
        details = self.layoff_compensation_details(fiscal)
        if details is None:
            return ZERO_BNT
        return BrutNetTaxable(details.brut, details.net, details.taxable)

    def unemployment_allocation_differe(self, fiscal: FiscalModel) -> int | None:
        """Specific delay (days) before the allowance starts."""
        details = self.layoff_compensation_details(fiscal)
        legal = self.layoff_compensation_brut_legal(fiscal)
        if details is None or legal is None:
            return None
        return fiscal.unemployment_compensation.differe_specifique(
            details.brut - legal, self.cause_of_retirement
        )

    def unemployment_allocation_duration(self, fiscal: FiscalModel) -> int | None:
        """Duration of the allowance in months."""
        if not self.has_unemployment_allocation_period:
            return None
        return fiscal.unemployment_compensation.duration_in_month(self.age_at_retirement)

    def unemployment_allocation(self, fiscal: FiscalModel) -> tuple[float, float] | None:
        """Yearly (brut, net) allowance before degressivity."""
        if not self.has_unemployment_allocation_period:
            return None
        daily = fiscal.unemployment_compensation.daily_alloc_before_reduction(
            self.sjr, fiscal.allocation_chomage_taxes
        )
        return daily.brut * 365.0, daily.net * 365.0

    def unemployment_allocation_reduction(self, fiscal: FiscalModel) -> Reduction | None:
        alloc = self.unemployment_allocation(fiscal)
        if alloc is None:
            return None
        return fiscal.unemployment_compensation.reduction(self.age_at_retirement, alloc[0] / 365.0)

    def unemployment_timeline(self, fiscal: FiscalModel) -> tuple[float, float, float] | None:
        """
        Start, start of reduction and end of the allowance, in months
        counted from year 0 (``year * 12 + month``).
        """
        differe = self.unemployment_allocation_differe(fiscal)
        duration = self.unemployment_allocation_duration(fiscal)
        reduction = self.unemployment_allocation_reduction(fiscal)
        if differe is None or duration is None or reduction is None:
            return None
        start = self.retirement_year * 12 + self.retirement_month + differe / DAYS_PER_MONTH
        end = start + duration
        reduction_start = end if reduction.after_month is None else min(start + reduction.after_month, end)
        return start, reduction_start, end

    def is_receiving_unemployment_allocation(self, year: int, fiscal: FiscalModel) -> bool:
        if not self.is_retired(year):
            return False
        timeline = self.unemployment_timeline(fiscal)
        if timeline is None:
            return False
        start, _, end = timeline
        return math.floor(start / 12) <= year <= math.floor(end / 12)

    def unemployment_allocation_during(self, year: int, fiscal: FiscalModel) -> BrutNetTaxable:
        """Allowance received during ``year``; the net amount is taxable."""
        if not self.is_receiving_unemployment_allocation(year, fiscal):
            return ZERO_BNT
        start, reduction_start, end = self.unemployment_timeline(fiscal)
        alloc_brut, alloc_net = self.unemployment_allocation(fiscal)
        reduc = self.unemployment_allocation_reduction(fiscal).percent_reduc
        year_start, year_end = year * 12.0, (year + 1) * 12.0
        months_full = zero_or_positive(min(reduction_start, year_end) - max(start, year_start))
        months_reduced = zero_or_positive(min(end, year_end) - max(reduction_start, year_start))
        factor = months_full + months_reduced * (1.0 - reduc / 100.0)
        brut = alloc_brut / 12.0 * factor
        net = alloc_net / 12.0 * factor
        return BrutNetTaxable(brut, net, net)

    # ------------------------------------------------------------------
    # Pension
    # ------------------------------------------------------------------

    def pension(self, year: int, fiscal: FiscalModel, devaluation_rate: float) -> BrutNetTaxable:
        """
        Pensions of both regimes during ``year``.

        The taxable amount is before the household rebate cap, which the
        cash-flow line applies to the whole household.
        """
        if not self.is_alive(year):
            return ZERO_BNT
        taxes = fiscal.pension_taxes
        brut_general = self.pension_general.brut_during(year, devaluation_rate)
        brut_agirc = self.pension_agirc.brut_during(year, devaluation_rate)
        brut = brut_general + brut_agirc
        net = taxes.net_general(brut_general) + taxes.net_agirc(brut_agirc)
        if brut == 0.0:
            return ZERO_BNT
        return BrutNetTaxable(brut, net, taxes.taxable(brut, net))

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "work_income": self.work_income.to_dict() if self.work_income else None,
                "retirement_year": self.retirement_year,
                "retirement_month": self.retirement_month,
                "cause_of_retirement": self.cause_of_retirement.value,
                "layoff_compensation_bonified": self.layoff_compensation_bonified,
                "seniority_start_year": self.seniority_start_year,
                "pension_general": self.pension_general.to_dict(),
                "pension_agirc": self.pension_agirc.to_dict(),
                "nb_of_years_of_dependency": self.nb_of_years_of_dependency,
                "fiscal_option": self.fiscal_option.value,
                "nb_of_child_birth": self.nb_of_child_birth,
            }
        )
        return data
