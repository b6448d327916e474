"""
Layoff compensation and unemployment allowance (ARE) models.

Both models are indexed by seniority and age; they delegate the social
contributions to ``LayoffTaxesModel`` and ``AllocationChomageTaxesModel``
which are passed explicitly by the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from patrimoine.core.errors import GridSliceIssueError, OutOfBoundsError
from patrimoine.core.utils import ModelVersion, clamp

if TYPE_CHECKING:
    from patrimoine.fiscal.social_taxes import (
        AllocationChomageTaxesModel,
        LayoffTaxesModel,
    )

logger = logging.getLogger(__name__)


class UnemploymentCause(Enum):
    """Cause of the end of the working life."""

    DEMISSION = "demission"
    LICENCIEMENT = "licenciement"
    RUPTURE_CONVENTIONNELLE_INDIVIDUELLE = "rupture_individuelle"
    RUPTURE_CONVENTIONNELLE_COLLECTIVE = "rupture_collective"
    PLAN_SAUVEGARDE_EMPLOI = "pse"

    @property
    def can_receive_allocation(self) -> bool:
        return self is not UnemploymentCause.DEMISSION


class SeniorityCoef(NamedTuple):
    """Months of salary per year of seniority for ``nb_years`` years."""

    nb_years: int
    coef: float


class SeniorityCorrection(NamedTuple):
    anciennete: int
    majoration: float
    min_months: int
    max_months: int


class AgeCorrection(NamedTuple):
    age: int
    corrections: list[SeniorityCorrection]


class LayoffCompensation(NamedTuple):
    nb_month: float
    brut: float
    net: float
    taxable: float


@dataclass
class IrppDiscount:
    """Statutory caps of the IRPP exoneration of a layoff compensation."""

    multiple_of_conventional_compensation: float = 1.0
    multiple_of_last_salary_brut: float = 2.0
    multiple_of_actual_compensation: float = 0.5
    max_discount: float = 246_816.0


@dataclass
class LayoffCompensationModel:
    """
    Legal and collective agreement (metallurgy) layoff compensation.

    The compensation is expressed in months of salary. Each seniority grid
    is consumed slice by slice: ``nb_years`` years are counted at ``coef``
    months each, then the next slice takes the remaining years.
    """

    legal_grid: list[SeniorityCoef]
    metallurgie_grid: list[SeniorityCoef]
    correction_age_grid: list[AgeCorrection]
    irpp_discount: IrppDiscount = field(default_factory=IrppDiscount)
    version: ModelVersion = field(default_factory=ModelVersion)

    @staticmethod
    def compensation_in_month(nb_years_seniority: int, grid: list[SeniorityCoef]) -> float:
        if nb_years_seniority < 0:
            raise OutOfBoundsError(f"Negative seniority {nb_years_seniority}")
        remaining = nb_years_seniority
        nb_month = 0.0
        for grid_slice in grid:
            if remaining <= 0:
                break
            years = min(remaining, grid_slice.nb_years)
            remaining -= years
            nb_month += years * grid_slice.coef
        return nb_month

    def legal_compensation_in_month(self, nb_years_seniority: int) -> float:
        return self.compensation_in_month(nb_years_seniority, self.legal_grid)

    def convention_compensation_in_month(self, age: int, nb_years_seniority: int) -> float:
        """
        Months of salary due under the collective agreement.

        The metallurgy compensation is raised by the age and seniority
        majoration, clamped to its min/max months, and never falls below the
        legal compensation.

        Raises:
            GridSliceIssueError: No correction slice for this age or seniority
        """
        legal = self.compensation_in_month(nb_years_seniority, self.legal_grid)
        metallurgie = self.compensation_in_month(nb_years_seniority, self.metallurgie_grid)
        age_slice = None
        for candidate in self.correction_age_grid:
            if candidate.age <= age:
                age_slice = candidate
        if age_slice is None:
            logger.error("No layoff correction slice for age %s", age)
            raise GridSliceIssueError(f"No layoff correction slice for age {age}")
        correction = None
        for candidate in age_slice.corrections:
            if candidate.anciennete <= nb_years_seniority:
                correction = candidate
        if correction is None:
            logger.error("No layoff correction slice for seniority %s", nb_years_seniority)
            raise GridSliceIssueError(
                f"No layoff correction slice for seniority {nb_years_seniority}"
            )
        metallurgie *= 1.0 + correction.majoration / 100.0
        metallurgie = clamp(
            metallurgie, float(correction.min_months), float(correction.max_months)
        )
        return max(metallurgie, legal)

    def legal_compensation(self, yearly_work_income_brut: float, nb_years_seniority: int) -> float:
        return self.legal_compensation_in_month(nb_years_seniority) * yearly_work_income_brut / 12.0

    def compensation(
        self,
        layoff_taxes: LayoffTaxesModel,
        cause: UnemploymentCause,
        yearly_work_income_brut: float,
        age: int,
        nb_years_seniority: int,
        actual_compensation_brut: float | None = None,
    ) -> LayoffCompensation:
        """
        Gross, net and IRPP taxable layoff compensation.

        The IRPP exoneration depends on the cause: total for a collective
        plan, the largest of the three statutory caps (bounded by the actual
        amount) for an individual layoff, none for a resignation.
        """
        nb_month = self.convention_compensation_in_month(age, nb_years_seniority)
        brut_conventionnel = nb_month * yearly_work_income_brut / 12.0
        brut_reel = (
            brut_conventionnel if actual_compensation_brut is None else actual_compensation_brut
        )

        if cause in (
            UnemploymentCause.PLAN_SAUVEGARDE_EMPLOI,
            UnemploymentCause.RUPTURE_CONVENTIONNELLE_COLLECTIVE,
        ):
            irpp_discount = brut_reel
        elif cause in (
            UnemploymentCause.LICENCIEMENT,
            UnemploymentCause.RUPTURE_CONVENTIONNELLE_INDIVIDUELLE,
        ):
            caps = self.irpp_discount
            discount1 = caps.multiple_of_conventional_compensation * brut_conventionnel
            discount2 = min(
                caps.multiple_of_last_salary_brut * yearly_work_income_brut, caps.max_discount
            )
            discount3 = min(caps.multiple_of_actual_compensation * brut_reel, caps.max_discount)
            irpp_discount = min(max(discount1, discount2, discount3), brut_reel)
        else:
            irpp_discount = 0.0

        net, taxable = layoff_taxes.net(
            compensation_conventional=brut_conventionnel,
            compensation_brut=brut_reel,
            compensation_taxable=brut_reel - irpp_discount,
            irpp_discount=irpp_discount,
        )
        return LayoffCompensation(nb_month, brut_reel, net, taxable)


class DurationSlice(NamedTuple):
    from_age: int
    max_duration: int
    reduction: float
    reduction_after: int
    reduction_seuil_alloc: float


class Reduction(NamedTuple):
    percent_reduc: float
    after_month: int | None


class DailyAllocation(NamedTuple):
    brut: float
    net: float


@dataclass
class DelayModel:
    delai_attente: int = 7
    ratio_differe_specifique: float = 94.4
    max_differe_specifique: int = 150
    max_differe_specifique_licenciement_eco: int = 75


@dataclass
class AmountModel:
    case1_rate: float = 40.4
    case1_fix: float = 12.0
    case2_rate: float = 57.0
    min_allocation_euro: float = 29.26
    max_allocation_pcent: float = 75.0
    max_allocation_euro: float = 253.14


@dataclass
class UnemploymentCompensationModel:
    """
    Unemployment allowance (ARE): duration, waiting delay, daily amount and
    degressivity, all driven by the daily reference salary (SJR).
    """

    duration_grid: list[DurationSlice]
    delay_model: DelayModel = field(default_factory=DelayModel)
    amount_model: AmountModel = field(default_factory=AmountModel)
    version: ModelVersion = field(default_factory=ModelVersion)

    def _duration_slice(self, age: int) -> DurationSlice:
        found = None
        for candidate in self.duration_grid:
            if candidate.from_age <= age:
                found = candidate
        if found is None:
            raise GridSliceIssueError(f"No unemployment duration slice for age {age}")
        return found

    def duration_in_month(self, age: int) -> int:
        return self._duration_slice(age).max_duration

    def differe_specifique(
        self, compensation_supralegal: float, cause: UnemploymentCause
    ) -> int:
        """Specific delay (days) caused by a supra-legal compensation."""
        delay = math.floor(compensation_supralegal / self.delay_model.ratio_differe_specifique)
        cap = (
            self.delay_model.max_differe_specifique_licenciement_eco
            if cause is UnemploymentCause.PLAN_SAUVEGARDE_EMPLOI
            else self.delay_model.max_differe_specifique
        )
        return max(min(delay, cap), 0)

    def reduction(self, age: int, daily_alloc: float) -> Reduction:
        duration_slice = self._duration_slice(age)
        if daily_alloc >= duration_slice.reduction_seuil_alloc and duration_slice.reduction != 0:
            return Reduction(duration_slice.reduction, duration_slice.reduction_after)
        return Reduction(0.0, None)

    def daily_alloc_before_reduction(
        self, sjr: float, chomage_taxes: AllocationChomageTaxesModel
    ) -> DailyAllocation:
        amount = self.amount_model
        alloc1 = sjr * amount.case1_rate / 100.0 + amount.case1_fix
        alloc2 = sjr * amount.case2_rate / 100.0
        ceiling = min(sjr * amount.max_allocation_pcent / 100.0, amount.max_allocation_euro)
        brut = clamp(max(alloc1, alloc2), amount.min_allocation_euro, ceiling)
        return DailyAllocation(brut, chomage_taxes.net(brut, sjr))
