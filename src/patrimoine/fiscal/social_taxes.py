"""
Social levies (CSG, CRDS and contributions) on the various revenue kinds.

All rates are percentages. Every model follows the same shape: a
``social_taxes`` amount for a gross revenue and the ``net`` revenue left
after it, returning 0 for a negative gross amount unless documented
otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from patrimoine.core.errors import ConfigError, OutOfBoundsError
from patrimoine.core.utils import ModelVersion, clamp, zero_or_positive


@dataclass
class PensionTaxesModel:
    """
    Social taxes on retirement pensions and their IRPP taxable base.

    Attributes:
        rebate: Flat rebate on the taxable pension (%)
        min_rebate: Minimum rebate per pensioner (euros)
        max_rebate: Rebate cap for the whole fiscal household (euros)
        csg_deductible: Deductible part of the CSG (%)
        crds: CRDS rate (%)
        csg: CSG rate (%)
        additional_contrib: Solidarity contribution CASA (%)
        health_insurance: Health insurance contribution of AGIRC pensions (%)
    """

    rebate: float = 10.0
    min_rebate: float = 393.0
    max_rebate: float = 3_850.0
    csg_deductible: float = 5.9
    crds: float = 0.5
    csg: float = 8.3
    additional_contrib: float = 0.3
    health_insurance: float = 1.0
    version: ModelVersion = field(default_factory=ModelVersion)

    @property
    def total_regime_general(self) -> float:
        return self.crds + self.csg + self.additional_contrib

    @property
    def total_regime_agirc(self) -> float:
        return self.total_regime_general + self.health_insurance

    def social_taxes_general(self, brut: float) -> float:
        if brut < 0.0:
            return 0.0
        return brut * self.total_regime_general / 100.0

    def social_taxes_agirc(self, brut: float) -> float:
        if brut < 0.0:
            return 0.0
        return brut * self.total_regime_agirc / 100.0

    def net_general(self, brut: float) -> float:
        if brut < 0.0:
            return 0.0
        return brut - self.social_taxes_general(brut)

    def net_agirc(self, brut: float) -> float:
        if brut < 0.0:
            return 0.0
        return brut - self.social_taxes_agirc(brut)

    def csg_non_deductible(self, brut: float) -> float:
        """Part of the CSG that is added back to the taxable base."""
        return brut * (self.csg - self.csg_deductible) / 100.0

    def taxable(self, brut: float, net: float) -> float:
        """
        Pension taxable to IRPP before the household rebate cap.

        The base is the net pension plus the non-deductible CSG, minus the
        flat rebate clamped to ``[min_rebate, max_rebate]``.

        Raises:
            OutOfBoundsError: If ``net`` is negative
        """
        if net < 0.0:
            raise OutOfBoundsError(f"Negative net pension {net}")
        base = net + self.csg_non_deductible(brut)
        rebate = clamp(base * self.rebate / 100.0, self.min_rebate, self.max_rebate)
        return zero_or_positive(base - rebate)


@dataclass
class FinancialRevenueTaxesModel:
    """Social levies on financial revenues (interests, dividends)."""

    crds: float = 0.5
    csg: float = 9.2
    prelev_social: float = 7.5
    version: ModelVersion = field(default_factory=ModelVersion)

    @property
    def total(self) -> float:
        return self.crds + self.csg + self.prelev_social

    def social_taxes(self, brut: float) -> float:
        if brut < 0.0:
            return 0.0
        return brut * self.total / 100.0

    def net(self, brut: float) -> float:
        return brut - self.social_taxes(brut)

    def brut(self, net: float) -> float:
        """Gross revenue leaving ``net`` after social levies."""
        if net < 0.0:
            return net
        return net / (1.0 - self.total / 100.0)


@dataclass
class TurnoverTaxesModel:
    """URSSAF contributions of a self-employed professional (BNC)."""

    urssaf: float = 24.0
    version: ModelVersion = field(default_factory=ModelVersion)

    def social_taxes(self, turnover: float) -> float:
        if turnover < 0.0:
            return 0.0
        return turnover * self.urssaf / 100.0

    def net(self, turnover: float) -> float:
        if turnover < 0.0:
            return 0.0
        return turnover - self.social_taxes(turnover)


@dataclass
class AllocationChomageTaxesModel:
    """
    Social taxes withheld from the daily unemployment allowance (ARE).

    The complementary pension contribution is taken on the daily reference
    salary (SJR) only when the allowance left after it stays above
    ``seuil_ret_compl``. CSG and CRDS apply on ``assiette`` % of the gross
    allowance only when the allowance stays above ``seuil_csg_crds``.
    """

    assiette: float = 98.5
    seuil_csg_crds: float = 50.0
    crds: float = 0.5
    csg: float = 6.2
    retraite_compl: float = 3.0
    seuil_ret_compl: float = 29.26
    version: ModelVersion = field(default_factory=ModelVersion)

    def social_taxes(self, brut: float, sjr: float) -> float:
        """
        Daily social taxes on a gross daily allowance.

        Raises:
            OutOfBoundsError: If the daily reference salary is negative
        """
        if brut <= 0.0:
            return 0.0
        if sjr < 0.0:
            raise OutOfBoundsError(f"Negative daily reference salary {sjr}")
        cotisation = 0.0
        cot_retraite_compl = sjr * self.retraite_compl / 100.0
        if brut - cot_retraite_compl >= self.seuil_ret_compl:
            cotisation += cot_retraite_compl
            brut_after_pension = brut - cot_retraite_compl
        else:
            brut_after_pension = brut
        if brut_after_pension >= self.seuil_csg_crds:
            cotisation += self.assiette / 100.0 * brut * (self.crds + self.csg) / 100.0
        return cotisation

    def net(self, brut: float, sjr: float) -> float:
        if brut < 0.0:
            return 0.0
        return brut - self.social_taxes(brut, sjr)


@dataclass
class LayoffTaxesModel:
    """
    Social contributions on a layoff compensation.

    ``pass_`` (annual social security ceiling) is injected by
    ``FiscalModel.initialize()``; the social contribution exoneration is
    capped at ``max_rebate_coef * PASS``.

    Attributes:
        max_rebate_coef: Exoneration cap in multiples of the PASS
        social_rate: Social contributions rate (%)
        csg_crds_deductible: Deductible CSG rate (%)
        csg_crds_non_deductible: Non deductible CSG and CRDS rate (%)
    """

    max_rebate_coef: float = 2.0
    social_rate: float = 13.0
    csg_crds_deductible: float = 6.8
    csg_crds_non_deductible: float = 2.9
    pass_: float | None = None
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self, pass_: float) -> None:
        self.pass_ = pass_

    @property
    def max_rebate(self) -> float:
        if self.pass_ is None:
            raise ConfigError("LayoffTaxesModel needs the PASS (call initialize)")
        return self.max_rebate_coef * self.pass_

    @property
    def csg_crds_total(self) -> float:
        return self.csg_crds_deductible + self.csg_crds_non_deductible

    def net(
        self,
        compensation_conventional: float,
        compensation_brut: float,
        compensation_taxable: float,
        irpp_discount: float,
    ) -> tuple[float, float]:
        """
        Compensation left after social contributions.

        Args:
            compensation_conventional: Legal or collective agreement compensation
            compensation_brut: Actual gross compensation
            compensation_taxable: Part of the compensation taxable to IRPP
            irpp_discount: Part of the compensation exonerated from IRPP

        Returns:
            ``(net, taxable)`` where ``taxable`` is ``compensation_taxable``
            reduced by the deductible CSG.
        """
        discount_social = min(self.max_rebate, irpp_discount)
        base_social = zero_or_positive(compensation_brut - discount_social)
        social_taxes = base_social * self.social_rate / 100.0

        discount_csg_crds = min(compensation_conventional, discount_social)
        base_csg_crds = zero_or_positive(compensation_brut - discount_csg_crds)
        csg_crds = base_csg_crds * self.csg_crds_total / 100.0

        csg_deductible = zero_or_positive(base_csg_crds * self.csg_crds_deductible / 100.0)
        taxable = zero_or_positive(compensation_taxable - csg_deductible)
        return compensation_brut - social_taxes - csg_crds, taxable
