"""
Bundle of every fiscal sub-model.

A ``FiscalModel`` is built once from configuration (see
``patrimoine.core.config_loader.load_fiscal_model``), initialised, then
passed explicitly to whatever needs to compute a tax.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from patrimoine.core.utils import ModelVersion
from patrimoine.fiscal.capital_gain import (
    RealEstateCapitalGainIrppModel,
    RealEstateCapitalGainTaxesModel,
)
from patrimoine.fiscal.company import CompanyProfitTaxesModel
from patrimoine.fiscal.demembrement import DemembrementModel
from patrimoine.fiscal.income_taxes import IncomeTaxesModel
from patrimoine.fiscal.inheritance import (
    InheritanceDonationModel,
    LifeInsuranceInheritanceModel,
    LifeInsuranceTaxes,
)
from patrimoine.fiscal.social_taxes import (
    AllocationChomageTaxesModel,
    FinancialRevenueTaxesModel,
    LayoffTaxesModel,
    PensionTaxesModel,
    TurnoverTaxesModel,
)
from patrimoine.fiscal.unemployment import (
    LayoffCompensationModel,
    UnemploymentCompensationModel,
)
from patrimoine.fiscal.wealth import IsfModel


@dataclass
class FiscalModel:
    """
    Fiscal environment of a simulation.

    Attributes:
        pass_: Annual social security ceiling (PASS, euros)
        income_taxes: IRPP
        isf: IFI
        estate_capital_gain_irpp: IRPP on real-estate capital gains
        estate_capital_gain_taxes: Social levies on real-estate capital gains
        pension_taxes: Social taxes on pensions
        financial_revenue_taxes: Social levies on financial revenues
        turnover_taxes: URSSAF on self-employed turnover
        allocation_chomage_taxes: Social taxes on unemployment allowances
        layoff_taxes: Social taxes on layoff compensations
        life_insurance_taxes: Yearly life insurance withdrawal allowance
        company_profit_taxes: Corporate tax (SCI)
        demembrement: Usufruct / bare ownership valuation grid
        inheritance_donation: Direct line inheritance and donation taxes
        life_insurance_inheritance: Life insurance inheritance taxes
        layoff_compensation: Layoff compensation grids
        unemployment_compensation: Unemployment allowance grids
    """

    pass_: float
    income_taxes: IncomeTaxesModel
    isf: IsfModel
    estate_capital_gain_irpp: RealEstateCapitalGainIrppModel
    estate_capital_gain_taxes: RealEstateCapitalGainTaxesModel
    pension_taxes: PensionTaxesModel
    financial_revenue_taxes: FinancialRevenueTaxesModel
    turnover_taxes: TurnoverTaxesModel
    allocation_chomage_taxes: AllocationChomageTaxesModel
    layoff_taxes: LayoffTaxesModel
    life_insurance_taxes: LifeInsuranceTaxes
    company_profit_taxes: CompanyProfitTaxesModel
    demembrement: DemembrementModel
    inheritance_donation: InheritanceDonationModel
    life_insurance_inheritance: LifeInsuranceInheritanceModel
    layoff_compensation: LayoffCompensationModel
    unemployment_compensation: UnemploymentCompensationModel
    version: ModelVersion = field(default_factory=ModelVersion)
    initialized: bool = False

    def initialize(self) -> FiscalModel:
        """Validate every grid, pre-compute derived values and inject the PASS."""
        self.income_taxes.initialize()
        self.isf.initialize()
        self.estate_capital_gain_irpp.initialize()
        self.estate_capital_gain_taxes.initialize()
        self.layoff_taxes.initialize(self.pass_)
        self.demembrement.initialize()
        self.inheritance_donation.initialize()
        self.life_insurance_inheritance.initialize()
        self.initialized = True
        return self
