"""
Fiscal models: tax grids, income and social taxes, wealth and inheritance taxes.
"""

from .capital_gain import RealEstateCapitalGainIrppModel, RealEstateCapitalGainTaxesModel
from .company import CompanyProfitTaxesModel
from .demembrement import DemembrementModel, DemembrementSlice, DemembrementValues
from .fiscal_model import FiscalModel
from .income_taxes import IncomeTaxesModel, Irpp, IrppSlice
from .inheritance import (
    FiscalOption,
    HeirShare,
    InheritanceDonationModel,
    InheritanceSharing,
    LifeInsuranceInheritanceModel,
    LifeInsuranceTaxes,
    SharedValues,
    TaxedAmount,
)
from .rate_grid import ExonerationGrid, ExonerationSlice, RateGrid, RateSlice
from .social_taxes import (
    AllocationChomageTaxesModel,
    FinancialRevenueTaxesModel,
    LayoffTaxesModel,
    PensionTaxesModel,
    TurnoverTaxesModel,
)
from .unemployment import (
    LayoffCompensationModel,
    UnemploymentCause,
    UnemploymentCompensationModel,
)
from .wealth import Isf, IsfModel

__all__ = [
    "AllocationChomageTaxesModel",
    "CompanyProfitTaxesModel",
    "DemembrementModel",
    "DemembrementSlice",
    "DemembrementValues",
    "ExonerationGrid",
    "ExonerationSlice",
    "FinancialRevenueTaxesModel",
    "FiscalModel",
    "FiscalOption",
    "HeirShare",
    "IncomeTaxesModel",
    "InheritanceDonationModel",
    "InheritanceSharing",
    "Irpp",
    "IrppSlice",
    "Isf",
    "IsfModel",
    "LayoffCompensationModel",
    "LayoffTaxesModel",
    "LifeInsuranceInheritanceModel",
    "LifeInsuranceTaxes",
    "PensionTaxesModel",
    "RateGrid",
    "RateSlice",
    "RealEstateCapitalGainIrppModel",
    "RealEstateCapitalGainTaxesModel",
    "SharedValues",
    "TaxedAmount",
    "TurnoverTaxesModel",
    "UnemploymentCause",
    "UnemploymentCompensationModel",
]
