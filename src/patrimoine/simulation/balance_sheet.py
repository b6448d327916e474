"""
Balance sheet of the family at the end of a year.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from patrimoine.core.kinds import AssetCategory, LiabilityCategory
from patrimoine.core.utils import NamedValueTable

if TYPE_CHECKING:
    from patrimoine.family.family import Family
    from patrimoine.ownership.ownable import Ownable
    from patrimoine.patrimoine import Patrimoine

ALL = "all"


@dataclass
class BalanceSheetLine:
    """
    Values of the assets and liabilities at the end of ``year``.

    Each category holds one table for the whole family (``"all"``) and one
    per adult, where an item counts for an adult only if it provides the
    adult with revenues.

    Attributes:
        year: Year of the balance sheet
        assets: Category -> member (or ``"all"``) -> values per item
        liabilities: Category -> member (or ``"all"``) -> values per item
    """

    year: int
    assets: dict[AssetCategory, dict[str, NamedValueTable]] = field(default_factory=dict)
    liabilities: dict[LiabilityCategory, dict[str, NamedValueTable]] = field(default_factory=dict)

    @classmethod
    def build(cls, year: int, family: Family, patrimoine: Patrimoine) -> BalanceSheetLine:
        line = cls(year)
        assets = patrimoine.assets
        adults = family.adults_name
        line.assets[AssetCategory.REAL_ESTATES] = cls._tables(assets.real_estates, year, adults)
        line.assets[AssetCategory.PERIODIC_INVESTS] = cls._tables(assets.periodic_invests, year, adults)
        line.assets[AssetCategory.FREE_INVESTS] = cls._tables(assets.free_invests, year, adults)
        line.assets[AssetCategory.SCPIS] = cls._tables(assets.scpis, year, adults)
        line.assets[AssetCategory.SCI] = cls._tables(assets.sci.scpis, year, adults, prefix="SCI - ")
        liabilities = patrimoine.liabilities
        line.liabilities[LiabilityCategory.DEBTS] = cls._tables(liabilities.debts, year, adults)
        line.liabilities[LiabilityCategory.LOANS] = cls._tables(liabilities.loans, year, adults)
        return line

    @staticmethod
    def _tables(
        items: Iterable[Ownable], year: int, members: list[str], prefix: str = ""
    ) -> dict[str, NamedValueTable]:
        tables = {name: NamedValueTable(name) for name in (ALL, *members)}
        for item in items:
            value = item.value(year)
            label = prefix + item.name
            tables[ALL].append(label, value)
            for member in members:
                tables[member].append(label, value if item.provides_revenue_to([member]) else 0.0)
        return tables

    def assets_value(self, member: str = ALL) -> float:
        return sum(tables[member].total for tables in self.assets.values())

    def liabilities_value(self, member: str = ALL) -> float:
        return sum(tables[member].total for tables in self.liabilities.values())

    def category_value(self, category: AssetCategory | LiabilityCategory, member: str = ALL) -> float:
        if isinstance(category, AssetCategory):
            return self.assets[category][member].total
        return self.liabilities[category][member].total

    def net_assets(self, member: str = ALL) -> float:
        """Assets plus liabilities (liabilities are negative)."""
        return self.assets_value(member) + self.liabilities_value(member)

    def net_financial_assets(self, member: str = ALL) -> float:
        return self.net_assets(member) - self.category_value(AssetCategory.REAL_ESTATES, member)

    def financial_assets(self, member: str = ALL) -> float:
        return self.assets_value(member) - self.category_value(AssetCategory.REAL_ESTATES, member)

    def to_dict(self) -> dict[str, float]:
        row: dict[str, float] = {"year": self.year}
        for category in AssetCategory:
            row[category.value] = self.category_value(category)
        for category in LiabilityCategory:
            row[category.value] = self.category_value(category)
        row["assets"] = self.assets_value()
        row["liabilities"] = self.liabilities_value()
        row["net_assets"] = self.net_assets()
        row["net_financial_assets"] = self.net_financial_assets()
        row["financial_assets"] = self.financial_assets()
        return row
