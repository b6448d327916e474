"""
Tests for real estate valuation, rents, local taxes and sale.
"""

import pytest

from patrimoine.assets.assets import Assets
from patrimoine.assets.real_estate import NO_LIQUIDATION, RealEstateAsset, YearPeriod
from patrimoine.core.kinds import EvaluationMethod
from patrimoine.ownership.ownership import Ownership


@pytest.fixture
def flat(make_context):
    """Flat inhabited from 2010, rented from 2016 to 2019, sold in 2031."""
    asset = RealEstateAsset(
        name="Appartement",
        ownership=Ownership.full(("Alice", 50.0), ("Bruno", 50.0)),
        buying_year=2005,
        buying_price=100_000.0,
        will_be_sold=True,
        selling_year=2031,
        selling_net_price=150_000.0,
        inhabited=YearPeriod(2010, 2016),
        rented=YearPeriod(2016, 2020),
        monthly_rent=500.0,
        yearly_habitation_tax=800.0,
        yearly_land_tax=1_200.0,
    )
    asset.bind(make_context())
    return asset


class TestRealEstateValue:
    """Value, wealth tax and succession discounts."""

    @pytest.mark.parametrize("year", [2004, 2032])
    def test_not_owned(self, flat, year):
        assert flat.value(year) == 0.0

    def test_buying_price_without_estimate(self, flat):
        assert flat.value(2031) == 100_000.0

    def test_estimate_wins_over_buying_price(self, flat):
        flat.estimated_value = 130_000.0
        assert flat.value(2020) == 130_000.0

    @pytest.mark.parametrize(
        "year, ifi, inheritance",
        [(2008, 100_000, 100_000), (2010, 70_000, 80_000), (2016, 80_000, 100_000)],
    )
    def test_discounts(self, flat, year, ifi, inheritance):
        assert flat.ifi_value(year) == pytest.approx(ifi)
        assert flat.inheritance_value(year) == pytest.approx(inheritance)

    def test_owned_value_for_wealth_tax(self, flat):
        assert flat.owned_value("Alice", 2010, EvaluationMethod.IFI) == pytest.approx(35_000)
        assert flat.owned_value("Alice", 2010, EvaluationMethod.LEGAL_SUCCESSION) == pytest.approx(
            40_000
        )
        assert flat.owned_value("Alice", 2010, EvaluationMethod.LIFE_INSURANCE_SUCCESSION) == 0.0


class TestRealEstateRevenues:
    """Rents and local taxes."""

    def test_rent_while_rented(self, flat):
        rent = flat.yearly_rent(2017)

        assert rent.revenue == pytest.approx(6_000.0)
        assert rent.taxable_irpp == pytest.approx(6_000.0)
        assert rent.social_taxes == pytest.approx(1_032.0)

    def test_no_rent_when_inhabited(self, flat):
        assert flat.yearly_rent(2012).revenue == 0.0

    def test_local_taxes(self, flat):
        assert flat.yearly_local_taxes(2012) == pytest.approx(2_000.0)
        assert flat.yearly_local_taxes(2017) == pytest.approx(1_200.0)
        assert flat.yearly_local_taxes(2040) == 0.0

    def test_profitability(self, flat):
        assert flat.profitability(2017) == pytest.approx(0.06)


class TestRealEstateSale:
    """Capital gain taxation in the selling year."""

    def test_sale_after_twenty_six_years(self, flat):
        sale = flat.liquidated_value(2031)

        assert sale.revenue == pytest.approx(150_000.0)
        assert sale.capital_gain == pytest.approx(50_000.0)
        assert sale.irpp == 0.0
        assert sale.social_taxes == pytest.approx(2_631.6)
        assert flat.selling_price_after_taxes == pytest.approx(150_000.0 - 2_631.6)

    def test_no_sale_outside_selling_year(self, flat):
        assert flat.liquidated_value(2030) == NO_LIQUIDATION


class Household:
    def fiscal_household_sum(self, year, member_value):
        return member_value("Alice")


class TestAssetsRealEstateValue:
    """Real estate total of the assets container."""

    def test_by_method(self, flat):
        assets = Assets(real_estates=[flat])

        assert assets.real_estate_value(2010, EvaluationMethod.IFI, Household()) == pytest.approx(35_000)
        assert assets.real_estate_value(2010, EvaluationMethod.PATRIMOINE) == 100_000.0
        assert assets.real_estate_value(2010, EvaluationMethod.LIFE_INSURANCE_SUCCESSION) == 0.0

    def test_for_each_ownable(self, flat):
        names = []
        Assets(real_estates=[flat]).for_each_ownable(lambda item: names.append(item.name))
        assert names == ["Appartement"]
