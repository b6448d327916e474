"""
Tests for SCPI shares and the SCI holding them.
"""

import pytest

from patrimoine.assets.real_estate import NO_LIQUIDATION
from patrimoine.assets.sci import SCI
from patrimoine.assets.scpi import SCPI
from patrimoine.ownership.ownership import Ownership


@pytest.fixture
def scpi(make_context):
    """SCPI bought in 2019, revalued at the inflation rate, sold in 2022."""
    shares = SCPI(
        name="SCPI rendement",
        ownership=Ownership.full(("Alice", 100.0)),
        buying_year=2019,
        buying_price=1_000.0,
        interest_rate=3.56,
        revaluation_rate=10.0,
        will_be_sold=True,
        selling_year=2022,
    )
    shares.bind(make_context(inflation=10.0))
    return shares


class TestScpi:
    """Valuation, dividends and sale of SCPI shares."""

    @pytest.mark.parametrize("year", [2019, 2020, 2022])
    def test_value_net_of_sale_commission(self, scpi, year):
        assert scpi.value(year) == pytest.approx(900.0)

    @pytest.mark.parametrize("year", [2018, 2023])
    def test_not_owned(self, scpi, year):
        assert scpi.value(year) == 0.0

    def test_revenue_net_of_inflation(self, scpi):
        revenue = scpi.yearly_revenue(2020)

        assert revenue.revenue == pytest.approx(-64.4)
        assert revenue.social_taxes == 0.0

    def test_positive_revenue_is_taxed(self, make_context):
        shares = SCPI(
            name="SCPI",
            ownership=Ownership.full(("Alice", 100.0)),
            buying_year=2020,
            buying_price=10_000.0,
            interest_rate=5.0,
        )
        shares.bind(make_context())
        revenue = shares.yearly_revenue(2021)

        assert revenue.revenue == pytest.approx(500.0)
        assert revenue.social_taxes == pytest.approx(86.0)
        assert revenue.taxable_irpp == pytest.approx(414.0)

    def test_sale_with_capital_loss(self, scpi):
        sale = scpi.liquidated_value(2022)

        assert sale.revenue == pytest.approx(900.0)
        assert sale.capital_gain == pytest.approx(-100.0)
        assert sale.social_taxes == 0.0
        assert sale.irpp == 0.0
        assert sale.net_revenue == pytest.approx(900.0)

    @pytest.mark.parametrize("year", [2020, 2021, 2023])
    def test_no_sale_outside_selling_year(self, scpi, year):
        assert scpi.liquidated_value(year) == NO_LIQUIDATION


class TestSci:
    """Company holding SCPI shares, taxed at the corporate rate."""

    def test_cash_flow_of_owners(self, make_context):
        owned = SCPI(
            name="SCPI A",
            ownership=Ownership.full(("Alice", 100.0)),
            buying_year=2020,
            buying_price=10_000.0,
            interest_rate=5.0,
        )
        other = SCPI(
            name="SCPI B",
            ownership=Ownership.full(("Carol", 100.0)),
            buying_year=2020,
            buying_price=10_000.0,
            interest_rate=5.0,
        )
        sci = SCI(name="SCI familiale", scpis=[owned, other])
        sci.bind(make_context())

        flow = sci.cash_flow(2021, ["Alice"])

        assert flow.dividends.names == ["SCPI A"]
        assert flow.dividends.total == pytest.approx(414.0)
        assert flow.corporate_tax == pytest.approx(414.0 * 0.15)
        assert flow.net_cash_flow == pytest.approx(414.0 * 0.85)
        assert sci.value(2021) == pytest.approx(18_000.0)
