"""
Tests for the income tax (IRPP) with the family quotient cap.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from patrimoine.core.errors import OutOfBoundsError
from patrimoine.family.work_income import SalaryIncome, TurnoverIncome
from patrimoine.fiscal.income_taxes import IncomeTaxesModel, Irpp


class TestFamilyQuotient:
    """Number of quotient parts of a household."""

    @pytest.mark.parametrize(
        "adults, children, expected",
        [(1, 0, 1.0), (2, 0, 2.0), (2, 1, 2.5), (2, 2, 3.0), (2, 3, 3.5), (1, 4, 3.0)],
    )
    def test_parts(self, adults, children, expected):
        assert IncomeTaxesModel.family_quotient(adults, children) == expected

    @pytest.mark.parametrize("adults, children", [(-1, 0), (1, -2)])
    def test_negative_counts_rejected(self, adults, children):
        with pytest.raises(OutOfBoundsError):
            IncomeTaxesModel.family_quotient(adults, children)


class TestIrpp:
    """IRPP amounts against the 2021 grid."""

    def test_single_adult(self, fiscal):
        """A single adult in the 11% slice."""
        result = fiscal.income_taxes.irpp(20_000, 1, 0)

        assert result.amount == pytest.approx(1_090.76)
        assert result.family_quotient == 1.0
        assert result.marginal_rate == pytest.approx(0.11)
        assert result.average_rate == pytest.approx(1_090.76 / 20_000)

    def test_children_gain_is_capped(self, fiscal):
        # uncapped gain 5994.14 exceeds 2 half parts * 1512
        result = fiscal.income_taxes.irpp(100_000, 2, 2)

        assert result.amount == pytest.approx(14_987.72)
        assert result.family_quotient == 3.0
        assert result.marginal_rate == pytest.approx(0.30)

    def test_three_children(self, fiscal):
        # 75 000 per part without children, 42 857 per part with 3.5 parts
        result = fiscal.income_taxes.irpp(150_000, 2, 3)

        assert result.family_quotient == 3.5
        assert result.amount == pytest.approx(33_338.2 - 3 * 1_512)
        assert result.amount == pytest.approx(28_802.2)

    def test_children_gain_below_cap(self, fiscal):
        result = fiscal.income_taxes.irpp(40_000, 2, 1)

        assert result.amount == pytest.approx(1_626.9)
        assert result.family_quotient == 2.5

    def test_no_adult_pays_nothing(self, fiscal):
        assert fiscal.income_taxes.irpp(50_000, 0, 2) == Irpp(0.0, 0.0, 0.0, 0.0)

    def test_income_below_first_taxed_slice(self, fiscal):
        result = fiscal.income_taxes.irpp(9_000, 1, 0)
        assert result.amount == 0.0
        assert result.marginal_rate == 0.0

    @given(income=st.floats(min_value=0, max_value=500_000, allow_nan=False))
    def test_children_never_increase_tax(self, fiscal, income):
        without = fiscal.income_taxes.irpp(income, 2, 0).amount
        with_children = fiscal.income_taxes.irpp(income, 2, 2).amount
        assert with_children <= without + 1e-6
        # the cap bounds the benefit of the two half parts
        assert without - with_children <= 2 * 1_512 + 1e-6

    def test_sliced_irpp_sums_to_uncapped_tax(self, fiscal):
        slices = fiscal.income_taxes.sliced_irpp(40_000, 1, 0)

        assert len(slices) == 5
        assert sum(s.irpp_without_children for s in slices) == pytest.approx(
            fiscal.income_taxes.irpp(40_000, 1, 0).amount
        )


class TestTaxableIncome:
    """Flat professional rebates on salaries and turnover."""

    @pytest.mark.parametrize(
        "taxable, expected",
        [(50_000, 45_000), (2_000, 1_559), (200_000, 187_373)],
    )
    def test_salary_rebate_is_clamped(self, fiscal, taxable, expected):
        income = SalaryIncome(brut_salary=taxable * 1.2, taxable_salary=taxable, net_salary=taxable)
        assert fiscal.income_taxes.taxable_income(income) == pytest.approx(expected)

    def test_turnover_rebate(self, fiscal):
        assert fiscal.income_taxes.taxable_income(TurnoverIncome(bnc=80_000)) == pytest.approx(52_800)

    def test_small_turnover_rebate_floor(self, fiscal):
        assert fiscal.income_taxes.taxable_income(TurnoverIncome(bnc=200)) == 0.0

    def test_unknown_income_type(self, fiscal):
        with pytest.raises(TypeError):
            fiscal.income_taxes.taxable_income(1_000)
