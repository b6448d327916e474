"""
Tests for the real-estate wealth tax (IFI), inheritance taxes and the
spouse's fiscal options.
"""

import math

import pytest

from patrimoine.fiscal.inheritance import FiscalOption, LifeInsuranceInheritanceModel, TaxedAmount


class TestIfi:
    """IFI threshold, grid and smoothing discount."""

    @pytest.mark.parametrize("taxable", [0, 1_000_000, 1_300_000])
    def test_nothing_due_up_to_threshold(self, fiscal, taxable):
        result = fiscal.isf.isf(taxable)
        assert result.amount == 0.0
        assert result.marginal_rate == 0.0

    def test_smoothing_discount_applies_just_above_threshold(self, fiscal):
        result = fiscal.isf.isf(1_350_000)

        assert result.amount == pytest.approx(2_225.0)
        assert result.taxable == 1_350_000

    def test_smoothing_discount_vanishes(self, fiscal):
        result = fiscal.isf.isf(2_000_000)

        assert result.amount == pytest.approx(7_400.0)
        assert result.marginal_rate == pytest.approx(0.007)

    def test_smoothing_upper_bound_is_derived(self, fiscal):
        assert fiscal.isf.seuil2 == pytest.approx(1_400_000.0)


class TestInheritanceDonation:
    """Direct line inheritance and donation to the spouse."""

    def test_share_within_allowance(self, fiscal):
        assert fiscal.inheritance_donation.heritage_of_child(50_000) == TaxedAmount(50_000, 0.0)

    def test_share_at_allowance_with_rounding_residue(self, fiscal):
        share = math.nextafter(100_000.0, math.inf)
        assert fiscal.inheritance_donation.heritage_of_child(share).tax == 0.0

    def test_share_in_first_slice(self, fiscal):
        taxed = fiscal.inheritance_donation.heritage_of_child(108_071)

        assert taxed.tax == pytest.approx(403.55)
        assert taxed.net_amount == pytest.approx(108_071 - 403.55)

    def test_share_across_slices(self, fiscal):
        # 200000 - 100000 allowance falls in the 20% slice
        taxed = fiscal.inheritance_donation.heritage_of_child(200_000)
        expected = 100_000 * 0.20 - (8_072 * 0.05 + 12_109 * 0.05 + 15_932 * 0.05)

        assert taxed.tax == pytest.approx(expected)
        assert taxed.net_amount + taxed.tax == pytest.approx(200_000)

    def test_donation_to_spouse_uses_own_allowance(self, fiscal):
        taxed = fiscal.inheritance_donation.donation_to_spouse(80_724)
        assert taxed.tax == 0.0

    @pytest.mark.parametrize("nb_children, expected", [(0, 0.0), (1, 1.0), (4, 0.25)])
    def test_child_share(self, fiscal, nb_children, expected):
        assert fiscal.inheritance_donation.child_share(nb_children) == expected


class TestLifeInsuranceInheritance:
    """Life insurance capital received at death."""

    def test_below_allowance(self, fiscal):
        assert fiscal.life_insurance_inheritance.heritage_of_child(100_000).tax == 0.0

    def test_above_allowance(self, fiscal):
        taxed = fiscal.life_insurance_inheritance.heritage_of_child(200_000)

        assert taxed.tax == pytest.approx(9_500.0)
        assert taxed.net_amount == pytest.approx(190_500.0)

    def test_spouse_is_exempt(self):
        assert LifeInsuranceInheritanceModel.heritage_to_conjoint(1_000_000) == TaxedAmount(
            1_000_000, 0.0
        )


class TestFiscalOption:
    """Value fractions and ownership shares per spouse option."""

    def test_full_usufruct_values(self, fiscal):
        shared = FiscalOption.FULL_USUFRUCT.shared_values(2, 60, fiscal.demembrement)

        assert shared.for_spouse == pytest.approx(0.5)
        assert shared.for_child == pytest.approx(0.25)

    def test_quotite_disponible_values(self, fiscal):
        shared = FiscalOption.QUOTITE_DISPONIBLE.shared_values(2, 60, fiscal.demembrement)

        assert shared.for_spouse == pytest.approx(1 / 3)
        assert shared.for_child == pytest.approx(1 / 3)

    def test_usufruct_plus_bare_values(self, fiscal):
        shared = FiscalOption.USUFRUCT_PLUS_BARE.shared_values(2, 60, fiscal.demembrement)

        assert shared.for_spouse == pytest.approx(0.625)
        assert shared.for_child == pytest.approx(0.1875)

    @pytest.mark.parametrize("option", list(FiscalOption))
    def test_spouse_alone_gets_everything(self, fiscal, option):
        shared = option.shared_values(0, 75, fiscal.demembrement)
        assert shared.for_spouse == 1.0
        assert shared.for_child == 0.0

    @pytest.mark.parametrize("option", list(FiscalOption))
    def test_values_sum_to_one(self, fiscal, option):
        shared = option.shared_values(3, 72, fiscal.demembrement)
        assert shared.for_spouse + 3 * shared.for_child == pytest.approx(1.0)

    def test_shares_of_usufruct_plus_bare(self):
        sharing = FiscalOption.USUFRUCT_PLUS_BARE.shares(3)

        assert sharing.for_spouse.usufruct == 1.0
        assert sharing.for_spouse.bare == 0.25
        assert sharing.for_child.bare == pytest.approx(0.25)
        assert sharing.for_child.usufruct == 0.0
