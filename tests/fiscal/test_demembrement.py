"""
Tests for the usufruct / bare ownership valuation grid.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from patrimoine.core.errors import ConfigError, OutOfBoundsError, SlicesNotAscendingError
from patrimoine.fiscal.demembrement import DemembrementModel, DemembrementValues


@pytest.mark.parametrize(
    "age, usufruct, bare",
    [(0, 90, 10), (20, 90, 10), (21, 80, 20), (60, 50, 50), (61, 40, 60), (90, 20, 80), (95, 10, 90)],
)
def test_values_by_usufructuary_age(fiscal, age, usufruct, bare):
    values = fiscal.demembrement.demembrement(1_000.0, age)
    assert isinstance(values, DemembrementValues)
    assert values.usufruct_value == pytest.approx(usufruct * 10.0)
    assert values.bare_value == pytest.approx(bare * 10.0)


def test_negative_age_rejected(fiscal):
    with pytest.raises(OutOfBoundsError):
        fiscal.demembrement.demembrement(1_000.0, -1)


def test_slices_must_sum_to_hundred():
    model = DemembrementModel.from_records([{"floor": 0, "usufruct": 90, "bare": 20}])
    with pytest.raises(ConfigError):
        model.initialize()


def test_slices_must_ascend():
    model = DemembrementModel.from_records(
        [{"floor": 20, "usufruct": 80, "bare": 20}, {"floor": 10, "usufruct": 90, "bare": 10}]
    )
    with pytest.raises(SlicesNotAscendingError):
        model.initialize()


@given(
    value=st.floats(min_value=0, max_value=10_000_000, allow_nan=False),
    age=st.integers(min_value=0, max_value=120),
)
def test_split_preserves_value(fiscal, value, age):
    values = fiscal.demembrement.demembrement(value, age)
    assert values.usufruct_value + values.bare_value == pytest.approx(value)
