import pytest

from engine.metrics import (
    SQFT_PER_ACRE,
    acres_to_sqft,
    calculate_scenario_derived,
    calculate_site_derived,
    units_for_density,
)


def test_site_derived_ten_acres_one_million():
    derived = calculate_site_derived(10, 1_000_000)
    assert derived.size_sf == 435_600
    assert derived.ask_price_per_sf == pytest.approx(2.2957, abs=1e-4)


def test_zero_acres_gives_zero_price_per_sf():
    derived = calculate_site_derived(0, 1_000_000)
    assert derived.size_sf == 0
    assert derived.ask_price_per_sf == 0


def test_acres_to_sqft():
    assert acres_to_sqft(1) == SQFT_PER_ACRE
    assert acres_to_sqft(2.5) == pytest.approx(108_900)


def test_scenario_derived():
    derived = calculate_scenario_derived(4, 100, 400_000)
    assert derived.density_units_per_acre == 25
    assert derived.land_price_per_door == 4000


@pytest.mark.parametrize("net_acres,units", [(0, 100), (4, 0), (0, 0)])
def test_scenario_derived_zero_divisors(net_acres, units):
    derived = calculate_scenario_derived(net_acres, units, 400_000)
    if net_acres == 0:
        assert derived.density_units_per_acre == 0
    if units == 0:
        assert derived.land_price_per_door == 0


def test_units_round_half_up():
    assert units_for_density(7.5, 25) == 188  # 187.5
    assert units_for_density(7.5, 11) == 83  # 82.5
    assert units_for_density(7.5, 15) == 113  # 112.5
    assert units_for_density(0.1, 1) == 0
