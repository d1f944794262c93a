"""Tests for pricing_engine.py"""

import pytest

from pricing_engine import (
    GP_RATE_MAX,
    GP_RATE_MIN,
    InvalidRateError,
    PricingInput,
    calculate_gp_from_target,
    calculate_pricing,
    clamp_gp_rate,
    implied_main_supply_net,
    is_degenerate_target,
    round_to_unit,
)


def _input(cost=50000, gp=35.0, wm=15, cm=20):
    return PricingInput("테스트 상품", cost, gp, wm, cm)


def test_round_to_unit_half_away_from_zero():
    assert round_to_unit(15) == 20
    assert round_to_unit(25) == 30
    assert round_to_unit(14.99) == 10
    assert round_to_unit(-15) == -20
    assert round_to_unit(76923.0769) == 76920


def test_round_to_unit_won():
    assert round_to_unit(1234.5, 1) == 1235
    assert round_to_unit(84612.00000000001, 1) == 84612


def test_default_scenario():
    result = calculate_pricing(_input())
    assert result.main_supply_net == 76920
    assert result.main_supply_vat_incl == pytest.approx(84612.0)
    assert result.wholesale_price == pytest.approx(84612 / 0.85)
    assert result.consumer_price == 124430
    assert result.direct_supply_net == 90490
    assert result.total_margin == 74430


def test_vat_is_applied_after_rounding():
    for cost, gp, wm, cm in [(50000, 35, 15, 20), (12345, 12.5, 7, 33), (999, -5, 0, 0), (0, 0, 0, 0)]:
        result = calculate_pricing(_input(cost, gp, wm, cm))
        assert result.main_supply_vat_incl == result.main_supply_net * 1.1
        assert result.direct_supply_vat_incl == result.direct_supply_net * 1.1
        assert result.main_supply_net % 10 == 0
        assert result.consumer_price % 10 == 0
        assert result.direct_supply_net % 10 == 0


def test_outputs_non_negative():
    for cost, gp, wm, cm in [(0, 0, 0, 0), (100, 99.9, 50, 90), (3000, 0, 0, 0), (77777, 60, 30, 45)]:
        result = calculate_pricing(_input(cost, gp, wm, cm))
        assert min(
            result.main_supply_net,
            result.main_supply_vat_incl,
            result.wholesale_price,
            result.consumer_price,
            result.direct_supply_net,
            result.direct_supply_vat_incl,
        ) >= 0


def test_idempotent():
    pricing_input = _input(43210, 22.2, 12, 18)
    assert calculate_pricing(pricing_input) == calculate_pricing(pricing_input)


@pytest.mark.parametrize("field", ["main_gp_rate", "wholesale_margin", "consumer_margin"])
def test_rate_of_100_rejected(field):
    pricing_input = _input()
    setattr(pricing_input, field, 100)
    with pytest.raises(InvalidRateError):
        calculate_pricing(pricing_input)


def test_negative_cost_rejected():
    with pytest.raises(InvalidRateError):
        calculate_pricing(_input(cost=-1))


def test_round_trip_within_half_point():
    result = calculate_pricing(_input(cost=55000))
    assert result.main_supply_net == 84620
    rate = calculate_gp_from_target(55000, result.consumer_price, 15, 20)
    assert abs(rate - 35.0) < 0.5


def test_target_far_below_cost_returns_zero():
    assert calculate_gp_from_target(100000, 1, 15, 20) == 0
    assert is_degenerate_target(100000, 1, 15, 20)


def test_non_positive_net_returns_zero():
    assert implied_main_supply_net(100000, 100, 20) == 0
    assert calculate_gp_from_target(50000, 100000, 100, 20) == 0
    assert calculate_gp_from_target(50000, 100000, 15, 120) == 0


def test_small_negative_rate_allowed():
    # 원가보다 약간 낮은 Net 공급가 -> 음수 GP% (운용 범위 안)
    net = implied_main_supply_net(100000, 15, 20)
    rate = calculate_gp_from_target(net * 1.05, 100000, 15, 20)
    assert rate == pytest.approx(-5.0)
    assert not is_degenerate_target(net * 1.05, 100000, 15, 20)


def test_clamp_gp_rate():
    assert clamp_gp_rate(95) == GP_RATE_MAX
    assert clamp_gp_rate(-50) == GP_RATE_MIN
    assert clamp_gp_rate(35.5) == 35.5


def test_gp_rate_below_floor_rejected():
    with pytest.raises(InvalidRateError):
        calculate_pricing(_input(gp=-20))
    calculate_pricing(_input(gp=GP_RATE_MIN))


@pytest.mark.parametrize("cost,gp,wm,cm", [
    (1e308, 99.0, 90, 90),
    (1e308, 50, 0, 0),
    (1e307, 99.99, 99.99, 99.99),
])
def test_overflowing_chain_rejected(cost, gp, wm, cm):
    with pytest.raises(InvalidRateError):
        calculate_pricing(_input(cost, gp, wm, cm))


def test_round_to_unit_large_values():
    assert round_to_unit(1e308) == 1e308
    assert round_to_unit(1e30) == 1e30


def test_target_at_floor_snaps_to_floor_rate():
    # 하한 GP%의 결과를 그대로 목표가로 넣으면 반올림 오차로 -10% 밑이 나온다
    result = calculate_pricing(_input(gp=GP_RATE_MIN))
    assert calculate_gp_from_target(50000, result.consumer_price, 15, 20) == GP_RATE_MIN
    assert not is_degenerate_target(50000, result.consumer_price, 15, 20)
    assert is_degenerate_target(50000, result.consumer_price - 10, 15, 20)
