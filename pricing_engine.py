import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext

# ----------------------------------------------------------------------
# 0. 기준값
# ----------------------------------------------------------------------

VAT_RATE = 0.10            # 부가세 (10%)
VAT_MULTIPLIER = 1 + VAT_RATE
ROUNDING_UNIT = 10         # 10원 단위 반올림

# 주거래 GP% 권장 운용 범위 (슬라이더 범위)
GP_RATE_MIN = -10.0
GP_RATE_MAX = 80.0

RATE_FIELDS = ("main_gp_rate", "wholesale_margin", "consumer_margin")


class InvalidRateError(ValueError):
    """마진율이 100% 이상이거나 원가가 음수인 등 계산할 수 없는 입력."""


@dataclass
class PricingInput:
    """계산기 입력값 (원가는 VAT 별도)"""
    product_name: str
    cost_price: float
    main_gp_rate: float       # 주거래 GP 마진율 (%)
    wholesale_margin: float   # 도매 마진율 (%)
    consumer_margin: float    # 소비자 마진율 (%)


@dataclass(frozen=True)
class PricingResult:
    """계산 결과. 입력이 바뀌면 통째로 다시 계산한다."""
    main_supply_net: float
    main_supply_vat_incl: float
    wholesale_price: float
    consumer_price: float
    direct_supply_net: float
    direct_supply_vat_incl: float
    total_margin: float


# ----------------------------------------------------------------------
# 1. 반올림 / 검증
# ----------------------------------------------------------------------

def round_to_unit(value: float, unit: float = ROUNDING_UNIT) -> float:
    """unit 단위 반올림 (0.5는 0에서 먼 쪽으로). 내장 round()는 오사오입이라 쓰지 않는다."""
    with localcontext() as ctx:
        # float 최대값(309자리)까지 정수 자리를 잃지 않도록
        ctx.prec = 400
        quantum = Decimal(unit)
        steps = (Decimal(value) / quantum).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return float(steps * quantum)


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise InvalidRateError(f"계산 범위를 벗어난 금액입니다: {value}")
    return value


def _markup(base: float, rate: float) -> float:
    return _finite(base / (1 - rate / 100))


def check_input(pricing_input: PricingInput) -> None:
    if not math.isfinite(pricing_input.cost_price) or pricing_input.cost_price < 0:
        raise InvalidRateError(f"원가는 0 이상이어야 합니다: {pricing_input.cost_price}")
    for name in RATE_FIELDS:
        rate = getattr(pricing_input, name)
        if not math.isfinite(rate) or rate >= 100:
            raise InvalidRateError(f"{name}는 100% 미만이어야 합니다: {rate}")
    if pricing_input.main_gp_rate < GP_RATE_MIN:
        # 역산 하한과 같은 범위를 쓴다
        raise InvalidRateError(f"main_gp_rate는 {GP_RATE_MIN}% 이상이어야 합니다: {pricing_input.main_gp_rate}")


def clamp_gp_rate(rate: float) -> float:
    return max(GP_RATE_MIN, min(GP_RATE_MAX, rate))


# ----------------------------------------------------------------------
# 2. 정방향 계산 (원가 -> 소비자가)
# ----------------------------------------------------------------------

def calculate_pricing(pricing_input: PricingInput) -> PricingResult:
    """
    원가와 마진율로 공급가 체인을 계산한다.
    - 주거래공급가(Net) = 원가 / (1 - GP%), 10원 단위 반올림
    - 도매가 = 주거래공급가(VAT 포함) / (1 - 도매 마진%)
    - 소비자가 = 도매가 / (1 - 소비자 마진%), 10원 단위 반올림
    - 직거래공급가(Net) = 도매가 / 1.1, 10원 단위 반올림
    VAT 포함 금액은 항상 반올림된 Net 금액의 1.1배 (정산 기준).
    """
    check_input(pricing_input)

    main_supply_net = round_to_unit(_markup(pricing_input.cost_price, pricing_input.main_gp_rate))
    main_supply_vat_incl = _finite(main_supply_net * VAT_MULTIPLIER)

    # 도매가는 반올림하지 않는다 (기준가)
    wholesale_price = _markup(main_supply_vat_incl, pricing_input.wholesale_margin)
    consumer_price = round_to_unit(_markup(wholesale_price, pricing_input.consumer_margin))

    direct_supply_net = round_to_unit(wholesale_price / VAT_MULTIPLIER)
    direct_supply_vat_incl = _finite(direct_supply_net * VAT_MULTIPLIER)

    return PricingResult(
        main_supply_net=main_supply_net,
        main_supply_vat_incl=main_supply_vat_incl,
        wholesale_price=wholesale_price,
        consumer_price=consumer_price,
        direct_supply_net=direct_supply_net,
        direct_supply_vat_incl=direct_supply_vat_incl,
        total_margin=consumer_price - pricing_input.cost_price,
    )


# ----------------------------------------------------------------------
# 3. 역산 (목표 소비자가 -> 주거래 GP%)
# ----------------------------------------------------------------------

def implied_main_supply_net(target_price: float, wholesale_margin: float, consumer_margin: float) -> float:
    # 역산 경로에서는 반올림하지 않는다
    wholesale = target_price * (1 - consumer_margin / 100)
    main_supply_vat_incl = wholesale * (1 - wholesale_margin / 100)
    return main_supply_vat_incl / VAT_MULTIPLIER


def _solve_gp(cost_price, target_price, wholesale_margin, consumer_margin):
    """(GP%, 역산 불가 여부)"""
    net = implied_main_supply_net(target_price, wholesale_margin, consumer_margin)
    if net <= 0:
        return 0.0, True
    rate = (1 - cost_price / net) * 100
    if rate < GP_RATE_MIN:
        # 하한 GP%로도 목표가보다 비싸지면 원가 대비 너무 낮은 목표가.
        # 아니면 10원 반올림 오차라서 하한으로 맞춘다
        try:
            floor_price = calculate_pricing(
                PricingInput("", cost_price, GP_RATE_MIN, wholesale_margin, consumer_margin)
            ).consumer_price
        except InvalidRateError:
            return 0.0, True
        if target_price < floor_price:
            return 0.0, True
        return GP_RATE_MIN, False
    return rate, False


def calculate_gp_from_target(cost_price: float, target_price: float,
                             wholesale_margin: float, consumer_margin: float) -> float:
    """
    목표 소비자가를 맞추기 위한 주거래 GP%를 역산한다.
    역산된 Net 공급가가 0 이하이거나, 운용 하한(-10%) GP%로도 목표가보다
    비싸지는 경우 0을 돌려준다.
    정방향 계산은 중간에 10원 단위로 반올림하므로 왕복 결과는 근사치다.
    """
    rate, _ = _solve_gp(cost_price, target_price, wholesale_margin, consumer_margin)
    return rate


def is_degenerate_target(cost_price: float, target_price: float,
                         wholesale_margin: float, consumer_margin: float) -> bool:
    _, degenerate = _solve_gp(cost_price, target_price, wholesale_margin, consumer_margin)
    return degenerate
