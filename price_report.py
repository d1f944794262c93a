import pandas as pd

from pricing_engine import PricingInput, PricingResult, round_to_unit

ROUNDING_NOTICE = (
    "본 시스템은 **10원 단위 반올림** 정책을 준수합니다. "
    "VAT는 공급가액의 1.1배로 자동 산정되며, 입점 및 직거래 채널별 마진 구조가 자동으로 시뮬레이션됩니다."
)

BREAKDOWN_COLUMNS = ["구분 항목", "공급가액 (Net)", "VAT 포함 (최종)"]


def format_won(value: float) -> str:
    # 원 단위 반올림 후 천 단위 콤마
    return f"{int(round_to_unit(value, 1)):,}원"


def format_rate(value: float) -> str:
    return f"{value:.2f}%"


def profit_rate(result: PricingResult) -> float:
    """소비자가 대비 총 마진 비율 (%)"""
    if not result.consumer_price:
        return 0.0
    return result.total_margin / result.consumer_price * 100


def breakdown_frame(pricing_input: PricingInput, result: PricingResult) -> pd.DataFrame:
    """공급가 산출 내역 표. 금액이 없는 칸은 '-'"""
    rows = [
        ("매입 원가", format_won(pricing_input.cost_price), "-"),
        ("주거래 공급가", format_won(result.main_supply_net), format_won(result.main_supply_vat_incl)),
        ("도매 공급가", "-", format_won(result.wholesale_price)),
        ("직거래 공급가 (D2C)", format_won(result.direct_supply_net), format_won(result.direct_supply_vat_incl)),
    ]
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)
