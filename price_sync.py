"""
목표가 <-> 주거래 GP% 동기화 컨트롤러

입력란(원가/마진율)과 목표 판매가 입력란이 서로를 갱신하는 순환을 끊기 위해
마지막으로 수정된 쪽(EditSource)만 기준으로 삼는다.
- INPUT_FIELD: 입력값 -> 결과 계산, 목표가 입력란을 계산된 소비자가로 덮어씀
- TARGET_FIELD: 목표가 -> GP% 역산, 목표가 입력란은 사용자가 친 그대로 둠
"""

import logging
import math
from dataclasses import replace
from enum import Enum
from typing import Callable, Optional, Tuple

from pricing_engine import (
    InvalidRateError,
    PricingInput,
    PricingResult,
    calculate_gp_from_target,
    calculate_pricing,
    is_degenerate_target,
)

logger = logging.getLogger(__name__)

DEFAULT_INPUT = PricingInput(
    product_name="전략 핵심 상품",
    cost_price=50000,
    main_gp_rate=35.0,
    wholesale_margin=15,
    consumer_margin=20,
)
DEFAULT_TARGET_PRICE = "110000"

NUMERIC_FIELDS = ("cost_price", "main_gp_rate", "wholesale_margin", "consumer_margin")
TEXT_FIELDS = ("product_name",)


class EditSource(Enum):
    INPUT_FIELD = "input"
    TARGET_FIELD = "target"


class TargetIssue(Enum):
    TOO_LOW = "too_low"            # 원가 대비 너무 낮음, GP% 0으로 설정
    NOT_SOLVABLE = "not_solvable"  # 역산 결과로 계산 불가, GP% 유지


def _parse_number(raw) -> Optional[float]:
    """'110,000' / '110000원' 같은 입력도 숫자로 변환. 실패하면 None."""
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", "").replace("원", "")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def _price_text(value: float) -> str:
    # 124430.0 -> "124430"
    return str(int(value)) if float(value).is_integer() else repr(float(value))


class PriceSyncController:
    """
    세션 하나의 입력값, 계산 결과, 목표가 입력란 텍스트를 들고 있는 컨트롤러.
    pricing_input은 계산 가능한 값이어야 하며, 아니면 생성 시 InvalidRateError.
    """

    def __init__(self, pricing_input: Optional[PricingInput] = None,
                 target_price_text: Optional[str] = None,
                 on_ready: Optional[Callable[[PricingResult], None]] = None):
        self.input = replace(pricing_input or DEFAULT_INPUT)
        self.target_price_text = DEFAULT_TARGET_PRICE if target_price_text is None else target_price_text
        self.last_edit_source = EditSource.INPUT_FIELD
        self.target_issue: Optional[TargetIssue] = None
        self.result: Optional[PricingResult] = None
        self._on_ready = on_ready
        try:
            first = calculate_pricing(self.input)
        except InvalidRateError as e:
            raise InvalidRateError(f"초기 입력값으로 계산할 수 없습니다: {e}") from e
        self._commit(self.input, first)

    @property
    def target_unreachable(self) -> bool:
        return self.target_issue is not None

    # ------------------------------------------------------------------
    # 입력 이벤트
    # ------------------------------------------------------------------

    def on_field_edit(self, field_name: str, raw_value) -> bool:
        """원가/마진율/상품명 수정. 계산할 수 없는 값이면 무시하고 False."""
        if field_name in TEXT_FIELDS:
            value = "" if raw_value is None else str(raw_value)
        elif field_name in NUMERIC_FIELDS:
            value = _parse_number(raw_value)
            if value is None:
                logger.warning("숫자가 아닌 입력 무시: %s=%r", field_name, raw_value)
                return False
        else:
            raise KeyError(field_name)

        candidate = replace(self.input, **{field_name: value})
        try:
            result = calculate_pricing(candidate)
        except InvalidRateError as e:
            logger.warning("입력 거부: %s", e)
            return False

        self.last_edit_source = EditSource.INPUT_FIELD
        self.target_issue = None
        self._commit(candidate, result)
        return True

    def on_target_edit(self, raw_value) -> bool:
        """목표 판매가 수정. 입력 중인 빈 값/0 이하 값에는 반응하지 않는다."""
        self.target_price_text = "" if raw_value is None else str(raw_value)
        target = _parse_number(raw_value)
        if target is None or target <= 0:
            return False

        self.last_edit_source = EditSource.TARGET_FIELD
        cost = self.input.cost_price
        wm, cm = self.input.wholesale_margin, self.input.consumer_margin
        self.target_issue = TargetIssue.TOO_LOW if is_degenerate_target(cost, target, wm, cm) else None

        candidate = replace(self.input, main_gp_rate=round(calculate_gp_from_target(cost, target, wm, cm), 2))
        try:
            result = calculate_pricing(candidate)
        except InvalidRateError as e:
            # 원가 0원이면 GP 100%가 나와 계산 불가. 기존 GP% 유지
            logger.warning("목표가 %s 역산 불가 (원가 %s): %s", target, cost, e)
            self.target_issue = TargetIssue.NOT_SOLVABLE
            self.recompute()
            return True

        if self.target_issue is TargetIssue.TOO_LOW:
            logger.info("목표가 %s가 원가 대비 너무 낮아 GP%%를 0으로 설정", target)
        self._commit(candidate, result)
        return True

    # ------------------------------------------------------------------
    # 계산
    # ------------------------------------------------------------------

    def recompute(self) -> PricingResult:
        self._commit(self.input, calculate_pricing(self.input))
        return self.result

    def _commit(self, pricing_input: PricingInput, result: PricingResult) -> None:
        # 입력과 결과는 항상 함께 바꾼다
        first = self.result is None
        self.input = pricing_input
        self.result = result
        if self.last_edit_source is EditSource.INPUT_FIELD:
            self.target_price_text = _price_text(result.consumer_price)

        if first and self._on_ready is not None:
            try:
                self._on_ready(result)
            except Exception:
                logger.exception("초기화 콜백 오류")

    def snapshot(self) -> Tuple[PricingInput, PricingResult]:
        return replace(self.input), self.result
