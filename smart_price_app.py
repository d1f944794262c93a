import logging

import streamlit as st

from price_report import ROUNDING_NOTICE, breakdown_frame, format_won, profit_rate
from price_sync import PriceSyncController, TargetIssue
from pricing_engine import GP_RATE_MAX, GP_RATE_MIN, clamp_gp_rate

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)

TARGET_NOTICES = {
    TargetIssue.TOO_LOW: "목표 판매가가 원가 대비 너무 낮아 역산할 수 없습니다. GP%를 0으로 설정했습니다.",
    TargetIssue.NOT_SOLVABLE: "이 목표 판매가로는 GP%를 계산할 수 없습니다 (원가 0원 등). 기존 GP%를 유지합니다.",
}


def _on_ready(result):
    logger.info("계산 엔진 준비 완료 (소비자가 %s)", format_won(result.consumer_price))


# ----------------------------------------------------------------------
# 1. 세션 상태 <-> 위젯 동기화
# ----------------------------------------------------------------------

def _push_to_widgets(controller):
    """컨트롤러 값을 위젯 key에 다시 써 넣는다 (콜백 안에서만 호출)"""
    state = st.session_state
    state["product_name"] = controller.input.product_name
    state["cost_price"] = float(controller.input.cost_price)
    state["gp_number"] = float(controller.input.main_gp_rate)
    state["gp_slider"] = clamp_gp_rate(float(controller.input.main_gp_rate))
    state["wholesale_margin"] = float(controller.input.wholesale_margin)
    state["consumer_margin"] = float(controller.input.consumer_margin)
    state["target_price"] = controller.target_price_text


def _on_field_change(field, widget_key=None):
    controller = st.session_state["controller"]
    if not controller.on_field_edit(field, st.session_state[widget_key or field]):
        st.session_state["notice"] = "계산할 수 없는 값입니다. 마진율은 100% 미만, 주거래 GP%는 -10% 이상, 원가는 0 이상이어야 합니다."
    _push_to_widgets(controller)


def _on_target_change():
    controller = st.session_state["controller"]
    controller.on_target_edit(st.session_state["target_price"])
    if controller.target_issue is not None:
        st.session_state["notice"] = TARGET_NOTICES[controller.target_issue]
    _push_to_widgets(controller)


def _on_refresh():
    controller = st.session_state["controller"]
    controller.recompute()
    _push_to_widgets(controller)


if "controller" not in st.session_state:
    st.session_state["controller"] = PriceSyncController(on_ready=_on_ready)
    _push_to_widgets(st.session_state["controller"])

controller = st.session_state["controller"]

# ----------------------------------------------------------------------
# 2. Streamlit UI
# ----------------------------------------------------------------------

st.set_page_config(page_title="Smart-Price Pro", page_icon="🧮", layout="wide")

st.title("🧮 Smart-Price Pro 공급가 계산기")

notice = st.session_state.pop("notice", None)
if notice:
    st.warning(notice)

col1, col2 = st.columns([5, 7])

with col1:
    st.subheader("⚙️ 계산기 설정")
    st.text_input("상품명", key="product_name", on_change=_on_field_change, args=("product_name",))

    with st.container(border=True):
        st.text_input("🎯 시장 타겟 판매가 (역산, KRW)", key="target_price", on_change=_on_target_change)
        st.caption("* 입력 시 주거래 GP%가 실시간 조정됩니다.")

    st.number_input("매입 원가 (Net, ₩)", min_value=0.0, step=1000.0, format="%.0f",
                    key="cost_price", on_change=_on_field_change, args=("cost_price",))

    st.number_input("주거래 GP 마진율 (%)", step=0.1, format="%.2f",
                    key="gp_number", on_change=_on_field_change, args=("main_gp_rate", "gp_number"))
    st.slider("GP 마진율 조정", min_value=GP_RATE_MIN, max_value=GP_RATE_MAX, step=0.1,
              key="gp_slider", on_change=_on_field_change, args=("main_gp_rate", "gp_slider"))

    with st.expander("채널 마진 설정"):
        st.number_input("도매 마진율 (%)", step=1.0, key="wholesale_margin",
                        on_change=_on_field_change, args=("wholesale_margin",))
        st.number_input("소비자 마진율 (%)", step=1.0, key="consumer_margin",
                        on_change=_on_field_change, args=("consumer_margin",))

    st.button("🔄 데이터 수동 재계산", on_click=_on_refresh, use_container_width=True)

with col2:
    result = controller.result
    c1, c2 = st.columns(2)
    with c1:
        st.metric("최종 소비자가", format_won(result.consumer_price))
        st.caption("VAT 10% 및 끝전 처리 포함")
    with c2:
        st.metric("예상 총 마진액", format_won(result.total_margin), delta=f"수익률 {profit_rate(result):.1f}%")

    st.subheader("➡️ 공급가 산출 내역")
    st.table(breakdown_frame(controller.input, result).set_index("구분 항목"))
    st.info(ROUNDING_NOTICE)

st.markdown("---")
st.write(f"상품: {controller.input.product_name}")
