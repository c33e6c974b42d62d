"""Agent dashboard: case form, live refund percent, analysis result and audit status."""

import streamlit as st

from ui.components import (
    render_list_card, render_policy_strip, render_risk_card, render_signals,
    render_status_banner,
)
from workflow.analysis_workflow import (
    DEFAULT_ISSUE_TYPE, ISSUE_TYPES, AnalysisForm, AuditState, SubmissionState,
)

FORM_KEYS = {
    "raw_notes": "",
    "issue_type": DEFAULT_ISSUE_TYPE,
    "booking_total": "",
    "refunded_amount": "",
    "agent_email": "",
}


def _workflow():
    return st.session_state.workflow


def _clear_form():
    if _workflow().clear():
        for key, default in FORM_KEYS.items():
            st.session_state[key] = default


def render_analysis_dashboard(api_client, audit_store):
    st.markdown("## Refund & Chargeback Risk Predictor")
    st.caption(
        "Notes-only analysis + refund cap guardrail + audit log"
    )

    workflow = _workflow()
    # Widget values from the previous interaction are already in session_state.
    workflow.form = AnalysisForm(**{key: st.session_state[key] for key in FORM_KEYS})

    col1, col2, col3 = st.columns(3)
    with col1:
        st.selectbox("Issue Type", ISSUE_TYPES, key="issue_type")
    with col2:
        st.text_input("Booking Total ($)", key="booking_total", placeholder="e.g., 560.00")
    with col3:
        st.text_input("Refunded Amount ($)", key="refunded_amount", placeholder="e.g., 85.06")

    pct = workflow.refund_percent
    hint = workflow.cap_hint
    with col3:
        st.markdown(
            f"<div class='cap-hint'>Refund %: {'—' if pct is None else f'{pct:.2f}%'}"
            f"{' &nbsp; ' + hint.message if hint else ''}</div>",
            unsafe_allow_html=True,
        )

    st.text_input("Agent Email (optional)", key="agent_email", placeholder="e.g., agent@company.com")
    st.text_area("Agent Notes / System Notes", key="raw_notes", height=220, placeholder="Paste notes here...")

    b1, b2, _ = st.columns([1, 1, 4])
    with b1:
        analyze_clicked = st.button("Analyze Notes", type="primary", disabled=not workflow.can_submit,
                                    use_container_width=True, key="analyze_btn")
    with b2:
        st.button("Clear", on_click=_clear_form, disabled=workflow.state == SubmissionState.SUBMITTING,
                  use_container_width=True, key="clear_btn")

    if analyze_clicked:
        with st.spinner("Analyzing..."):
            workflow.submit(api_client)

    if workflow.state == SubmissionState.ERROR_DISPLAYED:
        render_status_banner(f"❌ {workflow.error}", failed=True)

    render_status_banner(workflow.audit_message, failed=workflow.audit_state == AuditState.FAILED)

    if workflow.state == SubmissionState.DISPLAYING and workflow.result is not None:
        _render_result(workflow.result)

    # The audit write runs only after the result above has been rendered.
    if workflow.audit_state == AuditState.PENDING:
        with st.spinner("Saving to audit log..."):
            workflow.persist(audit_store)
        st.rerun()


def _render_result(result: dict):
    st.markdown("---")
    render_policy_strip(result.get("policy", {}))

    left, right = st.columns([1, 2])
    with left:
        render_risk_card(result)
    with right:
        render_signals(result.get("signals", []))
        render_list_card("Warnings", result.get("warnings", []))
        render_list_card("Recommended Script", result.get("recommended_script", []))
        render_list_card("Next Steps", result.get("next_steps", []))

    missing = result.get("missing_info", [])
    if missing:
        st.warning(f"**Missing info:** {', '.join(str(m) for m in missing)}")
