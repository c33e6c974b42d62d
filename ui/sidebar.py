"""Sidebar: refund policy reminder and API status."""

import streamlit as st


def render_sidebar(api_client, encouraged_cap_percent: float, max_cap_percent: float):
    with st.sidebar:
        st.markdown(f"""
        <div style="background:#eef2ff;border-radius:10px;padding:14px;margin-bottom:16px;border:1px solid #c7d2fe;">
            <div style="font-size:1.1em;font-weight:700;">🔍 Refund Risk Predictor</div>
            <div style="font-size:0.9em;margin-top:6px;">
                Paste the case notes, enter the booking figures and run an analysis.
                Every completed analysis is written to the audit log.
            </div>
            <div style="font-size:0.85em;margin-top:8px;">
                🟢 At or under {encouraged_cap_percent:g}%: within policy<br>
                🟡 Over {encouraged_cap_percent:g}%: escalation required<br>
                🔴 Over {max_cap_percent:g}%: policy violation
            </div>
        </div>
        """, unsafe_allow_html=True)

        st.markdown("### 🩺 API Status")
        health = api_client.health()
        if health is None:
            st.error(f"Analysis API unreachable at {api_client.base_url}")
        elif not health.get("engine_configured", True):
            st.warning("API is up but no reasoning engine key is configured.")
        else:
            st.success(f"API online · model `{health.get('model', '?')}`")
