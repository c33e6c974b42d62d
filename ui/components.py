"""Shared UI components: risk card, policy strip, signal table, list cards, status banner."""

import pandas as pd
import streamlit as st

# Color scheme
COLOR_GREEN = "#27ae60"
COLOR_YELLOW = "#f39c12"
COLOR_RED = "#e74c3c"
COLOR_BLUE = "#3498db"

RISK_LEVEL_CONFIG = {
    "low": {"color": COLOR_GREEN, "icon": "🟢", "label": "LOW RISK", "bg": "#eafaf1"},
    "medium": {"color": COLOR_YELLOW, "icon": "🟡", "label": "MEDIUM RISK", "bg": "#fef9e7"},
    "high": {"color": COLOR_RED, "icon": "🔴", "label": "HIGH RISK", "bg": "#fbeaea"},
}


def inject_custom_css():
    st.markdown("""
    <style>
    .policy-strip {
        border: 1px solid #ddd; border-radius: 8px; padding: 12px 18px;
        margin-bottom: 12px; background: #f8f9fa;
    }
    .risk-card {
        border-radius: 10px; padding: 16px 20px; margin: 10px 0;
        border-left: 5px solid; color: #1a1a1a;
    }
    .cap-hint { font-size: 0.9em; margin-top: 4px; }
    div[data-testid="stExpander"] details summary p { font-weight: 600; }
    </style>
    """, unsafe_allow_html=True)


def render_risk_card(result: dict):
    level = str(result.get("risk_level", "")).lower()
    cfg = RISK_LEVEL_CONFIG.get(level, {"color": COLOR_BLUE, "icon": "⚪", "label": level.upper() or "UNKNOWN", "bg": "#f0f4f8"})

    score = result.get("risk_score")
    score_html = ""
    if isinstance(score, (int, float)):
        filled = max(0, min(10, int(score) // 10))
        bar = "█" * filled + "░" * (10 - filled)
        score_html = f"<div style='font-size:1.1em;margin:8px 0;'>Risk Score: <strong>{score:g}</strong> &nbsp; <code>{bar}</code></div>"

    confidence = result.get("confidence")
    confidence_html = ""
    if isinstance(confidence, (int, float)):
        confidence_html = f"<div>Confidence: {round(confidence * 100)}%</div>"

    model = (result.get("meta") or {}).get("model")
    model_html = f"<div style='font-size:0.8em;opacity:0.7;margin-top:6px;'>Model: {model}</div>" if model else ""

    st.markdown(f"""
    <div class="risk-card" style="border-left-color:{cfg['color']};background:{cfg['bg']};">
        <div style="font-size:1.2em;font-weight:700;">{cfg['icon']} {cfg['label']}</div>
        {score_html}
        {confidence_html}
        {model_html}
    </div>
    """, unsafe_allow_html=True)


def render_policy_strip(policy: dict):
    if not policy:
        return
    pct = policy.get("refund_percent")
    pct_str = f"{pct:.2f}%" if isinstance(pct, (int, float)) else "—"
    if policy.get("hard_cap_exceeded"):
        status = f'<span style="color:{COLOR_RED};font-weight:600;">POLICY VIOLATION: above {policy.get("max_cap_percent"):g}% max cap</span>'
    elif policy.get("soft_cap_exceeded"):
        status = f'<span style="color:{COLOR_YELLOW};font-weight:600;">Above {policy.get("encouraged_cap_percent"):g}% encouraged cap: escalate</span>'
    elif pct is None:
        status = "Refund percent unknown"
    else:
        status = f'<span style="color:{COLOR_GREEN};font-weight:600;">Within cap</span>'

    st.markdown(f"""
    <div class="policy-strip">
        <strong>Refund policy</strong>
        &nbsp;|&nbsp; Refund: {pct_str}
        &nbsp;|&nbsp; Encouraged cap: {policy.get('encouraged_cap_percent', 15):g}%
        &nbsp;|&nbsp; Max cap: {policy.get('max_cap_percent', 20):g}%
        &nbsp;|&nbsp; {status}
    </div>
    """, unsafe_allow_html=True)


def render_signals(signals: list[dict]):
    st.markdown("#### Top Signals")
    if not signals:
        st.caption("No signals returned.")
        return
    df = pd.DataFrame([{
        "Signal": s.get("name", ""),
        "Weight": s.get("weight"),
        "Evidence": s.get("evidence_quote", ""),
    } for s in signals if isinstance(s, dict)])
    st.dataframe(df, use_container_width=True, hide_index=True)


def render_list_card(title: str, items: list, empty_text: str = "None"):
    st.markdown(f"#### {title}")
    if not items:
        st.caption(empty_text)
        return
    st.markdown("\n".join(f"- {item}" for item in items))


def render_status_banner(message: str | None, failed: bool = False):
    if not message:
        return
    if failed:
        st.error(message)
    else:
        st.info(message)
