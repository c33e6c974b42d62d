"""Refund Risk Predictor: agent UI (Streamlit)."""

import logging
import os
import sys

# Ensure project root is on the path for imports
sys.path.insert(0, os.path.dirname(__file__))

import streamlit as st

from workflow.analysis_workflow import AnalysisWorkflow
from workflow.api_client import AnalysisApiClient
from workflow.audit_store import SqliteAuditStore
from workflow.settings import load_client_settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ── Page config ──────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Refund & Chargeback Risk Predictor",
    page_icon="🔍",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── Configuration ────────────────────────────────────────────────────────────
settings = load_client_settings()


@st.cache_resource(show_spinner=False)
def get_api_client(api_base: str, timeout: float):
    return AnalysisApiClient(api_base, timeout=timeout)


@st.cache_resource(show_spinner=False)
def get_audit_store(db_path: str):
    store = SqliteAuditStore(db_path)
    store.ensure_table()
    return store


api_client = get_api_client(settings.api_base, settings.api_timeout_seconds)
audit_store = get_audit_store(settings.audit_db_path)

# ── Session state initialization ─────────────────────────────────────────────
if "workflow" not in st.session_state:
    st.session_state.workflow = AnalysisWorkflow()

from ui.analysis_dashboard import FORM_KEYS
for key, default in FORM_KEYS.items():
    if key not in st.session_state:
        st.session_state[key] = default

# ── Custom CSS ───────────────────────────────────────────────────────────────
from ui.components import inject_custom_css
inject_custom_css()

# ── Sidebar ──────────────────────────────────────────────────────────────────
from ui.sidebar import render_sidebar
render_sidebar(
    api_client,
    st.session_state.workflow.encouraged_cap_percent,
    st.session_state.workflow.max_cap_percent,
)

# ── Dashboard ────────────────────────────────────────────────────────────────
from ui.analysis_dashboard import render_analysis_dashboard
render_analysis_dashboard(api_client, audit_store)
