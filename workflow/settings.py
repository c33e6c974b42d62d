"""Agent UI configuration, read once when the Streamlit app starts."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_AUDIT_DB = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "risk_analyses.db")


@dataclass(frozen=True)
class ClientSettings:
    api_base: str = "http://127.0.0.1:5051"
    api_timeout_seconds: float = 60.0
    audit_db_path: str = DEFAULT_AUDIT_DB


def load_client_settings(env: dict | None = None) -> ClientSettings:
    if env is None:
        load_dotenv()
        env = os.environ
    return ClientSettings(
        api_base=(env.get("RISK_API_BASE") or "http://127.0.0.1:5051").rstrip("/"),
        api_timeout_seconds=float(env.get("RISK_API_TIMEOUT_SECONDS") or 60),
        audit_db_path=env.get("AUDIT_DB_PATH") or DEFAULT_AUDIT_DB,
    )
