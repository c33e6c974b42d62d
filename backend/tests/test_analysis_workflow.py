"""Agent UI workflow: local refund percent, hints, submission and audit states."""

import json
import sqlite3

import httpx
import pytest

from engine.refund_policy import compute_refund_percent as server_refund_percent
from workflow.analysis_workflow import (
    AnalysisForm,
    AnalysisWorkflow,
    AuditState,
    SubmissionState,
    build_audit_record,
    cap_hint,
    compute_refund_percent,
    to_number,
)
from workflow.api_client import AnalysisApiClient
from workflow.audit_store import SqliteAuditStore
from workflow.errors import AnalysisRequestError, AuditWriteError

RESULT = {
    "risk_score": 55,
    "risk_level": "medium",
    "confidence": 0.6,
    "signals": [{"name": "billing_discrepancy", "evidence_quote": "charged twice", "weight": 0.3}],
    "warnings": [],
    "recommended_script": ["Thanks for your patience."],
    "next_steps": ["Verify the charge"],
    "missing_info": ["Card statement"],
    "policy": {
        "refund_percent": 15.189,
        "soft_cap_exceeded": True,
        "hard_cap_exceeded": False,
        "encouraged_cap_percent": 15,
        "max_cap_percent": 20,
    },
    "meta": {"model": "test-model"},
}


class FakeApi:
    def __init__(self, result=None, error=None):
        self.result = result or RESULT
        self.error = error
        self.payloads = []

    def analyze(self, payload):
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return self.result


class FakeStore:
    def __init__(self, error=None):
        self.error = error
        self.records = []

    def append(self, record):
        if self.error:
            raise self.error
        self.records.append(record)
        return len(self.records)


def _filled_workflow():
    wf = AnalysisWorkflow()
    wf.form = AnalysisForm(
        raw_notes="Customer says they were charged twice for the same hotel.",
        issue_type="Double Charge",
        booking_total="560",
        refunded_amount="85.06",
        agent_email="agent@company.com",
    )
    return wf


# ── Local refund percent and hints ───────────────────────────────────────────


@pytest.mark.parametrize(
    "total,refunded",
    [(560, 85.06), (100, 25), (None, 50), (0, 5), (-1, 5), (100, None), (3, 1)],
)
def test_local_formula_matches_server(total, refunded):
    assert compute_refund_percent(total, refunded) == server_refund_percent(total, refunded)


def test_to_number():
    assert to_number("560") == 560.0
    assert to_number(" 85.06 ") == 85.06
    assert to_number("") is None
    assert to_number("abc") is None
    assert to_number("inf") is None
    assert to_number(None) is None
    assert to_number(12) == 12.0


def test_blank_refund_amount_gives_no_percent():
    wf = AnalysisWorkflow()
    wf.form = AnalysisForm(booking_total="100", refunded_amount="")
    assert wf.refund_percent is None
    assert wf.cap_hint is None


def test_cap_hints():
    assert cap_hint(15.19).level == "escalate"
    assert cap_hint(15.0).level == "caution"
    assert cap_hint(12.0).level == "caution"
    assert cap_hint(11.99) is None
    assert cap_hint(None) is None
    assert cap_hint(9, encouraged_cap_percent=10, caution_band=1).level == "caution"


# ── Submission ───────────────────────────────────────────────────────────────


def test_cannot_submit_blank_notes():
    wf = AnalysisWorkflow()
    wf.form = AnalysisForm(raw_notes="   \n ")
    assert wf.can_submit is False
    api = FakeApi()
    assert wf.submit(api) is False
    assert api.payloads == []
    assert wf.state == SubmissionState.IDLE


def test_cannot_submit_while_submitting():
    wf = _filled_workflow()
    wf.state = SubmissionState.SUBMITTING
    assert wf.can_submit is False


def test_successful_submit_displays_and_queues_audit():
    wf = _filled_workflow()
    api = FakeApi()
    assert wf.submit(api) is True
    assert wf.state == SubmissionState.DISPLAYING
    assert wf.audit_state == AuditState.PENDING
    assert wf.result == RESULT
    assert api.payloads == [{
        "rawNotes": "Customer says they were charged twice for the same hotel.",
        "issueType": "Double Charge",
        "bookingTotal": 560.0,
        "refundedAmount": 85.06,
        "encouragedRefundCapPercent": 15,
        "maxRefundCapPercent": 20,
    }]


def test_failed_submit_shows_error_and_skips_audit():
    wf = _filled_workflow()
    assert wf.submit(FakeApi(error=AnalysisRequestError("No model text returned", status_code=400))) is False
    assert wf.state == SubmissionState.ERROR_DISPLAYED
    assert wf.error == "No model text returned"
    assert wf.audit_state == AuditState.NONE
    store = FakeStore()
    assert wf.persist(store) is False
    assert store.records == []


# ── Audit persistence ────────────────────────────────────────────────────────


def test_persist_only_after_display():
    wf = _filled_workflow()
    store = FakeStore()
    assert wf.persist(store) is False
    wf.submit(FakeApi())
    assert wf.persist(store) is True
    assert wf.audit_state == AuditState.SAVED
    assert wf.audit_record_id == 1
    assert wf.persist(store) is False
    assert len(store.records) == 1


def test_audit_failure_keeps_result():
    wf = _filled_workflow()
    wf.submit(FakeApi())
    assert wf.persist(FakeStore(error=AuditWriteError("Audit write failed: disk full"))) is False
    assert wf.audit_state == AuditState.FAILED
    assert "disk full" in wf.audit_message
    assert wf.state == SubmissionState.DISPLAYING
    assert wf.result == RESULT


def test_audit_record_uses_submitted_values():
    wf = _filled_workflow()
    wf.submit(FakeApi())
    wf.form = AnalysisForm(raw_notes="edited after submit")
    store = FakeStore()
    wf.persist(store)
    record = store.records[0]
    assert record["raw_notes"].startswith("Customer says")
    assert record["agent_email"] == "agent@company.com"
    assert record["refund_percent"] == pytest.approx(15.19, abs=0.01)


def test_build_audit_record_shape():
    form = AnalysisForm(raw_notes="notes here ok", issue_type="Refund", booking_total="", refunded_amount="50")
    record = build_audit_record(form, {"risk_score": 5, "risk_level": "low"}, None)
    assert record["agent_email"] == "unknown"
    assert record["booking_total"] is None
    assert record["refunded_amount"] == 50.0
    assert record["refund_percent"] is None
    assert record["risk_score"] == 5
    for key in ("signals", "warnings", "recommended_script", "next_steps", "missing_info"):
        assert record[key] == []
    assert record["policy"] == {}
    assert record["meta"] == {}
    assert "created_at" not in record


def test_clear_resets_everything():
    wf = _filled_workflow()
    wf.submit(FakeApi())
    assert wf.clear() is True
    assert wf.form == AnalysisForm()
    assert wf.form.agent_email == ""
    assert wf.state == SubmissionState.IDLE
    assert wf.audit_state == AuditState.NONE
    assert wf.result is None


def test_clear_blocked_mid_submission():
    wf = _filled_workflow()
    wf.state = SubmissionState.SUBMITTING
    assert wf.clear() is False
    assert wf.form.raw_notes


# ── SQLite audit store ───────────────────────────────────────────────────────


def test_sqlite_store_appends_with_server_timestamp(tmp_path):
    db_path = str(tmp_path / "audit" / "risk_analyses.db")
    store = SqliteAuditStore(db_path)
    wf = _filled_workflow()
    wf.submit(FakeApi())
    assert wf.persist(store) is True

    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT record_id, created_at, agent_email, risk_level, document FROM risk_analyses").fetchall()
    finally:
        conn.close()
    assert len(rows) == 1
    record_id, created_at, agent_email, risk_level, document = rows[0]
    assert record_id == wf.audit_record_id
    assert created_at
    assert agent_email == "agent@company.com"
    assert risk_level == "medium"
    assert json.loads(document)["policy"]["soft_cap_exceeded"] is True


def test_sqlite_store_creates_table_once(tmp_path, monkeypatch):
    store = SqliteAuditStore(str(tmp_path / "risk_analyses.db"))
    calls = []
    original_ensure = store.ensure_table

    def counting_ensure():
        calls.append(1)
        original_ensure()

    monkeypatch.setattr(store, "ensure_table", counting_ensure)
    first = store.append({"risk_level": "low"})
    second = store.append({"risk_level": "high"})
    assert second == first + 1
    assert len(calls) == 1


def test_sqlite_store_failure_raises_audit_error(tmp_path):
    # A directory where the database file should be makes sqlite fail to open it.
    db_path = tmp_path / "not_a_file.db"
    db_path.mkdir()
    with pytest.raises(AuditWriteError):
        SqliteAuditStore(str(db_path)).append({"risk_level": "low"})


# ── API client ───────────────────────────────────────────────────────────────


def _api(handler):
    return AnalysisApiClient("http://api.test/", client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_api_client_success():
    def handler(request):
        assert request.url.path == "/api/analyze"
        assert json.loads(request.content)["issueType"] == "Refund"
        return httpx.Response(200, json=RESULT)

    assert _api(handler).analyze({"issueType": "Refund"}) == RESULT


def test_api_client_error_field():
    api = _api(lambda request: httpx.Response(400, json={"error": "rawNotes: too short"}))
    with pytest.raises(AnalysisRequestError) as exc_info:
        api.analyze({})
    assert str(exc_info.value) == "rawNotes: too short"
    assert exc_info.value.status_code == 400


def test_api_client_plain_text_error():
    api = _api(lambda request: httpx.Response(502, text=""))
    with pytest.raises(AnalysisRequestError) as exc_info:
        api.analyze({})
    assert str(exc_info.value) == "Server error (502)"


def test_api_client_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AnalysisRequestError):
        _api(handler).analyze({})
    assert _api(handler).health() is None


def test_api_client_health():
    api = _api(lambda request: httpx.Response(200, json={"ok": True, "model": "m", "engine_configured": True}))
    assert api.health()["model"] == "m"
