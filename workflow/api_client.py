"""HTTP client for the analysis API."""

import httpx

from workflow.errors import AnalysisRequestError


class AnalysisApiClient:
    def __init__(self, base_url: str, timeout: float = 60.0, client: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    def analyze(self, payload: dict) -> dict:
        """POST /api/analyze. Raises AnalysisRequestError on any failure."""
        try:
            r = self.client.post(f"{self.base_url}/api/analyze", json=payload)
        except httpx.HTTPError as exc:
            raise AnalysisRequestError(f"Could not reach analysis API: {exc}") from exc

        if r.status_code >= 400:
            raise AnalysisRequestError(_error_text(r), status_code=r.status_code)
        try:
            return r.json()
        except ValueError as exc:
            raise AnalysisRequestError("Analysis API returned a non-JSON response") from exc

    def health(self) -> dict | None:
        """GET /health, or None when the API is down."""
        try:
            r = self.client.get(f"{self.base_url}/health")
            r.raise_for_status()
            return r.json()
        except (httpx.HTTPError, ValueError):
            return None


def _error_text(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return r.text or f"Server error ({r.status_code})"
