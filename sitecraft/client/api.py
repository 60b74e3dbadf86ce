"""
SiteCraft API Client

Async HTTP client for the auditing backend with:
- Envelope unwrapping ({success, data, message})
- Bearer authentication when an access token is supplied
- User-facing error messages mapped from HTTP status codes
- Request/response logging

The client never retries on its own. Retrying reads is the poller's job and
user-initiated actions are not retried.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from sitecraft.models import Analysis, Report

logger = logging.getLogger(__name__)


NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."
GENERIC_ERROR_MESSAGE = "An unexpected error occurred."
ACCOUNT_DELETE_FALLBACK = "Failed to delete account"
ACCOUNT_DELETE_TIMEOUT_MESSAGE = "Request timeout - please try again"

RETRYABLE_STATUS_CODES = (408, 429)


class SiteCraftAPIError(Exception):
    """Raised when a backend call fails or returns an unusable payload."""
    def __init__(self, message: str, status_code: int = None, response: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    @property
    def is_retryable(self) -> bool:
        """Network, timeout, parse and server-side failures are worth another attempt."""
        if self.status_code is None:
            return True
        return self.status_code in RETRYABLE_STATUS_CODES or self.status_code >= 500


class AccountError(Exception):
    """Account action failed. The message is safe to show to the user."""


def error_message_for_status(status_code: int, payload: Any) -> str:
    """Map an HTTP error response to the message shown to the user."""
    backend_message = None
    if isinstance(payload, dict):
        backend_message = payload.get("message") or payload.get("error")

    if status_code == 429:
        return "Too many requests. Please try again later."
    if status_code == 422:
        return backend_message or "Unable to analyze the website. Please check the URL and try again."
    if status_code == 400:
        return backend_message or "Invalid request. Please check your input."
    if status_code >= 500:
        return "Server error. Please try again later."
    return backend_message or GENERIC_ERROR_MESSAGE


def pdf_filename(analysis_id: str) -> str:
    """File name for a downloaded report; the id cannot introduce path segments."""
    safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", str(analysis_id)).strip(".") or "_"
    return f"accessibility-report-{safe_id}.pdf"


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json() if response.content else None
    except ValueError:
        return None


class SiteCraftClient:
    """
    Async client for the SiteCraft backend API.

    Usage:
        async with SiteCraftClient(base_url="https://api.example.com") as client:
            analysis = await client.get_analysis("a1b2c3")
            report = await client.get_detailed_report("a1b2c3", language="en")
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: float = 120.0,
        account_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: Backend base URL
            access_token: Bearer token for authenticated endpoints (optional)
            timeout: Request timeout in seconds
            account_timeout: Timeout for account deletion in seconds
            transport: Custom httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.account_timeout = account_timeout

        headers = {"Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._closed = False

    @classmethod
    def from_settings(cls, settings, access_token: Optional[str] = None, **kwargs) -> "SiteCraftClient":
        return cls(
            base_url=settings.SITECRAFT_API_URL,
            access_token=access_token,
            timeout=settings.API_TIMEOUT,
            account_timeout=settings.ACCOUNT_DELETE_TIMEOUT,
            **kwargs,
        )

    # ========================================================================
    # TRANSPORT
    # ========================================================================

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, translating transport failures and error statuses."""
        if self._closed:
            raise SiteCraftAPIError("Client is closed")

        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {url} timed out: {e}")
            raise SiteCraftAPIError(NETWORK_ERROR_MESSAGE) from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise SiteCraftAPIError(NETWORK_ERROR_MESSAGE) from e

        if response.is_error:
            payload = _json_or_none(response)
            logger.error(f"{method} {url} returned {response.status_code}")
            raise SiteCraftAPIError(
                error_message_for_status(response.status_code, payload),
                status_code=response.status_code,
                response=payload,
            )
        return response

    async def _request_json(self, method: str, url: str, **kwargs) -> Any:
        """Make a request and return the ``data`` member of the response envelope."""
        response = await self._send(method, url, **kwargs)

        try:
            envelope = response.json()
        except ValueError as e:
            raise SiteCraftAPIError(f"Malformed response from {url}") from e

        if not isinstance(envelope, dict):
            raise SiteCraftAPIError(f"Unexpected response shape from {url}", response=envelope)

        if not envelope.get("success", False):
            raise SiteCraftAPIError(
                envelope.get("message") or envelope.get("error") or GENERIC_ERROR_MESSAGE,
                status_code=response.status_code,
                response=envelope,
            )

        return envelope.get("data")

    # ========================================================================
    # ANALYSES
    # ========================================================================

    async def get_analysis(self, analysis_id: str) -> Analysis:
        """
        Get an analysis by id.

        Raises:
            SiteCraftAPIError: On transport/API failure or a malformed payload
        """
        data = await self._request_json("GET", f"/api/analysis/{quote(analysis_id, safe='')}")
        if not isinstance(data, dict):
            raise SiteCraftAPIError(f"Analysis {analysis_id} has no data", response=data)
        try:
            return Analysis.model_validate(data)
        except ValidationError as e:
            raise SiteCraftAPIError(f"Malformed analysis {analysis_id}: {e}", response=data) from e

    async def get_history(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        project_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Any:
        """Get the signed-in user's analysis history."""
        params = {}
        if limit:
            params["limit"] = limit
        if offset:
            params["offset"] = offset
        if project_id:
            params["projectId"] = project_id
        if status:
            params["status"] = status
        return await self._request_json("GET", "/api/analysis", params=params)

    async def get_recent(self, limit: int = 5) -> Any:
        return await self._request_json("GET", "/api/analysis/recent", params={"limit": limit})

    async def get_stats(self) -> Any:
        return await self._request_json("GET", "/api/analysis/stats")

    async def search(self, term: str, limit: int = 10) -> Any:
        """Search analyses by URL fragment."""
        return await self._request_json(
            "GET",
            f"/api/analysis/search/{quote(term, safe='')}",
            params={"limit": limit},
        )

    async def delete_analysis(self, analysis_id: str) -> Any:
        return await self._request_json("DELETE", f"/api/analysis/{quote(analysis_id, safe='')}")

    # ========================================================================
    # ACCESSIBILITY REPORTS
    # ========================================================================

    async def analyze_website(self, url: str, report_type: str = "overview", language: str = "en") -> Report:
        """Start a scan of ``url`` and return the resulting report."""
        data = await self._request_json(
            "POST",
            "/api/accessibility/analyze",
            json={"url": url, "reportType": report_type, "language": language},
        )
        return self._parse_report(data, url)

    async def get_detailed_report(self, analysis_id: str, language: str = "en") -> Report:
        data = await self._request_json(
            "GET",
            f"/api/accessibility/detailed/{quote(analysis_id, safe='')}",
            params={"language": language},
        )
        return self._parse_report(data, analysis_id)

    async def download_pdf(
        self,
        analysis_id: str,
        destination: Union[str, Path],
        language: str = "en",
    ) -> Path:
        """
        Download the PDF report into ``destination``.

        Args:
            analysis_id: Analysis to export
            destination: Directory to write into (created if missing), or a
                full path ending in .pdf
            language: Report language

        Returns:
            Path of the written file
        """
        response = await self._send(
            "GET",
            f"/api/accessibility/pdf/{quote(analysis_id, safe='')}",
            params={"language": language},
        )

        path = Path(destination)
        if path.is_dir() or path.suffix.lower() != ".pdf":
            path.mkdir(parents=True, exist_ok=True)
            path = path / pdf_filename(analysis_id)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(response.content)

        logger.info(f"Saved PDF report for {analysis_id} to {path} ({len(response.content)} bytes)")
        return path

    async def get_health(self) -> Any:
        return await self._request_json("GET", "/api/accessibility/health")

    def _parse_report(self, data: Any, label: str) -> Report:
        if not isinstance(data, dict):
            raise SiteCraftAPIError(f"Report for {label} has no data", response=data)
        try:
            return Report.model_validate(data)
        except ValidationError as e:
            raise SiteCraftAPIError(f"Malformed report for {label}: {e}", response=data) from e

    # ========================================================================
    # INSTANT SCANS & QUOTA
    # ========================================================================

    async def start_instant_scan(self, url: str) -> Dict[str, Any]:
        return await self._request_json("POST", "/api/instant-scan", json={"url": url})

    async def poll_instant_scan(self, analysis_id: str) -> Dict[str, Any]:
        """Lightweight status check: {status, scores, completed}."""
        return await self._request_json("GET", f"/api/instant-scan/{quote(analysis_id, safe='')}/poll")

    async def get_quota(self) -> Dict[str, Any]:
        return await self._request_json("GET", "/api/quota")

    async def check_quota(self, url: str) -> Dict[str, Any]:
        return await self._request_json("GET", "/api/quota/check", params={"url": url})

    # ========================================================================
    # ACCOUNT
    # ========================================================================

    async def delete_account(self, access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Delete the signed-in user's account.

        Uses its own short timeout. Non-2xx responses surface the backend's
        ``message`` verbatim when present.

        Raises:
            AccountError: With a user-facing message
        """
        token = access_token or self.access_token
        if not token:
            raise AccountError("No valid session token available")

        try:
            response = await self._client.delete(
                "/api/auth/account",
                headers={"Authorization": f"Bearer {token}"},
                timeout=httpx.Timeout(self.account_timeout),
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Account deletion timed out after {self.account_timeout}s")
            raise AccountError(ACCOUNT_DELETE_TIMEOUT_MESSAGE) from e
        except httpx.HTTPError as e:
            logger.error(f"Account deletion failed: {e}")
            raise AccountError(NETWORK_ERROR_MESSAGE) from e

        payload = _json_or_none(response)
        if response.is_error:
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.error(f"Account deletion returned {response.status_code}")
            raise AccountError(message or ACCOUNT_DELETE_FALLBACK)

        logger.info("Account deleted")
        return payload if isinstance(payload, dict) else None

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
