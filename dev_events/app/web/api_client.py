"""Dev Events API client.

The pages do not read the document store directly: like any other
consumer they go through the public JSON API, at the URL configured as
``PUBLIC_BASE_URL``.  This module wraps those calls with ``requests``.

Every method returns a ``(data, error)`` tuple.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary
with ``status_code`` and ``message`` keys.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from ..core.config import settings


logger = logging.getLogger(__name__)


class DevEventsClient:
    """Client for the events JSON API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the deployment, e.g. ``https://events.example.com``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request and decode the JSON body."""
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(method=method, url=url, params=params, timeout=self.timeout)
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except (requests.RequestException, ValueError) as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def list_events(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve all events, newest first."""
        data, error = self._request("GET", "/api/events")
        if error:
            return [], error
        if isinstance(data, dict) and isinstance(data.get("events"), list):
            return data["events"], None
        return [], None

    def get_event(self, slug: str) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve a single event by slug."""
        data, error = self._request("GET", f"/api/events/{quote(slug, safe='')}")
        if error:
            return None, error
        if isinstance(data, dict) and isinstance(data.get("event"), dict):
            return data["event"], None
        return None, {"status_code": None, "message": "Response did not contain an event"}


def get_api_client() -> DevEventsClient:
    """FastAPI dependency returning a client for this deployment's API."""
    return DevEventsClient(base_url=settings.public_base_url)
