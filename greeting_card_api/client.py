"""Greeting Card API client.

A thin wrapper around the two JSON endpoints of the service:

* :meth:`GreetingClient.create_greeting` – ``POST /api/create``.
* :meth:`GreetingClient.get_greeting` – ``GET /api/get?id=ID``.

Like the page itself, the client never raises for HTTP or network
failures.  Every method returns a tuple ``(data, error)`` where exactly
one side is set, except that a missing greeting is reported as
``(None, None)`` so callers can fall back to default content.

The ``requests`` library is used for HTTP; pass a preconfigured
``requests.Session`` (or any object with a compatible ``request``
method) to reuse connections or to substitute a fake in tests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]


class GreetingClient:
    """Client for the greeting card HTTP API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Base URL of the service, e.g. ``https://example.com``.
            session: Optional requests session.  If not supplied a session
                will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request against the API.

        Returns:
            ``(data, None)`` with the parsed JSON body on a 2xx response,
            otherwise ``(None, error)`` where ``error`` has the keys
            ``status_code``, ``error`` and ``message``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "error": "network_error", "message": str(exc)}

        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = None

        if 200 <= response.status_code < 300:
            return payload, None

        code = "http_error"
        message = response.text or f"HTTP {response.status_code}"
        if isinstance(payload, dict):
            code = payload.get("error") or code
            message = payload.get("message") or payload.get("detail") or message
        logger.warning("API request failed (%s): %s", response.status_code, message)
        return None, {"status_code": response.status_code, "error": code, "message": message}

    # ------------------------------------------------------------------
    # Greeting operations
    # ------------------------------------------------------------------
    def create_greeting(
        self,
        sender: str,
        receiver: str,
        message: str = "",
        *,
        day_index: Optional[int] = None,
        subtitle: Optional[str] = None,
        quote: Optional[str] = None,
        memories: Optional[Union[List[str], str]] = None,
    ) -> Result:
        """Create a greeting.

        Returns:
            ``({"success", "id", "url"}, None)`` on success.
        """
        body: Dict[str, Any] = {"sender": sender, "receiver": receiver, "message": message}
        optional = {"day_index": day_index, "subtitle": subtitle, "quote": quote, "memories": memories}
        body.update({key: value for key, value in optional.items() if value is not None})
        return self._request("POST", "/api/create", json_body=body)

    def get_greeting(self, greeting_id: str) -> Result:
        """Fetch a greeting by identifier.

        Returns:
            ``(greeting, None)`` when found, ``(None, None)`` when the
            service answers 404 and ``(None, error)`` for any other failure.
        """
        data, error = self._request("GET", "/api/get", params={"id": greeting_id})
        if error and error["status_code"] == 404:
            logger.info("Greeting %s not found, using defaults", greeting_id)
            return None, None
        return data, error
