"""
REST transport for the Bluzelle ledger.

Thin GET / mutate helpers over httpx. The ledger's REST layer embeds
errors as ``{"error": "..."}`` bodies, often with a 200 status, so every
body is checked for that envelope before it is handed back.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from ..errors import DecodeError, RemoteError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def error_message(payload: Any) -> Optional[str]:
    """Return the error envelope's message, or None for a success-shaped body."""
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
    return None


def parse_response(response: httpx.Response) -> bytes:
    """
    Check a ledger response for the error envelope.

    Raises:
        RemoteError: If the body carries a nonempty ``error`` field
        DecodeError: If a 2xx body is not JSON
        TransportError: If a non-2xx body is not an error envelope
    """
    body = response.content
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        if response.is_success:
            raise DecodeError(f"Malformed JSON from {response.request.url}: {exc}") from exc
        raise TransportError(
            f"HTTP {response.status_code} from {response.request.url}: {response.text[:200]}"
        ) from exc

    message = error_message(payload)
    if message is not None:
        raise RemoteError(message)

    if not response.is_success:
        raise TransportError(f"HTTP {response.status_code} from {response.request.url}")

    return body


class RestTransport:
    """HTTP access to one ledger REST endpoint.

    Owns its httpx.Client unless one is passed in.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def url(self, path: str) -> str:
        return self.endpoint + path

    def query(self, path: str) -> bytes:
        """GET ``path`` and return the checked body."""
        url = self.url(path)
        logger.info("get %s", url)
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc
        return parse_response(response)

    def mutate(self, method: str, path: str, payload: bytes) -> bytes:
        """Send ``payload`` with ``method`` and return the checked body."""
        url = self.url(path)
        logger.info("%s %s", method.lower(), url)
        try:
            response = self._client.request(
                method,
                url,
                content=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return parse_response(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
