"""
Hotmart Payments SDK Request Execution

Resolves URLs, sends encoded requests through a transport and normalizes
the response into a RequestEnvelope.
"""

import json
import logging
from typing import Any, Optional

from .credentials import CredentialState
from .encoding import RequestEncoder
from .types import (
    API_URLS,
    AUTH_URL,
    AsyncTransport,
    Body,
    QueryParams,
    RequestEnvelope,
    Transport,
    TransportResponse,
)


logger = logging.getLogger("hotmart_payments")

# Methods that never carry a request body
BODYLESS_METHODS = ("GET", "DELETE", "OPTIONS")
# Methods whose body is always JSON, even in upload mode
JSON_ONLY_METHODS = ("PUT", "PATCH")


def decode_body(raw_body: str, http_code: int, decode: bool) -> Any:
    """
    Decode a response body.

    The raw text is kept only when decoding is off and the status is 200;
    every other combination is JSON-decoded. Undecodable text becomes None.
    """
    if not decode and http_code == 200:
        return raw_body
    if not raw_body:
        return None
    try:
        return json.loads(raw_body)
    except ValueError:
        logger.debug("Response body is not valid JSON (status=%s)", http_code)
        return None


class _BaseExecutor:
    """URL resolution and envelope building shared by both executors."""

    def __init__(self, credentials: CredentialState, encoder: RequestEncoder) -> None:
        self._credentials = credentials
        self._encoder = encoder

    def base_url(self) -> str:
        if self._credentials.authenticating:
            return AUTH_URL
        return API_URLS[self._credentials.environment]

    def resolve_url(self, path: str, params: QueryParams = None) -> str:
        """Base URL for the current state + "/"-prefixed path + query string."""
        if not path.startswith("/"):
            path = "/" + path
        return self.base_url() + path + self._encoder.encode_query(params)

    def _prepare(
        self,
        method: str,
        path: str,
        params: QueryParams,
        body: Optional[Any],
        headers: Optional[Any],
        force_json: bool,
    ):
        method = method.upper()
        url = self.resolve_url(path, params)
        if method == "OPTIONS":
            request_headers = list(headers.items()) if isinstance(headers, dict) else list(headers or [])
        else:
            request_headers = self._encoder.build_headers(headers)

        encoded: Body = None
        if method not in BODYLESS_METHODS:
            encoded = self._encoder.encode_body(body, force_json=force_json or method in JSON_ONLY_METHODS)

        if self._credentials.debug:
            # The auth query carries client_secret
            logged_url = url.split("?", 1)[0] if self._credentials.authenticating else url
            logger.debug("[Hotmart] %s %s", method, logged_url)
        return method, url, request_headers, encoded

    def _envelope(self, response: TransportResponse) -> RequestEnvelope:
        creds = self._credentials
        envelope = RequestEnvelope(
            http_code=response.status_code,
            body=decode_body(response.raw_body, response.status_code, creds.decode),
        )
        if creds.debug:
            envelope.info = dict(response.diagnostics)
            logger.debug("[Hotmart] Response %s", response.status_code)
        return envelope


class HttpExecutor(_BaseExecutor):
    """Synchronous executor."""

    def __init__(
        self,
        credentials: CredentialState,
        encoder: RequestEncoder,
        transport: Transport,
    ) -> None:
        super().__init__(credentials, encoder)
        self._transport = transport

    def execute(
        self,
        method: str,
        path: str,
        params: QueryParams = None,
        body: Optional[Any] = None,
        headers: Optional[Any] = None,
        force_json: bool = False,
    ) -> RequestEnvelope:
        """Send one request and return its envelope. Transport errors propagate."""
        method, url, request_headers, encoded = self._prepare(
            method, path, params, body, headers, force_json
        )
        response = self._transport.send(method, url, request_headers, encoded)
        return self._envelope(response)

    def close(self) -> None:
        self._transport.close()


class AsyncHttpExecutor(_BaseExecutor):
    """Asynchronous executor."""

    def __init__(
        self,
        credentials: CredentialState,
        encoder: RequestEncoder,
        transport: AsyncTransport,
    ) -> None:
        super().__init__(credentials, encoder)
        self._transport = transport

    async def execute(
        self,
        method: str,
        path: str,
        params: QueryParams = None,
        body: Optional[Any] = None,
        headers: Optional[Any] = None,
        force_json: bool = False,
    ) -> RequestEnvelope:
        method, url, request_headers, encoded = self._prepare(
            method, path, params, body, headers, force_json
        )
        response = await self._transport.send(method, url, request_headers, encoded)
        return self._envelope(response)

    async def close(self) -> None:
        await self._transport.close()
