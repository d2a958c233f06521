"""
Hotmart Payments SDK Transports

HTTP capability implementations over httpx (sync and async) and requests.
Connection failures are raised as TransportError.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx
import requests
from requests.exceptions import RequestException, Timeout

from .errors import TransportError
from .types import Body, Headers, TransportResponse


def _split_body(headers: Headers, body: Body) -> Tuple[Headers, Optional[str], Optional[Dict[str, Any]]]:
    """
    Separate a JSON string body from multipart form fields.

    For form fields the bare "multipart/form-data" Content-Type is dropped
    so the HTTP library can set it with its boundary.
    """
    if isinstance(body, Mapping):
        files = {key: (None, _form_value(value).encode("utf-8")) for key, value in body.items()}
        kept = [
            (name, value)
            for name, value in headers
            if not (name.lower() == "content-type" and value.strip().lower() == "multipart/form-data")
        ]
        return kept, None, files
    return list(headers), body, None


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if value is None:
        return ""
    return str(value)


def _headers_dict(headers: List[Tuple[str, str]]) -> Dict[str, str]:
    """Collapse repeated headers the way HTTP allows (comma separated)."""
    merged: Dict[str, str] = {}
    lower_names: Dict[str, str] = {}
    for name, value in headers:
        key = lower_names.setdefault(name.lower(), name)
        merged[key] = f"{merged[key]}, {value}" if key in merged else value
    return merged


def _httpx_diagnostics(response: httpx.Response) -> Dict[str, Any]:
    try:
        total_time = response.elapsed.total_seconds()
    except RuntimeError:
        total_time = None
    return {
        "url": str(response.url),
        "method": response.request.method,
        "http_code": response.status_code,
        "content_type": response.headers.get("content-type"),
        "total_time": total_time,
        "redirect_count": len(response.history),
        "request_headers": dict(response.request.headers),
        "response_headers": dict(response.headers),
    }


class HttpxTransport:
    """Synchronous transport backed by httpx.Client."""

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.Client] = None) -> None:
        self._timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, method: str, url: str, headers: Headers, body: Body = None) -> TransportResponse:
        headers, content, files = _split_body(headers, body)
        try:
            response = self._client.request(
                method=method,
                url=url,
                headers=headers,
                content=content,
                files=files,
            )
        except httpx.TimeoutException:
            raise TransportError("Request timeout", {"timeout": self._timeout, "url": url})
        except httpx.RequestError as e:
            raise TransportError(str(e), {"url": url})

        try:
            return TransportResponse(
                status_code=response.status_code,
                raw_body=response.text,
                diagnostics=_httpx_diagnostics(response),
            )
        finally:
            response.close()

    def close(self) -> None:
        self._client.close()


class AsyncHttpxTransport:
    """Asynchronous transport backed by httpx.AsyncClient."""

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def send(self, method: str, url: str, headers: Headers, body: Body = None) -> TransportResponse:
        headers, content, files = _split_body(headers, body)
        try:
            response = await self._get_client().request(
                method=method,
                url=url,
                headers=headers,
                content=content,
                files=files,
            )
        except httpx.TimeoutException:
            raise TransportError("Request timeout", {"timeout": self._timeout, "url": url})
        except httpx.RequestError as e:
            raise TransportError(str(e), {"url": url})

        try:
            return TransportResponse(
                status_code=response.status_code,
                raw_body=response.text,
                diagnostics=_httpx_diagnostics(response),
            )
        finally:
            await response.aclose()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class RequestsTransport:
    """Synchronous transport backed by requests.Session."""

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    def send(self, method: str, url: str, headers: Headers, body: Body = None) -> TransportResponse:
        headers, content, files = _split_body(headers, body)
        try:
            response = self._session.request(
                method=method,
                url=url,
                headers=_headers_dict(headers),
                data=content,
                files=files,
                timeout=self._timeout,
            )
        except Timeout:
            raise TransportError("Request timeout", {"timeout": self._timeout, "url": url})
        except RequestException as e:
            raise TransportError(str(e), {"url": url})

        try:
            return TransportResponse(
                status_code=response.status_code,
                raw_body=response.text,
                diagnostics={
                    "url": response.url,
                    "method": method,
                    "http_code": response.status_code,
                    "content_type": response.headers.get("content-type"),
                    "total_time": response.elapsed.total_seconds(),
                    "redirect_count": len(response.history),
                    "request_headers": dict(response.request.headers),
                    "response_headers": dict(response.headers),
                },
            )
        finally:
            response.close()

    def close(self) -> None:
        self._session.close()
