"""
Hotmart Payments SDK Type Definitions

Configuration, request/response records and the transport interfaces
shared by the sync and async clients.
"""

import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)


# Base URLs
AUTH_URL = "https://api-sec-vlc.hotmart.com/security/oauth"


class Environment(IntEnum):
    """Target API environment."""

    PRODUCTION = 1
    SANDBOX = 2

    @classmethod
    def coerce(cls, value: Any) -> Optional["Environment"]:
        """Return the matching environment, or None if value is not 1 or 2."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def parse(cls, value: str) -> Optional["Environment"]:
        """Read "1", "2", "production" or "sandbox" (environment variables)."""
        name = value.strip().upper()
        if name in cls.__members__:
            return cls[name]
        if name.isdigit():
            return cls.coerce(int(name))
        return None


API_URLS: Dict[Environment, str] = {
    Environment.PRODUCTION: "https://developers.hotmart.com/payments/api/v1",
    Environment.SANDBOX: "https://sandbox.hotmart.com/payments/api/v1",
}


Headers = List[Tuple[str, str]]
FormData = Dict[str, Any]
Body = Union[str, FormData, None]


@dataclass
class TransportResponse:
    """What a transport hands back for one HTTP exchange."""

    status_code: int
    raw_body: str
    diagnostics: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Transport(Protocol):
    """Synchronous HTTP capability used by the executor."""

    def send(
        self,
        method: str,
        url: str,
        headers: Headers,
        body: Body = None,
    ) -> TransportResponse:
        """Send one request. Raises TransportError on connection failures."""
        ...

    def close(self) -> None:
        """Release pooled connections."""
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Asynchronous HTTP capability used by the async executor."""

    async def send(
        self,
        method: str,
        url: str,
        headers: Headers,
        body: Body = None,
    ) -> TransportResponse:
        ...

    async def close(self) -> None:
        ...


@dataclass(frozen=True)
class HotmartConfig:
    """SDK configuration. Immutable; runtime changes go through CredentialState."""

    # OAuth client credentials used by authenticate()
    client_id: str = ""
    client_secret: str = ""
    # Bearer token for regular calls ("Bearer " prefix is accepted)
    token: str = ""
    # Basic token for the authentication exchange ("Basic " prefix is accepted)
    basic: str = ""
    # Production or sandbox API base
    environment: Environment = Environment.PRODUCTION
    # Attach transport diagnostics to every envelope and log requests
    debug: bool = False
    # Send bodies as multipart form fields instead of JSON
    upload: bool = False
    # Decode JSON response bodies
    decode: bool = True
    # Transport timeout in seconds (enforced by the transport, not the client)
    timeout: float = 30.0
    # Extra headers appended after the defaults on every request
    headers: Optional[Dict[str, str]] = None
    # Custom transport (default: HttpxTransport / AsyncHttpxTransport)
    transport: Optional[Any] = None

    @classmethod
    def from_env(cls, prefix: str = "HOTMART_", **overrides: Any) -> "HotmartConfig":
        """Build a config from environment variables."""
        env = os.environ
        values: Dict[str, Any] = {
            "client_id": env.get(f"{prefix}CLIENT_ID", ""),
            "client_secret": env.get(f"{prefix}CLIENT_SECRET", ""),
            "token": env.get(f"{prefix}TOKEN", ""),
            "basic": env.get(f"{prefix}BASIC", ""),
            "debug": _env_flag(env.get(f"{prefix}DEBUG")),
        }
        environment = Environment.parse(env.get(f"{prefix}ENVIRONMENT", ""))
        if environment is not None:
            values["environment"] = environment
        timeout = env.get(f"{prefix}TIMEOUT")
        if timeout:
            values["timeout"] = float(timeout)
        values.update(overrides)
        return cls(**values)


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class QueryParam:
    """A single query string parameter."""

    name: str
    value: Any

    def is_valid(self) -> bool:
        """Empty names and empty values are skipped; zero is not empty."""
        if not self.name or self.value is None:
            return False
        if isinstance(self.value, (int, float)):
            return True
        return self.value != ""

    def encoded_value(self) -> str:
        if isinstance(self.value, bool):
            return "1" if self.value else ""
        return str(self.value)


QueryParams = Union[
    Mapping[str, Any],
    Iterable[Union[QueryParam, Tuple[str, Any], Mapping[str, Any]]],
    None,
]


def normalize_params(params: QueryParams) -> List[QueryParam]:
    """Accept the supported parameter shapes and return QueryParam records."""
    if not params:
        return []
    # A top-level mapping is always {name: value}; records only appear as items
    if isinstance(params, Mapping):
        return [QueryParam(name, value) for name, value in params.items()]

    result: List[QueryParam] = []
    for item in params:
        if isinstance(item, QueryParam):
            result.append(item)
        elif isinstance(item, Mapping):
            result.append(QueryParam(item.get("name") or "", item.get("value")))
        else:
            name, value = item
            result.append(QueryParam(name, value))
    return result


@dataclass
class RequestEnvelope:
    """Normalized response returned by every operation."""

    http_code: int
    body: Any = None
    info: Optional[Dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.http_code <= 299

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape ({body, httpCode, info?})."""
        result: Dict[str, Any] = {"body": self.body, "httpCode": self.http_code}
        if self.info is not None:
            result["info"] = self.info
        return result
