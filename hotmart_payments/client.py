"""
Hotmart Payments SDK Client

Main client classes for the Hotmart payments/subscriptions API.
Provides both synchronous and asynchronous clients that share request
construction and response classification.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .credentials import CredentialState
from .encoding import RequestEncoder
from .errors import ApiError, ConfigurationError, ValidationError
from .executor import AsyncHttpExecutor, HttpExecutor
from .transport import AsyncHttpxTransport, HttpxTransport
from .types import Environment, HotmartConfig, QueryParams, RequestEnvelope, normalize_params


logger = logging.getLogger("hotmart_payments")

ERRORS_SEPARATOR = "\r\n"


# =============================================================================
# Response classification
# =============================================================================

@dataclass
class ApiResult:
    """Outcome of classifying an envelope: success or an ApiError."""

    envelope: RequestEnvelope
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> RequestEnvelope:
        """Return the envelope or raise the classified error."""
        if self.error is not None:
            raise self.error
        return self.envelope


def error_message(envelope: RequestEnvelope, detail_keys: Sequence[str] = ("message",)) -> str:
    """Pick the most specific message available in a failed envelope."""
    body = envelope.body
    if isinstance(body, Mapping):
        for key in detail_keys:
            if body.get(key) is not None:
                return str(body[key])
        errors = body.get("errors")
        if errors is not None:
            if isinstance(errors, (list, tuple)):
                return ERRORS_SEPARATOR.join(str(entry) for entry in errors)
            return str(errors)
    return json.dumps(envelope.to_dict(), default=str)


def classify_envelope(
    envelope: RequestEnvelope, detail_keys: Sequence[str] = ("message",)
) -> ApiResult:
    """2xx is success; anything else becomes an ApiError."""
    if envelope.is_success:
        return ApiResult(envelope)
    return ApiResult(envelope, ApiError(error_message(envelope, detail_keys), envelope))


# =============================================================================
# Operation definitions
# =============================================================================

@dataclass
class ApiCall:
    """A logical request: method, path, query params and body."""

    method: str
    path: str
    params: QueryParams = None
    body: Optional[Dict[str, Any]] = None
    detail_keys: Tuple[str, ...] = ("message",)


def _require_code(code: str) -> str:
    if not code or not str(code).strip():
        raise ValidationError("Subscriber code is required", details={"field": "code"})
    return str(code).strip()


def _merge_params(first: List[Tuple[str, Any]], extra: QueryParams) -> List[Any]:
    return [*first, *normalize_params(extra)]


def auth_call(client_id: str, client_secret: str, params: QueryParams = None) -> ApiCall:
    credentials = [
        ("grant_type", "client_credentials"),
        ("client_id", client_id),
        ("client_secret", client_secret),
    ]
    return ApiCall(
        "POST",
        "token",
        params=_merge_params(credentials, params),
        body={},
        detail_keys=("message", "error_description"),
    )


def list_subscriptions_call(params: QueryParams = None) -> ApiCall:
    return ApiCall("GET", "subscriptions", params=params)


def list_purchases_call(code: str, params: QueryParams = None) -> ApiCall:
    return ApiCall("GET", f"subscriptions/{_require_code(code)}/purchases", params=params)


def cancel_subscription_call(code: str, send_mail: bool = False, params: QueryParams = None) -> ApiCall:
    return ApiCall(
        "POST",
        f"subscriptions/{_require_code(code)}/cancel",
        params=params,
        body={"send_mail": bool(send_mail)},
    )


def cancel_subscriptions_bulk_call(
    codes: Sequence[str], send_mail: bool = False, params: QueryParams = None
) -> ApiCall:
    return ApiCall(
        "POST",
        "subscriptions/cancel",
        params=params,
        body={"subscriber_code": list(codes), "send_mail": bool(send_mail)},
    )


def reactivate_subscription_call(code: str, charge: bool = False, params: QueryParams = None) -> ApiCall:
    return ApiCall(
        "POST",
        f"subscriptions/{_require_code(code)}/reactivate",
        params=params,
        body={"charge": bool(charge)},
    )


def reactivate_subscriptions_bulk_call(
    codes: Sequence[str], charge: bool = False, params: QueryParams = None
) -> ApiCall:
    return ApiCall(
        "POST",
        "subscriptions/reactivate",
        params=params,
        body={"subscriber_code": list(codes), "charge": bool(charge)},
    )


def change_billing_due_day_call(code: str, due_day: int, params: QueryParams = None) -> ApiCall:
    if isinstance(due_day, bool) or not isinstance(due_day, int) or not 1 <= due_day <= 31:
        raise ValidationError(
            "Invalid due day: must be between 1 and 31",
            details={"field": "due_day", "value": due_day},
        )
    return ApiCall(
        "PATCH",
        f"subscriptions/{_require_code(code)}",
        params=params,
        body={"due_day": int(due_day)},
    )


def list_users_call(params: QueryParams = None) -> ApiCall:
    return ApiCall("GET", "sales/users", params=params)


# =============================================================================
# Shared client plumbing
# =============================================================================

class _ClientBase:
    """Configuration handling and credential pass-through setters."""

    def __init__(self, config: Optional[HotmartConfig] = None, **overrides: Any) -> None:
        if config is None:
            config = HotmartConfig(**overrides)
        elif overrides:
            raise ConfigurationError("Pass either a HotmartConfig or keyword options, not both")
        self._validate_config(config)

        self._config = config
        self.credentials = CredentialState(config)
        self._encoder = RequestEncoder(self.credentials, config.headers)

    def _validate_config(self, config: HotmartConfig) -> None:
        """Validate configuration."""
        if config.timeout is not None and config.timeout <= 0:
            raise ConfigurationError("timeout must be positive", {"timeout": config.timeout})
        if config.transport is not None and not callable(getattr(config.transport, "send", None)):
            raise ConfigurationError("transport must provide a send() method")

    def _log(self, message: str, *args: Any) -> None:
        """Log debug message."""
        if self.credentials.debug:
            logger.debug(f"[Hotmart] {message}", *args)

    @property
    def config(self) -> HotmartConfig:
        return self._config

    def set_client_id(self, client_id: str) -> None:
        self.credentials.set_client_id(client_id)

    def set_client_secret(self, client_secret: str) -> None:
        self.credentials.set_client_secret(client_secret)

    def set_token(self, token: str) -> None:
        self.credentials.set_bearer_token(token)

    def get_token(self) -> str:
        return self.credentials.bearer_token

    def set_basic(self, token: str) -> None:
        self.credentials.set_basic_token(token)

    def get_basic(self) -> str:
        return self.credentials.basic_token

    def set_environment(self, environment: Any) -> None:
        self.credentials.set_environment(environment)

    def get_environment(self) -> Environment:
        return self.credentials.environment

    def set_debug(self, debug: bool) -> None:
        self.credentials.set_debug(debug)

    def set_upload(self, upload: bool) -> None:
        self.credentials.set_upload(upload)

    def set_decode(self, decode: bool) -> None:
        self.credentials.set_decode(decode)


# =============================================================================
# Sync Client
# =============================================================================

class HotmartClient(_ClientBase):
    """
    Hotmart Payments Client - Synchronous SDK entry point.

    Every operation returns a RequestEnvelope on a 2xx response and raises
    ApiError otherwise. TransportError from the transport propagates as is.
    """

    def __init__(self, config: Optional[HotmartConfig] = None, **overrides: Any) -> None:
        """Initialize the Hotmart client."""
        super().__init__(config, **overrides)
        transport = self._config.transport or HttpxTransport(timeout=self._config.timeout)
        self._executor = HttpExecutor(self.credentials, self._encoder, transport)

        self._log(f"HotmartClient initialized (environment={self.credentials.environment.name})")

    def _call(self, call: ApiCall) -> RequestEnvelope:
        envelope = self._executor.execute(call.method, call.path, call.params, call.body)
        result = classify_envelope(envelope, call.detail_keys)
        if not result.ok:
            self._log(f"{call.method} {call.path} failed with {envelope.http_code}")
        return result.unwrap()

    # =========================================================================
    # Authentication Methods
    # =========================================================================

    def authenticate(self, params: QueryParams = None) -> RequestEnvelope:
        """
        Exchange client credentials for an access token.

        Uses the Basic token against the OAuth endpoint for this call only.

        Returns:
            RequestEnvelope whose body holds the token response
        """
        call = auth_call(self.credentials.client_id, self.credentials.client_secret, params)
        with self.credentials.authenticating_scope():
            return self._call(call)

    auth = authenticate

    def check_token(self, token: str) -> bool:
        """Return False if the API rejects the given token with 401."""
        with self.credentials.temporary_token(token):
            envelope = self._executor.execute("GET", "subscriptions")
        return envelope.http_code != 401

    # =========================================================================
    # Subscription Methods
    # =========================================================================

    def list_subscriptions(self, params: QueryParams = None) -> RequestEnvelope:
        return self._call(list_subscriptions_call(params))

    def list_purchases(self, code: str, params: QueryParams = None) -> RequestEnvelope:
        """List the purchases of one subscriber."""
        return self._call(list_purchases_call(code, params))

    def cancel_subscription(
        self, code: str, send_mail: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        return self._call(cancel_subscription_call(code, send_mail, params))

    def cancel_subscriptions_bulk(
        self, codes: Sequence[str], send_mail: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        return self._call(cancel_subscriptions_bulk_call(codes, send_mail, params))

    def reactivate_subscription(
        self, code: str, charge: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        """Reactivate a subscription, optionally charging the subscriber now."""
        return self._call(reactivate_subscription_call(code, charge, params))

    def reactivate_subscriptions_bulk(
        self, codes: Sequence[str], charge: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        return self._call(reactivate_subscriptions_bulk_call(codes, charge, params))

    def change_billing_due_day(
        self, code: str, due_day: int, params: QueryParams = None
    ) -> RequestEnvelope:
        """
        Change the monthly billing day of a subscription.

        Raises:
            ValidationError: If due_day is outside 1..31 (no request is sent)
        """
        return self._call(change_billing_due_day_call(code, due_day, params))

    def list_users(self, params: QueryParams = None) -> RequestEnvelope:
        return self._call(list_users_call(params))

    # =========================================================================
    # Raw HTTP verbs
    # =========================================================================

    def get(self, path: str, params: QueryParams = None, headers: Any = None) -> RequestEnvelope:
        return self._executor.execute("GET", path, params, headers=headers)

    def post(
        self, path: str, body: Optional[Dict[str, Any]] = None, params: QueryParams = None, headers: Any = None
    ) -> RequestEnvelope:
        return self._executor.execute("POST", path, params, body, headers)

    def put(
        self, path: str, body: Optional[Dict[str, Any]] = None, params: QueryParams = None, headers: Any = None
    ) -> RequestEnvelope:
        return self._executor.execute("PUT", path, params, body, headers)

    def patch(
        self, path: str, body: Optional[Dict[str, Any]] = None, params: QueryParams = None, headers: Any = None
    ) -> RequestEnvelope:
        return self._executor.execute("PATCH", path, params, body, headers)

    def delete(self, path: str, params: QueryParams = None, headers: Any = None) -> RequestEnvelope:
        return self._executor.execute("DELETE", path, params, headers=headers)

    def options(self, path: str, params: QueryParams = None, headers: Any = None) -> RequestEnvelope:
        return self._executor.execute("OPTIONS", path, params, headers=headers)

    def close(self) -> None:
        """Close the underlying transport."""
        self._executor.close()

    def __enter__(self) -> "HotmartClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# =============================================================================
# Async Client
# =============================================================================

class AsyncHotmartClient(_ClientBase):
    """Hotmart Payments Client - Asynchronous SDK entry point."""

    def __init__(self, config: Optional[HotmartConfig] = None, **overrides: Any) -> None:
        super().__init__(config, **overrides)
        transport = self._config.transport or AsyncHttpxTransport(timeout=self._config.timeout)
        self._executor = AsyncHttpExecutor(self.credentials, self._encoder, transport)

        self._log(f"AsyncHotmartClient initialized (environment={self.credentials.environment.name})")

    async def _call(self, call: ApiCall) -> RequestEnvelope:
        envelope = await self._executor.execute(call.method, call.path, call.params, call.body)
        result = classify_envelope(envelope, call.detail_keys)
        if not result.ok:
            self._log(f"{call.method} {call.path} failed with {envelope.http_code}")
        return result.unwrap()

    async def authenticate(self, params: QueryParams = None) -> RequestEnvelope:
        call = auth_call(self.credentials.client_id, self.credentials.client_secret, params)
        with self.credentials.authenticating_scope():
            return await self._call(call)

    auth = authenticate

    async def check_token(self, token: str) -> bool:
        with self.credentials.temporary_token(token):
            envelope = await self._executor.execute("GET", "subscriptions")
        return envelope.http_code != 401

    async def list_subscriptions(self, params: QueryParams = None) -> RequestEnvelope:
        return await self._call(list_subscriptions_call(params))

    async def list_purchases(self, code: str, params: QueryParams = None) -> RequestEnvelope:
        return await self._call(list_purchases_call(code, params))

    async def cancel_subscription(
        self, code: str, send_mail: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        return await self._call(cancel_subscription_call(code, send_mail, params))

    async def cancel_subscriptions_bulk(
        self, codes: Sequence[str], send_mail: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        return await self._call(cancel_subscriptions_bulk_call(codes, send_mail, params))

    async def reactivate_subscription(
        self, code: str, charge: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        return await self._call(reactivate_subscription_call(code, charge, params))

    async def reactivate_subscriptions_bulk(
        self, codes: Sequence[str], charge: bool = False, params: QueryParams = None
    ) -> RequestEnvelope:
        return await self._call(reactivate_subscriptions_bulk_call(codes, charge, params))

    async def change_billing_due_day(
        self, code: str, due_day: int, params: QueryParams = None
    ) -> RequestEnvelope:
        return await self._call(change_billing_due_day_call(code, due_day, params))

    async def list_users(self, params: QueryParams = None) -> RequestEnvelope:
        return await self._call(list_users_call(params))

    async def get(self, path: str, params: QueryParams = None, headers: Any = None) -> RequestEnvelope:
        return await self._executor.execute("GET", path, params, headers=headers)

    async def post(
        self, path: str, body: Optional[Dict[str, Any]] = None, params: QueryParams = None, headers: Any = None
    ) -> RequestEnvelope:
        return await self._executor.execute("POST", path, params, body, headers)

    async def put(
        self, path: str, body: Optional[Dict[str, Any]] = None, params: QueryParams = None, headers: Any = None
    ) -> RequestEnvelope:
        return await self._executor.execute("PUT", path, params, body, headers)

    async def patch(
        self, path: str, body: Optional[Dict[str, Any]] = None, params: QueryParams = None, headers: Any = None
    ) -> RequestEnvelope:
        return await self._executor.execute("PATCH", path, params, body, headers)

    async def delete(self, path: str, params: QueryParams = None, headers: Any = None) -> RequestEnvelope:
        return await self._executor.execute("DELETE", path, params, headers=headers)

    async def options(self, path: str, params: QueryParams = None, headers: Any = None) -> RequestEnvelope:
        return await self._executor.execute("OPTIONS", path, params, headers=headers)

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._executor.close()

    async def __aenter__(self) -> "AsyncHotmartClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


# =============================================================================
# Factory Functions
# =============================================================================

def create_hotmart_client(config: Optional[HotmartConfig] = None, **overrides: Any) -> HotmartClient:
    """Create a new synchronous Hotmart client."""
    return HotmartClient(config, **overrides)


def create_async_hotmart_client(
    config: Optional[HotmartConfig] = None, **overrides: Any
) -> AsyncHotmartClient:
    """Create a new asynchronous Hotmart client."""
    return AsyncHotmartClient(config, **overrides)
