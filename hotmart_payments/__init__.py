"""
Hotmart Payments Python SDK

A Python client for the Hotmart payments/subscriptions API with sync and
async clients, OAuth client-credentials authentication, production and
sandbox environments, and pluggable HTTP transports (httpx, requests).
"""

from .client import (
    HotmartClient,
    AsyncHotmartClient,
    ApiCall,
    ApiResult,
    classify_envelope,
    create_hotmart_client,
    create_async_hotmart_client,
)
from .credentials import CredentialState
from .encoding import RequestEncoder, encode_query, flatten_form_data
from .executor import HttpExecutor, AsyncHttpExecutor
from .transport import HttpxTransport, AsyncHttpxTransport, RequestsTransport
from .types import (
    API_URLS,
    AUTH_URL,
    Environment,
    HotmartConfig,
    QueryParam,
    RequestEnvelope,
    Transport,
    AsyncTransport,
    TransportResponse,
)
from .errors import (
    HotmartError,
    ValidationError,
    ApiError,
    TransportError,
    ConfigurationError,
    is_hotmart_error,
)

__version__ = "1.0.0"
__all__ = [
    # Clients
    "HotmartClient",
    "AsyncHotmartClient",
    "create_hotmart_client",
    "create_async_hotmart_client",
    # Request pipeline
    "ApiCall",
    "ApiResult",
    "classify_envelope",
    "CredentialState",
    "RequestEncoder",
    "encode_query",
    "flatten_form_data",
    "HttpExecutor",
    "AsyncHttpExecutor",
    # Transports
    "HttpxTransport",
    "AsyncHttpxTransport",
    "RequestsTransport",
    # Types
    "API_URLS",
    "AUTH_URL",
    "Environment",
    "HotmartConfig",
    "QueryParam",
    "RequestEnvelope",
    "Transport",
    "AsyncTransport",
    "TransportResponse",
    # Errors
    "HotmartError",
    "ValidationError",
    "ApiError",
    "TransportError",
    "ConfigurationError",
    "is_hotmart_error",
]
