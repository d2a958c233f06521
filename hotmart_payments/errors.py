"""
Hotmart Payments SDK Error Classes
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .types import RequestEnvelope


class HotmartError(Exception):
    """Base error class for the Hotmart Payments SDK."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 0,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(HotmartError):
    """Invalid input detected before any request is sent."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code, message, 0, details)


class ApiError(HotmartError):
    """The API answered with a status outside 200..299."""

    def __init__(
        self,
        message: str,
        envelope: Optional["RequestEnvelope"] = None,
        code: str = "API_ERROR",
    ):
        status_code = envelope.http_code if envelope is not None else 0
        details = envelope.to_dict() if envelope is not None else None
        super().__init__(code, message, status_code, details)
        self.envelope = envelope


class TransportError(HotmartError):
    """Connection, DNS or timeout failure reported by the transport."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, 0, details)


class ConfigurationError(HotmartError):
    """Configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, 0, details)


def is_hotmart_error(error: Any) -> bool:
    """Check if error is a HotmartError."""
    return isinstance(error, HotmartError)
