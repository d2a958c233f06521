"""
Hotmart Payments SDK Credential State

Mutable per-client credentials and behaviour flags, plus scoped helpers
for the two transient states (authentication exchange, token check).
"""

import re
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from .types import Environment, HotmartConfig


_BEARER_PREFIX = re.compile(r"^bearer ", re.IGNORECASE)
_BASIC_PREFIX = re.compile(r"^basic ", re.IGNORECASE)


class CredentialState:
    """
    Credentials, environment and flags for one client instance.

    Not synchronized: the scoped helpers mutate shared state for the
    duration of a call, so a single instance must not serve concurrent
    operations.
    """

    def __init__(self, config: Optional[HotmartConfig] = None) -> None:
        config = config or HotmartConfig()
        self._client_id = config.client_id
        self._client_secret = config.client_secret
        self._bearer_token = ""
        self._basic_token = ""
        self._environment = Environment.PRODUCTION
        self._authenticating = False
        self._debug = config.debug
        self._upload = config.upload
        self._decode = config.decode

        self.set_bearer_token(config.token)
        self.set_basic_token(config.basic)
        self.set_environment(config.environment)

    # =========================================================================
    # Setters
    # =========================================================================

    def set_client_id(self, client_id: str) -> None:
        self._client_id = client_id

    def set_client_secret(self, client_secret: str) -> None:
        self._client_secret = client_secret

    def set_bearer_token(self, token: str) -> None:
        """Store the token without a leading "Bearer " prefix."""
        self._bearer_token = _BEARER_PREFIX.sub("", token or "", count=1)

    def set_basic_token(self, token: str) -> None:
        """Store the token without a leading "Basic " prefix."""
        self._basic_token = _BASIC_PREFIX.sub("", token or "", count=1)

    def set_environment(self, environment: Any) -> None:
        """Switch environment. Unknown values are ignored."""
        value = Environment.coerce(environment)
        if value is not None:
            self._environment = value

    def set_debug(self, debug: bool) -> None:
        self._debug = bool(debug)

    def set_upload(self, upload: bool) -> None:
        self._upload = bool(upload)

    def set_decode(self, decode: bool) -> None:
        self._decode = bool(decode)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def client_id(self) -> str:
        return self._client_id

    @client_id.setter
    def client_id(self, value: str) -> None:
        self.set_client_id(value)

    @property
    def client_secret(self) -> str:
        return self._client_secret

    @client_secret.setter
    def client_secret(self, value: str) -> None:
        self.set_client_secret(value)

    @property
    def bearer_token(self) -> str:
        return self._bearer_token

    @bearer_token.setter
    def bearer_token(self, value: str) -> None:
        self.set_bearer_token(value)

    @property
    def basic_token(self) -> str:
        return self._basic_token

    @basic_token.setter
    def basic_token(self, value: str) -> None:
        self.set_basic_token(value)

    @property
    def environment(self) -> Environment:
        return self._environment

    @environment.setter
    def environment(self, value: Any) -> None:
        self.set_environment(value)

    @property
    def authenticating(self) -> bool:
        return self._authenticating

    @property
    def debug(self) -> bool:
        return self._debug

    @debug.setter
    def debug(self, value: bool) -> None:
        self.set_debug(value)

    @property
    def upload(self) -> bool:
        return self._upload

    @upload.setter
    def upload(self, value: bool) -> None:
        self.set_upload(value)

    @property
    def decode(self) -> bool:
        return self._decode

    @decode.setter
    def decode(self, value: bool) -> None:
        self.set_decode(value)

    # =========================================================================
    # Scoped state
    # =========================================================================

    @contextmanager
    def authenticating_scope(self) -> Iterator["CredentialState"]:
        """Use Basic auth and the auth endpoint for the enclosed call."""
        self._authenticating = True
        try:
            yield self
        finally:
            self._authenticating = False

    @contextmanager
    def temporary_token(self, token: str) -> Iterator["CredentialState"]:
        """Swap the bearer token for the enclosed call, then restore it."""
        previous = self._bearer_token
        self.set_bearer_token(token)
        try:
            yield self
        finally:
            self._bearer_token = previous

    def __repr__(self) -> str:
        return (
            f"CredentialState(environment={self._environment.name}, "
            f"authenticating={self._authenticating}, debug={self._debug}, "
            f"upload={self._upload}, decode={self._decode})"
        )
