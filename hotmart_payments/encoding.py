"""
Hotmart Payments SDK Request Encoding

Turns a logical request (path, params, body) into headers, a query string
and a transport-ready body.
"""

import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote_plus

from .credentials import CredentialState
from .types import Body, FormData, Headers, QueryParams, normalize_params


def _is_composite(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _items(value: Any):
    if isinstance(value, Mapping):
        return value.items()
    return enumerate(value)


def flatten_form_data(data: Mapping[str, Any]) -> FormData:
    """
    Flatten nested mappings/lists into form field names.

    Each pass expands composite values one level into ``key[subkey]``
    entries; passes repeat until every value is a scalar.

        {"a": {"b": 1, "c": {"d": 2}}} -> {"a[b]": 1, "a[c][d]": 2}
    """
    flat: Dict[str, Any] = {}
    recursive = False
    for key, value in data.items():
        if not _is_composite(value):
            flat[key] = value
            continue
        for subkey, subvalue in _items(value):
            flat[f"{key}[{subkey}]"] = subvalue
            if _is_composite(subvalue):
                recursive = True

    if recursive:
        return flatten_form_data(flat)
    return flat


def encode_query(params: QueryParams) -> str:
    """Build "?a=1&b=2" from the valid parameters, in order."""
    pairs = [
        f"{quote_plus(str(param.name))}={quote_plus(param.encoded_value())}"
        for param in normalize_params(params)
        if param.is_valid()
    ]
    if not pairs:
        return ""
    return "?" + "&".join(pairs)


class RequestEncoder:
    """Header, query and body encoding bound to a client's credentials."""

    def __init__(
        self,
        credentials: CredentialState,
        default_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._credentials = credentials
        self._default_headers = dict(default_headers or {})

    def build_headers(self, extra: Optional[Any] = None) -> Headers:
        """Default headers followed by configured and caller headers (no dedup)."""
        creds = self._credentials
        headers: Headers = [("Accept", "application/json")]

        if creds.authenticating:
            headers.append(("Authorization", f"Basic {creds.basic_token}"))
        else:
            headers.append(("Authorization", f"Bearer {creds.bearer_token}"))

        if creds.upload:
            headers.append(("Content-Type", "multipart/form-data"))
        else:
            headers.append(("Content-Type", "application/json"))

        headers.extend(self._default_headers.items())
        if extra:
            items = extra.items() if isinstance(extra, Mapping) else extra
            headers.extend((str(name), str(value)) for name, value in items)
        return headers

    def encode_query(self, params: QueryParams) -> str:
        return encode_query(params)

    def encode_body(self, body: Optional[Mapping[str, Any]], force_json: bool = False) -> Body:
        """Form fields in upload mode, a JSON string otherwise."""
        body = body if body is not None else {}
        if self._credentials.upload and not force_json:
            return flatten_form_data(body)
        return json.dumps(body)
