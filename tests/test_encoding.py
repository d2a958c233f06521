"""
Tests for request encoding: headers, query strings and bodies.
"""

import json
from typing import Any

from hypothesis import given, strategies as st

from hotmart_payments import (
    CredentialState,
    HotmartConfig,
    QueryParam,
    RequestEncoder,
    encode_query,
    flatten_form_data,
)


def make_encoder(**config: Any) -> RequestEncoder:
    credentials = CredentialState(HotmartConfig(token="tok", basic="bas", **config))
    return RequestEncoder(credentials, config.get("headers"))


# =============================================================================
# Headers
# =============================================================================

class TestHeaders:
    """Default header assembly."""

    def test_bearer_json_defaults(self):
        headers = make_encoder().build_headers()
        assert headers == [
            ("Accept", "application/json"),
            ("Authorization", "Bearer tok"),
            ("Content-Type", "application/json"),
        ]

    def test_basic_while_authenticating(self):
        encoder = make_encoder()
        with encoder._credentials.authenticating_scope():
            headers = dict(encoder.build_headers())
        assert headers["Authorization"] == "Basic bas"

    def test_multipart_in_upload_mode(self):
        headers = dict(make_encoder(upload=True).build_headers())
        assert headers["Content-Type"] == "multipart/form-data"

    def test_extra_headers_appended_without_dedup(self):
        encoder = make_encoder(headers={"X-Tenant": "t1"})
        headers = encoder.build_headers([("Accept", "text/plain"), ("X-Trace", "abc")])
        assert headers[3:] == [
            ("X-Tenant", "t1"),
            ("Accept", "text/plain"),
            ("X-Trace", "abc"),
        ]
        assert [name for name, _ in headers].count("Accept") == 2


# =============================================================================
# Query strings
# =============================================================================

class TestQueryEncoding:
    """Query parameter filtering and encoding."""

    def test_empty_params(self):
        assert encode_query(None) == ""
        assert encode_query([]) == ""

    def test_zero_is_kept(self):
        assert encode_query([QueryParam("a", 0)]) == "?a=0"
        assert encode_query([QueryParam("a", "0")]) == "?a=0"

    def test_empty_name_or_value_dropped(self):
        query = encode_query([
            QueryParam("", "x"),
            QueryParam("b", ""),
            QueryParam("c", None),
            QueryParam("d", "1"),
        ])
        assert query == "?d=1"

    def test_only_invalid_params_gives_no_query(self):
        assert encode_query([QueryParam("", "x"), QueryParam("b", "")]) == ""

    def test_order_preserved_and_percent_encoded(self):
        query = encode_query([
            ("status", "ACTIVE"),
            ("max_results", 50),
            ("product name", "Curso & Mentoria"),
        ])
        assert query == "?status=ACTIVE&max_results=50&product+name=Curso+%26+Mentoria"

    def test_accepted_param_shapes(self):
        assert encode_query({"a": 1, "b": "x"}) == "?a=1&b=x"
        assert encode_query([{"name": "a", "value": 0}]) == "?a=0"
        assert encode_query([{"name": "page_token", "value": "p2"}]) == "?page_token=p2"

    def test_top_level_mapping_is_always_name_to_value(self):
        assert encode_query({"name": "John"}) == "?name=John"
        assert encode_query({"name": "John", "value": 5}) == "?name=John&value=5"

    def test_booleans_rendered_as_one_and_empty(self):
        assert encode_query([("send_mail", True), ("charge", False)]) == "?send_mail=1&charge="

    @given(st.lists(st.tuples(st.text(max_size=5), st.one_of(st.none(), st.text(max_size=5), st.integers()))))
    def test_only_valid_params_survive(self, pairs):
        """Property: one query entry per valid parameter."""
        params = [QueryParam(name, value) for name, value in pairs]
        expected = sum(1 for p in params if p.is_valid())
        query = encode_query(params)
        if expected == 0:
            assert query == ""
        else:
            assert query.startswith("?")
            assert len(query[1:].split("&")) == expected


# =============================================================================
# Bodies
# =============================================================================

class TestBodyEncoding:
    """JSON vs form body encoding."""

    def test_json_body(self):
        encoded = make_encoder().encode_body({"send_mail": True})
        assert json.loads(encoded) == {"send_mail": True}

    def test_missing_body_is_empty_json_object(self):
        assert make_encoder().encode_body(None) == "{}"

    def test_form_body_in_upload_mode(self):
        encoded = make_encoder(upload=True).encode_body({"subscriber_code": ["A", "B"], "charge": False})
        assert encoded == {"subscriber_code[0]": "A", "subscriber_code[1]": "B", "charge": False}

    def test_force_json_ignores_upload_mode(self):
        encoded = make_encoder(upload=True).encode_body({"due_day": 5}, force_json=True)
        assert encoded == '{"due_day": 5}'


class TestFlattenFormData:
    """Recursive form flattening."""

    def test_scalars_pass_through(self):
        assert flatten_form_data({"a": 1, "b": "x", "c": None}) == {"a": 1, "b": "x", "c": None}

    def test_nested_mapping(self):
        assert flatten_form_data({"a": {"b": 1, "c": {"d": 2}}}) == {"a[b]": 1, "a[c][d]": 2}

    def test_lists_use_indexes(self):
        assert flatten_form_data({"items": [{"id": 1}, {"id": 2}]}) == {
            "items[0][id]": 1,
            "items[1][id]": 2,
        }

    def test_empty_composite_disappears(self):
        assert flatten_form_data({"a": {}, "b": 1}) == {"b": 1}

    nested = st.recursive(
        st.one_of(st.integers(), st.text(max_size=3), st.booleans()),
        lambda children: st.one_of(
            st.lists(children, max_size=3),
            st.dictionaries(st.text(min_size=1, max_size=3), children, max_size=3),
        ),
        max_leaves=15,
    )

    @given(st.dictionaries(st.text(min_size=1, max_size=3), nested, max_size=4))
    def test_no_composites_remain(self, data):
        """Property: flattening always terminates with scalar values only."""
        flat = flatten_form_data(data)
        assert all(not isinstance(value, (dict, list)) for value in flat.values())
