"""
Tests for CredentialState: setters, prefix stripping and scoped state.
"""

import pytest
from hypothesis import given, strategies as st

from hotmart_payments import CredentialState, Environment, HotmartConfig


class TestEnvironment:
    """Environment switching."""

    def test_default_is_production(self):
        assert CredentialState().environment == Environment.PRODUCTION

    @pytest.mark.parametrize("value", [2, Environment.SANDBOX])
    def test_accepts_sandbox_forms(self, value):
        state = CredentialState()
        state.set_environment(value)
        assert state.environment == Environment.SANDBOX

    @given(st.integers().filter(lambda n: n not in (1, 2)))
    def test_invalid_int_keeps_previous_value(self, value):
        """Property: any environment outside {1, 2} leaves the value unchanged."""
        state = CredentialState(HotmartConfig(environment=Environment.SANDBOX))
        state.set_environment(value)
        assert state.environment == Environment.SANDBOX

    @pytest.mark.parametrize("value", [None, "", "staging", 1.5, True, [], "3", "2", "sandbox", "production"])
    def test_invalid_values_are_ignored(self, value):
        state = CredentialState()
        state.set_environment(value)
        assert state.environment == Environment.PRODUCTION

    @pytest.mark.parametrize("text, expected", [
        ("1", Environment.PRODUCTION),
        ("sandbox", Environment.SANDBOX),
        (" Production ", Environment.PRODUCTION),
        ("staging", None),
        ("", None),
    ])
    def test_parse_reads_environment_variable_forms(self, text, expected):
        assert Environment.parse(text) is expected

    def test_invalid_config_environment_falls_back_to_production(self):
        state = CredentialState(HotmartConfig(environment=7))
        assert state.environment == Environment.PRODUCTION


class TestTokenPrefixes:
    """Bearer/Basic prefix stripping."""

    @pytest.mark.parametrize("token", ["Bearer abc", "bearer abc", "BEARER abc", "abc"])
    def test_bearer_prefix_stripped(self, token):
        state = CredentialState()
        state.set_bearer_token(token)
        assert state.bearer_token == "abc"

    @pytest.mark.parametrize("token", ["Basic abc", "basic abc", "abc"])
    def test_basic_prefix_stripped(self, token):
        state = CredentialState()
        state.set_basic_token(token)
        assert state.basic_token == "abc"

    def test_only_leading_prefix_removed(self):
        state = CredentialState()
        state.set_bearer_token("Bearer xBearer y")
        assert state.bearer_token == "xBearer y"

    @given(st.from_regex(r"[A-Za-z0-9._~+/=-]+", fullmatch=True))
    def test_prefixed_token_round_trips(self, token):
        """Property: "Bearer <t>" always stores <t>."""
        state = CredentialState()
        state.bearer_token = f"Bearer {token}"
        assert state.bearer_token == token

    def test_config_tokens_are_normalized(self):
        state = CredentialState(HotmartConfig(token="Bearer t1", basic="Basic b1"))
        assert state.bearer_token == "t1"
        assert state.basic_token == "b1"


class TestFlags:
    """Behaviour flags."""

    def test_defaults(self):
        state = CredentialState()
        assert not state.debug
        assert not state.upload
        assert state.decode
        assert not state.authenticating

    def test_setters(self):
        state = CredentialState()
        state.set_debug(True)
        state.set_upload(True)
        state.set_decode(False)
        state.client_id = "id"
        state.client_secret = "secret"
        assert (state.debug, state.upload, state.decode) == (True, True, False)
        assert (state.client_id, state.client_secret) == ("id", "secret")


class TestScopes:
    """Scoped transient state always restores."""

    def test_authenticating_scope(self):
        state = CredentialState()
        with state.authenticating_scope():
            assert state.authenticating
        assert not state.authenticating

    def test_authenticating_scope_resets_on_error(self):
        state = CredentialState()
        with pytest.raises(RuntimeError):
            with state.authenticating_scope():
                raise RuntimeError("boom")
        assert not state.authenticating

    def test_temporary_token_restores(self):
        state = CredentialState(HotmartConfig(token="original"))
        with state.temporary_token("Bearer other"):
            assert state.bearer_token == "other"
        assert state.bearer_token == "original"

    def test_temporary_token_restores_on_error(self):
        state = CredentialState(HotmartConfig(token="original"))
        with pytest.raises(ValueError):
            with state.temporary_token("other"):
                raise ValueError("boom")
        assert state.bearer_token == "original"
