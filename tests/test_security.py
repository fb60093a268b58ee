"""Tests for tokens, password hashing and the role capability table."""

from miturno.api.deps import Capability, capabilities_for
from miturno.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)


class TestTokens:
    def test_access_token_carries_subject(self):
        assert decode_access_token(create_access_token(42)) == "42"

    def test_refresh_token_has_subject_and_jti(self):
        sub, jti = decode_refresh_token(create_refresh_token(7))
        assert sub == "7"
        assert jti

    def test_token_types_are_not_interchangeable(self):
        assert decode_access_token(create_refresh_token(1)) is None
        assert decode_refresh_token(create_access_token(1)) == (None, None)

    def test_garbage_token(self):
        assert decode_access_token("not-a-jwt") is None


def test_password_hash_round_trip():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


class TestCapabilities:
    def test_admin_has_everything(self):
        assert capabilities_for("admin") == frozenset(Capability)

    def test_employee_limited_to_own_data(self):
        caps = capabilities_for("employee")
        assert Capability.VIEW_OWN_APPOINTMENTS in caps
        assert Capability.MANAGE_SERVICES not in caps
        assert Capability.VIEW_DASHBOARD not in caps

    def test_unknown_role_has_nothing(self):
        assert capabilities_for("client") == frozenset()
