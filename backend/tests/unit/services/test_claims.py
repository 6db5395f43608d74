"""Unit tests for the claim model and scope flattening."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tokenauth.services.tokens.claims import ISSUER, ClaimModel, RoleGrant, build_scope

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


def _claims(**overrides) -> ClaimModel:
    values = {
        "subject": "alice",
        "id": "0123456789abcdef0123456789abcdef",
        "issuer": ISSUER,
        "issued_at": T0,
        "expiration": T0 + timedelta(minutes=15),
        "scope": "ROLE_Admin DeleteUser",
    }
    values.update(overrides)
    return ClaimModel(**values)


class TestBuildScope:
    def test_roles_then_permissions_in_order(self):
        roles = [RoleGrant("Admin", ("DeleteUser",)), RoleGrant("Viewer")]
        assert build_scope(roles) == "ROLE_Admin DeleteUser ROLE_Viewer"

    def test_empty_roles_give_empty_scope(self):
        assert build_scope([]) == ""

    def test_no_deduplication_across_roles(self):
        roles = [RoleGrant("A", ("Read",)), RoleGrant("B", ("Read", "Write"))]
        assert build_scope(roles) == "ROLE_A Read ROLE_B Read Write"

    @pytest.mark.parametrize(
        "name, permissions",
        [
            ("", ()),
            ("Read Only", ()),
            ("Admin", ("Delete User",)),
            ("Admin", ("",)),
            ("Admin", ("Tab\tbed",)),
        ],
    )
    def test_blank_or_spaced_names_rejected(self, name, permissions):
        """Such names would split into extra or missing scope entries."""
        with pytest.raises(ValueError):
            RoleGrant(name, permissions)

    def test_scope_entries_match_grants(self):
        roles = [RoleGrant("Admin", ("DeleteUser",)), RoleGrant("Viewer")]
        claims = _claims(scope=build_scope(roles))
        assert claims.scope_entries == ["ROLE_Admin", "DeleteUser", "ROLE_Viewer"]


class TestClaimModel:
    def test_payload_uses_registered_names_and_integer_seconds(self):
        payload = _claims().to_payload()
        assert payload == {
            "sub": "alice",
            "jti": "0123456789abcdef0123456789abcdef",
            "iss": ISSUER,
            "iat": int(T0.timestamp()),
            "exp": int(T0.timestamp()) + 900,
            "scope": "ROLE_Admin DeleteUser",
        }

    def test_from_payload_restores_model(self):
        original = _claims()
        assert ClaimModel.from_payload(original.to_payload()) == original

    def test_from_payload_defaults_scope_to_empty(self):
        payload = _claims().to_payload()
        del payload["scope"]
        assert ClaimModel.from_payload(payload).scope == ""

    def test_timestamps_are_utc_aware(self):
        restored = ClaimModel.from_payload(_claims().to_payload())
        assert restored.issued_at.tzinfo is not None
        assert restored.issued_at.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("subject", ["", None])
    def test_subject_required(self, subject):
        with pytest.raises(ValueError):
            _claims(subject=subject)

    def test_expiration_must_follow_issue(self):
        with pytest.raises(ValueError):
            _claims(expiration=T0)

    def test_frozen(self):
        claims = _claims()
        with pytest.raises(AttributeError):
            claims.subject = "mallory"  # type: ignore[misc]

    def test_missing_claim_raises_key_error(self):
        payload = _claims().to_payload()
        del payload["jti"]
        with pytest.raises(KeyError):
            ClaimModel.from_payload(payload)

    @pytest.mark.parametrize(
        "field,value",
        [("sub", 42), ("scope", ["ROLE_Admin"]), ("iat", "yesterday"), ("exp", True)],
    )
    def test_ill_typed_claims_raise_type_error(self, field, value):
        payload = _claims().to_payload()
        payload[field] = value
        with pytest.raises(TypeError):
            ClaimModel.from_payload(payload)

    def test_scope_entries_split_on_spaces(self):
        assert _claims(scope="").scope_entries == []
        assert _claims(scope="ROLE_A x").scope_entries == ["ROLE_A", "x"]
