# Tests for oauth/scopes.py

import pytest

from attio_trust.core.errors import ArgumentError, InvalidScopeError
from attio_trust.oauth import scopes
from attio_trust.oauth.scopes import (
    DEFAULT_SCOPES,
    SCOPE_DEFINITIONS,
    SCOPE_HIERARCHY,
    VALID_SCOPES,
    Scope,
)

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_every_enum_member_is_registered(self):
        assert {scope.value for scope in Scope} == set(VALID_SCOPES)

    def test_hierarchy_only_references_registered_scopes(self):
        for write_scope, implied in SCOPE_HIERARCHY.items():
            assert write_scope in VALID_SCOPES
            assert all(scope in VALID_SCOPES for scope in implied)

    def test_default_scopes_are_registered(self):
        assert all(scope in VALID_SCOPES for scope in DEFAULT_SCOPES)
        assert "user:read" in DEFAULT_SCOPES

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            SCOPE_DEFINITIONS["custom:read"] = "nope"
        with pytest.raises(TypeError):
            SCOPE_HIERARCHY["user:write"] = ("user:read",)

    def test_description(self):
        assert scopes.description("record:read") == "Read access to records"
        assert scopes.description(Scope.NOTE_WRITE).startswith("Write access to notes")
        assert scopes.description("unknown:read") is None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidate:
    def test_returns_scopes_in_input_order(self):
        assert scopes.validate(["note:write", "record:read"]) == ["note:write", "record:read"]

    def test_accepts_enum_members(self):
        assert scopes.validate([Scope.LIST_READ, "task:write"]) == ["list:read", "task:write"]

    def test_single_string_is_one_scope(self):
        assert scopes.normalize("record:read") == ["record:read"]
        with pytest.raises(InvalidScopeError):
            scopes.validate("record:read note:read")

    def test_none_is_empty(self):
        assert scopes.validate(None) == []

    def test_lists_every_invalid_scope(self):
        with pytest.raises(InvalidScopeError) as excinfo:
            scopes.validate(["record:read", "foo:bar", "user:write"])
        assert excinfo.value.invalid_scopes == ["foo:bar", "user:write"]
        assert str(excinfo.value) == "Invalid scopes: foo:bar, user:write"

    def test_invalid_scope_error_is_argument_error(self):
        with pytest.raises(ArgumentError):
            scopes.validate(["nope"])
        with pytest.raises(ValueError):
            scopes.validate(["nope"])

    def test_is_valid(self):
        assert scopes.is_valid("webhook:write")
        assert not scopes.is_valid("user:write")


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


class TestHierarchy:
    def test_expand_adds_implied_reads(self):
        assert scopes.expand(["record:write", "list:write"]) == [
            "list:read", "list:write", "record:read", "record:write"
        ]

    def test_expand_deduplicates(self):
        assert scopes.expand(["record:write", "record:read", "record:write"]) == ["record:read", "record:write"]

    def test_expand_read_only_scope_is_unchanged(self):
        assert scopes.expand(["user:read"]) == ["user:read"]

    def test_minimize_drops_implied_reads(self):
        assert scopes.minimize(["record:read", "record:write", "list:read"]) == ["list:read", "record:write"]

    def test_minimize_of_expand_is_minimal(self):
        original = ["note:write", "task:write", "user:read"]
        assert scopes.minimize(scopes.expand(original)) == sorted(original)

    @pytest.mark.parametrize("granted", [
        ["record:read", "record:write", "note:read"],
        ["list:write", "user:read"],
        [],
    ])
    def test_expand_minimize_laws(self, granted):
        assert scopes.expand(scopes.minimize(granted)) == scopes.expand(granted)
        assert scopes.minimize(scopes.minimize(granted)) == scopes.minimize(granted)

    def test_includes_direct_and_implied(self):
        assert scopes.includes(["record:write"], "record:write")
        assert scopes.includes(["record:write"], "record:read")
        assert not scopes.includes(["record:read"], "record:write")
        assert not scopes.includes([], "record:read")

    def test_group_by_resource(self):
        grouped = scopes.group_by_resource(["record:read", "note:write", "record:write"])
        assert grouped == {"record": ["record:read", "record:write"], "note": ["note:write"]}

    def test_sufficient_for(self):
        assert scopes.sufficient_for(["comment:write"], "comment", "read")
        assert not scopes.sufficient_for(["comment:read"], "comment", "write")

    def test_missing_keeps_required_order(self):
        granted = ["record:write", "user:read"]
        assert scopes.missing(granted, ["note:read", "record:read", "list:write"]) == ["note:read", "list:write"]
        assert scopes.missing(granted, ["record:read"]) == []
