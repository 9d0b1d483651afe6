# Tests for oauth/scope_guard.py

import pytest

from attio_trust.core.errors import ArgumentError, InsufficientScopeError
from attio_trust.oauth.scope_guard import requires_scope
from attio_trust.oauth.token import Token


@requires_scope("record", "read")
def list_records(token, limit=10):
    """List records."""
    return {"limit": limit, "token": token.access_token}


class RecordService:
    @requires_scope("note", "write")
    def create_note(self, title, token=None):
        return title


class TestRequiresScope:
    def test_allows_exact_scope(self):
        assert list_records(Token("access-1", scope="record:read"), limit=5) == {"limit": 5, "token": "access-1"}

    def test_write_scope_satisfies_read(self):
        assert list_records(Token("access-1", scope="record:write"))["limit"] == 10

    def test_rejects_missing_scope(self):
        token = Token("access-1", scope="note:read")
        with pytest.raises(InsufficientScopeError) as excinfo:
            list_records(token)
        assert excinfo.value.required == "record:read"
        assert excinfo.value.granted == ["note:read"]
        assert "record:read" in str(excinfo.value)

    def test_token_keyword_on_method(self):
        service = RecordService()
        assert service.create_note("Call notes", token=Token("access-1", scope="note:write")) == "Call notes"
        with pytest.raises(InsufficientScopeError):
            service.create_note("Call notes", token=Token("access-1", scope="note:read"))

    def test_requires_a_token(self):
        with pytest.raises(ArgumentError, match="requires a Token"):
            list_records("not-a-token")

    def test_metadata(self):
        assert list_records.required_scope == "record:read"
        assert list_records.__name__ == "list_records"
        assert list_records.__doc__ == "List records."
