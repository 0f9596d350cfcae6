import pytest

from library_catalog_api.app.core.config import settings
from library_catalog_api.app.core.security import (
    create_access_token,
    decode_access_token,
    extract_bearer_token,
    resolve_current_user,
)
from library_catalog_api.app.services.user_service import UserService


class TestAccessTokens:
    def test_token_round_trip_keeps_claims(self):
        token = create_access_token({"username": "alice", "id": 7})

        payload = decode_access_token(token)

        assert payload["username"] == "alice"
        assert payload["id"] == 7
        assert "exp" in payload

    def test_tampered_signature_is_rejected(self):
        token = create_access_token({"username": "alice", "id": 7})
        header, payload, signature = token.split(".")
        forged = f"{header}.{payload}.{'A' * len(signature)}"

        assert decode_access_token(forged) is None

    def test_token_signed_with_other_secret_is_rejected(self, monkeypatch):
        token = create_access_token({"username": "alice", "id": 7})
        monkeypatch.setattr(settings, "secret_key", "another-secret")

        assert decode_access_token(token) is None

    def test_expired_token_is_rejected(self):
        token = create_access_token({"username": "alice", "id": 7}, expires_delta=-10)

        assert decode_access_token(token) is None

    @pytest.mark.parametrize("garbage", ["", "abc", "a.b", "a.b.c", "!!.??.**"])
    def test_malformed_token_is_rejected(self, garbage):
        assert decode_access_token(garbage) is None


class TestExtractBearerToken:
    def test_bearer_prefix_is_stripped(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_prefix_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    def test_bare_token_is_accepted(self):
        assert extract_bearer_token("abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "   ", "Bearer ", "Bearer    "])
    def test_missing_token(self, header):
        assert extract_bearer_token(header) is None


class TestResolveCurrentUser:
    @pytest.mark.asyncio
    async def test_valid_token_loads_user(self, database):
        user = await UserService.create_user("alice", "scifi")
        token = create_access_token({"username": "alice", "id": user.id})

        current = await resolve_current_user(f"Bearer {token}")

        assert current == user

    @pytest.mark.asyncio
    async def test_missing_header_is_anonymous(self, database):
        assert await resolve_current_user(None) is None

    @pytest.mark.asyncio
    async def test_invalid_token_is_anonymous(self, database):
        assert await resolve_current_user("Bearer not-a-token") is None

    @pytest.mark.asyncio
    async def test_token_for_deleted_user_is_anonymous(self, database):
        token = create_access_token({"username": "ghost", "id": 999})

        assert await resolve_current_user(f"Bearer {token}") is None

    @pytest.mark.asyncio
    async def test_token_without_id_is_anonymous(self, database):
        token = create_access_token({"username": "alice"})

        assert await resolve_current_user(token) is None
