import time
from datetime import timedelta

import pytest
from bson import ObjectId
from jose import jwt

from backend.middleware.jwt_auth import (
    ALGORITHM,
    SECRET_KEY,
    InvalidTokenError,
    create_access_token,
    extract_bearer_token,
    get_user_from_token,
    hash_password,
    verify_password,
    verify_token,
)


class TestPasswordHashing:
    def test_hash_verifies_original_password(self):
        hashed = hash_password("s3cret")
        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed) is True

    def test_wrong_password_does_not_verify(self):
        assert verify_password("nope", hash_password("s3cret")) is False

    def test_salt_varies_between_calls(self):
        first, second = hash_password("same"), hash_password("same")
        assert first != second
        assert verify_password("same", first)
        assert verify_password("same", second)

    def test_garbage_hash_is_rejected_not_raised(self):
        assert verify_password("s3cret", "not-a-bcrypt-hash") is False


class TestTokens:
    def test_round_trip_carries_user_id(self):
        user_id = str(ObjectId())
        payload = verify_token(create_access_token(user_id))
        assert payload["id"] == user_id

    def test_expiry_is_seven_days_after_issue(self):
        token = create_access_token("abc")
        claims = jwt.get_unverified_claims(token)
        issued_window = claims["exp"] - timedelta(days=7).total_seconds()
        # exp is issuance + 7 days, give or take the test's own runtime
        assert abs(issued_window - time.time()) < 60

    def test_expired_token_fails(self):
        token = create_access_token("abc", expires_delta=timedelta(seconds=-10))
        with pytest.raises(InvalidTokenError):
            verify_token(token)

    def test_tampered_token_fails(self):
        token = create_access_token("abc")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        with pytest.raises(InvalidTokenError):
            verify_token(tampered)

    def test_token_signed_with_other_key_fails(self):
        token = create_access_token("abc", secret_key="another-key")
        with pytest.raises(InvalidTokenError):
            verify_token(token)

    def test_malformed_token_fails(self):
        with pytest.raises(InvalidTokenError):
            verify_token("definitely.not.a-jwt")

    def test_token_without_id_fails(self):
        token = jwt.encode({"sub": "someone"}, SECRET_KEY, algorithm=ALGORITHM)
        with pytest.raises(InvalidTokenError):
            verify_token(token)


class TestExtractBearerToken:
    @pytest.mark.parametrize("header,expected", [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc.def.ghi", "abc.def.ghi"),
        ("abc.def.ghi", "abc.def.ghi"),
        ("  Bearer   abc  ", "abc"),
        ("Bearer ", None),
        ("", None),
        (None, None),
    ])
    def test_extract(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestSessionResolution:
    @pytest.mark.asyncio
    async def test_valid_token_resolves_user(self, store, alice):
        token = create_access_token(str(alice["_id"]))
        user = await get_user_from_token(token, store)
        assert user["_id"] == alice["_id"]

    @pytest.mark.asyncio
    async def test_missing_token_is_anonymous_without_store_access(self, store):
        assert await get_user_from_token(None, store) is None
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_invalid_token_is_anonymous(self, store, alice):
        assert await get_user_from_token("garbage", store) is None
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_expired_token_is_anonymous(self, store, alice):
        token = create_access_token(str(alice["_id"]), expires_delta=timedelta(seconds=-1))
        assert await get_user_from_token(token, store) is None

    @pytest.mark.asyncio
    async def test_id_that_is_not_an_object_id_is_anonymous(self, store):
        token = create_access_token("not-an-object-id")
        assert await get_user_from_token(token, store) is None
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_unknown_user_is_anonymous(self, store):
        token = create_access_token(str(ObjectId()))
        assert await get_user_from_token(token, store) is None
