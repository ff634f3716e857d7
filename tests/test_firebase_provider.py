import pytest

from phone_auth.application.errors import IdentityProviderError
from phone_auth.infrastructure.identity import firebase_provider as mod


class FakeUserRecord:
    def __init__(self, uid, phone_number):
        self.uid = uid
        self.phone_number = phone_number


@pytest.mark.asyncio
async def test_get_user_by_phone_found(monkeypatch):
    monkeypatch.setattr(mod.fb_auth, "get_user_by_phone_number", lambda phone, app=None: FakeUserRecord("uid-9", phone))
    user = await mod.FirebaseIdentityProvider().get_user_by_phone("+15551234567")
    assert user.uid == "uid-9"
    assert user.phone_number == "+15551234567"


@pytest.mark.asyncio
async def test_get_user_by_phone_not_found_returns_none(monkeypatch):
    def missing(phone, app=None):
        raise mod.fb_auth.UserNotFoundError("No user record found")

    monkeypatch.setattr(mod.fb_auth, "get_user_by_phone_number", missing)
    assert await mod.FirebaseIdentityProvider().get_user_by_phone("+15551234567") is None


@pytest.mark.asyncio
async def test_get_user_by_phone_other_failure_raises(monkeypatch):
    def bad(phone, app=None):
        raise ValueError("Invalid phone number")

    monkeypatch.setattr(mod.fb_auth, "get_user_by_phone_number", bad)
    with pytest.raises(IdentityProviderError):
        await mod.FirebaseIdentityProvider().get_user_by_phone("nope")


@pytest.mark.asyncio
async def test_create_user_duplicate_phone_raises(monkeypatch):
    def exists(phone_number=None, app=None):
        raise mod.fb_auth.PhoneNumberAlreadyExistsError("phone number already exists", None, None)

    monkeypatch.setattr(mod.fb_auth, "create_user", exists)
    with pytest.raises(IdentityProviderError) as exc:
        await mod.FirebaseIdentityProvider().create_user("+15551234567")
    assert "create user" in exc.value.message


@pytest.mark.asyncio
async def test_mint_custom_token_decodes_bytes(monkeypatch):
    monkeypatch.setattr(mod.fb_auth, "create_custom_token", lambda uid, app=None: b"signed." + uid.encode())
    token = await mod.FirebaseIdentityProvider().mint_custom_token("uid-1")
    assert token == "signed.uid-1"


@pytest.mark.asyncio
async def test_get_user_by_phone_transport_failure_raises_identity_error(monkeypatch):
    def unreachable(phone, app=None):
        raise RuntimeError("transport error: connection reset")

    monkeypatch.setattr(mod.fb_auth, "get_user_by_phone_number", unreachable)
    with pytest.raises(IdentityProviderError) as exc:
        await mod.FirebaseIdentityProvider().get_user_by_phone("+15551234567")
    assert "get user" in exc.value.message
