from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import select

from devmeet.backend.auth import verify_password
from devmeet.backend.exceptions import (
    AlreadyVerifiedError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExpiredError,
    InvalidCodeError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from devmeet.backend.models import PendingSignup, User
from devmeet.backend.schemas import ChangePasswordRequest, LoginRequest, SignupRequest
from devmeet.backend.services import AuthService

from conftest import PASSWORD

EMAIL = "ada@example.com"


def signup_request(email=EMAIL, **fields):
    values = {
        "firstname": "Ada",
        "lastname": "Lovelace",
        "email": email,
        "password": PASSWORD,
        "wants_to_learn": "Rust, rust, Go",
        "can_teach": ["Python"],
    }
    values.update(fields)
    return SignupRequest(**values)


async def pending_rows(session, email=EMAIL):
    result = await session.execute(select(PendingSignup).where(PendingSignup.email == email))
    return result.scalars().all()


async def live_accounts(session, email=EMAIL):
    result = await session.execute(
        select(User).where(User.email == email, User.deleted_at.is_(None))
    )
    return result.scalars().all()


# ---------------------------------------------------------------------------
# Signup
# ---------------------------------------------------------------------------


def test_signup_request_rejects_weak_password():
    with pytest.raises(PydanticValidationError):
        signup_request(password="weakpass")


def test_signup_request_rejects_blank_names():
    with pytest.raises(PydanticValidationError):
        signup_request(firstname="   ")


def test_signup_request_normalizes_email_and_skills():
    request = signup_request(email="ADA@Example.com")
    assert request.email == "ada@example.com"
    assert request.wants_to_learn == ["Rust", "Go"]


async def test_begin_signup_creates_pending_not_account(session, notifier):
    response, created = await AuthService.begin_signup(session, signup_request(), notifier)

    assert created is True
    assert response.requires_verification is True
    assert response.dev_mode is False
    assert response.otp is None

    rows = await pending_rows(session)
    assert len(rows) == 1
    code = notifier.last_passcode(EMAIL)
    assert rows[0].email_verification_otp == code
    assert len(code) == 6 and code.isdigit()
    assert rows[0].hashed_password != PASSWORD
    assert await live_accounts(session) == []


async def test_begin_signup_twice_refreshes_in_place(session, notifier):
    await AuthService.begin_signup(session, signup_request(), notifier)

    _, created = await AuthService.begin_signup(session, signup_request(), notifier)

    assert created is False
    rows = await pending_rows(session)
    assert len(rows) == 1
    assert len(notifier.passcodes) == 2
    assert rows[0].email_verification_otp == notifier.last_passcode(EMAIL)


async def test_concurrent_begin_signup_becomes_refresh(session, notifier, monkeypatch):
    await AuthService.begin_signup(session, signup_request(), notifier)

    # Miss the existing row once, as if both signups checked at the same time
    lookup = AuthService._get_pending
    calls = []

    async def stale_lookup(session, email):
        calls.append(email)
        if len(calls) == 1:
            return None
        return await lookup(session, email)

    monkeypatch.setattr(AuthService, "_get_pending", staticmethod(stale_lookup))

    response, created = await AuthService.begin_signup(session, signup_request(), notifier)

    assert created is False
    assert response.success is True
    assert len(calls) == 2
    rows = await pending_rows(session)
    assert len(rows) == 1
    assert rows[0].email_verification_otp == notifier.last_passcode(EMAIL)


async def test_begin_signup_conflicts_with_verified_account(session, notifier, make_user):
    await make_user(EMAIL)
    with pytest.raises(ConflictError):
        await AuthService.begin_signup(session, signup_request(), notifier)
    assert await pending_rows(session) == []


async def test_begin_signup_reconciles_legacy_unverified_account(session, notifier, make_user):
    legacy = await make_user(EMAIL, is_email_verified=False)

    _, created = await AuthService.begin_signup(session, signup_request(), notifier)

    assert created is True
    await session.refresh(legacy)
    assert legacy.is_deleted
    assert await live_accounts(session) == []
    assert len(await pending_rows(session)) == 1


async def test_delivery_failure_in_development_returns_passcode(session, notifier):
    notifier.fail = True

    response, created = await AuthService.begin_signup(session, signup_request(), notifier)

    assert created is True
    assert response.dev_mode is True
    rows = await pending_rows(session)
    assert response.otp == rows[0].email_verification_otp


async def test_delivery_failure_in_production_rolls_back(session, notifier, production):
    notifier.fail = True

    with pytest.raises(UpstreamUnavailableError):
        await AuthService.begin_signup(session, signup_request(), notifier)

    assert await pending_rows(session) == []


async def test_production_refresh_failure_keeps_existing_pending(session, notifier, production):
    await AuthService.begin_signup(session, signup_request(), notifier)
    notifier.fail = True

    with pytest.raises(UpstreamUnavailableError):
        await AuthService.begin_signup(session, signup_request(), notifier)

    assert len(await pending_rows(session)) == 1


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


async def test_verify_promotes_pending_to_account(session, notifier):
    await AuthService.begin_signup(session, signup_request(), notifier)
    code = notifier.last_passcode(EMAIL)

    user = await AuthService.verify_passcode(session, EMAIL, code, notifier)

    assert user.is_email_verified is True
    assert user.firstname == "Ada"
    assert user.wants_to_learn == ["Rust", "Go"]
    assert await pending_rows(session) == []
    assert len(await live_accounts(session)) == 1
    assert notifier.welcomes == [EMAIL]


async def test_verify_wrong_code(session, notifier):
    await AuthService.begin_signup(session, signup_request(), notifier)
    code = notifier.last_passcode(EMAIL)
    wrong = "000000" if code != "000000" else "111111"

    with pytest.raises(InvalidCodeError):
        await AuthService.verify_passcode(session, EMAIL, wrong, notifier)

    assert len(await pending_rows(session)) == 1
    assert await live_accounts(session) == []


async def test_verify_non_ascii_code_is_a_mismatch(session, notifier, make_user):
    await AuthService.begin_signup(session, signup_request(), notifier)

    with pytest.raises(InvalidCodeError):
        await AuthService.verify_passcode(session, EMAIL, "\u0661\u0662\u0663\u0664\u0665\u0666", notifier)

    await make_user("grace@example.com", is_email_verified=False)
    await AuthService.resend_passcode(session, "grace@example.com", notifier)
    with pytest.raises(InvalidCodeError):
        await AuthService.verify_passcode(session, "grace@example.com", "\u00e9\u00e9\u00e9", notifier)


async def test_verify_expired_code(session, notifier):
    await AuthService.begin_signup(session, signup_request(), notifier)
    code = notifier.last_passcode(EMAIL)
    pending = (await pending_rows(session))[0]
    pending.otp_expiry = datetime.now() - timedelta(seconds=1)
    session.add(pending)
    await session.commit()

    with pytest.raises(ExpiredError):
        await AuthService.verify_passcode(session, EMAIL, code, notifier)

    assert await live_accounts(session) == []


async def test_verify_without_pending(session, notifier):
    with pytest.raises(NotFoundError):
        await AuthService.verify_passcode(session, EMAIL, "123456", notifier)


async def test_verify_welcome_failure_is_swallowed(session, notifier):
    await AuthService.begin_signup(session, signup_request(), notifier)
    notifier.fail_welcome = True

    user = await AuthService.verify_passcode(
        session, EMAIL, notifier.last_passcode(EMAIL), notifier
    )

    assert user.id is not None


async def test_verify_when_account_already_verified(session, notifier, make_user):
    await AuthService.begin_signup(session, signup_request(), notifier)
    await make_user(EMAIL)

    with pytest.raises(AlreadyVerifiedError):
        await AuthService.verify_passcode(
            session, EMAIL, notifier.last_passcode(EMAIL), notifier
        )

    assert await pending_rows(session) == []


async def test_concurrent_verify_raises_already_verified(session, notifier, make_user, monkeypatch):
    await AuthService.begin_signup(session, signup_request(), notifier)
    code = notifier.last_passcode(EMAIL)
    # Another request verified the same email after this one looked
    await make_user(EMAIL)

    async def no_account(session, email):
        return None

    monkeypatch.setattr(AuthService, "_get_account", staticmethod(no_account))

    with pytest.raises(AlreadyVerifiedError):
        await AuthService.verify_passcode(session, EMAIL, code, notifier)

    assert len(await live_accounts(session)) == 1


# ---------------------------------------------------------------------------
# Resend and legacy accounts
# ---------------------------------------------------------------------------


async def test_resend_refreshes_pending(session, notifier):
    await AuthService.begin_signup(session, signup_request(), notifier)

    response = await AuthService.resend_passcode(session, EMAIL, notifier)

    assert response.success is True
    rows = await pending_rows(session)
    assert rows[0].email_verification_otp == notifier.last_passcode(EMAIL)


async def test_resend_unknown_email(session, notifier):
    with pytest.raises(NotFoundError):
        await AuthService.resend_passcode(session, EMAIL, notifier)


async def test_resend_verified_account(session, notifier, make_user):
    await make_user(EMAIL)
    with pytest.raises(AlreadyVerifiedError):
        await AuthService.resend_passcode(session, EMAIL, notifier)


async def test_legacy_account_resend_then_verify(session, notifier, make_user):
    legacy = await make_user(EMAIL, is_email_verified=False)

    await AuthService.resend_passcode(session, EMAIL, notifier)
    code = notifier.last_passcode(EMAIL)
    user = await AuthService.verify_passcode(session, EMAIL, code, notifier)

    assert user.id == legacy.id
    assert user.is_email_verified is True
    assert user.email_verification_otp is None


async def test_resend_in_development_returns_passcode_on_failure(session, notifier):
    await AuthService.begin_signup(session, signup_request(), notifier)
    notifier.fail = True

    response = await AuthService.resend_passcode(session, EMAIL, notifier)

    assert response.dev_mode is True
    assert response.otp == (await pending_rows(session))[0].email_verification_otp


# ---------------------------------------------------------------------------
# Login and passwords
# ---------------------------------------------------------------------------


async def test_login(session, make_user):
    user = await make_user(EMAIL)

    response = await AuthService.login(session, LoginRequest(email=EMAIL, password=PASSWORD))

    assert response.access_token
    assert response.user.id == user.id


async def test_login_failures(session, make_user):
    await make_user(EMAIL)
    await make_user("grace@example.com", is_email_verified=False)

    with pytest.raises(AuthenticationError):
        await AuthService.login(session, LoginRequest(email="nobody@example.com", password=PASSWORD))
    with pytest.raises(AuthenticationError):
        await AuthService.login(session, LoginRequest(email=EMAIL, password="Wrong1!x"))
    with pytest.raises(ValidationError):
        await AuthService.login(
            session, LoginRequest(email="grace@example.com", password=PASSWORD)
        )


async def test_change_password(session, make_user):
    user = await make_user(EMAIL)

    with pytest.raises(AuthenticationError):
        await AuthService.change_password(
            session, user, ChangePasswordRequest(current_password="nope", new_password="newpass1")
        )

    await AuthService.change_password(
        session, user, ChangePasswordRequest(current_password=PASSWORD, new_password="newpass1")
    )
    assert verify_password("newpass1", user.hashed_password)


async def test_password_reset_round_trip(session, notifier, make_user):
    user = await make_user(EMAIL)

    response = await AuthService.request_password_reset(session, EMAIL, notifier)
    assert response.reset_token is None
    _, token = notifier.resets[-1]

    await AuthService.complete_password_reset(session, token, "brandnew")
    await session.refresh(user)
    assert verify_password("brandnew", user.hashed_password)
    assert user.reset_password_token is None

    # Single use
    with pytest.raises(InvalidOrExpiredTokenError):
        await AuthService.complete_password_reset(session, token, "another1")


async def test_password_reset_unknown_email_looks_like_success(session, notifier):
    response = await AuthService.request_password_reset(session, "ghost@example.com", notifier)
    assert response.success is True
    assert notifier.resets == []


async def test_password_reset_requires_verified_account(session, notifier, make_user):
    await make_user(EMAIL, is_email_verified=False)
    with pytest.raises(ValidationError):
        await AuthService.request_password_reset(session, EMAIL, notifier)


async def test_password_reset_expired_token(session, notifier, make_user):
    user = await make_user(EMAIL)
    await AuthService.request_password_reset(session, EMAIL, notifier)
    _, token = notifier.resets[-1]
    user.reset_password_expiry = datetime.now() - timedelta(minutes=1)
    session.add(user)
    await session.commit()

    with pytest.raises(InvalidOrExpiredTokenError):
        await AuthService.complete_password_reset(session, token, "brandnew")

    await session.refresh(user)
    assert user.reset_password_token is None


async def test_password_reset_delivery_failure(session, notifier, make_user, production):
    user = await make_user(EMAIL)
    notifier.fail = True

    with pytest.raises(UpstreamUnavailableError):
        await AuthService.request_password_reset(session, EMAIL, notifier)

    await session.refresh(user)
    assert user.reset_password_token is None


async def test_password_reset_delivery_failure_in_development(session, notifier, make_user):
    user = await make_user(EMAIL)
    notifier.fail = True

    response = await AuthService.request_password_reset(session, EMAIL, notifier)

    assert response.dev_mode is True
    assert response.reset_token
    assert response.reset_url.endswith(response.reset_token)

    # The inline token is the only way through, so it must still work
    await AuthService.complete_password_reset(session, response.reset_token, "brandnew")
    await session.refresh(user)
    assert verify_password("brandnew", user.hashed_password)


# ---------------------------------------------------------------------------
# Admin promotion
# ---------------------------------------------------------------------------


async def test_create_admin(session, make_user):
    user = await make_user(EMAIL)

    with pytest.raises(AuthorizationError):
        await AuthService.create_admin(session, EMAIL, "wrong-secret")

    await AuthService.create_admin(session, EMAIL, "test-admin-secret")
    await session.refresh(user)
    assert user.is_admin is True

    with pytest.raises(ConflictError):
        await AuthService.create_admin(session, EMAIL, "test-admin-secret")
    with pytest.raises(NotFoundError):
        await AuthService.create_admin(session, "ghost@example.com")
