"""
Tests for AuthService orchestration: registration, login, token rotation,
logout and password changes.
"""
import pytest
from sqlalchemy.exc import SQLAlchemyError

from woundiq.auth.exceptions import (
    AccountNotFoundException,
    EmailAlreadyExistsException,
    InternalErrorException,
    InvalidCredentialsException,
    InvalidRoleException,
    InvalidTokenException,
    ProfileMissingException,
    UserInactiveException,
    WeakPasswordException,
)
from woundiq.auth.models import User, UserRole
from woundiq.core.security import PasswordStrength
from woundiq.patients.models import Patient


def register_patient(auth_service, email="a@x.com", password="secret1"):
    return auth_service.register(email, password, "A", "B", "patient")


def deactivate(db, user_id):
    db.query(User).filter(User.id == user_id).update({"is_active": False})
    db.commit()


def test_register_returns_profile_and_tokens(auth_service, token_issuer):
    result = register_patient(auth_service)

    assert result.user.email == "a@x.com"
    assert result.user.first_name == "A"
    assert result.user.last_name == "B"
    assert result.user.role == UserRole.PATIENT
    claims = token_issuer.verify_access_token(result.token)
    assert claims.user_id == result.user.id
    assert claims.role == "patient"
    assert token_issuer.verify_refresh_token(result.refresh_token) == result.user.id


def test_register_persists_refresh_token(auth_service, repository):
    result = register_patient(auth_service)

    assert repository.validate_refresh_token(result.refresh_token).user_id == result.user.id


def test_register_same_email_twice(db, auth_service):
    register_patient(auth_service)

    with pytest.raises(EmailAlreadyExistsException):
        register_patient(auth_service, password="another1")

    assert db.query(User).filter(User.email == "a@x.com").count() == 1


@pytest.mark.parametrize("password, reason", [
    ("short", PasswordStrength.TOO_SHORT),
    ("x" * 101, PasswordStrength.TOO_LONG),
])
def test_register_rejects_weak_password(db, auth_service, password, reason):
    with pytest.raises(WeakPasswordException) as exc_info:
        register_patient(auth_service, password=password)

    assert exc_info.value.reason == reason
    assert db.query(User).count() == 0


def test_register_rejects_unknown_role(db, auth_service):
    with pytest.raises(InvalidRoleException):
        auth_service.register("a@x.com", "secret1", "A", "B", "surgeon")

    assert db.query(User).count() == 0


def test_login_returns_same_account(auth_service):
    registered = register_patient(auth_service)

    result = auth_service.login("a@x.com", "secret1")

    assert result.user.id == registered.user.id
    assert result.token
    assert result.refresh_token != registered.refresh_token


def test_unknown_email_and_wrong_password_are_indistinguishable(auth_service):
    register_patient(auth_service)

    with pytest.raises(InvalidCredentialsException) as unknown_email:
        auth_service.login("nobody@x.com", "secret1")
    with pytest.raises(InvalidCredentialsException) as wrong_password:
        auth_service.login("a@x.com", "wrong")

    assert unknown_email.value.detail == wrong_password.value.detail
    assert unknown_email.value.status_code == wrong_password.value.status_code == 401


def test_login_rejects_inactive_account(db, auth_service):
    registered = register_patient(auth_service)
    deactivate(db, registered.user.id)

    with pytest.raises(UserInactiveException):
        auth_service.login("a@x.com", "secret1")


def test_login_survives_refresh_token_save_failure(auth_service, repository, token_issuer, monkeypatch):
    registered = register_patient(auth_service)

    def failing_save(*args, **kwargs):
        raise SQLAlchemyError("refresh_tokens unavailable")

    monkeypatch.setattr(repository, "save_refresh_token", failing_save)

    result = auth_service.login("a@x.com", "secret1")

    assert token_issuer.verify_access_token(result.token).user_id == registered.user.id
    with pytest.raises(InvalidTokenException):
        repository.validate_refresh_token(result.refresh_token)


def test_login_with_missing_profile_is_integrity_fault(db, auth_service):
    registered = register_patient(auth_service)
    db.query(Patient).filter(Patient.user_id == registered.user.id).delete()
    db.commit()

    with pytest.raises(ProfileMissingException) as exc_info:
        auth_service.login("a@x.com", "secret1")

    assert exc_info.value.user_id == registered.user.id
    with pytest.raises(ProfileMissingException):
        auth_service.get_profile(registered.user.id)


def test_refresh_rotates_and_prevents_replay(auth_service, token_issuer):
    registered = register_patient(auth_service)

    rotated = auth_service.refresh(registered.refresh_token)

    assert rotated.refresh_token != registered.refresh_token
    assert token_issuer.verify_access_token(rotated.token).user_id == registered.user.id
    with pytest.raises(InvalidTokenException):
        auth_service.refresh(registered.refresh_token)

    # The replacement is itself usable exactly once
    auth_service.refresh(rotated.refresh_token)
    with pytest.raises(InvalidTokenException):
        auth_service.refresh(rotated.refresh_token)


def test_refresh_rejects_garbage_and_unstored_tokens(auth_service, token_issuer):
    registered = register_patient(auth_service)

    with pytest.raises(InvalidTokenException):
        auth_service.refresh("garbage")

    unstored = token_issuer.create_refresh_token(registered.user.id)
    with pytest.raises(InvalidTokenException):
        auth_service.refresh(unstored.token)


def test_login_rejects_prefix_of_long_password(auth_service):
    auth_service.register("long@x.com", "p" * 72 + "correct-tail", "A", "B", "patient")

    with pytest.raises(InvalidCredentialsException):
        auth_service.login("long@x.com", "p" * 72)
    assert auth_service.login("long@x.com", "p" * 72 + "correct-tail").user.email == "long@x.com"


def test_refresh_with_missing_profile_keeps_token_usable(db, auth_service, repository):
    registered = register_patient(auth_service)
    db.query(Patient).filter(Patient.user_id == registered.user.id).delete()
    db.commit()

    with pytest.raises(ProfileMissingException):
        auth_service.refresh(registered.refresh_token)

    assert repository.validate_refresh_token(registered.refresh_token).user_id == registered.user.id


def test_refresh_rejects_inactive_account(db, auth_service):
    registered = register_patient(auth_service)
    deactivate(db, registered.user.id)

    with pytest.raises(UserInactiveException):
        auth_service.refresh(registered.refresh_token)


def test_logout_revokes_refresh_tokens_but_not_access_tokens(auth_service, token_issuer):
    registered = register_patient(auth_service)
    second = auth_service.login("a@x.com", "secret1")

    assert auth_service.logout(registered.user.id) == 2

    for token in (registered.refresh_token, second.refresh_token):
        with pytest.raises(InvalidTokenException):
            auth_service.refresh(token)

    # Access tokens are not tracked server-side and stay valid until expiry
    assert token_issuer.verify_access_token(second.token).user_id == registered.user.id


def test_change_password(auth_service):
    registered = register_patient(auth_service)

    auth_service.change_password(registered.user.id, "secret1", "secret2")

    with pytest.raises(InvalidCredentialsException):
        auth_service.login("a@x.com", "secret1")
    assert auth_service.login("a@x.com", "secret2").user.id == registered.user.id


def test_change_password_checks_old_password_first(auth_service):
    registered = register_patient(auth_service)

    with pytest.raises(InvalidCredentialsException):
        auth_service.change_password(registered.user.id, "wrong", "short")
    with pytest.raises(WeakPasswordException):
        auth_service.change_password(registered.user.id, "secret1", "short")

    assert auth_service.login("a@x.com", "secret1")


def test_change_password_for_unknown_account(auth_service):
    with pytest.raises(AccountNotFoundException):
        auth_service.change_password(999, "secret1", "secret2")


def test_store_failure_becomes_internal_error(auth_service, repository, monkeypatch):
    def failing_lookup(*args, **kwargs):
        raise SQLAlchemyError("connection refused")

    monkeypatch.setattr(repository, "get_account_by_email", failing_lookup)

    with pytest.raises(InternalErrorException):
        auth_service.login("a@x.com", "secret1")
