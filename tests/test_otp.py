from datetime import datetime, timedelta, timezone

import pytest

from accounts import authenticate
from exceptions import (
    ChallengeNotVerifiedError, DispatchError, InvalidOrExpiredCodeError,
    PasswordMismatchError, RecordNotFoundError,
)
from models import ChallengeState
from otp import challenge_state, generate_code, request_reset, reset_password, verify_code
from conftest import FailingSender

NOW = datetime(2023, 10, 10, 9, 0, tzinfo=timezone.utc)
EMAIL = "asha@example.com"

def _code(store):
    return store.find_account_by_email(EMAIL).reset_challenge.code

def _state(store):
    return challenge_state(store.find_account_by_email(EMAIL))

def test_generate_code_is_six_digits():
    for _ in range(200):
        code = generate_code()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999

def test_request_issues_and_mails_code(store, sender, account):
    expires = request_reset(store, sender, EMAIL, now=NOW)
    assert expires == NOW + timedelta(minutes=10)
    assert _state(store) == ChallengeState.ISSUED
    [(to, subject, body)] = sender.sent
    assert to == EMAIL
    assert subject == "Reset Password OTP"
    assert body == f"Your OTP is {_code(store)}."

def test_request_unknown_email(store, sender):
    with pytest.raises(RecordNotFoundError):
        request_reset(store, sender, "nobody@example.com", now=NOW)
    assert sender.sent == []

def test_request_dispatch_failure_is_reported(store, account):
    with pytest.raises(DispatchError):
        request_reset(store, FailingSender(), EMAIL, now=NOW)

def test_full_reset_flow(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    verify_code(store, EMAIL, _code(store), now=NOW + timedelta(minutes=5))
    assert _state(store) == ChallengeState.VERIFIED
    reset_password(store, EMAIL, "new-secret", confirm_password="new-secret")
    assert _state(store) == ChallengeState.NONE
    assert authenticate(store, EMAIL, "new-secret") is not None
    assert authenticate(store, EMAIL, "old-secret") is None

def test_verify_wrong_code_leaves_state(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    code = _code(store)
    wrong = "100000" if code != "100000" else "100001"
    with pytest.raises(InvalidOrExpiredCodeError):
        verify_code(store, EMAIL, wrong, now=NOW)
    assert _state(store) == ChallengeState.ISSUED
    # no lockout: the right code still works afterwards
    verify_code(store, EMAIL, code, now=NOW)
    assert _state(store) == ChallengeState.VERIFIED

def test_verify_after_expiry_fails_with_correct_code(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    with pytest.raises(InvalidOrExpiredCodeError):
        verify_code(store, EMAIL, _code(store), now=NOW + timedelta(minutes=10))
    assert _state(store) == ChallengeState.ISSUED

def test_verify_non_ascii_code_is_invalid(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    # full-width digits pasted from a phone keyboard
    for submitted in ["１２３４５６", "12345é", "\u0661\u0662\u0663\u0664\u0665\u0666"]:
        with pytest.raises(InvalidOrExpiredCodeError):
            verify_code(store, EMAIL, submitted, now=NOW)
    assert _state(store) == ChallengeState.ISSUED

def test_verify_without_challenge(store, account):
    with pytest.raises(InvalidOrExpiredCodeError):
        verify_code(store, EMAIL, "123456", now=NOW)
    with pytest.raises(InvalidOrExpiredCodeError):
        verify_code(store, "nobody@example.com", "123456", now=NOW)

def test_verify_twice_fails(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    code = _code(store)
    verify_code(store, EMAIL, code, now=NOW)
    with pytest.raises(InvalidOrExpiredCodeError):
        verify_code(store, EMAIL, code, now=NOW)
    assert _state(store) == ChallengeState.VERIFIED

def test_second_request_invalidates_first_code(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    first = _code(store)
    request_reset(store, sender, EMAIL, now=NOW)
    second = _code(store)
    if first != second:
        with pytest.raises(InvalidOrExpiredCodeError):
            verify_code(store, EMAIL, first, now=NOW)
    verify_code(store, EMAIL, second, now=NOW)
    assert _state(store) == ChallengeState.VERIFIED

def test_new_request_resets_verified_challenge(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    verify_code(store, EMAIL, _code(store), now=NOW)
    request_reset(store, sender, EMAIL, now=NOW)
    assert _state(store) == ChallengeState.ISSUED
    with pytest.raises(ChallengeNotVerifiedError):
        reset_password(store, EMAIL, "new-secret")

def test_consume_before_verify(store, sender, account):
    with pytest.raises(ChallengeNotVerifiedError):
        reset_password(store, EMAIL, "new-secret")
    request_reset(store, sender, EMAIL, now=NOW)
    with pytest.raises(ChallengeNotVerifiedError):
        reset_password(store, EMAIL, "new-secret")
    assert authenticate(store, EMAIL, "old-secret") is not None

def test_consume_is_single_use(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    code = _code(store)
    verify_code(store, EMAIL, code, now=NOW)
    reset_password(store, EMAIL, "new-secret")
    with pytest.raises(ChallengeNotVerifiedError):
        reset_password(store, EMAIL, "another")
    with pytest.raises(InvalidOrExpiredCodeError):
        verify_code(store, EMAIL, code, now=NOW)

def test_consume_password_mismatch(store, sender, account):
    request_reset(store, sender, EMAIL, now=NOW)
    verify_code(store, EMAIL, _code(store), now=NOW)
    with pytest.raises(PasswordMismatchError):
        reset_password(store, EMAIL, "new-secret", confirm_password="typo")
    assert _state(store) == ChallengeState.VERIFIED

def test_code_never_logged(store, sender, account, caplog):
    caplog.set_level("DEBUG")
    request_reset(store, sender, EMAIL, now=NOW)
    assert _code(store) not in caplog.text
