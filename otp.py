# otp.py
# Password reset by one-time code: request -> verify -> reset (consume)

import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import config
from accounts import hash_password, normalize_email
from exceptions import (
    ChallengeNotVerifiedError, DispatchError, InvalidOrExpiredCodeError,
    PasswordMismatchError, RecordNotFoundError,
)
from models import Account, ChallengeState, ResetChallenge

logger = logging.getLogger(__name__)

OTP_SUBJECT = "Reset Password OTP"

def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)

def generate_code() -> str:
    """Uniformly random 6-digit code, 100000..999999."""
    return str(100000 + secrets.randbelow(900000))

def challenge_state(account: Account) -> ChallengeState:
    ch = account.reset_challenge
    if ch is None:
        return ChallengeState.NONE
    return ChallengeState.VERIFIED if ch.verified else ChallengeState.ISSUED

def _get_account(store, email: str) -> Account:
    account = store.find_account_by_email(email)
    if account is None:
        raise RecordNotFoundError(f"No account found for {email}")
    return account

def request_reset(store, sender, email: str, now: Optional[datetime] = None) -> datetime:
    """
    Issue a fresh code for `email`, replacing any earlier one, and mail it.

    Returns the expiry time. The challenge is stored before sending; a send
    failure raises DispatchError so the caller never reports a code as sent
    when it was not.
    """
    email = normalize_email(email)
    _get_account(store, email)
    challenge = ResetChallenge(
        code=generate_code(),
        expires_at=_now(now) + timedelta(minutes=config.OTP_TTL_MINUTES),
    )
    store.update_account(email, {"reset_challenge": challenge})
    try:
        sender.send(email, OTP_SUBJECT, f"Your OTP is {challenge.code}.")
    except DispatchError:
        logger.error(f"Could not deliver reset code to {email}")
        raise
    logger.info(f"Reset code issued for {email}, expires {challenge.expires_at.isoformat()}")
    return challenge.expires_at

def verify_code(store, email: str, code: str, now: Optional[datetime] = None) -> None:
    """
    Mark the live challenge verified when `code` matches before expiry.
    Any failure leaves the challenge untouched and raises InvalidOrExpiredCodeError.
    """
    email = normalize_email(email)
    account = store.find_account_by_email(email)
    ch = account.reset_challenge if account is not None else None
    if (
        ch is None
        or ch.verified
        or not hmac.compare_digest(ch.code.encode("utf-8"), str(code).strip().encode("utf-8"))
        or _now(now) >= ch.expires_at
    ):
        raise InvalidOrExpiredCodeError("Invalid/Expired OTP")
    store.update_account(email, {"reset_challenge": ch.model_copy(update={"verified": True})})
    logger.info(f"Reset code verified for {email}")

def reset_password(store, email: str, new_password: str,
                   confirm_password: Optional[str] = None) -> None:
    """Replace the password of a verified challenge and clear the challenge."""
    email = normalize_email(email)
    account = _get_account(store, email)
    if challenge_state(account) != ChallengeState.VERIFIED:
        raise ChallengeNotVerifiedError(f"No verified reset code for {email}")
    if confirm_password is not None and confirm_password != new_password:
        raise PasswordMismatchError("Passwords do not match")
    store.update_account(email, {"password_hash": hash_password(new_password), "reset_challenge": None})
    logger.info(f"Password reset for {email}")
