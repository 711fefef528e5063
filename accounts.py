# accounts.py
# Registration and credential checks

import logging
from typing import Optional

import bcrypt

import config
from exceptions import AccountExistsError
from models import Account

logger = logging.getLogger(__name__)

def normalize_email(email: str) -> str:
    return email.strip().lower()

def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

def register_account(store, name: str, email: str, password: str) -> Account:
    """Create an account. Raises AccountExistsError when the email is taken."""
    email = normalize_email(email)
    if store.find_account_by_email(email) is not None:
        raise AccountExistsError(f"Email already registered: {email}")
    account = Account(name=name.strip(), email=email, password_hash=hash_password(password))
    store.insert_account(account)
    logger.info(f"Registered account {account.id}")
    return account

def authenticate(store, email: str, password: str) -> Optional[Account]:
    """Return the account when email and password match, else None."""
    account = store.find_account_by_email(normalize_email(email))
    if account is None or not check_password(password, account.password_hash):
        return None
    return account
