# exceptions.py
# Typed errors raised by the card reminder core


class CardReminderError(Exception):
    """Base exception for all card reminder errors."""


class InvalidCycleDayError(CardReminderError, ValueError):
    """Raised when a day-of-month falls outside 1..31."""


class RecordNotFoundError(CardReminderError):
    """Raised when no record matches the requested id/owner or email."""


class UnauthorizedError(CardReminderError):
    """Raised when a record exists but belongs to another account."""


class AccountExistsError(CardReminderError):
    """Raised when registering an email that is already taken."""


class InvalidOrExpiredCodeError(CardReminderError):
    """Raised when a reset code is missing, wrong, already used or past its window."""


class ChallengeNotVerifiedError(CardReminderError):
    """Raised when a password change is attempted before the code was verified."""


class PasswordMismatchError(CardReminderError, ValueError):
    """Raised when the new password and its confirmation differ."""


class DispatchError(CardReminderError):
    """Raised when a notification could not be handed to the mail transport."""


class InvalidBankError(CardReminderError, ValueError):
    """Raised when "Other" bank is picked without a bank name."""


class StoreReadError(CardReminderError):
    """Raised when a store file cannot be parsed before a write."""
