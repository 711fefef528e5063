# conftest.py
# Pytest fixtures: temp-dir store, fake senders, sample cards

import pytest

import config
from accounts import register_account
from data import JsonStore
from exceptions import DispatchError
from models import Card


class RecordingSender:
    """Keeps every message instead of mailing it."""

    def __init__(self):
        self.sent = []

    def send(self, recipient, subject, body):
        self.sent.append((recipient, subject, body))


class FailingSender(RecordingSender):
    """Fails for the listed recipients, records the rest."""

    def __init__(self, fail_for=None, error=DispatchError):
        super().__init__()
        self.fail_for = set(fail_for or [])
        self.error = error

    def send(self, recipient, subject, body):
        if not self.fail_for or recipient in self.fail_for:
            raise self.error(f"boom for {recipient}")
        super().send(recipient, subject, body)


def card_fields(**overrides):
    fields = {
        "holder_name": "Asha Rao",
        "bank_name": "HDFC Bank",
        "card_network": "Visa",
        "last_four_digits": "1234",
        "billing_day": 10,
        "due_day": 25,
    }
    fields.update(overrides)
    return fields


def make_card(owner_id="acct-test-001", **overrides) -> Card:
    return Card(owner_id=owner_id, **card_fields(**overrides))


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(config, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def store(tmp_path) -> JsonStore:
    return JsonStore(tmp_path / "data")


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def account(store):
    return register_account(store, "Asha", "asha@example.com", "old-secret")


@pytest.fixture
def other_account(store):
    return register_account(store, "Ben", "ben@example.com", "hunter2")
