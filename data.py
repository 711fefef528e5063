# data.py
# Local JSON persistence: accounts and cards, one conditional update per mutation

import json
import logging
import threading
from typing import Any, Dict, List, Optional, Tuple
from pathlib import Path

from pydantic import ValidationError

from config import DATA_DIR, ACCOUNTS_FILE_NAME, CARDS_FILE_NAME
from exceptions import AccountExistsError, StoreReadError
from models import Account, Card

logger = logging.getLogger(__name__)

def _read_json(path: Path, default, strict: bool = False):
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        return json.loads(json.dumps(default))
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        if strict:
            raise StoreReadError(f"Refusing to write over unreadable {path.name}: {e}") from e
        logger.error(f"Failed to read {path.name}: {e}")
        return json.loads(json.dumps(default))
    if strict and not isinstance(data, type(default)):
        raise StoreReadError(f"Refusing to write over {path.name}: unexpected {type(data).__name__} content")
    return data

def _write_json(path: Path, obj):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    tmp.replace(path)


class JsonStore:
    """
    Record store backed by two JSON files under `data_dir`.

    Each mutation is a single read-modify-write held under one lock and scoped
    to (id, owner_id) for cards or email for accounts, so concurrent writers
    to the same record resolve as last-writer-wins.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
        self.accounts_file = self.data_dir / ACCOUNTS_FILE_NAME
        self.cards_file = self.data_dir / CARDS_FILE_NAME
        self._lock = threading.Lock()

    # ---------- raw rows ----------
    def _raw_accounts(self, strict: bool = False) -> List[Dict[str, Any]]:
        return _read_json(self.accounts_file, [], strict)

    def _raw_cards(self, strict: bool = False) -> List[Dict[str, Any]]:
        return _read_json(self.cards_file, [], strict)

    def _accounts(self) -> List[Account]:
        out = []
        for row in self._raw_accounts():
            try:
                out.append(Account.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping invalid account record {row.get('id')!r}: {e.error_count()} error(s)")
        return out

    def _cards(self) -> List[Card]:
        out = []
        for row in self._raw_cards():
            try:
                out.append(Card.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping invalid card record {row.get('id')!r}: {e.error_count()} error(s)")
        return out

    # ---------- accounts ----------
    def insert_account(self, account: Account) -> Account:
        with self._lock:
            rows = self._raw_accounts(strict=True)
            if any(r.get("email") == account.email for r in rows):
                raise AccountExistsError(f"Email already registered: {account.email}")
            rows.append(account.model_dump(mode="json"))
            _write_json(self.accounts_file, rows)
        return account

    def find_account_by_email(self, email: str) -> Optional[Account]:
        for acc in self._accounts():
            if acc.email == email:
                return acc
        return None

    def find_account_by_id(self, account_id: str) -> Optional[Account]:
        for acc in self._accounts():
            if acc.id == account_id:
                return acc
        return None

    def update_account(self, email: str, patch: Dict[str, Any]) -> bool:
        """Apply `patch` to the account with `email`. False when no account matches."""
        with self._lock:
            rows = self._raw_accounts(strict=True)
            for i, row in enumerate(rows):
                if row.get("email") == email:
                    merged = {**row, **patch, "id": row.get("id"), "email": email}
                    rows[i] = Account.model_validate(merged).model_dump(mode="json")
                    _write_json(self.accounts_file, rows)
                    return True
        return False

    # ---------- cards ----------
    def insert_card(self, card: Card) -> Card:
        with self._lock:
            rows = self._raw_cards(strict=True)
            rows.append(card.model_dump(mode="json"))
            _write_json(self.cards_file, rows)
        return card

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self._cards():
            if card.id == card_id:
                return card
        return None

    def find_obligations_by_owner(self, owner_id: str) -> List[Card]:
        return [c for c in self._cards() if c.owner_id == owner_id]

    def find_all_obligations_with_owner_contact(self) -> List[Tuple[Card, str]]:
        """Every card joined with its owner's email. Cards without a known owner are skipped."""
        contacts = {acc.id: acc.email for acc in self._accounts()}
        out = []
        for card in self._cards():
            email = contacts.get(card.owner_id)
            if email is None:
                logger.warning(f"Card {card.id} has no owner account; skipping")
                continue
            out.append((card, email))
        return out

    def update_obligation(self, card_id: str, owner_id: str, patch: Dict[str, Any]) -> bool:
        """Apply `patch` to the card matching (card_id, owner_id). False when nothing matches."""
        with self._lock:
            rows = self._raw_cards(strict=True)
            for i, row in enumerate(rows):
                if row.get("id") == card_id and row.get("owner_id") == owner_id:
                    merged = {**row, **patch, "id": card_id, "owner_id": owner_id}
                    rows[i] = Card.model_validate(merged).model_dump(mode="json")
                    _write_json(self.cards_file, rows)
                    return True
        return False

    def delete_obligation(self, card_id: str, owner_id: str) -> bool:
        with self._lock:
            rows = self._raw_cards(strict=True)
            kept = [r for r in rows if not (r.get("id") == card_id and r.get("owner_id") == owner_id)]
            if len(kept) == len(rows):
                return False
            _write_json(self.cards_file, kept)
        return True
