# cards.py
# Card CRUD + paid toggles, every write scoped to (card id, owner)

import logging
from typing import Any, Dict, List, Optional, Tuple

from config import BANK_LIST, OTHER_BANK
from exceptions import InvalidBankError, RecordNotFoundError, UnauthorizedError
from models import Card

logger = logging.getLogger(__name__)

_FIXED_FIELDS = {"id", "owner_id", "paid_this_cycle", "is_other_bank"}

def resolve_bank(selected_bank: str, custom_bank_name: Optional[str] = None) -> Tuple[str, bool]:
    """
    Map the bank picker value to (bank_name, is_other_bank).
    "Other" takes the typed-in name; names outside BANK_LIST count as other too.
    """
    if selected_bank == OTHER_BANK:
        name = (custom_bank_name or "").strip()
        if not name:
            raise InvalidBankError("A bank name is required when 'Other' is selected")
        return name, True
    name = selected_bank.strip()
    return name, name not in BANK_LIST

def _card_terms(fields: Dict[str, Any]) -> Dict[str, Any]:
    terms = {k: v for k, v in fields.items() if k not in _FIXED_FIELDS}
    custom = terms.pop("custom_bank_name", None)
    if "bank_name" in terms:
        terms["bank_name"], terms["is_other_bank"] = resolve_bank(terms["bank_name"], custom)
    return terms

def list_cards(store, owner_id: str) -> List[Card]:
    return store.find_obligations_by_owner(owner_id)

def get_card(store, card_id: str, owner_id: str) -> Card:
    card = store.find_card(card_id)
    if card is None:
        raise RecordNotFoundError(f"Card {card_id} not found")
    if card.owner_id != owner_id:
        raise UnauthorizedError(f"Card {card_id} does not belong to account {owner_id}")
    return card

def create_card(store, owner_id: str, **fields) -> Card:
    """Add a card for `owner_id`. New cards start unpaid."""
    card = Card(owner_id=owner_id, **_card_terms(fields))
    store.insert_card(card)
    logger.info(f"Card {card.id} added for account {owner_id}")
    return card

def edit_card(store, card_id: str, owner_id: str, **fields) -> Card:
    """Change a card's terms. Editing always clears the paid flag."""
    get_card(store, card_id, owner_id)
    patch = {**_card_terms(fields), "paid_this_cycle": False}
    if not store.update_obligation(card_id, owner_id, patch):
        raise RecordNotFoundError(f"Card {card_id} not found")
    return get_card(store, card_id, owner_id)

def delete_card(store, card_id: str, owner_id: str) -> bool:
    if not store.delete_obligation(card_id, owner_id):
        raise RecordNotFoundError(f"Card {card_id} not found")
    logger.info(f"Card {card_id} deleted")
    return True

def _set_paid(store, card_id: str, owner_id: str, paid: bool) -> bool:
    if not store.update_obligation(card_id, owner_id, {"paid_this_cycle": paid}):
        raise RecordNotFoundError(f"Card {card_id} not found")
    return True

def mark_paid(store, card_id: str, owner_id: str) -> bool:
    return _set_paid(store, card_id, owner_id, True)

def mark_unpaid(store, card_id: str, owner_id: str) -> bool:
    return _set_paid(store, card_id, owner_id, False)
