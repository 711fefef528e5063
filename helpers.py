# helpers.py
# Cycle math (30-day approximation), urgency classification, calendar date helpers

from typing import Tuple
from datetime import date
import calendar

from dateutil.relativedelta import relativedelta

from config import CYCLE_LENGTH, URGENCY_WINDOW_DAYS
from exceptions import InvalidCycleDayError
from models import BillingUrgency, Card, CardUrgency, DueUrgency

# ---------- Cycle arithmetic ----------
def _check_day(name: str, day: int) -> None:
    if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31:
        raise InvalidCycleDayError(f"{name} must be a day of month in 1..31, got {day!r}")

def days_until(today: int, target: int, cycle_length: int = CYCLE_LENGTH) -> int:
    """
    Days from day-of-month `today` to the next `target` day-of-month.

    Every month is assumed to be `cycle_length` days long, so results near the
    end of 28/29/31-day months can be off by a few days. When target is 31 and
    today is 1 there is no wrap and the result is 30, one past the nominal
    0..29 range.
    """
    _check_day("today", today)
    _check_day("target", target)
    if cycle_length <= 0:
        raise ValueError(f"cycle_length must be positive, got {cycle_length}")
    diff = target - today
    if diff < 0:
        diff += cycle_length
    return diff

def in_urgency_window(days: int) -> bool:
    return 0 <= days <= URGENCY_WINDOW_DAYS

def classify_card(card: Card, today: int, honor_paid: bool = True) -> CardUrgency:
    """
    Classify how soon a card bills and falls due.

    Paid cards report DueUrgency.PAID unless honor_paid is False, in which case
    the paid flag is ignored and only the day count decides. Billing urgency
    never looks at the paid flag.
    """
    days_to_due = days_until(today, card.due_day)
    days_to_bill = days_until(today, card.billing_day)

    if honor_paid and card.paid_this_cycle:
        due = DueUrgency.PAID
    elif in_urgency_window(days_to_due):
        due = DueUrgency.DUE_SOON
    else:
        due = DueUrgency.NONE

    billing = BillingUrgency.BILLING_SOON if in_urgency_window(days_to_bill) else BillingUrgency.NONE
    return CardUrgency(due=due, billing=billing, days_to_due=days_to_due, days_to_bill=days_to_bill)

def card_label(card: Card) -> str:
    """Short display name: nickname when set, else the bank."""
    return (card.nickname or "").strip() or card.bank_name

# ---------- Date helpers ----------
def month_range(y: int, m: int) -> Tuple[date, date]:
    """Return the first and last date of a given month."""
    start = date(y, m, 1)
    last = calendar.monthrange(y, m)[1]
    return start, date(y, m, last)

def safe_date(y: int, m: int, d: int) -> date:
    """Return a valid date, clamping the day to the last day of the month if necessary."""
    last = calendar.monthrange(y, m)[1]
    return date(y, m, max(1, min(d, last)))

def shift_month(d: date, k: int) -> date:
    """Shift the date by k months, keeping the day if possible."""
    anchor = date(d.year, d.month, 15) + relativedelta(months=k)
    _, end = month_range(anchor.year, anchor.month)
    return date(anchor.year, anchor.month, min(d.day, end.day))

def next_occurrence(today: date, day: int) -> date:
    """
    Real calendar date of the next `day`-of-month on or after `today`.
    Days past the end of a short month clamp to its last day.
    Display only; urgency buckets come from days_until.
    """
    _check_day("day", day)
    candidate = safe_date(today.year, today.month, day)
    if candidate < today:
        nxt = shift_month(date(today.year, today.month, 1), 1)
        candidate = safe_date(nxt.year, nxt.month, day)
    return candidate
