# dashboard.py
# Per-owner summary counts and the card table shown on the dashboard

from datetime import date
from typing import Iterable, List

import pandas as pd

from helpers import card_label, classify_card, next_occurrence
from models import BillingUrgency, Card, DashboardStats, DueUrgency

FRAME_COLUMNS = [
    "Card", "Bank", "Network", "Last 4", "Billing Day", "Due Day",
    "Days to Bill", "Days to Due", "Next Due Date", "Status", "Billing",
]

def summarize(cards: Iterable[Card], today: int) -> DashboardStats:
    """
    Count total, due-soon, billing-soon and paid cards for one owner.
    A paid card counts as paid and never as due-soon; billing-soon is counted
    regardless of paid state.
    """
    stats = DashboardStats()
    for card in cards:
        stats.total += 1
        urgency = classify_card(card, today)
        if urgency.due == DueUrgency.PAID:
            stats.paid += 1
        elif urgency.due == DueUrgency.DUE_SOON:
            stats.due_soon += 1
        if urgency.billing == BillingUrgency.BILLING_SOON:
            stats.billing_soon += 1
    return stats

def cards_frame(cards: List[Card], today: date) -> pd.DataFrame:
    """One row per card, soonest due first."""
    if not cards:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    rows = []
    for c in cards:
        u = classify_card(c, today.day)
        rows.append({
            "Card": card_label(c),
            "Bank": c.bank_name,
            "Network": c.card_network,
            "Last 4": c.last_four_digits,
            "Billing Day": c.billing_day,
            "Due Day": c.due_day,
            "Days to Bill": u.days_to_bill,
            "Days to Due": u.days_to_due,
            "Next Due Date": next_occurrence(today, c.due_day),
            "Status": u.due.value,
            "Billing": u.billing.value,
        })
    return (
        pd.DataFrame(rows, columns=FRAME_COLUMNS)
        .sort_values("Days to Due", kind="stable")
        .reset_index(drop=True)
    )
