# reminders.py
# Scheduled due-date reminders: compute who to notify, then send each mail in isolation

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from config import REMINDER_HOURS, REMINDER_TIMEZONE
from exceptions import InvalidCycleDayError
from helpers import card_label, classify_card
from models import Card, DueUrgency, ReminderIntent, ScanReport

logger = logging.getLogger(__name__)

SCAN_JOB_ID = "reminder_scan"

def compute_reminder_intents(rows: Iterable[Tuple[Card, str]], today: int) -> List[ReminderIntent]:
    """
    Pick every card whose due day is 0..3 days away.

    The paid flag is deliberately not consulted here: a card marked paid on the
    dashboard still gets its due reminder. Nothing is remembered between
    firings, so the same card is reminded on every firing inside its window.
    """
    intents = []
    for card, contact in rows:
        try:
            urgency = classify_card(card, today, honor_paid=False)
        except InvalidCycleDayError as e:
            logger.warning(f"Skipping card {card.id}: {e}")
            continue
        if urgency.due != DueUrgency.DUE_SOON:
            continue
        intents.append(ReminderIntent(
            recipient=contact,
            card_id=card.id,
            card_label=card_label(card),
            bank_name=card.bank_name,
            last_four_digits=card.last_four_digits,
            days_left=urgency.days_to_due,
        ))
    return intents

def render_reminder(intent: ReminderIntent) -> Tuple[str, str]:
    """Subject and body for one reminder mail."""
    subject = f"⚠️ Bill Due: {intent.bank_name}"
    body = f"Pay your {intent.card_label} bill (Ending: {intent.last_four_digits}): {intent.wording}."
    return subject, body

def dispatch_intents(intents: Iterable[ReminderIntent], sender) -> ScanReport:
    """Send each reminder independently; one failure never stops the rest."""
    report = ScanReport()
    for intent in intents:
        subject, body = render_reminder(intent)
        try:
            sender.send(intent.recipient, subject, body)
        except Exception:
            # Any sender failure is isolated to this one reminder
            logger.exception(f"Reminder for {intent.card_label} ({intent.card_id}) to {intent.recipient} failed")
            report.failed += 1
            continue
        report.sent += 1
    return report

def today_in(tz: Optional[tzinfo] = None, now: Optional[datetime] = None) -> date:
    """Calendar date in `tz` (host local time when tz is None)."""
    if tz is None:
        return (now.astimezone() if now else datetime.now()).date()
    return (now or datetime.now(timezone.utc)).astimezone(tz).date()

def run_reminder_scan(store, sender, today: Optional[date] = None,
                      tz: Optional[tzinfo] = None) -> ScanReport:
    """
    One firing: load every card with its owner's email, classify, send.
    Without an explicit `today` the day is read in `tz`, the scheduler's zone.
    """
    today = today or today_in(tz)
    rows = store.find_all_obligations_with_owner_contact()
    intents = compute_reminder_intents(rows, today.day)
    report = dispatch_intents(intents, sender)
    logger.info(
        f"Reminder scan for {today.isoformat()}: {len(rows)} cards, "
        f"{len(intents)} due soon, {report.sent} sent, {report.failed} failed"
    )
    return report

def build_scheduler(store, sender, scheduler: Optional[BaseScheduler] = None,
                    hours: Optional[List[int]] = None) -> BaseScheduler:
    """Register the reminder scan as a cron job at each of `hours`, minute 0."""
    if scheduler is None:
        kwargs = {"timezone": REMINDER_TIMEZONE} if REMINDER_TIMEZONE else {}
        scheduler = BlockingScheduler(**kwargs)
    hours = hours or REMINDER_HOURS
    trigger = CronTrigger(hour=",".join(str(h) for h in hours), minute=0, timezone=scheduler.timezone)
    scheduler.add_job(
        run_reminder_scan,
        trigger,
        args=[store, sender],
        kwargs={"tz": scheduler.timezone},
        id=SCAN_JOB_ID,
        name="Card due-date reminders",
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    logger.info(f"Reminder scan scheduled at hours {hours}")
    return scheduler
