# app.py
# Card Reminder: run the due-date reminder scan once, or keep it on its 9/14/20 schedule

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from config import DATA_DIR, LOG_LEVEL, REMINDER_HOURS
from data import JsonStore
from notify import SmtpSender
from reminders import build_scheduler, run_reminder_scan

logger = logging.getLogger(__name__)

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="card-reminder", description="Credit card billing/due reminders")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="Directory holding accounts.json and cards.json")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="DEBUG, INFO, WARNING, ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Run one reminder scan now")
    scan.add_argument("--date", type=date.fromisoformat, default=None, help="Pretend today is this date (YYYY-MM-DD)")

    serve = sub.add_parser("serve", help="Run the reminder scan on its daily schedule")
    serve.add_argument("--hours", default=",".join(str(h) for h in REMINDER_HOURS),
                       help="Comma-separated hours of day to fire at")
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    store = JsonStore(args.data_dir)
    sender = SmtpSender()

    if args.command == "scan":
        report = run_reminder_scan(store, sender, today=args.date)
        print(f"sent={report.sent} failed={report.failed}")
        return 0 if report.failed == 0 else 1

    hours = [int(h) for h in args.hours.split(",") if h.strip()]
    scheduler = build_scheduler(store, sender, hours=hours)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
    return 0

if __name__ == "__main__":
    sys.exit(main())
