# config.py
# Paths, cycle constants, reminder schedule, OTP window, mail settings

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
ENV_FILE = BASE_DIR / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)

DATA_DIR = Path(os.getenv("CARD_REMINDER_DATA_DIR", str(BASE_DIR / "data")))

ACCOUNTS_FILE_NAME = "accounts.json"
CARDS_FILE_NAME = "cards.json"

# Cycle math: every month is treated as 30 days long
CYCLE_LENGTH = 30
URGENCY_WINDOW_DAYS = 3

# Reminder scan fires at these local hours, minute 0
REMINDER_HOURS = [int(h) for h in os.getenv("REMINDER_HOURS", "9,14,20").split(",") if h.strip()]
REMINDER_TIMEZONE = os.getenv("REMINDER_TIMEZONE") or None

# Password reset
OTP_TTL_MINUTES = int(os.getenv("OTP_TTL_MINUTES", "10"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Outbound mail
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "465"))
EMAIL_USER = os.getenv("EMAIL_USER", "")
EMAIL_PASS = os.getenv("EMAIL_PASS", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

OTHER_BANK = "Other"
BANK_LIST = [
    "AU Small Finance Bank", "American Express Bank", "Axis Bank", "Bank Of Baroda",
    "Canara Bank", "Citi Bank", "FederalBank", "HDFC Bank", "HSBS Bank", "ICICI Bank",
    "IDFC Bank", "IndusInd Bank", "Kotak Bank", "PNB bank", "RBI Bank", "SBI Bank",
    "SBM Bank", "Slice Bank", "Standard Chartered Bank", "Union Bank",
    "Unity Small Finance Bank", "Utkarsha Small Finance Bank", "Yes Bank",
    "Dinersclub", "Master Card", "Rupay", "Visa",
]

CARD_NETWORKS = ["Debit Card", "Visa", "MasterCard", "RuPay", "American Express", "Diners Club"]
DEFAULT_CARD_COLOR = "#0d6efd"
