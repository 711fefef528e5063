from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from config import CARD_NETWORKS, DEFAULT_CARD_COLOR


class DueUrgency(str, Enum):
    NONE = "none"
    DUE_SOON = "due_soon"
    PAID = "paid"


class BillingUrgency(str, Enum):
    NONE = "none"
    BILLING_SOON = "billing_soon"


class ChallengeState(str, Enum):
    NONE = "none"
    ISSUED = "issued"
    VERIFIED = "verified"


class Card(BaseModel):
    """One tracked credit card: the recurring obligation."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_id: str
    holder_name: str = Field(min_length=1)
    nickname: Optional[str] = None
    bank_name: str = Field(min_length=1)
    is_other_bank: bool = False
    card_network: str
    last_four_digits: str = Field(pattern=r"^\d{4}$")
    billing_day: int = Field(ge=1, le=31)
    due_day: int = Field(ge=1, le=31)
    credit_limit: float = Field(default=0.0, ge=0)
    card_color: str = DEFAULT_CARD_COLOR
    notify_on_billing: bool = False
    notify_before_due: bool = False
    notify_days_before: Optional[int] = None
    notify_custom_date: Optional[date] = None
    paid_this_cycle: bool = False

    @field_validator("last_four_digits", mode="before")
    @classmethod
    def _pad_last_four(cls, v):
        # Form input may arrive as a number; 0042 must survive as "0042"
        if isinstance(v, int):
            return str(v).zfill(4)
        return v

    @field_validator("card_network")
    @classmethod
    def _known_network(cls, v: str) -> str:
        if v not in CARD_NETWORKS:
            raise ValueError(f"card_network must be one of {CARD_NETWORKS}")
        return v


class ResetChallenge(BaseModel):
    code: str = Field(pattern=r"^\d{6}$")
    expires_at: datetime
    verified: bool = False


class Account(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1)
    email: str
    password_hash: str
    reset_challenge: Optional[ResetChallenge] = None


class CardUrgency(BaseModel):
    due: DueUrgency
    billing: BillingUrgency
    days_to_due: int
    days_to_bill: int


class DashboardStats(BaseModel):
    total: int = 0
    due_soon: int = 0
    billing_soon: int = 0
    paid: int = 0


class ReminderIntent(BaseModel):
    recipient: str
    card_id: str
    card_label: str
    bank_name: str
    last_four_digits: str
    days_left: int

    @property
    def wording(self) -> str:
        if self.days_left == 0:
            return "due today"
        return f"{self.days_left} days left"


class ScanReport(BaseModel):
    sent: int = 0
    failed: int = 0
