"""Domain models for arena_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Account:
    id: str
    wallet_address: str
    balance: Decimal
    created_at: datetime
    updated_at: datetime


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    entry_type: str                  # LedgerEntryType value
    amount: Decimal                  # positive=credit negative=debit
    balance_after: Decimal
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
