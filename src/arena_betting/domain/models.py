"""Domain models for arena_betting: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.arena_common.enums import TERMINAL_BET_STATUSES, BetStatus


@dataclass
class Bet:
    id: str
    user_id: str
    battle_id: str
    character_id: str
    amount: Decimal            # gross stake debited from the account
    net_amount: Decimal        # contribution that entered the pool
    odds: Decimal | None       # captured at placement (AMM); None for parimutuel
    status: BetStatus
    created_at: datetime
    settled_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_BET_STATUSES
