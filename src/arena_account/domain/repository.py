"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_account.domain.models import Account, LedgerEntry
from src.arena_common.enums import LedgerEntryType


class AccountRepositoryProtocol(Protocol):
    async def get_account(
        self, db: AsyncSession, user_id: str, for_update: bool = False
    ) -> Account | None: ...

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: Decimal,
        entry_type: LedgerEntryType,
        ref_type: str,
        ref_id: str,
    ) -> tuple[Account, LedgerEntry]: ...

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: Decimal,
        entry_type: LedgerEntryType,
        ref_type: str,
        ref_id: str,
    ) -> tuple[Account, LedgerEntry]: ...
