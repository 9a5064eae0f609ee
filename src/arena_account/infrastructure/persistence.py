"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows on a debit means the balance would go negative.
Every mutation appends a ledger_entries row in the same transaction.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.arena_account.domain.models import Account, LedgerEntry
from src.arena_common.enums import LedgerEntryType
from src.arena_common.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InternalError,
)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_ACCOUNT_SQL = text("""
    SELECT id, wallet_address, balance, created_at, updated_at
    FROM users
    WHERE id = :user_id
""")

_GET_ACCOUNT_FOR_UPDATE_SQL = text("""
    SELECT id, wallet_address, balance, created_at, updated_at
    FROM users
    WHERE id = :user_id
    FOR UPDATE
""")

_DEBIT_SQL = text("""
    UPDATE users
    SET balance = balance - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND balance >= :amount
    RETURNING id, wallet_address, balance, created_at, updated_at
""")

_CREDIT_SQL = text("""
    UPDATE users
    SET balance = balance + :amount,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING id, wallet_address, balance, created_at, updated_at
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")


def _row_to_account(row: Any) -> Account:
    return Account(
        id=row.id,
        wallet_address=row.wallet_address,
        balance=Decimal(row.balance),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_ledger(row: Any) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        user_id=row.user_id,
        entry_type=row.entry_type,
        amount=Decimal(row.amount),
        balance_after=Decimal(row.balance_after),
        reference_type=row.reference_type,
        reference_id=row.reference_id,
        description=row.description,
        created_at=row.created_at,
    )


class AccountRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def get_account(
        self, db: AsyncSession, user_id: str, for_update: bool = False
    ) -> Account | None:
        sql = _GET_ACCOUNT_FOR_UPDATE_SQL if for_update else _GET_ACCOUNT_SQL
        row = (await db.execute(sql, {"user_id": user_id})).fetchone()
        return _row_to_account(row) if row else None

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: Decimal,
        entry_type: LedgerEntryType,
        ref_type: str,
        ref_id: str,
    ) -> tuple[Account, LedgerEntry]:
        row = (
            await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        ).fetchone()
        if row is None:
            current = await self.get_account(db, user_id)
            if current is None:
                raise AccountNotFoundError(user_id)
            raise InsufficientBalanceError(amount, current.balance)
        account = _row_to_account(row)
        entry = await self._write_ledger(
            db, account, -amount, entry_type, ref_type, ref_id
        )
        return account, entry

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: Decimal,
        entry_type: LedgerEntryType,
        ref_type: str,
        ref_id: str,
    ) -> tuple[Account, LedgerEntry]:
        row = (
            await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        ).fetchone()
        if row is None:
            raise AccountNotFoundError(user_id)
        account = _row_to_account(row)
        entry = await self._write_ledger(
            db, account, amount, entry_type, ref_type, ref_id
        )
        return account, entry

    async def _write_ledger(
        self,
        db: AsyncSession,
        account: Account,
        signed_amount: Decimal,
        entry_type: LedgerEntryType,
        ref_type: str,
        ref_id: str,
    ) -> LedgerEntry:
        row = (
            await db.execute(
                _INSERT_LEDGER_SQL,
                {
                    "user_id": account.id,
                    "entry_type": entry_type.value,
                    "amount": signed_amount,
                    "balance_after": account.balance,
                    "reference_type": ref_type,
                    "reference_id": ref_id,
                    "description": f"{entry_type.value} {ref_type} {ref_id}",
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError(f"Ledger insert returned no row for user {account.id}")
        return _row_to_ledger(row)
