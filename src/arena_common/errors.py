"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Account
  3xxx: Battle (market)
  4xxx: Bet
  9xxx: System

Every business-rule error aborts the enclosing transaction and is surfaced to
the caller unchanged. None of them is retried automatically.
"""

from decimal import Decimal


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    """A referenced battle, account or participant does not exist."""


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: Decimal, available: Decimal) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )


class AccountNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Account not found: {user_id}", 404)


# --- 3xxx: Battle ---

class MarketNotFoundError(NotFoundError):
    def __init__(self, battle_id: str) -> None:
        super().__init__(3001, f"Battle not found: {battle_id}", 404)


class MarketClosedError(AppError):
    def __init__(self, battle_id: str, reason: str) -> None:
        super().__init__(3002, f"Betting is closed for battle {battle_id}: {reason}", 422)


class ParticipantNotFoundError(NotFoundError):
    def __init__(self, battle_id: str, character_id: str) -> None:
        super().__init__(
            3003,
            f"Character {character_id} is not a participant in battle {battle_id}",
            404,
        )


class InvalidMarketStateError(AppError):
    def __init__(self, battle_id: str, detail: str) -> None:
        super().__init__(3004, f"Battle {battle_id} in invalid state: {detail}", 409)


class InvalidBattleDefinitionError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3005, f"Invalid battle definition: {detail}", 422)


# --- 4xxx: Bet ---

class LiquidityConstraintError(AppError):
    def __init__(self, required: Decimal, available: Decimal) -> None:
        super().__init__(
            4001,
            f"Bet rejected by liquidity constraint: requires {required}, "
            f"available {available}",
            422,
        )


class BetCapExceededError(AppError):
    def __init__(self, amount: Decimal, cap: Decimal) -> None:
        super().__init__(
            4002,
            f"First bet on a market side cannot exceed {cap} (got {amount})",
            422,
        )


class InvalidBetAmountError(AppError):
    def __init__(self, amount: Decimal) -> None:
        super().__init__(4003, f"Bet amount must be positive with at most 18 decimal places, got {amount}", 422)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
