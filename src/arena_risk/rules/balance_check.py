from decimal import Decimal

from src.arena_account.domain.models import Account
from src.arena_common.errors import InsufficientBalanceError


def check_balance(account: Account, amount: Decimal) -> None:
    """Raise InsufficientBalanceError if the locked balance cannot cover amount."""
    if account.balance < amount:
        raise InsufficientBalanceError(amount, account.balance)
