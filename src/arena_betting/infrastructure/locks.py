"""In-process per-battle lock registry.

Serialises the read-compute-write sequence of bets and settlement on one
battle inside this process. Cross-process ordering comes from the
SELECT ... FOR UPDATE on the battle row.
"""
import asyncio
from collections import defaultdict


class BattleLockRegistry:
    def __init__(self) -> None:
        self._battle_locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def lock_for(self, battle_id: str) -> asyncio.Lock:
        return self._battle_locks[battle_id]

    def discard(self, battle_id: str) -> None:
        """Forget a settled battle's lock. Holders of the old lock are unaffected."""
        self._battle_locks.pop(battle_id, None)


_registry: BattleLockRegistry | None = None


def get_battle_locks() -> BattleLockRegistry:
    global _registry  # noqa: PLW0603
    if _registry is None:
        _registry = BattleLockRegistry()
    return _registry
