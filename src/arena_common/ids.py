"""Business ID generation for battles, bets and snapshots."""

import uuid


def new_id(prefix: str) -> str:
    """Return a unique, prefixed string ID: new_id("bet") -> 'bet_3f2a...'."""
    return f"{prefix}_{uuid.uuid4().hex}"
