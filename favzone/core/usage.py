import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

MAX_USES = 3
WINDOW = timedelta(hours=1)


@dataclass(frozen=True)
class UsageState:
    count: int
    reset_at: datetime


def fresh(now: datetime, window: timedelta = WINDOW) -> UsageState:
    return UsageState(count=0, reset_at=now + window)


def refresh(state: UsageState | None, now: datetime, window: timedelta = WINDOW) -> UsageState:
    """Start a new window once the current one has run out."""
    if state is None or now >= state.reset_at:
        return fresh(now, window)
    return state


def increment(state: UsageState) -> UsageState:
    return replace(state, count=state.count + 1)


def is_limit_reached(state: UsageState, limit: int = MAX_USES) -> bool:
    return state.count >= limit


def remaining_uses(state: UsageState, limit: int = MAX_USES) -> int:
    return max(0, limit - state.count)


def remaining_minutes(state: UsageState, now: datetime) -> int:
    seconds = (state.reset_at - now).total_seconds()
    return max(0, math.ceil(seconds / 60))
