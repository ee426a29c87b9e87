from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Machine(SQLModel, table=True):
    # a row here means the machine's sequence has been seeded once
    id: int = Field(primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RecordRow(SQLModel, table=True):
    id: str = Field(primary_key=True)
    machine: int = Field(index=True)
    position: int
    game_count: str = ""
    bonus_type: str = ""  # BonusType value: 'BB' | 'RB' | '現在' | ''
    is_separator: bool = False


class TrackerState(SQLModel, table=True):
    id: int = Field(default=1, primary_key=True)
    mode: str = "GOLD"


class UsageWindow(SQLModel, table=True):
    id: int = Field(default=1, primary_key=True)
    count: int = 0
    reset_at: datetime
