from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class BonusType(str, Enum):
    BB = "BB"
    RB = "RB"
    CURRENT = "現在"
    EMPTY = ""

    @classmethod
    def _missing_(cls, value):
        # accept member names too ("CURRENT", "empty", ...)
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class Mode(str, Enum):
    GOLD = "GOLD"
    BLACK = "BLACK"


class Record(BaseModel):
    """One row of play history.

    The three favorable-zone fields are derived; only the recalculation
    engine writes them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    game_count: str = ""
    bonus_type: BonusType = BonusType.EMPTY
    is_separator: bool = False
    favorable_zone_start: int | None = None
    favorable_zone_end: int | None = None
    segment_number: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        return v if isinstance(v, str) else str(v)

    @field_validator("bonus_type", mode="before")
    @classmethod
    def _coerce_bonus(cls, v):
        # 区切 and other unknown labels score nothing
        if v is None:
            return BonusType.EMPTY
        try:
            return BonusType(v)
        except ValueError:
            return BonusType.EMPTY

    @field_validator("game_count", mode="before")
    @classmethod
    def _coerce_count(cls, v):
        return "" if v is None else str(v)


class RawRecord(BaseModel):
    game: int
    type: Literal[BonusType.BB, BonusType.RB]
