from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from favzone.core.models import BonusType, Mode, Record


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class AddIn(CamelModel):
    position: Literal["top", "bottom"] = "bottom"


class RecordPatch(CamelModel):
    game_count: str | None = None
    bonus_type: BonusType | None = None
    is_separator: bool | None = None

    @field_validator("bonus_type", mode="before")
    @classmethod
    def _bonus(cls, v):
        return v if v is None else BonusType(v)


class BonusIn(CamelModel):
    bonus_type: BonusType

    @field_validator("bonus_type", mode="before")
    @classmethod
    def _bonus(cls, v):
        return BonusType(v)


class MoveIn(CamelModel):
    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


class OrderIn(CamelModel):
    ids: list[str]


class ModeIn(CamelModel):
    mode: Mode


class ModeOut(CamelModel):
    mode: Mode


class SummaryOut(CamelModel):
    total: int
    bb: int
    rb: int
    current: int


class SequenceOut(CamelModel):
    machine: int
    mode: Mode
    records: list[Record]
    summary: SummaryOut


class UsageOut(CamelModel):
    count: int
    max_uses: int
    remaining_uses: int
    remaining_minutes: int
    limit_reached: bool
