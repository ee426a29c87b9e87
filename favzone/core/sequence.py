"""Pure edits on a record sequence.

Every function returns a new list and leaves its input alone; callers store
the result and run the engine over it again.
"""
import uuid
from typing import Iterable

from favzone.core.models import BonusType, RawRecord, Record

EDITABLE_FIELDS = ("game_count", "bonus_type", "is_separator")


class RecordNotFound(LookupError):
    def __init__(self, record_id: str):
        super().__init__(f"record {record_id} not found")
        self.record_id = record_id


def new_record(bonus_type=BonusType.EMPTY, game_count="", is_separator=False) -> Record:
    return Record(id=uuid.uuid4().hex, game_count=game_count, bonus_type=bonus_type, is_separator=is_separator)


def initial_records() -> list[Record]:
    return [new_record(), new_record(), new_record(BonusType.CURRENT)]


def _index_of(records: list[Record], record_id: str) -> int:
    for i, r in enumerate(records):
        if r.id == record_id:
            return i
    raise RecordNotFound(record_id)


def add_record(records: list[Record], position: str = "bottom") -> list[Record]:
    if position not in ("top", "bottom"):
        raise ValueError("position must be 'top' or 'bottom'")
    rec = new_record()
    return [rec, *records] if position == "top" else [*records, rec]


def update_record(records: list[Record], record_id: str, **fields) -> list[Record]:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"fields not editable: {', '.join(sorted(unknown))}")
    i = _index_of(records, record_id)
    data = records[i].model_dump()
    data.update(fields)
    out = list(records)
    out[i] = Record.model_validate(data)
    return out


def toggle_bonus(records: list[Record], record_id: str, bonus_type) -> list[Record]:
    # picking the type a row already has clears it
    bonus_type = BonusType(bonus_type)
    current = records[_index_of(records, record_id)].bonus_type
    new = BonusType.EMPTY if current == bonus_type else bonus_type
    return update_record(records, record_id, bonus_type=new)


def toggle_separator(records: list[Record], record_id: str) -> list[Record]:
    rec = records[_index_of(records, record_id)]
    return update_record(records, record_id, is_separator=not rec.is_separator)


def delete_record(records: list[Record], record_id: str) -> list[Record]:
    i = _index_of(records, record_id)
    return records[:i] + records[i + 1:]


def move_record(records: list[Record], from_index: int, to_index: int) -> list[Record]:
    n = len(records)
    if not (0 <= from_index < n and 0 <= to_index < n):
        raise IndexError(f"move {from_index} -> {to_index} out of range for {n} records")
    out = list(records)
    rec = out.pop(from_index)
    out.insert(to_index, rec)
    return out


def reorder(records: list[Record], ids: Iterable[str]) -> list[Record]:
    ids = list(ids)
    by_id = {r.id: r for r in records}
    if len(ids) != len(by_id) or set(ids) != set(by_id):
        raise ValueError("order must list every record id exactly once")
    return [by_id[i] for i in ids]


def reverse_records(records: list[Record]) -> list[Record]:
    return list(reversed(records))


def merge_extracted(records: list[Record], raw: Iterable[RawRecord], how: str = "append") -> list[Record]:
    """Splice extracted (game, type) pairs into a sequence.

    ``overwrite`` replaces everything and adds a trailing CURRENT row;
    ``append`` inserts the new rows just before the first CURRENT row, or at
    the end when there is none.
    """
    new = [new_record(item.type, str(item.game)) for item in raw]
    if how == "overwrite":
        return new + [new_record(BonusType.CURRENT)]
    if how != "append":
        raise ValueError("how must be 'append' or 'overwrite'")
    for i, r in enumerate(records):
        if r.bonus_type == BonusType.CURRENT:
            return records[:i] + new + records[i:]
    return list(records) + new
