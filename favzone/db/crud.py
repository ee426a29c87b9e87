from datetime import timezone

from sqlmodel import Session, select

from favzone.config import settings
from favzone.core.models import Mode, Record
from favzone.core.sequence import initial_records
from favzone.core.usage import UsageState
from favzone.db.models import Machine, RecordRow, TrackerState, UsageWindow


def _to_record(row: RecordRow) -> Record:
    return Record(id=row.id, game_count=row.game_count, bonus_type=row.bonus_type, is_separator=row.is_separator)


def set_sequence(session: Session, machine: int, records: list[Record]) -> None:
    """Replace a machine's whole sequence. Derived fields are not stored."""
    if session.get(Machine, machine) is None:
        session.add(Machine(id=machine))
    existing = {row.id: row for row in session.exec(select(RecordRow).where(RecordRow.machine == machine))}
    for pos, r in enumerate(records):
        row = existing.pop(r.id, None) or RecordRow(id=r.id, machine=machine, position=pos)
        row.position = pos
        row.game_count = r.game_count
        row.bonus_type = r.bonus_type.value
        row.is_separator = r.is_separator
        session.add(row)
    for row in existing.values():
        session.delete(row)
    session.commit()


def get_sequence(session: Session, machine: int) -> list[Record]:
    if session.get(Machine, machine) is None:
        records = initial_records()
        set_sequence(session, machine, records)
        return records
    rows = session.exec(
        select(RecordRow).where(RecordRow.machine == machine).order_by(RecordRow.position)
    ).all()
    return [_to_record(row) for row in rows]


def get_mode(session: Session) -> Mode:
    state = session.get(TrackerState, 1)
    return Mode(state.mode) if state else settings.default_mode


def set_mode(session: Session, mode: Mode) -> Mode:
    state = session.get(TrackerState, 1) or TrackerState(id=1)
    state.mode = Mode(mode).value
    session.add(state)
    session.commit()
    return Mode(state.mode)


def load_usage(session: Session) -> UsageState | None:
    row = session.get(UsageWindow, 1)
    if row is None:
        return None
    reset_at = row.reset_at
    if reset_at.tzinfo is None:
        # sqlite hands back naive values; they were written as UTC
        reset_at = reset_at.replace(tzinfo=timezone.utc)
    return UsageState(count=row.count, reset_at=reset_at)


def save_usage(session: Session, state: UsageState) -> None:
    row = session.get(UsageWindow, 1) or UsageWindow(id=1, reset_at=state.reset_at)
    row.count = state.count
    row.reset_at = state.reset_at
    session.add(row)
    session.commit()
