from datetime import datetime, timedelta, timezone

import structlog
from sqlmodel import Session

from favzone.analytics.summary import summarize
from favzone.config import settings
from favzone.core import sequence, usage
from favzone.core.calculator import recalculate
from favzone.core.models import Mode
from favzone.db.crud import get_mode, get_sequence, load_usage, save_usage, set_mode, set_sequence
from favzone.extraction.client import ExtractionClient

log = structlog.get_logger(__name__)


class UsageLimitReached(Exception):
    def __init__(self, minutes: int):
        super().__init__(f"使用制限に達しました。あと{minutes}分後にリセットされます。")
        self.minutes = minutes


class NoRecordsDetected(Exception):
    def __init__(self):
        super().__init__("AI could not detect any game data. Please try a clearer image.")


def _window() -> timedelta:
    return timedelta(minutes=settings.usage_window_minutes)


def get_view(session: Session, machine: int):
    mode = get_mode(session)
    records = recalculate(get_sequence(session, machine), mode)
    return {'machine': machine, 'mode': mode, 'records': records, 'summary': summarize(records)}


def _mutate(session: Session, machine: int, op, *args, **kwargs):
    records = op(get_sequence(session, machine), *args, **kwargs)
    set_sequence(session, machine, records)
    return get_view(session, machine)


def add_record(session: Session, machine: int, position: str = "bottom"):
    return _mutate(session, machine, sequence.add_record, position)


def update_record(session: Session, machine: int, record_id: str, **fields):
    return _mutate(session, machine, sequence.update_record, record_id, **fields)


def toggle_bonus(session: Session, machine: int, record_id: str, bonus_type):
    return _mutate(session, machine, sequence.toggle_bonus, record_id, bonus_type)


def toggle_separator(session: Session, machine: int, record_id: str):
    return _mutate(session, machine, sequence.toggle_separator, record_id)


def delete_record(session: Session, machine: int, record_id: str):
    return _mutate(session, machine, sequence.delete_record, record_id)


def move_record(session: Session, machine: int, from_index: int, to_index: int):
    return _mutate(session, machine, sequence.move_record, from_index, to_index)


def reorder(session: Session, machine: int, ids: list[str]):
    return _mutate(session, machine, sequence.reorder, ids)


def reverse_records(session: Session, machine: int):
    return _mutate(session, machine, sequence.reverse_records)


def clear_records(session: Session, machine: int):
    set_sequence(session, machine, sequence.initial_records())
    log.info("records_cleared", machine=machine)
    return get_view(session, machine)


def change_mode(session: Session, mode: Mode):
    mode = set_mode(session, mode)
    log.info("mode_changed", mode=mode)
    return mode


def get_usage(session: Session, now: datetime | None = None):
    now = now or datetime.now(timezone.utc)
    state = usage.refresh(load_usage(session), now, _window())
    limit = settings.usage_max_per_window
    return {
        'count': state.count,
        'max_uses': limit,
        'remaining_uses': usage.remaining_uses(state, limit),
        'remaining_minutes': usage.remaining_minutes(state, now),
        'limit_reached': usage.is_limit_reached(state, limit),
    }


def import_image(session: Session, machine: int, data: bytes, filename: str, content_type: str,
                 how: str = "append", client: ExtractionClient | None = None, now: datetime | None = None):
    """Extract records from a history screenshot and splice them in."""
    if how not in ("append", "overwrite"):
        raise ValueError("how must be 'append' or 'overwrite'")
    now = now or datetime.now(timezone.utc)
    state = usage.refresh(load_usage(session), now, _window())
    if usage.is_limit_reached(state, settings.usage_max_per_window):
        raise UsageLimitReached(usage.remaining_minutes(state, now))

    client = client or ExtractionClient.from_settings()
    log.info("image_import_started", machine=machine, how=how, size=len(data))
    raw = client.extract(data, filename, content_type)
    # a finished backend call counts even when nothing was found
    save_usage(session, usage.increment(state))
    if not raw:
        log.info("image_import_empty", machine=machine)
        raise NoRecordsDetected()

    view = _mutate(session, machine, sequence.merge_extracted, raw, how)
    log.info("image_import_done", machine=machine, added=len(raw))
    return view
