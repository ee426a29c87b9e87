import re
import unicodedata
from typing import Iterable

from favzone.core.models import BonusType, Mode, Record

_DIGITS = re.compile(r"[0-9]+")


def parse_game_count(text) -> int:
    # blank, negative or non-numeric input counts as 0 games
    if text is None:
        return 0
    s = unicodedata.normalize("NFKC", str(text)).strip()
    if not _DIGITS.fullmatch(s):
        return 0
    return int(s)


def bonus_games(bonus_type, mode=Mode.GOLD) -> int:
    """Fixed games added to the favorable zone by a bonus outcome."""
    black = mode == Mode.BLACK
    match bonus_type:
        case BonusType.BB:
            return 59 if black else 69
        case BonusType.RB:
            return 24 if black else 29
        case BonusType.CURRENT | BonusType.EMPTY:
            return 0
        case _:
            return 0


def recalculate(records: Iterable[Record], mode: Mode = Mode.GOLD) -> list[Record]:
    """Derive favorable-zone start/end and segment numbers for a sequence.

    Returns new records in the same order; the inputs are left untouched.
    A separator row resets the running total and the segment counter and
    gets start=end=0, segment 0.
    """
    out = []
    acc = 0
    seg = 0
    for r in records:
        if r.is_separator:
            acc = seg = 0
            out.append(r.model_copy(update={
                "favorable_zone_start": 0,
                "favorable_zone_end": 0,
                "segment_number": 0,
            }))
            continue
        seg += 1
        start = acc + parse_game_count(r.game_count)
        end = start + bonus_games(r.bonus_type, mode)
        acc = end
        out.append(r.model_copy(update={
            "favorable_zone_start": start,
            "favorable_zone_end": end,
            "segment_number": seg,
        }))
    return out
