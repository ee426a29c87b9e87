from typing import Iterable

from favzone.core.models import BonusType, Record


def summarize(records: Iterable[Record]) -> dict:
    # separators and rows without a game count are not play results
    played = [r for r in records if not r.is_separator and r.game_count]
    return {
        'total': len(played),
        'bb': sum(1 for r in played if r.bonus_type == BonusType.BB),
        'rb': sum(1 for r in played if r.bonus_type == BonusType.RB),
        'current': sum(1 for r in played if r.bonus_type == BonusType.CURRENT),
    }
