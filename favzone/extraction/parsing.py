"""Turn the model's reply text into (game, type) pairs.

The backend is asked for ``{"results": [{"game": 123, "type": "BB"}]}`` but
replies sometimes wrap the object in prose or skip JSON entirely, so the
parser falls back to pulling the first ``{...}`` block and then to scanning
the text for ``<games> BB|RB`` pairs.
"""
import json
import math
import re

from favzone.core.models import BonusType, RawRecord

_OBJECT = re.compile(r"\{[\s\S]*\}")
_PAIR = re.compile(r"(\d+)\s*([BR]B)", re.IGNORECASE)
_LINE_PAIR = re.compile(r"(\d+).*?([BR]B)", re.IGNORECASE)


def _load(text: str):
    try:
        return json.loads(text)
    except ValueError:
        pass
    m = _OBJECT.search(text)
    if not m:
        return None
    try:
        return json.loads(m.group(0))
    except ValueError:
        return None


def _valid(item) -> bool:
    if not isinstance(item, dict):
        return False
    game = item.get("game")
    if isinstance(game, bool) or not isinstance(game, (int, float)):
        return False
    if not math.isfinite(game) or game < 0 or game != int(game):
        return False
    return item.get("type") in ("BB", "RB")


def parse_manually(text: str) -> list[RawRecord]:
    def pairs(matches):
        out = []
        for m in matches:
            game = int(m.group(1))
            if game > 0:
                out.append(RawRecord(game=game, type=BonusType(m.group(2).upper())))
        return out

    found = pairs(_PAIR.finditer(text))
    if found:
        return found
    return pairs(m for m in map(_LINE_PAIR.search, text.splitlines()) if m)


def parse_reply(text: str | None) -> list[RawRecord]:
    if not text:
        return []
    payload = _load(text)
    if payload is None:
        return parse_manually(text)
    items = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []
    return [RawRecord(game=int(i["game"]), type=BonusType(i["type"])) for i in items if _valid(i)]
