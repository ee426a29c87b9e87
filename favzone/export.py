"""CSV / JSON / text renderings of an enriched sequence."""
import json
from datetime import datetime, timezone
from typing import Iterable

from favzone.analytics.summary import summarize
from favzone.core.models import Mode, Record

BOM = "\ufeff"
CSV_HEADER = ["番号", "ゲーム数", "ボーナス種別", "有利区間開始", "有利区間終了", "セグメント番号"]
TEXT_TITLE = {
    Mode.GOLD: "沖ドキGOLD 有利区間計算結果",
    Mode.BLACK: "沖ドキBLACK&GS 有利区間計算結果",
}


def _cell(v) -> str:
    return "" if v is None else str(v)


def _quote(c: str) -> str:
    return '"' + c.replace('"', '""') + '"'


def to_csv(records: Iterable[Record]) -> str:
    rows = [CSV_HEADER]
    played = [r for r in records if not r.is_separator]
    for i, r in enumerate(played, start=1):
        rows.append([
            str(i),
            r.game_count,
            r.bonus_type.value,
            _cell(r.favorable_zone_start),
            _cell(r.favorable_zone_end),
            _cell(r.segment_number),
        ])
    body = "\n".join(",".join(_quote(c) for c in row) for row in rows)
    return BOM + body


def to_json(records: Iterable[Record], now: datetime | None = None) -> dict:
    records = list(records)
    now = now or datetime.now(timezone.utc)
    return {
        "exportDate": now.isoformat(),
        "totalRecords": len(records),
        "data": [r.model_dump(by_alias=True, mode="json") for r in records],
    }


def dumps(payload: dict) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def to_text(records: Iterable[Record], mode: Mode = Mode.GOLD, now: datetime | None = None) -> str:
    """Plain-text result sheet meant for pasting into chat or notes."""
    records = list(records)
    if not records:
        return "データがありません。履歴を入力してください。"
    now = now or datetime.now()
    s = summarize(records)

    head = f"総レコード数: {s['total']} | BB回数: {s['bb']} | RB回数: {s['rb']}"
    if s['current']:
        head += f" | 現在: {s['current']}"
    lines = [TEXT_TITLE[Mode(mode)], head, "", "回\tＧ数\t種\t有利開始\t終了"]

    n = 1
    for r in records:
        if r.is_separator:
            lines.append("--- 区切り ---")
            continue
        # zero values render blank like the on-screen sheet
        lines.append("\t".join([
            str(n),
            r.game_count,
            r.bonus_type.value,
            str(r.favorable_zone_start or ""),
            str(r.favorable_zone_end or ""),
        ]))
        n += 1

    lines.append("")
    lines.append(f"生成日時: {now:%Y/%m/%d %H:%M:%S}")
    return "\n".join(lines)
