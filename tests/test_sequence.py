import pytest

from favzone.core.models import BonusType, RawRecord
from favzone.core.sequence import (RecordNotFound, add_record, delete_record, initial_records, merge_extracted,
                                   move_record, new_record, reorder, reverse_records, toggle_bonus,
                                   toggle_separator, update_record)


def ids(records):
    return [r.id for r in records]

def test_initial_template():
    recs = initial_records()
    assert [r.bonus_type for r in recs] == [BonusType.EMPTY, BonusType.EMPTY, BonusType.CURRENT]
    assert all(r.game_count == "" and not r.is_separator for r in recs)
    assert len(set(ids(recs))) == 3

def test_add_top_and_bottom():
    recs = initial_records()
    top = add_record(recs, "top")
    bottom = add_record(recs, "bottom")
    assert ids(top)[1:] == ids(recs) and top[0].bonus_type == BonusType.EMPTY
    assert ids(bottom)[:3] == ids(recs)
    assert len(recs) == 3
    with pytest.raises(ValueError):
        add_record(recs, "middle")

def test_update_fields():
    recs = initial_records()
    out = update_record(recs, recs[0].id, game_count="250", bonus_type="BB")
    assert out[0].game_count == "250" and out[0].bonus_type == BonusType.BB
    assert out[0].id == recs[0].id
    assert recs[0].game_count == ""
    with pytest.raises(ValueError):
        update_record(recs, recs[0].id, favorable_zone_start=5)
    with pytest.raises(RecordNotFound):
        update_record(recs, "nope", game_count="1")

def test_toggle_bonus_clears_when_same():
    recs = initial_records()
    rid = recs[0].id
    once = toggle_bonus(recs, rid, BonusType.RB)
    assert once[0].bonus_type == BonusType.RB
    twice = toggle_bonus(once, rid, BonusType.RB)
    assert twice[0].bonus_type == BonusType.EMPTY
    switched = toggle_bonus(once, rid, "BB")
    assert switched[0].bonus_type == BonusType.BB

def test_toggle_separator_keeps_bonus():
    recs = initial_records()
    recs = toggle_bonus(recs, recs[1].id, BonusType.BB)
    out = toggle_separator(recs, recs[1].id)
    assert out[1].is_separator and out[1].bonus_type == BonusType.BB
    assert not toggle_separator(out, recs[1].id)[1].is_separator

def test_delete():
    recs = initial_records()
    out = delete_record(recs, recs[1].id)
    assert ids(out) == [recs[0].id, recs[2].id]
    with pytest.raises(RecordNotFound):
        delete_record(out, recs[1].id)

def test_move():
    recs = [new_record(game_count=str(i)) for i in range(4)]
    out = move_record(recs, 0, 2)
    assert [r.game_count for r in out] == ["1", "2", "0", "3"]
    with pytest.raises(IndexError):
        move_record(recs, 0, 4)

def test_reorder_requires_permutation():
    recs = initial_records()
    wanted = [recs[2].id, recs[0].id, recs[1].id]
    assert ids(reorder(recs, wanted)) == wanted
    with pytest.raises(ValueError):
        reorder(recs, wanted[:2])
    with pytest.raises(ValueError):
        reorder(recs, [recs[0].id, recs[0].id, recs[1].id])

def test_reverse_includes_current():
    recs = initial_records()
    out = reverse_records(recs)
    assert out[0].bonus_type == BonusType.CURRENT
    assert ids(out) == ids(recs)[::-1]

def test_merge_append_before_current():
    recs = initial_records()
    raw = [RawRecord(game=120, type=BonusType.BB), RawRecord(game=33, type=BonusType.RB)]
    out = merge_extracted(recs, raw, "append")
    assert len(out) == 5
    assert [(r.game_count, r.bonus_type) for r in out[2:4]] == [("120", BonusType.BB), ("33", BonusType.RB)]
    assert out[4].id == recs[2].id

def test_merge_append_without_current():
    recs = [new_record(game_count="5")]
    out = merge_extracted(recs, [RawRecord(game=9, type=BonusType.RB)], "append")
    assert [r.game_count for r in out] == ["5", "9"]

def test_merge_overwrite():
    recs = initial_records()
    out = merge_extracted(recs, [RawRecord(game=80, type=BonusType.BB)], "overwrite")
    assert [(r.game_count, r.bonus_type) for r in out] == [("80", BonusType.BB), ("", BonusType.CURRENT)]
    assert not set(ids(out)) & set(ids(recs))
    with pytest.raises(ValueError):
        merge_extracted(recs, [], "replace")
