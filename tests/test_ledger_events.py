from __future__ import annotations

import logging

import pytest

from armory.ledger import EquipmentLedger


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def events():
    # the ledger logger does not propagate, so caplog never sees it
    logger = logging.getLogger("armory.ledger")
    handler = _Collect()
    logger.addHandler(handler)
    yield handler.records
    logger.removeHandler(handler)


@pytest.fixture
def ledger(store) -> EquipmentLedger:
    return EquipmentLedger(store)


def _only(records, event):
    matching = [r for r in records if r.event == event]
    assert len(matching) == 1
    return matching[0]


def test_level_up_event_carries_stat_changes(ledger, make_character, events):
    cid = make_character(level=1, current_exp=150, next_level_exp=100, attack=10, defence=5)
    ledger.level_up(cid)

    record = _only(events, "character.level_up")
    assert record.character_id == cid
    assert record.payload == {
        "levels": 1,
        "level": [1, 2],
        "attack": [10, 13],
        "defence": [5, 6],
    }


def test_level_up_without_levels_logs_nothing(ledger, make_character, events):
    cid = make_character(current_exp=0)
    ledger.level_up(cid)
    assert events == []


def test_weapon_events(ledger, make_character, events):
    cid = make_character(attack=5, defence=5)
    first = ledger.equip_weapon(cid, {"attack": 3, "defence": 1})
    second = ledger.equip_weapon(cid, {"attack": 1, "defence": 1})
    ledger.unequip_weapon(cid)

    equipped = [r for r in events if r.event == "weapon.equipped"]
    assert [r.payload for r in equipped] == [
        {"item_id": first.id, "attack": [5, 8], "defence": [5, 6]},
        {"item_id": second.id, "attack": [8, 6], "defence": [6, 6]},
    ]
    unequipped = _only(events, "weapon.unequipped")
    assert unequipped.character_id == cid
    assert unequipped.payload == {"item_id": second.id, "attack": [6, 5], "defence": [6, 5]}


def test_armor_events(ledger, make_character, events):
    cid = make_character(attack=5, defence=5)
    armor = ledger.equip_armor(cid, {"attack": 0, "defence": 4})
    ledger.unequip_armor(cid)

    assert _only(events, "armor.equipped").payload == {
        "item_id": armor.id, "attack": [5, 5], "defence": [5, 9],
    }
    assert _only(events, "armor.unequipped").payload == {
        "item_id": armor.id, "attack": [5, 5], "defence": [9, 5],
    }


def test_unequip_empty_slot_logs_nothing(ledger, make_character, events):
    cid = make_character()
    ledger.unequip_weapon(cid)
    ledger.unequip_armor(cid)
    assert events == []


def test_skill_events(ledger, make_character, events):
    cid = make_character()
    skill = ledger.replace_skill(cid, {"name": "Heal"})
    ledger.unequip_skill(cid)

    replaced = _only(events, "skill.replaced")
    assert replaced.character_id == cid
    assert replaced.payload == {"item_id": skill.id, "removed": 0}
    assert _only(events, "skill.unequipped").payload == {"removed": 1}


def test_failed_commit_logs_no_event(ledger, store, make_character, events, monkeypatch):
    cid = make_character(attack=5, defence=5, current_exp=150)

    def _boom():
        raise RuntimeError("commit failed")

    monkeypatch.setattr(store.session, "commit", _boom)
    with pytest.raises(RuntimeError):
        ledger.equip_weapon(cid, {"attack": 3, "defence": 1})
    with pytest.raises(RuntimeError):
        ledger.level_up(cid)

    assert events == []
