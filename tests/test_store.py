from __future__ import annotations

import pytest
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from armory import create_app, db
from armory.errors import RecordNotFound, UnknownRecordKind
from armory.models import Character
from armory.store import RecordStore


def test_delete_with_no_rows_is_a_no_op(store, make_character):
    cid = make_character()
    for kind in ("weapon", "armor", "skill"):
        with store.transaction():
            assert store.delete_by_character_id(kind, cid) == 0


def test_delete_returns_row_count(store, make_character):
    cid = make_character()
    other = make_character(name="Other")
    with store.transaction():
        store.create("skill", {"character_id": cid, "name": "a"})
        store.create("skill", {"character_id": cid, "name": "b"})
        store.create("skill", {"character_id": other, "name": "c"})

    with store.transaction():
        assert store.delete_by_character_id("skill", cid) == 2
    assert len(store.find("skill", character_id=other)) == 1


def test_delete_by_character_id_refuses_characters(store):
    with pytest.raises(UnknownRecordKind):
        store.delete_by_character_id("character", 1)


def test_get_by_id_missing(store):
    with pytest.raises(RecordNotFound) as exc:
        store.get_by_id("character", 42)
    assert exc.value.kind == "character"
    assert exc.value.record_id == 42


def test_unknown_kind(store):
    with pytest.raises(UnknownRecordKind):
        store.find("potion", character_id=1)


def test_find_orders_by_id(store, make_character):
    cid = make_character()
    with store.transaction():
        first = store.create("weapon", {"character_id": cid, "attack": 1})
        second = store.create("weapon", {"character_id": cid, "attack": 2})
    assert [w.id for w in store.find("weapon", character_id=cid)] == [first.id, second.id]
    # the store itself does not enforce one-per-slot
    assert store.get_equipped("weapon", cid).id == first.id


def test_get_equipped_shapes(store, make_character):
    cid = make_character()
    assert store.get_equipped("armor", cid) is None
    assert store.get_equipped("skill", cid) == []


def test_update_by_id_ignores_id(store, make_character):
    cid = make_character(attack=1)
    with store.transaction():
        store.update_by_id("character", cid, {"id": 777, "attack": 9})
    assert db.session.get(Character, cid).attack == 9


def test_transaction_rolls_back_on_error(store, make_character):
    cid = make_character(attack=1)
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.update_by_id("character", cid, {"attack": 50})
            raise RuntimeError("boom")
    assert db.session.get(Character, cid).attack == 1


def test_concurrent_write_raises_stale_data(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'armory.db'}",
    })
    with app.app_context():
        db.create_all()
        store = RecordStore()
        with store.transaction():
            cid = store.create("character", {"name": "Racer"}).id

        mine = store.get_by_id("character", cid)
        assert mine.attack == 10

        with Session(db.engine) as other:
            theirs = other.get(Character, cid)
            theirs.attack = 99
            other.commit()

        with pytest.raises(StaleDataError):
            with store.transaction():
                store.update_by_id("character", cid, {"attack": 11})

        db.session.remove()
        db.drop_all()
