from __future__ import annotations

from typing import Generator

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from armory import create_app, db  # type: ignore  # noqa: E402
from armory.store import RecordStore  # type: ignore  # noqa: E402


@pytest.fixture
def app() -> Generator:
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def store(app) -> RecordStore:
    return RecordStore()


@pytest.fixture
def make_character(store):
    def _make(**fields) -> int:
        values = {"name": "Hero", "attack": 5, "defence": 5}
        values.update(fields)
        with store.transaction():
            character = store.create("character", values)
        return character.id

    return _make
