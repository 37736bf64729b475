"""Record store over the Flask-SQLAlchemy session.

The ledger only talks to persistence through ``RecordStore``. Writes are
flushed but never committed here; ``transaction()`` is the single commit /
rollback point for one ledger operation.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Type

from flask import current_app

from armory import db
from .errors import RecordNotFound, UnknownRecordKind
from .models import Armor, Character, Skill, Weapon

KINDS: Dict[str, Type[db.Model]] = {
    "character": Character,
    "weapon": Weapon,
    "armor": Armor,
    "skill": Skill,
}
SLOT_KINDS = ("weapon", "armor")
GEAR_KINDS = ("weapon", "armor", "skill")


def model_for(kind: str) -> Type[db.Model]:
    try:
        return KINDS[kind]
    except KeyError:
        raise UnknownRecordKind(kind) from None


class RecordStore:
    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    # ---- Transaction boundary --------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            current_app.logger.warning("store transaction rolled back", exc_info=True)
            raise

    # ---- Reads -------------------------------------------------------------
    def find(self, kind: str, **criteria: Any) -> List[Any]:
        model = model_for(kind)
        return self.session.query(model).filter_by(**criteria).order_by(model.id.asc()).all()

    def get_by_id(self, kind: str, record_id: Any):
        record = self.session.get(model_for(kind), record_id)
        if record is None:
            raise RecordNotFound(kind, record_id)
        return record

    def get_equipped(self, kind: str, character_id: Any):
        """Single linked Weapon/Armor (or None); list of Skills."""
        if kind not in GEAR_KINDS:
            raise UnknownRecordKind(kind)
        records = self.find(kind, character_id=character_id)
        if kind in SLOT_KINDS:
            return records[0] if records else None
        return records

    # ---- Writes ------------------------------------------------------------
    def create(self, kind: str, record: Any):
        model = model_for(kind)
        if isinstance(record, Mapping):
            record = model(**record)
        elif not isinstance(record, model):
            raise TypeError(f"expected {model.__name__} or mapping, got {type(record).__name__}")
        self.session.add(record)
        self.session.flush()  # assigns the id
        return record

    def update_by_id(self, kind: str, record_id: Any, values: Mapping[str, Any]) -> None:
        record = self.get_by_id(kind, record_id)
        for key, value in values.items():
            if key == "id":
                continue
            setattr(record, key, value)
        self.session.flush()

    def delete_by_character_id(self, kind: str, character_id: Any) -> int:
        """Delete every record of ``kind`` linked to the character.

        Deleting zero rows is a no-op and returns 0.
        """
        if kind not in GEAR_KINDS:
            raise UnknownRecordKind(kind)
        model = model_for(kind)
        count = (
            self.session.query(model)
            .filter_by(character_id=character_id)
            .delete(synchronize_session="fetch")
        )
        self.session.flush()
        return int(count or 0)

    def exists(self, kind: str, character_id: Any) -> bool:
        return bool(self.find(kind, character_id=character_id))


def record_payload(kind: str, payload: Any) -> Dict[str, Any]:
    """Normalise a gear payload (model instance or mapping) to column values.

    ``id`` and ``character_id`` are dropped; the store and ledger own them.
    """
    model = model_for(kind)
    allowed = {c.key for c in model.__table__.columns} - {"id", "character_id", "created_at"}

    if isinstance(payload, model):
        return {key: getattr(payload, key) for key in allowed if getattr(payload, key) is not None}
    if not isinstance(payload, Mapping):
        raise TypeError(f"expected {model.__name__} or mapping, got {type(payload).__name__}")

    unknown = set(payload) - allowed - {"id", "character_id"}
    if unknown:
        raise ValueError(f"unknown {kind} fields: {', '.join(sorted(unknown))}")
    return {key: value for key, value in payload.items() if key in allowed}

