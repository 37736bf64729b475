# models.py
from __future__ import annotations

from datetime import datetime

from armory import db
from sqlalchemy import ForeignKey
from sqlalchemy.orm import relationship

from .stats import Bonus, CharacterStats


class Character(db.Model):
    __tablename__ = "characters"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)

    level          = db.Column(db.Integer, default=1, nullable=False)
    current_exp    = db.Column(db.Integer, default=0, nullable=False)
    next_level_exp = db.Column(db.Integer, default=100, nullable=False)
    max_health     = db.Column(db.Integer, default=100, nullable=False)
    current_health = db.Column(db.Integer, default=100, nullable=False)
    max_mana       = db.Column(db.Integer, default=50, nullable=False)
    current_mana   = db.Column(db.Integer, default=50, nullable=False)
    # running totals: implicit base plus equipped weapon/armor bonuses
    attack         = db.Column(db.Integer, default=10, nullable=False)
    defence        = db.Column(db.Integer, default=5, nullable=False)

    version_id = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # relationships (no uselist=False: the slot limit lives in the ledger, not the schema)
    weapons = relationship("Weapon", back_populates="character", cascade="all, delete-orphan", passive_deletes=True)
    armors = relationship("Armor", back_populates="character", cascade="all, delete-orphan", passive_deletes=True)
    skills = relationship("Skill", back_populates="character", cascade="all, delete-orphan", passive_deletes=True)

    __mapper_args__ = {"version_id_col": version_id}

    def snapshot(self) -> CharacterStats:
        """Freeze the current stat columns into an immutable snapshot."""

        return CharacterStats(
            level=self.level,
            current_exp=self.current_exp,
            next_level_exp=self.next_level_exp,
            max_health=self.max_health,
            current_health=self.current_health,
            max_mana=self.max_mana,
            current_mana=self.current_mana,
            attack=self.attack,
            defence=self.defence,
        )

    def to_dict(self) -> dict[str, int | str | None]:
        return {
            "id": self.id,
            "name": self.name,
            **self.snapshot().as_dict(),
        }

    def __repr__(self):
        return f"<Character {self.id} {self.name!r} lvl={self.level}>"


class _GearMixin:
    """Shared columns for records linked to a character by foreign key."""

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Weapon(_GearMixin, db.Model):
    __tablename__ = "weapons"

    character_id = db.Column(db.Integer, ForeignKey("characters.id", ondelete="CASCADE"), nullable=False, index=True)
    attack = db.Column(db.Integer, default=0, nullable=False)
    defence = db.Column(db.Integer, default=0, nullable=False)

    character = relationship("Character", back_populates="weapons")

    @property
    def bonus(self) -> Bonus:
        return Bonus(attack=self.attack or 0, defence=self.defence or 0)

    def to_dict(self) -> dict[str, int | str | None]:
        return {
            "id": self.id,
            "character_id": self.character_id,
            "name": self.name,
            "attack": self.attack,
            "defence": self.defence,
        }

    def __repr__(self):
        return f"<Weapon {self.id} char={self.character_id} +{self.attack}/+{self.defence}>"


class Armor(_GearMixin, db.Model):
    __tablename__ = "armors"

    character_id = db.Column(db.Integer, ForeignKey("characters.id", ondelete="CASCADE"), nullable=False, index=True)
    attack = db.Column(db.Integer, default=0, nullable=False)
    defence = db.Column(db.Integer, default=0, nullable=False)

    character = relationship("Character", back_populates="armors")

    @property
    def bonus(self) -> Bonus:
        return Bonus(attack=self.attack or 0, defence=self.defence or 0)

    def to_dict(self) -> dict[str, int | str | None]:
        return {
            "id": self.id,
            "character_id": self.character_id,
            "name": self.name,
            "attack": self.attack,
            "defence": self.defence,
        }

    def __repr__(self):
        return f"<Armor {self.id} char={self.character_id} +{self.attack}/+{self.defence}>"


class Skill(_GearMixin, db.Model):
    __tablename__ = "skills"

    character_id = db.Column(db.Integer, ForeignKey("characters.id", ondelete="CASCADE"), nullable=False, index=True)
    description = db.Column(db.String(255))

    character = relationship("Character", back_populates="skills")

    def to_dict(self) -> dict[str, int | str | None]:
        return {
            "id": self.id,
            "character_id": self.character_id,
            "name": self.name,
            "description": self.description,
        }

    def __repr__(self):
        return f"<Skill {self.id} char={self.character_id} {self.name!r}>"
