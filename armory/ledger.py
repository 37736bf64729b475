"""Character progression and equipment ledger.

Every operation follows the same shape: load a stat snapshot from the
character row, derive the new snapshot with ``armory.stats``, write it back
and apply the gear mutation, all inside one store transaction. The event
for an operation is logged only once that transaction has committed.
"""
from __future__ import annotations

from typing import Any, List, NamedTuple, Optional

from .logging_config import get_logger, log_event
from .models import Armor, Character, Skill, Weapon
from .stats import Bonus, CharacterStats, apply_bonus, level_up, remove_bonus
from .store import RecordStore, record_payload

_logger = get_logger("armory.ledger")


class Equipment(NamedTuple):
    """What a character has attached; ``None`` marks an empty slot."""

    weapon: Optional[Weapon]
    armor: Optional[Armor]
    skill: Optional[List[Skill]]


def _payload_bonus(values: dict) -> Bonus:
    return Bonus(attack=values.get("attack") or 0, defence=values.get("defence") or 0)


class EquipmentLedger:
    def __init__(self, store: RecordStore | None = None):
        self.store = store or RecordStore()

    # ---- helpers -------------------------------------------------------------
    def _load(self, character_id: Any) -> Character:
        return self.store.get_by_id("character", character_id)

    def _save(self, character_id: Any, stats: CharacterStats) -> None:
        self.store.update_by_id("character", character_id, stats.as_dict())

    def _equip(self, kind: str, character_id: Any, item: Any):
        values = record_payload(kind, item)
        character = self._load(character_id)
        before = character.snapshot()

        # add the new bonus and reverse the old one as two separate deltas
        stats = apply_bonus(before, _payload_bonus(values))
        if self.store.exists(kind, character_id):
            old = self.store.get_equipped(kind, character_id)
            stats = remove_bonus(stats, old.bonus)
            self.store.delete_by_character_id(kind, character_id)

        self._save(character_id, stats)
        stored = self.store.create(kind, {**values, "character_id": character_id})
        return stored, before, stats

    def _unequip(self, kind: str, character_id: Any):
        """Return ``(old_item_id, before, after)``, or None when the slot is empty."""
        if not self.store.exists(kind, character_id):
            return None

        old = self.store.get_equipped(kind, character_id)
        old_id = old.id
        before = self._load(character_id).snapshot()
        stats = remove_bonus(before, old.bonus)
        self.store.delete_by_character_id(kind, character_id)
        self._save(character_id, stats)
        return old_id, before, stats

    def _log_change(self, event: str, character_id: Any, item_id: Any,
                    before: CharacterStats, after: CharacterStats) -> None:
        log_event(
            _logger, event, character_id,
            item_id=item_id,
            attack=[before.attack, after.attack],
            defence=[before.defence, after.defence],
        )

    # ---- public operations ---------------------------------------------------
    def level_up(self, character_id: Any) -> Character:
        """Spend accumulated exp on as many levels as it covers."""
        with self.store.transaction():
            character = self._load(character_id)
            before = character.snapshot()
            stats, levels = level_up(before)
            if levels:
                self._save(character_id, stats)
        if levels:
            log_event(
                _logger, "character.level_up", character_id,
                levels=levels,
                level=[before.level, stats.level],
                attack=[before.attack, stats.attack],
                defence=[before.defence, stats.defence],
            )
        return character

    def equip_weapon(self, character_id: Any, weapon: Any) -> Weapon:
        with self.store.transaction():
            stored, before, after = self._equip("weapon", character_id, weapon)
        self._log_change("weapon.equipped", character_id, stored.id, before, after)
        return stored

    def equip_armor(self, character_id: Any, armor: Any) -> Armor:
        with self.store.transaction():
            stored, before, after = self._equip("armor", character_id, armor)
        self._log_change("armor.equipped", character_id, stored.id, before, after)
        return stored

    def replace_skill(self, character_id: Any, skill: Any) -> Skill:
        values = record_payload("skill", skill)
        with self.store.transaction():
            self._load(character_id)
            removed = self.store.delete_by_character_id("skill", character_id)
            stored = self.store.create("skill", {**values, "character_id": character_id})
        log_event(_logger, "skill.replaced", character_id, item_id=stored.id, removed=removed)
        return stored

    def unequip_weapon(self, character_id: Any) -> None:
        with self.store.transaction():
            change = self._unequip("weapon", character_id)
        if change:
            old_id, before, after = change
            self._log_change("weapon.unequipped", character_id, old_id, before, after)

    def unequip_armor(self, character_id: Any) -> None:
        with self.store.transaction():
            change = self._unequip("armor", character_id)
        if change:
            old_id, before, after = change
            self._log_change("armor.unequipped", character_id, old_id, before, after)

    def unequip_skill(self, character_id: Any) -> None:
        with self.store.transaction():
            removed = self.store.delete_by_character_id("skill", character_id)
        log_event(_logger, "skill.unequipped", character_id, removed=removed)

    def query_equipment(self, character_id: Any) -> Equipment:
        slots = {}
        for kind in ("weapon", "armor", "skill"):
            found = self.store.exists(kind, character_id)
            slots[kind] = self.store.get_equipped(kind, character_id) if found else None
        return Equipment(**slots)
