"""Stat snapshots and the pure transitions applied to them.

Nothing in here touches the database: the ledger loads a snapshot from a
``Character`` row, runs it through these functions and writes the result
back. Attack and defence are running totals (implicit base plus equipped
bonuses), so gear changes are always expressed as an added or removed
``Bonus`` rather than recomputed from a stored base.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Dict, Tuple

EXP_STEP = 100          # next_level_exp grows by this much per level gained
HEALTH_PER_LEVEL = 10
MANA_PER_LEVEL = 5
ATTACK_PER_LEVEL = 3
DEFENCE_PER_LEVEL = 1


@dataclass(frozen=True)
class Bonus:
    """Attack/defence contribution of an equipped item."""

    attack: int = 0
    defence: int = 0


@dataclass(frozen=True)
class CharacterStats:
    """Immutable snapshot of a character's progression and combat stats."""

    level: int
    current_exp: int
    next_level_exp: int
    max_health: int
    current_health: int
    max_mana: int
    current_mana: int
    attack: int
    defence: int

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def levels_earned(current_exp: int, next_level_exp: int) -> Tuple[int, int, int]:
    """Walk the exp thresholds; return ``(levels, current_exp, next_level_exp)``."""
    if next_level_exp <= 0:
        raise ValueError(f"next_level_exp must be positive, got {next_level_exp}")

    levels = 0
    while current_exp >= next_level_exp:
        levels += 1
        current_exp -= next_level_exp
        next_level_exp += EXP_STEP
    return levels, current_exp, next_level_exp


def level_up(stats: CharacterStats) -> Tuple[CharacterStats, int]:
    """Apply every level the accumulated exp pays for.

    Returns the new snapshot and the number of levels gained. With zero
    levels the input snapshot is returned as-is. Any gained level fully
    restores health and mana.
    """
    levels, current_exp, next_level_exp = levels_earned(stats.current_exp, stats.next_level_exp)
    if levels == 0:
        return stats, 0

    max_health = stats.max_health + HEALTH_PER_LEVEL * levels
    max_mana = stats.max_mana + MANA_PER_LEVEL * levels
    return replace(
        stats,
        level=stats.level + levels,
        current_exp=current_exp,
        next_level_exp=next_level_exp,
        max_health=max_health,
        current_health=max_health,
        max_mana=max_mana,
        current_mana=max_mana,
        attack=stats.attack + ATTACK_PER_LEVEL * levels,
        defence=stats.defence + DEFENCE_PER_LEVEL * levels,
    ), levels


def apply_bonus(stats: CharacterStats, bonus: Bonus) -> CharacterStats:
    return replace(stats, attack=stats.attack + bonus.attack, defence=stats.defence + bonus.defence)


def remove_bonus(stats: CharacterStats, bonus: Bonus) -> CharacterStats:
    return replace(stats, attack=stats.attack - bonus.attack, defence=stats.defence - bonus.defence)
