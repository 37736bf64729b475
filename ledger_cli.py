#!/usr/bin/env python3
"""
ledger_cli.py: character + equipment ledger CLI.

Usage (from repo root, venv active):
  python ledger_cli.py characters:create --name Aria --current-exp 150
  python ledger_cli.py characters:list
  python ledger_cli.py characters:get --id 1

  python ledger_cli.py gear:show --id 1
  python ledger_cli.py gear:level-up --id 1
  python ledger_cli.py gear:equip-weapon --id 1 --name Sword --attack 3 --defence 1
  python ledger_cli.py gear:equip-armor --id 1 --name Mail --defence 4
  python ledger_cli.py gear:replace-skill --id 1 --name Fireball --description "big boom"
  python ledger_cli.py gear:unequip-weapon --id 1
  python ledger_cli.py gear:unequip-armor --id 1
  python ledger_cli.py gear:unequip-skill --id 1

Add --table to see pretty tables instead of plain text.
"""

from __future__ import annotations
from typing import Dict, Any, List
from contextlib import contextmanager
import argparse
import sys

from armory import create_app
from armory.errors import LedgerError
from armory.ledger import EquipmentLedger
from armory.models import Character
from armory.store import RecordStore

CHARACTER_COLS = [
    "id", "name", "level", "current_exp", "next_level_exp",
    "current_health", "max_health", "current_mana", "max_mana", "attack", "defence",
]
GEAR_COLS = ["id", "character_id", "name", "attack", "defence"]
SKILL_COLS = ["id", "character_id", "name", "description"]
ABSENT = {"weapon": "no weapon", "armor": "no armor", "skill": "no skill"}


# ----------------------------------------------------------------------
# App context
# ----------------------------------------------------------------------
_app = None
def _get_app():
    global _app
    if _app is None:
        _app = create_app()
    return _app

@contextmanager
def appctx():
    with _get_app().app_context():
        yield


# ----------------------------------------------------------------------
# Pretty tables (optional)
# ----------------------------------------------------------------------
def _cell(value) -> str:
    return "—" if value is None else str(value)

def _rule(widths: List[int], left: str, joint: str, right: str) -> str:
    return left + joint.join("─" * (w + 2) for w in widths) + right

def _rows_to_table(headers: List[str], rows: List[List[Any]]) -> str:
    cells = [[_cell(v) for v in row] for row in rows]
    widths = [max([len(h)] + [len(r[i]) for r in cells]) for i, h in enumerate(headers)]

    def line(values: List[str]) -> str:
        return "│ " + " │ ".join(v.ljust(widths[i]) for i, v in enumerate(values)) + " │"

    out = [_rule(widths, "┌", "┬", "┐"), line(headers), _rule(widths, "├", "┼", "┤")]
    out.extend(line(r) for r in cells)
    out.append(_rule(widths, "└", "┴", "┘"))
    return "\n".join(out)

def _print_table_dicts(title: str, rows: List[Dict[str, Any]], cols: List[str], use_table: bool) -> None:
    print(f"\n{title}")
    if not rows:
        print("(no results)")
        return
    if not use_table:
        for row in rows:
            line = "  " + " ".join(f"{k}={_cell(row.get(k))}" for k in cols)
            print(line)
        return
    print(_rows_to_table(cols, [[row.get(c) for c in cols] for row in rows]))


# ----------------------------------------------------------------------
# Character helpers
# ----------------------------------------------------------------------
def create_character(
    *,
    name: str,
    level: int = 1,
    current_exp: int = 0,
    next_level_exp: int = 100,
    max_health: int = 100,
    max_mana: int = 50,
    attack: int = 10,
    defence: int = 5,
) -> Character:
    store = RecordStore()
    with store.transaction():
        return store.create("character", {
            "name": name.strip(),
            "level": level,
            "current_exp": current_exp,
            "next_level_exp": next_level_exp,
            "max_health": max_health,
            "current_health": max_health,
            "max_mana": max_mana,
            "current_mana": max_mana,
            "attack": attack,
            "defence": defence,
        })

def _gear_payload(args) -> Dict[str, Any]:
    return {"name": args.name, "attack": args.attack, "defence": args.defence}


# ----------------------------------------------------------------------
# CLI
# ----------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Character progression & equipment ledger CLI")
    parser.add_argument("--table", action="store_true", help="Render output as pretty tables")
    sub = parser.add_subparsers(dest="cmd", required=True)

    # Characters
    cc = sub.add_parser("characters:create")
    cc.add_argument("--name", required=True)
    cc.add_argument("--level", type=int, default=1)
    cc.add_argument("--current-exp", type=int, default=0)
    cc.add_argument("--next-level-exp", type=int, default=100)
    cc.add_argument("--max-health", type=int, default=100)
    cc.add_argument("--max-mana", type=int, default=50)
    cc.add_argument("--attack", type=int, default=10)
    cc.add_argument("--defence", type=int, default=5)

    sub.add_parser("characters:list")

    cg = sub.add_parser("characters:get")
    cg.add_argument("--id", type=int, required=True)

    # Gear
    for name in ("gear:show", "gear:level-up", "gear:unequip-weapon", "gear:unequip-armor", "gear:unequip-skill"):
        p = sub.add_parser(name)
        p.add_argument("--id", type=int, required=True)

    for name in ("gear:equip-weapon", "gear:equip-armor"):
        p = sub.add_parser(name)
        p.add_argument("--id", type=int, required=True)
        p.add_argument("--name")
        p.add_argument("--attack", type=int, default=0)
        p.add_argument("--defence", type=int, default=0)

    rs = sub.add_parser("gear:replace-skill")
    rs.add_argument("--id", type=int, required=True)
    rs.add_argument("--name", required=True)
    rs.add_argument("--description")

    return parser


def _show_equipment(ledger: EquipmentLedger, character_id: int, use_table: bool) -> None:
    eq = ledger.query_equipment(character_id)
    if eq.weapon is None:
        print(f"\nWeapon\n  {ABSENT['weapon']}")
    else:
        _print_table_dicts("Weapon", [eq.weapon.to_dict()], GEAR_COLS, use_table)
    if eq.armor is None:
        print(f"\nArmor\n  {ABSENT['armor']}")
    else:
        _print_table_dicts("Armor", [eq.armor.to_dict()], GEAR_COLS, use_table)
    if eq.skill is None:
        print(f"\nSkill\n  {ABSENT['skill']}")
    else:
        _print_table_dicts("Skill", [s.to_dict() for s in eq.skill], SKILL_COLS, use_table)


def _dispatch(args, use_table: bool) -> int:
    store = RecordStore()
    ledger = EquipmentLedger(store)

    # CHARACTERS
    if args.cmd == "characters:create":
        c = create_character(
            name=args.name,
            level=args.level,
            current_exp=args.current_exp,
            next_level_exp=args.next_level_exp,
            max_health=args.max_health,
            max_mana=args.max_mana,
            attack=args.attack,
            defence=args.defence,
        )
        _print_table_dicts("Created Character", [c.to_dict()], CHARACTER_COLS, use_table)
        return 0

    if args.cmd == "characters:list":
        rows = [c.to_dict() for c in store.session.query(Character).order_by(Character.id.asc()).all()]
        _print_table_dicts("Characters", rows, CHARACTER_COLS, use_table)
        return 0

    if args.cmd == "characters:get":
        c = store.get_by_id("character", args.id)
        _print_table_dicts("Character", [c.to_dict()], CHARACTER_COLS, use_table)
        return 0

    # GEAR
    if args.cmd == "gear:show":
        store.get_by_id("character", args.id)
        _show_equipment(ledger, args.id, use_table)
        return 0

    if args.cmd == "gear:level-up":
        c = ledger.level_up(args.id)
        _print_table_dicts("Leveled Character", [c.to_dict()], CHARACTER_COLS, use_table)
        return 0

    if args.cmd == "gear:equip-weapon":
        w = ledger.equip_weapon(args.id, _gear_payload(args))
        _print_table_dicts("Equipped Weapon", [w.to_dict()], GEAR_COLS, use_table)
        return 0

    if args.cmd == "gear:equip-armor":
        a = ledger.equip_armor(args.id, _gear_payload(args))
        _print_table_dicts("Equipped Armor", [a.to_dict()], GEAR_COLS, use_table)
        return 0

    if args.cmd == "gear:replace-skill":
        s = ledger.replace_skill(args.id, {"name": args.name, "description": args.description})
        _print_table_dicts("Skill", [s.to_dict()], SKILL_COLS, use_table)
        return 0

    if args.cmd == "gear:unequip-weapon":
        ledger.unequip_weapon(args.id)
        print("\nUnequipped: weapon")
        return 0

    if args.cmd == "gear:unequip-armor":
        ledger.unequip_armor(args.id)
        print("\nUnequipped: armor")
        return 0

    if args.cmd == "gear:unequip-skill":
        ledger.unequip_skill(args.id)
        print("\nUnequipped: skill")
        return 0

    raise LookupError(f"no handler for command {args.cmd!r}")


def main(argv: List[str], app=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    use_table = bool(getattr(args, "table", False))

    ctx = app.app_context() if app is not None else appctx()
    with ctx:
        try:
            return _dispatch(args, use_table)
        except LedgerError as e:
            print(f"!! {e}")
            return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
