"""Item template tables.

Templates come from a JSON document shaped like `roguegen/data/items.json`
(one list per category, camelCase keys). `load_item_templates` reads the
file named by ROGUEGEN_ITEM_DATA or the packaged default; if the file cannot
be read it logs a warning and falls back to FALLBACK_ITEM_DATA so generation
never stops for missing data.

Malformed records are a different matter: an unknown subtype, rarity or
power tier, or broken dice notation, raises ValueError straight away.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from roguegen.logging_utils import get_logger
from roguegen.models import PotionType, PowerTier, RingType, ScrollType, WandType
from roguegen.random_source import parse_dice

log = get_logger("roguegen.templates")

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_ITEM_DATA = DATA_DIR / "items.json"

RARITIES = ("common", "uncommon", "rare", "legendary")
LIGHT_KINDS = ("torch", "lantern", "artifact")


@dataclass
class ItemTemplate:
    category: str
    name: str
    rarity: str
    subtype: Any = None
    sprite_name: str = ""
    power_tier: Optional[PowerTier] = None
    min_depth: Optional[int] = None
    max_depth: Optional[int] = None
    stats: Dict[str, Any] = field(default_factory=dict)

    def in_depth_window(self, depth: int) -> bool:
        if self.min_depth is not None and depth < self.min_depth:
            return False
        if self.max_depth is not None and depth >= self.max_depth:
            return False
        return True

    def available_at(self, depth: int, tiers: Sequence[PowerTier]) -> bool:
        if self.power_tier is not None and self.power_tier not in tiers:
            return False
        return self.in_depth_window(depth)


@dataclass
class TemplateTable:
    by_category: Dict[str, List[ItemTemplate]] = field(default_factory=dict)

    def for_category(self, category: str) -> List[ItemTemplate]:
        return self.by_category.get(category, [])

    def first(self, category: str) -> Optional[ItemTemplate]:
        found = self.for_category(category)
        return found[0] if found else None

    def __len__(self):
        return sum(len(v) for v in self.by_category.values())


FALLBACK_ITEM_DATA: Dict[str, List[Dict[str, Any]]] = {
    "weapons": [
        {"name": "Dagger", "damage": "1d6", "rarity": "common"},
        {"name": "Short Sword", "damage": "1d8", "rarity": "common"},
        {"name": "Mace", "damage": "2d4", "rarity": "common"},
        {"name": "Spear", "damage": "2d3", "rarity": "common"},
        {"name": "Long Sword", "damage": "1d12", "rarity": "uncommon"},
        {"name": "Battle Axe", "damage": "2d8", "rarity": "uncommon"},
        {"name": "Flail", "damage": "2d5", "rarity": "uncommon"},
        {"name": "Two-Handed Sword", "damage": "3d6", "rarity": "rare"},
    ],
    "armor": [
        {"name": "Leather Armor", "ac": 8, "rarity": "common"},
        {"name": "Studded Leather", "ac": 7, "rarity": "common"},
        {"name": "Ring Mail", "ac": 7, "rarity": "uncommon"},
        {"name": "Scale Mail", "ac": 6, "rarity": "uncommon"},
        {"name": "Chain Mail", "ac": 5, "rarity": "uncommon"},
        {"name": "Splint Mail", "ac": 4, "rarity": "rare"},
        {"name": "Plate Mail", "ac": 3, "rarity": "rare"},
    ],
    "potions": [
        {"type": "MINOR_HEAL", "effect": "restore_hp", "power": "1d8", "rarity": "common", "powerTier": "basic", "minDepth": 1, "maxDepth": 10},
        {"type": "MEDIUM_HEAL", "effect": "restore_hp", "power": "3d8", "rarity": "uncommon", "powerTier": "intermediate", "minDepth": 8, "maxDepth": 18},
        {"type": "MAJOR_HEAL", "effect": "restore_hp", "power": "6d8", "rarity": "uncommon", "powerTier": "advanced", "minDepth": 15, "maxDepth": 27},
        {"type": "SUPERIOR_HEAL", "effect": "restore_hp", "power": "9d8", "rarity": "rare", "powerTier": "advanced", "minDepth": 20, "maxDepth": 27},
        {"type": "GAIN_STRENGTH", "effect": "increase_strength", "power": "1", "rarity": "uncommon"},
        {"type": "RESTORE_STRENGTH", "effect": "restore_strength", "power": "1", "rarity": "common"},
        {"type": "POISON", "effect": "damage", "power": "1d6", "rarity": "common"},
        {"type": "HASTE_SELF", "effect": "haste", "power": "1d10", "rarity": "uncommon"},
        {"type": "RAISE_LEVEL", "effect": "level_up", "power": "1", "rarity": "rare"},
    ],
    "scrolls": [
        {"type": "IDENTIFY", "effect": "identify_item", "rarity": "common"},
        {"type": "ENCHANT_WEAPON", "effect": "enchant_weapon", "rarity": "uncommon"},
        {"type": "ENCHANT_ARMOR", "effect": "enchant_armor", "rarity": "uncommon"},
        {"type": "MAGIC_MAPPING", "effect": "reveal_map", "rarity": "uncommon"},
        {"type": "TELEPORTATION", "effect": "teleport", "rarity": "common"},
        {"type": "REMOVE_CURSE", "effect": "remove_curse", "rarity": "uncommon"},
        {"type": "SCARE_MONSTER", "effect": "scare", "rarity": "rare"},
        {"type": "HOLD_MONSTER", "effect": "hold", "rarity": "rare"},
    ],
    "rings": [
        {"type": "PROTECTION", "effect": "ac_bonus", "rarity": "uncommon"},
        {"type": "REGENERATION", "effect": "regen", "rarity": "uncommon"},
        {"type": "ADD_STRENGTH", "effect": "strength_bonus", "rarity": "uncommon"},
        {"type": "SLOW_DIGESTION", "effect": "slow_hunger", "rarity": "uncommon"},
        {"type": "SEE_INVISIBLE", "effect": "see_invisible", "rarity": "rare"},
        {"type": "STEALTH", "effect": "stealth", "rarity": "rare"},
    ],
    "wands": [
        {"type": "LIGHTNING", "damage": "6d6", "charges": "3d3", "rarity": "uncommon"},
        {"type": "FIRE", "damage": "6d6", "charges": "3d3", "rarity": "uncommon"},
        {"type": "COLD", "damage": "6d6", "charges": "3d3", "rarity": "uncommon"},
        {"type": "MAGIC_MISSILE", "damage": "2d6", "charges": "4d4", "rarity": "common"},
        {"type": "SLEEP", "damage": "0", "charges": "3d3", "rarity": "uncommon"},
        {"type": "HASTE_MONSTER", "damage": "0", "charges": "3d3", "rarity": "rare"},
        {"type": "SLOW_MONSTER", "damage": "0", "charges": "3d3", "rarity": "uncommon"},
        {"type": "POLYMORPH", "damage": "0", "charges": "3d3", "rarity": "rare"},
        {"type": "TELEPORT_AWAY", "damage": "0", "charges": "3d3", "rarity": "uncommon"},
        {"type": "CANCELLATION", "damage": "0", "charges": "3d3", "rarity": "rare"},
    ],
    "food": [{"name": "Food Ration", "nutrition": 900, "rarity": "common"}],
    "lightSources": [
        {"type": "torch", "name": "Torch", "radius": 2, "fuel": 500, "isPermanent": False, "rarity": "common"},
        {"type": "lantern", "name": "Lantern", "radius": 2, "fuel": 500, "maxFuel": 1000, "isPermanent": False, "rarity": "uncommon"},
        {"type": "artifact", "name": "Phial of Galadriel", "radius": 3, "isPermanent": True, "rarity": "legendary"},
    ],
    "consumables": [{"name": "Oil Flask", "type": "lantern_fuel", "fuelAmount": 500, "rarity": "uncommon"}],
}


def _common_fields(raw: Dict[str, Any], where: str) -> Dict[str, Any]:
    rarity = str(raw.get("rarity", "common")).lower()
    if rarity not in RARITIES:
        raise ValueError(f"{where}: unknown rarity {raw.get('rarity')!r}")
    tier = raw.get("powerTier")
    min_depth = raw.get("minDepth")
    max_depth = raw.get("maxDepth")
    if min_depth is not None and max_depth is not None and int(min_depth) > int(max_depth):
        raise ValueError(f"{where}: minDepth {min_depth} > maxDepth {max_depth}")
    return {
        "rarity": rarity,
        "sprite_name": raw.get("spriteName", ""),
        "power_tier": PowerTier.from_key(tier) if tier is not None else None,
        "min_depth": int(min_depth) if min_depth is not None else None,
        "max_depth": int(max_depth) if max_depth is not None else None,
    }


def _require(raw: Dict[str, Any], key: str, where: str):
    if key not in raw:
        raise ValueError(f"{where}: missing required field {key!r}")
    return raw[key]


def _check_dice(value: str, where: str) -> str:
    parse_dice(str(value))
    return str(value)


def _title(subtype) -> str:
    return subtype.value.replace("_", " ").title()


def _parse_record(section: str, raw: Dict[str, Any], index: int) -> ItemTemplate:
    where = f"{section}[{index}]"
    common = _common_fields(raw, where)
    if section == "weapons":
        return ItemTemplate(
            "weapon", _require(raw, "name", where), stats={"damage": _check_dice(_require(raw, "damage", where), where)}, **common
        )
    if section == "armor":
        return ItemTemplate("armor", _require(raw, "name", where), stats={"ac": int(_require(raw, "ac", where))}, **common)
    if section == "potions":
        subtype = PotionType.from_key(_require(raw, "type", where))
        stats = {"effect": raw.get("effect", ""), "power": str(raw.get("power", "0"))}
        return ItemTemplate("potion", f"Potion of {_title(subtype)}", subtype=subtype, stats=stats, **common)
    if section == "scrolls":
        subtype = ScrollType.from_key(_require(raw, "type", where))
        return ItemTemplate("scroll", f"Scroll of {_title(subtype)}", subtype=subtype, stats={"effect": raw.get("effect", "")}, **common)
    if section == "rings":
        subtype = RingType.from_key(_require(raw, "type", where))
        return ItemTemplate("ring", f"Ring of {_title(subtype)}", subtype=subtype, stats={"effect": raw.get("effect", "")}, **common)
    if section == "wands":
        subtype = WandType.from_key(_require(raw, "type", where))
        stats = {
            "damage": str(raw.get("damage", "0")),
            "charges": _check_dice(_require(raw, "charges", where), where),
        }
        return ItemTemplate("wand", f"Wand of {_title(subtype)}", subtype=subtype, stats=stats, **common)
    if section == "food":
        return ItemTemplate("food", _require(raw, "name", where), stats={"nutrition": int(_require(raw, "nutrition", where))}, **common)
    if section == "lightSources":
        kind = str(_require(raw, "type", where)).lower()
        if kind not in LIGHT_KINDS:
            raise ValueError(f"{where}: unknown light source type {raw.get('type')!r}")
        stats = {
            "radius": int(raw.get("radius", 2)),
            "fuel": raw.get("fuel"),
            "max_fuel": raw.get("maxFuel"),
            "is_permanent": bool(raw.get("isPermanent", kind == "artifact")),
        }
        return ItemTemplate(kind, _require(raw, "name", where), stats=stats, **common)
    if section == "consumables":
        if raw.get("type") != "lantern_fuel":
            raise ValueError(f"{where}: unknown consumable type {raw.get('type')!r}")
        return ItemTemplate("oil_flask", _require(raw, "name", where), stats={"fuel_amount": int(raw.get("fuelAmount", 500))}, **common)
    raise ValueError(f"Unknown item data section: {section!r}")


SECTIONS = ("weapons", "armor", "potions", "scrolls", "rings", "wands", "food", "lightSources", "consumables")


def parse_item_data(data: Dict[str, Any]) -> TemplateTable:
    """Validate a raw item-data document and build a TemplateTable."""
    unknown = set(data) - set(SECTIONS)
    if unknown:
        raise ValueError(f"Unknown item data sections: {sorted(unknown)}")
    table = TemplateTable()
    for section in SECTIONS:
        for index, raw in enumerate(data.get(section) or []):
            template = _parse_record(section, raw, index)
            table.by_category.setdefault(template.category, []).append(template)
    return table


def load_item_templates(path: Optional[str | Path] = None) -> TemplateTable:
    target = Path(path or os.getenv("ROGUEGEN_ITEM_DATA") or DEFAULT_ITEM_DATA)
    try:
        with open(target, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.warn(event="item_data_fallback", path=str(target), error=type(e).__name__)
        return parse_item_data(FALLBACK_ITEM_DATA)
    table = parse_item_data(data)
    log.debug(event="item_data_loaded", path=str(target), templates=len(table))
    return table


__all__ = [
    "ItemTemplate",
    "TemplateTable",
    "FALLBACK_ITEM_DATA",
    "RARITIES",
    "LIGHT_KINDS",
    "parse_item_data",
    "load_item_templates",
]
