"""Monster spawn selection.

Filters monster templates by depth, picks them with rarity weighting and
places them on free interior room tiles. Template data is validated when it
is loaded; a malformed record raises ValueError naming its index.

Selection steps per spawn:
  1. Weighted template pick (common 5, uncommon 3, rare 2).
  2. Up to 10 attempts at a random room and interior tile.
  3. Id suffix, hp roll, starting energy.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

from roguegen.dungeon.config import MAX_DEPTH
from roguegen.logging_utils import get_logger
from roguegen.models import Monster, MonsterBehavior, MonsterState, Position

log = get_logger("roguegen.monsters")

DEFAULT_MONSTER_DATA = Path(__file__).resolve().parent.parent / "data" / "monsters.json"

RARITY_WEIGHTS = {"common": 5, "uncommon": 3, "rare": 2}
BOSS_LEVEL = 10
MAX_SPAWNS = 20
POSITION_ATTEMPTS = 10
HP_DICE_RE = re.compile(r"^\d+d\d+([+\-]\d+)?$")
REQUIRED_FIELDS = ("letter", "name", "hp", "ac", "damage", "xpValue", "level", "speed", "rarity", "mean", "aiProfile")


@dataclass(frozen=True)
class MonsterTemplate:
    letter: str
    name: str
    hp: str
    ac: int
    damage: str
    xp_value: int
    level: int
    speed: int
    rarity: str
    mean: bool
    ai_profile: Dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def is_boss(self) -> bool:
        return self.level >= BOSS_LEVEL


FALLBACK_MONSTERS: List[Dict[str, Any]] = [
    {"letter": "B", "name": "Bat", "hp": "1d8", "ac": 3, "damage": "1d2", "xpValue": 1, "level": 1, "speed": 15, "rarity": "common", "mean": False, "aiProfile": {"behavior": "ERRATIC"}},
    {"letter": "K", "name": "Kobold", "hp": "1d8", "ac": 7, "damage": "1d4", "xpValue": 1, "level": 1, "speed": 10, "rarity": "common", "mean": True, "aiProfile": {"behavior": "SIMPLE"}},
    {"letter": "S", "name": "Snake", "hp": "1d8", "ac": 5, "damage": "1d3", "xpValue": 2, "level": 1, "speed": 10, "rarity": "common", "mean": True, "aiProfile": {"behavior": "SIMPLE"}},
    {"letter": "O", "name": "Orc", "hp": "1d8", "ac": 6, "damage": "1d8", "xpValue": 5, "level": 1, "speed": 10, "rarity": "common", "mean": False, "aiProfile": {"behavior": "GREEDY"}},
    {"letter": "Z", "name": "Zombie", "hp": "2d8", "ac": 8, "damage": "1d8", "xpValue": 6, "level": 2, "speed": 5, "rarity": "uncommon", "mean": True, "aiProfile": {"behavior": "SIMPLE"}},
    {"letter": "T", "name": "Troll", "hp": "6d8", "ac": 4, "damage": "1d8", "xpValue": 120, "level": 6, "speed": 12, "rarity": "rare", "mean": True, "aiProfile": {"behavior": "SMART"}},
]


def validate_monster_data(data: Sequence[Dict[str, Any]]) -> List[MonsterTemplate]:
    if not isinstance(data, list):
        raise ValueError("Monster data must be a list")
    templates = []
    for i, raw in enumerate(data):
        for key in REQUIRED_FIELDS:
            if key not in raw:
                raise ValueError(f"Monster at index {i} missing required field: {key}")
        if not isinstance(raw["letter"], str) or len(raw["letter"]) != 1:
            raise ValueError(f"Monster at index {i}: letter must be a single character string")
        if not isinstance(raw["hp"], str) or not HP_DICE_RE.match(raw["hp"]):
            raise ValueError(f"Monster at index {i}: hp must be dice notation (e.g. '2d8')")
        if isinstance(raw["level"], bool) or not isinstance(raw["level"], int) or not 1 <= raw["level"] <= MAX_DEPTH:
            raise ValueError(f"Monster at index {i}: level must be an integer between 1 and {MAX_DEPTH}")
        if not isinstance(raw["speed"], int) or raw["speed"] < 1:
            raise ValueError(f"Monster at index {i}: speed must be a positive integer")
        if raw["rarity"] not in RARITY_WEIGHTS:
            raise ValueError(f"Monster at index {i}: rarity must be common, uncommon or rare")
        if not isinstance(raw["mean"], bool):
            raise ValueError(f"Monster at index {i}: mean must be a boolean")
        profile = raw["aiProfile"]
        if not isinstance(profile, dict):
            raise ValueError(f"Monster at index {i}: aiProfile must be an object")
        if "behavior" in profile:
            MonsterBehavior.from_key(profile["behavior"])
        templates.append(
            MonsterTemplate(
                letter=raw["letter"],
                name=str(raw["name"]),
                hp=raw["hp"],
                ac=int(raw["ac"]),
                damage=str(raw["damage"]),
                xp_value=int(raw["xpValue"]),
                level=raw["level"],
                speed=raw["speed"],
                rarity=raw["rarity"],
                mean=raw["mean"],
                ai_profile=dict(profile),
            )
        )
    return templates


def load_monster_templates(path: Optional[str | Path] = None) -> List[MonsterTemplate]:
    target = Path(path or os.getenv("ROGUEGEN_MONSTER_DATA") or DEFAULT_MONSTER_DATA)
    try:
        with open(target, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.warn(event="monster_data_fallback", path=str(target), error=type(e).__name__)
        data = FALLBACK_MONSTERS
    return validate_monster_data(data)


class MonsterSpawnService:
    def __init__(self, rng, templates: Optional[List[MonsterTemplate]] = None):
        self.rng = rng
        self.templates = templates if templates is not None else load_monster_templates()

    @staticmethod
    def get_spawn_count(depth: int) -> int:
        return min(depth * 2 + 3, MAX_SPAWNS)

    def filter_by_depth(self, depth: int) -> List[MonsterTemplate]:
        eligible = []
        for t in self.templates:
            if t.level > depth + 2:
                continue
            if t.is_boss and depth < t.level - 1:
                continue
            eligible.append(t)
        return eligible or list(self.templates)

    def select_weighted_monster(self, templates: Sequence[MonsterTemplate]) -> MonsterTemplate:
        weights = [RARITY_WEIGHTS[t.rarity] for t in templates]
        r = self.rng.next_int(1, sum(weights))
        upto = 0
        for template, w in zip(templates, weights):
            upto += w
            if r <= upto:
                return template
        return templates[-1]

    def select_spawn_position(self, rooms: Sequence, tiles, occupied: Set[Position]) -> Optional[Position]:
        for _ in range(POSITION_ATTEMPTS):
            room = self.rng.pick_random(rooms)
            x = self.rng.next_int(room.x + 1, room.x + room.width - 2)
            y = self.rng.next_int(room.y + 1, room.y + room.height - 2)
            pos = Position(x, y)
            # narrow rooms have no interior; the draw lands outside the footprint
            if not room.contains(x, y) or pos in occupied:
                continue
            if 0 <= y < len(tiles) and 0 <= x < len(tiles[y]) and tiles[y][x].walkable:
                return pos
        return None

    def create_monster(self, template: MonsterTemplate, position: Position, monster_id: str) -> Monster:
        hp = self.rng.roll(template.hp)
        return Monster(
            id=monster_id,
            letter=template.letter,
            name=template.name,
            position=position,
            hp=hp,
            max_hp=hp,
            ac=template.ac,
            damage=template.damage,
            xp_value=template.xp_value,
            level=template.level,
            speed=template.speed,
            energy=self.rng.next_int(0, 99),
            state=MonsterState.HUNTING if template.mean else MonsterState.SLEEPING,
            is_awake=template.mean,
            ai_profile=dict(template.ai_profile),
        )

    def spawn_monsters(self, rooms: Sequence, tiles, depth: int, occupied: Optional[Set[Position]] = None) -> List[Monster]:
        monsters: List[Monster] = []
        if not rooms or not self.templates:
            return monsters
        taken = set(occupied or ())
        available = self.filter_by_depth(depth)
        for i in range(self.get_spawn_count(depth)):
            template = self.select_weighted_monster(available)
            position = self.select_spawn_position(rooms, tiles, taken)
            if position is None:
                continue
            taken.add(position)
            monster_id = f"monster-{depth}-{i}-{self.rng.next_int(1000, 9999)}"
            monsters.append(self.create_monster(template, position, monster_id))
        log.debug(event="monsters_spawned", depth=depth, spawned=len(monsters))
        return monsters


__all__ = [
    "MonsterTemplate",
    "MonsterSpawnService",
    "FALLBACK_MONSTERS",
    "RARITY_WEIGHTS",
    "validate_monster_data",
    "load_monster_templates",
]
