"""Generation configuration and tuned balance tables.

`DungeonConfig` is the structural input (grid size, room counts, spacing,
loop chance). The module-level tables below are game-balance data rather
than algorithm logic: depth bands, default category weights, light source
weights, curse odds, wand ranges. Keep their values stable; changing any of
them changes the levels produced for an existing seed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Dict, List, Optional, Tuple

from roguegen.models import PowerTier, WandType

MAX_DEPTH = 26

# (label, first depth, last depth)
DEPTH_BANDS: List[Tuple[str, int, int]] = [
    ("1-5", 1, 5),
    ("6-10", 6, 10),
    ("11-15", 11, 15),
    ("16-20", 16, 20),
    ("21-26", 21, 26),
]

ITEM_CATEGORIES = (
    "weapon",
    "armor",
    "potion",
    "scroll",
    "ring",
    "wand",
    "food",
    "light",
    "torch",
    "lantern",
    "oil_flask",
)

DEFAULT_CATEGORY_WEIGHTS: Dict[str, Dict[str, int]] = {
    "1-5": {"weapon": 12, "armor": 12, "potion": 20, "scroll": 14, "ring": 6, "wand": 6, "food": 18, "light": 12},
    "6-10": {"weapon": 12, "armor": 12, "potion": 18, "scroll": 15, "ring": 9, "wand": 8, "food": 16, "light": 10},
    "11-15": {"weapon": 11, "armor": 11, "potion": 18, "scroll": 15, "ring": 11, "wand": 10, "food": 14, "light": 10},
    "16-20": {"weapon": 10, "armor": 10, "potion": 18, "scroll": 16, "ring": 12, "wand": 12, "food": 13, "light": 9},
    "21-26": {"weapon": 10, "armor": 10, "potion": 18, "scroll": 16, "ring": 13, "wand": 13, "food": 12, "light": 8},
}

# (deepest depth covered, {torch, lantern, oil_flask})
LIGHT_SOURCE_WEIGHTS: List[Tuple[int, Dict[str, int]]] = [
    (5, {"torch": 20, "lantern": 0, "oil_flask": 3}),
    (10, {"torch": 15, "lantern": 8, "oil_flask": 10}),
    (MAX_DEPTH, {"torch": 10, "lantern": 12, "oil_flask": 12}),
]

ARTIFACT_MIN_DEPTH = 8
ARTIFACT_CHANCE = 0.005

BASE_CURSE_CHANCE = {"common": 0.05, "uncommon": 0.08, "rare": 0.12}
CURSE_DEPTH_BASE = 1.3
CURSE_DEPTH_STEP = 0.01
CURSABLE_CATEGORIES = ("weapon", "armor", "ring")
MAX_ENCHANTMENT = 5

# Depth at which each power tier unlocks.
POWER_TIER_UNLOCK = {
    PowerTier.BASIC: 1,
    PowerTier.INTERMEDIATE: 9,
    PowerTier.ADVANCED: 17,
}

WAND_RANGES = {
    WandType.LIGHTNING: 8,
    WandType.FIRE: 8,
    WandType.COLD: 8,
    WandType.MAGIC_MISSILE: 7,
    WandType.TELEPORT_AWAY: 7,
    WandType.SLEEP: 6,
    WandType.SLOW_MONSTER: 6,
    WandType.CANCELLATION: 6,
    WandType.HASTE_MONSTER: 5,
    WandType.POLYMORPH: 5,
}

DOOR_STATE_THRESHOLDS = (0.5, 0.8, 0.9, 0.95)  # OPEN, CLOSED, SECRET, BROKEN, else ARCHWAY


def band_for_depth(depth: int) -> str:
    for label, lo, hi in DEPTH_BANDS:
        if depth <= hi:
            return label
    return DEPTH_BANDS[-1][0]


def band_bounds(label: str) -> Tuple[int, int]:
    for name, lo, hi in DEPTH_BANDS:
        if name == label:
            return lo, hi
    raise ValueError(f"Unknown depth band: {label!r}")


def allowed_power_tiers(depth: int) -> List[PowerTier]:
    return [tier for tier, unlock in POWER_TIER_UNLOCK.items() if depth >= unlock]


def light_weights_for_depth(depth: int) -> Dict[str, int]:
    for deepest, weights in LIGHT_SOURCE_WEIGHTS:
        if depth <= deepest:
            return dict(weights)
    return dict(LIGHT_SOURCE_WEIGHTS[-1][1])


@dataclass
class DungeonConfig:
    width: int = 80
    height: int = 22
    min_rooms: int = 4
    max_rooms: int = 9
    min_room_size: int = 3
    max_room_size: int = 8
    min_spacing: int = 2
    loop_chance: float = 0.25
    max_depth: int = MAX_DEPTH
    amulet_depth: Optional[int] = None
    items_per_level: int = 7
    min_traps: int = 2
    max_traps: int = 4
    min_gold_piles: int = 3
    max_gold_piles: int = 9

    def __post_init__(self):
        if self.amulet_depth is None:
            self.amulet_depth = self.max_depth
        if self.width < 5 or self.height < 5:
            raise ValueError("width and height must be at least 5")
        for lo, hi in (
            ("min_rooms", "max_rooms"),
            ("min_room_size", "max_room_size"),
            ("min_traps", "max_traps"),
            ("min_gold_piles", "max_gold_piles"),
        ):
            a, b = getattr(self, lo), getattr(self, hi)
            if a < 0 or a > b:
                raise ValueError(f"{lo}={a} must be non-negative and <= {hi}={b}")
        if self.min_room_size < 1:
            raise ValueError("min_room_size must be positive")
        if self.min_spacing < 0:
            raise ValueError("min_spacing must be non-negative")
        if not 0.0 <= self.loop_chance <= 1.0:
            raise ValueError("loop_chance must be within [0, 1]")
        if self.max_depth < 1:
            raise ValueError("max_depth must be >= 1")

    @classmethod
    def from_env(cls, **overrides) -> "DungeonConfig":
        """Build a config from ROGUEGEN_<FIELD> variables plus explicit overrides.

        Explicit keyword arguments win over the environment.
        """
        values = {}
        for f in fields(cls):
            raw = os.getenv(f"ROGUEGEN_{f.name.upper()}")
            if raw is None or raw == "":
                continue
            values[f.name] = float(raw) if f.name == "loop_chance" else int(raw)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__ = [
    "DungeonConfig",
    "MAX_DEPTH",
    "DEPTH_BANDS",
    "ITEM_CATEGORIES",
    "DEFAULT_CATEGORY_WEIGHTS",
    "LIGHT_SOURCE_WEIGHTS",
    "ARTIFACT_MIN_DEPTH",
    "ARTIFACT_CHANCE",
    "BASE_CURSE_CHANCE",
    "CURSE_DEPTH_BASE",
    "CURSE_DEPTH_STEP",
    "CURSABLE_CATEGORIES",
    "MAX_ENCHANTMENT",
    "POWER_TIER_UNLOCK",
    "WAND_RANGES",
    "DOOR_STATE_THRESHOLDS",
    "band_for_depth",
    "band_bounds",
    "allowed_power_tiers",
    "light_weights_for_depth",
]
