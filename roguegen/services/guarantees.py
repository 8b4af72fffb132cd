"""Per-band spawn guarantees and the deficit repair pass.

A `GuaranteeConfig` declares, per depth band ("1-5", "6-10", ...), optional
overrides for the item category weights and minimum aggregate counts for
tracked item groups, for example::

    {"rangeGuarantees": {"1-5": {"healingPotions": 10}}}

`GuaranteeTracker` tallies generated items per band. `enforce_guarantees`
runs after every level is generated: it compares the tallies with the
declared minimums and asks the item spawner to force-spawn the shortfall into
that band's levels, deepest level first. It only ever appends items.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from roguegen.dungeon.config import DEPTH_BANDS, ITEM_CATEGORIES, allowed_power_tiers, band_bounds, band_for_depth
from roguegen.logging_utils import get_logger
from roguegen.models import Item, ItemType, PotionType, PowerTier, RingType, ScrollType

log = get_logger("roguegen.guarantees")

DEFAULT_GUARANTEES = Path(__file__).resolve().parent.parent / "data" / "guarantees.json"

HEALING_POTIONS = {PotionType.MINOR_HEAL, PotionType.MEDIUM_HEAL, PotionType.MAJOR_HEAL, PotionType.SUPERIOR_HEAL}
HARMFUL_POTIONS = {PotionType.POISON, PotionType.CONFUSION, PotionType.BLINDNESS}
ENCHANT_SCROLLS = {ScrollType.ENCHANT_WEAPON, ScrollType.ENCHANT_ARMOR}
LIGHT_ITEM_TYPES = {ItemType.TORCH, ItemType.LANTERN, ItemType.OIL_FLASK, ItemType.ARTIFACT}
POWERFUL_BONUS = 3

COUNTER_NAMES = (
    "healingPotions",
    "identifyScrolls",
    "enchantScrolls",
    "weapons",
    "armors",
    "rings",
    "wands",
    "food",
    "lightSources",
    "utilityPotions",
    "utilityScrolls",
    "advancedPotions",
    "advancedScrolls",
    "powerfulItems",
    "artifacts",
    "lanterns",
)

# counter -> (template category, template predicate) used by forced spawning
DEFICIT_SOURCES: Dict[str, Tuple[str, Callable]] = {
    "healingPotions": ("potion", lambda t: t.subtype in HEALING_POTIONS),
    "utilityPotions": ("potion", lambda t: t.subtype not in HEALING_POTIONS and t.subtype not in HARMFUL_POTIONS),
    "advancedPotions": ("potion", lambda t: t.power_tier is PowerTier.ADVANCED),
    "identifyScrolls": ("scroll", lambda t: t.subtype is ScrollType.IDENTIFY),
    "enchantScrolls": ("scroll", lambda t: t.subtype in ENCHANT_SCROLLS),
    "utilityScrolls": ("scroll", lambda t: t.subtype is not ScrollType.IDENTIFY and t.subtype not in ENCHANT_SCROLLS),
    "advancedScrolls": ("scroll", lambda t: t.power_tier is PowerTier.ADVANCED),
    "weapons": ("weapon", lambda t: True),
    "armors": ("armor", lambda t: True),
    "rings": ("ring", lambda t: t.subtype is not RingType.TELEPORTATION),
    "wands": ("wand", lambda t: True),
    "food": ("food", lambda t: True),
    "lightSources": ("torch", lambda t: True),
    "lanterns": ("lantern", lambda t: True),
    "artifacts": ("artifact", lambda t: True),
}


@dataclass
class GuaranteeConfig:
    category_weights: Dict[str, Dict[str, float]] = field(default_factory=dict)
    range_guarantees: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def __post_init__(self):
        labels = {b[0] for b in DEPTH_BANDS}
        for band, weights in self.category_weights.items():
            if band not in labels:
                raise ValueError(f"Unknown depth band in categoryWeights: {band!r}")
            for category, weight in weights.items():
                if category not in ITEM_CATEGORIES:
                    raise ValueError(f"Unknown item category {category!r} in band {band}")
                if weight < 0:
                    raise ValueError(f"Negative weight for {category!r} in band {band}")
        for band, minimums in self.range_guarantees.items():
            if band not in labels:
                raise ValueError(f"Unknown depth band in rangeGuarantees: {band!r}")
            for counter, minimum in minimums.items():
                if counter not in DEFICIT_SOURCES:
                    raise ValueError(f"Counter {counter!r} cannot be guaranteed (band {band})")
                if minimum < 0:
                    raise ValueError(f"Negative minimum for {counter!r} in band {band}")

    @classmethod
    def from_dict(cls, data: Dict) -> "GuaranteeConfig":
        return cls(
            category_weights={k: dict(v) for k, v in (data.get("categoryWeights") or {}).items()},
            range_guarantees={k: dict(v) for k, v in (data.get("rangeGuarantees") or {}).items()},
        )

    @classmethod
    def load(cls, path: Optional[str | Path] = None) -> "GuaranteeConfig":
        target = Path(path or os.getenv("ROGUEGEN_GUARANTEES") or DEFAULT_GUARANTEES)
        try:
            with open(target, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.warn(event="guarantee_config_missing", path=str(target), error=type(e).__name__)
            return cls()
        return cls.from_dict(data)


@dataclass(frozen=True)
class ItemDeficit:
    category: str
    count: int
    power_tiers: Tuple[PowerTier, ...]


def _empty_counter() -> Dict[str, int]:
    return {name: 0 for name in COUNTER_NAMES}


class GuaranteeTracker:
    def __init__(self, config: GuaranteeConfig):
        self.config = config
        self._counters: Dict[str, Dict[str, int]] = {}

    def reset(self):
        self._counters.clear()

    def counts(self, band: str) -> Dict[str, int]:
        return dict(self._counters.get(band) or _empty_counter())

    def record_item(self, depth: int, item: Item) -> None:
        counter = self._counters.setdefault(band_for_depth(depth), _empty_counter())
        for name in categorize_item(item):
            counter[name] += 1

    def check_guarantees(self, band: str) -> List[ItemDeficit]:
        _, deepest = band_bounds(band)
        tiers = tuple(allowed_power_tiers(deepest))
        current = self.counts(band)
        deficits = []
        for counter, minimum in self.config.range_guarantees.get(band, {}).items():
            missing = minimum - current.get(counter, 0)
            if missing > 0:
                deficits.append(ItemDeficit(counter, missing, tiers))
        return deficits


def categorize_item(item: Item) -> List[str]:
    """Counter names an item contributes to."""
    hits: List[str] = []
    data = item.data
    if item.type is ItemType.POTION:
        if data.potion_type in HEALING_POTIONS:
            hits.append("healingPotions")
        elif data.potion_type not in HARMFUL_POTIONS:
            hits.append("utilityPotions")
        if data.power_tier is PowerTier.ADVANCED:
            hits.append("advancedPotions")
    elif item.type is ItemType.SCROLL:
        if data.scroll_type is ScrollType.IDENTIFY:
            hits.append("identifyScrolls")
        elif data.scroll_type in ENCHANT_SCROLLS:
            hits.append("enchantScrolls")
        else:
            hits.append("utilityScrolls")
        if data.power_tier is PowerTier.ADVANCED:
            hits.append("advancedScrolls")
    elif item.type is ItemType.WEAPON:
        hits.append("weapons")
    elif item.type is ItemType.ARMOR:
        hits.append("armors")
    elif item.type is ItemType.RING:
        hits.append("rings")
    elif item.type is ItemType.WAND:
        hits.append("wands")
    elif item.type is ItemType.FOOD:
        hits.append("food")
    if item.type in LIGHT_ITEM_TYPES:
        hits.append("lightSources")
    if item.type is ItemType.ARTIFACT:
        hits.append("artifacts")
    if item.type is ItemType.LANTERN:
        hits.append("lanterns")
    if item.type in (ItemType.WEAPON, ItemType.ARMOR, ItemType.RING) and not item.cursed and item.bonus >= POWERFUL_BONUS:
        hits.append("powerfulItems")
    return hits


def enforce_guarantees(levels: Sequence, spawner, config: GuaranteeConfig) -> Dict[str, List[ItemDeficit]]:
    """Top up each band's levels until its declared minimums are met.

    Mutates `levels` in place (items are appended) and returns the deficits
    found before repair, keyed by band label.
    """
    tracker = GuaranteeTracker(config)
    for level in levels:
        for item in level.items:
            tracker.record_item(level.depth, item)

    report: Dict[str, List[ItemDeficit]] = {}
    for label, lo, hi in DEPTH_BANDS:
        band_levels = [lv for lv in levels if lo <= lv.depth <= hi]
        if not band_levels:
            continue
        remaining = tracker.check_guarantees(label)
        if not remaining:
            continue
        report[label] = remaining
        for level in sorted(band_levels, key=lambda lv: lv.depth, reverse=True):
            spawned = spawner.force_spawn_for_guarantees(level, remaining)
            for item in spawned:
                tracker.record_item(level.depth, item)
            remaining = tracker.check_guarantees(label)
            if not remaining:
                break
        if remaining:
            log.warn(
                event="guarantee_unfilled",
                band=label,
                missing=",".join(f"{d.category}:{d.count}" for d in remaining),
            )
        else:
            log.debug(event="guarantee_repaired", band=label, deficits=len(report[label]))
    return report


__all__ = [
    "GuaranteeConfig",
    "GuaranteeTracker",
    "ItemDeficit",
    "COUNTER_NAMES",
    "DEFICIT_SOURCES",
    "HEALING_POTIONS",
    "categorize_item",
    "enforce_guarantees",
]
