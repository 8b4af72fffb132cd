"""Depth-scaled item spawning.

Per spawn attempt the engine draws, in this exact order:

  1. room, x, y          (reject occupied or unwalkable tiles)
  2. rarity              (depth-interpolated common/uncommon/rare weights)
  3. category            (band weights, plus a light-source sub-roll)
  4. id suffix
  5. template            (rarity + power tier + depth window filter)
  6. curse roll          (weapon, armor, ring only)
  7. enchantment roll    (weapon, armor, ring only)
  8. payload rolls       (wand charges)

Reordering any of these changes every level generated for a seed.

Depth curves (all pure, exposed for tests and tuning):
  * rarity:      p = depth/26; common = max(30, 70-40p), uncommon = 25+15p,
                 rare = 5+25p.
  * enchantment: common/uncommon min = depth//9, max = min(5, (depth-1)//5);
                 rare gets +1 on both, capped at 5.
  * curse:       base[rarity] * max(0, 1.3 - 0.01*depth).
"""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Sequence, Set

from roguegen.dungeon.config import (
    ARTIFACT_CHANCE,
    ARTIFACT_MIN_DEPTH,
    BASE_CURSE_CHANCE,
    CURSE_DEPTH_BASE,
    CURSE_DEPTH_STEP,
    DEFAULT_CATEGORY_WEIGHTS,
    MAX_DEPTH,
    MAX_ENCHANTMENT,
    WAND_RANGES,
    allowed_power_tiers,
    band_for_depth,
    light_weights_for_depth,
)
from roguegen.logging_utils import get_logger
from roguegen.models import (
    ArmorData,
    FoodData,
    Item,
    ItemType,
    LightData,
    OilFlaskData,
    Position,
    PotionData,
    RingData,
    RingType,
    ScrollData,
    TileType,
    WandData,
    WeaponData,
)

from .guarantees import DEFICIT_SOURCES, GuaranteeConfig, ItemDeficit
from .item_templates import ItemTemplate, TemplateTable, load_item_templates

log = get_logger("roguegen.items")

RARITY_ORDER = ("common", "uncommon", "rare")
RARITY_FILTERED = ("weapon", "armor", "potion", "scroll", "ring", "wand")
FORCE_SPAWN_ATTEMPTS = 20


class EnchantmentRange(NamedTuple):
    min_bonus: int
    max_bonus: int


def calculate_rarity_weights(depth: int) -> Dict[str, float]:
    progress = depth / MAX_DEPTH
    return {
        "common": max(30.0, 70.0 - 40.0 * progress),
        "uncommon": 25.0 + 15.0 * progress,
        "rare": 5.0 + 25.0 * progress,
    }


def calculate_enchantment_range(depth: int, rarity: str) -> EnchantmentRange:
    min_bonus = depth // 9
    max_bonus = min(MAX_ENCHANTMENT, (depth - 1) // 5)
    if rarity == "rare":
        min_bonus = min(MAX_ENCHANTMENT, min_bonus + 1)
        max_bonus = min(MAX_ENCHANTMENT, max_bonus + 1)
    return EnchantmentRange(min_bonus, max(min_bonus, max_bonus))


def calculate_curse_chance(base_chance: float, depth: int) -> float:
    return max(0.0, base_chance * (CURSE_DEPTH_BASE - depth * CURSE_DEPTH_STEP))


def _weighted_key(weights: Dict[str, float], rng) -> Optional[str]:
    total = sum(w for w in weights.values() if w > 0)
    if total <= 0:
        return None
    pivot = rng.next() * total
    acc = 0.0
    chosen = None
    for key, weight in weights.items():
        if weight <= 0:
            continue
        chosen = key
        acc += weight
        if pivot < acc:
            break
    return chosen


class ItemSpawnService:
    def __init__(self, rng, templates: Optional[TemplateTable] = None, guarantees: Optional[GuaranteeConfig] = None):
        self.rng = rng
        self.templates = templates if templates is not None else load_item_templates()
        self.guarantees = guarantees or GuaranteeConfig()

    # ------------------------------------------------------------------
    # Rolls
    # ------------------------------------------------------------------
    def select_weighted_rarity(self, weights: Dict[str, float]) -> str:
        return _weighted_key(weights, self.rng) or "common"

    def category_weights(self, depth: int) -> Dict[str, float]:
        band = band_for_depth(depth)
        weights = dict(DEFAULT_CATEGORY_WEIGHTS[band])
        weights.update(self.guarantees.category_weights.get(band, {}))
        return weights

    def roll_category(self, depth: int) -> Optional[str]:
        category = _weighted_key(self.category_weights(depth), self.rng)
        if category == "light":
            category = _weighted_key(light_weights_for_depth(depth), self.rng)
        return category

    def roll_cursed(self, rarity: str, depth: int) -> bool:
        return self.rng.chance(calculate_curse_chance(BASE_CURSE_CHANCE.get(rarity, 0.05), depth))

    def roll_enchantment(self, rarity: str, depth: int, cursed: bool) -> int:
        if cursed:
            return -self.rng.next_int(1, 3)
        bonus_range = calculate_enchantment_range(depth, rarity)
        return self.rng.next_int(bonus_range.min_bonus, bonus_range.max_bonus)

    # ------------------------------------------------------------------
    # Template selection
    # ------------------------------------------------------------------
    def _pick_template(self, category: str, rarity: str, depth: int) -> Optional[ItemTemplate]:
        tiers = allowed_power_tiers(depth)
        if category in RARITY_FILTERED:
            pool = [t for t in self.templates.for_category(category) if t.rarity == rarity and t.available_at(depth, tiers)]
            return self.rng.pick_random(pool) if pool else None
        if category == "food":
            pool = [t for t in self.templates.for_category("food") if t.available_at(depth, tiers)]
            return self.rng.pick_random(pool) if pool else None
        if category == "torch":
            if depth >= ARTIFACT_MIN_DEPTH and self.rng.chance(ARTIFACT_CHANCE):
                artifacts = self.templates.for_category("artifact")
                if artifacts:
                    return self.rng.pick_random(artifacts)
            return self.templates.first("torch")
        # lantern, oil_flask
        return self.templates.first(category)

    # ------------------------------------------------------------------
    # Item construction
    # ------------------------------------------------------------------
    def _build_item(self, template: ItemTemplate, depth: int, item_id: str, position: Position, forced: bool = False) -> Item:
        category = template.category
        stats = template.stats
        identified = False
        name = template.name

        if category in ("weapon", "armor", "ring"):
            if forced:
                cursed, bonus = False, 0
            else:
                # teleportation rings are always cursed; no curse roll is drawn for them
                cursed = template.subtype is RingType.TELEPORTATION or self.roll_cursed(template.rarity, depth)
                bonus = self.roll_enchantment(template.rarity, depth, cursed)
            # negative bonuses stay hidden until the item is identified
            if bonus > 0:
                name = f"{name} +{bonus}"
            if category == "weapon":
                item_type, data = ItemType.WEAPON, WeaponData(stats["damage"], bonus, cursed)
            elif category == "armor":
                item_type, data = ItemType.ARMOR, ArmorData(stats["ac"], bonus, cursed)
            else:
                item_type, data = ItemType.RING, RingData(template.subtype, stats["effect"], bonus, cursed)
        elif category == "potion":
            item_type = ItemType.POTION
            data = PotionData(template.subtype, stats["effect"], stats["power"], template.power_tier)
        elif category == "scroll":
            item_type = ItemType.SCROLL
            data = ScrollData(template.subtype, stats["effect"], template.power_tier)
        elif category == "wand":
            charges = self.rng.roll(stats["charges"])
            item_type = ItemType.WAND
            data = WandData(template.subtype, stats["damage"], charges, charges, WAND_RANGES[template.subtype])
        elif category == "food":
            item_type, data = ItemType.FOOD, FoodData(stats["nutrition"])
        elif category == "torch":
            fuel = stats["fuel"] if stats["fuel"] is not None else 500
            item_type, identified = ItemType.TORCH, True
            data = LightData(stats["radius"], fuel, fuel, False)
        elif category == "lantern":
            fuel = stats["fuel"] if stats["fuel"] is not None else 500
            max_fuel = stats["max_fuel"] if stats["max_fuel"] is not None else 1000
            item_type, identified = ItemType.LANTERN, True
            data = LightData(stats["radius"], fuel, max_fuel, False)
        elif category == "artifact":
            item_type, identified = ItemType.ARTIFACT, True
            data = LightData(stats["radius"], None, None, True)
        elif category == "oil_flask":
            item_type, identified = ItemType.OIL_FLASK, True
            data = OilFlaskData(stats["fuel_amount"])
        else:
            raise ValueError(f"Unknown item category: {category!r}")

        return Item(
            id=item_id,
            name=name,
            type=item_type,
            position=position,
            data=data,
            sprite_name=template.sprite_name,
            identified=identified,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def spawn_items(
        self,
        rooms: Sequence,
        count: int,
        tiles,
        monsters: Sequence,
        depth: int,
        occupied: Optional[Set[Position]] = None,
    ) -> List[Item]:
        """Attempt `count` spawns in `rooms`; under-fills when space is scarce."""
        items: List[Item] = []
        taken: Set[Position] = set(occupied or ())
        taken.update(m.position for m in monsters)
        if not rooms:
            return items
        rarity_weights = calculate_rarity_weights(depth)

        for _ in range(count):
            room = self.rng.pick_random(rooms)
            x = self.rng.next_int(room.x + 1, room.x + room.width - 2)
            y = self.rng.next_int(room.y + 1, room.y + room.height - 2)
            pos = Position(x, y)
            if not room.contains(x, y) or pos in taken or not (0 <= y < len(tiles) and 0 <= x < len(tiles[y])) or not tiles[y][x].walkable:
                continue
            taken.add(pos)

            rarity = self.select_weighted_rarity(rarity_weights)
            category = self.roll_category(depth)
            if category is None:
                continue
            item_id = f"item-{depth}-{len(items)}-{self.rng.next_int(1000, 9999)}"
            template = self._pick_template(category, rarity, depth)
            if template is None:
                continue
            items.append(self._build_item(template, depth, item_id, pos))

        log.debug(event="items_spawned", depth=depth, attempts=count, spawned=len(items))
        return items

    def _find_free_position(self, level, occupied: Set[Position]) -> Optional[Position]:
        for _ in range(FORCE_SPAWN_ATTEMPTS):
            room = self.rng.pick_random(level.rooms)
            x = self.rng.next_int(room.x + 1, room.x + room.width - 2)
            y = self.rng.next_int(room.y + 1, room.y + room.height - 2)
            pos = Position(x, y)
            tile = level.tile_at(x, y)
            if tile is None or not room.contains(x, y) or pos in occupied:
                continue
            if tile.walkable and tile.type is TileType.FLOOR:
                return pos
        return None

    def force_spawn_for_guarantees(self, level, deficits: Sequence[ItemDeficit]) -> List[Item]:
        """Append items to `level.items` to cover `deficits`; returns what was added.

        Skips the rarity and category rolls but still needs a free floor tile
        and a template allowed by the deficit's power tiers. Forced items are
        never cursed and carry no enchantment.
        """
        spawned: List[Item] = []
        if not deficits or not level.rooms:
            return spawned
        occupied = level.occupied_positions()
        occupied.update(p for p in (level.stairs_up, level.stairs_down) if p is not None)

        for deficit in deficits:
            if deficit.category not in DEFICIT_SOURCES:
                raise ValueError(f"Unknown guarantee category: {deficit.category!r}")
            category, predicate = DEFICIT_SOURCES[deficit.category]
            pool = [
                t
                for t in self.templates.for_category(category)
                if predicate(t)
                and (t.power_tier is None or t.power_tier in deficit.power_tiers)
                and t.in_depth_window(level.depth)
            ]
            if not pool:
                log.debug(event="force_spawn_no_templates", depth=level.depth, category=deficit.category)
                continue
            for _ in range(deficit.count):
                pos = self._find_free_position(level, occupied)
                if pos is None:
                    log.debug(event="force_spawn_no_space", depth=level.depth, category=deficit.category)
                    break
                template = pool[self.rng.next_int(0, len(pool) - 1)]
                item_id = f"item-{level.depth}-{len(level.items)}-{self.rng.next_int(1000, 9999)}"
                item = self._build_item(template, level.depth, item_id, pos, forced=True)
                level.items.append(item)
                occupied.add(pos)
                spawned.append(item)
        return spawned


__all__ = [
    "ItemSpawnService",
    "EnchantmentRange",
    "calculate_rarity_weights",
    "calculate_enchantment_range",
    "calculate_curse_chance",
    "FORCE_SPAWN_ATTEMPTS",
]
