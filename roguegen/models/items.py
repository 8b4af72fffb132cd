"""Item value objects.

An `Item` carries the fields every item shares plus a category payload in
`data`. The payload class always matches `Item.type`, so consumers branch on
the discriminant and read the payload without isinstance chains::

    if item.type is ItemType.POTION:
        heal = item.data.power

Items are frozen: curse and enchantment are rolled once when the spawn
engine builds the item and never change during generation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .enums import ItemType, PotionType, PowerTier, RingType, ScrollType, WandType
from .level import Position


@dataclass(frozen=True)
class WeaponData:
    damage: str
    bonus: int = 0
    cursed: bool = False


@dataclass(frozen=True)
class ArmorData:
    ac: int
    bonus: int = 0
    cursed: bool = False


@dataclass(frozen=True)
class PotionData:
    potion_type: PotionType
    effect: str
    power: str
    power_tier: Optional[PowerTier] = None


@dataclass(frozen=True)
class ScrollData:
    scroll_type: ScrollType
    effect: str
    power_tier: Optional[PowerTier] = None


@dataclass(frozen=True)
class RingData:
    ring_type: RingType
    effect: str
    bonus: int = 0
    cursed: bool = False
    hunger_modifier: float = 1.5


@dataclass(frozen=True)
class WandData:
    wand_type: WandType
    damage: str
    charges: int
    current_charges: int
    range: int


@dataclass(frozen=True)
class FoodData:
    nutrition: int


@dataclass(frozen=True)
class LightData:
    radius: int
    fuel: Optional[int] = None
    max_fuel: Optional[int] = None
    is_permanent: bool = False


@dataclass(frozen=True)
class OilFlaskData:
    fuel_amount: int


@dataclass(frozen=True)
class AmuletData:
    cursed: bool = False


ItemData = Union[
    WeaponData,
    ArmorData,
    PotionData,
    ScrollData,
    RingData,
    WandData,
    FoodData,
    LightData,
    OilFlaskData,
    AmuletData,
]


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    type: ItemType
    position: Position
    data: ItemData
    sprite_name: str = ""
    identified: bool = False

    @property
    def cursed(self) -> bool:
        return bool(getattr(self.data, "cursed", False))

    @property
    def bonus(self) -> int:
        return int(getattr(self.data, "bonus", 0))


__all__ = [
    "Item",
    "ItemData",
    "WeaponData",
    "ArmorData",
    "PotionData",
    "ScrollData",
    "RingData",
    "WandData",
    "FoodData",
    "LightData",
    "OilFlaskData",
    "AmuletData",
]
