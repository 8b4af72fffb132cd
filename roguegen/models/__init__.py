# Model package init
from .enums import (  # noqa: F401 re-export
    DoorState,
    ItemType,
    MonsterBehavior,
    MonsterState,
    PotionType,
    PowerTier,
    Rarity,
    RingType,
    ScrollType,
    TileType,
    TrapType,
    WandType,
)
from .items import (  # noqa: F401 re-export
    AmuletData,
    ArmorData,
    FoodData,
    Item,
    LightData,
    OilFlaskData,
    PotionData,
    RingData,
    ScrollData,
    WandData,
    WeaponData,
)
from .level import Door, GoldPile, Level, Position, Room, Tile, Trap  # noqa: F401 re-export
from .monster import Monster  # noqa: F401 re-export

__all__ = [
    "DoorState",
    "ItemType",
    "MonsterBehavior",
    "MonsterState",
    "PotionType",
    "PowerTier",
    "Rarity",
    "RingType",
    "ScrollType",
    "TileType",
    "TrapType",
    "WandType",
    "Item",
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
    "Door",
    "GoldPile",
    "Level",
    "Position",
    "Room",
    "Tile",
    "Trap",
    "Monster",
]
