from roguegen.dungeon.tiles import floor_tile
from roguegen.models import Level, Room
from roguegen.services.item_templates import parse_item_data

# Room interior spans x 11..18, y 11..16.
ROOM = Room(0, 10, 10, 10, 8)

SMALL_ITEM_DATA = {
    "weapons": [
        {"name": "Dagger", "damage": "1d6", "rarity": "common"},
        {"name": "Long Sword", "damage": "1d12", "rarity": "uncommon"},
    ],
    "potions": [
        {"type": "MINOR_HEAL", "effect": "restore_hp", "power": "1d8", "rarity": "common", "powerTier": "basic", "minDepth": 1, "maxDepth": 10},
        {"type": "MEDIUM_HEAL", "effect": "restore_hp", "power": "3d8", "rarity": "uncommon", "powerTier": "intermediate", "minDepth": 8, "maxDepth": 18},
    ],
    "rings": [
        {"type": "TELEPORTATION", "effect": "random_teleport", "rarity": "common"},
        {"type": "PROTECTION", "effect": "ac_bonus", "rarity": "uncommon"},
    ],
    "wands": [
        {"type": "MAGIC_MISSILE", "damage": "2d6", "charges": "4d4", "rarity": "common"},
    ],
    "food": [{"name": "Food Ration", "nutrition": 900, "rarity": "common"}],
    "lightSources": [
        {"type": "torch", "name": "Torch", "radius": 2, "fuel": 500, "rarity": "common"},
        {"type": "artifact", "name": "Phial of Galadriel", "radius": 3, "isPermanent": True, "rarity": "legendary"},
    ],
}


def small_table():
    return parse_item_data(SMALL_ITEM_DATA)


def floor_grid(width=80, height=22):
    return [[floor_tile() for _ in range(width)] for _ in range(height)]


def open_level(depth=1, rooms=None, tiles=None):
    """A level whose whole grid is floor, with one room at ROOM."""
    return Level(
        depth=depth,
        width=80,
        height=22,
        tiles=tiles if tiles is not None else floor_grid(),
        rooms=list(rooms) if rooms is not None else [ROOM],
    )
