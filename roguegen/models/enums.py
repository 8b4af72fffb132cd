"""Enumerations shared by level, item and monster models.

Values are the upper-case keys used in the JSON data files; `from_key`
helpers raise ValueError on anything unknown so a typo in template data
fails loudly instead of producing an untyped item.
"""

from __future__ import annotations

from enum import Enum


class _KeyedEnum(str, Enum):
    @classmethod
    def from_key(cls, key):
        if isinstance(key, cls):
            return key
        try:
            return cls(str(key).upper())
        except ValueError:
            raise ValueError(f"Unknown {cls.__name__} key: {key!r}") from None


class TileType(_KeyedEnum):
    WALL = "WALL"
    FLOOR = "FLOOR"
    DOOR = "DOOR"


class DoorState(_KeyedEnum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    LOCKED = "LOCKED"
    BROKEN = "BROKEN"
    SECRET = "SECRET"
    ARCHWAY = "ARCHWAY"


class TrapType(_KeyedEnum):
    BEAR = "BEAR"
    DART = "DART"
    TELEPORT = "TELEPORT"
    SLEEP = "SLEEP"
    PIT = "PIT"


class ItemType(_KeyedEnum):
    WEAPON = "WEAPON"
    ARMOR = "ARMOR"
    POTION = "POTION"
    SCROLL = "SCROLL"
    RING = "RING"
    WAND = "WAND"
    FOOD = "FOOD"
    TORCH = "TORCH"
    LANTERN = "LANTERN"
    ARTIFACT = "ARTIFACT"
    OIL_FLASK = "OIL_FLASK"
    AMULET = "AMULET"


class PotionType(_KeyedEnum):
    MINOR_HEAL = "MINOR_HEAL"
    MEDIUM_HEAL = "MEDIUM_HEAL"
    MAJOR_HEAL = "MAJOR_HEAL"
    SUPERIOR_HEAL = "SUPERIOR_HEAL"
    GAIN_STRENGTH = "GAIN_STRENGTH"
    RESTORE_STRENGTH = "RESTORE_STRENGTH"
    POISON = "POISON"
    CONFUSION = "CONFUSION"
    BLINDNESS = "BLINDNESS"
    HASTE_SELF = "HASTE_SELF"
    DETECT_MONSTERS = "DETECT_MONSTERS"
    DETECT_MAGIC = "DETECT_MAGIC"
    RAISE_LEVEL = "RAISE_LEVEL"
    SEE_INVISIBLE = "SEE_INVISIBLE"
    LEVITATION = "LEVITATION"


class ScrollType(_KeyedEnum):
    IDENTIFY = "IDENTIFY"
    ENCHANT_WEAPON = "ENCHANT_WEAPON"
    ENCHANT_ARMOR = "ENCHANT_ARMOR"
    MAGIC_MAPPING = "MAGIC_MAPPING"
    TELEPORTATION = "TELEPORTATION"
    REMOVE_CURSE = "REMOVE_CURSE"
    CREATE_MONSTER = "CREATE_MONSTER"
    SCARE_MONSTER = "SCARE_MONSTER"
    LIGHT = "LIGHT"
    SLEEP = "SLEEP"
    HOLD_MONSTER = "HOLD_MONSTER"


class RingType(_KeyedEnum):
    PROTECTION = "PROTECTION"
    REGENERATION = "REGENERATION"
    SEARCHING = "SEARCHING"
    SEE_INVISIBLE = "SEE_INVISIBLE"
    SLOW_DIGESTION = "SLOW_DIGESTION"
    ADD_STRENGTH = "ADD_STRENGTH"
    SUSTAIN_STRENGTH = "SUSTAIN_STRENGTH"
    DEXTERITY = "DEXTERITY"
    TELEPORTATION = "TELEPORTATION"
    STEALTH = "STEALTH"


class WandType(_KeyedEnum):
    LIGHTNING = "LIGHTNING"
    FIRE = "FIRE"
    COLD = "COLD"
    MAGIC_MISSILE = "MAGIC_MISSILE"
    SLEEP = "SLEEP"
    HASTE_MONSTER = "HASTE_MONSTER"
    SLOW_MONSTER = "SLOW_MONSTER"
    POLYMORPH = "POLYMORPH"
    TELEPORT_AWAY = "TELEPORT_AWAY"
    CANCELLATION = "CANCELLATION"


class Rarity(_KeyedEnum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    LEGENDARY = "LEGENDARY"


class PowerTier(_KeyedEnum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class MonsterState(_KeyedEnum):
    SLEEPING = "SLEEPING"
    WANDERING = "WANDERING"
    HUNTING = "HUNTING"
    FLEEING = "FLEEING"


class MonsterBehavior(_KeyedEnum):
    SMART = "SMART"
    GREEDY = "GREEDY"
    ERRATIC = "ERRATIC"
    SIMPLE = "SIMPLE"
    THIEF = "THIEF"
    STATIONARY = "STATIONARY"
    COWARD = "COWARD"


__all__ = [
    "TileType",
    "DoorState",
    "TrapType",
    "ItemType",
    "PotionType",
    "ScrollType",
    "RingType",
    "WandType",
    "Rarity",
    "PowerTier",
    "MonsterState",
    "MonsterBehavior",
]
