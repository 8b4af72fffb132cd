"""Public dungeon package interface.

Structural generation (rooms, corridors, doors, traps, stairs) and the
balance tables live here. The orchestrator is imported from
``roguegen.dungeon.pipeline`` directly because it depends on the spawn
services, which in turn read the tables in ``roguegen.dungeon.config``.
"""

from .config import MAX_DEPTH, DungeonConfig, band_for_depth  # noqa: F401
from .corridors import Corridor, generate_corridors  # noqa: F401
from .features import compute_stairs, place_doors, place_traps  # noqa: F401
from .rooms import place_rooms  # noqa: F401

__all__ = [
    "MAX_DEPTH",
    "DungeonConfig",
    "band_for_depth",
    "Corridor",
    "generate_corridors",
    "compute_stairs",
    "place_doors",
    "place_traps",
    "place_rooms",
]
