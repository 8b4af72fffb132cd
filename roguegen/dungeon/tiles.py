# Tile constructors and door-state tile rules centralized for modular imports
from typing import List

from roguegen.models import DoorState, Tile, TileType

WALL_CHAR = "#"
FLOOR_CHAR = "."
OPEN_DOOR_CHAR = "'"
CLOSED_DOOR_CHAR = "+"

WALL_COLORS = ("#8B7355", "#4A4A4A")
FLOOR_COLORS = ("#A89078", "#5A5A5A")
DOOR_COLORS = ("#D4AF37", "#8B7355")

PASSABLE_DOOR_STATES = {DoorState.OPEN, DoorState.BROKEN, DoorState.ARCHWAY}


def wall_tile() -> Tile:
    return Tile(TileType.WALL, WALL_CHAR, False, False, *WALL_COLORS)


def floor_tile() -> Tile:
    return Tile(TileType.FLOOR, FLOOR_CHAR, True, True, *FLOOR_COLORS)


def new_grid(width: int, height: int) -> List[List[Tile]]:
    """All-wall grid indexed tiles[y][x]."""
    return [[wall_tile() for _ in range(width)] for _ in range(height)]


def carve_floor(tile: Tile) -> None:
    tile.type = TileType.FLOOR
    tile.char = FLOOR_CHAR
    tile.walkable = True
    tile.transparent = True
    tile.color_lit, tile.color_dark = FLOOR_COLORS


def apply_door_state(tile: Tile, state: DoorState) -> None:
    """Turn `tile` into a door whose flags and glyph follow `state`.

    A secret door keeps the wall glyph and colors so it cannot be told
    apart from the surrounding wall.
    """
    tile.type = TileType.DOOR
    if state in PASSABLE_DOOR_STATES:
        tile.char = OPEN_DOOR_CHAR
        tile.walkable = True
        tile.transparent = True
        tile.color_lit, tile.color_dark = DOOR_COLORS
    elif state is DoorState.SECRET:
        tile.char = WALL_CHAR
        tile.walkable = False
        tile.transparent = False
        tile.color_lit, tile.color_dark = WALL_COLORS
    else:
        tile.char = CLOSED_DOOR_CHAR
        tile.walkable = False
        tile.transparent = False
        tile.color_lit, tile.color_dark = DOOR_COLORS


__all__ = [
    "WALL_CHAR",
    "FLOOR_CHAR",
    "OPEN_DOOR_CHAR",
    "CLOSED_DOOR_CHAR",
    "PASSABLE_DOOR_STATES",
    "wall_tile",
    "floor_tile",
    "new_grid",
    "carve_floor",
    "apply_door_state",
]
