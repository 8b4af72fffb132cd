"""Placement of doors, traps, stairs, gold and the Amulet.

Each function reads the carved tile grid and the room list, draws from the
shared random stream in a fixed order, and returns the placed features. Only
`place_doors` mutates tiles (door tiles take their glyph and flags from the
rolled state).
"""

from typing import Iterable, List, Optional, Sequence, Set, Tuple

from roguegen.logging_utils import get_logger
from roguegen.models import (
    AmuletData,
    Door,
    DoorState,
    GoldPile,
    Item,
    ItemType,
    Position,
    Room,
    TileType,
    Trap,
    TrapType,
)

from .config import DOOR_STATE_THRESHOLDS, DungeonConfig
from .tiles import apply_door_state

log = get_logger("roguegen.features")

TRAP_TYPES = [TrapType.BEAR, TrapType.DART, TrapType.TELEPORT, TrapType.SLEEP, TrapType.PIT]
AMULET_ATTEMPTS = 50
AMULET_NAME = "Amulet of Yendor"


def roll_door_state(rng) -> DoorState:
    roll = rng.next()
    open_, closed, secret, broken = DOOR_STATE_THRESHOLDS
    if roll < open_:
        return DoorState.OPEN
    if roll < closed:
        return DoorState.CLOSED
    if roll < secret:
        return DoorState.SECRET
    if roll < broken:
        return DoorState.BROKEN
    return DoorState.ARCHWAY


def _boundary_cells(room: Room) -> Iterable[Tuple[int, int]]:
    """Cells one step outside each edge (top, bottom, left, right), corners excluded."""
    for x in range(room.x, room.x + room.width):
        yield x, room.y - 1
    for x in range(room.x, room.x + room.width):
        yield x, room.y + room.height
    for y in range(room.y, room.y + room.height):
        yield room.x - 1, y
    for y in range(room.y, room.y + room.height):
        yield room.x + room.width, y


def place_doors(tiles, rooms: Sequence[Room], rng) -> List[Door]:
    height = len(tiles)
    width = len(tiles[0]) if height else 0
    inside = {cell for room in rooms for cell in room.cells()}
    doors: List[Door] = []
    seen: Set[Tuple[int, int]] = set()
    for room in rooms:
        for x, y in _boundary_cells(room):
            if (x, y) in seen or (x, y) in inside:
                continue
            if not (0 <= x < width and 0 <= y < height):
                continue
            tile = tiles[y][x]
            if tile.type is not TileType.FLOOR or not tile.walkable:
                continue
            seen.add((x, y))
            state = roll_door_state(rng)
            orientation = "vertical" if (x < room.x or x >= room.x + room.width) else "horizontal"
            doors.append(
                Door(
                    position=Position(x, y),
                    state=state,
                    discovered=state is not DoorState.SECRET,
                    orientation=orientation,
                    connects_rooms=(room.id, -1),
                )
            )
            apply_door_state(tile, state)
    return doors


def place_traps(tiles, rooms: Sequence[Room], config: DungeonConfig, rng, reserved: Optional[Set[Position]] = None) -> List[Trap]:
    if not rooms:
        return []
    reserved = reserved or set()
    count = rng.next_int(config.min_traps, config.max_traps)
    traps: List[Trap] = []
    taken: Set[Position] = set()
    for _ in range(count * 10):
        if len(traps) >= count:
            break
        room = rng.pick_random(rooms)
        x = rng.next_int(room.x + 1, room.x + room.width - 2)
        y = rng.next_int(room.y + 1, room.y + room.height - 2)
        pos = Position(x, y)
        if not room.is_interior(x, y) or pos in taken or pos in reserved:
            continue
        if not tiles[y][x].walkable:
            continue
        traps.append(Trap(type=rng.pick_random(TRAP_TYPES), position=pos))
        taken.add(pos)
    if len(traps) < count:
        log.debug(event="traps_underfilled", target=count, placed=len(traps))
    return traps


def compute_stairs(rooms: Sequence[Room], depth: int, max_depth: int) -> Tuple[Optional[Position], Optional[Position]]:
    """(stairs_up, stairs_down): first room center up, last room center down."""
    if not rooms:
        return None, None
    up = rooms[0].center if depth > 1 else None
    down = rooms[-1].center if depth < max_depth else None
    return up, down


def spawn_gold(tiles, rooms: Sequence[Room], depth: int, config: DungeonConfig, rng, occupied: Set[Position]) -> List[GoldPile]:
    if not rooms:
        return []
    count = rng.next_int(config.min_gold_piles, config.max_gold_piles)
    piles: List[GoldPile] = []
    taken = set(occupied)
    for _ in range(count * 10):
        if len(piles) >= count:
            break
        room = rng.pick_random(rooms)
        x = rng.next_int(room.x + 1, room.x + room.width - 2)
        y = rng.next_int(room.y + 1, room.y + room.height - 2)
        pos = Position(x, y)
        tile = tiles[y][x]
        if not room.contains(x, y) or pos in taken or tile.type is not TileType.FLOOR:
            continue
        amount = rng.next_int(0, 50 + 10 * depth - 1) + 2
        piles.append(GoldPile(pos, amount))
        taken.add(pos)
    return piles


def spawn_amulet(tiles, rooms: Sequence[Room], depth: int, rng, occupied: Set[Position]) -> Optional[Item]:
    """Place the Amulet inside the last room, falling back to its center."""
    if not rooms:
        return None
    room = rooms[-1]
    position = None
    for _ in range(AMULET_ATTEMPTS):
        x = rng.next_int(room.x + 1, room.x + room.width - 2)
        y = rng.next_int(room.y + 1, room.y + room.height - 2)
        pos = Position(x, y)
        if room.is_interior(x, y) and tiles[y][x].type is TileType.FLOOR and pos not in occupied:
            position = pos
            break
    if position is None:
        position = room.center
        log.debug(event="amulet_center_fallback", depth=depth)
    return Item(
        id=f"amulet-{depth}",
        name=AMULET_NAME,
        type=ItemType.AMULET,
        position=position,
        data=AmuletData(cursed=False),
        sprite_name="amulet",
        identified=True,
    )


__all__ = [
    "TRAP_TYPES",
    "AMULET_NAME",
    "roll_door_state",
    "place_doors",
    "place_traps",
    "compute_stairs",
    "spawn_gold",
    "spawn_amulet",
]
