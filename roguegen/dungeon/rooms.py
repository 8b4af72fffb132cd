from typing import List

from roguegen.logging_utils import get_logger
from roguegen.models import Room

from .config import DungeonConfig
from .tiles import carve_floor

log = get_logger("roguegen.rooms")

ATTEMPTS_PER_ROOM = 100


def place_rooms(config: DungeonConfig, rng) -> List[Room]:
    """Place non-overlapping rooms by rejection sampling.

    Draws the target count first, then proposes up to ATTEMPTS_PER_ROOM
    rectangles for each room. Returns whatever fit; a crowded config simply
    yields fewer rooms than requested.
    """
    target = rng.next_int(config.min_rooms, config.max_rooms)
    rooms: List[Room] = []
    for _ in range(target):
        for _attempt in range(ATTEMPTS_PER_ROOM):
            w = rng.next_int(config.min_room_size, config.max_room_size)
            h = rng.next_int(config.min_room_size, config.max_room_size)
            # keep a one-tile wall border around the grid
            if config.width - w - 1 < 1 or config.height - h - 1 < 1:
                continue
            x = rng.next_int(1, config.width - w - 1)
            y = rng.next_int(1, config.height - h - 1)
            candidate = Room(len(rooms), x, y, w, h)
            if not any(_rooms_overlap(candidate, r, config.min_spacing) for r in rooms):
                rooms.append(candidate)
                break
    if len(rooms) < target:
        log.debug(event="rooms_underfilled", target=target, placed=len(rooms))
    return rooms


def _rooms_overlap(a: Room, b: Room, spacing: int) -> bool:
    return (
        a.x < b.x + b.width + spacing
        and a.x + a.width + spacing > b.x
        and a.y < b.y + b.height + spacing
        and a.y + a.height + spacing > b.y
    )


def carve_rooms(tiles, rooms: List[Room]) -> None:
    for room in rooms:
        for x, y in room.cells():
            carve_floor(tiles[y][x])


__all__ = ["place_rooms", "carve_rooms", "ATTEMPTS_PER_ROOM"]
