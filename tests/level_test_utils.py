from collections import deque

from roguegen.models import TileType

# Door tiles count as traversable regardless of state: closed doors open and
# secret doors are found during play, neither changes the topology.
TRAVERSABLE = {TileType.FLOOR, TileType.DOOR}


def grid_chars(level):
    return ["".join(t.char for t in row) for row in level.tiles]


def bfs_reachable(level, start):
    """Return set of (x,y) traversable tiles reachable from start."""
    if start is None:
        return set()
    sx, sy = start
    if not (0 <= sx < level.width and 0 <= sy < level.height):
        return set()
    if level.tiles[sy][sx].type not in TRAVERSABLE:
        return set()
    q = deque([start])
    vis = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < level.width and 0 <= ny < level.height and (nx, ny) not in vis:
                if level.tiles[ny][nx].type in TRAVERSABLE:
                    vis.add((nx, ny))
                    q.append((nx, ny))
    return vis


def on_room_boundary(room, x, y):
    """True when (x,y) is one step outside an edge of room, corners excluded."""
    if room.x <= x < room.x + room.width and y in (room.y - 1, room.y + room.height):
        return True
    if room.y <= y < room.y + room.height and x in (room.x - 1, room.x + room.width):
        return True
    return False


def entity_positions(level):
    """(x,y) of every door, trap, item, monster and gold pile, duplicates kept."""
    out = [d.position.as_tuple() for d in level.doors]
    out += [t.position.as_tuple() for t in level.traps]
    out += [i.position.as_tuple() for i in level.items]
    out += [m.position.as_tuple() for m in level.monsters]
    out += [g.position.as_tuple() for g in level.gold]
    return out


def comparable(level):
    """Level snapshot without timing metrics, for determinism checks."""
    from roguegen.dungeon.render import level_to_dict

    snap = level_to_dict(level)
    snap.pop("metrics", None)
    return snap
