"""ASCII and JSON views of a generated level.

Used by the CLI preview and the level API. Overlay precedence, highest first:
monster, item, gold, trap, stairs, then the tile glyph.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Tuple

from roguegen.models import ItemType, Level

ITEM_GLYPHS = {
    ItemType.WEAPON: ")",
    ItemType.ARMOR: "]",
    ItemType.POTION: "!",
    ItemType.SCROLL: "?",
    ItemType.RING: "=",
    ItemType.WAND: "/",
    ItemType.FOOD: ":",
    ItemType.TORCH: "~",
    ItemType.LANTERN: "~",
    ItemType.ARTIFACT: "~",
    ItemType.OIL_FLASK: "!",
    ItemType.AMULET: ",",
}
GOLD_GLYPH = "*"
TRAP_GLYPH = "^"
STAIRS_UP_GLYPH = "<"
STAIRS_DOWN_GLYPH = ">"


def glyph_grid(level: Level) -> List[List[Tuple[str, str]]]:
    """Rows of (glyph, kind) pairs; kind is 'tile', 'door', 'monster', 'item', 'gold', 'trap' or 'stairs'."""
    grid = [
        [(t.char, "door" if t.type.value == "DOOR" else "tile") for t in row]
        for row in level.tiles
    ]

    def put(pos, glyph, kind):
        if pos is not None and 0 <= pos.y < len(grid) and 0 <= pos.x < len(grid[pos.y]):
            grid[pos.y][pos.x] = (glyph, kind)

    put(level.stairs_up, STAIRS_UP_GLYPH, "stairs")
    put(level.stairs_down, STAIRS_DOWN_GLYPH, "stairs")
    for trap in level.traps:
        put(trap.position, TRAP_GLYPH, "trap")
    for pile in level.gold:
        put(pile.position, GOLD_GLYPH, "gold")
    for item in level.items:
        put(item.position, ITEM_GLYPHS.get(item.type, "&"), "item")
    for monster in level.monsters:
        put(monster.position, monster.letter, "monster")
    return grid


def to_ascii(level: Level) -> str:
    return "\n".join("".join(ch for ch, _ in row) for row in glyph_grid(level))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _pos(pos) -> Any:
    return None if pos is None else {"x": pos.x, "y": pos.y}


def _item_dict(item) -> Dict[str, Any]:
    data = {k: _plain(v) for k, v in vars(item.data).items()}
    return {
        "id": item.id,
        "name": item.name,
        "type": item.type.value,
        "position": _pos(item.position),
        "spriteName": item.sprite_name,
        "identified": item.identified,
        "data": data,
    }


def level_to_dict(level: Level, include_tiles: bool = True) -> Dict[str, Any]:
    """JSON-ready snapshot of a level; tiles are encoded as glyph rows."""
    out: Dict[str, Any] = {
        "depth": level.depth,
        "width": level.width,
        "height": level.height,
        "rooms": [{"id": r.id, "x": r.x, "y": r.y, "width": r.width, "height": r.height} for r in level.rooms],
        "doors": [
            {
                "position": _pos(d.position),
                "state": d.state.value,
                "discovered": d.discovered,
                "orientation": d.orientation,
                "connectsRooms": list(d.connects_rooms),
            }
            for d in level.doors
        ],
        "traps": [
            {"type": t.type.value, "position": _pos(t.position), "discovered": t.discovered, "triggered": t.triggered}
            for t in level.traps
        ],
        "monsters": [
            {
                "id": m.id,
                "letter": m.letter,
                "name": m.name,
                "position": _pos(m.position),
                "hp": m.hp,
                "maxHp": m.max_hp,
                "level": m.level,
                "state": m.state.value,
                "isAwake": m.is_awake,
            }
            for m in level.monsters
        ],
        "items": [_item_dict(i) for i in level.items],
        "gold": [{"position": _pos(g.position), "amount": g.amount} for g in level.gold],
        "stairsUp": _pos(level.stairs_up),
        "stairsDown": _pos(level.stairs_down),
        "metrics": _plain(level.metrics),
    }
    if include_tiles:
        out["tiles"] = ["".join(t.char for t in row) for row in level.tiles]
    return out


__all__ = ["ITEM_GLYPHS", "glyph_grid", "to_ascii", "level_to_dict"]
