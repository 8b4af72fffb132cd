"""Level aggregate and its structural parts (tiles, rooms, doors, traps, gold)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .enums import DoorState, TileType, TrapType


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass
class Tile:
    # Mutated in place while carving; treated as read-only once a Level is returned.
    type: TileType
    char: str
    walkable: bool
    transparent: bool
    color_lit: str
    color_dark: str


@dataclass(frozen=True)
class Room:
    id: int
    x: int
    y: int
    width: int
    height: int

    def cells(self):
        for iy in range(self.y, self.y + self.height):
            for ix in range(self.x, self.x + self.width):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def is_interior(self, x: int, y: int) -> bool:
        """True for cells inside the room that are not on its edge ring."""
        return self.x < x < self.x + self.width - 1 and self.y < y < self.y + self.height - 1

    @property
    def center(self) -> Position:
        return Position(self.x + self.width // 2, self.y + self.height // 2)


@dataclass
class Door:
    position: Position
    state: DoorState
    discovered: bool
    orientation: str  # 'horizontal' | 'vertical'
    connects_rooms: Tuple[int, int]


@dataclass
class Trap:
    type: TrapType
    position: Position
    discovered: bool = False
    triggered: bool = False


@dataclass(frozen=True)
class GoldPile:
    position: Position
    amount: int


@dataclass
class Level:
    depth: int
    width: int
    height: int
    tiles: List[List[Tile]]
    rooms: List[Room]
    doors: List[Door] = field(default_factory=list)
    traps: List[Trap] = field(default_factory=list)
    monsters: list = field(default_factory=list)
    items: list = field(default_factory=list)
    gold: List[GoldPile] = field(default_factory=list)
    stairs_up: Optional[Position] = None
    stairs_down: Optional[Position] = None
    explored: List[List[bool]] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.tiles[y][x]
        return None

    def occupied_positions(self) -> set:
        """Every position holding a door, trap, monster, item or gold pile."""
        taken = {d.position for d in self.doors}
        taken.update(t.position for t in self.traps)
        taken.update(m.position for m in self.monsters)
        taken.update(i.position for i in self.items)
        taken.update(g.position for g in self.gold)
        return taken


__all__ = ["Position", "Tile", "Room", "Door", "Trap", "GoldPile", "Level"]
