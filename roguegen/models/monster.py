from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .enums import MonsterState
from .level import Position


@dataclass
class Monster:
    id: str
    letter: str
    name: str
    position: Position
    hp: int
    max_hp: int
    ac: int
    damage: str
    xp_value: int
    level: int
    speed: int
    energy: int
    state: MonsterState
    is_awake: bool
    ai_profile: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_asleep(self) -> bool:
        return not self.is_awake


__all__ = ["Monster"]
