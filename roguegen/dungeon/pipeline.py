"""Pipeline orchestration for level generation.

`DungeonService` owns the random stream and the spawn engines and runs the
generation phases for one depth in a fixed order:

    grid -> rooms -> corridors -> carve rooms -> doors -> stairs/traps
         -> monsters -> items -> gold -> amulet (terminal depth only)

Every phase draws from the same stream, so the order above is part of the
output contract for a seed. `generate_all_levels` runs depths 1..max_depth and
then hands the finished list to the guarantee repair pass.
"""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from roguegen.logging_utils import get_logger
from roguegen.models import DoorState, Level
from roguegen.services.guarantees import GuaranteeConfig, enforce_guarantees
from roguegen.services.item_spawn import ItemSpawnService
from roguegen.services.monster_spawn import MonsterSpawnService

from .config import DungeonConfig
from .corridors import carve_corridor, generate_corridors
from .features import compute_stairs, place_doors, place_traps, spawn_amulet, spawn_gold
from .metrics import init_metrics
from .rooms import carve_rooms, place_rooms
from .tiles import new_grid

log = get_logger("roguegen.dungeon")


class DungeonService:
    def __init__(
        self,
        rng,
        monster_spawner: Optional[MonsterSpawnService] = None,
        item_spawner: Optional[ItemSpawnService] = None,
        guarantees: Optional[GuaranteeConfig] = None,
        enable_metrics: bool = True,
    ):
        self.rng = rng
        self.guarantees = guarantees if guarantees is not None else GuaranteeConfig.load()
        self.monster_spawner = monster_spawner or MonsterSpawnService(rng)
        self.item_spawner = item_spawner or ItemSpawnService(rng, guarantees=self.guarantees)
        self.enable_metrics = enable_metrics
        self.last_guarantee_report: Dict[str, list] = {}

    def generate_level(self, depth: int, config: DungeonConfig) -> Level:
        """Generate the initial content of one depth."""
        if not 1 <= depth <= config.max_depth:
            raise ValueError(f"depth must be within 1..{config.max_depth}, got {depth}")
        metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        if self.enable_metrics:
            start = time.perf_counter()
            phase_times: Dict[str, int] = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = int((pe - ps) * 1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        rng = self.rng
        tiles = _phase('grid', new_grid, config.width, config.height)
        rooms = _phase('rooms', place_rooms, config, rng)

        corridors, loops = _phase('corridors', generate_corridors, rooms, config.loop_chance, rng)
        for corridor in corridors:
            carve_corridor(tiles, corridor)
        carve_rooms(tiles, rooms)

        doors = _phase('doors', place_doors, tiles, rooms, rng)

        # Stairs are fixed room centers and draw nothing; computing them first
        # lets traps and spawns keep off the stair tiles.
        stairs_up, stairs_down = compute_stairs(rooms, depth, config.max_depth)
        reserved = {p for p in (stairs_up, stairs_down) if p is not None}
        traps = _phase('traps', place_traps, tiles, rooms, config, rng, reserved)

        spawn_rooms = rooms[1:] if len(rooms) > 1 else rooms
        occupied = set(reserved)
        occupied.update(d.position for d in doors)
        occupied.update(t.position for t in traps)
        monsters = _phase('monsters', self.monster_spawner.spawn_monsters, spawn_rooms, tiles, depth, occupied)
        occupied.update(m.position for m in monsters)
        items = _phase(
            'items', self.item_spawner.spawn_items, spawn_rooms, config.items_per_level, tiles, monsters, depth, occupied
        )
        occupied.update(i.position for i in items)
        gold = _phase('gold', spawn_gold, tiles, rooms, depth, config, rng, occupied)
        occupied.update(g.position for g in gold)

        if depth == config.amulet_depth:
            amulet = _phase('amulet', spawn_amulet, tiles, rooms, depth, rng, occupied)
            if amulet is not None:
                items.append(amulet)

        level = Level(
            depth=depth,
            width=config.width,
            height=config.height,
            tiles=tiles,
            rooms=rooms,
            doors=doors,
            traps=traps,
            monsters=monsters,
            items=items,
            gold=gold,
            stairs_up=stairs_up,
            stairs_down=stairs_down,
            explored=[[False] * config.width for _ in range(config.height)],
            metrics=metrics,
        )

        if self.enable_metrics:
            metrics.update(
                rooms_placed=len(rooms),
                corridors=len(corridors),
                loop_corridors=loops,
                doors_created=len(doors),
                secret_doors=sum(1 for d in doors if d.state is DoorState.SECRET),
                traps_placed=len(traps),
                monsters_spawned=len(monsters),
                items_spawned=len(items),
                gold_piles=len(gold),
            )
            metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
            metrics['phase_ms'] = phase_times

        log.info(
            event="level_generated",
            depth=depth,
            rooms=len(rooms),
            corridors=len(corridors),
            doors=len(doors),
            monsters=len(monsters),
            items=len(items),
        )
        return level

    def generate_all_levels(self, config: DungeonConfig) -> List[Level]:
        """Generate depths 1..max_depth, then top up guaranteed items in place."""
        levels = [self.generate_level(depth, config) for depth in range(1, config.max_depth + 1)]
        self.last_guarantee_report = enforce_guarantees(levels, self.item_spawner, self.guarantees)
        return levels


__all__ = ["DungeonService"]
