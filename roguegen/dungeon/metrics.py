from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms_placed': 0,
        'corridors': 0,
        'loop_corridors': 0,
        'doors_created': 0,
        'secret_doors': 0,
        'traps_placed': 0,
        'monsters_spawned': 0,
        'items_spawned': 0,
        'gold_piles': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
