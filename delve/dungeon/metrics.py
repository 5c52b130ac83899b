from typing import Dict


def init_metrics() -> Dict[str, int | float | bool]:
    return {
        'leaves': 0,
        'rooms_carved': 0,
        'rooms_discarded': 0,
        'corridors_dug': 0,
        'boss_connections': 0,
        'exit_placed': False,
        'runtime_ms': 0.0,
    }
