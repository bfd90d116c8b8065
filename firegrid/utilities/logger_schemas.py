from dataclasses import dataclass, asdict
from typing import Literal


@dataclass
class CellLogEntry:
    tick: int
    row: int
    col: int
    state: int

    def to_dict(self):
        return asdict(self)


@dataclass
class ActionEntry:
    tick: int
    action_type: Literal['ignite', 'random_ignite', 'toggle_wall', 'clear_walls',
                         'randomize_walls', 'reset_fire', 'pause', 'resume',
                         'set_speed', 'resize']
    row: int = -1
    col: int = -1
    value: float = 0.0

    def to_dict(self):
        return asdict(self)
