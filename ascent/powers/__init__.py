"""
Powers module - Per-player special abilities.

Provides:
- Power: Interface every ability implements
- Artemis, Demeter, Triton: Built-in abilities
- POWERS / parse_power: Name-based lookup used by save files
"""

from .power import Power
from .gods import Artemis, Demeter, Triton
from .registry import POWERS, parse_power, create_power_pool, draw_powers

__all__ = [
    "Power",
    "Artemis",
    "Demeter",
    "Triton",
    "POWERS",
    "parse_power",
    "create_power_pool",
    "draw_powers",
]
