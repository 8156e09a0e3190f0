"""
Power registry - Stable names to power classes.

Save files refer to powers by name, so names here must never change.
New powers only need an entry in POWERS; the turn machine is untouched.
"""

from __future__ import annotations
import logging
import random

from .power import Power
from .gods import Artemis, Demeter, Triton

logger = logging.getLogger(__name__)


POWERS: dict[str, type[Power]] = {
    Artemis.name: Artemis,
    Demeter.name: Demeter,
    Triton.name: Triton,
}


def parse_power(name: str) -> Power | None:
    """Create a power from its saved name. Unknown names yield None."""
    power_class = POWERS.get(name.strip())
    if power_class is None:
        if name.strip():
            logger.warning("Unknown power '%s', player will have no power", name)
        return None
    return power_class()


def create_power_pool() -> list[Power]:
    """One fresh instance of every registered power."""
    return [power_class() for power_class in POWERS.values()]


def draw_powers(count: int, rng: random.Random | None = None) -> list[Power]:
    """
    Draw `count` distinct powers without replacement.

    Raises:
        ValueError: if there are fewer registered powers than requested
    """
    pool = create_power_pool()
    if count > len(pool):
        raise ValueError(f"Only {len(pool)} powers available for {count} players")
    rng = rng or random.Random()
    rng.shuffle(pool)
    return pool[:count]
