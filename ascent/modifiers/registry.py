"""
Modifier registry - Stable names to modifier classes, mirroring powers.
"""

from __future__ import annotations
import logging
import random

from .modifier import Modifier, StandardModifier
from .chaos import ChaosModifier

logger = logging.getLogger(__name__)


MODIFIERS: dict[str, type[Modifier]] = {
    StandardModifier.name: StandardModifier,
    ChaosModifier.name: ChaosModifier,
}


def parse_modifier(name: str, rng: random.Random | None = None) -> Modifier | None:
    """Create a modifier from its saved name. Unknown names yield None."""
    modifier_class = MODIFIERS.get(name.strip())
    if modifier_class is None:
        logger.warning("Unknown modifier '%s', game will run without one", name)
        return None
    if modifier_class is ChaosModifier:
        return ChaosModifier(rng=rng)
    return modifier_class()
