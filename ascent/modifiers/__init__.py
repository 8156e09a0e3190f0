"""
Modifiers module - Mode-specific board mutation between turns.
"""

from .modifier import Modifier, StandardModifier
from .chaos import ChaosEffect, BuildChaos, DestroyChaos, FogChaos, ChaosModifier
from .registry import MODIFIERS, parse_modifier

__all__ = [
    "Modifier",
    "StandardModifier",
    "ChaosEffect",
    "BuildChaos",
    "DestroyChaos",
    "FogChaos",
    "ChaosModifier",
    "MODIFIERS",
    "parse_modifier",
]
