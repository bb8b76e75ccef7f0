"""
Surface materials.

A material is a flat color plus a flag saying whether the surface is a
mirror. Mirrors take their color from whatever they reflect.
"""

from __future__ import annotations
from dataclasses import dataclass

from .color import Color


@dataclass(frozen=True)
class Material:
    """Immutable surface description shared by every object that uses it."""
    color: Color
    reflective: bool = False
