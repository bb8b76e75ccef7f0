"""
8-bit RGBA color type.

Channels are integers in [0, 255]. Arithmetic saturates instead of
wrapping, so brightening an already bright color pins it at white
rather than rolling over to black.
"""

from __future__ import annotations
from dataclasses import dataclass


def _saturate(value: float) -> int:
    """Truncate toward zero and clamp into a channel. NaN maps to 0."""
    if not value > 0.0:
        return 0
    if value >= 255.0:
        return 255
    return int(value)


@dataclass(frozen=True)
class Color:
    """An RGBA color with saturating arithmetic.

    Attributes:
        r, g, b: Color channels, 0-255
        a: Alpha channel, carried through arithmetic unchanged
    """
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self):
        for name in ('r', 'g', 'b', 'a'):
            object.__setattr__(self, name, _saturate(getattr(self, name)))

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color(
            min(self.r + other.r, 255),
            min(self.g + other.g, 255),
            min(self.b + other.b, 255),
            self.a
        )

    def __mul__(self, factor: float) -> Color:
        if isinstance(factor, Color):
            return NotImplemented
        return Color(
            _saturate(self.r * factor),
            _saturate(self.g * factor),
            _saturate(self.b * factor),
            self.a
        )

    __rmul__ = __mul__

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse a ``#rrggbb`` string."""
        digits = value.lstrip('#')
        if len(digits) != 6:
            raise ValueError(f"Expected #rrggbb, got {value!r}")
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    def __repr__(self) -> str:
        return f"Color({self.r}, {self.g}, {self.b}, {self.a})"


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
