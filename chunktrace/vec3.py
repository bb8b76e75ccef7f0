"""
Three-component vectors backed by numpy.

One type serves for positions, directions and normals. Operators
return new vectors; nothing here mutates in place, so vectors can be
shared freely between render threads.
"""

from __future__ import annotations
from typing import Union
import numpy as np

Operand = Union['Vec3', float]


def _raw(value: Operand):
    """Unwrap a Vec3 operand, leaving scalars untouched."""
    return value._data if isinstance(value, Vec3) else value


class Vec3:
    """An immutable 3D vector.

    ``*`` and ``/`` with another Vec3 act per component, which is how
    mesh scale factors are applied.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array((x, y, z), dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Wrap a length-3 array without copying it."""
        vec = cls.__new__(cls)
        vec._data = np.asarray(arr, dtype=np.float64)
        return vec

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return "Vec3({:.4f}, {:.4f}, {:.4f})".format(*self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Vec3):
            return bool(np.allclose(self._data, other._data))
        return NotImplemented

    def __neg__(self) -> Vec3:
        return Vec3.from_array(np.negative(self._data))

    def __add__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data + _raw(other))

    __radd__ = __add__

    def __sub__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data - _raw(other))

    def __mul__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data * _raw(other))

    __rmul__ = __mul__

    def __truediv__(self, other: Operand) -> Vec3:
        return Vec3.from_array(self._data / _raw(other))

    def __getitem__(self, index: int) -> float:
        return self.to_tuple()[index]

    def __iter__(self):
        return iter(self.to_tuple())

    def length_squared(self) -> float:
        return float(self._data @ self._data)

    def length(self) -> float:
        return float(np.sqrt(self.length_squared()))

    def normalize(self) -> Vec3:
        """Scale to unit length.

        There is no zero check: the zero vector comes back as NaN in
        every component, without a numpy warning.
        """
        with np.errstate(invalid='ignore', divide='ignore'):
            return Vec3.from_array(self._data / self.length())

    def dot(self, other: Vec3) -> float:
        return float(self._data @ other._data)

    def cross(self, other: Vec3) -> Vec3:
        ax, ay, az = self._data
        bx, by, bz = other._data
        return Vec3(ay * bz - az * by, az * bx - ax * bz, ax * by - ay * bx)

    def reflect(self, normal: Vec3) -> Vec3:
        """Mirror this vector about the axis given by ``normal``.

        Computes ``2 (n . v) n - v``. For a vector pointing away from the
        surface this gives the mirror direction on the other side of the
        normal, so a view ray ``d`` bounces along ``(-d).reflect(n)``.
        """
        return normal * (2.0 * normal.dot(self)) - self

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        return bool(np.all(np.abs(self._data) < epsilon))

    def is_finite(self) -> bool:
        """True unless some component is NaN or infinite."""
        return bool(np.all(np.isfinite(self._data)))

    def to_array(self) -> np.ndarray:
        """Copy of the components as a float64 array."""
        return np.array(self._data)

    def to_tuple(self) -> tuple[float, float, float]:
        x, y, z = self._data.tolist()
        return (x, y, z)

    @staticmethod
    def random(min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Uniform components in ``[min_val, max_val)``."""
        return Vec3.from_array(np.random.uniform(min_val, max_val, 3))

    @staticmethod
    def random_in_unit_sphere() -> Vec3:
        """Rejection-sample a nonzero point strictly inside the unit ball."""
        candidate = Vec3.random(-1.0, 1.0)
        while not 0.0 < candidate.length_squared() < 1.0:
            candidate = Vec3.random(-1.0, 1.0)
        return candidate

    @staticmethod
    def random_unit_vector() -> Vec3:
        """Random direction, uniform over the unit sphere."""
        return Vec3.random_in_unit_sphere().normalize()


# Positions and directions share one type
Point3 = Vec3
