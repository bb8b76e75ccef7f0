"""
Camera module for generating primary view rays.

The camera is a pinhole at ``origin`` looking along ``direction``. The
image plane sits ``length`` units in front of it, is one world unit
tall and ``width / height`` units wide.

Known limitation: "up" is always world +Y and is not re-orthogonalized
against the view direction. Pitching the camera stretches the image
vertically, and a camera looking straight up or down has no defined
"right" vector (its rays come out NaN and hit nothing).
"""

from __future__ import annotations
import logging
import numpy as np

from .vec3 import Vec3, Point3

logger = logging.getLogger(__name__)


class Camera:
    """A pinhole camera with a fixed world-up axis."""

    def __init__(self, origin: Point3, direction: Vec3, length: float = 1.0):
        """Create a camera.

        Args:
            origin: Camera position in world space
            direction: View direction (need not be normalized)
            length: Focal length, the distance to the image plane
        """
        self.origin = origin
        self.direction = direction
        self.length = length

    def basis(self) -> tuple[Vec3, Vec3, Vec3]:
        """Return the (right, up, forward) view basis."""
        up = Vec3(0.0, 1.0, 0.0)
        forward = self.direction.normalize()
        side = up.cross(forward)
        if side.near_zero():
            logger.warning(
                "camera direction %s is parallel to world up; view rays are degenerate",
                self.direction
            )
        return side.normalize(), up, forward

    def dirs(self, width: int, height: int) -> list[Vec3]:
        """Compute one view direction per pixel.

        Directions are row-major from the top-left pixel, rows going
        down the image. They are not normalized.

        Args:
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            List of ``width * height`` world-space directions
        """
        right, up, forward = self.basis()

        aspect = width / height
        half = aspect / 2.0
        dx = aspect / width
        dy = 1.0 / height

        # Image plane coordinates, stepping from the upper-left corner
        xs = -half + dx * np.arange(width)
        ys = 0.5 - dy * np.arange(height)

        plane = (
            xs[np.newaxis, :, np.newaxis] * right.to_array()
            + ys[:, np.newaxis, np.newaxis] * up.to_array()
            + self.length * forward.to_array()
        )
        return [Vec3.from_array(row) for row in plane.reshape(-1, 3)]

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, direction={self.direction}, length={self.length})"
