"""
Wavefront OBJ mesh import.

Only geometry is read: ``v`` positions, ``vn`` normals and ``f`` faces
(``v``, ``v/vt``, ``v//vn`` or ``v/vt/vn`` corners, 1-based or negative
relative indices). Polygons are fan-triangulated. Texture coordinates,
materials, groups and smoothing statements are skipped.
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, List, Union
from dataclasses import dataclass
import logging

from .vec3 import Vec3, Point3
from .shapes import Tri
from .materials import Material
from .errors import SceneParseError

logger = logging.getLogger(__name__)

IGNORED_COMMANDS = {'vt', 'vp', 'usemtl', 'mtllib', 'o', 'g', 's', 'l'}


class ObjLoadError(SceneParseError):
    """Error while reading an OBJ mesh."""

    def __init__(self, message: str, line_num: Optional[int] = None):
        if line_num is not None:
            message = f"line {line_num}: {message}"
        super().__init__(message)
        self.line_num = line_num


@dataclass
class OBJVertex:
    """One face corner as 0-based indices into the position and normal lists."""
    position_idx: int
    normal_idx: Optional[int] = None


def _xyz(args: List[str]) -> Vec3:
    if len(args) < 3:
        raise ValueError(f"expected 3 coordinates, got {len(args)}")
    return Vec3(float(args[0]), float(args[1]), float(args[2]))


class OBJLoader:
    """Reads OBJ text into a flat list of triangles.

    Positions are transformed on load: scaled per axis, then offset.
    Normals are used as written.
    """

    def __init__(self):
        self.vertices: List[Point3] = []
        self.normals: List[Vec3] = []
        self.triangles: List[Tri] = []

    def load(
        self,
        filename: Union[str, Path],
        material: Material,
        offset: Vec3 = Vec3(0, 0, 0),
        scale: Vec3 = Vec3(1, 1, 1)
    ) -> List[Tri]:
        """Read an OBJ file from disk.

        Args:
            filename: Mesh to read
            material: Material given to every triangle
            offset: Translation applied after scaling
            scale: Per-axis scale factor

        Returns:
            Triangles in the order their faces appear
        """
        path = Path(filename)
        if not path.is_file():
            raise ObjLoadError(f"OBJ file not found: {filename}")

        try:
            contents = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ObjLoadError(f"cannot read OBJ file {filename}: {e}") from e

        return self.parse(contents, material, offset, scale)

    def parse(
        self,
        contents: str,
        material: Material,
        offset: Vec3 = Vec3(0, 0, 0),
        scale: Vec3 = Vec3(1, 1, 1)
    ) -> List[Tri]:
        """Parse OBJ text. See ``load``."""
        self.vertices = []
        self.normals = []
        self.triangles = []

        for line_num, raw_line in enumerate(contents.splitlines(), 1):
            # Comments may also trail a statement
            statement = raw_line.split('#', 1)[0].split()
            if not statement:
                continue

            cmd, args = statement[0], statement[1:]
            try:
                if cmd == 'v':
                    self.vertices.append(_xyz(args) * scale + offset)
                elif cmd == 'vn':
                    self.normals.append(_xyz(args))
                elif cmd == 'f':
                    corners = self._parse_face(args)
                    self.triangles.extend(self._triangulate_face(corners, material))
                elif cmd not in IGNORED_COMMANDS:
                    logger.debug("skipping unsupported OBJ line %d: %s", line_num, raw_line)
            except (ValueError, IndexError) as e:
                raise ObjLoadError(f"malformed {cmd!r} statement ({e})", line_num) from e

        logger.debug(
            "parsed %d vertices, %d normals, %d triangles",
            len(self.vertices), len(self.normals), len(self.triangles)
        )
        return self.triangles

    def _resolve(self, raw: str, count: int, kind: str) -> int:
        """Turn a 1-based (or negative, relative) OBJ index into a list index."""
        idx = int(raw)
        idx = count + idx if idx < 0 else idx - 1
        if not 0 <= idx < count:
            raise IndexError(f"{kind} index {raw} out of range (have {count})")
        return idx

    def _parse_face(self, face_parts: List[str]) -> List[OBJVertex]:
        """Resolve the corners of an ``f`` statement."""
        if len(face_parts) < 3:
            raise ValueError(f"face needs at least 3 vertices, got {len(face_parts)}")

        corners = []
        for part in face_parts:
            fields = part.split('/')
            position = self._resolve(fields[0], len(self.vertices), 'vertex')
            normal = None
            if len(fields) == 3 and fields[2]:
                normal = self._resolve(fields[2], len(self.normals), 'normal')
            corners.append(OBJVertex(position, normal))
        return corners

    def _triangulate_face(self, corners: List[OBJVertex], material: Material) -> List[Tri]:
        """Fan out from the first corner; faces are assumed convex."""
        first = corners[0]
        return [
            self._make_tri((first, b, c), material)
            for b, c in zip(corners[1:-1], corners[2:])
        ]

    def _make_tri(self, corners, material: Material) -> Tri:
        p0, p1, p2 = (self.vertices[c.position_idx] for c in corners)
        if any(c.normal_idx is None for c in corners):
            return Tri.auto_normal(p0, p1, p2, material)
        n0, n1, n2 = (self.normals[c.normal_idx] for c in corners)
        return Tri(p0, p1, p2, n0, n1, n2, material)


def load_obj(
    filename: Union[str, Path],
    material: Material,
    offset: Vec3 = Vec3(0, 0, 0),
    scale: Vec3 = Vec3(1, 1, 1)
) -> List[Tri]:
    """Load an OBJ file with a fresh loader.

    Args:
        filename: Mesh to read
        material: Material given to every triangle
        offset: Translation applied after scaling
        scale: Per-axis scale factor

    Returns:
        List of triangles
    """
    return OBJLoader().load(filename, material, offset, scale)
