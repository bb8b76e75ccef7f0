"""
Scene description parser.

Reads a JSON or YAML scene description into a Scene. Objects and
lights are single-key mappings naming their type (a ``type`` field is
accepted too).

Example scene file:
```json
{
    "camera": {
        "origin": {"x": 0, "y": 2, "z": -6},
        "direction": {"x": 0, "y": -0.1, "z": 1},
        "focal_length": 1
    },
    "background_color": {"r": 0, "g": 0, "b": 255, "a": 255},
    "lights": [
        {"point": {"origin": [1, 7, -3], "strength": 1.5, "size": 0.5}}
    ],
    "objects": [
        {"sphere": {"center": [0, 1.3, 0], "radius": 1.3,
                    "color": "#ff0000", "reflective": false}},
        {"floor": {"y": 0, "color": [100, 50, 100], "reflective": false}},
        {"obj": {"filename": "teapot.obj", "offset": [0, 0, 2],
                 "scale": [1, 1, 1], "color": [200, 200, 200],
                 "reflective": true}}
    ]
}
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, List, Tuple, Union
import json
import logging

import yaml

from .vec3 import Vec3
from .color import Color
from .camera import Camera
from .materials import Material
from .shapes import SceneObject, Sphere, Floor, Tri
from .lights import Light, PointLight, SunLight
from .scene import Scene, World
from .obj_loader import OBJLoader
from .errors import SceneParseError

logger = logging.getLogger(__name__)

DEFAULT_SCENE: Dict[str, Any] = {
    "lights": [
        {"point": {"origin": {"x": 1, "y": 7, "z": -3}, "strength": 1.5}}
    ],
    "camera": {
        "origin": {"x": 0, "y": 2, "z": -6},
        "direction": {"x": 0, "y": -0.1, "z": 1},
        "focal_length": 1
    },
    "background_color": {"r": 0, "g": 0, "b": 255, "a": 255},
    "objects": [
        {"sphere": {
            "center": {"x": 0, "y": 1.3, "z": 0},
            "radius": 1.3,
            "reflective": False,
            "color": {"r": 255, "g": 0, "b": 0, "a": 255}
        }},
        {"floor": {
            "y": 0,
            "reflective": False,
            "color": {"r": 100, "g": 50, "b": 100, "a": 255}
        }}
    ]
}


class SceneParser:
    """Parser for scene description files."""

    def __init__(self, base_dir: Union[str, Path] = '.'):
        """Create a parser.

        Args:
            base_dir: Directory that mesh filenames are relative to
        """
        self.base_dir = Path(base_dir)
        self.objects: List[SceneObject] = []
        self.lights: List[Light] = []

    def parse_file(self, filepath: Union[str, Path]) -> Scene:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            The loaded Scene
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise SceneParseError(f"cannot read scene file {filepath}: {e}") from e
        self.base_dir = path.parent

        if path.suffix in ('.yaml', '.yml'):
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise SceneParseError(f"error parsing yaml: {e}") from e
        else:
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise SceneParseError(f"error parsing json: {e}") from e

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Scene:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            The loaded Scene
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene must be a mapping, got {type(data).__name__}")

        for key in ('objects', 'lights', 'camera', 'background_color'):
            if key not in data:
                raise SceneParseError(f"Scene is missing required field: {key}")

        self.objects = []
        self.lights = []
        self._parse_objects(data['objects'])
        self._parse_lights(data['lights'])
        camera = self._parse_camera(data['camera'])
        world = World(
            self._parse_color(data['background_color']),
            self._parse_float(data.get('world_strength', 1.0), 'world_strength')
        )

        logger.info("loaded scene: %d objects, %d lights", len(self.objects), len(self.lights))
        return Scene(self.objects, self.lights, camera, world)

    def _parse_float(self, data: Any, name: str) -> float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise SceneParseError(f"{name} must be a number, got {data!r}")
        return float(data)

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            x, y, z = (self._parse_float(c, 'Vec3 component') for c in data)
            return Vec3(x, y, z)
        elif isinstance(data, dict):
            try:
                return Vec3(*(self._parse_float(data[k], k) for k in ('x', 'y', 'z')))
            except KeyError as e:
                raise SceneParseError(f"Vec3 is missing component {e}") from e
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data!r}")

    def _parse_channel(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or (
            isinstance(value, float) and not value.is_integer()
        ):
            raise SceneParseError(f"Color channel must be an integer, got {value!r}")
        if not 0 <= value <= 255:
            raise SceneParseError(f"Color channel out of range 0-255: {value}")
        return int(value)

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an r/g/b/a mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) not in (3, 4):
                raise SceneParseError(f"Color must have 3 or 4 components, got {len(data)}")
            return Color(*(self._parse_channel(c) for c in data))
        elif isinstance(data, dict):
            try:
                r, g, b = (self._parse_channel(data[k]) for k in ('r', 'g', 'b'))
            except KeyError as e:
                raise SceneParseError(f"Color is missing channel {e}") from e
            return Color(r, g, b, self._parse_channel(data.get('a', 255)))
        elif isinstance(data, str):
            try:
                return Color.from_hex(data)
            except ValueError as e:
                raise SceneParseError(f"Cannot parse color from string: {data}") from e
        else:
            raise SceneParseError(f"Cannot parse Color from: {data!r}")

    def _parse_material(self, data: Dict[str, Any]) -> Material:
        reflective = data.get('reflective', False)
        if not isinstance(reflective, bool):
            raise SceneParseError(f"reflective must be true or false, got {reflective!r}")
        return Material(self._parse_color(data.get('color', [255, 255, 255])), reflective)

    def _split_tagged(self, entry: Any, section: str) -> Tuple[str, Dict[str, Any]]:
        """Return (type name, parameters) for a tagged object or light."""
        if not isinstance(entry, dict):
            raise SceneParseError(f"Each entry in {section} must be a mapping, got {entry!r}")
        if 'type' in entry:
            return str(entry['type']).lower(), entry
        if len(entry) != 1:
            raise SceneParseError(f"Entry in {section} must have exactly one type key: {sorted(entry)}")
        kind, params = next(iter(entry.items()))
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise SceneParseError(f"Parameters for {kind} must be a mapping")
        return kind.lower(), params

    def _parse_objects(self, objects_data: List[Any]) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("objects must be a list")

        for entry in objects_data:
            obj_type, obj_data = self._split_tagged(entry, 'objects')
            try:
                if obj_type == 'sphere':
                    center = self._parse_vec3(obj_data['center'])
                    radius = self._parse_float(obj_data['radius'], 'radius')
                    if radius <= 0:
                        raise SceneParseError(f"Sphere radius must be positive, got {radius}")
                    self.objects.append(Sphere(center, radius, self._parse_material(obj_data)))

                elif obj_type == 'floor':
                    y = self._parse_float(obj_data.get('y', 0.0), 'y')
                    self.objects.append(Floor(y, self._parse_material(obj_data)))

                elif obj_type in ('tri', 'triangle'):
                    self.objects.append(self._parse_tri(obj_data))

                elif obj_type == 'obj':
                    self.objects.extend(self._parse_mesh(obj_data))

                else:
                    raise SceneParseError(f"Unknown object type: {obj_type}")
            except KeyError as e:
                raise SceneParseError(f"{obj_type} is missing required field {e}") from e

    def _parse_tri(self, data: Dict[str, Any]) -> Tri:
        verts = data['verts']
        if not isinstance(verts, list) or len(verts) != 3:
            raise SceneParseError("tri verts must be a list of 3 points")
        v0, v1, v2 = (self._parse_vec3(v) for v in verts)
        material = self._parse_material(data)

        if 'normals' not in data:
            return Tri.auto_normal(v0, v1, v2, material)

        normals = data['normals']
        if not isinstance(normals, list) or len(normals) != 3:
            raise SceneParseError("tri normals must be a list of 3 vectors")
        n0, n1, n2 = (self._parse_vec3(n) for n in normals)
        return Tri(v0, v1, v2, n0, n1, n2, material)

    def _parse_mesh(self, data: Dict[str, Any]) -> List[Tri]:
        obj_path = self.base_dir / data['filename']
        offset = self._parse_vec3(data.get('offset', [0, 0, 0]))
        scale = self._parse_vec3(data.get('scale', [1, 1, 1]))
        material = self._parse_material(data)

        # ObjLoadError is a SceneParseError, so it propagates as is
        tris = OBJLoader().load(obj_path, material, offset, scale)
        logger.info("loaded %d triangles from %s", len(tris), obj_path)
        return tris

    def _parse_lights(self, lights_data: List[Any]) -> None:
        """Parse lights section."""
        if not isinstance(lights_data, list):
            raise SceneParseError("lights must be a list")

        for entry in lights_data:
            light_type, light_data = self._split_tagged(entry, 'lights')

            if light_type == 'point':
                try:
                    origin = self._parse_vec3(light_data['origin'])
                except KeyError as e:
                    raise SceneParseError("point light is missing required field 'origin'") from e
                strength = self._parse_float(light_data.get('strength', 1.0), 'strength')
                size = self._parse_float(light_data.get('size', 0.0), 'size')
                if size < 0:
                    raise SceneParseError(f"Light size cannot be negative, got {size}")
                self.lights.append(PointLight(origin, strength, size))

            elif light_type == 'sun':
                direction = None
                if 'direction' in light_data:
                    direction = self._parse_vec3(light_data['direction'])
                strength = self._parse_float(light_data.get('strength', 0.0), 'strength')
                self.lights.append(SunLight(direction, strength))

            else:
                raise SceneParseError(f"Unknown light type: {light_type}")

    def _parse_camera(self, camera_data: Any) -> Camera:
        """Parse camera section."""
        if not isinstance(camera_data, dict):
            raise SceneParseError("camera must be a mapping")
        try:
            origin = self._parse_vec3(camera_data['origin'])
            direction = self._parse_vec3(camera_data['direction'])
        except KeyError as e:
            raise SceneParseError(f"camera is missing required field {e}") from e
        if direction.near_zero():
            raise SceneParseError("camera direction cannot be the zero vector")
        length = self._parse_float(camera_data.get('focal_length', 1.0), 'focal_length')
        return Camera(origin, direction, length)


def load_scene(filepath: Union[str, Path]) -> Scene:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        The loaded Scene
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any], base_dir: Union[str, Path] = '.') -> Scene:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary
        base_dir: Directory that mesh filenames are relative to

    Returns:
        The loaded Scene
    """
    parser = SceneParser(base_dir)
    return parser.parse_dict(data)
