"""
chunktrace - A brute-force CPU ray caster

Renders scenes of spheres, floors and triangle meshes with:
- Nearest-hit visibility over every object (no acceleration structure)
- Diffuse point-light shading with hard or sampled soft shadows
- Mirror reflections with bounded recursion
- Multi-threaded chunked rendering
- PNG output
"""

__version__ = "0.1.0"
__author__ = "chunktrace developers"

from .vec3 import Vec3, Point3
from .color import Color
from .ray import Ray
from .materials import Material
from .shapes import SceneObject, RaycastHit, Sphere, Floor, Tri
from .lights import Light, PointLight, SunLight
from .camera import Camera
from .scene import Scene, World
from .shading import Shader, EXPOSURE, MAX_REFLECTIONS, SELF_INTERSECTION_EPSILON
from .renderer import Renderer, RenderSettings, ChunkState, Chunk, CHUNK_SIZE
from .progress import ProgressReporter
from .errors import SceneParseError
from .scene_parser import SceneParser, load_scene, parse_scene, DEFAULT_SCENE
from .obj_loader import OBJLoader, ObjLoadError, load_obj
