"""
Renderer module - the heart of the ray tracer.

Implements:
- Chunked rendering: the pixel grid is cut into fixed-size runs of pixels
- A pool of worker threads pulling chunks from a shared queue
- Per-chunk depth buffers for nearest-hit resolution
- 8-bit image output
"""

from __future__ import annotations
import logging
import os
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Callable, Sequence
import numpy as np

from .color import Color
from .ray import Ray
from .scene import Scene
from .shapes import RaycastHit
from .shading import Shader, EXPOSURE, MAX_REFLECTIONS
from .vec3 import Vec3

logger = logging.getLogger(__name__)

# Pixels per chunk. Larger chunks mean less scheduling overhead but more
# idle workers waiting on the last chunks of a render.
CHUNK_SIZE = 1024

ProgressCallback = Callable[[int, int], None]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 256
    height: int = 256
    num_threads: int = 0  # 0 = auto-detect
    shadow_samples: int = 0  # 0 = hard shadows
    chunk_size: int = CHUNK_SIZE
    exposure: float = EXPOSURE
    max_reflections: int = MAX_REFLECTIONS

    def __post_init__(self):
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def num_pixels(self) -> int:
        return self.width * self.height


class ChunkState(Enum):
    """Lifecycle of a chunk: UNRENDERED -> IN_PROGRESS -> DONE."""
    UNRENDERED = 0
    IN_PROGRESS = 1
    DONE = 2


@dataclass
class Chunk:
    """A contiguous run of pixels rendered as one unit of work.

    Attributes:
        index: Position of the chunk in the image
        start, stop: Flat pixel range covered by the chunk
        state: Scheduling state, only changed by the scheduler thread
        pixels: Rendered colors, written by one worker under ``lock``
    """
    index: int
    start: int
    stop: int
    state: ChunkState = ChunkState.UNRENDERED
    pixels: list[Color] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __len__(self) -> int:
        return self.stop - self.start


class Renderer:
    """Brute-force ray caster with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[ProgressCallback] = None

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Set a callback function for progress updates.

        The callback runs on the thread that called ``render`` and
        receives ``(chunks_done, chunks_total)``.
        """
        self._progress_callback = callback

    def render(self, scene: Scene) -> list[Color]:
        """Render the scene.

        Args:
            scene: The scene to render

        Returns:
            Flat row-major list of ``width * height`` colors

        Raises:
            Any exception raised while rendering a chunk. The render is
            abandoned, no partial image is returned.
        """
        width = self.settings.width
        height = self.settings.height

        logger.debug("generating view rays for %dx%d", width, height)
        dirs = scene.camera.dirs(width, height)
        shader = Shader(
            scene,
            shadow_samples=self.settings.shadow_samples,
            exposure=self.settings.exposure,
            max_reflections=self.settings.max_reflections
        )

        chunks = self._generate_chunks(self.settings.num_pixels)
        total_chunks = len(chunks)
        num_workers = max(1, min(self.settings.num_threads, total_chunks))
        logger.info(
            "rendering %d objects, %d chunks on %d threads",
            len(scene.objects), total_chunks, num_workers
        )

        pending: queue.Queue[int] = queue.Queue()
        for chunk in chunks:
            pending.put(chunk.index)
        events: queue.Queue[tuple[Optional[ChunkState], int]] = queue.Queue()
        abort = threading.Event()

        def worker() -> None:
            """Render chunks until the queue is empty or the render aborts."""
            while not abort.is_set():
                try:
                    index = pending.get_nowait()
                except queue.Empty:
                    return
                events.put((ChunkState.IN_PROGRESS, index))
                try:
                    self._render_chunk(chunks[index], scene, shader, dirs)
                except BaseException:
                    abort.set()
                    events.put((None, index))
                    raise
                events.put((ChunkState.DONE, index))

        completed = 0
        with ThreadPoolExecutor(max_workers=num_workers, thread_name_prefix='chunktrace') as executor:
            futures = [executor.submit(worker) for _ in range(num_workers)]

            try:
                while completed < total_chunks:
                    state, index = events.get()
                    if state is None:
                        logger.error("chunk %d failed, aborting render", index)
                        break
                    chunks[index].state = state
                    if state is ChunkState.DONE:
                        completed += 1
                    if self._progress_callback:
                        self._progress_callback(completed, total_chunks)
            finally:
                abort.set()

            # Re-raises the first worker failure, if any
            for future in futures:
                future.result()

        # Combine chunks into the final image
        output: list[Color] = []
        for chunk in chunks:
            with chunk.lock:
                output.extend(chunk.pixels)
        return output

    def _render_chunk(self, chunk: Chunk, scene: Scene, shader: Shader, dirs: Sequence[Vec3]) -> None:
        """Render one chunk into its pixel buffer.

        Loops object-major: every object is tested against every pixel
        of the chunk, with a depth buffer keeping the nearest hit. The
        visible surface is the same as pixel-major order.
        """
        origin = scene.camera.origin
        background = scene.world.color
        size = len(chunk)

        rays = [Ray(origin, origin + dirs[i]) for i in range(chunk.start, chunk.stop)]
        depths = [float('inf')] * size
        hits: list[Optional[RaycastHit]] = [None] * size

        for obj in scene.objects:
            for j in range(size):
                hit = obj.raycast(rays[j])
                if hit is not None and 0.0 < hit.depth < depths[j]:
                    depths[j] = hit.depth
                    hits[j] = hit

        with chunk.lock:
            chunk.pixels = [
                background if hit is None else shader.shade(ray, hit)
                for ray, hit in zip(rays, hits)
            ]

    def _generate_chunks(self, num_pixels: int) -> list[Chunk]:
        """Cut the flat pixel range into chunks; the last may be short."""
        chunk_size = self.settings.chunk_size
        return [
            Chunk(index, start, min(start + chunk_size, num_pixels))
            for index, start in enumerate(range(0, num_pixels, chunk_size))
        ]

    def to_array(self, pixels: Sequence[Color]) -> np.ndarray:
        """Convert a flat pixel list to an 8-bit RGB image.

        Args:
            pixels: Output of ``render``

        Returns:
            uint8 array of shape (height, width, 3)
        """
        data = np.array([pixel.rgb for pixel in pixels], dtype=np.uint8)
        return data.reshape(self.settings.height, self.settings.width, 3)

    def save_image(self, pixels: Sequence[Color], filename: str) -> None:
        """Save a rendered image to file.

        Args:
            pixels: Output of ``render``
            filename: Output filename (extension determines format)
        """
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(self.to_array(pixels), 'RGB')
        pil_image.save(filename)
        logger.info("wrote %s", filename)
