"""Frame renderer driving a full image render.

This module provides a convenient wrapper around the camera, scene and
integrator that supports:
- Rendering the whole frame in raster order, in bands of scanlines
- Progress callbacks between bands
- Access to the result as float colors or encoded 8-bit channels
- Saving to PPM or PNG

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from minitrace.camera.viewport import ViewportCamera
    >>> from minitrace.core.frame import FrameRenderer
    >>> from minitrace.scene.scene import default_scene
    >>>
    >>> renderer = FrameRenderer(ViewportCamera(image_width=400), default_scene())
    >>> renderer.render()
    >>> renderer.save("image.ppm")
"""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt

from minitrace.camera.viewport import CameraGeometry, ViewportCamera, setup_camera
from minitrace.core.color import encode_image
from minitrace.core.integrator import (
    get_image_numpy,
    render_rows,
    render_test_pattern_rows,
    setup_render_target,
)
from minitrace.preview.export import save_image, write_ppm
from minitrace.scene.scene import SceneConfig, default_scene, setup_scene

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class FrameRenderer:
    """Renders one frame of a scene through a viewport camera.

    The renderer configures the camera, scene and render target fields when
    constructed. Those are module-level Taichi fields shared by all
    renderers, so each render re-applies this renderer's configuration and
    keeps a copy of the finished image.

    Attributes:
        camera: The camera configuration.
        scene: The scene configuration.
        geometry: Derived viewport geometry for the camera.
    """

    def __init__(self, camera: ViewportCamera, scene: SceneConfig | None = None) -> None:
        """Initialize the renderer.

        Args:
            camera: Camera configuration.
            scene: Scene configuration. Defaults to the single-sphere scene.
        """
        self.camera = camera
        self.scene = scene if scene is not None else default_scene()
        self.geometry: CameraGeometry = self._apply()
        self._image: npt.NDArray[np.float64] | None = None

    def _apply(self) -> CameraGeometry:
        geometry = setup_camera(self.camera)
        setup_scene(self.scene)
        setup_render_target(geometry.image_width, geometry.image_height)
        return geometry

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.geometry.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.geometry.image_height

    @property
    def rendered(self) -> bool:
        """Whether render() or render_test_pattern() has completed."""
        return self._image is not None

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the full frame.

        Args:
            rows_per_batch: Number of scanlines per kernel launch. Defaults to
                the whole image in one launch.
            callback: Optional callback called after each batch with
                (rows_done, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"Scanlines remaining: {total - done}")
            >>> renderer.render(rows_per_batch=16, callback=progress)
        """
        for done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the frame band by band, yielding progress after each band.

        This is a generator-based alternative to render() with callbacks.

        Args:
            rows_per_batch: Number of scanlines per band.

        Yields:
            Tuple of (rows_done, total_rows).
        """
        yield from self._render_bands(render_rows, rows_per_batch)

    def render_test_pattern(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Fill the frame with the red/green test gradient instead of the scene.

        Red increases left to right and green top to bottom; blue is zero.
        """
        for done, total in self._render_bands(render_test_pattern_rows, rows_per_batch):
            if callback is not None:
                callback(done, total)

    def _render_bands(
        self,
        render_band: Callable[[int, int], None],
        rows_per_batch: int | None,
    ) -> Generator[tuple[int, int], None, None]:
        if rows_per_batch is None:
            rows_per_batch = self.height
        if rows_per_batch < 1:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        self._image = None
        self._apply()

        total = self.height
        row = 0
        while row < total:
            end = min(row + rows_per_batch, total)
            render_band(row, end)
            row = end
            yield (row, total)

        self._image = get_image_numpy()

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the rendered colors as an array of shape (height, width, 3).

        Raises:
            RuntimeError: If the frame has not been rendered.
        """
        if self._image is None:
            raise RuntimeError("Frame has not been rendered. Call render() first.")
        return self._image.copy()

    def get_image_bytes(self, *, clamp: bool = False) -> npt.NDArray[np.int64]:
        """Get the rendered image encoded to integer channels.

        Args:
            clamp: Clamp colors to [0, 1] before encoding.

        Returns:
            int64 array of shape (height, width, 3).
        """
        return encode_image(self.get_image_numpy(), clamp=clamp)

    def write_ppm(self, stream: TextIO) -> None:
        """Write the rendered image to a text stream as plain PPM."""
        write_ppm(self.get_image_bytes(), stream)

    def save(self, filepath: str | Path) -> Path:
        """Save the rendered image; the format follows the file extension.

        Args:
            filepath: Output path ending in .ppm or .png.

        Returns:
            The path written.
        """
        return save_image(self.get_image_bytes(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"rendered={self.rendered})"
        )
