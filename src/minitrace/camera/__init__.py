"""Camera module mapping image pixels to primary rays.

Components:
    viewport: Viewport camera looking down -z with one ray per pixel center

Image coordinates:
    i in [0, image_width): left to right
    j in [0, image_height): top to bottom
"""

from .viewport import (
    CameraGeometry,
    ViewportCamera,
    compute_camera_geometry,
    compute_image_height,
    get_camera_info,
    get_image_height,
    get_image_size,
    get_pixel_center,
    get_ray,
    setup_camera,
)

__all__ = [
    "ViewportCamera",
    "CameraGeometry",
    "compute_image_height",
    "compute_camera_geometry",
    "setup_camera",
    "get_image_size",
    "get_image_height",
    "get_pixel_center",
    "get_ray",
    "get_camera_info",
]
