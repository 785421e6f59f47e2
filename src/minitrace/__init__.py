"""Minimal Taichi-based ray tracer.

This package traces one ray per pixel from a viewport camera against at most
one sphere and writes the result as a plain PPM (or PNG) image:
- Surface normals visualized as colors where the sphere is hit
- A vertical white to sky-blue gradient everywhere else

Subpackages:
    core: Vector algebra, rays, colors, the per-pixel shader and frame driver
    geometry: The sphere primitive and ray-sphere intersection
    scene: Scene configuration (zero or one sphere)
    camera: Viewport camera mapping pixels to rays
    preview: PPM/PNG export and Matplotlib preview

Modules under core, geometry, scene and camera declare Taichi fields or
functions at import time; call ti.init(arch=ti.cpu, default_fp=ti.f64)
before importing them.
"""

__version__ = "0.1.0"
