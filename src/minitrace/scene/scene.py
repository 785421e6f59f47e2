"""Scene configuration: the optional single sphere.

The scene holds at most one sphere. Its parameters live in Taichi fields so
the shader can read them from inside the render kernel; host code configures
them through setup_scene() with a SceneConfig.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from minitrace.scene.scene import SceneConfig, SphereInfo, setup_scene
    >>> setup_scene(SceneConfig(sphere=SphereInfo(center=(0, 0, -1), radius=0.5)))
    >>> # Use scene_has_sphere() / get_scene_sphere() within a Taichi kernel
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import taichi as ti

from minitrace.geometry.sphere import Sphere

DEFAULT_SPHERE_CENTER = (0.0, 0.0, -1.0)
DEFAULT_SPHERE_RADIUS = 0.5

# Scene state (GPU-accessible)
_sphere_enabled = ti.field(dtype=ti.i32, shape=())
_sphere_center = ti.Vector.field(3, dtype=ti.f64, shape=())
_sphere_radius = ti.field(dtype=ti.f64, shape=())


@dataclass
class SphereInfo:
    """Host-side description of a sphere.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere. Must be positive and finite.
    """

    center: tuple[float, float, float] = DEFAULT_SPHERE_CENTER
    radius: float = DEFAULT_SPHERE_RADIUS

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Sphere center must have 3 components, got {self.center!r}")
        if not (math.isfinite(self.radius) and self.radius > 0.0):
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        self.center = (float(self.center[0]), float(self.center[1]), float(self.center[2]))
        self.radius = float(self.radius)


@dataclass
class SceneConfig:
    """Configuration of the scene to render.

    Attributes:
        sphere: The sphere in the scene, or None for an empty scene (only the
            background gradient is rendered).
    """

    sphere: SphereInfo | None = field(default_factory=SphereInfo)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the configuration to plain Python types."""
        if self.sphere is None:
            return {"sphere": None}
        return {"sphere": {"center": list(self.sphere.center), "radius": self.sphere.radius}}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        """Build a configuration from the output of to_dict()."""
        sphere = data.get("sphere")
        if sphere is None:
            return cls(sphere=None)
        return cls(sphere=SphereInfo(center=tuple(sphere["center"]), radius=sphere["radius"]))


def default_scene() -> SceneConfig:
    """The reference scene: one sphere of radius 0.5 centered at (0, 0, -1)."""
    return SceneConfig(sphere=SphereInfo())


def empty_scene() -> SceneConfig:
    """A scene with no objects."""
    return SceneConfig(sphere=None)


def setup_scene(config: SceneConfig) -> None:
    """Write the scene configuration to the Taichi fields read by the shader.

    Args:
        config: The scene to render.
    """
    if config.sphere is None:
        clear_scene()
        return

    _sphere_enabled[None] = 1
    _sphere_center[None] = list(config.sphere.center)
    _sphere_radius[None] = config.sphere.radius


def clear_scene() -> None:
    """Remove the sphere from the scene."""
    _sphere_enabled[None] = 0
    _sphere_center[None] = [0.0, 0.0, 0.0]
    _sphere_radius[None] = 0.0


def get_scene_info() -> SceneConfig:
    """Read the current scene back from the Taichi fields."""
    if _sphere_enabled[None] == 0:
        return SceneConfig(sphere=None)
    c = _sphere_center[None]
    return SceneConfig(
        sphere=SphereInfo(
            center=(float(c[0]), float(c[1]), float(c[2])),
            radius=float(_sphere_radius[None]),
        )
    )


@ti.func
def scene_has_sphere() -> ti.i32:
    """1 if the scene contains a sphere, 0 otherwise."""
    return _sphere_enabled[None]


@ti.func
def get_scene_sphere() -> Sphere:
    """The scene's sphere. Only meaningful when scene_has_sphere() is 1."""
    return Sphere(center=_sphere_center[None], radius=_sphere_radius[None])
