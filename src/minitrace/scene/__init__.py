"""Scene module holding the optional single sphere."""

from .scene import (
    DEFAULT_SPHERE_CENTER,
    DEFAULT_SPHERE_RADIUS,
    SceneConfig,
    SphereInfo,
    clear_scene,
    default_scene,
    empty_scene,
    get_scene_info,
    get_scene_sphere,
    scene_has_sphere,
    setup_scene,
)

__all__ = [
    "SceneConfig",
    "SphereInfo",
    "DEFAULT_SPHERE_CENTER",
    "DEFAULT_SPHERE_RADIUS",
    "default_scene",
    "empty_scene",
    "setup_scene",
    "clear_scene",
    "get_scene_info",
    "scene_has_sphere",
    "get_scene_sphere",
]
