"""Pytest configuration for minitrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Fields are declared at import time by the minitrace modules, so ti.init()
    must run exactly once and before any of them is imported.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)
    yield


@pytest.fixture(autouse=True)
def clear_render_state():
    """Clear scene and render target before and after each test."""
    # Import here so Taichi is initialized first
    from minitrace.core.integrator import reset_render_target
    from minitrace.scene.scene import clear_scene

    def _clear_all():
        clear_scene()
        reset_render_target()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def reference_camera():
    """The 400-wide 16:9 camera at the origin."""
    from minitrace.camera.viewport import ViewportCamera

    return ViewportCamera(image_width=400, aspect_ratio=16.0 / 9.0)
