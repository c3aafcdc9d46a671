"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Double precision
    is the default float type so literals in kernels are f64.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene and camera state before and after each test."""
    # Import here so Taichi is initialized before fields are allocated
    from src.smallpt.camera.pinhole import reset_camera
    from src.smallpt.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        reset_camera()

    _clear_all()

    yield

    _clear_all()
