"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset the object/light tables and tracer configuration around each test.

    This ensures tests are isolated from each other.
    """
    # Import here to avoid circular imports and ensure Taichi is initialized
    from pointtracer.core.config import TracerConfig, apply_config
    from pointtracer.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        apply_config(TracerConfig())

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def make_scene():
    """Factory for Scene instances with an optional TracerConfig."""
    from pointtracer.core.config import TracerConfig
    from pointtracer.scene.manager import Scene

    def _make(**config_overrides):
        return Scene(TracerConfig(**config_overrides))

    return _make
