"""Camera module for primary ray generation.

Components:
    screen: Fixed pinhole camera looking down +z from the configured eye

The camera has no per-render parameters; its eye position is part of the
scene's TracerConfig. Import it directly, since it allocates Taichi fields:
    from pointtracer.camera.screen import get_camera_ray
"""
