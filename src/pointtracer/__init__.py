"""Point-sampled recursive ray tracer built on Taichi.

This package renders scenes of spheres and planes lit by point lights with
a fixed ambient + diffuse + mirror-reflection shading model:
- Nearest-hit ray casting with shadow rays per light
- Recursive specular reflection up to a bounded depth
- One parallel task per pixel, collected into a packed RGB buffer
- Raster container with convolution filters and PNG export

Subpackages:
    core: Rays and vector utilities, tracer configuration, shading, rendering
    geometry: Sphere and plane primitives and their intersection tests
    scene: Scene construction, object/light tables and scene queries
    camera: Fixed pinhole camera mapping pixels to rays
    image: Packed RGB raster and convolution filters
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
