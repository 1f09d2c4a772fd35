"""Packed RGB raster container with PNG export.

A Raster holds width * height packed 0xRRGGBB integers in row-major order
with a top-left origin, exactly the buffer layout produced by
Scene.render(). Pixel access is bounds-checked.

Example:
    >>> from pointtracer.image.raster import Raster
    >>> raster = Raster.from_scene(scene, 800, 600)
    >>> raster.save("render.png")
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from pointtracer.image.filters import Filter
    from pointtracer.scene.manager import Scene


def pack_rgb(color: tuple[float, float, float]) -> int:
    """Convert a color in [0, 1] to a packed 0xRRGGBB integer.

    Each channel is scaled by 255 and truncated, matching the render kernel.
    """
    r = int(color[0] * 255.0)
    g = int(color[1] * 255.0)
    b = int(color[2] * 255.0)
    return (r << 16) | (g << 8) | b


def unpack_rgb(value: int) -> tuple[float, float, float]:
    """Convert a packed 0xRRGGBB integer to a color in [0, 1]."""
    return (
        ((value & 0xFF0000) >> 16) / 255.0,
        ((value & 0x00FF00) >> 8) / 255.0,
        (value & 0x0000FF) / 255.0,
    )


def pack_rgb_array(colors: npt.NDArray[np.floating]) -> npt.NDArray[np.int32]:
    """Pack an (..., 3) float array in [0, 1] into 0xRRGGBB integers."""
    channels = np.clip(colors, 0.0, 1.0) * 255.0
    channels = channels.astype(np.int32)
    return (channels[..., 0] << 16) | (channels[..., 1] << 8) | channels[..., 2]


def unpack_rgb_array(pixels: npt.NDArray[np.integer]) -> npt.NDArray[np.float32]:
    """Unpack 0xRRGGBB integers into an (..., 3) float32 array in [0, 1]."""
    pixels = pixels.astype(np.int64)
    channels = np.stack(
        [(pixels >> 16) & 0xFF, (pixels >> 8) & 0xFF, pixels & 0xFF],
        axis=-1,
    )
    return (channels / 255.0).astype(np.float32)


class Raster:
    """A width x height image of packed RGB integers.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: Flat int32 array of length width * height.
    """

    def __init__(
        self,
        width: int,
        height: int,
        pixels: npt.ArrayLike | None = None,
    ) -> None:
        """Create a raster, black unless pixels are given.

        Raises:
            ValueError: If the dimensions are not positive or the pixel
                buffer has the wrong length.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Raster dimensions must be positive, got {width}x{height}")

        if pixels is None:
            data = np.zeros(width * height, dtype=np.int32)
        else:
            data = np.asarray(pixels, dtype=np.int32).reshape(-1).copy()
            if data.size != width * height:
                raise ValueError(
                    f"Pixel buffer has {data.size} entries, expected {width * height}"
                )

        self.width = width
        self.height = height
        self.pixels = data

    @classmethod
    def from_scene(cls, scene: Scene, width: int, height: int) -> Raster:
        """Render a scene into a new raster."""
        return cls(width, height, scene.render(width, height))

    @classmethod
    def create(cls, width: int, height: int, shader: Callable[[int, int], int]) -> Raster:
        """Build a raster by calling shader(x, y) for every pixel."""
        pixels = [shader(i % width, i // width) for i in range(width * height)]
        return cls(width, height, pixels)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} raster"
            )
        return x + y * self.width

    def __getitem__(self, xy: tuple[int, int]) -> int:
        return int(self.pixels[self._index(*xy)])

    def __setitem__(self, xy: tuple[int, int], color: int) -> None:
        self.pixels[self._index(*xy)] = color

    def transform(self, function: Callable[[int], int]) -> None:
        """Replace every pixel in place with function(pixel)."""
        self.pixels = np.array([function(int(p)) for p in self.pixels], dtype=np.int32)

    def to_rgb_array(self) -> npt.NDArray[np.float32]:
        """Return the image as a (height, width, 3) float32 array in [0, 1]."""
        return unpack_rgb_array(self.pixels.reshape(self.height, self.width))

    def to_uint8(self) -> npt.NDArray[np.uint8]:
        """Return the image as a (height, width, 3) uint8 array."""
        grid = self.pixels.reshape(self.height, self.width).astype(np.int64)
        channels = np.stack([(grid >> 16) & 0xFF, (grid >> 8) & 0xFF, grid & 0xFF], axis=-1)
        return channels.astype(np.uint8)

    def apply(self, filter: Filter, times: int = 1) -> Raster:
        """Apply a convolution filter one or more times.

        Returns:
            A new raster; each pass shrinks it by the kernel dimension - 1.
        """
        image = self
        for _ in range(times):
            image = filter.apply(image)
        return image

    def save(self, filepath: str | Path) -> Path:
        """Save the raster as an 8-bit RGB PNG file.

        Args:
            filepath: Output path; a missing parent directory is created.

        Returns:
            The path written.
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        pil_image = PILImage.fromarray(self.to_uint8())
        pil_image.save(path, format="PNG")
        return path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self) -> str:
        return f"Raster(width={self.width}, height={self.height})"
