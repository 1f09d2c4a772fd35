"""Square convolution filters for packed RGB rasters.

A Filter holds a d x d kernel in row-major order. Applying it computes, for
every position where the kernel fits completely inside the image,

    out[x, y] = sum_{i, j} kernel[j * d + i] * image[x + i, y + j]

per color channel, then clamps each channel to [0, 1] and packs it again.
The output is cropped by d - 1 pixels along each axis; there is no edge
padding.

Example:
    >>> from pointtracer.image.filters import AVERAGE, SHARPEN
    >>> blurred = raster.apply(AVERAGE)
    >>> crisp = raster.apply(SHARPEN, times=5)
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

from pointtracer.image.raster import Raster

# Guards truncation against values like 62.99999999 for an exact 63
_TRUNCATION_SLACK = 1e-6


class Filter:
    """A square convolution kernel.

    Attributes:
        kernel: Kernel weights in row-major order.
        dimension: Side length d of the kernel.
    """

    def __init__(self, *kernel: float) -> None:
        """Create a filter from d * d weights.

        Raises:
            ValueError: If the number of weights is not a positive square.
        """
        dimension = math.isqrt(len(kernel))
        if len(kernel) == 0 or dimension * dimension != len(kernel):
            raise ValueError(f"Kernel size must be a positive square, got {len(kernel)}")
        self.kernel = tuple(float(k) for k in kernel)
        self.dimension = dimension

    def normalize(self) -> Filter:
        """Return a filter whose weights sum to one.

        Raises:
            ValueError: If the weights sum to zero.
        """
        total = sum(self.kernel)
        if total == 0.0:
            raise ValueError("Cannot normalize a kernel whose weights sum to zero")
        return Filter(*(k / total for k in self.kernel))

    def as_matrix(self) -> npt.NDArray[np.float64]:
        """The kernel as a (d, d) array indexed [row, column]."""
        return np.array(self.kernel, dtype=np.float64).reshape(self.dimension, self.dimension)

    def apply(self, image: Raster) -> Raster:
        """Convolve a raster with this kernel.

        Args:
            image: The source raster; must be at least d x d.

        Returns:
            A (width - d + 1) x (height - d + 1) raster.

        Raises:
            ValueError: If the raster is smaller than the kernel.
        """
        d = self.dimension
        out_width = image.width - d + 1
        out_height = image.height - d + 1
        if out_width <= 0 or out_height <= 0:
            raise ValueError(
                f"Raster {image.width}x{image.height} is smaller than the {d}x{d} kernel"
            )

        grid = image.pixels.reshape(image.height, image.width).astype(np.int64)
        channels = np.stack(
            [(grid >> 16) & 0xFF, (grid >> 8) & 0xFF, grid & 0xFF], axis=-1
        ).astype(np.float64)

        weights = self.as_matrix()
        result = np.zeros((out_height, out_width, 3), dtype=np.float64)
        for j in range(d):
            for i in range(d):
                weight = weights[j, i]
                if weight != 0.0:
                    result += weight * channels[j : j + out_height, i : i + out_width]

        quantized = np.floor(np.clip(result, 0.0, 255.0) + _TRUNCATION_SLACK)
        quantized = np.minimum(quantized, 255.0).astype(np.int32)
        packed = (quantized[..., 0] << 16) | (quantized[..., 1] << 8) | quantized[..., 2]
        return Raster(out_width, out_height, packed)

    def __repr__(self) -> str:
        return f"Filter(dimension={self.dimension}, kernel={self.kernel})"


# Box blur
AVERAGE = Filter(
    1.0, 1.0, 1.0,
    1.0, 1.0, 1.0,
    1.0, 1.0, 1.0,
).normalize()

# Diagonal edge detection
EDGE_DETECTION = Filter(
    1.0, 0.0, -1.0,
    0.0, 0.0, 0.0,
    -1.0, 0.0, 1.0,
)

SHARPEN = Filter(
    0.0, -1.0, 0.0,
    -1.0, 5.0, -1.0,
    0.0, -1.0, 0.0,
)

IDENTITY = Filter(
    0.0, 0.0, 0.0,
    0.0, 1.0, 0.0,
    0.0, 0.0, 0.0,
)
