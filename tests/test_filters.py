"""Tests for convolution filters.

Tests cover:
- Kernel validation and normalization
- Output cropping
- Preset filters on uniform images
- Kernel orientation against image coordinates
"""

import numpy as np
import pytest


def _uniform(width, height, color):
    from pointtracer.image.raster import Raster

    return Raster(width, height, [color] * (width * height))


class TestFilterConstruction:
    """Tests for creating filters."""

    @pytest.mark.parametrize("size", [0, 2, 5, 8])
    def test_non_square_kernel_raises(self, size):
        from pointtracer.image.filters import Filter

        with pytest.raises(ValueError, match="square"):
            Filter(*([1.0] * size))

    def test_dimension(self):
        from pointtracer.image.filters import Filter

        assert Filter(*([0.0] * 25)).dimension == 5

    def test_normalize(self):
        from pointtracer.image.filters import Filter

        kernel = Filter(1.0, 1.0, 2.0, 4.0).normalize().kernel
        assert kernel == pytest.approx((0.125, 0.125, 0.25, 0.5))

    def test_normalize_zero_sum_raises(self):
        from pointtracer.image.filters import EDGE_DETECTION

        with pytest.raises(ValueError):
            EDGE_DETECTION.normalize()

    def test_as_matrix(self):
        from pointtracer.image.filters import SHARPEN

        matrix = SHARPEN.as_matrix()
        assert matrix.shape == (3, 3)
        assert matrix[1, 1] == 5.0
        assert matrix[0, 1] == -1.0


class TestFilterApply:
    """Tests for Filter.apply and Raster.apply."""

    def test_output_is_cropped(self):
        from pointtracer.image.filters import AVERAGE

        result = _uniform(10, 7, 0).apply(AVERAGE)
        assert (result.width, result.height) == (8, 5)

    def test_repeated_passes_crop_each_time(self):
        from pointtracer.image.filters import SHARPEN

        result = _uniform(20, 15, 0x808080).apply(SHARPEN, times=5)
        assert (result.width, result.height) == (10, 5)

    def test_too_small_raster_raises(self):
        from pointtracer.image.filters import AVERAGE

        with pytest.raises(ValueError, match="smaller than"):
            _uniform(2, 5, 0).apply(AVERAGE)

    def test_identity_keeps_interior(self):
        from pointtracer.image.filters import IDENTITY
        from pointtracer.image.raster import Raster

        raster = Raster.create(5, 4, lambda x, y: (x * 40) << 16 | (y * 50))
        result = raster.apply(IDENTITY)

        for y in range(result.height):
            for x in range(result.width):
                assert result[x, y] == raster[x + 1, y + 1]

    @pytest.mark.parametrize("color", [0x3F3FFF, 0xFFFFFF, 0x102030])
    def test_average_preserves_uniform_color(self, color):
        from pointtracer.image.filters import AVERAGE

        result = _uniform(6, 6, color).apply(AVERAGE)
        assert np.all(result.pixels == color)

    def test_sharpen_preserves_uniform_color(self):
        from pointtracer.image.filters import SHARPEN

        result = _uniform(6, 6, 0x3F3FFF).apply(SHARPEN)
        assert np.all(result.pixels == 0x3F3FFF)

    def test_edge_detection_of_uniform_is_black(self):
        from pointtracer.image.filters import EDGE_DETECTION

        result = _uniform(6, 6, 0x3F3FFF).apply(EDGE_DETECTION)
        assert np.all(result.pixels == 0)

    def test_kernel_orientation(self):
        """Test that kernel[j * d + i] weights pixel (x + i, y + j)."""
        from pointtracer.image.filters import EDGE_DETECTION
        from pointtracer.image.raster import Raster

        top_left = Raster(3, 3)
        top_left[0, 0] = 0xFFFFFF
        assert top_left.apply(EDGE_DETECTION)[0, 0] == 0xFFFFFF

        top_right = Raster(3, 3)
        top_right[2, 0] = 0xFFFFFF
        assert top_right.apply(EDGE_DETECTION)[0, 0] == 0

    def test_channels_are_filtered_independently(self):
        from pointtracer.image.filters import Filter
        from pointtracer.image.raster import Raster

        half = Filter(0.5)
        result = Raster(1, 1, [0x80FF02]).apply(half)
        assert result[0, 0] == 0x407F01

    def test_negative_results_clamp_to_zero(self):
        from pointtracer.image.filters import Filter

        result = _uniform(1, 1, 0xFFFFFF).apply(Filter(-1.0))
        assert result[0, 0] == 0
