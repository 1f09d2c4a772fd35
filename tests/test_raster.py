"""Tests for the packed RGB raster.

Tests cover:
- Host-side packing and unpacking of colors
- Raster construction and validation
- Bounds-checked pixel access
- Conversion to arrays and PNG output
"""

import numpy as np
import pytest
from PIL import Image as PILImage


class TestPacking:
    """Tests for pack_rgb / unpack_rgb and their array versions."""

    def test_pack_truncates(self):
        from pointtracer.image.raster import pack_rgb

        assert pack_rgb((0.25, 0.25, 1.0)) == 0x3F3FFF
        assert pack_rgb((0.999, 0.0, 0.0)) == 0xFE0000

    def test_unpack(self):
        from pointtracer.image.raster import unpack_rgb

        assert unpack_rgb(0xFF8000) == pytest.approx((1.0, 128 / 255, 0.0))

    def test_array_packing_clamps(self):
        from pointtracer.image.raster import pack_rgb_array

        colors = np.array([[1.5, -0.2, 0.5], [0.25, 0.25, 1.0]])
        packed = pack_rgb_array(colors)

        assert packed.tolist() == [0xFF007F, 0x3F3FFF]

    def test_array_unpacking_shape(self):
        from pointtracer.image.raster import unpack_rgb_array

        rgb = unpack_rgb_array(np.array([[0xFF0000, 0x00FF00], [0x0000FF, 0x000000]]))

        assert rgb.shape == (2, 2, 3)
        assert rgb.dtype == np.float32
        assert rgb[0, 1].tolist() == [0.0, 1.0, 0.0]
        assert rgb[1, 0].tolist() == [0.0, 0.0, 1.0]


class TestRasterConstruction:
    """Tests for creating rasters."""

    def test_blank_raster_is_black(self):
        from pointtracer.image.raster import Raster

        raster = Raster(3, 2)
        assert raster.pixels.tolist() == [0] * 6

    def test_wrong_buffer_length_raises(self):
        from pointtracer.image.raster import Raster

        with pytest.raises(ValueError, match="expected 6"):
            Raster(3, 2, [0] * 5)

    @pytest.mark.parametrize("width, height", [(0, 2), (2, 0), (-3, 2)])
    def test_invalid_dimensions_raise(self, width, height):
        from pointtracer.image.raster import Raster

        with pytest.raises(ValueError):
            Raster(width, height)

    def test_buffer_is_copied(self):
        from pointtracer.image.raster import Raster

        source = np.zeros(4, dtype=np.int32)
        raster = Raster(2, 2, source)
        source[0] = 0xFFFFFF

        assert raster[0, 0] == 0

    def test_create_from_shader(self):
        from pointtracer.image.raster import Raster

        raster = Raster.create(4, 3, lambda x, y: x * 16 + y)

        assert raster[3, 0] == 48
        assert raster[0, 2] == 2
        assert raster.pixels[1 + 2 * 4] == 16 * 1 + 2


class TestPixelAccess:
    """Tests for indexing and in-place updates."""

    def test_row_major_layout(self):
        from pointtracer.image.raster import Raster

        raster = Raster(3, 2, [0, 1, 2, 3, 4, 5])

        assert raster[2, 0] == 2
        assert raster[0, 1] == 3

    def test_set_pixel(self):
        from pointtracer.image.raster import Raster

        raster = Raster(3, 2)
        raster[1, 1] = 0x123456
        assert raster.pixels[4] == 0x123456

    @pytest.mark.parametrize("xy", [(3, 0), (0, 2), (-1, 0), (0, -1)])
    def test_out_of_bounds_raises(self, xy):
        from pointtracer.image.raster import Raster

        raster = Raster(3, 2)
        with pytest.raises(IndexError):
            raster[xy]
        with pytest.raises(IndexError):
            raster[xy] = 0

    def test_transform(self):
        from pointtracer.image.raster import Raster

        raster = Raster(2, 1, [0x010203, 0xFFFFFF])
        raster.transform(lambda p: p & 0x00FF00)

        assert raster.pixels.tolist() == [0x000200, 0x00FF00]

    def test_equality(self):
        from pointtracer.image.raster import Raster

        assert Raster(2, 1, [1, 2]) == Raster(2, 1, [1, 2])
        assert Raster(2, 1, [1, 2]) != Raster(1, 2, [1, 2])
        assert Raster(2, 1, [1, 2]) != Raster(2, 1, [1, 3])


class TestRasterOutput:
    """Tests for array conversion and PNG saving."""

    def test_to_uint8(self):
        from pointtracer.image.raster import Raster

        image = Raster(2, 1, [0x3F3FFF, 0x102030]).to_uint8()

        assert image.shape == (1, 2, 3)
        assert image.dtype == np.uint8
        assert image[0, 0].tolist() == [63, 63, 255]
        assert image[0, 1].tolist() == [16, 32, 48]

    def test_to_rgb_array(self):
        from pointtracer.image.raster import Raster

        rgb = Raster(1, 1, [0xFF0000]).to_rgb_array()
        assert rgb.tolist() == [[[1.0, 0.0, 0.0]]]

    def test_save_png(self, tmp_path):
        from pointtracer.image.raster import Raster

        raster = Raster(3, 2, [0xFF0000, 0x00FF00, 0x0000FF, 0, 0xFFFFFF, 0x3F3FFF])
        path = raster.save(tmp_path / "nested" / "out.png")

        assert path.exists()
        with PILImage.open(path) as img:
            assert img.size == (3, 2)
            assert img.mode == "RGB"
            assert img.getpixel((0, 0)) == (255, 0, 0)
            assert img.getpixel((2, 1)) == (63, 63, 255)
