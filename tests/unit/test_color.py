import pytest
from PIL import Image

from conftest import png_bytes
from core.color import adjust_brightness, color_from_bytes, dominant_color
from core.models import Color


class TestAdjustBrightness:
    def test_bright_color_is_unchanged(self):
        assert adjust_brightness(0.6, 0.6, 0.6) == Color(0.6, 0.6, 0.6, 1.0)

    def test_black_becomes_neutral_gray(self):
        assert adjust_brightness(0.0, 0.0, 0.0, 0.8) == Color(0.5, 0.5, 0.5, 0.8)

    def test_dark_color_is_lifted_to_floor(self):
        c = adjust_brightness(0.1, 0.2, 0.3)
        assert (c.red + c.green + c.blue) / 3 == pytest.approx(0.5)
        assert c.red / c.blue == pytest.approx(0.1 / 0.3)

    def test_channels_are_capped(self):
        c = adjust_brightness(0.9, 0.05, 0.05, 0.5)
        assert c.red == 1.0
        assert c.green == pytest.approx(0.05 * 0.5 / (1.0 / 3))
        assert c.alpha == 0.5


class TestDominantColor:
    def test_black_pixel(self):
        c = dominant_color(Image.new("RGB", (1, 1), (0, 0, 0)))
        assert (c.red, c.green, c.blue, c.alpha) == (0.5, 0.5, 0.5, 1.0)

    def test_mid_gray_pixel(self):
        c = dominant_color(Image.new("RGB", (1, 1), (153, 153, 153)))
        assert c.red == pytest.approx(0.6)
        assert c.green == pytest.approx(0.6)
        assert c.blue == pytest.approx(0.6)

    def test_area_average(self):
        img = Image.new("RGB", (2, 1), (255, 255, 255))
        img.putpixel((1, 0), (51, 51, 51))
        c = dominant_color(img)
        assert c.red == pytest.approx(153 / 255, abs=1 / 255)

    def test_alpha_is_preserved(self):
        c = dominant_color(Image.new("RGBA", (3, 3), (255, 255, 255, 128)))
        assert c.alpha == pytest.approx(128 / 255)

    def test_bytes_roundtrip(self):
        c = color_from_bytes(png_bytes((220, 220, 220)))
        assert c.hex() == "#dcdcdc"

    def test_undecodable_bytes(self):
        assert color_from_bytes(b"not an image") is None
