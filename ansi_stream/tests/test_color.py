import unittest

from ansi_stream.color import (
    PALETTE_16,
    Color16Code,
    color16_name,
    color_to_hex,
    color_to_rgb,
)
from ansi_stream.tokens import Color16, Color256, ColorRGB


class ColorTests(unittest.TestCase):
    def test_16_color_names(self):
        self.assertEqual(color16_name(Color16(Color16Code.BLACK)), "black")
        self.assertEqual(color16_name(Color16(Color16Code.RED)), "red")
        self.assertEqual(color16_name(Color16(Color16Code.BRIGHT_WHITE)), "bright-white")

    def test_16_colors(self):
        self.assertEqual(color_to_rgb(Color16(1)), (170, 0, 0))
        self.assertEqual(color_to_hex(Color16(3)), "#aa5500")
        self.assertEqual(color_to_hex(Color16(8)), "#555555")

    def test_256_uses_palette_for_low_codes(self):
        self.assertEqual(color_to_rgb(Color256(9)), PALETTE_16[9])

    def test_256_cube(self):
        self.assertEqual(color_to_rgb(Color256(16)), (0, 0, 0))
        self.assertEqual(color_to_hex(Color256(21)), "#0000ff")
        self.assertEqual(color_to_hex(Color256(196)), "#ff0000")
        self.assertEqual(color_to_rgb(Color256(231)), (255, 255, 255))
        self.assertEqual(color_to_rgb(Color256(17)), (0, 0, 95))

    def test_256_grayscale(self):
        self.assertEqual(color_to_hex(Color256(232)), "#080808")
        self.assertEqual(color_to_hex(Color256(255)), "#eeeeee")

    def test_rgb(self):
        self.assertEqual(color_to_rgb(ColorRGB((1, 2, 3))), (1, 2, 3))
        self.assertEqual(color_to_hex(ColorRGB((255, 128, 0))), "#ff8000")

    def test_custom_palette_only_affects_16_colors(self):
        palette = list(PALETTE_16)
        palette[1] = (1, 2, 3)
        self.assertEqual(color_to_hex(Color16(1), palette), "#010203")
        self.assertEqual(color_to_hex(Color256(1), palette), "#aa0000")


if __name__ == "__main__":
    unittest.main()
