import unittest

from ppmkit.formatting import format_grid, output_name, sanitize_stem
from ppmkit.grid import Grid


class TestFormatting(unittest.TestCase):
    def test_format_grid(self):
        g = Grid(2, 1)
        g.set(0, 0, 0, 255)
        g.set(0, 1, 2, 255)
        self.assertEqual(format_grid(g), "Image 2x1 (3 channels):\n(255,0,0) (0,0,255)")

    def test_format_empty(self):
        self.assertEqual(format_grid(Grid(0, 0)), "Image 0x0 (3 channels):")

    def test_sanitize_stem(self):
        self.assertEqual(sanitize_stem("my pic"), "my_pic")
        self.assertEqual(sanitize_stem(""), "_")
        self.assertEqual(sanitize_stem(".hidden"), "_.hidden")
        self.assertEqual(sanitize_stem("a/b"), "a_b")

    def test_output_name(self):
        self.assertEqual(output_name("photo", "gray"), "photo_gray.ppm")
        self.assertEqual(output_name("photo", ""), "photo.ppm")
        self.assertEqual(output_name("photo", "x", ext=".png"), "photo_x.png")


if __name__ == "__main__":
    unittest.main()
