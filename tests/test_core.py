import logging
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from ppmkit.codec import load, save
from ppmkit.core import (
    PpmKitError,
    grid_to_pil,
    load_image,
    make_test_image,
    process_single_image,
    run_demo,
)
from ppmkit.grid import Grid
from ppmkit.ops import EditOptions, op_grayscale

DEMO_FILES = [
    "test_image.ppm",
    "gray_image.ppm",
    "flipped_horizontal.ppm",
    "flipped_vertical.ppm",
    "bright_image.ppm",
    "contrast_image.ppm",
    "blurred_image.ppm",
    "rotated90_image.ppm",
]


class TestDemo(unittest.TestCase):
    def test_writes_every_output(self):
        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            steps = run_demo(out)
            self.assertEqual([s.path.name for s in steps], DEMO_FILES)
            for name in DEMO_FILES:
                self.assertTrue((out / name).is_file(), name)
            self.assertEqual(load(out / "test_image.ppm"), make_test_image())

    def test_gray_file_is_written_as_triples(self):
        with tempfile.TemporaryDirectory() as td:
            run_demo(Path(td))
            lines = (Path(td) / "gray_image.ppm").read_text(encoding="utf-8").splitlines()
            self.assertEqual(lines[0], "P3")
            self.assertEqual(lines[1], "4 4 255")
            self.assertEqual(lines[2], "76 76 76 149 149 149 29 29 29 255 255 255 ")

    def test_rotated_file_swaps_dimensions(self):
        with tempfile.TemporaryDirectory() as td:
            steps = run_demo(Path(td))
            rotated = dict((s.name, s.grid) for s in steps)["rotate90"]
            self.assertEqual((rotated.width, rotated.height), (4, 4))
            self.assertEqual(load(Path(td) / "rotated90_image.ppm"), rotated)

    def test_png_previews(self):
        with tempfile.TemporaryDirectory() as td:
            run_demo(Path(td), png=True)
            with Image.open(Path(td) / "gray_image.png") as img:
                self.assertEqual(img.mode, "L")
                self.assertEqual(img.size, (4, 4))
                self.assertEqual(img.getpixel((1, 0)), 149)

    def test_logs_written_files(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertLogs("ppmkit.core", level=logging.INFO) as cm:
                run_demo(Path(td))
            self.assertTrue(any("gray_image.ppm" in m for m in cm.output))


class TestPil(unittest.TestCase):
    def test_rgb(self):
        img = grid_to_pil(make_test_image())
        self.assertEqual(img.mode, "RGB")
        self.assertEqual(img.getpixel((2, 0)), (0, 0, 255))
        self.assertEqual(img.getpixel((3, 3)), (0, 0, 0))

    def test_rescales_max_value(self):
        g = Grid(1, 1, 1)
        g.max_value = 15
        g.set(0, 0, 0, 15)
        self.assertEqual(grid_to_pil(g).getpixel((0, 0)), 255)

    def test_empty_grid_is_rejected(self):
        with self.assertRaises(PpmKitError):
            grid_to_pil(Grid(0, 2))


class TestProcessSingle(unittest.TestCase):
    def test_convert_with_edits(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "in.ppm"
            save(make_test_image(), src)
            res = process_single_image(src, None, EditOptions(grayscale=True), suffix="gray")
            self.assertEqual(res.output_path, Path(td) / "in_gray.ppm")
            self.assertEqual((res.width, res.height, res.channels), (4, 4, 1))
            self.assertIsNone(res.png_path)
            back = load(res.output_path)
            self.assertEqual(back.pixel(0, 0), (76, 76, 76))

    def test_out_dir_and_png(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "in.ppm"
            save(make_test_image(), src)
            res = process_single_image(src, Path(td) / "out", EditOptions(flip_h=True), png=True)
            self.assertEqual(res.output_path.parent, Path(td) / "out")
            self.assertTrue(res.png_path.is_file())

    def test_missing_file(self):
        with self.assertRaisesRegex(PpmKitError, "File not found"):
            process_single_image(Path("does/not/exist.ppm"), None, EditOptions())

    def test_bad_input_is_user_error(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "bad.ppm"
            src.write_text("P6 1 1 255 0 0 0", encoding="utf-8")
            with self.assertRaisesRegex(PpmKitError, "bad.ppm"):
                load_image(src)

    def test_binary_input_is_user_error(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "bin.ppm"
            src.write_bytes(b"P6\n1 1\n255\n\xff\xfe\x80")
            with self.assertRaises(PpmKitError):
                load_image(src)

    def test_refuses_to_overwrite_input(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "pic.ppm"
            save(make_test_image(), src)
            with self.assertRaises(PpmKitError):
                process_single_image(Path(td) / "pic.ppm", None, EditOptions(), suffix="")

    def test_grayscale_of_loaded_file(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "in.ppm"
            save(make_test_image(), src)
            self.assertEqual(op_grayscale(load_image(src)), op_grayscale(make_test_image()))


if __name__ == "__main__":
    unittest.main()
