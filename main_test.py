import io
import json
import os
import tempfile
import unittest
from unittest import mock

from rich.console import Console

import display
import main
from solver import SolverConfig


def quiet_display():
    return display.Display(Console(file=io.StringIO(), color_system=None))


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "cube_tutor.json")

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, data):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def test_missing_file_writes_defaults(self):
        cfg = main.load_config(self.path)
        self.assertEqual(cfg, SolverConfig())
        self.assertTrue(os.path.exists(self.path))
        self.assertEqual(main.load_config(self.path), SolverConfig())

    def test_known_keys_loaded_unknown_ignored(self):
        self.write({"cross_attempts": 10, "colour": "red"})
        cfg = main.load_config(self.path)
        self.assertEqual(cfg.cross_attempts, 10)
        self.assertEqual(cfg.pll_attempts, SolverConfig().pll_attempts)

    def test_config_must_be_an_object(self):
        self.write([1])
        with self.assertRaises(ValueError):
            main.load_config(self.path)

    def test_config_values_must_be_numbers(self):
        self.write({"cross_attempts": None})
        with self.assertRaises(ValueError):
            main.load_config(self.path)
        self.write({"cross_attempts": "many"})
        with self.assertRaises(ValueError):
            main.load_config(self.path)

    def test_bad_config_exits_with_status_2(self):
        self.write([1])
        with mock.patch.object(main, "Display", quiet_display):
            self.assertEqual(main.main(["--config", self.path, "show", "R"]), 2)


class TestCommands(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "cube_tutor.json")

    def tearDown(self):
        self.tmp.cleanup()

    def run_main(self, *argv):
        with mock.patch.object(main, "Display", quiet_display):
            return main.main(["--config", self.path] + list(argv))

    def test_bad_notation_exits_with_status_2(self):
        self.assertEqual(self.run_main("solve", "R Q"), 2)

    def test_solve(self):
        self.assertEqual(self.run_main("solve", "R U R' U'"), 0)

    def test_tutor_auto(self):
        with mock.patch("builtins.input") as prompt:
            self.assertEqual(self.run_main("tutor", "R U R' U'", "--auto"), 0)
        prompt.assert_not_called()

    def test_tutor_without_input_plays_to_the_end(self):
        """When stdin runs dry the tutor stops waiting and finishes the solve."""
        with mock.patch("builtins.input", side_effect=EOFError) as prompt:
            self.assertEqual(self.run_main("tutor", "R U R' U'"), 0)
        self.assertEqual(prompt.call_count, 1)


if __name__ == "__main__":
    unittest.main()
