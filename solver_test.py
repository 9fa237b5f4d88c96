import random
import unittest
from unittest import mock

from cube import Cube
from notation import Move
from scramble import generate
from solver import (
    PHASE_CORNERS,
    PHASE_CROSS,
    PHASE_EDGES,
    PHASE_OLL,
    PHASE_PLL,
    SolveStatus,
    Solver,
    SolverConfig,
    classify_top_edges,
    reference_solution,
    right_of,
    left_of,
    u_turns,
)

PHASE_ORDER = [PHASE_CROSS, PHASE_CORNERS, PHASE_EDGES, PHASE_OLL, PHASE_PLL]

CURATED = [
    "R U R' U' R' F R2 U' R' U' R U R' F'",
    "R U R' U'",
    "F R U R' U' F'",
    "R' F R' B2 R F' R' B2 R2",
    "R2 U R U R' U' R' U' R' U R'",
    "D2 F' L U2 B R' D L2 F U' B2",
    "L2 D' R F2 U B' L' D2 R2 F",
]


class TestSolverHelpers(unittest.TestCase):

    def test_neighbours(self):
        self.assertEqual(right_of("F"), "R")
        self.assertEqual(right_of("R"), "B")
        self.assertEqual(left_of("F"), "L")
        self.assertEqual(left_of("B"), "R")

    def test_u_turns(self):
        # one clockwise U turn carries the front sticker to the left
        self.assertEqual(u_turns((0, 0, 1), (-1, 0, 0)), 1)
        self.assertEqual(u_turns((0, 0, 1), (0, 0, -1)), 2)
        self.assertEqual(u_turns((0, 0, 1), (0, 0, 1)), 0)
        with self.assertRaises(ValueError):
            u_turns((0, 0, 1), (0, 1, 0))

    def test_classify_top_edges(self):
        self.assertEqual(classify_top_edges(set()), "dot")
        self.assertEqual(classify_top_edges({"F", "B"}), "line")
        self.assertEqual(classify_top_edges({"B", "L"}), "L")
        self.assertEqual(classify_top_edges({"F", "R", "B", "L"}), "cross")
        self.assertEqual(classify_top_edges({"F"}), "dot")


class TestSolver(unittest.TestCase):

    def assert_solves(self, cube):
        before = cube.facelets()
        result = Solver().solve(cube)
        self.assertEqual(cube.facelets(), before, "solve must not modify its input")
        self.assertEqual(result.status, SolveStatus.SOLVED, result.remaining)
        self.assertEqual(result.remaining, [])
        replay = cube.clone()
        replay.apply_algorithm(result.moves)
        self.assertTrue(replay.is_solved())
        return result

    def test_solved_cube_needs_no_steps(self):
        result = Solver().solve(Cube())
        self.assertEqual(result.steps, [])
        self.assertEqual(result.status, SolveStatus.SOLVED)

    def test_single_u_turn(self):
        result = self.assert_solves(Cube("U"))
        self.assertEqual(result.moves, [Move("U", clockwise=False)])
        self.assertEqual(result.steps[0].phase, PHASE_PLL)

    def test_curated_scrambles(self):
        for scramble in CURATED:
            with self.subTest(scramble=scramble):
                self.assert_solves(Cube(scramble))

    def test_random_scrambles(self):
        rng = random.Random(2026)
        for _ in range(25):
            moves = generate(25, rng)
            with self.subTest(scramble=" ".join(str(m) for m in moves)):
                self.assert_solves(Cube(moves))

    def test_phases_in_order(self):
        result = self.assert_solves(Cube("D2 F' L U2 B R' D L2 F U' B2"))
        ranks = [PHASE_ORDER.index(step.phase) for step in result.steps]
        self.assertEqual(ranks, sorted(ranks))

    def test_steps_are_non_empty_and_highlighted(self):
        result = self.assert_solves(Cube("L2 D' R F2 U B' L' D2 R2 F"))
        for step in result.steps:
            self.assertTrue(step.moves)
            self.assertTrue(step.highlights)
        self.assertEqual(result.algorithm, " ".join(step.notation for step in result.steps))

    def test_iteration_cap_reports_stuck(self):
        cfg = SolverConfig(cross_attempts=0)
        result = Solver(cfg).solve(Cube("F2 R2 B2 L2"))
        self.assertEqual(result.status, SolveStatus.STUCK)
        self.assertTrue(result.remaining)

    def test_unsolved_without_stall_reports_partial(self):
        """A skipped phase leaves pieces unsolved without any cap being hit."""
        with mock.patch.object(Solver, "permute_last_layer"):
            result = Solver().solve(Cube("U"))
        self.assertEqual(result.status, SolveStatus.PARTIAL)
        self.assertEqual(result.steps, [])
        self.assertEqual(len(result.remaining), 8)

    def test_rejects_non_cube(self):
        with self.assertRaises(TypeError):
            Solver().solve("R U")


class TestReferenceSolution(unittest.TestCase):

    def test_reference_solution(self):
        self.assertEqual(reference_solution(Cube()), [])
        cube = Cube("R U R' U' R' F R2 U' R' U' R U R' F'")
        cube.apply_algorithm(reference_solution(cube))
        self.assertTrue(cube.is_solved())


if __name__ == "__main__":
    unittest.main()
