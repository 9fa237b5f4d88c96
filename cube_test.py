import unittest

import kociemba as koc

from cube import AXES, CORNER, EDGE, Cube, axis_from_face, face_from_axis, rotate
from notation import FACES, Move, invert_algorithm, parse_algorithm, parse_move

SOLVED = "".join(face * 9 for face in FACES)


class TestRotation(unittest.TestCase):

    def test_face_axis_bijection(self):
        for face in FACES:
            self.assertEqual(face_from_axis(axis_from_face(face)), face)
        with self.assertRaises(ValueError):
            face_from_axis((1, 1, 0))
        with self.assertRaises(ValueError):
            axis_from_face("X")

    def test_clockwise_directions(self):
        """Quarter turns follow standard notation, seen from outside the face."""
        self.assertEqual(rotate(AXES["F"], AXES["U"]), AXES["L"])
        self.assertEqual(rotate(AXES["F"], AXES["R"]), AXES["U"])
        self.assertEqual(rotate(AXES["U"], AXES["F"]), AXES["R"])
        self.assertEqual(rotate(AXES["F"], AXES["D"]), AXES["R"])
        self.assertEqual(rotate(AXES["U"], AXES["L"]), AXES["F"])
        self.assertEqual(rotate(AXES["U"], AXES["B"]), AXES["L"])

    def test_counterclockwise_undoes_clockwise(self):
        vector = (1, 1, -1)
        for axis in AXES.values():
            self.assertEqual(rotate(rotate(vector, axis), axis, clockwise=False), vector)


class TestCubeMoves(unittest.TestCase):

    def test_new_cube_is_solved(self):
        cube = Cube()
        self.assertTrue(cube.is_solved())
        self.assertEqual(cube.facelets(), SOLVED)
        self.assertEqual(len(cube.centers()), 6)
        self.assertEqual(len(cube.edges()), 12)
        self.assertEqual(len(cube.corners()), 8)

    def test_single_turn_facelets(self):
        cube = Cube("U")
        self.assertFalse(cube.is_solved())
        self.assertEqual(cube.facelets()[9:12], "BBB")
        self.assertEqual(cube.facelets()[18:21], "RRR")
        cube = Cube("R")
        self.assertEqual(cube.facelets()[0:9], "UUFUUFUUF")

    def test_quarter_turn_four_times(self):
        for face in FACES:
            cube = Cube()
            for _ in range(4):
                cube.rotate_face(face)
            self.assertTrue(cube.is_solved(), face)

    def test_move_then_inverse(self):
        """Every canonical move followed by its inverse restores the exact state."""
        start = "F2 B' L D2 R' U F L2 B D' R U2"
        for face in FACES:
            for suffix in ("", "'", "2"):
                token = face + suffix
                move = parse_move(token)
                cube = Cube(start)
                before = cube.clone()
                cube.apply_move(move)
                self.assertNotEqual(cube, before, token)
                cube.apply_move(move.inverse())
                self.assertEqual(cube, before, token)

    def test_sexy_move_six_times(self):
        cube = Cube()
        for _ in range(6):
            cube.apply_algorithm("R U R' U'")
        self.assertTrue(cube.is_solved())
        cube.apply_algorithm("R U R' U'")
        self.assertFalse(cube.is_solved())

    def test_algorithm_then_inverse(self):
        moves = list(parse_algorithm("R U R' F' R U R' U' R' F R2 U' R' U'"))
        cube = Cube(moves)
        cube.apply_algorithm(invert_algorithm(moves))
        self.assertTrue(cube.is_solved())

    def test_invalid_face(self):
        with self.assertRaises(ValueError):
            Cube().rotate_face("Q")
        with self.assertRaises(ValueError):
            Cube("R Z")


class TestCubeQueries(unittest.TestCase):

    def test_find_piece(self):
        cube = Cube()
        self.assertEqual(cube.find_piece("URF").position, (1, 1, 1))
        self.assertEqual(cube.find_piece("fru").id, "URF")
        self.assertEqual(cube.find_piece("DF").category, EDGE)
        with self.assertRaises(KeyError):
            cube.find_piece("UD")
        with self.assertRaises(KeyError):
            cube.find_piece("XYZ")

    def test_piece_tracks_turns(self):
        cube = Cube("R")
        urf = cube.find_piece("URF")
        self.assertEqual(urf.position, (1, 1, -1))
        self.assertIs(cube.piece_at((1, 1, -1)), urf)
        self.assertEqual(urf.color_facing(AXES["B"]), "U")
        self.assertFalse(urf.is_solved())

    def test_pieces_category(self):
        cube = Cube()
        self.assertTrue(all(c.category == CORNER for c in cube.pieces(CORNER)))
        with self.assertRaises(ValueError):
            cube.pieces("middle")

    def test_clone_is_independent(self):
        cube = Cube("R U")
        other = cube.clone()
        self.assertEqual(cube, other)
        other.apply_algorithm("F")
        self.assertNotEqual(cube, other)
        self.assertEqual(cube.facelets(), Cube("R U").facelets())

        # and the other way round
        other = cube.clone()
        cube.apply_algorithm("D'")
        self.assertEqual(other, Cube("R U"))
        self.assertNotEqual(cube, other)

    def test_cube_is_not_hashable(self):
        """Cubes are mutable, so they cannot be set members or dict keys."""
        with self.assertRaises(TypeError):
            hash(Cube())

    def test_face_colors_any_case(self):
        cube = Cube("R")
        self.assertEqual(cube.face_colors("u"), cube.face_colors("U"))
        self.assertEqual(cube.face_colors("u")[0], ["U", "U", "F"])
        with self.assertRaises(ValueError):
            cube.face_colors("x")

    def test_listeners_and_recording(self):
        cube = Cube()
        seen = []
        cube.add_listener(seen.append)
        cube.set_recording(True)
        cube.apply_algorithm("R U2")
        self.assertEqual(seen, [Move("R"), Move("U", double=True)])
        self.assertEqual(cube.get_move_log(), seen)
        cube.remove_listener(seen.append)
        cube.apply_algorithm("F")
        self.assertEqual(len(seen), 2)
        self.assertEqual(cube.clone().get_move_log(), [])


class TestKociembaOracle(unittest.TestCase):

    def test_kociemba_solves_our_state(self):
        """kociemba's solution for our facelets must solve our cube."""
        for scramble in (
            "R U R' U'",
            "R U R' F' R U R' U' R' F R2 U' R' U'",
            "F2 B' L D2 R' U F L2 B D' R U2",
        ):
            cube = Cube(scramble)
            solution = koc.solve(cube.facelets())
            cube.apply_algorithm(solution)
            self.assertTrue(cube.is_solved(), scramble)


if __name__ == "__main__":
    unittest.main()
