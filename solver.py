"""
Module to solve a cube puzzle layer by layer.

The solver works on its own clone of the cube and runs four phases in order:
cross on the down face, first layer corners, second layer edges and the last
layer (orientation, then permutation). Each phase loops per target piece,
classifies where the piece is, applies one fixed trigger and looks again.
Every trigger is recorded as a SolverStep so a tutorial can replay it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Set, Union

import kociemba

from cube import AXES, CORNER, EDGE, Cube, Cubie, Vector, add, face_from_axis, rotate
from notation import FACE_NAMES, Move, encode_algorithm, invert_algorithm, parse_algorithm


logger = logging.getLogger("solver")

UP = AXES["U"]
DOWN = AXES["D"]

CROSS_ORDER = ["F", "R", "B", "L"]
SLOTS = [("F", "R"), ("R", "B"), ("B", "L"), ("L", "F")]

EDGE_FLIP = "F R U R' U' F'"
EDGE_FLIP_L = "F U R U' R' F'"
CORNER_TWIST = "R' D' R D R' D' R D"
CORNER_CYCLE = "R' F R' B2 R F' R' B2 R2"
EDGE_CYCLE = "R2 U R U R' U' R' U' R' U R'"

PHASE_CROSS = "Cross"
PHASE_CORNERS = "F2L"
PHASE_EDGES = "Second Layer"
PHASE_OLL = "OLL"
PHASE_PLL = "PLL"

U_TURNS = {
    0: [],
    1: [Move("U")],
    2: [Move("U", double=True)],
    3: [Move("U", clockwise=False)],
}


class SolveStatus(Enum):
    """
    Outcome of a solve.
    SOLVED: the working copy is solved.
    STUCK: some phase ran out of attempts (logged as a warning).
    PARTIAL: pieces are left unsolved although no phase ran out of attempts,
    e.g. when a subclass skips or replaces a phase. The built-in phases
    always report their failures, so they end in SOLVED or STUCK.
    """

    SOLVED = "solved"
    PARTIAL = "partial"
    STUCK = "stuck"


@dataclass
class SolverConfig:
    """Iteration caps for the solver loops."""

    cross_attempts: int = 24
    corner_attempts: int = 40
    edge_attempts: int = 40
    oll_attempts: int = 4
    twist_attempts: int = 3
    pll_attempts: int = 3


@dataclass
class SolverStep:
    """One recorded trigger: what it is for, its moves and the pieces involved."""

    phase: str
    description: str
    moves: List[Move]
    highlights: Set[str] = field(default_factory=set)

    @property
    def notation(self) -> str:
        """Moves of this step in notation."""
        return encode_algorithm(self.moves)


@dataclass
class SolverResult:
    """Ordered solver steps plus the outcome of the solve."""

    steps: List[SolverStep] = field(default_factory=list)
    status: SolveStatus = SolveStatus.SOLVED
    remaining: List[str] = field(default_factory=list)

    @property
    def moves(self) -> List[Move]:
        """All moves of all steps, in order."""
        return [move for step in self.steps for move in step.moves]

    @property
    def algorithm(self) -> str:
        """All moves in notation."""
        return encode_algorithm(self.moves)

    @property
    def solved(self) -> bool:
        """True if replaying the moves solves the cube."""
        return self.status is SolveStatus.SOLVED


def u_turns(current: Vector, target: Vector) -> int:
    """
    Count the clockwise U quarter turns that take ``current`` to ``target``.
    Works for positions and sticker normals alike.
    """
    for turns in range(4):
        if current == target:
            return turns
        current = rotate(current, UP)
    raise ValueError(f"{target} cannot be reached from {current} with U turns")


def u_moves(turns: int) -> List[Move]:
    """Shortest U move for a number of clockwise quarter turns."""
    return list(U_TURNS[turns % 4])


def right_of(face: str) -> str:
    """Side face to the right of ``face`` when looking at it with U on top."""
    return face_from_axis(rotate(AXES[face], UP, clockwise=False))


def left_of(face: str) -> str:
    """Side face to the left of ``face`` when looking at it with U on top."""
    return face_from_axis(rotate(AXES[face], UP, clockwise=True))


def side_faces(position: Vector) -> List[str]:
    """Side faces (not U or D) a position touches."""
    faces = []
    if position[0]:
        faces.append(face_from_axis((position[0], 0, 0)))
    if position[2]:
        faces.append(face_from_axis((0, 0, position[2])))
    return faces


def lifting_face(position: Vector, faces: Sequence[str]) -> str:
    """Pick the face whose clockwise quarter turn moves ``position`` into the top layer."""
    for face in faces:
        if rotate(position, AXES[face])[1] == 1:
            return face
    raise ValueError(f"None of {faces} lifts {position} to the top layer")


def right_insertion(front: str) -> str:
    """Insert the edge above ``front`` into the slot on its right."""
    right = right_of(front)
    return f"U {right} U' {right}' U' {front}' U {front}"


def left_insertion(front: str) -> str:
    """Insert the edge above ``front`` into the slot on its left."""
    left = left_of(front)
    return f"U' {left}' U {left} U {front} U' {front}'"


def classify_top_edges(oriented: Set[str]) -> str:
    """
    Name the pattern formed by the top edges showing the top color:
    "cross", "line", "L" or "dot". Anything unexpected counts as a dot.
    """
    if len(oriented) == 4:
        return "cross"
    if len(oriented) == 2:
        if oriented in ({"F", "B"}, {"L", "R"}):
            return "line"
        return "L"
    if oriented:
        logger.debug("classify_top_edges: unexpected pattern %s", sorted(oriented))
    return "dot"


def _turn_faces(faces: Set[str], turns: int) -> Set[str]:
    for _ in range(turns):
        faces = {face_from_axis(rotate(AXES[face], UP)) for face in faces}
    return faces


def _as_moves(moves: Union[str, Iterable[Move]]) -> List[Move]:
    if isinstance(moves, str):
        return list(parse_algorithm(moves))
    return list(moves)


class Solver:
    """
    Class to solve a cube puzzle layer by layer
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        """
        Initialize the solver with optional iteration caps
        """
        self.cfg = config or SolverConfig()
        self.cube: Optional[Cube] = None
        self.steps: List[SolverStep] = []
        self.stuck: List[str] = []

    def solve(self, cube: Cube) -> SolverResult:
        """
        Solve a clone of ``cube`` and return the recorded steps.
        The cube passed in is never modified.
        """
        if not isinstance(cube, Cube):
            raise TypeError("cube must be a Cube")
        self.cube = cube.clone()
        self.steps = []
        self.stuck = []

        self.solve_cross()
        self.solve_first_layer()
        self.solve_second_layer()
        self.orient_last_layer()
        self.permute_last_layer()

        remaining = sorted(cubie.id for cubie in self.cube if not cubie.is_solved())
        if not remaining:
            status = SolveStatus.SOLVED
        elif self.stuck:
            status = SolveStatus.STUCK
        else:
            status = SolveStatus.PARTIAL
        result = SolverResult(steps=list(self.steps), status=status, remaining=remaining)
        logger.info(
            "solve: %s in %d steps, %d moves", status.value, len(result.steps), len(result.moves)
        )
        if remaining:
            logger.info("solve: unsolved pieces %s", remaining)
        return result

    # --- recording helpers ---

    def _record(
        self,
        phase: str,
        description: str,
        moves: Union[str, Iterable[Move]],
        highlights: Iterable[str] = (),
    ):
        """Apply a trigger to the working cube and record it as one step."""
        moves = _as_moves(moves)
        if not moves:
            return
        self.cube.apply_algorithm(moves)
        step = SolverStep(phase, description, moves, set(highlights))
        self.steps.append(step)
        logger.debug("%s: %s [%s]", phase, description, step.notation)

    def _stalled(self, target: str):
        """Note a target whose loop ran out of attempts."""
        logger.warning("Iteration cap reached for %s, moving on", target)
        self.stuck.append(target)

    def _find(self, category: str, *colors: str) -> Cubie:
        for cubie in self.cube.pieces(category):
            if cubie.has_colors(*colors):
                return cubie
        raise KeyError(f"No {category} with colors {colors}")

    # --- phase 1: cross ---

    def solve_cross(self):
        """
        Solve the four down edges, one side at a time
        """
        for side in CROSS_ORDER:
            self._place_cross_edge(side)

    def _place_cross_edge(self, side: str):
        name = FACE_NAMES[side]
        for _ in range(self.cfg.cross_attempts):
            edge = self._find(EDGE, "D", side)
            if edge.is_solved():
                return
            down_normal = edge.normal_of("D")
            layer = edge.position[1]
            if layer == 1 and down_normal == UP:
                turns = u_turns(edge.normal_of(side), AXES[side])
                moves = u_moves(turns) + [Move(side, double=True)]
                self._record(PHASE_CROSS, f"Insert {name} cross edge", moves, [edge.id])
            elif layer == 1:
                # bring it above the right hand slot, then swing it down sideways
                right = right_of(side)
                turns = u_turns(down_normal, AXES[right])
                moves = u_moves(turns) + _as_moves(f"{right}' {side} {right}")
                self._record(PHASE_CROSS, "Flip top edge into place", moves, [edge.id])
            elif layer == -1:
                face = side_faces(edge.position)[0]
                self._record(
                    PHASE_CROSS, "Free edge from bottom layer", [Move(face, double=True)], [edge.id]
                )
            else:
                face = lifting_face(edge.position, side_faces(edge.position))
                self._record(PHASE_CROSS, "Lift edge to top layer", f"{face} U {face}'", [edge.id])
        if not self._find(EDGE, "D", side).is_solved():
            self._stalled(f"{PHASE_CROSS} {name}")

    # --- phase 2: first layer corners ---

    def solve_first_layer(self):
        """
        Insert the four down corners
        """
        for side_a, side_b in SLOTS:
            self._insert_corner(side_a, side_b)

    def _insert_corner(self, side_a: str, side_b: str):
        slot = add(DOWN, AXES[side_a], AXES[side_b])
        above = add(UP, AXES[side_a], AXES[side_b])
        trigger_face = lifting_face(slot, [side_a, side_b])
        for _ in range(self.cfg.corner_attempts):
            corner = self._find(CORNER, "D", side_a, side_b)
            if corner.is_solved():
                return
            if corner.position[1] == -1 and corner.position != slot:
                face = lifting_face(corner.position, side_faces(corner.position))
                self._record(
                    PHASE_CORNERS, "Evict corner from wrong slot", f"{face} U {face}'", [corner.id]
                )
                continue
            if corner.position[1] == 1:
                turns = u_turns(corner.position, above)
                self._record(
                    PHASE_CORNERS, "Align corner above its slot", u_moves(turns), [corner.id]
                )
            self._record(
                PHASE_CORNERS,
                "Insert corner",
                f"{trigger_face} U {trigger_face}' U'",
                [corner.id],
            )
        if not self._find(CORNER, "D", side_a, side_b).is_solved():
            self._stalled(f"{PHASE_CORNERS} D{side_a}{side_b}")

    # --- phase 3: second layer edges ---

    def solve_second_layer(self):
        """
        Insert the four middle layer edges
        """
        for side_a, side_b in SLOTS:
            self._insert_middle_edge(side_a, side_b)

    def _insert_middle_edge(self, side_a: str, side_b: str):
        for _ in range(self.cfg.edge_attempts):
            edge = self._find(EDGE, side_a, side_b)
            if edge.is_solved():
                return
            layer = edge.position[1]
            if layer == -1:
                face = side_faces(edge.position)[0]
                self._record(
                    PHASE_EDGES, "Move edge to top", [Move(face, double=True)], [edge.id]
                )
            elif layer == 0:
                faces = side_faces(edge.position)
                front = next(face for face in faces if right_of(face) in faces)
                self._record(
                    PHASE_EDGES, "Eject edge from wrong slot", right_insertion(front), [edge.id]
                )
            else:
                side_normal = next(normal for normal in edge.stickers if normal[1] == 0)
                side_color = edge.stickers[side_normal]
                turns = u_turns(side_normal, AXES[side_color])
                self._record(
                    PHASE_EDGES, "Align edge with its center", u_moves(turns), [edge.id]
                )
                if edge.color_facing(UP) == right_of(side_color):
                    self._record(
                        PHASE_EDGES,
                        "Insert middle layer edge to the right",
                        right_insertion(side_color),
                        [edge.id],
                    )
                else:
                    self._record(
                        PHASE_EDGES,
                        "Insert middle layer edge to the left",
                        left_insertion(side_color),
                        [edge.id],
                    )
        if not self._find(EDGE, side_a, side_b).is_solved():
            self._stalled(f"{PHASE_EDGES} {side_a}{side_b}")

    # --- phase 4: last layer ---

    def _top_pieces(self, category: str) -> List[Cubie]:
        return [cubie for cubie in self.cube.pieces(category) if "U" in cubie.stickers.values()]

    def _oriented_top_edges(self) -> Set[str]:
        grid = self.cube.face_colors("U")
        stickers = {"B": grid[0][1], "R": grid[1][2], "F": grid[2][1], "L": grid[1][0]}
        return {side for side, color in stickers.items() if color == "U"}

    def _top_face_done(self) -> bool:
        return all(color == "U" for row in self.cube.face_colors("U") for color in row)

    def orient_last_layer(self):
        """
        Two look orientation: top edges first (dot, line, L-shape),
        then twist corners one by one at the front right.
        """
        edge_ids = [cubie.id for cubie in self._top_pieces(EDGE)]
        for _ in range(self.cfg.oll_attempts):
            oriented = self._oriented_top_edges()
            pattern = classify_top_edges(oriented)
            logger.debug("orient_last_layer: %s %s", pattern, sorted(oriented))
            if pattern == "cross":
                break
            if pattern == "line":
                turns = next(t for t in range(2) if _turn_faces(oriented, t) == {"L", "R"})
                self._record(PHASE_OLL, "Turn line to horizontal", u_moves(turns), edge_ids)
                self._record(PHASE_OLL, "Top line", EDGE_FLIP, edge_ids)
            elif pattern == "L":
                turns = next(t for t in range(4) if _turn_faces(oriented, t) == {"B", "L"})
                self._record(PHASE_OLL, "Turn L-shape to back left", u_moves(turns), edge_ids)
                self._record(PHASE_OLL, "Top L-shape", EDGE_FLIP_L, edge_ids)
            else:
                self._record(PHASE_OLL, "Top dot", EDGE_FLIP, edge_ids)
        if classify_top_edges(self._oriented_top_edges()) != "cross":
            self._stalled(f"{PHASE_OLL} edges")

        front_right = add(UP, AXES["R"], AXES["F"])
        for _ in range(4):
            if self._top_face_done():
                break
            unoriented = [
                cubie
                for cubie in self._top_pieces(CORNER)
                if cubie.position[1] == 1 and cubie.color_facing(UP) != "U"
            ]
            if not unoriented:
                break
            corner = unoriented[0]
            turns = u_turns(corner.position, front_right)
            self._record(PHASE_OLL, "Bring corner to front right", u_moves(turns), [corner.id])
            for _ in range(self.cfg.twist_attempts):
                if corner.color_facing(UP) == "U":
                    break
                self._record(PHASE_OLL, "Corner orientation", CORNER_TWIST, [corner.id])
        if not self._top_face_done():
            self._stalled(f"{PHASE_OLL} corners")

    def _layer_permuted(self, cube: Cube, categories: Sequence[str]) -> bool:
        """
        True if the first two layers are solved and the last layer pieces of
        ``categories`` sit in their home slots after some U turn.
        """
        pieces = [cubie for cubie in cube if "U" not in cubie.stickers.values()]
        if not all(cubie.is_solved() for cubie in pieces):
            return False
        return self._alignment(cube, categories) is not None

    @staticmethod
    def _alignment(cube: Cube, categories: Sequence[str]) -> Optional[int]:
        """U turns after which the given last layer pieces are all home, if any."""
        pieces = [
            cubie
            for cubie in cube
            if cubie.category in categories and "U" in cubie.stickers.values()
        ]
        for turns in range(4):
            if all(position_after(cubie.position, turns) == cubie.home for cubie in pieces):
                return turns
        return None

    def _plan(self, trigger: str, goal: Callable[[Cube], bool]) -> Optional[List[Move]]:
        """
        Pick the next trigger from the U conjugates of ``trigger`` and its
        inverse: the first that reaches ``goal`` now, else the first that
        reaches it with one more trigger.
        """
        forward = _as_moves(trigger)
        candidates = [
            u_moves(turns) + algorithm + u_moves(-turns)
            for algorithm in (forward, invert_algorithm(forward))
            for turns in range(4)
        ]
        trials = []
        for candidate in candidates:
            trial = self.cube.clone()
            trial.apply_algorithm(candidate)
            if goal(trial):
                return candidate
            trials.append((candidate, trial))
        for candidate, trial in trials:
            for follow_up in candidates:
                deeper = trial.clone()
                deeper.apply_algorithm(follow_up)
                if goal(deeper):
                    return candidate
        return None

    def _permute(self, categories: Sequence[str], trigger: str, description: str, target: str):
        ids = [cubie.id for cubie in self._top_pieces(categories[-1])]

        def goal(cube):
            return self._layer_permuted(cube, categories)

        for _ in range(self.cfg.pll_attempts):
            if goal(self.cube):
                return
            plan = self._plan(trigger, goal)
            if plan is None:
                logger.debug("_permute: no %s trigger reaches the goal", target)
                break
            self._record(PHASE_PLL, description, plan, ids)
        if not goal(self.cube):
            self._stalled(f"{PHASE_PLL} {target}")

    def _align_last_layer(self, categories: Sequence[str]):
        turns = self._alignment(self.cube, categories)
        if turns:
            ids = [cubie.id for cubie in self._top_pieces(CORNER)]
            self._record(PHASE_PLL, "Align last layer", u_moves(turns), ids)

    def permute_last_layer(self):
        """
        Cycle corners into their slots, line the layer up, then cycle edges.
        """
        self._permute([CORNER], CORNER_CYCLE, "Swap corners", "corners")
        self._align_last_layer([CORNER])
        self._permute([CORNER, EDGE], EDGE_CYCLE, "Exchange edges", "edges")
        self._align_last_layer([CORNER, EDGE])


def position_after(position: Vector, turns: int) -> Vector:
    """Where ``position`` ends up after clockwise U quarter turns."""
    for _ in range(turns % 4):
        position = rotate(position, UP)
    return position


def reference_solution(cube: Cube) -> List[Move]:
    """
    Get a two-phase (kociemba) solution for the cube.
    Used to cross-check the layer by layer solver and the move engine.
    """
    if cube.is_solved():
        return []
    solution = kociemba.solve(cube.facelets())
    logger.info("Kociemba solution found: %s", solution)
    return list(parse_algorithm(solution))
