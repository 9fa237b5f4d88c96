"""
Module to simulate a 3x3x3 cube puzzle.
This module provides a class `Cube` that tracks the 26 visible cubies by
position and sticker normals. Turning a face rotates the position and every
sticker normal of the cubies in that layer with an exact integer quarter turn,
so the model never drifts off the lattice.
This module only handles cube movements, and does not include any solving algorithms.

Coordinates are right-handed: x points Right, y points Up, z points Front.
A sticker color is the letter of the face it belongs to when solved.
"""

# --- Standard imports ---
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from notation import FACES, Move, parse_algorithm


logger = logging.getLogger("cube")

Vector = Tuple[int, int, int]

AXES: Dict[str, Vector] = {
    "U": (0, 1, 0),
    "D": (0, -1, 0),
    "R": (1, 0, 0),
    "L": (-1, 0, 0),
    "F": (0, 0, 1),
    "B": (0, 0, -1),
}
AXIS_FACES: Dict[Vector, str] = {axis: face for face, axis in AXES.items()}

# (normal, up, right) as seen looking at the face from outside,
# matching the usual cube net (U has B on top, D has F on top)
FACE_ORIENTATIONS = {
    "U": (AXES["U"], AXES["B"], AXES["R"]),
    "D": (AXES["D"], AXES["F"], AXES["R"]),
    "F": (AXES["F"], AXES["U"], AXES["R"]),
    "B": (AXES["B"], AXES["U"], AXES["L"]),
    "R": (AXES["R"], AXES["U"], AXES["B"]),
    "L": (AXES["L"], AXES["U"], AXES["F"]),
}

CENTER = "center"
EDGE = "edge"
CORNER = "corner"
CATEGORIES = {1: CENTER, 2: EDGE, 3: CORNER}


def dot(a: Vector, b: Vector) -> int:
    """Integer dot product."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def add(*vectors: Vector) -> Vector:
    """Component-wise sum of vectors."""
    return (
        sum(v[0] for v in vectors),
        sum(v[1] for v in vectors),
        sum(v[2] for v in vectors),
    )


def scale(vector: Vector, factor: int) -> Vector:
    """Multiply a vector by an integer."""
    return (vector[0] * factor, vector[1] * factor, vector[2] * factor)


def rotate(vector: Vector, axis: Vector, clockwise: bool = True) -> Vector:
    """
    Rotate ``vector`` a quarter turn about the unit ``axis``.
    Clockwise is as seen looking at the face from outside, i.e. from the tip
    of ``axis`` back towards the origin.
    Rodrigues' formula at 90 degrees reduces to (a.v)a -/+ (a x v), which is
    a coordinate permutation with sign flips and never leaves the lattice.
    """
    cross = (
        axis[1] * vector[2] - axis[2] * vector[1],
        axis[2] * vector[0] - axis[0] * vector[2],
        axis[0] * vector[1] - axis[1] * vector[0],
    )
    along = dot(axis, vector)
    sign = -1 if clockwise else 1
    return (
        along * axis[0] + sign * cross[0],
        along * axis[1] + sign * cross[1],
        along * axis[2] + sign * cross[2],
    )


def face_from_axis(axis: Vector) -> str:
    """
    Get the face whose outward normal is ``axis``.
    Raises ValueError for anything but one of the 6 unit axes.
    """
    try:
        return AXIS_FACES[tuple(axis)]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Unknown axis {axis}: {list(AXIS_FACES)}") from exc


def axis_from_face(face: str) -> Vector:
    """Get the outward normal of a face."""
    if not isinstance(face, str) or face.upper() not in AXES:
        raise ValueError(f"Invalid face {face}: {FACES}")
    return AXES[face.upper()]


def piece_id(colors: Iterable[str]) -> str:
    """Build the canonical id of a piece from its sticker labels."""
    return "".join(sorted((color.upper() for color in colors), key=FACES.index))


class Cubie:
    """
    Class representing a single cubie in the cube.
    Each cubie has a fixed id, a position and a sticker map
    (outward normal -> color).
    """

    def __init__(self, position: Vector, stickers: Dict[Vector, str], cubie_id=None):
        self.position = tuple(position)
        self.stickers = dict(stickers)
        self.id = cubie_id or piece_id(self.stickers.values())
        self.category = CATEGORIES[sum(1 for c in self.position if c != 0)]

    def __repr__(self):
        return (
            f"Cubie(id={self.id}, "
            + f"position={self.position}, "
            + f"stickers={self.stickers})"
        )

    def __str__(self):
        return f"{self.id} {self.position}"

    @property
    def home(self) -> Vector:
        """Position this cubie occupies on a solved cube."""
        return add(*(AXES[color] for color in self.stickers.values()))

    def rotate(self, axis: Vector, clockwise: bool):
        """Rotate position and every sticker normal together."""
        self.position = rotate(self.position, axis, clockwise)
        self.stickers = {
            rotate(normal, axis, clockwise): color
            for normal, color in self.stickers.items()
        }

    def normal_of(self, color: str) -> Optional[Vector]:
        """
        Get the direction the sticker of ``color`` is facing.
        Returns None when the cubie has no such sticker.
        """
        for normal, sticker in self.stickers.items():
            if sticker == color:
                return normal
        return None

    def color_facing(self, normal: Vector) -> Optional[str]:
        """Get the color of the sticker facing ``normal``, if any."""
        return self.stickers.get(tuple(normal))

    def has_colors(self, *colors: str) -> bool:
        """True if the cubie carries every color given."""
        return all(color in self.stickers.values() for color in colors)

    def is_solved(self) -> bool:
        """True if every sticker points along the axis of its own color."""
        return all(AXES[color] == normal for normal, color in self.stickers.items())

    def clone(self) -> "Cubie":
        """Independent copy of the cubie."""
        return Cubie(self.position, self.stickers, cubie_id=self.id)


class Cube:  # pylint: disable=too-many-public-methods
    """
    Class representing a 3x3x3 cube puzzle.
    The cube is initialized with a solved state, and the user can perform rotations on the cube.
    """

    def __init__(self, algorithm: Union[str, Iterable[Move], None] = None):
        """
        Initialize the cube in its solved state.
        Parameters:
        - algorithm: moves applied right after the reset (optional).
        """
        self.cubies: Dict[str, Cubie] = {}
        self._index: Dict[Vector, str] = {}

        # --- Move emission support ---
        self._listeners: List[Callable[[Move], None]] = []
        self._record_moves: bool = False
        self._move_log: List[Move] = []

        self.reset()
        if algorithm:
            self.apply_algorithm(algorithm)

    def add_listener(self, fn: Callable[[Move], None]):
        """Subscribe to move events; fn will be called with every applied Move."""
        self._listeners.append(fn)

    def remove_listener(self, fn: Callable[[Move], None]):
        """Unsubscribe a previously added listener."""
        try:
            self._listeners.remove(fn)
        except ValueError:
            logger.debug("remove_listener: %s was not subscribed", fn)

    def set_recording(self, enabled: bool = True):
        """Enable/disable move recording to an internal log (clears when toggled on)."""
        self._record_moves = enabled
        if enabled:
            self._move_log.clear()

    def get_move_log(self) -> List[Move]:
        """Return a copy of the recorded move log (if recording was enabled)."""
        return list(self._move_log)

    def _emit(self, move: Move):
        """Internal: deliver move to listeners and optional recorder."""
        if self._record_moves:
            self._move_log.append(move)
        for fn in list(self._listeners):
            fn(move)

    def reset(self):
        """
        Reset the cube to its solved state.
        Every lattice position but the hidden core gets one cubie, with one
        sticker per nonzero coordinate colored after that axis's face.
        """
        self.cubies = {}
        self._index = {}
        for x in (-1, 0, 1):
            for y in (-1, 0, 1):
                for z in (-1, 0, 1):
                    position = (x, y, z)
                    if position == (0, 0, 0):
                        continue
                    stickers = {}
                    for component, unit in zip(position, ((1, 0, 0), (0, 1, 0), (0, 0, 1))):
                        if component:
                            normal = scale(unit, component)
                            stickers[normal] = AXIS_FACES[normal]
                    cubie = Cubie(position, stickers)
                    self.cubies[cubie.id] = cubie
                    self._index[position] = cubie.id
        logger.debug("reset: %d cubies", len(self.cubies))

    def clone(self) -> "Cube":
        """
        Deep copy of the cube state.
        Listeners and the move log are not carried over.
        """
        other = Cube.__new__(Cube)
        other.cubies = {cubie_id: cubie.clone() for cubie_id, cubie in self.cubies.items()}
        other._index = dict(self._index)
        other._listeners = []
        other._record_moves = False
        other._move_log = []
        return other

    def apply_move(self, move: Move):
        """
        Apply a single move.
        A half turn is two quarter turns in the same direction.
        """
        logger.debug("apply_move: %s", move)
        normal = FACE_ORIENTATIONS[move.face][0]
        for _ in range(move.turns):
            self._rotate_layer(normal, move.clockwise)
        self._emit(move)

    def _rotate_layer(self, axis: Vector, clockwise: bool):
        """Quarter turn of every cubie in the layer facing ``axis``."""
        layer = [cubie for cubie in self.cubies.values() if dot(cubie.position, axis) == 1]
        for cubie in layer:
            del self._index[cubie.position]
        for cubie in layer:
            cubie.rotate(axis, clockwise)
            self._index[cubie.position] = cubie.id

    def rotate_face(self, face: str, clockwise: bool = True):
        """
        Rotate a face of the cube by a quarter turn.
        """
        if face.upper() not in FACES:
            raise ValueError(f"Invalid face {face}: {FACES}")
        self.apply_move(Move(face.upper(), clockwise=clockwise))

    def apply_algorithm(self, algorithm: Union[str, Iterable[Move]]):
        """
        Apply a sequence of moves to the cube.
        The sequence is either notation (e.g. "R U R' U'") or an iterable of Move.
        """
        if isinstance(algorithm, str):
            logger.debug("apply_algorithm: %s", algorithm)
            algorithm = parse_algorithm(algorithm)
        for move in algorithm:
            self.apply_move(move)

    def face_colors(self, face: str) -> List[List[str]]:
        """
        Get the 3x3 grid of colors on a face, row by row,
        as seen looking at the face from outside.
        """
        if not isinstance(face, str) or face.upper() not in FACE_ORIENTATIONS:
            raise ValueError(f"Invalid face {face}: {FACES}")
        face = face.upper()
        normal, up, right = FACE_ORIENTATIONS[face]
        grid = []
        for row in range(3):
            colors = []
            for col in range(3):
                position = add(normal, scale(up, 1 - row), scale(right, col - 1))
                cubie = self.piece_at(position)
                color = cubie.color_facing(normal) if cubie else None
                if color is None:
                    logger.debug("face_colors: no sticker at %s facing %s", position, face)
                    color = face
                colors.append(color)
            grid.append(colors)
        return grid

    def is_solved(self) -> bool:
        """
        Check if the cube is in the solved state.
        The cube is solved when every sticker points along the axis of its own color.
        """
        return all(cubie.is_solved() for cubie in self.cubies.values())

    def find_piece(self, cubie_id: str) -> Cubie:
        """
        Get a cubie by id, case-insensitive.
        The id is built from its colors in U R F D L B order, e.g. "URF" or "FD".
        """
        key = None
        if isinstance(cubie_id, str) and all(c in FACES for c in cubie_id.upper()):
            key = piece_id(cubie_id)
        if key not in self.cubies:
            raise KeyError(f"Unknown piece id {cubie_id!r}")
        return self.cubies[key]

    def piece_at(self, position: Vector) -> Optional[Cubie]:
        """
        Get the cubie at a specific position.
        This is useful for accessing specific cubies on the cube.
        """
        cubie_id = self._index.get(tuple(position))
        return self.cubies[cubie_id] if cubie_id else None

    def pieces(self, category: Optional[str] = None) -> List[Cubie]:
        """
        Get all cubies, optionally only those of one category
        ("center", "edge" or "corner").
        """
        if category is not None and category not in CATEGORIES.values():
            raise ValueError(f"Invalid category {category}: {list(CATEGORIES.values())}")
        return [
            cubie
            for cubie in self.cubies.values()
            if category is None or cubie.category == category
        ]

    def centers(self) -> List[Cubie]:
        """
        Get the center cubies of the cube.
        """
        return self.pieces(CENTER)

    def edges(self) -> List[Cubie]:
        """
        Get the edge cubies of the cube.
        """
        return self.pieces(EDGE)

    def corners(self) -> List[Cubie]:
        """
        Get the corner cubies of the cube.
        """
        return self.pieces(CORNER)

    def facelets(self) -> str:
        """
        Return the 54 sticker colors in U R F D L B face order,
        each face row by row. This is the layout kociemba expects.
        """
        return "".join(
            "".join(color for row in self.face_colors(face) for color in row)
            for face in FACES
        )

    def __str__(self):
        """
        String representation of the cube.
        """
        return self.facelets()

    def __repr__(self):
        return f"Cube(facelets={self.facelets()!r})"

    def __eq__(self, other):
        if not isinstance(other, Cube):
            return NotImplemented
        return all(
            cubie.position == other.cubies[cubie_id].position
            and cubie.stickers == other.cubies[cubie_id].stickers
            for cubie_id, cubie in self.cubies.items()
        )

    def __iter__(self):
        """
        Return an iterator for the cubies in the cube.
        """
        return iter(self.cubies.values())
