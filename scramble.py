"""
Random scramble generation.
"""

import logging
import random
from typing import List, Optional

from cube import Cube
from notation import FACES, Move, encode_algorithm


logger = logging.getLogger("scramble")

DEFAULT_LENGTH = 25

# faces grouped by the axis they turn about
FACE_AXIS = {"U": "y", "D": "y", "R": "x", "L": "x", "F": "z", "B": "z"}

CANONICAL_MOVES = [
    Move(face, clockwise=clockwise, double=double)
    for face in FACES
    for clockwise, double in ((True, False), (False, False), (True, True))
]


def generate(length: int = DEFAULT_LENGTH, rng: Optional[random.Random] = None) -> List[Move]:
    """
    Generate a random scramble of ``length`` moves.
    The same face never turns twice in a row, and no three moves in a row
    turn about the same axis (e.g. "R L R" is never produced).
    """
    if length < 0:
        raise ValueError(f"Scramble length must not be negative: {length}")
    rng = rng or random.Random()
    moves: List[Move] = []
    while len(moves) < length:
        move = rng.choice(CANONICAL_MOVES)
        if moves and moves[-1].face == move.face:
            continue
        if (
            len(moves) >= 2
            and FACE_AXIS[moves[-1].face] == FACE_AXIS[move.face]
            and FACE_AXIS[moves[-2].face] == FACE_AXIS[move.face]
        ):
            continue
        moves.append(move)
    logger.debug("generate: %s", encode_algorithm(moves))
    return moves


def scramble(
    cube: Cube, length: int = DEFAULT_LENGTH, rng: Optional[random.Random] = None
) -> List[Move]:
    """Scramble ``cube`` in place and return the moves applied."""
    moves = generate(length, rng)
    cube.apply_algorithm(moves)
    logger.info("Scrambled with %d moves", len(moves))
    return moves
