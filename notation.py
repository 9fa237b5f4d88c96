"""
Module to parse and encode cube move notation.

A move is a face letter (U, R, F, D, L, B, case-insensitive) optionally
followed by ' (counter-clockwise) or 2 (half turn).
An algorithm is a whitespace separated list of moves, e.g. "R U R' U'".
This module has no knowledge of the cube itself.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional


logger = logging.getLogger("notation")

# label order used for piece ids and facelet strings
FACES = ["U", "R", "F", "D", "L", "B"]
FACE_NAMES = {
    "U": "Up",
    "R": "Right",
    "F": "Front",
    "D": "Down",
    "L": "Left",
    "B": "Back",
}


@dataclass(frozen=True)
class Move:
    """Represents a single face turn."""

    face: str  # face letter
    clockwise: bool = True
    double: bool = False

    @property
    def turns(self) -> int:
        """Number of quarter turns this move performs."""
        return 2 if self.double else 1

    def inverse(self) -> "Move":
        """
        Return the move that undoes this one.
        Half turns are their own inverse.
        """
        if self.double:
            return self
        return Move(self.face, clockwise=not self.clockwise)

    def __str__(self):
        return encode_move(self)


def parse_move(token: str) -> Move:
    """
    Parse a single move token such as "R", "u'" or "F2".
    Raises ValueError for an empty token or an unknown face letter.
    """
    if token is None or not token.strip():
        raise ValueError("Move token cannot be empty")
    token = token.strip()
    face = token[0].upper()
    if face not in FACES:
        raise ValueError(f"Unknown move face '{token[0]}' in {token!r}")
    clockwise = True
    double = False
    for suffix in token[1:]:
        if suffix == "'":
            clockwise = False
        elif suffix == "2":
            double = True
    return Move(face, clockwise=clockwise, double=double)


def parse_algorithm(text: Optional[str]) -> Iterator[Move]:
    """
    Lazily parse a whitespace separated algorithm.
    Empty input yields nothing.
    """
    if not text:
        return
    for token in text.split():
        logger.debug("parse_algorithm: %s", token)
        yield parse_move(token)


def encode_move(move: Move) -> str:
    """Return the canonical token for a move."""
    if move.double:
        return f"{move.face}2"
    if not move.clockwise:
        return f"{move.face}'"
    return move.face


def encode_algorithm(moves: Iterable[Move]) -> str:
    """Return the canonical notation for a sequence of moves."""
    return " ".join(encode_move(move) for move in moves)


def invert_algorithm(moves: Iterable[Move]) -> List[Move]:
    """
    Return the algorithm that undoes ``moves``:
    the inverse of every move, in reverse order.
    """
    return [move.inverse() for move in reversed(list(moves))]
