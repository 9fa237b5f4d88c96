"""
Terminal display for the cube tutor, built on rich.
"""

from typing import Iterable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cube import FACE_ORIENTATIONS, Cube, add, scale
from solver import SolverResult


PALETTE = {
    "U": "white",
    "R": "red",
    "F": "green",
    "D": "yellow",
    "L": "dark_orange",
    "B": "blue",
}

# (face, net row, net column) of each 3x3 block in the unfolded cube
NET_LAYOUT = [
    ("U", 0, 1),
    ("L", 1, 0),
    ("F", 1, 1),
    ("R", 1, 2),
    ("B", 1, 3),
    ("D", 2, 1),
]

STICKER = "██"
HIGHLIGHT = "▓▓"


def _face_ids(cube: Cube, face: str) -> List[List[Optional[str]]]:
    """Ids of the cubies behind each sticker of a face, laid out like face_colors."""
    normal, up, right = FACE_ORIENTATIONS[face]
    rows = []
    for row in range(3):
        ids = []
        for col in range(3):
            cubie = cube.piece_at(add(normal, scale(up, 1 - row), scale(right, col - 1)))
            ids.append(cubie.id if cubie else None)
        rows.append(ids)
    return rows


def net_text(cube: Cube, highlights: Iterable[str] = ()) -> Text:
    """
    Build the unfolded face net of the cube as rich Text.
    Stickers of highlighted pieces are drawn with a hatched block on a
    magenta background so they stand out.
    """
    highlights = set(highlights)
    grid = [[None] * 12 for _ in range(9)]
    for face, net_row, net_col in NET_LAYOUT:
        colors = cube.face_colors(face)
        ids = _face_ids(cube, face)
        for row in range(3):
            for col in range(3):
                grid[net_row * 3 + row][net_col * 3 + col] = (colors[row][col], ids[row][col])

    text = Text()
    for line in grid:
        for cell in line:
            if cell is None:
                text.append("  ")
                continue
            color, cubie_id = cell
            if cubie_id in highlights:
                text.append(HIGHLIGHT, style=f"{PALETTE[color]} on magenta")
            else:
                text.append(STICKER, style=PALETTE[color])
        text.append("\n")
    text.rstrip()
    return text


class Display():
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def draw_message(self, header: str, messages: List[str]) -> None:
        self.console.print(Panel("\n".join(messages), title=header, border_style="cyan"))

    def draw_cube(self, cube: Cube, highlights: Iterable[str] = (), title: str = "Cube") -> None:
        """Draw the face net, with ``highlights`` marked."""
        self.console.print(Panel(net_text(cube, highlights), title=title, expand=False))

    def draw_steps(self, result: SolverResult) -> None:
        """Draw the steps of a solve as a table, followed by its outcome."""
        table = Table(
            title="Solution",
            title_style="bold",
            expand=False,
            collapse_padding=True,
            pad_edge=False,
        )
        table.add_column("#", justify="right")
        table.add_column("Phase")
        table.add_column("Step")
        table.add_column("Moves")
        for number, step in enumerate(result.steps, start=1):
            table.add_row(str(number), step.phase, step.description, step.notation)
        self.console.print(table)
        self.console.print(
            f"Status: [bold]{result.status.value}[/bold], "
            f"{len(result.steps)} steps, {len(result.moves)} moves"
        )
        if result.remaining:
            self.console.print(f"Unsolved pieces: {' '.join(result.remaining)}")
