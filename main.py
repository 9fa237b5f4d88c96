"""
Command line for the cube tutor: scramble, show, solve and tutor.
"""

import argparse
import json
import logging
import random
import sys
from dataclasses import asdict, fields

from cube import Cube
from display import Display
from notation import encode_algorithm, parse_algorithm
from scramble import DEFAULT_LENGTH, generate
from solver import Solver, SolverConfig, reference_solution


logger = logging.getLogger("main")

DEFAULT_CONFIG = "cube_tutor.json"


def load_config(path: str) -> SolverConfig:
    """
    Load solver settings from a JSON file.
    A missing file is replaced by the defaults.
    """
    logger.debug("load_config(path=%s)", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
            logger.info("Config loaded")
    except FileNotFoundError as e:
        logger.warning("Config file not found: %s", e)
        cfg = SolverConfig()
        logger.info("Using default config")
        save_config(cfg, path)
        return cfg
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must hold a JSON object, got {type(data).__name__}")
    known = {f.name for f in fields(SolverConfig)}
    for key in sorted(set(data) - known):
        logger.warning("Ignoring unknown config key: %s", key)
    try:
        return SolverConfig(**{key: int(value) for key, value in data.items() if key in known})
    except TypeError as e:
        raise ValueError(f"Config {path} has a non-numeric value: {e}") from e


def save_config(cfg: SolverConfig, path: str):
    """
    Save solver settings to a JSON file
    """
    logger.debug("save_config(path=%s)", path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(cfg), f, indent=4)


def cmd_scramble(args, display: Display, cfg: SolverConfig) -> int:
    rng = random.Random(args.seed)
    moves = generate(args.length, rng)
    cube = Cube(moves)
    display.draw_message("Scramble", [encode_algorithm(moves)])
    display.draw_cube(cube)
    return 0


def cmd_show(args, display: Display, cfg: SolverConfig) -> int:
    cube = Cube(args.algorithm)
    display.draw_cube(cube, title=args.algorithm or "Solved")
    display.draw_message("Facelets", [cube.facelets()])
    return 0


def cmd_solve(args, display: Display, cfg: SolverConfig) -> int:
    cube = Cube(args.algorithm)
    result = Solver(cfg).solve(cube)
    display.draw_steps(result)
    if args.reference:
        moves = reference_solution(cube)
        display.draw_message("Kociemba", [encode_algorithm(moves) or "(already solved)"])
    return 0 if result.solved else 1


def cmd_tutor(args, display: Display, cfg: SolverConfig) -> int:
    """
    Walk through a solve step by step on a live cube.
    Each step highlights the pieces it moves, then replays its moves.
    """
    cube = Cube(args.algorithm)
    result = Solver(cfg).solve(cube)
    counter = {"moves": 0}

    def count(_move):
        counter["moves"] += 1

    cube.add_listener(count)
    display.draw_cube(cube, title="Start")
    total = len(result.steps)
    auto = args.auto
    for number, step in enumerate(result.steps, start=1):
        display.draw_cube(cube, step.highlights, title=f"{step.phase} {number}/{total}")
        display.draw_message(step.description, [step.notation])
        if not auto:
            try:
                input("Press Enter for the next step...")
            except EOFError:
                logger.info("No more input, playing the remaining steps")
                auto = True
        cube.apply_algorithm(step.moves)
    cube.remove_listener(count)
    display.draw_cube(cube, title="Done")
    display.draw_message(
        "Tutor",
        [f"Status: {result.status.value}", f"Moves: {counter['moves']}"],
    )
    return 0 if cube.is_solved() else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cube tutor: scramble, solve and learn.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Solver config JSON file")
    commands = parser.add_subparsers(dest="command", required=True)

    scramble_parser = commands.add_parser("scramble", help="Generate a random scramble")
    scramble_parser.add_argument("--length", type=int, default=DEFAULT_LENGTH)
    scramble_parser.add_argument("--seed", type=int, default=None)
    scramble_parser.set_defaults(handler=cmd_scramble)

    show_parser = commands.add_parser("show", help="Show the cube after an algorithm")
    show_parser.add_argument("algorithm", help="Moves, e.g. \"R U R' U'\"")
    show_parser.set_defaults(handler=cmd_show)

    solve_parser = commands.add_parser("solve", help="Solve a scrambled cube")
    solve_parser.add_argument("algorithm", help="Scramble moves")
    solve_parser.add_argument(
        "--reference", action="store_true", help="Also print a kociemba solution"
    )
    solve_parser.set_defaults(handler=cmd_solve)

    tutor_parser = commands.add_parser("tutor", help="Step through a solve")
    tutor_parser.add_argument("algorithm", help="Scramble moves")
    tutor_parser.add_argument("--auto", action="store_true", help="Do not wait between steps")
    tutor_parser.set_defaults(handler=cmd_tutor)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
    display = Display()
    try:
        # validate notation before any work is done
        list(parse_algorithm(getattr(args, "algorithm", None)))
        cfg = load_config(args.config)
        return args.handler(args, display, cfg)
    except ValueError as e:
        display.draw_message("Error", [str(e)])
        return 2


if __name__ == "__main__":
    sys.exit(main())
