"""
Resume village entry point.

    python -m village --data data --width 960 --touch
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from engine.core import Game, GameConfig, DataError
from engine.resources.database import Database
from village.config import VillageSettings, load_descriptors
from village.scenes import VillageScene


logger = logging.getLogger("village")

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="village", description="Explore the resume village.")
    parser.add_argument("--data", type=Path, default=DEFAULT_DATA_PATH,
                        help="directory holding map-data.json, resume-data.json and schemas/")
    parser.add_argument("--width", type=int, default=800, help="window width")
    parser.add_argument("--height", type=int, default=600, help="window height")
    parser.add_argument("--touch", action="store_true",
                        help="use touch wording for prompts from the start")
    parser.add_argument("--strict", action="store_true",
                        help="fail on invalid data files instead of falling back")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    database = Database(args.data, strict=args.strict)
    try:
        database.load_all()
    except DataError as e:
        logger.error("%s", e)
        return 1

    map_descriptor, content = load_descriptors(database)

    game = Game(GameConfig(
        width=args.width,
        height=args.height,
        touch_input=args.touch,
    ))
    game.scene_manager.push(VillageScene(game, map_descriptor, content, VillageSettings()))
    game.run()
    return 0
