from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

import jsonschema
from rich.console import Console

from .config import PresentationConfig, load_config
from .demo import demo_slides
from .errors import SlideError
from .presentation import Presentation
from .recording import AutoAdvance, RecordingSink
from .replay import ScreenReplay, ScreenSize
from .sequencer import Slide

logger = logging.getLogger("termslides")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termslides",
        description="Play the built-in typewriter presentation in the terminal.",
    )
    parser.add_argument("--delay", type=float, default=None, help="seconds between typed characters")
    parser.add_argument("--config", type=Path, default=None, help="JSON presentation config")
    parser.add_argument(
        "--rehearse",
        action="store_true",
        help="render every slide headlessly and print the final screens",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity (logs go to stderr)",
    )
    return parser


def rehearse(
    slides: Sequence[Slide],
    console: Console,
    config: PresentationConfig | None = None,
    size: ScreenSize | None = None,
) -> int:
    """Render slides without a terminal and print each final screen."""

    sink = RecordingSink()
    replay = ScreenReplay(size)
    shown = 0
    with Presentation(config, sink=sink, events=AutoAdvance(), sleep=lambda _: None) as presentation:
        for current in slides:
            start = len(sink.ansi)
            presentation.present(current)
            state = replay.feed(sink.ansi[start:])
            shown += 1
            console.rule(f"slide {shown}")
            console.print(state.text, markup=False, highlight=False)
    return shown


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
    except (OSError, ValueError, jsonschema.ValidationError) as exc:
        logger.error("Invalid config %s: %s", args.config, exc)
        return 2
    if args.delay is not None:
        if args.delay < 0:
            logger.error("--delay must not be negative")
            return 2
        config = replace(config, default_delay=args.delay)
    slides = demo_slides(config.default_delay)

    if args.rehearse:
        shown = rehearse(slides, Console(), config)
        logger.info("Rehearsed %d slide(s)", shown)
        return 0

    try:
        with Presentation(config) as presentation:
            shown = presentation.run(slides)
    except SlideError:
        logger.exception("Presentation aborted")
        return 1
    except KeyboardInterrupt:
        logger.info("Presentation interrupted")
        return 130
    finally:
        sys.stdout.write("\n")
        sys.stdout.flush()
    logger.info("Presented %d slide(s)", shown)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
