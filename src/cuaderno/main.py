"""Cuaderno entry point."""

import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli
from .config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))
    config = load_config()
    _setup_logging(config.log_level)
    sys.exit(run_cli(sys.argv[1:], config))


if __name__ == "__main__":
    main()
