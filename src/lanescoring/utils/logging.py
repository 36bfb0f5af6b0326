from __future__ import annotations

import logging
from typing import Iterable, Optional


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, debug_modules: Iterable[str] = ()) -> None:
    """
    Configure root handlers for the command line tools.

    ``debug_modules`` names ``lanescoring`` submodules (e.g. ``features.lane``)
    whose DEBUG records should be shown regardless of ``level``; skipped
    obstacles and hypotheses are only reported at that level.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=handlers,
    )
    # handlers stay at NOTSET, so a DEBUG child logger is enough
    for name in debug_modules:
        logging.getLogger(f"lanescoring.{name}").setLevel(logging.DEBUG)
