"""Entry point for the resto-pos Textual app."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from resto_pos.config import DEBUG_LOG_ENV, DEBUG_LOG_PATH
from resto_pos.persistence import PosStorage
from resto_pos.pos_app import PosApp
from resto_pos.session import PosSession


def configure_logging(path: str | Path | None = None, level: int = logging.DEBUG) -> Path:
    """Send all resto_pos logging to a file so the terminal UI stays clean."""
    log_path = Path(path or os.environ.get(DEBUG_LOG_ENV, "").strip() or DEBUG_LOG_PATH)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger = logging.getLogger("resto_pos")
    logger.setLevel(level)
    logger.addHandler(handler)
    return log_path


def main() -> None:
    configure_logging()
    session = PosSession.load(PosStorage())
    PosApp(session).run()


if __name__ == "__main__":
    main()
