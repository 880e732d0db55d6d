# -*- coding: utf-8 -*-
from __future__ import annotations
import logging, logging.handlers
from pathlib import Path
from typing import Optional

LOG_FILENAME = "pipe_catalog.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def _is_ours(h: logging.Handler) -> bool:
    return getattr(h, "_pipe_catalog", False)


def setup_logging(settings) -> Optional[Path]:
    """Configure root logging; rotating file under CATALOG_DATA_ROOT/logs/pipe_catalog.log when LOG_TO_FILE."""
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)
    fmt = logging.Formatter(LOG_FORMAT)

    log_path: Optional[Path] = None
    if settings.LOG_TO_FILE:
        log_dir = Path(settings.CATALOG_DATA_ROOT).expanduser() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILENAME
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(fmt)
    handler.setLevel(level)
    handler._pipe_catalog = True  # type: ignore[attr-defined]

    logger = logging.getLogger()  # root
    logger.setLevel(level)
    # avoid duplicate handlers
    if not any(_is_ours(h) for h in logger.handlers):
        logger.addHandler(handler)

    # uvicorn's own config stops these two from propagating to root
    for name in ("uvicorn", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.setLevel(level)
        if not any(_is_ours(h) for h in lg.handlers):
            lg.addHandler(handler)

    return log_path
