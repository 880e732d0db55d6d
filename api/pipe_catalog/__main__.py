"""
Run the catalog API with uvicorn.

    python -m pipe_catalog [--host 0.0.0.0] [--port 8000] [--reload]
"""
from __future__ import annotations
import argparse
from typing import List, Optional

import uvicorn

from pipe_catalog.settings import settings

APP_PATH = "pipe_catalog.main:app"


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Pipe Catalog search API")
    ap.add_argument("--host", default=settings.API_HOST, help="Bind address (API_HOST)")
    ap.add_argument("--port", type=int, default=settings.API_PORT, help="Bind port (API_PORT)")
    ap.add_argument("--reload", action="store_true", help="Restart on code changes (development)")
    args = ap.parse_args(argv)

    uvicorn.run(
        APP_PATH,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
