#!/usr/bin/env python3
"""Run the mintpool HTTP server."""

from __future__ import annotations

import logging

import uvicorn

from mintpool.config import Settings
from mintpool.log import configure_logging
from mintpool.runtime import Mintpool

logger = logging.getLogger("mintpool.main")


def main() -> None:
    """Minimal mintpool server."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    logger.info("Connecting to %s", settings.database_url.split("@")[-1])
    app = Mintpool.create_app(settings.app_name, db_url=settings.database_url)

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
