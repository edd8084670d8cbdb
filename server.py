"""Server launcher for the Inventory API.

This module provides a small entrypoint to initialize the database and run
the FastAPI app via uvicorn.

Copyright (c) Bryn Gwalad 2025
"""

import argparse
from dataclasses import replace
from typing import List, Optional

from utils.settings import Settings


def parse_args(settings: Settings, argv: Optional[List[str]] = None) -> Settings:
    """Overlay command line options on ``settings``.

    Every option defaults to the environment value, so plain
    ``python server.py`` keeps honoring ``.env``.
    """
    p = argparse.ArgumentParser(description="Run the Inventory API")
    p.add_argument("--host", default=settings.host, help="listen address (HOST)")
    p.add_argument("--port", type=int, default=settings.port, help="listen port (PORT)")
    p.add_argument("--db-url", default=settings.database_url, help="SQLAlchemy database URL (DATABASE_URL)")
    p.add_argument("--log-level", default=settings.log_level, help="log verbosity (LOG_LEVEL)")
    args = p.parse_args(argv)
    return replace(
        settings,
        host=args.host,
        port=args.port,
        database_url=args.db_url,
        log_level=args.log_level,
    )


def main() -> None:
    """Initialize DB and run uvicorn.

    Environment variables:
    - HOST: listen address (default 127.0.0.1)
    - PORT: listen port (default 8000)
    - DATABASE_URL / SQLITE_FILE: database location
    - LOG_LEVEL: log verbosity (default info)
    - S3_ENDPOINT_URL, AWS_REGION, AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY:
      object store connection
    """
    settings = parse_args(Settings.from_env())

    from api.main import configure_logging, create_app
    from utils.database import init_db

    configure_logging(settings.log_level)
    app = create_app(settings)

    # Initialize DB (creates tables if needed)
    init_db(app.state.engine)

    # Start uvicorn programmatically
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
