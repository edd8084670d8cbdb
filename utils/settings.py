"""Runtime configuration for the Inventory API.

Values come from the process environment, with a ``.env`` file at the
project root loaded first when present. Settings are read once at startup
and handed to the database engine, the object store client and the app.

Copyright (c) Bryn Gwalad 2025
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8000
    database_url: str = "sqlite:///database/database.db"
    log_level: str = "info"
    s3_endpoint_url: Optional[str] = None
    s3_region: Optional[str] = None
    s3_access_key: Optional[str] = None
    s3_secret_key: Optional[str] = None
    metrics_enabled: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        ``DATABASE_URL`` wins over ``SQLITE_FILE``. S3 credentials left unset
        fall through to the default boto3 credential chain.
        """
        load_dotenv()

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            sqlite_file = os.getenv("SQLITE_FILE", "database/database.db")
            database_url = f"sqlite:///{sqlite_file}"

        return cls(
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
            database_url=database_url,
            log_level=os.getenv("LOG_LEVEL", "info"),
            s3_endpoint_url=os.getenv("S3_ENDPOINT_URL") or None,
            s3_region=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or None,
            s3_access_key=os.getenv("AWS_ACCESS_KEY_ID") or None,
            s3_secret_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
            metrics_enabled=_flag(os.getenv("METRICS_ENABLED"), True),
        )
