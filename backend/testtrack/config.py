"""Application settings and validation."""

import logging
import os
from pathlib import Path


class Settings:
    ENV: str
    DB_PATH: str
    MAX_UPLOAD_BYTES: int
    ALLOW_DEV_CORS: bool
    LOG_LEVEL: str
    SEED_SAMPLE_DATA: bool

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        default_db = Path(__file__).resolve().parent.parent / "app.db"
        self.DB_PATH = os.getenv("TESTTRACK_DB_PATH", str(default_db))
        self.MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(2 * 1024 * 1024)))  # 2 MB default
        default_cors = "true" if self.ENV == "dev" else "false"
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", default_cors).lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "false").lower() == "true"
        self._validate()

    def _validate(self):
        if self.MAX_UPLOAD_BYTES <= 0:
            raise RuntimeError("MAX_UPLOAD_BYTES must be a positive number of bytes")
        if self.ENV != "dev" and self.ALLOW_DEV_CORS:
            raise RuntimeError("ALLOW_DEV_CORS must not be enabled in non-dev environments")
        if not isinstance(logging.getLevelName(self.LOG_LEVEL), int):
            raise RuntimeError(f"LOG_LEVEL is not a logging level name: {self.LOG_LEVEL}")


settings = Settings()
