from __future__ import annotations

import os
from pathlib import Path
from typing import List


BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DB_PATH = BASE_DIR / "data" / "devblog.db"
DATABASE_PATH = Path(os.getenv("DEVBLOG_DB_PATH", str(DEFAULT_DB_PATH))).expanduser()
DATABASE_URL = os.getenv("DEVBLOG_DATABASE_URL", f"sqlite:///{DATABASE_PATH}")

SQL_ECHO = os.getenv("DEVBLOG_SQL_ECHO", "").strip().lower() in {"1", "true", "yes", "on"}
LOG_LEVEL = os.getenv("DEVBLOG_LOG_LEVEL", "INFO").upper()

HOST = os.getenv("DEVBLOG_HOST", "127.0.0.1")
PORT = int(os.getenv("DEVBLOG_PORT", "2022"))


def cors_origins() -> List[str]:
    raw = os.getenv("DEVBLOG_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
