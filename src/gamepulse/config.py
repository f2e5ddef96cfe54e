"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# ── Backend ────────────────────────────────────────────────────────────────
BACKEND_URL: str = os.getenv("BACKEND_URL", "")
BACKEND_API_KEY: str = os.getenv("BACKEND_API_KEY", "")
EVENT_LIMIT: int = int(os.getenv("GAMEPULSE_EVENT_LIMIT", "500"))

# ── Data window ────────────────────────────────────────────────────────────
DAYS: int = int(os.getenv("GAMEPULSE_DAYS", "90"))
MAX_RANGE_DAYS: int = int(os.getenv("GAMEPULSE_MAX_RANGE_DAYS", "90"))

# ── LLM ────────────────────────────────────────────────────────────────────
LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "openai")
LLM_API_KEY: str = os.getenv("LLM_API_KEY", "")
LLM_MODEL: str = os.getenv("LLM_MODEL", "gpt-4o-mini")

# ── Output ─────────────────────────────────────────────────────────────────
OUTPUT_DIR: Path = Path(os.getenv("GAMEPULSE_OUTPUT_DIR", str(PROJECT_ROOT / "out")))
DB_DIR: Path = Path(os.getenv("GAMEPULSE_DB_DIR", str(PROJECT_ROOT / "var")))


def backend_enabled() -> bool:
    return bool(BACKEND_URL and BACKEND_API_KEY)


def brief_db_path() -> Path:
    return DB_DIR / "briefs.sqlite3"
