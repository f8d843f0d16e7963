from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
PUBLIC_DIR = PROJECT_ROOT / "public"
DATA_DIR = Path(os.getenv("VOCAB_CARDS_DATA_DIR") or PUBLIC_DIR / "data")
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
DOWNLOADS_DIR = Path(os.getenv("VOCAB_CARDS_DOWNLOADS_DIR") or ARTIFACTS_DIR / "downloads")
TEMPLATES_DIR = PROJECT_ROOT / "templates"

DEFAULT_FALLBACK_FILES = ("lesson1", "lesson2", "lesson3", "lesson4", "lesson5")


@dataclass(frozen=True)
class ClientSettings:
    api_base_url: str = "http://localhost:3001"
    static_base_url: str = "http://localhost:5173"
    timeout_sec: float = 5.0
    fallback_files: tuple[str, ...] = DEFAULT_FALLBACK_FILES


def server_port() -> int:
    return int(os.getenv("VOCAB_CARDS_PORT", "3001"))


def log_level() -> str:
    return os.getenv("VOCAB_CARDS_LOG_LEVEL", "INFO").strip().upper() or "INFO"


def client_settings() -> ClientSettings:
    raw_fallback = os.getenv("VOCAB_CARDS_FALLBACK_FILES", "")
    fallback = tuple(name.strip() for name in raw_fallback.split(",") if name.strip())
    return ClientSettings(
        api_base_url=os.getenv("VOCAB_CARDS_API_BASE_URL", "http://localhost:3001").rstrip("/"),
        static_base_url=os.getenv("VOCAB_CARDS_STATIC_BASE_URL", "http://localhost:5173").rstrip("/"),
        timeout_sec=max(0.5, float(os.getenv("VOCAB_CARDS_TIMEOUT_SEC", "5"))),
        fallback_files=fallback or DEFAULT_FALLBACK_FILES,
    )


def ensure_dirs() -> None:
    for path in [
        DATA_DIR,
        ARTIFACTS_DIR,
        DOWNLOADS_DIR,
    ]:
        path.mkdir(parents=True, exist_ok=True)
