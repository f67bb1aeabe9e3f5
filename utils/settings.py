# utils/settings.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os

import streamlit as st
from dotenv import load_dotenv

from utils.helpers import coalesce_str

_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_DATA_DIR = ".housewarming_data"


@dataclass(frozen=True)
class Settings:
    admin_password: str
    data_dir: Path
    log_level: str = "INFO"
    weather_enabled: bool = True


def _secret(name: str) -> Optional[str]:
    # Streamlit secrets (optional) → env fallback
    try:
        value = st.secrets.get(name)
    except Exception:
        return None
    return value if isinstance(value, str) else None


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_settings(env_file: Optional[Path] = None) -> Settings:
    load_dotenv(env_file or _ENV_PATH, override=False)

    def read(name: str) -> Optional[str]:
        return coalesce_str(_secret(name), os.getenv(name))

    return Settings(
        admin_password=read("HOUSEWARMING_ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
        data_dir=Path(read("HOUSEWARMING_DATA_DIR") or DEFAULT_DATA_DIR),
        log_level=(read("HOUSEWARMING_LOG_LEVEL") or "INFO").upper(),
        weather_enabled=_flag(read("HOUSEWARMING_WEATHER"), True),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
