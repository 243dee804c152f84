"""
Environment settings for the LipidGuard API.

Values come from the process environment, with a ``.env`` file picked up
from the working tree when present.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv(usecwd=True))


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    config_file: Optional[str] = None
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process."""
    return Settings(
        log_level=os.environ.get("LIPIDGUARD_LOG_LEVEL", "INFO").upper(),
        config_file=os.environ.get("LIPIDGUARD_CONFIG_FILE") or None,
        cors_origins=_split_csv(os.environ.get("LIPIDGUARD_CORS_ORIGINS", "*")),
    )
