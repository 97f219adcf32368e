"""
Recommender Settings

Loads knob overrides and logging level from environment variables.
A .env file at the project root is loaded first (python-dotenv).

Environment:
    RECSYS_LOG_LEVEL       logging level for configure_logging (default WARNING)
    RELATED_<KNOB>         overrides related.<knob>, e.g. RELATED_BATCH_SIZE=12
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .computed_params import RELATED_PARAM_KEYS, merge_params

ENV_PREFIX = "RELATED_"
PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _env_name(knob: str) -> str:
    """related.batch_size -> RELATED_BATCH_SIZE"""
    return ENV_PREFIX + knob.split(".", 1)[1].upper()


@dataclass
class EngineSettings:
    """Settings for hosts embedding the recommender."""

    log_level: str = "WARNING"
    # related.* knob overrides found in the environment
    knob_overrides: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "EngineSettings":
        """Load settings from the environment (after loading .env if present)."""
        env_path = env_file or PROJECT_ROOT / ".env"
        if env_path.exists():
            load_dotenv(env_path)
        overrides = {}
        for knob in RELATED_PARAM_KEYS:
            value = os.getenv(_env_name(knob))
            if value is not None and value.strip():
                overrides[knob] = value.strip()
        return cls(
            log_level=os.getenv("RECSYS_LOG_LEVEL", "WARNING").upper(),
            knob_overrides=overrides,
        )


# Global settings instance
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = EngineSettings.from_env()
    return _settings


def reload_settings() -> EngineSettings:
    """Reload settings from environment."""
    global _settings
    _settings = None
    return get_settings()


def load_params(stored: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
    """Knob values: defaults, then environment overrides, then stored knobs."""
    layered = dict(get_settings().knob_overrides)
    if stored:
        layered.update({k: v for k, v in stored.items() if v is not None})
    return merge_params(layered)


def configure_logging(level: Optional[str] = None) -> None:
    """Basic stderr logging for the recsys loggers at the configured level."""
    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("recsys").setLevel(resolved)
