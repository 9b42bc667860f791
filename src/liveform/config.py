"""
Runtime configuration from environment variables.

Defaults for every live form component are read once per process and can be
overridden per component instance.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

VALIDATION_MODES = ("early", "late")


@dataclass(frozen=True)
class LiveFormConfig:
    """Process-wide defaults for live form components."""

    validation_mode: str = "late"
    default_trigger: str = "on(change)"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> LiveFormConfig:
        """Load configuration from environment variables."""
        mode = os.environ.get("LIVEFORM_VALIDATION_MODE", "late").strip().lower()
        if mode not in VALIDATION_MODES:
            raise ValueError(
                f"LIVEFORM_VALIDATION_MODE must be one of {', '.join(VALIDATION_MODES)}, "
                f"got {mode!r}"
            )
        return cls(
            validation_mode=mode,
            default_trigger=os.environ.get("LIVEFORM_DEFAULT_TRIGGER", "on(change)"),
            log_level=os.environ.get("LIVEFORM_LOG_LEVEL", "WARNING").upper(),
        )


@lru_cache
def get_config() -> LiveFormConfig:
    """Return the cached process configuration."""
    return LiveFormConfig.from_env()


def reset_config() -> None:
    """Drop the cached configuration so the environment is read again."""
    get_config.cache_clear()


def configure_logging(config: LiveFormConfig | None = None) -> None:
    """Apply the configured level to the ``liveform`` logger hierarchy."""
    config = config or get_config()
    logging.getLogger("liveform").setLevel(config.log_level)
