import os
from dataclasses import dataclass
from typing import Optional

from .render import OUTPUT_FORMATS


@dataclass
class Settings:
    """Runtime configuration for the uptime command."""

    # Threads used to compute stations in parallel
    workers: int = 1
    # One of OUTPUT_FORMATS
    output_format: str = "text"
    debug: bool = False


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def load_settings() -> Settings:
    """Load defaults from ``CHARGER_UPTIME_*`` environment variables."""
    defaults = Settings()
    workers_env = os.getenv("CHARGER_UPTIME_WORKERS")
    try:
        workers = int(workers_env) if workers_env else defaults.workers
    except ValueError:
        raise ValueError(
            f"CHARGER_UPTIME_WORKERS must be an integer, got {workers_env!r}"
        ) from None
    if workers < 1:
        raise ValueError("CHARGER_UPTIME_WORKERS must be at least 1")

    output_format = os.getenv("CHARGER_UPTIME_FORMAT", defaults.output_format).strip().lower()
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported CHARGER_UPTIME_FORMAT: {output_format}")

    return Settings(
        workers=workers,
        output_format=output_format,
        debug=_parse_bool(os.getenv("CHARGER_UPTIME_DEBUG"), defaults.debug),
    )
