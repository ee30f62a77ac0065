"""Bot Detector - Configuration loaded from YAML with defaults"""

import copy
import logging
from dataclasses import dataclass, replace
from typing import Optional

import yaml

from .patterns import BURST_WINDOW_SECONDS, MAX_REQUESTS

logger = logging.getLogger(__name__)

DEFAULTS = {
    "detection": {
        "max_requests": MAX_REQUESTS,
        "burst_window_seconds": BURST_WINDOW_SECONDS,
    },
    "ingest": {
        "shards": 1,
    },
    "report": {
        "top_n": 10,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override dict into base dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


@dataclass(frozen=True)
class DetectorConfig:
    max_requests: int = MAX_REQUESTS
    burst_window_seconds: float = BURST_WINDOW_SECONDS
    shards: int = 1
    top_n: int = 10

    def __post_init__(self):
        if self.max_requests < 0:
            raise ValueError(f"max_requests must be >= 0, got {self.max_requests}")
        if self.burst_window_seconds <= 0:
            raise ValueError(f"burst_window_seconds must be > 0, got {self.burst_window_seconds}")
        if self.shards < 1:
            raise ValueError(f"shards must be >= 1, got {self.shards}")
        if self.top_n < 1:
            raise ValueError(f"top_n must be >= 1, got {self.top_n}")

    @classmethod
    def from_dict(cls, d: dict) -> "DetectorConfig":
        sections = {}
        for key, value in (d or {}).items():
            if key in DEFAULTS and not isinstance(value, dict):
                if value is not None:
                    logger.warning("Config section %r is not a mapping, using defaults", key)
                continue
            sections[key] = value

        merged = _deep_merge(DEFAULTS, sections)
        try:
            return cls(
                max_requests=int(merged["detection"]["max_requests"]),
                burst_window_seconds=float(merged["detection"]["burst_window_seconds"]),
                shards=int(merged["ingest"]["shards"]),
                top_n=int(merged["report"]["top_n"]),
            )
        except TypeError as e:
            raise ValueError(f"invalid config value: {e}") from e

    def with_overrides(self, **overrides) -> "DetectorConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: Optional[str] = None) -> DetectorConfig:
    """Load a DetectorConfig from *path*, falling back to defaults.

    A missing file or an invalid YAML document yields the defaults.
    """
    if path is None:
        return DetectorConfig()

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning("Config file not found: %s, using defaults", path)
        return DetectorConfig()
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s (%s), using defaults", path, e)
        return DetectorConfig()

    if not isinstance(data, dict):
        return DetectorConfig()
    return DetectorConfig.from_dict(data)
