"""
Speed limit table loading.

The table maps a jurisdiction name, exactly as the reverse geocoder reports
it (e.g. "Texas"), to the speed in mph used as the one-hour driving
threshold. It is read once per process and handed out as a read-only
mapping.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Union
import json
import logging
import math

from waystop.core.exceptions import SpeedLimitTableError

logger = logging.getLogger(__name__)

SpeedLimitTable = Mapping[str, float]


def build_speed_limit_table(raw: object) -> SpeedLimitTable:
    """Validate a decoded JSON object and freeze it."""
    if not isinstance(raw, dict):
        raise SpeedLimitTableError("Speed limit table must be a JSON object")

    table = {}
    for jurisdiction, speed in raw.items():
        # bool is an int subclass; true/false in the file is a typo, not a speed
        if isinstance(speed, bool) or not isinstance(speed, (int, float)):
            raise SpeedLimitTableError(
                f"Speed limit for '{jurisdiction}' must be a number, got {speed!r}"
            )
        if not math.isfinite(speed):
            raise SpeedLimitTableError(f"Speed limit for '{jurisdiction}' must be finite, got {speed!r}")
        table[str(jurisdiction)] = float(speed)
    return MappingProxyType(table)


def load_speed_limits(path: Union[str, Path]) -> SpeedLimitTable:
    """Load the jurisdiction -> mph table from a JSON file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise SpeedLimitTableError(f"Cannot read speed limit table {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SpeedLimitTableError(f"Speed limit table {path} is not valid JSON: {e}") from e

    table = build_speed_limit_table(raw)
    logger.info(f"Loaded {len(table)} speed limits from {path}")
    return table
