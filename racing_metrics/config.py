"""Race configuration and its JSON loader."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Union

TARGETS_PER_LINE = 5

_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

# JSON keys are matched case-insensitively, as the config format allows.
_INT_FIELDS = {
    "laps": "laps",
    "laplen": "lap_len",
    "penaltylen": "penalty_len",
    "firinglines": "firing_lines",
    "targetsamount": "targets_amount",
}
_STR_FIELDS = {
    "start": "start",
    "startdelta": "start_delta",
}


@dataclass
class Config:
    """Settings for one race."""

    laps: int = 0
    lap_len: int = 0
    penalty_len: int = 0
    firing_lines: int = 0
    start: str = ""
    start_delta: str = ""
    targets_amount: int = TARGETS_PER_LINE


def _check_int(key: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"config field {key!r} must be an integer, got {value!r}")
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"config field {key!r} is out of range: {value}")
    return value


def _check_str(key: str, value: object) -> str:
    if not isinstance(value, str):
        raise ValueError(f"config field {key!r} must be a string, got {value!r}")
    return value


def parse_config(text: Union[str, bytes]) -> Config:
    """Build a Config from JSON text; unknown keys are ignored."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid config JSON: {exc}") from exc

    config = Config()
    if data is None:
        return config
    if not isinstance(data, dict):
        raise ValueError("config JSON must be an object")

    for key, value in data.items():
        if value is None:
            continue
        folded = key.lower()
        if folded in _INT_FIELDS:
            setattr(config, _INT_FIELDS[folded], _check_int(key, value))
        elif folded in _STR_FIELDS:
            setattr(config, _STR_FIELDS[folded], _check_str(key, value))

    config.targets_amount = TARGETS_PER_LINE
    return config


def load_config(path: Union[str, Path]) -> Config:
    """Read and parse a JSON config file."""
    return parse_config(Path(path).read_text(encoding="utf-8"))