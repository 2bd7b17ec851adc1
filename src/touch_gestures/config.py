"""Platform touch conventions: slop and fling limits.

Values are expressed in density-independent units and scaled by ``density``
to pixels, mirroring how a host UI toolkit reports them. Defaults can be
overridden per process with a YAML file:

    # touch.yml
    touch_slop: 8
    maximum_fling_velocity: 8000
    density: 2.0

    export TOUCH_GESTURES_CONFIG=touch.yml
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger("touch_gestures.config")

CONFIG_ENV_VAR = "TOUCH_GESTURES_CONFIG"


@dataclass
class ViewConfiguration:
    touch_slop: float = 8.0  # dp a pointer may wander before a drag/pinch starts
    maximum_fling_velocity: float = 8000.0  # dp/s
    density: float = 1.0  # pixels per dp

    @property
    def scaled_touch_slop(self) -> float:
        return self.touch_slop * self.density

    @property
    def scaled_maximum_fling_velocity(self) -> float:
        return self.maximum_fling_velocity * self.density

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> ViewConfiguration:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
        return cls(**{k: float(v) for k, v in data.items() if k in known})


_config: Optional[ViewConfiguration] = None


def load_config(path: str | Path | None = None) -> ViewConfiguration:
    """Read a configuration file.

    With no path, ``$TOUCH_GESTURES_CONFIG`` is consulted. A missing file
    yields the defaults; a malformed one raises.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
        if not path:
            return ViewConfiguration()

    path = Path(path)
    if not path.exists():
        logger.debug("Config file %s does not exist, using defaults", path)
        return ViewConfiguration()

    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")

    config = ViewConfiguration.from_dict(data)
    logger.info("Loaded touch configuration from %s", path)
    return config


def get_config() -> ViewConfiguration:
    """Process-wide default configuration, loaded on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[ViewConfiguration]):
    """Replace the process-wide default. ``None`` forces a reload."""
    global _config
    _config = config


def save_config(config: ViewConfiguration, path: str | Path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
