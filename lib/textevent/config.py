"""
Run configuration for the text event simulation.

Settings come from a YAML file, any of which may be overridden by command-line
options.  For example :

    stimulus_path: ./stim.csv
    log_path: ./logfile.csv
    run_until: 100000.0
    read_window: 1000.0
    log_level: INFO
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
import yaml

from desim import MAX_USER_TIME

__all__ = ["DEFAULT_CONFIG_PATH", "RunConfig"]

DEFAULT_CONFIG_PATH = "./setup.yml"


class RunConfig(BaseModel):
    stimulus_path: str = "./stim.csv"
    log_path: str = "./logfile.csv"
    run_until: float = 100000.0
    read_window: float = Field(default=1000.0, gt=0.0)
    log_level: str = "INFO"

    @field_validator("run_until")
    @classmethod
    def _check_run_until(cls, value: float) -> float:
        if not 0.0 < value <= MAX_USER_TIME:
            msg = f"run_until must be > 0.0 and <= {MAX_USER_TIME}, got {value}."
            raise ValueError(msg)
        return value

    @classmethod
    def load(cls, path: str | Path) -> RunConfig:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict) or not all(isinstance(k, str) for k in raw):
            msg = f"Config file {path} must hold a mapping of settings, not {raw!r}."
            raise ValueError(msg)
        return cls(**raw)

    def updated(self, **overrides: Any) -> RunConfig:
        """A copy with the given settings replaced, ignoring any which are None."""
        settings = self.model_dump()
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return RunConfig(**settings)
