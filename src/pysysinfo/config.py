"""Configuration models for pysysinfo."""

import os
from pathlib import Path

from pydantic import BaseModel, Field


def default_disk_path() -> str:
    """Root of the drive holding the current working directory."""
    anchor = Path.cwd().anchor
    return anchor or os.sep


class SysInfoConfig(BaseModel):
    """Settings for one collection call."""

    max_workers: int = Field(default=32, ge=1)
    cpu_sample_interval: float = Field(default=0.05, ge=0.0)  # Seconds
    disk_path: str = Field(default_factory=default_disk_path)


class RenderConfig(BaseModel):
    """Settings for the human-readable rendering."""

    verbose: bool = False
