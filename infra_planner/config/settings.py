"""
Application Settings

Environment configuration for the command line tools.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Settings:
    """Application settings from environment."""

    log_level: str = "WARNING"
    no_color: bool = False
    output_dir: Path = Path("output")

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING

    def resolve_output(self, path: Path) -> Path:
        """Place relative output paths under output_dir."""
        path = Path(path)
        return path if path.is_absolute() else self.output_dir / path

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            log_level=os.getenv("INFRA_PLANNER_LOG_LEVEL", "WARNING"),
            no_color=bool(os.getenv("INFRA_PLANNER_NO_COLOR") or os.getenv("NO_COLOR")),
            output_dir=Path(os.getenv("INFRA_PLANNER_OUTPUT_DIR", "output")),
        )
