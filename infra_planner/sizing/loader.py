"""
Sizing configuration files.

YAML (.yaml/.yml) and JSON documents using the SizingConfig field names.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .models import SizingConfig


def read_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML or JSON mapping from disk."""
    path = Path(path)
    with open(path, "r") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(data).__name__}")
    return data


def load_sizing_config(path: Union[str, Path]) -> SizingConfig:
    """Load a SizingConfig from a YAML or JSON file."""
    return SizingConfig.from_dict(read_document(path))


def save_sizing_config(config: SizingConfig, path: Union[str, Path]) -> None:
    path = Path(path)
    with open(path, "w") as f:
        if path.suffix.lower() == ".json":
            json.dump(config.to_dict(), f, indent=2)
        else:
            yaml.safe_dump(config.to_dict(), f, sort_keys=False)
