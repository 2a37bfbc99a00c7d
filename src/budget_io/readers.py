"""
Budget Template Readers

YAML and JSON configuration file parsing.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml

from budget_engine.models import TemplateConfig


def parse_config_dict(data: Optional[dict[str, Any]]) -> TemplateConfig:
    """
    Parse a dictionary of settings into a TemplateConfig.

    This is the core parsing function used by both YAML and JSON readers.
    An empty document yields the default configuration.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

    # Accept a nested "years: {start: .., end: ..}" block as well as flat keys.
    data = dict(data)
    years = data.pop("years", None)
    if years is not None and not isinstance(years, dict):
        raise ValueError("years must be a mapping with start/end")
    if isinstance(years, dict):
        data.setdefault("start_year", years.get("start"))
        data.setdefault("end_year", years.get("end"))
        data = {k: v for k, v in data.items() if v is not None}

    return TemplateConfig.model_validate(data)


def read_yaml(path: str | Path) -> TemplateConfig:
    """
    Read a template configuration from a YAML file.

    Args:
        path: Path to YAML file

    Returns:
        TemplateConfig model
    """
    path = Path(path)
    with open(path, "r") as f:
        data = yaml.safe_load(f)

    return parse_config_dict(data)


def read_json(path: str | Path) -> TemplateConfig:
    """
    Read a template configuration from a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        TemplateConfig model
    """
    path = Path(path)
    with open(path, "r") as f:
        data = json.load(f)

    return parse_config_dict(data)


def read_config_file(path: str | Path) -> TemplateConfig:
    """
    Read a template configuration from a file (auto-detects format).

    Args:
        path: Path to configuration file (YAML or JSON)

    Returns:
        TemplateConfig model
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return read_yaml(path)
    elif suffix == ".json":
        return read_json(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")


def dump_config_yaml(config: TemplateConfig, path: str | Path) -> Path:
    """Write a configuration as YAML, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    return path
