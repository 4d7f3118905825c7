from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from exact_sde.schemas import SDEOptions, SimulationConfig


def load_config(path: str | Path) -> SimulationConfig:
    """
    Load a SimulationConfig from YAML or JSON.

    Automatically validates using Pydantic v2.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    text = path.read_text()

    if path.suffix.lower() in {".yaml", ".yml"}:
        parse = yaml.safe_load
    elif path.suffix.lower() == ".json":
        parse = json.loads
    else:
        raise ValueError("Config path must be YAML or JSON.")

    try:
        raw = parse(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to parse config: {e}") from e

    try:
        return SimulationConfig.model_validate(raw or {})
    except ValidationError as e:
        raise ValueError(f"Invalid SimulationConfig: {e}") from e


def load_options(path: str | Path, **callables: Any) -> SDEOptions:
    """Load a config file and attach rand_fn / events_fn callables to it."""
    return load_config(path).to_options(**callables)
