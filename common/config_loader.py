from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
import yaml

DEFAULT_CONFIG_PATH = "config/portfolio.yaml"
DEFAULT_DATA_PATH = "data/portfolio.txt"

def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

@dataclass(frozen=True)
class LoadedConfig:
    raw: Dict[str, Any]

    @property
    def fees(self) -> Dict[str, Any]:
        return self.raw.get("fees") or {}

    @property
    def data_path(self) -> str:
        return str((self.raw.get("storage") or {}).get("path", DEFAULT_DATA_PATH))

def load_settings(path: str | Path = DEFAULT_CONFIG_PATH) -> LoadedConfig:
    """Load settings, falling back to built-in defaults when the file is missing."""
    try:
        return LoadedConfig(raw=load_yaml(path))
    except FileNotFoundError:
        return LoadedConfig(raw={})
