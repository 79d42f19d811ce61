from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from models.settings import EngineSettings


logger = logging.getLogger(__name__)

USER_SETTINGS_PATH = Path.home() / ".config" / "utsu_engine" / "settings.yaml"


def _safe_load(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        logger.exception("Failed to read settings from %s", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a mapping", path)
        return {}
    return data


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """Built-in defaults overlaid with the user's YAML file."""
    user_path = Path(path) if path else USER_SETTINGS_PATH
    merged = _deep_merge(EngineSettings().to_dict(), _safe_load(user_path))
    settings = EngineSettings.from_dict(merged)
    if settings.min_tempo > settings.max_tempo:
        logger.warning("min_tempo > max_tempo in %s, using defaults", user_path)
        defaults = EngineSettings()
        settings.min_tempo = defaults.min_tempo
        settings.max_tempo = defaults.max_tempo
    return settings


def save_settings(settings: EngineSettings, path: Optional[Path] = None) -> Path:
    """Writes only the values that differ from the defaults."""
    user_path = Path(path) if path else USER_SETTINGS_PATH
    defaults = EngineSettings().to_dict()
    changed = {k: v for k, v in settings.to_dict().items() if defaults.get(k) != v}
    user_path.parent.mkdir(parents=True, exist_ok=True)
    user_path.write_text(yaml.safe_dump(changed, allow_unicode=True, sort_keys=False), encoding="utf-8")
    return user_path
