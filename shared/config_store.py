"""Per-tool JSON configuration for the academy's student tools.

Each tool keeps one JSON file in data/config/ named after the tool
(e.g. "enrolment.json"). Callers always pass a fallback, so a missing or
unreadable file simply means "use the defaults".
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

CONFIG_DIR = Path(__file__).resolve().parent.parent / "data" / "config"


def _config_path(tool_name: str) -> Path:
    if not tool_name or "/" in tool_name or "\\" in tool_name:
        raise ValueError(f"Invalid tool name: {tool_name!r}")
    return CONFIG_DIR / f"{tool_name}.json"


def load_config(tool_name: str) -> dict | None:
    """The tool's settings, or None when there is no usable JSON object on disk."""
    path = _config_path(tool_name)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


def save_config(tool_name: str, config: dict) -> None:
    path = _config_path(tool_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8")


def get_config_value(tool_name: str, key: str, default: Any) -> Any:
    return (load_config(tool_name) or {}).get(key, default)


def update_config(tool_name: str, values: dict[str, Any]) -> dict:
    """Merge *values* over the stored settings, save, and return the result."""
    config = {**(load_config(tool_name) or {}), **values}
    save_config(tool_name, config)
    return config


def set_config_value(tool_name: str, key: str, value: Any) -> None:
    update_config(tool_name, {key: value})
