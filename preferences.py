"""Loading and saving of the user preferences file."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from clipboard_watcher import MAX_TEXT_LENGTH, POLL_INTERVAL
from connectivity import PROBE_HOST
from translation_service import REQUEST_TIMEOUT
from translation_state import DEFAULT_TARGET_LANGUAGE, HISTORY_SIZE, is_supported_language

PREFERENCES_FILE = Path.home() / ".cliptranslator_preferences.json"


@dataclass
class Preferences:
    target_language: str = DEFAULT_TARGET_LANGUAGE
    auto_copy: bool = False
    poll_interval: float = POLL_INTERVAL
    max_text_length: int = MAX_TEXT_LENGTH
    history_size: int = HISTORY_SIZE
    request_timeout: float = REQUEST_TIMEOUT
    connectivity_host: str = PROBE_HOST


def _read_preferences_file(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def _positive_number(value: object) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value > 0 else None


def _positive_int(value: object) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= 1 else None


def load_preferences(path: Path = PREFERENCES_FILE) -> Preferences:
    """Read ``path``, keeping defaults for anything missing or invalid."""

    data = _read_preferences_file(path)
    result = Preferences()

    target = data.get("target_language")
    if isinstance(target, str) and is_supported_language(target):
        result.target_language = target

    auto_copy = data.get("auto_copy")
    if isinstance(auto_copy, bool):
        result.auto_copy = auto_copy

    poll_interval = _positive_number(data.get("poll_interval"))
    if poll_interval is not None:
        result.poll_interval = poll_interval

    request_timeout = _positive_number(data.get("request_timeout"))
    if request_timeout is not None:
        result.request_timeout = request_timeout

    max_text_length = _positive_int(data.get("max_text_length"))
    if max_text_length is not None:
        result.max_text_length = max_text_length

    history_size = _positive_int(data.get("history_size"))
    if history_size is not None:
        result.history_size = history_size

    host = data.get("connectivity_host")
    if isinstance(host, str) and host.strip():
        result.connectivity_host = host.strip()

    return result


def save_target_language(language: str, path: Path = PREFERENCES_FILE) -> None:
    data = _read_preferences_file(path)
    data["target_language"] = language
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError:
        pass
