"""JSON-based settings persistence for the week planner."""

import json
import logging
import os

from layout import GridMetrics

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".week-planner-settings.json")

_DEFAULTS = {
    "window_width": None,
    "window_height": None,
    "first_hour": 6,
    "hour_count": 16,
    "hour_height": 60,
    "header_height": 20,
    "events_path": os.path.join(os.path.expanduser("~"), ".week-planner-events.json"),
    "event_types": ["Massage", "Spa", "Sauna", "Yoga", "Other"],
    "log_level": "INFO",
}

_INT_KEYS = ("window_width", "window_height", "first_hour", "hour_count",
             "hour_height", "header_height")


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    path = path or _SETTINGS_PATH
    settings = json.loads(json.dumps(_DEFAULTS))
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", path)
        return settings

    for key in _INT_KEYS:
        # bool is an int subclass; reject it explicitly
        if isinstance(stored.get(key), int) and not isinstance(stored[key], bool):
            settings[key] = stored[key]
    if isinstance(stored.get("events_path"), str) and stored["events_path"]:
        settings["events_path"] = os.path.expanduser(stored["events_path"])
    if isinstance(stored.get("event_types"), list):
        types = [t for t in stored["event_types"] if isinstance(t, str) and t]
        if types:
            settings["event_types"] = types
    if isinstance(stored.get("log_level"), str):
        settings["log_level"] = stored["log_level"].upper()
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    path = path or _SETTINGS_PATH
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)


def grid_metrics_from_settings(settings: dict) -> GridMetrics:
    """Build the shared grid geometry; invalid values fall back to defaults."""
    try:
        return GridMetrics(
            first_hour=settings["first_hour"],
            hour_count=settings["hour_count"],
            hour_height=settings["hour_height"],
            header_height=settings["header_height"],
        )
    except (KeyError, ValueError) as exc:
        logger.warning("Invalid grid settings (%s); using defaults", exc)
        return GridMetrics()
