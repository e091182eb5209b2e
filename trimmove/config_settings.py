import os
import sys
import json
import logging
from .models import FolderSlot

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = ('.mp4', '.mov', '.avi', '.mkv', '.wmv', '.flv', '.ts', '.m4v')
TRIM_SUFFIX = "_trimmed"
JOIN_CHAR = "_"
FILENAME_INVALID_CHARS = r'/\:*?"<>|'
CONFIG_FILENAME = "trimmove_config.json"
STATUS_MESSAGE_CLEAR_DELAY_MS = 5000
FOLDER_SLOT_COUNT = 5

# date (8 digits), optional one-char separator, time (6 digits)
DEFAULT_TIMESTAMP_PATTERN = r"(?P<date>\d{8})(?P<sep>[_\-T .]?)(?P<time>\d{6})"

# grace before moving a file the player may still hold open, then bounded retries
MOVE_GRACE_SECONDS = 0.5
MOVE_RETRY_ATTEMPTS = 4
MOVE_RETRY_BACKOFF_SECONDS = 0.25

DEFAULT_FOLDERS = (
    FolderSlot("Same folder", ""),
    FolderSlot("Keep", "keep"),
    FolderSlot("Review", "review"),
    FolderSlot("Archive", "archive"),
    FolderSlot("Trash", "trash"),
)


def default_settings():
    return {
        "folders": [{"label": f.label, "path": f.relative_path} for f in DEFAULT_FOLDERS],
        "timestamp_pattern": DEFAULT_TIMESTAMP_PATTERN,
        "smart_naming": True,
        "ffmpeg_path": "ffmpeg",
        "last_input_directory": None,
    }


def config_path():
    return os.path.join(os.path.dirname(os.path.abspath(sys.argv[0])), CONFIG_FILENAME)


def folder_config_from_raw(raw):
    """Build the fixed five-slot folder list. Slot 0 always points at the source's own directory."""
    slots = []
    for item in list(raw or [])[:FOLDER_SLOT_COUNT]:
        if isinstance(item, FolderSlot):
            slots.append(item); continue
        if not isinstance(item, dict):
            # keep the slot position, later buttons must still map to their folders
            logger.warning("Malformed folder entry, using the default for this slot", extra={"event": "folder_entry_invalid", "context": {"slot": len(slots), "entry": repr(item)}})
            slots.append(DEFAULT_FOLDERS[len(slots)]); continue
        slots.append(FolderSlot(str(item.get("label", "")).strip(), str(item.get("path", "") or "").strip()))
    while len(slots) < FOLDER_SLOT_COUNT:
        slots.append(DEFAULT_FOLDERS[len(slots)])
    if slots[0].relative_path:
        logger.warning("Folder slot 0 must be the source directory; clearing its path",
                       extra={"event": "folder_slot0_coerced", "context": {"path": slots[0].relative_path}})
        slots[0] = FolderSlot(slots[0].label, "")
    return slots


def folder_config_to_raw(slots):
    return [{"label": s.label, "path": s.relative_path} for s in slots]


def load_settings(path=None):
    path = path or config_path()
    settings = default_settings()
    try:
        if os.path.exists(path):
            with open(path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
            if isinstance(loaded, dict): settings.update(loaded)
            else: logger.warning("Config root is not an object, using defaults", extra={"event": "config_invalid", "context": {"path": path}})
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Error loading config file", extra={"event": "config_load_failed", "context": {"path": path, "error": str(e)}})
    settings["folders"] = folder_config_from_raw(settings.get("folders"))
    if not isinstance(settings.get("timestamp_pattern"), str) or not settings["timestamp_pattern"]:
        settings["timestamp_pattern"] = DEFAULT_TIMESTAMP_PATTERN
    settings["smart_naming"] = _as_bool(settings.get("smart_naming"), True)
    return settings


def _as_bool(value, default):
    if isinstance(value, bool): return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("1", "true", "yes", "on"): return True
        if text in ("0", "false", "no", "off", ""): return False
    elif isinstance(value, (int, float)): return bool(value)
    logger.warning("Unrecognised boolean in config, using default", extra={"event": "config_bool_invalid", "context": {"value": repr(value), "default": default}})
    return default


def save_settings(settings, path=None):
    path = path or config_path()
    data = dict(settings)
    data["folders"] = folder_config_to_raw(folder_config_from_raw(settings.get("folders")))
    try:
        with open(path, 'w', encoding='utf-8') as f: json.dump(data, f, indent=4)
    except OSError as e:
        logger.warning("Could not save config", extra={"event": "config_save_failed", "context": {"path": path, "error": str(e)}})
        return False
    return True


def folder_entry_error(label, path):
    """Validation message for one folder slot as typed by the operator, or "" when it is fine."""
    if not label.strip(): return "Every folder needs a label"
    if any(char in FILENAME_INVALID_CHARS.replace('/', '').replace('\\', '') for char in path):
        return f"Invalid chars in folder (e.g., {FILENAME_INVALID_CHARS[2]})"
    return ""
