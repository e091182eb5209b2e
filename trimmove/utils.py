import os
import re
import math
from urllib.parse import unquote
from .errors import InvalidTimeFormatError

TIME_CODE_RE = re.compile(r"^(\d+):(\d+):(\d+(?:\.\d+)?)$")
_WINDOWS_DRIVE_RE = re.compile(r"^/[A-Za-z]:")


def parse_time_code(text):
    """Parse ``H:M:S[.fff]`` into seconds. Anything else raises InvalidTimeFormatError."""
    match = TIME_CODE_RE.match(text.strip()) if isinstance(text, str) else None
    if not match:
        raise InvalidTimeFormatError(f"Invalid time format: {text!r}. Use HH:MM:SS.mmm")
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def format_time_code(seconds):
    if seconds is None or not isinstance(seconds, (int, float)) or seconds < 0 or math.isnan(seconds) or math.isinf(seconds):
        return "00:00:00.000"
    total_ms = int(round(seconds * 1000))
    total_s, millis = divmod(total_ms, 1000)
    hours, remainder = divmod(total_s, 3600)
    minutes, seconds_part = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds_part:02}.{millis:03}"


def from_raw_position(microseconds):
    if not microseconds or microseconds < 0: return 0.0
    return microseconds / 1_000_000


def uri_to_path(uri):
    """Decode a ``file://`` URI from the player into a local path. Other schemes have no local path."""
    if not uri: return ""
    if "://" not in uri: return uri
    if not uri.lower().startswith("file://"): return ""
    rest = uri[len("file://"):]
    if rest.lower().startswith("localhost/"): rest = rest[len("localhost"):]
    path = unquote(rest)
    if _WINDOWS_DRIVE_RE.match(path): path = path[1:]
    return path


def split_filename(name):
    """Return (stem, ext) of a bare filename; ext keeps its dot and is empty when there is none."""
    return os.path.splitext(os.path.basename(name))
