# Output naming for trimmed clips.
#
# A clip cut at offset N inside "dashcam_20241031_143022.mp4" really starts at
# 14:30:22 + N, so the embedded timestamp is moved forward instead of tagging
# the name with a generic suffix. Everything here is pure string/date logic.

import os
import re
import logging
import dataclasses
from datetime import datetime
from dateutil.relativedelta import relativedelta
from . import config_settings
from .models import FilenameTimestamp
from .utils import split_filename

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
_DATE_RE = re.compile(r"[0-9]{8}")
_TIME_RE = re.compile(r"[0-9]{6}")
# A run of exactly six digits with no digit on either side.
_TIME_ONLY_RE = re.compile(r"(?<![0-9])[0-9]{6}(?![0-9])")


def _compile_pattern(pattern):
    try:
        return re.compile(pattern)
    except (re.error, TypeError) as e:
        logger.debug("Timestamp pattern is not a valid regex", extra={"event": "pattern_invalid", "context": {"pattern": pattern, "error": str(e)}})
        return None


def _group_spans(match):
    # Named groups win; otherwise (date, sep, time) or (date, time) by position.
    names = match.re.groupindex
    if "date" in names and "time" in names:
        return match.span("date"), match.span("time")
    if match.re.groups >= 3:
        return match.span(1), match.span(3)
    if match.re.groups == 2:
        return match.span(1), match.span(2)
    return None


def _timestamp_from_match(base_name, match):
    spans = _group_spans(match)
    if not spans: return None
    (date_start, date_end), (time_start, time_end) = spans
    if date_start < 0 or time_start < 0 or date_end > time_start: return None
    date_part, time_part = base_name[date_start:date_end], base_name[time_start:time_end]
    if not _DATE_RE.fullmatch(date_part) or not _TIME_RE.fullmatch(time_part): return None
    if not _is_time_of_day(time_part): return None
    separator = base_name[date_end:time_start]
    if len(separator) > 1: return None
    return FilenameTimestamp(time_part=time_part, date_part=date_part, separator=separator or None,
                             prefix=base_name[:date_start], suffix=base_name[time_end:])


def _is_time_of_day(digits):
    return int(digits[0:2]) < 24 and int(digits[2:4]) < 60 and int(digits[4:6]) < 60


def parse_timestamp(base_name, pattern=config_settings.DEFAULT_TIMESTAMP_PATTERN):
    """Locate a date+time (or a bare time) inside an extension-stripped filename.

    Returns a FilenameTimestamp recording the text around the matched span, or
    None when nothing usable is found. A broken pattern is treated like a
    pattern that does not match.
    """
    regex = _compile_pattern(pattern)
    if regex is not None:
        for match in regex.finditer(base_name):
            ts = _timestamp_from_match(base_name, match)
            if ts is not None: return ts
    # Fallback: first isolated six-digit run that reads as a valid HHMMSS.
    # Other six-digit runs (sequence numbers, "999999") are skipped.
    for match in _TIME_ONLY_RE.finditer(base_name):
        if _is_time_of_day(match.group()):
            return FilenameTimestamp(time_part=match.group(), prefix=base_name[:match.start()], suffix=base_name[match.end():])
    logger.debug("No timestamp in filename", extra={"event": "timestamp_not_found", "context": {"name": base_name}})
    return None


def _shift_date(date_part, days):
    try:
        shifted = datetime.strptime(date_part, "%Y%m%d") + relativedelta(days=days)
    except (ValueError, OverflowError) as e:
        logger.warning("Cannot roll date, keeping it unchanged", extra={"event": "date_roll_failed", "context": {"date": date_part, "days": days, "error": str(e)}})
        return date_part
    return f"{shifted.year:04}{shifted.month:02}{shifted.day:02}"


def rewrite_timestamp(ts, offset_seconds):
    offset = int(offset_seconds)  # whole seconds, truncated toward zero
    hours, minutes, seconds = int(ts.time_part[0:2]), int(ts.time_part[2:4]), int(ts.time_part[4:6])
    day_delta, total = divmod(hours * 3600 + minutes * 60 + seconds + offset, SECONDS_PER_DAY)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    date_part = ts.date_part
    if date_part is not None and day_delta:
        date_part = _shift_date(date_part, day_delta)
    return dataclasses.replace(ts, date_part=date_part, time_part=f"{hours:02}{minutes:02}{seconds:02}")


def compose_filename(ts, extension=""):
    # The stamp begins and ends with a digit, so putting it back between
    # prefix and suffix never creates a run of joining characters or a
    # leading one. Whatever joiners the original name had are kept as is.
    if ts.date_part is None:
        stamp = ts.time_part
    else:
        stamp = ts.date_part + (ts.separator or config_settings.JOIN_CHAR) + ts.time_part
    return ts.prefix + stamp + ts.suffix + (extension or "")


def fallback_name(filename):
    stem, ext = split_filename(filename)
    return f"{stem}{config_settings.TRIM_SUFFIX}{ext}"


def build_output_name(filename, offset_seconds, pattern=config_settings.DEFAULT_TIMESTAMP_PATTERN, smart_naming=True):
    if not smart_naming:
        return fallback_name(filename)
    stem, ext = split_filename(filename)
    ts = parse_timestamp(stem, pattern)
    if ts is None:
        return fallback_name(filename)
    return compose_filename(rewrite_timestamp(ts, offset_seconds), ext)


def unique_output_path(path):
    if not os.path.exists(path): return path
    base, ext = os.path.splitext(path); counter = 1
    while os.path.exists(f"{base}_{counter}{ext}"): counter += 1
    return f"{base}_{counter}{ext}"
