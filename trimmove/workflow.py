"""Trim and move workflows for the video currently loaded in the player."""

import os
import functools
import logging
from typing import List, Optional

from . import config_settings, ffmpeg_utils
from .config_settings import folder_config_from_raw
from .errors import InputValidationError, InvalidTimeFormatError, NoActiveVideoError, StartNotBeforeEndError
from .history import HistoryLog
from .models import MoveEntry, OperationStatus, PendingMove, QueuedTrim, TrimEntry, TrimRequest
from .mover import MoveScheduler
from .naming import build_output_name, unique_output_path
from .utils import format_time_code, from_raw_position, parse_time_code, uri_to_path

logger = logging.getLogger(__name__)


def _to_seconds(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value < 0: raise InvalidTimeFormatError(f"Negative time: {value}")
        return float(value)
    return parse_time_code(value)


def has_failure(result):
    """True when a workflow result (status, history entry or list of entries) reports a failure."""
    if isinstance(result, (list, tuple)): return any(has_failure(r) for r in result)
    if isinstance(result, OperationStatus): return result == OperationStatus.FAILED
    return getattr(result, "status", None) == OperationStatus.FAILED


class TrimSession:
    """Session state for one operator: the loaded video, its history and the pending move.

    All mutation goes through these methods. Callers that run them off the UI
    thread must serialize the calls (the panel uses a single worker).
    """

    def __init__(self, host, folders=None, pattern=config_settings.DEFAULT_TIMESTAMP_PATTERN,
                 smart_naming=True, executor=None, scheduler=None, ffmpeg_path="ffmpeg"):
        self.host = host
        self.folders = folder_config_from_raw(folders if folders is not None else config_settings.DEFAULT_FOLDERS)
        self.pattern = pattern
        self.smart_naming = smart_naming
        self.executor = executor or functools.partial(ffmpeg_utils.cut, ffmpeg_path=ffmpeg_path)
        self.scheduler = scheduler or MoveScheduler()
        self.history = HistoryLog()
        self.trim_queue: List[QueuedTrim] = []
        self.video_path = ""
        self.video_dir = ""
        self.output_directory = ""
        self.last_move: Optional[MoveEntry] = None
        self.status = "Ready. Load a video and set trim points."
        self.load_current_video()

    # ---------------- video identity ----------------
    def load_current_video(self):
        path = uri_to_path(self.host.current_uri()) if self.host is not None else ""
        if path != self.video_path:
            self._reset_video(path)
        return self.video_path

    on_input_changed = load_current_video

    def _reset_video(self, path):
        self.video_path = path
        self.video_dir = os.path.dirname(path) if path else ""
        self.output_directory = self.video_dir
        self.history.clear()
        self.trim_queue.clear()
        if path:
            logger.info("Video loaded", extra={"event": "video_loaded", "context": {"path": path}})
            self._set_status(f"Video loaded: {os.path.basename(path)}")
        else:
            self._set_status("No video loaded")

    def set_output_directory(self, directory):
        self.output_directory = os.path.normpath(directory)

    def _set_status(self, message):
        self.status = message
        logger.info(message, extra={"event": "status"})

    # ---------------- validation ----------------
    def _require_video(self):
        self.load_current_video()
        if not self.video_path:
            raise NoActiveVideoError("No video loaded")
        if not os.path.isfile(self.video_path):
            raise NoActiveVideoError(f"Video file not found: {self.video_path}")
        return self.video_path

    def validate(self, start, end) -> TrimRequest:
        start_s, end_s = _to_seconds(start), _to_seconds(end)
        if start_s >= end_s:
            raise StartNotBeforeEndError("Start time must be before end time")
        return TrimRequest(self._require_video(), start_s, end_s)

    def resolve_folder(self, slot_index=None):
        """Directory for a folder slot. Slot 0 (empty path) is the video's own directory; None is the default output directory."""
        if not self.video_dir:
            raise NoActiveVideoError("No video loaded")
        if slot_index is None:
            return self.output_directory or self.video_dir
        if not 0 <= slot_index < len(self.folders):
            raise InputValidationError(f"No folder slot {slot_index}")
        rel = self.folders[slot_index].relative_path
        return os.path.join(self.video_dir, rel) if rel else self.video_dir

    # ---------------- trims ----------------
    def output_path_for(self, request, dest_dir):
        name = build_output_name(os.path.basename(request.source_path), request.start, self.pattern, self.smart_naming)
        return unique_output_path(os.path.join(dest_dir, name))

    def _cut(self, request, dest_dir) -> TrimEntry:
        output = self.output_path_for(request, dest_dir)
        if not os.path.isdir(dest_dir):
            status, detail = OperationStatus.FAILED, "destination folder does not exist"
        else:
            status = self.executor(request.source_path, request.start, request.end, output)
            detail = "" if status == OperationStatus.COMPLETED else "ffmpeg failed"
        entry = self.history.append_trim(request.start, request.end, output, status, detail)
        if status == OperationStatus.COMPLETED:
            self._set_status(f"Done! Trimmed: {os.path.basename(output)}")
        else:
            self._set_status(f"Trim failed ({detail}): {os.path.basename(output)}")
        return entry

    def trim_into_folder(self, start, end, slot_index=None) -> TrimEntry:
        request = self.validate(start, end)
        return self._cut(request, self.resolve_folder(slot_index))

    def queue_trim(self, start, end) -> QueuedTrim:
        request = self.validate(start, end)
        item = QueuedTrim(request.start, request.end)
        self.trim_queue.append(item)
        self._set_status(f"Added trim: {format_time_code(item.start)} to {format_time_code(item.end)}")
        return item

    def clear_queue(self):
        self.trim_queue.clear()
        self._set_status("Queue cleared")

    def execute_queue(self, slot_index=None) -> List[TrimEntry]:
        """Cut every queued range in order. Completed items leave the queue, failed ones stay for a retry."""
        if not self.trim_queue:
            raise InputValidationError("No trims in queue")
        source = self._require_video()
        dest_dir = self.resolve_folder(slot_index)
        entries = []
        for item in self.trim_queue:
            item.status = "Processing..."
            entry = self._cut(TrimRequest(source, item.start, item.end), dest_dir)
            item.status = entry.status.value
            entries.append(entry)
        self.trim_queue = [q for q in self.trim_queue if q.status != OperationStatus.COMPLETED.value]
        done = sum(1 for e in entries if e.status == OperationStatus.COMPLETED)
        self._set_status(f"All trims processed! Created {done} of {len(entries)} file(s)")
        return entries

    # ---------------- move & advance ----------------
    def request_move(self, slot_index) -> PendingMove:
        source = self._require_video()
        dest_dir = self.resolve_folder(slot_index)
        label = self.folders[slot_index].label if slot_index is not None else "Output folder"
        pending = PendingMove(source, os.path.join(dest_dir, os.path.basename(source)), label)
        self.scheduler.request(pending)
        self._set_status(f"Will move {os.path.basename(source)} to {pending.folder_label} after advancing")
        return pending

    def advance_and_execute(self) -> Optional[MoveEntry]:
        self.scheduler.begin_advance()
        try:
            self.host.advance()
        except Exception:  # noqa: BLE001 - the player is external, the move must still run
            logger.exception("Advance to next item failed", extra={"event": "advance_failed"})
        outcome = self.scheduler.execute()
        entry = None
        if outcome is not None:
            p = outcome.pending
            entry = self.history.append_move(p.source_path, p.dest_path, p.folder_label, outcome.status, outcome.detail)
            self.last_move = entry
        self._reset_video(uri_to_path(self.host.current_uri()))
        if entry is not None:
            if entry.status == OperationStatus.COMPLETED:
                self._set_status(f"Moved {os.path.basename(entry.source_path)} to {entry.folder_label}")
            else:
                self._set_status(f"Move failed ({entry.detail}): {os.path.basename(entry.source_path)}")
        return entry

    def move_original_and_advance(self, slot_index) -> Optional[MoveEntry]:
        self.request_move(slot_index)
        return self.advance_and_execute()

    # ---------------- playback / closing ----------------
    def capture_position(self):
        return format_time_code(from_raw_position(self.host.position_microseconds()))

    def _pause_playback(self):
        if self.host is not None and self.host.is_playing():
            self.host.pause()

    def close_and_delete(self) -> Optional[OperationStatus]:
        """Delete the original, only once at least one trim of it has completed.

        Returns None when the original is kept, otherwise whether the delete
        worked. Playback is paused either way.
        """
        self._pause_playback()
        if not self.video_path or not self.history.completed_trims():
            self._set_status("Original kept: no completed trims")
            return None
        try:
            os.remove(self.video_path)
        except OSError as e:
            logger.warning("Could not delete original", extra={"event": "delete_failed", "context": {"path": self.video_path, "error": str(e)}})
            self._set_status(f"FAILED to delete original: {e}")
            return OperationStatus.FAILED
        logger.info("Deleted original", extra={"event": "original_deleted", "context": {"path": self.video_path}})
        self._set_status("Original video deleted")
        return OperationStatus.COMPLETED

    def close_and_keep(self):
        self._pause_playback()
        self._set_status("Closing - original video kept")
        return True
