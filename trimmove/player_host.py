import os
import logging
from pathlib import Path
from typing import Protocol

from . import config_settings

logger = logging.getLogger(__name__)


class PlayerHost(Protocol):
    """What the workflow needs from the media player."""

    def current_uri(self) -> str: ...

    def position_microseconds(self) -> int: ...

    def advance(self) -> None: ...

    def is_playing(self) -> bool: ...

    def pause(self) -> None: ...


class DirectoryPlaylist:
    """A playlist made of the video files in one directory, sorted by name.

    The panel uses it as the player: the position is whatever the operator
    scrubbed to, and advance() steps to the next file. Stepping past the last
    file leaves no current item.
    """

    def __init__(self, directory, extensions=config_settings.VIDEO_EXTENSIONS):
        self.directory = os.path.normpath(directory)
        self.extensions = tuple(e.lower() for e in extensions)
        self.items = []
        self.index = -1
        self.position_us = 0
        self.paused = False
        self.refresh()

    def refresh(self, preserve_selection=True):
        current = self.current_name() if preserve_selection else None
        at_end = preserve_selection and bool(self.items) and self.index >= len(self.items)
        try:
            names = os.listdir(self.directory)
        except OSError as e:
            logger.warning("Cannot list video directory", extra={"event": "playlist_list_failed", "context": {"path": self.directory, "error": str(e)}})
            names = []
        self.items = sorted(n for n in names if n.lower().endswith(self.extensions) and os.path.isfile(os.path.join(self.directory, n)))
        if current in self.items: self.index = self.items.index(current)
        elif at_end: self.index = len(self.items)
        else: self.index = 0 if self.items else -1

    def current_name(self):
        return self.items[self.index] if 0 <= self.index < len(self.items) else None

    def current_path(self):
        name = self.current_name()
        return os.path.join(self.directory, name) if name else ""

    def select(self, name):
        if name not in self.items: return False
        self.index = self.items.index(name); self.position_us = 0; self.paused = False
        return True

    def set_position(self, seconds):
        self.position_us = max(0, int(round(seconds * 1_000_000)))

    def current_uri(self):
        path = self.current_path()
        return Path(os.path.abspath(path)).as_uri() if path else ""

    def position_microseconds(self):
        return self.position_us if self.current_name() else 0

    def advance(self):
        self.position_us = 0; self.paused = False
        if self.index < 0: return
        self.index += 1
        if self.index >= len(self.items):
            logger.info("Reached end of playlist", extra={"event": "playlist_end", "context": {"path": self.directory}})
            self.index = len(self.items)

    def is_playing(self):
        return self.current_name() is not None and not self.paused

    def pause(self):
        self.paused = True
