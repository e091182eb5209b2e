import os
from typing import Iterator, List

from .models import HistoryEntry, MoveEntry, OperationStatus, TrimEntry
from .utils import format_time_code


class HistoryLog:
    """Append-only record of trims and moves for the currently loaded video. In memory only."""

    def __init__(self):
        self._entries: List[HistoryEntry] = []

    def append_trim(self, start, end, output_path, status, detail="") -> TrimEntry:
        entry = TrimEntry(start, end, output_path, status, detail)
        self._entries.append(entry)
        return entry

    def append_move(self, source_path, dest_path, folder_label, status, detail="") -> MoveEntry:
        entry = MoveEntry(source_path, dest_path, folder_label, status, detail)
        self._entries.append(entry)
        return entry

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def completed_trims(self) -> List[TrimEntry]:
        return [e for e in self._entries if isinstance(e, TrimEntry) and e.status == OperationStatus.COMPLETED]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def format_lines(self) -> List[str]:
        lines = []
        for i, e in enumerate(self._entries, 1):
            if isinstance(e, TrimEntry):
                lines.append(f"{i}. Trim {format_time_code(e.start)} -> {format_time_code(e.end)}  {os.path.basename(e.output_path)} [{e.status.value}]")
            else:
                lines.append(f"{i}. Move {os.path.basename(e.source_path)} -> {e.folder_label} [{e.status.value}]")
        return lines
