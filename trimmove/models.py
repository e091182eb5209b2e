import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union


class OperationStatus(str, enum.Enum):
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass(frozen=True)
class TrimRequest:
    source_path: str
    start: float
    end: float


@dataclass(frozen=True)
class FilenameTimestamp:
    time_part: str
    date_part: Optional[str] = None
    separator: Optional[str] = None
    prefix: str = ""
    suffix: str = ""


@dataclass(frozen=True)
class FolderSlot:
    label: str
    relative_path: str = ""


@dataclass(frozen=True)
class TrimEntry:
    start: float
    end: float
    output_path: str
    status: OperationStatus
    detail: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class MoveEntry:
    source_path: str
    dest_path: str
    folder_label: str
    status: OperationStatus
    detail: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


HistoryEntry = Union[TrimEntry, MoveEntry]


@dataclass(frozen=True)
class PendingMove:
    source_path: str
    dest_path: str
    folder_label: str


@dataclass(frozen=True)
class MoveOutcome:
    pending: PendingMove
    status: OperationStatus
    detail: str = ""  # e.g. "destination exists", os error text


@dataclass
class QueuedTrim:
    start: float
    end: float
    status: str = "Queued"
