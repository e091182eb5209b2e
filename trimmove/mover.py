import enum
import os
import time
import shutil
import logging
from typing import Callable, Optional

from . import config_settings
from .models import MoveOutcome, OperationStatus, PendingMove

logger = logging.getLogger(__name__)


class MoveState(str, enum.Enum):
    IDLE = "idle"
    MOVE_REQUESTED = "move_requested"
    ADVANCING = "advancing"
    MOVE_EXECUTED = "move_executed"


class MoveScheduler:
    """Holds at most one deferred move of the playing file and runs it after the player advances.

    The player may still hold the file open right after "next", so execute()
    waits a short grace period and then retries the move with backoff instead
    of trusting a single fixed sleep.
    """

    def __init__(self, grace_seconds=config_settings.MOVE_GRACE_SECONDS,
                 retry_attempts=config_settings.MOVE_RETRY_ATTEMPTS,
                 backoff_seconds=config_settings.MOVE_RETRY_BACKOFF_SECONDS,
                 sleep: Callable[[float], None] = time.sleep):
        self.grace_seconds = grace_seconds
        self.retry_attempts = max(1, retry_attempts)
        self.backoff_seconds = backoff_seconds
        self.sleep = sleep
        self.state = MoveState.IDLE
        self._pending: Optional[PendingMove] = None

    @property
    def pending(self) -> Optional[PendingMove]:
        return self._pending

    def request(self, pending: PendingMove) -> None:
        if self._pending is not None:
            logger.info("Replacing unconsumed move request", extra={"event": "move_request_replaced", "context": {"old": self._pending.dest_path, "new": pending.dest_path}})
        self._pending = pending
        self.state = MoveState.MOVE_REQUESTED

    def begin_advance(self) -> None:
        if self._pending is not None:
            self.state = MoveState.ADVANCING

    def execute(self) -> Optional[MoveOutcome]:
        pending = self._pending
        if pending is None:
            return None
        try:
            if self.grace_seconds > 0: self.sleep(self.grace_seconds)
            outcome = self._move(pending)
            self.state = MoveState.MOVE_EXECUTED
        finally:
            self._pending = None
            self.state = MoveState.IDLE
        return outcome

    def _move(self, pending):
        src, dst = pending.source_path, pending.dest_path
        if os.path.abspath(src) == os.path.abspath(dst):
            return MoveOutcome(pending, OperationStatus.COMPLETED, "same location")
        if not os.path.isdir(os.path.dirname(os.path.abspath(dst))):
            return self._failed(pending, "destination folder does not exist")
        if os.path.exists(dst):
            return self._failed(pending, "destination exists")
        delay = self.backoff_seconds; last_error = ""
        for attempt in range(1, self.retry_attempts + 1):
            try:
                shutil.move(src, dst)
            except FileNotFoundError as e:
                return self._failed(pending, str(e))
            except OSError as e:
                last_error = str(e)
                logger.info("Move attempt failed", extra={"event": "move_retry", "context": {"attempt": attempt, "source": src, "error": last_error}})
                if attempt < self.retry_attempts:
                    self.sleep(delay); delay *= 2
                continue
            logger.info("Moved original", extra={"event": "move_completed", "context": {"source": src, "dest": dst}})
            return MoveOutcome(pending, OperationStatus.COMPLETED)
        return self._failed(pending, last_error)

    def _failed(self, pending, detail):
        logger.warning("Move failed", extra={"event": "move_failed", "context": {"source": pending.source_path, "dest": pending.dest_path, "error": detail}})
        return MoveOutcome(pending, OperationStatus.FAILED, detail)
