"""Off-thread roster saves.

A single worker thread performs every write, so saves of the same file are
applied in submission order and never interleave. The roster is copied at
submission time; a save always reflects the full roster as it was then.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Iterable, List, Set

from ..models import PlayerEntity
from .roster_codec import RosterCodec

logger = logging.getLogger(__name__)

__all__ = ["BackgroundSaver"]


class BackgroundSaver:
    def __init__(self, codec: RosterCodec):
        self.codec = codec
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="roster-save")
        self._lock = Lock()
        self._pending: Set[Future] = set()
        self._closed = False

    def submit(self, filename: str, roster: Iterable[PlayerEntity]) -> Future:
        snapshot: List[PlayerEntity] = [player.copy() for player in roster]
        with self._lock:
            if self._closed:
                raise RuntimeError("BackgroundSaver is shut down")
            future = self._executor.submit(self._write, filename, snapshot)
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def flush(self, timeout: float | None = None) -> bool:
        """Block until queued saves finish. Returns False on timeout."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)

    # Internal helpers ----------------------------------------------
    def _write(self, filename: str, snapshot: List[PlayerEntity]) -> bool:
        ok = self.codec.save(snapshot, filename)
        if not ok:
            logger.warning("Background save of %s failed; will retry on next change", filename)
        return ok

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
