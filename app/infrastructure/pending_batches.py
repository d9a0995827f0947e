"""In-process storage for meal batches awaiting operator confirmation."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Callable

from app.domain.entities import PipelineState
from app.utils import now_in_app_timezone


class PendingBatchNotFoundError(LookupError):
    """Raised when a batch id is unknown, already submitted or expired."""


class PendingBatchStore:
    """Hold at most one transformed batch per operator until it is confirmed."""

    def __init__(
        self,
        *,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._batches: dict[str, PipelineState] = {}
        self._by_operator: dict[str, str] = {}
        self._expired: list[PipelineState] = []

    def stage(self, state: PipelineState) -> PipelineState | None:
        """Store ``state`` and return the batch it replaced for the same operator."""

        with self._lock:
            self._expire_locked()
            previous_id = self._by_operator.get(state.operator_id)
            previous = self._batches.pop(previous_id, None) if previous_id else None
            self._batches[state.batch_id] = state
            self._by_operator[state.operator_id] = state.batch_id
            return previous

    def get(self, batch_id: str) -> PipelineState:
        with self._lock:
            self._expire_locked()
            state = self._batches.get(batch_id)
            if state is None:
                raise PendingBatchNotFoundError(f"Batch {batch_id} is not pending review")
            return state

    def take(self, batch_id: str) -> PipelineState:
        """Remove and return the batch so it can be submitted exactly once."""

        with self._lock:
            self._expire_locked()
            return self._pop_locked(batch_id)

    def discard(self, batch_id: str) -> PipelineState:
        """Cancel the batch, keeping no partial state."""

        with self._lock:
            self._expire_locked()
            return self._pop_locked(batch_id)

    def drain_expired(self) -> list[PipelineState]:
        """Return and forget the batches that timed out since the last call."""

        with self._lock:
            self._expire_locked()
            expired, self._expired = self._expired, []
            return expired

    def clear(self) -> None:
        with self._lock:
            self._batches.clear()
            self._by_operator.clear()
            self._expired.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._batches)

    def _pop_locked(self, batch_id: str) -> PipelineState:
        state = self._batches.pop(batch_id, None)
        if state is None:
            raise PendingBatchNotFoundError(f"Batch {batch_id} is not pending review")
        if self._by_operator.get(state.operator_id) == batch_id:
            del self._by_operator[state.operator_id]
        return state

    def _expire_locked(self) -> None:
        if self._ttl is None:
            return
        cutoff = self._clock() - self._ttl
        expired = [
            batch_id
            for batch_id, state in self._batches.items()
            if state.created_at < cutoff
        ]
        for batch_id in expired:
            self._expired.append(self._pop_locked(batch_id))


__all__ = ["PendingBatchNotFoundError", "PendingBatchStore"]
