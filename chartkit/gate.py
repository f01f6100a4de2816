"""Process-wide admission control for charting toolkits.

Every toolkit holds exactly one slot from an ``AdmissionGate`` for as long as
it is alive. The gate is explicit shared state: create one at process start
and hand it to each toolkit constructor, so the dependency stays visible and
tests can use their own gate.

Key properties:
- ``acquire`` never waits. It grants a slot or raises ``CapacityExceeded``
  without touching the count.
- A slot is returned exactly once. Slots tied to an owner are also returned
  when the owner is garbage collected (``weakref.finalize`` runs at most once),
  so a forgotten ``close()`` cannot leak capacity.
- The internal lock is the only serialization point; callers never
  read-modify-write the count themselves.

Usage pattern:
    gate = AdmissionGate(limit=3)

    with gate.slot():
        ...  # one unit of capacity held here

    # or wait politely for a slot
    slot = gate.acquire_with_retry(attempts=10, wait_seconds=0.1)
    slot.release()
"""

from __future__ import annotations

import itertools
import threading
import weakref
from collections import deque
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from .config import Config
from .errors import CapacityExceeded, SlotReleasedError
from .logging_utils import log_debug, log_warning


class GateSlot:
    """Capability token proving one unit of gate capacity is held.

    Slots are only created by ``AdmissionGate.acquire``. ``release()`` hands
    the capacity back; doing it a second time raises ``SlotReleasedError``.
    """

    __slots__ = ("_gate", "_token", "_finalizer", "__weakref__")

    def __init__(self, gate: "AdmissionGate", token: int, owner: Any = None):
        self._gate = gate
        self._token = token
        # finalize() fires at most once: either on explicit release or when the
        # owner is collected, whichever comes first.
        target = owner if owner is not None else self
        self._finalizer = weakref.finalize(target, gate._reclaim, token)
        self._finalizer.atexit = False

    @property
    def gate(self) -> "AdmissionGate":
        return self._gate

    @property
    def token(self) -> int:
        return self._token

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    def release(self) -> None:
        """Return this slot's capacity to its gate."""
        self._gate.release(self)

    def __repr__(self) -> str:
        state = "released" if self.released else "held"
        return f"GateSlot(token={self._token}, {state})"


class AdmissionGate:
    """Counting gate capping how many toolkits may be alive at once.

    The limit is shared by every toolkit kind on every thread that uses this
    gate. ``current_count()`` is advisory only: under concurrency it may be
    stale the moment it returns.
    """

    def __init__(self, limit: Optional[int] = None):
        limit = Config.MAX_TOOLS if limit is None else limit
        if limit < 1:
            raise ValueError("AdmissionGate limit must be at least 1")
        self._limit = limit
        self._lock = threading.Lock()
        self._outstanding: set[int] = set()
        self._tokens = itertools.count(1)
        # Tokens of slots whose owner was collected. Appended by finalizers without
        # taking the lock (the collector may run while this thread holds it) and
        # drained by every locked section.
        self._reclaimed: deque[int] = deque()

    @property
    def limit(self) -> int:
        return self._limit

    def current_count(self) -> int:
        """Number of slots currently held."""
        with self._lock:
            self._drain_reclaimed()
            return len(self._outstanding)

    def available(self) -> int:
        """Number of slots that could be granted right now."""
        with self._lock:
            self._drain_reclaimed()
            return self._limit - len(self._outstanding)

    def acquire(self, owner: Any = None) -> GateSlot:
        """Grant a slot or raise ``CapacityExceeded`` immediately.

        When ``owner`` is given, the slot is also returned if the owner is
        garbage collected without releasing it.
        """
        with self._lock:
            self._drain_reclaimed()
            outstanding = len(self._outstanding)
            if outstanding >= self._limit:
                refused = CapacityExceeded(self._limit, outstanding)
            else:
                refused = None
                token = next(self._tokens)
                self._outstanding.add(token)

        if refused is not None:
            log_warning(f"[Gate] Refused slot: {refused.outstanding}/{refused.limit} in use")
            raise refused

        try:
            slot = GateSlot(self, token, owner)
        except TypeError:
            # owner cannot be weakly referenced; nothing was granted
            self._return_token(token)
            raise
        log_debug(f"[Gate] Granted slot #{token}")
        return slot

    def release(self, slot: GateSlot) -> None:
        """Return ``slot``'s capacity. A slot can be released only once."""
        if slot.gate is not self:
            raise SlotReleasedError(f"{slot!r} was not issued by this gate")
        # Detaching the finalizer is atomic, so two racing release() calls
        # cannot both return the same token.
        detached = slot._finalizer.detach()
        if detached is None:
            raise SlotReleasedError(f"Slot #{slot.token} was already released")
        self._return_token(slot.token)

    def _return_token(self, token: int) -> None:
        with self._lock:
            self._drain_reclaimed()
            self._outstanding.discard(token)
        log_debug(f"[Gate] Returned slot #{token}")

    def _reclaim(self, token: int) -> None:
        self._reclaimed.append(token)

    def _drain_reclaimed(self) -> None:
        # Caller holds self._lock.
        while self._reclaimed:
            self._outstanding.discard(self._reclaimed.popleft())

    @contextmanager
    def slot(self, owner: Any = None) -> Iterator[GateSlot]:
        """Hold a slot for the duration of a ``with`` block."""
        held = self.acquire(owner)
        try:
            yield held
        finally:
            if not held.released:
                held.release()

    def acquire_with_retry(
        self,
        owner: Any = None,
        *,
        attempts: Optional[int] = None,
        wait_seconds: Optional[float] = None,
    ) -> GateSlot:
        """Acquire a slot, retrying on ``CapacityExceeded`` with a fixed wait.

        Only capacity refusals are retried. After the last attempt the final
        ``CapacityExceeded`` propagates to the caller.
        """
        attempts = Config.ACQUIRE_ATTEMPTS if attempts is None else attempts
        wait_seconds = Config.ACQUIRE_WAIT_SECONDS if wait_seconds is None else wait_seconds

        for attempt in Retrying(
            retry=retry_if_exception_type(CapacityExceeded),
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(wait_seconds),
            reraise=True,
        ):
            with attempt:
                return self.acquire(owner)

        # Retrying with reraise=True always exits via return or raise.
        raise RuntimeError("Gate retry loop exited unexpectedly")

    def __repr__(self) -> str:
        return f"AdmissionGate(limit={self._limit}, outstanding={self.current_count()})"
