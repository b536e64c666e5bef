# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Called as `observer(subject, state)` while a thread is blocked in `CompletionSignal.wait`.
WaitObserver = Callable[[str, Optional[str]], None]


class LoggingWaitObserver:
    """A WaitObserver that logs which subject is still being waited on, and its state."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def __call__(self, subject: str, state: str | None) -> None:
        logger.log(self._level, f"waiting for {subject} [state: {state}]")


class CompletionSignal:
    """A one-shot completion flag with any number of waiters.

    Callbacks registered with `await_completion` fire exactly once each: immediately if the signal
    is already complete, otherwise in the thread that calls `mark_complete`. Registration and
    completion are serialized, so a waiter racing with `mark_complete` is neither lost nor fired
    twice. Threads may also block in `wait`.

    Only the producer side (whoever drives resolution of the subject) should call `set_state` and
    `mark_complete`.
    """

    def __init__(self, subject: object = None) -> None:
        self._subject = subject
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._callbacks: list[Callable[[], None]] = []
        self._state: str | None = None

    @property
    def complete(self) -> bool:
        return self._event.is_set()

    @property
    def state(self) -> str | None:
        return self._state

    def set_state(self, state: str) -> None:
        self._state = state

    def mark_complete(self) -> None:
        """Complete the signal and fire every registered waiter.

        A waiter that raises does not stop the others from firing; the first such error is
        re-raised once all waiters have run.
        """
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        # Run outside the lock so a callback may register further waiters without deadlocking.
        errors: list[Exception] = []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.exception(f"Completion waiter for {self._subject} failed")
                errors.append(e)
        if errors:
            raise errors[0]

    def await_completion(self, on_done: Callable[[], None] | None = None) -> None:
        if on_done is None:
            return
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(on_done)
                return
        on_done()

    def wait(
        self,
        timeout: float | None = None,
        *,
        observer: WaitObserver | None = None,
        report_interval: float = 1.0,
    ) -> bool:
        """Block until complete, or until `timeout` seconds have passed.

        If an observer is given, it is invoked every `report_interval` seconds spent waiting.

        :returns: Whether the signal completed.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            interval = report_interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return self._event.is_set()
                interval = min(interval, remaining)
            if self._event.wait(interval):
                return True
            if observer is not None:
                observer(str(self._subject), self._state)
