from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class ScanTimer(Protocol):
    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], ScanTimer]


class RepeatingTimer:
    """Calls ``callback`` every ``interval`` seconds on a daemon thread.

    Ticks never overlap: the next wait starts only after the callback returns.
    """

    def __init__(self, interval: float, callback: Callable[[], None], *, name: str = "auto-scan"):
        self._interval = float(interval)
        self._callback = callback
        self._name = name
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Auto-scan tick failed")
