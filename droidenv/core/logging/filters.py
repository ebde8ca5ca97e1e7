# droidenv/core/logging/filters.py
from __future__ import annotations
import logging
import threading
import time
from collections import OrderedDict, deque
from dataclasses import dataclass, field

__all__ = ["RecurringSuppressFilter"]

# Upper bound for normalized message keys
MAX_KEY_LEN = 512

# (logger name, levelno, normalized message)
_Key = tuple[str, int, str]



@dataclass
class _Window:
    stamps: deque[float] = field(default_factory=deque)
    suppressed: int = 0



class RecurringSuppressFilter(logging.Filter):
    """
    Drops a message once it has been seen `maxPerWindow` times within the last
    `windowSeconds`, and reports how many were dropped when it is let through again.

    A strict-mode call site inside a loop would otherwise log the same
    "must specify a user" diagnostic for every lookup.

    At most `maxKeys` distinct messages are tracked. Past that, expired windows
    are dropped first, then the least recently seen ones (their pending count is
    reported before they go).
    """
    def __init__(
            self,
            *,
            windowSeconds: int = 60,
            maxPerWindow: int = 5,
            summaryLevel: int = logging.INFO,
            maxKeys: int = 1024,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = int(summaryLevel)
        self.maxKeys = max(1, int(maxKeys))

        # Least recently seen first
        self._windows: OrderedDict[_Key, _Window] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def trackedKeys(self) -> int:
        return len(self._windows)

    def _keyOf(self, record: logging.LogRecord) -> _Key:
        text = " ".join(str(record.getMessage()).split())
        if len(text) > MAX_KEY_LEN:
            text = text[:MAX_KEY_LEN] + "..."
        return (record.name, record.levelno, text)

    def _expire(self, window: _Window, now: float) -> None:
        cutoff = now - self.windowSeconds
        while window.stamps and window.stamps[0] < cutoff:
            window.stamps.popleft()

    def _report(self, key: _Key, window: _Window) -> None:
        if window.suppressed <= 0:
            return
        count, window.suppressed = window.suppressed, 0
        loggerName, _levelno, text = key
        try:
            logging.getLogger(loggerName).log(
                self.summaryLevel,
                "Suppressed %d repeated logs: %s",
                count,
                text,
                extra={"_noRecurringSuppress": True},
            )
        except Exception:
            # Summaries are best effort
            return

    def _makeRoom(self, now: float) -> None:
        """Brings the table below maxKeys so one more key fits."""
        if len(self._windows) < self.maxKeys:
            return
        for key in list(self._windows):
            window = self._windows[key]
            self._expire(window, now)
            if not window.stamps and window.suppressed == 0:
                del self._windows[key]
        while len(self._windows) >= self.maxKeys:
            key, window = self._windows.popitem(last=False)
            self._report(key, window)

    def filter(self, record: logging.LogRecord) -> bool:
        # Summaries emitted by this filter
        if getattr(record, "_noRecurringSuppress", False):
            return True

        now = time.monotonic()
        key = self._keyOf(record)

        with self._lock:
            window = self._windows.get(key)
            if window is None:
                self._makeRoom(now)
                window = self._windows[key] = _Window()
            else:
                self._windows.move_to_end(key)
            self._expire(window, now)

            window.stamps.append(now)
            if len(window.stamps) <= self.maxPerWindow:
                self._report(key, window)
                return True

            window.suppressed += 1
            return False
