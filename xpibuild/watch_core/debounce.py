"""Leading-edge debouncer used by the watcher."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from xpibuild.config import DELAY_SECS, LOGGER


class LeadingEdgeDebouncer:
    """Runs the callback on the first trigger, then ignores triggers for a window.

    The window is fixed: triggers that arrive while it is open are dropped and
    do not extend it. The next trigger after it closes fires immediately again.
    Callbacks run on the triggering thread and never overlap each other.
    """

    def __init__(self, callback: Callable[..., Any], wait: float = DELAY_SECS):
        self._callback = callback
        self._wait = float(wait)
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._closed = False
        # Serialize callbacks so two passes never run at once. Reentrant so a
        # callback may close its own watcher.
        self._processing_lock = threading.RLock()

    @property
    def pending(self) -> bool:
        """True while a debounce window is open."""
        with self._lock:
            return self._timer is not None

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def trigger(self, *args: Any, **kwargs: Any) -> bool:
        """Fire the callback unless a window is open. Returns True if it fired."""
        with self._lock:
            if self._closed:
                return False
            if self._timer is not None:
                LOGGER.debug("Change within debounce window; not rebuilding")
                return False
            self._timer = threading.Timer(self._wait, self._expire)
            self._timer.daemon = True
            self._timer.start()

        with self._processing_lock:
            if self.closed:
                return False
            self._callback(*args, **kwargs)
        return True

    def _expire(self) -> None:
        with self._lock:
            self._timer = None

    def cancel(self) -> None:
        """Cancel any open window; no callback fires after this returns.

        Waits for a callback already in progress on another thread to finish.
        """
        with self._processing_lock:
            with self._lock:
                self._closed = True
                timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()


__all__ = ["LeadingEdgeDebouncer"]
