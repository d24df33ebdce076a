"""
watcher.py

Responsibility: rebuild when files in the source directory change.

``on_source_change`` starts observing a directory and returns a
``WatchSession``. The session is the only way to stop watching; installing an
interrupt handler that closes it is opt-in via ``install_signal_handlers``.
"""
from __future__ import annotations

import signal
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from watchdog.observers.api import BaseObserver

from xpibuild.config import DELAY_SECS, LOGGER, USE_POLLING
from xpibuild.watch_core.debounce import LeadingEdgeDebouncer
from xpibuild.watch_core.handler import SourceChangeHandler
from xpibuild.watch_core.utils import create_observer


class WatchSession:
    """Handle for one active watch: owns the observer and the debounce timer."""

    def __init__(self, observer: BaseObserver, debouncer: LeadingEdgeDebouncer, source_dir: Path):
        self.observer = observer
        self.debouncer = debouncer
        self.source_dir = source_dir
        # Reentrant: a signal handler may call close() while the main thread
        # is already inside it
        self._lock = threading.RLock()
        self._closed_evt = threading.Event()
        self._previous_handlers: dict[int, Any] = {}

    @property
    def closed(self) -> bool:
        return self._closed_evt.is_set()

    def close(self) -> None:
        """Stop observing and cancel any pending debounce window. Idempotent."""
        with self._lock:
            if self._closed_evt.is_set():
                return
            self._closed_evt.set()
        self.debouncer.cancel()
        self.observer.stop()
        if self.observer.is_alive() and threading.current_thread() is not self.observer:
            self.observer.join(timeout=5.0)
        self._restore_signal_handlers()
        LOGGER.debug(f"Stopped watching {self.source_dir}")

    def wait(self, poll_interval: float = 1.0) -> None:
        """Block until the session is closed."""
        # Timed waits keep the main thread responsive to signals
        while not self._closed_evt.wait(poll_interval):
            pass

    def install_signal_handlers(self, signals: Iterable[int] = (signal.SIGINT,)) -> bool:
        """Best-effort: close this session when one of signals arrives.

        The previous handler still runs afterwards (so SIGINT still raises
        KeyboardInterrupt). Only possible from the main thread; returns False
        where a handler could not be installed.
        """
        installed = True
        for signum in signals:
            try:
                previous = signal.getsignal(signum)
                signal.signal(signum, self._handle_signal)
            except (ValueError, OSError, RuntimeError) as exc:
                LOGGER.warning(f"Could not install handler for signal {signum}: {exc}")
                installed = False
                continue
            self._previous_handlers[signum] = previous
        return installed

    def _handle_signal(self, signum: int, frame: Any) -> None:
        previous = self._previous_handlers.get(signum)
        self.close()
        if callable(previous):
            previous(signum, frame)

    def _restore_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum, previous in list(self._previous_handlers.items()):
            try:
                signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
            except (ValueError, OSError, RuntimeError):
                pass
        self._previous_handlers.clear()

    def __enter__(self) -> "WatchSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _rebuild_guard(on_change: Callable[[], Any]) -> Callable[[Path], None]:
    """Wrap on_change so a failing rebuild is logged and watching continues."""

    def _notify(file_path: Path) -> None:
        LOGGER.info(f"Changed: {file_path}", extra={"extra_fields": {"path": str(file_path)}})
        LOGGER.debug(f"Last change detection: {datetime.now().strftime('%H:%M:%S')}")
        try:
            on_change()
        except Exception:
            LOGGER.error("Rebuild failed; still watching for changes", exc_info=True)

    return _notify


def on_source_change(
    *,
    source_dir: str | Path,
    artifacts_dir: str | Path,
    on_change: Callable[[], Any],
    debounce_secs: float = DELAY_SECS,
    use_polling: bool = USE_POLLING,
    observer_factory: Optional[Callable[[bool], BaseObserver]] = None,
) -> WatchSession:
    """Watch source_dir recursively and call on_change() when it changes.

    Changes under artifacts_dir are ignored. The first change in a quiet
    period calls on_change immediately; further changes within debounce_secs
    are dropped.
    """
    source = Path(source_dir)
    debouncer = LeadingEdgeDebouncer(_rebuild_guard(on_change), wait=debounce_secs)
    handler = SourceChangeHandler(artifacts_dir, debouncer.trigger)

    observer = (observer_factory or create_observer)(use_polling)
    observer.schedule(handler, str(source), recursive=True)
    observer.daemon = True
    observer.start()
    LOGGER.debug(f"Watching for file changes in {source}")
    return WatchSession(observer, debouncer, source)


__all__ = ["WatchSession", "on_source_change"]
