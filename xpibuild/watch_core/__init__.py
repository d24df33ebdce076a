"""Core building blocks for the source watcher.

Modules:
    debounce: leading-edge debouncer for change callbacks
    handler: watchdog event handler logic and self-write suppression
    utils: observer factory and path helpers
"""

from . import debounce, handler, utils

__all__ = [
    "debounce",
    "handler",
    "utils",
]
