"""Lifecycle signal channel for the router boot pipeline.

:class:`EventEmitter` keeps an ordered listener list per event name and
calls the listeners in registration order on :meth:`EventEmitter.emit`.
Listeners may be plain functions or coroutine functions; coroutine results
are scheduled as tasks on the running loop. A listener that raises is
logged and skipped so later listeners still run.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """Minimal named-event emitter used for ``ready`` and ``error`` signals."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[Listener, bool]]] = defaultdict(list)
        self._pending: set[asyncio.Task] = set()

    def on(self, event: str, listener: Listener) -> Listener:
        """Register *listener* for every future *event*. Returns the listener."""
        self._listeners[event].append((listener, False))
        return listener

    def once(self, event: str, listener: Listener) -> Listener:
        """Register *listener* for the next *event* only."""
        self._listeners[event].append((listener, True))
        return listener

    def off(self, event: str, listener: Listener) -> None:
        self._listeners[event] = [
            entry for entry in self._listeners[event] if entry[0] is not listener
        ]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of *event* with *args*.

        Returns:
            ``True`` if at least one listener was registered.
        """
        entries = list(self._listeners.get(event, ()))
        if not entries:
            return False
        self._listeners[event] = [entry for entry in entries if not entry[1]]

        for listener, _ in entries:
            try:
                result = listener(*args)
            except Exception:
                logger.exception("Listener for '%s' raised", event)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._listener_done)
        return True

    def _listener_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Async listener raised", exc_info=task.exception())
