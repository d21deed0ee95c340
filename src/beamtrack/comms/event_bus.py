"""EventBus — pub/sub for engagement events leaving the guidance core.

The guidance loop publishes what it decided each tick (state changes,
designations, weapon releases, dropped tracks).  Nothing inside the core
subscribes; consumers are diagnostics, replay recorders, or a host UI
draining the queue from its own thread, hence the lock.

Event types published by ``beamtrack.ship``:
  - ``engagement_state``: mode changed (``state``, ``previous``)
  - ``target_designated``: designation changed (``track_id`` may be None)
  - ``tracks_dropped``: staleness pruning removed ``track_ids``
  - ``weapon_fired``: trigger pulled (``index``, ``track_id``)
  - ``self_destruct``: munition detonated (``distance``)
"""

from __future__ import annotations

import queue
import threading


class EventBus:
    """Thread-safe pub/sub with optional per-subscriber type prefix filter."""

    DEFAULT_MAXSIZE = 1000

    def __init__(self, maxsize: int = DEFAULT_MAXSIZE) -> None:
        self._lock = threading.Lock()
        self._maxsize = maxsize
        self._subscribers: list[tuple[queue.Queue, str | None]] = []

    def subscribe(self, _filter: str | None = None) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives matching events.

        When ``_filter`` is given only events whose type starts with it are
        delivered.
        """
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.append((q, _filter))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(s, f) for s, f in self._subscribers if s is not q]

    def publish(self, event_type: str, data: dict | None = None, tick: int | None = None) -> None:
        msg: dict = {"type": event_type}
        if tick is not None:
            msg["tick"] = tick
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q, prefix in self._subscribers:
                if prefix is not None and not event_type.startswith(prefix):
                    continue
                try:
                    q.put_nowait(msg)
                except queue.Full:
                    # Drop oldest so the newest decision is never lost
                    try:
                        q.get_nowait()
                    except queue.Empty:
                        pass
                    try:
                        q.put_nowait(msg)
                    except queue.Full:
                        pass
