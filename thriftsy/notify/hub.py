"""
Notification hub

In-process registry of open server-sent-event streams, keyed by user id.
Delivery is best effort: the durable record is always the notifications
table row, which clients reload on reconnect.
"""

import itertools
import json
import logging
import queue
import threading
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)

PING_FRAME = ": ping\n\n"
DEFAULT_QUEUE_SIZE = 100


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, "value"):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def format_event(event: Optional[str], data: Any) -> str:
    """Format one SSE frame: optional event line, data line(s), blank line"""
    payload = data if isinstance(data, str) else json.dumps(data, default=_json_default)
    lines = []
    if event:
        lines.append(f"event: {event}")
    for line in payload.split("\n"):
        lines.append(f"data: {line}")
    return "\n".join(lines) + "\n\n"


class Subscription:
    """One open stream (a browser tab) for a user"""

    _ids = itertools.count(1)

    def __init__(self, user_id: int, maxsize: int = DEFAULT_QUEUE_SIZE):
        self.id = next(self._ids)
        self.user_id = user_id
        self.closed = False
        self._queue: "queue.Queue[str]" = queue.Queue(maxsize=maxsize)

    def offer(self, frame: str) -> bool:
        if self.closed:
            return False
        try:
            self._queue.put_nowait(frame)
            return True
        except queue.Full:
            return False

    def next_frame(self, timeout: Optional[float] = None) -> Optional[str]:
        """Block for the next frame; None when the wait timed out"""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self):
        self.closed = True

    def __repr__(self):
        return f"<Subscription {self.id} user={self.user_id}>"


class NotificationHub:
    """Per-user fan-out of SSE frames.

    Flask serves requests on several threads, so every registry mutation
    happens under ``self._lock``. Frames are offered while holding a
    snapshot of the subscriber set, never the live set.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        self._queue_size = queue_size
        self._clients: Dict[int, Set[Subscription]] = defaultdict(set)
        self._lock = threading.Lock()
        self._heartbeat: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def subscribe(self, user_id: int) -> Subscription:
        subscription = Subscription(int(user_id), maxsize=self._queue_size)
        with self._lock:
            self._clients[subscription.user_id].add(subscription)
            total = len(self._clients[subscription.user_id])
        logger.info(f"SSE stream opened: user_id={subscription.user_id}, streams={total}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.close()
        with self._lock:
            streams = self._clients.get(subscription.user_id)
            if streams is None:
                return
            streams.discard(subscription)
            remaining = len(streams)
            if not streams:
                del self._clients[subscription.user_id]
        logger.info(
            f"SSE stream closed: user_id={subscription.user_id}, remaining={remaining}"
        )

    def send(self, user_id: int, event: Optional[str], data: Any) -> int:
        """Push one event to every open stream of ``user_id``.

        Returns the number of streams the frame was delivered to.
        """
        with self._lock:
            streams = list(self._clients.get(int(user_id), ()))
        if not streams:
            return 0

        frame = format_event(event, data)
        delivered = 0
        for subscription in streams:
            if subscription.offer(frame):
                delivered += 1
            else:
                logger.warning(f"Dropped SSE frame for {subscription!r}")
        return delivered

    def ping_all(self) -> int:
        with self._lock:
            streams = [s for group in self._clients.values() for s in group]
        return sum(1 for s in streams if s.offer(PING_FRAME))

    def connection_count(self, user_id: Optional[int] = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._clients.get(int(user_id), ()))
            return sum(len(group) for group in self._clients.values())

    def start_heartbeat(self, interval: float) -> None:
        """Start the keep-alive thread; a second call is a no-op"""
        if self._heartbeat is not None and self._heartbeat.is_alive():
            return
        self._stop.clear()
        self._heartbeat = threading.Thread(
            target=self._heartbeat_loop, args=(interval,), name="sse-heartbeat", daemon=True
        )
        self._heartbeat.start()
        logger.info(f"SSE heartbeat started: every {interval}s")

    def stop_heartbeat(self) -> None:
        self._stop.set()

    def _heartbeat_loop(self, interval: float) -> None:
        while not self._stop.wait(interval):
            try:
                self.ping_all()
            except Exception:
                logger.exception("SSE heartbeat failed")


hub = NotificationHub()
