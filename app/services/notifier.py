"""
Event fan-out to live dashboard subscribers.

``Notifier.broadcast_to_dashboards`` and ``Notifier.send_to_user`` are
best-effort: they never raise and never wait for delivery. A subscriber that
is disconnected when an event goes out misses it and catches up on its next
full refresh.
"""

import asyncio
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

class Notifier:
    """Sink for real-time events. The base class drops everything."""

    def broadcast_to_dashboards(self, event: str, payload: Any = None) -> None:
        pass

    def send_to_user(self, user_id: Any, event: str, payload: Any = None) -> None:
        pass

class NullNotifier(Notifier):
    pass

class WSManager(Notifier):
    """
    Registry of dashboard and per-user WebSocket connections.

    The registry is shared between the event loop (connect/disconnect) and
    threadpool route handlers (broadcast), so every access holds ``_lock``.
    Sends run as tasks on the loop that accepted the sockets.
    """

    def __init__(self) -> None:
        self.dashboards: Set[WebSocket] = set()
        self.user_channels: Dict[str, Set[WebSocket]] = {}
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Future] = set()

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    async def connect_dashboard(self, ws: WebSocket) -> None:
        await ws.accept()
        self.bind_loop(asyncio.get_running_loop())
        with self._lock:
            self.dashboards.add(ws)
        logger.info("Dashboard connected (%d total)", len(self.dashboards))

    async def connect_user(self, ws: WebSocket, user_id: Any) -> None:
        await ws.accept()
        self.bind_loop(asyncio.get_running_loop())
        with self._lock:
            self.user_channels.setdefault(str(user_id), set()).add(ws)
        logger.info("User %s connected", user_id)

    def disconnect(self, ws: WebSocket) -> None:
        with self._lock:
            self.dashboards.discard(ws)
            for user_id in list(self.user_channels):
                sockets = self.user_channels[user_id]
                sockets.discard(ws)
                if not sockets:
                    del self.user_channels[user_id]

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self.dashboards) + sum(len(s) for s in self.user_channels.values())

    def broadcast_to_dashboards(self, event: str, payload: Any = None) -> None:
        with self._lock:
            targets = list(self.dashboards)
        self._dispatch(targets, event, payload)

    def send_to_user(self, user_id: Any, event: str, payload: Any = None) -> None:
        with self._lock:
            targets = list(self.user_channels.get(str(user_id), ()))
        self._dispatch(targets, event, payload)

    def _dispatch(self, targets: List[WebSocket], event: str, payload: Any) -> None:
        loop = self._loop
        if not targets or loop is None or loop.is_closed():
            logger.debug("No subscribers for %s", event)
            return

        try:
            message = {"event": event, "data": jsonable_encoder(payload)}
        except Exception:
            logger.warning("Dropping %s: payload is not serializable", event, exc_info=True)
            return

        coro = self._deliver(targets, message)
        try:
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is loop:
                future = loop.create_task(coro)
            else:
                future = asyncio.run_coroutine_threadsafe(coro, loop)
        except Exception:
            coro.close()
            logger.warning("Could not schedule delivery of %s", event, exc_info=True)
            return

        self._tasks.add(future)
        future.add_done_callback(self._tasks.discard)

    async def _deliver(self, targets: Iterable[WebSocket], message: Dict[str, Any]) -> None:
        dead = []
        for ws in targets:
            try:
                await ws.send_json(message)
            except Exception:
                dead.append(ws)
        for ws in dead:
            logger.debug("Dropping dead subscriber after failed %s", message["event"])
            self.disconnect(ws)
