"""
Change notification transports for catalog sync.

A notifier only says "something changed for business X"; it carries no
payload. Listeners react by reloading the whole catalog.

- LocalChangeNotifier: push style, e.g. fed by a webhook or an admin save
- PollingChangeNotifier: pull style, triggers every N seconds
"""

import asyncio
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Protocol

import config

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], Awaitable[None]]
# Returns the background task it cancelled, if any, so callers can wait for it to end
StopListening = Callable[[], asyncio.Task | None]


class ChangeNotifier(Protocol):
    def listen(self, business_id: str, listener: ChangeListener) -> StopListening:
        ...


class LocalChangeNotifier:
    """In-process publish/subscribe of catalog change events."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[ChangeListener]] = defaultdict(list)

    def listen(self, business_id: str, listener: ChangeListener) -> StopListening:
        self._listeners[business_id].append(listener)

        def stop() -> None:
            listeners = self._listeners.get(business_id, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(business_id, None)

        return stop

    def listener_count(self, business_id: str) -> int:
        return len(self._listeners.get(business_id, []))

    async def notify(self, business_id: str) -> None:
        """Signal a catalog change and wait until every listener has reloaded."""
        listeners = list(self._listeners.get(business_id, []))
        logger.debug(f"Catalog change for business {business_id}, {len(listeners)} listener(s)")
        for listener in listeners:
            await listener()


class PollingChangeNotifier:
    """Triggers listeners on a fixed interval from a background task."""

    def __init__(self, interval_seconds: float | None = None) -> None:
        self.interval_seconds = interval_seconds or config.CATALOG_POLL_INTERVAL_SECONDS
        self._tasks: set[asyncio.Task] = set()

    def listen(self, business_id: str, listener: ChangeListener) -> StopListening:
        task = asyncio.get_running_loop().create_task(
            self._poll(business_id, listener),
            name=f"catalog-poll-{business_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        def stop() -> asyncio.Task:
            task.cancel()
            return task

        return stop

    @property
    def running(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    async def _poll(self, business_id: str, listener: ChangeListener) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await listener()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Keep polling, the next cycle reloads again
                logger.error(f"Catalog poll for business {business_id} failed: {str(e)}")
