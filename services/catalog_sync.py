import asyncio
import inspect
import logging
from typing import Awaitable, Callable

from exceptions.catalog import CatalogException
from models.catalog import CatalogSnapshot
from services.catalog import CatalogService
from services.change_notifier import ChangeNotifier, StopListening

logger = logging.getLogger(__name__)

OnChange = Callable[[CatalogSnapshot], None | Awaitable[None]]


class CatalogSubscription:
    """
    Live catalog of one business for one ordering session.

    Every change notification triggers a full reload. The new snapshot replaces
    the old one in a single assignment, so readers of `snapshot` never observe
    a partially updated catalog. Carts are not touched here: stale lines are
    detected lazily when prices are read.
    """

    def __init__(
        self,
        business_id: str,
        catalog_service: CatalogService,
        on_change: OnChange,
        snapshot: CatalogSnapshot | None = None
    ) -> None:
        self.business_id = business_id
        self._catalog_service = catalog_service
        self._on_change = on_change
        self._snapshot = snapshot
        # Serializes reloads: the last finished reload always holds the newest data
        self._lock = asyncio.Lock()
        self._stop: StopListening | None = None
        self._stopping: asyncio.Task | None = None
        self._active = True

    @property
    def snapshot(self) -> CatalogSnapshot | None:
        return self._snapshot

    @property
    def active(self) -> bool:
        return self._active

    async def refresh(self) -> bool:
        """
        Reload the catalog and swap the snapshot if its content changed.

        Load failures are logged and the previous snapshot is kept; the next
        notification retries. The change callback runs while the reload lock
        is held, so it must not call refresh() itself.

        Returns:
            True if a new snapshot was installed and the callback invoked
        """
        if not self._active:
            return False

        async with self._lock:
            current_version = self._snapshot.version if self._snapshot else None
            try:
                snapshot = await self._catalog_service.load_snapshot(self.business_id)
            except CatalogException as e:
                logger.warning(
                    f"Catalog reload for business {self.business_id} failed "
                    f"(retryable={e.retryable}), keeping version {current_version}: {str(e)}"
                )
                return False

            if not self._active:
                logger.debug(f"Discarding catalog reload for business {self.business_id}: unsubscribed")
                return False

            if snapshot.version == current_version:
                logger.debug(f"Catalog for business {self.business_id} unchanged (version {current_version})")
                return False

            self._snapshot = snapshot
            logger.info(f"Catalog for business {self.business_id} replaced: {current_version} -> {snapshot.version}")

            result = self._on_change(snapshot)
            if inspect.isawaitable(result):
                await result
            return True

    def unsubscribe(self) -> None:
        """Stop receiving change notifications. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        if self._stop is not None:
            self._stopping = self._stop()
            self._stop = None
        logger.debug(f"Unsubscribed from catalog changes of business {self.business_id}")

    async def aclose(self) -> None:
        """
        Unsubscribe and wait until the notifier's background task has ended.

        Called from inside that task (e.g. by a change callback) it only
        unsubscribes; the task ends at its next suspension point.
        """
        self.unsubscribe()
        task, self._stopping = self._stopping, None
        if task is not None and task is not asyncio.current_task():
            await asyncio.gather(task, return_exceptions=True)


class CatalogSync:
    """Keeps catalog snapshots current by listening to a change notifier."""

    def __init__(self, catalog_service: CatalogService, notifier: ChangeNotifier) -> None:
        self.catalog_service = catalog_service
        self.notifier = notifier

    async def load_snapshot(self, business_id: str) -> CatalogSnapshot:
        return await self.catalog_service.load_snapshot(business_id)

    def subscribe(
        self,
        business_id: str,
        on_change: OnChange,
        initial: CatalogSnapshot | None = None
    ) -> CatalogSubscription:
        """
        Register `on_change` to receive each freshly loaded snapshot.

        Must be called from a running event loop. The returned subscription
        is the unsubscribe handle.
        """
        subscription = CatalogSubscription(business_id, self.catalog_service, on_change, snapshot=initial)
        subscription._stop = self.notifier.listen(business_id, subscription.refresh)
        logger.debug(f"Subscribed to catalog changes of business {business_id}")
        return subscription
