"""
Strategies that keep a content store converging on the remote data.

Both re-run the store's full refresh; neither patches collections
incrementally.
"""
import asyncio
import logging

logger = logging.getLogger(__name__)


class PeriodicRefresher:
    """Full refresh every `interval` seconds"""

    def __init__(self, store, interval=600):
        self.store = store
        self.interval = interval
        self._task = None

    async def start(self):
        if self._task is not None:
            raise RuntimeError("Periodic refresher already started")
        self._task = asyncio.ensure_future(self._run())

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.store.fetch_data()
            except Exception:
                logger.exception("Periodic refresh failed")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None


class ChangeFeedListener:
    """
    Full refresh on remote change notifications.

    One backend subscription per listener. Notifications only raise a
    "refresh requested" flag; the worker waits `debounce` seconds and runs a
    single refresh for the whole burst. A notification that arrives while a
    refresh is running schedules exactly one more. `notify` may be called
    from any thread.
    """

    def __init__(self, store, debounce=0.25):
        self.store = store
        self.debounce = debounce
        self.notifications = 0
        self.refreshes = 0
        self._loop = None
        self._requested = None
        self._subscription = None
        self._worker = None

    async def start(self):
        if self._subscription is not None:
            raise RuntimeError("Change feed listener already started")
        self._loop = asyncio.get_running_loop()
        self._requested = asyncio.Event()
        self._worker = self._loop.create_task(self._run())
        self._subscription = self.store.backend.subscribe(self.notify)
        logger.info("Subscribed to content change feed")

    def notify(self, change=None):
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        self.notifications += 1
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._requested.set()
        else:
            loop.call_soon_threadsafe(self._requested.set)

    async def _run(self):
        while True:
            await self._requested.wait()
            await asyncio.sleep(self.debounce)
            self._requested.clear()
            try:
                await self.store.fetch_data()
            except Exception:
                logger.exception("Change feed refresh failed")
            self.refreshes += 1

    async def stop(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.info("Unsubscribed from content change feed")
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
