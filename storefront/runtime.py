"""
Hosts a content store on its own event loop thread.

The store is asyncio code while Django views are synchronous, so the
runtime owns one loop running in a daemon thread and views hand it
coroutines. The store is built and started on first use.
"""
import asyncio
import logging
import threading

logger = logging.getLogger(__name__)


class StoreRuntime:
    def __init__(self, factory, timeout=30):
        self.factory = factory
        self.timeout = timeout
        self._lock = threading.Lock()
        self._loop = None
        self._thread = None
        self._store = None

    @property
    def started(self):
        return self._store is not None

    @property
    def store(self):
        self._boot()
        return self._store

    def _boot(self):
        if self._store is not None:
            return
        with self._lock:
            if self._store is not None:
                return
            loop = asyncio.new_event_loop()
            thread = threading.Thread(target=loop.run_forever, name='storefront-loop', daemon=True)
            thread.start()
            self._loop, self._thread = loop, thread
            store = self.factory()
            try:
                asyncio.run_coroutine_threadsafe(store.start(), loop).result(self.timeout)
            except Exception:
                logger.exception("Content store failed to start")
                self._stop_loop()
                raise
            self._store = store
            logger.info("Content store runtime started")

    def run(self, coroutine):
        """Run a coroutine on the store's loop and wait for its result"""
        self._boot()
        return asyncio.run_coroutine_threadsafe(coroutine, self._loop).result(self.timeout)

    def shutdown(self):
        with self._lock:
            if self._loop is None:
                return
            if self._store is not None:
                try:
                    asyncio.run_coroutine_threadsafe(self._store.close(), self._loop).result(self.timeout)
                except Exception:
                    logger.exception("Content store did not close cleanly")
                self._store = None
            self._stop_loop()
            logger.info("Content store runtime stopped")

    def _stop_loop(self):
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(self.timeout)
        self._loop.close()
        self._loop = None
        self._thread = None
