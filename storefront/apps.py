import atexit

from django.apps import AppConfig


class StorefrontConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'storefront'
    runtime = None

    def ready(self):
        from .runtime import StoreRuntime
        from .store import build_store

        self.runtime = StoreRuntime(build_store)
        atexit.register(self.runtime.shutdown)
