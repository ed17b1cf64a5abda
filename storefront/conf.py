from django.conf import settings

DEFAULTS = {
    'BACKEND': 'storefront.backends.orm.ORMBackend',
    'BACKEND_OPTIONS': {},
    'BUCKET': 'restaurant-assets',
    # "push" (change feed), "poll" (periodic refetch) or "manual"
    'SYNC_STRATEGY': 'push',
    'POLL_INTERVAL': 600,
    'CHANGE_DEBOUNCE': 0.25,
    'IMAGE_HOST': 'supabase.co',
}


def store_settings():
    """STOREFRONT settings merged over the defaults"""
    return {**DEFAULTS, **getattr(settings, 'STOREFRONT', {})}
