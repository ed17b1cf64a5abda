from django.utils.module_loading import import_string

from ..conf import store_settings


def get_backend(path=None, **options):
    """Instantiate the backend named by STOREFRONT['BACKEND']"""
    config = store_settings()
    backend_class = import_string(path or config['BACKEND'])
    kwargs = {'bucket': config['BUCKET'], **config['BACKEND_OPTIONS'], **options}
    return backend_class(**kwargs)
