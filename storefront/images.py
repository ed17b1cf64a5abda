from urllib.parse import urlencode, urlsplit, urlunsplit

PLACEHOLDER_URL = 'https://placehold.co/600x400/fff8e1/3a2412?text=Image+Not+Available'
STORAGE_HOST = 'supabase.co'
DEFAULT_QUALITY = 90


def is_storage_host(hostname, host=STORAGE_HOST):
    return hostname == host or hostname.endswith(f".{host}")


def get_transformed_image_url(url, width, quality=None, host=STORAGE_HOST):
    """
    Rewrite a public storage URL into its on-the-fly resized rendition.

    ``.../object/public/<bucket>/a.jpg`` becomes
    ``.../render/image/public/<bucket>/a.jpg?width=..&quality=..&format=auto&resize=cover``.
    URLs from any other host, or not pointing at a stored object, come back
    unchanged. No network access is involved.
    """
    if not url:
        return PLACEHOLDER_URL
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not is_storage_host(parts.hostname or '', host):
        return url
    segments = parts.path.split('/')
    if 'object' not in segments:
        return url
    index = segments.index('object')
    segments[index:index + 1] = ['render', 'image']
    query = urlencode({
        'width': width,
        'quality': quality or DEFAULT_QUALITY,
        'format': 'auto',
        'resize': 'cover',
    })
    return urlunsplit((parts.scheme, parts.netloc, '/'.join(segments), query, parts.fragment))
