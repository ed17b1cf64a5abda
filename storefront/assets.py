"""
Image assets owned by content records.

Uploads never raise: the caller gets an ``UploadResult`` holding either the
public URL or a message it can show to the operator. Deletes derive the
object path from the public URL and are best effort.
"""
import logging
import os
import time
import uuid
from urllib.parse import unquote, urlparse

from .exceptions import StorageAuthError, StoragePermissionError
from .results import UploadResult

logger = logging.getLogger(__name__)

MENU_IMAGES = 'menu-images'
OFFER_IMAGES = 'offer-images'
CHEF_IMAGES = 'chef-images'
GALLERY_IMAGES = 'gallery-images'
SPECIAL_IMAGES = 'special-images'

ASSET_FOLDERS = (MENU_IMAGES, OFFER_IMAGES, CHEF_IMAGES, GALLERY_IMAGES, SPECIAL_IMAGES)

AUTH_ERROR_MESSAGE = (
    "Authentication failed: the storage credentials are invalid or the session "
    "has expired. Sign in again and retry."
)
PERMISSION_ERROR_MESSAGE = (
    "Permission denied: the storage bucket does not allow this upload. "
    "Check the bucket access policies."
)


def generate_object_name(filename):
    """<epoch millis>-<8 hex>.<original extension>"""
    extension = os.path.splitext(filename or '')[1].lstrip('.').lower() or 'bin'
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{extension}"


async def upload_image(storage, file, folder):
    path = f"{folder.strip('/')}/{generate_object_name(getattr(file, 'name', ''))}"
    try:
        content = file.read()
        await storage.upload(path, content, content_type=getattr(file, 'content_type', None))
    except StorageAuthError as exc:
        logger.error(f"Error uploading image to {path}: {exc}")
        return UploadResult(None, AUTH_ERROR_MESSAGE)
    except StoragePermissionError as exc:
        logger.error(f"Error uploading image to {path}: {exc}")
        return UploadResult(None, PERMISSION_ERROR_MESSAGE)
    except Exception as exc:
        logger.error(f"Error uploading image to {path}: {exc}")
        return UploadResult(None, f"Upload failed: {exc}")
    return UploadResult(storage.public_url(path), None)


def storage_path_from_url(url, bucket):
    """Object path after the /<bucket>/ segment of a public URL, or None"""
    try:
        path = urlparse(url).path
    except (TypeError, ValueError) as exc:
        logger.error(f"Invalid URL for path extraction: {url} ({exc})")
        return None
    marker = f"/{bucket}/"
    if marker not in path:
        return None
    return unquote(path.split(marker, 1)[1]) or None


async def delete_image(storage, url, bucket):
    """Delete the asset behind url. Foreign URLs and storage errors are logged, never raised."""
    if not url:
        return False
    path = storage_path_from_url(url, bucket)
    if not path:
        logger.warning(f"Not an asset of bucket {bucket}, skipping delete: {url}")
        return False
    try:
        await storage.remove([path])
    except Exception as exc:
        logger.error(f"Error deleting image {path}: {exc}")
        return False
    return True
