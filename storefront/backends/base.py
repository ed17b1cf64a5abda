"""
Capability shapes the content store depends on.

A backend bundles four things:

* relational tables addressable by name, read and written with equality
  match clauses (``select``, ``select_single``, ``insert``, ``update``,
  ``delete``);
* a change feed that reports "some row of some tracked table changed"
  (``subscribe``);
* binary object storage with folder scoped paths (``backend.storage``);
* password based sessions and a session change feed (``backend.auth``).

Rows travel as plain dicts. Every coroutine raises a ``BackendError``
subclass when the remote side rejects the request.
"""
import logging
from collections import namedtuple
from dataclasses import dataclass, replace
from datetime import datetime

logger = logging.getLogger(__name__)

TRACKED_TABLES = (
    'menu_items', 'contact_info', 'about_info', 'offers', 'faqs', 'reviews',
    'gallery_images', 'chef_special', 'menu_categories', 'chefs', 'reservations',
)
WRITE_ONLY_TABLES = ('contact_messages',)
ALL_TABLES = TRACKED_TABLES + WRITE_ONLY_TABLES

# Tables whose rows get a server assigned created_at
TIMESTAMPED_TABLES = ('reservations', 'contact_messages')

ChangeEvent = namedtuple('ChangeEvent', ['table', 'event'])

# Auth notification events
SIGNED_IN = 'SIGNED_IN'
SIGNED_OUT = 'SIGNED_OUT'
TOKEN_REFRESHED = 'TOKEN_REFRESHED'


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    access_token: str
    refresh_token: str
    expires_at: datetime

    def refreshed(self, access_token, refresh_token, expires_at):
        return replace(self, access_token=access_token, refresh_token=refresh_token, expires_at=expires_at)


class Subscription:
    """Handle for a live listener registration"""

    def __init__(self, cancel):
        self._cancel = cancel
        self.active = True

    def unsubscribe(self):
        if self.active:
            self.active = False
            self._cancel()


class ListenerSet:
    """Callbacks fanned out to in registration order"""

    def __init__(self, name):
        self.name = name
        self._callbacks = []

    def add(self, callback):
        self._callbacks.append(callback)
        return Subscription(lambda: self._discard(callback))

    def _discard(self, callback):
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def __len__(self):
        return len(self._callbacks)

    def notify(self, *args):
        for callback in list(self._callbacks):
            try:
                callback(*args)
            except Exception:
                logger.exception(f"{self.name} listener failed")


class BaseStorage:
    """Bucket scoped object storage"""

    def __init__(self, bucket):
        self.bucket = bucket

    async def upload(self, path, content, content_type=None):
        raise NotImplementedError

    def public_url(self, path):
        raise NotImplementedError

    async def remove(self, paths):
        raise NotImplementedError


class BaseAuth:
    """Password sessions plus a session change feed"""

    def __init__(self):
        self._session = None
        self._listeners = ListenerSet('auth')

    async def get_session(self):
        return self._session

    async def sign_in_with_password(self, email, password):
        raise NotImplementedError

    async def sign_out(self):
        self._set_session(SIGNED_OUT, None)

    async def refresh_session(self):
        raise NotImplementedError

    def on_auth_state_change(self, callback):
        """callback(event, session) is called on sign in, sign out and token refresh"""
        return self._listeners.add(callback)

    def _set_session(self, event, session):
        self._session = session
        self._listeners.notify(event, session)


class BaseBackend:
    storage = None
    auth = None

    def __init__(self, bucket='restaurant-assets'):
        self.bucket = bucket
        self._feed = ListenerSet('change feed')

    async def select(self, table, columns=None, order_by=None, descending=False):
        """All rows of a table, optionally projected and ordered"""
        raise NotImplementedError

    async def select_single(self, table):
        """The only row of a table; NoRowsError / MultipleRowsError otherwise"""
        raise NotImplementedError

    async def insert(self, table, rows):
        """Insert rows and return them as stored, ids assigned"""
        raise NotImplementedError

    async def update(self, table, values, match):
        """Update rows matching every key of match; returns the updated rows"""
        raise NotImplementedError

    async def delete(self, table, match=None):
        """Delete rows matching match, every row when match is None; returns the count"""
        raise NotImplementedError

    def subscribe(self, callback):
        """callback(ChangeEvent) is called for every change to a tracked table"""
        return self._feed.add(callback)

    def _emit(self, table, event):
        if table in TRACKED_TABLES:
            self._feed.notify(ChangeEvent(table, event))
