"""
In-process backend: tables, objects and users live in memory.

Used for development without a database and as the remote service in the
test suite. Public URLs are shaped like those of a hosted storage host so
URL derived deletion and image transforms behave as in production.
"""
import secrets
from copy import deepcopy
from datetime import timedelta

from django.utils import timezone

from .. import defaults
from ..exceptions import AuthError, BackendError, MultipleRowsError, NoRowsError, StorageError
from .base import (
    ALL_TABLES, SIGNED_IN, TIMESTAMPED_TABLES, TOKEN_REFRESHED,
    BaseAuth, BaseBackend, BaseStorage, Session,
)

SESSION_LIFETIME = timedelta(hours=1)


class LocMemStorage(BaseStorage):
    def __init__(self, bucket, base_url):
        super().__init__(bucket)
        self.base_url = base_url.rstrip('/')
        self.objects = {}

    async def upload(self, path, content, content_type=None):
        if path in self.objects:
            raise StorageError(f"The resource already exists: {path}")
        self.objects[path] = bytes(content)

    def public_url(self, path):
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    async def remove(self, paths):
        for path in paths:
            self.objects.pop(path, None)


class LocMemAuth(BaseAuth):
    def __init__(self, users=None):
        super().__init__()
        self.users = dict(users or {})

    def _issue(self, email):
        return Session(
            user_id=email,
            email=email,
            access_token=secrets.token_urlsafe(32),
            refresh_token=secrets.token_urlsafe(32),
            expires_at=timezone.now() + SESSION_LIFETIME,
        )

    async def sign_in_with_password(self, email, password):
        if not password or self.users.get(email) != password:
            raise AuthError("Invalid login credentials")
        session = self._issue(email)
        self._set_session(SIGNED_IN, session)
        return session

    async def refresh_session(self):
        if self._session is None:
            raise AuthError("No active session to refresh")
        fresh = self._issue(self._session.email)
        session = self._session.refreshed(fresh.access_token, fresh.refresh_token, fresh.expires_at)
        self._set_session(TOKEN_REFRESHED, session)
        return session


class LocMemBackend(BaseBackend):
    def __init__(self, bucket='restaurant-assets', base_url='https://tavola.supabase.co', users=None, seed=None):
        super().__init__(bucket=bucket)
        self.storage = LocMemStorage(bucket, base_url)
        self.auth = LocMemAuth(users)
        self.tables = {table: [] for table in ALL_TABLES}
        self._last_id = {table: 0 for table in ALL_TABLES}
        # Singleton rows exist from the start, as they do on the hosted service
        self._store_row('contact_info', dict(defaults.initial(defaults.CONTACT_INFO), id=defaults.SINGLETON_ID))
        self._store_row('about_info', dict(defaults.initial(defaults.ABOUT_INFO), id=defaults.SINGLETON_ID))
        self._store_row('chef_special', defaults.initial(defaults.CHEF_SPECIAL))
        for table, rows in (seed or {}).items():
            for row in rows:
                self._store_row(table, row)

    def _table(self, table):
        try:
            return self.tables[table]
        except KeyError:
            raise BackendError(f'relation "{table}" does not exist') from None

    def _store_row(self, table, row):
        row = deepcopy(row)
        rows = self._table(table)
        if row.get('id') is None:
            row['id'] = self._last_id[table] + 1
        elif any(existing['id'] == row['id'] for existing in rows):
            raise BackendError(f'duplicate key value violates unique constraint "{table}_pkey"')
        self._last_id[table] = max(self._last_id[table], row['id'])
        if table in TIMESTAMPED_TABLES:
            row.setdefault('created_at', timezone.now())
        rows.append(row)
        return deepcopy(row)

    @staticmethod
    def _matches(row, match):
        return all(row.get(key) == value for key, value in match.items())

    async def select(self, table, columns=None, order_by=None, descending=False):
        rows = deepcopy(self._table(table))
        if order_by:
            rows.sort(key=lambda row: row.get(order_by), reverse=descending)
        if columns:
            rows = [{column: row.get(column) for column in columns} for row in rows]
        return rows

    async def select_single(self, table):
        rows = self._table(table)
        if not rows:
            raise NoRowsError(f"No rows returned from {table}")
        if len(rows) > 1:
            raise MultipleRowsError(f"{len(rows)} rows returned from {table}, expected one")
        return deepcopy(rows[0])

    async def insert(self, table, rows):
        if table == 'menu_categories':
            existing = {row['name'] for row in self._table(table)}
            for row in rows:
                if row.get('name') in existing:
                    raise BackendError('duplicate key value violates unique constraint "menu_categories_name_key"')
        stored = [self._store_row(table, {key: value for key, value in row.items() if key != 'id'}) for row in rows]
        if stored:
            self._emit(table, "INSERT")
        return stored

    async def update(self, table, values, match):
        updated = []
        for row in self._table(table):
            if self._matches(row, match):
                row.update(deepcopy({key: value for key, value in values.items() if key != 'id'}))
                updated.append(deepcopy(row))
        if updated:
            self._emit(table, "UPDATE")
        return updated

    async def delete(self, table, match=None):
        rows = self._table(table)
        keep = [row for row in rows if match is not None and not self._matches(row, match)]
        count = len(rows) - len(keep)
        self.tables[table] = keep
        if count:
            self._emit(table, "DELETE")
        return count
