"""
Backend over the ``content`` app's tables.

Tables are the content models (addressed by ``db_table``), the change feed
is the ``content.signals.table_changed`` signal, assets are files under
``MEDIA_ROOT/<bucket>`` and sessions are simplejwt token pairs issued for
Django users. Blocking ORM and filesystem work runs through
``sync_to_async``.
"""
import logging
import os
from datetime import datetime, timezone as dt_timezone
from urllib.parse import urljoin

from asgiref.sync import sync_to_async
from django.apps import apps
from django.conf import settings
from django.contrib.auth import authenticate
from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage
from django.db import DatabaseError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from content.signals import table_changed

from ..exceptions import (
    AuthError, BackendError, MultipleRowsError, NoRowsError,
    StorageAuthError, StorageError, StoragePermissionError,
)
from .base import (
    SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED,
    BaseAuth, BaseBackend, BaseStorage, Session, Subscription,
)

logger = logging.getLogger(__name__)


def _expiry(token):
    return datetime.fromtimestamp(token['exp'], tz=dt_timezone.utc)


class ORMAuth(BaseAuth):
    def _issue(self, user):
        refresh = RefreshToken.for_user(user)
        access = refresh.access_token
        return Session(
            user_id=str(user.pk),
            email=user.email or user.get_username(),
            access_token=str(access),
            refresh_token=str(refresh),
            expires_at=_expiry(access),
        )

    def _authenticate(self, email, password):
        user = authenticate(username=email, password=password)
        if user is None or not user.is_active:
            raise AuthError("Invalid login credentials")
        return self._issue(user)

    async def sign_in_with_password(self, email, password):
        session = await sync_to_async(self._authenticate)(email, password)
        self._set_session(SIGNED_IN, session)
        return session

    async def refresh_session(self):
        if self._session is None:
            raise AuthError("No active session to refresh")
        try:
            refresh = RefreshToken(self._session.refresh_token)
        except TokenError as exc:
            logger.warning(f"Refresh token rejected, signing out: {exc}")
            self._set_session(SIGNED_OUT, None)
            raise AuthError(str(exc)) from exc
        access = refresh.access_token
        session = self._session.refreshed(str(access), str(refresh), _expiry(access))
        self._set_session(TOKEN_REFRESHED, session)
        return session


class ORMStorage(BaseStorage):
    def __init__(self, bucket, auth, base_url='', require_session=True):
        super().__init__(bucket)
        self.auth = auth
        self.base_url = base_url
        self.require_session = require_session
        self.files = FileSystemStorage(
            location=os.path.join(settings.MEDIA_ROOT, bucket),
            base_url=f"{settings.MEDIA_URL}{bucket}/",
        )

    def _save(self, path, content):
        if self.files.exists(path):
            raise StorageError(f"The resource already exists: {path}")
        try:
            self.files.save(path, ContentFile(content))
        except PermissionError as exc:
            raise StoragePermissionError(str(exc)) from exc
        except OSError as exc:
            raise StorageError(str(exc)) from exc

    async def upload(self, path, content, content_type=None):
        if self.require_session and await self.auth.get_session() is None:
            raise StorageAuthError("Invalid JWT: no signed in session")
        await sync_to_async(self._save)(path, content)

    def public_url(self, path):
        return urljoin(self.base_url, self.files.url(path)) if self.base_url else self.files.url(path)

    def _remove(self, paths):
        for path in paths:
            try:
                self.files.delete(path)
            except PermissionError as exc:
                raise StoragePermissionError(str(exc)) from exc
            except OSError as exc:
                raise StorageError(str(exc)) from exc

    async def remove(self, paths):
        await sync_to_async(self._remove)(paths)


class ORMBackend(BaseBackend):
    def __init__(self, bucket='restaurant-assets', base_url='', require_session=True):
        super().__init__(bucket=bucket)
        self.auth = ORMAuth()
        self.storage = ORMStorage(bucket, self.auth, base_url=base_url, require_session=require_session)
        self._models = None
        self._dispatch_uid = f"orm-backend-{id(self)}"

    def get_model(self, table):
        if self._models is None:
            self._models = {model._meta.db_table: model for model in apps.get_app_config('content').get_models()}
        try:
            return self._models[table]
        except KeyError:
            raise BackendError(f'relation "{table}" does not exist') from None

    @staticmethod
    def _check_columns(model, columns):
        for column in columns:
            try:
                model._meta.get_field(column)
            except FieldDoesNotExist:
                raise BackendError(f'column "{column}" of relation "{model._meta.db_table}" does not exist') from None

    # =============== SYNC IMPLEMENTATIONS ===============

    def _select(self, table, columns, order_by, descending):
        model = self.get_model(table)
        self._check_columns(model, list(columns or ()) + ([order_by] if order_by else []))
        queryset = model.objects.all()
        if order_by:
            queryset = queryset.order_by(f"-{order_by}" if descending else order_by)
        return list(queryset.values(*(columns or ())))

    def _select_single(self, table):
        rows = list(self.get_model(table).objects.values()[:2])
        if not rows:
            raise NoRowsError(f"No rows returned from {table}")
        if len(rows) > 1:
            raise MultipleRowsError(f"Multiple rows returned from {table}, expected one")
        return rows[0]

    def _insert(self, table, rows):
        model = self.get_model(table)
        with transaction.atomic():
            created = []
            for row in rows:
                values = {key: value for key, value in row.items() if key != 'id'}
                self._check_columns(model, values)
                instance = model(**values)
                instance.full_clean()
                instance.save()
                created.append(instance.pk)
        return list(model.objects.filter(pk__in=created).order_by('pk').values())

    def _update(self, table, values, match):
        model = self.get_model(table)
        values = {key: value for key, value in values.items() if key != 'id'}
        self._check_columns(model, list(values) + list(match))
        with transaction.atomic():
            updated = []
            for instance in model.objects.filter(**match):
                for key, value in values.items():
                    setattr(instance, key, value)
                instance.full_clean()
                instance.save()
                updated.append(instance.pk)
        return list(model.objects.filter(pk__in=updated).order_by('pk').values())

    def _delete(self, table, match):
        model = self.get_model(table)
        if match is None:
            queryset = model.objects.all()
        else:
            self._check_columns(model, match)
            queryset = model.objects.filter(**match)
        count, _ = queryset.delete()
        return count

    async def _call(self, func, *args):
        try:
            return await sync_to_async(func)(*args)
        except ValidationError as exc:
            raise BackendError(f"Invalid row: {exc}") from exc
        except (DatabaseError, TypeError, ValueError) as exc:
            raise BackendError(str(exc)) from exc

    # =============== BACKEND API ===============

    async def select(self, table, columns=None, order_by=None, descending=False):
        return await self._call(self._select, table, columns, order_by, descending)

    async def select_single(self, table):
        return await self._call(self._select_single, table)

    async def insert(self, table, rows):
        return await self._call(self._insert, table, rows)

    async def update(self, table, values, match):
        return await self._call(self._update, table, values, match)

    async def delete(self, table, match=None):
        return await self._call(self._delete, table, match)

    def subscribe(self, callback):
        if not len(self._feed):
            table_changed.connect(self._relay, weak=False, dispatch_uid=self._dispatch_uid)
        subscription = super().subscribe(callback)
        return Subscription(lambda: self._unsubscribe(subscription))

    def _unsubscribe(self, subscription):
        subscription.unsubscribe()
        if not len(self._feed):
            table_changed.disconnect(dispatch_uid=self._dispatch_uid)

    def _relay(self, sender, table, event, **kwargs):
        self._emit(table, event)
