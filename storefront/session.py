import asyncio
import logging
import secrets

from .exceptions import AuthError
from .results import MutationResult

logger = logging.getLogger(__name__)

RESOLVING = 'resolving'
AUTHENTICATED = 'authenticated'
UNAUTHENTICATED = 'unauthenticated'


class SessionManager:
    """
    Tracks the signed in identity of a content store.

    The state starts as ``resolving`` and settles on ``authenticated`` or
    ``unauthenticated`` once the initial lookup finishes, whatever its
    outcome. Auth notifications replace the session from then on without
    going back to ``resolving``.
    """

    def __init__(self, auth):
        self.auth = auth
        self.session = None
        self.is_resolved = False
        self._notified = False
        self._subscription = None
        self._resolving = None

    @property
    def state(self):
        if not self.is_resolved:
            return RESOLVING
        return AUTHENTICATED if self.session is not None else UNAUTHENTICATED

    def start(self):
        """Listen for auth changes and resolve the current session in the background"""
        if self._subscription is None:
            self._subscription = self.auth.on_auth_state_change(self._on_auth_change)
        if self._resolving is None:
            self._resolving = asyncio.ensure_future(self._resolve())
        return self._resolving

    async def _resolve(self):
        try:
            session = await self.auth.get_session()
        except Exception as exc:
            logger.warning(f"Session lookup failed, treating as signed out: {exc}")
            session = None
        # A notification that landed first is newer than this lookup
        if not self._notified:
            self.session = session
        self.is_resolved = True
        logger.info(f"Session resolved: {self.state}")

    async def wait_resolved(self):
        if self._resolving is not None:
            await self._resolving

    def _on_auth_change(self, event, session):
        logger.info(f"Auth state changed: {event}")
        self._notified = True
        self.session = session

    def session_for(self, token):
        """The held session if ``token`` is its access token, else None"""
        # Read once, the loop thread may replace it meanwhile
        session = self.session
        if session is None or not token:
            return None
        if not secrets.compare_digest(token, session.access_token):
            return None
        return session

    def is_current_token(self, token):
        return self.session_for(token) is not None

    async def sign_in(self, email, password):
        try:
            session = await self.auth.sign_in_with_password(email, password)
        except AuthError as exc:
            logger.warning(f"Sign in failed for {email}: {exc}")
            return MutationResult.failure(exc)
        return MutationResult.success(session)

    async def sign_out(self):
        try:
            await self.auth.sign_out()
        except AuthError as exc:
            logger.error(f"Sign out failed: {exc}")
            return MutationResult.failure(exc)
        return MutationResult.success()

    async def refresh(self):
        try:
            session = await self.auth.refresh_session()
        except AuthError as exc:
            logger.warning(f"Session refresh failed: {exc}")
            return MutationResult.failure(exc)
        return MutationResult.success(session)

    def close(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self._resolving is not None and not self._resolving.done():
            self._resolving.cancel()
        # The next start looks the session up again
        self._resolving = None
        self.is_resolved = False
        self._notified = False
