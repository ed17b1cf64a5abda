from django.apps import apps
from django.utils import timezone
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed


def get_runtime():
    return apps.get_app_config('storefront').runtime


class StoreAdmin:
    """The operator signed in to the content store"""
    is_authenticated = True
    is_anonymous = False

    def __init__(self, session):
        self.session = session
        self.pk = session.user_id
        self.email = session.email

    def __str__(self):
        return self.email


class StoreSessionAuthentication(BaseAuthentication):
    """
    Bearer access token of the content store's session.

    Only the token of the session the store currently holds is accepted.
    Nothing is decided while the session is still resolving; the admin
    permission answers that case.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        header = get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise AuthenticationFailed('Invalid token header. Expected "Bearer <token>".')
        try:
            token = header[1].decode()
        except UnicodeError:
            raise AuthenticationFailed('Invalid token header. Token contains invalid characters.')

        session = get_runtime().store.session
        if not session.is_resolved:
            return None
        current = session.session_for(token)
        if current is None:
            raise AuthenticationFailed('Invalid or expired session token.')
        if current.expires_at <= timezone.now():
            raise AuthenticationFailed('Session expired, refresh it or sign in again.')
        return (StoreAdmin(current), token)

    def authenticate_header(self, request):
        return self.keyword
