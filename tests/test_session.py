import asyncio

from storefront.backends.locmem import LocMemAuth
from storefront.session import AUTHENTICATED, RESOLVING, UNAUTHENTICATED, SessionManager

from .conftest import ADMIN_EMAIL, ADMIN_PASSWORD


class SlowAuth(LocMemAuth):
    """Initial session lookup that waits until released"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.release = None

    async def get_session(self):
        self.release = asyncio.Event()
        await self.release.wait()
        return None


class BrokenAuth(LocMemAuth):
    async def get_session(self):
        raise ConnectionError("auth service unreachable")


def users():
    return {ADMIN_EMAIL: ADMIN_PASSWORD}


def test_session_begins_resolving_then_settles(run):
    async def scenario():
        manager = SessionManager(LocMemAuth(users()))
        states = [manager.state]
        manager.start()
        states.append(manager.state)
        await manager.wait_resolved()
        states.append(manager.state)
        return states

    assert run(scenario()) == [RESOLVING, RESOLVING, UNAUTHENTICATED]


def test_sign_in_and_out_never_reenter_resolving(run):
    async def scenario():
        manager = SessionManager(LocMemAuth(users()))
        manager.start()
        await manager.wait_resolved()
        states = []
        result = await manager.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        states.append(manager.state)
        await manager.sign_out()
        states.append(manager.state)
        return result, states

    result, states = run(scenario())

    assert result
    assert result.data.email == ADMIN_EMAIL
    assert states == [AUTHENTICATED, UNAUTHENTICATED]


def test_resolution_error_counts_as_signed_out(run):
    async def scenario():
        manager = SessionManager(BrokenAuth(users()))
        manager.start()
        await manager.wait_resolved()
        return manager

    manager = run(scenario())

    assert manager.is_resolved
    assert manager.state == UNAUTHENTICATED


def test_existing_session_resolves_authenticated(run):
    async def scenario():
        auth = LocMemAuth(users())
        await auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
        manager = SessionManager(auth)
        manager.start()
        await manager.wait_resolved()
        return manager

    assert run(scenario()).state == AUTHENTICATED


def test_notification_during_resolution_is_not_overwritten(run):
    async def scenario():
        auth = SlowAuth(users())
        manager = SessionManager(auth)
        manager.start()
        await asyncio.sleep(0)
        await manager.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
        still_resolving = manager.state
        auth.release.set()
        await manager.wait_resolved()
        return still_resolving, manager.state

    assert run(scenario()) == (RESOLVING, AUTHENTICATED)


def test_wrong_password_is_a_failed_result(run):
    async def scenario():
        manager = SessionManager(LocMemAuth(users()))
        manager.start()
        await manager.wait_resolved()
        return manager, await manager.sign_in(ADMIN_EMAIL, 'nope')

    manager, result = run(scenario())

    assert not result
    assert result.error == "Invalid login credentials"
    assert manager.state == UNAUTHENTICATED


def test_refresh_rotates_access_token(run):
    async def scenario():
        manager = SessionManager(LocMemAuth(users()))
        manager.start()
        await manager.wait_resolved()
        first = (await manager.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)).data
        result = await manager.refresh()
        return manager, first, result

    manager, first, result = run(scenario())

    assert result
    assert result.data.access_token != first.access_token
    assert manager.is_current_token(result.data.access_token)
    assert not manager.is_current_token(first.access_token)
    assert manager.state == AUTHENTICATED


def test_refresh_without_session_fails(run):
    async def scenario():
        manager = SessionManager(LocMemAuth(users()))
        manager.start()
        await manager.wait_resolved()
        return await manager.refresh()

    assert not run(scenario())


def test_is_current_token_without_session():
    manager = SessionManager(LocMemAuth(users()))

    assert not manager.is_current_token('anything')
    assert not manager.is_current_token('')


def test_close_stops_listening(run):
    async def scenario():
        auth = LocMemAuth(users())
        manager = SessionManager(auth)
        manager.start()
        await manager.wait_resolved()
        manager.close()
        await auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
        return manager

    manager = run(scenario())

    assert manager.session is None
    assert manager.state == UNAUTHENTICATED


def test_restart_resolves_the_session_again(run):
    async def scenario():
        auth = LocMemAuth(users())
        manager = SessionManager(auth)
        manager.start()
        await manager.wait_resolved()
        before = manager.state
        manager.close()
        await auth.sign_in_with_password(ADMIN_EMAIL, ADMIN_PASSWORD)
        manager.start()
        await manager.wait_resolved()
        return before, manager

    before, manager = run(scenario())

    assert before == UNAUTHENTICATED
    assert manager.state == AUTHENTICATED
    assert manager.session.email == ADMIN_EMAIL


def test_session_for_matching_token(run):
    async def scenario():
        manager = SessionManager(LocMemAuth(users()))
        manager.start()
        await manager.wait_resolved()
        return manager, (await manager.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)).data

    manager, session = run(scenario())

    assert manager.session_for(session.access_token) is session
    assert manager.session_for('stale-token') is None
    manager.session = None
    assert manager.session_for(session.access_token) is None
