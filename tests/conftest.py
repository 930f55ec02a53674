import httpx
import pytest
from school_portal.core.api_client import ApiClient
from school_portal.core.notify import Notifier
from school_portal.core.session import AuthSession, SessionStore
from school_portal.services.query_cache import QueryClient
from tests.support import BASE_URL, BRANCH_ID, USER_ID, FakeAuth, FakeBackend


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def fake_auth():
    return FakeAuth()


@pytest.fixture
def session():
    store = SessionStore()
    store.set_session(AuthSession(access_token="token-1", user_id=USER_ID, email="admin@alnoor.com"))
    store.current_branch_id = BRANCH_ID
    return store


@pytest.fixture
def cache():
    return QueryClient()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def redirects():
    return []


@pytest.fixture
async def api(backend, session, cache, fake_auth, redirects):
    client = ApiClient(
        BASE_URL,
        session,
        auth=fake_auth,
        on_unauthorized=redirects.append,
        on_session_cleared=cache.clear,
        transport=httpx.MockTransport(backend),
    )
    yield client
    await client.aclose()


@pytest.fixture
def make_service(api, cache, session, notifier):
    def build(service_cls, **kwargs):
        return service_cls(api, cache, session, notifier=notifier, **kwargs)

    return build
