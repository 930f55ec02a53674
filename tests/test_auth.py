import pytest
from pydantic import ValidationError
from school_portal.core.errors import ApiError
from school_portal.services.auth import AuthService
from tests.support import BRANCH_ID, USER_ID, FakeAuth, envelope

ME = {
    "id": USER_ID,
    "email": "admin@alnoor.com",
    "fullName": "School Admin",
    "roles": [{"roleId": "r1", "roleName": "admin", "branchId": BRANCH_ID}],
}

REGISTERED = {
    "user": {
        "id": USER_ID,
        "email": "admin@alnoor.com",
        "fullName": "School Admin",
        "tenantId": "t1",
        "branchId": BRANCH_ID,
    },
    "accessToken": "a",
    "refreshToken": "r",
}

SIGNUP = {
    "schoolName": "Al Noor",
    "branchName": "Main Campus",
    "email": "admin@alnoor.com",
    "password": "secret1",
    "fullName": "School Admin",
}


class RejectingAuth(FakeAuth):
    async def sign_in_with_password(self, credentials):
        raise RuntimeError("Email not confirmed")


@pytest.fixture
def targets():
    return []


@pytest.fixture
def auth(make_service, fake_auth, targets):
    return make_service(AuthService, provider=fake_auth, app_url="https://portal.alnoor.com/", redirect=targets.append)


async def test_sign_in_stores_session_and_clears_cache(auth, fake_auth, session, cache):
    session.clear()
    cache.set_data(("students", BRANCH_ID), ["from another user"])

    result = await auth.sign_in("admin@alnoor.com", "secret1")

    assert fake_auth.sign_in_calls == [{"email": "admin@alnoor.com", "password": "secret1"}]
    assert result.access_token == "token-1"
    assert session.access_token == "token-1"
    assert session.session.user_id == USER_ID
    assert cache.keys() == []


async def test_sign_in_without_session_fails(make_service, session):
    class NoSessionAuth(FakeAuth):
        async def sign_in_with_password(self, credentials):
            return None

    auth = make_service(AuthService, provider=NoSessionAuth())
    session.clear()

    with pytest.raises(ApiError):
        await auth.sign_in("admin@alnoor.com", "secret1")
    assert not session.has_session


async def test_sign_out_clears_everything_and_redirects(auth, fake_auth, session, cache, targets):
    cache.set_data(("users", BRANCH_ID), [])

    await auth.sign_out()

    assert fake_auth.sign_out_calls == 1
    assert not session.has_session
    assert session.current_branch_id is None
    assert cache.keys() == []
    assert targets == ["/login"]


async def test_reset_password_link_points_at_the_portal(auth, fake_auth):
    await auth.reset_password_for_email("admin@alnoor.com")

    assert fake_auth.reset_requests == [
        ("admin@alnoor.com", {"redirect_to": "https://portal.alnoor.com/reset-password"}),
    ]


async def test_update_password_checks_confirmation(auth, fake_auth):
    with pytest.raises(ValidationError):
        await auth.update_password("secret1", "secret2")
    assert fake_auth.updated == []

    await auth.update_password("secret1", "secret1")
    assert fake_auth.updated == [{"password": "secret1"}]


async def test_current_user_adopts_server_branch(auth, backend, session):
    backend.add("GET", "/api/v1/auth/me", json_body=envelope({**ME, "currentBranch": {"id": "branch-9", "name": "North"}}))

    user = await auth.current_user()

    assert user.full_name == "School Admin"
    assert session.current_branch_id == "branch-9"


async def test_select_branch_switches_and_reloads(auth, backend, session, cache, notifier):
    backend.add("POST", "/api/v1/auth/select-branch", json_body=envelope({"id": "branch-2", "name": "North Campus"}))
    backend.add("GET", "/api/v1/auth/me", json_body=envelope({**ME, "currentBranch": {"id": "branch-2", "name": "North Campus"}}))
    cache.set_data(("students", BRANCH_ID), ["old branch"])

    branch = await auth.select_branch("branch-2")

    assert branch.id == "branch-2"
    assert session.current_branch_id == "branch-2"
    assert backend.body(backend.requests[0]) == {"branchId": "branch-2"}
    assert backend.calls("GET", "/api/v1/auth/me")[0].headers["X-Branch-Id"] == "branch-2"
    assert cache.get_state(("students", BRANCH_ID)).is_stale
    assert notifier.history[-1].message == "Switched to North Campus"


async def test_select_branch_failure_keeps_branch(auth, backend, session, notifier):
    backend.add("POST", "/api/v1/auth/select-branch", json_body={"message": "Branch not accessible"}, status=403)

    with pytest.raises(ApiError):
        await auth.select_branch("branch-2")

    assert session.current_branch_id == BRANCH_ID
    assert notifier.history[-1].level == "error"
    assert notifier.history[-1].message == "Branch not accessible"


async def test_signup_signs_in(auth, backend, fake_auth, session, targets):
    backend.add("POST", "/api/v1/auth/register", json_body=envelope(REGISTERED), status=201)

    result = await auth.signup(SIGNUP)

    assert result.user.tenant_id == "t1"
    assert backend.body(backend.requests[0])["schoolName"] == "Al Noor"
    assert fake_auth.sign_in_calls == [{"email": "admin@alnoor.com", "password": "secret1"}]
    assert targets == []


async def test_signup_falls_back_to_login_page(make_service, backend, targets):
    backend.add("POST", "/api/v1/auth/register", json_body=envelope(REGISTERED), status=201)
    auth = make_service(AuthService, provider=RejectingAuth(), redirect=targets.append)

    result = await auth.signup(SIGNUP)

    assert result.user.email == "admin@alnoor.com"
    assert targets == ["/login?registered=true"]


async def test_without_provider(make_service, session):
    auth = make_service(AuthService)

    assert await auth.get_session() is session.session
    with pytest.raises(ApiError, match="not configured"):
        await auth.sign_in("admin@alnoor.com", "secret1")
