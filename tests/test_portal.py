import httpx
import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from school_portal.core.config import Settings
from school_portal.core.errors import UnauthorizedError
from school_portal.portal import Portal
from school_portal.services.notifications import UNREAD_POLL_JOB
from tests.support import BASE_URL, FakeAuth, envelope


def _settings(**overrides):
    return Settings(_env_file=None, API_URL=BASE_URL, **overrides)


async def test_portal_wires_services_to_one_client(backend):
    backend.add("GET", "/api/v1/academic-years/active", json_body=envelope(None))
    auth = FakeAuth()
    portal = await Portal.create(
        _settings(BULK_REQUEST_TIMEOUT_SECONDS=45),
        auth_provider=auth,
        transport=httpx.MockTransport(backend),
    )

    await portal.auth.sign_in("admin@alnoor.com", "secret1")
    await portal.academic_years.active()

    assert backend.requests[0].headers["Authorization"] == "Bearer token-1"
    assert portal.academic_years.stale_time == 300
    assert portal.attendance.bulk_timeout == 45
    assert portal.class_sections.lookups is portal.lookups
    assert portal.notifier.theme is portal.theme
    await portal.aclose()


async def test_start_polls_unread_count_until_closed():
    scheduler = AsyncIOScheduler()
    portal = Portal(_settings(NOTIFICATION_POLL_SECONDS=15), scheduler=scheduler)

    portal.start()
    job = scheduler.get_job(UNREAD_POLL_JOB)
    assert job.trigger.interval.total_seconds() == 15

    await portal.aclose()
    assert scheduler.get_job(UNREAD_POLL_JOB) is None


async def test_portal_without_supabase_has_no_provider():
    portal = await Portal.create(_settings(SUPABASE_PUBLIC_URL="", SUPABASE_ANON_KEY=""))

    assert portal.auth.provider is None
    await portal.aclose()


async def test_unauthorized_response_empties_portal_cache(backend):
    backend.add("GET", "/api/v1/academic-years/active", json_body={"message": "Expired"}, status=401)
    redirects = []
    portal = await Portal.create(
        _settings(), auth_provider=FakeAuth(), transport=httpx.MockTransport(backend), on_unauthorized=redirects.append
    )
    portal.cache.set_data(("students", "branch-1"), ["Salim"])

    with pytest.raises(UnauthorizedError):
        await portal.academic_years.active()

    assert portal.cache.keys() == []
    assert redirects == ["/login"]
    await portal.aclose()
