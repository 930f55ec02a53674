import httpx
import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from school_portal.core.errors import ApiError, NetworkError
from school_portal.services.academic_years import AcademicYearService
from school_portal.services.assessment import AssessmentService
from school_portal.services.attendance import AttendanceService
from school_portal.services.class_sections import ClassSectionService
from school_portal.services.core_lookups import CoreLookupService
from school_portal.services.notifications import UNREAD_POLL_JOB, NotificationService
from school_portal.services.parents import ParentAssociationService
from school_portal.services.polling import Poller
from school_portal.services.schedule import ScheduleService
from school_portal.services.students import StudentService
from school_portal.services.system_settings import SettingsStatusService, SystemSettingService
from school_portal.services.users import UserService
from tests.support import BRANCH_ID, USER_ID, envelope

YEAR = {"id": "y1", "name": "2025/2026", "startDate": "2025-09-01", "endDate": "2026-06-30"}


def _class_section(class_id, section_id):
    return {
        "id": f"{class_id}-{section_id}",
        "classId": class_id,
        "sectionId": section_id,
        "branchId": BRANCH_ID,
        "academicYearId": "y1",
        "capacity": 30,
    }


def _created_sections(backend):
    def handler(request):
        body = backend.body(request)
        return httpx.Response(
            201,
            json=envelope([_class_section(cs["classId"], cs["sectionId"]) for cs in body["classSections"]]),
        )

    return handler


def _lookups(backend, existing):
    backend.add("GET", "/api/v1/classes", json_body=envelope([
        {"id": "c1", "name": "1", "displayName": "Grade 1"},
        {"id": "c2", "name": "2", "displayName": "Grade 2"},
    ]))
    backend.add("GET", "/api/v1/sections", json_body=envelope([
        {"id": "s1", "name": "A"},
        {"id": "s2", "name": "B"},
    ]))
    backend.add("GET", "/api/v1/class-sections", json_body=envelope(existing))
    backend.add("POST", "/api/v1/class-sections", _created_sections(backend))


async def test_activating_a_year_refreshes_the_active_query(make_service, backend):
    years = make_service(AcademicYearService, stale_time=300)
    active = {"year": None}
    backend.add("GET", "/api/v1/academic-years/active", lambda r: httpx.Response(200, json=envelope(active["year"])))
    backend.add("POST", "/api/v1/academic-years", json_body=envelope(YEAR), status=201)

    def activate(request):
        active["year"] = {**YEAR, "isActive": True}
        return httpx.Response(200, json=envelope(active["year"]))

    backend.add("PATCH", "/api/v1/academic-years/y1/activate", activate)

    assert await years.active() is None
    assert await years.active() is None
    assert len(backend.calls("GET", "/api/v1/academic-years/active")) == 1

    created = await years.create({"name": "2025/2026", "startDate": "2025-09-01", "endDate": "2026-06-30"})
    await years.activate(created.id)
    year = await years.active()

    assert year.id == "y1"
    assert year.is_active
    assert len(backend.calls("GET", "/api/v1/academic-years/active")) == 2


async def test_branch_scoped_queries_wait_for_a_branch(make_service, backend, session):
    session.current_branch_id = None
    students = make_service(StudentService)

    assert await students.list() is None
    assert backend.requests == []


async def test_student_list_sends_branch_header_and_filters(make_service, backend):
    backend.add("GET", "/api/v1/students", json_body=envelope([], total=0))
    students = make_service(StudentService)

    response = await students.list({"classIds": ["c1", "c2"], "search": "sara"})

    request = backend.requests[0]
    assert request.headers["X-Branch-Id"] == BRANCH_ID
    assert request.url.params.get_list("classIds") == ["c1", "c2"]
    assert request.url.params["search"] == "sara"
    assert response.meta.total == 0


async def test_create_student_notifies_and_invalidates(make_service, backend, cache, notifier):
    backend.add("POST", "/api/v1/students", json_body=envelope({
        "id": "st1", "userId": "u9", "branchId": BRANCH_ID, "studentId": "S-001",
    }), status=201)
    cache.set_data(("students", BRANCH_ID, ()), ["old"])
    students = make_service(StudentService)

    student = await students.create({
        "email": "sara@alnoor.com", "password": "secret1", "fullName": "Sara", "studentId": "S-001",
    })

    assert student.student_id == "S-001"
    assert cache.get_state(("students", BRANCH_ID, ())).is_stale
    assert notifier.history[-1].message == "Student created successfully"


async def test_failed_write_shows_server_message(make_service, backend, notifier):
    backend.add("POST", "/api/v1/students", json_body={"message": "Student ID already taken"}, status=409)
    students = make_service(StudentService)

    with pytest.raises(ApiError):
        await students.create({
            "email": "sara@alnoor.com", "password": "secret1", "fullName": "Sara", "studentId": "S-001",
        })

    assert notifier.history[-1].level == "error"
    assert notifier.history[-1].message == "Student ID already taken"


async def test_update_user_roles(make_service, backend):
    backend.add("PUT", "/api/v1/users/u1/roles", json_body=envelope({
        "id": "u1", "email": "t@alnoor.com", "fullName": "Teacher",
    }))
    users = make_service(UserService)

    user = await users.update_roles("u1", ["r1", "r2"])

    assert user.id == "u1"
    assert backend.body(backend.requests[0]) == {"roleIds": ["r1", "r2"]}


async def test_bulk_attendance_timeout_warns_and_reloads(make_service, backend, cache, notifier):
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    backend.add("POST", "/api/v1/attendance/bulk", slow)
    cache.set_data(("attendance", BRANCH_ID), ["old"])
    attendance = make_service(AttendanceService)

    with pytest.raises(NetworkError) as exc:
        await attendance.bulk_mark({
            "classSectionId": "cs1",
            "date": "2025-10-01",
            "records": [{"studentId": "st1", "status": "present"}],
        })

    assert exc.value.timeout
    assert cache.get_state(("attendance", BRANCH_ID)).is_stale
    assert notifier.history[-1].level == "warning"
    assert notifier.history[-1].title == "Saving is taking longer than expected"


async def test_bulk_attendance_requires_records(make_service, backend):
    attendance = make_service(AttendanceService)

    with pytest.raises(ValueError):
        await attendance.bulk_mark({"classSectionId": "cs1", "date": "2025-10-01", "records": []})
    assert backend.requests == []


async def test_bulk_create_missing_class_sections(make_service, backend, notifier):
    _lookups(backend, [_class_section("c1", "s1")])
    class_sections = make_service(ClassSectionService, lookups=make_service(CoreLookupService))

    created = await class_sections.bulk_create_missing()

    posts = backend.calls("POST", "/api/v1/class-sections")
    assert len(posts) == 1
    assert backend.body(posts[0]) == {"classSections": [
        {"classId": "c1", "sectionId": "s2", "capacity": 30},
        {"classId": "c2", "sectionId": "s1", "capacity": 30},
        {"classId": "c2", "sectionId": "s2", "capacity": 30},
    ]}
    assert len(created) == 3
    assert notifier.history[-1].message == "3 class section(s) created successfully"


async def test_bulk_create_missing_sends_nothing_when_complete(make_service, backend, notifier):
    _lookups(backend, [_class_section(c, s) for c in ("c1", "c2") for s in ("s1", "s2")])
    class_sections = make_service(ClassSectionService, lookups=make_service(CoreLookupService))

    assert await class_sections.bulk_create_missing() == []
    assert backend.calls("POST", "/api/v1/class-sections") == []
    assert len(notifier.history) == 0


def _paged_class_sections(rows, per_page=20):
    def handler(request):
        page = int(request.url.params.get("page", "1"))
        chunk = rows[(page - 1) * per_page:page * per_page]
        body = envelope(chunk, total=len(rows), page=page, limit=per_page)
        body["meta"]["totalPages"] = -(-len(rows) // per_page)
        return httpx.Response(200, json=body)

    return handler


async def test_bulk_create_missing_reads_every_page(make_service, backend, notifier):
    class_ids = [f"c{i}" for i in range(1, 6)]
    section_ids = [f"s{i}" for i in range(1, 6)]
    backend.add("GET", "/api/v1/classes", json_body=envelope(
        [{"id": c, "name": c, "displayName": f"Grade {c}"} for c in class_ids]
    ))
    backend.add("GET", "/api/v1/sections", json_body=envelope([{"id": s, "name": s} for s in section_ids]))
    backend.add("GET", "/api/v1/class-sections", _paged_class_sections(
        [_class_section(c, s) for c in class_ids for s in section_ids]
    ))
    backend.add("POST", "/api/v1/class-sections", _created_sections(backend))
    class_sections = make_service(ClassSectionService, lookups=make_service(CoreLookupService))

    assert await class_sections.bulk_create_missing() == []

    pages = [r.url.params["page"] for r in backend.calls("GET", "/api/v1/class-sections")]
    assert pages == ["1", "2"]
    assert backend.calls("POST", "/api/v1/class-sections") == []
    assert len(notifier.history) == 0


async def test_unassign_class_teacher_sends_null(make_service, backend, notifier):
    backend.add("PUT", "/api/v1/class-sections/cs1/class-teacher", json_body=envelope(_class_section("c1", "s1")))
    class_sections = make_service(ClassSectionService)

    await class_sections.assign_class_teacher("cs1", None)

    assert backend.body(backend.requests[0]) == {"staffId": None}
    assert notifier.history[-1].message == "Class teacher unassigned successfully"


def _notification_counts(total, read):
    def handler(request):
        if request.url.params.get("isRead") == "true":
            return httpx.Response(200, json=envelope([], total=read["count"]))
        return httpx.Response(200, json=envelope([], total=total["count"]))

    return handler


async def test_unread_count_is_total_minus_read(make_service, backend):
    backend.add("GET", "/api/v1/notifications", _notification_counts({"count": 10}, {"count": 4}))
    notifications = make_service(NotificationService)

    assert await notifications.unread_count() == 6
    assert backend.requests[0].url.params["limit"] == "1"


async def test_unread_count_never_goes_negative(make_service, backend):
    backend.add("GET", "/api/v1/notifications", _notification_counts({"count": 3}, {"count": 5}))
    notifications = make_service(NotificationService)

    assert await notifications.unread_count() == 0


async def test_unread_count_without_meta_counts_rows(make_service, backend):
    def handler(request):
        if request.url.params.get("isRead") == "true":
            return httpx.Response(200, json={"data": [{}]})
        return httpx.Response(200, json={"data": [{}, {}, {}]})

    backend.add("GET", "/api/v1/notifications", handler)
    notifications = make_service(NotificationService)

    assert await notifications.unread_count() == 2


async def test_watch_unread_count_reports_changes(make_service, backend):
    total, read = {"count": 10}, {"count": 4}
    backend.add("GET", "/api/v1/notifications", _notification_counts(total, read))
    notifications = make_service(NotificationService)
    poller = Poller(AsyncIOScheduler())
    seen = []

    notifications.watch_unread_count(poller, seconds=30, on_change=seen.append)
    refresh = poller.scheduler.get_job(UNREAD_POLL_JOB).func

    await refresh()
    await refresh()
    read["count"] = 9
    await refresh()

    assert seen == [6, 1]

    notifications.unwatch_unread_count(poller)
    assert not poller.is_running(UNREAD_POLL_JOB)


async def test_watch_unread_count_survives_errors(make_service, backend):
    backend.add("GET", "/api/v1/notifications", json_body={"message": "boom"}, status=500)
    notifications = make_service(NotificationService)
    poller = Poller(AsyncIOScheduler())
    seen = []

    notifications.watch_unread_count(poller, on_change=seen.append)
    await poller.scheduler.get_job(UNREAD_POLL_JOB).func()

    assert seen == []


async def test_mark_all_read(make_service, backend, cache, notifier):
    backend.add("PUT", "/api/v1/notifications/read-all", json_body=envelope(None))
    cache.set_data(("notifications", "unread-count", USER_ID), 6)
    notifications = make_service(NotificationService)

    await notifications.mark_all_read()

    assert cache.get_state(("notifications", "unread-count", USER_ID)).is_stale
    assert notifier.history[-1].message == "All notifications marked as read"


async def test_parent_association_keeps_parent_in_the_url(make_service, backend, notifier):
    backend.add("POST", "/api/v1/parents/p1/children", json_body=envelope({
        "id": "a1", "parentUserId": "p1", "studentId": "st1", "relationship": "mother",
    }), status=201)
    parents = make_service(ParentAssociationService)

    association = await parents.create({"parentUserId": "p1", "studentId": "st1", "relationship": "mother"})

    assert association.id == "a1"
    assert backend.body(backend.requests[0]) == {
        "studentId": "st1",
        "relationship": "mother",
        "isPrimary": False,
        "canApprove": True,
    }
    assert notifier.history[-1].message == "Parent-student association created successfully"


async def test_system_setting_update_wraps_value(make_service, backend, cache):
    backend.add("PUT", "/api/v1/settings/communication_direction", json_body=envelope({
        "key": "communication_direction", "value": {"teacher_student": "both"},
    }))
    cache.set_data(("systemSettings", "all"), [])
    settings = make_service(SystemSettingService)

    setting = await settings.update("communication_direction", {"teacher_student": "both"})

    assert setting.value == {"teacher_student": "both"}
    assert backend.body(backend.requests[0]) == {"value": {"teacher_student": "both"}}
    assert cache.get_state(("systemSettings", "all")).is_stale


async def test_copy_from_branch_invalidates_copied_settings(make_service, backend, cache, notifier):
    backend.add("POST", "/api/v1/settings-status/copy-from-branch", json_body=envelope({"copied": True}))
    for key in [("settingsStatus", "status"), ("subjects",), ("schedule", "timingTemplates"), ("permissions", BRANCH_ID)]:
        cache.set_data(key, "old")
    cache.set_data(("students", BRANCH_ID), "old")
    status = make_service(SettingsStatusService)

    await status.copy_from_branch("branch-2")

    assert backend.body(backend.requests[0]) == {"sourceBranchId": "branch-2"}
    for key in [("settingsStatus", "status"), ("subjects",), ("schedule", "timingTemplates"), ("permissions", BRANCH_ID)]:
        assert cache.get_state(key).is_stale
    assert not cache.get_state(("students", BRANCH_ID)).is_stale
    assert notifier.history[-1].message == "Settings copied successfully"


async def test_creating_a_class_invalidates_levels(make_service, backend, cache):
    backend.add("POST", "/api/v1/classes", json_body=envelope({"id": "c3", "name": "3", "displayName": "Grade 3"}))
    cache.set_data(("levels",), [])
    lookups = make_service(CoreLookupService)

    created = await lookups.create_class({"name": "3", "displayName": "Grade 3", "sortOrder": 3})

    assert created.display_name == "Grade 3"
    assert cache.get_state(("levels",)).is_stale


async def test_holidays_need_an_academic_year(make_service, backend):
    backend.add("GET", "/api/v1/public-holidays", json_body=envelope([
        {"id": "h1", "name": "National Day", "startDate": "2025-09-23", "endDate": "2025-09-23", "academicYearId": "y1"},
    ]))
    schedule = make_service(ScheduleService)

    assert await schedule.public_holidays(None) is None
    assert backend.requests == []

    holidays = await schedule.public_holidays("y1")
    assert holidays[0].name == "National Day"
    assert backend.requests[0].url.params["academicYearId"] == "y1"


async def test_update_school_days(make_service, backend):
    backend.add("PUT", "/api/v1/settings/school-days", json_body=envelope([0, 1, 2, 3, 4]))
    schedule = make_service(ScheduleService)

    assert await schedule.update_school_days([0, 1, 2, 3, 4]) == [0, 1, 2, 3, 4]
    assert backend.body(backend.requests[0]) == {"activeDays": [0, 1, 2, 3, 4]}


async def test_assign_grade_template_to_class(make_service, backend):
    backend.add("PUT", "/api/v1/grade-templates/g1/assign-classes", json_body=envelope(None))
    assessment = make_service(AssessmentService)

    await assessment.assign_to_class({"gradeTemplateId": "g1", "classId": "c1", "minimumPassingGrade": "D"})

    assert backend.body(backend.requests[0]) == {"classId": "c1", "minimumPassingGrade": "D"}


async def test_set_leave_quota(make_service, backend):
    backend.add("PUT", "/api/v1/settings/leave-quota", json_body=envelope({"academicYearId": "y1", "annualQuota": 12}))
    assessment = make_service(AssessmentService)

    quota = await assessment.set_leave_quota("y1", 12)

    assert quota.annual_quota == 12
    assert backend.body(backend.requests[0]) == {"academicYearId": "y1", "annualQuota": 12}


async def test_class_attendance_for_a_day(make_service, backend):
    backend.add("GET", "/api/v1/attendance/class/cs1/date/2025-10-01", json_body=envelope([{
        "id": "a1",
        "studentId": "st1",
        "studentName": "Sara",
        "classSectionId": "cs1",
        "className": "Grade 1",
        "sectionName": "A",
        "date": "2025-10-01",
        "status": "late",
        "branchId": BRANCH_ID,
        "academicYearId": "y1",
    }]))
    attendance = make_service(AttendanceService)

    records = await attendance.by_class_and_date("cs1", "2025-10-01")

    assert records[0].status == "late"
    assert records[0].date.isoformat() == "2025-10-01"
