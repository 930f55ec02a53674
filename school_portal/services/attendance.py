from datetime import date
from typing import List, Optional, Union
from school_portal.core.dates import as_date, school_today
from school_portal.core.errors import NetworkError
from school_portal.schemas.attendance import (
    Attendance,
    AttendanceQuery,
    AttendanceReport,
    AttendanceReportQuery,
    AttendanceSummary,
    AttendanceUpdate,
    BulkMarkAttendance,
)
from school_portal.schemas.common import ApiResponse
from school_portal.services.base import API_PREFIX, ResourceService, as_model, error_message
from school_portal.services.query_cache import make_key


BASE = f"{API_PREFIX}/attendance"

ALL_KEY = ("attendance",)
BULK_TIMEOUT_SECONDS = 30.0


def _range(start_date: Optional[date], end_date: Optional[date]) -> dict:
    return {"startDate": start_date, "endDate": end_date}


class AttendanceService(ResourceService):
    bulk_timeout = BULK_TIMEOUT_SECONDS

    async def list(self, query: Union[AttendanceQuery, dict, None] = None) -> Optional[ApiResponse]:
        query = as_model(AttendanceQuery, query)

        async def fetch():
            return await self.api.get(BASE, params=query.to_params(), model=list[Attendance])

        return await self._query(
            make_key("attendance", self.branch_id, query), fetch, enabled=bool(self.branch_id)
        )

    async def by_class_and_date(
        self, class_section_id: str, on_date: Union[str, date, None] = None
    ) -> Optional[List[Attendance]]:
        on_date = as_date(on_date) or school_today()

        async def fetch():
            response = await self.api.get(
                f"{BASE}/class/{class_section_id}/date/{on_date.isoformat()}", model=list[Attendance]
            )
            return response.data or []

        return await self._query(
            make_key("attendance", "class", class_section_id, on_date.isoformat(), self.branch_id),
            fetch,
            enabled=bool(class_section_id and self.branch_id),
        )

    async def by_student(
        self,
        student_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Optional[List[Attendance]]:
        async def fetch():
            response = await self.api.get(
                f"{BASE}/student/{student_id}", params=_range(start_date, end_date), model=list[Attendance]
            )
            return response.data or []

        return await self._query(
            make_key("attendance", "student", student_id, start_date, end_date, self.branch_id),
            fetch,
            enabled=bool(student_id and self.branch_id),
        )

    async def student_summary(self, student_id: str) -> Optional[AttendanceSummary]:
        async def fetch():
            response = await self.api.get(f"{BASE}/summary/student/{student_id}", model=AttendanceSummary)
            return response.data

        return await self._query(
            ("attendance", "summary", "student", student_id, self.branch_id),
            fetch,
            enabled=bool(student_id and self.branch_id),
        )

    async def class_summary(
        self,
        class_section_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Optional[AttendanceSummary]:
        async def fetch():
            response = await self.api.get(
                f"{BASE}/summary/class/{class_section_id}",
                params=_range(start_date, end_date),
                model=AttendanceSummary,
            )
            return response.data

        return await self._query(
            make_key("attendance", "summary", "class", class_section_id, start_date, end_date, self.branch_id),
            fetch,
            enabled=bool(class_section_id and self.branch_id),
        )

    async def report(self, query: Union[AttendanceReportQuery, dict, None] = None) -> Optional[AttendanceReport]:
        query = as_model(AttendanceReportQuery, query)

        async def fetch():
            response = await self.api.get(f"{BASE}/report", params=query, model=AttendanceReport)
            return response.data

        return await self._query(
            make_key("attendance", "report", self.branch_id, query), fetch, enabled=bool(self.branch_id)
        )

    async def bulk_mark(self, data: Union[BulkMarkAttendance, dict]) -> List[Attendance]:
        """Mark a whole class for one day.

        Large classes can outlast the normal timeout, so this call gets its own.
        A timeout is reported as a warning: the server may still have saved the
        records, and the attendance queries are invalidated so they reload.
        """
        payload = as_model(BulkMarkAttendance, data)

        async def send():
            response = await self.api.post(
                f"{BASE}/bulk", json=payload, timeout=self.bulk_timeout, model=list[Attendance]
            )
            return response.data or []

        try:
            result = await self.cache.mutate(send, invalidate=[ALL_KEY])
        except NetworkError as e:
            if not e.timeout:
                self.notifier.error(error_message(e, "Failed to mark attendance"))
                raise
            self.cache.invalidate(ALL_KEY)
            self.notifier.warning(
                "Your attendance may still have been saved. Refreshing data...",
                title="Saving is taking longer than expected",
            )
            raise
        except Exception as e:
            self.notifier.error(error_message(e, "Failed to mark attendance"))
            raise

        self.notifier.success("Attendance marked successfully")
        return result

    async def update(self, attendance_id: str, data: Union[AttendanceUpdate, dict]) -> Attendance:
        payload = as_model(AttendanceUpdate, data)

        async def send():
            response = await self.api.put(f"{BASE}/{attendance_id}", json=payload, model=Attendance)
            return response.data

        return await self._mutate(
            send,
            invalidate=[ALL_KEY],
            success="Attendance updated successfully",
            failure="Failed to update attendance",
        )
