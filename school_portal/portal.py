import logging
from typing import Any, Callable, Optional
import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from supabase import acreate_client
from school_portal.core.api_client import ApiClient
from school_portal.core.config import Settings
from school_portal.core.notify import Notifier
from school_portal.core.session import SessionStore
from school_portal.services.academic_years import AcademicYearService
from school_portal.services.assessment import AssessmentService
from school_portal.services.attendance import AttendanceService
from school_portal.services.auth import AuthService
from school_portal.services.class_sections import ClassSectionService
from school_portal.services.core_lookups import CoreLookupService
from school_portal.services.notifications import NotificationService
from school_portal.services.parents import ParentAssociationService
from school_portal.services.permissions import PermissionService
from school_portal.services.polling import Poller
from school_portal.services.query_cache import QueryClient
from school_portal.services.schedule import ScheduleService
from school_portal.services.setup_wizard import SetupWizardService
from school_portal.services.staff import StaffService
from school_portal.services.students import StudentService
from school_portal.services.system_settings import SettingsStatusService, SystemSettingService
from school_portal.services.teacher_assignments import TeacherAssignmentService
from school_portal.services.tenant import BranchService, TenantService
from school_portal.services.users import UserService
from school_portal.theme.context import ThemeContext

logger = logging.getLogger(__name__)


class Portal:
    """One signed-in client of the school API with every service wired to it.

    Services share a single session, HTTP client, query cache and notifier, so
    a write through one service invalidates the reads of the others.
    """

    def __init__(
        self,
        settings: Settings,
        auth_provider: Any = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        notifier: Optional[Notifier] = None,
        on_unauthorized: Optional[Callable[[str], Any]] = None,
        theme: Optional[ThemeContext] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.settings = settings
        self.theme = theme or ThemeContext.from_settings(settings)
        self.notifier = notifier or Notifier(theme=self.theme)
        self.session = SessionStore()
        self.cache = QueryClient(default_stale_time=settings.DEFAULT_STALE_SECONDS)
        self.api = ApiClient(
            settings.API_URL,
            self.session,
            auth=auth_provider,
            on_unauthorized=on_unauthorized,
            on_session_cleared=self.cache.clear,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.poller = Poller(scheduler) if scheduler is not None else None

        shared = (self.api, self.cache, self.session)
        settings_stale = settings.SETTINGS_STALE_SECONDS

        self.auth = AuthService(
            *shared,
            notifier=self.notifier,
            provider=auth_provider,
            app_url=settings.APP_URL,
            redirect=on_unauthorized,
        )
        self.academic_years = AcademicYearService(*shared, notifier=self.notifier, stale_time=settings_stale)
        self.students = StudentService(*shared, notifier=self.notifier)
        self.staff = StaffService(*shared, notifier=self.notifier)
        self.users = UserService(*shared, notifier=self.notifier)
        self.attendance = AttendanceService(*shared, notifier=self.notifier)
        self.attendance.bulk_timeout = settings.BULK_REQUEST_TIMEOUT_SECONDS
        self.lookups = CoreLookupService(*shared, notifier=self.notifier)
        self.class_sections = ClassSectionService(*shared, notifier=self.notifier, lookups=self.lookups)
        self.schedule = ScheduleService(*shared, notifier=self.notifier)
        self.assessment = AssessmentService(*shared, notifier=self.notifier)
        self.permissions = PermissionService(*shared, notifier=self.notifier)
        self.notifications = NotificationService(*shared, notifier=self.notifier)
        self.parents = ParentAssociationService(*shared, notifier=self.notifier)
        self.teacher_assignments = TeacherAssignmentService(*shared, notifier=self.notifier)
        self.tenant = TenantService(*shared, notifier=self.notifier)
        self.branches = BranchService(*shared, notifier=self.notifier)
        self.system_settings = SystemSettingService(*shared, notifier=self.notifier, stale_time=settings_stale)
        self.settings_status = SettingsStatusService(*shared, notifier=self.notifier)
        self.setup_wizard = SetupWizardService(
            self.cache,
            self.academic_years,
            self.lookups,
            self.schedule,
            self.assessment,
            self.system_settings,
            self.notifier,
        )

    @classmethod
    async def create(
        cls,
        settings: Settings,
        auth_provider: Any = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        notifier: Optional[Notifier] = None,
        on_unauthorized: Optional[Callable[[str], Any]] = None,
        theme: Optional[ThemeContext] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ) -> "Portal":
        """Build a portal, connecting to Supabase auth when it is configured."""
        if auth_provider is None and settings.SUPABASE_PUBLIC_URL and settings.SUPABASE_ANON_KEY:
            client = await acreate_client(settings.SUPABASE_PUBLIC_URL, settings.SUPABASE_ANON_KEY)
            auth_provider = client.auth
            logger.info(f"Supabase auth client ready for {settings.SUPABASE_PUBLIC_URL}")
        elif auth_provider is None:
            logger.warning("Supabase auth is not configured; sign-in is unavailable")

        return cls(
            settings,
            auth_provider=auth_provider,
            transport=transport,
            notifier=notifier,
            on_unauthorized=on_unauthorized,
            theme=theme,
            scheduler=scheduler,
        )

    def start(self, on_unread_change: Optional[Callable[[int], Any]] = None) -> None:
        if self.poller is None:
            return
        self.notifications.watch_unread_count(
            self.poller, self.settings.NOTIFICATION_POLL_SECONDS, on_change=on_unread_change
        )

    async def aclose(self) -> None:
        if self.poller is not None:
            self.poller.stop_all()
        await self.api.aclose()
        logger.info("Portal closed")
