import inspect
import logging
from typing import Any, Callable, Optional, Union
from school_portal.core.api_client import LOGIN_PATH
from school_portal.core.errors import ApiError
from school_portal.core.session import AuthSession
from school_portal.schemas.auth import (
    Branch,
    CurrentUser,
    ForgotPasswordForm,
    LoginForm,
    RegisterForm,
    RegisterResult,
    ResetPasswordForm,
    SelectBranchRequest,
)
from school_portal.services.base import API_PREFIX, ResourceService, as_model, error_message

logger = logging.getLogger(__name__)

BASE = f"{API_PREFIX}/auth"

ME_KEY = ("auth", "me")


class AuthService(ResourceService):
    """Sign-in through the Supabase auth client plus the API's own user endpoints.

    Forms are validated before the provider or the API is contacted, so a bad
    email or short password never leaves the process.
    """

    def __init__(
        self,
        *args,
        provider: Any = None,
        app_url: str = "http://localhost:3000",
        redirect: Optional[Callable[[str], Any]] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.provider = provider
        self.app_url = app_url.rstrip("/")
        self.redirect = redirect

    def _require_provider(self) -> Any:
        if self.provider is None:
            raise ApiError("Auth provider is not configured")
        return self.provider

    async def _go(self, path: str) -> None:
        if self.redirect is None:
            return
        result = self.redirect(path)
        if inspect.isawaitable(result):
            await result

    async def sign_in(self, email: str, password: str) -> AuthSession:
        form = LoginForm(email=email, password=password)
        provider = self._require_provider()

        response = await provider.sign_in_with_password({"email": form.email, "password": form.password})
        if response is None or response.session is None:
            raise ApiError("Sign-in did not return a session")

        session = AuthSession.from_provider(response.session)
        self.session.set_session(session)
        self.cache.clear()
        return session

    async def sign_out(self) -> None:
        try:
            if self.provider is not None:
                await self.provider.sign_out()
        finally:
            self.session.clear()
            self.cache.clear()
        logger.info("Signed out")
        await self._go(LOGIN_PATH)

    async def get_session(self) -> Optional[AuthSession]:
        """Current provider session, mirrored into the session store."""
        if self.provider is None:
            return self.session.session

        provider_session = await self.provider.get_session()
        if provider_session is None:
            return None

        session = AuthSession.from_provider(provider_session)
        if session.access_token != self.session.access_token:
            self.session.set_session(session)
        return session

    async def reset_password_for_email(self, email: str) -> None:
        form = ForgotPasswordForm(email=email)
        provider = self._require_provider()
        await provider.reset_password_for_email(
            form.email, {"redirect_to": f"{self.app_url}/reset-password"}
        )
        logger.info(f"Password reset requested for {form.email}")

    async def update_password(self, password: str, confirm_password: str) -> Any:
        form = ResetPasswordForm(password=password, confirm_password=confirm_password)
        provider = self._require_provider()
        return await provider.update_user({"password": form.password})

    async def current_user(self) -> Optional[CurrentUser]:
        async def fetch():
            response = await self.api.get(f"{BASE}/me", model=CurrentUser)
            return response.data

        user = await self.cache.fetch(ME_KEY, fetch, stale_time=0)
        if user is not None and user.current_branch is not None:
            self.session.current_branch_id = user.current_branch.id
        return user

    async def select_branch(self, branch_id: str) -> Branch:
        """Switch the working branch; every cached query belongs to the old one."""
        payload = SelectBranchRequest(branch_id=branch_id)

        try:
            response = await self.api.post(f"{BASE}/select-branch", json=payload, model=Branch)
        except Exception as e:
            self.notifier.error(error_message(e, "Failed to switch branch"))
            raise

        branch = response.data
        if branch is not None and branch.id:
            self.session.current_branch_id = branch.id
        self.cache.invalidate()
        await self.current_user()

        label = (branch.name or branch.code) if branch is not None else None
        self.notifier.success(f"Switched to {label or 'branch'}")
        return branch

    async def signup(self, data: Union[RegisterForm, dict]) -> RegisterResult:
        """Register a school, its first branch and admin, then try to sign in."""
        form = as_model(RegisterForm, data)
        response = await self.api.post(f"{BASE}/register", json=form, model=RegisterResult)

        if self.provider is not None:
            try:
                await self.sign_in(form.email, form.password)
            except Exception as e:
                logger.warning(f"Registered {form.email} but automatic sign-in failed: {e}")
                await self._go(f"{LOGIN_PATH}?registered=true")
        return response.data
