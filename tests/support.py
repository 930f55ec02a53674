import json
from types import SimpleNamespace
from typing import Any, Callable, Optional, Union
import httpx

BASE_URL = "http://api.test"
BRANCH_ID = "branch-1"
USER_ID = "user-1"

Handler = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """Route table for httpx.MockTransport that records every request it sees."""

    def __init__(self):
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, handler: Handler = None, *, json_body: Any = None, status: int = 200):
        if handler is None:
            handler = httpx.Response(status, json=json_body)
        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        if callable(handler):
            return handler(request)
        return handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


class FakeAuth:
    """Stand-in for the Supabase async auth client."""

    def __init__(self, token: str = "token-1"):
        self.token = token
        self.sign_out_calls = 0
        self.sign_in_calls: list[dict] = []
        self.reset_requests: list[tuple[str, dict]] = []
        self.updated: list[dict] = []
        self.current: Optional[SimpleNamespace] = None

    def _session(self, email: str) -> SimpleNamespace:
        return SimpleNamespace(
            access_token=self.token,
            refresh_token="refresh-1",
            expires_at=None,
            user=SimpleNamespace(id=USER_ID, email=email),
        )

    async def sign_in_with_password(self, credentials: dict) -> SimpleNamespace:
        self.sign_in_calls.append(credentials)
        self.current = self._session(credentials["email"])
        return SimpleNamespace(session=self.current, user=self.current.user)

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.current = None

    async def get_session(self) -> Optional[SimpleNamespace]:
        return self.current

    async def reset_password_for_email(self, email: str, options: dict) -> None:
        self.reset_requests.append((email, options))

    async def update_user(self, attributes: dict) -> SimpleNamespace:
        self.updated.append(attributes)
        return SimpleNamespace(user=SimpleNamespace(id=USER_ID))


def envelope(data: Any, total: Optional[int] = None, page: int = 1, limit: int = 20) -> dict:
    body = {"data": data}
    if total is not None:
        body["meta"] = {"total": total, "page": page, "limit": limit, "totalPages": 1}
    return body


