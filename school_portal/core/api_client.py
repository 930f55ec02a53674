import inspect
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Optional
import httpx
from pydantic import BaseModel, TypeAdapter
from school_portal.core.errors import ApiError, NetworkError
from school_portal.core.session import SessionStore
from school_portal.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def encode_params(params: Any) -> Optional[list[tuple[str, str]]]:
    """Flatten query params; lists repeat the key, empty values are dropped."""
    if not params:
        return None
    if isinstance(params, BaseModel):
        params = params.model_dump(by_alias=True, exclude_none=True, mode="json")

    items = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple, set)) else [value]
        for item in values:
            if item is None or item == "":
                continue
            items.append((key, _param_value(item)))
    return items or None


class ApiClient:
    """Async HTTP client for the school API.

    Every request carries the bearer token of the current session and the
    `X-Branch-Id` header of the selected branch. A 401 signs the user out and
    redirects to the login page once per session, however many requests fail.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionStore,
        auth: Any = None,
        on_unauthorized: Optional[Callable[[str], Any]] = None,
        on_session_cleared: Optional[Callable[[], Any]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._session = session
        self._auth = auth
        self.on_unauthorized = on_unauthorized
        self.on_session_cleared = on_session_cleared
        self._handled_generation: Optional[int] = None
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._attach_headers]},
        )

    @property
    def auth(self) -> Any:
        return self._auth

    @auth.setter
    def auth(self, provider: Any) -> None:
        self._auth = provider

    async def _attach_headers(self, request: httpx.Request) -> None:
        token = self._session.access_token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        branch_id = self._session.current_branch_id
        if branch_id:
            request.headers["X-Branch-Id"] = str(branch_id)
        logger.debug(f"{request.method} {request.url}")

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        timeout: Optional[float] = None,
        model: Any = None,
    ) -> ApiResponse:
        if hasattr(json, "to_payload"):
            json = json.to_payload()
        elif isinstance(json, BaseModel):
            json = json.model_dump(by_alias=True, exclude_none=True, mode="json")

        extra = {}
        if timeout is not None:
            extra["timeout"] = timeout

        try:
            response = await self._client.request(
                method, path, params=encode_params(params), json=json, **extra
            )
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise NetworkError(f"Request timeout: {method} {path}", timeout=True) from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise NetworkError(str(e) or "Network error") from e

        if response.status_code == 401:
            await self._handle_unauthorized()

        if response.is_error:
            error = ApiError.from_response(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {error.message}")
            raise error

        return self._parse(response, model)

    def _parse(self, response: httpx.Response, model: Any) -> ApiResponse:
        body = None
        if response.status_code != 204 and response.content:
            try:
                body = response.json()
            except ValueError:
                body = response.text

        if isinstance(body, dict) and "data" in body:
            envelope = ApiResponse.model_validate(body)
        else:
            envelope = ApiResponse(data=body)

        if model is not None and envelope.data is not None:
            envelope.data = TypeAdapter(model).validate_python(envelope.data)
        return envelope

    async def _handle_unauthorized(self) -> None:
        generation = self._session.generation
        if self._handled_generation == generation:
            return
        self._handled_generation = generation

        logger.warning("API returned 401, signing out")
        self._session.clear()
        if self.on_session_cleared is not None:
            self.on_session_cleared()
        if self._auth is not None:
            try:
                await self._auth.sign_out()
            except Exception as e:
                logger.error(f"Sign-out after 401 failed: {e}")
        if self.on_unauthorized is not None:
            result = self.on_unauthorized(LOGIN_PATH)
            if inspect.isawaitable(result):
                await result

    async def get(self, path: str, **kwargs) -> ApiResponse:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs) -> ApiResponse:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs) -> ApiResponse:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs) -> ApiResponse:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> ApiResponse:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()


