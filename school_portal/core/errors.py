from typing import Any, Optional
import httpx


class ApiError(Exception):
    """Error raised for any failed call to the school API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.payload = payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, code={self.code!r}, message={self.message!r})"

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            payload = response.json()
        except ValueError:
            payload = response.text or None

        message, code = extract_error(payload)
        if not message:
            message = f"Request failed with status {response.status_code}"

        error_cls = _STATUS_ERRORS.get(response.status_code, ApiError)
        return error_cls(message, status_code=response.status_code, code=code, payload=payload)


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class NetworkError(ApiError):
    """Transport failure: the request never produced a response."""

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


_STATUS_ERRORS = {
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}


def _join(value: Any) -> Optional[str]:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value) or None
    if isinstance(value, str):
        return value or None
    return None


def extract_error(payload: Any) -> tuple[Optional[str], Optional[str]]:
    """Pull (message, code) out of a server error body.

    Accepts the API's `{"error": {"code", "message"}}` envelope as well as the
    framework default `{"statusCode", "message", "error"}` shape, where
    `message` may be a list of validation messages.
    """
    if isinstance(payload, str):
        return payload.strip() or None, None
    if not isinstance(payload, dict):
        return None, None

    error = payload.get("error")
    if isinstance(error, dict):
        message = _join(error.get("message"))
        code = error.get("code")
        if message:
            return message, str(code) if code is not None else None

    message = _join(payload.get("message")) or _join(payload.get("detail"))
    code = payload.get("code")
    if code is None and isinstance(error, str):
        code = error
    return message, str(code) if code is not None else None
