import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from keel._codes import codes
from keel.models.meta import Status, StatusDetails


class KeelException(Exception):
    _code: codes | int | None = None

    def __init__(self, message, code: codes | int | None = None):
        super().__init__(message)
        self._code = code

    @property
    def code(self):
        return self._code


class MissingBindingError(KeelException):
    """The type was never registered as a resource."""

    def __init__(self, resource_type: type):
        super().__init__(f"{resource_type.__qualname__} is not registered as a resource type")
        self.resource_type = resource_type


class BindingConflictError(KeelException):
    def __init__(self, resource_type: type, existing, requested):
        super().__init__(
            f"{resource_type.__qualname__} is already bound to {existing.api_version}/{existing.kind}, "
            f"refusing to rebind it to {requested.api_version}/{requested.kind}"
        )
        self.resource_type = resource_type


class DecodeError(KeelException):
    def __init__(self, message, missing_fields: tuple[str, ...] = ()):
        super().__init__(message)
        self.missing_fields = missing_fields

    @classmethod
    def from_validation_error(cls, type_name: str, e: PydanticValidationError) -> "DecodeError":
        missing = tuple(".".join(str(p) for p in err["loc"]) for err in e.errors() if err["type"] == "missing")
        return cls(f"Failed to decode {type_name}: {e}", missing_fields=missing)


class InvalidSelectorError(KeelException, ValueError):
    pass


class SubresourceDisabledError(KeelException):
    def __init__(self, kind: str, subresource: str):
        super().__init__(f"{subresource} subresource is not enabled for {kind}")
        self.kind = kind
        self.subresource = subresource


class TransportError(KeelException):
    """Network-level failure: connection refused, timeout, unreadable response."""

    http_code: int | None = None
    status: Status | None = None


class ApiError(KeelException):
    """Failure reported by the server, carrying the HTTP code and the server Status if one was sent."""

    def __init__(self, message, http_code: int, status: Status | None = None):
        super().__init__(message, code=_as_code(http_code))
        self.http_code = http_code
        self.status = status

    @property
    def reason(self) -> str | None:
        return self.status.reason if self.status else None

    @property
    def details(self) -> StatusDetails | None:
        return self.status.details if self.status else None


class NotFoundError(ApiError):
    def __init__(self, message, http_code: int = codes.NOT_FOUND, status: Status | None = None, name: str | None = None):
        super().__init__(message, http_code, status)
        self.name = name


class ConflictError(ApiError):
    def __init__(self, message, http_code: int = codes.CONFLICT, status: Status | None = None):
        super().__init__(message, http_code, status)


class GoneError(ApiError):
    def __init__(self, message, http_code: int = codes.GONE, status: Status | None = None):
        super().__init__(message, http_code, status)


class ValidationError(ApiError):
    def __init__(self, message, http_code: int = codes.UNPROCESSABLE_ENTITY, status: Status | None = None):
        super().__init__(message, http_code, status)


class StreamFailure(KeelException):
    """A watch stream terminated abnormally; ``cause`` is the underlying typed error."""

    def __init__(self, cause: KeelException):
        super().__init__(f"Watch stream failed: {cause}", code=cause.code)
        self.cause = cause

    @property
    def http_code(self) -> int | None:
        return getattr(self.cause, "http_code", None)

    @property
    def status(self) -> Status | None:
        return getattr(self.cause, "status", None)


def _as_code(http_code: int) -> codes | int:
    try:
        return codes(http_code)
    except ValueError:
        return http_code


def parse_status(body: Any) -> Status | None:
    """Parse a server Status from a response body, or None if the body is not one."""
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        if not body.strip():
            return None
        try:
            body = json.loads(body)
        except ValueError:
            return None
    if not isinstance(body, dict):
        return None
    try:
        return Status.model_validate(body)
    except PydanticValidationError:
        return None


def classify(http_code: int, body: Any = None, name: str | None = None) -> ApiError:
    status = parse_status(body)
    if status and status.message:
        message = status.message
    else:
        message = f"{http_code} {codes.get_reason_phrase(http_code)}".strip()

    if http_code == codes.NOT_FOUND:
        if name is None and status and status.details:
            name = status.details.name
        return NotFoundError(message, http_code, status, name=name)
    if http_code == codes.CONFLICT:
        return ConflictError(message, http_code, status)
    if http_code == codes.GONE:
        return GoneError(message, http_code, status)
    if http_code == codes.UNPROCESSABLE_ENTITY:
        return ValidationError(message, http_code, status)
    return ApiError(message, http_code, status)


def raise_for_status(http_code: int, body: Any = None, name: str | None = None):
    if codes.is_success(http_code):
        return
    raise classify(http_code, body, name=name)
