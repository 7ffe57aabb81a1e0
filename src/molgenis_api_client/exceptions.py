"""Client-specific exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from pydantic import ValidationError

from .models import ErrorDetail, ErrorResponse

if TYPE_CHECKING:
    import httpx


class MolgenisError(Exception):
    """Base exception for all MOLGENIS API client failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: object = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers) if headers is not None else {}

    def __str__(self) -> str:
        if self.status_code is None:
            return str(self.args[0])
        return f"{self.status_code}: {self.args[0]}"


class MolgenisValidationError(MolgenisError, ValueError):
    """Raised when request options or client configuration are invalid."""


class MolgenisHTTPError(MolgenisError):
    """Raised for non-2xx responses.

    ``body`` holds the decoded JSON error payload when the server answered
    with JSON, and the raw :class:`httpx.Response` otherwise.
    """

    def __init__(self, response: httpx.Response, body: Any, *, is_json: bool) -> None:
        self.response = response
        self.is_json = is_json
        self.errors = _parse_errors(body) if is_json else []
        if self.errors:
            message = self.errors[0].message or response.reason_phrase
        else:
            message = response.reason_phrase or "request failed"
        super().__init__(
            message,
            status_code=response.status_code,
            body=body,
            headers=response.headers,
        )


def _parse_errors(body: Any) -> list[ErrorDetail]:
    if not isinstance(body, Mapping) or "errors" not in body:
        return []
    try:
        return ErrorResponse.model_validate(body).errors
    except ValidationError:
        return []
