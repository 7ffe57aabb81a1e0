"""Synchronous and asynchronous clients for the MOLGENIS REST API."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping, Union

import httpx

from .exceptions import MolgenisHTTPError, MolgenisValidationError
from .request_options import (
    Credentials,
    RequestOptions,
    merge_options,
    resolve_credentials,
)
from .security import is_same_origin, sanitize_headers, validate_base_url

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPES = frozenset({"application/json", "application/json;charset=utf-8"})
SESSION_COOKIE_NAME = "JSESSIONID"

Options = Union[RequestOptions, Mapping[str, Any], None]


def is_json_response(response: httpx.Response) -> bool:
    """Tell whether ``response`` declares a JSON body.

    Case, spaces and double quotes around the charset are ignored, as allowed
    by RFC 7231 section 3.1.1.5. Parameters in any other order are not.
    """
    content_type = response.headers.get("content-type")
    if not content_type:
        return False
    normalized = content_type.lower().replace(" ", "").replace('"', "")
    return normalized in JSON_CONTENT_TYPES


def _coerce_body(body: Any) -> str | bytes | None:
    if body is None or isinstance(body, (str, bytes)):
        return body
    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)
    try:
        return json.dumps(body)
    except TypeError as exc:
        raise MolgenisValidationError(
            f"body must be str, bytes or JSON-serializable, not {type(body).__name__}"
        ) from exc


def _normalize_headers(headers: Any) -> dict[str, str]:
    if not headers:
        return {}
    if not isinstance(headers, Mapping):
        raise MolgenisValidationError("headers must be a mapping")
    clean: dict[str, str] = {}
    for key, value in headers.items():
        if value is None:
            continue
        clean[str(key)] = str(value)
    return clean


def _settle(response: httpx.Response, payload: Any, *, is_json: bool) -> Any:
    if response.is_success:
        return payload
    raise MolgenisHTTPError(response, payload, is_json=is_json)


class _BaseMolgenisClient:
    default_base_url = "http://localhost:8080"
    default_timeout = 30.0

    def __init__(
        self,
        *,
        base_url: str | None = None,
        session_id: str | None = None,
        cookies: Mapping[str, str] | httpx.Cookies | None = None,
        timeout: float = default_timeout,
        follow_redirects: bool = True,
        allow_http: bool = False,
        base_url_env_var: str = "MOLGENIS_API_BASE_URL",
        session_env_var: str = "MOLGENIS_SESSION_ID",
    ) -> None:
        self.base_url = (base_url or os.getenv(base_url_env_var) or self.default_base_url).rstrip("/")
        try:
            validate_base_url(self.base_url, allow_http=allow_http)
        except ValueError as exc:
            raise MolgenisValidationError(str(exc)) from exc
        if timeout <= 0:
            raise MolgenisValidationError("timeout must be greater than 0")
        self.timeout = float(timeout)
        self._follow_redirects = follow_redirects

        self._initial_cookies = httpx.Cookies(cookies)
        session = session_id or os.getenv(session_env_var)
        if session:
            self._initial_cookies.set(SESSION_COOKIE_NAME, session)

        self._client_kwargs = {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "follow_redirects": follow_redirects,
            "trust_env": False,
        }

    def _attach(self, client: httpx.Client | httpx.AsyncClient) -> None:
        client.cookies.update(self._initial_cookies)
        self._httpx = client

    @property
    def cookies(self) -> httpx.Cookies:
        """Session cookie jar shared by every request of this client."""
        return self._httpx.cookies

    @staticmethod
    def _url(url: str) -> str:
        if "\x00" in url:
            raise MolgenisValidationError("Invalid URL characters")
        return url

    def _sends_credentials(self, credentials: Credentials, url: httpx.URL) -> bool:
        if credentials is Credentials.INCLUDE:
            return True
        if credentials is Credentials.SAME_ORIGIN:
            return is_same_origin(url, self.base_url)
        return False

    def _build_request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        credentials: Credentials,
        content: str | bytes | None = None,
        files: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> httpx.Request:
        kwargs: dict[str, Any] = {
            "headers": headers,
            "content": content,
            "files": files,
            "params": params,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout
        request = self._httpx.build_request(method, self._url(url), **kwargs)
        self._apply_credentials(request, credentials)
        return request

    def _apply_credentials(self, request: httpx.Request, credentials: Credentials) -> None:
        # httpx re-adds the jar's cookies to every redirect hop, so this runs per hop.
        if not self._sends_credentials(credentials, request.url):
            request.headers.pop("Cookie", None)
        logger.debug(
            "%s %s credentials=%s headers=%s",
            request.method,
            request.url,
            credentials.value,
            sanitize_headers(request.headers),
        )

    def _request_for(self, method: str, url: str, options: Options) -> tuple[httpx.Request, Credentials]:
        merged = merge_options(method, options)
        credentials = resolve_credentials(merged.get("credentials"))
        request = self._build_request(
            str(merged.get("method") or method).upper(),
            url,
            headers=_normalize_headers(merged.get("headers")),
            credentials=credentials,
            content=_coerce_body(merged.get("body")),
            params=merged.get("params"),
            timeout=merged.get("timeout"),
        )
        return request, credentials

    def _upload_request_for(self, url: str, file: Any) -> tuple[httpx.Request, Credentials]:
        request = self._build_request(
            "POST",
            url,
            credentials=Credentials.SAME_ORIGIN,
            files={"file": file},
        )
        return request, Credentials.SAME_ORIGIN

    def _next_hop(
        self,
        response: httpx.Response,
        credentials: Credentials,
        history: list[httpx.Response],
    ) -> httpx.Request | None:
        next_request = response.next_request
        if not self._follow_redirects or next_request is None:
            return None
        history.append(response)
        if len(history) > self._httpx.max_redirects:
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=next_request)
        self._apply_credentials(next_request, credentials)
        return next_request

    @staticmethod
    def _log_response(response: httpx.Response, *, is_json: bool) -> None:
        logger.debug(
            "%s %s -> %s (%s)",
            response.request.method,
            response.request.url,
            response.status_code,
            "json" if is_json else "raw",
        )


class MolgenisClient(_BaseMolgenisClient):
    """Synchronous client."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        session_id: str | None = None,
        cookies: Mapping[str, str] | httpx.Cookies | None = None,
        timeout: float = _BaseMolgenisClient.default_timeout,
        follow_redirects: bool = True,
        httpx_client: httpx.Client | None = None,
        allow_http: bool = False,
    ) -> None:
        super().__init__(
            base_url=base_url,
            session_id=session_id,
            cookies=cookies,
            timeout=timeout,
            follow_redirects=follow_redirects,
            allow_http=allow_http,
        )
        self._attach(httpx_client or httpx.Client(**self._client_kwargs))

    def __enter__(self) -> "MolgenisClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._httpx.close()

    def handle_response(self, response: httpx.Response) -> Any:
        """Return the decoded JSON or raw response, raising on non-2xx status."""
        is_json = is_json_response(response)
        self._log_response(response, is_json=is_json)
        if is_json:
            response.read()
            return _settle(response, response.json(), is_json=True)
        return _settle(response, response, is_json=False)

    def _send(self, prepared: tuple[httpx.Request, Credentials]) -> Any:
        request, credentials = prepared
        history: list[httpx.Response] = []
        response = self._httpx.send(request, follow_redirects=False)
        while True:
            next_request = self._next_hop(response, credentials, history)
            if next_request is None:
                break
            response = self._httpx.send(next_request, follow_redirects=False)
        response.history = list(history)
        return self.handle_response(response)

    def get(self, url: str, options: Options = None) -> Any:
        return self._send(self._request_for("GET", url, options))

    def post(self, url: str, options: Options = None) -> Any:
        return self._send(self._request_for("POST", url, options))

    def put(self, url: str, options: Options = None) -> Any:
        return self._send(self._request_for("PUT", url, options))

    def delete_(self, url: str, options: Options = None) -> Any:
        return self._send(self._request_for("DELETE", url, options))

    def post_file(self, url: str, file: Any) -> Any:
        """Upload ``file`` as the multipart field ``file``.

        Upload endpoints usually answer with the URL of the import job.
        """
        return self._send(self._upload_request_for(url, file))


class AsyncMolgenisClient(_BaseMolgenisClient):
    """Asynchronous client."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        session_id: str | None = None,
        cookies: Mapping[str, str] | httpx.Cookies | None = None,
        timeout: float = _BaseMolgenisClient.default_timeout,
        follow_redirects: bool = True,
        httpx_client: httpx.AsyncClient | None = None,
        allow_http: bool = False,
    ) -> None:
        super().__init__(
            base_url=base_url,
            session_id=session_id,
            cookies=cookies,
            timeout=timeout,
            follow_redirects=follow_redirects,
            allow_http=allow_http,
        )
        self._attach(httpx_client or httpx.AsyncClient(**self._client_kwargs))

    async def __aenter__(self) -> "AsyncMolgenisClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._httpx.aclose()

    async def handle_response(self, response: httpx.Response) -> Any:
        """Return the decoded JSON or raw response, raising on non-2xx status."""
        is_json = is_json_response(response)
        self._log_response(response, is_json=is_json)
        if is_json:
            await response.aread()
            return _settle(response, response.json(), is_json=True)
        return _settle(response, response, is_json=False)

    async def _send(self, prepared: tuple[httpx.Request, Credentials]) -> Any:
        request, credentials = prepared
        history: list[httpx.Response] = []
        response = await self._httpx.send(request, follow_redirects=False)
        while True:
            next_request = self._next_hop(response, credentials, history)
            if next_request is None:
                break
            response = await self._httpx.send(next_request, follow_redirects=False)
        response.history = list(history)
        return await self.handle_response(response)

    async def get(self, url: str, options: Options = None) -> Any:
        return await self._send(self._request_for("GET", url, options))

    async def post(self, url: str, options: Options = None) -> Any:
        return await self._send(self._request_for("POST", url, options))

    async def put(self, url: str, options: Options = None) -> Any:
        return await self._send(self._request_for("PUT", url, options))

    async def delete_(self, url: str, options: Options = None) -> Any:
        return await self._send(self._request_for("DELETE", url, options))

    async def post_file(self, url: str, file: Any) -> Any:
        """Upload ``file`` as the multipart field ``file``.

        Upload endpoints usually answer with the URL of the import job.
        """
        return await self._send(self._upload_request_for(url, file))
