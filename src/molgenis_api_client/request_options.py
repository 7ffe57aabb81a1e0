"""Request options, the process-wide defaults and the merge that combines them."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from .exceptions import MolgenisValidationError


class Credentials(str, Enum):
    """When the client's session cookies accompany a request."""

    OMIT = "omit"
    SAME_ORIGIN = "same-origin"
    INCLUDE = "include"


DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType(
    {
        "headers": MappingProxyType(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
                "X-Requested-With": "XMLHttpRequest",
            }
        ),
        "credentials": Credentials.SAME_ORIGIN.value,
    }
)


@dataclass(frozen=True)
class RequestOptions:
    method: str | None = None
    headers: Mapping[str, str] | None = None
    credentials: Credentials | str | None = None
    body: object | None = None
    params: Mapping[str, Any] | None = None
    timeout: float | None = None

    def as_mapping(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def _merge_sequence(target: list[Any], source: list[Any] | tuple[Any, ...]) -> list[Any]:
    merged = list(target)
    for index, value in enumerate(source):
        if index < len(merged):
            merged[index] = _merge_value(merged[index], value)
        else:
            merged.append(_merge_value(None, value))
    return merged


def _merge_value(existing: Any, value: Any) -> Any:
    if isinstance(value, Mapping):
        base = existing if isinstance(existing, Mapping) else {}
        return deep_merge(base, value)
    if isinstance(value, (list, tuple)):
        base = existing if isinstance(existing, list) else []
        return _merge_sequence(base, value)
    return value


def deep_merge(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge mappings left to right into a new dict.

    Nested mappings merge key by key and lists merge index by index. A ``None``
    value never overwrites a key that is already set. No input is mutated.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is None and key in merged:
                continue
            merged[key] = _merge_value(merged.get(key), value)
    return merged


def as_options_mapping(options: RequestOptions | Mapping[str, Any] | None) -> Mapping[str, Any]:
    if options is None:
        return {}
    if isinstance(options, RequestOptions):
        return options.as_mapping()
    if isinstance(options, Mapping):
        return options
    raise MolgenisValidationError("options must be a mapping or RequestOptions")


def merge_options(method: str, options: RequestOptions | Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Layer the caller's options over the defaults for ``method``.

    Header names compare case-insensitively, so a caller's ``Content-type``
    replaces the default ``Content-Type``.
    """
    caller = as_options_mapping(options)
    defaults: Mapping[str, Any] = DEFAULT_OPTIONS
    caller_headers = caller.get("headers")
    if isinstance(caller_headers, Mapping):
        overridden = {str(name).lower() for name, value in caller_headers.items() if value is not None}
        defaults = {
            **DEFAULT_OPTIONS,
            "headers": {
                name: value
                for name, value in DEFAULT_OPTIONS["headers"].items()
                if name.lower() not in overridden
            },
        }
    return deep_merge({"method": method}, defaults, caller)


def resolve_credentials(value: Credentials | str | None) -> Credentials:
    if value is None:
        return Credentials(DEFAULT_OPTIONS["credentials"])
    try:
        return Credentials(value)
    except ValueError:
        raise MolgenisValidationError(f"Unsupported credentials mode: {value!r}") from None
