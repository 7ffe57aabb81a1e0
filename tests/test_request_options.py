from __future__ import annotations

import pytest

from molgenis_api_client.exceptions import MolgenisValidationError
from molgenis_api_client.request_options import (
    DEFAULT_OPTIONS,
    Credentials,
    RequestOptions,
    deep_merge,
    merge_options,
    resolve_credentials,
)


def test_merge_options_applies_defaults() -> None:
    assert merge_options("GET") == {
        "method": "GET",
        "headers": {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Requested-With": "XMLHttpRequest",
        },
        "credentials": "same-origin",
    }


def test_merge_options_merges_headers_key_by_key() -> None:
    merged = merge_options("GET", {"headers": {"Accept": "text/plain"}})

    assert merged["headers"] == {
        "Accept": "text/plain",
        "Content-Type": "application/json",
        "X-Requested-With": "XMLHttpRequest",
    }


def test_merge_options_header_names_ignore_case() -> None:
    merged = merge_options("GET", {"headers": {"Content-type": "text"}})

    assert merged["headers"] == {
        "Accept": "application/json",
        "X-Requested-With": "XMLHttpRequest",
        "Content-type": "text",
    }


def test_merge_options_caller_values_win() -> None:
    merged = merge_options("GET", {"method": "PATCH", "credentials": "include", "body": "{}"})

    assert merged["method"] == "PATCH"
    assert merged["credentials"] == "include"
    assert merged["body"] == "{}"


def test_merge_options_accepts_request_options_dataclass() -> None:
    merged = merge_options("PUT", RequestOptions(headers={"X-Custom": "1"}, body='{"id":"x"}'))

    assert merged["method"] == "PUT"
    assert merged["credentials"] == "same-origin"
    assert merged["headers"]["X-Custom"] == "1"
    assert merged["headers"]["Accept"] == "application/json"
    assert merged["body"] == '{"id":"x"}'


def test_merge_options_rejects_non_mapping() -> None:
    with pytest.raises(MolgenisValidationError, match="must be a mapping"):
        merge_options("GET", ["headers"])  # type: ignore[arg-type]


def test_merge_options_leaves_defaults_untouched() -> None:
    merged = merge_options("GET", {"headers": {"Accept": "text/csv"}})
    merged["headers"]["X-Requested-With"] = "changed"

    assert DEFAULT_OPTIONS["headers"]["Accept"] == "application/json"
    assert DEFAULT_OPTIONS["headers"]["X-Requested-With"] == "XMLHttpRequest"


def test_deep_merge_recurses_into_nested_mappings() -> None:
    base = {"a": {"b": 1, "c": {"d": 2}}, "keep": True}
    override = {"a": {"c": {"e": 3}}}

    assert deep_merge(base, override) == {"a": {"b": 1, "c": {"d": 2, "e": 3}}, "keep": True}
    assert base == {"a": {"b": 1, "c": {"d": 2}}, "keep": True}
    assert override == {"a": {"c": {"e": 3}}}


def test_deep_merge_merges_lists_by_index() -> None:
    assert deep_merge({"items": [1, 2, 3]}, {"items": [4]}) == {"items": [4, 2, 3]}
    assert deep_merge({"items": [{"a": 1}]}, {"items": [{"b": 2}, 5]}) == {"items": [{"a": 1, "b": 2}, 5]}


def test_deep_merge_skips_none_over_existing_values() -> None:
    assert deep_merge({"a": 1}, {"a": None, "b": None}) == {"a": 1, "b": None}


def test_deep_merge_replaces_scalar_with_mapping() -> None:
    assert deep_merge({"a": "x"}, {"a": {"b": 1}}) == {"a": {"b": 1}}


def test_resolve_credentials() -> None:
    assert resolve_credentials(None) is Credentials.SAME_ORIGIN
    assert resolve_credentials("include") is Credentials.INCLUDE
    assert resolve_credentials(Credentials.OMIT) is Credentials.OMIT
    with pytest.raises(MolgenisValidationError, match="Unsupported credentials mode"):
        resolve_credentials("always")


def test_merge_options_none_header_does_not_drop_default() -> None:
    merged = merge_options("GET", {"headers": {"accept": None}})

    assert merged["headers"]["Accept"] == "application/json"
    assert merged["headers"]["accept"] is None
