#!/usr/bin/env python3
"""Smoke test: exercise every public operation against a running MOLGENIS server.

Set MOLGENIS_API_BASE_URL and MOLGENIS_SESSION_ID before running.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Awaitable, Callable

from molgenis_api_client import AsyncMolgenisClient, MolgenisHTTPError

ENTITY = "/api/v2/sys_md_Package"
UPLOAD_URL = "/plugin/one-click-importer/upload"

passed: list[str] = []
failed: list[tuple[str, str]] = []


def ok(name: str, result: object = None) -> None:
    tag = type(result).__name__ if result is not None else "None"
    print(f"  PASS  {name}  -> {tag}")
    passed.append(name)


def fail(name: str, err: Exception) -> None:
    msg = f"{type(err).__name__}: {err}"[:200]
    print(f"  FAIL  {name}  -> {msg}")
    failed.append((name, msg))


async def run(name: str, fn: Callable[[], Awaitable[Any]], *, allowed: set[int] | None = None) -> Any:
    """Await fn(), record pass/fail/expected-error."""
    try:
        result = await fn()
    except MolgenisHTTPError as e:
        if allowed and e.status_code in allowed:
            ok(name, e)
        else:
            fail(name, e)
        return None
    except Exception as e:
        fail(name, e)
        return None
    ok(name, result)
    return result


async def main() -> int:
    logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    async with AsyncMolgenisClient(allow_http=True, timeout=15.0) as client:
        print("\n=== Read ===")
        await run("get", lambda: client.get(f"{ENTITY}?num=1"), allowed={401, 403})
        await run("get missing", lambda: client.get("/api/v2/does_not_exist"), allowed={400, 401, 404})

        print("\n=== Write ===")
        body = json.dumps({"entities": [{"id": "smoke_test", "label": "smoke test"}]})
        await run("post", lambda: client.post("/api/v2/sys_md_Package", {"body": body}), allowed={400, 401, 403})
        await run(
            "put",
            lambda: client.put("/api/v1/sys_md_Package/smoke_test", {"body": json.dumps({"label": "updated"})}),
            allowed={400, 401, 403, 404},
        )
        await run("delete_", lambda: client.delete_("/api/v1/sys_md_Package/smoke_test"), allowed={401, 403, 404})

        print("\n=== Upload ===")
        await run(
            "post_file",
            lambda: client.post_file(UPLOAD_URL, ("smoke.csv", b"id,label\n1,one\n", "text/csv")),
            allowed={400, 401, 403, 404},
        )

    print("\n" + "=" * 60)
    print(f"PASSED: {len(passed)}   FAILED: {len(failed)}")
    if failed:
        print("\nFailed operations:")
        for name, err in failed:
            print(f"  - {name}: {err}")
    print("=" * 60)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
