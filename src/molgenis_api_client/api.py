"""Module-level request functions.

Each call opens a short-lived :class:`AsyncMolgenisClient` configured from the
environment (``MOLGENIS_API_BASE_URL``, ``MOLGENIS_SESSION_ID``), performs one
round trip and closes it::

    entity_types = await get("/api/v2/sys_md_EntityType")
    await post("/api/v2/my_data_set", {"body": {"entities": [{"id": "example"}]}})
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from .client import AsyncMolgenisClient, Options


async def get(url: str, options: Options = None) -> Any:
    async with AsyncMolgenisClient() as client:
        return await client.get(url, options)


async def post(url: str, options: Options = None) -> Any:
    async with AsyncMolgenisClient() as client:
        return await client.post(url, options)


async def put(url: str, options: Options = None) -> Any:
    async with AsyncMolgenisClient() as client:
        return await client.put(url, options)


async def delete_(url: str, options: Options = None) -> Any:
    async with AsyncMolgenisClient() as client:
        return await client.delete_(url, options)


async def post_file(url: str, file: Any) -> Any:
    """Upload ``file``, e.g. ``await post_file("/plugin/one-click-importer/upload", fh)``."""
    async with AsyncMolgenisClient() as client:
        return await client.post_file(url, file)


molgenis_api_client = MappingProxyType(
    {
        "get": get,
        "post": post,
        "put": put,
        "delete_": delete_,
        "postFile": post_file,
        "post_file": post_file,
    }
)
