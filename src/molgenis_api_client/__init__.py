"""Python client for the MOLGENIS REST API."""

from .api import delete_, get, molgenis_api_client, post, post_file, put
from .client import AsyncMolgenisClient, MolgenisClient, is_json_response
from .exceptions import MolgenisError, MolgenisHTTPError, MolgenisValidationError
from .models import ErrorDetail, ErrorResponse
from .request_options import (
    DEFAULT_OPTIONS,
    Credentials,
    RequestOptions,
    deep_merge,
    merge_options,
)

__all__ = [
    "AsyncMolgenisClient",
    "Credentials",
    "DEFAULT_OPTIONS",
    "ErrorDetail",
    "ErrorResponse",
    "MolgenisClient",
    "MolgenisError",
    "MolgenisHTTPError",
    "MolgenisValidationError",
    "RequestOptions",
    "deep_merge",
    "delete_",
    "get",
    "is_json_response",
    "merge_options",
    "molgenis_api_client",
    "post",
    "post_file",
    "put",
]
