"""Typed models for the error payloads returned by the MOLGENIS REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MolgenisModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class ErrorDetail(MolgenisModel):
    message: str | None = None
    code: str | None = None


class ErrorResponse(MolgenisModel):
    """Conventional error body, e.g.

    ``{"errors": [{"message": "Group name 'test' is not available", "code": "DS16"}]}``

    A response may carry more than one error.
    """

    errors: list[ErrorDetail] = Field(default_factory=list)
