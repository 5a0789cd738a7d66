"""
Pydantic schemas for request execution.

Defines the execution input and the normalized response DTO. JSON field
names are camelCase (`statusCode`, `errorKind`); Python attributes stay
snake_case and either spelling is accepted on input.
"""

from pydantic import BaseModel, ConfigDict, Field

from .request import RequestBase


class ExecuteRequest(RequestBase):
    """Schema for executing a request. `id` and `name` are opaque labels."""
    id: int | str | None = None


class ExecuteResponse(BaseModel):
    """
    Normalized response returned by the execution engine.

    When the origin repeats a header name, `headers` keeps only the first
    value received for it.
    """
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    headers: dict[str, str]
    body: str


class ExecuteErrorResponse(BaseModel):
    """Schema for execution error response."""
    model_config = ConfigDict(populate_by_name=True)

    error: str
    error_kind: str = Field(alias="errorKind")
    field: str | None = None
    details: str | None = None
