"""
Pydantic schemas for HTTP request configurations.

Defines the declarative request shape shared by saved requests and ad-hoc
executions. The method and auth type are kept as plain strings here and
checked by the execution engine, so that an unsupported value produces a
field-specific validation error instead of a generic schema failure.
"""

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(str, enum.Enum):
    """HTTP methods supported by the system."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


VALID_METHODS = [method.value for method in HttpMethod]


class AuthType(str, enum.Enum):
    """Authentication scheme tags."""
    NONE = "none"
    BASIC = "basic"
    BEARER = "bearer"
    API_KEY = "apiKey"
    OAUTH2 = "oauth2"
    AWS_SIGV4 = "awsSigV4"
    DIGEST = "digest"
    NTLM = "ntlm"


class Header(BaseModel):
    """A single header entry. Order matters: later keys overwrite earlier ones."""
    key: str
    value: str = ""


class AuthConfig(BaseModel):
    """Tagged authentication settings: a scheme name plus its parameters."""
    type: str
    params: dict[str, str] = {}


class RequestBase(BaseModel):
    """Base schema with common request fields."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    method: str
    url: str
    headers: list[Header] = []
    query_params: dict[str, str] = Field(default_factory=dict, alias="queryParams")
    body: str = ""
    auth: AuthConfig | None = None


class RequestCreate(RequestBase):
    """Schema for adding a request to a collection."""
    name: str


class RequestUpdate(BaseModel):
    """Schema for updating an existing request. All fields are optional."""
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    method: str | None = None
    url: str | None = None
    headers: list[Header] | None = None
    query_params: dict[str, str] | None = Field(default=None, alias="queryParams")
    body: str | None = None
    auth: AuthConfig | None = None
    sort_order: int | None = None


class RequestResponse(RequestBase):
    """Schema for request response with all fields including system-generated ones."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    collection_id: int
    sort_order: int
    created_at: datetime
    updated_at: datetime
