"""
Pydantic schemas for collections.

Defines schemas for creating, updating, and returning collection data,
and the Postman v2.1 subset used for import/export.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .request import Header, RequestCreate, RequestResponse


POSTMAN_SCHEMA_URL = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"


# Collection schemas

class CollectionBase(BaseModel):
    """Base schema with common collection fields."""
    name: str
    description: str = ""


class CollectionCreate(CollectionBase):
    """Schema for creating a new collection with optional initial requests."""
    requests: list[RequestCreate] = []


class CollectionUpdate(BaseModel):
    """Schema for updating an existing collection. All fields are optional."""
    name: str | None = None
    description: str | None = None


class CollectionResponse(CollectionBase):
    """Schema for collection response with all fields."""
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CollectionWithRequests(CollectionResponse):
    """Schema for collection response including its requests."""
    requests: list[RequestResponse] = []


# Postman v2.1 exchange format

class PostmanInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    schema_url: str | None = Field(default=None, alias="schema")


class PostmanBody(BaseModel):
    mode: str = "raw"
    raw: str = ""


class PostmanRequest(BaseModel):
    method: str
    url: str
    header: list[Header] = []
    body: PostmanBody | None = None

    @field_validator("url", mode="before")
    @classmethod
    def _url_from_object(cls, value):
        # Postman also exports URLs as {"raw": "...", "host": [...], ...}
        if isinstance(value, dict):
            return value.get("raw", "")
        return value


class PostmanItem(BaseModel):
    name: str
    request: PostmanRequest


class PostmanCollection(BaseModel):
    info: PostmanInfo
    item: list[PostmanItem] = []
