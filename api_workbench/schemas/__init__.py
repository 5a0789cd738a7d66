"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .request import (
    HttpMethod,
    AuthType,
    VALID_METHODS,
    Header,
    AuthConfig,
    RequestBase,
    RequestCreate,
    RequestUpdate,
    RequestResponse,
)

from .collection import (
    CollectionBase,
    CollectionCreate,
    CollectionUpdate,
    CollectionResponse,
    CollectionWithRequests,
    PostmanCollection,
)

from .environment import (
    VariableBase,
    VariableCreate,
    VariableUpdate,
    VariableResponse,
    EnvironmentBase,
    EnvironmentCreate,
    EnvironmentUpdate,
    EnvironmentResponse,
    EnvironmentWithVariables,
    ExecutionEnvironment,
)

from .execute import (
    ExecuteRequest,
    ExecuteResponse,
    ExecuteErrorResponse,
)

__all__ = [
    # Request schemas
    "HttpMethod",
    "AuthType",
    "VALID_METHODS",
    "Header",
    "AuthConfig",
    "RequestBase",
    "RequestCreate",
    "RequestUpdate",
    "RequestResponse",
    # Collection schemas
    "CollectionBase",
    "CollectionCreate",
    "CollectionUpdate",
    "CollectionResponse",
    "CollectionWithRequests",
    "PostmanCollection",
    # Environment schemas
    "VariableBase",
    "VariableCreate",
    "VariableUpdate",
    "VariableResponse",
    "EnvironmentBase",
    "EnvironmentCreate",
    "EnvironmentUpdate",
    "EnvironmentResponse",
    "EnvironmentWithVariables",
    "ExecutionEnvironment",
    # Execute schemas
    "ExecuteRequest",
    "ExecuteResponse",
    "ExecuteErrorResponse",
]
