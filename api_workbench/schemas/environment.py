"""
Pydantic schemas for environments and their variables.

Stored environments are edited through the CRUD schemas below. At execution
time an environment is flattened into an ExecutionEnvironment, which is all
the substitution service ever sees.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class VariableBase(BaseModel):
    key: str
    value: str = ""


class VariableCreate(VariableBase):
    """A variable to add; an existing key in the environment is overwritten."""


class VariableUpdate(BaseModel):
    """Partial variable update. An empty key is rejected by the route."""
    key: str | None = None
    value: str | None = None


class VariableResponse(VariableBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    environment_id: int


class EnvironmentBase(BaseModel):
    name: str


class EnvironmentCreate(EnvironmentBase):
    """An environment together with its initial variables."""
    variables: list[VariableCreate] = []


class EnvironmentUpdate(BaseModel):
    """Rename an environment; variables are edited through their own routes."""
    name: str | None = None


class EnvironmentResponse(EnvironmentBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class EnvironmentWithVariables(EnvironmentResponse):
    variables: list[VariableResponse] = []


class ExecutionEnvironment(BaseModel):
    """
    Substitution source for a single execution.

    `id` and `name` are labels only. Every key of `variables` is matched
    literally as {{key}}.
    """
    id: int | str | None = None
    name: str = ""
    variables: dict[str, str] = {}
