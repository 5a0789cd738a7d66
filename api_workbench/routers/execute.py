"""
Request execution API routes.

Provides endpoints for executing HTTP requests, both saved and ad-hoc.
Engine failures are raised as EngineError subclasses and rendered by the
handler registered in exceptions.py.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import ResourceNotFoundError
from ..models.environment import Environment
from ..models.request import SavedRequest
from ..schemas.environment import ExecutionEnvironment
from ..schemas.execute import ExecuteRequest, ExecuteResponse, ExecuteErrorResponse
from ..services.http_executor import RequestEngine


router = APIRouter(prefix="/api/execute", tags=["execute"])

ERROR_RESPONSES = {
    400: {"model": ExecuteErrorResponse, "description": "Invalid request definition"},
    501: {"model": ExecuteErrorResponse, "description": "Authentication scheme not implemented"},
    502: {"model": ExecuteErrorResponse, "description": "Network error"},
    504: {"model": ExecuteErrorResponse, "description": "Request timeout"},
}


def get_engine(request: Request) -> RequestEngine:
    """Dependency returning the application's shared RequestEngine."""
    return request.app.state.engine


def load_environment(db: Session, environment_id: int | None) -> ExecutionEnvironment | None:
    """
    Load an environment as a substitution source.

    Returns None when no environment was requested, meaning no substitution.

    Raises:
        ResourceNotFoundError: if the requested environment does not exist
    """
    if environment_id is None:
        return None

    env = db.query(Environment).filter(Environment.id == environment_id).first()
    if env is None:
        raise ResourceNotFoundError("Environment", environment_id)

    return ExecutionEnvironment(
        id=env.id,
        name=env.name,
        variables=env.as_mapping(),
    )


@router.post("", response_model=ExecuteResponse, responses=ERROR_RESPONSES)
async def execute_adhoc_request(
    request: ExecuteRequest,
    environment_id: int | None = None,
    db: Session = Depends(get_db),
    engine: RequestEngine = Depends(get_engine),
):
    """
    Execute an unsaved HTTP request.

    Args:
        request: The request configuration to execute
        environment_id: Optional environment ID for variable substitution
        db: Database session
        engine: Shared execution engine

    Returns:
        ExecuteResponse with status code, headers and body
    """
    environment = load_environment(db, environment_id)
    return await engine.execute(request, environment)


@router.post("/{request_id}", response_model=ExecuteResponse, responses=ERROR_RESPONSES)
async def execute_saved_request(
    request_id: int,
    environment_id: int | None = None,
    db: Session = Depends(get_db),
    engine: RequestEngine = Depends(get_engine),
):
    """
    Execute a saved HTTP request by ID.

    Raises:
        ResourceNotFoundError: 404 if the request or environment is not found
    """
    saved = db.query(SavedRequest).filter(SavedRequest.id == request_id).first()
    if saved is None:
        raise ResourceNotFoundError("Request", request_id)

    execute_req = ExecuteRequest(
        id=saved.id,
        name=saved.name,
        method=saved.method,
        url=saved.url,
        headers=saved.headers or [],
        query_params=saved.query_params or {},
        body=saved.body or "",
        auth=saved.auth,
    )
    environment = load_environment(db, environment_id)
    return await engine.execute(execute_req, environment)
