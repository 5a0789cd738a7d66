"""
Environment management API routes.

Provides CRUD operations for environments and their variables. An
environment is selected per execution with `?environment_id=`.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.environment import Environment, Variable
from ..schemas.environment import (
    EnvironmentCreate,
    EnvironmentUpdate,
    EnvironmentWithVariables,
    VariableCreate,
    VariableUpdate,
    VariableResponse,
)


router = APIRouter(prefix="/api/environments", tags=["environments"])


def _get_environment(db: Session, environment_id: int) -> Environment:
    db_environment = db.query(Environment).filter(Environment.id == environment_id).first()
    if db_environment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Environment with id {environment_id} not found"
        )
    return db_environment


def _get_variable(db: Session, variable_id: int) -> Variable:
    db_variable = db.query(Variable).filter(Variable.id == variable_id).first()
    if db_variable is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Variable with id {variable_id} not found"
        )
    return db_variable


def _check_key(key: str | None) -> None:
    if key is not None and not key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Variable key cannot be empty"
        )


# Environment endpoints

@router.post("", response_model=EnvironmentWithVariables, status_code=status.HTTP_201_CREATED)
def create_environment(environment_data: EnvironmentCreate, db: Session = Depends(get_db)):
    """
    Create a new environment with optional initial variables.

    Args:
        environment_data: Environment name and initial variables
        db: Database session

    Returns:
        The created environment with assigned ID, timestamps, and variables
    """
    for var_data in environment_data.variables:
        _check_key(var_data.key)

    db_environment = Environment(name=environment_data.name)
    db.add(db_environment)
    db.flush()  # Get the ID before adding variables

    for var_data in environment_data.variables:
        db.add(Variable(
            environment_id=db_environment.id,
            key=var_data.key,
            value=var_data.value,
        ))

    db.commit()
    db.refresh(db_environment)
    return db_environment


@router.get("", response_model=list[EnvironmentWithVariables])
def list_environments(db: Session = Depends(get_db)):
    """List all environments with their variables."""
    return db.query(Environment).order_by(Environment.id).all()


@router.get("/{environment_id}", response_model=EnvironmentWithVariables)
def get_environment(environment_id: int, db: Session = Depends(get_db)):
    """
    Get an environment by ID with all its variables.

    Raises:
        HTTPException: 404 if environment not found
    """
    return _get_environment(db, environment_id)


@router.put("/{environment_id}", response_model=EnvironmentWithVariables)
def update_environment(
    environment_id: int,
    environment_data: EnvironmentUpdate,
    db: Session = Depends(get_db)
):
    """Rename an environment. Only provided fields are updated."""
    db_environment = _get_environment(db, environment_id)

    for field, value in environment_data.model_dump(exclude_unset=True).items():
        setattr(db_environment, field, value)

    db.commit()
    db.refresh(db_environment)
    return db_environment


@router.delete("/{environment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_environment(environment_id: int, db: Session = Depends(get_db)):
    """Delete an environment by ID. Cascades to all of its variables."""
    db_environment = _get_environment(db, environment_id)
    db.delete(db_environment)
    db.commit()
    return None


# Variable endpoints

@router.post("/{environment_id}/variables", response_model=VariableResponse, status_code=status.HTTP_201_CREATED)
def add_variable(
    environment_id: int,
    variable_data: VariableCreate,
    db: Session = Depends(get_db)
):
    """
    Add a variable to an environment.

    A variable whose key already exists in the environment replaces the
    old value instead of creating a duplicate.

    Raises:
        HTTPException: 404 if environment not found, 400 for an empty key
    """
    db_environment = _get_environment(db, environment_id)
    _check_key(variable_data.key)

    db_variable = next(
        (var for var in db_environment.variables if var.key == variable_data.key),
        None,
    )
    if db_variable is None:
        db_variable = Variable(environment_id=environment_id, key=variable_data.key)
        db.add(db_variable)
    db_variable.value = variable_data.value

    db.commit()
    db.refresh(db_variable)
    return db_variable


@router.put("/variables/{variable_id}", response_model=VariableResponse)
def update_variable(
    variable_id: int,
    variable_data: VariableUpdate,
    db: Session = Depends(get_db)
):
    """Update an existing variable. Only provided fields are updated."""
    db_variable = _get_variable(db, variable_id)

    update_data = variable_data.model_dump(exclude_unset=True)
    _check_key(update_data.get("key"))
    for field, value in update_data.items():
        setattr(db_variable, field, value)

    db.commit()
    db.refresh(db_variable)
    return db_variable


@router.delete("/variables/{variable_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_variable(variable_id: int, db: Session = Depends(get_db)):
    """Delete a variable by ID."""
    db_variable = _get_variable(db, variable_id)
    db.delete(db_variable)
    db.commit()
    return None
