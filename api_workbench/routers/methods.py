"""
HTTP method listing route.
"""

from fastapi import APIRouter

from ..schemas.request import VALID_METHODS


router = APIRouter(prefix="/api/methods", tags=["methods"])


@router.get("", response_model=list[str])
def list_methods():
    """Return the HTTP methods a request may use."""
    return VALID_METHODS
