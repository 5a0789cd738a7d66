"""
Collection management API routes.

Provides CRUD operations for collections and the requests they contain,
plus Postman v2.1 import and export.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import BadRequestError, ResourceNotFoundError
from ..models.collection import Collection
from ..models.request import SavedRequest
from ..schemas.collection import (
    CollectionCreate,
    CollectionUpdate,
    CollectionResponse,
    CollectionWithRequests,
    PostmanCollection,
)
from ..schemas.request import RequestBase, RequestCreate, RequestUpdate, RequestResponse
from ..services.postman import export_collection, import_collection
from ..services.validation import validate_saved_request


router = APIRouter(prefix="/api/collections", tags=["collections"])


def _get_collection(db: Session, collection_id: int) -> Collection:
    db_collection = db.query(Collection).filter(Collection.id == collection_id).first()
    if db_collection is None:
        raise ResourceNotFoundError("Collection", collection_id)
    return db_collection


def _get_request(db: Session, collection_id: int, request_id: int) -> SavedRequest:
    db_request = db.query(SavedRequest).filter(
        SavedRequest.id == request_id,
        SavedRequest.collection_id == collection_id,
    ).first()
    if db_request is None:
        raise ResourceNotFoundError("Request", request_id)
    return db_request


def _request_columns(request_data: RequestBase) -> dict:
    """Column values for a SavedRequest built from a request schema."""
    return {
        "name": request_data.name,
        "method": request_data.method,
        "url": request_data.url,
        "headers": [header.model_dump() for header in request_data.headers],
        "query_params": dict(request_data.query_params),
        "body": request_data.body,
        "auth": request_data.auth.model_dump() if request_data.auth else None,
    }


def _content_disposition(filename: str) -> str:
    # Header values are latin-1; non-ASCII or quote characters go through RFC 5987
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _create_collection(db: Session, collection_data: CollectionCreate) -> Collection:
    if not collection_data.name:
        raise BadRequestError("Collection name cannot be empty")
    for request_data in collection_data.requests:
        validate_saved_request(request_data)

    db_collection = Collection(
        name=collection_data.name,
        description=collection_data.description,
    )
    db.add(db_collection)
    db.flush()  # Get the ID before adding requests

    for index, request_data in enumerate(collection_data.requests):
        db.add(SavedRequest(
            collection_id=db_collection.id,
            sort_order=index,
            **_request_columns(request_data),
        ))

    db.commit()
    db.refresh(db_collection)
    return db_collection


# Collection endpoints

@router.post("", response_model=CollectionWithRequests, status_code=status.HTTP_201_CREATED)
def create_collection(collection_data: CollectionCreate, db: Session = Depends(get_db)):
    """
    Create a new collection with optional initial requests.

    Every request is validated before anything is stored.
    """
    return _create_collection(db, collection_data)


@router.get("", response_model=list[CollectionWithRequests])
def list_collections(db: Session = Depends(get_db)):
    """List all collections with their requests."""
    return db.query(Collection).order_by(Collection.id).all()


@router.post("/import", response_model=CollectionWithRequests, status_code=status.HTTP_201_CREATED)
def import_postman_collection(imported: PostmanCollection, db: Session = Depends(get_db)):
    """Import a Postman v2.1 collection as a new collection."""
    return _create_collection(db, import_collection(imported))


@router.get("/{collection_id}", response_model=CollectionWithRequests)
def get_collection(collection_id: int, db: Session = Depends(get_db)):
    """Get a collection by ID with all its requests."""
    return _get_collection(db, collection_id)


@router.get("/{collection_id}/export", response_model=PostmanCollection)
def export_postman_collection(collection_id: int, db: Session = Depends(get_db)):
    """Export a collection in Postman v2.1 format as a file download."""
    db_collection = _get_collection(db, collection_id)
    exported = export_collection(db_collection)
    return JSONResponse(
        content=exported.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": _content_disposition(f"{db_collection.name}.json")},
    )


@router.put("/{collection_id}", response_model=CollectionResponse)
def update_collection(
    collection_id: int,
    collection_data: CollectionUpdate,
    db: Session = Depends(get_db)
):
    """Update a collection's name or description."""
    db_collection = _get_collection(db, collection_id)

    update_data = collection_data.model_dump(exclude_unset=True)
    if "name" in update_data and not update_data["name"]:
        raise BadRequestError("Collection name cannot be empty")

    for field, value in update_data.items():
        setattr(db_collection, field, value)

    db.commit()
    db.refresh(db_collection)
    return db_collection


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_collection(collection_id: int, db: Session = Depends(get_db)):
    """Delete a collection by ID. Cascades to all of its requests."""
    db_collection = _get_collection(db, collection_id)
    db.delete(db_collection)
    db.commit()
    return None


# Request endpoints

@router.post(
    "/{collection_id}/requests",
    response_model=RequestResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_request(
    collection_id: int,
    request_data: RequestCreate,
    db: Session = Depends(get_db)
):
    """Append a validated request to a collection."""
    _get_collection(db, collection_id)
    validate_saved_request(request_data)

    max_sort_order = db.query(func.max(SavedRequest.sort_order)).filter(
        SavedRequest.collection_id == collection_id,
    ).scalar()
    new_sort_order = (max_sort_order + 1) if max_sort_order is not None else 0

    db_request = SavedRequest(
        collection_id=collection_id,
        sort_order=new_sort_order,
        **_request_columns(request_data),
    )
    db.add(db_request)
    db.commit()
    db.refresh(db_request)
    return db_request


@router.put("/{collection_id}/requests/{request_id}", response_model=RequestResponse)
def update_request(
    collection_id: int,
    request_id: int,
    request_data: RequestUpdate,
    db: Session = Depends(get_db)
):
    """Update a request. The merged result must still validate."""
    db_request = _get_request(db, collection_id, request_id)

    current = RequestBase.model_validate(db_request, from_attributes=True).model_dump()
    current.update(request_data.model_dump(exclude_unset=True, exclude={"sort_order"}))
    merged = RequestBase.model_validate(current)
    validate_saved_request(merged)

    for field, value in _request_columns(merged).items():
        setattr(db_request, field, value)
    if request_data.sort_order is not None:
        db_request.sort_order = request_data.sort_order

    db.commit()
    db.refresh(db_request)
    return db_request


@router.delete("/{collection_id}/requests/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_request(collection_id: int, request_id: int, db: Session = Depends(get_db)):
    """Remove a request from a collection."""
    db_request = _get_request(db, collection_id, request_id)
    db.delete(db_request)
    db.commit()
    return None
