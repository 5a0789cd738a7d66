"""
Postman v2.1 collection import/export.

Only raw bodies are carried over; other body modes import as an empty body.
Auth settings and query params are not part of the exchanged subset.
"""

from ..models.collection import Collection
from ..schemas.collection import (
    POSTMAN_SCHEMA_URL,
    CollectionCreate,
    PostmanBody,
    PostmanCollection,
    PostmanInfo,
    PostmanItem,
    PostmanRequest,
)
from ..schemas.request import Header, RequestCreate


def export_collection(collection: Collection) -> PostmanCollection:
    """Convert a stored collection to the Postman exchange format."""
    items = [
        PostmanItem(
            name=saved.name,
            request=PostmanRequest(
                method=saved.method,
                url=saved.url,
                header=[Header(**header) for header in saved.headers or []],
                body=PostmanBody(mode="raw", raw=saved.body or ""),
            ),
        )
        for saved in collection.requests
    ]
    return PostmanCollection(
        info=PostmanInfo(
            name=collection.name,
            description=collection.description,
            schema_url=POSTMAN_SCHEMA_URL,
        ),
        item=items,
    )


def import_collection(imported: PostmanCollection) -> CollectionCreate:
    """Convert a Postman collection into a CollectionCreate payload."""
    requests = []
    for item in imported.item:
        body = ""
        if item.request.body is not None and item.request.body.mode == "raw":
            body = item.request.body.raw
        requests.append(RequestCreate(
            name=item.name,
            method=item.request.method,
            url=item.request.url,
            headers=item.request.header,
            body=body,
        ))
    return CollectionCreate(
        name=imported.info.name,
        description=imported.info.description,
        requests=requests,
    )
