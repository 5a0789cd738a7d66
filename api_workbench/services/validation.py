"""
Validation of declarative requests before anything is built or sent.
"""

from ..exceptions import ValidationError
from ..schemas.request import RequestBase, VALID_METHODS
from .auth import parse_auth


def validate_method(method: str) -> None:
    """Reject anything outside the supported method set (case-sensitive)."""
    if method not in VALID_METHODS:
        raise ValidationError("Invalid HTTP method", field="method")


def validate_headers(request: RequestBase) -> None:
    for index, header in enumerate(request.headers):
        if not header.key:
            raise ValidationError("Header key cannot be empty", field=f"headers[{index}].key")


def validate_request(request: RequestBase) -> None:
    """
    Check the parts of a request that do not depend on substitution.

    The URL is checked later, once placeholders have been resolved.
    Auth parameters are checked by parsing them into a scheme, which
    raises for unknown types and missing required params.

    Raises:
        ValidationError: naming the offending field
    """
    validate_method(request.method)
    validate_headers(request)
    if request.auth is not None:
        parse_auth(request.auth)


def validate_saved_request(request: RequestBase) -> None:
    """Validation applied when a request is stored in a collection."""
    if not request.name:
        raise ValidationError("Request name cannot be empty", field="name")
    validate_request(request)
