# Services package

from .variable_substitution import extract_variables, substitute, substitute_dict, substitute_request
from .auth import apply_auth, parse_auth
from .request_builder import build_request
from .response_normalizer import normalize_response
from .validation import validate_request
from .http_executor import HttpExecutor, RequestEngine, create_http_client

__all__ = [
    "extract_variables",
    "substitute",
    "substitute_dict",
    "substitute_request",
    "apply_auth",
    "parse_auth",
    "build_request",
    "normalize_response",
    "validate_request",
    "HttpExecutor",
    "RequestEngine",
    "create_http_client",
]
