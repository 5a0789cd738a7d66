"""
Request builder turning a resolved declarative request into an httpx.Request.
"""

from typing import Iterable

import httpx

from ..exceptions import ConstructionError, ValidationError
from ..schemas.execute import ExecuteRequest


ALLOWED_SCHEMES = ("http", "https")


def parse_url(raw_url: str) -> httpx.URL:
    """
    Parse an already-substituted URL.

    Raises:
        ValidationError: if the URL does not parse, is not http(s), or has no host
    """
    try:
        url = httpx.URL(raw_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ValidationError("Invalid URL", field="url", cause=e) from e

    if url.scheme not in ALLOWED_SCHEMES or not url.host:
        raise ValidationError("Invalid URL", field="url")
    return url


def append_query_params(url: httpx.URL, pairs: Iterable[tuple[str, str]]) -> httpx.URL:
    """
    Add query parameters after the ones the URL already carries.

    Existing parameters are never replaced, even when a name repeats.
    """
    pairs = list(pairs)
    if not pairs:
        return url
    merged = url.params.multi_items() + pairs
    return url.copy_with(params=httpx.QueryParams(merged))


def build_request(client: httpx.AsyncClient, request: ExecuteRequest) -> httpx.Request:
    """
    Build the outbound request from a fully substituted ExecuteRequest.

    Headers use set semantics: a later entry with the same name (compared
    case-insensitively) replaces an earlier one. The body is sent as UTF-8
    bytes exactly as given and no Content-Type is added.

    Args:
        client: Client whose defaults (timeout, base headers) apply
        request: Request with all placeholders already resolved

    Returns:
        An httpx.Request ready for authentication and sending

    Raises:
        ValidationError: if the URL is invalid
        ConstructionError: if the request envelope cannot be assembled
    """
    url = append_query_params(parse_url(request.url), request.query_params.items())

    try:
        headers = httpx.Headers()
        for header in request.headers:
            headers[header.key] = header.value
        return client.build_request(
            method=request.method,
            url=url,
            headers=headers,
            content=request.body.encode("utf-8") if request.body else None,
        )
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise ConstructionError("Failed to create request", cause=e) from e
