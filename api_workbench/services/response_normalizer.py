"""
Conversion of raw httpx responses into the ExecuteResponse DTO.
"""

import httpx

from ..schemas.execute import ExecuteResponse


def flatten_headers(headers: httpx.Headers) -> dict[str, str]:
    """
    Collapse headers to one value per name, keeping the first one received.

    Names are lowercased. Repeated headers such as Set-Cookie therefore lose
    every value after the first; the DTO is single-valued on purpose.
    """
    flattened: dict[str, str] = {}
    for name, value in headers.multi_items():
        flattened.setdefault(name, value)
    return flattened


async def normalize_response(response: httpx.Response) -> ExecuteResponse:
    """
    Read the full body and build the DTO.

    The body is buffered in memory without a size limit.
    """
    await response.aread()
    return ExecuteResponse(
        status_code=response.status_code,
        headers=flatten_headers(response.headers),
        body=response.text,
    )
