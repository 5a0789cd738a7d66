"""
HTTP execution service for sending HTTP requests.

This service handles the actual HTTP request execution using httpx:
validation, variable substitution, request building, authentication,
dispatch over a shared connection pool, and response normalization.
"""

import logging

import httpx

from ..config import DEFAULT_REQUEST_TIMEOUT
from ..exceptions import ExecutionError
from ..schemas.environment import ExecutionEnvironment
from ..schemas.execute import ExecuteRequest, ExecuteResponse
from .auth import apply_auth
from .request_builder import build_request
from .response_normalizer import normalize_response
from .validation import validate_request
from .variable_substitution import substitute_request


logger = logging.getLogger(__name__)


def create_http_client(timeout: float = DEFAULT_REQUEST_TIMEOUT, **kwargs) -> httpx.AsyncClient:
    """
    Create the shared client used for all executions.

    Redirects are not followed so that the caller sees the origin's status.
    Extra keyword arguments (e.g. `transport`) are passed to httpx.
    """
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=False, **kwargs)


class HttpExecutor:
    """
    Dispatches built requests over one pooled httpx.AsyncClient.

    The client is safe to share between concurrent executions. Cancellation
    happens only through the client's timeout.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def send(self, request: httpx.Request) -> ExecuteResponse:
        """
        Send the request and normalize the response.

        The response stream is closed on every path, including when
        normalization fails.

        Raises:
            ExecutionError: on timeouts, transport failures and undecodable bodies
        """
        try:
            response = await self.client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise ExecutionError("Request timed out", cause=e, timed_out=True) from e
        except (httpx.TransportError, httpx.DecodingError) as e:
            raise ExecutionError("Failed to execute request", cause=e) from e

        try:
            return await normalize_response(response)
        except httpx.TimeoutException as e:
            raise ExecutionError("Request timed out", cause=e, timed_out=True) from e
        except (httpx.TransportError, httpx.DecodingError) as e:
            raise ExecutionError("Failed to read response body", cause=e) from e
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()


class RequestEngine:
    """
    Executes declarative requests.

    Pipeline per call: validate, substitute, build, authenticate, send,
    normalize. Any failing stage stops the pipeline; nothing reaches the
    network unless validation, building and authentication succeeded.
    """

    def __init__(self, executor: HttpExecutor) -> None:
        self.executor = executor

    async def execute(
        self,
        request: ExecuteRequest,
        environment: ExecutionEnvironment | None = None,
    ) -> ExecuteResponse:
        """
        Execute an HTTP request and return the normalized response.

        Args:
            request: The request configuration to execute
            environment: Variables for {{placeholder}} substitution, or None

        Returns:
            ExecuteResponse with status code, flattened headers and body

        Raises:
            ValidationError: invalid method, URL, header key or auth config
            NotImplementedAuthError: NTLM auth selected
            ConstructionError: the request envelope could not be assembled
            AuthenticationError: an auth scheme failed to compute
            ExecutionError: network failure or timeout
        """
        validate_request(request)
        resolved = substitute_request(request, environment)
        outbound = build_request(self.executor.client, resolved)
        apply_auth(outbound, resolved.auth)

        logger.info("Executing %s %s", outbound.method, outbound.url.host)
        response = await self.executor.send(outbound)
        logger.info(
            "%s %s -> %d", outbound.method, outbound.url.host, response.status_code
        )
        return response

    async def aclose(self) -> None:
        await self.executor.aclose()
