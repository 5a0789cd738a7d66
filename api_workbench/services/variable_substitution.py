"""
Variable substitution service for replacing {{variable}} placeholders.

This service handles extraction and substitution of variable placeholders
in request templates (URL, headers, query params, body, auth params).
"""

import logging
import re
from typing import List

from ..schemas.environment import ExecutionEnvironment
from ..schemas.execute import ExecuteRequest


logger = logging.getLogger(__name__)

# Pattern to match {{variable_name}} placeholders
VARIABLE_PATTERN = re.compile(r'\{\{(\w+)\}\}')


def extract_variables(template: str) -> List[str]:
    """
    Extract all variable names from a template string.

    Args:
        template: String containing {{variable}} placeholders

    Returns:
        List of variable names found in the template

    Example:
        >>> extract_variables("Hello {{name}}, your id is {{id}}")
        ['name', 'id']
    """
    if not template:
        return []

    return VARIABLE_PATTERN.findall(template)


def substitute(template: str, environment: ExecutionEnvironment | None) -> str:
    """
    Replace {{key}} placeholders with the environment's values.

    Every key of the environment is matched literally, so names outside
    `\\w+` work too. Replacement happens in a single pass over the original
    text: a substituted value is never scanned again, even by another key.
    Placeholders without a matching variable are left as they are.

    Args:
        template: Text that may contain {{key}} placeholders
        environment: Substitution source, or None for no substitution

    Returns:
        The substituted text

    Example:
        >>> env = ExecutionEnvironment(variables={"name": "World"})
        >>> substitute("Hello {{name}}", env)
        'Hello World'
        >>> substitute("Hello {{name}}", None)
        'Hello {{name}}'
    """
    if environment is None or not template or not environment.variables:
        return template

    placeholders = {"{{" + key + "}}": value for key, value in environment.variables.items()}
    pattern = re.compile("|".join(
        re.escape(placeholder)
        for placeholder in sorted(placeholders, key=len, reverse=True)
    ))
    return pattern.sub(lambda match: placeholders[match.group(0)], template)


def substitute_dict(data: dict[str, str], environment: ExecutionEnvironment | None) -> dict[str, str]:
    """
    Replace placeholders in all values of a dictionary. Keys are kept as-is.
    """
    if not data:
        return data

    return {key: substitute(value, environment) for key, value in data.items()}


def substitute_request(
    request: ExecuteRequest,
    environment: ExecutionEnvironment | None,
) -> ExecuteRequest:
    """
    Apply variable substitution to all templated parts of a request.

    Covers the URL, query param values, header values, the body and auth
    param values. Header keys, the method and the auth type are never
    substituted. The input request is not modified.

    Args:
        request: The request to process
        environment: Substitution source, or None for no substitution

    Returns:
        A new request with substituted values
    """
    if environment is None:
        return request

    update = {
        "url": substitute(request.url, environment),
        "query_params": substitute_dict(request.query_params, environment),
        "headers": [
            header.model_copy(update={"value": substitute(header.value, environment)})
            for header in request.headers
        ],
        "body": substitute(request.body, environment),
    }
    if request.auth is not None:
        update["auth"] = request.auth.model_copy(
            update={"params": substitute_dict(request.auth.params, environment)}
        )

    processed = request.model_copy(update=update)

    unresolved = set(extract_variables(processed.url))
    unresolved.update(extract_variables(processed.body))
    for value in processed.query_params.values():
        unresolved.update(extract_variables(value))
    for header in processed.headers:
        unresolved.update(extract_variables(header.value))
    if unresolved:
        logger.debug("Unresolved variables: %s", ", ".join(sorted(unresolved)))

    return processed
