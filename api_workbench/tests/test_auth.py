"""
Tests for authentication schemes.
"""

import asyncio
import hashlib

import httpx
import pytest

from api_workbench.exceptions import ErrorKind, NotImplementedAuthError, ValidationError
from api_workbench.schemas.environment import ExecutionEnvironment
from api_workbench.schemas.execute import ExecuteRequest
from api_workbench.schemas.request import AuthConfig, AuthType
from api_workbench.services.auth import (
    SCHEMES,
    ApiKeyAuth,
    BasicAuth,
    DigestAuth,
    NoAuth,
    apply_auth,
    parse_auth,
)


VALID_PARAMS = {
    "basic": {"username": "user", "password": "pass"},
    "bearer": {"token": "tok"},
    "apiKey": {"key": "X-Api-Key", "value": "k123", "in": "header"},
    "oauth2": {"access_token": "at"},
    "awsSigV4": {
        "access_key": "AKIDEXAMPLE",
        "secret_key": "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        "region": "us-east-1",
        "service": "service",
    },
    "digest": {
        "username": "u",
        "password": "p",
        "realm": "r",
        "nonce": "n",
        "qop": "auth",
        "nc": "00000001",
        "cnonce": "c",
    },
}

REQUIRED_PARAM_CASES = [
    (auth_type, name)
    for auth_type, params in VALID_PARAMS.items()
    for name in params
]


def make_request(url: str = "http://example.com/test", method: str = "GET") -> httpx.Request:
    return httpx.Request(method, url)


def authenticate(auth_type: str, params: dict, request: httpx.Request | None = None) -> httpx.Request:
    request = request or make_request()
    apply_auth(request, AuthConfig(type=auth_type, params=params))
    return request


def test_every_auth_type_has_a_scheme():
    assert set(SCHEMES) == set(AuthType)


def test_none_is_a_no_op():
    request = authenticate("none", {})

    assert "authorization" not in request.headers
    assert str(request.url) == "http://example.com/test"


def test_missing_auth_config_is_a_no_op():
    request = make_request()

    apply_auth(request, None)

    assert "authorization" not in request.headers


def test_basic_sets_base64_credentials():
    request = authenticate("basic", {"username": "user", "password": "pass"})

    assert request.headers["Authorization"] == "Basic dXNlcjpwYXNz"


def test_bearer_sets_token():
    request = authenticate("bearer", {"token": "abc.def"})

    assert request.headers["Authorization"] == "Bearer abc.def"


def test_oauth2_uses_access_token_as_bearer():
    request = authenticate("oauth2", {"access_token": "at-1"})

    assert request.headers["Authorization"] == "Bearer at-1"


def test_api_key_in_header():
    request = authenticate("apiKey", {"key": "X-Api-Key", "value": "k123", "in": "header"})

    assert request.headers["X-Api-Key"] == "k123"
    assert request.url.query == b""


def test_api_key_in_query_is_appended():
    request = make_request("http://example.com/test?a=1")

    authenticate("apiKey", {"key": "api_key", "value": "k 1", "in": "query"}, request)

    assert request.url.params.multi_items() == [("a", "1"), ("api_key", "k 1")]
    assert "authorization" not in request.headers


def test_api_key_rejects_unknown_location():
    with pytest.raises(ValidationError) as exc_info:
        parse_auth(AuthConfig(type="apiKey", params={"key": "k", "value": "v", "in": "cookie"}))

    assert exc_info.value.field == "auth.params.in"


def test_digest_matches_rfc2617_vector():
    request = authenticate("digest", VALID_PARAMS["digest"], make_request("http://example.com/test"))

    assert request.headers["Authorization"] == (
        'Digest username="u", realm="r", nonce="n", uri="/test", qop=auth, '
        'nc=00000001, cnonce="c", response="af7d00e461a9ac80af214075cdfbe627"'
    )


def test_digest_response_is_computed_from_md5_chain():
    scheme = parse_auth(AuthConfig(type="digest", params=VALID_PARAMS["digest"]))
    ha1 = hashlib.md5(b"u:r:p").hexdigest()
    ha2 = hashlib.md5(b"GET:/test").hexdigest()
    expected = hashlib.md5(f"{ha1}:n:00000001:c:auth:{ha2}".encode()).hexdigest()

    assert isinstance(scheme, DigestAuth)
    assert ha1 == "44add22b6f3179b751eafd68ee370f7d"
    assert ha2 == "e2b43a77e8b6707afcc1571382ca7c73"
    assert scheme.response_digest("GET", "/test") == expected


def test_digest_uri_excludes_query():
    request = authenticate("digest", VALID_PARAMS["digest"], make_request("http://example.com/test?x=1"))

    assert 'uri="/test"' in request.headers["Authorization"]


def test_aws_sigv4_sets_signature_headers():
    request = authenticate("awsSigV4", VALID_PARAMS["awsSigV4"], make_request("https://example.amazonaws.com/"))

    assert request.headers["Authorization"].startswith("AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/")
    assert "X-Amz-Date" in request.headers
    assert "X-Amz-Security-Token" not in request.headers


def test_ntlm_is_not_implemented():
    with pytest.raises(NotImplementedAuthError) as exc_info:
        authenticate("ntlm", {})

    assert exc_info.value.kind is ErrorKind.NOT_IMPLEMENTED


@pytest.mark.parametrize("auth_type", ["kerberos", "", "Basic"])
def test_unknown_auth_type(auth_type):
    with pytest.raises(ValidationError) as exc_info:
        parse_auth(AuthConfig(type=auth_type, params={}))

    assert exc_info.value.field == "auth.type"
    assert exc_info.value.kind is ErrorKind.VALIDATION


@pytest.mark.parametrize("auth_type,missing", REQUIRED_PARAM_CASES)
def test_missing_required_param_is_named(auth_type, missing):
    params = {k: v for k, v in VALID_PARAMS[auth_type].items() if k != missing}

    with pytest.raises(ValidationError) as exc_info:
        parse_auth(AuthConfig(type=auth_type, params=params))

    assert exc_info.value.field == f"auth.params.{missing}"
    assert missing in str(exc_info.value)


@pytest.mark.parametrize("auth_type", list(VALID_PARAMS))
def test_error_messages_do_not_echo_secret_values(auth_type):
    params = dict(VALID_PARAMS[auth_type])
    removed = next(iter(params))
    params.pop(removed)

    with pytest.raises(ValidationError) as exc_info:
        parse_auth(AuthConfig(type=auth_type, params=params))

    for value in params.values():
        if len(value) > 4:
            assert value not in str(exc_info.value)


def test_parse_returns_scheme_instances():
    assert isinstance(parse_auth(AuthConfig(type="none")), NoAuth)
    assert parse_auth(AuthConfig(type="basic", params=VALID_PARAMS["basic"])) == BasicAuth("user", "pass")
    assert parse_auth(AuthConfig(type="apiKey", params=VALID_PARAMS["apiKey"])) == ApiKeyAuth(
        key="X-Api-Key", value="k123", location="header"
    )


@pytest.mark.parametrize("location", ["header", "query"])
def test_api_key_rejects_empty_name(location):
    with pytest.raises(ValidationError) as exc_info:
        parse_auth(AuthConfig(type="apiKey", params={"key": "", "value": "v", "in": location}))

    assert exc_info.value.field == "auth.params.key"


def test_api_key_name_emptied_by_substitution_never_dispatches(make_engine, sent_requests):
    request = ExecuteRequest.model_validate({
        "method": "GET",
        "url": "http://example.com/",
        "auth": {"type": "apiKey", "params": {"key": "{{name}}", "value": "v", "in": "header"}},
    })

    with pytest.raises(ValidationError):
        asyncio.run(make_engine().execute(request, ExecutionEnvironment(variables={"name": ""})))

    assert sent_requests == []


@pytest.mark.parametrize("auth_type", list(VALID_PARAMS))
def test_scheme_repr_hides_secrets(auth_type):
    params = dict(VALID_PARAMS[auth_type], session_token="session-secret")
    scheme = parse_auth(AuthConfig(type=auth_type, params=params))

    for secret in ("p", "pass", "tok", "k123", "at", "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY", "session-secret"):
        assert f"'{secret}'" not in repr(scheme)
