"""
Authentication schemes applied to built requests.

An AuthConfig ({type, params}) is parsed into exactly one scheme class.
The set of schemes is closed: SCHEMES maps every AuthType to its class,
and each class declares its required params and implements apply().

Error messages name missing parameters but never repeat their values.
"""

import abc
import base64
import datetime
import hashlib
from dataclasses import dataclass, field
from typing import ClassVar, Mapping, Union

import httpx

from ..exceptions import NotImplementedAuthError, ValidationError
from ..schemas.request import AuthConfig, AuthType
from .aws_sigv4 import sign_request
from .request_builder import append_query_params


API_KEY_LOCATIONS = ("header", "query")


class AuthScheme(abc.ABC):
    """Base class for authentication schemes."""

    auth_type: ClassVar[AuthType]
    required_params: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "AuthScheme":
        return cls(**{name: params[name] for name in cls.required_params})

    @abc.abstractmethod
    def apply(self, request: httpx.Request) -> None:
        """Mutate the request's headers and/or URL."""


@dataclass(frozen=True)
class NoAuth(AuthScheme):
    auth_type = AuthType.NONE

    def apply(self, request: httpx.Request) -> None:
        return None


@dataclass(frozen=True)
class BasicAuth(AuthScheme):
    auth_type = AuthType.BASIC
    required_params = ("username", "password")

    username: str
    password: str = field(repr=False)

    def apply(self, request: httpx.Request) -> None:
        credentials = f"{self.username}:{self.password}".encode("utf-8")
        request.headers["Authorization"] = "Basic " + base64.b64encode(credentials).decode("ascii")


@dataclass(frozen=True)
class BearerAuth(AuthScheme):
    auth_type = AuthType.BEARER
    required_params = ("token",)

    token: str = field(repr=False)

    def apply(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.token}"


@dataclass(frozen=True)
class ApiKeyAuth(AuthScheme):
    auth_type = AuthType.API_KEY
    required_params = ("key", "value", "in")

    key: str
    value: str = field(repr=False)
    location: str

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "ApiKeyAuth":
        if params["in"] not in API_KEY_LOCATIONS:
            raise ValidationError(
                "API key location must be 'header' or 'query'", field="auth.params.in"
            )
        if not params["key"]:
            raise ValidationError("API key name cannot be empty", field="auth.params.key")
        return cls(key=params["key"], value=params["value"], location=params["in"])

    def apply(self, request: httpx.Request) -> None:
        if self.location == "header":
            request.headers[self.key] = self.value
        else:
            request.url = append_query_params(request.url, [(self.key, self.value)])


@dataclass(frozen=True)
class OAuth2Auth(AuthScheme):
    """Static access token only; acquiring or refreshing it is the caller's job."""
    auth_type = AuthType.OAUTH2
    required_params = ("access_token",)

    access_token: str = field(repr=False)

    def apply(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.access_token}"


@dataclass(frozen=True)
class AwsSigV4Auth(AuthScheme):
    auth_type = AuthType.AWS_SIGV4
    required_params = ("access_key", "secret_key", "region", "service")

    access_key: str
    secret_key: str = field(repr=False)
    region: str
    service: str
    session_token: str | None = field(default=None, repr=False)
    timestamp: datetime.datetime | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "AwsSigV4Auth":
        return cls(
            access_key=params["access_key"],
            secret_key=params["secret_key"],
            region=params["region"],
            service=params["service"],
            session_token=params.get("session_token") or None,
        )

    def apply(self, request: httpx.Request) -> None:
        sign_request(
            request,
            access_key=self.access_key,
            secret_key=self.secret_key,
            region=self.region,
            service=self.service,
            session_token=self.session_token,
            timestamp=self.timestamp,
        )


def _md5_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class DigestAuth(AuthScheme):
    """
    RFC 2617 Digest with qop, computed from caller-supplied challenge values.

    No challenge round-trip is made: realm, nonce, qop, nc and cnonce must
    already be known.
    """
    auth_type = AuthType.DIGEST
    required_params = ("username", "password", "realm", "nonce", "qop", "nc", "cnonce")

    username: str
    password: str = field(repr=False)
    realm: str
    nonce: str
    qop: str
    nc: str
    cnonce: str

    def response_digest(self, method: str, uri: str) -> str:
        ha1 = _md5_hex(f"{self.username}:{self.realm}:{self.password}")
        ha2 = _md5_hex(f"{method}:{uri}")
        return _md5_hex(f"{ha1}:{self.nonce}:{self.nc}:{self.cnonce}:{self.qop}:{ha2}")

    def apply(self, request: httpx.Request) -> None:
        uri = request.url.path
        response = self.response_digest(request.method, uri)
        request.headers["Authorization"] = (
            f'Digest username="{self.username}", realm="{self.realm}", '
            f'nonce="{self.nonce}", uri="{uri}", qop={self.qop}, nc={self.nc}, '
            f'cnonce="{self.cnonce}", response="{response}"'
        )


@dataclass(frozen=True)
class NtlmAuth(AuthScheme):
    auth_type = AuthType.NTLM

    def apply(self, request: httpx.Request) -> None:
        raise NotImplementedAuthError("NTLM authentication not implemented")


AnyAuthScheme = Union[
    NoAuth, BasicAuth, BearerAuth, ApiKeyAuth, OAuth2Auth, AwsSigV4Auth, DigestAuth, NtlmAuth
]

SCHEMES: dict[AuthType, type[AuthScheme]] = {
    scheme.auth_type: scheme
    for scheme in (
        NoAuth, BasicAuth, BearerAuth, ApiKeyAuth, OAuth2Auth, AwsSigV4Auth, DigestAuth, NtlmAuth
    )
}


def parse_auth(config: AuthConfig) -> AnyAuthScheme:
    """
    Turn an AuthConfig into its scheme.

    Raises:
        ValidationError: for an unknown type or a missing required param
    """
    try:
        auth_type = AuthType(config.type)
    except ValueError:
        raise ValidationError("Unknown authentication type", field="auth.type") from None

    scheme = SCHEMES[auth_type]
    for name in scheme.required_params:
        if name not in config.params:
            raise ValidationError(
                f"Missing required parameter for {auth_type.value} auth",
                field=f"auth.params.{name}",
            )
    return scheme.from_params(config.params)


def apply_auth(request: httpx.Request, config: AuthConfig | None) -> None:
    """Parse `config` and apply the resulting scheme to `request`."""
    if config is None:
        return
    parse_auth(config).apply(request)
