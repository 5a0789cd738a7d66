"""
AWS Signature Version 4 signing for httpx requests.

Signing itself is done by botocore. The request is mirrored into an
AWSRequest, signed with a caller-supplied timestamp, and the resulting
Authorization, X-Amz-Date and X-Amz-Security-Token headers are copied back.
"""

import datetime

import httpx
from botocore.auth import SigV4Auth, SIGV4_TIMESTAMP
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from botocore.exceptions import BotoCoreError

from ..exceptions import AuthenticationError


SIGNATURE_HEADERS = ("Authorization", "X-Amz-Date", "X-Amz-Security-Token")

# Hop-by-hop headers may be rewritten in transit and must stay out of the signature
UNSIGNED_HEADERS = frozenset({"connection", "keep-alive", "proxy-connection", "transfer-encoding"})


class TimestampedSigV4Auth(SigV4Auth):
    """SigV4Auth that signs with a fixed timestamp instead of reading the clock."""

    def __init__(self, credentials, service_name, region_name, timestamp: datetime.datetime):
        super().__init__(credentials, service_name, region_name)
        self._timestamp = timestamp

    def add_auth(self, request):
        request.context["timestamp"] = self._timestamp.strftime(SIGV4_TIMESTAMP)
        self._modify_request_before_signing(request)
        canonical_request = self.canonical_request(request)
        string_to_sign = self.string_to_sign(request, canonical_request)
        signature = self.signature(string_to_sign, request)
        self._inject_signature_to_request(request, signature)


def sign_request(
    request: httpx.Request,
    access_key: str,
    secret_key: str,
    region: str,
    service: str,
    session_token: str | None = None,
    timestamp: datetime.datetime | None = None,
) -> None:
    """
    Sign `request` in place with AWS SigV4.

    Args:
        request: Built request; its method, URL, headers and body are signed
        access_key: AWS access key id
        secret_key: AWS secret access key
        region: Signing region, e.g. "us-east-1"
        service: Signing service name, e.g. "execute-api"
        session_token: Optional STS session token
        timestamp: Signing time in UTC; defaults to now

    Raises:
        AuthenticationError: if signing fails. The message never includes
            credentials or the computed signature.
    """
    if timestamp is None:
        timestamp = datetime.datetime.now(datetime.timezone.utc)
    elif timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(datetime.timezone.utc)

    headers = {
        name: value
        for name, value in request.headers.items()
        if name.lower() not in UNSIGNED_HEADERS
    }
    aws_request = AWSRequest(
        method=request.method,
        url=str(request.url),
        headers=headers,
        data=request.content,
    )

    credentials = Credentials(access_key, secret_key, session_token or None)
    signer = TimestampedSigV4Auth(credentials, service, region, timestamp)
    try:
        signer.add_auth(aws_request)
    except (BotoCoreError, ValueError, TypeError) as e:
        raise AuthenticationError("Failed to sign request with AWS SigV4", cause=e) from e

    for name in SIGNATURE_HEADERS:
        value = aws_request.headers.get(name)
        if value is not None:
            request.headers[name] = value
