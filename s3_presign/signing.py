from __future__ import annotations
"""Signed request description and the SigV4 query-string signer."""
from dataclasses import dataclass, field
from datetime import timedelta
import logging
from typing import Optional, Protocol, runtime_checkable

from botocore.auth import S3SigV4QueryAuth, SigV4QueryAuth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from botocore.exceptions import NoCredentialsError

from .addressing import build_path_style_hostname
from .regions import Region

LOGGER = logging.getLogger(__name__)


@dataclass
class SignedRequest:
    """An HTTP request being prepared for signing."""

    method: str
    service: str
    region: Region
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    hostname: Optional[str] = None

    def add_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def add_param(self, name: str, value: str) -> None:
        self.params[name] = value

    def set_hostname(self, hostname: Optional[str]) -> None:
        self.hostname = hostname

    @property
    def host(self) -> str:
        return self.hostname or build_path_style_hostname(self.region)

    @property
    def url(self) -> str:
        return f"{self.region.scheme}://{self.host}{self.path}"


@runtime_checkable
class Signer(Protocol):
    """Turns a :class:`SignedRequest` into an expiring URL."""

    def sign(
        self,
        request: SignedRequest,
        credentials: Credentials,
        expires_in: timedelta,
        requires_body_hash: bool = False,
    ) -> str:
        ...


class BotocoreSigner:
    """SigV4 query-string signing backed by :mod:`botocore.auth`.

    S3 requests are signed with ``UNSIGNED-PAYLOAD`` unless
    ``requires_body_hash`` is set, in which case the generic SigV4 query
    signer hashes the (empty) body.
    """

    def sign(
        self,
        request: SignedRequest,
        credentials: Credentials,
        expires_in: timedelta,
        requires_body_hash: bool = False,
    ) -> str:
        if credentials is None:
            raise NoCredentialsError()
        aws_request = AWSRequest(
            method=request.method,
            url=request.url,
            headers=dict(request.headers),
            params=dict(request.params),
        )
        auth_class = SigV4QueryAuth if requires_body_hash else S3SigV4QueryAuth
        auth = auth_class(
            credentials,
            request.service,
            request.region.name,
            expires=int(expires_in.total_seconds()),
        )
        LOGGER.debug("Signing %s %s for %s", request.method, request.path, request.host)
        auth.add_auth(aws_request)
        return aws_request.url
