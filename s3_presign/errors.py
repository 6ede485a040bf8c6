from __future__ import annotations
"""Error types shared by every S3 operation.

All failures surface as a subclass of :class:`S3ClientError`. Lower level
failures (botocore, keyring, decoders, raw sockets) are converted with
:func:`lift_error`, which keeps the original exception reachable: the
wrapping variants (service, credentials, dispatch) expose it as
``__cause__`` while the message-only variants copy its text.
"""
from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Generic, Mapping, Optional, TypeVar
from xml.etree.ElementTree import ParseError as XmlParseError

from botocore.awsrequest import AWSResponse, HeadersDict
from botocore.exceptions import (
    ClientError,
    ConnectionError as BotoConnectionError,
    CredentialRetrievalError,
    HTTPClientError,
    NoCredentialsError,
    ParamValidationError,
    PartialCredentialsError,
    UnknownCredentialError,
)
from botocore.parsers import ResponseParserError
from keyring.errors import KeyringError

from .regions import ParseRegionError

E = TypeVar("E")

# Header used by AWS on responses to identify the request.
AWS_REQUEST_ID_HEADER = "x-amzn-requestid"

_PARSE_ERRORS = (json.JSONDecodeError, XmlParseError, ResponseParserError)
_CREDENTIAL_ERRORS = (
    NoCredentialsError,
    PartialCredentialsError,
    CredentialRetrievalError,
    UnknownCredentialError,
    KeyringError,
)
_DISPATCH_ERRORS = (HTTPClientError, BotoConnectionError, OSError)


@dataclass(frozen=True)
class BufferedHttpResponse:
    """A fully read HTTP response kept for diagnostics."""

    status: int
    headers: Mapping[str, str] = field(default_factory=HeadersDict)
    body: bytes = b""

    def __post_init__(self):
        if not isinstance(self.headers, HeadersDict):
            object.__setattr__(self, "headers", HeadersDict(self.headers))

    @classmethod
    def from_aws_response(cls, response: AWSResponse) -> BufferedHttpResponse:
        return cls(
            status=response.status_code,
            headers=HeadersDict(response.headers),
            body=response.content or b"",
        )

    def body_as_str(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class S3ClientError(Exception, Generic[E]):
    """Base class for every error returned by an S3 operation."""

    def __init__(self, *args):
        super().__init__(*args)
        # Raised while handling the lower-level error; only __cause__ links to it.
        self.__suppress_context__ = True

    @property
    def source(self) -> Optional[BaseException]:
        """The wrapped lower-level error, if this variant links to one."""

        return None


class ServiceError(S3ClientError[E]):
    """The service answered with a well-formed, operation-specific error."""

    def __init__(self, error: E):
        self.error = error
        super().__init__(str(error))
        if isinstance(error, BaseException):
            self.__cause__ = error

    @property
    def source(self) -> Optional[BaseException]:
        return self.error if isinstance(self.error, BaseException) else None


class DispatchError(S3ClientError[E]):
    """The HTTP request could not be dispatched (connection, TLS, timeout)."""

    def __init__(self, error: BaseException):
        self.error = error
        super().__init__(str(error))
        self.__cause__ = error

    @property
    def source(self) -> Optional[BaseException]:
        return self.error


class CredentialsError(S3ClientError[E]):
    """Credentials could not be resolved or used for signing."""

    def __init__(self, error: BaseException):
        self.error = error
        super().__init__(str(error))
        self.__cause__ = error

    @property
    def source(self) -> Optional[BaseException]:
        return self.error


class InvalidDnsNameError(S3ClientError[E]):
    """The bucket name cannot be used as a virtual-hosted-style subdomain."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(S3ClientError[E]):
    """Caller input was rejected before any request was sent."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ParseError(S3ClientError[E]):
    """A response body could not be decoded into the expected shape."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownResponseError(S3ClientError[E]):
    """The service returned a response that could not be classified."""

    def __init__(self, response: BufferedHttpResponse):
        self.response = response
        super().__init__(self._render())

    @property
    def request_id(self) -> Optional[str]:
        return self.response.headers.get(AWS_REQUEST_ID_HEADER)

    def _render(self) -> str:
        request_id = self.request_id or "none found"
        return f"Request ID: {request_id} Body: {self.response.body_as_str()}"


class BlockingError(S3ClientError[E]):
    """An asynchronous operation could not be run in a blocking context."""

    def __init__(self):
        super().__init__("Failed to run blocking future")


class SigningStage(Enum):
    CREDENTIALS = "credentials"
    DISPATCH = "dispatch"


class SignAndDispatchError(Exception):
    """Failure raised by a combined sign-then-send step."""

    def __init__(self, stage: SigningStage, error: BaseException):
        self.stage = stage
        self.error = error
        super().__init__(str(error))

    @classmethod
    def credentials(cls, error: BaseException) -> SignAndDispatchError:
        return cls(SigningStage.CREDENTIALS, error)

    @classmethod
    def dispatch(cls, error: BaseException) -> SignAndDispatchError:
        return cls(SigningStage.DISPATCH, error)


# Every exception type lift_error accepts.
LIFTABLE_ERRORS = (
    S3ClientError,
    SignAndDispatchError,
    ClientError,
    ParamValidationError,
    ParseRegionError,
) + _PARSE_ERRORS + _CREDENTIAL_ERRORS + _DISPATCH_ERRORS


def lift_error(exc: BaseException) -> S3ClientError:
    """Convert a lower-level failure into the matching :class:`S3ClientError`.

    Raises:
        TypeError: when ``exc`` has no corresponding variant.
    """

    if isinstance(exc, S3ClientError):
        return exc
    if isinstance(exc, SignAndDispatchError):
        if exc.stage is SigningStage.CREDENTIALS:
            return CredentialsError(exc.error)
        return DispatchError(exc.error)
    if isinstance(exc, ClientError):
        return ServiceError(exc)
    if isinstance(exc, ParamValidationError):
        return ValidationError(str(exc))
    if isinstance(exc, ParseRegionError):
        return ValidationError(str(exc))
    if isinstance(exc, _PARSE_ERRORS):
        return ParseError(str(exc))
    if isinstance(exc, _CREDENTIAL_ERRORS):
        return CredentialsError(exc)
    if isinstance(exc, _DISPATCH_ERRORS):
        return DispatchError(exc)
    raise TypeError(f"Cannot convert {type(exc).__name__} into an S3 client error")
