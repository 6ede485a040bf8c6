from __future__ import annotations
"""Pre-signed URLs for object requests.

Each supported operation is described by an :class:`OperationSpec`: the HTTP
method plus the table mapping request fields onto the headers and query
parameters AWS documents for it. One builder walks the table, so an absent
(``None``) field never emits anything and a present field emits exactly one
header or one parameter.

References:
    https://docs.aws.amazon.com/AmazonS3/latest/API/sigv4-query-string-auth.html
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from enum import Enum
import logging
from typing import Optional, Union

from botocore.credentials import Credentials
from botocore.utils import percent_encode

from .addressing import build_s3_hostname
from .models import (
    DeleteObjectRequest,
    GetObjectRequest,
    PutObjectRequest,
    UploadPartRequest,
)
from .regions import Region
from .settings import PreSignedRequestOption, S3Config
from .signing import BotocoreSigner, SignedRequest, Signer

LOGGER = logging.getLogger(__name__)

S3_SERVICE = "s3"
METADATA_HEADER_PREFIX = "x-amz-meta-"

ObjectRequest = Union[GetObjectRequest, PutObjectRequest, DeleteObjectRequest, UploadPartRequest]

_SSE_CUSTOMER_HEADERS = (
    ("sse_customer_algorithm", "x-amz-server-side-encryption-customer-algorithm"),
    ("sse_customer_key", "x-amz-server-side-encryption-customer-key"),
    ("sse_customer_key_md5", "x-amz-server-side-encryption-customer-key-MD5"),
)


class OperationKind(Enum):
    GET_OBJECT = "GetObject"
    PUT_OBJECT = "PutObject"
    DELETE_OBJECT = "DeleteObject"
    UPLOAD_PART = "UploadPart"


@dataclass(frozen=True)
class OperationSpec:
    """How one operation kind is turned into a signed request.

    ``headers`` and ``params`` are ``(field, name)`` pairs emitted when the
    field is set. ``required_params`` are always emitted. ``unsupported``
    names headers AWS documents for the operation that the request value
    does not carry; they are never sent.
    """

    request_type: type
    method: str
    headers: tuple[tuple[str, str], ...] = ()
    params: tuple[tuple[str, str], ...] = ()
    required_params: tuple[tuple[str, str], ...] = ()
    unsupported: tuple[str, ...] = ()
    metadata_field: Optional[str] = None


OPERATIONS: dict[OperationKind, OperationSpec] = {
    # https://docs.aws.amazon.com/AmazonS3/latest/API/RESTObjectGET.html
    OperationKind.GET_OBJECT: OperationSpec(
        request_type=GetObjectRequest,
        method="GET",
        headers=(
            ("range", "Range"),
            ("if_modified_since", "If-Modified-Since"),
            ("if_unmodified_since", "If-Unmodified-Since"),
            ("if_match", "If-Match"),
            ("if_none_match", "If-None-Match"),
        )
        + _SSE_CUSTOMER_HEADERS,
        params=(
            ("part_number", "partNumber"),
            ("response_content_type", "response-content-type"),
            ("response_content_language", "response-content-language"),
            ("response_expires", "response-expires"),
            ("response_cache_control", "response-cache-control"),
            ("response_content_disposition", "response-content-disposition"),
            ("response_content_encoding", "response-content-encoding"),
            ("version_id", "versionId"),
        ),
    ),
    # https://docs.aws.amazon.com/AmazonS3/latest/API/RESTObjectPUT.html
    OperationKind.PUT_OBJECT: OperationSpec(
        request_type=PutObjectRequest,
        method="PUT",
        headers=(
            ("cache_control", "Cache-Control"),
            ("content_disposition", "Content-Disposition"),
            ("content_encoding", "Content-Encoding"),
            ("content_length", "Content-Length"),
            ("content_md5", "Content-MD5"),
            ("content_type", "Content-Type"),
            ("expires", "Expires"),
            ("storage_class", "x-amz-storage-class"),
            ("tagging", "x-amz-tagging"),
            ("website_redirect_location", "x-amz-website-redirect-location"),
            ("acl", "x-amz-acl"),
            ("grant_read", "x-amz-grant-read"),
            ("grant_read_acp", "x-amz-grant-read-acp"),
            ("grant_write_acp", "x-amz-grant-write-acp"),
            ("grant_full_control", "x-amz-grant-full-control"),
            ("server_side_encryption", "x-amz-server-side-encryption"),
            ("ssekms_key_id", "x-amz-server-side-encryption-aws-kms-key-id"),
        )
        + _SSE_CUSTOMER_HEADERS,
        unsupported=(
            "Expect",
            "x-amz-grant-write",
            "x-amz-server-side-encryption-context",
        ),
        metadata_field="metadata",
    ),
    # https://docs.aws.amazon.com/AmazonS3/latest/API/RESTObjectDELETE.html
    OperationKind.DELETE_OBJECT: OperationSpec(
        request_type=DeleteObjectRequest,
        method="DELETE",
        headers=(("mfa", "x-amz-mfa"),),
        params=(("version_id", "versionId"),),
    ),
    # https://docs.aws.amazon.com/AmazonS3/latest/API/mpUploadUploadPart.html
    OperationKind.UPLOAD_PART: OperationSpec(
        request_type=UploadPartRequest,
        method="PUT",
        headers=(
            ("content_length", "Content-Length"),
            ("content_md5", "Content-MD5"),
        )
        + _SSE_CUSTOMER_HEADERS
        + (("request_payer", "x-amz-request-payer"),),
        required_params=(
            ("part_number", "partNumber"),
            ("upload_id", "uploadId"),
        ),
    ),
}


def encode_key(key: str) -> str:
    """URL encode an object key.

    Used for request paths and for copy sources, which must be encoded.
    """

    return percent_encode(key, safe="/~")


def build_request_uri_and_hostname(
    region: Region,
    bucket: str,
    key: str,
    option: PreSignedRequestOption,
) -> tuple[str, str]:
    is_virtual, hostname = build_s3_hostname(option.addressing_style, region, bucket)
    if is_virtual:
        return f"/{encode_key(key)}", hostname
    return f"/{encode_key(bucket)}/{encode_key(key)}", hostname


def _render(value) -> str:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return format_datetime(value.astimezone(timezone.utc), usegmt=True)
    return str(value)


def build_signed_request(
    kind: OperationKind,
    request: ObjectRequest,
    region: Region,
    option: PreSignedRequestOption,
) -> SignedRequest:
    """Build the unsigned request for ``request``.

    Raises:
        InvalidDnsNameError: when virtual-hosted addressing is required and
            the bucket name does not allow it.
        TypeError: when ``request`` is not the value type of ``kind``.
    """

    spec = OPERATIONS[kind]
    if not isinstance(request, spec.request_type):
        raise TypeError(
            f"{kind.value} expects {spec.request_type.__name__}, got {type(request).__name__}"
        )

    request_uri, hostname = build_request_uri_and_hostname(
        region, request.bucket, request.key, option
    )
    signed = SignedRequest(spec.method, S3_SERVICE, region, request_uri)

    for field_name, param in spec.required_params:
        signed.add_param(param, _render(getattr(request, field_name)))
    for field_name, header in spec.headers:
        value = getattr(request, field_name)
        if value is not None:
            signed.add_header(header, _render(value))
    for field_name, param in spec.params:
        value = getattr(request, field_name)
        if value is not None:
            signed.add_param(param, _render(value))
    if spec.metadata_field:
        metadata = getattr(request, spec.metadata_field) or {}
        for name, value in metadata.items():
            signed.add_header(f"{METADATA_HEADER_PREFIX}{name}", value)

    signed.set_hostname(hostname)
    return signed


class PresignedUrlBuilder:
    """Creates pre-signed object URLs using a client-wide :class:`S3Config`."""

    def __init__(self, signer: Signer | None = None, config: S3Config | None = None):
        self._signer = signer if signer is not None else BotocoreSigner()
        self._config = config if config is not None else S3Config()

    def default_option(self, expires_in=None) -> PreSignedRequestOption:
        return PreSignedRequestOption.from_config(self._config, expires_in=expires_in)

    def build(
        self,
        kind: OperationKind,
        request: ObjectRequest,
        region: Region,
        credentials: Credentials,
        option: PreSignedRequestOption | None = None,
    ) -> str:
        option = option if option is not None else self.default_option()
        signed = build_signed_request(kind, request, region, option)
        LOGGER.debug(
            "Pre-signing %s for %s%s (expires in %s)",
            kind.value,
            signed.hostname,
            signed.path,
            option.expires_in,
        )
        return self._signer.sign(signed, credentials, option.expires_in, False)

    def get_object_url(self, request, region, credentials, option=None) -> str:
        return self.build(OperationKind.GET_OBJECT, request, region, credentials, option)

    def put_object_url(self, request, region, credentials, option=None) -> str:
        return self.build(OperationKind.PUT_OBJECT, request, region, credentials, option)

    def delete_object_url(self, request, region, credentials, option=None) -> str:
        return self.build(OperationKind.DELETE_OBJECT, request, region, credentials, option)

    def upload_part_url(self, request, region, credentials, option=None) -> str:
        return self.build(OperationKind.UPLOAD_PART, request, region, credentials, option)


def presign_get_object(
    request: GetObjectRequest,
    region: Region,
    credentials: Credentials,
    option: PreSignedRequestOption | None = None,
) -> str:
    return PresignedUrlBuilder().get_object_url(request, region, credentials, option)


def presign_put_object(
    request: PutObjectRequest,
    region: Region,
    credentials: Credentials,
    option: PreSignedRequestOption | None = None,
) -> str:
    return PresignedUrlBuilder().put_object_url(request, region, credentials, option)


def presign_delete_object(
    request: DeleteObjectRequest,
    region: Region,
    credentials: Credentials,
    option: PreSignedRequestOption | None = None,
) -> str:
    return PresignedUrlBuilder().delete_object_url(request, region, credentials, option)


def presign_upload_part(
    request: UploadPartRequest,
    region: Region,
    credentials: Credentials,
    option: PreSignedRequestOption | None = None,
) -> str:
    return PresignedUrlBuilder().upload_part_url(request, region, credentials, option)
