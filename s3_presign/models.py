from __future__ import annotations
"""Request values for the object operations that can be pre-signed."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, Union

HttpDate = Union[str, datetime]


@dataclass(frozen=True)
class GetObjectRequest:
    """Retrieve an object."""

    bucket: str
    key: str
    range: Optional[str] = None
    if_modified_since: Optional[HttpDate] = None
    if_unmodified_since: Optional[HttpDate] = None
    if_match: Optional[str] = None
    if_none_match: Optional[str] = None
    sse_customer_algorithm: Optional[str] = None
    sse_customer_key: Optional[str] = None
    sse_customer_key_md5: Optional[str] = None
    part_number: Optional[int] = None
    response_content_type: Optional[str] = None
    response_content_language: Optional[str] = None
    response_expires: Optional[HttpDate] = None
    response_cache_control: Optional[str] = None
    response_content_disposition: Optional[str] = None
    response_content_encoding: Optional[str] = None
    version_id: Optional[str] = None


@dataclass(frozen=True)
class PutObjectRequest:
    """Store an object. ``metadata`` entries become ``x-amz-meta-*`` headers."""

    bucket: str
    key: str
    cache_control: Optional[str] = None
    content_disposition: Optional[str] = None
    content_encoding: Optional[str] = None
    content_length: Optional[int] = None
    content_md5: Optional[str] = None
    content_type: Optional[str] = None
    expires: Optional[HttpDate] = None
    storage_class: Optional[str] = None
    tagging: Optional[str] = None
    website_redirect_location: Optional[str] = None
    acl: Optional[str] = None
    grant_read: Optional[str] = None
    grant_read_acp: Optional[str] = None
    grant_write_acp: Optional[str] = None
    grant_full_control: Optional[str] = None
    server_side_encryption: Optional[str] = None
    ssekms_key_id: Optional[str] = None
    sse_customer_algorithm: Optional[str] = None
    sse_customer_key: Optional[str] = None
    sse_customer_key_md5: Optional[str] = None
    metadata: Optional[Mapping[str, str]] = None


@dataclass(frozen=True)
class DeleteObjectRequest:
    """Delete an object or one of its versions."""

    bucket: str
    key: str
    mfa: Optional[str] = None
    version_id: Optional[str] = None


@dataclass(frozen=True)
class UploadPartRequest:
    """Upload one part of a multipart upload that has already been created."""

    bucket: str
    key: str
    part_number: int
    upload_id: str
    content_length: Optional[int] = None
    content_md5: Optional[str] = None
    sse_customer_algorithm: Optional[str] = None
    sse_customer_key: Optional[str] = None
    sse_customer_key_md5: Optional[str] = None
    request_payer: Optional[str] = None


@dataclass
class ObjectDetails:
    """Metadata about a single S3 object."""

    bucket: str
    key: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    content_type: Optional[str] = None
    metadata: dict[str, str] = field(default_factory=dict)
    request_id: Optional[str] = None
