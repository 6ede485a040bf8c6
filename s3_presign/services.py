from __future__ import annotations
"""Object operations backed by boto3, with failures lifted into :mod:`.errors`."""
import logging
from typing import Callable

import boto3

from .errors import LIFTABLE_ERRORS, lift_error
from .models import ObjectDetails
from .presign import ObjectRequest, OperationKind, PresignedUrlBuilder
from .profiles import ConnectionProfile
from .settings import PreSignedRequestOption
from .signing import Signer

LOGGER = logging.getLogger(__name__)


class S3ObjectService:
    """Runs object operations for a :class:`ConnectionProfile`.

    Every failure raised by botocore or the socket layer is re-raised as an
    :class:`~s3_presign.errors.S3ClientError` subclass.
    """

    def __init__(
        self,
        client_factory: Callable[..., object] | None = None,
        signer: Signer | None = None,
    ):
        self._client_factory = client_factory if client_factory is not None else boto3.client
        self._signer = signer

    def list_buckets(self, profile: ConnectionProfile) -> list[str]:
        """Return the available bucket names."""

        client = self._create_client(profile)
        try:
            response = client.list_buckets()
        except LIFTABLE_ERRORS as exc:
            LOGGER.exception("Bucket listing failed for profile '%s'", profile.name)
            raise lift_error(exc)
        return [bucket["Name"] for bucket in response.get("Buckets", [])]

    def head_object(self, profile: ConnectionProfile, bucket_name: str, key: str) -> ObjectDetails:
        """Fetch metadata about a single object."""

        client = self._create_client(profile)
        try:
            response = client.head_object(Bucket=bucket_name, Key=key)
        except LIFTABLE_ERRORS as exc:
            LOGGER.exception("HEAD failed for s3://%s/%s", bucket_name, key)
            raise lift_error(exc)
        metadata = response.get("ResponseMetadata") or {}
        return ObjectDetails(
            bucket=bucket_name,
            key=key,
            size=response.get("ContentLength"),
            last_modified=response.get("LastModified"),
            etag=response.get("ETag"),
            content_type=response.get("ContentType"),
            metadata=dict(response.get("Metadata") or {}),
            request_id=metadata.get("RequestId"),
        )

    def delete_object(self, profile: ConnectionProfile, bucket_name: str, key: str) -> None:
        """Delete an object from the target bucket/key."""

        client = self._create_client(profile)
        try:
            client.delete_object(Bucket=bucket_name, Key=key)
        except LIFTABLE_ERRORS as exc:
            LOGGER.exception("DELETE failed for s3://%s/%s", bucket_name, key)
            raise lift_error(exc)

    def presigned_url(
        self,
        profile: ConnectionProfile,
        kind: OperationKind,
        request: ObjectRequest,
        expires_in: int | None = None,
    ) -> str:
        """Pre-sign ``request`` with the profile's region, credentials and style."""

        config = profile.config()
        builder = PresignedUrlBuilder(signer=self._signer, config=config)
        option = PreSignedRequestOption.from_config(config, expires_in=expires_in)
        try:
            return builder.build(kind, request, profile.region(), profile.credentials(), option)
        except LIFTABLE_ERRORS as exc:
            LOGGER.exception("Pre-signing %s failed for s3://%s/%s", kind.value, request.bucket, request.key)
            raise lift_error(exc)

    def _create_client(self, profile: ConnectionProfile):
        return self._client_factory(
            "s3",
            endpoint_url=profile.endpoint_url,
            region_name=profile.region_name,
            aws_access_key_id=profile.access_key,
            aws_secret_access_key=profile.secret_key,
            aws_session_token=profile.session_token,
            config=profile.config().botocore_config(),
        )
