from datetime import datetime, timedelta
import unittest

from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError
from botocore.parsers import ResponseParserError

from s3_presign.addressing import AddressingStyle
from s3_presign.errors import CredentialsError, DispatchError, ParseError, ServiceError, ValidationError
from s3_presign.models import GetObjectRequest, UploadPartRequest
from s3_presign.presign import OperationKind
from s3_presign.profiles import ConnectionProfile
from s3_presign.services import S3ObjectService


class FakeS3Client:
    def __init__(self, buckets=None, head_object_responses=None, errors=None):
        self.buckets = buckets or []
        self.head_object_responses = head_object_responses or {}
        self.errors = errors or {}
        self.head_object_calls = []
        self.delete_object_calls = []

    def _raise_for(self, operation):
        error = self.errors.get(operation)
        if isinstance(error, Exception):
            raise error

    def list_buckets(self):
        self._raise_for("list_buckets")
        return {"Buckets": [{"Name": name} for name in self.buckets]}

    def head_object(self, **kwargs):
        self.head_object_calls.append(kwargs)
        self._raise_for("head_object")
        return self.head_object_responses.get((kwargs["Bucket"], kwargs["Key"]), {})

    def delete_object(self, **kwargs):
        self.delete_object_calls.append((kwargs["Bucket"], kwargs["Key"]))
        self._raise_for("delete_object")


class FakeSigner:
    def __init__(self):
        self.calls = []

    def sign(self, request, credentials, expires_in, requires_body_hash=False):
        self.calls.append((request, credentials, expires_in))
        return "https://signed.example/url"


class FailingSigner:
    def __init__(self, error):
        self.error = error

    def sign(self, request, credentials, expires_in, requires_body_hash=False):
        raise self.error


class RecordingFactory:
    def __init__(self, client):
        self.client = client
        self.calls = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.client


def _profile(**overrides):
    values = {
        "name": "local",
        "access_key": "access",
        "secret_key": "secret",
        "region_name": "us-west-2",
    }
    values.update(overrides)
    return ConnectionProfile(**values)


class S3ObjectServiceTests(unittest.TestCase):
    def test_creates_client_from_profile(self):
        factory = RecordingFactory(FakeS3Client(buckets=["alpha", "beta"]))
        service = S3ObjectService(client_factory=factory)
        profile = _profile(endpoint_url="http://localhost:9000", addressing_style=AddressingStyle.PATH)

        buckets = service.list_buckets(profile)

        self.assertEqual(["alpha", "beta"], buckets)
        args, kwargs = factory.calls[0]
        self.assertEqual(("s3",), args)
        self.assertEqual("http://localhost:9000", kwargs["endpoint_url"])
        self.assertEqual("us-west-2", kwargs["region_name"])
        self.assertEqual("access", kwargs["aws_access_key_id"])
        self.assertEqual("secret", kwargs["aws_secret_access_key"])
        self.assertEqual({"addressing_style": "path"}, kwargs["config"].s3)

    def test_head_object_returns_details(self):
        modified = datetime(2024, 5, 1, 12, 0, 0)
        client = FakeS3Client(
            head_object_responses={
                ("bucket", "key.txt"): {
                    "ContentLength": 12,
                    "LastModified": modified,
                    "ETag": '"etag"',
                    "ContentType": "text/plain",
                    "Metadata": {"owner": "alice"},
                    "ResponseMetadata": {"RequestId": "req-1"},
                }
            }
        )
        service = S3ObjectService(client_factory=lambda *_, **__: client)

        details = service.head_object(_profile(), "bucket", "key.txt")

        self.assertEqual(12, details.size)
        self.assertEqual(modified, details.last_modified)
        self.assertEqual('"etag"', details.etag)
        self.assertEqual({"owner": "alice"}, details.metadata)
        self.assertEqual("req-1", details.request_id)
        self.assertEqual([{"Bucket": "bucket", "Key": "key.txt"}], client.head_object_calls)

    def test_service_errors_are_lifted(self):
        error = ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "HeadObject")
        client = FakeS3Client(errors={"head_object": error})
        service = S3ObjectService(client_factory=lambda *_, **__: client)

        with self.assertLogs("s3_presign.services", level="ERROR"):
            with self.assertRaises(ServiceError) as ctx:
                service.head_object(_profile(), "bucket", "missing.txt")

        self.assertIs(error, ctx.exception.error)
        self.assertIs(error, ctx.exception.__cause__)

    def test_dispatch_errors_are_lifted(self):
        error = EndpointConnectionError(endpoint_url="http://localhost:9000")
        client = FakeS3Client(errors={"delete_object": error})
        service = S3ObjectService(client_factory=lambda *_, **__: client)

        with self.assertLogs("s3_presign.services", level="ERROR"):
            with self.assertRaises(DispatchError) as ctx:
                service.delete_object(_profile(), "bucket", "key.txt")

        self.assertIs(error, ctx.exception.__cause__)
        self.assertEqual([("bucket", "key.txt")], client.delete_object_calls)

    def test_credential_errors_are_lifted(self):
        client = FakeS3Client(errors={"list_buckets": NoCredentialsError()})
        service = S3ObjectService(client_factory=lambda *_, **__: client)

        with self.assertLogs("s3_presign.services", level="ERROR"):
            with self.assertRaises(CredentialsError):
                service.list_buckets(_profile())

    def test_parse_errors_are_lifted(self):
        client = FakeS3Client(errors={"list_buckets": ResponseParserError("Unable to parse response")})
        service = S3ObjectService(client_factory=lambda *_, **__: client)

        with self.assertLogs("s3_presign.services", level="ERROR"):
            with self.assertRaises(ParseError) as ctx:
                service.list_buckets(_profile())

        self.assertEqual("Unable to parse response", str(ctx.exception))
        self.assertIsNone(ctx.exception.__cause__)
        self.assertTrue(ctx.exception.__suppress_context__)

    def test_presigned_url_uses_profile_settings(self):
        signer = FakeSigner()
        service = S3ObjectService(client_factory=lambda *_, **__: None, signer=signer)
        profile = _profile(endpoint_url="https://minio.example.org:9000/", addressing_style=AddressingStyle.PATH)

        url = service.presigned_url(
            profile,
            OperationKind.UPLOAD_PART,
            UploadPartRequest(bucket="uploads", key="big.bin", part_number=1, upload_id="u-1"),
            expires_in=300,
        )

        self.assertEqual("https://signed.example/url", url)
        request, credentials, expires_in = signer.calls[0]
        self.assertEqual("minio.example.org:9000", request.hostname)
        self.assertEqual("/uploads/big.bin", request.path)
        self.assertEqual("access", credentials.access_key)
        self.assertEqual(timedelta(seconds=300), expires_in)

    def test_presigned_url_defaults_to_one_hour(self):
        signer = FakeSigner()
        service = S3ObjectService(client_factory=lambda *_, **__: None, signer=signer)

        service.presigned_url(_profile(), OperationKind.GET_OBJECT, GetObjectRequest(bucket="my-bucket", key="k"))

        request, _, expires_in = signer.calls[0]
        self.assertEqual("my-bucket.s3.us-west-2.amazonaws.com", request.hostname)
        self.assertEqual(timedelta(hours=1), expires_in)

    def test_presigned_url_signer_credential_failure_is_lifted(self):
        error = NoCredentialsError()
        service = S3ObjectService(client_factory=lambda *_, **__: None, signer=FailingSigner(error))

        with self.assertLogs("s3_presign.services", level="ERROR"):
            with self.assertRaises(CredentialsError) as ctx:
                service.presigned_url(_profile(), OperationKind.GET_OBJECT, GetObjectRequest(bucket="b-1", key="k"))

        self.assertIs(error, ctx.exception.__cause__)

    def test_presigned_url_unknown_region_is_a_validation_error(self):
        service = S3ObjectService(client_factory=lambda *_, **__: None, signer=FakeSigner())

        with self.assertLogs("s3_presign.services", level="ERROR"):
            with self.assertRaises(ValidationError) as ctx:
                service.presigned_url(
                    _profile(region_name="mars-north-1"),
                    OperationKind.GET_OBJECT,
                    GetObjectRequest(bucket="b-1", key="k"),
                )

        self.assertIn("mars-north-1", str(ctx.exception))
        self.assertIsNone(ctx.exception.__cause__)


if __name__ == "__main__":
    unittest.main()
