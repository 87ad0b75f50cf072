import boto3
from typing import Iterable, List
from urllib.parse import quote, unquote, urlparse
from botocore.exceptions import ClientError
from photo_album.models import BlobObject, PutBlobResult
from photo_album.settings import settings
import logging

log = logging.getLogger(__name__)

# S3 accepts at most this many keys per DeleteObjects call
DELETE_BATCH_SIZE = 1000

# -------------------------
# S3 Blob Store
# -------------------------
class S3BlobStore:
    """Key/object store with list, put and batched delete, backed by an S3-compatible bucket."""

    def __init__(self, client=None):
        if client is None:
            session = boto3.session.Session(region_name=settings.aws_region)
            kwargs = {
                "aws_access_key_id": settings.aws_access_key_id,
                "aws_secret_access_key": settings.aws_secret_access_key,
            }
            if settings.aws_endpoint_url:
                kwargs["endpoint_url"] = settings.aws_endpoint_url
            client = session.client("s3", **kwargs)
        self.client = client
        log.info("Initialized blob store for bucket %s", settings.s3_bucket)

    def ensure_bucket(self):
        try:
            self.client.head_bucket(Bucket=settings.s3_bucket)
            log.debug("Bucket %s already exists", settings.s3_bucket)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in ("404", "NoSuchBucket"):
                self.client.create_bucket(Bucket=settings.s3_bucket)
                log.info("Created bucket %s", settings.s3_bucket)
            else:
                log.error("Failed to check/create bucket: %s", e)
                raise

    def url_for(self, key: str) -> str:
        return f"{settings.public_base_url}/{quote(key)}"

    def key_for(self, url: str) -> str:
        """Maps a public object url back to its key."""
        base = settings.public_base_url + "/"
        if url.startswith(base):
            return unquote(url[len(base):])
        path = unquote(urlparse(url).path).lstrip("/")
        # Path-style urls carry the bucket as the first segment
        bucket_prefix = settings.s3_bucket + "/"
        if path.startswith(bucket_prefix):
            path = path[len(bucket_prefix):]
        return path

    def list(self) -> List[BlobObject]:
        paginator = self.client.get_paginator("list_objects_v2")
        blobs = []
        for page in paginator.paginate(Bucket=settings.s3_bucket):
            for obj in page.get("Contents", []):
                blobs.append(BlobObject(
                    url=self.url_for(obj["Key"]),
                    pathname=obj["Key"],
                    size=obj["Size"],
                    uploaded_at=obj["LastModified"],
                ))
        log.debug("Listed %d objects in %s", len(blobs), settings.s3_bucket)
        return blobs

    def put(self, key: str, data: bytes, content_type: str) -> PutBlobResult:
        extra = {"ContentType": content_type}
        if settings.blob_object_acl:
            extra["ACL"] = settings.blob_object_acl
        self.client.put_object(Bucket=settings.s3_bucket, Key=key, Body=data, **extra)
        log.debug("Uploaded %s to s3://%s/%s", key, settings.s3_bucket, key)
        return PutBlobResult(url=self.url_for(key), pathname=key)

    def delete(self, urls: Iterable[str]):
        """Deletes the objects behind the given urls. Absent objects are not an error."""
        keys = [self.key_for(url) for url in urls]
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            resp = self.client.delete_objects(
                Bucket=settings.s3_bucket,
                Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
            )
            errors = resp.get("Errors", [])
            if errors:
                first = errors[0]
                raise ClientError(
                    {"Error": {"Code": first.get("Code", "DeleteFailed"), "Message": first.get("Message", "")}},
                    "DeleteObjects",
                )
        log.debug("Deleted %d objects from s3://%s", len(keys), settings.s3_bucket)

    def close(self):
        log.info("Closed blob store")

