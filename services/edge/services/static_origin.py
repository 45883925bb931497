"""
Static origin adapters.

Translate a router-provided key into object bytes and content type, or report
absence. The router is the only caller; nothing here is exposed directly.
"""

import logging
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol

import boto3
import botocore.config
from botocore.exceptions import ClientError

from ..core.exceptions import ObjectAccessDeniedError, ObjectNotFoundError, OriginError

logger = logging.getLogger("edge.static_origin")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StaticObject:
    body: bytes
    content_type: str
    cache_control: Optional[str] = None
    etag: Optional[str] = None


class StaticOrigin(Protocol):
    def get(self, key: str) -> StaticObject:
        """
        Raises:
            ObjectNotFoundError: key does not exist
            ObjectAccessDeniedError: key exists but may not be read
            OriginError: any other origin failure
        """
        ...


def guess_content_type(key: str) -> str:
    content_type, _ = mimetypes.guess_type(key)
    return content_type or DEFAULT_CONTENT_TYPE


class FileSystemOrigin:
    """Serves the site bundle from a local build directory."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    def get(self, key: str) -> StaticObject:
        try:
            candidate = (self.root / key).resolve()
        except (ValueError, OSError):
            # NUL bytes or unresolvable names cannot name a stored object.
            raise ObjectNotFoundError(key)
        try:
            candidate.relative_to(self.root)
        except ValueError:
            # Same answer a private bucket gives for keys it will not serve.
            raise ObjectAccessDeniedError(key)

        if not candidate.is_file():
            raise ObjectNotFoundError(key)

        try:
            body = candidate.read_bytes()
        except PermissionError:
            raise ObjectAccessDeniedError(key)
        except OSError as e:
            raise OriginError(500, key, str(e)) from e

        stat = candidate.stat()
        return StaticObject(
            body=body,
            content_type=guess_content_type(key),
            etag=f'"{stat.st_mtime_ns:x}-{stat.st_size:x}"',
        )


class S3Origin:
    """Serves the site bundle from a private S3 bucket."""

    def __init__(self, bucket: str, client: Any = None, endpoint_url: Optional[str] = None):
        self.bucket = bucket
        self.client = client or self._create_client(endpoint_url)

    @staticmethod
    def _create_client(endpoint_url: Optional[str]):
        client = boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            region_name=os.environ.get("AWS_REGION"),
            config=botocore.config.Config(signature_version="s3v4"),
        )
        logger.info(f"S3 client initialized with endpoint: {endpoint_url or 'default'}")
        return client

    def get(self, key: str) -> StaticObject:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = str(error.get("Code", ""))
            status = int(e.response.get("ResponseMetadata", {}).get("HTTPStatusCode") or 500)
            if code in ("NoSuchKey", "NotFound", "404") or status == 404:
                raise ObjectNotFoundError(key)
            if code in ("AccessDenied", "403") or status == 403:
                raise ObjectAccessDeniedError(key)
            logger.error(
                f"S3 origin error for key '{key}'",
                extra={"bucket": self.bucket, "error_code": code, "status": status},
            )
            raise OriginError(status, key, code or "Origin Error") from e

        return StaticObject(
            body=response["Body"].read(),
            content_type=response.get("ContentType") or guess_content_type(key),
            cache_control=response.get("CacheControl"),
            etag=response.get("ETag"),
        )
