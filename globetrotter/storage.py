"""Object storage for user uploads (any S3-compatible endpoint)."""

import uuid
from functools import lru_cache
from typing import Any

import boto3
from botocore.config import Config
from loguru import logger

from .config import settings


@lru_cache(maxsize=1)
def get_s3_client() -> Any:
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint_url or None,
        region_name=settings.s3_region,
        aws_access_key_id=settings.s3_access_key_id or None,
        aws_secret_access_key=settings.s3_secret_access_key or None,
        config=Config(s3={"addressing_style": "path"}),
    )


def public_url(key: str) -> str:
    """Public URL for an object in the upload bucket."""
    base = settings.s3_public_base_url or settings.s3_endpoint_url
    return f"{base.rstrip('/')}/{settings.s3_bucket}/{key}"


def upload_image(content: bytes, extension: str, content_type: str) -> str:
    """Store an image under a random key and return its public URL."""
    key = f"{uuid.uuid4()}.{extension}"
    get_s3_client().put_object(
        Bucket=settings.s3_bucket,
        Key=key,
        Body=content,
        ContentType=content_type,
        ACL="public-read",
    )
    logger.info(f"Uploaded {key} ({len(content)} bytes) to bucket {settings.s3_bucket}")
    return public_url(key)
