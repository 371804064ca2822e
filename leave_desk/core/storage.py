from __future__ import annotations

from dataclasses import dataclass
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageConfig:
    endpoint_url: str
    bucket: str
    public_base_url: str | None


def is_object_storage(settings: Settings) -> bool:
    return settings.storage_backend == "object"


def get_storage_config(settings: Settings) -> StorageConfig:
    if not is_object_storage(settings):
        raise RuntimeError("Object storage is not enabled")
    if not all([settings.object_storage_endpoint, settings.object_storage_bucket]):
        raise RuntimeError("Missing object storage configuration")
    return StorageConfig(
        endpoint_url=settings.object_storage_endpoint or "",
        bucket=(settings.object_storage_bucket or "").strip(),
        public_base_url=settings.object_storage_public_base_url,
    )


def get_s3_client(settings: Settings):
    cfg = get_storage_config(settings)
    return boto3.client(
        "s3",
        endpoint_url=cfg.endpoint_url,
        config=Config(s3={"addressing_style": "path"}),
    )


def upload_fileobj(settings: Settings, *, fileobj, key: str, content_type: str) -> None:
    cfg = get_storage_config(settings)
    s3 = get_s3_client(settings)
    try:
        s3.upload_fileobj(
            Fileobj=fileobj,
            Bucket=cfg.bucket,
            Key=key,
            ExtraArgs={"ContentType": content_type},
        )
    except ClientError as exc:
        logger.exception("Object storage upload failed: %s", exc)
        raise


def get_presigned_get_url(settings: Settings, *, key: str, expires_in: int = 600) -> str:
    cfg = get_storage_config(settings)
    s3 = get_s3_client(settings)
    return s3.generate_presigned_url(
        ClientMethod="get_object",
        Params={"Bucket": cfg.bucket, "Key": key},
        ExpiresIn=expires_in,
    )
