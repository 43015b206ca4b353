"""
MinIO-backed storage for user and product images
"""
from minio import Minio
from minio.error import S3Error
from fastapi import HTTPException, UploadFile, status
from functools import lru_cache
from typing import Optional
from datetime import datetime, timezone
from uuid import uuid4
import io
import json
import logging
import re

from snackhub.core.config import settings

logger = logging.getLogger(__name__)


def public_url(key: Optional[str]) -> Optional[str]:
    """Absolute URL clients use to render a stored image."""
    if not key:
        return None
    return f"{settings.PUBLIC_MEDIA_URL.rstrip('/')}/{key}"


def _safe_filename(filename: str) -> str:
    name = re.sub(r"[^A-Za-z0-9._-]", "_", filename or "image")
    return name[-100:]


class ImageStorage:
    """Stores uploaded images in MinIO and returns their relative keys"""

    def __init__(self):
        self.client = Minio(
            settings.minio_endpoint,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_USE_SSL
        )
        self.bucket_name = settings.MINIO_BUCKET_NAME
        self._bucket_ready = False

    def _ensure_bucket_exists(self):
        """Ensure the bucket exists and uploads are publicly readable"""
        if self._bucket_ready:
            return
        try:
            if not self.client.bucket_exists(self.bucket_name):
                self.client.make_bucket(self.bucket_name)
                logger.info(f"Created MinIO bucket: {self.bucket_name}")

            policy = {
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Principal": {"AWS": ["*"]},
                        "Action": ["s3:GetObject"],
                        "Resource": [f"arn:aws:s3:::{self.bucket_name}/uploads/*"]
                    }
                ]
            }
            self.client.set_bucket_policy(self.bucket_name, json.dumps(policy))
            self._bucket_ready = True

        except S3Error as e:
            logger.error(f"MinIO bucket setup error: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="File storage service unavailable"
            )

    @staticmethod
    def generate_key(folder: str, filename: str) -> str:
        """Structure: uploads/folder/yyyy/mm/uuid-filename"""
        now = datetime.now(timezone.utc)
        return f"uploads/{folder}/{now.year}/{now.month:02d}/{uuid4().hex}-{_safe_filename(filename)}"

    def save_image(self, folder: str, upload: UploadFile) -> str:
        """Validate and upload an image; returns its storage key"""
        content = validate_image(upload)
        key = self.generate_key(folder, upload.filename)
        self._ensure_bucket_exists()
        try:
            self.client.put_object(
                bucket_name=self.bucket_name,
                object_name=key,
                data=io.BytesIO(content),
                length=len(content),
                content_type=upload.content_type
            )
        except S3Error as e:
            logger.error(f"MinIO upload error for {key}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not store image"
            )
        logger.info(f"Stored image {key} ({len(content)} bytes)")
        return key

    def delete(self, key: Optional[str]) -> bool:
        """Delete an image; failures are logged, never raised"""
        if not key:
            return False
        try:
            self.client.remove_object(self.bucket_name, key)
            return True
        except Exception as e:
            logger.error(f"MinIO file deletion error for {key}: {e}")
            return False


def validate_image(upload: UploadFile) -> bytes:
    """Check type and size of an uploaded image and return its bytes"""
    if upload.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The image must be a file of type: jpeg, png, jpg, gif."
        )
    content = upload.file.read()
    if len(content) > settings.MAX_IMAGE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"The image may not be greater than {settings.MAX_IMAGE_SIZE // 1024} kilobytes."
        )
    return content


@lru_cache
def get_image_storage() -> ImageStorage:
    """FastAPI dependency; no network traffic happens until the first upload"""
    return ImageStorage()
