"""Photo file storage: local upload directory, or S3 when configured."""

import uuid
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import ClientError
from fastapi.concurrency import run_in_threadpool

from app.config import get_settings

# Accepted photo content types and the extension stored files get
PHOTO_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class StorageService:
    """
    Persists uploaded photo bytes and returns the URL they are served from.

    Files are written under settings.upload_dir and served at
    /uploads/{filename}. If AWS credentials and a bucket are configured,
    photos go to S3 under photos/{filename} instead.
    """

    def __init__(self):
        self._client = None

    @property
    def client(self):
        """Lazy-load S3 client."""
        if self._client is None:
            settings = get_settings()
            if settings.s3_enabled:
                self._client = boto3.client(
                    "s3",
                    aws_access_key_id=settings.aws_access_key_id,
                    aws_secret_access_key=settings.aws_secret_access_key,
                    region_name=settings.aws_region,
                )
        return self._client

    @property
    def bucket_name(self) -> Optional[str]:
        """Get bucket name from settings."""
        return get_settings().s3_bucket_name

    @property
    def is_enabled(self) -> bool:
        """Check if S3 storage is enabled."""
        return get_settings().s3_enabled

    @property
    def upload_dir(self) -> Path:
        return Path(get_settings().upload_dir)

    def generate_filename(self, content_type: str) -> str:
        """A collision-resistant name keeping the type's extension."""
        return f"{uuid.uuid4().hex}{PHOTO_EXTENSIONS.get(content_type, '')}"

    async def save_photo(self, data: bytes, filename: str, content_type: str) -> str:
        """
        Store photo bytes under `filename`.

        Returns:
            The URL the photo is served from
        """
        if self.is_enabled:
            s3_key = f"photos/{filename}"
            await run_in_threadpool(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=data,
                ContentType=content_type,
            )
            settings = get_settings()
            s3_url = f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{s3_key}"
            print(f"📤 Photo uploaded to S3: {s3_url}")
            return s3_url

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        await run_in_threadpool((self.upload_dir / filename).write_bytes, data)
        print(f"📷 Photo saved: {filename} ({len(data)} bytes)")
        return f"/uploads/{filename}"

    async def delete_photo(self, filename: str) -> bool:
        """
        Remove a stored photo.

        Returns:
            True if deleted, False otherwise
        """
        try:
            if self.is_enabled:
                await run_in_threadpool(
                    self.client.delete_object,
                    Bucket=self.bucket_name,
                    Key=f"photos/{filename}",
                )
            else:
                (self.upload_dir / filename).unlink(missing_ok=True)
            print(f"🗑️ Photo removed: {filename}")
            return True
        except (ClientError, OSError) as e:
            print(f"❌ Failed to remove photo {filename}: {e}")
            return False


# Singleton instance
storage_service = StorageService()
