"""
File storage abstraction layer supporting both local filesystem and AWS S3.

Uploaded videos are addressed by a storage-relative path of the form
``<prefix>/<epoch-millis>_<token>_<filename>``. The same path is valid for
both backends, so switching USE_S3 doesn't invalidate stored job records.
"""

import logging
import os
import secrets
import string
import tempfile
import time
from functools import lru_cache
from pathlib import Path, PurePosixPath
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from app.core.config import settings
from app.core.exceptions import FileStorageError

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 6
MAX_WRITE_ATTEMPTS = 5


def safe_filename(name_hint: str) -> str:
    """Strip directory components so a filename can't escape the prefix."""
    name = PurePosixPath(name_hint.replace("\\", "/")).name
    if name in ("", ".", ".."):
        return "upload"
    return name


def build_storage_path(name_hint: str, prefix: str) -> str:
    """
    Build a fresh storage path for an upload.

    The random token keeps two uploads of the same filename within the same
    millisecond apart.
    """
    timestamp = int(time.time() * 1000)
    token = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return f"{prefix.rstrip('/')}/{timestamp}_{token}_{safe_filename(name_hint)}"


class StorageBackend:
    """Abstract base class for storage backends"""

    def __init__(self, prefix: str):
        self.prefix = prefix

    def write_unique(self, name_hint: str, data: bytes) -> str:
        """Store bytes under a new unique path and return that path"""
        raise NotImplementedError

    def read(self, path: str) -> bytes:
        """Return the bytes stored at path"""
        raise NotImplementedError

    def exists(self, path: str) -> bool:
        """Check if something is stored at path"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "storage", prefix: str = "/uploads/videos"):
        super().__init__(prefix)
        self.base_dir = Path(base_dir).resolve()

    def _full_path(self, path: str) -> Path:
        if "\x00" in path:
            logger.error(f"Invalid storage path {path!r}: embedded null byte")
            raise FileStorageError("Invalid storage path: embedded null byte")
        full_path = (self.base_dir / path.lstrip("/")).resolve()
        if full_path != self.base_dir and self.base_dir not in full_path.parents:
            raise FileStorageError(f"Path escapes storage root: {path}")
        return full_path

    def write_unique(self, name_hint: str, data: bytes) -> str:
        """
        Write bytes atomically under a new path.

        The data goes to a temp file first and is hard-linked into place;
        os.link refuses to overwrite, so a colliding path is retried with a
        new token instead of clobbering another upload.
        """
        directory = self._full_path(self.prefix)
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".upload-", suffix=".part")
            with os.fdopen(fd, "wb") as buffer:
                buffer.write(data)
                buffer.flush()
                os.fsync(buffer.fileno())
        except OSError as e:
            logger.error(f"Failed to write upload {name_hint!r} to {directory}: {e}")
            if tmp_name:
                self._discard(tmp_name)
            raise FileStorageError(f"Failed to save file: {e.strerror or e}") from e

        try:
            for _ in range(MAX_WRITE_ATTEMPTS):
                path = build_storage_path(name_hint, self.prefix)
                try:
                    os.link(tmp_name, self._full_path(path))
                except FileExistsError:
                    logger.warning(f"Storage path collision on {path}, retrying")
                    continue
                except OSError as e:
                    logger.error(f"Failed to store upload at {path}: {e}")
                    raise FileStorageError(f"Failed to save file: {e.strerror or e}") from e
                logger.info(f"Saved {len(data)} bytes to {path}")
                return path
        finally:
            self._discard(tmp_name)

        raise FileStorageError(f"Could not find a free storage path for {name_hint!r}")

    @staticmethod
    def _discard(tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except OSError as e:
            logger.warning(f"Could not remove temp file {tmp_name}: {e}")

    def read(self, path: str) -> bytes:
        """Read file from local filesystem"""
        try:
            with open(self._full_path(path), "rb") as f:
                return f.read()
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            raise FileStorageError(f"Failed to read file {path}") from e

    def exists(self, path: str) -> bool:
        """Check if file exists on local filesystem"""
        return self._full_path(path).is_file()


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self, bucket_name: str, prefix: str = "/uploads/videos", s3_client=None):
        super().__init__(prefix)
        self.bucket_name = bucket_name

        if s3_client is not None:
            self.s3_client = s3_client
        # If AWS_ACCESS_KEY_ID is not set, boto3 will use IAM roles (for EC2/ECS)
        elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    @staticmethod
    def _key(path: str) -> str:
        return path.lstrip("/")

    def write_unique(self, name_hint: str, data: bytes) -> str:
        """
        Upload bytes to S3 under a new key.

        PutObject is atomic; IfNoneMatch makes S3 reject an existing key so
        a collision is retried rather than overwritten.
        """
        for _ in range(MAX_WRITE_ATTEMPTS):
            path = build_storage_path(name_hint, self.prefix)
            try:
                self.s3_client.put_object(
                    Bucket=self.bucket_name,
                    Key=self._key(path),
                    Body=data,
                    ContentType=self._get_content_type(name_hint),
                    ServerSideEncryption='AES256',
                    IfNoneMatch='*'
                )
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") == "PreconditionFailed":
                    logger.warning(f"S3 key collision on {path}, retrying")
                    continue
                logger.error(f"Error uploading to S3: {e}")
                raise FileStorageError(f"Failed to upload file to S3: {e}") from e
            except BotoCoreError as e:
                logger.error(f"Error uploading to S3: {e}")
                raise FileStorageError(f"Failed to upload file to S3: {e}") from e
            logger.info(f"Uploaded {len(data)} bytes to s3://{self.bucket_name}/{self._key(path)}")
            return path

        raise FileStorageError(f"Could not find a free S3 key for {name_hint!r}")

    def read(self, path: str) -> bytes:
        """Download object from S3"""
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=self._key(path))
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error downloading from S3: {e}")
            raise FileStorageError(f"Failed to download file from S3: {e}") from e

    def exists(self, path: str) -> bool:
        """Check if object exists in S3"""
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=self._key(path))
            return True
        except ClientError:
            return False

    def _get_content_type(self, filename: str) -> str:
        """Determine content type based on file extension"""
        extension = filename.lower().rsplit('.', 1)[-1]
        content_types = {
            'mp4': 'video/mp4',
            'm4v': 'video/x-m4v',
            'mov': 'video/quicktime',
            'avi': 'video/x-msvideo',
            'mkv': 'video/x-matroska',
            'webm': 'video/webm'
        }
        return content_types.get(extension, 'application/octet-stream')


def get_storage() -> StorageBackend:
    """Get storage backend based on USE_S3 setting"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage(settings.S3_BUCKET_NAME, prefix=settings.UPLOAD_PREFIX)
    return LocalStorage(settings.LOCAL_STORAGE_ROOT, prefix=settings.UPLOAD_PREFIX)


@lru_cache
def get_storage_backend() -> StorageBackend:
    """
    Dependency returning the process-wide storage backend.
    Used in FastAPI endpoints with Depends(get_storage_backend)
    """
    return get_storage()
