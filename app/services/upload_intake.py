"""
Upload intake: store an uploaded video and open a translation job for it.

Flow:
1. Decode the base64 payload
2. Write the bytes to a fresh, unique storage path
3. Create the job record (status=pending) pointing at that path

If step 3 fails the file stays in storage. The orphaned path is logged so it
can be cleaned up; it is never reported as a successful upload.
"""

import base64
import binascii
import logging
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.exceptions import JobValidationError, PayloadDecodeError, TranslationServiceError
from app.core.storage import StorageBackend
from app.crud import translation_job as job_crud
from app.models.translation_job import TranslationJob
from app.schemas.translation_job import TranslationJobCreate, UploadVideoRequest

logger = logging.getLogger(__name__)


def decode_payload(file_data: str) -> bytes:
    """
    Decode base64 file data, rejecting anything that isn't strict base64.

    Raises:
        PayloadDecodeError: If the payload is malformed
    """
    try:
        return base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Rejected upload with malformed base64 payload: {e}")
        raise PayloadDecodeError(f"file_data is not valid base64: {e}") from e


def upload_video(db: Session, storage: StorageBackend, request: UploadVideoRequest) -> TranslationJob:
    """
    Save an uploaded video and create its translation job.

    Args:
        db: Database session
        storage: Backend the video bytes are written to
        request: Validated upload request

    Returns:
        The newly created TranslationJob (status=pending)

    Raises:
        PayloadDecodeError: If file_data is not valid base64
        FileStorageError: If the bytes could not be written
        JobValidationError / JobStoreError: If the job record could not be created
    """
    data = decode_payload(request.file_data)
    file_path = storage.write_unique(request.filename, data)

    try:
        job_data = TranslationJobCreate(
            original_filename=request.filename,
            original_file_path=file_path,
            target_language=request.target_language
        )
    except ValidationError as e:
        logger.warning(f"Stored {file_path} but job data is invalid, file left orphaned: {e}")
        raise JobValidationError(f"Invalid translation job: {e}") from e

    try:
        job = job_crud.create(db, job_data)
    except TranslationServiceError:
        logger.warning(f"Stored {file_path} but job creation failed, file left orphaned")
        raise

    logger.info(f"Uploaded {request.filename} ({len(data)} bytes) as job {job.id}")
    return job
