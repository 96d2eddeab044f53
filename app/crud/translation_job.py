"""
CRUD operations for TranslationJob model.

Implements the Repository pattern: the API layer and the upload intake only
touch the translation_jobs table through these functions.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import JobStoreError, JobValidationError
from app.core.languages import is_supported
from app.models.translation_job import TranslationJob, TranslationStatus
from app.schemas.translation_job import TranslationJobCreate, TranslationJobUpdate

logger = logging.getLogger(__name__)

# id is an INTEGER column (int4 on Postgres); ids outside it never match a row
MIN_JOB_ID = -(2 ** 31)
MAX_JOB_ID = 2 ** 31 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def _db_errors(db: Session, action: str):
    """Roll back and re-raise database failures as JobStoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while trying to {action}: {e}")
        raise JobStoreError(f"Failed to {action}") from e


def _validate_create(job_data: TranslationJobCreate) -> None:
    if not job_data.original_filename or not job_data.original_filename.strip():
        raise JobValidationError("original_filename must not be empty")
    if not job_data.original_file_path or not job_data.original_file_path.strip():
        raise JobValidationError("original_file_path must not be empty")
    if not is_supported(job_data.target_language):
        raise JobValidationError(f"Unsupported target_language: {job_data.target_language}")


def create(db: Session, job_data: TranslationJobCreate) -> TranslationJob:
    """
    Create a new translation job in the database.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created TranslationJob with id, status=pending and no results attached

    Raises:
        JobValidationError: If filename/path is empty or the language is unknown
        JobStoreError: If the insert fails
    """
    try:
        _validate_create(job_data)
    except JobValidationError as e:
        logger.warning(f"Rejected translation job: {e.detail}")
        raise

    now = _utcnow()
    db_job = TranslationJob(
        original_filename=job_data.original_filename,
        original_file_path=job_data.original_file_path,
        target_language=job_data.target_language,
        status=TranslationStatus.PENDING,
        detected_language=None,
        translated_file_path=None,
        transcript=None,
        translated_transcript=None,
        error_message=None,
        created_at=now,
        updated_at=now
    )

    with _db_errors(db, "create translation job"):
        db.add(db_job)
        db.commit()
        db.refresh(db_job)

    logger.info(f"Created translation job {db_job.id} for {db_job.original_file_path}")
    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[TranslationJob]:
    """
    Retrieve a translation job by its ID.

    Returns:
        TranslationJob instance if found, None otherwise
    """
    if not MIN_JOB_ID <= job_id <= MAX_JOB_ID:
        return None
    with _db_errors(db, f"fetch translation job {job_id}"):
        return db.query(TranslationJob).filter(TranslationJob.id == job_id).first()


def get_multi(db: Session) -> List[TranslationJob]:
    """
    Retrieve all translation jobs, newest first.

    Jobs created at the same instant are returned in reverse insertion order.
    """
    with _db_errors(db, "list translation jobs"):
        return (
            db.query(TranslationJob)
            .order_by(TranslationJob.created_at.desc(), TranslationJob.id.desc())
            .all()
        )


def update(db: Session, job_id: int, job_update: TranslationJobUpdate) -> Optional[TranslationJob]:
    """
    Apply a partial update to a translation job.

    Only the fields the caller set are written; updated_at is always bumped,
    even when nothing else changes. The write is a single UPDATE keyed by id,
    so concurrent updates to the same job resolve as last writer wins.

    Args:
        db: Database session
        job_id: Job ID to update
        job_update: Fields to change (explicit nulls clear optional fields)

    Returns:
        Updated TranslationJob if found, None otherwise (nothing is written)
    """
    if not MIN_JOB_ID <= job_id <= MAX_JOB_ID:
        logger.info(f"Translation job id {job_id} is out of range, nothing updated")
        return None

    values = job_update.changes()
    values["updated_at"] = _utcnow()

    with _db_errors(db, f"update translation job {job_id}"):
        matched = (
            db.query(TranslationJob)
            .filter(TranslationJob.id == job_id)
            .update(values, synchronize_session=False)
        )
        if not matched:
            db.rollback()
            logger.info(f"Translation job {job_id} not found, nothing updated")
            return None
        db.commit()

    logger.info(f"Updated translation job {job_id}: {sorted(k for k in values if k != 'updated_at')}")
    return get_by_id(db, job_id)
