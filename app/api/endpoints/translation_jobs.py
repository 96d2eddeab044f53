"""
Translation job procedures.

uploadVideo and createTranslationJob open jobs, the processing pipeline
reports progress through updateTranslationJob, and the display client polls
getTranslationJob / getTranslationJobs.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.storage import StorageBackend, get_storage_backend
from app.crud import translation_job as job_crud
from app.schemas.translation_job import (
    TranslationJobCreate,
    TranslationJobResponse,
    TranslationJobUpdateRequest,
    UploadVideoRequest,
)
from app.services import upload_intake

router = APIRouter(tags=["Translation Jobs"])
logger = logging.getLogger(__name__)


@router.post("/uploadVideo", response_model=TranslationJobResponse)
def upload_video(
    request: UploadVideoRequest,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage_backend)
):
    """
    Upload a base64 encoded video and create its translation job.

    The video is saved under a unique path and the job starts as pending.
    """
    return upload_intake.upload_video(db, storage, request)


@router.post("/createTranslationJob", response_model=TranslationJobResponse)
def create_translation_job(
    request: TranslationJobCreate,
    db: Session = Depends(get_db)
):
    """Create a translation job for a video that is already in storage."""
    return job_crud.create(db, request)


@router.get("/getTranslationJob", response_model=Optional[TranslationJobResponse])
def get_translation_job(
    job_id: int = Query(..., alias="id"),
    db: Session = Depends(get_db)
):
    """
    Retrieve a translation job by ID.

    Returns null when no job has that ID.
    """
    job = job_crud.get_by_id(db, job_id)
    if job is None:
        logger.info(f"Translation job {job_id} not found")
    return job


@router.get("/getTranslationJobs", response_model=List[TranslationJobResponse])
def get_translation_jobs(db: Session = Depends(get_db)):
    """List all translation jobs, newest first."""
    return job_crud.get_multi(db)


@router.post("/updateTranslationJob", response_model=Optional[TranslationJobResponse])
def update_translation_job(
    request: TranslationJobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Apply a partial update from the processing pipeline.

    Fields left out of the body keep their value; explicit nulls clear them.
    Status transitions are not checked. Returns null when no job has that ID.
    """
    return job_crud.update(db, request.id, request)
