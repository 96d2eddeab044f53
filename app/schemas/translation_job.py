from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.core.languages import SupportedLanguage
from app.models.translation_job import TranslationStatus


def _check_name(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in v):
        raise ValueError("must not contain control characters")
    return v


class TranslationJobCreate(BaseModel):
    """Schema for creating a job for a video that is already in storage"""
    original_filename: str = Field(..., min_length=1, description="Filename is required")
    original_file_path: str = Field(..., min_length=1, description="File path is required")
    target_language: SupportedLanguage

    @field_validator("original_filename", "original_file_path")
    @classmethod
    def check_names(cls, v: str) -> str:
        return _check_name(v)


class UploadVideoRequest(BaseModel):
    """
    Schema for uploading a video and creating its job in one call.

    The filename is checked here, before any bytes reach storage.
    """
    filename: str = Field(..., min_length=1, description="Filename is required")
    file_data: str = Field(..., description="Base64 encoded file contents")
    target_language: SupportedLanguage

    @field_validator("filename")
    @classmethod
    def check_filename(cls, v: str) -> str:
        return _check_name(v)


class TranslationJobUpdate(BaseModel):
    """
    Partial update sent by the processing pipeline.

    Only fields present in the request body are applied. Sending null for
    translated_file_path, transcript, translated_transcript or error_message
    clears the stored value; detected_language and status can be omitted but
    never cleared.
    """
    detected_language: Optional[SupportedLanguage] = None
    status: Optional[TranslationStatus] = None
    translated_file_path: Optional[str] = None
    transcript: Optional[str] = None
    translated_transcript: Optional[str] = None
    error_message: Optional[str] = None

    @field_validator("detected_language", "status", mode="before")
    @classmethod
    def reject_explicit_null(cls, v):
        # Defaults are not validated, so this only fires when null was sent
        if v is None:
            raise ValueError("may be omitted but not set to null")
        return v

    def changes(self) -> dict:
        """Return only the fields the caller explicitly set."""
        return self.model_dump(exclude_unset=True, exclude={"id"})

    class Config:
        extra = "forbid"  # original_* and target_language are immutable


class TranslationJobUpdateRequest(TranslationJobUpdate):
    """Schema for the updateTranslationJob procedure"""
    id: int


class TranslationJobResponse(BaseModel):
    """Schema for translation job response"""
    id: int
    original_filename: str
    original_file_path: str
    detected_language: Optional[SupportedLanguage] = None
    target_language: SupportedLanguage
    status: TranslationStatus
    translated_file_path: Optional[str] = None
    transcript: Optional[str] = None
    translated_transcript: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models


class HealthResponse(BaseModel):
    """Schema for the healthcheck procedure"""
    status: str
    timestamp: str
