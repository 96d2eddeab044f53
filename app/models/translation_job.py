import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum
from app.core.database import Base
from app.core.languages import SupportedLanguage


class TranslationStatus(str, enum.Enum):
    """
    Translation job status enum.

    - PENDING: Video stored, pipeline has not picked the job up yet
    - PROCESSING: Pipeline is transcribing/translating
    - COMPLETED: Translated video and transcripts are attached
    - FAILED: Pipeline gave up, see error_message

    Any status may follow any other; the pipeline is trusted to set them.
    """
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def _enum_values(enum_cls):
    # Persist the lowercase wire values rather than member names
    return [member.value for member in enum_cls]


language_enum = Enum(SupportedLanguage, name="supported_languages", values_callable=_enum_values)
status_enum = Enum(TranslationStatus, name="translation_status", values_callable=_enum_values)


class TranslationJob(Base):
    """
    Tracks one uploaded video through the translation pipeline.
    """
    __tablename__ = "translation_jobs"

    id = Column(Integer, primary_key=True, index=True)
    original_filename = Column(Text, nullable=False)
    original_file_path = Column(Text, nullable=False)

    # Filled in by the pipeline
    detected_language = Column(language_enum, nullable=True)
    target_language = Column(language_enum, nullable=False)

    status = Column(status_enum, default=TranslationStatus.PENDING, nullable=False, index=True)
    translated_file_path = Column(Text, nullable=True)
    transcript = Column(Text, nullable=True)
    translated_transcript = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)

    # Set explicitly by the CRUD layer so created_at == updated_at on insert
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<TranslationJob(id={self.id}, filename='{self.original_filename}', status={self.status.value})>"
