"""
Database models package.
"""

from app.models.translation_job import TranslationJob, TranslationStatus

__all__ = ["TranslationJob", "TranslationStatus"]
