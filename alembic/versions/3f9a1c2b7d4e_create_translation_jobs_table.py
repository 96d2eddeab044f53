"""create_translation_jobs_table

Revision ID: 3f9a1c2b7d4e
Revises:
Create Date: 2026-10-16 23:20:11.402317

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d4e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


LANGUAGES = ('en', 'es', 'fr', 'de', 'it', 'pt', 'ru', 'ja', 'ko', 'zh', 'ar', 'hi')
STATUSES = ('pending', 'processing', 'completed', 'failed')


def upgrade() -> None:
    """Upgrade schema."""
    supported_languages = sa.Enum(*LANGUAGES, name='supported_languages')
    translation_status = sa.Enum(*STATUSES, name='translation_status')

    op.create_table(
        'translation_jobs',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('original_filename', sa.Text(), nullable=False),
        sa.Column('original_file_path', sa.Text(), nullable=False),
        sa.Column('detected_language', supported_languages, nullable=True),
        sa.Column('target_language', supported_languages, nullable=False),
        sa.Column('status', translation_status, nullable=False, server_default='pending'),
        sa.Column('translated_file_path', sa.Text(), nullable=True),
        sa.Column('transcript', sa.Text(), nullable=True),
        sa.Column('translated_transcript', sa.Text(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_translation_jobs_id', 'translation_jobs', ['id'])
    op.create_index('ix_translation_jobs_status', 'translation_jobs', ['status'])
    op.create_index('ix_translation_jobs_created_at', 'translation_jobs', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_translation_jobs_created_at', table_name='translation_jobs')
    op.drop_index('ix_translation_jobs_status', table_name='translation_jobs')
    op.drop_index('ix_translation_jobs_id', table_name='translation_jobs')
    op.drop_table('translation_jobs')
    sa.Enum(name='translation_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='supported_languages').drop(op.get_bind(), checkfirst=True)
