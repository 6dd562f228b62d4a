"""progress tracking, keep graded answers when a question is deleted

Revision ID: 7a3c9e21d4b8
Revises: 0f1e2d3c4b5a
Create Date: 2026-10-17 14:30:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '7a3c9e21d4b8'
down_revision: Union[str, None] = '0f1e2d3c4b5a'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


progress_status = sa.Enum('incomplete', 'complete', name='progress_status')

# Postgres' default name for the unnamed FK created by the initial revision
ANSWER_QUESTION_FK = 'quiz_attempt_answers_quiz_question_id_fkey'


def upgrade() -> None:
    op.create_table(
        'progress',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('course_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('topic_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('topics.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content_item_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('content_items.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('status', progress_status, nullable=False, server_default='incomplete'),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'content_item_id', name='uq_progress_user_content_item'),
    )

    # Answers outlive their question so completed attempts keep their score
    op.drop_constraint(ANSWER_QUESTION_FK, 'quiz_attempt_answers', type_='foreignkey')
    op.alter_column('quiz_attempt_answers', 'quiz_question_id', nullable=True)
    op.create_foreign_key(
        ANSWER_QUESTION_FK,
        'quiz_attempt_answers',
        'quiz_questions',
        ['quiz_question_id'],
        ['id'],
        ondelete='SET NULL',
    )


def downgrade() -> None:
    op.drop_constraint(ANSWER_QUESTION_FK, 'quiz_attempt_answers', type_='foreignkey')
    op.execute('DELETE FROM quiz_attempt_answers WHERE quiz_question_id IS NULL')
    op.alter_column('quiz_attempt_answers', 'quiz_question_id', nullable=False)
    op.create_foreign_key(
        ANSWER_QUESTION_FK,
        'quiz_attempt_answers',
        'quiz_questions',
        ['quiz_question_id'],
        ['id'],
        ondelete='CASCADE',
    )

    op.drop_table('progress')
    progress_status.drop(op.get_bind(), checkfirst=True)
