"""initial lms schema

Revision ID: 0f1e2d3c4b5a
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '0f1e2d3c4b5a'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


course_level = sa.Enum('Beginner', 'Intermediate', 'Advanced', name='course_level')
content_type = sa.Enum('text', 'video', 'pdf', 'quiz', name='content_type')
question_type = sa.Enum('multiple_choice', 'true_false', 'short_answer', 'essay', name='question_type')
role_request_status = sa.Enum('pending', 'approved', 'rejected', name='role_request_status')


def _uuid_pk():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()'))


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # ---------- identity ----------
    op.create_table(
        'users',
        _uuid_pk(),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'user_roles',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('role', sa.String(50), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'role', name='uq_user_roles_user_role'),
    )

    # ---------- catalog ----------
    op.create_table(
        'courses',
        _uuid_pk(),
        sa.Column('title', sa.String(150), nullable=False, index=True),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('content_path', sa.String(255), nullable=False),
        sa.Column('instructor', sa.String(50), nullable=False, server_default='', index=True),
        sa.Column('duration_hours', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('level', course_level, nullable=False, server_default='Beginner'),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(200), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
    )

    op.create_table(
        'topics',
        _uuid_pk(),
        sa.Column('course_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(150), nullable=False),
        sa.Column('description', sa.String(500), nullable=False, server_default=''),
        sa.Column('order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
    )

    op.create_table(
        'content_items',
        _uuid_pk(),
        sa.Column('topic_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('topics.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(150), nullable=False),
        sa.Column('description', sa.String(500), nullable=False, server_default=''),
        sa.Column('order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('content_type', content_type, nullable=False, server_default='text'),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('video_url', sa.String(500), nullable=True),
        sa.Column('pdf_file_path', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
    )

    # ---------- enrollment & ratings ----------
    op.create_table(
        'enrollments',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('course_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('enrolled_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'course_id', name='uq_enrollments_user_course'),
    )

    op.create_table(
        'course_ratings',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('course_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('feedback', sa.String(1000), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'course_id', name='uq_course_ratings_user_course'),
    )

    # ---------- quizzes ----------
    op.create_table(
        'quizzes',
        _uuid_pk(),
        sa.Column('content_item_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('content_items.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.String(1000), nullable=False, server_default=''),
        sa.Column('time_limit_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('passing_score', sa.Integer(), nullable=False, server_default='70'),
        sa.Column('max_attempts', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
    )

    op.create_table(
        'quiz_questions',
        _uuid_pk(),
        sa.Column('quiz_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('question_text', sa.String(500), nullable=False),
        sa.Column('question_type', question_type, nullable=False, server_default='multiple_choice'),
        sa.Column('order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('points', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'quiz_question_options',
        _uuid_pk(),
        sa.Column('quiz_question_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('quiz_questions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('option_text', sa.String(500), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'quiz_attempts',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('quiz_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('quizzes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('started_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attempt_number', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.text('false'), index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'quiz_attempt_answers',
        _uuid_pk(),
        sa.Column('quiz_attempt_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('quiz_attempts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('quiz_question_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('quiz_questions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('answer_text', sa.Text(), nullable=True),
        sa.Column('selected_option_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('quiz_question_options.id', ondelete='SET NULL'), nullable=True),
        sa.Column('boolean_answer', sa.Boolean(), nullable=True),
        sa.Column('points_earned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_correct', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # ---------- role requests ----------
    op.create_table(
        'role_requests',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('requested_role', sa.String(50), nullable=False, server_default='Instructor'),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('requested_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
        sa.Column('status', role_request_status, nullable=False, server_default='pending', index=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processed_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('role_requests')
    op.drop_table('quiz_attempt_answers')
    op.drop_table('quiz_attempts')
    op.drop_table('quiz_question_options')
    op.drop_table('quiz_questions')
    op.drop_table('quizzes')
    op.drop_table('course_ratings')
    op.drop_table('enrollments')
    op.drop_table('content_items')
    op.drop_table('topics')
    op.drop_table('courses')
    op.drop_table('user_roles')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (role_request_status, question_type, content_type, course_level):
        enum_type.drop(bind, checkfirst=True)
