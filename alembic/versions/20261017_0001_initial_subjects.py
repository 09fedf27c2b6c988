"""subjects, subject_data and shared_courses tables

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261017_0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'subjects',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('slug', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column(
            'created_at', sa.DateTime(),
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.Column(
            'updated_at', sa.DateTime(),
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.UniqueConstraint('user_id', 'slug', name='uq_subjects_user_slug'),
    )
    op.create_index('ix_subjects_user_id', 'subjects', ['user_id'])

    op.create_table(
        'subject_data',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('slug', sa.String(length=64), nullable=False),
        sa.Column('json_data', sa.JSON(), nullable=False),
        sa.Column('shared_by', sa.String(length=64), nullable=True),
        sa.Column(
            'created_at', sa.DateTime(),
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.Column(
            'updated_at', sa.DateTime(),
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
        sa.UniqueConstraint(
            'user_id', 'slug', name='uq_subject_data_user_slug'
        ),
    )
    op.create_index('ix_subject_data_user_id', 'subject_data', ['user_id'])

    op.create_table(
        'shared_courses',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('share_id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('course_slug', sa.String(length=64), nullable=False),
        sa.Column('course_name', sa.String(length=200), nullable=False),
        sa.Column('json_data', sa.JSON(), nullable=False),
        sa.Column(
            'created_at', sa.DateTime(),
            server_default=sa.text('CURRENT_TIMESTAMP')
        ),
    )
    op.create_index(
        'ix_shared_courses_share_id', 'shared_courses', ['share_id'],
        unique=True
    )
    op.create_index(
        'ix_shared_courses_user_id', 'shared_courses', ['user_id']
    )


def downgrade() -> None:
    op.drop_index('ix_shared_courses_user_id', table_name='shared_courses')
    op.drop_index('ix_shared_courses_share_id', table_name='shared_courses')
    op.drop_table('shared_courses')
    op.drop_index('ix_subject_data_user_id', table_name='subject_data')
    op.drop_table('subject_data')
    op.drop_index('ix_subjects_user_id', table_name='subjects')
    op.drop_table('subjects')
