"""Initial schema: users, categories, resources

Learn: The search index is an expression index. ResourceService.search()
builds its tsvector from the exact same SQL (SEARCH_VECTOR_SQL) so the
planner can use it.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEARCH_VECTOR_SQL = "to_tsvector('english', title || ' ' || description)"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # ─── Users ───────────────────────────────────────────
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(16), nullable=False, server_default='user'),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        *_timestamps(),
    )

    # ─── Categories ──────────────────────────────────────
    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('slug', sa.String(100), nullable=False, unique=True),
        sa.Column('color', sa.String(32), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )

    # ─── Resources ───────────────────────────────────────
    op.create_table(
        'resources',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(2048), nullable=False),
        sa.Column('external_link', sa.String(2048), nullable=False),
        sa.Column('category', sa.String(16), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column(
            'author_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_resources_category_created', 'resources', ['category', 'created_at'])
    op.create_index('ix_resources_featured_created', 'resources', ['featured', 'created_at'])
    op.create_index(
        'ix_resources_search',
        'resources',
        [sa.text(SEARCH_VECTOR_SQL)],
        postgresql_using='gin',
    )


def downgrade() -> None:
    op.drop_index('ix_resources_search', table_name='resources')
    op.drop_index('ix_resources_featured_created', table_name='resources')
    op.drop_index('ix_resources_category_created', table_name='resources')
    op.drop_table('resources')
    op.drop_table('categories')
    op.drop_table('users')
