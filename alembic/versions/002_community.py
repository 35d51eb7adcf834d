"""Events, community stories and favorites

Revision ID: 002
Revises: 001
Create Date: 2024-02-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        'restaurants',
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.add_column('users', sa.Column('region', sa.String(20)))

    # Create events table
    op.create_table(
        'events',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id')),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), unique=True, nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('short_description', sa.String(300)),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('tags', postgresql.JSON()),
        sa.Column('organizer_name', sa.String(100), nullable=False),
        sa.Column('organizer_type', sa.String(20), nullable=False, server_default='individual'),
        sa.Column('region', sa.String(20), nullable=False),
        sa.Column('city', sa.String(100)),
        sa.Column('venue', sa.String(200)),
        sa.Column('is_online', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('capacity', sa.Integer()),
        sa.Column('pricing_type', sa.String(20), nullable=False, server_default='free'),
        sa.Column('price', sa.Float()),
        sa.Column('currency', sa.String(3), nullable=False, server_default='EUR'),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint('end_date > start_date', name='ck_event_dates'),
    )

    # Create stories table
    op.create_table(
        'stories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('author_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id')),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(120), unique=True, nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('excerpt', sa.String(210), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('region', sa.String(20), nullable=False, server_default='general'),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('published_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create user_favorites table
    op.create_table(
        'user_favorites',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), primary_key=True),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_events_region_start', 'events', ['region', 'start_date'])
    op.create_index('ix_stories_region', 'stories', ['region'])


def downgrade() -> None:
    op.drop_index('ix_stories_region', 'stories')
    op.drop_index('ix_events_region_start', 'events')
    op.drop_table('user_favorites')
    op.drop_table('stories')
    op.drop_table('events')
    op.drop_column('users', 'region')
    op.drop_column('restaurants', 'is_featured')
