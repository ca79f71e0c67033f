"""Initial database schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade database schema."""
    # Create travelers table
    op.create_table('travelers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=64), nullable=False),
        sa.Column('avatar', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('user_name = lower(user_name)', name='ck_traveler_user_name_lowercase'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_travelers_full_name'), 'travelers', ['full_name'], unique=False)
    op.create_index(op.f('ix_travelers_user_name'), 'travelers', ['user_name'], unique=True)

    # Create agencies table
    op.create_table('agencies',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('agency_name', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=64), nullable=False),
        sa.Column('avatar', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('user_name = lower(user_name)', name='ck_agency_user_name_lowercase'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_agencies_agency_name'), 'agencies', ['agency_name'], unique=False)
    op.create_index(op.f('ix_agencies_user_name'), 'agencies', ['user_name'], unique=True)

    # Create packages table
    op.create_table('packages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('agency_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('main_location', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('max_slots', sa.Integer(), nullable=False),
        sa.Column('available_slots', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('max_slots >= 1', name='ck_package_max_slots_positive'),
        sa.CheckConstraint('available_slots >= 0', name='ck_package_available_slots_non_negative'),
        sa.CheckConstraint('available_slots <= max_slots', name='ck_package_available_slots_lte_max'),
        sa.CheckConstraint('price >= 0', name='ck_package_price_non_negative'),
        sa.CheckConstraint('start_date < end_date', name='ck_package_dates_ordered'),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_packages_agency_id'), 'packages', ['agency_id'], unique=False)

    # Create bookings table
    op.create_table('bookings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('traveler_id', sa.Uuid(), nullable=False),
        sa.Column('package_id', sa.Uuid(), nullable=False),
        sa.Column('slots_booked', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('slots_booked > 0', name='ck_booking_slots_positive'),
        sa.CheckConstraint("status IN ('Pending', 'Confirmed', 'Cancelled')", name='ck_booking_status_valid'),
        sa.ForeignKeyConstraint(['package_id'], ['packages.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['traveler_id'], ['travelers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bookings_package_id'), 'bookings', ['package_id'], unique=False)
    op.create_index(op.f('ix_bookings_traveler_id'), 'bookings', ['traveler_id'], unique=False)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)

    # Create notifications table
    op.create_table('notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('recipient_type', sa.String(length=20), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('sender_type', sa.String(length=20), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('related_entity_id', sa.Uuid(), nullable=False),
        sa.Column('related_entity_type', sa.String(length=20), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('length(message) > 0', name='ck_notification_message_not_empty'),
        sa.CheckConstraint(
            'NOT (recipient_type = sender_type AND recipient_id = sender_id)',
            name='ck_notification_not_self_addressed'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_notifications_recipient_created',
        'notifications',
        ['recipient_type', 'recipient_id', 'created_at'],
        unique=False
    )

    # Create edges table
    op.create_table('edges',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('kind', sa.String(length=10), nullable=False),
        sa.Column('actor_type', sa.String(length=20), nullable=False),
        sa.Column('actor_id', sa.Uuid(), nullable=False),
        sa.Column('target_type', sa.String(length=20), nullable=False),
        sa.Column('target_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint("kind IN ('follow', 'like')", name='ck_edge_kind_valid'),
        sa.CheckConstraint(
            "NOT (kind = 'follow' AND actor_type = target_type AND actor_id = target_id)",
            name='ck_edge_no_self_follow'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('kind', 'actor_type', 'actor_id', 'target_type', 'target_id', name='uq_edge_actor_target')
    )
    op.create_index('ix_edges_target', 'edges', ['kind', 'target_type', 'target_id'], unique=False)

    # Create content tables
    op.create_table('posts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_type', sa.String(length=20), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_posts_owner_id'), 'posts', ['owner_id'], unique=False)

    op.create_table('tweets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_type', sa.String(length=20), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.String(length=280), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tweets_owner_id'), 'tweets', ['owner_id'], unique=False)

    op.create_table('comments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_type', sa.String(length=20), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('post_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.String(length=400), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_comments_owner_id'), 'comments', ['owner_id'], unique=False)
    op.create_index(op.f('ix_comments_post_id'), 'comments', ['post_id'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index(op.f('ix_comments_post_id'), table_name='comments')
    op.drop_index(op.f('ix_comments_owner_id'), table_name='comments')
    op.drop_table('comments')
    op.drop_index(op.f('ix_tweets_owner_id'), table_name='tweets')
    op.drop_table('tweets')
    op.drop_index(op.f('ix_posts_owner_id'), table_name='posts')
    op.drop_table('posts')
    op.drop_index('ix_edges_target', table_name='edges')
    op.drop_table('edges')
    op.drop_index('ix_notifications_recipient_created', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index(op.f('ix_bookings_status'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_traveler_id'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_package_id'), table_name='bookings')
    op.drop_table('bookings')
    op.drop_index(op.f('ix_packages_agency_id'), table_name='packages')
    op.drop_table('packages')
    op.drop_index(op.f('ix_agencies_user_name'), table_name='agencies')
    op.drop_index(op.f('ix_agencies_agency_name'), table_name='agencies')
    op.drop_table('agencies')
    op.drop_index(op.f('ix_travelers_user_name'), table_name='travelers')
    op.drop_index(op.f('ix_travelers_full_name'), table_name='travelers')
    op.drop_table('travelers')
