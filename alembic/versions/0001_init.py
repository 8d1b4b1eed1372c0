"""initial closet insights schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('wardrobe_items',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('subcategory', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('brand', sa.String(length=200), nullable=True),
        sa.Column('colors', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('purchase_price', sa.Float(), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('last_worn', sa.Date(), nullable=True),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_wardrobe_items_user_id', 'wardrobe_items', ['user_id'])
    op.create_index('ix_wardrobe_items_purchase_date', 'wardrobe_items', ['purchase_date'])
    op.create_index('ix_wardrobe_items_last_worn', 'wardrobe_items', ['last_worn'])

    op.create_table('outfit_feedback',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('outfit_recommendation_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('confidence_rating', sa.Integer(), nullable=False),
        sa.Column('emotional_response', sa.JSON(), nullable=True),
        sa.Column('occasion', sa.Text(), nullable=True),
        sa.Column('comfort_rating', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('confidence_rating BETWEEN 1 AND 5', name='ck_outfit_feedback_rating'),
    )
    op.create_index('ix_outfit_feedback_user_id', 'outfit_feedback', ['user_id'])
    op.create_index('ix_outfit_feedback_created_at', 'outfit_feedback', ['created_at'])

    op.create_table('outfit_feedback_item',
        sa.Column('feedback_id', sa.Uuid(as_uuid=True), sa.ForeignKey('outfit_feedback.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('item_id', sa.Uuid(as_uuid=True), sa.ForeignKey('wardrobe_items.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('ix_outfit_feedback_item_item_id', 'outfit_feedback_item', ['item_id'])

    op.create_table('shop_your_closet_recommendations',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('target_item', sa.JSON(), nullable=False),
        sa.Column('similar_item_ids', sa.JSON(), nullable=False),
        sa.Column('confidence_score', sa.Float(), nullable=False),
        sa.Column('reasoning', sa.JSON(), nullable=False),
        sa.Column('viewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('acted_upon', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_shop_your_closet_recommendations_user_id', 'shop_your_closet_recommendations', ['user_id'])

    op.create_table('rediscovery_challenges',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('challenge_type', sa.String(length=32), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('reward', sa.Text(), nullable=False),
        sa.Column('target_item_ids', sa.JSON(), nullable=False),
        sa.Column('confirmed_item_ids', sa.JSON(), nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_items', sa.Integer(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )
    op.create_index('ix_rediscovery_challenges_user_id', 'rediscovery_challenges', ['user_id'])
    op.create_index('ix_rediscovery_challenges_expires_at', 'rediscovery_challenges', ['expires_at'])

    op.create_table('monthly_confidence_metrics',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('month', sa.String(length=7), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('average_confidence_rating', sa.Float(), nullable=False),
        sa.Column('total_outfits_rated', sa.Integer(), nullable=False),
        sa.Column('confidence_improvement', sa.Float(), nullable=False, server_default='0'),
        sa.Column('most_confident_item_ids', sa.JSON(), nullable=False),
        sa.Column('least_confident_item_ids', sa.JSON(), nullable=False),
        sa.Column('wardrobe_utilization', sa.Float(), nullable=False, server_default='0'),
        sa.Column('cost_per_wear_improvement', sa.Float(), nullable=False, server_default='0'),
        sa.Column('shopping_reduction_percentage', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.UniqueConstraint('user_id', 'month', 'year', name='uq_monthly_confidence_user_month'),
    )
    op.create_index('ix_monthly_confidence_metrics_user_id', 'monthly_confidence_metrics', ['user_id'])


def downgrade() -> None:
    op.drop_table('monthly_confidence_metrics')
    op.drop_table('rediscovery_challenges')
    op.drop_table('shop_your_closet_recommendations')
    op.drop_table('outfit_feedback_item')
    op.drop_table('outfit_feedback')
    op.drop_table('wardrobe_items')
