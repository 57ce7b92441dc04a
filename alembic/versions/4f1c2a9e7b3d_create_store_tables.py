"""create business_profiles, products and store_reviews

Revision ID: 4f1c2a9e7b3d
Revises:
Create Date: 2026-10-17 10:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9e7b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'business_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.String(length=128), nullable=False, comment='User ID of the profile owner (one profile per owner)'),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('hours', sa.String(length=255), nullable=False),
        sa.Column('contact', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('social_links', sa.JSON(), nullable=True, comment="Ordered list of social links: [{'platform': 'facebook', 'url': '...'}]"),
        sa.Column('profile_type', sa.String(length=50), nullable=True),
        sa.Column('primary_type', sa.String(length=50), nullable=True, comment='Legacy profile type field, read when profile_type is empty'),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('cover_image_url', sa.String(length=1000), nullable=True),
        sa.Column('profile_image_url', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_business_profiles_owner_id'), 'business_profiles', ['owner_id'], unique=True)
    op.create_index(op.f('ix_business_profiles_name'), 'business_profiles', ['name'], unique=False)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('store_id', sa.Integer(), nullable=False, comment='Business profile that lists this product'),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('in_stock', sa.Boolean(), nullable=False),
        sa.Column('image_url', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['store_id'], ['business_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_products_store_id'), 'products', ['store_id'], unique=False)

    op.create_table(
        'store_reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('store_id', sa.Integer(), nullable=False, comment='Reviewed business profile'),
        sa.Column('user_id', sa.String(length=128), nullable=False, comment='User who wrote the review'),
        sa.Column('user_name', sa.String(length=255), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False, comment='Rating value (1-5 stars)'),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Timestamp when review was created'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Timestamp when review was last updated'),
        sa.ForeignKeyConstraint(['store_id'], ['business_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('store_id', 'user_id', name='uq_store_reviews_store_user'),
    )
    op.create_index(op.f('ix_store_reviews_user_id'), 'store_reviews', ['user_id'], unique=False)
    op.create_index('ix_store_reviews_store_created', 'store_reviews', ['store_id', 'created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_store_reviews_store_created', table_name='store_reviews')
    op.drop_index(op.f('ix_store_reviews_user_id'), table_name='store_reviews')
    op.drop_table('store_reviews')
    op.drop_index(op.f('ix_products_store_id'), table_name='products')
    op.drop_table('products')
    op.drop_index(op.f('ix_business_profiles_name'), table_name='business_profiles')
    op.drop_index(op.f('ix_business_profiles_owner_id'), table_name='business_profiles')
    op.drop_table('business_profiles')
