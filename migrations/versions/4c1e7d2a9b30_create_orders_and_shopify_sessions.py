"""Create orders and shopify_sessions tables

Revision ID: 4c1e7d2a9b30
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c1e7d2a9b30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('orders',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('video_url', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('shopify_sessions',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('shop', sa.String(length=255), nullable=False),
        sa.Column('access_token', sa.String(length=255), nullable=False),
        sa.Column('scope', sa.String(length=1024), nullable=True),
        sa.Column('is_online', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('shopify_sessions', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_shopify_sessions_shop'), ['shop'], unique=False)


def downgrade():
    with op.batch_alter_table('shopify_sessions', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_shopify_sessions_shop'))

    op.drop_table('shopify_sessions')
    op.drop_table('orders')
