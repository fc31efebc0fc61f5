"""create gallery tables

Revision ID: 3b9d2f61a7c4
Revises:
Create Date: 2026-10-18 10:02:11.408213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b9d2f61a7c4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_digest', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'gallery_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'COMMITTED', name='galleryitemstatus'),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_gallery_items_status', 'gallery_items', ['status'])
    op.create_index('ix_gallery_items_created_at', 'gallery_items', ['created_at'])

    op.create_table(
        'gallery_photos',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'item_id',
            sa.Integer(),
            sa.ForeignKey('gallery_items.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('file_path', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_gallery_photos_item_id', 'gallery_photos', ['item_id'])

    op.create_table(
        'covers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('file_path', sa.String(), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_covers_created_at', 'covers', ['created_at'])

    op.create_table(
        'portfolios',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('file_path', sa.String(), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_portfolios_created_at', 'portfolios', ['created_at'])


def downgrade() -> None:
    # 역순 삭제
    op.drop_index('ix_portfolios_created_at')
    op.drop_table('portfolios')
    op.drop_index('ix_covers_created_at')
    op.drop_table('covers')
    op.drop_index('ix_gallery_photos_item_id')
    op.drop_table('gallery_photos')
    op.drop_index('ix_gallery_items_created_at')
    op.drop_index('ix_gallery_items_status')
    op.drop_table('gallery_items')
    op.drop_index('ix_users_email')
    op.drop_table('users')
