"""Create links table

Revision ID: 001_links
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_links'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the links table used by the relational link store.
    """
    bind = op.get_bind()
    inspector = inspect(bind)
    existing_tables = inspector.get_table_names()
    
    if 'links' not in existing_tables:
        op.create_table(
            'links',
            sa.Column('id', sa.String(length=32), nullable=False),
            sa.Column('created', sa.DateTime(timezone=True), nullable=False),
            sa.Column('expires', sa.DateTime(timezone=True), nullable=False),
            sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('unique_clicks', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('clickers', sa.JSON(), nullable=False),
            sa.Column('campaign', sa.String(length=255), nullable=False),
            sa.Column('last_accessed', sa.DateTime(timezone=True), nullable=True),
            sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
            sa.PrimaryKeyConstraint('id')
        )
        
        # The expiry reaper scans by expiry
        op.create_index(
            'ix_links_expires',
            'links',
            ['expires']
        )


def downgrade() -> None:
    """
    Drop the links table and its index.
    """
    op.drop_index('ix_links_expires', table_name='links')
    op.drop_table('links')
