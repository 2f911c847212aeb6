"""Code analyses table

Revision ID: 001_code_analyses
Revises:
Create Date: 2024-06-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_code_analyses'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.create_table(
        'code_analyses',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('repo_url', sa.Text(), nullable=False),
        sa.Column('repo_owner', sa.String(length=255), nullable=False),
        sa.Column('repo_name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='running'),
        sa.Column('findings', postgresql.JSONB(), nullable=True),
        sa.Column('summary', postgresql.JSONB(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('analyzed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_check_constraint(
        'ck_code_analyses_status',
        'code_analyses',
        "status IN ('running', 'completed', 'failed')",
    )
    op.create_index('ix_code_analyses_user_id', 'code_analyses', ['user_id'])
    op.create_index('ix_code_analyses_service_created', 'code_analyses', ['service_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_code_analyses_service_created', table_name='code_analyses')
    op.drop_index('ix_code_analyses_user_id', table_name='code_analyses')
    op.drop_table('code_analyses')
