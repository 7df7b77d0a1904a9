"""create configuration profile and prompt template tables

Revision ID: 0001_configuration_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_configuration_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'configuration_profiles',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('widget_appearance', sa.JSON(), nullable=False),
        sa.Column('knowledge_base', sa.JSON(), nullable=False),
        # api_key values inside are Fernet-encrypted by the application
        sa.Column('ai_model', sa.JSON(), nullable=False),
        sa.Column('response_formatting', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_configuration_profiles_is_active', 'configuration_profiles', ['is_active'])
    op.create_index('ix_configuration_profiles_created_at', 'configuration_profiles', ['created_at'])

    op.create_table(
        'prompt_templates',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False, server_default='General'),
        sa.Column('template', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('version', sa.String(length=50), nullable=False, server_default='1.0.0'),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('last_modified', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_prompt_templates_created_at', 'prompt_templates', ['created_at'])

    op.create_table(
        'prompt_variables',
        sa.Column('name', sa.String(length=100), primary_key=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('default_value', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )


def downgrade() -> None:
    op.drop_table('prompt_variables')
    op.drop_index('ix_prompt_templates_created_at', table_name='prompt_templates')
    op.drop_table('prompt_templates')
    op.drop_index('ix_configuration_profiles_created_at', table_name='configuration_profiles')
    op.drop_index('ix_configuration_profiles_is_active', table_name='configuration_profiles')
    op.drop_table('configuration_profiles')
