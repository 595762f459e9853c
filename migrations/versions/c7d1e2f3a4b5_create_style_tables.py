"""create user, theme, button_preset, site_settings and page tables

Revision ID: c7d1e2f3a4b5
Revises:
Create Date: 2026-10-19 09:14:27.118204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c7d1e2f3a4b5'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(150), nullable=False),
        sa.Column('email', sa.String(150), nullable=False),
        sa.Column('password', sa.String(256), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'theme',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('preview_image', sa.String(500), nullable=True),
        sa.Column('colors', sa.JSON(), nullable=False),
        sa.Column('typography', sa.JSON(), nullable=False),
        sa.Column('styles', sa.JSON(), nullable=False),
        sa.Column('custom_css', sa.Text(), nullable=True),
        sa.Column('created_by_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by_id'], ['user.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_theme_slug', 'theme', ['slug'], unique=True)
    op.create_index('ix_theme_is_active', 'theme', ['is_active'])
    op.create_index('ix_theme_is_default', 'theme', ['is_default'])

    op.create_table(
        'button_preset',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('colors', sa.JSON(), nullable=False),
        sa.Column('sizes', sa.JSON(), nullable=False),
        sa.Column('border_radius', sa.String(20), nullable=False, server_default='rounded'),
        sa.Column('created_by_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['created_by_id'], ['user.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_button_preset_slug', 'button_preset', ['slug'], unique=True)
    op.create_index('ix_button_preset_is_active', 'button_preset', ['is_active'])
    op.create_index('ix_button_preset_is_default', 'button_preset', ['is_default'])

    op.create_table(
        'site_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('site_name', sa.String(200), nullable=False, server_default='Site CMS'),
        sa.Column('active_theme', sa.String(120), nullable=True),
        sa.Column('active_button_preset', sa.String(120), nullable=True),
        sa.Column('primary_color', sa.String(7), nullable=True),
        sa.Column('secondary_color', sa.String(7), nullable=True),
        sa.Column('button_style', sa.String(20), nullable=True),
        sa.Column('navbar_style', sa.String(20), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'page',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('blocks', sa.JSON(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_home', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_page_slug', 'page', ['slug'], unique=True)


def downgrade():
    op.drop_index('ix_page_slug', table_name='page')
    op.drop_table('page')
    op.drop_table('site_settings')
    op.drop_index('ix_button_preset_is_default', table_name='button_preset')
    op.drop_index('ix_button_preset_is_active', table_name='button_preset')
    op.drop_index('ix_button_preset_slug', table_name='button_preset')
    op.drop_table('button_preset')
    op.drop_index('ix_theme_is_default', table_name='theme')
    op.drop_index('ix_theme_is_active', table_name='theme')
    op.drop_index('ix_theme_slug', table_name='theme')
    op.drop_table('theme')
    op.drop_table('user')
