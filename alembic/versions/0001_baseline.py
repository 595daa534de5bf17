"""Baseline migration - users, courses, drafts and signatures.

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates:
- users, courses, roles, enrollments
- course_groups, group_members
- course_config_overrides
- alternate_emails, messages
- signatures (partial unique index on active titles)
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_baseline'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ==========================================================================
    # users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('timezone', sa.String(64), server_default=sa.text("'UTC'"), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_site_admin', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('token_version', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    # ==========================================================================
    # courses, roles, enrollments
    # ==========================================================================
    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('short_name', sa.String(100), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('short_name'),
    )

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('shortname', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('shortname'),
    )

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_id', 'user_id', 'role_id', name='uq_enrollment_role'),
    )
    op.create_index('idx_enrollments_course', 'enrollments', ['course_id', 'is_active'])

    # ==========================================================================
    # course groups
    # ==========================================================================
    op.create_table(
        'course_groups',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_id', 'name', name='uq_course_group_name'),
    )

    op.create_table(
        'group_members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['course_groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('group_id', 'user_id', name='uq_group_member'),
    )

    # ==========================================================================
    # course messaging overrides
    # ==========================================================================
    op.create_table(
        'course_config_overrides',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_id', 'name', name='uq_course_config_name'),
    )

    # ==========================================================================
    # alternate sender emails
    # ==========================================================================
    op.create_table(
        'alternate_emails',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('is_validated', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_alternate_emails_user_id', 'alternate_emails', ['user_id'])
    op.create_index('idx_alternate_emails_user_course', 'alternate_emails', ['user_id', 'course_id'])

    # ==========================================================================
    # messages (drafts seed compose sessions)
    # ==========================================================================
    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('alternate_email_id', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('subject', sa.String(255), server_default=sa.text("''"), nullable=False),
        sa.Column('body', sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column('additional_emails', sa.JSON(), nullable=False),
        sa.Column('signature_id', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('message_type', sa.String(20), server_default=sa.text("'email'"), nullable=False),
        sa.Column('to_send_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('send_receipt', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('send_to_mentors', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_draft', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('included_entity_keys', sa.JSON(), nullable=False),
        sa.Column('excluded_entity_keys', sa.JSON(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_messages_user_id', 'messages', ['user_id'])
    op.create_index('idx_messages_user_course', 'messages', ['user_id', 'course_id', 'is_draft'])

    # ==========================================================================
    # signatures
    # ==========================================================================
    op.create_table(
        'signatures',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(125), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('is_default', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_signatures_user_id', 'signatures', ['user_id'])
    op.create_index('idx_signatures_user_default', 'signatures', ['user_id', 'is_default'])
    op.create_index(
        'uq_signature_user_title_active',
        'signatures',
        ['user_id', 'title'],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
        sqlite_where=sa.text('deleted_at IS NULL'),
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('signatures')
    op.drop_table('messages')
    op.drop_table('alternate_emails')
    op.drop_table('course_config_overrides')
    op.drop_table('group_members')
    op.drop_table('course_groups')
    op.drop_table('enrollments')
    op.drop_table('roles')
    op.drop_table('courses')
    op.drop_table('users')
