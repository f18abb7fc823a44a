"""initial portal schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'])

    op.create_table(
        'families',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('family_name', sa.String(length=255), nullable=False),
        sa.Column('primary_contact_email', sa.String(length=320), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
    )
    op.create_index('ix_families_family_name', 'families', ['family_name'])
    op.create_index('ix_families_created_at', 'families', ['created_at'])

    op.create_table(
        'family_members',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('family_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('relationship', sa.String(length=64), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.UniqueConstraint('family_id', 'user_id', name='uq_family_members_family_user'),
    )
    op.create_index('ix_family_members_family_id', 'family_members', ['family_id'])
    op.create_index('ix_family_members_user_id', 'family_members', ['user_id'])

    op.create_table(
        'policies',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('family_id', sa.Uuid(), nullable=False),
        sa.Column('policy_holder_id', sa.Uuid(), nullable=False),
        sa.Column('policy_number', sa.String(length=100), nullable=True),
        sa.Column('policy_type', sa.String(length=100), nullable=False),
        sa.Column('insurance_company', sa.String(length=255), nullable=True),
        sa.Column('premium_amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('coverage_amount', sa.Numeric(14, 2), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['policy_holder_id'], ['profiles.id']),
        sa.CheckConstraint("status IN ('active', 'inactive', 'pending')", name='ck_policies_status'),
    )
    op.create_index('ix_policies_family_id', 'policies', ['family_id'])
    op.create_index('ix_policies_policy_holder_id', 'policies', ['policy_holder_id'])

    op.create_table(
        'policy_requests',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('family_id', sa.Uuid(), nullable=False),
        sa.Column('requested_by', sa.Uuid(), nullable=False),
        sa.Column('request_type', sa.String(length=20), nullable=False),
        sa.Column('policy_id', sa.Uuid(), nullable=True),
        sa.Column('request_data', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Uuid(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['requested_by'], ['profiles.id']),
        sa.ForeignKeyConstraint(['policy_id'], ['policies.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id']),
        sa.CheckConstraint(
            "request_type IN ('new_policy', 'edit_policy', 'delete_policy')",
            name='ck_policy_requests_type',
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name='ck_policy_requests_status',
        ),
    )
    op.create_index('ix_policy_requests_family_id', 'policy_requests', ['family_id'])
    op.create_index('ix_policy_requests_status', 'policy_requests', ['status'])
    op.create_index('ix_policy_requests_created_at', 'policy_requests', ['created_at'])

    op.create_table(
        'admin_users',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('admin_name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.UniqueConstraint('user_id', name='uq_admin_users_user_id'),
    )


def downgrade():
    op.drop_table('admin_users')
    op.drop_index('ix_policy_requests_created_at', table_name='policy_requests')
    op.drop_index('ix_policy_requests_status', table_name='policy_requests')
    op.drop_index('ix_policy_requests_family_id', table_name='policy_requests')
    op.drop_table('policy_requests')
    op.drop_index('ix_policies_policy_holder_id', table_name='policies')
    op.drop_index('ix_policies_family_id', table_name='policies')
    op.drop_table('policies')
    op.drop_index('ix_family_members_user_id', table_name='family_members')
    op.drop_index('ix_family_members_family_id', table_name='family_members')
    op.drop_table('family_members')
    op.drop_index('ix_families_created_at', table_name='families')
    op.drop_index('ix_families_family_name', table_name='families')
    op.drop_table('families')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_table('profiles')
