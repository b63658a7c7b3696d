"""Create users, claims and claim_logs tables

Revision ID: 20261019_claim_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_claim_tables'
down_revision = None
branch_labels = None
depends_on = None

USER_ROLES = ('USER', 'L1_ADMIN', 'L2_ADMIN', 'L3_ADMIN', 'L4_ADMIN')
CLAIM_STATUSES = ('SUBMITTED', 'APPROVED_L1', 'APPROVED_L2', 'APPROVED_L3', 'DISBURSED', 'REJECTED')
LOG_ACTIONS = ('SUBMIT', 'APPROVE', 'REJECT')


def upgrade():
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()

    if 'users' not in tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=120), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('role', sa.Enum(*USER_ROLES, name='user_role'), nullable=False),
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)
        op.create_index('ix_users_role', 'users', ['role'])

    if 'claims' not in tables:
        op.create_table(
            'claims',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('user_name', sa.String(length=120), nullable=False),
            sa.Column('title', sa.String(length=150), nullable=False),
            sa.Column('amount', sa.Numeric(12, 2), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('status', sa.Enum(*CLAIM_STATUSES, name='claim_status'), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_claims_user_id', 'claims', ['user_id'])
        op.create_index('ix_claims_status', 'claims', ['status'])
        op.create_index('ix_claims_date', 'claims', ['date'])

    if 'claim_logs' not in tables:
        op.create_table(
            'claim_logs',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('claim_id', sa.Integer(), sa.ForeignKey('claims.id'), nullable=False),
            sa.Column('stage', sa.String(length=120), nullable=False),
            sa.Column('stage_role', sa.String(length=20), nullable=True),
            sa.Column('action', sa.Enum(*LOG_ACTIONS, name='log_action'), nullable=False),
            sa.Column('remarks', sa.Text(), nullable=False),
            sa.Column('timestamp', sa.DateTime(), nullable=False),
            sa.Column('actor', sa.String(length=120), nullable=False),
            sa.Column('actor_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        )
        op.create_index('ix_claim_logs_claim_id', 'claim_logs', ['claim_id'])
        op.create_index('ix_claim_logs_actor_user_id', 'claim_logs', ['actor_user_id'])


def downgrade():
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()

    if 'claim_logs' in tables:
        op.drop_index('ix_claim_logs_actor_user_id', table_name='claim_logs')
        op.drop_index('ix_claim_logs_claim_id', table_name='claim_logs')
        op.drop_table('claim_logs')
    if 'claims' in tables:
        op.drop_index('ix_claims_date', table_name='claims')
        op.drop_index('ix_claims_status', table_name='claims')
        op.drop_index('ix_claims_user_id', table_name='claims')
        op.drop_table('claims')
    if 'users' in tables:
        op.drop_index('ix_users_role', table_name='users')
        op.drop_index('ix_users_email', table_name='users')
        op.drop_table('users')
