"""Initial tables: directories, day ledgers and work segments

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
    )
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('color', sa.String(20)),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='SET NULL')),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('role', sa.Enum('ADMIN', 'COLLABORATOR', name='userrole'), nullable=False),
    )
    op.create_table(
        'day_ledgers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day', sa.Date(), nullable=False),
        sa.Column('permits_hours', sa.Float(), nullable=False, server_default='0'),
        sa.Column('illness', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('holiday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('employee_id', 'day', name='unique_employee_day'),
        sa.CheckConstraint('permits_hours >= 0', name='check_permits_hours_non_negative'),
    )
    op.create_index('idx_day_ledgers_day', 'day_ledgers', ['day'])
    op.create_table(
        'work_segments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('day_ledger_id', sa.Integer(), sa.ForeignKey('day_ledgers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', sa.Integer(), sa.ForeignKey('projects.id'), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('clients.id')),
        sa.Column('hours', sa.Float(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint('hours > 0', name='check_segment_hours_positive'),
    )
    op.create_index('idx_work_segments_ledger', 'work_segments', ['day_ledger_id'])


def downgrade() -> None:
    op.drop_index('idx_work_segments_ledger', table_name='work_segments')
    op.drop_table('work_segments')
    op.drop_index('idx_day_ledgers_day', table_name='day_ledgers')
    op.drop_table('day_ledgers')
    op.drop_table('employees')
    op.drop_table('projects')
    op.drop_table('clients')
