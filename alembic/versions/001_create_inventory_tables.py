"""Create users, parts, transactions and audit_logs tables

Revision ID: 001
Revises:
Create Date: 2025-03-01 09:00:00.000000

"""
import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('users',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('username', sa.String(50), nullable=False),
    sa.Column('password_hash', sa.String(255), nullable=False),
    sa.Column('name', sa.String(100), nullable=False),
    sa.Column('role', sa.String(20), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.CheckConstraint("role IN ('Admin', 'Stock Controller', 'Viewer')", name='ck_users_role'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('username')
    )

    op.create_table('parts',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('part_number', sa.String(50), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('category', sa.String(50), nullable=False),
    sa.Column('manufacturer', sa.String(100), nullable=False),
    sa.Column('serial_number', sa.String(100), nullable=True),
    sa.Column('batch_number', sa.String(100), nullable=True),
    sa.Column('quantity', sa.Integer(), server_default='0', nullable=False),
    sa.Column('reorder_point', sa.Integer(), server_default='0', nullable=False),
    sa.Column('location', sa.String(100), nullable=False),
    sa.Column('condition', sa.String(50), nullable=False),
    sa.Column('cert_of_conformance', sa.String(100), nullable=True),
    sa.Column('shelf_life', sa.Date(), nullable=True),
    sa.Column('unit_cost', sa.Numeric(10, 2), server_default='0', nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.CheckConstraint('quantity >= 0', name='ck_parts_quantity_non_negative'),
    sa.CheckConstraint('reorder_point >= 0', name='ck_parts_reorder_point_non_negative'),
    sa.CheckConstraint('unit_cost >= 0', name='ck_parts_unit_cost_non_negative'),
    sa.PrimaryKeyConstraint('id')
    )

    op.create_table('transactions',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('part_id', sa.Integer(), nullable=False),
    sa.Column('type', sa.String(10), nullable=False),
    sa.Column('quantity', sa.Integer(), nullable=False),
    sa.Column('date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('reference', sa.String(100), nullable=True),
    sa.Column('note', sa.Text(), nullable=True),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.CheckConstraint('quantity >= 1', name='ck_transactions_quantity_positive'),
    sa.CheckConstraint("type IN ('IN', 'OUT')", name='ck_transactions_type'),
    sa.ForeignKeyConstraint(['part_id'], ['parts.id'], ),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
    sa.PrimaryKeyConstraint('id')
    )

    op.create_table('audit_logs',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('action', sa.String(255), nullable=False),
    sa.Column('date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    sa.Column('user_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
    sa.PrimaryKeyConstraint('id')
    )

    # Add indexes for performance
    op.create_index('ix_parts_part_number', 'parts', ['part_number'])
    op.create_index('ix_transactions_part_id', 'transactions', ['part_id'])
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_date', 'transactions', ['date'])
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_date', 'audit_logs', ['date'])


def downgrade() -> None:
    op.drop_index('ix_audit_logs_date')
    op.drop_index('ix_audit_logs_user_id')
    op.drop_index('ix_transactions_date')
    op.drop_index('ix_transactions_user_id')
    op.drop_index('ix_transactions_part_id')
    op.drop_index('ix_parts_part_number')
    op.drop_table('audit_logs')
    op.drop_table('transactions')
    op.drop_table('parts')
    op.drop_table('users')
