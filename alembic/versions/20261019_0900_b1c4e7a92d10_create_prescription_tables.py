"""create_prescription_tables

Revision ID: b1c4e7a92d10
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b1c4e7a92d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'prescriptions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('reference_number', sa.String(32), nullable=False, unique=True),
        sa.Column('user_id', sa.String(100), nullable=False),
        sa.Column('patient_name', sa.String(100), nullable=False),
        sa.Column('patient_age', sa.Integer, nullable=True),
        sa.Column('patient_phone', sa.String(30), nullable=True),
        sa.Column('doctor_name', sa.String(100), nullable=False),
        sa.Column('hospital_clinic', sa.String(200), nullable=True),
        sa.Column('prescription_date', sa.DateTime, nullable=True),
        sa.Column('prescription_image', sa.String(500), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('admin_notes', sa.Text, nullable=True),
        sa.Column('reviewed_by', sa.String(255), nullable=True),
        sa.Column('reviewed_at', sa.DateTime, nullable=True),
        sa.Column('expires_at', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_prescriptions_user_id', 'prescriptions', ['user_id'])
    op.create_index('idx_prescriptions_status', 'prescriptions', ['status'])
    op.create_index('idx_prescriptions_user_created', 'prescriptions', ['user_id', 'created_at'])

    op.create_table(
        'prescription_items',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('prescription_id', sa.String(36), sa.ForeignKey('prescriptions.id'), nullable=False),
        sa.Column('product_id', sa.String(100), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('quantity', sa.Integer, nullable=False, server_default='1'),
    )
    op.create_index('ix_prescription_items_prescription_id', 'prescription_items', ['prescription_id'])

    op.create_table(
        'prescription_reminders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('prescription_id', sa.String(36), sa.ForeignKey('prescriptions.id'), nullable=False),
        sa.Column('user_id', sa.String(100), nullable=False),
        sa.Column('fire_at', sa.DateTime, nullable=False),
        sa.Column('channel', sa.String(20), nullable=False, server_default='email'),
        sa.Column('notify_before_days', sa.Integer, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='SCHEDULED'),
        sa.Column('message', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('idx_reminders_fire_at', 'prescription_reminders', ['fire_at'])
    op.create_index('idx_reminders_prescription', 'prescription_reminders', ['prescription_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('timestamp', sa.DateTime, server_default=sa.func.now()),
        sa.Column('user_id', sa.String(100), nullable=False),
        sa.Column('user_email', sa.String(255), nullable=False),
        sa.Column('user_ip', sa.String(50), nullable=True),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', sa.String(100), nullable=True),
        sa.Column('details', sa.Text, nullable=True),
        sa.Column('success', sa.Boolean, nullable=False),
        sa.Column('failure_reason', sa.Text, nullable=True),
    )
    op.create_index('ix_audit_logs_id', 'audit_logs', ['id'])
    op.create_index('idx_timestamp', 'audit_logs', ['timestamp'])
    op.create_index('idx_user_id', 'audit_logs', ['user_id'])
    op.create_index('idx_resource', 'audit_logs', ['resource_type', 'resource_id'])
    op.create_index('idx_action', 'audit_logs', ['action'])

    op.create_table(
        'system_config',
        sa.Column('key', sa.String(100), primary_key=True),
        sa.Column('value', sa.Text, nullable=True),
        sa.Column('value_type', sa.String(20), server_default='string'),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_by', sa.String(100), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('system_config')

    op.drop_index('idx_action', 'audit_logs')
    op.drop_index('idx_resource', 'audit_logs')
    op.drop_index('idx_user_id', 'audit_logs')
    op.drop_index('idx_timestamp', 'audit_logs')
    op.drop_index('ix_audit_logs_id', 'audit_logs')
    op.drop_table('audit_logs')

    op.drop_index('idx_reminders_prescription', 'prescription_reminders')
    op.drop_index('idx_reminders_fire_at', 'prescription_reminders')
    op.drop_table('prescription_reminders')

    op.drop_index('ix_prescription_items_prescription_id', 'prescription_items')
    op.drop_table('prescription_items')

    op.drop_index('idx_prescriptions_user_created', 'prescriptions')
    op.drop_index('idx_prescriptions_status', 'prescriptions')
    op.drop_index('ix_prescriptions_user_id', 'prescriptions')
    op.drop_table('prescriptions')
