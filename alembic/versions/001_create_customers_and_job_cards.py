"""Create customers and job_cards tables

Revision ID: 001_customers_job_cards
Revises:
Create Date: 2025-03-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_customers_job_cards'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'customers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('mobile', sa.String(50), nullable=True),
        sa.Column('company_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('abn', sa.String(50), nullable=True),
        sa.Column('rego', sa.String(20), nullable=False),
        sa.Column('vehicle_make', sa.String(100), nullable=True),
        sa.Column('vehicle_model', sa.String(100), nullable=True),
        sa.Column('vehicle_month', sa.String(20), nullable=True),
        sa.Column('vehicle_year', sa.Integer, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('rego', name='uq_customers_rego'),
    )
    op.create_index('ix_customers_email', 'customers', ['email'])

    op.create_table(
        'job_cards',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('job_number', sa.String(32), nullable=False),
        # Customer snapshot
        sa.Column('customer_name', sa.String(255), nullable=True),
        sa.Column('company_name', sa.String(255), nullable=True),
        sa.Column('abn', sa.String(50), nullable=True),
        sa.Column('mobile', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        # Vehicle snapshot
        sa.Column('vehicle_make', sa.String(100), nullable=True),
        sa.Column('vehicle_model', sa.String(100), nullable=True),
        sa.Column('vehicle_month', sa.String(20), nullable=True),
        sa.Column('vehicle_year', sa.Integer, nullable=True),
        sa.Column('vehicle_kms', sa.Integer, nullable=True),
        sa.Column('fuel_type', sa.String(20), nullable=True),
        sa.Column('vin', sa.String(50), nullable=True),
        sa.Column('rego', sa.String(20), nullable=True),
        sa.Column('vehicle_state', sa.String(10), nullable=True),
        sa.Column('tyre_size', sa.String(50), nullable=True),
        sa.Column('next_service_kms', sa.Integer, nullable=True),
        sa.Column('vehicle_type', sa.JSON, nullable=True),
        sa.Column('service_selection', sa.String(20), nullable=True),
        # Scheduling
        sa.Column('job_start_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expected_completion_date', sa.Date, nullable=True),
        sa.Column('completed_date', sa.Date, nullable=True),
        # Assignment and lifecycle
        sa.Column('assigned_worker', sa.String(50), nullable=True),
        sa.Column('assigned_parts', sa.String(50), nullable=True),
        sa.Column('is_worker_assigned_complete', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_parts_assigned_complete', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_archived', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('payment_status', sa.String(10), nullable=False, server_default='unpaid'),
        sa.Column('customer_declaration_authorized', sa.Boolean, server_default=sa.false()),
        sa.Column('customer_signature', sa.Text, nullable=True),
        # Documents
        sa.Column('service_progress', sa.JSON, nullable=True),
        sa.Column('trailer_progress', sa.JSON, nullable=True),
        sa.Column('other_progress', sa.JSON, nullable=True),
        sa.Column('parts_and_consumables', sa.JSON, nullable=True),
        sa.Column('lubricants_used', sa.JSON, nullable=True),
        # Mechanic
        sa.Column('handover_valuables_to_customer', sa.Text, nullable=True),
        sa.Column('check_all_tyres', sa.Text, nullable=True),
        sa.Column('total_hours', sa.Float, nullable=True),
        sa.Column('future_work_notes', sa.Text, nullable=True),
        # Financial
        sa.Column('total_a', sa.Numeric(12, 2), nullable=True),
        sa.Column('grand_total', sa.Numeric(12, 2), nullable=True),
        sa.Column('approximate_cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('invoice_number', sa.String(50), nullable=True),
        sa.Column('invoice_date', sa.Date, nullable=True),
        sa.Column('invoice_value', sa.Numeric(12, 2), nullable=True),
        sa.Column('part_location', sa.Text, nullable=True),
        sa.Column('issue_counter_sale', sa.Text, nullable=True),
        # Images and signatures
        sa.Column('image_front', sa.Text, nullable=True),
        sa.Column('image_back', sa.Text, nullable=True),
        sa.Column('image_right_side', sa.Text, nullable=True),
        sa.Column('image_left_side', sa.Text, nullable=True),
        sa.Column('supervisor_signature', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('job_number', name='uq_job_cards_job_number'),
    )
    op.create_index('ix_job_cards_rego', 'job_cards', ['rego'])
    op.create_index('ix_job_cards_is_archived', 'job_cards', ['is_archived'])
    op.create_index('ix_job_cards_assigned_worker', 'job_cards', ['assigned_worker'])
    op.create_index('ix_job_cards_assigned_parts', 'job_cards', ['assigned_parts'])
    op.create_index('ix_job_cards_created_at', 'job_cards', ['created_at'])


def downgrade():
    op.drop_table('job_cards')
    op.drop_table('customers')
