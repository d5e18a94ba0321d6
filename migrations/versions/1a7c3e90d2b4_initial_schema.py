"""initial admissions schema

Revision ID: 1a7c3e90d2b4
Revises:
Create Date: 2025-10-01 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "1a7c3e90d2b4"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False, unique=True),
        sa.Column('password', sa.String(length=255), nullable=False),
    )

    op.create_table(
        'courses',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False, unique=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('full_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('installment_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('installment1', sa.Numeric(10, 2), nullable=False),
        sa.Column('installment2', sa.Numeric(10, 2), nullable=False),
        sa.Column('fee_plans', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'inquiries',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('student_name', sa.String(length=200), nullable=False),
        sa.Column('course_id', sa.String(length=36), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('contact_no', sa.String(length=20), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('father_contact_no', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('batch_id', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_inquiries_course_id', 'inquiries', ['course_id'])
    op.create_index('ix_inquiries_status', 'inquiries', ['status'])

    op.create_table(
        'enrollments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('inquiry_id', sa.String(length=36), sa.ForeignKey('inquiries.id'), nullable=False),
        sa.Column('student_name', sa.String(length=200), nullable=False),
        sa.Column('course_id', sa.String(length=36), sa.ForeignKey('courses.id'), nullable=False),
        sa.Column('contact_no', sa.String(length=20), nullable=False),
        sa.Column('father_name', sa.String(length=200), nullable=False),
        sa.Column('father_contact_no', sa.String(length=20), nullable=False),
        sa.Column('student_education', sa.String(length=200), nullable=False),
        sa.Column('student_email', sa.String(length=255), nullable=False),
        sa.Column('student_address', sa.Text(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('fee_plan', sa.String(length=20), nullable=False),
        sa.Column('total_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('batch_id', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_enrollments_inquiry_id', 'enrollments', ['inquiry_id'])
    op.create_index('ix_enrollments_course_id', 'enrollments', ['course_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('enrollment_id', sa.String(length=36), sa.ForeignKey('enrollments.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('payment_mode', sa.String(length=20), nullable=False),
        sa.Column('transaction_id', sa.String(length=100), nullable=True),
        sa.Column('installment_number', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_payments_enrollment_id', 'payments', ['enrollment_id'])

    op.create_table(
        'settings',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('key', sa.String(length=100), nullable=False, unique=True),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )


def downgrade():
    op.drop_table('settings')
    op.drop_index('ix_payments_enrollment_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_enrollments_course_id', table_name='enrollments')
    op.drop_index('ix_enrollments_inquiry_id', table_name='enrollments')
    op.drop_table('enrollments')
    op.drop_index('ix_inquiries_status', table_name='inquiries')
    op.drop_index('ix_inquiries_course_id', table_name='inquiries')
    op.drop_table('inquiries')
    op.drop_table('courses')
    op.drop_table('users')
