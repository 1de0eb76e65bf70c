"""Initial academy schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-01-06 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(12, 2)


def base_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def create_table(name, *columns):
    op.create_table(name, *base_columns(), *columns)
    op.create_index(f'ix_{name}_id', name, ['id'])
    op.create_index(f'ix_{name}_created_at', name, ['created_at'])
    op.create_index(f'ix_{name}_is_deleted', name, ['is_deleted'])


def upgrade() -> None:
    create_table(
        'departments',
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(20), nullable=False),
        sa.Column('head_of_department_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
    )
    op.create_index('ix_departments_code', 'departments', ['code'], unique=True)

    create_table(
        'teachers',
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id'), nullable=True),
        sa.Column('employee_id', sa.String(20), nullable=False),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('other_name', sa.String(50), nullable=True),
        sa.Column('email', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('qualification', sa.String(200), nullable=True),
        sa.Column('specialization', sa.String(200), nullable=True),
        sa.Column('is_class_teacher', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
    )
    op.create_index('ix_teachers_employee_id', 'teachers', ['employee_id'], unique=True)
    op.create_index('ix_teachers_department_id', 'teachers', ['department_id'])
    op.create_index('ix_teachers_email', 'teachers', ['email'])

    create_table(
        'parents',
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('email', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('alternate_phone', sa.String(20), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('occupation', sa.String(100), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
    )
    op.create_index('ix_parents_email', 'parents', ['email'])

    create_table(
        'classes',
        sa.Column('class_teacher_id', sa.Integer(), sa.ForeignKey('teachers.id'), nullable=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('level', sa.String(20), nullable=False),
        sa.Column('section', sa.String(10), nullable=True),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.UniqueConstraint('name', 'academic_year', name='uq_class_identity'),
    )
    op.create_index('ix_classes_class_teacher_id', 'classes', ['class_teacher_id'])
    op.create_index('ix_classes_name', 'classes', ['name'])
    op.create_index('ix_classes_level', 'classes', ['level'])

    create_table(
        'students',
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('parents.id'), nullable=True),
        sa.Column('admission_number', sa.String(20), nullable=False),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('other_name', sa.String(50), nullable=True),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('level', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.Column('admission_date', sa.Date(), nullable=True),
    )
    op.create_index('ix_students_admission_number', 'students', ['admission_number'], unique=True)
    op.create_index('ix_students_class_id', 'students', ['class_id'])
    op.create_index('ix_students_parent_id', 'students', ['parent_id'])
    op.create_index('ix_students_status', 'students', ['status'])

    create_table(
        'parent_student_links',
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('parents.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('relationship_type', sa.String(30), nullable=True),
        sa.UniqueConstraint('parent_id', 'student_id', name='uq_parent_student'),
    )
    op.create_index('ix_parent_student_links_parent_id', 'parent_student_links', ['parent_id'])
    op.create_index('ix_parent_student_links_student_id', 'parent_student_links', ['student_id'])

    create_table(
        'student_promotions',
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('from_class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('to_class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('from_academic_year', sa.String(10), nullable=True),
        sa.Column('to_academic_year', sa.String(10), nullable=False),
        sa.Column('promotion_status', sa.String(20), nullable=False),
        sa.Column('promoted_by', sa.Integer(), nullable=True),
        sa.Column('promotion_date', sa.Date(), nullable=False),
    )
    op.create_index('ix_student_promotions_student_id', 'student_promotions', ['student_id'])

    create_table(
        'subjects',
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(20), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_core', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
    )
    op.create_index('ix_subjects_code', 'subjects', ['code'], unique=True)

    create_table(
        'subject_assignments',
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teachers.id'), nullable=False),
        sa.Column('term', sa.String(20), nullable=False),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.UniqueConstraint('subject_id', 'class_id', 'term', 'academic_year', name='uq_subject_assignment'),
    )
    op.create_index('ix_subject_assignments_subject_id', 'subject_assignments', ['subject_id'])
    op.create_index('ix_subject_assignments_class_id', 'subject_assignments', ['class_id'])
    op.create_index('ix_subject_assignments_teacher_id', 'subject_assignments', ['teacher_id'])

    create_table(
        'scores',
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('subject_assignment_id', sa.Integer(), sa.ForeignKey('subject_assignments.id'), nullable=False),
        sa.Column('ca1', sa.Float(), nullable=False),
        sa.Column('ca2', sa.Float(), nullable=False),
        sa.Column('exam', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('grade', sa.String(2), nullable=True),
        sa.Column('remark', sa.String(20), nullable=True),
        sa.Column('class_average', sa.Float(), nullable=True),
        sa.Column('class_min', sa.Float(), nullable=True),
        sa.Column('class_max', sa.Float(), nullable=True),
        sa.Column('entered_by', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.UniqueConstraint('student_id', 'subject_assignment_id', name='uq_score_student_assignment'),
    )
    op.create_index('ix_scores_student_id', 'scores', ['student_id'])
    op.create_index('ix_scores_subject_assignment_id', 'scores', ['subject_assignment_id'])
    op.create_index('ix_scores_status', 'scores', ['status'])

    create_table(
        'compiled_results',
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('term', sa.String(20), nullable=False),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.Column('total_score', sa.Float(), nullable=False),
        sa.Column('average_score', sa.Float(), nullable=False),
        sa.Column('subjects_offered', sa.Integer(), nullable=False),
        sa.Column('grade', sa.String(2), nullable=True),
        sa.Column('class_average', sa.Float(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('total_students', sa.Integer(), nullable=True),
        sa.Column('times_present', sa.Integer(), nullable=True),
        sa.Column('times_absent', sa.Integer(), nullable=True),
        sa.Column('class_teacher_comment', sa.Text(), nullable=True),
        sa.Column('principal_comment', sa.Text(), nullable=True),
        sa.Column('compiled_by', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('approved_date', sa.Date(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.UniqueConstraint('student_id', 'class_id', 'term', 'academic_year', name='uq_compiled_result'),
    )
    op.create_index('ix_compiled_results_student_id', 'compiled_results', ['student_id'])
    op.create_index('ix_compiled_results_class_id', 'compiled_results', ['class_id'])
    op.create_index('ix_compiled_results_status', 'compiled_results', ['status'])

    create_table(
        'fee_structures',
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('term', sa.String(20), nullable=False),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.Column('tuition_fee', MONEY, nullable=False),
        sa.Column('development_levy', MONEY, nullable=False),
        sa.Column('sports_fee', MONEY, nullable=False),
        sa.Column('exam_fee', MONEY, nullable=False),
        sa.Column('books_fee', MONEY, nullable=False),
        sa.Column('uniform_fee', MONEY, nullable=False),
        sa.Column('transport_fee', MONEY, nullable=False),
        sa.Column('total_fee', MONEY, nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.UniqueConstraint('class_id', 'term', 'academic_year', name='uq_fee_structure'),
    )
    op.create_index('ix_fee_structures_class_id', 'fee_structures', ['class_id'])

    create_table(
        'scholarships',
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('scholarship_type', sa.String(20), nullable=False),
        sa.Column('value', MONEY, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('eligibility_criteria', sa.Text(), nullable=True),
        sa.Column('total_budget', MONEY, nullable=True),
        sa.Column('academic_year', sa.String(10), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
    )

    create_table(
        'scholarship_awards',
        sa.Column('scholarship_id', sa.Integer(), sa.ForeignKey('scholarships.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('term', sa.String(20), nullable=False),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.UniqueConstraint('scholarship_id', 'student_id', 'term', 'academic_year', name='uq_scholarship_award'),
    )
    op.create_index('ix_scholarship_awards_scholarship_id', 'scholarship_awards', ['scholarship_id'])
    op.create_index('ix_scholarship_awards_student_id', 'scholarship_awards', ['student_id'])

    create_table(
        'payments',
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('payment_type', sa.String(30), nullable=False),
        sa.Column('term', sa.String(20), nullable=False),
        sa.Column('academic_year', sa.String(10), nullable=False),
        sa.Column('payment_method', sa.String(30), nullable=False),
        sa.Column('transaction_reference', sa.String(100), nullable=True),
        sa.Column('receipt_number', sa.String(30), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('recorded_by', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('verified_by', sa.Integer(), nullable=True),
        sa.Column('verified_date', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_payments_student_id', 'payments', ['student_id'])
    op.create_index('ix_payments_receipt_number', 'payments', ['receipt_number'], unique=True)
    op.create_index('ix_payments_status', 'payments', ['status'])

    create_table(
        'attendances',
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('marked_by', sa.Integer(), nullable=True),
        sa.UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
    )
    op.create_index('ix_attendances_student_id', 'attendances', ['student_id'])
    op.create_index('ix_attendances_class_id', 'attendances', ['class_id'])
    op.create_index('ix_attendances_date', 'attendances', ['date'])

    create_table(
        'notifications',
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('notification_type', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=False),
        sa.Column('target_audience', sa.String(20), nullable=False),
        sa.Column('is_broadcast', sa.Boolean(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=True),
    )
    op.create_index('ix_notifications_target_audience', 'notifications', ['target_audience'])

    create_table(
        'notification_reads',
        sa.Column('notification_id', sa.Integer(), sa.ForeignKey('notifications.id'), nullable=False),
        sa.Column('reader_id', sa.Integer(), nullable=False),
        sa.Column('read_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('notification_id', 'reader_id', name='uq_notification_reader'),
    )
    op.create_index('ix_notification_reads_notification_id', 'notification_reads', ['notification_id'])
    op.create_index('ix_notification_reads_reader_id', 'notification_reads', ['reader_id'])


def downgrade() -> None:
    for table in (
        'notification_reads', 'notifications', 'attendances', 'payments',
        'scholarship_awards', 'scholarships', 'fee_structures', 'compiled_results',
        'scores', 'subject_assignments', 'subjects', 'student_promotions',
        'parent_student_links', 'students', 'classes', 'parents', 'teachers',
        'departments',
    ):
        op.drop_table(table)
