"""Initial school admin schema with seeded roles and default settings

Revision ID: 3a1f9c2d7e40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f9c2d7e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create every table, then seed the four roles and the settings row."""
    roles = op.create_table(
        'roles',
        sa.Column('role_id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
    )
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True),
        sa.Column('pass_hash', sa.String(255), nullable=False),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.role_id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_username', 'users', ['username'])
    op.create_table(
        'students',
        sa.Column('student_id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=False, unique=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('dob', sa.Date(), nullable=False),
        sa.Column('class_code', sa.String(10), nullable=False),
    )
    op.create_table(
        'teachers',
        sa.Column('teacher_id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=False, unique=True),
    )
    op.create_table(
        'parents',
        sa.Column('parent_id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=False, unique=True),
    )
    op.create_table(
        'student_parent',
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.student_id'), primary_key=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('parents.parent_id'), primary_key=True),
    )
    op.create_table(
        'subjects',
        sa.Column('subject_id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
    )
    op.create_table(
        'classes',
        sa.Column('class_id', sa.Integer(), primary_key=True),
        sa.Column('class_code', sa.String(10), nullable=False, unique=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('homeroom_teacher_id', sa.Integer(), sa.ForeignKey('teachers.teacher_id'), nullable=True),
    )
    op.create_table(
        'class_subjects',
        sa.Column('class_subject_id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.class_id'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.subject_id'), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('teachers.teacher_id'), nullable=False),
        sa.Column('schedule', sa.String(255), nullable=True),
        sa.UniqueConstraint('class_id', 'subject_id', name='uq_class_subject'),
    )
    op.create_table(
        'enrollments',
        sa.Column('enroll_id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.student_id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.class_id'), nullable=False),
        sa.UniqueConstraint('student_id', 'class_id', name='uq_enrollment'),
    )
    op.create_table(
        'periods',
        sa.Column('period_id', sa.Integer(), primary_key=True),
        sa.Column('class_subject_id', sa.Integer(), sa.ForeignKey('class_subjects.class_subject_id'), nullable=False),
        sa.Column('period_date', sa.Date(), nullable=False),
        sa.Column('period_label', sa.String(50), nullable=False),
    )
    op.create_table(
        'grade_items',
        sa.Column('item_id', sa.Integer(), primary_key=True),
        sa.Column('class_subject_id', sa.Integer(), sa.ForeignKey('class_subjects.class_subject_id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('max_points', sa.Numeric(5, 2), nullable=False),
        sa.Column('weight', sa.Numeric(3, 2), server_default='1.00'),
    )
    op.create_table(
        'grades',
        sa.Column('grade_id', sa.Integer(), primary_key=True),
        sa.Column('enroll_id', sa.Integer(), sa.ForeignKey('enrollments.enroll_id'), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('grade_items.item_id'), nullable=False),
        sa.Column('points', sa.Numeric(5, 2), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
    )
    op.create_table(
        'attendance',
        sa.Column('att_id', sa.Integer(), primary_key=True),
        sa.Column('enroll_id', sa.Integer(), sa.ForeignKey('enrollments.enroll_id'), nullable=False),
        sa.Column('period_id', sa.Integer(), sa.ForeignKey('periods.period_id'), nullable=False),
        sa.Column('status', sa.String(1), nullable=False),
        sa.Column('justification', sa.Text(), nullable=True),
        sa.Column('approved', sa.Boolean(), nullable=True),
        sa.Column('reject_reason', sa.Text(), nullable=True),
        sa.Column('justification_file', sa.String(255), nullable=True),
        sa.UniqueConstraint('enroll_id', 'period_id', name='uq_attendance'),
    )
    settings = op.create_table(
        'system_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('school_name', sa.String(100), nullable=False),
        sa.Column('current_year', sa.String(20), nullable=False),
        sa.Column('school_address', sa.Text(), nullable=True),
        sa.Column('session_timeout', sa.Integer(), nullable=False),
        sa.Column('grade_scale', sa.String(20), nullable=False),
        sa.Column('maintenance_mode', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.bulk_insert(roles, [
        {'role_id': 1, 'name': 'Administrator'},
        {'role_id': 2, 'name': 'Teacher'},
        {'role_id': 3, 'name': 'Student'},
        {'role_id': 4, 'name': 'Parent'},
    ])
    op.bulk_insert(settings, [{
        'id': 1,
        'school_name': 'High School Example',
        'current_year': '2024/2025',
        'school_address': '',
        'session_timeout': 30,
        'grade_scale': '1-5',
        'maintenance_mode': False,
    }])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        'system_settings', 'attendance', 'grades', 'grade_items', 'periods', 'enrollments',
        'class_subjects', 'classes', 'subjects', 'student_parent', 'parents', 'teachers',
        'students', 'users', 'roles',
    ):
        op.drop_table(table)
