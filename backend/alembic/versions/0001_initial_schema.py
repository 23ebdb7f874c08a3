"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("student_id", sa.Uuid(), primary_key=True),
        sa.Column("lrn", sa.String(length=12), nullable=True, unique=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("middle_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("gender", sa.String(), nullable=True),
        sa.Column("birthdate", sa.Date(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("grade_level", sa.Integer(), nullable=True),
        sa.Column("section", sa.String(), nullable=True),
        sa.Column("parent_guardian", sa.String(), nullable=True),
        sa.Column("contact_number", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "bmi_records",
        sa.Column("record_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "student_id",
            sa.Uuid(),
            sa.ForeignKey("students.student_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("weight_kg", sa.Numeric(5, 2), nullable=False),
        sa.Column("height_cm", sa.Numeric(5, 2), nullable=False),
        sa.Column("bmi", sa.Numeric(5, 2), nullable=False),
        sa.Column("bmi_status", sa.String(), nullable=False),
        sa.Column("hfa_status", sa.String(), nullable=False),
        sa.Column("measured_at", sa.DateTime(), nullable=False),
        sa.Column("source", sa.String(), nullable=False, server_default="manual"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_bmi_records_student_measured", "bmi_records", ["student_id", "measured_at"])

    op.create_table(
        "feeding_programs",
        sa.Column("program_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "feeding_program_beneficiaries",
        sa.Column("beneficiary_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "program_id",
            sa.Uuid(),
            sa.ForeignKey("feeding_programs.program_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "student_id",
            sa.Uuid(),
            sa.ForeignKey("students.student_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("enrollment_date", sa.Date(), nullable=False),
        sa.Column("bmi_status_at_enrollment", sa.String(), nullable=True),
        sa.Column("hfa_status_at_enrollment", sa.String(), nullable=True),
        sa.UniqueConstraint("program_id", "student_id", name="uq_beneficiary_program_student"),
    )

    op.create_table(
        "feeding_program_attendance",
        sa.Column("attendance_id", sa.Uuid(), primary_key=True),
        sa.Column(
            "beneficiary_id",
            sa.Uuid(),
            sa.ForeignKey("feeding_program_beneficiaries.beneficiary_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("attendance_date", sa.Date(), nullable=False),
        sa.Column("present", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.String(), nullable=True),
        sa.UniqueConstraint("beneficiary_id", "attendance_date", name="uq_attendance_beneficiary_date"),
    )


def downgrade() -> None:
    op.drop_table("feeding_program_attendance")
    op.drop_table("feeding_program_beneficiaries")
    op.drop_table("feeding_programs")
    op.drop_index("idx_bmi_records_student_measured", table_name="bmi_records")
    op.drop_table("bmi_records")
    op.drop_table("students")
