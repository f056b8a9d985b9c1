"""create subjects, lectures and attendance

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)

    op.create_table(
        "lectures",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id"), nullable=True),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("division", sa.String(length=20), nullable=True),
        sa.Column("batch", sa.String(length=20), nullable=True),
        sa.Column("semester", sa.Integer(), nullable=True),
        sa.Column("from", sa.String(length=32), nullable=False),
        sa.Column("to", sa.String(length=32), nullable=False),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_lectures_day", "lectures", ["day"])
    op.create_index("ix_lectures_faculty_id", "lectures", ["faculty_id"])

    op.create_table(
        "attendance",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("lecture_id", sa.String(length=36), sa.ForeignKey("lectures.id"), nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("is_present", sa.Boolean(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("attendance_day", sa.Date(), nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column("taken_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("lecture_id", "student_id", "attendance_day", name="uq_attendance_lecture_student_day"),
    )
    op.create_index("ix_attendance_lecture_id", "attendance", ["lecture_id"])
    op.create_index("ix_attendance_student_id", "attendance", ["student_id"])
    op.create_index("ix_attendance_date", "attendance", ["date"])


def downgrade() -> None:
    op.drop_index("ix_attendance_date", table_name="attendance")
    op.drop_index("ix_attendance_student_id", table_name="attendance")
    op.drop_index("ix_attendance_lecture_id", table_name="attendance")
    op.drop_table("attendance")
    op.drop_index("ix_lectures_faculty_id", table_name="lectures")
    op.drop_index("ix_lectures_day", table_name="lectures")
    op.drop_table("lectures")
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_table("subjects")
