"""Initial schema and seed admin

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from src.core.auth.password import hash_password

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    # Accounts
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "document_sequences",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("prefix", sa.String(20), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("last_number", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefix", "year", name="uq_document_sequence_prefix_year"),
        sa.CheckConstraint("last_number >= 0", name="ck_document_sequence_last_number"),
    )

    op.create_table(
        "user_activities",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("action_type", sa.String(100), nullable=False),
        sa.Column("module", sa.String(50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_activities_user_id", "user_activities", ["user_id"])
    op.create_index("ix_user_activities_action_type", "user_activities", ["action_type"])
    op.create_index("ix_user_activities_module", "user_activities", ["module"])
    op.create_index("ix_user_activities_created_at", "user_activities", ["created_at"])

    # Santri and asatidz
    op.create_table(
        "students",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("nim", sa.String(50), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("gender", sa.String(1), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("parent_name", sa.String(200), nullable=True),
        sa.Column("parent_phone", sa.String(20), nullable=True),
        sa.Column("parent_address", sa.Text(), nullable=True),
        sa.Column("room_assignment", sa.String(50), nullable=True),
        sa.Column("class", sa.String(50), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("enrollment_date", sa.Date(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_students_nim", "students", ["nim"], unique=True)
    op.create_index("ix_students_full_name", "students", ["full_name"])
    op.create_index("ix_students_status", "students", ["status"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("nip", sa.String(50), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("gender", sa.String(1), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("qualification", sa.String(100), nullable=True),
        sa.Column("specialization", sa.String(100), nullable=True),
        sa.Column("base_salary", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("hourly_rate", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("hire_date", sa.Date(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_teachers_nip", "teachers", ["nip"], unique=True)
    op.create_index("ix_teachers_full_name", "teachers", ["full_name"])
    op.create_index("ix_teachers_status", "teachers", ["status"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="santri"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("student_id", sa.BigInteger(), nullable=True),
        sa.Column("teacher_id", sa.BigInteger(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_role", "profiles", ["role"])

    op.create_table(
        "teacher_assignments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("teacher_id", sa.BigInteger(), nullable=False),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("class", sa.String(50), nullable=True),
        sa.Column("hours_per_week", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("academic_year", sa.String(20), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_teacher_assignments_teacher_id", "teacher_assignments", ["teacher_id"])

    op.create_table(
        "salary_payments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("teacher_id", sa.BigInteger(), nullable=False),
        sa.Column("payment_month", sa.Integer(), nullable=False),
        sa.Column("payment_year", sa.Integer(), nullable=False),
        sa.Column("base_amount", sa.BigInteger(), nullable=False),
        sa.Column("additional_hours", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("additional_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.BigInteger(), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="paid"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("processed_by", sa.BigInteger(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("teacher_id", "payment_month", "payment_year", name="uq_salary_month"),
    )
    op.create_index("ix_salary_payments_teacher_id", "salary_payments", ["teacher_id"])

    # Money movements
    op.create_table(
        "savings_accounts",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.BigInteger(), nullable=False),
        sa.Column("account_type", sa.String(30), nullable=False, server_default="tabungan"),
        sa.Column("current_balance", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("savings_goal", sa.BigInteger(), nullable=True),
        sa.Column("goal_description", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("current_balance >= 0", name="ck_savings_balance_non_negative"),
    )
    op.create_index("ix_savings_accounts_student_id", "savings_accounts", ["student_id"], unique=True)

    op.create_table(
        "transactions",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("transaction_type", sa.String(30), nullable=False),
        sa.Column("student_id", sa.BigInteger(), nullable=True),
        sa.Column("savings_account_id", sa.BigInteger(), nullable=True),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("receipt_number", sa.String(50), nullable=True),
        sa.Column("processed_by", sa.BigInteger(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="completed"),
        _created_at(),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.ForeignKeyConstraint(["savings_account_id"], ["savings_accounts.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transactions_transaction_type", "transactions", ["transaction_type"])
    op.create_index("ix_transactions_student_id", "transactions", ["student_id"])
    op.create_index("ix_transactions_savings_account_id", "transactions", ["savings_account_id"])
    op.create_index("ix_transactions_transaction_date", "transactions", ["transaction_date"])
    op.create_index("ix_transactions_receipt_number", "transactions", ["receipt_number"], unique=True)

    op.create_table(
        "expenses",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("expense_category", sa.String(50), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("vendor_name", sa.String(200), nullable=True),
        sa.Column("receipt_url", sa.String(500), nullable=True),
        sa.Column("teacher_id", sa.BigInteger(), nullable=True),
        sa.Column("approval_status", sa.String(20), nullable=False, server_default="approved"),
        sa.Column("approved_by", sa.BigInteger(), nullable=True),
        sa.Column("created_by", sa.BigInteger(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"]),
        sa.ForeignKeyConstraint(["approved_by"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_expenses_expense_category", "expenses", ["expense_category"])
    op.create_index("ix_expenses_expense_date", "expenses", ["expense_date"])
    op.create_index("ix_expenses_teacher_id", "expenses", ["teacher_id"])

    op.create_table(
        "donations",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("donation_type", sa.String(20), nullable=False),
        sa.Column("donor_name", sa.String(200), nullable=True),
        sa.Column("donor_contact", sa.String(100), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("donation_date", sa.Date(), nullable=False),
        sa.Column("purpose", sa.Text(), nullable=True),
        sa.Column("allocated_to", sa.String(200), nullable=True),
        sa.Column("receipt_number", sa.String(50), nullable=False),
        sa.Column("recorded_by", sa.BigInteger(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["recorded_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("receipt_number"),
    )
    op.create_index("ix_donations_donation_type", "donations", ["donation_type"])
    op.create_index("ix_donations_donation_date", "donations", ["donation_date"])

    op.create_table(
        "cash_transactions",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("transaction_type", sa.String(20), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("student_id", sa.BigInteger(), nullable=True),
        sa.Column("reference_type", sa.String(50), nullable=True),
        sa.Column("reference_id", sa.BigInteger(), nullable=True),
        sa.Column("receipt_number", sa.String(50), nullable=False),
        sa.Column("processed_by", sa.BigInteger(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"]),
        sa.ForeignKeyConstraint(["processed_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("receipt_number"),
    )
    op.create_index("ix_cash_transactions_transaction_type", "cash_transactions", ["transaction_type"])
    op.create_index("ix_cash_transactions_transaction_date", "cash_transactions", ["transaction_date"])
    op.create_index("ix_cash_transactions_student_id", "cash_transactions", ["student_id"])

    op.create_table(
        "monthly_reports",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("report_month", sa.Integer(), nullable=False),
        sa.Column("report_year", sa.Integer(), nullable=False),
        sa.Column("total_spp_revenue", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_donations", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_expenses", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_savings_deposits", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_savings_withdrawals", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("active_student_count", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("report_month", "report_year", name="uq_monthly_report_period"),
    )

    # Seed first admin
    # Password: Admin123! (change in production!)
    op.execute(
        sa.text(
            """
            INSERT INTO users (email, password_hash, is_active, created_at, updated_at)
            VALUES ('admin@pesantren.local', :password_hash, true, NOW(), NOW())
            """
        ).bindparams(password_hash=hash_password("Admin123!"))
    )
    op.execute(
        """
        INSERT INTO profiles (id, email, full_name, role, status, created_at, updated_at)
        SELECT id, email, 'Administrator', 'admin', 'active', NOW(), NOW()
        FROM users WHERE email = 'admin@pesantren.local'
        """
    )


def downgrade() -> None:
    op.drop_table("monthly_reports")
    op.drop_table("cash_transactions")
    op.drop_table("donations")
    op.drop_table("expenses")
    op.drop_table("transactions")
    op.drop_table("savings_accounts")
    op.drop_table("salary_payments")
    op.drop_table("teacher_assignments")
    op.drop_table("profiles")
    op.drop_table("teachers")
    op.drop_table("students")
    op.drop_table("user_activities")
    op.drop_table("document_sequences")
    op.drop_table("users")
