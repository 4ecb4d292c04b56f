#!/usr/bin/env python3
"""
Fill the database with demo data for a small pesantren.

The data is not random: names, classes, SPP amounts and donations are chosen
so the dashboard, monitoring grid and monthly report look meaningful.

Usage:
    python scripts/seed_demo_data.py --dry-run   # nothing is written
    python scripts/seed_demo_data.py --confirm   # commit to the database

Requires migrations to be applied (alembic upgrade head).
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import Profile, User, UserRole
from src.core.auth.service import AuthService
from src.core.config import settings
from src.core.database.session import async_session
from src.core.documents import DocumentNumberGenerator, ReceiptPrefix
from src.modules.cash.models import CashTransaction, CashTransactionType
from src.modules.donations.models import ANONYMOUS_DONOR, Donation, DonationType
from src.modules.expenses.models import ApprovalStatus, Expense, ExpenseCategory
from src.modules.savings.models import SavingsAccount
from src.modules.students.models import Gender, Student, StudentStatus
from src.modules.teachers.models import SalaryPayment, Teacher, TeacherAssignment
from src.modules.teachers.service import salary_total
from src.modules.transactions.models import Transaction, TransactionType

DEMO_PASSWORD = "demo123"
CURRENT_YEAR = 2026
SPP_AMOUNT = 350_000
PAID_MONTHS = range(1, 7)

# nim, name, gender, class, room, parent, parent phone
STUDENTS_DATA = [
    ("2026001", "Ahmad Fauzi", Gender.MALE, "7A", "Al-Fatih 1", "Hasan Basri", "+6281234567801"),
    ("2026002", "Muhammad Rizki", Gender.MALE, "7A", "Al-Fatih 1", "Abdul Karim", "+6281234567802"),
    ("2026003", "Siti Aisyah", Gender.FEMALE, "7B", "Khadijah 2", "Ali Imran", "+6281234567803"),
    ("2026004", "Nur Halimah", Gender.FEMALE, "7B", "Khadijah 2", "Yusuf Mansur", "+6281234567804"),
    ("2026005", "Fatimah Azzahra", Gender.FEMALE, "8A", "Khadijah 1", "Umar Said", "+6281234567805"),
    ("2026006", "Abdullah Hakim", Gender.MALE, "8A", "Al-Fatih 2", "Zainal Abidin", "+6281234567806"),
    ("2026007", "Hafiz Ramadhan", Gender.MALE, "9A", "Al-Fatih 3", "Salman Farisi", "+6281234567807"),
    ("2026008", "Zahra Maulida", Gender.FEMALE, "9A", "Khadijah 3", "Ismail Marzuki", "+6281234567808"),
]

# nip, name, gender, specialization, base salary, hourly rate
TEACHERS_DATA = [
    ("198501012010", "Ustadz Mahmud", Gender.MALE, "Tahfidz", 2_500_000, 50_000),
    ("199003152015", "Ustadzah Khadijah", Gender.FEMALE, "Bahasa Arab", 2_250_000, 45_000),
    ("198807202012", "Ustadz Ridwan", Gender.MALE, "Fiqih", 2_000_000, 40_000),
]

# type, donor (None = anonymous), amount, purpose
DONATIONS_DATA = [
    (DonationType.ZAKAT, "H. Sulaiman", 2_500_000, "Beasiswa santri yatim"),
    (DonationType.INFAQ, "Ibu Rahmawati", 500_000, "Operasional pondok"),
    (DonationType.SEDEKAH, None, 250_000, "Konsumsi santri"),
    (DonationType.WAKAF, "Keluarga Bpk. Darmawan", 10_000_000, "Pembangunan asrama"),
]

# category, amount, description, vendor
EXPENSES_DATA = [
    (ExpenseCategory.OPERASIONAL, 1_200_000, "Listrik dan air bulan Januari", "PLN"),
    (ExpenseCategory.ATK, 350_000, "Kitab dan alat tulis", "Toko Kitab Al-Hikmah"),
    (ExpenseCategory.PEMELIHARAAN, 800_000, "Perbaikan atap asrama", None),
    (ExpenseCategory.PROGRAM, 1_500_000, "Lomba tahfidz antar pondok", None),
]


async def seed_users(session: AsyncSession) -> dict[str, int]:
    """One account per role. Returns profile id by role."""
    result = await session.execute(select(User).where(User.email == "admin@pesantren.demo"))
    if result.scalar_one_or_none():
        print("  Users already exist, skip.")
        return {}

    auth = AuthService(session)
    role_to_id = {}
    for role, email, name in [
        (UserRole.ADMIN, "admin@pesantren.demo", "Bendahara Pondok"),
        (UserRole.KOMITE, "komite@pesantren.demo", "Ketua Komite"),
        (UserRole.GURU, "guru@pesantren.demo", "Ustadz Mahmud"),
        (UserRole.SANTRI, "santri@pesantren.demo", "Ahmad Fauzi"),
    ]:
        profile = await auth.create_account(
            email=email, password=DEMO_PASSWORD, role=role, full_name=name
        )
        role_to_id[role.value] = profile.id
    print(f"  Created {len(role_to_id)} accounts.")
    return role_to_id


async def seed_students(session: AsyncSession) -> list[Student]:
    """Students with their (empty) savings accounts."""
    result = await session.execute(select(Student).limit(1))
    if result.scalar_one_or_none():
        print("  Students already exist, skip.")
        return []

    students = []
    for nim, name, gender, class_name, room, parent, phone in STUDENTS_DATA:
        student = Student(
            nim=nim,
            full_name=name,
            gender=gender.value,
            class_name=class_name,
            room_assignment=room,
            parent_name=parent,
            parent_phone=phone,
            status=StudentStatus.ACTIVE.value,
            enrollment_date=date(CURRENT_YEAR - 1, 7, 15),
        )
        session.add(student)
        await session.flush()
        session.add(SavingsAccount(student_id=student.id, current_balance=0))
        students.append(student)
    await session.flush()
    print(f"  Created {len(students)} students and savings accounts.")
    return students


async def seed_teachers(session: AsyncSession, user_id: int | None) -> list[Teacher]:
    """Teachers, one assignment each and January salaries."""
    result = await session.execute(select(Teacher).limit(1))
    if result.scalar_one_or_none():
        print("  Teachers already exist, skip.")
        return []

    teachers = []
    for nip, name, gender, specialization, base_salary, hourly_rate in TEACHERS_DATA:
        teacher = Teacher(
            nip=nip,
            full_name=name,
            gender=gender.value,
            specialization=specialization,
            base_salary=base_salary,
            hourly_rate=hourly_rate,
            hire_date=date(2015, 7, 1),
        )
        session.add(teacher)
        await session.flush()
        session.add(TeacherAssignment(
            teacher_id=teacher.id,
            subject=specialization,
            class_name="7A",
            hours_per_week=6,
            academic_year=f"{CURRENT_YEAR - 1}/{CURRENT_YEAR}",
        ))
        additional, total = salary_total(base_salary, 4, hourly_rate)
        session.add(SalaryPayment(
            teacher_id=teacher.id,
            payment_month=1,
            payment_year=CURRENT_YEAR,
            base_amount=base_salary,
            additional_hours=4,
            additional_amount=additional,
            total_amount=total,
            payment_date=date(CURRENT_YEAR, 1, 28),
            processed_by=user_id,
        ))
        teachers.append(teacher)
    await session.flush()
    print(f"  Created {len(teachers)} teachers with assignments and salaries.")
    return teachers


async def seed_spp_and_savings(
    session: AsyncSession,
    num_gen: DocumentNumberGenerator,
    students: list[Student],
    user_id: int | None,
) -> None:
    """SPP for the first half year (later students skip a few months) and some savings."""
    count = 0
    for index, student in enumerate(students):
        last_month = PAID_MONTHS.stop - 1 - (index % 3)
        for month in range(PAID_MONTHS.start, last_month + 1):
            session.add(Transaction(
                transaction_type=TransactionType.SPP.value,
                student_id=student.id,
                amount=SPP_AMOUNT,
                transaction_date=date(CURRENT_YEAR, month, 10),
                category="SPP",
                description=f"SPP bulan {month}",
                payment_method="Tunai",
                receipt_number=await num_gen.generate(ReceiptPrefix.SPP, CURRENT_YEAR),
                processed_by=user_id,
            ))
            count += 1

        account = (
            await session.execute(
                select(SavingsAccount).where(SavingsAccount.student_id == student.id)
            )
        ).scalar_one()
        deposit = 100_000 * (index + 1)
        session.add(Transaction(
            transaction_type=TransactionType.SAVINGS_DEPOSIT.value,
            student_id=student.id,
            savings_account_id=account.id,
            amount=deposit,
            transaction_date=date(CURRENT_YEAR, 2, 1),
            category="Tabungan",
            description="Setoran awal",
            receipt_number=await num_gen.generate(ReceiptPrefix.SAVINGS, CURRENT_YEAR),
            processed_by=user_id,
        ))
        account.current_balance += deposit
    await session.flush()
    print(f"  Created {count} SPP payments and {len(students)} savings deposits.")


async def seed_donations_expenses_cash(
    session: AsyncSession, num_gen: DocumentNumberGenerator, user_id: int | None
) -> None:
    for donation_type, donor, amount, purpose in DONATIONS_DATA:
        session.add(Donation(
            donation_type=donation_type.value,
            donor_name=donor or ANONYMOUS_DONOR,
            donor_contact="",
            is_anonymous=donor is None,
            amount=amount,
            donation_date=date(CURRENT_YEAR, 1, 20),
            purpose=purpose,
            receipt_number=await num_gen.generate(ReceiptPrefix.ZISWAF, CURRENT_YEAR),
            recorded_by=user_id,
        ))

    for category, amount, description, vendor in EXPENSES_DATA:
        session.add(Expense(
            expense_category=category.value,
            amount=amount,
            expense_date=date(CURRENT_YEAR, 1, 25),
            description=description,
            payment_method="Tunai",
            vendor_name=vendor,
            approval_status=ApprovalStatus.APPROVED.value,
            approved_by=user_id,
            created_by=user_id,
        ))

    for transaction_type, amount, category, description in [
        (CashTransactionType.RECEIPT, 150_000, "Kas Kelas", "Iuran kas kelas 7A"),
        (CashTransactionType.DISBURSEMENT, 60_000, "Kas Kelas", "Beli spidol dan penghapus"),
    ]:
        session.add(CashTransaction(
            transaction_type=transaction_type.value,
            amount=amount,
            transaction_date=date(CURRENT_YEAR, 1, 15),
            category=category,
            description=description,
            receipt_number=await num_gen.generate(ReceiptPrefix.CASH, CURRENT_YEAR),
            processed_by=user_id,
        ))
    await session.flush()
    print(
        f"  Created {len(DONATIONS_DATA)} donations, {len(EXPENSES_DATA)} expenses "
        "and 2 cash transactions."
    )


async def run_seed(session: AsyncSession, dry_run: bool) -> None:
    role_to_id = await seed_users(session)
    user_id = role_to_id.get(UserRole.ADMIN.value)

    students = await seed_students(session)
    teachers = await seed_teachers(session, user_id)

    num_gen = DocumentNumberGenerator(session)
    if students:
        await seed_spp_and_savings(session, num_gen, students, user_id)
        await seed_donations_expenses_cash(session, num_gen, user_id)

    # Link the demo santri and guru accounts to their records
    if role_to_id and students and teachers:
        santri = await session.get(Profile, role_to_id[UserRole.SANTRI.value])
        santri.student_id = students[0].id
        guru = await session.get(Profile, role_to_id[UserRole.GURU.value])
        guru.teacher_id = teachers[0].id
        await session.flush()

    if dry_run:
        await session.rollback()
        print("\n[DRY-RUN] Rolled back, no data written.")
    else:
        await session.commit()
        print("\nSeed completed successfully.")


async def main() -> None:
    import argparse
    parser = argparse.ArgumentParser(description="Seed database with pesantren demo data")
    parser.add_argument("--dry-run", action="store_true", help="Do not commit")
    parser.add_argument("--confirm", action="store_true", help="Commit changes")
    args = parser.parse_args()
    if not args.dry_run and not args.confirm:
        print("Use --dry-run or --confirm")
        sys.exit(1)

    print("Database:", settings.database_url.split("@")[-1] if "@" in settings.database_url else "?")
    print("Mode:", "DRY-RUN" if args.dry_run else "CONFIRM")
    async with async_session() as session:
        await run_seed(session, dry_run=args.dry_run)
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
