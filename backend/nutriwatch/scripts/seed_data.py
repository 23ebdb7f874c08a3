"""Module: seed_data."""

from faker import Faker
import random
import string
from datetime import date, datetime, timedelta
from sqlalchemy import delete

from nutriwatch.db.init_db import init_db
from nutriwatch.db.session import SessionLocal

from nutriwatch.db.models.student import Student
from nutriwatch.db.models.bmi_record import BmiRecord
from nutriwatch.db.models.feeding_program import FeedingProgram
from nutriwatch.db.models.beneficiary import Beneficiary
from nutriwatch.db.models.attendance import Attendance

from nutriwatch.nutrition import (
    ExclusionScope,
    age_years_at,
    baselines_per_student,
    classify_measurement,
    eligible_students,
    latest_per_student,
)

fake = Faker()

SECTIONS = ["Sampaguita", "Rosal", "Ilang-Ilang", "Gumamela", "Dama de Noche"]

# Typical height (cm) at the start of each grade, Kinder = 0.
GRADE_BASE_HEIGHT = {0: 108, 1: 114, 2: 120, 3: 126, 4: 131, 5: 137, 6: 143}


def generate_lrn() -> str:
    return "".join(random.choice(string.digits) for _ in range(12))


def generate_ph_mobile() -> str:
    # Philippine mobile format: 09 + 9 digits
    return "09" + "".join(random.choice(string.digits) for _ in range(9))


def reset_db(session) -> None:
    # Children first so FK dependencies delete cleanly on any backend.
    for model in (Attendance, Beneficiary, FeedingProgram, BmiRecord, Student):
        session.execute(delete(model))
    session.commit()


def seed_students(session, per_grade: int = 30) -> list[Student]:
    students: list[Student] = []
    used_lrns: set[str] = set()
    today = date.today()

    for grade in range(0, 7):
        for _ in range(per_grade):
            lrn = generate_lrn()
            while lrn in used_lrns:
                lrn = generate_lrn()
            used_lrns.add(lrn)

            gender = random.choice(["Male", "Female"])
            # Kinder pupils are about 5; each grade adds a year.
            birthdate = today - timedelta(days=365 * (5 + grade) + random.randint(0, 364))
            students.append(Student(
                lrn=lrn,
                first_name=fake.first_name_male() if gender == "Male" else fake.first_name_female(),
                middle_name=fake.last_name(),
                last_name=fake.last_name(),
                gender=gender,
                birthdate=birthdate,
                grade_level=grade,
                section=random.choice(SECTIONS),
                parent_guardian=fake.name(),
                contact_number=generate_ph_mobile(),
            ))

    session.add_all(students)
    session.commit()
    return students


def seed_bmi_records(session, students: list[Student], weigh_ins: int = 3) -> list[BmiRecord]:
    # Quarterly weigh-ins; a minority of pupils are deliberately under- or over-weight.
    records: list[BmiRecord] = []
    now = datetime.utcnow().replace(microsecond=0)

    for s in students:
        base_height = GRADE_BASE_HEIGHT.get(s.grade_level, 120) + random.gauss(0, 6)
        target_bmi = random.choices(
            population=[random.uniform(12.0, 13.4), random.uniform(13.5, 18.4), random.uniform(18.5, 26.0)],
            weights=[0.18, 0.7, 0.12],
            k=1,
        )[0]

        for i in range(weigh_ins):
            measured_at = now - timedelta(days=90 * (weigh_ins - 1 - i) + random.randint(0, 6))
            height_cm = round(base_height + 1.5 * i, 1)
            weight_kg = round(target_bmi * (height_cm / 100) ** 2 + random.gauss(0, 0.4), 1)

            age_years = age_years_at(s.birthdate, s.age, measured_at.date())
            status = classify_measurement(weight_kg, height_cm, age_years)
            records.append(BmiRecord(
                student_id=s.student_id,
                weight_kg=weight_kg,
                height_cm=height_cm,
                bmi=status.bmi,
                bmi_status=status.bmi_status.value,
                hfa_status=status.hfa_status.value,
                measured_at=measured_at,
                source=random.choice(["manual", "sensor"]),
            ))

    session.add_all(records)
    session.commit()
    return records


def seed_feeding_program(session, records: list[BmiRecord]) -> tuple[FeedingProgram, int]:
    # One running program seeded with everyone who currently qualifies.
    start = date.today() - timedelta(days=30)
    program = FeedingProgram(
        name=f"School-Based Feeding Program SY {start.year}-{start.year + 1}",
        description="Daily hot meal for wasted and stunted learners.",
        start_date=start,
        end_date=start + timedelta(days=120),
        status="active",
    )
    session.add(program)
    session.commit()

    latest = latest_per_student(records)
    eligible = eligible_students(latest, [], [program], scope=ExclusionScope.GLOBAL, today=date.today())

    baselines = baselines_per_student(records, {e.student_id: start for e in eligible})

    beneficiaries: list[Beneficiary] = []
    for e in eligible:
        baseline = baselines.get(e.student_id)
        beneficiaries.append(Beneficiary(
            program_id=program.program_id,
            student_id=e.student_id,
            enrollment_date=start,
            bmi_status_at_enrollment=baseline.bmi_status if baseline else None,
            hfa_status_at_enrollment=baseline.hfa_status if baseline else None,
        ))
    session.add_all(beneficiaries)
    session.commit()

    attendance: list[Attendance] = []
    for b in beneficiaries:
        for day in range(0, 30):
            attended_on = start + timedelta(days=day)
            if attended_on.weekday() >= 5:
                continue
            attendance.append(Attendance(
                beneficiary_id=b.beneficiary_id,
                attendance_date=attended_on,
                present=random.random() < 0.9,
            ))
    session.add_all(attendance)
    session.commit()

    return program, len(beneficiaries)


if __name__ == "__main__":
    # Full reseed: python -m nutriwatch.scripts.seed_data
    init_db()
    session = SessionLocal()
    try:
        print("Resetting tables...")
        reset_db(session)

        print("Seeding students (30 per grade, Kinder to Grade 6)...")
        students = seed_students(session, 30)

        print("Seeding BMI records (3 weigh-ins each)...")
        records = seed_bmi_records(session, students, 3)

        print("Seeding feeding program + beneficiaries + attendance...")
        program, enrolled_n = seed_feeding_program(session, records)

        print(
            f"Done. students={len(students)}, bmi_records={len(records)}, "
            f"program='{program.name}', beneficiaries={enrolled_n}"
        )
    finally:
        session.close()
