# backend/nutriwatch/db/models/__init__.py

from nutriwatch.db.models.student import Student
from nutriwatch.db.models.bmi_record import BmiRecord
from nutriwatch.db.models.feeding_program import FeedingProgram
from nutriwatch.db.models.beneficiary import Beneficiary
from nutriwatch.db.models.attendance import Attendance
