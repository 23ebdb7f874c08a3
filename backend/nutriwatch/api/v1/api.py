"""Module: api."""

from fastapi import APIRouter

# Operational routes.
from nutriwatch.api.v1.routes.health import router as health_router
from nutriwatch.api.v1.routes.sensor import router as sensor_router

# Nutrition monitoring routes used by the school dashboard pages.
from nutriwatch.api.v1.routes.students import router as students_router
from nutriwatch.api.v1.routes.bmi_records import router as bmi_records_router
from nutriwatch.api.v1.routes.feeding_programs import router as feeding_programs_router
from nutriwatch.api.v1.routes.kpi import router as kpi_router
from nutriwatch.api.v1.routes.dashboard import router as dashboard_router
from nutriwatch.api.v1.routes.reports import router as reports_router


api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(sensor_router, prefix="/sensor", tags=["sensor"])

api_router.include_router(students_router, prefix="/students", tags=["students"])
api_router.include_router(bmi_records_router, prefix="/bmi-records", tags=["bmi-records"])
api_router.include_router(feeding_programs_router, prefix="/feeding-programs", tags=["feeding-programs"])
api_router.include_router(kpi_router, prefix="/kpi-summary", tags=["kpi"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
