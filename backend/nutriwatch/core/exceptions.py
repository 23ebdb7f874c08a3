"""Custom exceptions raised by the HTTP layer."""

from typing import Any, Dict, Optional

from fastapi import HTTPException


class NutriWatchException(HTTPException):
    """Base exception for request-level failures."""
    def __init__(
        self,
        status_code: int,
        detail: Any,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class InvalidIdentifier(NutriWatchException):
    def __init__(self, field_name: str = "id"):
        super().__init__(status_code=400, detail=f"Invalid {field_name} (must be UUID)")


class StudentNotFound(NutriWatchException):
    def __init__(self):
        super().__init__(status_code=404, detail="Student not found")


class ProgramNotFound(NutriWatchException):
    def __init__(self):
        super().__init__(status_code=404, detail="Feeding program not found")


class BeneficiaryNotFound(NutriWatchException):
    def __init__(self):
        super().__init__(status_code=404, detail="No beneficiary found with that ID")


class DuplicateEnrollment(NutriWatchException):
    """Student is already on the program's roster."""
    def __init__(self):
        super().__init__(status_code=409, detail="Student is already enrolled in this program")


class MeasurementValidationError(NutriWatchException):
    """Weight/height/BMI outside the range accepted for a student."""
    def __init__(self, message: str, field: Optional[str] = None):
        detail = {"error": "Validation Error", "message": message}
        if field:
            detail["field"] = field
        super().__init__(status_code=400, detail=detail)
