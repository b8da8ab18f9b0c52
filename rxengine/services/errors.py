"""Domain errors for prescription operations.

Each operation raises only the errors of its own family. All of them are
recoverable by the caller and are translated to JSON responses by the
application exception handler.
"""

from fastapi import status


class PrescriptionError(Exception):
    """Base class for prescription domain errors."""

    code = "PRESCRIPTION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Prescription action not allowed"

    def __init__(self, message: str = None, prescription_id: str = None):
        self.message = message or self.default_message
        self.prescription_id = prescription_id
        super().__init__(self.message)


# Reorder

class ReorderError(PrescriptionError):
    """Prescription cannot be used to refill the cart."""


class ReorderNotApprovedError(ReorderError):
    code = "NOT_APPROVED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Prescription has not been approved by a pharmacist"


class ReorderExpiredError(ReorderError):
    code = "EXPIRED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Prescription has expired. Please upload a new prescription to reorder."


# Review

class ReviewError(PrescriptionError):
    """Admin review decision cannot be applied."""


class ReviewAlreadyFinalError(ReviewError):
    code = "ALREADY_FINAL"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Prescription has already been reviewed"


class ReviewMissingPrescriptionDateError(ReviewError):
    code = "MISSING_PRESCRIPTION_DATE"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Prescription has no issue date and cannot be reviewed"


# Reminder

class ReminderError(PrescriptionError):
    """Expiry reminder cannot be scheduled."""


class ReminderNotEligibleError(ReminderError):
    code = "NOT_ELIGIBLE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Reminders are only available for active prescriptions. Please upload a new prescription."


class ReminderInvalidWindowError(ReminderError):
    code = "INVALID_WINDOW"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Reminder must be set between 1 day and the remaining validity of the prescription"
