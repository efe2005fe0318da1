class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ResourceNotFoundError(AppError):
    """Raised when a referenced timetable, curriculum or reference record does not exist."""
    def __init__(self, resource_type: str, resource_id: str, message: str | None = None):
        super().__init__(
            message or f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id

class EntryValidationError(AppError):
    """Raised when a placement request is missing required fields or carries invalid values."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class ScheduleConflictError(AppError):
    """Raised when a placement collides with an existing entry on a lecturer, room or group."""
    collision = "conflict"

    def __init__(
        self,
        message: str,
        *,
        resource_type: str,
        resource_id: str,
        resource_name: str,
        conflicting_entry_id: str,
        dates: list[str] | None = None,
    ):
        super().__init__(
            message,
            status_code=409,
            details={
                "collision": self.collision,
                "resource_type": resource_type,
                "resource_id": resource_id,
                "resource_name": resource_name,
                "conflicting_entry_id": conflicting_entry_id,
                "dates": dates or [],
            },
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.resource_name = resource_name
        self.conflicting_entry_id = conflicting_entry_id

class RecurringCollisionError(ScheduleConflictError):
    """Conflict where at least one side recurs every week."""
    collision = "recurring"

class SpecificDateCollisionError(ScheduleConflictError):
    """Conflict where both sides are date-scoped and share at least one calendar date."""
    collision = "specific_date"

class TimetableLockedError(AppError):
    """Raised when a published timetable receives an entry mutation."""
    def __init__(self, timetable_id: str, status: str = "published"):
        super().__init__(
            "Timetable is published; switch it back to draft before editing",
            status_code=409,
            details={"timetable_id": timetable_id, "status": status},
        )

class InvalidStatusTransitionError(AppError):
    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change timetable status from {current} to {requested}",
            status_code=400,
            details={"current": current, "requested": requested},
        )

class ConcurrentModificationError(AppError):
    """Raised when an entry was changed by another session between read and write."""
    def __init__(self, entity_id: str):
        super().__init__(
            "Schedule entry was modified concurrently; reload and try again",
            status_code=409,
            details={"entity_id": entity_id},
        )
