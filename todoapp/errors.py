from typing import Optional


class TaskServiceError(Exception):
    """Base for errors that map straight onto an HTTP response."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"detail": self.detail}


class Unauthorized(TaskServiceError):
    status_code = 401
    default_detail = "Unauthorized"


class ValidationError(TaskServiceError):
    status_code = 400
    default_detail = "Invalid input"

    def __init__(self, field: str, detail: Optional[str] = None):
        self.field = field
        super().__init__(detail)

    def to_dict(self) -> dict:
        return {"detail": self.detail, "field": self.field}


class NotFound(TaskServiceError):
    # Same message whether the task is missing or owned by someone else.
    status_code = 404
    default_detail = "Task not found"


class StoreFailure(TaskServiceError):
    status_code = 500
    default_detail = "Storage error, please retry"
