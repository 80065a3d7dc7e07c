"""Custom exception classes for TaskDesk."""

from fastapi import HTTPException, status


class TaskDeskError(Exception):
    """Base exception for TaskDesk."""

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class ResourceNotFoundError(TaskDeskError):
    """Raised when a requested row does not exist."""
    pass


class ResourceConflictError(TaskDeskError):
    """Raised when a row already exists or violates a constraint."""
    pass


class ValidationError(TaskDeskError):
    """Raised when input validation fails."""
    pass


# HTTP exception shortcuts
def not_found(detail: str = "Resource not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def conflict(detail: str = "Resource conflict") -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def bad_request(detail: str = "Bad request") -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def service_unavailable(detail: str = "Database unavailable") -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
