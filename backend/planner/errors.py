# backend/planner/errors.py
from typing import List, Optional


class PlannerError(Exception):
    """Base class for errors raised by the planner core."""


class ValidationError(PlannerError):
    """
    A user-correctable rejection (bad input, subject not owned, duplicate name, ...).
    `errors` keeps every individual message; str(exc) joins them.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors) if errors else [message]
        super().__init__(message)


class SubjectInUseError(ValidationError):
    """Raised when deleting a subject that still has tasks."""
