"""
Application error taxonomy

Services raise these; routes map them to HTTP status codes and echo
``message`` back to the client.
"""
from typing import Any, Dict, Optional


class ApplicationError(Exception):
    """Base class for errors surfaced to API clients"""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.meta = meta or {}
        super().__init__(self.message)


# ============================================================================
# Database
# ============================================================================

class DatabaseError(ApplicationError):
    """Unexpected failure while talking to the database"""


class DatabaseValidationError(ApplicationError):
    """Document failed a database-level validation"""

    default_message = "Validation of the document failed."


class DatabaseConflictError(ApplicationError):
    """Write conflicted with an existing record"""

    default_message = "Conflict detected while saving the document."


# ============================================================================
# Workspaces
# ============================================================================

class WorkspaceNotFoundError(ApplicationError):
    default_message = "Workspace not found"


class ForbiddenWorkspaceError(ApplicationError):
    default_message = "You are not allowed to access this workspace"


# ============================================================================
# Forms
# ============================================================================

class FormNotFoundError(ApplicationError):
    default_message = "Form not found"


class ForbiddenFormError(ApplicationError):
    default_message = "You are not allowed to access this form"


class PrivateFormError(ApplicationError):
    """Form exists but is not open for public responses"""

    default_message = "This form is no longer active"

    def __init__(self, message: Optional[str] = None, form_title: Optional[str] = None):
        super().__init__(message, meta={"form_title": form_title})
        self.form_title = form_title


class SubmissionPreventedError(ApplicationError):
    """Form logic blocks the submission"""

    default_message = "Submission disabled"


class InvalidSubmissionError(ApplicationError):
    default_message = "Submission is missing required answers"
