"""
Workflow error kinds.

Every failure a workflow can surface is one of these. ValidationFailure
carries the field-keyed message map shown to the submitter; the others carry
an internal `detail` for the logs and a generic `public_message` for clients.
"""

from typing import Dict, List, Optional


class TugzaError(Exception):
    """Base class for workflow errors"""
    status_code = 500
    error = "error"
    public_message = "Something went wrong. Please try again later."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.public_message
        super().__init__(self.detail)


class ValidationFailure(TugzaError):
    status_code = 422
    error = "validation_failure"
    public_message = "Submitted data is invalid"

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid fields: {fields}")


class NotFound(TugzaError):
    status_code = 404
    error = "not_found"
    public_message = "Not found"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail)
        # Not-found messages are safe to show as-is
        self.public_message = self.detail


class UpstreamFailure(TugzaError):
    status_code = 502
    error = "upstream_failure"
    public_message = "An external service is unavailable. Please try again later."


class PersistenceFailure(TugzaError):
    status_code = 500
    error = "persistence_failure"
    public_message = "We could not save your request. Please try again later."


class AuthorizationFailure(TugzaError):
    status_code = 401
    error = "authorization_failure"
    public_message = "Could not validate credentials"
