"""
Domain exceptions raised at the HTTP boundary from failed service results.

Routes may intercept them (NotFoundError -> 404); anything they let
through is rendered by the handlers in utils.error_handling.
"""


class ServiceError(Exception):
    """Base class for all service-level failures"""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    """A required field is missing or invalid"""


class NotFoundError(ServiceError):
    """The referenced user does not exist"""


class UserValidationError(ValidationError):
    """Shape validation failed for one or more request fields"""

    def __init__(self, fields: dict) -> None:
        self.fields = fields
        super().__init__("Invalid data provided")
