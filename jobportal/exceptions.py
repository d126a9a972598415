"""
Domain exception hierarchy.

Each exception carries the HTTP status it maps to; ``main`` registers one
handler for the base class.
"""
from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationException(DomainException):
    """Missing/malformed input or a business-rule violation"""

    status_code = status.HTTP_400_BAD_REQUEST


InvalidRequest = ValidationException


class DuplicateResourceException(ValidationException):
    """Resource already exists"""

    def __init__(self, message: str, resource_type: str = "", field: str = ""):
        self.resource_type = resource_type
        self.field = field
        super().__init__(message)


class AuthenticationException(DomainException):
    """Missing or invalid credentials"""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationException(DomainException):
    """Authenticated, but not allowed to perform this operation"""

    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource_type: str, identifier=None):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found")
