# paper_soccer/exceptions/domain_exceptions.py

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base class for all paper soccer domain exceptions"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Exception raised when a requested game type is not registered"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details)


class BadRequestException(DomainException):
    """Exception raised when a game cannot be created from the given configuration"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details)


class ValidationException(DomainException):
    """Exception raised when a scripted scenario contains an illegal move"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, details=details)
