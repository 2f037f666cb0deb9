# paper_soccer/exceptions/__init__.py

from paper_soccer.exceptions.domain_exceptions import (
    DomainException,
    NotFoundException,
    BadRequestException,
    ValidationException,
)

__all__ = [
    'DomainException',
    'NotFoundException',
    'BadRequestException',
    'ValidationException',
]
