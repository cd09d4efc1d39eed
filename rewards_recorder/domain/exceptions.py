"""Domain-specific exceptions"""

from typing import Dict


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AwardValidationError(DomainException):
    """One or more submitted award fields failed validation"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))
        self.errors = errors


class RedemptionBlocked(DomainException):
    """Award has expired and can no longer be marked as redeemed"""

    pass


class MalformedImport(DomainException):
    """Import file contains no usable award records"""

    pass


class StorageError(DomainException):
    """Key-value store could not be read or written"""

    pass
