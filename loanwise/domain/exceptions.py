"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInput(DomainException):
    """Loan input is malformed or out of range (not a business rejection)"""

    pass


class LoanNotFoundError(DomainException):
    """Loan does not exist or belongs to another user"""

    pass


class ScheduleUnavailableError(DomainException):
    """Repayment schedule requested for a loan that was never sanctioned"""

    pass


class InvalidUploadError(DomainException):
    """Uploaded bill file is too large or of an unsupported type"""

    pass


class InvalidStatusTransitionError(DomainException):
    """Requested loan status change is not allowed from the current status"""

    pass
