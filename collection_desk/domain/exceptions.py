"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidSearchOptionsError(DomainException):
    """Search options failed validation"""

    pass


class InvalidWeightsError(DomainException):
    """Recommendation weights failed validation"""

    pass
