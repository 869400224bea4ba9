"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Requested record does not exist for this owner"""

    pass


class LoanNotFoundError(NotFoundError):
    pass


class BillNotFoundError(NotFoundError):
    pass


class SavingsAccountNotFoundError(NotFoundError):
    pass


class PaymentNotFoundError(NotFoundError):
    """No recorded payment on the given date"""

    pass


class PaymentOrderError(DomainException):
    """Installment is not the earliest unpaid one (sequential payoff)"""

    pass
