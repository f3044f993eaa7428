"""Ledger-related domain exceptions."""

from .base import DomainException


class InvalidInputException(DomainException):
    """Raised when a required field is empty or an amount is not positive."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
        )


class NotFoundException(DomainException):
    """Raised when a referenced ledger record does not exist."""

    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message=message, code=code)


class BuyerNotFoundException(NotFoundException):
    """Raised when no profile exists for a buyer identifier."""

    def __init__(self, buyer_id: str):
        super().__init__(
            message=f"Buyer not found: {buyer_id}",
            code="BUYER_NOT_FOUND",
        )
        self.buyer_id = buyer_id


class TransactionNotFoundException(NotFoundException):
    """Raised when a buyer has no transaction with the given id."""

    def __init__(self, buyer_id: str, transaction_id: str):
        super().__init__(
            message=f"Transaction {transaction_id} not found for buyer {buyer_id}",
            code="TRANSACTION_NOT_FOUND",
        )
        self.buyer_id = buyer_id
        self.transaction_id = transaction_id


class AlreadySettledException(DomainException):
    """Raised when settling a transaction that is already paid."""

    def __init__(self, buyer_id: str, transaction_id: str):
        super().__init__(
            message=f"Transaction {transaction_id} for buyer {buyer_id} is already settled",
            code="ALREADY_SETTLED",
        )
        self.buyer_id = buyer_id
        self.transaction_id = transaction_id


class OperationNotPermittedException(DomainException):
    """Raised when a disabled administrative operation is requested."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="OPERATION_NOT_PERMITTED",
        )
