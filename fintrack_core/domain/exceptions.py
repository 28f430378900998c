"""Domain-specific exceptions"""

from typing import Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """A precondition on the arguments of a domain operation was violated"""

    pass


class MissingUserError(InvalidArgumentError):
    """No acting user was supplied for a write operation"""

    def __init__(self, message: str = "user ID is required"):
        super().__init__(message)


class ValidationError(DomainException):
    """Payload failed structural validation"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        detail = "; ".join(f"{field}: {reason}" for field, reason in sorted(self.errors.items()))
        super().__init__(f"validation failed: {detail}")


class InvalidReferenceError(DomainException):
    """Referenced account, category or tag is missing or belongs to another tenant"""

    def __init__(self, field: str, message: str, reference_id: Optional[str] = None):
        self.field = field
        self.reference_id = reference_id
        super().__init__(message)


class NotFoundError(DomainException):
    """Entity does not exist, is deactivated, or is owned by another tenant"""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class TransactionNotFoundError(NotFoundError):
    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__("transaction", transaction_id)


class PersistenceError(DomainException):
    """The database failed to read or write"""

    pass
