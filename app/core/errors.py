# /app/core/errors.py

"""
Error taxonomy shared by the validation, repository and coordinator layers.

Business-rule failures are raised inside a transaction and converted into
failed `Outcome` values by the coordinator, so callers never see a partial
write. `PersistenceError` is the only kind produced for infrastructure faults,
and its message never includes driver details.
"""

from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class ServiceError(Exception):
    """Base class for every failure the services report to their callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    pass


class RequiredFieldMissing(ValidationError):
    def __init__(self, field: str):
        super().__init__(f"Field '{field}' is required.")
        self.field = field


class FormatError(ValidationError):
    pass


class PolicyError(ValidationError):
    pass


class UniquenessError(ServiceError):
    pass


class DependencyError(ServiceError):
    def __init__(self, message: str, dependency: Optional[str] = None):
        super().__init__(message)
        self.dependency = dependency


class NotFoundError(ServiceError):
    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} with ID {entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id


class PersistenceError(ServiceError):
    def __init__(self, message: str = "The operation could not be completed. Please try again."):
        super().__init__(message)


class Outcome(Generic[T]):
    """
    Result of a write operation: either a value or a `ServiceError`.

    An outcome is truthy only when it succeeded, so `if not outcome:` reads the
    same way the old boolean return values did.
    """

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[ServiceError] = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ServiceError) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        if self.ok:
            return f"Outcome(value={self.value!r})"
        return f"Outcome(error={type(self.error).__name__}: {self.error.message!r})"
