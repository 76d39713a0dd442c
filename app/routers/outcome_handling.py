# /app/routers/outcome_handling.py

"""Translates failed service outcomes into HTTP errors for the routers."""

from fastapi import HTTPException, status

from app.core.errors import (
    DependencyError, NotFoundError, Outcome, PersistenceError, ServiceError, UniquenessError, ValidationError
)

_STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UniquenessError, status.HTTP_409_CONFLICT),
    (DependencyError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def http_error_for(error: ServiceError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=PersistenceError().message)


def unwrap(outcome: Outcome):
    """Returns the outcome's value or raises the matching HTTPException."""
    if not outcome:
        raise http_error_for(outcome.error)
    return outcome.value
