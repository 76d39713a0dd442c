# /app/services/database_helpers/transaction.py

"""
The consistency coordinator. Every multi-statement write runs through
`run_in_transaction`, which commits once at the end or rolls everything back.

Repositories never commit on their own; they only `flush()` so generated ids
become visible to later statements inside the same unit of work.
"""

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import Outcome, PersistenceError, ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_in_transaction(session: Session, fn: Callable[[], T], description: str = "write") -> Outcome[T]:
    """
    Executes `fn` and commits. Business-rule errors raised by `fn` roll back and
    come back as a failed outcome; database errors roll back, get logged with
    their traceback, and come back as a generic `PersistenceError`.
    """
    try:
        value = fn()
        session.commit()
    except ServiceError as e:
        session.rollback()
        logger.info("%s rejected: %s", description, e.message)
        return Outcome.failure(e)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("%s failed, transaction rolled back", description)
        return Outcome.failure(PersistenceError())
    except Exception:
        session.rollback()
        raise
    return Outcome.success(value)
