"""Typed failures raised by the query service.

Absence is not an error: lookups return ``None`` and listings return ``[]``.
Everything else that goes wrong while talking to the database is raised as
one of the classes below, chained to the driver error that caused it.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import ValidationError
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError  # not the builtin TimeoutError

logger = logging.getLogger(__name__)


class LightBnBError(Exception):
    """Base class for every failure surfaced by lightbnb."""

    retryable = False

    def __init__(self, operation: str, detail: str):
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail


class ConstraintViolationError(LightBnBError):
    """The store rejected a write, e.g. a duplicate email or a dangling foreign key."""


class ConnectivityError(LightBnBError):
    """The database could not be reached or dropped the connection."""

    retryable = True


class MalformedInputError(LightBnBError):
    """The caller passed input that cannot be turned into a valid statement."""


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise database and validation errors as :class:`LightBnBError` subclasses."""
    try:
        yield
    except LightBnBError:
        raise
    except ValidationError as e:
        logger.warning("%s rejected input: %s", operation, e)
        raise MalformedInputError(operation, str(e)) from e
    except IntegrityError as e:
        logger.warning("%s violated a constraint: %s", operation, e.orig)
        raise ConstraintViolationError(operation, str(e.orig)) from e
    except (OperationalError, InterfaceError) as e:
        logger.exception("%s failed", operation)
        raise ConnectivityError(operation, str(e.orig)) from e
    except PoolTimeoutError as e:
        # No pooled connection freed up within pool_timeout.
        logger.exception("%s failed", operation)
        raise ConnectivityError(operation, str(e)) from e
    except (DataError, ProgrammingError) as e:
        logger.exception("%s failed", operation)
        raise MalformedInputError(operation, str(e.orig)) from e
    except DBAPIError as e:
        logger.exception("%s failed", operation)
        if e.connection_invalidated:
            raise ConnectivityError(operation, str(e.orig)) from e
        raise LightBnBError(operation, str(e.orig)) from e
    except OSError as e:
        # asyncpg raises plain socket errors when the server refuses the connection.
        logger.exception("%s failed", operation)
        raise ConnectivityError(operation, str(e)) from e
