import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campusmatch.core.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_in_transaction(
    db: AsyncSession,
    work: Callable[[], Awaitable[T]],
    *,
    operation: str,
    attempts: int = 1,
) -> T:
    """Runs ``work`` and commits it as a single unit.

    Any failure rolls the whole unit back, so callers never observe a partial
    write. An ``IntegrityError`` means a concurrent request committed a
    conflicting row first; the unit is re-run from scratch (up to
    ``attempts`` times) so it can observe that row. Domain errors propagate
    unchanged, other database errors surface as ``PersistenceError``.
    """
    last_error: Exception | None = None
    for attempt in range(1, max(attempts, 1) + 1):
        try:
            result = await work()
            await db.commit()
            return result
        except DomainError:
            await db.rollback()
            raise
        except IntegrityError as e:
            await db.rollback()
            last_error = e
            logger.warning(f"{operation}: integrity conflict on attempt {attempt}/{attempts}: {e.orig}")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"{operation}: database error, transaction rolled back: {e}", exc_info=True)
            raise PersistenceError(f"Could not complete {operation}.") from e

    logger.error(f"{operation}: giving up after {attempts} attempt(s)")
    raise PersistenceError(f"Could not complete {operation}.") from last_error
