from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, StatementError
from sqlmodel import Session

from devblog.errors import ConstraintViolationError, TransportFailureError


logger = logging.getLogger(__name__)


@contextmanager
def store_errors(session: Session, action: str) -> Iterator[None]:
    """Translate database driver errors raised inside the block.

    The session is rolled back before the translated error propagates so it
    stays usable for the rest of the request.
    """
    try:
        yield
    except IntegrityError as exc:
        session.rollback()
        logger.warning("Constraint violated while trying to %s: %s", action, exc.orig)
        raise ConstraintViolationError(str(exc.orig)) from exc
    except StatementError as exc:
        session.rollback()
        logger.exception("Store failure while trying to %s", action)
        raise TransportFailureError(f"Could not {action}") from exc
