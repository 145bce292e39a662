# backend/app/routers/errors.py

import logging
from contextlib import contextmanager

from fastapi import HTTPException

from ..services.slots import AmbiguousTimeFormat, SchedulingError

logger = logging.getLogger(__name__)


@contextmanager
def scheduling_errors():
    """Translate engine errors into HTTP errors."""
    try:
        yield
    except AmbiguousTimeFormat as e:
        # Stored booking data is corrupt, not a client mistake
        logger.error(f"Unparseable stored time {e.value!r}")
        raise HTTPException(
            status_code=500,
            detail={"code": e.code, "message": str(e)},
        ) from e
    except SchedulingError as e:
        logger.warning(f"Scheduling error: {e}")
        raise HTTPException(
            status_code=422,
            detail={"code": e.code, "message": str(e)},
        ) from e
