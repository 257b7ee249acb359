from __future__ import annotations

import contextlib
from typing import Iterator

from sqlalchemy.orm import Session

from engagement.db import get_session_factory


@contextlib.contextmanager
def db_session() -> Iterator[Session]:
    """Session scope for code running outside a request (scripts, workers)."""
    db = get_session_factory()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
