from typing import Any, Generator

from sqlalchemy.orm import Session

from dms.db.session import SessionLocal


def get_db() -> Generator[Session, Any, None]:
    """
    Provide a database session for the duration of a request or script run.

    Uncommitted changes are rolled back when the session is closed.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
