from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from lendify.extensions import db
from lendify.exceptions import LedgerError, StoreError


@contextmanager
def unit_of_work(name: str):
    """
    One all-or-nothing sequence of reads/writes against the store.

    Commits when the block exits normally. On any exception every write of
    the block is rolled back (row locks are released with it):
    - LedgerError subclasses are re-raised unchanged,
    - SQLAlchemy failures are surfaced as StoreError,
    - anything else propagates as is.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except LedgerError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.exception(f"[{name}] store failure, rolled back: {e}")
        raise StoreError(f"{name} failed, nothing was changed") from e
    except Exception:
        session.rollback()
        raise
