from contextlib import contextmanager

from library_api.extensions import db


@contextmanager
def atomic():
    """Commit everything done in the block, or roll all of it back."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
