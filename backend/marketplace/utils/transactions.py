from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

_DEPTH_KEY = "smart_transaction_depth"


@contextmanager
def smart_transaction(session: Session) -> Iterator[Session]:
    """
    Run the enclosed block as one unit of work on `session`.

    Inside another smart_transaction block a SAVEPOINT is used so the outer
    block keeps control of the final commit. Otherwise a top-level transaction
    is started and committed on exit; a transaction the session autobegun for
    earlier reads is committed first. Any exception rolls back to where the
    block began.

    Usage:
        with smart_transaction(db):
            ... DB work ...
    """
    depth = session.info.get(_DEPTH_KEY, 0)
    if depth:
        cm = session.begin_nested()
    else:
        if session.in_transaction():
            session.commit()
        cm = session.begin()
    session.info[_DEPTH_KEY] = depth + 1
    try:
        with cm:
            yield session
    finally:
        session.info[_DEPTH_KEY] = depth
