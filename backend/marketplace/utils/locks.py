import os
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from filelock import FileLock, Timeout

from marketplace.config import settings
from marketplace.services.errors import ConflictError


def _lock_path(kind: str, key: Union[int, str]) -> str:
    locks_dir = os.path.join(tempfile.gettempdir(), settings.LOCKS_DIR_NAME)
    os.makedirs(locks_dir, exist_ok=True)
    return os.path.join(locks_dir, f"{kind}_{key}.lock")


@contextmanager
def aggregate_lock(
    kind: str, key: Union[int, str], timeout: Optional[float] = None
) -> Iterator[None]:
    """
    Serialize writers of one aggregate (a client's cart, a single order) across
    threads and worker processes. Complements the row lock taken with
    with_for_update(), which SQLite silently ignores.
    """
    timeout = settings.LOCK_TIMEOUT_SECONDS if timeout is None else timeout
    lock = FileLock(_lock_path(kind, key))
    try:
        with lock.acquire(timeout=timeout):
            yield
    except Timeout:
        raise ConflictError(f"{kind} {key} is being modified by another request; try again")


def cart_lock(user_id: int, timeout: Optional[float] = None):
    return aggregate_lock("cart", user_id, timeout=timeout)


def order_lock(order_id: int, timeout: Optional[float] = None):
    return aggregate_lock("order", order_id, timeout=timeout)
