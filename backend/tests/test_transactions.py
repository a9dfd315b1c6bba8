import pytest

from marketplace.models.user import User
from marketplace.utils.transactions import smart_transaction


def _emails(session_factory):
    s = session_factory()
    try:
        return sorted(u.email for u in s.query(User).all())
    finally:
        s.close()


def test_commits_after_earlier_read(session_factory):
    s = session_factory()
    try:
        s.query(User).count()
        assert s.in_transaction()

        with smart_transaction(s):
            s.add(User(name="Carla", email="carla@example.com"))
        assert not s.in_transaction()
    finally:
        s.close()

    assert _emails(session_factory) == ["carla@example.com"]


def test_inner_block_rolls_back_alone(session_factory):
    s = session_factory()
    try:
        with smart_transaction(s):
            s.add(User(name="Outer", email="outer@example.com"))
            with pytest.raises(RuntimeError):
                with smart_transaction(s):
                    s.add(User(name="Inner", email="inner@example.com"))
                    s.flush()
                    raise RuntimeError("boom")
    finally:
        s.close()

    assert _emails(session_factory) == ["outer@example.com"]


def test_failure_rolls_back_everything(session_factory):
    s = session_factory()
    try:
        with pytest.raises(RuntimeError):
            with smart_transaction(s):
                s.add(User(name="Gone", email="gone@example.com"))
                s.flush()
                raise RuntimeError("boom")
        # depth is restored, so the next block is top-level again
        with smart_transaction(s):
            s.add(User(name="Kept", email="kept@example.com"))
    finally:
        s.close()

    assert _emails(session_factory) == ["kept@example.com"]
