# tests/conftest.py
"""
Shared pytest fixtures for the AVL trace tests.

Provides:
- tree builders
- a Flask test client bound to a fresh session
"""
import pytest

from avltrace.simulator import build


@pytest.fixture
def make_tree():
    def _make(values):
        return build(values)
    return _make


@pytest.fixture
def full_tree():
    """20 / 10 30 / 5 15 25 35, built without any rotation."""
    return build([20, 10, 30, 5, 15, 25, 35])


@pytest.fixture
def client():
    from app import app as flask_app, session

    flask_app.config["TESTING"] = True
    session.reset()
    with flask_app.test_client() as c:
        yield c
    session.reset()
