# tests/conftest.py
import pytest

from models.auth_schemas import SessionContext
from tests.fake_supabase import FakeSupabase


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def session():
    return SessionContext(user_id="trainer-1", access_token="token-1", email="coach@example.com", name="Coach")


@pytest.fixture
def other_session():
    return SessionContext(user_id="trainer-2", access_token="token-2", email="other@example.com")
