"""Shared fixtures."""

import pytest

from xenmobile_backup.models import Session


@pytest.fixture
def session() -> Session:
    return Session(server_host="mdm.example.com", port=4443, auth_token="tok-123")
