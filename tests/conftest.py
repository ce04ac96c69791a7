"""Pytest hooks and fixtures."""

import uuid

import pytest


@pytest.fixture
def request_id() -> uuid.UUID:
    return uuid.UUID("12345678-9abc-def0-1234-56789abcdef0")


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point ~ at a temp dir so config and log files never touch the real home."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("STDRPC_LOGGING__LEVEL", "ERROR")
    return tmp_path
