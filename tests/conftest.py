"""Shared fixtures for the dreamcentre tests."""

import pytest

from dreamcentre.config import Settings, get_settings
from dreamcentre.database import get_supabase_admin

SUPABASE_ENV = ("SUPABASE_URL", "VITE_SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run every test without Supabase credentials or a developer .env file."""
    for name in SUPABASE_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    get_supabase_admin.cache_clear()
    yield
    get_settings.cache_clear()
    get_supabase_admin.cache_clear()


@pytest.fixture
def supabase_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")


@pytest.fixture
def settings():
    return Settings(_env_file=None)
