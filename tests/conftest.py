"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import src...' works, and that
every test starts from default settings regardless of the caller's NUMCSV_*
environment.
"""
import os
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from src.config.settings import reset_settings


@pytest.fixture(autouse=True)
def clean_numcsv_environment(monkeypatch):
    """Remove NUMCSV_* variables and clear the cached settings around each test."""
    for name in list(os.environ):
        if name.startswith("NUMCSV_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
