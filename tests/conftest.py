"""
Pytest configuration for presenter tests.

Puts the project root on the path so the top-level packages import
without an install, and provides shared fixtures.
"""

import datetime
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from export.settings import ExportSettings  # noqa: E402


@pytest.fixture
def settings() -> ExportSettings:
    """Default export settings, independent of the environment."""
    return ExportSettings()


@pytest.fixture
def export_day() -> datetime.date:
    return datetime.date(2026, 3, 5)
