"""
Pytest configuration and fixtures for plankalink tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add the repository root to path for imports
# This allows `from plankalink.integrations import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def transport():
    """Transport spy standing in for PlankaClient."""
    spy = MagicMock()
    spy.request = AsyncMock()
    spy.get_token = AsyncMock(return_value="test-token")
    spy.upload_file = AsyncMock()
    return spy


@pytest.fixture
def sample_file(tmp_path):
    """Small local file to upload."""
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4 test document")
    return path
