"""
Shared fixtures for repoprov tests.
"""

import pytest

from helpers import FakeGitClient


@pytest.fixture
def fake_git():
    return FakeGitClient({
        "https://example/demo.git": {"name": "demo", "directories": ["types", "services"]},
        "https://example/other.git": {"name": "other"},
    })


@pytest.fixture
def workspace(tmp_path):
    """A workspace root with an empty stores directory."""
    (tmp_path / "stores").mkdir()
    return tmp_path
