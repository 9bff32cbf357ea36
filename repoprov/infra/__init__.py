"""
Infrastructure layer for repoprov.

Contains abstractions for external systems:
- GitClient: Git command execution (sync probes, async clone)
- FileStore: JSON key-value persistence

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, CloneOutcome
from .file_store import FileStore

__all__ = [
    'GitClient',
    'CloneOutcome',
    'FileStore',
]
