"""
GitHub Gist to GitLab Snippet Migration Tool

Copies the authenticated user's gists to personal GitLab snippets, keeping
visibility, title, description and file contents, and skipping gists that
were migrated by an earlier run.
"""

from __future__ import annotations

from .cli import main
from .exceptions import (
    ConfigurationError,
    ContentFetchError,
    FileLimitError,
    MigrationError,
    SnippetCreationError,
)
from .migrator import GistToSnippetMigrator, MigrationResult, MigrationStats
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ContentFetchError",
    "FileLimitError",
    "GistToSnippetMigrator",
    "MigrationError",
    "MigrationResult",
    "MigrationStats",
    "SnippetCreationError",
    "main",
    "setup_logging",
]
