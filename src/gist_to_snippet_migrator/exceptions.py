"""
Custom exception classes for the gist to snippet migration tool.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for migration errors."""


class ConfigurationError(MigrationError):
    """Raised when URLs or access tokens are missing or invalid."""


class FileLimitError(MigrationError):
    """Raised when a gist has more files than a snippet can hold."""


class ContentFetchError(MigrationError):
    """Raised when the contents of a gist cannot be retrieved."""


class SnippetCreationError(MigrationError):
    """Raised when GitLab refuses to create a snippet."""
