"""Protocols defining the contracts for the gist source and the snippet destination.

The migration is split into three components:

1. SourceRepository: Lists gists page by page and retrieves file contents
2. DestinationRepository: Lists existing snippets and creates new ones
3. GistToSnippetMigrator: Matches, validates and transfers (see migrator.py)

Keeping the API access behind these two narrow contracts lets the matching
and transfer logic be tested with in-memory fakes, without network access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import DestinationSnippet, GistPage, SnippetPayload


class SourceRepository(Protocol):
    """Protocol for reading gists from the source platform.

    Example implementations:
        - GithubGistSource: PyGithub for listing, ``git clone`` for contents
    """

    def list_gists_page(self, page: int) -> GistPage:
        """Return one page of the authenticated user's gists.

        Pages are numbered from 1. A failed request must not raise; it is
        reported through ``GistPage.status`` so the caller can stop paginating
        while keeping the gists it already has.
        """
        ...

    def fetch_raw_file(self, clone_url: str, filename: str) -> str:
        """Return the text content of one file of a gist.

        Raises:
            ContentFetchError: If the gist cannot be retrieved or the file read
        """
        ...


class DestinationRepository(Protocol):
    """Protocol for reading and creating snippets on the destination platform.

    Example implementations:
        - GitlabSnippetDestination: python-gitlab personal snippets
    """

    def list_snippets(self) -> list[DestinationSnippet]:
        """Return every existing snippet, with pagination handled internally."""
        ...

    def create_snippet(self, payload: SnippetPayload) -> str:
        """Create a snippet and return its web URL.

        Raises:
            SnippetCreationError: If the snippet could not be created
        """
        ...
