"""Migration of gists to snippets.

Flow
----
The run is a single linear pass:

    LIST_SOURCE -> LIST_DESTINATION -> for each gist (oldest first):
        MATCH -> skip
              -> VALIDATE -> FETCH_CONTENT -> CREATE

Error Handling
--------------
- A failed gist page ends pagination; the gists already listed are migrated.
- Too many files or unreadable contents skip the current gist only.
- SnippetCreationError is not caught: the run stops and the snippets created
  so far stay on GitLab.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import ContentFetchError, FileLimitError
from .mapping import build_payload, check_file_limit, find_existing, snippet_title

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .models import DestinationSnippet, SourceGist
    from .protocols import DestinationRepository, SourceRepository

logger: logging.Logger = logging.getLogger(__name__)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def iter_gists(source: SourceRepository) -> Iterator[SourceGist]:
    """Yield the user's gists page by page, stopping at the first failed or empty page."""
    for page_number in itertools.count(1):
        page = source.list_gists_page(page_number)
        if not page.ok:
            logger.error(f"Fetching gist page {page_number} failed with status {page.status}: {page.detail}")
            return
        if not page.gists:
            return
        logger.debug(f"Fetched {_plural(len(page.gists), 'gist')} from page {page_number}")
        yield from page.gists


def list_gists(source: SourceRepository) -> list[SourceGist]:
    """Return all reachable gists sorted by creation time, oldest first."""
    return sorted(iter_gists(source), key=lambda gist: gist.created_at)


@dataclass
class MigrationStats:
    """Statistics collected during migration."""

    gists_total: int = 0
    snippets_total: int = 0
    migrated: int = 0
    skipped: int = 0
    rejected: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class MigratedGist:
    gist_id: str
    web_url: str


@dataclass
class MigrationResult:
    """Result of a migration run."""

    stats: MigrationStats
    migrated: list[MigratedGist] = field(default_factory=list)


class GistToSnippetMigrator:
    """Copies gists from a SourceRepository to a DestinationRepository.

    Usage:
        source = GithubGistSource(github_client, work_dir)
        destination = GitlabSnippetDestination(gitlab_client)
        result = GistToSnippetMigrator(source, destination).migrate()

    With ``force`` every gist is migrated, even if an equivalent snippet
    already exists.
    """

    _source: SourceRepository
    _destination: DestinationRepository

    def __init__(self, source: SourceRepository, destination: DestinationRepository, *, force: bool = False) -> None:
        self._source = source
        self._destination = destination
        self.force: bool = force

    def migrate(self) -> MigrationResult:
        """Execute the full migration.

        Raises:
            SnippetCreationError: If a snippet cannot be created
        """
        result = MigrationResult(stats=MigrationStats())
        stats = result.stats

        print("Fetching gist data...")
        gists = list_gists(self._source)
        stats.gists_total = len(gists)
        print(f"Fetched data for {_plural(len(gists), 'gist')}.")

        print("Fetching snippet data...")
        snippets = self._destination.list_snippets()
        stats.snippets_total = len(snippets)
        print(f"Fetched data for {_plural(len(snippets), 'snippet')}.")

        for gist in gists:
            web_url = self._migrate_gist(gist, snippets, stats)
            if web_url is not None:
                result.migrated.append(MigratedGist(gist_id=gist.id, web_url=web_url))

        return result

    def _migrate_gist(
        self,
        gist: SourceGist,
        snippets: list[DestinationSnippet],
        stats: MigrationStats,
    ) -> str | None:
        """Migrate one gist, returning the new snippet URL or None if it was not migrated."""
        human_name = f"{gist.id} ({snippet_title(gist)})"

        if not self.force:
            existing = find_existing(gist, snippets)
            if existing is not None:
                print(f"Skipping {human_name}. Already migrated to {existing.web_url}.")
                stats.skipped += 1
                return None

        print(f"Migrating {human_name}.")
        try:
            check_file_limit(gist)
        except FileLimitError as e:
            logger.error(str(e))
            stats.rejected += 1
            stats.errors.append(str(e))
            return None

        contents: dict[str, str] = {}
        try:
            for filename in gist.files:
                contents[filename] = self._source.fetch_raw_file(gist.clone_url, filename)
        except ContentFetchError as e:
            logger.error(str(e))
            stats.failed += 1
            stats.errors.append(str(e))
            return None

        web_url = self._destination.create_snippet(build_payload(gist, contents))
        print(f"Migrated to {web_url}")
        stats.migrated += 1
        return web_url
