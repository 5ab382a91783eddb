"""Map gists to snippets and decide whether a gist was already migrated."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .exceptions import FileLimitError
from .models import SnippetFile, SnippetPayload

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .models import DestinationSnippet, SourceGist, Visibility

# GitLab rejects snippets with more files than this
MAX_SNIPPET_FILES = 10


def snippet_title(gist: SourceGist) -> str:
    """Use the gist description as title, or the comma-joined filenames if it has none."""
    if gist.description:
        return gist.description
    return ", ".join(gist.files)


def snippet_description(gist: SourceGist) -> str:
    return f"Migrated from {gist.html_url}"


def snippet_visibility(gist: SourceGist) -> Visibility:
    """Public gists become internal snippets, secret gists become private ones."""
    return "internal" if gist.public else "private"


def is_equivalent(gist: SourceGist, snippet: DestinationSnippet) -> bool:
    """Check whether ``snippet`` is the result of migrating ``gist``.

    Visibility, title and description must equal the derived values, and the
    snippet must hold exactly the gist's filenames. File contents are not
    compared, so gists with identical metadata and filenames are
    indistinguishable.
    """
    gist_files = set(gist.files)
    snippet_files = set(snippet.file_paths)
    return (
        snippet.visibility == snippet_visibility(gist)
        and snippet.title == snippet_title(gist)
        and snippet.description == snippet_description(gist)
        and len(gist_files) == len(snippet_files)
        and all(name in snippet_files for name in gist_files)
    )


def find_existing(gist: SourceGist, snippets: Iterable[DestinationSnippet]) -> DestinationSnippet | None:
    """Return the first snippet equivalent to ``gist``, or None.

    When several snippets match, the first one in listing order wins.
    """
    for snippet in snippets:
        if is_equivalent(gist, snippet):
            return snippet
    return None


def check_file_limit(gist: SourceGist) -> None:
    """Raise FileLimitError if the gist cannot fit in a single snippet."""
    if len(gist.files) > MAX_SNIPPET_FILES:
        msg = (
            f"Unable to migrate {gist.id}, as snippets are limited to {MAX_SNIPPET_FILES} files each "
            f"(gist has {len(gist.files)})."
        )
        raise FileLimitError(msg)


def build_payload(gist: SourceGist, contents: Mapping[str, str]) -> SnippetPayload:
    """Build the snippet creation payload.

    Args:
        gist: Gist being migrated
        contents: Text content for every filename of the gist

    Returns:
        Payload with files in the same order as the gist's file mapping
    """
    return SnippetPayload(
        title=snippet_title(gist),
        description=snippet_description(gist),
        visibility=snippet_visibility(gist),
        files=[SnippetFile(path=name, content=contents[name]) for name in gist.files],
    )
