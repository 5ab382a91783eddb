from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Final

from gitlab import Gitlab
from gitlab.exceptions import GitlabError

from . import utils
from .exceptions import SnippetCreationError
from .models import DestinationSnippet

if TYPE_CHECKING:
    from gitlab.v4.objects import Snippet

    from .models import SnippetPayload

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VAR: Final[str] = "GITLAB_ACCESS_TOKEN"  # noqa: S105


def get_token(pass_path: str | None = None) -> str | None:
    """Get GitLab token from pass path or env var GITLAB_ACCESS_TOKEN."""
    if pass_path:
        return utils.get_pass_value(pass_path)

    token: str | None = os.environ.get(_TOKEN_ENV_VAR)
    if token:
        return token

    logger.debug(f"No GitLab token in pass or {_TOKEN_ENV_VAR}")
    return None


def get_client(token: str, url: str) -> Gitlab:
    """Get a GitLab client using the token."""
    return Gitlab(url, private_token=token)


def to_destination_snippet(snippet: Snippet) -> DestinationSnippet:
    """Normalize a python-gitlab snippet."""
    attributes: dict[str, Any] = snippet.attributes
    files: list[dict[str, Any]] = attributes.get("files") or []
    return DestinationSnippet(
        visibility=attributes["visibility"],
        title=attributes.get("title") or "",
        description=attributes.get("description") or "",
        file_paths=tuple(f["path"] for f in files),
        web_url=attributes.get("web_url", ""),
    )


class GitlabSnippetDestination:
    """Personal snippets of the authenticated GitLab user."""

    def __init__(self, client: Gitlab) -> None:
        self.client: Gitlab = client

    def list_snippets(self) -> list[DestinationSnippet]:
        return [to_destination_snippet(snippet) for snippet in self.client.snippets.list(get_all=True)]

    def create_snippet(self, payload: SnippetPayload) -> str:
        """Create a personal snippet and return its web URL.

        Raises:
            SnippetCreationError: If GitLab rejects the snippet
        """
        try:
            snippet = self.client.snippets.create(payload.to_gitlab())
        except GitlabError as e:
            msg = f"Failed to create snippet '{payload.title}': {e}"
            raise SnippetCreationError(msg) from e
        logger.debug(f"Created snippet {snippet.id} ({snippet.web_url})")
        return snippet.web_url
