from __future__ import annotations

import datetime as dt
import logging
import os
from pathlib import Path
from typing import Any, Final

import requests
from github import Auth, Github, GithubException
from github.GithubRetry import GithubRetry

from . import utils
from .exceptions import ContentFetchError
from .git_utils import shallow_clone
from .models import GistPage, SourceGist

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VAR: Final[str] = "GITHUB_ACCESS_TOKEN"  # noqa: S105
_PER_PAGE: Final[int] = 100


def get_token(pass_path: str | None = None) -> str | None:
    """Get GitHub token from pass path or env var GITHUB_ACCESS_TOKEN."""
    if pass_path:
        return utils.get_pass_value(pass_path)

    token: str | None = os.environ.get(_TOKEN_ENV_VAR)
    if token:
        return token

    logger.debug(f"No GitHub token in pass or {_TOKEN_ENV_VAR}")
    return None


def get_client(token: str, base_url: str) -> Github:
    """Get a GitHub client using the token.

    Server errors are still retried, but the last failed response is returned
    as a GithubException carrying its status instead of a requests RetryError.
    """
    return Github(
        auth=Auth.Token(token),
        base_url=base_url,
        per_page=_PER_PAGE,
        retry=GithubRetry(raise_on_status=False),
    )


def to_source_gist(data: dict[str, Any]) -> SourceGist:
    """Normalize a gist from the raw JSON of the gist listing."""
    files: dict[str, dict[str, Any]] = data.get("files") or {}
    return SourceGist(
        id=data["id"],
        created_at=dt.datetime.fromisoformat(data["created_at"]),
        public=bool(data.get("public")),
        description=data.get("description") or "",
        files={name: file_data.get("size") or 0 for name, file_data in files.items()},
        clone_url=data["git_pull_url"],
        html_url=data["html_url"],
    )


class GithubGistSource:
    """Gists of the authenticated GitHub user.

    Pages are read as raw JSON from ``GET /gists``; PyGithub's Gist objects
    would fetch every gist again to complete their file list. File contents
    are retrieved by shallow-cloning each gist once into its own directory
    below ``work_dir``.
    """

    def __init__(self, client: Github, work_dir: Path, *, token: str | None = None, use_ssh: bool = False) -> None:
        self.client: Github = client
        self.work_dir: Path = Path(work_dir)
        self._token: str | None = token
        self.use_ssh: bool = use_ssh
        # clone URL -> local clone directory
        self._clones: dict[str, Path] = {}

    def list_gists_page(self, page: int) -> GistPage:
        """Return page ``page`` (1-based) of the user's gists.

        A failed request is returned as a non-2xx page; status 0 means no
        HTTP response was received.
        """
        try:
            _, data = self.client.requester.requestJsonAndCheck(
                "GET", "/gists", parameters={"page": page, "per_page": _PER_PAGE}
            )
            gists = [to_source_gist(item) for item in data or []]
        except GithubException as e:
            return GistPage(status=e.status, detail=e.data)
        except requests.RequestException as e:
            return GistPage(status=0, detail=str(e))
        return GistPage(status=200, gists=gists)

    def _clone_dir(self, clone_url: str) -> Path:
        clone_dir = self._clones.get(clone_url)
        if clone_dir is not None:
            return clone_dir

        name = clone_url.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git")
        clone_dir = self.work_dir / f"{len(self._clones):04d}-{name}"
        shallow_clone(clone_url, clone_dir, token=self._token, use_ssh=self.use_ssh)
        self._clones[clone_url] = clone_dir
        return clone_dir

    def fetch_raw_file(self, clone_url: str, filename: str) -> str:
        clone_dir = self._clone_dir(clone_url)
        try:
            return (clone_dir / filename).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Failed to read {filename} from {clone_url}: {e}"
            raise ContentFetchError(msg) from e
