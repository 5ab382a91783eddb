"""
Run configuration: API URLs, access tokens and flags.
"""

from __future__ import annotations

import getpass
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final
from urllib.parse import urlsplit

from . import github_utils as ghu
from . import gitlab_utils as glu
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_GITHUB_URL: Final[str] = "https://api.github.com"
DEFAULT_GITLAB_URL: Final[str] = "https://gitlab.com"


@dataclass(frozen=True)
class MigrationConfig:
    """Everything a run needs, resolved once before any network call."""

    github_token: str = field(repr=False)
    gitlab_token: str = field(repr=False)
    github_url: str = DEFAULT_GITHUB_URL
    gitlab_url: str = DEFAULT_GITLAB_URL
    force: bool = False
    use_ssh: bool = False


def normalize_url(value: str, *, name: str, keep_path: bool = False) -> str:
    """Validate an API URL and return it in canonical form.

    Args:
        value: URL as given by the user
        name: Platform name used in the error message
        keep_path: Keep the path (GitHub Enterprise serves its API below /api/v3)

    Returns:
        The URL origin, or origin plus path without trailing slash if keep_path

    Raises:
        ConfigurationError: If the URL has no http(s) scheme or no host
    """
    parts = urlsplit(value.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        msg = f"{name} URL invalid: {value!r}"
        raise ConfigurationError(msg)
    origin = f"{parts.scheme}://{parts.netloc}"
    if keep_path:
        return origin + parts.path.rstrip("/")
    return origin


def _prompt_token(platform: str, prompt: Callable[[str], str]) -> str:
    try:
        token = prompt(f"{platform} access token: ")
    except (KeyboardInterrupt, EOFError) as e:
        msg = "Access tokens not supplied."
        raise ConfigurationError(msg) from e
    if not token:
        msg = "invalid access token"
        raise ConfigurationError(msg)
    return token


def resolve_config(
    *,
    github_url: str = DEFAULT_GITHUB_URL,
    gitlab_url: str = DEFAULT_GITLAB_URL,
    github_pass_path: str | None = None,
    gitlab_pass_path: str | None = None,
    force: bool = False,
    use_ssh: bool = False,
    prompt: Callable[[str], str] = getpass.getpass,
) -> MigrationConfig:
    """Build the run configuration.

    Tokens come from the pass path if given, else from GITHUB_ACCESS_TOKEN /
    GITLAB_ACCESS_TOKEN, else from a masked interactive prompt.

    Raises:
        ConfigurationError: On an invalid URL, an empty token or a cancelled prompt
    """
    github_url = normalize_url(github_url, name="GitHub API", keep_path=True)
    gitlab_url = normalize_url(gitlab_url, name="GitLab API")

    github_token = ghu.get_token(github_pass_path) or _prompt_token("GitHub", prompt)
    gitlab_token = glu.get_token(gitlab_pass_path) or _prompt_token("GitLab", prompt)

    logger.info(f"Migrating gists from {github_url} to snippets on {gitlab_url}")
    return MigrationConfig(
        github_token=github_token,
        gitlab_token=gitlab_token,
        github_url=github_url,
        gitlab_url=gitlab_url,
        force=force,
        use_ssh=use_ssh,
    )
