"""Gist retrieval using the git CLI."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from typing import TYPE_CHECKING

from .exceptions import ContentFetchError

if TYPE_CHECKING:
    from pathlib import Path

logger: logging.Logger = logging.getLogger(__name__)

# Gist pull URLs look like https://gist.github.com/<hex id>.git
_HTTP_GIST_PATTERN: re.Pattern[str] = re.compile(r"^https?://([^/]+)/([a-f0-9]+)\.git")


def convert_http_to_ssh(url: str) -> str:
    """Convert an HTTPS gist pull URL to its SSH form.

    Args:
        url: Gist pull URL, e.g. "https://gist.github.com/abc123.git"

    Returns:
        SSH URL, e.g. "git@gist.github.com:abc123.git", or the original URL
        if it does not look like a gist pull URL
    """
    match = _HTTP_GIST_PATTERN.match(url)
    if match is None:
        return url
    host, gist_id = match.groups()
    return f"git@{host}:{gist_id}.git"


def _inject_token(url: str, token: str | None, prefix: str = "") -> str:
    """Inject authentication token into HTTPS URL.

    Args:
        url: The URL to modify
        token: Token to inject (if None, returns original URL)
        prefix: Prefix before token (e.g., "oauth2:" for GitLab)

    Returns:
        URL with token injected, or original if not HTTPS or no token
    """
    if not token or not url.startswith("https://"):
        return url
    return url.replace("https://", f"https://{prefix}{token}@", 1)


def _sanitize_error(error: str, tokens: list[str | None]) -> str:
    """Remove tokens from error message to prevent leakage.

    Args:
        error: Error message that may contain tokens
        tokens: List of tokens to redact (None values are ignored)

    Returns:
        Error message with tokens replaced by ***TOKEN***
    """
    result = error
    for token in tokens:
        if token:
            result = result.replace(token, "***TOKEN***")
    return result


def shallow_clone(clone_url: str, destination: Path, *, token: str | None = None, use_ssh: bool = False) -> None:
    """Clone the latest revision of a gist into ``destination``.

    Args:
        clone_url: HTTPS pull URL of the gist
        destination: Directory to clone into (must not exist yet)
        token: GitHub token injected into the HTTPS URL (ignored with use_ssh)
        use_ssh: Clone over SSH using the caller's SSH agent instead

    Raises:
        ContentFetchError: If git cannot be run or the clone fails
    """
    url = convert_http_to_ssh(clone_url) if use_ssh else _inject_token(clone_url, token)
    tokens = [token]
    # Never block on a credential prompt
    env = os.environ.copy() | {"GIT_TERMINAL_PROMPT": "0"}

    logger.debug(f"Cloning {clone_url} into {destination}")
    try:
        result = subprocess.run(  # noqa: S603
            ["git", "clone", "--depth", "1", url, str(destination)],  # noqa: S607
            check=False,
            capture_output=True,
            text=True,
            env=env,
        )
    except OSError as e:
        msg = f"Failed to run git: {_sanitize_error(str(e), tokens)}"
        raise ContentFetchError(msg) from e

    if result.returncode != 0:
        msg = f"Failed to clone {clone_url}: {_sanitize_error(result.stderr.strip(), tokens)}"
        raise ContentFetchError(msg)
