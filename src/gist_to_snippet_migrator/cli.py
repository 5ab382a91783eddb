"""
Command-line interface for the gist to snippet migration tool.
"""

from __future__ import annotations

import argparse
import logging
import sys
import tempfile
from pathlib import Path

from . import github_utils as ghu
from . import gitlab_utils as glu
from .config import DEFAULT_GITHUB_URL, DEFAULT_GITLAB_URL, resolve_config
from .migrator import GistToSnippetMigrator, MigrationResult
from .utils import setup_logging

logger: logging.Logger = logging.getLogger(__name__)


def parse_arguments() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Migrate your GitHub gists to GitLab snippets")

    _ = parser.add_argument("--github-url", default=DEFAULT_GITHUB_URL, help="GitHub API URL (default: %(default)s)")
    _ = parser.add_argument("--gitlab-url", default=DEFAULT_GITLAB_URL, help="GitLab URL (default: %(default)s)")

    _ = parser.add_argument(
        "--github-pass-token",
        help="Path for GitHub token in pass utility (default: $GITHUB_ACCESS_TOKEN, else prompt)",
    )
    _ = parser.add_argument(
        "--gitlab-pass-token",
        help="Path for GitLab token in pass utility (default: $GITLAB_ACCESS_TOKEN, else prompt)",
    )

    _ = parser.add_argument(
        "--force",
        action="store_true",
        help="Migrate every gist, even those that already have an equivalent snippet",
    )
    _ = parser.add_argument(
        "--ssh",
        action="store_true",
        help="Clone gists over SSH using your SSH agent instead of HTTPS with the GitHub token",
    )

    _ = parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Show progress details (-v for info, -vv for debug)",
    )

    return parser.parse_args()


def _print_summary(result: MigrationResult) -> None:
    stats = result.stats
    print(
        f"Gists: {stats.gists_total}, migrated: {stats.migrated}, already migrated: {stats.skipped}, "
        f"too many files: {stats.rejected}, failed: {stats.failed}"
    )
    for error in stats.errors:
        print(f"  - {error}")


def main() -> None:
    """Main entry point."""
    args = parse_arguments()
    setup_logging(verbosity=args.verbose)

    try:
        config = resolve_config(
            github_url=args.github_url,
            gitlab_url=args.gitlab_url,
            github_pass_path=args.github_pass_token,
            gitlab_pass_path=args.gitlab_pass_token,
            force=args.force,
            use_ssh=args.ssh,
        )

        github_client = ghu.get_client(config.github_token, config.github_url)
        gitlab_client = glu.get_client(config.gitlab_token, config.gitlab_url)

        with tempfile.TemporaryDirectory(prefix="gists-") as work_dir:
            source = ghu.GithubGistSource(
                github_client, Path(work_dir), token=config.github_token, use_ssh=config.use_ssh
            )
            destination = glu.GitlabSnippetDestination(gitlab_client)
            result = GistToSnippetMigrator(source, destination, force=config.force).migrate()

        _print_summary(result)
        print("Done.")
        sys.exit(0)

    except Exception:
        logger.exception("Migration failed")
        sys.exit(1)
