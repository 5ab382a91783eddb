"""
Pytest configuration and fixtures.

- Integration tests are skipped unless both access tokens are set, and fail on
  any WARNING or ERROR logged by the code under test.
- Unit tests get in-memory fakes of the gist source and snippet destination.
"""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from typing_extensions import override

import pytest

from gist_to_snippet_migrator.exceptions import ContentFetchError, SnippetCreationError
from gist_to_snippet_migrator.models import DestinationSnippet, GistPage, SourceGist

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from gist_to_snippet_migrator.models import SnippetPayload

_INTEGRATION_ENV_VARS = ("GITHUB_ACCESS_TOKEN", "GITLAB_ACCESS_TOKEN")

# Store warning records during test execution
_integration_test_warnings: dict[str, list[logging.LogRecord]] = {}


class IntegrationTestWarningHandler(logging.Handler):
    """Custom logging handler to capture warnings during integration tests."""

    test_nodeid: str

    def __init__(self, test_nodeid: str) -> None:
        super().__init__()
        self.test_nodeid = test_nodeid
        self.setLevel(logging.WARNING)

    @override
    def emit(self, record: logging.LogRecord) -> None:
        """Capture WARNING and above level logs."""
        _integration_test_warnings.setdefault(self.test_nodeid, []).append(record)


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item: pytest.Item) -> None:
    """Skip integration tests without credentials before module-scoped fixtures are set up."""
    if item.get_closest_marker("integration") is None:
        return
    missing = [name for name in _INTEGRATION_ENV_VARS if not os.environ.get(name)]
    if missing:
        pytest.skip(f"Integration tests require environment variables: {', '.join(missing)}")


@pytest.fixture(autouse=True)
def fail_on_log_warnings_for_integration_tests(
    request: pytest.FixtureRequest,
) -> Generator[None]:
    """Skip integration tests without credentials and capture their log warnings."""
    if request.node.get_closest_marker("integration") is None:
        yield
        return

    missing = [name for name in _INTEGRATION_ENV_VARS if not os.environ.get(name)]
    if missing:
        pytest.skip(f"Integration tests require environment variables: {', '.join(missing)}")

    test_nodeid = request.node.nodeid
    _integration_test_warnings[test_nodeid] = []

    handler = IntegrationTestWarningHandler(test_nodeid)
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)

    try:
        yield
    finally:
        root_logger.removeHandler(handler)


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[None]
) -> Generator[None]:  # type: ignore[misc]
    """Mark a passed integration test as failed if it logged warnings."""
    outcome = yield
    report = outcome.get_result()

    if call.when == "call" and report.outcome == "passed":
        warning_records = _integration_test_warnings.get(item.nodeid, [])

        if warning_records:
            warning_messages = [
                f"{record.levelname}: {record.getMessage()} (in {record.name}:{record.lineno})"
                for record in warning_records
            ]
            report.outcome = "failed"
            report.longrepr = f"Integration test failed: {len(warning_records)} warning(s) detected:\n" + "\n".join(
                f"  - {msg}" for msg in warning_messages
            )

        _integration_test_warnings.pop(item.nodeid, None)


_BASE_TIME = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_gist() -> Callable[..., SourceGist]:
    """Factory for gists; ``hours`` offsets the creation time."""

    def _make(
        gist_id: str = "abc123",
        *,
        files: list[str] | None = None,
        description: str = "",
        public: bool = True,
        hours: int = 0,
    ) -> SourceGist:
        names = files if files is not None else ["x.md"]
        return SourceGist(
            id=gist_id,
            created_at=_BASE_TIME + timedelta(hours=hours),
            public=public,
            description=description,
            files={name: 10 for name in names},
            clone_url=f"https://gist.github.com/{gist_id}.git",
            html_url=f"https://gist.github.com/octocat/{gist_id}",
        )

    return _make


class FakeGistSource:
    """In-memory SourceRepository.

    ``pages`` holds one GistPage per page; pages past the end are empty.
    ``contents`` maps (clone_url, filename) to text; missing entries fail.
    """

    def __init__(self, pages: list[GistPage] | None = None, contents: dict[tuple[str, str], str] | None = None) -> None:
        self.pages: list[GistPage] = pages or []
        self.contents: dict[tuple[str, str], str] = contents or {}
        self.requested_pages: list[int] = []
        self.fetched: list[tuple[str, str]] = []

    @classmethod
    def with_gists(cls, gists: list[SourceGist]) -> FakeGistSource:
        contents = {(g.clone_url, name): f"content of {name}" for g in gists for name in g.files}
        return cls(pages=[GistPage(status=200, gists=gists)], contents=contents)

    def list_gists_page(self, page: int) -> GistPage:
        self.requested_pages.append(page)
        if page > len(self.pages):
            return GistPage(status=200)
        return self.pages[page - 1]

    def fetch_raw_file(self, clone_url: str, filename: str) -> str:
        self.fetched.append((clone_url, filename))
        try:
            return self.contents[clone_url, filename]
        except KeyError as e:
            msg = f"Failed to clone {clone_url}"
            raise ContentFetchError(msg) from e


class FakeSnippetDestination:
    """In-memory DestinationRepository recording created payloads."""

    def __init__(self, snippets: list[DestinationSnippet] | None = None, *, fail_on_create: bool = False) -> None:
        self.snippets: list[DestinationSnippet] = list(snippets or [])
        self.created: list[SnippetPayload] = []
        self.fail_on_create: bool = fail_on_create

    def list_snippets(self) -> list[DestinationSnippet]:
        return list(self.snippets)

    def create_snippet(self, payload: SnippetPayload) -> str:
        if self.fail_on_create:
            msg = f"Failed to create snippet '{payload.title}': 400 Bad Request"
            raise SnippetCreationError(msg)
        web_url = f"https://gitlab.com/-/snippets/{len(self.snippets) + 1}"
        self.created.append(payload)
        self.snippets.append(payload.as_snippet(web_url))
        return web_url


@pytest.fixture
def fake_source_cls() -> type[FakeGistSource]:
    return FakeGistSource


@pytest.fixture
def fake_destination_cls() -> type[FakeSnippetDestination]:
    return FakeSnippetDestination
