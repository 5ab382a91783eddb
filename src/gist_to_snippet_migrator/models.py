"""Data models exchanged between the gist source, the snippet destination and the migrator.

These are normalized views of the PyGithub and python-gitlab objects, so the
matching and mapping logic never touches API objects directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from datetime import datetime

Visibility = Literal["private", "internal", "public"]


@dataclass(frozen=True)
class SourceGist:
    """A gist owned by the authenticated GitHub user."""

    id: str
    created_at: datetime
    public: bool
    description: str
    files: dict[str, int]  # filename -> size in bytes, in API order
    clone_url: str  # git_pull_url
    html_url: str


@dataclass
class GistPage:
    """One page of the gist listing, or the error that replaced it."""

    status: int
    gists: list[SourceGist] = field(default_factory=list)
    detail: object = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True)
class DestinationSnippet:
    """A personal snippet of the authenticated GitLab user."""

    visibility: Visibility
    title: str
    description: str
    file_paths: tuple[str, ...]
    web_url: str = ""


@dataclass(frozen=True)
class SnippetFile:
    path: str
    content: str


@dataclass
class SnippetPayload:
    """Everything needed to create one snippet."""

    title: str
    description: str
    visibility: Visibility
    files: list[SnippetFile] = field(default_factory=list)

    def to_gitlab(self) -> dict[str, object]:
        """Return the attribute dict expected by python-gitlab's ``snippets.create``."""
        return {
            "title": self.title,
            "description": self.description,
            "visibility": self.visibility,
            "files": [{"file_path": f.path, "content": f.content} for f in self.files],
        }

    def as_snippet(self, web_url: str = "") -> DestinationSnippet:
        """View this payload as the snippet GitLab will list after creation."""
        return DestinationSnippet(
            visibility=self.visibility,
            title=self.title,
            description=self.description,
            file_paths=tuple(f.path for f in self.files),
            web_url=web_url,
        )
