"""Exception hierarchy for org-zettel.

Two kinds of failure matter to callers:

- :class:`PreconditionError` is raised *before* anything is touched (cursor
  not on a link, image command on a note link, name already taken).  The
  command layer reports it as a short message.
- Everything else (:class:`MissingTitleError`, :class:`OSError`) aborts the
  running operation where it happens.  Multi-file operations are not rolled
  back.
"""

from __future__ import annotations

from pathlib import Path


class ZettelError(Exception):
    """Base class for all org-zettel errors."""


class PreconditionError(ZettelError):
    """The command cannot run in the current context; nothing was changed."""


class NoteExistsError(PreconditionError):
    """A note with the requested file name already exists."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Note already exists: {self.path.name}")


class MissingTitleError(ZettelError, LookupError):
    """A note has no ``#+TITLE:`` header line."""

    def __init__(self, source: str | Path | None = None) -> None:
        self.source = source
        where = f" in {Path(source).name}" if source else ""
        super().__init__(f"No #+TITLE: line found{where}")


class ConfigError(ZettelError):
    """The configuration file could not be read."""
