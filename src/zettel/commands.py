"""Menu commands over "the current note".

The host (an editor, the CLI, a test) supplies a :class:`Prompter` that
answers questions synchronously, and optionally an :class:`ImageCapture`
tool and a :class:`Display`.  Every command takes at most one argument and
returns nothing; anything that stops a command before it changes a file is
reported through :meth:`Prompter.message`.

Usage::

    commands = Commands(config, prompter)
    commands.open(path, point=120)
    commands.run("Unlink")
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from zettel import images
from zettel.config import ZettelConfig
from zettel.errors import PreconditionError
from zettel.index import NoteIndex
from zettel.lifecycle import delete_note, rename_note
from zettel.links import unlink_note, write_link
from zettel.parser import read_title

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@runtime_checkable
class Prompter(Protocol):
    def ask(self, prompt: str, default: str = "") -> str: ...
    def choose(self, prompt: str, options: list[str]) -> str | None: ...
    def confirm(self, prompt: str) -> bool: ...
    def message(self, text: str) -> None: ...


@runtime_checkable
class ImageCapture(Protocol):
    def capture(self, destination: Path) -> None: ...


@dataclass
class DisplayState:
    inline_images: bool = False
    link_descriptions: bool = True


@runtime_checkable
class Display(Protocol):
    def refresh(self, state: DisplayState) -> None: ...


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


#: Menu label -> method name
MENU: dict[str, str] = {}


def command(label: str) -> Callable[[Callable[..., None]], Callable[..., None]]:
    """Register a method under *label* and report precondition failures."""

    def decorator(func: Callable[..., None]) -> Callable[..., None]:
        MENU[label] = func.__name__

        @functools.wraps(func)
        def wrapper(self: "Commands", *args: Any) -> None:
            self.last_error = None
            try:
                func(self, *args)
            except PreconditionError as exc:
                log.debug("%s aborted: %s", label, exc)
                self.last_error = exc
                self.prompter.message(str(exc))

        return wrapper

    return decorator


class Commands:
    """The note-management commands bound to one host."""

    def __init__(
        self,
        config: ZettelConfig,
        prompter: Prompter,
        *,
        capture: ImageCapture | None = None,
        display: Display | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.config = config
        self.prompter = prompter
        self.capture = capture
        self.display = display
        self.today = today
        self.state = DisplayState()
        self.note_path: Path | None = None
        #: character offset of the cursor in the current note
        self.point = 0
        #: precondition failure reported by the last command, if any
        self.last_error: PreconditionError | None = None

    def open(self, note_path: Path, point: int = 0) -> None:
        self.note_path = Path(note_path)
        self.point = point

    def run(self, label: str, *args: Any) -> None:
        """Invoke a command by its menu label."""
        if label not in MENU:
            raise KeyError(f"Unknown command: {label}")
        getattr(self, MENU[label])(*args)

    def _current(self) -> Path:
        if self.note_path is None or not self.note_path.exists():
            raise PreconditionError("No note is open")
        return self.note_path

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    @command("Rename")
    def rename(self) -> None:
        path = self._current()
        old_title = read_title(path.read_text(encoding="utf-8"), path)
        new_title = self.prompter.ask("New title", default=old_title).strip()
        if not new_title or new_title == old_title:
            return
        result = rename_note(
            path, new_title, today=self.today(), images_dir=self.config.images_dir
        )
        self.note_path = result.new_path
        self.prompter.message(f"Renamed to {result.new_path.name}")

    @command("Delete")
    def delete(self) -> None:
        path = self._current()
        confirmed = self.prompter.confirm(f"Delete {path.name} and its images?")
        result = delete_note(path, confirmed=confirmed, images_dir=self.config.images_dir)
        if result is None:
            return
        self.note_path = None
        self.point = 0
        self.prompter.message(f"Deleted {path.name}")

    @command("Link")
    def link(self) -> None:
        path = self._current()
        index = NoteIndex(path.parent, self.config.images_dir)
        index.build()
        choice = self.prompter.choose("Link to note", index.candidates(exclude=path.name))
        if not choice:
            return
        write_link(path, path.parent / choice)

    @command("Unlink")
    def unlink(self) -> None:
        destination = unlink_note(self._current(), self.point, images_dir=self.config.images_dir)
        self.prompter.message(f"Unlinked {destination.name}")

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    @command("Delete image")
    def delete_image(self) -> None:
        path = self._current()
        link = images.image_link_at(path.read_text(encoding="utf-8"), self.point, self.config.images_dir)
        confirmed = self.prompter.confirm(f"Delete {link.target}?")
        images.delete_image(path, self.point, confirmed=confirmed, images_dir=self.config.images_dir)

    @command("Insert image")
    def insert_image(self, source: Path | None = None) -> None:
        path = self._current()
        if source is None:
            answer = self.prompter.ask("Image file").strip()
            if not answer:
                return
            source = Path(answer).expanduser()
        images.insert_image(path, source, self.point, images_dir=self.config.images_dir)

    @command("Capture image")
    def capture_image(self) -> None:
        path = self._current()
        if self.capture is None:
            raise PreconditionError("No screen capture tool configured")
        images.capture_image(path, self.capture.capture, self.point, images_dir=self.config.images_dir)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @command("Toggle images")
    def toggle_inline_images(self) -> None:
        self.state.inline_images = not self.state.inline_images
        self._refresh()

    @command("Toggle links")
    def toggle_link_display(self) -> None:
        self.state.link_descriptions = not self.state.link_descriptions
        self._refresh()

    def _refresh(self) -> None:
        if self.display is not None:
            self.display.refresh(self.state)
