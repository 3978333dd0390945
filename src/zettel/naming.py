"""Title → file name codec and the new-note template.

A note called ``My First Note`` created on 2024-03-05 is stored as
``20240305_my_first_note.org``.  The title itself travels with the
:class:`NoteRequest` so whoever writes the ``#+TITLE:`` header gets the
exact text the user typed.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from zettel.errors import NoteExistsError, PreconditionError

log = logging.getLogger(__name__)

NOTE_SUFFIX = ".org"
DATE_FORMAT = "%Y%m%d"

_UNSAFE_RE = re.compile(r"[^a-z0-9_]")
_UNDERSCORES_RE = re.compile(r"_{2,}")


@dataclass(frozen=True)
class NoteRequest:
    """Everything the note template needs to create a new note."""

    title: str
    file_name: str


def slugify(title: str) -> str:
    """Lower-case *title*, join words with ``_`` and drop anything else."""
    text = unicodedata.normalize("NFKD", title)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = text.strip().lower().replace(" ", "_")
    text = _UNSAFE_RE.sub("", text)
    return _UNDERSCORES_RE.sub("_", text).strip("_")


def title_to_file_name(title: str, today: date | None = None) -> str:
    slug = slugify(title)
    if not slug:
        raise PreconditionError(f"Title {title!r} has no usable characters")
    stamp = (today or date.today()).strftime(DATE_FORMAT)
    return f"{stamp}_{slug}{NOTE_SUFFIX}"


def note_request(title: str, today: date | None = None) -> NoteRequest:
    title = title.strip()
    return NoteRequest(title=title, file_name=title_to_file_name(title, today))


def note_template(title: str) -> str:
    return f"#+TITLE: {title}\n\n* Links\n"


def create_note(notes_dir: Path, request: NoteRequest) -> Path:
    """Write a fresh note skeleton for *request* into *notes_dir*."""
    path = Path(notes_dir) / request.file_name
    if path.exists():
        raise NoteExistsError(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(note_template(request.title), encoding="utf-8")
    log.info("Created note %s", path.name)
    return path
