"""Reciprocal link writing and removal between notes."""

from __future__ import annotations

import logging
from pathlib import Path

from zettel.errors import PreconditionError
from zettel.note import IMAGES_DIR
from zettel.parser import line_bounds, link_at, read_title

log = logging.getLogger(__name__)

LINK_INDENT = "  "


def format_link(target: str, label: str | None = None) -> str:
    if label:
        return f"[[file:{target}][{label}]]"
    return f"[[file:{target}]]"


def append_link_line(text: str, target: str, label: str | None) -> str:
    """Strip trailing whitespace from *text* and append a link bullet."""
    return f"{text.rstrip()}\n{LINK_INDENT}- {format_link(target, label)}\n"


def references(line: str, file_name: str) -> bool:
    """True when *line* holds a link to *file_name*."""
    return f"[[file:{file_name}]" in line


def strip_references(text: str, file_name: str) -> tuple[str, int]:
    """Drop every line of *text* that links to *file_name*.

    Returns ``(new_text, removed_line_count)``.
    """
    kept: list[str] = []
    removed = 0
    for line in text.splitlines(keepends=True):
        if references(line, file_name):
            removed += 1
        else:
            kept.append(line)
    return "".join(kept), removed


def remove_references(path: Path, file_name: str) -> int:
    """Strip lines linking to *file_name* from the note at *path*."""
    text = path.read_text(encoding="utf-8")
    new_text, removed = strip_references(text, file_name)
    if removed:
        path.write_text(new_text, encoding="utf-8")
        log.debug("Removed %d reference(s) to %s from %s", removed, file_name, path.name)
    return removed


def write_link(origin: Path, destination: Path) -> None:
    """Append a link to *destination* in *origin* and the reverse link.

    The destination is written first.  If either note lacks a title line the
    operation stops with :class:`~zettel.errors.MissingTitleError`, possibly
    leaving only the destination linked.
    """
    origin_text = origin.read_text(encoding="utf-8")
    origin_title = read_title(origin_text, origin)

    dest_text = destination.read_text(encoding="utf-8") if destination.exists() else ""
    dest_text = append_link_line(dest_text, origin.name, origin_title)
    destination.write_text(dest_text, encoding="utf-8")

    dest_title = read_title(dest_text, destination)
    origin.write_text(append_link_line(origin_text, destination.name, dest_title), encoding="utf-8")
    log.info("Linked %s <-> %s", origin.name, destination.name)


def remove_line_at(text: str, point: int) -> str:
    start, end = line_bounds(text, point)
    return text[:start] + text[end:]


def unlink_note(note_path: Path, point: int, *, images_dir: str = IMAGES_DIR) -> Path:
    """Remove the note link at *point* and its reciprocal link.

    Returns the path of the note on the other side of the link.
    """
    text = note_path.read_text(encoding="utf-8")
    link = link_at(text, point)
    if link is None:
        raise PreconditionError("Not on a link")
    if link.is_image(images_dir):
        raise PreconditionError("This is an image link; delete the image instead")

    destination = note_path.parent / link.target
    remove_references(destination, note_path.name)
    note_path.write_text(remove_line_at(text, link.start), encoding="utf-8")
    log.info("Unlinked %s <-> %s", note_path.name, destination.name)
    return destination
