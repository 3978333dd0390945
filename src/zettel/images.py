"""Image attachments stored under the notes folder's ``images/`` directory.

Attachment file names start with the owning note's file stem
(``20240305_my_note_diagram.png``) so that renaming the note can carry its
images along.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from zettel.errors import PreconditionError
from zettel.links import format_link, remove_line_at
from zettel.note import IMAGES_DIR, Link
from zettel.parser import link_at

log = logging.getLogger(__name__)


def image_link_at(text: str, point: int, images_dir: str = IMAGES_DIR) -> Link:
    """The image link at *point*; :class:`PreconditionError` otherwise."""
    link = link_at(text, point)
    if link is None or not link.is_image(images_dir):
        raise PreconditionError("Not on an image link")
    return link


def image_destination(note_path: Path, file_name: str, images_dir: str = IMAGES_DIR) -> Path:
    """Free path under ``images/`` for an attachment of *note_path*."""
    folder = note_path.parent / images_dir
    candidate = folder / f"{note_path.stem}_{file_name}"
    counter = 1
    while candidate.exists():
        stem, suffix = Path(file_name).stem, Path(file_name).suffix
        candidate = folder / f"{note_path.stem}_{stem}_{counter}{suffix}"
        counter += 1
    return candidate


def _insert_link(note_path: Path, image: Path, point: int) -> None:
    text = note_path.read_text(encoding="utf-8")
    point = max(0, min(point, len(text)))
    target = image.relative_to(note_path.parent).as_posix()
    note_path.write_text(text[:point] + format_link(target) + text[point:], encoding="utf-8")


def insert_image(
    note_path: Path,
    source: Path,
    point: int,
    *,
    images_dir: str = IMAGES_DIR,
) -> Path:
    """Copy *source* into ``images/`` and link it at *point*."""
    source = Path(source)
    if not source.is_file():
        raise PreconditionError(f"No such image: {source}")
    destination = image_destination(note_path, source.name, images_dir)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)
    _insert_link(note_path, destination, point)
    log.info("Inserted image %s into %s", destination.name, note_path.name)
    return destination


def capture_image(
    note_path: Path,
    capture: Callable[[Path], None],
    point: int,
    *,
    images_dir: str = IMAGES_DIR,
    now: datetime | None = None,
) -> Path:
    """Have *capture* write a screenshot into ``images/`` and link it."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    destination = image_destination(note_path, f"{stamp}.png", images_dir)
    destination.parent.mkdir(parents=True, exist_ok=True)
    capture(destination)
    if not destination.exists():
        raise PreconditionError("Nothing was captured")
    _insert_link(note_path, destination, point)
    log.info("Captured image %s into %s", destination.name, note_path.name)
    return destination


def delete_image(
    note_path: Path,
    point: int,
    *,
    confirmed: bool,
    images_dir: str = IMAGES_DIR,
) -> Path | None:
    """Delete the image linked at *point* together with its link line.

    Returns the deleted file, or ``None`` when not *confirmed*.
    """
    text = note_path.read_text(encoding="utf-8")
    link = image_link_at(text, point, images_dir)
    if not confirmed:
        return None

    image = note_path.parent / link.target
    image.unlink()
    note_path.write_text(remove_line_at(text, link.start), encoding="utf-8")
    log.info("Deleted image %s from %s", link.target, note_path.name)
    return image
