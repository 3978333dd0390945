"""Rename and delete notes while keeping the notes that link to them in step.

Both operations walk the links of the note being changed:

- image links point at attachments, which follow the note (renamed with it,
  deleted with it);
- note links point at neighbours, which hold the reciprocal link that has to
  be retargeted or removed.

Nothing here is transactional.  Files are rewritten one at a time and the
first error (a neighbour that no longer exists, a note without a title)
stops the walk, leaving earlier files already changed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from zettel.errors import NoteExistsError, PreconditionError
from zettel.links import format_link, remove_references
from zettel.naming import note_request
from zettel.note import IMAGES_DIR
from zettel.parser import iter_links, read_title, set_title

log = logging.getLogger(__name__)


@dataclass
class RenameResult:
    old_path: Path
    new_path: Path
    updated_notes: list[Path] = field(default_factory=list)
    renamed_images: list[Path] = field(default_factory=list)


@dataclass
class DeleteResult:
    path: Path
    updated_notes: list[Path] = field(default_factory=list)
    deleted_images: list[Path] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Rename
# ---------------------------------------------------------------------------


def _replace_stem(text: str, old_stem: str, new_stem: str) -> str:
    """Replace *old_stem* where it is not part of a longer name."""
    if old_stem == new_stem:
        return text
    pattern = re.compile(rf"(?<![A-Za-z0-9_]){re.escape(old_stem)}(?![A-Za-z0-9])")
    return pattern.sub(lambda _: new_stem, text)


def _replace_stem_in_note(
    text: str, old_name: str, old_stem: str, new_stem: str, images_dir: str
) -> str:
    """Replace the old stem everywhere except inside links to other notes.

    A neighbour's file name may start with the old stem (``x_foo.org`` next
    to ``x_foo_bar.org``), so those link spans are copied through as is.
    """
    parts: list[str] = []
    pos = 0
    for link in iter_links(text):
        if link.is_image(images_dir) or link.target == old_name:
            continue
        parts.append(_replace_stem(text[pos:link.start], old_stem, new_stem))
        parts.append(text[link.start:link.end])
        pos = link.end
    parts.append(_replace_stem(text[pos:], old_stem, new_stem))
    return "".join(parts)


def _planned_image_renames(
    text: str, folder: Path, old_stem: str, new_stem: str, images_dir: str
) -> dict[str, Path]:
    """Map each image target carrying the old stem to its new path."""
    planned: dict[str, Path] = {}
    for link in iter_links(text):
        if not link.is_image(images_dir) or link.target in planned:
            continue
        target = _replace_stem(link.target, old_stem, new_stem)
        if target == link.target:
            continue
        renamed = folder / target
        if renamed.exists():
            raise PreconditionError(f"Image already exists: {target}")
        planned[link.target] = renamed
    return planned


def _retarget(path: Path, old_name: str, new_name: str, old_title: str, new_title: str) -> None:
    """Point the links in *path* that used *old_name* at *new_name*."""
    text = path.read_text(encoding="utf-8")
    updated = text.replace(f"[[file:{old_name}]", f"[[file:{new_name}]")
    if old_title != new_title:
        updated = updated.replace(
            format_link(new_name, old_title), format_link(new_name, new_title)
        )
    if updated != text:
        path.write_text(updated, encoding="utf-8")
        log.debug("Retargeted links in %s", path.name)


def rename_note(
    note_path: Path,
    new_title: str,
    *,
    today: date | None = None,
    images_dir: str = IMAGES_DIR,
) -> RenameResult:
    """Give the note at *note_path* a new title and the matching file name.

    Linked notes are retargeted, attachments whose path carries the old file
    stem are renamed, and the old file is removed once the new one is written.
    """
    note_path = Path(note_path)
    folder = note_path.parent
    text = note_path.read_text(encoding="utf-8")

    old_title = read_title(text, note_path)
    old_name, old_stem = note_path.name, note_path.stem

    request = note_request(new_title, today)
    new_path = folder / request.file_name
    new_name, new_stem = new_path.name, new_path.stem
    if new_path != note_path and new_path.exists():
        raise NoteExistsError(new_path)
    image_renames = _planned_image_renames(text, folder, old_stem, new_stem, images_dir)

    log.info("Renaming %s -> %s", old_name, new_name)
    text = set_title(text, request.title)
    result = RenameResult(old_path=note_path, new_path=new_path)

    seen: set[str] = set()
    for link in iter_links(text):
        if link.target in seen:
            continue
        seen.add(link.target)

        if link.is_image(images_dir):
            renamed = image_renames.get(link.target)
            if renamed is None:
                continue
            (folder / link.target).rename(renamed)
            result.renamed_images.append(renamed)
            log.debug("Renamed image %s -> %s", link.target, renamed.name)
        elif link.target != old_name:
            linked = folder / link.target
            _retarget(linked, old_name, new_name, old_title, request.title)
            result.updated_notes.append(linked)

    # image paths and captions still spell the old stem
    text = _replace_stem_in_note(text, old_name, old_stem, new_stem, images_dir)

    new_path.write_text(text, encoding="utf-8")
    if new_path != note_path:
        note_path.unlink()
    return result


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def delete_note(
    note_path: Path,
    *,
    confirmed: bool,
    images_dir: str = IMAGES_DIR,
) -> DeleteResult | None:
    """Delete a note, its attachments, and every reciprocal link to it.

    Returns ``None`` without touching anything unless *confirmed*.
    """
    note_path = Path(note_path)
    if not confirmed:
        log.info("Delete of %s not confirmed", note_path.name)
        return None

    folder = note_path.parent
    text = note_path.read_text(encoding="utf-8")
    result = DeleteResult(path=note_path)
    log.info("Deleting %s", note_path.name)

    seen: set[str] = set()
    for link in iter_links(text):
        if link.target in seen:
            continue
        seen.add(link.target)

        if link.is_image(images_dir):
            image = folder / link.target
            image.unlink()
            result.deleted_images.append(image)
            log.debug("Deleted image %s", link.target)
        elif link.target != note_path.name:
            linked = folder / link.target
            remove_references(linked, note_path.name)
            result.updated_notes.append(linked)

    note_path.unlink()
    return result
