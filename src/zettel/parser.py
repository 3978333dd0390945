"""Title header and ``[[file:...]]`` link parser for org notes."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path

from zettel.errors import MissingTitleError
from zettel.note import Link, Note

# #+TITLE: Some title  (org keywords are case-insensitive)
_TITLE_RE = re.compile(r"^(#\+title:)[ \t]*(.*?)[ \t]*$", re.IGNORECASE | re.MULTILINE)
# [[file:target]] or [[file:target][label]]
_LINK_RE = re.compile(r"\[\[file:([^\[\]]+)\](?:\[([^\[\]]*)\])?\]")


def find_title(text: str) -> str | None:
    """Return the ``#+TITLE:`` value of *text*, or ``None`` when absent."""
    match = _TITLE_RE.search(text)
    return match.group(2) if match else None


def read_title(text: str, source: str | Path | None = None) -> str:
    """Return the ``#+TITLE:`` value of *text*.

    Raises :class:`MissingTitleError` when the note has no title line;
    *source* is only used in the error message.
    """
    title = find_title(text)
    if title is None:
        raise MissingTitleError(source)
    return title


def set_title(text: str, title: str) -> str:
    """Rewrite the first ``#+TITLE:`` line of *text* in place."""
    if find_title(text) is None:
        raise MissingTitleError()
    return _TITLE_RE.sub(lambda m: f"{m.group(1)} {title}", text, count=1)


def iter_links(text: str) -> Iterator[Link]:
    """Yield every link in *text* in document order.

    Each call starts again from the top of *text*.
    """
    line_no = 1
    scanned = 0
    for m in _LINK_RE.finditer(text):
        line_no += text.count("\n", scanned, m.start())
        scanned = m.start()
        yield Link(
            target=m.group(1).strip(),
            label=m.group(2),
            start=m.start(),
            end=m.end(),
            line_no=line_no,
        )


def parse_links(text: str) -> list[Link]:
    return list(iter_links(text))


def link_at(text: str, point: int) -> Link | None:
    """Return the link whose span contains offset *point*."""
    for link in iter_links(text):
        if link.start > point:
            break
        if link.contains(point):
            return link
    return None


def link_on_line(text: str, line_no: int) -> Link | None:
    """Return the first link on the 1-based line *line_no*."""
    for link in iter_links(text):
        if link.line_no == line_no:
            return link
        if link.line_no > line_no:
            break
    return None


def line_offset(text: str, line_no: int) -> int:
    """Offset of the first character of the 1-based line *line_no*."""
    offset = 0
    for _ in range(max(line_no, 1) - 1):
        newline = text.find("\n", offset)
        if newline == -1:
            return len(text)
        offset = newline + 1
    return offset


def line_bounds(text: str, point: int) -> tuple[int, int]:
    """``(start, end)`` of the line holding *point*, newline included."""
    start = text.rfind("\n", 0, point) + 1
    newline = text.find("\n", point)
    end = len(text) if newline == -1 else newline + 1
    return start, end


def describe_links(text: str) -> str:
    """Render every link as its label (or bare target when unlabelled)."""
    return _LINK_RE.sub(lambda m: m.group(2) or m.group(1), text)


def parse_note(path: Path) -> Note:
    """Read an ``.org`` file and return a fully-populated :class:`Note`."""
    body = path.read_text(encoding="utf-8")
    return Note(
        path=path,
        title=find_title(body),
        body=body,
        links=parse_links(body),
    )
