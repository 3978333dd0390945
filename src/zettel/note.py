"""Core Note and Link dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

IMAGES_DIR = "images"


@dataclass(frozen=True)
class Link:
    """A single ``[[file:target][label]]`` occurrence inside a note body."""

    target: str
    label: str | None
    start: int      # offset of the opening ``[[``
    end: int        # offset just past the closing ``]]``
    line_no: int    # 1-based

    def is_image(self, images_dir: str = IMAGES_DIR) -> bool:
        """True when the target lives under an ``images/`` folder."""
        return images_dir in PurePosixPath(self.target).parts[:-1]

    def contains(self, point: int) -> bool:
        return self.start <= point < self.end


@dataclass
class Note:
    """A single org note in the notes folder."""

    path: Path
    title: str | None
    body: str
    #: Every link in the body, in document order
    links: list[Link] = field(default_factory=list)

    @property
    def name(self) -> str:
        """The file name, which is the note's identity."""
        return self.path.name

    @property
    def slug(self) -> str:
        return self.path.stem

    def note_links(self, images_dir: str = IMAGES_DIR) -> list[Link]:
        return [link for link in self.links if not link.is_image(images_dir)]

    def image_links(self, images_dir: str = IMAGES_DIR) -> list[Link]:
        return [link for link in self.links if link.is_image(images_dir)]
