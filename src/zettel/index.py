"""NoteIndex: in-memory index of the notes folder and its link graph."""

from __future__ import annotations

from pathlib import Path

from zettel.naming import NOTE_SUFFIX
from zettel.note import IMAGES_DIR, Note
from zettel.parser import parse_note


class NoteIndex:
    """Scans a notes folder and builds backlink and reciprocity views."""

    def __init__(self, notes_dir: Path, images_dir: str = IMAGES_DIR) -> None:
        self.notes_dir = Path(notes_dir)
        self.images_dir = images_dir
        self.notes: dict[str, Note] = {}
        self.backlinks: dict[str, list[str]] = {}

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def build(self) -> None:
        """(Re-)scan the folder and rebuild all indexes."""
        self.notes = {}
        for path in sorted(self.notes_dir.glob(f"*{NOTE_SUFFIX}")):
            note = parse_note(path)
            self.notes[note.name] = note
        self._build_backlinks()

    def _build_backlinks(self) -> None:
        self.backlinks = {name: [] for name in self.notes}
        for name, target in self.edges():
            sources = self.backlinks.setdefault(target, [])
            if name not in sources:
                sources.append(name)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def edges(self) -> list[tuple[str, str]]:
        """Return ``(source, target)`` file-name pairs for every note link."""
        result: list[tuple[str, str]] = []
        for name, note in self.notes.items():
            for link in note.note_links(self.images_dir):
                result.append((name, link.target))
        return result

    def candidates(self, exclude: str | None = None) -> list[str]:
        """File names offered when choosing a note to link to."""
        return [name for name in self.notes if name != exclude]

    def one_way_links(self) -> list[tuple[str, str]]:
        """Links between existing notes that have no link coming back."""
        edges = set(self.edges())
        return sorted(
            (src, tgt)
            for src, tgt in edges
            if tgt in self.notes and tgt != src and (tgt, src) not in edges
        )

    def broken_links(self) -> list[tuple[str, str]]:
        """Links whose target file does not exist."""
        result: list[tuple[str, str]] = []
        for name, note in self.notes.items():
            for link in note.links:
                if not (self.notes_dir / link.target).exists():
                    result.append((name, link.target))
        return result

