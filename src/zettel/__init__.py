"""org-zettel: reciprocal links, rename and delete for a folder of org notes."""

from zettel.index import NoteIndex
from zettel.lifecycle import delete_note, rename_note
from zettel.links import unlink_note, write_link
from zettel.naming import NoteRequest, create_note, note_request, title_to_file_name
from zettel.note import Link, Note
from zettel.parser import iter_links, parse_note, read_title

__all__ = [
    "Link",
    "Note",
    "NoteIndex",
    "NoteRequest",
    "create_note",
    "delete_note",
    "iter_links",
    "note_request",
    "parse_note",
    "read_title",
    "rename_note",
    "title_to_file_name",
    "unlink_note",
    "write_link",
]
