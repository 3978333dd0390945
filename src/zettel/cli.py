"""Command-line host for the note commands."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from zettel.commands import Commands
from zettel.config import ZettelConfig, load_config
from zettel.errors import ZettelError
from zettel.index import NoteIndex
from zettel.links import write_link
from zettel.logging_setup import setup_logging
from zettel.naming import create_note, note_request
from zettel.parser import describe_links, line_offset, link_on_line

log = logging.getLogger(__name__)

app = typer.Typer(help="org-zettel - manage a folder of linked org notes")
image_app = typer.Typer(help="Manage image attachments")
app.add_typer(image_app, name="image")

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


class TerminalPrompter:
    """Answers command prompts on the terminal."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes

    def ask(self, prompt: str, default: str = "") -> str:
        return typer.prompt(prompt, default=default, show_default=bool(default))

    def choose(self, prompt: str, options: list[str]) -> str | None:
        if not options:
            self.message("Nothing to choose from")
            return None
        for number, option in enumerate(options, start=1):
            console.print(f"{number:>3}  {option}")
        while True:
            number = typer.prompt(prompt, type=int)
            if 1 <= number <= len(options):
                return options[number - 1]
            self.message(f"Pick a number from 1 to {len(options)}")

    def confirm(self, prompt: str) -> bool:
        if self.assume_yes:
            return True
        return typer.confirm(prompt, default=False)

    def message(self, text: str) -> None:
        console.print(text, markup=False, highlight=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _config(ctx: typer.Context) -> ZettelConfig:
    return ctx.obj


def _resolve(config: ZettelConfig, note: str) -> Path:
    path = Path(note).expanduser()
    if not path.exists():
        path = config.notes_dir / note
    if not path.is_file():
        err_console.print(f"No such note: {note}")
        raise typer.Exit(1)
    return path


def _point(path: Path, line: Optional[int]) -> int:
    """Cursor offset for *line*: on its first link, else at its start."""
    text = path.read_text(encoding="utf-8")
    if line is None:
        return len(text)
    link = link_on_line(text, line)
    return link.start if link else line_offset(text, line)


def _run(ctx: typer.Context, note: str, label: str, *args, line: Optional[int] = None, yes: bool = False) -> None:
    config = _config(ctx)
    path = _resolve(config, note)
    commands = Commands(config, TerminalPrompter(assume_yes=yes))
    commands.open(path, _point(path, line))
    try:
        commands.run(label, *args)
    except (ZettelError, OSError) as exc:
        log.debug("%s failed", label, exc_info=True)
        err_console.print(f"{label} failed: {exc}")
        raise typer.Exit(1) from exc
    if commands.last_error is not None:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.callback()
def main(
    ctx: typer.Context,
    notes_dir: Optional[Path] = typer.Option(None, "--notes-dir", "-d", help="Notes folder"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    try:
        config = load_config(config_path)
    except ZettelError as exc:
        err_console.print(str(exc))
        raise typer.Exit(1) from exc
    if notes_dir is not None:
        config.notes_dir = notes_dir.expanduser()
    setup_logging("DEBUG" if verbose else config.log_level, config.log_file)
    ctx.obj = config


@app.command()
def new(ctx: typer.Context, title: str = typer.Argument(..., help="Title of the new note")) -> None:
    """Create a note from a title."""
    config = _config(ctx)
    try:
        path = create_note(config.notes_dir, note_request(title))
    except ZettelError as exc:
        err_console.print(str(exc))
        raise typer.Exit(1) from exc
    console.print(str(path))


@app.command()
def rename(ctx: typer.Context, note: str) -> None:
    """Retitle a note and update every note linked to it."""
    _run(ctx, note, "Rename")


@app.command()
def delete(
    ctx: typer.Context,
    note: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a note, its images and the links pointing back to it."""
    _run(ctx, note, "Delete", yes=yes)


@app.command()
def link(
    ctx: typer.Context,
    note: str,
    to: Optional[str] = typer.Option(None, "--to", help="File name of the note to link"),
) -> None:
    """Link two notes both ways."""
    if to is None:
        _run(ctx, note, "Link")
        return
    config = _config(ctx)
    origin = _resolve(config, note)
    destination = _resolve(config, to)
    try:
        write_link(origin, destination)
    except (ZettelError, OSError) as exc:
        err_console.print(f"Link failed: {exc}")
        raise typer.Exit(1) from exc


@app.command()
def unlink(
    ctx: typer.Context,
    note: str,
    line: int = typer.Option(..., "--line", "-l", help="Line holding the link"),
) -> None:
    """Remove the link on LINE and the link coming back."""
    _run(ctx, note, "Unlink", line=line)


@image_app.command("insert")
def image_insert(
    ctx: typer.Context,
    note: str,
    source: Path,
    line: Optional[int] = typer.Option(None, "--line", "-l", help="Insert at the start of this line"),
) -> None:
    """Copy an image into images/ and link it from NOTE."""
    _run(ctx, note, "Insert image", source, line=line)


@image_app.command("delete")
def image_delete(
    ctx: typer.Context,
    note: str,
    line: int = typer.Option(..., "--line", "-l", help="Line holding the image link"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete the image linked on LINE and its link."""
    _run(ctx, note, "Delete image", line=line, yes=yes)


@app.command()
def show(
    ctx: typer.Context,
    note: str,
    raw: bool = typer.Option(False, "--raw", help="Show link markup instead of labels"),
) -> None:
    """Print a note."""
    text = _resolve(_config(ctx), note).read_text(encoding="utf-8")
    console.print(text if raw else describe_links(text), markup=False, highlight=False)


@app.command()
def check(ctx: typer.Context) -> None:
    """Report one-way and broken links."""
    config = _config(ctx)
    index = NoteIndex(config.notes_dir, config.images_dir)
    index.build()
    problems = 0
    for src, tgt in index.one_way_links():
        console.print(f"one-way: {src} -> {tgt}", markup=False)
        problems += 1
    for src, tgt in index.broken_links():
        console.print(f"broken:  {src} -> {tgt}", markup=False)
        problems += 1
    if problems:
        raise typer.Exit(1)
    console.print(f"{len(index.notes)} notes, all links reciprocal")
