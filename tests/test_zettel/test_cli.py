"""Tests for the zettel command-line interface."""

from datetime import date
from pathlib import Path

import pytest
from typer.testing import CliRunner

from zettel.cli import app

runner = CliRunner()


@pytest.fixture()
def notes(tmp_path: Path) -> Path:
    folder = tmp_path / "notes"
    folder.mkdir()
    (folder / "a.org").write_text("#+TITLE: Alpha\n\n* Links\n", encoding="utf-8")
    (folder / "b.org").write_text("#+TITLE: Beta\n\n* Links\n", encoding="utf-8")
    return folder


@pytest.fixture()
def invoke(notes: Path, tmp_path: Path, monkeypatch):
    monkeypatch.delenv("ZETTEL_NOTES_DIR", raising=False)

    def _invoke(*args: str, input: str | None = None):
        base = ["--config", str(tmp_path / "absent.yaml"), "--notes-dir", str(notes)]
        return runner.invoke(app, [*base, *args], input=input)

    return _invoke


def _link(invoke) -> None:
    result = invoke("link", "a.org", "--to", "b.org")
    assert result.exit_code == 0, result.output


class TestNew:
    def test_creates_dated_note(self, invoke, notes: Path):
        result = invoke("new", "My First Note")
        assert result.exit_code == 0, result.output
        path = notes / f"{date.today():%Y%m%d}_my_first_note.org"
        assert path.read_text(encoding="utf-8").startswith("#+TITLE: My First Note")

    def test_existing_note(self, invoke):
        assert invoke("new", "Twice").exit_code == 0
        result = invoke("new", "Twice")
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestLinking:
    def test_link_with_option(self, invoke, notes: Path):
        _link(invoke)
        assert "[[file:b.org][Beta]]" in (notes / "a.org").read_text(encoding="utf-8")
        assert "[[file:a.org][Alpha]]" in (notes / "b.org").read_text(encoding="utf-8")

    def test_link_by_choice(self, invoke, notes: Path):
        result = invoke("link", "a.org", input="1\n")
        assert result.exit_code == 0, result.output
        assert "[[file:b.org][Beta]]" in (notes / "a.org").read_text(encoding="utf-8")

    def test_unlink_by_line(self, invoke, notes: Path):
        _link(invoke)
        result = invoke("unlink", "a.org", "--line", "4")
        assert result.exit_code == 0, result.output
        assert (notes / "a.org").read_text(encoding="utf-8") == "#+TITLE: Alpha\n\n* Links\n"
        assert (notes / "b.org").read_text(encoding="utf-8") == "#+TITLE: Beta\n\n* Links\n"

    def test_unlink_off_a_link(self, invoke):
        _link(invoke)
        result = invoke("unlink", "a.org", "--line", "1")
        assert result.exit_code == 1
        assert "Not on a link" in result.output

    def test_unknown_note(self, invoke):
        result = invoke("unlink", "zzz.org", "--line", "1")
        assert result.exit_code == 1
        assert "No such note" in result.output


class TestRenameDelete:
    def test_rename_prompts_for_title(self, invoke, notes: Path):
        _link(invoke)
        result = invoke("rename", "a.org", input="Alpha Prime\n")
        assert result.exit_code == 0, result.output
        new_name = f"{date.today():%Y%m%d}_alpha_prime.org"
        assert (notes / new_name).exists()
        assert not (notes / "a.org").exists()
        assert f"[[file:{new_name}][Alpha Prime]]" in (notes / "b.org").read_text(encoding="utf-8")

    def test_delete_declined(self, invoke, notes: Path):
        result = invoke("delete", "a.org", input="n\n")
        assert result.exit_code == 0
        assert (notes / "a.org").exists()

    def test_delete_yes(self, invoke, notes: Path):
        _link(invoke)
        result = invoke("delete", "a.org", "--yes")
        assert result.exit_code == 0, result.output
        assert not (notes / "a.org").exists()
        assert "a.org" not in (notes / "b.org").read_text(encoding="utf-8")


class TestImages:
    def test_insert_then_delete(self, invoke, notes: Path, tmp_path: Path):
        source = tmp_path / "photo.png"
        source.write_bytes(b"png")
        result = invoke("image", "insert", "a.org", str(source), "--line", "2")
        assert result.exit_code == 0, result.output
        image = notes / "images" / "a_photo.png"
        assert image.exists()
        assert (notes / "a.org").read_text(encoding="utf-8").splitlines()[1] == "[[file:images/a_photo.png]]"

        result = invoke("image", "delete", "a.org", "--line", "2", "--yes")
        assert result.exit_code == 0, result.output
        assert not image.exists()
        assert "images/" not in (notes / "a.org").read_text(encoding="utf-8")

    def test_delete_on_note_link(self, invoke, notes: Path):
        _link(invoke)
        result = invoke("image", "delete", "a.org", "--line", "4", "--yes")
        assert result.exit_code == 1
        assert "Not on an image link" in result.output
        assert "b.org" in (notes / "a.org").read_text(encoding="utf-8")


class TestShowCheck:
    def test_show_uses_labels(self, invoke):
        _link(invoke)
        result = invoke("show", "a.org")
        assert "- Beta" in result.output
        assert "[[file:" not in result.output

    def test_show_raw(self, invoke):
        _link(invoke)
        assert "[[file:b.org][Beta]]" in invoke("show", "a.org", "--raw").output

    def test_check_clean(self, invoke):
        _link(invoke)
        result = invoke("check")
        assert result.exit_code == 0
        assert "2 notes" in result.output

    def test_check_one_way(self, invoke, notes: Path):
        (notes / "a.org").write_text("#+TITLE: Alpha\n  - [[file:b.org][Beta]]\n", encoding="utf-8")
        result = invoke("check")
        assert result.exit_code == 1
        assert "one-way: a.org -> b.org" in result.output

    def test_bad_config(self, tmp_path: Path):
        config = tmp_path / "bad.yaml"
        config.write_text("- not\n- a mapping\n", encoding="utf-8")
        result = runner.invoke(app, ["--config", str(config), "check"])
        assert result.exit_code == 1
