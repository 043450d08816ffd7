"""Tests for ShareFolderCompleter."""

import os

import pytest
from prompt_toolkit.document import Document

from cli.completer import ShareFolderCompleter
from cli.constants import COMMANDS


@pytest.fixture
def completer():
    return ShareFolderCompleter()


@pytest.fixture
def local_dir(tmp_path, monkeypatch):
    """Working directory with a few local files."""
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "notebook").mkdir()
    (tmp_path / "photo.png").write_text("x")
    (tmp_path / ".hidden").write_text("x")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


def test_empty_input_shows_all_commands(completer):
    assert get_completions_list(completer, "") == COMMANDS


def test_partial_command_filters(completer):
    assert get_completions_list(completer, "d") == ["download", "delete"]


def test_upload_completes_local_files(completer, local_dir):
    completions = get_completions_list(completer, "upload no")
    assert completions == ["notebook" + os.sep, "notes.txt"]


def test_upload_hides_dotfiles_unless_asked(completer, local_dir):
    assert ".hidden" not in get_completions_list(completer, "upload ")
    assert ".hidden" in get_completions_list(completer, "upload .h")


def test_upload_completes_inside_directory(completer, local_dir):
    (local_dir / "notebook" / "page1.txt").write_text("x")
    assert get_completions_list(completer, "upload notebook/p") == [os.path.join("notebook", "page1.txt")]


def test_only_first_upload_argument_is_completed(completer, local_dir):
    assert get_completions_list(completer, "upload notes.txt no") == []


def test_other_commands_get_no_argument_completion(completer, local_dir):
    assert get_completions_list(completer, "list no") == []
