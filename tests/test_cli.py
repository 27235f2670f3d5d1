"""Tests for the flashcards CLI."""
import json

import pytest

from app.modules.flashcards import cli
from app.modules.flashcards.models.flashcards import Flashcard


@pytest.fixture
def fake_generate(monkeypatch):
    received = []

    def _generate(text):
        received.append(text)
        return [Flashcard(front="Q", back="A")]

    monkeypatch.setattr(cli, "generate_flashcards_sync", _generate)
    return received


def test_generate_from_prompt(fake_generate, capsys) -> None:
    assert cli.main(["generate", "--prompt", "Photosynthesis"]) == 0
    assert json.loads(capsys.readouterr().out) == [{"front": "Q", "back": "A"}]
    assert fake_generate == ["Photosynthesis"]


def test_generate_from_file(fake_generate, tmp_path, capsys) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("Cell biology notes", encoding="utf-8")

    assert cli.main(["generate", "--prompt-file", str(notes)]) == 0
    assert fake_generate == ["Cell biology notes"]


def test_prompt_required(fake_generate) -> None:
    with pytest.raises(SystemExit):
        cli.main(["generate"])
    assert fake_generate == []


def test_prompt_and_file_conflict(fake_generate, tmp_path) -> None:
    with pytest.raises(SystemExit):
        cli.main(["generate", "-p", "x", "--prompt-file", str(tmp_path / "f.txt")])
