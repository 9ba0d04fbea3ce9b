import json

import pytest
from typer.testing import CliRunner

from locallibrary.config import settings
from locallibrary.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_db(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_file", str(tmp_path / "cli.db"))
    monkeypatch.setenv("LIB_CLI_OUTPUT", "plain")


def test_stats_on_empty_library():
    result = runner.invoke(app, ["stats"])
    assert result.exit_code == 0
    assert "Books: 0" in result.stdout
    assert "Authors: 0" in result.stdout


def test_list_authors_empty():
    result = runner.invoke(app, ["list-authors"])
    assert result.exit_code == 0
    assert "No authors in library." in result.stdout


def test_populate_then_stats():
    result = runner.invoke(app, ["populate"])
    assert result.exit_code == 0
    assert "Added 5 authors, 3 genres, 7 books and 11 copies." in result.stdout

    result = runner.invoke(app, ["stats"])
    assert "Books: 7" in result.stdout
    assert "Copies: 11" in result.stdout
    assert "Copies available: 6" in result.stdout
    assert "Genres: 3" in result.stdout


def test_list_authors_plain_and_json():
    runner.invoke(app, ["populate"])

    result = runner.invoke(app, ["list-authors"])
    lines = result.stdout.strip().splitlines()
    assert lines[0].endswith("Asimov, Isaac (1920 - 1992)")
    assert lines[-1].endswith("Rothfuss, Patrick (1973 - Present)")

    result = runner.invoke(app, ["--output", "json", "list-authors"])
    payload = json.loads(result.stdout)
    assert [a["name"] for a in payload][:2] == ["Asimov, Isaac", "Billings, Bob"]
    assert payload[1]["lifespan"] == "N/A - Present"
