"""Tests for the interactive CLI."""

import builtins

import pytest

import main


class TestParseCommand:
    def test_splits_command_and_argument(self):
        assert main.parse_command("brand Apex Sports") == ("brand", "Apex Sports")

    def test_command_is_case_insensitive(self):
        assert main.parse_command("  APPLY ") == ("apply", "")


def test_toggle_adds_and_removes():
    selected = set()
    main.toggle(selected, "Golf")
    assert selected == {"Golf"}
    main.toggle(selected, "Golf")
    assert selected == set()


def test_pending_criteria():
    criteria = main.pending_criteria("run", {"sports": {"Golf"}, "brands": set(), "categories": set(), "ratings": {5}})
    assert criteria.search == "run"
    assert criteria.sports == frozenset({"Golf"})
    assert criteria.ratings == frozenset({5})


@pytest.fixture
def scripted_input(monkeypatch):
    def feed(lines):
        answers = iter(lines)
        monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    return feed


def test_session_flow(scripted_input, capsys):
    scripted_input(["sport Golf", "rating 4", "apply", "stats", "reset", "bogus", "exit"])
    main.main(seed=3)
    out = capsys.readouterr().out

    assert "products (sports=[Golf], ratings=[4 stars])" in out
    assert "200 products (no filters)" in out
    assert "Last execution exec-" in out
    assert "Unknown command 'bogus'" in out
    assert "Goodbye." in out


def test_invalid_rating_reported(scripted_input, capsys):
    scripted_input(["rating 9", "apply", "rating x", "quit"])
    main.main(seed=3)
    out = capsys.readouterr().out

    assert "Error: Invalid filter criteria for 'ratings'" in out
    assert "Rating must be a number." in out
