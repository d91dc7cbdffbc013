"""Tests for the ledger command-line entry."""

import pytest

from ledger import main


def test_stats_on_empty_ledger(repo_db_path, capsys):
    assert main(["--db-path", repo_db_path, "stats"]) == 0

    out = capsys.readouterr().out
    assert "Total bets:     0" in out
    assert "unavailable" in out


def test_demo_then_summary(repo_db_path, capsys):
    assert main(["--db-path", repo_db_path, "demo", "--player", "p1", "--wager", "10", "--guess", "1"]) == 0
    assert "Bet 1: guess=1" in capsys.readouterr().out

    assert main(["--db-path", repo_db_path, "summary", "1"]) == 0
    assert "player=p1" in capsys.readouterr().out


def test_summary_of_missing_bet(repo_db_path, capsys):
    assert main(["--db-path", repo_db_path, "summary", "5"]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_demo_rejects_invalid_guess(repo_db_path):
    with pytest.raises(SystemExit):
        main(["--db-path", repo_db_path, "demo", "--guess", "2"])
