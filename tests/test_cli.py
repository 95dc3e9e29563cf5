import csv
from io import StringIO

import pytest

from podleague.cli import main
from podleague.persistence import LeagueStore


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cli.sqlite"


@pytest.fixture
def roster(tmp_path):
    path = tmp_path / "roster.csv"
    rows = ["id,name,faction"] + [f"{i},Player {i},Empire" for i in range(1, 7)]
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return path


def _run(db_path, *argv):
    return main(["--db", str(db_path), *argv])


def _import(db_path, roster):
    assert _run(db_path, "import", str(roster), "--event-id", "e1", "--name", "Spring League") == 0


def test_import_and_view(db_path, roster, capsys):
    _import(db_path, roster)

    assert _run(db_path, "view", "e1") == 0
    out = capsys.readouterr().out
    assert "Imported 6 players into league e1" in out
    assert "League: Spring League" in out
    assert "Player 3 #3 [Empire]" in out


def test_generate_records_history(db_path, roster, capsys):
    _import(db_path, roster)

    code = _run(db_path, "generate", "e1", "--month", "February", "--pod-size", "3", "--seed", "1")

    assert code == 0
    out = capsys.readouterr().out
    assert "Generated 2 pods with 6 total matches" in out
    store = LeagueStore(db_path)
    assert store.get_matchings("e1", "february") is not None
    assert len(store.load_history("e1").pairings) == 6


def test_generate_without_recording(db_path, roster):
    _import(db_path, roster)

    assert _run(db_path, "generate", "e1", "--month", "March", "--no-record") == 0

    assert LeagueStore(db_path).get_history("e1") is None


def test_generate_with_fixed_pods_and_swap(db_path, roster, capsys):
    _import(db_path, roster)
    _run(db_path, "generate", "e1", "--month", "April", "--fixed", "1,2,3", "--fixed", "4,5,6")
    capsys.readouterr()

    assert _run(db_path, "swap", "e1", "--month", "april", "--player1", "1", "--player2", "4") == 0

    out = capsys.readouterr().out
    assert "Swapped Player 1 #1 (now in Pod 2) and Player 4 #4 (now in Pod 1)" in out
    store = LeagueStore(db_path)
    result = store.get_matchings("e1", "April")
    assert result.pods[0].player_ids == ("4", "2", "3")
    history = store.load_history("e1")
    assert history.have_played("4", "2")
    assert not history.have_played("1", "2")


def test_swap_same_pod_reports_error(db_path, roster, capsys):
    _import(db_path, roster)
    _run(db_path, "generate", "e1", "--month", "April", "--fixed", "1,2,3")

    assert _run(db_path, "swap", "e1", "--month", "April", "--player1", "1", "--player2", "2") == 1
    assert "Error:" in capsys.readouterr().err


def test_history_for_player(db_path, roster, capsys):
    _import(db_path, roster)
    _run(db_path, "generate", "e1", "--month", "April", "--fixed", "1,2,3", "--fixed", "4,5,6")
    capsys.readouterr()

    assert _run(db_path, "history", "e1", "--player", "player 1") == 0

    out = capsys.readouterr().out
    assert "History for Player 1 #1:" in out
    assert "Previous Opponents (2):" in out


def test_export_to_file(db_path, roster, tmp_path):
    _import(db_path, roster)
    _run(db_path, "generate", "e1", "--month", "May", "--pod-size", "2", "--seed", "3")
    output = tmp_path / "may.csv"

    assert _run(db_path, "export", "e1", "--month", "May", "--output", str(output)) == 0

    rows = list(csv.reader(StringIO(output.read_text(encoding="utf-8"))))
    assert rows[0][0] == "pod_id"
    assert len(rows) == 4


def test_unknown_league(db_path, capsys):
    assert _run(db_path, "generate", "missing", "--month", "May") == 1
    assert "League missing not found" in capsys.readouterr().err


def test_invalid_pod_size(db_path, roster, capsys):
    _import(db_path, roster)

    assert _run(db_path, "generate", "e1", "--month", "May", "--pod-size", "1") == 1
    assert "Pod size must be at least 2" in capsys.readouterr().err


def test_view_missing_month(db_path, roster, capsys):
    _import(db_path, roster)

    assert _run(db_path, "view", "e1", "--month", "June") == 1
    assert "Error:" in capsys.readouterr().err


def test_regenerating_a_month_replaces_its_history(db_path, roster):
    _import(db_path, roster)
    _run(db_path, "generate", "e1", "--month", "March", "--fixed", "1,2", "--fixed", "3,4", "--fixed", "5,6")
    _run(db_path, "generate", "e1", "--month", "february", "--seed", "7")

    assert _run(db_path, "generate", "e1", "--month", "March", "--seed", "2") == 0

    store = LeagueStore(db_path)
    history = store.load_history("e1")
    march = store.get_matchings("e1", "March")
    recorded = {frozenset((p.player1_id, p.player2_id)) for p in history.pairings if p.period == "March"}
    assert recorded == {frozenset((m.player1_id, m.player2_id)) for pod in march.pods for m in pod.matches}
    assert len(history.pairings) == march.total_matches + len(
        [p for p in history.pairings if p.period == "february"]
    )


def test_generate_defaults_to_next_configured_month(db_path, roster, capsys):
    _import(db_path, roster)

    assert _run(db_path, "generate", "e1", "--seed", "1") == 0
    assert _run(db_path, "generate", "e1", "--seed", "2") == 0

    out = capsys.readouterr().out
    assert "Month: February" in out
    assert "Month: March" in out
    store = LeagueStore(db_path)
    assert store.get_matchings("e1", "March") is not None
    assert store.load_history("e1").periods() == ["February", "March"]


def test_generate_without_month_when_all_months_done(db_path, roster, tmp_path, capsys):
    _import(db_path, roster)
    profile = tmp_path / "profile.json"
    profile.write_text('{"months": ["May"]}', encoding="utf-8")
    _run(db_path, "--config", str(profile), "generate", "e1")
    capsys.readouterr()

    assert _run(db_path, "--config", str(profile), "generate", "e1") == 1
    assert "All configured months (May)" in capsys.readouterr().err


def test_view_month_shows_stored_summary(db_path, roster, capsys):
    _import(db_path, roster)
    _run(db_path, "generate", "e1", "--month", "June", "--seed", "4")
    capsys.readouterr()

    assert _run(db_path, "view", "e1", "--month", "june") == 0

    out = capsys.readouterr().out
    assert "Matchings for June:" in out
    assert "Total Matches: 6" in out
    assert "Generated 2 pods" not in out
    assert "Pod 1 - 3 players:" in out
