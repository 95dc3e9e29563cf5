from pathlib import Path

from podleague.ingest import RosterRow, league_from_csv, load_roster_csv, rows_to_players


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "roster.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_roster_with_default_columns(tmp_path):
    path = _write(
        tmp_path,
        "id,name,faction,rating,location\n"
        "#101,Alice Smith,Galactic Empire,1 520,Leeds\n"
        "102,Bob Jones,,,\n",
    )

    players = load_roster_csv(path)

    assert [p.id for p in players] == ["101", "102"]
    assert players[0].faction == "Galactic Empire"
    assert players[0].rating == 1520
    assert players[0].location == "Leeds"
    assert players[1].faction is None
    assert players[1].rating is None


def test_custom_mapping_joins_columns(tmp_path):
    path = _write(
        tmp_path,
        "Player ID,First,Last,Army\n"
        "7,Ada,Lovelace,Republic\n",
    )

    players = load_roster_csv(
        path,
        mapping={"id": "Player ID", "name": "First|Last", "faction": "Army"},
    )

    assert players[0].name == "Ada Lovelace"
    assert players[0].faction == "Republic"


def test_rows_without_id_or_repeated_are_skipped():
    rows = [
        RosterRow(raw_id="1", raw_name="First"),
        RosterRow(raw_id="", raw_name="Nobody"),
        RosterRow(raw_id="#1", raw_name="Again"),
        RosterRow(raw_id="2", raw_name=""),
    ]

    players = rows_to_players(rows)

    assert [(p.id, p.name) for p in players] == [("1", "First"), ("2", "2")]


def test_row_from_mapping_treats_blank_as_missing():
    row = RosterRow.from_mapping(
        {"id": " 5 ", "name": "Zed", "rating": "  "},
        {"id": "id", "name": "name", "rating": "rating", "faction": "faction"},
    )

    assert row.raw_id == "5"
    assert row.raw_rating is None
    assert row.raw_faction is None


def test_league_from_csv_defaults_name_to_event(tmp_path):
    path = _write(tmp_path, "id,name\n1,A\n2,B\n")

    league = league_from_csv(path, event_id="spring")

    assert league.event_id == "spring"
    assert league.name == "spring"
    assert len(league.players) == 2
