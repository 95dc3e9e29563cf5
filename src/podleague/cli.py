"""Command-line interface for fetching rosters and generating monthly pods."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from podleague.config import load_configuration
from podleague.engine import games_target, generate_matchings, swap_players
from podleague.exceptions import LeagueNotFound, MatchingsNotFound, PodLeagueError
from podleague.ingest import fetch_league, league_from_csv
from podleague.models import AssignmentResult, League
from podleague.persistence import LeagueStore
from podleague.report import export_matchings_to_csv, find_shortfalls


logger = logging.getLogger(__name__)

DEFAULT_DB = Path("data") / "podleague.sqlite"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podleague",
        description="Generate monthly player pods and matches for a league",
    )
    parser.add_argument("--db", type=Path, default=DEFAULT_DB, help="SQLite database path")
    parser.add_argument("--config", type=Path, default=None, help="League profile JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch or refresh league data from Longshanks")
    fetch.add_argument("url", help="Event URL (e.g., https://longshanks.org/event/31823/)")

    imp = sub.add_parser("import", help="Import a league roster from CSV")
    imp.add_argument("csv_path", type=Path, help="Roster CSV with id,name[,faction,rating,location]")
    imp.add_argument("--event-id", required=True, help="Event identifier to store the roster under")
    imp.add_argument("--name", default="", help="League display name")
    imp.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for roster CSV columns (e.g., name=First|Last)",
    )

    gen = sub.add_parser("generate", help="Generate matchings for a month")
    gen.add_argument("event_id", help="Event identifier")
    gen.add_argument(
        "--month",
        default=None,
        help="Month name (default: first configured month without matchings)",
    )
    gen.add_argument("--pod-size", type=int, default=None, help="Target pod size (default from config)")
    gen.add_argument("--seed", type=int, default=None, help="Random seed for reproducible results")
    gen.add_argument(
        "--fixed",
        action="append",
        default=[],
        metavar="ID,ID,...",
        help="Comma-separated player ids to pin into one pod (repeatable)",
    )
    gen.add_argument("--no-record", action="store_true", help="Do not add the matches to history")

    view = sub.add_parser("view", help="View league data or matchings")
    view.add_argument("event_id", help="Event identifier")
    view.add_argument("--month", default=None, help="View matchings for a specific month")

    hist = sub.add_parser("history", help="View match history for a league")
    hist.add_argument("event_id", help="Event identifier")
    hist.add_argument("--player", default=None, help="Filter history for a player id or name")

    swap = sub.add_parser("swap", help="Swap two players between pods")
    swap.add_argument("event_id", help="Event identifier")
    swap.add_argument("--month", required=True, help="The month to modify")
    swap.add_argument("--player1", required=True, help="First player id")
    swap.add_argument("--player2", required=True, help="Second player id")
    swap.add_argument("--seed", type=int, default=None, help="Random seed for re-scheduling")

    export = sub.add_parser("export", help="Export a month's matches as CSV")
    export.add_argument("event_id", help="Event identifier")
    export.add_argument("--month", required=True, help="Month to export")
    export.add_argument("--output", type=Path, default=None, help="Output CSV path (stdout if omitted)")

    return parser


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _parse_fixed(entries: list[str]) -> list[list[str]]:
    return [[part.strip() for part in entry.split(",") if part.strip()] for entry in entries]


def _require_league(store: LeagueStore, event_id: str) -> League:
    league = store.get_league(event_id)
    if league is None:
        raise LeagueNotFound(event_id)
    return league


def _require_matchings(store: LeagueStore, event_id: str, month: str) -> AssignmentResult:
    result = store.get_matchings(event_id, month)
    if result is None:
        raise MatchingsNotFound(event_id, month)
    return result


def _print_players(league: League) -> None:
    for player in sorted(league.players, key=lambda p: p.name.lower()):
        faction = f" [{player.faction}]" if player.faction else ""
        rating = f" (Rating: {player.rating})" if player.rating is not None else ""
        print(f"  - {player.display_name}{faction}{rating}")


def _print_pods(result: AssignmentResult, league: League) -> None:
    lookup = league.player_lookup()
    for pod in result.pods:
        overflow = " (overflow)" if pod.overflow else ""
        print(f"Pod {pod.pod_id}{overflow} - {pod.size} players:")
        for player_id in pod.player_ids:
            player = lookup.get(player_id)
            print(f"    {player.display_name if player else player_id}")
        print("  Matches:")
        for match in pod.matches:
            print(f"    - {match}")
        if pod.overflow:
            for warning in find_shortfalls(pod, games_target(pod.size)):
                print(f"  Warning: {warning}")
        print()


def _cmd_fetch(args: argparse.Namespace, store: LeagueStore) -> None:
    print(f"Fetching league data from {args.url}...")
    league = fetch_league(args.url)
    store.save_league(league)
    print()
    print(f"League: {league.name}")
    print(f"Event ID: {league.event_id}")
    print(f"Players: {len(league.players)}")
    print()
    _print_players(league)


def _cmd_import(args: argparse.Namespace, store: LeagueStore) -> None:
    mapping = _parse_mapping(args.column)
    league = league_from_csv(
        args.csv_path,
        event_id=args.event_id,
        name=args.name,
        mapping=mapping or None,
    )
    store.save_league(league)
    print(f"Imported {len(league.players)} players into league {league.event_id}")


def _cmd_generate(args: argparse.Namespace, store: LeagueStore) -> None:
    config = load_configuration(args.config)
    league = _require_league(store, args.event_id)
    stored_history = store.load_history(args.event_id)
    pod_size = args.pod_size if args.pod_size is not None else config.pod_size
    month = args.month or config.next_month(r.period for r in store.list_matchings(args.event_id))
    if month is None:
        months = ", ".join(config.months)
        raise ValueError(f"All configured months ({months}) already have matchings; pass --month")

    print(f"Generating matchings for {league.name}...")
    print(f"  Month: {month}")
    print(f"  Pod Size: {pod_size}")
    print(f"  Players: {len(league.players)}")
    print()

    result = generate_matchings(
        league,
        pod_size,
        stored_history.without_period(month),
        month,
        fixed_pods=_parse_fixed(args.fixed) or None,
        seed=args.seed,
    )
    store.save_matchings(result)
    if not args.no_record:
        store.replace_period(args.event_id, result)
    print(f"Generated {len(result.pods)} pods with {result.total_matches} total matches:")
    print()
    _print_pods(result, league)


def _cmd_view(args: argparse.Namespace, store: LeagueStore) -> None:
    league = _require_league(store, args.event_id)
    print(f"League: {league.name}")
    print(f"Event ID: {league.event_id}")
    print(f"URL: {league.url}")
    print(f"Last Updated: {league.last_updated:%Y-%m-%d %H:%M:%S} UTC")
    print(f"Players: {len(league.players)}")
    print()
    if not args.month:
        print("Registered Players:")
        _print_players(league)
        return

    result = _require_matchings(store, args.event_id, args.month)
    print(f"Matchings for {result.period}:")
    print(f"Generated: {result.generated_at:%Y-%m-%d %H:%M:%S} UTC")
    print(f"Target Pod Size: {result.target_pod_size}")
    print(f"Total Matches: {result.total_matches}")
    print()
    _print_pods(result, league)


def _cmd_history(args: argparse.Namespace, store: LeagueStore) -> None:
    league = _require_league(store, args.event_id)
    history = store.load_history(args.event_id)
    lookup = league.player_lookup()

    def label(player_id: str) -> str:
        player = lookup.get(player_id)
        return player.display_name if player else player_id

    print(f"Match History: {league.name}")
    print(f"Total Recorded Pairings: {len(history.pairings)}")
    print()

    if not args.player:
        for period in history.periods():
            print(f"{period}:")
            for pairing in history.pairings:
                if pairing.period == period:
                    print(f"  - {label(pairing.player1_id)} vs {label(pairing.player2_id)}")
            print()
        return

    player = league.find_player(args.player)
    player_id = player.id if player else args.player
    print(f"History for {label(player_id)}:")
    opponents = sorted(history.previous_opponents(player_id), key=label)
    if not opponents:
        print("  No matches recorded.")
        return
    print(f"  Previous Opponents ({len(opponents)}):")
    for opponent_id in opponents:
        times = history.times_played(player_id, opponent_id)
        suffix = f" (x{times})" if times > 1 else ""
        print(f"    - {label(opponent_id)}{suffix}")


def _cmd_swap(args: argparse.Namespace, store: LeagueStore) -> None:
    league = _require_league(store, args.event_id)
    current = _require_matchings(store, args.event_id, args.month)
    stored_history = store.load_history(args.event_id)

    updated = swap_players(
        current,
        args.player1,
        args.player2,
        league,
        stored_history.without_period(current.period),
        seed=args.seed,
    )
    store.save_matchings(updated)
    if stored_history.has_period(current.period):
        store.replace_period(args.event_id, updated)

    lookup = league.player_lookup()
    new_pod_1 = updated.pod_for(args.player1)
    new_pod_2 = updated.pod_for(args.player2)
    name_1 = lookup[args.player1].display_name if args.player1 in lookup else args.player1
    name_2 = lookup[args.player2].display_name if args.player2 in lookup else args.player2
    print(
        f"Swapped {name_1} (now in Pod {new_pod_1.pod_id if new_pod_1 else '?'}) "
        f"and {name_2} (now in Pod {new_pod_2.pod_id if new_pod_2 else '?'})"
    )
    print("Matches regenerated for affected pods.")


def _cmd_export(args: argparse.Namespace, store: LeagueStore) -> None:
    result = _require_matchings(store, args.event_id, args.month)
    league = store.get_league(args.event_id)
    csv_text = export_matchings_to_csv(result, lookup=league.player_lookup() if league else None)
    if args.output:
        args.output.write_text(csv_text, encoding="utf-8")
        print(f"Wrote {result.total_matches} matches to {args.output}")
    else:
        sys.stdout.write(csv_text)


_COMMANDS = {
    "fetch": _cmd_fetch,
    "import": _cmd_import,
    "generate": _cmd_generate,
    "view": _cmd_view,
    "history": _cmd_history,
    "swap": _cmd_swap,
    "export": _cmd_export,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = LeagueStore(args.db)
    try:
        _COMMANDS[args.command](args, store)
    except (PodLeagueError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
