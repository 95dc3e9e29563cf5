"""Lightweight REST client for the podleague API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def parse_fixed(entries: list[str]) -> list[list[str]] | None:
    pods = [[part.strip() for part in entry.split(",") if part.strip()] for entry in entries]
    return pods or None


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the podleague REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("event_id", nargs="?", help="Event identifier")
    parser.add_argument("--upload", type=Path, help="League JSON document to upload before generating")
    parser.add_argument("--month", help="Month to generate or fetch (generation defaults to the next configured month)")
    parser.add_argument("--pod-size", type=int, default=None, help="Target pod size")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fixed", action="append", default=[], help="Comma-separated ids to pin together")
    parser.add_argument("--list-leagues", action="store_true", help="List stored leagues and exit")
    parser.add_argument("--get-matchings", action="store_true", help="Fetch stored matchings for --month")
    parser.add_argument("--export-path", type=Path, help="Download the month's matches as CSV")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_leagues:
            resp = client.get("/leagues")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.event_id is None:
            raise SystemExit("event_id is required unless using --list-leagues")

        if args.upload:
            resp = client.post("/leagues", json=json.loads(args.upload.read_text(encoding="utf-8")))
            resp.raise_for_status()
            print(f"Uploaded league {resp.json()['event_id']}")

        if args.get_matchings or args.export_path:
            if args.month is None:
                raise SystemExit("--month is required to fetch or export matchings")
            if args.get_matchings:
                resp = client.get(f"/leagues/{args.event_id}/matchings/{args.month}")
                if resp.status_code == 404:
                    raise SystemExit(f"no matchings for {args.month}")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.export_path:
                resp = client.get(f"/leagues/{args.event_id}/matchings/{args.month}/export.csv")
                if resp.status_code == 404:
                    raise SystemExit(f"no matchings for {args.month}")
                resp.raise_for_status()
                args.export_path.write_text(resp.text)
                print(f"CSV export saved to {args.export_path}")
            return

        request = {
            "period": args.month,
            "pod_size": args.pod_size,
            "seed": args.seed,
            "fixed_pods": parse_fixed(args.fixed),
        }
        resp = client.post(f"/leagues/{args.event_id}/matchings", json=request)
        if resp.status_code == 400:
            raise SystemExit(resp.json()["detail"])
        resp.raise_for_status()
        payload = resp.json()
        print(
            f"Generated {len(payload['result']['pods'])} pods with "
            f"{payload['total_matches']} matches for {payload['total_players']} players"
        )
        for warning in payload["result"]["warnings"]:
            print(f"Warning: pod {warning['pod_id']} player {warning['player_id']} "
                  f"has {warning['games']}/{warning['target']} games")


if __name__ == "__main__":
    main()
