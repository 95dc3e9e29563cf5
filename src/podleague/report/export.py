"""CSV export of a period's matches."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Mapping, Optional

from podleague.models import AssignmentResult, Player


EXPORT_HEADERS = (
    "pod_id",
    "overflow",
    "player1_id",
    "player1_name",
    "player2_id",
    "player2_name",
)


def export_matchings_to_csv(
    result: AssignmentResult,
    *,
    lookup: Optional[Mapping[str, Player]] = None,
) -> str:
    """One row per match; ``lookup`` refreshes names from the current roster."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)

    def name_for(player_id: str, stored: str) -> str:
        if lookup and player_id in lookup:
            return lookup[player_id].display_name
        return stored or player_id

    for pod in result.pods:
        for match in pod.matches:
            writer.writerow([
                pod.pod_id,
                "yes" if pod.overflow else "no",
                match.player1_id,
                name_for(match.player1_id, match.player1_name),
                match.player2_id,
                name_for(match.player2_id, match.player2_name),
            ])

    return buffer.getvalue()
