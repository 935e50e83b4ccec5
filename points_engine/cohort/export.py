"""Cohort exports: JSON document and quoted CSV."""

import csv
import io
import json

from points_engine.cohort.aggregate import CohortSample
from points_engine.utils import iso_now

CSV_HEADERS = ["Name", "Profile ID", "Badges Completed", "Games Completed", "Total Items", "Points", "Progress %"]


def export_json(samples: list[CohortSample], generated_at: str | None = None) -> str:
    data = {
        "generatedAt": generated_at or iso_now(),
        "totalParticipants": len(samples),
        "participants": [s.to_dict() for s in samples],
    }
    return json.dumps(data, indent=2)


def export_csv(samples: list[CohortSample]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for s in samples:
        writer.writerow([s.name, s.profile_id, s.badges, s.games, s.total_items, s.points, s.progress])
    return buffer.getvalue()
