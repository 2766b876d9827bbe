from __future__ import annotations

# CSV export of waiting tickets.
#
# Output matches the historic export file: a quoted `"service","number"`
# header followed by one quoted row per waiting ticket.

import csv
from typing import Iterable, TextIO

FIELDS = ("service", "number")


def write_waiting_csv(rows: Iterable[dict[str, str]], out: TextIO) -> int:
    """Write export rows to `out`. Returns the number of data rows written."""
    writer = csv.DictWriter(out, fieldnames=FIELDS, quoting=csv.QUOTE_ALL, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    count = 0
    for row in rows:
        writer.writerow(row)
        count += 1
    return count
