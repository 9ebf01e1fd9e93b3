"""CSV rendering for report exports."""

import csv
import io
from typing import Dict, Iterable, Sequence


CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def render_csv(rows: Iterable[Dict[str, object]], fieldnames: Sequence[str]) -> bytes:
    """
    Render dict rows to UTF-8 CSV with the given header.
    Keys outside fieldnames are ignored.
    """
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row or {})
    return buf.getvalue().encode("utf-8")
