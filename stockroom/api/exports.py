"""CSV rendering for export and report endpoints."""

import csv
import io
from collections.abc import Iterable, Sequence

from fastapi.responses import StreamingResponse
from pydantic import BaseModel


def render_csv(rows: Iterable[BaseModel], fields: Sequence[str]) -> str:
    """
    Render models as CSV with a header row of ``fields``.

    The header is written even when there are no rows. ``None`` becomes
    an empty cell.
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(fields)
    for row in rows:
        data = row.model_dump(mode="json")
        writer.writerow(["" if data.get(f) is None else data[f] for f in fields])
    return output.getvalue()


def csv_response(content: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
