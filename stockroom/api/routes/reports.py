"""Report endpoints (JSON or CSV)."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from stockroom.api.dependencies import get_current_actor, get_reports
from stockroom.api.exports import csv_response, render_csv
from stockroom.application.validation import parse_date_bound
from stockroom.core.entities.report import InventoryReportRow, TransactionReportRow
from stockroom.core.entities.transaction import TransactionType
from stockroom.core.services import ReportAggregator

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    dependencies=[Depends(get_current_actor)],
)

FORMAT_QUERY = Query(default="json", pattern="^(json|csv)$", description="json or csv")


@router.get("/inventory", response_model=None)
async def inventory_report(
    category: str | None = None,
    start_date: str | None = Query(default=None, description="Inclusive range start"),
    end_date: str | None = Query(default=None, description="Inclusive range end"),
    format: str = FORMAT_QUERY,
    reports: ReportAggregator = Depends(get_reports),
) -> list[InventoryReportRow] | StreamingResponse:
    """Per-item stock in/out, turnover and value for a date range."""
    rows = await reports.inventory_report(
        category=category,
        start=parse_date_bound(start_date, "start_date"),
        end=parse_date_bound(end_date, "end_date"),
    )
    if format == "csv":
        content = render_csv(rows, list(InventoryReportRow.model_fields))
        return csv_response(content, "inventory-report.csv")
    return rows


@router.get("/transactions", response_model=None)
async def transaction_report(
    start_date: str | None = Query(default=None, description="Inclusive range start"),
    end_date: str | None = Query(default=None, description="Inclusive range end"),
    transaction_type: TransactionType | None = None,
    format: str = FORMAT_QUERY,
    reports: ReportAggregator = Depends(get_reports),
) -> list[TransactionReportRow] | StreamingResponse:
    """Transactions joined with item and creator, newest first."""
    rows = await reports.transaction_report(
        start=parse_date_bound(start_date, "start_date"),
        end=parse_date_bound(end_date, "end_date"),
        transaction_type=transaction_type,
    )
    if format == "csv":
        content = render_csv(rows, list(TransactionReportRow.model_fields))
        return csv_response(content, "transaction-report.csv")
    return rows
