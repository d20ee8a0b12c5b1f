"""
Report API Endpoints

GET /api/v1/reports/{name} returns a report as JSON;
GET /api/v1/reports/{name}/export returns it as a CSV attachment.

Every endpoint accepts the same filters. Without a date range the current
month is reported.
"""

from datetime import date
from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
import structlog

from opsreport.reports import (
    FetchError,
    InMemoryRecordSource,
    RecordSource,
    ReportParams,
    ReportService,
    UnknownReportError,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


@lru_cache()
def get_record_source() -> RecordSource:
    """
    Record source used by the report endpoints.

    Deployments override this dependency with their database-backed source;
    the default holds no records.
    """
    return InMemoryRecordSource()


def get_report_service(source: RecordSource = Depends(get_record_source)) -> ReportService:
    return ReportService(source)


def get_report_params(
    start_date: Optional[date] = Query(None, description="First day, inclusive"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive"),
    route_id: Optional[str] = Query(None),
    customer_id: Optional[str] = Query(None),
    as_of_date: Optional[date] = Query(None, description="Reference date for aging and compliance"),
) -> ReportParams:
    # A missing bound comes from the month holding the given one, else this month
    month = ReportParams.current_month(today=start_date or end_date)
    try:
        return ReportParams(
            start_date=start_date or month.start_date,
            end_date=end_date or month.end_date,
            route_id=route_id,
            customer_id=customer_id,
            as_of_date=as_of_date,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])


def _run(action, name: str) -> Any:
    try:
        return action()
    except UnknownReportError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FetchError as e:
        logger.error("Report failed", report=name, dataset=e.dataset, error=e.message)
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/{report_name}")
def get_report(
    report_name: str,
    params: ReportParams = Depends(get_report_params),
    service: ReportService = Depends(get_report_service),
) -> Any:
    report = _run(lambda: service.build(report_name, params), report_name)
    return jsonable_encoder(report)


@router.get("/{report_name}/export")
def export_report(
    report_name: str,
    params: ReportParams = Depends(get_report_params),
    service: ReportService = Depends(get_report_service),
) -> Response:
    text = _run(lambda: service.export(report_name, params), report_name)
    filename = f"{report_name}-report-{params.start_date.isoformat()}-to-{params.end_date.isoformat()}.csv"
    return Response(
        content=text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
