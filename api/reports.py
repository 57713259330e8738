"""
Reports API Endpoints

REST API for field-force reports: sales performance, attendance and
visits, and the orders pipeline. Each report can be read as JSON rows or
exported as an Excel workbook or a PDF.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from models.reports import (
    AttendanceReportRequest,
    AttendanceReportRow,
    ExportRequest,
    FileFormat,
    OrdersReportRequest,
    OrdersReportRow,
    ReportType,
    ReportTypesResponse,
    SalesReportRequest,
    SalesReportRow,
)
from db.database import init_connection_pool, is_pool_initialized
from db.record_repository import PostgresRecordSource
from middleware.rate_limiter import limit_export, limit_pdf_export
from services.reports import (
    ExportResult,
    ReportGenerationError,
    ReportService,
    ReportSettings,
    ReportValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    responses={
        400: {"description": "Invalid report request"},
        500: {"description": "Internal server error"},
    },
)


# ============================================================================
# Dependencies
# ============================================================================


def get_report_service() -> ReportService:
    """
    Build a ReportService over the PostgreSQL record source.

    Raises HTTPException 503 if the database is not reachable.
    """
    if not is_pool_initialized():
        try:
            init_connection_pool()
        except Exception as e:
            logger.warning(f"Report API: Database initialization failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={
                    "success": False,
                    "error": "DatabaseNotAvailable",
                    "message": "Database connection not available",
                },
            )
    return ReportService(PostgresRecordSource(), ReportSettings.from_env())


def _bad_request(error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"success": False, "error": "ValidationError", "message": str(error)},
    )


def _internal_error(kind: str, error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"success": False, "error": kind, "message": str(error)},
    )


# ============================================================================
# Report Endpoints
# ============================================================================


@router.post(
    "/sales",
    response_model=List[SalesReportRow],
    summary="Sales performance report",
    description="Invoice rows for the date range, one per line item, with an optional agent filter.",
)
def get_sales_report(
    body: SalesReportRequest,
    service: ReportService = Depends(get_report_service),
) -> List[SalesReportRow]:
    """Get the sales report rows."""
    return _build(service, ReportType.SALES, body.from_date, body.to_date, agent_id=body.agent_id)


@router.post(
    "/attendance",
    response_model=List[AttendanceReportRow],
    summary="Attendance and visit report",
    description="Check-in rows for the date range with an optional agent filter.",
)
def get_attendance_report(
    body: AttendanceReportRequest,
    service: ReportService = Depends(get_report_service),
) -> List[AttendanceReportRow]:
    """Get the attendance report rows."""
    return _build(service, ReportType.ATTENDANCE, body.from_date, body.to_date, agent_id=body.agent_id)


@router.post(
    "/orders",
    response_model=List[OrdersReportRow],
    summary="Orders / pipeline report",
    description="Sales order rows for the date range with an optional status filter.",
)
def get_orders_report(
    body: OrdersReportRequest,
    service: ReportService = Depends(get_report_service),
) -> List[OrdersReportRow]:
    """Get the orders report rows."""
    return _build(service, ReportType.ORDERS, body.from_date, body.to_date, status=body.status)


def _build(service: ReportService, report_type: ReportType, from_date, to_date,
           agent_id: Optional[str] = None, status: Optional[str] = None):
    try:
        return service.build_report(report_type, from_date, to_date, agent_id=agent_id, status=status)
    except ReportValidationError as e:
        raise _bad_request(e)
    except Exception as e:
        logger.error(f"Error building {report_type.value} report: {e}")
        raise _internal_error("DatabaseError", e)


# ============================================================================
# Export Endpoints
# ============================================================================


@router.post(
    "/export/excel",
    summary="Export report to Excel",
    description="Export the selected report as an XLSX workbook.",
    response_class=Response,
)
@limit_export
def export_excel(
    request: Request,
    body: ExportRequest,
    service: ReportService = Depends(get_report_service),
) -> Response:
    """Export the selected report to Excel (XLSX)."""
    return _export(service, body, FileFormat.XLSX)


@router.post(
    "/export/pdf",
    summary="Export report to PDF",
    description="Export the selected report as a landscape PDF.",
    response_class=Response,
)
@limit_pdf_export
def export_pdf(
    request: Request,
    body: ExportRequest,
    service: ReportService = Depends(get_report_service),
) -> Response:
    """Export the selected report to PDF."""
    return _export(service, body, FileFormat.PDF)


def _export(service: ReportService, body: ExportRequest, file_format: FileFormat) -> Response:
    try:
        result: ExportResult = service.export(
            body.type,
            file_format,
            body.from_date,
            body.to_date,
            agent_id=body.agent_id,
            status=body.status,
        )
    except ReportValidationError as e:
        raise _bad_request(e)
    except ReportGenerationError as e:
        logger.error(f"Export failed: type={body.type}, format={file_format.value}: {e}")
        raise _internal_error("ReportGenerationError", e)
    except Exception as e:
        logger.error(f"Export failed: type={body.type}, format={file_format.value}: {e}")
        raise _internal_error("DatabaseError", e)

    return Response(
        content=result.content,
        media_type=result.content_type,
        headers={"Content-Disposition": f"attachment; filename={result.filename}"},
    )


# ============================================================================
# Metadata Endpoints
# ============================================================================


@router.get(
    "/types",
    response_model=ReportTypesResponse,
    summary="List report types",
    description="Get the available report types and export formats.",
)
def list_report_types() -> ReportTypesResponse:
    """List available report types and export formats."""
    return ReportTypesResponse(
        report_types=[rt.value for rt in ReportType],
        file_formats=[fmt.value for fmt in FileFormat],
    )
