"""
FastAPI server: report generation, wallet lookups and scheduler control.

Routes delegate to the services built from Settings (Octav client, report
generator, scheduler). Caller errors map to 400, Octav failures to 502 and
missing configuration to 500. The scheduler is started on startup when
SCHEDULER_ENABLED is true and stopped on shutdown.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from fastapi import BackgroundTasks, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_txreport import __version__
from backend_txreport.core.exceptions import ConfigError, OctavApiError, ReportValidationError
from backend_txreport.core.services import Services, build_services
from backend_txreport.projection.status import validate_status_filter
from backend_txreport.reports.date_range import DateRange, custom_date_range, get_date_range, to_iso
from backend_txreport.reports.generator import check_file_name, normalize_transaction_types
from backend_txreport.txreport_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TRANSACTIONS_LIMIT = 100


@lru_cache(maxsize=1)
def get_services() -> Services:
    """Dependency: app-scoped services built from the environment."""
    return build_services()


# -----------------------------------------------------------------------------
# Request / response models
# -----------------------------------------------------------------------------


class DateRangeBody(BaseModel):
    """Custom range; accepts YYYY-MM-DD, YYYY-MM-DD HH:mm[:ss] or ISO 8601."""

    start: str = Field(..., description="Range start")
    end: str = Field(..., description="Range end (date-only covers the whole day)")


class GenerateReportRequest(BaseModel):
    reportType: str = Field("daily", description="daily | weekly | monthly | last7days | last30days")
    dateRange: DateRangeBody | None = Field(None, description="Custom range; runs synchronously when set")


class TypeFilteredReportRequest(BaseModel):
    transactionTypes: list[str] | str | None = Field(None, description="Raw transaction types (case-sensitive)")
    reportType: str = Field("daily")
    dateRange: DateRangeBody | None = None
    reportName: str | None = Field(None, description="File name stem")


class StatusFilteredReportRequest(BaseModel):
    statusFilter: str = Field("all", description="validated | pending | failed | all")
    reportType: str = Field("daily")
    dateRange: DateRangeBody | None = None
    reportName: str | None = None


class OnChainReportRequest(BaseModel):
    dateRange: DateRangeBody | None = Field(None, description="Omit for all time")


class HealthResponse(BaseModel):
    status: str = Field(..., description="Always 'healthy' when the process serves requests")
    timestamp: str
    version: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class SummaryResponse(BaseModel):
    success: bool = True
    summary: dict[str, Any] | None = None
    message: str


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the report scheduler if enabled; stop it on shutdown."""
    services = get_services()
    started = False
    if services.settings.scheduler_enabled:
        try:
            services.scheduler.start()
            started = True
        except ConfigError as e:
            logger.warning("api_scheduler_not_started", reason=str(e))
    try:
        yield
    finally:
        if started:
            services.scheduler.stop()
        logger.info("api_shutdown")


app = FastAPI(
    title="TxReport API",
    description="Wallet transaction reports from the Octav API",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(ReportValidationError)
async def _validation_error(request: Request, exc: ReportValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(OctavApiError)
async def _octav_error(request: Request, exc: OctavApiError) -> JSONResponse:
    logger.error("api_octav_error", path=request.url.path, error=str(exc), status=exc.status_code)
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.exception_handler(ConfigError)
async def _config_error(request: Request, exc: ConfigError) -> JSONResponse:
    logger.error("api_config_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(404)
async def _not_found(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Endpoint not found"})


def _range_for(report_type: str, body: DateRangeBody | None) -> DateRange:
    if body is not None:
        return custom_date_range(body.start, body.end)
    return get_date_range(report_type)


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=to_iso(datetime.now(timezone.utc)),
        version=__version__,
    )


@app.get("/api/status")
def api_status(services: Services = Depends(get_services)) -> dict[str, Any]:
    """Octav API status (credits), scheduler jobs and basic config."""
    return {
        "api": services.client.get_status(),
        "scheduler": services.scheduler.get_status(),
        "config": {
            "wallets": len(services.settings.wallet_addresses),
            "outputDir": services.settings.report_output_dir,
            "excludedTransactionTypes": sorted(services.gate.excluded_types),
        },
    }


@app.post("/api/reports/generate")
def generate_report(
    body: GenerateReportRequest,
    background_tasks: BackgroundTasks,
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """
    Full report. With dateRange the report is built synchronously and returned;
    without it the named report runs in the background.
    """
    logger.info("api_report_requested", report_type=body.reportType, custom_range=body.dateRange is not None)
    if body.dateRange is not None:
        date_range = _range_for(body.reportType, body.dateRange)
        data = services.scheduler.fetch_report_data(date_range)
        report = services.generator.generate_transaction_report(data, body.reportType)
        return {"success": True, "report": report}
    background_tasks.add_task(services.scheduler.trigger_report, body.reportType)
    return {"success": True, "message": f"{body.reportType} report generation started"}


@app.post("/api/reports/generate-type-filtered", response_model=SummaryResponse)
def generate_type_filtered_report(
    body: TypeFilteredReportRequest,
    services: Services = Depends(get_services),
) -> SummaryResponse:
    if not body.transactionTypes:
        raise ReportValidationError("transactionTypes is required")
    types = normalize_transaction_types(body.transactionTypes)
    report_name = check_file_name(body.reportName or f"type_filtered_{'_'.join(types)}")
    date_range = _range_for(body.reportType, body.dateRange)
    data = services.scheduler.fetch_report_data(date_range)
    summary = services.generator.generate_type_filtered_csv_report(data, types, report_name)
    return SummaryResponse(summary=summary, message="Type-filtered CSV report generated successfully")


@app.post("/api/reports/generate-status-filtered", response_model=SummaryResponse)
def generate_status_filtered_report(
    body: StatusFilteredReportRequest,
    services: Services = Depends(get_services),
) -> SummaryResponse:
    validate_status_filter(body.statusFilter)
    report_name = check_file_name(body.reportName or f"status_filtered_{body.statusFilter}_{body.reportType}")
    date_range = _range_for(body.reportType, body.dateRange)
    data = services.scheduler.fetch_report_data(date_range)
    summary = services.generator.generate_status_filtered_csv_report(data, body.statusFilter, report_name)
    return SummaryResponse(summary=summary, message="Status-filtered CSV report generated successfully")


@app.post("/api/reports/generate-onchain", response_model=SummaryResponse)
def generate_onchain_report(
    body: OnChainReportRequest,
    services: Services = Depends(get_services),
) -> SummaryResponse:
    """Bridge in/out and claim transactions, one row per asset."""
    wallets = list(services.settings.wallet_addresses)
    if not wallets:
        raise ConfigError("No wallet addresses configured (WALLET_ADDRESSES)")
    options: dict[str, Any] = {}
    range_label = None
    date_range_dict = None
    if body.dateRange is not None:
        date_range = custom_date_range(body.dateRange.start, body.dateRange.end)
        date_range_dict = date_range.to_dict()
        options = {"startDate": date_range_dict["start"], "endDate": date_range_dict["end"]}
        range_label = date_range.label()
    transactions = services.client.get_batch_transactions(wallets, **options)
    summary = services.generator.generate_onchain_csv_report(
        {"transactions": transactions, "dateRange": date_range_dict}, range_label=range_label
    )
    if summary is None:
        return SummaryResponse(success=True, summary=None, message="No on-chain transactions found")
    return SummaryResponse(summary=summary, message="On-chain CSV report generated successfully")


@app.get("/api/wallets/{address}/transactions")
def wallet_transactions(
    address: str,
    startDate: str | None = None,
    endDate: str | None = None,
    limit: int = DEFAULT_TRANSACTIONS_LIMIT,
    services: Services = Depends(get_services),
) -> Any:
    options: dict[str, Any] = {"limit": limit}
    if startDate:
        options["startDate"] = startDate
    if endDate:
        options["endDate"] = endDate
    return services.client.get_transactions(address, **options)


@app.get("/api/wallets/{address}/portfolio")
def wallet_portfolio(address: str, services: Services = Depends(get_services)) -> Any:
    return services.client.get_portfolio(address)


@app.get("/api/chains")
def supported_chains(services: Services = Depends(get_services)) -> Any:
    return services.client.get_supported_chains()


@app.post("/api/scheduler/start", response_model=MessageResponse)
def scheduler_start(services: Services = Depends(get_services)) -> MessageResponse:
    services.scheduler.start()
    return MessageResponse(message="Scheduler started")


@app.post("/api/scheduler/stop", response_model=MessageResponse)
def scheduler_stop(services: Services = Depends(get_services)) -> MessageResponse:
    services.scheduler.stop()
    return MessageResponse(message="Scheduler stopped")


@app.get("/api/scheduler/status")
def scheduler_status(services: Services = Depends(get_services)) -> dict[str, Any]:
    return services.scheduler.get_status()
