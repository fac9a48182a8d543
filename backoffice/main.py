from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
import time
import uuid

from backoffice.core.config import settings
from backoffice.schemas.filters import (
    CategoryCountsRequest,
    CategoryCountsResponse,
    CompanyFilterRequest,
    CompanyFilterResponse,
    FilterMeta,
)
from backoffice.services.category_counts import count_by_category
from backoffice.services.company_registry import RegistryUnavailableError, registry_records
from backoffice.services.filtering_engine import filter_companies
from backoffice.ops.health_check import run_readiness_check, ReadinessResponse
from backoffice.ops.logger import service_logger
from backoffice.services.meta_service import get_filter_metadata


app = FastAPI(title="Client Status Filter Service", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())
    # Attach request ID to state for logging
    request.state.request_id = request_id

    response: Response = await call_next(request)

    process_time = time.perf_counter() - start_time
    service_logger.log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=process_time * 1000,
        request_id=request_id
    )
    response.headers["X-Process-Time"] = str(process_time)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/health", tags=["meta"])
def health() -> dict:
    return {"status": "ok"}


@app.get("/health/live", tags=["meta"])
def health_live() -> dict:
    return {"status": "ok"}


@app.get("/health/ready", response_model=ReadinessResponse, tags=["meta"])
def health_ready() -> ReadinessResponse:
    return run_readiness_check()


@app.get("/api/v1/meta/filters", tags=["meta"])
def meta_filters() -> dict:
    """Returns the filter panel options (categories, statuses, defaults)."""
    return get_filter_metadata()


def _load_records(request: Request) -> list[dict]:
    try:
        return registry_records()
    except RegistryUnavailableError as e:
        service_logger.log_error(
            "Company registry unavailable",
            error=e,
            request_id=getattr(request.state, "request_id", None),
        )
        raise HTTPException(status_code=503, detail="Company registry unavailable") from e


@app.post(
    "/api/v1/companies/filter",
    response_model=CompanyFilterResponse,
    tags=["companies"],
)
def filter_company_list(query: CompanyFilterRequest, request: Request) -> CompanyFilterResponse:
    records = _load_records(request)

    matched = filter_companies(records, query.filters, query.search, query.now)
    companies = matched[: query.limit] if query.limit is not None else matched

    return CompanyFilterResponse(
        filters=query.filters,
        meta=FilterMeta(
            total_companies=len(records),
            matched=len(matched),
            returned=len(companies),
        ),
        companies=companies,
    )


@app.post(
    "/api/v1/companies/counts",
    response_model=CategoryCountsResponse,
    tags=["companies"],
)
def category_counts(query: CategoryCountsRequest, request: Request) -> CategoryCountsResponse:
    records = _load_records(request)
    return CategoryCountsResponse(counts=count_by_category(records, query.search, query.now))
