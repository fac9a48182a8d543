from __future__ import annotations
from pydantic import BaseModel
from typing import Dict

class DependencyStatus(BaseModel):
    status: str
    details: str | None = None

class ReadinessResponse(BaseModel):
    status: str
    dependencies: Dict[str, DependencyStatus]

def check_registry_status() -> DependencyStatus:
    from backoffice.services.company_registry import (
        RegistryUnavailableError,
        get_company_registry,
    )
    try:
        registry = get_company_registry()
    except (RegistryUnavailableError, OSError) as e:
        return DependencyStatus(status="error", details=str(e))
    if registry.is_empty():
        return DependencyStatus(status="error", details="Company registry is empty")
    return DependencyStatus(status="ok", details=f"Registry loaded with {registry.height} companies")

def check_engine_status() -> DependencyStatus:
    from backoffice.services.filtering_engine import default_engine
    return DependencyStatus(
        status="ok",
        details=f"{len(default_engine.categories)} categories, open-ended policy {default_engine.open_ended.value}",
    )

def run_readiness_check() -> ReadinessResponse:
    registry_status = check_registry_status()
    engine_status = check_engine_status()

    total_status = "ready"
    if registry_status.status == "error":
        total_status = "not_ready"

    return ReadinessResponse(
        status=total_status,
        dependencies={
            "company_registry": registry_status,
            "filter_engine": engine_status,
        }
    )
