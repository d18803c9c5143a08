"""
People compliance routes.

The data layer fetches profiles, documents, training and site-access rows in
parallel and posts them here; this router validates them, builds the
compliance view, narrows it by the filter state and returns the KPIs.
Nothing is persisted.
"""
import logging
import time
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.models.compliance_schema import (
    DocumentRecord,
    EmployeeRecord,
    FilterState,
    SiteAccessRecord,
    SiteRecord,
    TrainingRecord,
)
from app.services.compliance_engine import (
    build_compliance_view,
    compliance_to_dict,
    eligible_employees,
    list_departments,
)
from app.services.compliance_filters import apply_filters
from app.services.compliance_summary import summarize_compliance, summary_to_dict
from app.services.perf_monitor import tracker as perf_tracker

router = APIRouter(prefix="/api/v1/compliance", tags=["People Compliance"])
logger = logging.getLogger("people-compliance.api")


class ComplianceEvaluateRequest(BaseModel):
    employees: List[EmployeeRecord] = Field(default_factory=list)
    documents: List[DocumentRecord] = Field(default_factory=list)
    training: List[TrainingRecord] = Field(default_factory=list)
    site_access: List[SiteAccessRecord] = Field(default_factory=list)
    sites: List[SiteRecord] = Field(default_factory=list)
    today: Optional[date] = Field(None, description="Reference date; defaults to the server date")
    filters: FilterState = Field(default_factory=FilterState)
    apply_eligibility: bool = Field(
        True, description="Drop terminated employees and platform admins before building"
    )


def _evaluate(req: ComplianceEvaluateRequest) -> dict:
    if isinstance(req.filters.expiry_window, int) and req.filters.expiry_window < 0:
        raise HTTPException(status_code=400, detail="expiry_window must be zero or more days")

    start = time.perf_counter()
    today = req.today or date.today()
    employees = eligible_employees(req.employees) if req.apply_eligibility else list(req.employees)

    view = build_compliance_view(
        employees,
        req.documents,
        req.training,
        req.site_access,
        today=today,
        sites=req.sites,
    )
    filtered = apply_filters(view, req.filters)
    summary = summarize_compliance(filtered)

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    perf_tracker.record_evaluation(duration_ms, len(view))
    logger.info(
        f"Compliance evaluated: {len(filtered)}/{len(view)} employees in view, "
        f"overall score {summary.overall_score}",
        extra={"employee_count": len(view), "duration_ms": duration_ms},
    )
    return {
        "today": today,
        "departments": list_departments(employees),
        "employees": filtered,
        "summary": summary,
    }


@router.post("/evaluate")
async def evaluate_compliance(req: ComplianceEvaluateRequest):
    """Full compliance view: filtered employees with their items, plus the KPI summary."""
    result = _evaluate(req)
    return {
        "today": result["today"].isoformat(),
        "departments": result["departments"],
        "employees": [compliance_to_dict(e) for e in result["employees"]],
        "summary": summary_to_dict(result["summary"]),
    }


@router.post("/summary")
async def compliance_summary(req: ComplianceEvaluateRequest):
    """KPI summary only, for dashboard cards."""
    result = _evaluate(req)
    return summary_to_dict(result["summary"])
