"""
People Compliance — employee compliance builder

Stage 1: index the raw record sets once per run
         (document types, mandatory training rows, site ids per employee)
Stage 2: fold each eligible employee through the five rule evaluators
Stage 3: roll items up per category and score the employee

Results feed the filter engine and the summary aggregator, and are
serialised with ``compliance_to_dict`` for the API layer. Each call builds
its own index; nothing survives between runs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Optional

from app.config import EXCLUDED_APP_ROLES
from app.models.compliance_schema import (
    DocumentRecord,
    EmployeeRecord,
    SiteAccessRecord,
    SiteRecord,
    TrainingRecord,
)
from app.services.compliance_rules import (
    COMPLIANT,
    DBS,
    DOCUMENTS,
    EXPIRING_SOON,
    NOT_APPLICABLE,
    PROBATION,
    RIGHT_TO_WORK,
    TRAINING,
    URGENT_STATUSES,
    ComplianceItem,
    evaluate_dbs,
    evaluate_documents,
    evaluate_probation,
    evaluate_right_to_work,
    evaluate_training,
    round_half_up,
    worst_status,
)
from app.services.perf_monitor import timed

logger = logging.getLogger("people-compliance")


# ── Data Classes ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EmployeeCompliance:
    profile_id: str
    full_name: str
    overall_score: int              # 0–100
    items: tuple[ComplianceItem, ...]
    rtw: str                        # worst status per category
    dbs: str
    training: str
    documents: str
    probation: str
    site_ids: tuple[str, ...] = ()  # home site first, then site-access rows
    employee_number: Optional[str] = None
    department: Optional[str] = None
    site_id: Optional[str] = None   # home site
    site_name: Optional[str] = None
    avatar_url: Optional[str] = None
    start_date: Optional[date] = None


@dataclass
class ComplianceIndex:
    """Per-run lookup maps keyed by profile id."""
    document_types: dict[str, set[str]] = field(default_factory=dict)
    training: dict[str, list[TrainingRecord]] = field(default_factory=dict)
    site_ids: dict[str, dict[str, None]] = field(default_factory=dict)   # ordered set


# ── Eligibility ───────────────────────────────────────────────────────────────

def is_eligible(employee: EmployeeRecord) -> bool:
    """Terminated employees and platform admins never appear in the view."""
    if employee.termination_date is not None:
        return False
    role = (employee.app_role or "").strip().lower()
    return role not in EXCLUDED_APP_ROLES


def eligible_employees(employees: Iterable[EmployeeRecord]) -> list[EmployeeRecord]:
    return [e for e in employees if is_eligible(e)]


def list_departments(employees: Iterable[EmployeeRecord]) -> list[str]:
    """Sorted unique departments, for populating the department filter."""
    return sorted({e.department for e in employees if e.department})


# ── Stage 1: Index ────────────────────────────────────────────────────────────

def build_compliance_index(
    documents: Iterable[DocumentRecord] = (),
    training: Iterable[TrainingRecord] = (),
    site_access: Iterable[SiteAccessRecord] = (),
) -> ComplianceIndex:
    """One pass over each record set; O(D + T + S)."""
    index = ComplianceIndex()

    for doc in documents:
        if doc.document_type:
            index.document_types.setdefault(doc.profile_id, set()).add(doc.document_type)

    for row in training:
        if not row.is_mandatory:
            continue
        index.training.setdefault(row.profile_id, []).append(row)

    for access in site_access:
        index.site_ids.setdefault(access.profile_id, {})[access.site_id] = None

    return index


# ── Stage 2/3: Fold + score ───────────────────────────────────────────────────

def compliance_score(items: Iterable[ComplianceItem]) -> int:
    """
    round(100 × compliant / applicable), half-up.

    Items marked not_applicable are excluded from both sides; with nothing
    applicable the employee scores 100.
    """
    applicable = [i for i in items if i.status != NOT_APPLICABLE]
    if not applicable:
        return 100
    compliant = sum(1 for i in applicable if i.status == COMPLIANT)
    return round_half_up(compliant / len(applicable) * 100)


def category_status(items: Iterable[ComplianceItem], category: str) -> str:
    return worst_status(i.status for i in items if i.category == category)


def build_employee_compliance(
    employee: EmployeeRecord,
    index: ComplianceIndex,
    today: date,
    site_names: Optional[Mapping[str, str]] = None,
) -> EmployeeCompliance:
    doc_types = index.document_types.get(employee.profile_id, set())
    training_rows = index.training.get(employee.profile_id, [])

    items: list[ComplianceItem] = []
    items.extend(evaluate_right_to_work(employee, doc_types, today))
    items.append(evaluate_dbs(employee, today))
    items.extend(evaluate_training(row, today) for row in training_rows)
    items.extend(evaluate_documents(employee, doc_types))
    items.append(evaluate_probation(employee, today))

    site_ids: dict[str, None] = {}
    if employee.home_site:
        site_ids[employee.home_site] = None
    site_ids.update(index.site_ids.get(employee.profile_id, {}))

    site_name = None
    if employee.home_site and site_names:
        site_name = site_names.get(employee.home_site)

    return EmployeeCompliance(
        profile_id=employee.profile_id,
        full_name=employee.full_name,
        overall_score=compliance_score(items),
        items=tuple(items),
        rtw=category_status(items, RIGHT_TO_WORK),
        dbs=category_status(items, DBS),
        training=category_status(items, TRAINING),
        documents=category_status(items, DOCUMENTS),
        probation=category_status(items, PROBATION),
        site_ids=tuple(site_ids),
        employee_number=employee.employee_number,
        department=employee.department,
        site_id=employee.home_site,
        site_name=site_name,
        avatar_url=employee.avatar_url,
        start_date=employee.start_date,
    )


@timed
def build_compliance_view(
    employees: Iterable[EmployeeRecord],
    documents: Iterable[DocumentRecord] = (),
    training: Iterable[TrainingRecord] = (),
    site_access: Iterable[SiteAccessRecord] = (),
    *,
    today: date,
    sites: Iterable[SiteRecord] = (),
) -> list[EmployeeCompliance]:
    """
    Build one EmployeeCompliance per employee, in input order.

    ``employees`` must already be restricted to eligible profiles (see
    ``is_eligible``). Empty collections are valid and simply produce more
    missing / not_applicable items.
    """
    index = build_compliance_index(documents, training, site_access)
    site_names = {s.id: s.name for s in sites}

    result = [
        build_employee_compliance(employee, index, today, site_names)
        for employee in employees
    ]
    logger.info(
        f"Compliance view built: {len(result)} employees as of {today.isoformat()}",
        extra={"employee_count": len(result)},
    )
    return result


# ── Item predicates shared by the filter engine and the summary ───────────────

def needs_action(employee: EmployeeCompliance) -> bool:
    return any(i.status in URGENT_STATUSES for i in employee.items)


def has_expiring_item(employee: EmployeeCompliance) -> bool:
    return any(i.status == EXPIRING_SOON for i in employee.items)


def is_fully_compliant(employee: EmployeeCompliance) -> bool:
    return employee.overall_score == 100


# ── Serialisation ─────────────────────────────────────────────────────────────

def item_to_dict(item: ComplianceItem) -> dict:
    return {
        "category": item.category,
        "label": item.label,
        "status": item.status,
        "detail": item.detail,
        "expiry_date": item.expiry_date.isoformat() if item.expiry_date else None,
        "days_until_expiry": item.days_until_expiry,
        "action_type": item.action_type,
        "action_meta": dict(item.action_meta) if item.action_meta else None,
    }


def compliance_to_dict(employee: EmployeeCompliance) -> dict:
    """Serialize EmployeeCompliance to a plain JSON-ready dict."""
    return {
        "profile_id": employee.profile_id,
        "full_name": employee.full_name,
        "employee_number": employee.employee_number,
        "department": employee.department,
        "site_id": employee.site_id,
        "site_ids": list(employee.site_ids),
        "site_name": employee.site_name,
        "avatar_url": employee.avatar_url,
        "start_date": employee.start_date.isoformat() if employee.start_date else None,
        "overall_score": employee.overall_score,
        "rtw": employee.rtw,
        "dbs": employee.dbs,
        "training": employee.training,
        "documents": employee.documents,
        "probation": employee.probation,
        "items": [item_to_dict(i) for i in employee.items],
    }
