"""
Summary aggregator — organisation-level KPIs for the people compliance view.

Operates on whatever collection it is given; callers normally pass the
filtered list so the KPIs reflect the current view.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from app.config import CATEGORY_LABELS
from app.services.compliance_engine import (
    EmployeeCompliance,
    has_expiring_item,
    is_fully_compliant,
    needs_action,
)
from app.services.compliance_rules import (
    CATEGORIES,
    COMPLIANT,
    NOT_APPLICABLE,
    URGENT_STATUSES,
    round_half_up,
)


@dataclass(frozen=True)
class CategorySummary:
    category: str
    label: str
    compliant: int      # employees whose applicable items in the category are all compliant
    total: int          # employees with at least one applicable item in the category
    urgent: int         # employees with an expired / missing / action_required item


@dataclass(frozen=True)
class ComplianceSummary:
    total_employees: int
    fully_compliant: int
    action_required: int
    expiring_soon: int
    overall_score: int
    by_category: tuple[CategorySummary, ...]


def summarize_category(employees: Sequence[EmployeeCompliance], category: str) -> CategorySummary:
    compliant = total = urgent = 0
    for employee in employees:
        statuses = [
            i.status for i in employee.items
            if i.category == category and i.status != NOT_APPLICABLE
        ]
        if not statuses:
            continue
        total += 1
        if all(s == COMPLIANT for s in statuses):
            compliant += 1
        if any(s in URGENT_STATUSES for s in statuses):
            urgent += 1

    return CategorySummary(
        category=category,
        label=CATEGORY_LABELS.get(category, category),
        compliant=compliant,
        total=total,
        urgent=urgent,
    )


def summarize_compliance(employees: Sequence[EmployeeCompliance]) -> ComplianceSummary:
    total = len(employees)
    if total:
        overall = round_half_up(sum(e.overall_score for e in employees) / total)
    else:
        overall = 100

    return ComplianceSummary(
        total_employees=total,
        fully_compliant=sum(1 for e in employees if is_fully_compliant(e)),
        action_required=sum(1 for e in employees if needs_action(e)),
        expiring_soon=sum(1 for e in employees if has_expiring_item(e)),
        overall_score=overall,
        by_category=tuple(summarize_category(employees, c) for c in CATEGORIES),
    )


def summary_to_dict(summary: ComplianceSummary) -> dict:
    """Serialize ComplianceSummary to a plain dict for API responses."""
    return {
        "total_employees": summary.total_employees,
        "fully_compliant": summary.fully_compliant,
        "action_required": summary.action_required,
        "expiring_soon": summary.expiring_soon,
        "overall_score": summary.overall_score,
        "by_category": [
            {
                "category": c.category,
                "label": c.label,
                "compliant": c.compliant,
                "total": c.total,
                "urgent": c.urgent,
            }
            for c in summary.by_category
        ],
    }
