"""Filter engine for the people compliance view — stateless AND-combined predicates."""
from __future__ import annotations

from typing import Callable, Iterable, Optional

from app.models.compliance_schema import FilterState
from app.services.compliance_engine import (
    EmployeeCompliance,
    has_expiring_item,
    is_fully_compliant,
    needs_action,
)
from app.services.compliance_rules import COMPLIANT, NOT_APPLICABLE

Predicate = Callable[[EmployeeCompliance], bool]

_STATUS_PREDICATES: dict[str, Predicate] = {
    "compliant": is_fully_compliant,
    "action_required": needs_action,
    "expiring_soon": has_expiring_item,
}


def _site(site_id: str) -> Predicate:
    return lambda e: site_id in e.site_ids


def _department(department: str) -> Predicate:
    return lambda e: e.department == department


def _search(text: str) -> Predicate:
    query = text.lower()

    def match(e: EmployeeCompliance) -> bool:
        if query in e.full_name.lower():
            return True
        return bool(e.employee_number) and query in e.employee_number.lower()

    return match


def _category(category: str) -> Predicate:
    def match(e: EmployeeCompliance) -> bool:
        return any(
            i.category == category and i.status not in (COMPLIANT, NOT_APPLICABLE)
            for i in e.items
        )

    return match


def _expiry_window(window_days: int) -> Predicate:
    def match(e: EmployeeCompliance) -> bool:
        return any(
            i.days_until_expiry is not None and 0 <= i.days_until_expiry <= window_days
            for i in e.items
        )

    return match


def build_predicates(filters: FilterState) -> list[Predicate]:
    """Translate the active parts of a FilterState into predicates."""
    predicates: list[Predicate] = []
    if filters.site != "all":
        predicates.append(_site(filters.site))
    if filters.department != "all":
        predicates.append(_department(filters.department))
    if filters.search:
        predicates.append(_search(filters.search))
    if filters.status != "all":
        predicates.append(_STATUS_PREDICATES[filters.status])
    if filters.category != "all":
        predicates.append(_category(filters.category))
    if filters.expiry_window != "all":
        predicates.append(_expiry_window(int(filters.expiry_window)))
    return predicates


def apply_filters(
    employees: Iterable[EmployeeCompliance],
    filters: Optional[FilterState] = None,
) -> list[EmployeeCompliance]:
    """Keep the employees matching every active filter; input order is preserved."""
    predicates = build_predicates(filters or FilterState())
    return [e for e in employees if all(p(e) for p in predicates)]
