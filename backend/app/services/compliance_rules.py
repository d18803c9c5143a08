"""
People Compliance — category rule evaluators

R1: Right to Work   — status + expiry window + supporting document on file
R2: DBS             — status + advisory re-check once the certificate is 3 years old
R3: Training        — one item per mandatory course, expiry window on current courses
R4: Documents       — employment contract, NI number, pension auto-enrolment
R5: Probation       — review due as the probation end date approaches

Every evaluator is a pure function of one employee's fields and an injected
``today``. None of them raise on unrecognised values: unknown statuses fall
through to the safest default for their category.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Collection, Iterable, Literal, Optional, Union

from app.config import (
    CONTRACT_DOCUMENT_TYPES,
    DBS_RECHECK_AFTER_DAYS,
    PROBATION_REVIEW_WINDOW_DAYS,
    RTW_EXPIRY_WARNING_DAYS,
    RTW_SUPPORTING_DOCUMENT_TYPES,
    TRAINING_EXPIRY_WARNING_DAYS,
)

if TYPE_CHECKING:
    from app.models.compliance_schema import EmployeeRecord, TrainingRecord


# ── Status values (most severe first) ─────────────────────────────────────────

EXPIRED = "expired"
MISSING = "missing"
ACTION_REQUIRED = "action_required"
EXPIRING_SOON = "expiring_soon"
COMPLIANT = "compliant"
NOT_APPLICABLE = "not_applicable"

STATUS_PRIORITY: tuple[str, ...] = (
    EXPIRED,
    MISSING,
    ACTION_REQUIRED,
    EXPIRING_SOON,
    COMPLIANT,
    NOT_APPLICABLE,
)

# Statuses that need someone to do something now
URGENT_STATUSES: frozenset[str] = frozenset({EXPIRED, MISSING, ACTION_REQUIRED})

ComplianceStatus = Literal[
    "expired", "missing", "action_required", "expiring_soon", "compliant", "not_applicable"
]


# ── Categories ─────────────────────────────────────────────────────────────────

RIGHT_TO_WORK = "right_to_work"
DBS = "dbs"
TRAINING = "training"
DOCUMENTS = "documents"
PROBATION = "probation"

CATEGORIES: tuple[str, ...] = (RIGHT_TO_WORK, DBS, TRAINING, DOCUMENTS, PROBATION)

ComplianceCategory = Literal["right_to_work", "dbs", "training", "documents", "probation"]

# Remediation controls the consuming UI knows how to open
ACTION_UPDATE_RTW = "update_rtw"
ACTION_UPDATE_DBS = "update_dbs"
ACTION_UPLOAD_DOC = "upload_doc"
ACTION_UPDATE_FIELD = "update_field"
ACTION_RECORD_TRAINING = "record_training"


@dataclass(frozen=True)
class ComplianceItem:
    category: str               # one of CATEGORIES
    label: str
    status: str                 # one of STATUS_PRIORITY
    detail: str
    expiry_date: Optional[date] = None
    days_until_expiry: Optional[int] = None   # signed; negative once past
    action_type: Optional[str] = None
    action_meta: Optional[dict[str, str]] = None


DateLike = Union[date, datetime, str, None]


# ── Date threshold utility ─────────────────────────────────────────────────────

def as_date(value: DateLike) -> Optional[date]:
    """Coerce a date, datetime or ISO string to a calendar date; None if absent or unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def days_until(value: DateLike, today: DateLike) -> Optional[int]:
    """
    Signed whole-day difference ``value - today``.

    Both sides are reduced to calendar dates first, so any time-of-day is
    ignored and the same day always yields 0. Positive means ``value`` is in
    the future. Returns None when either side is missing or unparseable.
    """
    target = as_date(value)
    reference = as_date(today)
    if target is None or reference is None:
        return None
    return (target - reference).days


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 → 3), not to even."""
    return int(math.floor(value + 0.5))


# ── Status priority resolver ───────────────────────────────────────────────────

def worst_status(statuses: Iterable[str]) -> str:
    """Most severe status present; ``not_applicable`` for an empty input."""
    present = set(statuses)
    for status in STATUS_PRIORITY:
        if status in present:
            return status
    return NOT_APPLICABLE


# ── R1: Right to Work ──────────────────────────────────────────────────────────

def has_rtw_supporting_document(document_types: Collection[str]) -> bool:
    return any(doc_type in document_types for doc_type in RTW_SUPPORTING_DOCUMENT_TYPES)


def evaluate_right_to_work(
    employee: EmployeeRecord,
    document_types: Collection[str],
    today: date,
) -> list[ComplianceItem]:
    """
    Right-to-work check plus, when no evidence is on file, a missing
    supporting-document item.

    Precedence:
        not_required          → compliant
        verified + expiry     → expired (<0) | expiring_soon (0..90) |
                                compliant with document, else action_required
        verified, no expiry   → compliant with document, else action_required
        expired               → expired
        pending               → action_required
        anything else         → missing
    """
    rtw_status = employee.right_to_work_status
    expiry = as_date(employee.right_to_work_expiry)
    days = days_until(expiry, today)
    doc_uploaded = has_rtw_supporting_document(document_types)

    if rtw_status == "not_required":
        status = COMPLIANT
        detail = "Not required (British/Irish citizen)"
    elif rtw_status == "verified":
        if days is not None:
            if days < 0:
                status = EXPIRED
                detail = f"Expired {expiry.isoformat()}"
            elif days <= RTW_EXPIRY_WARNING_DAYS:
                status = EXPIRING_SOON
                detail = f"Expires in {days} days"
            else:
                status = COMPLIANT if doc_uploaded else ACTION_REQUIRED
                doc_label = employee.right_to_work_document_type
                detail = doc_label.replace("_", " ") if doc_label else "Verified"
        else:
            status = COMPLIANT if doc_uploaded else ACTION_REQUIRED
            detail = "Indefinite leave / citizen"
    elif rtw_status == "expired":
        status = EXPIRED
        detail = "RTW status expired"
    elif rtw_status == "pending":
        status = ACTION_REQUIRED
        detail = "Check pending"
    else:
        status = MISSING
        detail = "Not checked"

    items = [
        ComplianceItem(
            category=RIGHT_TO_WORK,
            label="Right to Work Check",
            status=status,
            detail=detail,
            expiry_date=expiry if days is not None else None,
            days_until_expiry=days,
            action_type=ACTION_UPDATE_RTW,
        )
    ]

    # No branch above yields not_applicable today; the guard stays in case an
    # exempt RTW state is introduced.
    if not doc_uploaded and status != NOT_APPLICABLE:
        items.append(
            ComplianceItem(
                category=RIGHT_TO_WORK,
                label="RTW Supporting Document",
                status=MISSING,
                detail="No document uploaded",
                action_type=ACTION_UPLOAD_DOC,
                action_meta={"docType": "right_to_work", "docLabel": "RTW Document"},
            )
        )
    return items


# ── R2: DBS ────────────────────────────────────────────────────────────────────

def evaluate_dbs(employee: EmployeeRecord, today: date) -> ComplianceItem:
    dbs_status = employee.dbs_status

    if dbs_status == "not_required":
        status = NOT_APPLICABLE
        detail = "Not required for this role"
    elif dbs_status == "clear":
        days = days_until(employee.dbs_check_date, today)
        if days is None:
            status = COMPLIANT
            detail = "Clear (no date recorded)"
        else:
            days_since_check = -days
            if days_since_check > DBS_RECHECK_AFTER_DAYS:
                # Advisory only: a clear certificate does not lapse
                status = EXPIRING_SOON
                detail = f"Clear, but checked {days_since_check // 365}+ years ago"
            else:
                status = COMPLIANT
                cert = employee.dbs_certificate_number
                detail = f"Clear #{cert}" if cert else "Clear"
    elif dbs_status == "pending":
        status = ACTION_REQUIRED
        detail = "DBS check pending"
    elif dbs_status == "issues_found":
        status = ACTION_REQUIRED
        detail = "Issues found - review required"
    else:
        status = MISSING
        detail = "DBS status not set"

    return ComplianceItem(
        category=DBS,
        label="DBS Check",
        status=status,
        detail=detail,
        action_type=ACTION_UPDATE_DBS,
    )


# ── R3: Training ───────────────────────────────────────────────────────────────

def evaluate_training(record: TrainingRecord, today: date) -> ComplianceItem:
    """One mandatory course record → one item."""
    raw = record.compliance_status
    expiry = as_date(record.expiry_date)
    days = days_until(expiry, today)

    if raw in ("current", "compliant"):
        if days is None:
            status, detail = COMPLIANT, "Current"
        elif days <= TRAINING_EXPIRY_WARNING_DAYS:
            status, detail = EXPIRING_SOON, f"Expires in {days} days"
        else:
            status, detail = COMPLIANT, f"Valid until {expiry.isoformat()}"
    elif raw == "expired":
        status = EXPIRED
        detail = f"Expired {expiry.isoformat()}" if expiry else "Expired"
    elif raw == "expiring_soon":
        status = EXPIRING_SOON
        detail = f"Expires {expiry.isoformat()}" if expiry else "Expiring soon"
    elif raw in ("in_progress", "assigned"):
        status = ACTION_REQUIRED
        detail = "In progress" if raw == "in_progress" else "Assigned"
    else:
        status, detail = MISSING, "Not started"

    course_label = record.course_name or record.course_code or "Mandatory course"
    return ComplianceItem(
        category=TRAINING,
        label=course_label,
        status=status,
        detail=detail,
        expiry_date=expiry if days is not None else None,
        days_until_expiry=days,
        action_type=ACTION_RECORD_TRAINING,
        action_meta={"courseId": record.course_id or "", "courseName": course_label},
    )


# ── R4: Documents ──────────────────────────────────────────────────────────────

def evaluate_documents(
    employee: EmployeeRecord,
    document_types: Collection[str],
) -> list[ComplianceItem]:
    """Contract, NI number and pension; pension is never ``missing``, only ``action_required``."""
    has_contract = any(doc_type in document_types for doc_type in CONTRACT_DOCUMENT_TYPES)
    has_ni = bool(employee.national_insurance_number)
    has_pension = employee.pension_enrolled is True

    contract = ComplianceItem(
        category=DOCUMENTS,
        label="Employment Contract",
        status=COMPLIANT if has_contract else MISSING,
        detail="Uploaded" if has_contract else "Not uploaded",
        action_type=None if has_contract else ACTION_UPLOAD_DOC,
        action_meta=None if has_contract else {
            "docType": "employment_contract",
            "docLabel": "Employment Contract",
        },
    )
    ni_number = ComplianceItem(
        category=DOCUMENTS,
        label="National Insurance Number",
        status=COMPLIANT if has_ni else MISSING,
        detail="Recorded" if has_ni else "Not recorded",
        action_type=None if has_ni else ACTION_UPDATE_FIELD,
        action_meta=None if has_ni else {
            "fieldName": "national_insurance_number",
            "fieldLabel": "NI Number",
            "fieldType": "text",
        },
    )
    pension = ComplianceItem(
        category=DOCUMENTS,
        label="Pension Auto-Enrolment",
        status=COMPLIANT if has_pension else ACTION_REQUIRED,
        detail="Enrolled" if has_pension else "Not enrolled",
        action_type=None if has_pension else ACTION_UPDATE_FIELD,
        action_meta=None if has_pension else {
            "fieldName": "pension_enrolled",
            "fieldLabel": "Pension Enrolled",
            "fieldType": "boolean",
        },
    )
    return [contract, ni_number, pension]


# ── R5: Probation ──────────────────────────────────────────────────────────────

def evaluate_probation(employee: EmployeeRecord, today: date) -> ComplianceItem:
    end_date = as_date(employee.probation_end_date)
    days = days_until(end_date, today)

    if days is None:
        status, detail = NOT_APPLICABLE, "No probation set"
    elif days < 0:
        status, detail = COMPLIANT, f"Completed (ended {end_date.isoformat()})"
    elif days <= PROBATION_REVIEW_WINDOW_DAYS:
        status, detail = EXPIRING_SOON, f"Ends in {days} days - review due"
    else:
        status, detail = COMPLIANT, f"Ends {end_date.isoformat()}"

    return ComplianceItem(
        category=PROBATION,
        label="Probation Period",
        status=status,
        detail=detail,
    )
