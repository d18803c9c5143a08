"""
Boundary record types for the people compliance engine.

Raw rows arrive from the data layer loosely typed. These models coerce them
into the shapes the rule evaluators expect: blank strings become None,
status strings are lower-cased and checked against the known values
(anything unrecognised becomes None and falls through to the evaluator's
default), and unparseable dates become None instead of failing the row.
Only a missing ``profile_id`` rejects a row outright.
"""
from datetime import date
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.compliance_rules import as_date

RTW_STATUSES = {"verified", "pending", "expired", "not_required"}
DBS_STATUSES = {"clear", "pending", "issues_found", "not_required"}
TRAINING_STATUSES = {
    "current", "compliant", "expired", "expiring_soon", "in_progress", "assigned",
}

_TRUTHY = {"true", "t", "yes", "y", "1"}


def _blank_to_none(value):
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _choice(value, allowed: set) -> Optional[str]:
    value = _blank_to_none(value)
    if value is None:
        return None
    normalized = str(value).strip().lower()
    return normalized if normalized in allowed else None


def _flag(value) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().lower() in _TRUTHY


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class EmployeeRecord(_Row):
    """One active employee profile, as returned by the compliance profiles query."""
    profile_id: str = Field(..., min_length=1)
    full_name: str = ""
    avatar_url: Optional[str] = None
    employee_number: Optional[str] = None
    department: Optional[str] = None
    home_site: Optional[str] = None
    start_date: Optional[date] = None
    probation_end_date: Optional[date] = None
    contract_type: Optional[str] = None
    app_role: Optional[str] = None

    right_to_work_status: Optional[str] = None
    right_to_work_expiry: Optional[date] = None
    right_to_work_document_type: Optional[str] = None

    dbs_status: Optional[str] = None
    dbs_certificate_number: Optional[str] = None
    dbs_check_date: Optional[date] = None
    dbs_update_service_registered: Optional[bool] = None

    national_insurance_number: Optional[str] = None
    pension_enrolled: Optional[bool] = None
    termination_date: Optional[date] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def _name(cls, v):
        v = _blank_to_none(v)
        return "" if v is None else str(v)

    @field_validator(
        "avatar_url", "employee_number", "department", "home_site", "contract_type",
        "app_role", "right_to_work_document_type", "dbs_certificate_number",
        "national_insurance_number",
        mode="before",
    )
    @classmethod
    def _optional_text(cls, v):
        v = _blank_to_none(v)
        return None if v is None else str(v)

    @field_validator(
        "start_date", "probation_end_date", "right_to_work_expiry", "dbs_check_date",
        "termination_date",
        mode="before",
    )
    @classmethod
    def _dates(cls, v):
        return as_date(v)

    @field_validator("right_to_work_status", mode="before")
    @classmethod
    def _rtw_status(cls, v):
        return _choice(v, RTW_STATUSES)

    @field_validator("dbs_status", mode="before")
    @classmethod
    def _dbs_status(cls, v):
        return _choice(v, DBS_STATUSES)

    @field_validator("dbs_update_service_registered", "pension_enrolled", mode="before")
    @classmethod
    def _flags(cls, v):
        return _flag(v)


class DocumentRecord(_Row):
    profile_id: str = Field(..., min_length=1)
    document_type: Optional[str] = None
    expires_at: Optional[date] = None
    verified_at: Optional[date] = None
    created_at: Optional[date] = None

    @field_validator("document_type", mode="before")
    @classmethod
    def _doc_type(cls, v):
        v = _blank_to_none(v)
        return None if v is None else str(v).strip().lower()

    @field_validator("expires_at", "verified_at", "created_at", mode="before")
    @classmethod
    def _dates(cls, v):
        return as_date(v)


class TrainingRecord(_Row):
    """A course assignment row from the training matrix."""
    profile_id: str = Field(..., min_length=1)
    course_id: Optional[str] = None
    course_code: Optional[str] = None
    course_name: Optional[str] = None
    is_mandatory: bool = True
    compliance_status: Optional[str] = None
    expiry_date: Optional[date] = None

    @field_validator("course_id", "course_code", "course_name", mode="before")
    @classmethod
    def _optional_text(cls, v):
        v = _blank_to_none(v)
        return None if v is None else str(v)

    @field_validator("compliance_status", mode="before")
    @classmethod
    def _status(cls, v):
        return _choice(v, TRAINING_STATUSES)

    @field_validator("is_mandatory", mode="before")
    @classmethod
    def _mandatory(cls, v):
        # Rows only reach us pre-filtered to mandatory courses; a null flag keeps that default
        flag = _flag(v)
        return True if flag is None else flag

    @field_validator("expiry_date", mode="before")
    @classmethod
    def _dates(cls, v):
        return as_date(v)


class SiteAccessRecord(_Row):
    profile_id: str = Field(..., min_length=1)
    site_id: str = Field(..., min_length=1)


class SiteRecord(_Row):
    id: str = Field(..., min_length=1)
    name: str = ""


StatusFilter = Literal["all", "compliant", "action_required", "expiring_soon"]
CategoryFilter = Literal["all", "right_to_work", "dbs", "training", "documents", "probation"]


class FilterState(BaseModel):
    """Active filters for the compliance view; ``"all"`` / blank means inactive."""
    site: str = "all"
    department: str = "all"
    search: str = ""
    status: StatusFilter = "all"
    category: CategoryFilter = "all"
    expiry_window: Union[Literal["all"], int] = "all"   # days from today

    @field_validator("site", "department", mode="before")
    @classmethod
    def _all_if_blank(cls, v):
        v = _blank_to_none(v)
        return "all" if v is None else str(v)

    @field_validator("search", mode="before")
    @classmethod
    def _search(cls, v):
        return _blank_to_none(v) or ""

    @field_validator("expiry_window", mode="before")
    @classmethod
    def _window(cls, v):
        v = _blank_to_none(v)
        if v is None:
            return "all"
        if isinstance(v, str) and v.lstrip("-").isdigit():
            return int(v)
        return v
