"""
conftest.py — Shared pytest fixtures for the People Compliance backend test suite.

No database or external service fixtures are defined here. Engine tests are
pure unit tests over in-memory records; the API tests use FastAPI's
TestClient against the in-process app.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``app.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
from datetime import date

import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any app imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Reference date
# ---------------------------------------------------------------------------

@pytest.fixture
def today():
    """Fixed reference date used by every threshold test (2024-06-15)."""
    return date(2024, 6, 15)


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_employee():
    """
    Factory for EmployeeRecord.

    Defaults describe a fully compliant employee without probation:
      RTW not_required, DBS clear with no check date, NI number recorded,
      pension enrolled. Override any field by keyword.
    """
    from app.models.compliance_schema import EmployeeRecord

    def _make(**overrides):
        row = {
            "profile_id": "emp-1",
            "full_name": "Alex Morgan",
            "employee_number": "E001",
            "department": "Kitchen",
            "home_site": "site-a",
            "right_to_work_status": "not_required",
            "dbs_status": "clear",
            "national_insurance_number": "QQ123456C",
            "pension_enrolled": True,
        }
        row.update(overrides)
        return EmployeeRecord(**row)

    return _make


@pytest.fixture
def make_document():
    from app.models.compliance_schema import DocumentRecord

    def _make(document_type, profile_id="emp-1", **overrides):
        return DocumentRecord(profile_id=profile_id, document_type=document_type, **overrides)

    return _make


@pytest.fixture
def make_training():
    from app.models.compliance_schema import TrainingRecord

    def _make(compliance_status="current", profile_id="emp-1", **overrides):
        row = {
            "profile_id": profile_id,
            "course_id": "course-fh",
            "course_code": "FH2",
            "course_name": "Food Hygiene Level 2",
            "is_mandatory": True,
            "compliance_status": compliance_status,
        }
        row.update(overrides)
        return TrainingRecord(**row)

    return _make


@pytest.fixture
def make_compliance():
    """
    Factory for EmployeeCompliance built directly from (category, status)
    pairs, for filter and summary tests that do not need the evaluators.
    """
    from app.services.compliance_engine import (
        EmployeeCompliance,
        category_status,
        compliance_score,
    )
    from app.services.compliance_rules import ComplianceItem

    def _make(profile_id, statuses, **overrides):
        items = tuple(
            ComplianceItem(
                category=category,
                label=f"{category} item",
                status=status,
                detail="",
                days_until_expiry=days,
            )
            for category, status, days in (
                s if len(s) == 3 else (s[0], s[1], None) for s in statuses
            )
        )
        fields = {
            "profile_id": profile_id,
            "full_name": profile_id.title(),
            "overall_score": compliance_score(items),
            "items": items,
            "rtw": category_status(items, "right_to_work"),
            "dbs": category_status(items, "dbs"),
            "training": category_status(items, "training"),
            "documents": category_status(items, "documents"),
            "probation": category_status(items, "probation"),
        }
        fields.update(overrides)
        return EmployeeCompliance(**fields)

    return _make
