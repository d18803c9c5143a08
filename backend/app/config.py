"""
People compliance configuration — single source of truth for rule
thresholds, document type groups, category labels and runtime settings.

Import from here in the rule evaluators, the builder and the API layer
rather than hardcoding values.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env in dev; no-op when the file is absent
load_dotenv()

# ── Rule thresholds (days) ─────────────────────────────────────────────────────

# Verified RTW with an expiry inside this window (inclusive) → expiring_soon
RTW_EXPIRY_WARNING_DAYS: int = 90

# Clear DBS older than this many days → advisory re-check (expiring_soon)
DBS_RECHECK_AFTER_DAYS: int = 1095      # 3 years

# Current mandatory training expiring inside this window (inclusive)
TRAINING_EXPIRY_WARNING_DAYS: int = 60

# Probation ending inside this window (inclusive) → review due
PROBATION_REVIEW_WINDOW_DAYS: int = 14


# ── Document type groups ───────────────────────────────────────────────────────

# Document types the data layer fetches for the compliance view
COMPLIANCE_DOCUMENT_TYPES: tuple[str, ...] = (
    "employment_contract",
    "contract",
    "policy_acknowledgement",
    "right_to_work",
    "dbs_certificate",
    "visa",
    "passport",
    "p45",
)

# Any one of these on file counts as RTW supporting evidence
RTW_SUPPORTING_DOCUMENT_TYPES: tuple[str, ...] = ("right_to_work", "visa", "passport")

# Any one of these on file counts as a signed employment contract
CONTRACT_DOCUMENT_TYPES: tuple[str, ...] = ("employment_contract", "contract")


# ── Eligibility ────────────────────────────────────────────────────────────────

# Elevated roles never shown in the compliance view (compared lower-cased)
EXCLUDED_APP_ROLES: tuple[str, ...] = ("platform_admin",)


# ── Categories ─────────────────────────────────────────────────────────────────

# Fixed display order for per-category breakdowns
CATEGORY_LABELS: dict[str, str] = {
    "right_to_work": "Right to Work",
    "dbs":           "DBS Checks",
    "training":      "Training",
    "documents":     "Documents",
    "probation":     "Probation",
}


# ── Runtime settings (environment) ─────────────────────────────────────────────

APP_NAME: str = "People Compliance API"
APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json").lower()

_CORS_DEFAULT = "http://localhost:3000,http://localhost:8000"
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _CORS_DEFAULT).split(",") if o.strip()
]
