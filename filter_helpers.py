from datetime import date
from typing import Optional

from errors import ValidationError
from models import CATEGORIES

VALID_LOAN_STATUSES = {"Borrowed", "Late", "Returned"}
VALID_MAINTENANCE_STATUSES = {"In Progress", "Completed"}
VALID_ROLES = {"Student", "Teacher"}


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value == "":
        return None
    return value


def normalize_category(category: Optional[str]) -> Optional[str]:
    if category in CATEGORIES:
        return category
    return None


def normalize_role(role: Optional[str]) -> Optional[str]:
    if role in VALID_ROLES:
        return role
    return None


def normalize_loan_status(status: Optional[str]) -> Optional[str]:
    if status in VALID_LOAN_STATUSES:
        return status
    return None


def normalize_maintenance_status(status: Optional[str]) -> Optional[str]:
    if status in VALID_MAINTENANCE_STATUSES:
        return status
    return None


def parse_date(value: Optional[str], field: str) -> Optional[date]:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field} must be a YYYY-MM-DD date") from None
