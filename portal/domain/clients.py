"""Domain helpers for client records: the record type, validation and normalization."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

RISK_CATEGORIES = ("Low", "Medium", "High")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MSG_NAME_REQUIRED = "Full name is required."
MSG_EMAIL_REQUIRED = "Email is required."
MSG_EMAIL_INVALID = "Email format is invalid."
MSG_RISK_INVALID = "Risk category must be Low, Medium, or High."

# The JSON API names fields the way its request bodies spell them
API_MESSAGES = {
    MSG_NAME_REQUIRED: "fullName is required",
    MSG_EMAIL_REQUIRED: "email is required",
    MSG_EMAIL_INVALID: "email format is invalid",
    MSG_RISK_INVALID: "riskCategory must be Low, Medium, or High",
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_risk_category(value: Any) -> str:
    """Return the canonical risk category for value, or "" when it matches none."""
    candidate = _text(value).strip().lower()
    for category in RISK_CATEGORIES:
        if category.lower() == candidate:
            return category
    return ""


def is_valid_email(value: Any) -> bool:
    """Loose local@domain.tld check; not meant to be RFC complete."""
    return bool(EMAIL_PATTERN.fullmatch(_text(value).strip()))


def validate_client_fields(full_name: Any, email: Any, risk_category: Any) -> list[str]:
    """Collect every violated field constraint, in form order."""
    errors: list[str] = []
    email_text = _text(email).strip()
    if not _text(full_name).strip():
        errors.append(MSG_NAME_REQUIRED)
    if not email_text:
        errors.append(MSG_EMAIL_REQUIRED)
    elif not is_valid_email(email_text):
        errors.append(MSG_EMAIL_INVALID)
    if not normalize_risk_category(risk_category):
        errors.append(MSG_RISK_INVALID)
    return errors


def parse_client_id(value: Any) -> Optional[int]:
    """Parse an id (int, whole-valued float or digit string) into a positive int."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value > 0 else None
    text = _text(value).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    parsed = int(text)
    return parsed if parsed > 0 else None


def stored_id_floor(value: Any) -> int:
    """Largest whole number not above a stored id; 0 when it is not a positive number."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return math.floor(number)


def api_messages(details: list[str]) -> list[str]:
    return [API_MESSAGES.get(detail, detail) for detail in details]


@dataclass(frozen=True)
class ClientFields:
    """Trimmed/normalized editable fields, as submitted by a form or API body."""

    full_name: str
    email: str
    risk_category: str

    def errors(self) -> list[str]:
        return validate_client_fields(self.full_name, self.email, self.risk_category)


def clean_client_fields(payload: Mapping[str, Any] | None) -> ClientFields:
    """Build ClientFields from the camelCase keys used by forms and the JSON API."""
    data = payload or {}
    return ClientFields(
        full_name=_text(data.get("fullName")).strip(),
        email=_text(data.get("email")).strip(),
        risk_category=normalize_risk_category(data.get("riskCategory")),
    )


@dataclass
class Client:
    id: int
    full_name: str
    email: str
    risk_category: str
    created_date: str

    @classmethod
    def new(cls, client_id: int, fields: ClientFields, today: date | None = None) -> "Client":
        return cls(
            id=client_id,
            full_name=fields.full_name,
            email=fields.email,
            risk_category=fields.risk_category,
            created_date=(today or date.today()).isoformat(),
        )

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["Client"]:
        """Coerce one stored entry; None when it has no usable id."""
        if not isinstance(raw, Mapping):
            return None
        client_id = parse_client_id(raw.get("id"))
        if client_id is None:
            return None
        return cls(
            id=client_id,
            full_name=_text(raw.get("fullName")),
            email=_text(raw.get("email")),
            risk_category=_text(raw.get("riskCategory")),
            created_date=_text(raw.get("createdDate")),
        )

    def apply(self, fields: ClientFields) -> None:
        # id and created_date are never touched after creation
        self.full_name = fields.full_name
        self.email = fields.email
        self.risk_category = fields.risk_category

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "riskCategory": self.risk_category,
            "createdDate": self.created_date,
        }
