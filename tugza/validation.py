"""
Validation rules shared by every form.

Each rule is defined once here and attached to schema fields in
`schemas.py`. A rule raises ValueError with the message shown to the
submitter. `parse()` turns pydantic errors into the field-keyed map carried
by ValidationFailure, so nothing downstream has to know about pydantic.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .banks import BANK_SLUGS
from .errors import ValidationFailure

DENOMINATIONS = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900, 1000)
ACCOUNT_TYPES = ("savings", "checking", "business")
MIN_INITIAL_DEPOSIT = Decimal("100")

MAX_PHOTO_BYTES = 5_000_000
ACCEPTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})

PHONE_RE = re.compile(r"^[0-9]{10}$")
BUSINESS_TIN_RE = re.compile(r"^[0-9]{8,15}$")

FORM_KEY = "form"

M = TypeVar("M", bound=BaseModel)


def check_name(value: str) -> str:
    if len(value) < 2:
        raise ValueError("Name must be at least 2 characters")
    return value


def check_phone(value: str) -> str:
    if not PHONE_RE.match(value):
        raise ValueError("Phone number must be exactly 10 digits")
    return value


def check_address(value: str) -> str:
    if len(value) < 5:
        raise ValueError("Address must be at least 5 characters")
    return value


def check_business_tin(value: str) -> str:
    if not BUSINESS_TIN_RE.match(value):
        raise ValueError("Business TIN must be 8 to 15 digits")
    return value


def check_amount(value: int) -> int:
    if value not in DENOMINATIONS:
        choices = ", ".join(str(d) for d in DENOMINATIONS)
        raise ValueError(f"Amount must be one of {choices}")
    return value


def check_account_type(value: str) -> str:
    if value not in ACCOUNT_TYPES:
        raise ValueError("Please select an account type")
    return value


def check_initial_deposit(value: Decimal) -> Decimal:
    if value < MIN_INITIAL_DEPOSIT:
        raise ValueError(f"Initial deposit must be at least {MIN_INITIAL_DEPOSIT}")
    return value


def check_terms(value: bool) -> bool:
    if value is not True:
        raise ValueError("You must accept the terms and conditions")
    return value


def check_bank(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if value not in BANK_SLUGS:
        raise ValueError("Unknown bank")
    return value


def required(message: str) -> Callable[[str], str]:
    """Rule for a select box: any non-empty value passes."""
    def check(value: str) -> str:
        if not value:
            raise ValueError(message)
        return value
    return check


@dataclass(frozen=True)
class IdPhoto:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def check_id_photo(photo: Optional[IdPhoto]) -> List[str]:
    """Return the problems with an uploaded ID photo; empty when acceptable."""
    if photo is None:
        return []
    problems = []
    if photo.size > MAX_PHOTO_BYTES:
        problems.append("Max file size is 5MB")
    if photo.content_type not in ACCEPTED_IMAGE_TYPES:
        problems.append("Only .jpg, .png and .webp formats are supported")
    return problems


def _error_key(loc: Iterable[Any]) -> str:
    names = [part for part in loc if isinstance(part, str) and part not in ("body", "query", "path")]
    return names[-1] if names else FORM_KEY


def _error_message(error: Mapping[str, Any]) -> str:
    kind = error.get("type")
    msg = str(error.get("msg", "Invalid value"))
    if kind == "missing":
        return "This field is required"
    if kind == "value_error" and msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    return msg


def field_errors(errors: Iterable[Mapping[str, Any]]) -> Dict[str, List[str]]:
    """Group pydantic/FastAPI error dicts by field name."""
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        key = _error_key(error.get("loc", ()))
        if error.get("type") in ("union_tag_invalid", "union_tag_not_found"):
            key = "kind"
        grouped.setdefault(key, []).append(_error_message(error))
    return grouped


def parse(schema: Type[M], data: Mapping[str, Any], extra_errors: Optional[Dict[str, List[str]]] = None) -> M:
    """Validate `data` against `schema` as a whole.

    `extra_errors` holds problems found outside the schema (the ID photo);
    they are reported together with the schema's own errors so the submitter
    sees every problem at once.
    """
    errors: Dict[str, List[str]] = {key: list(msgs) for key, msgs in (extra_errors or {}).items() if msgs}
    model = None
    try:
        model = schema.model_validate(dict(data))
    except ValidationError as exc:
        for key, messages in field_errors(exc.errors()).items():
            errors.setdefault(key, []).extend(messages)
    if errors:
        raise ValidationFailure(errors)
    return model
