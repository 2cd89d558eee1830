"""
Input validation for account payloads.

Validation is all-or-nothing: a payload either yields a normalized value or
a ValidationFailed carrying every violated rule. Required-field checks run
first; format checks only run once every required field is present.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

EMAIL_MAX_LENGTH = 255
LOCAL_PART_MAX_LENGTH = 64
DOMAIN_MAX_LENGTH = 253
DOMAIN_LABEL_MAX_LENGTH = 63
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8

_LOCAL_PART_RE = re.compile(r"^[A-Za-z0-9._+-]+$")
_DOMAIN_LABEL_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
_TLD_RE = re.compile(r"^[A-Za-z]{2,}$")

# Violation codes
REQUIRED = "required"
INVALID_TYPE = "invalid_type"
INVALID_EMAIL = "invalid_email"
WEAK_PASSWORD = "weak_password"
TOO_LONG = "too_long"


@dataclass(frozen=True)
class Violation:
    field: str
    code: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


class ValidationFailed(Exception):
    """Raised when a payload violates one or more input rules."""

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__("Validation failed")

    def to_dict(self) -> list[dict]:
        return [v.to_dict() for v in self.violations]


@dataclass(frozen=True)
class RegistrationData:
    email: str
    password: str
    forename: str
    surname: str


@dataclass(frozen=True)
class LoginData:
    email: str
    password: str


@dataclass(frozen=True)
class ProfileUpdateData:
    forename: Optional[str] = None
    surname: Optional[str] = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: Any) -> bool:
    """
    Check an email address against a bounded grammar.

    - exactly one "@", no whitespace anywhere
    - local part: 1-64 chars of [A-Za-z0-9._+-], no leading, trailing or
      consecutive dots
    - domain: at most 253 chars, dot-separated labels of 1-63 chars
      ([A-Za-z0-9-], not starting or ending with "-")
    - final label (TLD): at least 2 letters
    """
    if not isinstance(email, str) or not email:
        return False
    if any(ch.isspace() for ch in email):
        return False
    if email.count("@") != 1:
        return False

    local_part, domain = email.split("@")

    if not local_part or len(local_part) > LOCAL_PART_MAX_LENGTH:
        return False
    if not _LOCAL_PART_RE.match(local_part):
        return False
    if local_part.startswith(".") or local_part.endswith(".") or ".." in local_part:
        return False

    if not domain or len(domain) > DOMAIN_MAX_LENGTH:
        return False
    labels = domain.split(".")
    if len(labels) < 2:
        return False
    for label in labels:
        if not label or len(label) > DOMAIN_LABEL_MAX_LENGTH:
            return False
        if not _DOMAIN_LABEL_RE.match(label):
            return False
    return bool(_TLD_RE.match(labels[-1]))


def password_strength_errors(password: str) -> list[str]:
    """Return one message per unmet strength rule (empty list if strong)."""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain at least one number")
    if not re.search(r"[^A-Za-z0-9]", password):
        errors.append("Password must contain at least one special character")
    return errors


def _check_required(payload: Mapping[str, Any], fields: tuple[str, ...]) -> list[Violation]:
    violations = []
    for field in fields:
        value = payload.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            violations.append(Violation(field, REQUIRED, f"{field} is required"))
        elif not isinstance(value, str):
            violations.append(Violation(field, INVALID_TYPE, f"{field} must be a string"))
    return violations


def _check_email(value: str) -> list[Violation]:
    if len(value) > EMAIL_MAX_LENGTH:
        return [Violation("email", TOO_LONG, f"email must be at most {EMAIL_MAX_LENGTH} characters")]
    if not is_valid_email(value):
        return [Violation("email", INVALID_EMAIL, "Invalid email address")]
    return []


def _check_name(field: str, value: str) -> list[Violation]:
    if len(value.strip()) > NAME_MAX_LENGTH:
        return [Violation(field, TOO_LONG, f"{field} must be at most {NAME_MAX_LENGTH} characters")]
    return []


def validate_registration(payload: Mapping[str, Any]) -> RegistrationData:
    """
    Validate a registration payload (email, password, forename, surname).

    Raises:
        ValidationFailed: with every violated rule
    """
    violations = _check_required(payload, ("email", "password", "forename", "surname"))
    if violations:
        raise ValidationFailed(violations)

    violations.extend(_check_email(payload["email"]))
    violations.extend(
        Violation("password", WEAK_PASSWORD, message)
        for message in password_strength_errors(payload["password"])
    )
    violations.extend(_check_name("forename", payload["forename"]))
    violations.extend(_check_name("surname", payload["surname"]))
    if violations:
        raise ValidationFailed(violations)

    return RegistrationData(
        email=normalize_email(payload["email"]),
        password=payload["password"],
        forename=payload["forename"].strip(),
        surname=payload["surname"].strip(),
    )


def validate_login(payload: Mapping[str, Any]) -> LoginData:
    """Validate a login payload; strength rules do not apply here."""
    violations = _check_required(payload, ("email", "password"))
    if violations:
        raise ValidationFailed(violations)

    violations.extend(_check_email(payload["email"]))
    if violations:
        raise ValidationFailed(violations)

    return LoginData(email=normalize_email(payload["email"]), password=payload["password"])


def validate_profile_update(payload: Mapping[str, Any]) -> ProfileUpdateData:
    """Validate a partial profile update; at least one field must be given."""
    present = {k: payload.get(k) for k in ("forename", "surname") if payload.get(k) is not None}
    if not present:
        raise ValidationFailed([
            Violation("forename", REQUIRED, "Provide forename and/or surname"),
        ])

    violations = _check_required(present, tuple(present))
    if violations:
        raise ValidationFailed(violations)
    for field, value in present.items():
        violations.extend(_check_name(field, value))
    if violations:
        raise ValidationFailed(violations)

    return ProfileUpdateData(**{k: v.strip() for k, v in present.items()})
