from __future__ import annotations

from typing import List

from app.core.config import settings
from app.core.errors import ValidationError

COMMON_WEAK_PASSWORDS = {
    "password",
    "password1",
    "password123",
    "12345678",
    "123456789",
    "1234567890",
    "qwerty123",
    "qwertyuiop",
    "iloveyou",
    "sunshine",
    "princess",
    "football",
    "baseball",
    "welcome1",
    "letmein1",
    "trustno1",
    "passw0rd",
    "zaq12wsx",
    "whatever",
    "11111111",
}

# Very short local parts ("a@b.com") match too many passwords by accident.
_MIN_EMAIL_LOCAL_PART = 4


def _normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def evaluate_password(password: str, *, email: str | None = None) -> List[str]:
    """
    Returns a list of violation codes if the password does not meet policy.
    """
    pw = password or ""
    violations: list[str] = []
    min_length = max(int(getattr(settings, "PASSWORD_MIN_LENGTH", 8) or 0), 1)
    max_length = int(getattr(settings, "PASSWORD_MAX_LENGTH", 128) or 128)

    if len(pw) < min_length:
        violations.append("min_length")
    if len(pw) > max_length:
        violations.append("max_length")

    normalized_pw = pw.lower()

    email_norm = _normalize(email)
    if email_norm and email_norm in normalized_pw:
        violations.append("contains_email")
    else:
        local_part = email_norm.split("@")[0] if email_norm else ""
        if len(local_part) >= _MIN_EMAIL_LOCAL_PART and local_part in normalized_pw:
            violations.append("contains_email")

    if normalized_pw in COMMON_WEAK_PASSWORDS:
        violations.append("denylist_common")

    return violations


def ensure_strong_password(password: str, *, email: str | None = None) -> None:
    violations = evaluate_password(password, email=email)
    if violations:
        raise ValidationError(
            "Password does not meet requirements.",
            details={"code": "WEAK_PASSWORD", "violations": violations},
        )
