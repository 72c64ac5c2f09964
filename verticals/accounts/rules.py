"""Account input rules: pure functions over raw request bodies."""

import re
from typing import Any, Mapping

from pydantic import EmailStr, TypeAdapter, ValidationError

from core.errors import ValidationFailed
from patterns.rules_engine import RuleResult, check_text, evaluate_rules, pick
from verticals.accounts.models.schemas import LoginRequest, RegisterRequest

_EMAIL = TypeAdapter(EmailStr)
_PASSWORD_SHAPE = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
# bcrypt only looks at the first 72 bytes.
_PASSWORD_MAX_BYTES = 72


def check_email(raw: Any) -> RuleResult:
    message = "Please provide a valid email address"
    text = check_text("email", raw, required=True, required_message=message, type_message=message)
    if not text.passed:
        return text
    try:
        email = _EMAIL.validate_python(text.value)
    except ValidationError:
        return RuleResult(passed=False, rule_name="email", message=message)
    return RuleResult(passed=True, rule_name="email", value=email.lower())


def check_new_password(raw: Any) -> RuleResult:
    if not isinstance(raw, str) or len(raw) < 6:
        return RuleResult(
            passed=False,
            rule_name="password",
            message="Password must be at least 6 characters long",
        )
    if len(raw.encode("utf-8")) > _PASSWORD_MAX_BYTES:
        return RuleResult(
            passed=False,
            rule_name="password",
            message="Password must be at most 72 bytes long",
        )
    if not _PASSWORD_SHAPE.search(raw):
        return RuleResult(
            passed=False,
            rule_name="password",
            message=(
                "Password must contain at least one uppercase letter, "
                "one lowercase letter, and one number"
            ),
        )
    return RuleResult(passed=True, rule_name="password", value=raw)


def validate_registration(data: Mapping[str, Any]) -> RegisterRequest:
    raw = pick(data, ("name", "email", "password"))
    result = evaluate_rules(
        check_text(
            "name",
            raw["name"],
            required=True,
            min_length=2,
            max_length=50,
            required_message="Name is required",
            type_message="Name is required",
            length_message="Name must be between 2 and 50 characters",
        ),
        check_email(raw["email"]),
        check_new_password(raw["password"]),
    )
    if not result.all_passed:
        raise ValidationFailed(result.violations)
    return RegisterRequest(**result.values)


def validate_login(data: Mapping[str, Any]) -> LoginRequest:
    raw = pick(data, ("email", "password"))
    password = raw["password"]
    password_ok = isinstance(password, str) and password != ""
    result = evaluate_rules(
        check_email(raw["email"]),
        RuleResult(
            passed=password_ok,
            rule_name="password",
            message="" if password_ok else "Password is required",
            value=password if password_ok else None,
        ),
    )
    if not result.all_passed:
        raise ValidationFailed(result.violations)
    return LoginRequest(**result.values)
