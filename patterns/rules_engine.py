"""Pure-function rules engine pattern.

Rules are stateless functions: (field, raw value, options) -> RuleResult.
No database, no side effects. This makes them:
- Trivially testable (pure input/output)
- Composable (one rule per field, evaluated in declaration order)
- Deterministic (same input, same verdict)

A passing rule carries the normalized value; a failing one carries the
message to show for that field. Absent optional fields pass with
``present=False`` and contribute nothing to the normalized mapping.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Iterable, Mapping


class _Missing:
    """Sentinel for a key absent from the input mapping."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class RuleResult:
    """Outcome of a single field rule."""

    passed: bool
    rule_name: str
    message: str = ""
    value: Any = None
    present: bool = True


@dataclass
class RuleSetResult:
    """Aggregate outcome of multiple rules."""

    all_passed: bool
    results: list[RuleResult]
    failed: list[RuleResult] = field(default_factory=list)

    def __post_init__(self):
        self.failed = [r for r in self.results if not r.passed]
        self.all_passed = len(self.failed) == 0

    @property
    def values(self) -> dict[str, Any]:
        """Normalized values of the fields that were supplied."""
        return {r.rule_name: r.value for r in self.results if r.passed and r.present}

    @property
    def violations(self) -> list[tuple[str, str]]:
        return [(r.rule_name, r.message) for r in self.failed]


def _ok(name: str, value: Any) -> RuleResult:
    return RuleResult(passed=True, rule_name=name, value=value)


def _fail(name: str, message: str) -> RuleResult:
    return RuleResult(passed=False, rule_name=name, message=message)


def _absent(name: str) -> RuleResult:
    return RuleResult(passed=True, rule_name=name, present=False)


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

def check_text(
    name: str,
    raw: Any,
    *,
    required: bool = False,
    nullable: bool = False,
    min_length: int = 0,
    max_length: int | None = None,
    required_message: str = "",
    type_message: str = "",
    length_message: str = "",
) -> RuleResult:
    """Trimmed string with length bounds.

    An empty string after trimming counts as "not supplied" for required
    fields and fails ``min_length`` otherwise.
    """
    if raw is MISSING:
        return _fail(name, required_message) if required else _absent(name)
    if raw is None:
        return _ok(name, None) if nullable else _fail(name, required_message or type_message)
    if not isinstance(raw, str):
        return _fail(name, type_message or length_message)

    value = raw.strip()
    if required and not value:
        return _fail(name, required_message)
    if len(value) < min_length or (max_length is not None and len(value) > max_length):
        return _fail(name, length_message)
    return _ok(name, value)


def check_choice(
    name: str,
    raw: Any,
    choices: type[Enum],
    *,
    required: bool = False,
    message: str = "",
) -> RuleResult:
    """Value must be one of an Enum's values; normalized to the member."""
    if raw is MISSING:
        return _fail(name, message) if required else _absent(name)
    if isinstance(raw, choices):
        return _ok(name, raw)
    try:
        return _ok(name, choices(raw))
    except ValueError:
        return _fail(name, message)


def parse_boolean(raw: Any) -> bool | None:
    """Explicit true/false-like values only; None for anything else."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None


def check_boolean(
    name: str,
    raw: Any,
    *,
    required: bool = False,
    message: str = "",
) -> RuleResult:
    if raw is MISSING:
        return _fail(name, message) if required else _absent(name)
    value = parse_boolean(raw)
    if value is None:
        return _fail(name, message)
    return _ok(name, value)


def parse_datetime(raw: Any) -> datetime | None:
    """ISO-8601 date or date-time, or a date/datetime object, as aware UTC.

    Naive values are taken as server-local time.
    """
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime.combine(raw, time.min)
    elif isinstance(raw, str) and raw.strip():
        try:
            value = datetime.fromisoformat(raw.strip())
        except ValueError:
            return None
    else:
        return None
    # Values at the edge of the datetime range cannot shift to UTC.
    try:
        return value.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def check_datetime(
    name: str,
    raw: Any,
    *,
    required: bool = False,
    not_before: datetime | None = None,
    required_message: str = "",
    invalid_message: str = "",
    too_early_message: str = "",
) -> RuleResult:
    """Parse a date/time; optionally reject values strictly before a bound."""
    if raw is MISSING:
        return _fail(name, required_message) if required else _absent(name)
    value = parse_datetime(raw)
    if value is None:
        return _fail(name, invalid_message)
    if not_before is not None and value < not_before:
        return _fail(name, too_early_message)
    return _ok(name, value)


# ---------------------------------------------------------------------------
# Rule composition
# ---------------------------------------------------------------------------

def pick(data: Mapping[str, Any], names: Iterable[str]) -> dict[str, Any]:
    """Raw values for the known fields, MISSING where absent."""
    return {name: data.get(name, MISSING) for name in names}


def evaluate_rules(*rules: RuleResult) -> RuleSetResult:
    """Compose multiple rule results into a single aggregate.

    Example::

        result = evaluate_rules(
            check_text("title", raw["title"], required=True, max_length=200),
            check_boolean("completed", raw["completed"]),
        )
        if result.all_passed:
            save(result.values)
    """
    return RuleSetResult(
        all_passed=all(r.passed for r in rules),
        results=list(rules),
    )
