"""
Condition grammar.

A raw filter value is a single string whose prefix/suffix encodes the
operator::

    !value          not equals         (!null, !true, !false: negated checks)
    !*text*         not contains
    >value <value   greater / less than (numbers and dates)
    *text*          contains
    text*           starts with
    *text           ends with
    null true false null / boolean checks
    $present        not null and not empty (strings)
    $blank          null or empty (strings)
    $2HoursBefore   strictly earlier than now - 2h (dates)
    $2HoursAfter    strictly later than now + 2h (dates)
    anything else   equals, operand coerced to the field's type

``parse_condition`` runs once per filter entry; downstream code only sees
the structured :class:`Condition`.
"""

from __future__ import annotations

import datetime
import math
import re
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .exceptions import TypeMismatchError
from .operators import ConditionOperator, check_operator
from .types import SemanticType

_RELATIVE_DATE_RE = re.compile(r"^\$(\d+)Hours(Before|After)$")
# A thousand years either way stays inside datetime's range
MAX_RELATIVE_HOURS = 24 * 366 * 1000

_SENTINELS: dict[str, ConditionOperator] = {
    "null": ConditionOperator.IS_NULL,
    "true": ConditionOperator.IS_TRUE,
    "false": ConditionOperator.IS_FALSE,
}
_NEGATED_SENTINELS: dict[str, ConditionOperator] = {
    "null": ConditionOperator.IS_NOT_NULL,
    "true": ConditionOperator.IS_NOT_TRUE,
    "false": ConditionOperator.IS_NOT_FALSE,
}
_PRESENCE: dict[str, ConditionOperator] = {
    "$present": ConditionOperator.IS_PRESENT,
    "$blank": ConditionOperator.IS_BLANK,
}


@dataclass(frozen=True)
class Condition:
    """
    One parsed filter entry.

    Attributes:
        field: Field path the condition applies to (``name`` or
            ``association.name``).
        operator: The operator encoded in the raw string.
        operand: Typed operand; ``None`` for operand-less checks, an
            ``int`` hour offset for relative dates.
        raw: The raw string the condition was parsed from.
    """

    field: str
    operator: ConditionOperator
    operand: Any = None
    raw: str | None = None


def parse_condition(
    raw: Any,
    semantic_type: SemanticType,
    *,
    field: str,
    enum_values: Sequence[str] | None = None,
) -> Condition:
    """
    Classify *raw* into a :class:`Condition` for a field of *semantic_type*.

    Raises:
        UnsupportedOperatorError: The operator is illegal for the type.
        TypeMismatchError: The operand cannot be coerced to the type.
    """
    text = _as_text(raw)

    operator, operand_text = _classify(text, semantic_type)
    check_operator(semantic_type, operator, field=field, raw=text)

    if operator is ConditionOperator.BEFORE_HOURS or (
        operator is ConditionOperator.AFTER_HOURS
    ):
        if len(operand_text.lstrip("0")) > len(str(MAX_RELATIVE_HOURS)) or (
            int(operand_text) > MAX_RELATIVE_HOURS
        ):
            raise TypeMismatchError(
                semantic_type.value,
                field=field,
                raw=text,
                reason=f"hour offset exceeds {MAX_RELATIVE_HOURS}",
            )
        operand: Any = int(operand_text)
    elif operator in _TEXT_OPERATORS:
        operand = operand_text
    elif operator in _VALUE_OPERATORS:
        operand = coerce_operand(
            operand_text,
            semantic_type,
            field=field,
            raw=text,
            enum_values=enum_values,
        )
    else:
        operand = None

    return Condition(field=field, operator=operator, operand=operand, raw=text)


_TEXT_OPERATORS = frozenset(
    {
        ConditionOperator.CONTAINS,
        ConditionOperator.NOT_CONTAINS,
        ConditionOperator.STARTSWITH,
        ConditionOperator.ENDSWITH,
    }
)
_VALUE_OPERATORS = frozenset(
    {
        ConditionOperator.EQ,
        ConditionOperator.NE,
        ConditionOperator.GT,
        ConditionOperator.LT,
    }
)


def _as_text(raw: Any) -> str:
    if raw is None:
        return "null"
    if isinstance(raw, bool):
        return "true" if raw else "false"
    return str(raw)


def _classify(
    text: str, semantic_type: SemanticType
) -> tuple[ConditionOperator, str]:
    """Return ``(operator, operand text)`` following the grammar precedence."""
    # 1. negation
    if text.startswith("!"):
        rest = text[1:]
        if len(rest) >= 2 and rest.startswith("*") and rest.endswith("*"):
            return ConditionOperator.NOT_CONTAINS, rest[1:-1]
        if rest == "null" or (
            rest in _NEGATED_SENTINELS and semantic_type is SemanticType.BOOLEAN
        ):
            return _NEGATED_SENTINELS[rest], ""
        return ConditionOperator.NE, rest

    # 2. ordering
    if text.startswith(">"):
        return ConditionOperator.GT, text[1:]
    if text.startswith("<"):
        return ConditionOperator.LT, text[1:]

    # 3. wildcards, both ends first
    if len(text) >= 2 and text.startswith("*") and text.endswith("*"):
        return ConditionOperator.CONTAINS, text[1:-1]
    if text.endswith("*"):
        return ConditionOperator.STARTSWITH, text[:-1]
    if text.startswith("*"):
        return ConditionOperator.ENDSWITH, text[1:]

    # 4. sentinels
    if text == "null" or (text in _SENTINELS and semantic_type is SemanticType.BOOLEAN):
        return _SENTINELS[text], ""

    # 5. presence
    if text in _PRESENCE:
        return _PRESENCE[text], ""

    # 6. relative dates
    match = _RELATIVE_DATE_RE.match(text)
    if match:
        hours, direction = match.groups()
        if direction == "Before":
            return ConditionOperator.BEFORE_HOURS, hours
        return ConditionOperator.AFTER_HOURS, hours

    # 7. equality
    return ConditionOperator.EQ, text


def coerce_operand(
    text: str,
    semantic_type: SemanticType,
    *,
    field: str | None = None,
    raw: Any = None,
    enum_values: Sequence[str] | None = None,
) -> Any:
    """Convert operand *text* to the Python type of *semantic_type*."""
    raw = text if raw is None else raw
    try:
        if semantic_type is SemanticType.NUMBER:
            return parse_number(text)
        if semantic_type is SemanticType.DATE:
            return parse_datetime(text)
        if semantic_type is SemanticType.DATEONLY:
            return datetime.date.fromisoformat(text)
        if semantic_type is SemanticType.UUID:
            return uuid.UUID(text)
    except ValueError as exc:
        raise TypeMismatchError(
            semantic_type.value, field=field, raw=raw, reason=str(exc)
        ) from exc

    if semantic_type is SemanticType.ENUM:
        if enum_values is not None and text not in enum_values:
            raise TypeMismatchError(
                semantic_type.value,
                field=field,
                raw=raw,
                reason=f"expected one of {', '.join(enum_values)}",
            )
        return text
    if semantic_type is SemanticType.STRING:
        return text
    if semantic_type is SemanticType.BOOLEAN:
        raise TypeMismatchError(
            semantic_type.value,
            field=field,
            raw=raw,
            reason="use true, false or null",
        )
    raise TypeMismatchError(semantic_type.value, field=field, raw=raw)


def parse_number(text: str) -> int | float:
    """Parse an int, then a finite float; raise ``ValueError`` otherwise."""
    stripped = text.strip()
    if "_" in stripped:
        raise ValueError(f"not a plain number: {text!r}")
    try:
        return int(stripped)
    except ValueError:
        pass
    value = float(stripped)
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {text!r}")
    return value


def parse_datetime(text: str) -> datetime.datetime:
    stripped = text.strip()
    if stripped.endswith("Z"):
        stripped = stripped[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(stripped)


def try_parse_number(text: str) -> int | float | None:
    try:
        return parse_number(text)
    except ValueError:
        return None


def try_parse_uuid(text: str) -> uuid.UUID | None:
    try:
        value = uuid.UUID(text.strip())
    except ValueError:
        return None
    # Only the canonical 36-character form counts as a full UUID
    if str(value) != text.strip().lower():
        return None
    return value
