"""
Adminkit exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``AdminKitError`` and provide ``to_dict()``
for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class AdminKitError(Exception):
    """Root exception for the entire adminkit toolkit."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ConditionError(AdminKitError):
    """
    Base class for errors tied to one filter condition.

    Carries the offending field and the raw condition string so that
    callers can point the user at the exact input that failed.
    """

    code = "CONDITION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        raw: Any = None,
    ) -> None:
        self.message = message
        self.field = field
        self.raw = raw
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "field": self.field,
            "raw": self.raw,
        }


class UnsupportedFieldTypeError(ConditionError):
    """
    A column's native type has no semantic type.

    Non-fatal during introspection: the field is dropped from the schema.
    Raised at request time when such a field is used in a filter.
    """

    code = "UNSUPPORTED_FIELD_TYPE"

    def __init__(self, field: str, native_type: str, *, raw: Any = None) -> None:
        self.native_type = native_type
        super().__init__(
            f"Field '{field}' has unsupported type '{native_type}'",
            field=field,
            raw=raw,
        )


class UnsupportedOperatorError(ConditionError):
    """Operator is illegal for the field's semantic type."""

    code = "UNSUPPORTED_OPERATOR"

    def __init__(
        self,
        operator: str,
        semantic_type: str,
        *,
        field: str | None = None,
        raw: Any = None,
    ) -> None:
        self.operator = operator
        self.semantic_type = semantic_type
        super().__init__(
            f"Operator '{operator}' is not supported on {semantic_type} "
            f"field '{field}' (condition {raw!r})",
            field=field,
            raw=raw,
        )


class TypeMismatchError(ConditionError):
    """Operand cannot be coerced to the field's semantic type."""

    code = "TYPE_MISMATCH"

    def __init__(
        self,
        semantic_type: str,
        *,
        field: str | None = None,
        raw: Any = None,
        reason: str | None = None,
    ) -> None:
        self.semantic_type = semantic_type
        message = (
            f"Value {raw!r} of field '{field}' cannot be read as {semantic_type}"
        )
        if reason:
            message += f": {reason}"
        super().__init__(message, field=field, raw=raw)


class UnsupportedDepthError(ConditionError):
    """Field path goes further than one association hop."""

    code = "UNSUPPORTED_DEPTH"

    def __init__(self, path: str, *, raw: Any = None) -> None:
        self.path = path
        super().__init__(
            f"Field path '{path}' traverses more than one association",
            field=path,
            raw=raw,
        )


class InvalidTimezoneError(AdminKitError):
    """Timezone identifier is not a known IANA zone."""

    def __init__(self, timezone: Any) -> None:
        self.timezone = timezone
        super().__init__(f"Invalid timezone: {timezone!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_TIMEZONE",
            "timezone": self.timezone,
        }


class QueryTimeoutError(AdminKitError):
    """Storage execution exceeded its deadline. Safe to retry."""

    def __init__(self, operation: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} did not complete within {timeout}s")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TIMEOUT",
            "operation": self.operation,
            "timeout": self.timeout,
        }


class FieldNotFoundError(ConditionError):
    """
    Invalid field path with helpful suggestions.

    Uses fuzzy matching to suggest similar valid field names.

    Example error message::

        Invalid field 'frstName' on 'user'.
        Did you mean one of these?
          • firstName

        Available fields: email, firstName, id, lastName, ...
    """

    code = "FIELD_NOT_FOUND"

    def __init__(
        self,
        invalid_field: str,
        collection_name: str,
        available_fields: list[str],
        full_path: str | None = None,
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.collection_name = collection_name
        self.available_fields = available_fields
        self.full_path = full_path or invalid_field

        self.suggestions = get_close_matches(
            invalid_field, available_fields, n=5, cutoff=cutoff
        )
        super().__init__(self._build_message(), field=self.full_path)

    def _build_message(self) -> str:
        lines = [
            f"Invalid field '{self.invalid_field}' on '{self.collection_name}'."
        ]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            for s in self.suggestions:
                lines.append(f"  • {s}")

        sorted_fields = sorted(self.available_fields)
        preview = ", ".join(sorted_fields[:15])
        if len(sorted_fields) > 15:
            preview += ", ..."
        lines.append(f"Available fields: {preview}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "field": self.invalid_field,
            "collection": self.collection_name,
            "full_path": self.full_path,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class CollectionNotFoundError(AdminKitError):
    """No collection registered under the requested name."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.suggestions = get_close_matches(name, available, n=3, cutoff=0.6)
        message = f"Unknown collection: '{name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "COLLECTION_NOT_FOUND",
            "collection": self.name,
            "suggestions": self.suggestions,
        }


class ConfigurationError(AdminKitError):
    """Collection declaration is inconsistent (raised at startup)."""


class InvalidQueryParamsError(AdminKitError):
    """
    Request parameters failed validation.

    Carries structured errors: ``{location: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        else:
            self.errors = errors
        super().__init__(str(self.errors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_QUERY_PARAMS",
            "errors": self.errors,
        }
