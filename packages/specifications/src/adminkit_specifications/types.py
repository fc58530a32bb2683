from enum import Enum


class SemanticType(str, Enum):
    """Storage-independent vocabulary of field kinds."""

    NUMBER = "Number"
    STRING = "String"
    BOOLEAN = "Boolean"
    DATE = "Date"
    DATEONLY = "Dateonly"
    ENUM = "Enum"
    JSON = "Json"
    UUID = "Uuid"
    UNSUPPORTED = "Unsupported"


class DefaultValueKind(str, Enum):
    """How a column's default value is exposed."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    NONE = "none"


class FilterCombinator(str, Enum):
    AND = "and"
    OR = "or"


class TimeRange(str, Enum):
    """Bucket sizes for Line aggregations."""

    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"


class AggregateKind(str, Enum):
    COUNT = "Count"
    SUM = "Sum"
    AVG = "Avg"
    MIN = "Min"
    MAX = "Max"


TEMPORAL_TYPES: frozenset[SemanticType] = frozenset(
    {SemanticType.DATE, SemanticType.DATEONLY}
)
ORDERABLE_TYPES: frozenset[SemanticType] = frozenset(
    {SemanticType.NUMBER, SemanticType.DATE, SemanticType.DATEONLY}
)
