from .ast import AndNode, FalseNode, LeafNode, OrNode, PredicateNode, combine
from .composer import (
    ResolvedPath,
    build_condition_node,
    build_search_node,
    compose_condition_tree,
    resolve_field_path,
    searchable_fields,
)
from .conditions import Condition, coerce_operand, parse_condition
from .dates import (
    bucket_label,
    bucket_start,
    get_timezone,
    localize,
    resolve_relative_date,
    to_naive_utc,
    truncate,
)
from .exceptions import (
    AdminKitError,
    CollectionNotFoundError,
    ConditionError,
    ConfigurationError,
    FieldNotFoundError,
    InvalidQueryParamsError,
    InvalidTimezoneError,
    QueryTimeoutError,
    TypeMismatchError,
    UnsupportedDepthError,
    UnsupportedFieldTypeError,
    UnsupportedOperatorError,
)
from .operators import (
    OPERATOR_SUPPORT,
    ConditionOperator,
    LogicalOperator,
    check_operator,
    is_supported,
)
from .schema import (
    COMPOSITE_ID_FIELD,
    SEARCHABLE_TYPES,
    AssociationDescriptor,
    Collection,
    DefaultValue,
    FieldDescriptor,
    Validation,
)
from .settings import QuerySettings
from .specification import FilterSpecification, SortSpecification
from .types import (
    ORDERABLE_TYPES,
    TEMPORAL_TYPES,
    AggregateKind,
    DefaultValueKind,
    FilterCombinator,
    SemanticType,
    TimeRange,
)

__all__ = [
    # Vocabulary
    "SemanticType",
    "DefaultValueKind",
    "FilterCombinator",
    "TimeRange",
    "AggregateKind",
    "TEMPORAL_TYPES",
    "ORDERABLE_TYPES",
    # Schema
    "COMPOSITE_ID_FIELD",
    "SEARCHABLE_TYPES",
    "AssociationDescriptor",
    "Collection",
    "DefaultValue",
    "FieldDescriptor",
    "Validation",
    # Operators
    "OPERATOR_SUPPORT",
    "ConditionOperator",
    "LogicalOperator",
    "check_operator",
    "is_supported",
    # Conditions
    "Condition",
    "coerce_operand",
    "parse_condition",
    # Predicate tree
    "PredicateNode",
    "AndNode",
    "OrNode",
    "LeafNode",
    "FalseNode",
    "combine",
    # Composition
    "FilterSpecification",
    "SortSpecification",
    "ResolvedPath",
    "build_condition_node",
    "build_search_node",
    "compose_condition_tree",
    "resolve_field_path",
    "searchable_fields",
    # Dates
    "bucket_label",
    "bucket_start",
    "get_timezone",
    "localize",
    "resolve_relative_date",
    "to_naive_utc",
    "truncate",
    # Settings
    "QuerySettings",
    # Exceptions
    "AdminKitError",
    "CollectionNotFoundError",
    "ConditionError",
    "ConfigurationError",
    "FieldNotFoundError",
    "InvalidQueryParamsError",
    "InvalidTimezoneError",
    "QueryTimeoutError",
    "TypeMismatchError",
    "UnsupportedDepthError",
    "UnsupportedFieldTypeError",
    "UnsupportedOperatorError",
]
