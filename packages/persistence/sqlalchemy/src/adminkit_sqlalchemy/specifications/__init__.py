"""
Predicate-tree-to-SQLAlchemy compilation.

Public API:
    - ``build_sqla_filter(collection, model, tree, collections=...)``:
      compile a predicate tree to a ``ColumnElement[bool]``
    - ``apply_sort(stmt, collection, model, sort, collections=...)``:
      order a ``Select`` with primary-key tie-breakers
    - ``DEFAULT_SQLA_REGISTRY``: the default operator registry
    - ``SQLAlchemyOperator`` / ``SQLAlchemyOperatorRegistry``: extension
      points for custom operators
    - ``CompileOptions``: per-request case sensitivity, timezone and now
"""

from .compiler import apply_sort, build_sqla_filter
from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .strategy import CompileOptions, SQLAlchemyOperator, SQLAlchemyOperatorRegistry
from .utils import bind_temporal

__all__ = [
    "build_sqla_filter",
    "apply_sort",
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
    "CompileOptions",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "bind_temporal",
]
