from pytest_archon import archrule


def test_specifications_independence() -> None:
    """
    Specifications is the storage-independent foundation.
    It must not import the adapters built on top of it, nor SQLAlchemy.
    """
    (
        archrule("specifications_is_independent")
        .match("adminkit_specifications*")
        .should_not_import("adminkit_filtering*")
        .should_not_import("adminkit_sqlalchemy*")
        .should_not_import("sqlalchemy*")
        .should_not_import("pydantic*")
        .check("adminkit_specifications")
    )


def test_filtering_no_persistence() -> None:
    """Request parsing must not depend on a storage backend."""
    (
        archrule("filtering_no_persistence")
        .match("adminkit_filtering*")
        .should_not_import("adminkit_sqlalchemy*")
        .should_not_import("sqlalchemy*")
        .check("adminkit_filtering")
    )


def test_introspection_isolation() -> None:
    """
    Introspection only describes models.
    It must not reach into compilation or the request getters.
    """
    (
        archrule("introspection_isolation")
        .match("adminkit_sqlalchemy.introspection*")
        .should_not_import("adminkit_sqlalchemy.services*")
        .should_not_import("adminkit_sqlalchemy.specifications*")
        .should_not_import("adminkit_filtering*")
        .check("adminkit_sqlalchemy")
    )


def test_compiler_independent_of_getters() -> None:
    """The predicate compiler must not import the getters that use it."""
    (
        archrule("compiler_independent_of_getters")
        .match("adminkit_sqlalchemy.specifications*")
        .should_not_import("adminkit_sqlalchemy.services*")
        .should_not_import("adminkit_filtering*")
        .check("adminkit_sqlalchemy")
    )
