"""Storage calls under a deadline."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from adminkit_specifications.exceptions import QueryTimeoutError

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from sqlalchemy import Executable, Result
    from sqlalchemy.ext.asyncio import AsyncSession


async def with_timeout(
    awaitable: Awaitable[Any], *, operation: str, timeout: float | None
) -> Any:
    """
    Await *awaitable*, giving up after *timeout* seconds.

    Raises:
        QueryTimeoutError: The deadline passed. Nothing is cached; the
            caller may retry.
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as err:
        raise QueryTimeoutError(operation, timeout) from err


async def execute(
    session: AsyncSession,
    stmt: Executable,
    *,
    operation: str,
    timeout: float | None,
) -> Result[Any]:
    """``session.execute(stmt)`` under :func:`with_timeout`."""
    return await with_timeout(
        session.execute(stmt), operation=operation, timeout=timeout
    )
