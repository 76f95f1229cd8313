"""
Helpers for calling external collaborators.

Every gateway call goes through `guarded`, so a collaborator that raises
produces a typed error value instead of an exception mid-transition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult

from combinators.lift import catching_async

log = logging.getLogger(__name__)


def guarded[T, E](
    call: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
    *,
    what: str,
) -> LazyCoroResult[T, E]:
    """
    Wrap a collaborator call: exceptions are logged and mapped via on_error.

        zones = await guarded(
            gateway.list_active_delivery_zones,
            on_error=lambda e: EligibilityError.lookup_failed(str(e)),
            what="delivery zones",
        )
    """
    def _convert(exc: Exception) -> E:
        log.warning(f"{what} call failed: {exc!r}")
        return on_error(exc)

    return catching_async(call, on_error=_convert)


__all__ = ("guarded",)
