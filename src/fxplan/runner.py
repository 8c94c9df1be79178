import logging
from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple

from ._typing import Continuation, Handle, PlanLike
from .effects import Effect, describe_effect
from .handlers import default_handle
from .util import is_awaitable

logger = logging.getLogger(__name__)


class Plan(NamedTuple):
    """An effect to run now and an optional continuation producing the next plan."""

    effect: Effect
    next: Callable[[Any], PlanLike] | None = None


def _unpack(plan: PlanLike) -> tuple[Effect, Continuation | None]:
    effect, *rest = plan
    return effect, rest[0] if rest else None


def run(plan: PlanLike, handle: Handle = default_handle) -> Any:
    """Execute a plan against a handle.

    Each segment's effect is given to ``handle``. While every result is a plain
    value the whole plan runs synchronously and ``run`` returns the final value
    directly. The first awaitable result switches the rest of the execution to
    a coroutine, which ``run`` returns instead.

    Plans may be ``Plan`` instances or any ``(effect,)`` / ``(effect, next)``
    sequence. Segments are unfolded in a loop, so long plans do not grow the
    stack.

    Args:
        plan: The plan to execute.
        handle: The handle interpreting each effect. Defaults to ``default_handle``.

    Returns:
        The value of the last effect, or a coroutine resolving to it.
    """
    effect, next_plan = _unpack(plan)
    while True:
        result = handle(effect, handle)
        if is_awaitable(result):
            logger.debug("Plan suspended on %s", describe_effect(effect))
            return _resume(result, next_plan, handle)
        if next_plan is None:
            return result
        effect, next_plan = _unpack(next_plan(result))


async def _resume(pending: Awaitable[Any], next_plan: Continuation | None, handle: Handle) -> Any:
    value = await pending
    while next_plan is not None:
        effect, next_plan = _unpack(next_plan(value))
        value = handle(effect, handle)
        if is_awaitable(value):
            value = await value
    return value
