import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeGuard


def is_awaitable(value: Any) -> TypeGuard[Awaitable[Any]]:
    """Return True if ``value`` can be awaited (coroutine, task, future, ...)."""
    return inspect.isawaitable(value)


def and_then(value: Any, callback: Callable[[Any], Any]) -> Any:
    """Apply ``callback`` to ``value``, waiting for it first only if it is awaitable.

    A plain value is passed to ``callback`` immediately and its result returned
    as is. An awaitable value produces a coroutine that awaits it, applies
    ``callback`` and awaits the callback's result too if that is awaitable.

    Args:
        value: A plain value or an awaitable of one.
        callback: Function to apply to the settled value.

    Returns:
        ``callback(value)`` directly, or a coroutine resolving to it.
    """
    if not is_awaitable(value):
        return callback(value)
    return _and_then_async(value, callback)


async def _and_then_async(value: Awaitable[Any], callback: Callable[[Any], Any]) -> Any:
    result = callback(await value)
    if is_awaitable(result):
        result = await result
    return result
