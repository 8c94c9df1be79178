import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from ._typing import Handle, infer_effect_type, normalize_effect_annotations
from .effects import All, Call, CallMethod, Effect, Itself, Race, describe_effect
from .util import and_then, is_awaitable


class FxPlanError(Exception):
    """Base class for errors raised by fxplan itself."""


class UnknownEffectError(FxPlanError, TypeError):
    """Exception raised when a handler is given something it cannot interpret."""

    __match_args__ = ("effect",)

    def __init__(self, effect: Any):
        """Initialize the exception with the unrecognized effect."""
        super().__init__(f"Unknown effect: {describe_effect(effect)}")
        self.effect = effect


def default_handle(effect: Effect, handle: Handle) -> Any:
    """Interpret one effect.

    ``Call`` and ``CallMethod`` are invoked directly and their result returned as
    is, awaitable or not. ``All`` and ``Race`` dispatch every child through
    ``handle`` right away, in order, and return a coroutine combining the
    children's results. ``Itself`` returns its value untouched.

    Children of ``All`` and ``Race`` that lose (fail after the first failure,
    or settle after the winner) keep running; their outcome is discarded.
    Child dispatch happens here, but an empty ``Race`` only raises its
    ``ValueError`` once the returned coroutine is awaited, like every other
    composite outcome.

    Args:
        effect: The effect to interpret.
        handle: The handle used for the children of ``All`` and ``Race``. The
                runner passes the top-level handle here so custom handlers stay
                in charge of nested effects.

    Returns:
        The effect's result, or an awaitable of it.

    Raises:
        UnknownEffectError: If ``effect`` is not one of the known effect types.
    """
    match effect:
        case Call(func=func, args=args, context=None, kwargs=kwargs):
            return func(*args, **kwargs)
        case Call(func=func, args=args, context=context, kwargs=kwargs):
            return func(context, *args, **kwargs)
        case CallMethod(obj=obj, method=method, args=args, kwargs=kwargs):
            return getattr(obj, method)(*args, **kwargs)
        case All(effects=effects):
            return _gather([handle(child, handle) for child in effects])
        case Race(effects=effects):
            return _race([handle(child, handle) for child in effects])
        case Itself(value=value):
            return value
        case _:
            raise UnknownEffectError(effect)


def _discard_outcome(future: asyncio.Future[Any]) -> None:
    # marks the exception of a losing child as retrieved
    if not future.cancelled():
        future.exception()


def _as_future(result: Any) -> asyncio.Future[Any]:
    if is_awaitable(result):
        future = asyncio.ensure_future(result)
        future.add_done_callback(_discard_outcome)
        return future
    future = asyncio.get_running_loop().create_future()
    future.set_result(result)
    return future


async def _gather(results: Sequence[Any]) -> list[Any]:
    # gather does not cancel the other children when one fails
    return list(await asyncio.gather(*(_as_future(result) for result in results)))


async def _race(results: Sequence[Any]) -> Any:
    if not results:
        raise ValueError("race() of no effects can never settle")
    futures = [_as_future(result) for result in results]
    for future in futures:
        if future.done():
            return future.result()
    done, _ = await asyncio.wait(futures, return_when=asyncio.FIRST_COMPLETED)
    winner = next(future for future in futures if future in done)
    return winner.result()


def handler(
    handler_func: Callable[[Any], Any],
    effect_type: type[Effect] | tuple[type[Effect], ...] | None = None,
    *,
    fallback: Handle = default_handle,
) -> Handle:
    """Build a handle that interprets one effect type with ``handler_func``.

    Effects of other types are passed on to ``fallback`` together with the
    recursive handle, so the override also applies to the children of ``All``
    and ``Race``. Handles built this way can be chained through ``fallback``.

    Args:
        handler_func: Called with the effect; its return value (plain or
                      awaitable) is the effect's result.
        effect_type: The effect class (or tuple of classes) to intercept. If not
                     provided, it is inferred from the type annotation of
                     handler_func's first parameter.
        fallback: The handle for every other effect. Defaults to ``default_handle``.

    Returns:
        A handle suitable for ``run`` and ``run_step``.

    Raises:
        TypeError: If effect_type is not provided and cannot be inferred from handler_func.
    """
    if effect_type is None:
        effect_types = infer_effect_type(handler_func, effect_base=Effect)
    else:
        effect_types = normalize_effect_annotations(effect_type, effect_base=Effect)

    def handle(effect: Effect, recurse: Handle) -> Any:
        if isinstance(effect, effect_types):
            return handler_func(effect)
        return fallback(effect, recurse)

    func_name = getattr(handler_func, "__name__", repr(handler_func))
    handle.__name__ = handle.__qualname__ = f"handler({func_name})"
    return handle


def logged(
    handle: Handle = default_handle,
    *,
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
) -> Handle:
    """Wrap a handle so every effect it sees is logged.

    Nested effects go back through the recursive handle, so when the wrapper is
    the handle given to ``run`` the children of ``All`` and ``Race`` are logged
    as well. Failures are logged and re-raised.

    Args:
        handle: The handle doing the actual work.
        logger: Logger to write to. Defaults to the ``fxplan.handlers`` logger.
        level: Logging level for all records.
    """
    log = logger or logging.getLogger(__name__)

    def logging_handle(effect: Effect, recurse: Handle) -> Any:
        label = describe_effect(effect)
        log.log(level, "Handling %s", label)
        try:
            result = handle(effect, recurse)
        except Exception as e:
            log.log(level, "%s raised %s", label, type(e).__name__)
            raise
        if is_awaitable(result):
            log.log(level, "%s suspended", label)
            result = _log_failure(result, label, log, level)

        def report(value: Any) -> Any:
            log.log(level, "%s returned %r", label, value)
            return value

        return and_then(result, report)

    return logging_handle


async def _log_failure(result: Any, label: str, log: logging.Logger, level: int) -> Any:
    try:
        return await result
    except Exception as e:
        log.log(level, "%s raised %s", label, type(e).__name__)
        raise
