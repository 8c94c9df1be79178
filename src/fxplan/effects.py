from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar


class Effect:
    """Base class for all effect descriptors."""

    kind: ClassVar[str]


@dataclass(frozen=True)
class Call(Effect):
    """Invoke ``func`` with ``args``, bound to ``context`` when one is given."""

    kind: ClassVar[str] = "call"

    func: Callable[..., Any]
    args: Sequence[Any] = ()
    context: Any = None
    kwargs: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CallMethod(Effect):
    """Invoke the method named ``method`` on ``obj``."""

    kind: ClassVar[str] = "call_method"

    obj: Any
    method: str
    args: Sequence[Any] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class All(Effect):
    """Run all child effects concurrently and collect their results in order."""

    kind: ClassVar[str] = "all"

    effects: Sequence[Effect]


@dataclass(frozen=True)
class Race(Effect):
    """Run all child effects concurrently and settle with the first to settle."""

    kind: ClassVar[str] = "race"

    effects: Sequence[Effect]


@dataclass(frozen=True)
class Itself(Effect):
    """A value that is already known."""

    kind: ClassVar[str] = "itself"

    value: Any


def call(
    func: Callable[..., Any], args: Sequence[Any] = (), context: Any = None, **kwargs: Any
) -> Call:
    """Describe a call to ``func``.

    Args:
        func: The callable to invoke.
        args: Positional arguments, stored as given.
        context: Optional receiver. When not ``None`` it is passed as the first
                 positional argument, the way Python binds ``self``.
        **kwargs: Keyword arguments for the call.

    Returns:
        A ``Call`` effect. Nothing is invoked until a handler interprets it.
    """
    return Call(func, args, context, kwargs)


def call_method(obj: Any, method: str, args: Sequence[Any] = (), **kwargs: Any) -> CallMethod:
    """Describe a call to ``obj.<method>(*args, **kwargs)``.

    The method is looked up when the effect is handled, not here.
    """
    return CallMethod(obj, method, args, kwargs)


def all_(effects: Sequence[Effect]) -> All:
    """Describe running ``effects`` concurrently, collecting every result."""
    return All(effects)


def race(effects: Sequence[Effect]) -> Race:
    """Describe running ``effects`` concurrently, keeping the first to settle."""
    return Race(effects)


def itself(value: Any) -> Itself:
    """Wrap ``value`` as an effect. Effects and plans are not unwrapped."""
    return Itself(value)


def describe_effect(effect: Any) -> str:
    """Return a short label for an effect, for logs and error messages."""
    match effect:
        case Call(func=func):
            return f"call({_callable_name(func)})"
        case CallMethod(obj=obj, method=method):
            owner = getattr(obj, "__name__", None) or type(obj).__name__
            return f"call_method({owner}.{method})"
        case All(effects=effects) | Race(effects=effects):
            return f"{effect.kind}[{len(effects)}]"
        case Itself(value=value):
            return f"itself({value!r})"
        case _:
            return repr(effect)


def _callable_name(func: Any) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", repr(func))
