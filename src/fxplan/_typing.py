import inspect
import types
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Iterable, Protocol, TypeAlias, Union, get_args, get_origin

if TYPE_CHECKING:  # pragma: no cover - type check only
    from .effects import Effect


_UNION_ORIGIN = types.UnionType
_TYPING_UNION = Union


class Handle(Protocol):
    """Interprets one effect, given the handle to use for nested effects."""

    def __call__(self, effect: "Effect", handle: "Handle", /) -> Any: ...


PlanLike: TypeAlias = Sequence[Any]
Continuation: TypeAlias = Callable[[Any], PlanLike]
Step: TypeAlias = Callable[[Continuation | None], Continuation]


def infer_effect_type(
    handler_func: Callable[..., Any], *, effect_base: type["Effect"]
) -> tuple[type["Effect"], ...]:
    """Infer the effect classes a handler function accepts from its first parameter.

    Raises:
        TypeError: If the first parameter is missing, unannotated, or not annotated
                   with ``Effect`` subclasses.
    """
    sig = inspect.signature(handler_func)
    params = list(sig.parameters.values())

    if not params:
        raise TypeError(
            "Cannot infer effect type: handler_func has no parameters. "
            "Please provide effect_type explicitly."
        )

    first_param = params[0]
    param_annotation = first_param.annotation

    if param_annotation is inspect.Parameter.empty:
        raise TypeError(
            f"Cannot infer effect type: parameter '{first_param.name}' has no type annotation. "
            "Please provide effect_type explicitly or add a type annotation."
        )

    return normalize_effect_annotations(param_annotation, effect_base=effect_base)


def normalize_effect_annotations(
    effect_type: Any | tuple[Any, ...], *, effect_base: type["Effect"]
) -> tuple[type["Effect"], ...]:
    if isinstance(effect_type, tuple):
        raw: Iterable[Any] = effect_type
    else:
        raw = (effect_type,)

    normalized: list[type[Effect]] = []
    for candidate in raw:
        origin = get_origin(candidate)
        if origin is _UNION_ORIGIN or origin is _TYPING_UNION:
            normalized.extend(
                normalize_effect_annotations(get_args(candidate), effect_base=effect_base)
            )
            continue
        normalized.append(effect_class_from_annotation(candidate, effect_base=effect_base))

    return tuple(normalized)


def effect_class_from_annotation(annotation: Any, *, effect_base: type["Effect"]) -> type["Effect"]:
    origin = get_origin(annotation)
    effect_cls = origin if origin is not None else annotation
    if not (isinstance(effect_cls, type) and issubclass(effect_cls, effect_base)):
        raise TypeError(
            f"Inferred type {effect_cls!r} is not a subclass of Effect. "
            "Please provide effect_type explicitly."
        )
    return effect_cls
