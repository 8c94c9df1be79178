"""A minimal algebraic effects runtime built on plans.

Side effects are described as inert data (effects), chained into plans, and
executed by ``run`` against a handle that decides how each effect is
performed. Plans whose effects all produce plain values run synchronously;
the first awaitable result turns the rest of the run into a coroutine.

Example:

>>> import fxplan as fx
>>>
>>> # Describe the work as data
>>> plan = (
...     fx.call_method("a,b,c", "split", [","]),
...     lambda parts: (fx.call(len, [parts]),),
... )
>>> fx.run(plan)
3
>>>
>>> # Swap how Call effects are performed without touching the plan
>>> def fake_call(effect: fx.Call) -> int:
...     return 42
>>>
>>> fx.run(plan, fx.handler(fake_call))
42
"""

from .__version__ import __version__
from .effects import (
    All,
    Call,
    CallMethod,
    Effect,
    Itself,
    Race,
    all_,
    call,
    call_method,
    describe_effect,
    itself,
    race,
)
from .handlers import FxPlanError, UnknownEffectError, default_handle, handler, logged
from .runner import Plan, run
from .steps import batch_steps, map_step, run_step, step
from .util import and_then, is_awaitable

__all__ = [
    "All",
    "Call",
    "CallMethod",
    "Effect",
    "FxPlanError",
    "Itself",
    "Plan",
    "Race",
    "UnknownEffectError",
    "__version__",
    "all_",
    "and_then",
    "batch_steps",
    "call",
    "call_method",
    "default_handle",
    "describe_effect",
    "handler",
    "is_awaitable",
    "itself",
    "logged",
    "map_step",
    "race",
    "run",
    "run_step",
    "step",
]
