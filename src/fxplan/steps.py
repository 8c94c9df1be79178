"""Steps: reusable functions from an input to a plan.

A step takes the continuation to use once its own effect has a result (or
``None`` to end the plan there) and returns a function from input to plan::

    fetch = step(lambda url: call(download, [url]))
    parse = step(lambda body: call(json.loads, [body]))
    pipeline = batch_steps([fetch, parse])
    run_step(pipeline, "https://example.org/data.json")
"""

from collections.abc import Callable, Sequence
from functools import reduce
from typing import Any

from ._typing import Continuation, Handle, Step
from .effects import Effect, itself
from .handlers import default_handle
from .runner import Plan, run


def step(make_effect: Callable[[Any], Effect]) -> Step:
    """Lift a function from input to effect into a step."""

    def with_next(next_plan: Continuation | None = None) -> Continuation:
        def plan_for(value: Any) -> Plan:
            return Plan(make_effect(value), next_plan)

        return plan_for

    return with_next


def map_step(inner: Step, transform: Callable[[Any, Any], Any]) -> Step:
    """Wrap a step so its output is replaced by ``transform(output, input)``.

    Downstream steps see the transformed value. When the wrapped step ends the
    plan, the transformed value is the plan's result.
    """

    def with_next(next_plan: Continuation | None = None) -> Continuation:
        def plan_for(value: Any) -> Plan:
            def forward(output: Any) -> Plan:
                mapped = transform(output, value)
                if next_plan is None:
                    return Plan(itself(mapped))
                return next_plan(mapped)

            return inner(forward)(value)

        return plan_for

    return with_next


def batch_steps(steps: Sequence[Step]) -> Step:
    """Chain steps so each one's output is the next one's input.

    ``batch_steps([s1, s2, s3])(next)`` is ``s1(s2(s3(next)))``.
    """

    def with_next(next_plan: Continuation | None = None) -> Continuation | None:
        return reduce(lambda last, previous: previous(last), reversed(steps), next_plan)

    return with_next


def run_step(step: Step, value: Any, handle: Handle = default_handle) -> Any:
    """Build the plan of ``step`` for ``value`` with no continuation and run it."""
    return run(step(None)(value), handle)
