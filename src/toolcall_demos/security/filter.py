"""Security filter applied to every automatic tool invocation."""

import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Sequence

from toolcall_demos.security.policy import (
    DEFAULT_GUARDS,
    Decision,
    Guard,
    InvocationRequest,
    PolicyRules,
    PolicyViolation,
    Verdict,
)

if TYPE_CHECKING:
    from toolcall_demos.tools.types import FunctionInvocationContext

logger = logging.getLogger(__name__)


class SecurityFilter:
    """Allow or deny tool invocations against a fixed rule set.

    Guards run in order. The first DENY raises PolicyViolation and skips the
    remaining guards; ALERT decisions are logged and evaluation continues.
    The filter holds no mutable state, so one instance can serve concurrent
    invocations.

    Attributes:
        rules: The immutable rule set every guard is evaluated against
        guards: The ordered guard functions
    """

    def __init__(
        self,
        rules: PolicyRules | None = None,
        guards: Sequence[Guard] = DEFAULT_GUARDS,
    ) -> None:
        self.rules = rules if rules is not None else PolicyRules()
        self.guards = tuple(guards)

    def evaluate(self, request: InvocationRequest) -> list[Decision]:
        """Run every guard against the request.

        Args:
            request: The invocation to check

        Returns:
            list[Decision]: One decision per guard that ran

        Raises:
            PolicyViolation: On the first guard that denies the request
        """
        name = request.function_name
        logger.info(f"Security filter checking: {name}")

        decisions: list[Decision] = []
        for guard in self.guards:
            decision = guard(request, self.rules)
            decisions.append(decision)

            if decision.verdict is Verdict.DENY:
                logger.error(f"BLOCKED: {name}: {decision.reason}")
                raise PolicyViolation(
                    decision.reason,
                    field=decision.field,
                    value=decision.value,
                    function_name=name,
                )
            if decision.verdict is Verdict.ALERT:
                logger.warning(f"ALERT: {decision.reason}")

        logger.info(f"Security filter passed: {name}")
        return decisions

    def check(self, request: InvocationRequest, next: Callable[[InvocationRequest], Any]) -> Any:
        """Evaluate the request and, if allowed, call next(request) once.

        Returns:
            Whatever the continuation returns, unchanged
        """
        self.evaluate(request)
        return next(request)

    async def on_function_invocation(
        self,
        context: "FunctionInvocationContext",
        next: Callable[["FunctionInvocationContext"], Any],
    ) -> Any:
        """Invocation-filter hook used by the tool execution pipeline."""
        self.evaluate(
            InvocationRequest(
                function_name=context.function.name,
                arguments=context.arguments,
            )
        )
        result = next(context)
        if inspect.isawaitable(result):
            result = await result
        return result
