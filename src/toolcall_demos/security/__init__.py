"""Invocation policy filter for tool calls.

Guards decide per invocation whether a tool call may run; the SecurityFilter
chains them and plugs into the tool execution pipeline.
"""

from toolcall_demos.security.filter import SecurityFilter
from toolcall_demos.security.policy import (
    DEFAULT_GUARDS,
    Decision,
    InvocationRequest,
    PolicyRules,
    PolicyViolation,
    Verdict,
    currency_guard,
    large_amount_guard,
    location_guard,
)

__all__ = [
    "DEFAULT_GUARDS",
    "Decision",
    "InvocationRequest",
    "PolicyRules",
    "PolicyViolation",
    "SecurityFilter",
    "Verdict",
    "currency_guard",
    "large_amount_guard",
    "location_guard",
]
