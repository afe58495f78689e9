"""Security policy rules, decisions and guards for tool invocations.

Each guard is a pure function of an InvocationRequest and the PolicyRules it
is evaluated against. Guards never log and never raise; the SecurityFilter
turns their decisions into log lines and PolicyViolation errors.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping

DEFAULT_BLOCKED_CURRENCIES = frozenset({"BTC", "ETH", "DOGE", "XRP"})
DEFAULT_RESTRICTED_COUNTRIES = ("NORTH_KOREA", "IRAN", "SYRIA")
DEFAULT_RESTRICTED_CITIES = ("PYONGYANG", "TEHRAN")
DEFAULT_LARGE_AMOUNT_THRESHOLD = Decimal("100000")


class PolicyViolation(Exception):
    """Raised when a guard denies a tool invocation.

    Attributes:
        reason: Human-readable explanation
        field: Name of the offending argument (e.g. "fromCurrency")
        value: The offending argument value as received
        function_name: Name of the function whose invocation was denied
    """

    def __init__(
        self,
        reason: str,
        field: str | None = None,
        value: Any = None,
        function_name: str | None = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.field = field
        self.value = value
        self.function_name = function_name


@dataclass(frozen=True)
class PolicyRules:
    """Immutable rule set shared by every invocation a filter checks.

    Entries are normalized to upper case so comparisons only need to
    upper-case the incoming argument.
    """

    blocked_currencies: frozenset[str] = DEFAULT_BLOCKED_CURRENCIES
    restricted_countries: tuple[str, ...] = DEFAULT_RESTRICTED_COUNTRIES
    restricted_cities: tuple[str, ...] = DEFAULT_RESTRICTED_CITIES
    large_amount_threshold: Decimal = DEFAULT_LARGE_AMOUNT_THRESHOLD

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "blocked_currencies",
            frozenset(code.upper() for code in self.blocked_currencies),
        )
        object.__setattr__(
            self,
            "restricted_countries",
            tuple(token.upper() for token in self.restricted_countries),
        )
        object.__setattr__(
            self,
            "restricted_cities",
            tuple(token.upper() for token in self.restricted_cities),
        )
        object.__setattr__(
            self, "large_amount_threshold", Decimal(self.large_amount_threshold)
        )

    @property
    def restricted_locations(self) -> tuple[str, ...]:
        """All location substrings that deny weather access."""
        return self.restricted_countries + self.restricted_cities


@dataclass(frozen=True)
class InvocationRequest:
    """A function name plus the raw arguments the model supplied for it."""

    function_name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))


class Verdict(str, Enum):
    """Outcome of a single guard."""

    ALLOW = "allow"
    DENY = "deny"
    ALERT = "alert"


@dataclass(frozen=True)
class Decision:
    """The verdict one guard reached for one request."""

    verdict: Verdict
    guard: str
    reason: str = ""
    field: str | None = None
    value: Any = None

    @classmethod
    def allow(cls, guard: str) -> "Decision":
        return cls(Verdict.ALLOW, guard)

    @classmethod
    def deny(cls, guard: str, reason: str, field: str, value: Any) -> "Decision":
        return cls(Verdict.DENY, guard, reason, field, value)

    @classmethod
    def alert(cls, guard: str, reason: str, field: str, value: Any) -> "Decision":
        return cls(Verdict.ALERT, guard, reason, field, value)


Guard = Callable[[InvocationRequest, PolicyRules], Decision]


_DECIMAL_TEXT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)")


def _parse_decimal(value: Any) -> Decimal | None:
    """Parse an argument as a finite decimal, or return None.

    Text may use comma group separators ("500,000") but not exponents, NaN
    or infinity. Numbers are taken as they are.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if not _DECIMAL_TEXT.fullmatch(text):
            return None
        value = text
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def format_currency(amount: Decimal) -> str:
    """Format an amount the way the console alerts show it, e.g. $500,000.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def currency_guard(request: InvocationRequest, rules: PolicyRules) -> Decision:
    """Deny conversions from or to a blocked currency.

    Applies to any function whose name contains "Convert". fromCurrency is
    checked first and the first match wins.
    """
    guard = "currency"
    if "Convert" not in request.function_name:
        return Decision.allow(guard)

    for argument, side in (("fromCurrency", "from"), ("toCurrency", "to")):
        value = request.arguments.get(argument)
        if value is None:
            continue
        if str(value).upper() in rules.blocked_currencies:
            return Decision.deny(
                guard,
                f"Cryptocurrency conversion {side} {value} is blocked for security reasons.",
                argument,
                value,
            )
    return Decision.allow(guard)


def location_guard(request: InvocationRequest, rules: PolicyRules) -> Decision:
    """Deny weather lookups for cities matching a restricted location."""
    guard = "location"
    if "Weather" not in request.function_name:
        return Decision.allow(guard)

    city = request.arguments.get("city")
    if city is None:
        return Decision.allow(guard)

    city_name = str(city).upper()
    if any(token in city_name for token in rules.restricted_locations):
        return Decision.deny(
            guard,
            f"Weather information for {city} is restricted due to security policies.",
            "city",
            city,
        )
    return Decision.allow(guard)


def large_amount_guard(request: InvocationRequest, rules: PolicyRules) -> Decision:
    """Flag conversions above the threshold. Never denies."""
    guard = "large_amount"
    if "Convert" not in request.function_name:
        return Decision.allow(guard)

    amount = _parse_decimal(request.arguments.get("amount"))
    if amount is not None and amount > rules.large_amount_threshold:
        return Decision.alert(
            guard,
            f"Large conversion detected: {format_currency(amount)}",
            "amount",
            amount,
        )
    return Decision.allow(guard)


DEFAULT_GUARDS: tuple[Guard, ...] = (currency_guard, location_guard, large_amount_guard)
