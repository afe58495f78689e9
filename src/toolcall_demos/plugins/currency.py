"""Currency conversion plugin backed by a public exchange-rate API."""

import logging
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Annotated

import httpx
from pydantic import Field

from toolcall_demos.tools import tool

logger = logging.getLogger(__name__)

DEFAULT_RATES_URL = "https://api.exchangerate-api.com/v4/latest/{base}"

# Used when the live API is unreachable or doesn't know the pair
FALLBACK_RATES: dict[str, Decimal] = {
    "USD_EUR": Decimal("0.85"),
    "USD_GBP": Decimal("0.73"),
    "USD_JPY": Decimal("110.0"),
    "EUR_USD": Decimal("1.18"),
    "EUR_GBP": Decimal("0.86"),
    "EUR_JPY": Decimal("129.0"),
    "GBP_USD": Decimal("1.37"),
    "GBP_EUR": Decimal("1.16"),
    "GBP_JPY": Decimal("150.0"),
    "JPY_USD": Decimal("0.0091"),
    "JPY_EUR": Decimal("0.0077"),
    "JPY_GBP": Decimal("0.0067"),
}

CURRENCY_INFO = {
    "USD": "United States Dollar - The world's primary reserve currency",
    "EUR": "Euro - The official currency of the Eurozone",
    "GBP": "British Pound Sterling - The currency of the United Kingdom",
    "JPY": "Japanese Yen - The official currency of Japan",
}

_CENTS = Decimal("0.01")


class CurrencyPlugin:
    """Tools for converting amounts and looking up exchange rates.

    Attributes:
        rates_url: URL template with a ``{base}`` placeholder
        fallback_rates: Static rates keyed by "FROM_TO"
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        rates_url: str = DEFAULT_RATES_URL,
        fallback_rates: dict[str, Decimal] | None = None,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=10.0)
        self.rates_url = rates_url
        self.fallback_rates = dict(FALLBACK_RATES if fallback_rates is None else fallback_rates)

    @tool(
        name="ConvertCurrency",
        description="Converts an amount from one currency to another using real-time exchange rates",
    )
    async def convert_currency(
        self,
        amount: Annotated[Decimal, Field(description="The amount to convert")],
        from_currency: Annotated[
            str,
            Field(
                alias="fromCurrency",
                description="The source currency code (e.g., USD, EUR, GBP, JPY)",
            ),
        ],
        to_currency: Annotated[
            str,
            Field(
                alias="toCurrency",
                description="The target currency code (e.g., USD, EUR, GBP, JPY)",
            ),
        ],
    ) -> str:
        source, target = from_currency.upper(), to_currency.upper()
        logger.info(f"Converting {amount} {source} to {target}...")

        try:
            rate = await self.fetch_rate(source, target)
        except (httpx.HTTPError, LookupError, ValueError) as e:
            logger.warning(f"Conversion failed: {source} to {target}, using fallback ({e})")
            fallback = self.fallback_rates.get(f"{source}_{target}")
            if fallback is None:
                return f"Unable to convert {from_currency} to {to_currency}: {e}"
            converted = (amount * fallback).quantize(_CENTS, rounding=ROUND_HALF_EVEN)
            return (
                f"{amount} {source} = {converted} {target} "
                f"(Fallback rate: {fallback}) - API Error: {e}"
            )

        converted = (amount * rate).quantize(_CENTS, rounding=ROUND_HALF_EVEN)
        logger.info(f"Conversion complete: {source} to {target}")
        return f"{amount} {source} = {converted} {target} (Real-time rate: {rate})"

    @tool(
        name="GetExchangeRate",
        description="Gets the current real-time exchange rate between two currencies",
    )
    async def get_exchange_rate(
        self,
        base_currency: Annotated[
            str, Field(alias="baseCurrency", description="The base currency code")
        ],
        target_currency: Annotated[
            str, Field(alias="targetCurrency", description="The target currency code")
        ],
    ) -> str:
        base, target = base_currency.upper(), target_currency.upper()
        logger.info(f"Getting exchange rate: {base} to {target}...")

        try:
            rate = await self.fetch_rate(base, target)
        except (httpx.HTTPError, LookupError, ValueError) as e:
            logger.warning(f"Exchange rate failed: {base} to {target}, using fallback ({e})")
            fallback = self.fallback_rates.get(f"{base}_{target}")
            if fallback is None:
                return f"Exchange rate not available for {base_currency} to {target_currency}: {e}"
            return f"1 {base} = {fallback} {target} (Fallback) - API Error: {e}"

        logger.info(f"Exchange rate retrieved: {base} to {target}")
        return f"1 {base} = {rate} {target} (Real-time)"

    @tool(name="GetCurrencyInfo", description="Gets information about a specific currency")
    def get_currency_info(
        self,
        currency_code: Annotated[
            str,
            Field(
                alias="currencyCode",
                description="The currency code to get information about",
            ),
        ],
    ) -> str:
        return CURRENCY_INFO.get(
            currency_code.upper(),
            f"Information not available for currency: {currency_code}",
        )

    async def fetch_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """Fetch the live rate for a currency pair.

        Raises:
            httpx.HTTPError: If the request fails
            LookupError: If the target currency isn't in the response
        """
        response = await self._http.get(self.rates_url.format(base=from_currency))
        response.raise_for_status()
        rates = response.json(parse_float=Decimal).get("rates", {})

        if to_currency not in rates:
            raise LookupError(f"Currency {to_currency} not found in exchange rates")
        return Decimal(rates[to_currency])

    async def aclose(self) -> None:
        """Close the HTTP client if this plugin created it."""
        if self._owns_client:
            await self._http.aclose()
