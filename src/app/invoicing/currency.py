"""Currency Formatter

Currency table and amount formatting used by every displayed or exported
amount.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional, Union


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str
    locale: str
    decimals: int = 2


SUPPORTED_CURRENCIES: tuple[Currency, ...] = (
    Currency(code="USD", name="US Dollar", symbol="$", locale="en-US"),
    Currency(code="EUR", name="Euro", symbol="€", locale="en-EU"),
    Currency(code="GBP", name="British Pound", symbol="£", locale="en-GB"),
    Currency(code="SGD", name="Singapore Dollar", symbol="S$", locale="en-SG"),
    Currency(code="JPY", name="Japanese Yen", symbol="¥", locale="ja-JP", decimals=0),
    Currency(code="AUD", name="Australian Dollar", symbol="A$", locale="en-AU"),
    Currency(code="CAD", name="Canadian Dollar", symbol="C$", locale="en-CA"),
    Currency(code="MYR", name="Malaysian Ringgit", symbol="RM", locale="ms-MY"),
)

DEFAULT_CURRENCY = "USD"

_CURRENCIES_BY_CODE = {currency.code: currency for currency in SUPPORTED_CURRENCIES}


def get_currency_by_code(code: str) -> Optional[Currency]:
    return _CURRENCIES_BY_CODE.get(code)


def get_currency_symbol(code: str) -> str:
    currency = get_currency_by_code(code)
    return currency.symbol if currency else "$"


def is_valid_currency_code(code: str) -> bool:
    """Codes are case sensitive: 'usd' is not valid"""
    return code in _CURRENCIES_BY_CODE


def get_currency_options() -> list[dict[str, str]]:
    """Options for a currency dropdown"""
    return [
        {
            "value": currency.code,
            "label": f"{currency.code} - {currency.name}",
            "symbol": currency.symbol,
        }
        for currency in SUPPORTED_CURRENCIES
    ]


def _to_decimal(amount: Union[Decimal, int, float, str, None]) -> Decimal:
    if isinstance(amount, Decimal):
        value = amount
    else:
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            return Decimal("0")
    if not value.is_finite():
        return Decimal("0")
    return value


def format_currency(
    amount: Union[Decimal, int, float, str, None],
    currency_code: str = DEFAULT_CURRENCY,
    decimals: Optional[int] = None,
) -> str:
    """
    Format an amount with the currency's symbol and fraction digits

    Args:
        amount: Amount to format (non-finite or unparseable values format as zero)
        currency_code: ISO code; unknown codes fall back to USD
        decimals: Override the currency's fraction digits

    Returns:
        Formatted string, e.g. "$1,234.56", "-€10.00", "¥1,234"
    """
    currency = get_currency_by_code(currency_code) or _CURRENCIES_BY_CODE[DEFAULT_CURRENCY]
    places = currency.decimals if decimals is None else max(decimals, 0)

    value = _to_decimal(amount)
    with localcontext() as context:
        # Enough digits for every integer digit plus the fraction
        context.prec = max(context.prec, value.adjusted() + places + 2)
        rounded = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        return f"{sign}{currency.symbol}{abs(rounded):,.{places}f}"
