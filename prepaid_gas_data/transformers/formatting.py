"""
Display formatting for on-chain values

Integer arithmetic only, so wei amounts never lose precision.
"""

from datetime import datetime, timezone

from ..constants import ETH_DECIMALS


def format_big_int_value(value: int, decimals: int = ETH_DECIMALS, precision: int = 4) -> str:
    """
    Format a fixed-point integer as a decimal string.

    Args:
        value: Raw integer amount (e.g. wei)
        decimals: Token decimals
        precision: Maximum fractional digits kept (truncated, trailing zeros dropped)

    Returns:
        e.g. 1500000000000000000 -> "1.5"
    """
    sign = "-" if value < 0 else ""
    quotient, remainder = divmod(abs(value), 10 ** decimals)
    if remainder == 0:
        return f"{sign}{quotient}"

    fraction = str(remainder).zfill(decimals)[:precision].rstrip("0")
    if not fraction:
        return f"{sign}{quotient}"
    return f"{sign}{quotient}.{fraction}"


def format_gas_value(gas_value: int) -> str:
    """Gas amount with thousands separators"""
    return f"{gas_value:,}"


def format_currency_value(
    value: int,
    decimals: int = ETH_DECIMALS,
    precision: int = 4,
    symbol: str = "ETH"
) -> str:
    """Amount with currency symbol, e.g. "0.5 ETH" """
    return f"{format_big_int_value(value, decimals, precision)} {symbol}"


def calculate_percentage_change(current: int, previous: int) -> str:
    """
    Signed percentage change between two integer values.

    Returns:
        "+25.00%", "-10.00%", "0.00%"; "+∞%" when growing from zero,
        "0%" when both are zero
    """
    if previous == 0:
        return "+∞%" if current > 0 else "0%"

    percentage = (current - previous) / previous * 100
    sign = "+" if percentage > 0 else ""
    return f"{sign}{percentage:.2f}%"


def format_timestamp(timestamp: int) -> str:
    """Unix seconds -> YYYY-MM-DD (UTC)"""
    return datetime.fromtimestamp(int(timestamp), tz=timezone.utc).strftime("%Y-%m-%d")


def format_timestamp_with_time(timestamp: int) -> str:
    """Unix seconds -> YYYY-MM-DD HH:MM:SS.mmm (UTC)"""
    moment = datetime.fromtimestamp(int(timestamp), tz=timezone.utc).replace(tzinfo=None)
    return moment.isoformat(sep=" ", timespec="milliseconds")
