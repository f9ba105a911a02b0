import math

from .settings import Settings

DEFAULT_CURRENCY_SYMBOL = Settings.model_fields["currency_symbol"].default


def format_currency(amount, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Two decimals, single currency symbol; anything unparsable shows as zero."""
    if isinstance(amount, str):
        try:
            amount = float(amount)
        except ValueError:
            amount = None
    if amount is None or isinstance(amount, bool):
        amount = 0.0
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        amount = 0.0
    if not math.isfinite(amount):
        amount = 0.0
    return f"{symbol}{amount:.2f}"
