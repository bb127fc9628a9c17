"""Currency resolution against the pawaPay active configuration."""
from typing import Any, Dict, Optional

DEPOSIT = "DEPOSIT"
PAYOUT = "PAYOUT"

OPERATION_TYPES = {
    "deposit": DEPOSIT,
    "payout": PAYOUT,
}


def resolve_currency(
    active_conf: Dict[str, Any],
    provider: str,
    operation_type: str,
    country: Optional[str] = None,
) -> Optional[str]:
    """
    Find the currency a provider supports for an operation type.

    Walks countries, then providers, then currencies in the order pawaPay
    lists them and returns the first currency whose ``operationTypes``
    lists ``operation_type``. The value under that key is usually an object
    of limits and may be empty; only an explicit null or false disables it.
    When ``country`` is given only that country is searched.

    Args:
        active_conf: Body of ``GET /v2/active-conf``
        provider: Provider code, e.g. ``MTN_MOMO_ZMB``
        operation_type: ``DEPOSIT`` or ``PAYOUT``
        country: Optional ISO 3166-1 alpha-3 country code

    Returns:
        Optional[str]: Currency code, or None when nothing matches
    """
    for country_conf in active_conf.get("countries") or []:
        if country and country_conf.get("country") not in (None, country):
            continue
        for provider_conf in country_conf.get("providers") or []:
            if provider_conf.get("provider") != provider:
                continue
            for currency_conf in provider_conf.get("currencies") or []:
                operation_types = currency_conf.get("operationTypes") or {}
                if operation_types.get(operation_type, False) not in (None, False):
                    return currency_conf.get("currency")
    return None
