"""
Mapping of gateway payloads onto the canonical sale shape.

Nothing here raises on bad input: missing values become None and status
tokens without a mapping are passed through unchanged so that vocabulary
drift shows up in the stored sales instead of disappearing.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from django_salehooks.constants import (
    STATUS_MAP,
    TRACKING_FIELDS,
    UNKNOWN_STATUS,
    AmountUnit,
)
from django_salehooks.utils import CENT, safe_decimal


@dataclass
class NormalizedSale:
    gateway: str
    transaction_id: str
    status: str
    raw_status: str
    event_type: str
    value: Decimal | None = None
    net_value: Decimal | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    customer_document: str | None = None
    payment_method: str | None = None
    product_name: str | None = None
    tracking: dict[str, Any] = field(default_factory=dict)
    payload: Any = None

    def history_entry(self, timestamp: str) -> dict[str, str]:
        return {
            "timestamp": timestamp,
            "eventType": self.event_type,
            "status": self.status,
            "rawStatus": self.raw_status,
        }


def to_major_units(amount: Any, unit: AmountUnit = AmountUnit.cents) -> Decimal | None:
    """
    Convert a gateway amount to a Decimal in major currency units.

    Gateways reporting cents send integers; a number written with a
    fractional part is already in major units and is kept as is.
    """
    if amount is None or isinstance(amount, bool):
        return None

    if unit == AmountUnit.cents and isinstance(amount, int):
        return (Decimal(amount) / 100).quantize(CENT)

    value = safe_decimal(amount)
    if value is None:
        return None
    return value.quantize(CENT)


def normalize_status(raw: str | None, table: dict | None = None) -> str:
    """
    Collapse a gateway status token onto the canonical vocabulary.

    Args:
        raw: Status token as sent by the gateway
        table: Lookup table (lower-case token -> CanonicalStatus)

    Returns:
        Canonical status value, or the raw token when unmapped
    """
    if raw is None or str(raw).strip() == "":
        return UNKNOWN_STATUS

    table = STATUS_MAP if table is None else table
    canonical = table.get(str(raw).strip().lower())
    if canonical is None:
        return str(raw)
    return canonical.value


def normalize_tracking(
    gateway: str, utm: dict | None = None, **click_ids: Any
) -> dict[str, Any]:
    """
    Build the flat attribution map stored on a sale.

    Args:
        gateway: Gateway name stamped for provenance
        utm: Mapping with utm_* keys (missing keys become None)
        click_ids: Gateway-specific click identifiers (src, sck, ref, ...)
    """
    utm = utm or {}
    tracking = {name: utm.get(name) or None for name in TRACKING_FIELDS}
    for name, value in click_ids.items():
        tracking[name] = value or None
    tracking["gateway"] = gateway
    return tracking
