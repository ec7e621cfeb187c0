from .base import GatewayAdapter, GatewayPayload, ValidationOutcome
from .buckpay import BuckpayAdapter
from .frendz import FrendzAdapter
from .ggcheckout import GGCheckoutAdapter
from .paradise import ParadiseAdapter

ADAPTERS: dict[str, GatewayAdapter] = {
    adapter.slug: adapter
    for adapter in (
        BuckpayAdapter(),
        ParadiseAdapter(),
        FrendzAdapter(),
        GGCheckoutAdapter(),
    )
}


def get_gateway_adapter(slug: str) -> GatewayAdapter | None:
    """Case-insensitive lookup of a registered gateway adapter."""
    return ADAPTERS.get(str(slug).lower())


def available_gateways() -> list[str]:
    return list(ADAPTERS)


__all__ = [
    "ADAPTERS",
    "GatewayAdapter",
    "GatewayPayload",
    "ValidationOutcome",
    "available_gateways",
    "get_gateway_adapter",
]
