from django_salehooks.gateways.base import GatewayAdapter, GatewayPayload
from django_salehooks.normalization import (
    NormalizedSale,
    normalize_status,
    normalize_tracking,
    to_major_units,
)


class ParadiseCustomer(GatewayPayload):
    name: str | None = None
    email: str | None = None
    document: str | None = None
    phone: str | None = None


class ParadiseTracking(GatewayPayload):
    utm_source: str | None = None
    utm_campaign: str | None = None
    utm_medium: str | None = None
    utm_content: str | None = None
    utm_term: str | None = None
    src: str | None = None
    sck: str | None = None


class ParadiseWebhook(GatewayPayload):
    transaction_id: str
    external_id: str | None = None
    status: str
    amount: int | float | None = None
    payment_method: str | None = None
    customer: ParadiseCustomer | None = None
    raw_status: str | None = None
    webhook_type: str | None = None
    timestamp: str | None = None
    tracking: ParadiseTracking | None = None


class ParadiseAdapter(GatewayAdapter):
    slug = "paradise"
    name = "Paradise"
    schema = ParadiseWebhook

    def normalize(self, data: ParadiseWebhook) -> NormalizedSale:
        customer = data.customer or ParadiseCustomer()
        tracking = data.tracking or ParadiseTracking()

        return NormalizedSale(
            gateway=self.name,
            transaction_id=data.transaction_id,
            status=normalize_status(data.status, self.status_table),
            raw_status=data.status,
            event_type=data.webhook_type or "transaction",
            value=to_major_units(data.amount, self.amount_unit),
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            customer_document=customer.document,
            payment_method=data.payment_method,
            tracking=normalize_tracking(
                self.name,
                utm=tracking.model_dump(),
                src=tracking.src,
                sck=tracking.sck,
            ),
        )
