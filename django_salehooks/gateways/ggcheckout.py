from django_salehooks.constants import STATUS_MAP, CanonicalStatus
from django_salehooks.gateways.base import GatewayAdapter, GatewayPayload
from django_salehooks.normalization import (
    NormalizedSale,
    normalize_status,
    normalize_tracking,
    to_major_units,
)

# GGCheckout names events "<method>.<state>", e.g. pix.generated, card.paid
GGCHECKOUT_STATUS_MAP = {
    **STATUS_MAP,
    "generated": CanonicalStatus.pending,
    "created": CanonicalStatus.pending,
}


class GGCheckoutCustomer(GatewayPayload):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    document: str | None = None
    ip: str | None = None


class GGCheckoutProduct(GatewayPayload):
    id: str | None = None
    name: str | None = None
    price: int | float | None = None
    quantity: int | None = None


class GGCheckoutPayment(GatewayPayload):
    id: str
    method: str | None = None
    status: str | None = None
    amount: int | float | None = None


class GGCheckoutWebhookInfo(GatewayPayload):
    id: str | None = None
    url: str | None = None


class GGCheckoutWebhook(GatewayPayload):
    event: str
    createdAt: str | None = None
    customer: GGCheckoutCustomer | None = None
    payment: GGCheckoutPayment
    product: GGCheckoutProduct | None = None
    products: list[GGCheckoutProduct] | None = None
    webhook: GGCheckoutWebhookInfo | None = None
    src: str | None = None
    sck: str | None = None
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_content: str | None = None
    utm_term: str | None = None
    customerIp: str | None = None


class GGCheckoutAdapter(GatewayAdapter):
    slug = "ggcheckout"
    name = "GGCheckout"
    schema = GGCheckoutWebhook
    status_table = GGCHECKOUT_STATUS_MAP

    def status_token(self, data: GGCheckoutWebhook) -> str:
        """Payment status when sent, otherwise the state part of the event name."""
        if data.payment.status:
            return data.payment.status
        return data.event.rsplit(".", 1)[-1]

    def normalize(self, data: GGCheckoutWebhook) -> NormalizedSale:
        customer = data.customer or GGCheckoutCustomer()
        product = data.products[0] if data.products else data.product
        raw_status = self.status_token(data)

        return NormalizedSale(
            gateway=self.name,
            transaction_id=data.payment.id,
            status=normalize_status(raw_status, self.status_table),
            raw_status=raw_status,
            event_type=data.event,
            value=to_major_units(data.payment.amount, self.amount_unit),
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
            customer_document=customer.document,
            payment_method=data.payment.method,
            product_name=product.name if product else None,
            tracking=normalize_tracking(
                self.name,
                utm=data.model_dump(
                    include={
                        "utm_source",
                        "utm_medium",
                        "utm_campaign",
                        "utm_content",
                        "utm_term",
                    }
                ),
                src=data.src,
                sck=data.sck,
            ),
        )
