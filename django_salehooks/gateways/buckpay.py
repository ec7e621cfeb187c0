from django_salehooks.gateways.base import GatewayAdapter, GatewayPayload
from django_salehooks.normalization import (
    NormalizedSale,
    normalize_status,
    normalize_tracking,
    to_major_units,
)


class BuckpayBuyer(GatewayPayload):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    document: str | None = None


class BuckpayOffer(GatewayPayload):
    name: str | None = None
    discount_price: int | float | None = None
    quantity: int | None = None


class BuckpayUtm(GatewayPayload):
    source: str | None = None
    medium: str | None = None
    campaign: str | None = None
    id: str | None = None
    term: str | None = None
    content: str | None = None


class BuckpayTracking(GatewayPayload):
    ref: str | None = None
    src: str | None = None
    sck: str | None = None
    utm: BuckpayUtm | None = None


class BuckpayData(GatewayPayload):
    id: str
    status: str
    payment_method: str | None = None
    total_amount: int | float | None = None
    net_amount: int | float | None = None
    offer: BuckpayOffer | None = None
    buyer: BuckpayBuyer | None = None
    tracking: BuckpayTracking | None = None
    created_at: str | None = None


class BuckpayWebhook(GatewayPayload):
    event: str
    data: BuckpayData


class BuckpayAdapter(GatewayAdapter):
    slug = "buckpay"
    name = "Buckpay"
    schema = BuckpayWebhook

    def normalize(self, data: BuckpayWebhook) -> NormalizedSale:
        sale = data.data
        buyer = sale.buyer or BuckpayBuyer()
        tracking = sale.tracking or BuckpayTracking()
        utm = tracking.utm or BuckpayUtm()

        return NormalizedSale(
            gateway=self.name,
            transaction_id=sale.id,
            status=normalize_status(sale.status, self.status_table),
            raw_status=sale.status,
            event_type=data.event,
            value=to_major_units(sale.total_amount, self.amount_unit),
            net_value=to_major_units(sale.net_amount, self.amount_unit),
            customer_name=buyer.name,
            customer_email=buyer.email,
            customer_phone=buyer.phone,
            customer_document=buyer.document,
            payment_method=sale.payment_method,
            product_name=sale.offer.name if sale.offer else None,
            tracking=normalize_tracking(
                self.name,
                utm={
                    "utm_source": utm.source,
                    "utm_medium": utm.medium,
                    "utm_campaign": utm.campaign,
                    "utm_content": utm.content,
                    "utm_term": utm.term,
                },
                utm_id=utm.id,
                ref=tracking.ref,
                src=tracking.src,
                sck=tracking.sck,
            ),
        )
