from pydantic import field_validator

from django_salehooks.constants import UNKNOWN_STATUS, UNKNOWN_TRANSACTION_ID
from django_salehooks.gateways.base import GatewayAdapter, GatewayPayload
from django_salehooks.normalization import (
    NormalizedSale,
    normalize_status,
    normalize_tracking,
    to_major_units,
)
from django_salehooks.utils import first_present


class FrendzCustomer(GatewayPayload):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    phone_number: str | None = None
    document: str | None = None


class FrendzOffer(GatewayPayload):
    hash: str | None = None
    title: str | None = None


class FrendzCartItem(GatewayPayload):
    title: str | None = None
    quantity: int | None = None
    price: int | float | None = None


class FrendzTracking(GatewayPayload):
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    utm_content: str | None = None
    utm_term: str | None = None
    src: str | None = None
    sck: str | None = None


class FrendzWebhook(GatewayPayload):
    # Frendz deliveries are accepted even without identifiers so that they
    # still reach the audit log; placeholders mark them.
    transaction_id: str = UNKNOWN_TRANSACTION_ID
    status: str = UNKNOWN_STATUS
    event: str | None = None
    amount: int | float | None = None
    payment_method: str | None = None
    installments: int | None = None
    offer_hash: str | None = None
    customer: FrendzCustomer | None = None
    offer: FrendzOffer | None = None
    cart: list[FrendzCartItem] | None = None
    tracking: FrendzTracking | None = None

    @field_validator("transaction_id", mode="before")
    @classmethod
    def default_transaction_id(cls, value):
        return UNKNOWN_TRANSACTION_ID if value in (None, "") else value

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        return UNKNOWN_STATUS if value in (None, "") else value


class FrendzAdapter(GatewayAdapter):
    slug = "frendz"
    name = "Frendz"
    schema = FrendzWebhook
    tolerant = True

    def has_missing_data(self, data: FrendzWebhook) -> bool:
        return (
            data.transaction_id == UNKNOWN_TRANSACTION_ID
            or data.status == UNKNOWN_STATUS
        )

    def normalize(self, data: FrendzWebhook) -> NormalizedSale:
        customer = data.customer or FrendzCustomer()
        tracking = data.tracking or FrendzTracking()
        first_item = data.cart[0] if data.cart else FrendzCartItem()

        return NormalizedSale(
            gateway=self.name,
            transaction_id=data.transaction_id,
            status=normalize_status(data.status, self.status_table),
            raw_status=data.status,
            event_type=data.event or "transaction",
            value=to_major_units(data.amount, self.amount_unit),
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=first_present(customer.phone, customer.phone_number),
            customer_document=customer.document,
            payment_method=data.payment_method,
            product_name=first_present(
                data.offer.title if data.offer else None, first_item.title
            ),
            tracking=normalize_tracking(
                self.name,
                utm=tracking.model_dump(),
                src=tracking.src,
                sck=tracking.sck,
            ),
        )
