"""Tests for gateway payload validation and normalization."""

from decimal import Decimal

from django_salehooks.gateways import (
    ADAPTERS,
    available_gateways,
    get_gateway_adapter,
)
from django_salehooks.gateways.buckpay import BuckpayAdapter
from django_salehooks.gateways.frendz import FrendzAdapter
from django_salehooks.gateways.ggcheckout import GGCheckoutAdapter
from django_salehooks.gateways.paradise import ParadiseAdapter


class TestRegistry:
    def test_lookup_is_case_insensitive(self):
        assert isinstance(get_gateway_adapter("BuckPay"), BuckpayAdapter)
        assert isinstance(get_gateway_adapter("ggcheckout"), GGCheckoutAdapter)

    def test_unknown_gateway(self):
        assert get_gateway_adapter("stripe") is None

    def test_available_gateways(self):
        assert set(available_gateways()) == {
            "buckpay",
            "paradise",
            "frendz",
            "ggcheckout",
        }
        assert all(slug == adapter.slug for slug, adapter in ADAPTERS.items())


class TestBuckpay:
    adapter = BuckpayAdapter()

    def test_valid_payload(self, buckpay_payload):
        outcome = self.adapter.validate(buckpay_payload())

        assert outcome.valid
        assert outcome.missing_data is False

        sale = self.adapter.normalize(outcome.data)
        assert sale.gateway == "Buckpay"
        assert sale.transaction_id == "bp_1"
        assert sale.status == "approved"
        assert sale.raw_status == "paid"
        assert sale.event_type == "transaction.processed"
        assert sale.value == Decimal("100.50")
        assert sale.net_value == Decimal("95.00")
        assert sale.customer_name == "Maria Silva"
        assert sale.customer_document == "12345678900"
        assert sale.payment_method == "pix"
        assert sale.product_name == "Curso Completo"
        assert sale.tracking["utm_source"] == "facebook"
        assert sale.tracking["utm_campaign"] == "black-friday"
        assert sale.tracking["utm_id"] == "u1"
        assert sale.tracking["src"] == "src-1"
        assert sale.tracking["sck"] is None
        assert sale.tracking["gateway"] == "Buckpay"

    def test_numeric_id_is_coerced_to_string(self, buckpay_payload):
        outcome = self.adapter.validate(buckpay_payload(transaction_id=12345))
        assert outcome.valid
        assert outcome.data.data.id == "12345"

    def test_missing_transaction_id(self, buckpay_payload):
        payload = buckpay_payload()
        del payload["data"]["id"]

        outcome = self.adapter.validate(payload)

        assert not outcome.valid
        assert outcome.data is None
        assert any(error["loc"] == ["data", "id"] for error in outcome.errors)

    def test_missing_data_object(self):
        outcome = self.adapter.validate({"event": "transaction.processed"})
        assert not outcome.valid
        assert any(error["loc"] == ["data"] for error in outcome.errors)

    def test_non_object_body(self):
        outcome = self.adapter.validate(["not", "an", "object"])
        assert not outcome.valid
        assert outcome.errors

    def test_build_sale_keeps_raw_body(self, buckpay_payload):
        body = buckpay_payload()
        body["unexpected"] = {"kept": True}

        sale = self.adapter.build_sale(self.adapter.validate(body).data, body)

        assert sale.payload == body
        assert sale.payload["unexpected"] == {"kept": True}


class TestParadise:
    adapter = ParadiseAdapter()

    def test_valid_payload(self):
        outcome = self.adapter.validate(
            {
                "transaction_id": "pd_1",
                "status": "approved",
                "amount": 2990,
                "payment_method": "credit_card",
                "webhook_type": "transaction",
                "customer": {"name": "João", "email": "joao@example.com"},
                "tracking": {"utm_campaign": "c1", "sck": "k1"},
            }
        )
        assert outcome.valid

        sale = self.adapter.normalize(outcome.data)
        assert sale.gateway == "Paradise"
        assert sale.transaction_id == "pd_1"
        assert sale.status == "approved"
        assert sale.value == Decimal("29.90")
        assert sale.customer_name == "João"
        assert sale.product_name is None
        assert sale.tracking["utm_campaign"] == "c1"
        assert sale.tracking["sck"] == "k1"

    def test_event_type_defaults_to_transaction(self):
        outcome = self.adapter.validate({"transaction_id": "pd_2", "status": "paid"})
        assert self.adapter.normalize(outcome.data).event_type == "transaction"

    def test_missing_status(self):
        outcome = self.adapter.validate({"transaction_id": "pd_1"})
        assert not outcome.valid
        assert any(error["loc"] == ["status"] for error in outcome.errors)


class TestGGCheckout:
    adapter = GGCheckoutAdapter()

    def payload(self, **payment):
        return {
            "event": "pix.generated",
            "payment": {"id": "gg_1", "method": "pix", "amount": 4700, **payment},
            "customer": {"name": "Ana"},
            "products": [{"name": "Ebook"}, {"name": "Bônus"}],
            "utm_source": "instagram",
            "src": "bio",
        }

    def test_status_from_event_name(self):
        outcome = self.adapter.validate(self.payload())
        sale = self.adapter.normalize(outcome.data)

        assert sale.status == "pending"
        assert sale.raw_status == "generated"
        assert sale.event_type == "pix.generated"
        assert sale.value == Decimal("47.00")
        assert sale.product_name == "Ebook"
        assert sale.tracking["utm_source"] == "instagram"
        assert sale.tracking["src"] == "bio"

    def test_payment_status_wins_over_event(self):
        outcome = self.adapter.validate(self.payload(status="paid"))
        sale = self.adapter.normalize(outcome.data)
        assert sale.status == "approved"
        assert sale.raw_status == "paid"

    def test_single_product(self):
        payload = self.payload()
        del payload["products"]
        payload["product"] = {"name": "Mentoria"}

        sale = self.adapter.normalize(self.adapter.validate(payload).data)

        assert sale.product_name == "Mentoria"

    def test_missing_payment(self):
        outcome = self.adapter.validate({"event": "pix.generated"})
        assert not outcome.valid


class TestFrendz:
    adapter = FrendzAdapter()

    def test_empty_payload_is_accepted_with_placeholders(self):
        outcome = self.adapter.validate({})

        assert outcome.valid
        assert outcome.missing_data is True

        sale = self.adapter.normalize(outcome.data)
        assert sale.transaction_id == "unknown_id"
        assert sale.status == "unknown"
        assert sale.raw_status == "unknown"
        assert sale.value is None

    def test_null_identifiers_become_placeholders(self):
        outcome = self.adapter.validate(
            {"transaction_id": None, "status": "", "amount": 1000}
        )
        assert outcome.valid
        assert outcome.missing_data is True
        assert outcome.data.transaction_id == "unknown_id"
        assert outcome.data.status == "unknown"

    def test_complete_payload(self):
        outcome = self.adapter.validate(
            {
                "transaction_id": "fz_1",
                "status": "paid",
                "amount": 1500,
                "customer": {"name": "João", "phone_number": "5521988887777"},
                "cart": [{"title": "Kit Inicial", "quantity": 1}],
                "tracking": {"utm_source": "tiktok"},
            }
        )
        assert outcome.valid
        assert outcome.missing_data is False

        sale = self.adapter.normalize(outcome.data)
        assert sale.transaction_id == "fz_1"
        assert sale.status == "approved"
        assert sale.value == Decimal("15.00")
        assert sale.customer_phone == "5521988887777"
        assert sale.product_name == "Kit Inicial"
        assert sale.tracking["utm_source"] == "tiktok"

    def test_offer_title_wins_over_cart(self):
        outcome = self.adapter.validate(
            {
                "transaction_id": "fz_2",
                "status": "paid",
                "offer": {"title": "Oferta"},
                "cart": [{"title": "Item"}],
            }
        )
        assert self.adapter.normalize(outcome.data).product_name == "Oferta"
