from decimal import Decimal

import pytest

from django_salehooks.models import DeviceProfile, Organization
from django_salehooks.normalization import NormalizedSale
from django_salehooks.tenants import OrganizationResolver
from tests.apps.testapp.push import FakePushTransport


@pytest.fixture(autouse=True)
def push_transport():
    """Recording push transport, reset around every test."""
    FakePushTransport.reset()
    yield FakePushTransport
    FakePushTransport.reset()


@pytest.fixture
def organization(db):
    return Organization.objects.create(name="Loja Teste")


@pytest.fixture
def tenant(organization):
    return OrganizationResolver.to_context(organization)


@pytest.fixture
def device_profile(organization):
    def make(*tokens, organization=organization, name=""):
        return DeviceProfile.objects.create(
            organization=organization, name=name, push_tokens=list(tokens)
        )

    return make


@pytest.fixture
def make_sale():
    """Build a NormalizedSale with sensible defaults."""

    def make(status="approved", transaction_id="tx-1", gateway="Buckpay", **kwargs):
        fields = {
            "gateway": gateway,
            "transaction_id": transaction_id,
            "status": status,
            "raw_status": status,
            "event_type": "transaction.processed",
            "value": Decimal("100.50"),
            "customer_name": "Maria Silva",
            "tracking": {"gateway": gateway},
            "payload": {"id": transaction_id, "status": status},
        }
        fields.update(kwargs)
        return NormalizedSale(**fields)

    return make


@pytest.fixture
def buckpay_payload():
    def make(transaction_id="bp_1", status="paid", **data):
        sale = {
            "id": transaction_id,
            "status": status,
            "payment_method": "pix",
            "total_amount": 10050,
            "net_amount": 9500,
            "buyer": {
                "name": "Maria Silva",
                "email": "maria@example.com",
                "phone": "5511999990000",
                "document": "12345678900",
            },
            "offer": {"name": "Curso Completo", "quantity": 1},
            "tracking": {
                "src": "src-1",
                "sck": None,
                "utm": {"source": "facebook", "campaign": "black-friday", "id": "u1"},
            },
        }
        sale.update(data)
        return {"event": "transaction.processed", "data": sale}

    return make
