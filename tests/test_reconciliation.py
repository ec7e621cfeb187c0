"""Tests for SaleReconciler idempotency and status transitions."""

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.test import override_settings

from django_salehooks.models import Organization, Sale
from django_salehooks.services.reconciliation import SaleReconciler, notification_for
from django_salehooks.tenants import OrganizationResolver

pytestmark = pytest.mark.django_db


class TestNotificationFor:
    @pytest.mark.parametrize(
        "previous,new,expected",
        [
            (None, "approved", "sale_approved"),
            (None, "pending", "sale_pending"),
            (None, "refunded", "sale_refunded"),
            (None, "refused", None),
            (None, "unknown", None),
            ("pending", "approved", "sale_approved"),
            ("approved", "approved", None),
            ("approved", "refunded", "sale_refunded"),
            ("approved", "chargeback", None),
            ("approved", "in_analysis", None),
        ],
    )
    def test_transitions(self, previous, new, expected):
        assert notification_for(previous, new) == expected

    def test_status_seen_in_history_does_not_notify_again(self):
        history = [{"status": "approved"}, {"status": "pending"}]

        assert notification_for("pending", "approved", history) is None
        assert notification_for("pending", "refunded", history) == "sale_refunded"


class TestCreate:
    def test_first_delivery_creates_sale(self, tenant, make_sale):
        outcome = SaleReconciler.reconcile(tenant, make_sale())

        assert outcome.action == "created"
        assert outcome.created
        assert outcome.previous_status is None
        assert outcome.notification == "sale_approved"

        sale = Sale.objects.get()
        assert sale == outcome.sale
        assert str(sale.organization_id) == tenant.organization_id
        assert sale.transaction_id == "tx-1"
        assert sale.gateway == "Buckpay"
        assert sale.status == "approved"
        assert sale.value == Decimal("100.50")
        assert sale.payload == {"id": "tx-1", "status": "approved"}
        assert sale.received_at is not None
        assert len(sale.processing_history) == 1
        assert set(sale.processing_history[0]) == {
            "timestamp",
            "eventType",
            "status",
            "rawStatus",
        }

    def test_refused_sale_does_not_notify(self, tenant, make_sale):
        outcome = SaleReconciler.reconcile(tenant, make_sale(status="refused"))
        assert outcome.notification is None

    def test_unmapped_status_is_stored_verbatim(self, tenant, make_sale):
        outcome = SaleReconciler.reconcile(tenant, make_sale(status="in_analysis"))

        outcome.sale.refresh_from_db()
        assert outcome.sale.status == "in_analysis"
        assert outcome.notification is None

    def test_oversized_text_is_truncated(self, tenant, make_sale):
        long_status = "s" * 100
        outcome = SaleReconciler.reconcile(
            tenant,
            make_sale(
                status=long_status,
                raw_status=long_status,
                customer_name="M" * 300,
            ),
        )

        sale = Sale.objects.get(pk=outcome.sale.pk)
        assert sale.status == "s" * 64
        assert sale.raw_status == "s" * 64
        assert sale.customer_name == "M" * 255
        assert sale.processing_history[0]["status"] == long_status

        SaleReconciler.reconcile(tenant, make_sale(product_name="P" * 300))
        assert Sale.objects.get().product_name == "P" * 255


class TestIdempotency:
    def test_repeated_deliveries_keep_one_sale(self, tenant, make_sale):
        outcomes = [SaleReconciler.reconcile(tenant, make_sale()) for _ in range(3)]

        assert Sale.objects.count() == 1
        assert [o.action for o in outcomes] == ["created", "updated", "updated"]
        assert [o.notification for o in outcomes] == ["sale_approved", None, None]

        sale = Sale.objects.get()
        assert len(sale.processing_history) == 3

    def test_pending_then_approved(self, tenant, make_sale):
        SaleReconciler.reconcile(tenant, make_sale(status="pending"))
        outcome = SaleReconciler.reconcile(tenant, make_sale(status="approved"))

        assert outcome.previous_status == "pending"
        assert outcome.notification == "sale_approved"
        assert [e["status"] for e in outcome.sale.processing_history] == [
            "pending",
            "approved",
        ]

    def test_approved_then_refunded(self, tenant, make_sale):
        SaleReconciler.reconcile(tenant, make_sale(status="approved"))
        outcome = SaleReconciler.reconcile(tenant, make_sale(status="refunded"))

        assert outcome.notification == "sale_refunded"
        assert Sale.objects.get().status == "refunded"

    def test_status_regression_is_applied(self, tenant, make_sale):
        SaleReconciler.reconcile(tenant, make_sale(status="approved"))
        outcome = SaleReconciler.reconcile(tenant, make_sale(status="pending"))

        assert outcome.sale.status == "pending"
        assert outcome.notification == "sale_pending"

    def test_reapproval_does_not_notify_twice(self, tenant, make_sale):
        statuses = ["approved", "pending", "approved"]
        outcomes = [
            SaleReconciler.reconcile(tenant, make_sale(status=status))
            for status in statuses
        ]

        assert [o.notification for o in outcomes] == [
            "sale_approved",
            "sale_pending",
            None,
        ]
        assert Sale.objects.get().status == "approved"

    def test_key_includes_gateway_and_tenant(self, tenant, make_sale):
        other = OrganizationResolver.to_context(
            Organization.objects.create(name="Outra Loja")
        )

        SaleReconciler.reconcile(tenant, make_sale(gateway="Buckpay"))
        SaleReconciler.reconcile(tenant, make_sale(gateway="Paradise"))
        SaleReconciler.reconcile(other, make_sale(gateway="Buckpay"))

        assert Sale.objects.count() == 3

    @override_settings(SALEHOOKS_HISTORY_LIMIT=2)
    def test_history_limit_keeps_latest_entries(self, tenant, make_sale):
        for status in ("pending", "approved", "refunded"):
            SaleReconciler.reconcile(tenant, make_sale(status=status))

        history = Sale.objects.get().processing_history
        assert [e["status"] for e in history] == ["approved", "refunded"]


class TestUpdateFields:
    def test_missing_optional_fields_keep_stored_values(self, tenant, make_sale):
        SaleReconciler.reconcile(tenant, make_sale(product_name="Curso"))
        SaleReconciler.reconcile(
            tenant,
            make_sale(
                status="refunded",
                customer_name=None,
                value=Decimal("80.00"),
                payload={"id": "tx-1", "status": "refunded"},
            ),
        )

        sale = Sale.objects.get()
        assert sale.customer_name == "Maria Silva"
        assert sale.product_name == "Curso"
        assert sale.value == Decimal("80.00")
        assert sale.payload == {"id": "tx-1", "status": "refunded"}

    def test_tracking_replaced_only_when_present(self, tenant, make_sale):
        tracking = {"utm_source": "facebook", "gateway": "Buckpay"}
        SaleReconciler.reconcile(tenant, make_sale(tracking=tracking))

        SaleReconciler.reconcile(
            tenant, make_sale(tracking={"utm_source": None, "gateway": "Buckpay"})
        )
        assert Sale.objects.get().tracking == tracking

        SaleReconciler.reconcile(
            tenant, make_sale(tracking={"utm_source": "google", "gateway": "Buckpay"})
        )
        assert Sale.objects.get().tracking["utm_source"] == "google"


class TestConcurrency:
    def test_lost_insert_race_becomes_update(self, tenant, make_sale):
        existing = SaleReconciler.reconcile(tenant, make_sale(status="pending")).sale

        # The first lookup misses, as if another worker inserted in between
        with patch.object(
            SaleReconciler,
            "_find_locked",
            side_effect=[None, Sale.objects.get(pk=existing.pk)],
        ):
            outcome = SaleReconciler.reconcile(tenant, make_sale(status="approved"))

        assert outcome.action == "updated"
        assert outcome.previous_status == "pending"
        assert outcome.notification == "sale_approved"
        assert Sale.objects.count() == 1
        assert len(Sale.objects.get().processing_history) == 2


class TestSignals:
    def test_signals_sent_on_commit(
        self, tenant, make_sale, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            created = SaleReconciler.reconcile(tenant, make_sale(status="pending"))
        with django_capture_on_commit_callbacks(execute=True):
            updated = SaleReconciler.reconcile(tenant, make_sale(status="approved"))

        assert created.sale._signal_handlers_called == ["sale_created"]
        assert updated.sale._signal_handlers_called == ["sale_updated"]
        assert updated.sale._previous_status == "pending"

    def test_no_signal_before_commit(
        self, tenant, make_sale, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            outcome = SaleReconciler.reconcile(tenant, make_sale())

        assert len(callbacks) == 1
        assert not hasattr(outcome.sale, "_signal_handlers_called")
